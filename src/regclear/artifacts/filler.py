"""
Template filling.

One template plus one product context becomes one provider request. The
response is post-processed into sections, citations and review notes.
"""

import structlog

from regclear.artifacts.citations import flag_unverified_citations
from regclear.artifacts.templates import (
    apply_jurisdiction_conditionals,
    extract_citations,
    extract_placeholders,
    extract_sections,
    validate_filled_template,
)
from regclear.config import get_settings
from regclear.errors import RegClearError, TemplateFillError
from regclear.models.artifacts import FillResult, LoadedTemplate
from regclear.models.context import (
    AISector,
    AutomationLevel,
    DataCategory,
    ProductContext,
)
from regclear.providers.base import LLMMessage, LLMProvider, LLMRequest

logger = structlog.get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a regulatory compliance document specialist. You fill in compliance "
    "document templates with precise, jurisdiction-specific content. You never invent "
    "legal requirements and only reference real provisions from real regulations. "
    "When you lack the information to complete a section, you mark it clearly as "
    "requiring human input."
)

DRAFT_NOTE = (
    "DRAFT - This document was generated automatically and has not been reviewed "
    "by qualified legal counsel"
)

DEFAULT_REVIEW_NOTES = (
    "All legal basis determinations should be verified by qualified counsel",
    "Risk assessments and severity ratings require professional legal judgement",
    "Technical claims and performance metrics should be verified by the engineering team",
    "Jurisdiction-specific requirements may have changed since this document was generated",
)

TEMPLATE_REVIEW_NOTES: dict[str, tuple[str, ...]] = {
    "dpia-gdpr": (
        "DPIA must be completed before processing begins (Article 35(1) GDPR)",
        "Consider whether prior consultation with the supervisory authority is required "
        "(Article 36 GDPR)",
    ),
    "gpai-technical-doc": (
        "GPAI obligations apply from 2 August 2025; the AI Office may issue further "
        "guidance and templates",
        "Verify the compute FLOPs calculation and the systemic risk threshold assessment",
    ),
}

INSTRUCTIONS = (
    "Replace every {{placeholder}} in the template with substantive content specific to this product.",
    "Avoid generic boilerplate; tie every statement to the product context.",
    "Describe risks concretely in terms of the data types, user populations and decision impact.",
    "Cite specific articles and provisions of the applicable regulations for every legal basis.",
    "Fill tables with complete rows and realistic assessments.",
    'Where the context lacks information, write "[TO BE COMPLETED - requires input from: '
    'legal team / engineering team / DPO]" and state what is needed.',
    "Use professional compliance language suitable for regulatory review.",
    "Keep every claim about a regulation accurate, including article numbers.",
    "Keep the numbered section headings of the template unchanged.",
    "Return ONLY the filled template content, without frontmatter or commentary.",
)


# =============================================================================
# Prompt
# =============================================================================

def build_prompt(
    template: LoadedTemplate,
    ctx: ProductContext,
    jurisdictions: list[str] | tuple[str, ...],
    body: str | None = None,
) -> str:
    """
    Build the user message for one template.

    Args:
        template: Template being filled
        ctx: Product under assessment
        jurisdictions: Jurisdictions the document is attributed to
        body: Template body with conditionals already resolved (defaults to the raw body)
    """
    body = template.content if body is None else body
    metadata = template.metadata
    placeholders = extract_placeholders(body)
    instructions = "\n".join(f"{i}. {text}" for i, text in enumerate(INSTRUCTIONS, start=1))

    return "\n\n".join(
        [
            "Fill in the compliance document template below by replacing its placeholders "
            "with specific, accurate content based on the product context.",
            "## Product Context\n\n" + "\n".join(ctx.summary_lines()),
            "## Applicable Jurisdictions\n\n" + ", ".join(jurisdictions),
            "## Template Information\n\n"
            f"Template: {metadata.name}\n"
            f"Legal basis: {metadata.legal_basis}\n"
            f"Required sections: {', '.join(metadata.required_sections)}",
            "## Instructions\n\n" + instructions,
            "## Placeholders to Fill\n\n" + ", ".join(placeholders),
            "## Template\n\n" + body,
        ]
    )


# =============================================================================
# Review notes
# =============================================================================

def build_review_notes(ctx: ProductContext, template_id: str) -> list[str]:
    """
    Fixed reminders for human reviewers, chosen from the context and template.

    They do not inspect the generated text.
    """
    notes = [DRAFT_NOTE, *DEFAULT_REVIEW_NOTES]

    if ctx.automation_level == AutomationLevel.FULLY_AUTOMATED:
        notes.append(
            "System makes fully automated decisions: verify Article 22 GDPR compliance "
            "and human oversight provisions"
        )
    if DataCategory.BIOMETRIC in ctx.data_processed:
        notes.append(
            "Biometric data processing detected: verify the special category legal basis "
            "(Article 9 GDPR) and biometric-specific obligations"
        )
    if DataCategory.MINOR in ctx.data_processed:
        notes.append(
            "Processing of minors' data detected: verify age verification and parental "
            "consent mechanisms"
        )
    if ctx.generative_ai_context and ctx.generative_ai_context.can_generate_deepfakes:
        notes.append(
            "Deepfake generation capability detected: verify synthetic media disclosure "
            "requirements in every target market"
        )
    if ctx.gpai_info and ctx.gpai_info.exceeds_systemic_risk_threshold:
        notes.append(
            "GPAI model exceeds the systemic risk threshold (10^25 FLOPs): verify Article 55 "
            "obligations including model evaluation and incident reporting"
        )
    if ctx.sector_context and ctx.sector_context.sector == AISector.FINANCIAL_SERVICES:
        notes.append(
            "Financial services sector: verify sector-specific requirements "
            "(SR 11-7, fair lending and supervisory guidance as applicable)"
        )
    if ctx.agentic_ai_context and ctx.agentic_ai_context.is_agentic:
        notes.append(
            "Agentic AI capabilities detected: verify human checkpoints, action logging "
            "and failsafe mechanisms"
        )

    notes.extend(TEMPLATE_REVIEW_NOTES.get(template_id, ()))
    return notes


# =============================================================================
# Fill
# =============================================================================

async def fill_template(
    template: LoadedTemplate,
    ctx: ProductContext,
    jurisdictions: list[str] | tuple[str, ...],
    provider: LLMProvider,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> FillResult:
    """
    Fill one template with a single provider call.

    Raises:
        TemplateFillError: If the provider call fails; the message contains the
            provider's own error text
    """
    settings = get_settings()
    body = apply_jurisdiction_conditionals(template.content, jurisdictions)

    request = LLMRequest(
        system_prompt=SYSTEM_PROMPT,
        messages=[LLMMessage(role="user", content=build_prompt(template, ctx, jurisdictions, body))],
        temperature=settings.llm_temperature if temperature is None else temperature,
        max_tokens=settings.llm_max_tokens if max_tokens is None else max_tokens,
    )

    try:
        response = await provider.complete(request)
    except RegClearError as e:
        raise TemplateFillError(template.id, e) from e

    # Strip any conditional regions the provider echoed back
    filled = apply_jurisdiction_conditionals(response.content, jurisdictions)

    sections = extract_sections(filled)
    citations = extract_citations(filled)
    validation = validate_filled_template(filled, template.metadata.required_sections)

    notes = build_review_notes(ctx, template.id)
    if validation.unfilled_placeholders:
        notes.append(
            f"WARNING: {len(validation.unfilled_placeholders)} placeholder(s) were not filled: "
            f"{', '.join(validation.unfilled_placeholders)}"
        )
    if validation.missing_sections:
        notes.append(
            f"WARNING: {len(validation.missing_sections)} required section(s) may be missing: "
            f"{', '.join(validation.missing_sections)}"
        )
    notes = flag_unverified_citations(citations, notes)

    logger.info(
        "template_filled",
        template_id=template.id,
        jurisdictions=list(jurisdictions),
        sections=len(sections),
        citations=len(citations),
        valid=validation.valid,
    )

    return FillResult(
        filled_content=filled,
        sections=tuple(sections),
        citations=tuple(citations),
        review_notes=tuple(notes),
        validation=validation,
    )
