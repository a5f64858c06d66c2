"""
Artifact generation.

Collects the required artifacts of every jurisdiction result, merges those
that resolve to the same template, and drafts one document per template.
A failed document is recorded as a GenerationError; the rest of the batch
continues.
"""

import asyncio
from dataclasses import dataclass, field

import structlog

from regclear.artifacts.filler import fill_template
from regclear.artifacts.templates import TemplateStore
from regclear.config import get_settings
from regclear.models.artifacts import (
    GeneratedArtifact,
    GenerationError,
    GenerationResult,
)
from regclear.models.context import ProductContext
from regclear.models.requirements import (
    ArtifactRequirement,
    ArtifactType,
    JurisdictionResult,
)
from regclear.providers.base import LLMProvider

logger = structlog.get_logger(__name__)


TEMPLATE_ID_TO_ARTIFACT_TYPE: dict[str, ArtifactType] = {
    "dpia-gdpr": ArtifactType.DPIA,
    "ai-act-risk-assessment": ArtifactType.RISK_CLASSIFICATION,
    "ai-act-conformity": ArtifactType.CONFORMITY_ASSESSMENT,
    "transparency-notice": ArtifactType.TRANSPARENCY_NOTICE,
    "model-card": ArtifactType.MODEL_CARD,
    "bias-audit-nyc": ArtifactType.BIAS_AUDIT,
    "gpai-technical-doc": ArtifactType.GPAI_TECHNICAL_DOCUMENTATION,
    "genai-training-disclosure": ArtifactType.GPAI_TRAINING_DATA_SUMMARY,
    "gpai-systemic-risk": ArtifactType.GPAI_SYSTEMIC_RISK_ASSESSMENT,
    "genai-content-policy": ArtifactType.GENAI_CONTENT_POLICY,
}

# Used when a requirement names no template of its own
ARTIFACT_TYPE_TO_DEFAULT_TEMPLATE: dict[ArtifactType, str] = {
    ArtifactType.DPIA: "dpia-gdpr",
    ArtifactType.RISK_CLASSIFICATION: "ai-act-risk-assessment",
    ArtifactType.CONFORMITY_ASSESSMENT: "ai-act-conformity",
    ArtifactType.TRANSPARENCY_NOTICE: "transparency-notice",
    ArtifactType.MODEL_CARD: "model-card",
    ArtifactType.RISK_ASSESSMENT: "ai-act-risk-assessment",
    ArtifactType.ALGORITHMIC_IMPACT: "ai-act-risk-assessment",
    ArtifactType.BIAS_AUDIT: "bias-audit-nyc",
    ArtifactType.GPAI_TECHNICAL_DOCUMENTATION: "gpai-technical-doc",
    ArtifactType.GPAI_TRAINING_DATA_SUMMARY: "genai-training-disclosure",
    ArtifactType.GPAI_SYSTEMIC_RISK_ASSESSMENT: "gpai-systemic-risk",
    ArtifactType.GENAI_CONTENT_POLICY: "genai-content-policy",
}


@dataclass
class ArtifactGroup:
    """Requirements from one or more jurisdictions that share a template."""

    template_id: str
    requirement: ArtifactRequirement
    jurisdictions: list[str] = field(default_factory=list)

    @property
    def artifact_type(self) -> ArtifactType:
        return TEMPLATE_ID_TO_ARTIFACT_TYPE.get(self.template_id, self.requirement.type)

    @property
    def filename(self) -> str:
        return generate_filename(self.template_id, self.jurisdictions)


def resolve_template_id(requirement: ArtifactRequirement) -> str | None:
    """The requirement's own template, else the default for its type, else None."""
    if requirement.template_id:
        return requirement.template_id
    return ARTIFACT_TYPE_TO_DEFAULT_TEMPLATE.get(requirement.type)


def deduplicate_requirements(results: list[JurisdictionResult]) -> list[ArtifactGroup]:
    """
    Group required artifacts by template id.

    Jurisdictions are merged in first-seen order. Requirements that resolve to
    no template are skipped.
    """
    groups: dict[str, ArtifactGroup] = {}

    for result in results:
        for requirement in result.required_artifacts:
            if not requirement.required:
                continue

            template_id = resolve_template_id(requirement)
            if template_id is None:
                logger.debug(
                    "artifact_skipped_no_template",
                    artifact_type=requirement.type.value,
                    name=requirement.name,
                    jurisdiction=result.jurisdiction,
                )
                continue

            group = groups.get(template_id)
            if group is None:
                groups[template_id] = ArtifactGroup(
                    template_id=template_id,
                    requirement=requirement,
                    jurisdictions=[result.jurisdiction],
                )
            elif result.jurisdiction not in group.jurisdictions:
                group.jurisdictions.append(result.jurisdiction)

    return list(groups.values())


def generate_filename(template_id: str, jurisdictions: list[str] | tuple[str, ...]) -> str:
    suffix = jurisdictions[0] if len(jurisdictions) == 1 else "multi-jurisdiction"
    return f"{template_id}-{suffix}.md"


class ArtifactGenerator:
    """
    Drafts compliance documents for a set of jurisdiction results.

    Groups are processed one at a time unless `concurrency` is raised, in
    which case at most that many provider calls run at once. Output order
    always follows group order.
    """

    def __init__(
        self,
        provider: LLMProvider,
        store: TemplateStore | None = None,
        concurrency: int | None = None,
    ):
        self.provider = provider
        self.store = store or TemplateStore()
        self.concurrency = max(1, concurrency or get_settings().generation_concurrency)

    async def generate_artifacts(
        self,
        ctx: ProductContext,
        jurisdiction_results: list[JurisdictionResult],
    ) -> GenerationResult:
        """
        Generate one document per template group.

        Returns:
            GenerationResult with the drafted artifacts and per-document errors
        """
        groups = deduplicate_requirements(jurisdiction_results)
        logger.info(
            "artifact_generation_started",
            groups=len(groups),
            concurrency=self.concurrency,
            provider=self.provider.id,
        )

        if self.concurrency == 1:
            outcomes = [await self._generate_one(ctx, group) for group in groups]
        else:
            semaphore = asyncio.Semaphore(self.concurrency)

            async def _bounded(group: ArtifactGroup) -> GeneratedArtifact | GenerationError:
                async with semaphore:
                    return await self._generate_one(ctx, group)

            outcomes = await asyncio.gather(*(_bounded(group) for group in groups))

        result = GenerationResult()
        for outcome in outcomes:
            if isinstance(outcome, GenerationError):
                result.errors.append(outcome)
            else:
                result.artifacts.append(outcome)

        logger.info(
            "artifact_generation_completed",
            artifacts=len(result.artifacts),
            errors=len(result.errors),
        )
        return result

    async def _generate_one(
        self,
        ctx: ProductContext,
        group: ArtifactGroup,
    ) -> GeneratedArtifact | GenerationError:
        try:
            template = self.store.load_template(group.template_id)
            filled = await fill_template(template, ctx, group.jurisdictions, self.provider)
        except Exception as e:
            logger.warning(
                "artifact_generation_failed",
                template_id=group.template_id,
                jurisdictions=group.jurisdictions,
                error=str(e),
            )
            return GenerationError(
                template_id=group.template_id,
                artifact_type=group.artifact_type,
                jurisdictions=tuple(group.jurisdictions),
                error=str(e),
            )

        logger.info(
            "artifact_generated",
            template_id=group.template_id,
            jurisdictions=group.jurisdictions,
            filename=group.filename,
        )
        return GeneratedArtifact(
            type=group.artifact_type,
            template_id=group.template_id,
            name=template.metadata.name,
            jurisdictions=tuple(group.jurisdictions),
            filename=group.filename,
            content=filled.filled_content,
            sections=filled.sections,
            review_notes=filled.review_notes,
            citations=filled.citations,
        )
