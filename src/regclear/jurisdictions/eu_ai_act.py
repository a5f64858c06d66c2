"""EU Artificial Intelligence Act (Regulation (EU) 2024/1689).

Classification order: Article 5 prohibited practices, Annex III high-risk
categories (subject to the Article 6(3) carve-out), Article 50 transparency
obligations, then minimal risk. General-purpose AI model status (Articles
51-55) is classified separately and layered on top.
"""

from typing import Iterable

from regclear.jurisdictions.base import (
    Tier,
    TierException,
    TieredJurisdiction,
    Trigger,
    names,
)
from regclear.jurisdictions.helpers import (
    description_has,
    involves_insurance_pricing,
    is_employment_context,
    makes_material_decisions,
    processes_biometric_data,
)
from regclear.models.context import (
    DataCategory,
    GpaiRole,
    ProductContext,
    ProductType,
    UserPopulation,
)
from regclear.models.requirements import (
    ActionPriority,
    ActionRequirement,
    ApplicableProvision,
    ArtifactRequirement,
    ArtifactType,
    ComplianceDeadline,
    ComplianceTimeline,
    RiskClassification,
    RiskLevel,
    SecondaryClassification,
)

HIGH_RISK_DEADLINE = "2026-08-02"
GPAI_DEADLINE = "2025-08-02"


# =============================================================================
# Trigger predicates
# =============================================================================

def _is_emotion_recognition(ctx: ProductContext) -> bool:
    return description_has(
        ctx, "emotion recognition", "emotion detect", "sentiment analysis on face", "facial emotion"
    )


def _is_chatbot(ctx: ProductContext) -> bool:
    return description_has(
        ctx,
        "chatbot",
        "conversational ai",
        "virtual assistant",
        "ai assistant",
        "customer service ai",
    ) or (ctx.product_type == ProductType.GENERATOR and description_has(ctx, "interact"))


def _is_deepfake(ctx: ProductContext) -> bool:
    return description_has(ctx, "deepfake", "face swap") or (
        ctx.product_type == ProductType.GENERATOR
        and description_has(
            ctx, "generate image", "generate video", "generate audio", "synthetic media"
        )
    )


def _is_social_scoring(ctx: ProductContext) -> bool:
    desc = ctx.lower_description
    return description_has(ctx, "social scor", "social credit", "citizen score") or (
        "behaviour score" in desc and "social context" in desc
    )


def _is_subliminal(ctx: ProductContext) -> bool:
    desc = ctx.lower_description
    return "subliminal" in desc or (
        "manipulat" in desc and "beyond" in desc and "consciousness" in desc
    )


def _exploits_vulnerabilities(ctx: ProductContext) -> bool:
    desc = ctx.lower_description
    return (
        "exploit" in desc
        and description_has(ctx, "vulnerab", "disability", "elderly")
        and "distort" in desc
    )


def _is_predictive_policing(ctx: ProductContext) -> bool:
    desc = ctx.lower_description
    return ("predict" in desc and "criminal" in desc and "profiling" in desc) or (
        "predictive policing" in desc and "personality" in desc
    )


def _scrapes_facial_images(ctx: ProductContext) -> bool:
    return "facial recognition" in ctx.lower_description and description_has(
        ctx, "scraping", "untargeted", "scrape"
    )


def _workplace_emotion_recognition(ctx: ProductContext) -> bool:
    workplace_or_school = (
        UserPopulation.EMPLOYEES in ctx.user_populations
        or UserPopulation.STUDENTS in ctx.user_populations
    )
    medical_or_safety = description_has(ctx, "medical", "safety")
    return (
        description_has(ctx, "emotion recognition", "emotion detect")
        and workplace_or_school
        and not medical_or_safety
    )


def _sensitive_biometric_categorisation(ctx: ProductContext) -> bool:
    return processes_biometric_data(ctx) and description_has(
        ctx, "race", "political opinion", "religion", "sexual orientation", "trade union"
    )


def _realtime_public_biometric_id(ctx: ProductContext) -> bool:
    desc = ctx.lower_description
    return (
        "real-time" in desc
        and "biometric identification" in desc
        and description_has(ctx, "public space", "public area")
    )


def _essential_services(ctx: ProductContext) -> bool:
    desc = ctx.lower_description
    credit_scoring = (
        UserPopulation.CREDIT_APPLICANTS in ctx.user_populations
        or description_has(ctx, "credit scor", "creditworth")
    )
    life_or_health_pricing = description_has(ctx, "life insurance", "health insurance") and (
        description_has(ctx, "risk", "pricing", "underwriting")
    )
    health_insurance_risk = DataCategory.HEALTH in ctx.data_processed and description_has(
        ctx, "insurance", "risk assessment"
    )
    emergency = "emergency call" in desc
    public_benefits = description_has(
        ctx, "public benefit", "public assistance", "welfare", "social benefit"
    )
    return (
        credit_scoring
        or life_or_health_pricing
        or health_insurance_risk
        or involves_insurance_pricing(ctx)
        or emergency
        or public_benefits
    )


def _no_significant_risk(ctx: ProductContext) -> bool:
    """Article 6(3): the Annex III system does not pose a significant risk of harm."""
    desc = ctx.lower_description
    if "profiling" in desc or "profile" in desc:
        return False
    narrow_procedural = description_has(ctx, "narrow procedural", "procedural task")
    improves_human_activity = "improves" in desc and "human" in desc
    detects_patterns = "detect pattern" in desc and "replace" not in desc
    preparatory = "preparatory task" in desc
    return narrow_procedural or improves_human_activity or detects_patterns or preparatory


PROHIBITED_PRACTICES: tuple[Trigger, ...] = (
    Trigger("art5-1c-social-scoring", "Social Scoring", "Article 5(1)(c)", _is_social_scoring),
    Trigger(
        "art5-1a-subliminal-manipulation",
        "Subliminal/Manipulative Techniques",
        "Article 5(1)(a)",
        _is_subliminal,
    ),
    Trigger(
        "art5-1b-vulnerability-exploitation",
        "Exploitation of Vulnerabilities",
        "Article 5(1)(b)",
        _exploits_vulnerabilities,
    ),
    Trigger(
        "art5-1d-predictive-policing",
        "Predictive Policing (Individual Risk Based on Profiling)",
        "Article 5(1)(d)",
        _is_predictive_policing,
    ),
    Trigger(
        "art5-1e-facial-recognition-scraping",
        "Untargeted Facial Recognition Database Building",
        "Article 5(1)(e)",
        _scrapes_facial_images,
    ),
    Trigger(
        "art5-1f-workplace-emotion-recognition",
        "Emotion Recognition in Workplace/Education",
        "Article 5(1)(f)",
        _workplace_emotion_recognition,
    ),
    Trigger(
        "art5-1g-biometric-sensitive-categorisation",
        "Biometric Categorisation for Sensitive Attributes",
        "Article 5(1)(g)",
        _sensitive_biometric_categorisation,
    ),
    Trigger(
        "art5-1h-realtime-biometric-public",
        "Real-Time Remote Biometric Identification in Public Spaces",
        "Article 5(1)(h)",
        _realtime_public_biometric_id,
    ),
)

ANNEX_III_CATEGORIES: tuple[Trigger, ...] = (
    Trigger(
        "annex-iii-1-biometrics",
        "Biometrics",
        "Annex III(1)",
        lambda ctx: processes_biometric_data(ctx) or _is_emotion_recognition(ctx),
    ),
    Trigger(
        "annex-iii-2-critical-infrastructure",
        "Critical Infrastructure",
        "Annex III(2)",
        lambda ctx: description_has(
            ctx,
            "critical infrastructure",
            "power grid",
            "water supply",
            "electricity",
            "gas supply",
            "road traffic",
            "traffic management",
            "digital infrastructure",
        ),
    ),
    Trigger(
        "annex-iii-3-education",
        "Education and Vocational Training",
        "Annex III(3)",
        lambda ctx: UserPopulation.STUDENTS in ctx.user_populations
        and makes_material_decisions(ctx),
    ),
    Trigger(
        "annex-iii-4-employment",
        "Employment, Workers Management, Access to Self-Employment",
        "Annex III(4)",
        lambda ctx: is_employment_context(ctx) and makes_material_decisions(ctx),
    ),
    Trigger(
        "annex-iii-5-essential-services",
        "Access to Essential Private and Public Services",
        "Annex III(5)",
        _essential_services,
    ),
    Trigger(
        "annex-iii-6-law-enforcement",
        "Law Enforcement",
        "Annex III(6)",
        lambda ctx: description_has(
            ctx, "law enforcement", "police", "crime analytic", "recidivism"
        ),
    ),
    Trigger(
        "annex-iii-7-migration",
        "Migration, Asylum, and Border Control",
        "Annex III(7)",
        lambda ctx: description_has(
            ctx, "asylum", "migration", "border control", "visa application", "residence permit"
        ),
    ),
    Trigger(
        "annex-iii-8-justice",
        "Administration of Justice and Democratic Processes",
        "Annex III(8)",
        lambda ctx: description_has(
            ctx, "judicial", "court", "legal research", "election", "voting", "democratic process"
        ),
    ),
)

TRANSPARENCY_TRIGGERS: tuple[Trigger, ...] = (
    Trigger("chatbot-disclosure", "Chatbot / Conversational AI", "Article 50(1)", _is_chatbot),
    Trigger("deepfake-labeling", "Deepfake / Synthetic Media", "Article 50(4)", _is_deepfake),
    Trigger(
        "emotion-recognition-disclosure",
        "Emotion Recognition",
        "Article 50(3)",
        _is_emotion_recognition,
    ),
)

GPAI_DESCRIPTION_KEYWORDS = (
    "large language model",
    "llm",
    "foundation model",
    "general-purpose ai",
    "general purpose ai",
    "gpai",
    "generative ai",
    "multimodal model",
    "text generation model",
    "image generation model",
    "diffusion model",
    "transformer model",
    "pre-trained model",
    "pretrained model",
)


def is_limited_risk_system(ctx: ProductContext) -> bool:
    return any(t.matches(ctx) for t in TRANSPARENCY_TRIGGERS)


def is_gpai_applicable(ctx: ProductContext) -> bool:
    if ctx.gpai_info is not None and ctx.gpai_info.is_gpai_model:
        return True
    if ctx.product_type == ProductType.FOUNDATION_MODEL:
        return True
    return description_has(ctx, *GPAI_DESCRIPTION_KEYWORDS)


class EuAiActJurisdiction(TieredJurisdiction):
    """EU AI Act risk tiers with GPAI obligations as a secondary classification."""

    id = "eu-ai-act"
    name = "EU Artificial Intelligence Act"

    default_justification = (
        "This AI system does not fall into the prohibited, high-risk, or limited-risk "
        "categories under the EU AI Act. No mandatory requirements apply beyond voluntary "
        "codes of conduct."
    )

    tiers = (
        Tier(
            level=RiskLevel.UNACCEPTABLE,
            triggers=PROHIBITED_PRACTICES,
            justification=lambda matched: (
                "This AI system matches prohibited practice(s) under Article 5 of the EU AI "
                f"Act: {names(matched)}. These practices are banned in the EU regardless of "
                "safeguards."
            ),
        ),
        Tier(
            level=RiskLevel.HIGH,
            triggers=ANNEX_III_CATEGORIES,
            justification=lambda matched: (
                "This AI system falls within Annex III high-risk category: "
                f"{names(matched)}. It must comply with requirements under Articles 8-15."
            ),
            provisions=lambda matched: ["Article 6(2)", "Annex III", *(t.id for t in matched)],
            exception=TierException(
                applies=_no_significant_risk,
                level=RiskLevel.MINIMAL,
                justification=(
                    "This AI system falls within an Annex III category but does not pose a "
                    "significant risk of harm under Article 6(3). It performs a narrow "
                    "procedural task, improves a previously completed human activity, detects "
                    "patterns without replacing human assessment, or performs a preparatory task."
                ),
                provisions=("Article 6(3)",),
            ),
        ),
        Tier(
            level=RiskLevel.LIMITED,
            triggers=TRANSPARENCY_TRIGGERS,
            justification=lambda matched: (
                "This AI system has transparency obligations under Articles 50-52 of the EU AI "
                "Act. Users must be informed they are interacting with an AI system, and/or "
                "AI-generated content must be labelled."
            ),
            provisions=lambda matched: ["Article 50"],
        ),
    )

    # =========================================================================
    # Primary tier builders
    # =========================================================================

    def build_provisions(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ApplicableProvision]:
        provisions: list[ApplicableProvision] = []

        if risk.level == RiskLevel.UNACCEPTABLE:
            provisions.append(self.provision(
                "eu-ai-act-art5",
                "EU AI Act",
                "Article 5",
                "Prohibited AI Practices",
                "This AI system falls under a prohibited practice and cannot be placed on the "
                "EU market or used within the EU.",
                "The system's intended purpose matches one or more prohibited use cases.",
            ))

        if risk.level == RiskLevel.HIGH:
            provisions.append(self.provision(
                "eu-ai-act-art6",
                "EU AI Act",
                "Articles 6-7",
                "High-Risk Classification",
                "This AI system is classified as high-risk under Annex III of the EU AI Act.",
                risk.justification,
            ))
            for article, title, summary in HIGH_RISK_REQUIREMENTS:
                provisions.append(self.provision(
                    f"eu-ai-act-art{article}",
                    "EU AI Act",
                    f"Article {article}",
                    title,
                    summary,
                    f"Required for all high-risk AI systems under Article {article}.",
                ))

        if risk.level == RiskLevel.LIMITED or is_limited_risk_system(ctx):
            provisions.append(self.provision(
                "eu-ai-act-art50",
                "EU AI Act",
                "Articles 50-52",
                "Transparency Obligations",
                "Users must be informed of AI interaction, AI-generated content must be "
                "labelled, and/or emotion recognition/biometric categorisation must be disclosed.",
                "This system has transparency obligations based on its interaction with natural "
                "persons or content generation capabilities.",
            ))

        return provisions

    def build_artifacts(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ArtifactRequirement]:
        artifacts: list[ArtifactRequirement] = []

        if risk.level == RiskLevel.UNACCEPTABLE:
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.RISK_CLASSIFICATION,
                name="EU AI Act Prohibition Analysis",
                legal_basis="Article 5",
                description=(
                    "Analysis documenting why this AI system falls under a prohibited practice. "
                    "This system cannot be placed on the EU market; use this document to explore "
                    "redesign options or market exclusion."
                ),
            ))
            return artifacts

        if risk.level == RiskLevel.HIGH:
            artifacts.extend([
                ArtifactRequirement(
                    type=ArtifactType.RISK_CLASSIFICATION,
                    name="EU AI Act Risk Classification Report",
                    legal_basis="Articles 6-7, Annex III",
                    description=(
                        "Document explaining the risk classification of the AI system, including "
                        "the applicable Annex III category and why the system qualifies as high-risk."
                    ),
                    template_id="ai-act-risk-assessment",
                ),
                ArtifactRequirement(
                    type=ArtifactType.CONFORMITY_ASSESSMENT,
                    name="EU AI Act Conformity Assessment",
                    legal_basis="Articles 43-44",
                    description=(
                        "Conformity assessment demonstrating compliance with Articles 8-15. For "
                        "most Annex III systems this is internal control under Annex VI."
                    ),
                    template_id="ai-act-conformity",
                ),
                ArtifactRequirement(
                    type=ArtifactType.RISK_ASSESSMENT,
                    name="Risk Management System Documentation",
                    legal_basis="Article 9",
                    description=(
                        "Documentation of the risk management system covering identification, "
                        "evaluation, and mitigation of risks throughout the AI system lifecycle."
                    ),
                ),
                ArtifactRequirement(
                    type=ArtifactType.MODEL_CARD,
                    name="Technical Documentation / Model Card",
                    legal_basis="Article 11",
                    description=(
                        "Technical documentation covering system description, development "
                        "process, capabilities, limitations, and intended use."
                    ),
                    template_id="model-card",
                ),
            ])

            if processes_biometric_data(ctx):
                artifacts.append(ArtifactRequirement(
                    type=ArtifactType.CONFORMITY_ASSESSMENT,
                    name="Third-Party Conformity Assessment (Notified Body)",
                    legal_basis="Article 43(1), Annex VII",
                    description=(
                        "Biometric identification systems require conformity assessment by an "
                        "independent notified body under Annex VII rather than self-assessment."
                    ),
                ))

        if risk.level == RiskLevel.LIMITED or is_limited_risk_system(ctx):
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.TRANSPARENCY_NOTICE,
                name="AI Transparency Notice",
                legal_basis="Articles 50-52",
                description=(
                    "User-facing notice informing individuals of AI interaction, AI-generated "
                    "content, or emotion recognition/biometric categorisation."
                ),
                template_id="transparency-notice",
            ))

        return artifacts

    def build_actions(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ActionRequirement]:
        if risk.level == RiskLevel.UNACCEPTABLE:
            return [self.action(
                "eu-ai-act-stop-prohibited",
                "Do not deploy this AI system in the EU",
                "This AI system falls under a prohibited practice (Article 5). It cannot be "
                "placed on the EU market, put into service, or used within the EU. Consider "
                "redesigning the system to remove the prohibited characteristics or exclude the "
                "EU from target markets.",
                ActionPriority.CRITICAL,
                "Article 5",
            )]

        actions: list[ActionRequirement] = []

        if risk.level == RiskLevel.HIGH:
            for action_id, title, description, priority, basis, effort in HIGH_RISK_ACTIONS:
                actions.append(self.action(
                    action_id, title, description, priority, basis, effort, HIGH_RISK_DEADLINE
                ))

        if risk.level == RiskLevel.LIMITED or is_limited_risk_system(ctx):
            actions.append(self.action(
                "eu-ai-act-transparency-disclosure",
                "Implement transparency disclosures",
                "Ensure users are clearly informed they are interacting with an AI system, that "
                "content is AI-generated, or that emotion recognition/biometric categorisation "
                "is in use.",
                ActionPriority.CRITICAL,
                "Articles 50-52",
                "1-2 weeks",
                HIGH_RISK_DEADLINE,
            ))

        return actions

    def build_timeline(
        self,
        ctx: ProductContext,
        risk: RiskClassification,
        secondary: SecondaryClassification | None,
    ) -> ComplianceTimeline:
        notes: list[str] = []

        if risk.level == RiskLevel.UNACCEPTABLE:
            notes.append(
                "CRITICAL: Prohibited practices have been enforceable since 2 February 2025. "
                "Immediate action required."
            )
        elif risk.level == RiskLevel.HIGH:
            notes.append(
                "High-risk system obligations apply from 2 August 2026. Plan conformity "
                "assessment and documentation well in advance."
            )
            notes.append(
                "Post-market monitoring and serious incident reporting obligations also apply "
                "from August 2026."
            )
        elif risk.level == RiskLevel.LIMITED:
            notes.append("Transparency obligations for non-GPAI systems apply from 2 August 2026.")

        if secondary is not None:
            notes.append(
                "URGENT: GPAI model obligations under Articles 51-56 have been in force since "
                "2 August 2025. Immediate compliance action required."
            )
            if secondary.has_systemic_risk:
                notes.append(
                    "Systemic risk obligations (model evaluation, adversarial testing, risk "
                    "assessment, incident reporting, cybersecurity) are also in force since "
                    "2 August 2025."
                )

        return ComplianceTimeline(
            effective_date="2024-08-01",
            deadlines=TIMELINE_DEADLINES,
            notes=tuple(notes),
        )

    # =========================================================================
    # General-purpose AI
    # =========================================================================

    def secondary_classification(self, ctx: ProductContext) -> SecondaryClassification | None:
        if not is_gpai_applicable(ctx):
            return None

        gpai = ctx.gpai_info
        if gpai is not None:
            role = gpai.gpai_role
        elif ctx.product_type == ProductType.FOUNDATION_MODEL:
            role = GpaiRole.PROVIDER
        else:
            role = GpaiRole.DEPLOYER
        is_open_source = gpai.is_open_source if gpai else False
        threshold = gpai.exceeds_systemic_risk_threshold if gpai else False
        designated = gpai.commission_designated if gpai else False
        has_systemic_risk = threshold or designated

        provisions = ["Article 51"]
        if role in (GpaiRole.PROVIDER, GpaiRole.BOTH):
            if is_open_source and not has_systemic_risk:
                provisions += ["Article 53(1)(c)", "Article 53(1)(d)", "Article 53(2)"]
            else:
                provisions += [
                    "Article 53(1)(a)", "Article 53(1)(b)", "Article 53(1)(c)", "Article 53(1)(d)"
                ]
            if has_systemic_risk:
                provisions += [
                    "Article 55(1)(a)", "Article 55(1)(b)", "Article 55(1)(c)", "Article 55(1)(d)"
                ]

        parts = [f"GPAI model role: {role.value}."]
        if is_open_source:
            parts.append("Model is open-source.")
        if has_systemic_risk:
            reasons = []
            if threshold:
                reasons.append("compute exceeds 10^25 FLOPs threshold")
            if designated:
                reasons.append("designated by European Commission")
            parts.append(f"Systemic risk: {', '.join(reasons)}.")

        return SecondaryClassification(
            kind="gpai",
            role=role.value,
            is_open_source=is_open_source,
            has_systemic_risk=has_systemic_risk,
            justification=" ".join(parts),
            provisions=tuple(provisions),
        )

    @staticmethod
    def _is_provider(secondary: SecondaryClassification) -> bool:
        return secondary.role in (GpaiRole.PROVIDER.value, GpaiRole.BOTH.value)

    @staticmethod
    def _is_deployer(secondary: SecondaryClassification) -> bool:
        return secondary.role in (GpaiRole.DEPLOYER.value, GpaiRole.BOTH.value)

    @staticmethod
    def _needs_full_documentation(secondary: SecondaryClassification) -> bool:
        # Open-source models without systemic risk are exempt from Art 53(1)(a)-(b)
        return not secondary.is_open_source or secondary.has_systemic_risk

    def secondary_provisions(
        self, ctx: ProductContext, secondary: SecondaryClassification
    ) -> Iterable[ApplicableProvision]:
        provisions = [self.provision(
            "eu-ai-act-art51",
            "EU AI Act",
            "Article 51",
            "Classification of GPAI Models",
            "This product involves a general-purpose AI model subject to GPAI obligations "
            "under the EU AI Act.",
            secondary.justification,
        )]
        if not self._is_provider(secondary):
            return provisions

        if self._needs_full_documentation(secondary):
            provisions.append(self.provision(
                "eu-ai-act-art53",
                "EU AI Act",
                "Article 53",
                "GPAI Provider Obligations",
                "GPAI model providers must maintain technical documentation, provide downstream "
                "documentation, comply with copyright law, and publish a training data summary.",
                "Required for all GPAI model providers under Article 53.",
            ))
        else:
            provisions.append(self.provision(
                "eu-ai-act-art53-2",
                "EU AI Act",
                "Article 53(2)",
                "Open-Source GPAI Exemption",
                "Open-source GPAI models are exempt from the technical and downstream "
                "documentation obligations of Article 53(1)(a)-(b) but must still comply with "
                "copyright and training data summary obligations.",
                "This model qualifies for the open-source exemption.",
            ))

        if secondary.has_systemic_risk:
            provisions.append(self.provision(
                "eu-ai-act-art55",
                "EU AI Act",
                "Article 55",
                "Systemic Risk Obligations",
                "GPAI models with systemic risk must undergo model evaluation, adversarial "
                "testing, systemic risk assessment, incident reporting, and cybersecurity measures.",
                "This GPAI model has systemic risk, triggering additional obligations under "
                "Article 55.",
            ))
        return provisions

    def secondary_artifacts(
        self, ctx: ProductContext, secondary: SecondaryClassification
    ) -> Iterable[ArtifactRequirement]:
        if not self._is_provider(secondary):
            return []

        artifacts: list[ArtifactRequirement] = []
        if self._needs_full_documentation(secondary):
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.GPAI_TECHNICAL_DOCUMENTATION,
                name="GPAI Technical Documentation (Annex XI)",
                legal_basis="Article 53(1)(a), Annex XI",
                description=(
                    "Technical documentation of the GPAI model including training and testing "
                    "process, evaluation results, architecture, compute, and limitations."
                ),
            ))
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.MODEL_CARD,
                name="GPAI Downstream Documentation / Model Card",
                legal_basis="Article 53(1)(b)",
                description=(
                    "Information for downstream AI system providers covering capabilities, "
                    "limitations, intended uses, known risks, and integration guidance."
                ),
                template_id="model-card",
            ))

        artifacts.append(ArtifactRequirement(
            type=ArtifactType.GPAI_TRAINING_DATA_SUMMARY,
            name="GPAI Training Data Summary",
            legal_basis="Article 53(1)(d)",
            description=(
                "Publicly available summary of the content used for training the GPAI model, "
                "following the AI Office template."
            ),
        ))

        if secondary.has_systemic_risk:
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.GPAI_SYSTEMIC_RISK_ASSESSMENT,
                name="GPAI Systemic Risk Assessment",
                legal_basis="Article 55(1)(b)",
                description=(
                    "Assessment and mitigation plan for possible systemic risks at Union level."
                ),
            ))
        return artifacts

    def secondary_actions(
        self, ctx: ProductContext, secondary: SecondaryClassification
    ) -> Iterable[ActionRequirement]:
        actions: list[ActionRequirement] = []

        if self._is_provider(secondary):
            selected = [GPAI_PROVIDER_ACTIONS[0], GPAI_PROVIDER_ACTIONS[1]]
            if self._needs_full_documentation(secondary):
                selected += GPAI_PROVIDER_ACTIONS[2:]
            if secondary.has_systemic_risk:
                selected += GPAI_SYSTEMIC_RISK_ACTIONS
            for action_id, title, description, basis, effort in selected:
                actions.append(self.action(
                    action_id, title, description, ActionPriority.CRITICAL, basis, effort,
                    GPAI_DEADLINE,
                ))

        if self._is_deployer(secondary):
            actions.append(self.action(
                "eu-ai-act-gpai-deployer-verify",
                "Verify GPAI provider compliance",
                "Verify that the upstream GPAI model provider has met its documentation and "
                "transparency obligations under Article 53. Request and review technical "
                "documentation and downstream integration guidance.",
                ActionPriority.IMPORTANT,
                "Article 53(1)(b)",
                "1-2 weeks",
                GPAI_DEADLINE,
            ))

        return actions


# =============================================================================
# Legal content tables
# =============================================================================

HIGH_RISK_REQUIREMENTS: tuple[tuple[str, str, str], ...] = (
    ("9", "Risk Management System",
     "A continuous risk management system must identify and mitigate risks throughout the lifecycle."),
    ("10", "Data and Data Governance",
     "Training, validation, and testing datasets must meet quality criteria including relevance, "
     "representativeness, and bias examination."),
    ("11", "Technical Documentation",
     "Technical documentation must be drawn up before the system is placed on the market."),
    ("12", "Record-Keeping",
     "The system must automatically record events (logs) with at least 6-month retention."),
    ("13", "Transparency and Information to Deployers",
     "Instructions for use must describe capabilities, limitations, and oversight measures."),
    ("14", "Human Oversight",
     "The system must allow effective human oversight, including the ability to override, "
     "reverse, or stop it."),
    ("15", "Accuracy, Robustness, and Cybersecurity",
     "Appropriate levels of accuracy, robustness against errors, and cybersecurity must be ensured."),
)

HIGH_RISK_ACTIONS: tuple[tuple[str, str, str, ActionPriority, str, str], ...] = (
    ("eu-ai-act-risk-management", "Establish risk management system",
     "Implement a continuous, iterative risk management process covering identification, "
     "analysis, evaluation, and mitigation of risks across the AI system lifecycle.",
     ActionPriority.CRITICAL, "Article 9", "4-8 weeks"),
    ("eu-ai-act-data-governance", "Implement data governance and quality measures",
     "Ensure training, validation, and testing datasets are relevant, representative, and as "
     "free of errors as possible. Document design choices and examine datasets for bias.",
     ActionPriority.CRITICAL, "Article 10", "4-12 weeks"),
    ("eu-ai-act-technical-docs", "Prepare technical documentation",
     "Create technical documentation covering system description, development process, "
     "monitoring capabilities, and compliance evidence before placing the system on the market.",
     ActionPriority.CRITICAL, "Article 11", "2-4 weeks"),
    ("eu-ai-act-logging", "Implement automatic event logging",
     "Record events automatically over the system lifetime with at least 6-month retention, "
     "including usage periods, input data references, and human verification records.",
     ActionPriority.CRITICAL, "Article 12", "2-4 weeks"),
    ("eu-ai-act-human-oversight", "Implement human oversight mechanisms",
     "Design oversight that lets people understand outputs, watch for automation bias, override "
     "or reverse decisions, and stop the system.",
     ActionPriority.CRITICAL, "Article 14", "3-6 weeks"),
    ("eu-ai-act-conformity-assessment", "Complete conformity assessment",
     "Undergo conformity assessment (Annex VI internal control, or Annex VII third-party "
     "assessment for biometric identification) and affix the CE marking.",
     ActionPriority.CRITICAL, "Articles 43-44", "4-8 weeks"),
    ("eu-ai-act-eu-database-registration", "Register in EU AI database",
     "Register the high-risk AI system in the EU database before placing it on the market or "
     "putting it into service.",
     ActionPriority.CRITICAL, "Article 49", "1-2 weeks"),
    ("eu-ai-act-accuracy-robustness", "Validate accuracy, robustness, and cybersecurity",
     "Document accuracy for the intended purpose, robustness against errors and adversarial "
     "inputs, and cybersecurity protections.",
     ActionPriority.IMPORTANT, "Article 15", "3-6 weeks"),
    ("eu-ai-act-post-market-monitoring", "Establish post-market monitoring system",
     "Collect and review performance and compliance data after deployment, including serious "
     "incident reporting procedures.",
     ActionPriority.IMPORTANT, "Articles 72-73", "2-4 weeks"),
    ("eu-ai-act-quality-management", "Implement quality management system",
     "Establish a quality management system covering compliance strategy, design control, "
     "testing, data management, and resourcing.",
     ActionPriority.IMPORTANT, "Article 17", "4-8 weeks"),
)

GPAI_PROVIDER_ACTIONS: tuple[tuple[str, str, str, str, str], ...] = (
    ("eu-ai-act-gpai-copyright", "Implement copyright compliance policy",
     "Put in place a policy to comply with EU copyright law, including respecting text and data "
     "mining opt-outs under Directive (EU) 2019/790 Article 4(3).",
     "Article 53(1)(c)", "2-4 weeks"),
    ("eu-ai-act-gpai-training-summary", "Publish training data summary",
     "Publish a sufficiently detailed summary of the content used for training the GPAI model "
     "using the AI Office template.",
     "Article 53(1)(d)", "2-4 weeks"),
    ("eu-ai-act-gpai-tech-docs", "Prepare GPAI technical documentation",
     "Maintain technical documentation of the GPAI model covering training, testing, evaluation "
     "results, architecture, and limitations per Annex XI.",
     "Article 53(1)(a)", "4-8 weeks"),
    ("eu-ai-act-gpai-downstream-docs", "Provide downstream documentation to integrators",
     "Give downstream AI system providers the information they need to understand model "
     "capabilities and limitations and to meet their own obligations.",
     "Article 53(1)(b)", "2-4 weeks"),
)

GPAI_SYSTEMIC_RISK_ACTIONS: list[tuple[str, str, str, str, str]] = [
    ("eu-ai-act-gpai-model-evaluation", "Perform model evaluation with standardised protocols",
     "Evaluate the model with state-of-the-art protocols, including documented adversarial testing.",
     "Article 55(1)(a)", "4-8 weeks"),
    ("eu-ai-act-gpai-systemic-risk-assessment", "Assess and mitigate systemic risks",
     "Assess and mitigate possible systemic risks at Union level stemming from development, "
     "placement on the market, or use of the model.",
     "Article 55(1)(b)", "4-8 weeks"),
    ("eu-ai-act-gpai-incident-reporting", "Establish incident tracking and reporting",
     "Track, document, and report serious incidents and corrective measures to the AI Office and "
     "national competent authorities.",
     "Article 55(1)(c)", "2-4 weeks"),
    ("eu-ai-act-gpai-cybersecurity", "Ensure adequate cybersecurity for GPAI model",
     "Protect the model with systemic risk and its physical infrastructure with adequate "
     "cybersecurity.",
     "Article 55(1)(d)", "4-8 weeks"),
]

TIMELINE_DEADLINES: tuple[ComplianceDeadline, ...] = (
    ComplianceDeadline(
        date="2025-02-02",
        description="Prohibited AI practices (Article 5) become enforceable.",
        provision="Article 5",
    ),
    ComplianceDeadline(
        date="2025-08-02",
        description="Obligations for GPAI model providers apply.",
        provision="Articles 51-56",
    ),
    ComplianceDeadline(
        date="2026-08-02",
        description=(
            "High-risk AI system obligations apply, including conformity assessment, EU database "
            "registration, and post-market monitoring."
        ),
        provision="Articles 6-49, 72-73",
    ),
    ComplianceDeadline(
        date="2027-08-02",
        description=(
            "High-risk AI systems that are safety components of products under Annex I Union "
            "harmonisation legislation must comply."
        ),
        provision="Article 6(1), Annex I",
    ),
)
