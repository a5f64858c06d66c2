"""EU General Data Protection Regulation (Regulation (EU) 2016/679)."""

from typing import Iterable

from regclear.jurisdictions.base import Tier, TieredJurisdiction, Trigger, classify
from regclear.jurisdictions.helpers import (
    description_has,
    involves_minors,
    is_automated_decision_making,
    is_fully_automated,
    makes_material_decisions,
    processes_personal_data,
    training_data_includes_personal_data,
)
from regclear.models.context import (
    AutomationLevel,
    DataCategory,
    ProductContext,
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

ARTICLE_9_DATA = frozenset({
    DataCategory.SENSITIVE,
    DataCategory.BIOMETRIC,
    DataCategory.HEALTH,
    DataCategory.GENETIC,
})


def _is_large_scale(ctx: ProductContext) -> bool:
    return description_has(ctx, "large-scale", "large scale") or (
        UserPopulation.GENERAL_PUBLIC in ctx.user_populations
        or UserPopulation.CONSUMERS in ctx.user_populations
    )


def _processes_article_9_data(ctx: ProductContext) -> bool:
    return any(d in ARTICLE_9_DATA for d in ctx.data_processed)


def _is_profiling(ctx: ProductContext) -> bool:
    automated = ctx.automation_level in (
        AutomationLevel.FULLY_AUTOMATED,
        AutomationLevel.HUMAN_ON_THE_LOOP,
    )
    return (
        description_has(ctx, "profiling", "profile", "scoring", "evaluating personal")
        and automated
        and makes_material_decisions(ctx)
    )


def _large_scale_special_category(ctx: ProductContext) -> bool:
    special = {
        DataCategory.BIOMETRIC,
        DataCategory.HEALTH,
        DataCategory.GENETIC,
        DataCategory.POLITICAL,
        DataCategory.CRIMINAL,
    }
    return any(d in special for d in ctx.data_processed) and _is_large_scale(ctx)


def _monitors_public_areas(ctx: ProductContext) -> bool:
    return description_has(
        ctx, "public space", "public area", "public monitoring", "cctv", "surveillance"
    ) and description_has(ctx, "monitor", "track", "surveillance")


def involves_data_transfers(ctx: ProductContext) -> bool:
    genai = ctx.generative_ai_context
    return description_has(ctx, "cross-border", "data transfer", "third-party api") or (
        genai is not None and genai.foundation_model_source == "third-party-api"
    )


def has_genai_personal_data_concerns(ctx: ProductContext) -> bool:
    genai = ctx.generative_ai_context
    if genai is None or not genai.uses_foundation_model:
        return False
    risky_sources = {"personal-data", "public-web-scrape", "user-generated-content"}
    return ctx.training_data.contains_personal_data or any(
        s in risky_sources for s in genai.training_data_includes
    )


def requires_dpo(ctx: ProductContext) -> bool:
    dpo_data = ARTICLE_9_DATA | {DataCategory.CRIMINAL}
    return _is_large_scale(ctx) and any(d in dpo_data for d in ctx.data_processed)


DPIA_TRIGGERS: tuple[Trigger, ...] = (
    Trigger(
        "dpia-systematic-evaluation",
        "Systematic and Extensive Evaluation of Personal Aspects (Profiling)",
        "Article 35(3)(a)",
        _is_profiling,
    ),
    Trigger(
        "dpia-large-scale-special-category",
        "Large-Scale Processing of Special Category Data",
        "Article 35(3)(b)",
        _large_scale_special_category,
    ),
    Trigger(
        "dpia-public-monitoring",
        "Systematic Monitoring of Publicly Accessible Area",
        "Article 35(3)(c)",
        _monitors_public_areas,
    ),
    Trigger(
        "dpia-automated-decision-making",
        "Automated Decision-Making with Legal/Significant Effects",
        "Article 22 / Article 35",
        lambda ctx: is_fully_automated(ctx) and makes_material_decisions(ctx),
    ),
    Trigger(
        "dpia-sensitive-data-processing",
        "Processing of Sensitive Personal Data",
        "Article 9, Article 35",
        _processes_article_9_data,
    ),
    Trigger(
        "dpia-minor-data",
        "Processing of Children's Data",
        "Article 8, Article 35",
        involves_minors,
    ),
    Trigger(
        "dpia-training-data-personal",
        "GenAI: Personal Data Used in Model Training",
        "Article 35, Recital 91",
        training_data_includes_personal_data,
    ),
)


class EuGdprJurisdiction(TieredJurisdiction):
    id = "eu-gdpr"
    name = "EU General Data Protection Regulation (GDPR)"

    tiers = (
        Tier(
            level=RiskLevel.HIGH,
            triggers=DPIA_TRIGGERS,
            justification=lambda matched: (
                "This AI system triggers a DPIA requirement under GDPR due to: "
                f"{'; '.join(t.label for t in matched)}. A Data Protection Impact Assessment "
                "must be conducted before processing begins."
            ),
        ),
    )

    def risk_level(self, ctx: ProductContext) -> RiskClassification:
        if not processes_personal_data(ctx):
            return RiskClassification(
                level=RiskLevel.MINIMAL,
                justification=(
                    "This AI system does not process personal data. GDPR obligations do not "
                    "apply to non-personal data processing."
                ),
            )
        general = RiskClassification(
            level=RiskLevel.LIMITED,
            justification=(
                "This AI system processes personal data and must comply with GDPR principles "
                "(lawfulness, fairness, transparency, purpose limitation, data minimisation, "
                "accuracy, storage limitation, integrity, accountability). No DPIA triggers "
                "were identified, but general GDPR obligations apply."
            ),
            categories=("general-processing",),
            provisions=("Articles 5-6",),
        )
        return classify(self.tiers, ctx, general)

    def build_provisions(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ApplicableProvision]:
        if risk.level == RiskLevel.MINIMAL:
            return []

        provisions = [
            self.provision(
                "gdpr-art5-principles",
                "GDPR",
                "Article 5",
                "Principles of Processing",
                "Processing must be lawful, fair, and transparent; limited to specified purposes "
                "and to what is necessary; accurate; stored only as long as necessary; and secure.",
                "Applies to all personal data processing in the AI system.",
            ),
            self.provision(
                "gdpr-art6-legal-basis",
                "GDPR",
                "Articles 6-7",
                "Legal Basis for Processing",
                "Processing must have a valid legal basis: consent, contract, legal obligation, "
                "vital interests, public interest, or legitimate interests.",
                "A valid legal basis must be identified for each purpose of personal data "
                "processing in the AI system.",
            ),
            self.provision(
                "gdpr-art12-15-rights",
                "GDPR",
                "Articles 12-23",
                "Data Subject Rights",
                "Data subjects have rights to access, rectification, erasure, restriction, "
                "portability, and objection.",
                "The AI system must facilitate the exercise of data subject rights, including "
                "deletion and rectification requests.",
            ),
        ]

        if is_automated_decision_making(ctx):
            provisions.append(self.provision(
                "gdpr-art22",
                "GDPR",
                "Article 22",
                "Automated Individual Decision-Making, Including Profiling",
                "Data subjects have the right not to be subject to decisions based solely on "
                "automated processing that produce legal or similarly significant effects, "
                "unless an exception applies and suitable safeguards are in place.",
                "This AI system makes fully automated decisions with material or determinative "
                "impact on individuals, triggering Article 22 protections.",
            ))

        if risk.level == RiskLevel.HIGH:
            provisions.append(self.provision(
                "gdpr-art35-dpia",
                "GDPR",
                "Articles 35-36",
                "Data Protection Impact Assessment (DPIA)",
                "A DPIA must be carried out before processing that is likely to result in a high "
                "risk to individuals. Residual high risk requires prior consultation with the "
                "supervisory authority (Article 36).",
                risk.justification,
            ))

        if involves_data_transfers(ctx):
            provisions.append(self.provision(
                "gdpr-art44-49-transfers",
                "GDPR",
                "Articles 44-49",
                "International Data Transfers",
                "Transfers to third countries require an adequacy decision, appropriate "
                "safeguards (SCCs, BCRs), or a derogation.",
                "The AI system involves data transfers to third-party services or cross-border "
                "processing, requiring a valid transfer mechanism.",
            ))

        if has_genai_personal_data_concerns(ctx):
            provisions.append(self.provision(
                "gdpr-genai-training-data",
                "GDPR",
                "Articles 5-6, 9, 14",
                "Legal Basis for AI Training Data Processing",
                "Processing personal data for model training requires a valid legal basis. "
                "Web-scraped personal data triggers Article 14 transparency obligations.",
                "This AI system uses a foundation model trained on data that may include "
                "personal data.",
            ))
            provisions.append(self.provision(
                "gdpr-genai-erasure",
                "GDPR",
                "Article 17",
                "Right of Erasure and Trained Models",
                "Controllers must assess the technical feasibility of erasure requests for "
                "personal data encoded in model weights.",
                "This AI system uses models potentially trained on personal data.",
            ))

        if _processes_article_9_data(ctx):
            provisions.append(self.provision(
                "gdpr-art9-special-category",
                "GDPR",
                "Article 9",
                "Processing of Special Categories of Data",
                "Processing of special categories of personal data is prohibited unless an "
                "Article 9(2) exception applies.",
                "This AI system processes special category data, requiring explicit consent or "
                "another specific legal basis under Article 9(2).",
            ))

        if involves_minors(ctx):
            provisions.append(self.provision(
                "gdpr-art8-children",
                "GDPR",
                "Article 8",
                "Conditions Applicable to Child's Consent",
                "Below the Member State age threshold (13-16), parental or guardian consent is "
                "required for information society services.",
                "This AI system processes data of minors, requiring age verification and "
                "parental consent mechanisms.",
            ))

        return provisions

    def build_artifacts(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ArtifactRequirement]:
        if risk.level == RiskLevel.MINIMAL:
            return []

        artifacts: list[ArtifactRequirement] = []
        if risk.level == RiskLevel.HIGH:
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.DPIA,
                name="GDPR Data Protection Impact Assessment",
                legal_basis="Articles 35-36",
                description=(
                    "Describe processing operations, assess necessity and proportionality, "
                    "assess risks to individuals, and identify mitigation measures."
                ),
                template_id="dpia-gdpr",
            ))

        if processes_personal_data(ctx):
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.TRANSPARENCY_NOTICE,
                name="GDPR Privacy Notice / Transparency Information",
                legal_basis="Articles 13-14",
                description=(
                    "Privacy notice covering purposes, legal basis, retention, data subject "
                    "rights, and meaningful information about automated decision-making logic."
                ),
                template_id="transparency-notice",
            ))

        if has_genai_personal_data_concerns(ctx):
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.MODEL_CARD,
                name="Data Processing Record for AI Training",
                legal_basis="Article 30",
                description=(
                    "Record of processing activities for model training: legal basis, personal "
                    "data categories, retention, and measures for data subject rights."
                ),
            ))

        return artifacts

    def build_actions(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ActionRequirement]:
        if risk.level == RiskLevel.MINIMAL:
            return []

        critical, important = ActionPriority.CRITICAL, ActionPriority.IMPORTANT
        actions = [
            self.action(
                "gdpr-legal-basis-assessment",
                "Determine and document legal basis for processing",
                "Identify and document the Article 6 legal basis for each processing purpose. "
                "For legitimate interests, conduct a Legitimate Interest Assessment.",
                critical, "Articles 6-7", "1-2 weeks",
            ),
            self.action(
                "gdpr-data-subject-rights",
                "Implement data subject rights mechanisms",
                "Enable access, rectification, erasure, restriction, portability, and objection, "
                "including for automated processing and training data.",
                critical, "Articles 12-23", "3-6 weeks",
            ),
            self.action(
                "gdpr-privacy-notice",
                "Prepare and publish privacy notice",
                "Tell data subjects about purposes, legal basis, data categories, retention, "
                "rights, and the logic of automated decision-making.",
                critical, "Articles 13-14", "1-2 weeks",
            ),
            self.action(
                "gdpr-records-of-processing",
                "Maintain records of processing activities",
                "Keep written records of purposes, data subjects, data categories, recipients, "
                "transfers, retention periods, and security measures.",
                important, "Article 30", "1-2 weeks",
            ),
        ]

        if risk.level == RiskLevel.HIGH:
            actions.append(self.action(
                "gdpr-conduct-dpia",
                "Conduct Data Protection Impact Assessment",
                "Conduct a DPIA before processing begins. If residual risk is high, consult the "
                "supervisory authority under Article 36.",
                critical, "Articles 35-36", "2-4 weeks",
            ))

        if is_automated_decision_making(ctx):
            actions.append(self.action(
                "gdpr-art22-safeguards",
                "Implement Article 22 automated decision-making safeguards",
                "Provide human intervention, the right to express a point of view, the right to "
                "contest the decision, and meaningful information about the logic involved.",
                critical, "Article 22", "2-4 weeks",
            ))

        if _processes_article_9_data(ctx):
            actions.append(self.action(
                "gdpr-special-category-basis",
                "Establish legal basis for special category data processing",
                "Identify and document a valid Article 9(2) exception and implement safeguards "
                "appropriate to the sensitivity of the data.",
                critical, "Article 9", "1-2 weeks",
            ))

        if involves_minors(ctx):
            actions.append(self.action(
                "gdpr-children-consent",
                "Implement age verification and parental consent",
                "Verify age, collect parental or guardian consent, and provide child-friendly "
                "privacy notices.",
                critical, "Article 8", "2-4 weeks",
            ))

        if requires_dpo(ctx):
            actions.append(self.action(
                "gdpr-appoint-dpo",
                "Appoint a Data Protection Officer",
                "Core activities include large-scale processing of special categories of data, "
                "so an independent DPO with adequate resources is required.",
                important, "Articles 37-39", "2-4 weeks",
            ))

        if involves_data_transfers(ctx):
            actions.append(self.action(
                "gdpr-data-transfers",
                "Establish valid data transfer mechanisms",
                "Put in place an adequacy decision, SCCs, BCRs, or a derogation, and conduct a "
                "Transfer Impact Assessment.",
                critical, "Articles 44-49", "2-4 weeks",
            ))

        if has_genai_personal_data_concerns(ctx):
            actions.append(self.action(
                "gdpr-genai-training-legal-basis",
                "Establish legal basis for AI training data processing",
                "Document the legal basis for personal data used in training, address Article 14 "
                "for web-scraped data, and verify consent scope for user-generated content.",
                critical, "Articles 5-6, 14", "2-4 weeks",
            ))
            actions.append(self.action(
                "gdpr-genai-erasure-policy",
                "Develop policy for right of erasure in trained models",
                "Document how erasure requests are handled for personal data encoded in model "
                "weights: retraining, unlearning, or input/output filtering.",
                important, "Article 17", "2-4 weeks",
            ))

        actions.append(self.action(
            "gdpr-security-measures",
            "Implement appropriate technical and organisational security measures",
            "Apply pseudonymisation, encryption, resilience, restore capability, and regular "
            "testing, including model security and access controls.",
            important, "Article 32", "2-6 weeks",
        ))
        return actions

    def build_timeline(
        self,
        ctx: ProductContext,
        risk: RiskClassification,
        secondary: SecondaryClassification | None,
    ) -> ComplianceTimeline:
        notes = [
            "GDPR has been in force since 25 May 2018. All obligations apply immediately to any "
            "personal data processing."
        ]
        if risk.level == RiskLevel.HIGH:
            notes.append(
                "A DPIA must be conducted BEFORE processing begins. Processing cannot commence "
                "until the DPIA has been completed and risks have been mitigated."
            )
            notes.append(
                "If the DPIA indicates high residual risk that cannot be mitigated, prior "
                "consultation with the supervisory authority is required under Article 36."
            )

        return ComplianceTimeline(
            effective_date="2018-05-25",
            deadlines=(
                ComplianceDeadline(
                    date="2018-05-25",
                    description="GDPR entered into application. All data protection obligations are in force.",
                    provision="GDPR",
                ),
            ),
            notes=tuple(notes),
        )
