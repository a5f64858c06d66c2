"""Colorado AI Act (SB 24-205), as delayed by SB 25B-004."""

from typing import Iterable

from regclear.jurisdictions.base import Tier, TieredJurisdiction, Trigger, names
from regclear.jurisdictions.helpers import (
    description_has,
    has_agentic_capabilities,
    involves_insurance_pricing,
    is_consumer_facing,
    is_employment_context,
    is_financial_services_ai,
    is_genai_product,
    makes_material_decisions,
)
from regclear.models.context import DataCategory, ProductContext, ProductType, UserPopulation
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

EFFECTIVE_DATE = "2026-06-30"
LAW = "Colorado AI Act"

CONSEQUENTIAL_DECISION_AREAS: tuple[Trigger, ...] = (
    Trigger(
        "co-education",
        "Education",
        "SB 24-205 §6-1-1701(3)(a)",
        lambda ctx: UserPopulation.STUDENTS in ctx.user_populations
        or description_has(ctx, "education", "enrollment", "admission", "academic"),
    ),
    Trigger(
        "co-employment",
        "Employment",
        "SB 24-205 §6-1-1701(3)(b)",
        lambda ctx: is_employment_context(ctx)
        or description_has(
            ctx, "hiring", "recruitment", "employment", "promotion", "termination", "resume screen"
        ),
    ),
    Trigger(
        "co-financial-services",
        "Financial Services",
        "SB 24-205 §6-1-1701(3)(c)",
        lambda ctx: is_financial_services_ai(ctx)
        or UserPopulation.CREDIT_APPLICANTS in ctx.user_populations
        or description_has(ctx, "credit", "lending", "loan", "financial service", "banking"),
    ),
    Trigger(
        "co-government-services",
        "Government Services",
        "SB 24-205 §6-1-1701(3)(d)",
        lambda ctx: description_has(
            ctx,
            "government service",
            "public benefit",
            "public assistance",
            "welfare",
            "social benefit",
            "government program",
        ),
    ),
    Trigger(
        "co-healthcare",
        "Healthcare",
        "SB 24-205 §6-1-1701(3)(e)",
        lambda ctx: UserPopulation.PATIENTS in ctx.user_populations
        or DataCategory.HEALTH in ctx.data_processed
        or description_has(
            ctx, "healthcare", "medical", "health service", "clinical", "diagnosis", "treatment"
        ),
    ),
    Trigger(
        "co-housing",
        "Housing",
        "SB 24-205 §6-1-1701(3)(f)",
        lambda ctx: UserPopulation.TENANTS in ctx.user_populations
        or description_has(ctx, "housing", "rental", "tenant screen", "landlord", "lease"),
    ),
    Trigger(
        "co-insurance",
        "Insurance",
        "SB 24-205 §6-1-1701(3)(g)",
        lambda ctx: involves_insurance_pricing(ctx)
        or description_has(ctx, "insurance", "underwriting", "actuarial", "claims processing"),
    ),
    Trigger(
        "co-legal-services",
        "Legal Services",
        "SB 24-205 §6-1-1701(3)(h)",
        lambda ctx: description_has(
            ctx, "legal service", "legal aid", "judicial", "court", "sentencing", "parole"
        ),
    ),
)


def matching_consequential_areas(ctx: ProductContext) -> list[Trigger]:
    return [a for a in CONSEQUENTIAL_DECISION_AREAS if a.matches(ctx)]


def is_consequential_decision(ctx: ProductContext) -> bool:
    return bool(matching_consequential_areas(ctx))


def is_developer(ctx: ProductContext) -> bool:
    genai = ctx.generative_ai_context
    return (
        ctx.product_type == ProductType.FOUNDATION_MODEL
        or description_has(ctx, "develop", "provider", "vendor", "build")
        or (genai is not None and genai.foundation_model_source == "self-trained")
    )


def is_deployer(ctx: ProductContext) -> bool:
    """Anyone using a high-risk system, except pure foundation model providers."""
    return not (ctx.product_type == ProductType.FOUNDATION_MODEL and not is_consumer_facing(ctx))


def is_genai_in_consequential_area(ctx: ProductContext) -> bool:
    return is_genai_product(ctx) and is_consequential_decision(ctx)


class UsColoradoJurisdiction(TieredJurisdiction):
    id = "us-co"
    name = "Colorado AI Act (SB 24-205)"

    default_justification = (
        "This AI system does not make consequential decisions about consumers in any of the "
        "areas regulated by the Colorado AI Act (SB 24-205). No mandatory obligations apply "
        "under this law."
    )

    tiers = (
        Tier(
            level=RiskLevel.HIGH,
            triggers=tuple(
                Trigger(
                    a.id,
                    a.label,
                    a.framework,
                    lambda ctx, a=a: makes_material_decisions(ctx) and a.matches(ctx),
                )
                for a in CONSEQUENTIAL_DECISION_AREAS
            ),
            justification=lambda matched: (
                "This AI system makes consequential decisions in the following area(s) under the "
                f"Colorado AI Act (SB 24-205): {names(matched)}. The decision impact is material, "
                "classifying this as a high-risk AI system requiring impact assessments, risk "
                "management policies, consumer notice, and algorithmic discrimination prevention."
            ),
            provisions=lambda matched: [
                "SB 24-205 §6-1-1702", "SB 24-205 §6-1-1703", "SB 24-205 §6-1-1704"
            ],
        ),
        Tier(
            level=RiskLevel.LIMITED,
            triggers=CONSEQUENTIAL_DECISION_AREAS + (
                Trigger(
                    "co-consumer-interaction",
                    "Consumer Data or Interaction",
                    "SB 24-205 §6-1-1704",
                    lambda ctx: DataCategory.PERSONAL in ctx.data_processed
                    or UserPopulation.CONSUMERS in ctx.user_populations,
                ),
            ),
            justification=lambda matched: (
                "This AI system processes consumer data or operates in a consequential decision "
                "area under the Colorado AI Act but does not make material or determinative "
                "decisions. General transparency obligations and consumer notification "
                "requirements may apply."
            ),
            provisions=lambda matched: ["SB 24-205 §6-1-1704"],
        ),
    )

    def build_provisions(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ApplicableProvision]:
        if risk.level == RiskLevel.MINIMAL:
            return []

        provisions = [self.provision(
            "co-sb205-scope",
            LAW,
            "SB 24-205 §6-1-1702",
            "High-Risk AI System Definition",
            "A high-risk AI system makes, or is a substantial factor in making, a consequential "
            "decision concerning a consumer in education, employment, financial services, "
            "government services, healthcare, housing, insurance, or legal services.",
            risk.justification,
        )]

        if risk.level == RiskLevel.HIGH:
            if is_developer(ctx):
                provisions.append(self.provision(
                    "co-sb205-developer-duties",
                    LAW,
                    "SB 24-205 §6-1-1703",
                    "Developer Duties",
                    "Developers must use reasonable care against algorithmic discrimination and "
                    "give deployers documentation of uses, limitations, data, and mitigations.",
                    "As a developer of this high-risk AI system, deployer documentation is required.",
                ))
            if is_deployer(ctx):
                provisions.extend([
                    self.provision(
                        "co-sb205-deployer-risk-mgmt",
                        LAW,
                        "SB 24-205 §6-1-1704(1)",
                        "Deployer Risk Management Policy",
                        "Deployers must implement a risk management policy and program "
                        "specifying principles, processes, and personnel for oversight.",
                        "A risk management policy and program is required.",
                    ),
                    self.provision(
                        "co-sb205-deployer-impact-assessment",
                        LAW,
                        "SB 24-205 §6-1-1704(2)",
                        "Deployer Impact Assessment",
                        "Deployers must complete an impact assessment before deployment and "
                        "annually thereafter.",
                        "An impact assessment is required before deploying this system in Colorado.",
                    ),
                    self.provision(
                        "co-sb205-deployer-notice",
                        LAW,
                        "SB 24-205 §6-1-1704(3)",
                        "Consumer Notice Requirements",
                        "Deployers must tell consumers the AI system is used in a consequential "
                        "decision and describe their right to opt out of profiling.",
                        "Consumers must be notified that this AI system is used in consequential "
                        "decisions.",
                    ),
                ])
            provisions.append(self.provision(
                "co-sb205-algo-discrimination",
                LAW,
                "SB 24-205 §6-1-1701(1)",
                "Algorithmic Discrimination",
                "Unlawful differential treatment or impact that disfavors an individual or group "
                "on the basis of a protected class.",
                "Developers and deployers must use reasonable care to protect consumers from "
                "algorithmic discrimination.",
            ))

        if is_genai_in_consequential_area(ctx):
            provisions.append(self.provision(
                "co-sb205-genai-consequential",
                LAW,
                "SB 24-205 §6-1-1702, §6-1-1704",
                "GenAI in Consequential Decisions",
                "Using generative AI in consequential decisions does not exempt deployers from "
                "impact assessment, notice, or anti-discrimination requirements.",
                "This system uses generative AI in a consequential decision area.",
            ))

        return provisions

    def build_artifacts(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ArtifactRequirement]:
        if risk.level != RiskLevel.HIGH:
            return []

        artifacts: list[ArtifactRequirement] = []
        if is_deployer(ctx):
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.ALGORITHMIC_IMPACT,
                name="Colorado AI Act Impact Assessment",
                legal_basis="SB 24-205 §6-1-1704(2)",
                description=(
                    "Impact assessment covering purpose, intended uses, known risks of "
                    "algorithmic discrimination, data categories, outputs, oversight, and "
                    "safeguards. Completed before deployment and updated annually."
                ),
            ))

        artifacts.append(ArtifactRequirement(
            type=ArtifactType.RISK_ASSESSMENT,
            name="Colorado AI Act Risk Management Policy",
            legal_basis="SB 24-205 §6-1-1704(1)",
            description=(
                "Risk management policy and program governing deployment of the high-risk AI "
                "system, including algorithmic discrimination prevention."
            ),
        ))
        artifacts.append(ArtifactRequirement(
            type=ArtifactType.TRANSPARENCY_NOTICE,
            name="Colorado Consumer AI Notice",
            legal_basis="SB 24-205 §6-1-1704(3)",
            description=(
                "Consumer notice that the AI system is used in a consequential decision, with a "
                "system description, contact information, and the right to opt out of profiling."
            ),
            template_id="transparency-notice",
        ))

        if is_developer(ctx):
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.MODEL_CARD,
                name="Colorado Developer Disclosure Documentation",
                legal_basis="SB 24-205 §6-1-1703(2)",
                description=(
                    "Deployer documentation of intended uses, known limitations, development "
                    "data, and algorithmic discrimination mitigations."
                ),
                template_id="model-card",
            ))

        if is_financial_services_ai(ctx) or is_employment_context(ctx):
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.BIAS_AUDIT,
                name="Algorithmic Discrimination Analysis",
                legal_basis="SB 24-205 §6-1-1701(1), §6-1-1704(1)",
                description=(
                    "Testing for algorithmic discrimination across the protected classes named "
                    "in the Act, as part of the risk management program."
                ),
            ))

        return artifacts

    def build_actions(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ActionRequirement]:
        if risk.level != RiskLevel.HIGH:
            return []

        critical = ActionPriority.CRITICAL
        actions: list[ActionRequirement] = []

        def add(id, title, description, priority, basis, effort):
            actions.append(
                self.action(id, title, description, priority, basis, effort, EFFECTIVE_DATE)
            )

        if is_deployer(ctx):
            add("co-risk-management-policy", "Implement risk management policy and program",
                "Specify governance principles, discrimination mitigation processes, oversight "
                "personnel, and training requirements.",
                critical, "SB 24-205 §6-1-1704(1)", "4-8 weeks")
            add("co-impact-assessment", "Complete impact assessment before deployment",
                "Cover purpose, intended uses, known discrimination risks, data inputs and "
                "outputs, performance metrics, and safeguards; update annually.",
                critical, "SB 24-205 §6-1-1704(2)", "2-4 weeks")
            add("co-consumer-notice", "Provide consumer notice of AI use in consequential decisions",
                "Notify consumers with a system description, deployer contact details, and the "
                "right to opt out of profiling.",
                critical, "SB 24-205 §6-1-1704(3)", "1-2 weeks")
            add("co-opt-out-mechanism", "Implement consumer opt-out for profiling",
                "Provide an accessible mechanism to opt out of profiling in furtherance of "
                "consequential decisions.",
                critical, "SB 24-205 §6-1-1704(3)(c)", "2-4 weeks")
            add("co-discrimination-testing", "Test for algorithmic discrimination",
                "Test for and mitigate algorithmic discrimination across protected classes and "
                "document methodology, results, and remediation.",
                critical, "SB 24-205 §6-1-1701(1), §6-1-1704(1)", "3-6 weeks")

        if is_developer(ctx):
            add("co-developer-reasonable-care",
                "Exercise reasonable care to prevent algorithmic discrimination",
                "Document design choices, data selection criteria, and bias mitigation for "
                "foreseeable discrimination risks.",
                critical, "SB 24-205 §6-1-1703(1)", "4-8 weeks")
            add("co-developer-documentation", "Provide deployer documentation and transparency notice",
                "Publish a statement of the high-risk systems developed and give deployers "
                "documentation of limitations, uses, data, and mitigations.",
                critical, "SB 24-205 §6-1-1703(2)-(3)", "2-4 weeks")

        add("co-ag-notification", "Establish process for AG notification of discrimination",
            "Notify the Colorado Attorney General within 90 days of discovering algorithmic "
            "discrimination caused by the system.",
            ActionPriority.IMPORTANT, "SB 24-205 §6-1-1704(4)", "1-2 weeks")

        if is_genai_in_consequential_area(ctx):
            add("co-genai-consequential-controls",
                "Implement controls for GenAI use in consequential decisions",
                "Validate GenAI outputs before they influence decisions, document their use, and "
                "keep human oversight of GenAI-assisted decisions.",
                critical, "SB 24-205 §6-1-1702, §6-1-1704", "2-4 weeks")

        if has_agentic_capabilities(ctx):
            add("co-agentic-oversight", "Implement oversight for agentic AI in consequential decisions",
                "Add human checkpoints before autonomous actions affecting consumers and record "
                "action scope, logging, and failsafes in the impact assessment.",
                critical, "SB 24-205 §6-1-1704(1)-(2)", "3-6 weeks")

        return actions

    def build_timeline(
        self,
        ctx: ProductContext,
        risk: RiskClassification,
        secondary: SecondaryClassification | None,
    ) -> ComplianceTimeline:
        notes = [
            "The Colorado AI Act (SB 24-205) was signed on May 17, 2024. SB 25B-004 moved its "
            "effective date from February 1, 2026 to June 30, 2026."
        ]
        if risk.level == RiskLevel.HIGH:
            notes.append(
                "CRITICAL: High-risk AI system obligations take effect on June 30, 2026. "
                "Deployers must have risk management policies, impact assessments, and consumer "
                "notice mechanisms in place by this date."
            )
            notes.append(
                "Impact assessments must be updated annually. Discovery of algorithmic "
                "discrimination must be reported to the AG within 90 days."
            )
        elif risk.level == RiskLevel.LIMITED:
            notes.append(
                "Using the system for consequential decisions with material impact would "
                "trigger full high-risk obligations."
            )

        return ComplianceTimeline(
            effective_date=EFFECTIVE_DATE,
            deadlines=(
                ComplianceDeadline(
                    date=EFFECTIVE_DATE,
                    description=(
                        "Colorado AI Act takes effect. Developer and deployer obligations for "
                        "high-risk AI systems become enforceable."
                    ),
                    provision="SB 24-205",
                ),
            ),
            notes=tuple(notes),
        )
