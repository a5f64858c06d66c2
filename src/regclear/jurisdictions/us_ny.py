"""New York: NYC Local Law 144 (AEDT), NYDFS and state deepfake provisions."""

from typing import Iterable

from regclear.jurisdictions.base import Tier, TieredJurisdiction, Trigger, names
from regclear.jurisdictions.helpers import (
    can_generate_deepfakes,
    description_has,
    is_financial_services_ai,
    is_genai_product,
    makes_material_decisions,
)
from regclear.models.context import ProductContext, UserPopulation
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

LL144 = "NYC Local Law 144"


def _is_hiring_tool(ctx: ProductContext) -> bool:
    hiring = UserPopulation.JOB_APPLICANTS in ctx.user_populations or description_has(
        ctx, "hiring", "recruit", "resume screen", "candidate screen", "application screen"
    )
    return hiring and makes_material_decisions(ctx)


def _is_promotion_tool(ctx: ProductContext) -> bool:
    promotion = UserPopulation.EMPLOYEES in ctx.user_populations and description_has(
        ctx, "promot", "advancement", "performance evaluation"
    )
    return promotion and makes_material_decisions(ctx)


LL144_TRIGGERS: tuple[Trigger, ...] = (
    Trigger("ll144-aedt-hiring", "Automated Employment Decision Tool — Hiring", LL144, _is_hiring_tool),
    Trigger(
        "ll144-aedt-promotion", "Automated Employment Decision Tool — Promotion", LL144, _is_promotion_tool
    ),
)


def is_aedt(ctx: ProductContext) -> bool:
    return any(t.matches(ctx) for t in LL144_TRIGGERS)


class UsNewYorkJurisdiction(TieredJurisdiction):
    id = "us-ny"
    name = "New York City Automated Employment Decision Tools Law (LL144)"

    default_justification = (
        "This AI system does not trigger specific New York regulatory obligations. NYC LL144 "
        "does not apply (not an automated employment decision tool), and no other specific AI "
        "triggers identified."
    )

    tiers = (
        Tier(
            level=RiskLevel.HIGH,
            triggers=LL144_TRIGGERS,
            justification=lambda matched: (
                "This AI system qualifies as an Automated Employment Decision Tool (AEDT) under "
                "NYC Local Law 144, triggering mandatory annual bias audit by an independent "
                "auditor and candidate/employee notification requirements. Applies to: "
                f"{names(matched, '; ')}."
            ),
            provisions=lambda matched: ["NYC Local Law 144 (Int. 1894-2020)"],
        ),
        Tier(
            level=RiskLevel.LIMITED,
            triggers=(
                Trigger("ny-financial-ai", "NYDFS Regulated AI", "NYDFS", is_financial_services_ai),
            ),
            justification=lambda matched: (
                "This AI system operates in financial services in New York. The NYDFS applies "
                "cybersecurity and consumer protection requirements to AI systems at regulated "
                "financial institutions."
            ),
            provisions=lambda matched: ["NYDFS Cybersecurity Regulation (23 NYCRR 500)"],
        ),
        Tier(
            level=RiskLevel.LIMITED,
            triggers=(
                Trigger(
                    "ny-genai-deepfake",
                    "AI-Generated Deepfake Content",
                    "New York Deepfake Laws",
                    lambda ctx: is_genai_product(ctx) and can_generate_deepfakes(ctx),
                ),
            ),
            justification=lambda matched: (
                "This AI system can generate synthetic media. New York has deepfake-related "
                "provisions addressing non-consensual intimate imagery and election interference."
            ),
        ),
        Tier(
            level=RiskLevel.LIMITED,
            triggers=(
                Trigger(
                    "ny-consumer-protection",
                    "Consumer-Facing AI",
                    "NY General Business Law",
                    lambda ctx: UserPopulation.CONSUMERS in ctx.user_populations,
                ),
            ),
            justification=lambda matched: (
                "This AI system is consumer-facing in New York. General consumer protection laws "
                "apply, including the New York General Business Law and potential NYDFS "
                "oversight for financial products."
            ),
        ),
    )

    def build_provisions(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ApplicableProvision]:
        if risk.level == RiskLevel.MINIMAL:
            return []

        provisions: list[ApplicableProvision] = []
        if is_aedt(ctx):
            provisions.extend([
                self.provision(
                    "us-ny-ll144-bias-audit",
                    LL144,
                    "Section 20-871(b)",
                    "Annual Independent Bias Audit Requirement",
                    "An AEDT may not be used unless an independent bias audit was conducted "
                    "within the past year, testing impact ratios across sex, race/ethnicity, and "
                    "intersectional categories.",
                    "This system is an AEDT subject to mandatory annual bias audit before use in NYC.",
                ),
                self.provision(
                    "us-ny-ll144-notice",
                    LL144,
                    "Section 20-871(c)-(d)",
                    "Candidate/Employee Notice Requirements",
                    "Candidates and employees must be notified at least 10 business days before "
                    "AEDT use, including the qualifications assessed and how to request an "
                    "alternative process.",
                    "This system requires candidate/employee notification before AEDT use.",
                ),
                self.provision(
                    "us-ny-ll144-summary-publication",
                    LL144,
                    "Section 20-871(b)(2)",
                    "Bias Audit Summary Publication",
                    "The most recent bias audit summary, with data sources, individuals assessed, "
                    "and impact ratios, must be public on the employer's website.",
                    "This AEDT requires public posting of bias audit results.",
                ),
                self.provision(
                    "us-ny-ll144-data-collection",
                    LL144,
                    "Section 20-871(c)",
                    "AEDT Data Collection Transparency",
                    "Employers must disclose the type, source, and retention of data collected by "
                    "the AEDT.",
                    "This AEDT must disclose data collection and retention practices.",
                ),
            ])

        if can_generate_deepfakes(ctx):
            provisions.append(self.provision(
                "us-ny-deepfake",
                "New York Deepfake Laws",
                "NY Penal Law / Civil Rights Law Amendments",
                "Synthetic Media and Deepfake Provisions",
                "New York law addresses non-consensual intimate deepfake imagery and deceptive "
                "political deepfakes with civil and criminal liability.",
                "This AI system can generate synthetic media.",
            ))

        return provisions

    def build_artifacts(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ArtifactRequirement]:
        if risk.level == RiskLevel.MINIMAL or not is_aedt(ctx):
            return []

        return [
            ArtifactRequirement(
                type=ArtifactType.BIAS_AUDIT,
                name="NYC LL144 Independent Bias Audit",
                legal_basis="NYC Local Law 144, Section 20-871(b)",
                description=(
                    "Annual independent bias audit of the AEDT with selection or scoring rates "
                    "and impact ratios across sex, race/ethnicity, and intersectional categories."
                ),
                template_id="bias-audit-nyc",
            ),
            ArtifactRequirement(
                type=ArtifactType.TRANSPARENCY_NOTICE,
                name="NYC LL144 Candidate/Employee Notice",
                legal_basis="NYC Local Law 144, Section 20-871(c)-(d)",
                description=(
                    "Written notice at least 10 business days before AEDT use covering "
                    "qualifications assessed, data retention, and alternative process requests."
                ),
                template_id="transparency-notice",
            ),
        ]

    def build_actions(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ActionRequirement]:
        if risk.level == RiskLevel.MINIMAL:
            return []

        critical = ActionPriority.CRITICAL
        actions: list[ActionRequirement] = []
        if is_aedt(ctx):
            actions.extend([
                self.action(
                    "us-ny-ll144-engage-auditor",
                    "Engage independent auditor for LL144 bias audit",
                    "Engage an auditor not involved in developing, using, or providing the AEDT.",
                    critical, "NYC Local Law 144, Section 20-871(b)", "4-8 weeks",
                ),
                self.action(
                    "us-ny-ll144-conduct-audit",
                    "Complete annual bias audit",
                    "Calculate selection or scoring rates and impact ratios for sex, "
                    "race/ethnicity, and intersectional categories, and document the results.",
                    critical, "NYC Local Law 144, Section 20-871(b)", "4-8 weeks",
                ),
                self.action(
                    "us-ny-ll144-publish-results",
                    "Publish bias audit summary on employer website",
                    "Publish the most recent audit summary with data sources, individuals "
                    "assessed, and impact ratios.",
                    critical, "NYC Local Law 144, Section 20-871(b)(2)", "1-2 weeks",
                ),
                self.action(
                    "us-ny-ll144-candidate-notice",
                    "Implement 10-day advance candidate notification",
                    "Notify candidates and employees at least 10 business days before AEDT use "
                    "via the job posting, website, or mail.",
                    critical, "NYC Local Law 144, Section 20-871(c)-(d)", "1-2 weeks",
                ),
                self.action(
                    "us-ny-ll144-data-deletion",
                    "Implement AEDT data deletion process",
                    "Let candidates and employees request deletion of AEDT data, with a "
                    "response within 30 days.",
                    ActionPriority.IMPORTANT, "NYC Local Law 144, Section 20-871(c)", "1-2 weeks",
                ),
            ])

        if can_generate_deepfakes(ctx):
            actions.append(self.action(
                "us-ny-deepfake-safeguards",
                "Implement deepfake safeguards for New York compliance",
                "Guard against non-consensual intimate and deceptive political deepfakes, label "
                "synthetic media, and collect consent for likeness use.",
                ActionPriority.IMPORTANT, "New York Deepfake Laws", "2-4 weeks",
            ))

        return actions

    def build_timeline(
        self,
        ctx: ProductContext,
        risk: RiskClassification,
        secondary: SecondaryClassification | None,
    ) -> ComplianceTimeline:
        notes: list[str] = []
        if any("ll144" in c for c in risk.categories):
            notes.append(
                "NYC Local Law 144 has been enforced since July 5, 2023. AEDTs cannot be used in "
                "NYC without a bias audit from the past year and proper candidate notification. "
                "DCWP fines are $500 for a first violation and $500-$1,500 for subsequent "
                "violations per day per AEDT."
            )

        return ComplianceTimeline(
            effective_date="2023-07-05",
            deadlines=(
                ComplianceDeadline(
                    date="2023-07-05",
                    description=(
                        "NYC Local Law 144 enforcement begins. AEDTs used in NYC hiring or "
                        "promotion must have a completed bias audit and candidate notice."
                    ),
                    provision=LL144,
                ),
            ),
            notes=tuple(notes),
        )
