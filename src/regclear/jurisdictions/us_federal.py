"""US federal AI regulatory framework (FTC, NIST, banking and securities regulators)."""

from typing import Iterable

from regclear.jurisdictions.base import Tier, TieredJurisdiction, Trigger, classify, names
from regclear.jurisdictions.helpers import (
    affects_consumers,
    can_generate_deepfakes,
    description_has,
    involves_credit,
    is_fully_automated,
    is_financial_services_ai,
    is_genai_product,
    makes_material_decisions,
)
from regclear.models.context import ProductContext, ProductType, UserPopulation
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


def _financial(ctx: ProductContext):
    sector = ctx.sector_context
    return sector.financial_services if sector else None


def _is_deceptive_consumer_ai(ctx: ProductContext) -> bool:
    return UserPopulation.CONSUMERS in ctx.user_populations and (
        ctx.product_type
        in (ProductType.GENERATOR, ProductType.RECOMMENDER, ProductType.CLASSIFIER)
        or description_has(ctx, "consumer", "customer")
    )


def _creates_synthetic_content(ctx: ProductContext) -> bool:
    genai = ctx.generative_ai_context
    return (
        ctx.product_type == ProductType.GENERATOR
        or (genai is not None and genai.generates_content)
        or can_generate_deepfakes(ctx)
    )


def is_high_impact_automated_decision(ctx: ProductContext) -> bool:
    return makes_material_decisions(ctx) and is_fully_automated(ctx) and affects_consumers(ctx)


def _model_risk_in_scope(ctx: ProductContext) -> bool:
    fin = _financial(ctx)
    return is_financial_services_ai(ctx) and fin is not None and (
        fin.has_model_risk_governance is not None
        or fin.involves_credit
        or fin.involves_trading
        or fin.involves_insurance_pricing
    )


def _fair_lending_in_scope(ctx: ProductContext) -> bool:
    return involves_credit(ctx) or description_has(ctx, "lending", "loan")


def _investment_advisory(ctx: ProductContext) -> bool:
    fin = _financial(ctx)
    return (fin is not None and (fin.sub_sector == "investment" or fin.involves_trading)) or (
        description_has(ctx, "investment advi", "robo-advis", "portfolio management")
    )


FTC_TRIGGERS: tuple[Trigger, ...] = (
    Trigger("ftc-deceptive-ai", "Deceptive AI Practices", "FTC Act Section 5", _is_deceptive_consumer_ai),
    Trigger(
        "ftc-genai-synthetic-content",
        "AI-Generated/Synthetic Content Disclosure",
        "FTC Act Section 5, FTC GenAI Guidance",
        _creates_synthetic_content,
    ),
    Trigger(
        "ftc-unfair-ai-decisions",
        "Unfair Automated Decision-Making",
        "FTC Act Section 5",
        lambda ctx: makes_material_decisions(ctx) and affects_consumers(ctx),
    ),
)

FINANCIAL_TRIGGERS: tuple[Trigger, ...] = (
    Trigger(
        "sr-11-7-model-risk",
        "OCC/Fed SR 11-7 Model Risk Management",
        "SR 11-7 / OCC 2011-12",
        _model_risk_in_scope,
    ),
    Trigger("cfpb-fair-lending", "CFPB Fair Lending AI Guidance", "ECOA / Regulation B", _fair_lending_in_scope),
    Trigger("sec-ai-advisory", "SEC AI in Investment Advisory", "SEC Investment Advisers Act", _investment_advisory),
)


def matching_financial_triggers(ctx: ProductContext) -> list[Trigger]:
    return [t for t in FINANCIAL_TRIGGERS if t.matches(ctx)]


def matching_ftc_triggers(ctx: ProductContext) -> list[Trigger]:
    return [t for t in FTC_TRIGGERS if t.matches(ctx)]


class UsFederalJurisdiction(TieredJurisdiction):
    """
    Enforcement-driven federal regime.

    Credit scoring is checked before the tier table since its categories
    carry every matching financial trigger alongside `credit-scoring`.
    """

    id = "us-federal"
    name = "US Federal AI Regulatory Framework"

    default_justification = (
        "This AI system does not trigger specific US federal regulatory obligations beyond "
        "general FTC consumer protection. Voluntary alignment with the NIST AI RMF is "
        "recommended as a best practice."
    )

    tiers = (
        Tier(
            level=RiskLevel.HIGH,
            triggers=tuple(
                Trigger(
                    t.id,
                    t.label,
                    t.framework,
                    lambda ctx, t=t: is_financial_services_ai(ctx) and t.matches(ctx),
                )
                for t in FINANCIAL_TRIGGERS
            ),
            justification=lambda matched: (
                "This AI system operates in financial services and is subject to regulatory "
                f"oversight: {names(matched, '; ')}. Supervised institutions must comply with "
                "model risk management expectations."
            ),
            provisions=lambda matched: [t.framework for t in matched],
        ),
        Tier(
            level=RiskLevel.LIMITED,
            triggers=(
                Trigger(
                    "ftc-unfair-ai-decisions",
                    "Unfair Automated Decision-Making",
                    "FTC Act Section 5",
                    is_high_impact_automated_decision,
                ),
            ),
            justification=lambda matched: (
                "This AI system makes automated decisions with material impact on consumers, "
                "triggering FTC scrutiny for unfair or deceptive practices. While no mandatory "
                "pre-market assessment exists at the federal level, failure to ensure fairness "
                "and transparency creates significant enforcement risk."
            ),
        ),
        Tier(
            level=RiskLevel.LIMITED,
            triggers=(
                Trigger(
                    "ftc-genai-synthetic-content",
                    "AI-Generated/Synthetic Content Disclosure",
                    "FTC Act Section 5",
                    lambda ctx: is_genai_product(ctx) and _creates_synthetic_content(ctx),
                ),
            ),
            justification=lambda matched: (
                "This generative AI system creates content that may be mistaken for "
                "human-created content. FTC guidance emphasizes disclosure obligations for "
                "AI-generated content. NIST AI 600-1 provides a risk management profile for "
                "GenAI systems."
            ),
            provisions=lambda matched: ["FTC Act Section 5", "NIST AI 600-1"],
            categories=lambda matched: ["ftc-genai-synthetic-content", "nist-genai-profile"],
        ),
        Tier(
            level=RiskLevel.LIMITED,
            triggers=FTC_TRIGGERS,
            justification=lambda matched: (
                "This AI system interacts with consumers and is subject to FTC oversight for "
                "unfair or deceptive practices. While US federal law does not mandate "
                "pre-market AI classification, FTC enforcement creates compliance obligations."
            ),
            provisions=lambda matched: ["FTC Act Section 5"],
        ),
    )

    def risk_level(self, ctx: ProductContext) -> RiskClassification:
        if involves_credit(ctx):
            return RiskClassification(
                level=RiskLevel.HIGH,
                justification=(
                    "This AI system is used in credit scoring or lending decisions, subject to "
                    "heightened regulatory scrutiny under ECOA/Regulation B (CFPB fair lending), "
                    "OCC/Fed SR 11-7 (model risk management), and FTC Section 5 (unfair "
                    "practices). Supervisory examination and enforcement is active in this area."
                ),
                categories=("credit-scoring", *(t.id for t in matching_financial_triggers(ctx))),
                provisions=("ECOA/Regulation B", "SR 11-7", "FTC Act Section 5"),
            )
        return super().risk_level(ctx)

    def build_provisions(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ApplicableProvision]:
        provisions = [self.provision(
            "us-nist-ai-rmf",
            "NIST AI RMF",
            "NIST AI 100-1",
            "NIST AI Risk Management Framework",
            "Voluntary framework for managing AI risks across the lifecycle, organised into "
            "Govern, Map, Measure, and Manage functions.",
            "Recommended framework for systematic AI risk management regardless of regulatory "
            "requirements.",
        )]

        if matching_ftc_triggers(ctx):
            provisions.append(self.provision(
                "us-ftc-section5",
                "FTC Act",
                "Section 5",
                "FTC Prohibition on Unfair or Deceptive Practices",
                "The FTC prohibits unfair or deceptive acts or practices, including false claims "
                "about AI capabilities and undisclosed AI involvement in decisions.",
                "This AI system is consumer-facing and within FTC enforcement scope.",
            ))

        if is_genai_product(ctx):
            provisions.append(self.provision(
                "us-nist-genai-profile",
                "NIST AI 600-1",
                "NIST AI 600-1",
                "NIST Generative AI Risk Profile",
                "Companion resource to the AI RMF addressing 12 generative AI risk areas such as "
                "confabulation, information integrity, and intellectual property.",
                "This system uses or provides generative AI capabilities.",
            ))
            if can_generate_deepfakes(ctx):
                provisions.append(self.provision(
                    "us-ftc-genai-deepfakes",
                    "FTC Guidance",
                    "FTC GenAI Guidance (2023-2024)",
                    "FTC Guidance on AI-Generated Content and Deepfakes",
                    "Using AI to generate deceptive content, including deepfakes and synthetic "
                    "voices, may violate Section 5.",
                    "This system can generate synthetic media or deepfakes.",
                ))

        financial = {t.id for t in matching_financial_triggers(ctx)}
        if "sr-11-7-model-risk" in financial:
            provisions.append(self.provision(
                "us-sr-11-7",
                "SR 11-7 / OCC 2011-12",
                "SR 11-7",
                "OCC/Fed Model Risk Management Guidance",
                "Models used for material decisions require independent validation, ongoing "
                "monitoring, governance, and documentation.",
                "This AI system operates at a supervised financial institution.",
            ))
        if "cfpb-fair-lending" in financial:
            provisions.append(self.provision(
                "us-cfpb-fair-lending",
                "ECOA / Regulation B",
                "ECOA Section 701, Regulation B",
                "CFPB Fair Lending AI Guidance",
                "Creditors using AI must give specific and accurate adverse action reasons and "
                "test models for disparate impact.",
                "This AI system is involved in credit decisions.",
            ))
        if "sec-ai-advisory" in financial:
            provisions.append(self.provision(
                "us-sec-ai-advisory",
                "Investment Advisers Act",
                "SEC AI Examination Priorities",
                "SEC Examination of AI in Investment Advisory",
                "Advisers using AI must disclose its use and manage resulting conflicts of "
                "interest consistent with fiduciary duty.",
                "This AI system is used in investment advisory or trading.",
            ))

        return provisions

    def build_artifacts(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ArtifactRequirement]:
        artifacts: list[ArtifactRequirement] = []

        if risk.level in (RiskLevel.HIGH, RiskLevel.LIMITED):
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.RISK_ASSESSMENT,
                name="AI Risk Assessment (NIST AI RMF Aligned)",
                required=risk.level == RiskLevel.HIGH,
                legal_basis="NIST AI RMF 1.0",
                description=(
                    "Risk assessment aligned with the NIST AI RMF Govern, Map, Measure, and "
                    "Manage functions."
                ),
            ))

        if is_genai_product(ctx):
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.TRANSPARENCY_NOTICE,
                name="AI-Generated Content Disclosure Policy",
                required=False,
                legal_basis="FTC Act Section 5, NIST AI 600-1",
                description=(
                    "Policies for disclosing AI-generated content to consumers: labeling, "
                    "watermarking, and disclosure practices."
                ),
                template_id="transparency-notice",
            ))

        if is_financial_services_ai(ctx):
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.MODEL_CARD,
                name="Model Documentation (SR 11-7 Aligned)",
                legal_basis="SR 11-7 / OCC 2011-12",
                description=(
                    "Model purpose, methodology, assumptions, limitations, performance metrics, "
                    "validation results, and monitoring plan."
                ),
                template_id="model-card",
            ))

        if involves_credit(ctx):
            artifacts.append(ArtifactRequirement(
                type=ArtifactType.BIAS_AUDIT,
                name="Fair Lending Analysis / Bias Audit",
                legal_basis="ECOA / Regulation B",
                description=(
                    "Disparate impact analysis of the credit model across protected classes, "
                    "with methodology, results, and remediation plan."
                ),
                template_id="bias-audit-nyc",
            ))

        return artifacts

    def build_actions(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ActionRequirement]:
        critical, important = ActionPriority.CRITICAL, ActionPriority.IMPORTANT
        actions = [self.action(
            "us-nist-rmf-alignment",
            "Align with NIST AI Risk Management Framework",
            "Implement AI risk management practices aligned with NIST AI RMF 1.0 across the "
            "Govern, Map, Measure, and Manage functions.",
            ActionPriority.RECOMMENDED, "NIST AI RMF 1.0", "4-8 weeks",
        )]

        if matching_ftc_triggers(ctx):
            actions.append(self.action(
                "us-ftc-transparency",
                "Ensure truthful AI marketing and transparency",
                "Review marketing claims about AI capabilities for accuracy and do not hide "
                "material AI involvement in decisions.",
                important, "FTC Act Section 5", "1-2 weeks",
            ))

        if is_high_impact_automated_decision(ctx):
            actions.append(self.action(
                "us-ftc-fair-ai-decisions",
                "Test and document AI decision fairness",
                "Test automated decisions for unfair outcomes across protected classes and "
                "document the methodology and results.",
                critical, "FTC Act Section 5", "3-6 weeks",
            ))

        if is_genai_product(ctx):
            actions.append(self.action(
                "us-nist-genai-risk-management",
                "Address NIST GenAI risk profile areas",
                "Map and address the 12 GenAI-specific risk areas in NIST AI 600-1 and document "
                "assessments and mitigations.",
                important, "NIST AI 600-1", "4-8 weeks",
            ))
            actions.append(self.action(
                "us-ftc-genai-disclosure",
                "Implement AI-generated content disclosure",
                "Label, watermark, or otherwise disclose AI-generated content, especially "
                "synthetic media that could be mistaken for real content.",
                important, "FTC Act Section 5, FTC GenAI Guidance", "2-4 weeks",
            ))

        if is_financial_services_ai(ctx):
            financial = {t.id for t in matching_financial_triggers(ctx)}
            if "sr-11-7-model-risk" in financial:
                actions.extend([
                    self.action(
                        "us-sr-11-7-governance",
                        "Establish AI model risk governance framework",
                        "Define a model inventory, risk appetite, ownership, and policies with "
                        "board and senior management oversight.",
                        critical, "SR 11-7 / OCC 2011-12", "4-8 weeks",
                    ),
                    self.action(
                        "us-sr-11-7-validation",
                        "Conduct independent model validation",
                        "Have people not involved in development validate conceptual soundness, "
                        "outcomes, and benchmarks, and re-validate on material change.",
                        critical, "SR 11-7 / OCC 2011-12", "4-8 weeks",
                    ),
                    self.action(
                        "us-sr-11-7-monitoring",
                        "Implement ongoing model performance monitoring",
                        "Track performance metrics and drift against validation benchmarks and "
                        "trigger re-validation on degradation.",
                        important, "SR 11-7 / OCC 2011-12", "3-6 weeks",
                    ),
                ])
            if "cfpb-fair-lending" in financial:
                actions.extend([
                    self.action(
                        "us-cfpb-adverse-action",
                        "Implement specific adverse action reason codes",
                        "Give applicants specific and accurate principal reasons for adverse "
                        "credit decisions, using explainability techniques where needed.",
                        critical, "ECOA Section 701(d), Regulation B §1002.9", "3-6 weeks",
                    ),
                    self.action(
                        "us-cfpb-fair-lending-testing",
                        "Conduct fair lending testing on AI credit model",
                        "Test the credit model for disparate impact across protected classes and "
                        "document methodology, results, and remediation.",
                        critical, "ECOA / Regulation B", "4-8 weeks",
                    ),
                ])
            if "sec-ai-advisory" in financial:
                actions.append(self.action(
                    "us-sec-ai-disclosure",
                    "Disclose AI use in investment advisory",
                    "Disclose AI use in recommendations, portfolio management, or trading and "
                    "address conflicts of interest.",
                    critical, "Investment Advisers Act", "2-4 weeks",
                ))

        return actions

    def build_timeline(
        self,
        ctx: ProductContext,
        risk: RiskClassification,
        secondary: SecondaryClassification | None,
    ) -> ComplianceTimeline:
        notes = [
            "US federal AI regulation is primarily enforcement-driven rather than prescriptive. "
            "There is no single effective date; obligations arise from existing statutes."
        ]
        if risk.level == RiskLevel.HIGH:
            notes.append(
                "Financial services AI is subject to immediate supervisory expectations. SR 11-7, "
                "ECOA fair lending, and SEC fiduciary duties apply now to AI/ML models."
            )
        if is_genai_product(ctx):
            notes.append(
                "NIST AI 600-1 (GenAI risk profile) was published in July 2024 and is "
                "increasingly referenced by federal agencies."
            )

        return ComplianceTimeline(
            effective_date=None,
            deadlines=(
                ComplianceDeadline(
                    date="2024-10-30",
                    description=(
                        "Executive Order 14110 established AI safety requirements for federal "
                        "government use and directed agencies to develop AI guidance."
                    ),
                    provision="EO 14110",
                    is_mandatory=False,
                ),
                ComplianceDeadline(
                    date="2024-07-26",
                    description="NIST AI 600-1 (Generative AI Profile) published.",
                    provision="NIST AI 600-1",
                    is_mandatory=False,
                ),
            ),
            notes=tuple(notes),
        )
