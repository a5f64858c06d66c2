"""
Cross-jurisdiction tension detection.

Flags areas where target jurisdictions pull in different directions so
counsel can give specific guidance. Nothing here makes a legal
determination.
"""

from dataclasses import dataclass
from typing import Callable, Iterable

import structlog

from regclear.jurisdictions.helpers import (
    involves_credit,
    is_automated_decision_making,
    is_employment_context,
    is_financial_services_ai,
    processes_personal_data,
)
from regclear.models.context import ProductContext
from regclear.models.requirements import ConflictTension, JurisdictionResult

logger = structlog.get_logger(__name__)

FINANCIAL_REGIMES = ("eu-ai-act", "us-federal", "us-co")
BIAS_AUDIT_REGIMES = ("us-ny", "us-co")


@dataclass(frozen=True)
class ConflictRule:
    """
    One tension between regimes.

    `involved` returns the jurisdictions in tension for a context, or an
    empty tuple when the rule does not apply.
    """
    id: str
    title: str
    involved: Callable[[ProductContext, tuple[str, ...]], tuple[str, ...]]
    description: str
    recommendation: str

    def evaluate(self, ctx: ProductContext, targets: tuple[str, ...]) -> ConflictTension | None:
        jurisdictions = self.involved(ctx, targets)
        if not jurisdictions:
            return None
        return ConflictTension(
            id=self.id,
            title=self.title,
            jurisdictions=jurisdictions,
            description=self.description,
            recommendation=self.recommendation,
        )


def _financial_divergence(ctx: ProductContext, targets: tuple[str, ...]) -> tuple[str, ...]:
    if not is_financial_services_ai(ctx):
        return ()
    involved = tuple(j for j in targets if j in FINANCIAL_REGIMES)
    return involved if len(involved) > 1 else ()


def _bias_audit_demographics(ctx: ProductContext, targets: tuple[str, ...]) -> tuple[str, ...]:
    if "eu-gdpr" not in targets or not processes_personal_data(ctx):
        return ()
    if not (is_employment_context(ctx) or involves_credit(ctx)):
        return ()
    audits = tuple(j for j in targets if j in BIAS_AUDIT_REGIMES)
    return ("eu-gdpr", *audits) if audits else ()


def _automated_decision_appeal(ctx: ProductContext, targets: tuple[str, ...]) -> tuple[str, ...]:
    if not is_automated_decision_making(ctx):
        return ()
    if "eu-gdpr" in targets and "us-co" in targets:
        return ("eu-gdpr", "us-co")
    return ()


CONFLICT_RULES: tuple[ConflictRule, ...] = (
    ConflictRule(
        id="financial-ai-regulatory-divergence",
        title="Divergent financial AI regulatory approaches across jurisdictions",
        involved=_financial_divergence,
        description=(
            "Financial AI is regulated differently across the target jurisdictions. "
            "The EU AI Act classifies credit scoring and insurance pricing as high-risk "
            "(Annex III point 5) and requires a conformity assessment. US federal "
            "supervision centres on model risk management (SR 11-7) and adverse action "
            "notices under ECOA and FCRA. Colorado SB 24-205 adds a deployer risk "
            "management programme and annual impact assessments. Documentation, testing "
            "and governance expectations differ between these frameworks."
        ),
        recommendation=(
            "Adopt the most prescriptive requirement in each area as the compliance "
            "baseline: EU AI Act for classification and technical documentation, SR 11-7 "
            "for model validation, Colorado for consumer notices and appeals. Document how "
            "the baseline satisfies each jurisdiction."
        ),
    ),
    ConflictRule(
        id="gdpr-bias-audit-demographics",
        title="GDPR limits on demographic data vs. US bias audit requirements",
        involved=_bias_audit_demographics,
        description=(
            "Bias audits under NYC Local Law 144 and Colorado SB 24-205 compare outcomes "
            "across race, ethnicity and sex categories, which requires demographic data "
            "about the people assessed. GDPR Article 9 prohibits processing racial or "
            "ethnic origin data without an Article 9(2) condition, and Article 5(1)(c) "
            "requires data minimisation. Collecting demographics from EU data subjects "
            "to support a US audit needs its own legal basis."
        ),
        recommendation=(
            "Run bias audits on US population data, or on test data, where possible. "
            "If EU demographic data is needed, document the Article 9(2) condition, "
            "keep the data separate from production processing and cover it in the DPIA."
        ),
    ),
    ConflictRule(
        id="automated-decision-appeal-divergence",
        title="GDPR Article 22 vs. Colorado notice and appeal model for automated decisions",
        involved=_automated_decision_appeal,
        description=(
            "The product makes fully automated decisions with material effect. GDPR "
            "Article 22 gives data subjects the right not to be subject to such decisions "
            "unless an exception applies, and then requires human intervention on request. "
            "Colorado SB 24-205 allows consequential decisions by high-risk AI systems "
            "but requires pre-decision notice, a statement of reasons, correction of data "
            "and an appeal with human review where feasible. One decision flow may not "
            "meet both."
        ),
        recommendation=(
            "Design one human review path that satisfies Article 22(3) and the Colorado "
            "appeal right, and confirm with counsel which Article 22(2) exception applies "
            "to EU data subjects."
        ),
    ),
)


def detect_conflicts(
    ctx: ProductContext,
    results: Iterable[JurisdictionResult],
    rules: tuple[ConflictRule, ...] = CONFLICT_RULES,
) -> list[ConflictTension]:
    """
    Tensions between the successfully mapped jurisdictions, in rule order.

    Only jurisdictions present in `results` are considered, so a jurisdiction
    that failed to map never takes part in a tension.
    """
    targets = tuple(dict.fromkeys(r.jurisdiction for r in results))

    tensions = []
    for rule in rules:
        tension = rule.evaluate(ctx, targets)
        if tension is not None:
            tensions.append(tension)

    if tensions:
        logger.info("conflicts_detected", conflicts=[t.id for t in tensions])
    return tensions
