"""
Regulatory requirement models.

Outputs of the jurisdiction modules: risk classification, provisions,
required documents, required actions and compliance timelines.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RequirementModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class RiskLevel(str, Enum):
    """
    Risk tiers within one jurisdiction.

    Totally ordered: unacceptable > high > limited > minimal > undetermined.
    """

    UNACCEPTABLE = "unacceptable"
    HIGH = "high"
    LIMITED = "limited"
    MINIMAL = "minimal"
    UNDETERMINED = "undetermined"

    @property
    def rank(self) -> int:
        return RISK_ORDER[self]

    def __gt__(self, other: object) -> bool:
        if isinstance(other, RiskLevel):
            return self.rank > other.rank
        return NotImplemented

    def __ge__(self, other: object) -> bool:
        if isinstance(other, RiskLevel):
            return self.rank >= other.rank
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, RiskLevel):
            return self.rank < other.rank
        return NotImplemented

    def __le__(self, other: object) -> bool:
        if isinstance(other, RiskLevel):
            return self.rank <= other.rank
        return NotImplemented


RISK_ORDER: dict[RiskLevel, int] = {
    RiskLevel.UNACCEPTABLE: 4,
    RiskLevel.HIGH: 3,
    RiskLevel.LIMITED: 2,
    RiskLevel.MINIMAL: 1,
    RiskLevel.UNDETERMINED: 0,
}


class ArtifactType(str, Enum):
    """Taxonomy of compliance documents."""
    DPIA = "dpia"
    RISK_CLASSIFICATION = "risk-classification"
    CONFORMITY_ASSESSMENT = "conformity-assessment"
    MODEL_CARD = "model-card"
    TRANSPARENCY_NOTICE = "transparency-notice"
    BIAS_AUDIT = "bias-audit"
    RISK_ASSESSMENT = "risk-assessment"
    ALGORITHMIC_IMPACT = "algorithmic-impact"
    GPAI_TECHNICAL_DOCUMENTATION = "gpai-technical-documentation"
    GPAI_TRAINING_DATA_SUMMARY = "gpai-training-data-summary"
    GPAI_SYSTEMIC_RISK_ASSESSMENT = "gpai-systemic-risk-assessment"
    GENAI_CONTENT_POLICY = "genai-content-policy"


class ActionPriority(str, Enum):
    CRITICAL = "critical"
    IMPORTANT = "important"
    RECOMMENDED = "recommended"


class RiskClassification(RequirementModel):
    """Result of classifying a product within one jurisdiction."""

    level: RiskLevel
    justification: str
    categories: tuple[str, ...] = Field(default=(), description="Matched category/trigger ids")
    provisions: tuple[str, ...] = Field(default=(), description="Cited provisions")


class ApplicableProvision(RequirementModel):
    id: str
    law: str
    article: str
    title: str
    summary: str
    relevance: str
    url: str | None = None


class ArtifactRequirement(RequirementModel):
    """A compliance document a jurisdiction requires (or recommends)."""

    type: ArtifactType
    name: str
    required: bool = True
    legal_basis: str
    description: str
    template_id: str | None = None


class ActionRequirement(RequirementModel):
    id: str
    title: str
    description: str
    priority: ActionPriority
    legal_basis: str
    jurisdictions: tuple[str, ...] = ()
    estimated_effort: str | None = None
    deadline: str | None = None


class ComplianceDeadline(RequirementModel):
    date: str
    description: str
    provision: str
    is_mandatory: bool = True


class ComplianceTimeline(RequirementModel):
    effective_date: str | None = None
    deadlines: tuple[ComplianceDeadline, ...] = ()
    notes: tuple[str, ...] = ()


class SecondaryClassification(RequirementModel):
    """
    Cross-cutting status computed independently of the primary tier.

    For the EU AI Act this is the general-purpose AI model status.
    """

    kind: str = Field(..., description="Classification kind, e.g. 'gpai'")
    applies: bool = True
    role: str | None = None
    is_open_source: bool = False
    has_systemic_risk: bool = False
    justification: str = ""
    provisions: tuple[str, ...] = ()


class JurisdictionResult(RequirementModel):
    """Everything one jurisdiction says about one product."""

    jurisdiction: str
    jurisdiction_name: str = ""
    provisions: tuple[ApplicableProvision, ...] = ()
    risk_classification: RiskClassification
    required_artifacts: tuple[ArtifactRequirement, ...] = ()
    required_actions: tuple[ActionRequirement, ...] = ()
    recommended_actions: tuple[ActionRequirement, ...] = ()
    timeline: ComplianceTimeline = Field(default_factory=ComplianceTimeline)
    secondary_classification: SecondaryClassification | None = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ActionPlan(RequirementModel):
    """Actions across every jurisdiction, bucketed by effective priority."""

    critical: tuple[ActionRequirement, ...] = ()
    important: tuple[ActionRequirement, ...] = ()
    recommended: tuple[ActionRequirement, ...] = ()

    @property
    def all_actions(self) -> list[ActionRequirement]:
        return [*self.critical, *self.important, *self.recommended]

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ConflictTension(RequirementModel):
    """An area where two or more jurisdictions pull in different directions."""

    id: str
    title: str
    jurisdictions: tuple[str, ...]
    description: str
    recommendation: str
