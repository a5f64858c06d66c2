"""
Requirement mapper.

Runs every target jurisdiction against a product context and aggregates
the per-jurisdiction results.
"""

from datetime import date
from typing import Any

import structlog
from pydantic import BaseModel, Field

from regclear.jurisdictions.actions import prioritize_actions
from regclear.jurisdictions.base import unique
from regclear.jurisdictions.conflicts import detect_conflicts
from regclear.jurisdictions.registry import JurisdictionRegistry
from regclear.models.context import ProductContext
from regclear.models.requirements import (
    ActionPlan,
    ActionPriority,
    ActionRequirement,
    ArtifactRequirement,
    ConflictTension,
    JurisdictionResult,
    RiskClassification,
)

logger = structlog.get_logger(__name__)

REQUIRED_PRIORITIES = (ActionPriority.CRITICAL, ActionPriority.IMPORTANT)


class MappingError(BaseModel):
    jurisdiction: str
    error: str


class MappingResult(BaseModel):
    results: list[JurisdictionResult] = Field(default_factory=list)
    errors: list[MappingError] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class AggregatedRequirements(BaseModel):
    """Cross-jurisdiction totals."""

    all_artifacts: list[ArtifactRequirement] = Field(default_factory=list)
    all_actions: list[ActionRequirement] = Field(default_factory=list)
    jurisdictions: list[str] = Field(default_factory=list)
    highest_risk: RiskClassification | None = None
    total_artifacts: int = 0
    total_actions: int = 0
    action_plan: ActionPlan = Field(default_factory=ActionPlan)
    conflicts: list[ConflictTension] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "jurisdictions": self.jurisdictions,
            "highest_risk": self.highest_risk.model_dump(mode="json") if self.highest_risk else None,
            "total_artifacts": self.total_artifacts,
            "total_actions": self.total_actions,
            "action_plan": self.action_plan.to_dict(),
            "conflicts": [c.model_dump(mode="json") for c in self.conflicts],
        }


class RequirementMapper:
    """Maps product contexts to per-jurisdiction requirements."""

    def __init__(self, registry: JurisdictionRegistry):
        self.registry = registry

    def map_jurisdiction(self, ctx: ProductContext, jurisdiction_id: str) -> JurisdictionResult:
        """
        Run one jurisdiction's contract operations.

        Raises:
            JurisdictionNotFoundError: If the id is not registered
        """
        module = self.registry.get(jurisdiction_id)

        risk = module.risk_level(ctx)
        actions = module.actions(ctx)

        result = JurisdictionResult(
            jurisdiction=jurisdiction_id,
            jurisdiction_name=module.name,
            provisions=tuple(module.provisions(ctx)),
            risk_classification=risk,
            required_artifacts=tuple(module.artifacts(ctx)),
            required_actions=tuple(a for a in actions if a.priority in REQUIRED_PRIORITIES),
            recommended_actions=tuple(
                a for a in actions if a.priority == ActionPriority.RECOMMENDED
            ),
            timeline=module.timeline(ctx),
            secondary_classification=module.secondary_classification(ctx),
        )

        logger.debug(
            "jurisdiction_mapped",
            jurisdiction=jurisdiction_id,
            risk=risk.level.value,
            artifacts=len(result.required_artifacts),
            actions=len(actions),
        )
        return result

    def map_all_jurisdictions(self, ctx: ProductContext) -> MappingResult:
        """Map every target jurisdiction. Failures are collected per jurisdiction, not raised."""
        mapping = MappingResult()

        for jurisdiction_id in ctx.target_jurisdictions:
            try:
                mapping.results.append(self.map_jurisdiction(ctx, jurisdiction_id))
            except Exception as e:
                logger.warning(
                    "jurisdiction_mapping_failed", jurisdiction=jurisdiction_id, error=str(e)
                )
                mapping.errors.append(MappingError(jurisdiction=jurisdiction_id, error=str(e)))

        logger.info(
            "jurisdictions_mapped",
            mapped=len(mapping.results),
            failed=len(mapping.errors),
        )
        return mapping

    @staticmethod
    def aggregate_requirements(
        results: list[JurisdictionResult],
        ctx: ProductContext | None = None,
        today: date | None = None,
    ) -> AggregatedRequirements:
        """
        Aggregate results across jurisdictions.

        Totals count distinct artifacts by (type, name, legal basis) and
        distinct actions by id. The highest risk tier wins; the first result
        wins on ties.

        The action plan merges actions across jurisdictions and marks overdue
        ones against `today`. With a context, deadlines are also related to
        its launch date and cross-jurisdiction conflicts are detected.
        """
        all_artifacts = [a for r in results for a in r.required_artifacts]
        all_actions = [
            a for r in results for a in (*r.required_actions, *r.recommended_actions)
        ]

        highest: RiskClassification | None = None
        for result in results:
            risk = result.risk_classification
            if highest is None or risk.level > highest.level:
                highest = risk

        return AggregatedRequirements(
            all_artifacts=all_artifacts,
            all_actions=all_actions,
            jurisdictions=[r.jurisdiction for r in results],
            highest_risk=highest,
            total_artifacts=len(unique(all_artifacts, key=lambda a: (a.type, a.name, a.legal_basis))),
            total_actions=len(unique(all_actions, key=lambda a: a.id)),
            action_plan=prioritize_actions(
                results, launch_date=ctx.launch_date if ctx else None, today=today
            ),
            conflicts=detect_conflicts(ctx, results) if ctx else [],
        )
