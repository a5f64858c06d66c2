"""
Jurisdiction module contract and the shared tiered classifier.

Each jurisdiction declares its legal conditions as a table of named
triggers grouped into tiers. The classifier walks the tiers in precedence
order and stops at the first tier with any matching trigger. Inside that
tier every matching trigger is reported, so only the tier choice
short-circuits.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Hashable, Iterable, Sequence, TypeVar

from regclear.models.context import ProductContext
from regclear.models.requirements import (
    ActionPriority,
    ActionRequirement,
    ApplicableProvision,
    ArtifactRequirement,
    ComplianceTimeline,
    RiskClassification,
    RiskLevel,
    SecondaryClassification,
)

Predicate = Callable[[ProductContext], bool]
T = TypeVar("T")


@dataclass(frozen=True)
class Trigger:
    """A named legal condition over the product context."""
    id: str
    label: str
    framework: str
    predicate: Predicate

    def matches(self, ctx: ProductContext) -> bool:
        return bool(self.predicate(ctx))


@dataclass(frozen=True)
class TierException:
    """Downgrades a matched tier when `applies` holds (e.g. a no-significant-risk carve-out)."""
    applies: Predicate
    level: RiskLevel
    justification: str
    provisions: tuple[str, ...] = ()


def _trigger_ids(matched: Sequence[Trigger]) -> list[str]:
    return [t.id for t in matched]


def _trigger_frameworks(matched: Sequence[Trigger]) -> list[str]:
    return list(unique(t.framework for t in matched))


@dataclass(frozen=True)
class Tier:
    """
    One precedence level of a jurisdiction's classifier.

    `justification`, `provisions` and `categories` receive the matched
    triggers of this tier. By default categories are the trigger ids and
    provisions the distinct frameworks of the matched triggers.
    """
    level: RiskLevel
    triggers: tuple[Trigger, ...]
    justification: Callable[[Sequence[Trigger]], str]
    provisions: Callable[[Sequence[Trigger]], Iterable[str]] = _trigger_frameworks
    categories: Callable[[Sequence[Trigger]], Iterable[str]] = _trigger_ids
    exception: TierException | None = None

    def matching(self, ctx: ProductContext) -> list[Trigger]:
        return [t for t in self.triggers if t.matches(ctx)]


def classify(
    tiers: Sequence[Tier],
    ctx: ProductContext,
    default: RiskClassification,
) -> RiskClassification:
    """
    Classify a context against tiers in precedence order.

    Returns the classification of the first tier with at least one matching
    trigger, or `default` when nothing matches.
    """
    for tier in tiers:
        matched = tier.matching(ctx)
        if not matched:
            continue

        categories = tuple(unique(tier.categories(matched)))

        if tier.exception is not None and tier.exception.applies(ctx):
            return RiskClassification(
                level=tier.exception.level,
                justification=tier.exception.justification,
                categories=categories,
                provisions=tier.exception.provisions,
            )

        return RiskClassification(
            level=tier.level,
            justification=tier.justification(matched),
            categories=categories,
            provisions=tuple(unique(tier.provisions(matched))),
        )

    return default


def unique(items: Iterable[T], key: Callable[[T], Hashable] | None = None) -> list[T]:
    """Deduplicate preserving first-seen order."""
    seen: set[Hashable] = set()
    result: list[T] = []
    for item in items:
        k = key(item) if key else item
        if k in seen:
            continue
        seen.add(k)
        result.append(item)
    return result


def names(matched: Sequence[Trigger], sep: str = ", ") -> str:
    return sep.join(t.label for t in matched)


class JurisdictionModule(ABC):
    """
    Contract every jurisdiction implements.

    All operations are pure functions of the context: repeated calls with
    the same context return equal results.
    """

    id: str = ""
    name: str = ""

    @abstractmethod
    def risk_level(self, ctx: ProductContext) -> RiskClassification:
        ...

    @abstractmethod
    def provisions(self, ctx: ProductContext) -> list[ApplicableProvision]:
        ...

    @abstractmethod
    def artifacts(self, ctx: ProductContext) -> list[ArtifactRequirement]:
        ...

    @abstractmethod
    def actions(self, ctx: ProductContext) -> list[ActionRequirement]:
        ...

    @abstractmethod
    def timeline(self, ctx: ProductContext) -> ComplianceTimeline:
        ...

    def secondary_classification(self, ctx: ProductContext) -> SecondaryClassification | None:
        """Cross-cutting status independent of the primary tier. None if not applicable."""
        return None


class TieredJurisdiction(JurisdictionModule):
    """
    Jurisdiction whose risk level comes from a tier table.

    Subclasses provide `tiers`, `default_justification` and the `build_*`
    hooks. A secondary classification, when present, adds its own
    provisions, artifacts and actions on top of the primary ones.
    """

    tiers: tuple[Tier, ...] = ()
    default_justification: str = "No specific regulatory triggers were identified."

    # =========================================================================
    # Contract
    # =========================================================================

    def risk_level(self, ctx: ProductContext) -> RiskClassification:
        default = RiskClassification(
            level=RiskLevel.MINIMAL,
            justification=self.default_justification,
        )
        return classify(self.tiers, ctx, default)

    def provisions(self, ctx: ProductContext) -> list[ApplicableProvision]:
        risk = self.risk_level(ctx)
        items = list(self.build_provisions(ctx, risk))
        secondary = self.secondary_classification(ctx)
        if secondary is not None:
            items.extend(self.secondary_provisions(ctx, secondary))
        return unique(items, key=lambda p: p.id)

    def artifacts(self, ctx: ProductContext) -> list[ArtifactRequirement]:
        risk = self.risk_level(ctx)
        items = list(self.build_artifacts(ctx, risk))
        secondary = self.secondary_classification(ctx)
        if secondary is not None:
            items.extend(self.secondary_artifacts(ctx, secondary))
        return unique(items, key=lambda a: (a.type, a.name))

    def actions(self, ctx: ProductContext) -> list[ActionRequirement]:
        risk = self.risk_level(ctx)
        items = list(self.build_actions(ctx, risk))
        # A prohibited system gets the stop action and nothing else
        if risk.level == RiskLevel.UNACCEPTABLE:
            return unique(items, key=lambda a: a.id)
        secondary = self.secondary_classification(ctx)
        if secondary is not None:
            items.extend(self.secondary_actions(ctx, secondary))
        return unique(items, key=lambda a: a.id)

    def timeline(self, ctx: ProductContext) -> ComplianceTimeline:
        return self.build_timeline(
            ctx, self.risk_level(ctx), self.secondary_classification(ctx)
        )

    # =========================================================================
    # Builders
    # =========================================================================

    @abstractmethod
    def build_provisions(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ApplicableProvision]:
        ...

    @abstractmethod
    def build_artifacts(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ArtifactRequirement]:
        ...

    @abstractmethod
    def build_actions(
        self, ctx: ProductContext, risk: RiskClassification
    ) -> Iterable[ActionRequirement]:
        ...

    @abstractmethod
    def build_timeline(
        self,
        ctx: ProductContext,
        risk: RiskClassification,
        secondary: SecondaryClassification | None,
    ) -> ComplianceTimeline:
        ...

    def secondary_provisions(
        self, ctx: ProductContext, secondary: SecondaryClassification
    ) -> Iterable[ApplicableProvision]:
        return ()

    def secondary_artifacts(
        self, ctx: ProductContext, secondary: SecondaryClassification
    ) -> Iterable[ArtifactRequirement]:
        return ()

    def secondary_actions(
        self, ctx: ProductContext, secondary: SecondaryClassification
    ) -> Iterable[ActionRequirement]:
        return ()

    # =========================================================================
    # Helpers
    # =========================================================================

    def action(
        self,
        id: str,
        title: str,
        description: str,
        priority: ActionPriority,
        legal_basis: str,
        estimated_effort: str | None = None,
        deadline: str | None = None,
    ) -> ActionRequirement:
        """Build an action attributed to this jurisdiction."""
        return ActionRequirement(
            id=id,
            title=title,
            description=description,
            priority=priority,
            legal_basis=legal_basis,
            jurisdictions=(self.id,),
            estimated_effort=estimated_effort,
            deadline=deadline,
        )

    def provision(
        self,
        id: str,
        law: str,
        article: str,
        title: str,
        summary: str,
        relevance: str,
    ) -> ApplicableProvision:
        return ApplicableProvision(
            id=id, law=law, article=article, title=title, summary=summary, relevance=relevance
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"
