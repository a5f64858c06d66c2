"""
Cross-jurisdiction action planning.

Merges identical actions reported by several jurisdictions, marks overdue
ones, relates deadlines to the product's launch date and buckets the result
by priority.
"""

from datetime import date
from typing import Iterable

import structlog

from regclear.models.requirements import (
    ActionPlan,
    ActionPriority,
    ActionRequirement,
    JurisdictionResult,
)

logger = structlog.get_logger(__name__)

PRIORITY_RANK: dict[ActionPriority, int] = {
    ActionPriority.CRITICAL: 3,
    ActionPriority.IMPORTANT: 2,
    ActionPriority.RECOMMENDED: 1,
}

# Shorter efforts sort first within a bucket
EFFORT_ORDER: dict[str, int] = {
    "1-2 weeks": 1,
    "2-4 weeks": 2,
    "3-6 weeks": 3,
    "4-8 weeks": 4,
    "4-12 weeks": 5,
    "6-12 weeks": 6,
}
DEFAULT_EFFORT_RANK = 3

OVERDUE_PREFIX = "[OVERDUE - compliance required immediately] "
LAUNCH_PASSED_NOTE = " [DEADLINE PASSED relative to launch date]"


def parse_deadline(deadline: str | None) -> date | None:
    """ISO date at the start of `deadline`, or None for free-text deadlines."""
    if not deadline:
        return None
    try:
        return date.fromisoformat(deadline[:10])
    except ValueError:
        return None


def merge_actions(results: Iterable[JurisdictionResult]) -> list[ActionRequirement]:
    """
    One action per id across all jurisdictions, in first-seen order.

    Jurisdictions are unioned. When the same id appears with different
    priorities the higher-priority version wins.
    """
    merged: dict[str, ActionRequirement] = {}

    for result in results:
        for action in (*result.required_actions, *result.recommended_actions):
            existing = merged.get(action.id)
            if existing is None:
                jurisdictions = dict.fromkeys((*action.jurisdictions, result.jurisdiction))
                merged[action.id] = action.model_copy(update={"jurisdictions": tuple(jurisdictions)})
                continue

            jurisdictions = dict.fromkeys(
                (*existing.jurisdictions, *action.jurisdictions, result.jurisdiction)
            )
            winner = action if PRIORITY_RANK[action.priority] > PRIORITY_RANK[existing.priority] else existing
            merged[action.id] = winner.model_copy(update={"jurisdictions": tuple(jurisdictions)})

    return list(merged.values())


def annotate_overdue(
    actions: Iterable[ActionRequirement], today: date | None = None
) -> list[ActionRequirement]:
    """Escalate actions whose deadline has passed to critical and flag them."""
    today = today or date.today()

    annotated = []
    for action in actions:
        deadline = parse_deadline(action.deadline)
        if deadline is not None and deadline < today:
            action = action.model_copy(update={
                "description": OVERDUE_PREFIX + action.description,
                "priority": ActionPriority.CRITICAL,
            })
        annotated.append(action)
    return annotated


def annotate_with_launch_date(
    actions: Iterable[ActionRequirement], launch_date: str | None
) -> list[ActionRequirement]:
    """Append how each dated deadline falls relative to the launch date."""
    launch = parse_deadline(launch_date)
    if launch is None:
        return list(actions)

    annotated = []
    for action in actions:
        deadline = parse_deadline(action.deadline)
        if deadline is not None:
            days = (deadline - launch).days
            note = LAUNCH_PASSED_NOTE if days <= 0 else f" [deadline {days} days after launch]"
            action = action.model_copy(update={"description": action.description + note})
        annotated.append(action)
    return annotated


def _sort_key(action: ActionRequirement) -> tuple[date, int, str]:
    return (
        parse_deadline(action.deadline) or date.max,
        EFFORT_ORDER.get(action.estimated_effort or "", DEFAULT_EFFORT_RANK),
        action.title,
    )


def bucket_by_priority(actions: Iterable[ActionRequirement]) -> ActionPlan:
    """Split by priority; each bucket is ordered by deadline, then effort, then title."""
    buckets: dict[ActionPriority, list[ActionRequirement]] = {p: [] for p in ActionPriority}
    for action in actions:
        buckets[action.priority].append(action)

    return ActionPlan(
        critical=tuple(sorted(buckets[ActionPriority.CRITICAL], key=_sort_key)),
        important=tuple(sorted(buckets[ActionPriority.IMPORTANT], key=_sort_key)),
        recommended=tuple(sorted(buckets[ActionPriority.RECOMMENDED], key=_sort_key)),
    )


def prioritize_actions(
    results: Iterable[JurisdictionResult],
    launch_date: str | None = None,
    today: date | None = None,
) -> ActionPlan:
    """Merge, annotate and bucket the actions of every jurisdiction result."""
    actions = annotate_overdue(merge_actions(results), today)
    if launch_date:
        actions = annotate_with_launch_date(actions, launch_date)
    plan = bucket_by_priority(actions)

    logger.debug(
        "actions_prioritized",
        critical=len(plan.critical),
        important=len(plan.important),
        recommended=len(plan.recommended),
    )
    return plan
