"""Tests for cross-jurisdiction action planning."""

from datetime import date

import pytest

from regclear.jurisdictions.actions import (
    LAUNCH_PASSED_NOTE,
    OVERDUE_PREFIX,
    annotate_overdue,
    annotate_with_launch_date,
    bucket_by_priority,
    merge_actions,
    parse_deadline,
    prioritize_actions,
)
from regclear.models import (
    ActionPriority,
    ActionRequirement,
    JurisdictionResult,
    RiskClassification,
    RiskLevel,
)

BEFORE_DEADLINES = date(2025, 1, 1)


def make_action(id, priority=ActionPriority.IMPORTANT, jurisdiction="eu-ai-act", **kwargs):
    kwargs.setdefault("title", id.replace("-", " ").title())
    kwargs.setdefault("description", f"Do {id}")
    return ActionRequirement(
        id=id,
        priority=priority,
        legal_basis="Article 9",
        jurisdictions=(jurisdiction,),
        **kwargs,
    )


def make_result(jurisdiction, *actions):
    return JurisdictionResult(
        jurisdiction=jurisdiction,
        risk_classification=RiskClassification(level=RiskLevel.HIGH, justification="test"),
        required_actions=tuple(a for a in actions if a.priority != ActionPriority.RECOMMENDED),
        recommended_actions=tuple(a for a in actions if a.priority == ActionPriority.RECOMMENDED),
    )


class TestParseDeadline:

    @pytest.mark.parametrize("value,expected", [
        ("2026-08-02", date(2026, 8, 2)),
        ("2026-06-30 (as amended)", date(2026, 6, 30)),
        ("Before deployment", None),
        ("", None),
        (None, None),
    ])
    def test_parse(self, value, expected):
        assert parse_deadline(value) == expected


class TestMergeActions:

    def test_unions_jurisdictions(self):
        results = [
            make_result("eu-ai-act", make_action("bias-testing")),
            make_result("us-co", make_action("bias-testing", jurisdiction="us-co")),
        ]
        merged = merge_actions(results)
        assert len(merged) == 1
        assert merged[0].jurisdictions == ("eu-ai-act", "us-co")

    def test_higher_priority_wins(self):
        results = [
            make_result("eu-gdpr", make_action(
                "human-review", ActionPriority.RECOMMENDED, "eu-gdpr", description="Optional review",
            )),
            make_result("us-co", make_action(
                "human-review", ActionPriority.CRITICAL, "us-co", description="Appeal with human review",
            )),
        ]
        merged = merge_actions(results)
        assert merged[0].priority == ActionPriority.CRITICAL
        assert merged[0].description == "Appeal with human review"
        assert merged[0].jurisdictions == ("eu-gdpr", "us-co")

    def test_first_seen_order(self):
        results = [
            make_result("eu-ai-act", make_action("b"), make_action("a")),
            make_result("eu-gdpr", make_action("c", jurisdiction="eu-gdpr"), make_action("a")),
        ]
        assert [a.id for a in merge_actions(results)] == ["b", "a", "c"]


class TestAnnotateOverdue:

    def test_past_deadline_escalated(self):
        action = make_action("fria", ActionPriority.IMPORTANT, deadline="2026-08-02")
        [annotated] = annotate_overdue([action], today=date(2026, 10, 19))
        assert annotated.priority == ActionPriority.CRITICAL
        assert annotated.description == OVERDUE_PREFIX + "Do fria"

    def test_future_and_undated_unchanged(self):
        actions = [
            make_action("fria", deadline="2026-08-02"),
            make_action("policy", deadline="Before deployment"),
            make_action("notice"),
        ]
        assert annotate_overdue(actions, today=BEFORE_DEADLINES) == actions

    def test_deadline_today_not_overdue(self):
        action = make_action("fria", deadline="2026-08-02")
        assert annotate_overdue([action], today=date(2026, 8, 2)) == [action]


class TestAnnotateWithLaunchDate:

    def test_days_after_launch(self):
        action = make_action("fria", deadline="2026-08-02")
        [annotated] = annotate_with_launch_date([action], "2026-07-23")
        assert annotated.description == "Do fria [deadline 10 days after launch]"

    def test_deadline_passed_at_launch(self):
        action = make_action("fria", deadline="2026-08-02")
        [annotated] = annotate_with_launch_date([action], "2026-08-02")
        assert annotated.description == "Do fria" + LAUNCH_PASSED_NOTE

    def test_invalid_launch_date_leaves_actions(self):
        actions = [make_action("fria", deadline="2026-08-02")]
        assert annotate_with_launch_date(actions, "next spring") == actions

    def test_undated_actions_unchanged(self):
        actions = [make_action("notice")]
        assert annotate_with_launch_date(actions, "2026-01-01") == actions


class TestBucketByPriority:

    def test_buckets_and_ordering(self):
        actions = [
            make_action("late", deadline="2027-01-01"),
            make_action("undated", estimated_effort="1-2 weeks"),
            make_action("long", deadline="2026-08-02", estimated_effort="6-12 weeks"),
            make_action("short", deadline="2026-08-02", estimated_effort="1-2 weeks"),
            make_action("nice", ActionPriority.RECOMMENDED),
            make_action("now", ActionPriority.CRITICAL),
        ]
        plan = bucket_by_priority(actions)
        assert [a.id for a in plan.critical] == ["now"]
        assert [a.id for a in plan.important] == ["short", "long", "late", "undated"]
        assert [a.id for a in plan.recommended] == ["nice"]

    def test_unknown_effort_sorts_as_middle(self):
        actions = [
            make_action("b", estimated_effort="4-8 weeks"),
            make_action("a", estimated_effort="ongoing"),
            make_action("c", estimated_effort="2-4 weeks"),
        ]
        assert [a.id for a in bucket_by_priority(actions).important] == ["c", "a", "b"]

    def test_title_breaks_ties(self):
        actions = [make_action("x", title="Zeta"), make_action("y", title="Alpha")]
        assert [a.title for a in bucket_by_priority(actions).important] == ["Alpha", "Zeta"]


class TestPrioritizeActions:

    def test_overdue_moves_to_critical(self):
        results = [make_result("eu-ai-act", make_action("fria", deadline="2026-08-02"))]
        plan = prioritize_actions(results, today=date(2026, 10, 19))
        assert [a.id for a in plan.critical] == ["fria"]
        assert plan.important == ()

    def test_launch_date_annotation(self):
        results = [make_result("eu-ai-act", make_action("fria", deadline="2026-08-02"))]
        plan = prioritize_actions(results, launch_date="2026-09-01", today=BEFORE_DEADLINES)
        assert plan.important[0].description.endswith(LAUNCH_PASSED_NOTE)

    def test_to_dict(self):
        results = [make_result("eu-ai-act", make_action("fria", ActionPriority.RECOMMENDED))]
        data = prioritize_actions(results, today=BEFORE_DEADLINES).to_dict()
        assert data["recommended"][0]["id"] == "fria"
        assert data["critical"] == []
