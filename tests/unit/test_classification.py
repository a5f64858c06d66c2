"""Tests for the shared tiered classifier: precedence, exceptions, dedupe."""

from regclear.jurisdictions.base import Tier, TierException, Trigger, classify, names, unique
from regclear.models import ProductContext, RiskClassification, RiskLevel


def keyword(word):
    return lambda ctx: word in ctx.lower_description


DEFAULT = RiskClassification(level=RiskLevel.MINIMAL, justification="nothing matched")

TIERS = (
    Tier(
        level=RiskLevel.UNACCEPTABLE,
        triggers=(Trigger("banned", "Banned", "Art 1", keyword("banned")),),
        justification=lambda matched: f"banned: {names(matched)}",
    ),
    Tier(
        level=RiskLevel.HIGH,
        triggers=(
            Trigger("alpha", "Alpha", "Art 2", keyword("alpha")),
            Trigger("beta", "Beta", "Art 2", keyword("beta")),
            Trigger("gamma", "Gamma", "Art 3", keyword("gamma")),
        ),
        justification=lambda matched: f"high: {names(matched)}",
        exception=TierException(
            applies=keyword("harmless"),
            level=RiskLevel.MINIMAL,
            justification="carve-out",
            provisions=("Art 2(3)",),
        ),
    ),
    Tier(
        level=RiskLevel.LIMITED,
        triggers=(Trigger("chat", "Chat", "Art 4", keyword("chat")),),
        justification=lambda matched: "limited",
        provisions=lambda matched: ["Art 4", "Art 4"],
    ),
)


def ctx(description):
    return ProductContext(description=description)


class TestClassify:

    def test_default_when_nothing_matches(self):
        assert classify(TIERS, ctx("spreadsheet"), DEFAULT) is DEFAULT

    def test_first_matching_tier_wins(self):
        risk = classify(TIERS, ctx("banned alpha chat"), DEFAULT)
        assert risk.level == RiskLevel.UNACCEPTABLE
        assert risk.categories == ("banned",)

    def test_all_triggers_in_tier_reported(self):
        risk = classify(TIERS, ctx("alpha and gamma"), DEFAULT)
        assert risk.level == RiskLevel.HIGH
        assert risk.categories == ("alpha", "gamma")
        assert risk.justification == "high: Alpha, Gamma"

    def test_provisions_default_to_distinct_frameworks(self):
        risk = classify(TIERS, ctx("alpha beta gamma"), DEFAULT)
        assert risk.provisions == ("Art 2", "Art 3")

    def test_custom_provisions_deduplicated(self):
        risk = classify(TIERS, ctx("chat"), DEFAULT)
        assert risk.provisions == ("Art 4",)

    def test_exception_downgrades_matched_tier(self):
        risk = classify(TIERS, ctx("harmless alpha"), DEFAULT)
        assert risk.level == RiskLevel.MINIMAL
        assert risk.justification == "carve-out"
        assert risk.provisions == ("Art 2(3)",)
        assert risk.categories == ("alpha",)

    def test_exception_ignored_when_tier_does_not_match(self):
        risk = classify(TIERS, ctx("harmless chat"), DEFAULT)
        assert risk.level == RiskLevel.LIMITED


class TestUnique:

    def test_preserves_first_seen_order(self):
        assert unique([3, 1, 3, 2, 1]) == [3, 1, 2]

    def test_key(self):
        items = [("a", 1), ("b", 1), ("c", 2)]
        assert unique(items, key=lambda i: i[1]) == [("a", 1), ("c", 2)]


class TestTrigger:

    def test_matches_coerces_to_bool(self):
        trigger = Trigger("x", "X", "Art 0", lambda ctx: ctx.description or None)
        assert trigger.matches(ctx("anything")) is True
