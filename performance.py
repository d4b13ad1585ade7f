"""
Performance tier classification.

Tiers come from an ordered list of threshold rules. The first rule whose
completion-rate AND average-rating thresholds both hold wins; a technician
matching none of them falls through to NEEDS_IMPROVEMENT. There is no
blended score — 96 % completion with a 4.2 rating is "Good", not
"Excellent".
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PerformanceTier(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    NEEDS_IMPROVEMENT = "Needs Improvement"

    @property
    def color(self) -> str:
        """Badge colour used by the admin panel."""
        return _TIER_COLORS[self]


_TIER_COLORS = {
    PerformanceTier.EXCELLENT: "success",
    PerformanceTier.GOOD: "primary",
    PerformanceTier.AVERAGE: "warning",
    PerformanceTier.NEEDS_IMPROVEMENT: "danger",
}


@dataclass(frozen=True)
class TierRule:
    """Both minimums must be met (inclusive) for the rule to match."""

    min_completion_rate: float
    min_average_rating: float
    tier: PerformanceTier

    def matches(self, completion_rate: float, average_rating: float) -> bool:
        return (
            completion_rate >= self.min_completion_rate
            and average_rating >= self.min_average_rating
        )


TIER_RULES: tuple[TierRule, ...] = (
    TierRule(95.0, 4.5, PerformanceTier.EXCELLENT),
    TierRule(85.0, 4.0, PerformanceTier.GOOD),
    TierRule(70.0, 3.5, PerformanceTier.AVERAGE),
)

FALLBACK_TIER = PerformanceTier.NEEDS_IMPROVEMENT


def classify(
    completion_rate: float | str,
    average_rating: float,
    rules: tuple[TierRule, ...] = TIER_RULES,
) -> PerformanceTier:
    """
    Return the tier of the first matching rule.

    completion_rate may be the formatted string from rates.completion_rate
    ("90.0", "0") or a plain number.
    """
    rate = float(completion_rate)
    for rule in rules:
        if rule.matches(rate, average_rating):
            return rule.tier
    return FALLBACK_TIER
