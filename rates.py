"""
Percentage metrics derived from aggregated counts.

Every function here is zero-denominator safe: an empty population yields a
zero rate, never NaN, Infinity or None.
"""
from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

import structlog

log = structlog.get_logger(__name__)

HIGH_RATING_THRESHOLD = 4.0

_ONE_DECIMAL = Decimal("0.1")


def _one_decimal(value: float) -> str:
    """Round half-up to one decimal place ("12.25" → "12.3")."""
    return str(Decimal(str(value)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def completion_rate(total_jobs: int, completed_jobs: int) -> str:
    """
    Completed ÷ total × 100, formatted with one decimal place.

    Zero jobs returns the literal "0" (not "0.0"). A ratio above 100 % can
    only come from a lifetime job counter lagging the live completed count;
    it is clamped and logged so the drift stays visible.
    """
    if total_jobs <= 0:
        return "0"

    pct = completed_jobs / total_jobs * 100
    if pct > 100:
        log.warning(
            "rates.completion_rate_clamped",
            total_jobs=total_jobs,
            completed_jobs=completed_jobs,
        )
        pct = 100.0
    return _one_decimal(max(pct, 0.0))


def count_high_ratings(ratings: Iterable[float | None]) -> int:
    """Count ratings at or above 4 stars. Missing ratings never count."""
    return sum(1 for r in ratings if r is not None and r >= HIGH_RATING_THRESHOLD)


def satisfaction_rate(total_reviews: int, high_rating_count: int) -> float:
    """Share of reviews rated 4+ as a percentage; 0 when there are no reviews."""
    if total_reviews <= 0:
        return 0.0
    return high_rating_count / total_reviews * 100


def response_rate(completed_bookings: int, total_reviews: int) -> str:
    """Reviews received per completed booking, e.g. "62.5%"; "0%" with no completed bookings."""
    if completed_bookings <= 0:
        return "0%"
    return f"{_one_decimal(total_reviews / completed_bookings * 100)}%"


def trend_percent(current: float, previous: float) -> float:
    """Change against the previous period in percent, one decimal; 0 when nothing came before."""
    if previous <= 0:
        return 0.0
    return float(_one_decimal((current - previous) / previous * 100))


# ---------------------------------------------------------------------------
# Badge colours
# ---------------------------------------------------------------------------


def rating_color(average: float) -> str:
    if average >= 4.5:
        return "success"
    if average >= 4.0:
        return "warning"
    return "danger"


def satisfaction_color(rate: float) -> str:
    if rate >= 90:
        return "success"
    if rate >= 75:
        return "warning"
    return "danger"
