"""
Per-technician metric aggregation.

Two computations, kept apart:

  window given → everything recomputed from bookings / earnings / reviews
                 whose (linked) booking is scheduled inside the window
  no window    → total jobs read from the technician's lifetime counter;
                 completed jobs, paid earnings and ratings computed unscoped

The lifetime counter is maintained elsewhere and can drift from the live
booking count. When it visibly lags (fewer total than completed jobs) a
warning is logged; the two numbers are never silently reconciled.

Each call issues exactly three store queries — bookings, paid earnings,
approved reviews — and groups the results in memory, so the cost does not
grow with the number of technicians in the report.
"""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import structlog

from record_store import RecordStore
from records import (
    Booking,
    Earning,
    PaymentStatus,
    RatingReview,
    ReportWindow,
    Technician,
)

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TechnicianMetrics:
    technician: Technician
    total_jobs: int
    completed_jobs: int
    total_earnings: float
    average_rating: float
    review_count: int


def average_rating(reviews: Iterable[RatingReview]) -> float:
    """Mean overall rating, skipping unrated reviews. 0.0 for an empty set."""
    ratings = [r.overall_rating for r in reviews if r.overall_rating is not None]
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def _group_by_technician(records: Iterable[Booking | Earning | RatingReview]) -> dict[int, list]:
    grouped: dict[int, list] = defaultdict(list)
    for record in records:
        if record.technician_id is not None:
            grouped[record.technician_id].append(record)
    return grouped


def aggregate_technicians(
    store: RecordStore,
    technicians: Sequence[Technician],
    window: ReportWindow | None = None,
) -> list[TechnicianMetrics]:
    """
    Aggregate jobs, completed jobs, paid earnings and average approved rating
    for each technician, in the order given.
    """
    if not technicians:
        return []

    # A single technician is filtered at the store; otherwise load once and group
    tech_filter = technicians[0].id if len(technicians) == 1 else None

    bookings = _group_by_technician(
        store.query_bookings(technician_id=tech_filter, date_range=window)
    )
    earnings = _group_by_technician(
        store.query_earnings(
            technician_id=tech_filter,
            date_range=window,
            payment_status=PaymentStatus.PAID,
        )
    )
    reviews = _group_by_technician(
        store.query_reviews(technician_id=tech_filter, date_range=window, approved_only=True)
    )

    results: list[TechnicianMetrics] = []
    for tech in technicians:
        tech_bookings = bookings.get(tech.id, [])
        tech_reviews = reviews.get(tech.id, [])
        completed = sum(1 for b in tech_bookings if b.is_completed)

        if window is None:
            total = tech.total_jobs
            if total < completed:
                log.warning(
                    "metrics.lifetime_counter_drift",
                    technician_id=tech.id,
                    lifetime_total_jobs=total,
                    live_completed_jobs=completed,
                )
        else:
            total = len(tech_bookings)

        results.append(
            TechnicianMetrics(
                technician=tech,
                total_jobs=total,
                completed_jobs=completed,
                total_earnings=sum(e.total_amount for e in earnings.get(tech.id, [])),
                average_rating=average_rating(tech_reviews),
                review_count=len(tech_reviews),
            )
        )

    log.debug(
        "metrics.aggregated",
        technicians=len(results),
        windowed=window is not None,
    )
    return results


def aggregate_technician(
    store: RecordStore,
    technician: Technician,
    window: ReportWindow | None = None,
) -> TechnicianMetrics:
    """Single-technician form of aggregate_technicians."""
    return aggregate_technicians(store, [technician], window)[0]
