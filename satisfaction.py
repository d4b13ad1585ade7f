"""
Customer satisfaction aggregation.

Works on approved reviews whose booking falls inside a report window,
optionally narrowed to one technician. Produces the headline figures
(review count, average rating, 4+ star share), a 5→1 star distribution,
per-category averages from the typed category scores, the top-rated
technicians and the review response rate.
"""
from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass

import structlog

from metrics import average_rating
from rates import count_high_ratings, response_rate, satisfaction_rate
from record_store import RecordStore
from records import BookingStatus, RatingReview, ReportWindow, ReviewCategory, Technician

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RatingBucket:
    stars: int
    count: int
    percentage: float


@dataclass(frozen=True)
class CategoryAverage:
    category_id: int
    name: str
    average_score: float
    score_count: int


@dataclass(frozen=True)
class RatedTechnician:
    technician_id: int
    name: str
    average_rating: float
    review_count: int


@dataclass(frozen=True)
class SatisfactionReport:
    window: ReportWindow
    technician_id: int | None
    total_reviews: int
    average_rating: float
    satisfaction_rate: float
    response_rate: str
    distribution: tuple[RatingBucket, ...]
    categories: tuple[CategoryAverage, ...]
    top_rated: tuple[RatedTechnician, ...]


def rating_distribution(reviews: Sequence[RatingReview]) -> tuple[RatingBucket, ...]:
    """
    Count reviews per star, 5 down to 1.

    A review lands in star i when i − 0.5 ≤ rating ≤ i + 0.49, so 4.5 counts
    as 5 stars and 4.49 as 4. Unrated reviews are not counted.
    """
    ratings = [r.overall_rating for r in reviews if r.overall_rating is not None]
    total = len(ratings)
    buckets = []
    for stars in range(5, 0, -1):
        count = sum(1 for r in ratings if stars - 0.5 <= r <= stars + 0.49)
        pct = count / total * 100 if total else 0.0
        buckets.append(RatingBucket(stars=stars, count=count, percentage=pct))
    return tuple(buckets)


def category_averages(
    reviews: Sequence[RatingReview],
    categories: Sequence[ReviewCategory],
) -> tuple[CategoryAverage, ...]:
    """Average score per category, in the order categories are given; 0 when unscored."""
    scores: dict[int, list[int]] = defaultdict(list)
    for review in reviews:
        for cs in review.category_scores:
            scores[cs.category_id].append(cs.score)

    results = []
    for category in categories:
        values = scores.get(category.id, [])
        avg = round(sum(values) / len(values), 2) if values else 0.0
        results.append(
            CategoryAverage(
                category_id=category.id,
                name=category.name,
                average_score=avg,
                score_count=len(values),
            )
        )
    return tuple(results)


def top_rated_technicians(
    reviews: Sequence[RatingReview],
    technicians: Sequence[Technician],
    limit: int = 10,
) -> tuple[RatedTechnician, ...]:
    """Technicians with at least one review, best average first."""
    by_tech: dict[int, list[RatingReview]] = defaultdict(list)
    for review in reviews:
        by_tech[review.technician_id].append(review)

    rated = [
        RatedTechnician(
            technician_id=t.id,
            name=t.name,
            average_rating=round(average_rating(by_tech[t.id]), 2),
            review_count=len(by_tech[t.id]),
        )
        for t in technicians
        if by_tech.get(t.id)
    ]
    rated.sort(key=lambda r: r.average_rating, reverse=True)
    return tuple(rated[:limit])


def build_satisfaction_report(
    store: RecordStore,
    window: ReportWindow,
    technician_id: int | None = None,
    top_rated_limit: int = 10,
) -> SatisfactionReport:
    reviews = store.query_reviews(technician_id=technician_id, date_range=window, approved_only=True)
    completed = store.query_bookings(
        technician_id=technician_id,
        date_range=window,
        status=BookingStatus.COMPLETED,
    )

    report = SatisfactionReport(
        window=window,
        technician_id=technician_id,
        total_reviews=len(reviews),
        average_rating=round(average_rating(reviews), 2),
        satisfaction_rate=satisfaction_rate(
            len(reviews), count_high_ratings(r.overall_rating for r in reviews)
        ),
        response_rate=response_rate(len(completed), len(reviews)),
        distribution=rating_distribution(reviews),
        categories=category_averages(reviews, store.list_review_categories()),
        top_rated=top_rated_technicians(
            reviews, store.list_technicians(technician_id), top_rated_limit
        ),
    )

    log.info(
        "satisfaction.generated",
        technician_id=technician_id,
        window_start=window.start.isoformat(),
        window_end=window.end.isoformat(),
        reviews=report.total_reviews,
    )
    return report
