"""
Per-technician stats: the figures a technician sees about their own work.

Earnings are windowed through the linked booking's scheduled date, the same
way the performance report does it. "This week" is Monday–Sunday; the
previous week and month are the calendar periods just before the current
ones, used for the trend figures.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

import structlog

from metrics import average_rating
from query_validator import resolve_window
from rates import (
    count_high_ratings,
    rating_color,
    satisfaction_color,
    satisfaction_rate,
    trend_percent,
)
from record_store import RecordStore
from records import BookingStatus, PaymentStatus, ReportWindow, Technician

log = structlog.get_logger(__name__)

CHART_DAYS = 7

_ACTIVE_JOB_STATUSES = (BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS)


@dataclass(frozen=True)
class TechnicianStats:
    technician: Technician
    generated_at: datetime
    today_jobs: int
    pending_tasks: int
    week_earnings: float
    month_earnings: float
    year_earnings: float
    total_earnings: float
    pending_payments: float
    week_trend: float
    month_trend: float
    daily_earnings: tuple[float, ...]
    total_reviews: int
    average_rating: float
    satisfaction_rate: float

    @property
    def week_trend_color(self) -> str:
        return "success" if self.week_trend >= 0 else "danger"

    @property
    def month_trend_color(self) -> str:
        return "success" if self.month_trend >= 0 else "danger"

    @property
    def rating_color(self) -> str:
        return rating_color(self.average_rating)

    @property
    def satisfaction_color(self) -> str:
        return satisfaction_color(self.satisfaction_rate)


def build_technician_stats(
    store: RecordStore,
    technician_id: int,
    now: datetime,
) -> TechnicianStats | None:
    """Stats for one technician, or None when the id matches nobody."""
    technician = store.get_technician(technician_id)
    if technician is None:
        return None

    today = now.date()
    this_week = resolve_window("weekly", today)
    this_month = resolve_window("monthly", today)
    last_week = resolve_window("weekly", this_week.start - timedelta(days=1))
    last_month = resolve_window("monthly", this_month.start - timedelta(days=1))

    def paid(window: ReportWindow | None = None) -> float:
        earnings = store.query_earnings(
            technician_id=technician_id,
            date_range=window,
            payment_status=PaymentStatus.PAID,
        )
        return sum(e.total_amount for e in earnings)

    week_earnings = paid(this_week)
    month_earnings = paid(this_month)

    bookings = store.query_bookings(technician_id=technician_id)
    reviews = store.query_reviews(technician_id=technician_id, approved_only=True)

    stats = TechnicianStats(
        technician=technician,
        generated_at=now,
        today_jobs=sum(
            1 for b in bookings if b.scheduled_date == today and b.status in _ACTIVE_JOB_STATUSES
        ),
        pending_tasks=sum(1 for b in bookings if b.status == BookingStatus.CONFIRMED),
        week_earnings=week_earnings,
        month_earnings=month_earnings,
        year_earnings=paid(resolve_window("yearly", today)),
        total_earnings=paid(),
        pending_payments=sum(
            e.total_amount
            for e in store.query_earnings(
                technician_id=technician_id, payment_status=PaymentStatus.PENDING
            )
        ),
        week_trend=trend_percent(week_earnings, paid(last_week)),
        month_trend=trend_percent(month_earnings, paid(last_month)),
        daily_earnings=tuple(
            paid(ReportWindow(day, day))
            for day in (today - timedelta(days=n) for n in range(CHART_DAYS - 1, -1, -1))
        ),
        total_reviews=len(reviews),
        average_rating=average_rating(reviews),
        satisfaction_rate=satisfaction_rate(
            len(reviews), count_high_ratings(r.overall_rating for r in reviews)
        ),
    )

    log.info(
        "technician_stats.generated",
        technician_id=technician_id,
        today_jobs=stats.today_jobs,
        reviews=stats.total_reviews,
    )
    return stats
