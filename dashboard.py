"""
Admin dashboard overview figures.

Booking volume and revenue here follow the booking's creation date (when it
was booked), not its scheduled date. Bookings without a creation timestamp
are left out of the today / this-month figures.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from metrics import average_rating
from rates import rating_color
from record_store import RecordStore
from records import BookingStatus, PaymentStatus

PENDING_ALERT_THRESHOLD = 5


@dataclass(frozen=True)
class DashboardOverview:
    generated_at: datetime
    today_bookings: int
    today_revenue: float
    monthly_bookings: int
    monthly_revenue: float
    active_technicians: int
    average_rating: float
    total_paid_earnings: float
    pending_bookings: int

    @property
    def rating_color(self) -> str:
        return rating_color(self.average_rating)

    @property
    def pending_color(self) -> str:
        return "danger" if self.pending_bookings > PENDING_ALERT_THRESHOLD else "primary"


def build_overview(store: RecordStore, now: datetime) -> DashboardOverview:
    today = now.date()
    bookings = store.query_bookings()

    created_today = [b for b in bookings if b.created_at and b.created_at.date() == today]
    created_this_month = [
        b
        for b in bookings
        if b.created_at
        and b.created_at.year == today.year
        and b.created_at.month == today.month
    ]

    def paid_total(items) -> float:
        return sum(b.total_amount for b in items if b.payment_status == PaymentStatus.PAID)

    return DashboardOverview(
        generated_at=now,
        today_bookings=len(created_today),
        today_revenue=paid_total(created_today),
        monthly_bookings=len(created_this_month),
        monthly_revenue=paid_total(created_this_month),
        active_technicians=sum(1 for t in store.list_technicians() if t.is_active),
        average_rating=average_rating(store.query_reviews(approved_only=True)),
        total_paid_earnings=sum(
            e.total_amount for e in store.query_earnings(payment_status=PaymentStatus.PAID)
        ),
        pending_bookings=len(store.query_bookings(status=BookingStatus.PENDING)),
    )
