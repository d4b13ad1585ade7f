"""
Record types read from the record store.

These mirror the booking system's tables but carry only the columns the
reports need. Customer contact fields are absent: nothing in
this package can leak what it never loads.

All models are frozen — the reporting subsystem reads records, never writes.
"""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    CANCEL_REQUESTED = "cancel_requested"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    UNPAID = "unpaid"


class ReportWindow(NamedTuple):
    """Inclusive [start, end] calendar-date range. A start after the end contains no days."""

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def days(self) -> int:
        return max((self.end - self.start).days + 1, 0)


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Technician(_Record):
    id: int
    name: str = Field(..., min_length=1)
    employee_id: str = ""
    total_jobs: int = Field(default=0, ge=0)  # lifetime counter, maintained by the booking system
    rating_average: float = Field(default=0.0, ge=0, le=5)
    is_active: bool = True
    is_available: bool = True


class Booking(_Record):
    id: int
    booking_number: str = ""
    technician_id: int | None = None
    scheduled_start_at: datetime
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    total_amount: float = Field(default=0.0, ge=0)
    created_at: datetime | None = None

    @property
    def scheduled_date(self) -> date:
        return self.scheduled_start_at.date()

    @property
    def is_completed(self) -> bool:
        return self.status == BookingStatus.COMPLETED


class Earning(_Record):
    id: int
    technician_id: int
    booking_id: int
    total_amount: float = Field(default=0.0, ge=0)
    commission_rate: float = Field(default=0.0, ge=0, le=100)  # percentage
    payment_status: PaymentStatus = PaymentStatus.PENDING


class CategoryScore(_Record):
    """One per-category score on a review (1–5)."""

    category_id: int
    score: int = Field(..., ge=1, le=5)


class RatingReview(_Record):
    id: int
    booking_id: int
    technician_id: int
    overall_rating: float | None = Field(default=None, ge=0, le=5)
    is_approved: bool = False
    category_scores: tuple[CategoryScore, ...] = ()


class ReviewCategory(_Record):
    id: int
    name: str
    is_active: bool = True
    sort_order: int = 0


class Dataset(_Record):
    """Everything the record store serves, as one point-in-time snapshot."""

    technicians: tuple[Technician, ...] = ()
    bookings: tuple[Booking, ...] = ()
    earnings: tuple[Earning, ...] = ()
    reviews: tuple[RatingReview, ...] = ()
    review_categories: tuple[ReviewCategory, ...] = ()
