"""
Read-only record store for technicians, bookings, earnings and reviews.

Design:
  - One snapshot per store instance; the dataset is loaded once and never
    mutated, so concurrent report requests need no coordination
  - Query methods mirror the filters the reports need (technician, report
    window, status) and return lists in dataset order, which callers rely on
    for stable tie-breaking
  - Earnings and reviews have no date of their own: the report window is
    applied through the linked booking's scheduled date
  - Load failures surface as typed exceptions with scrubbed messages — the
    raw file content never reaches the caller

Usage:
    store = open_record_store(settings)
    bookings = store.query_bookings(technician_id=3, date_range=window)
"""
from __future__ import annotations

import json
from pathlib import Path

import structlog
from pydantic import ValidationError

from config import Settings
from records import (
    Booking,
    BookingStatus,
    Dataset,
    Earning,
    PaymentStatus,
    RatingReview,
    ReportWindow,
    ReviewCategory,
    Technician,
)

log = structlog.get_logger(__name__)

_PROJECT_DIR = Path(__file__).parent


# ---------------------------------------------------------------------------
# Typed exceptions
# ---------------------------------------------------------------------------


class RecordStoreError(Exception):
    """Base class for all record store errors."""


class RecordStoreUnavailableError(RecordStoreError):
    """Raised when the dataset file is missing or unreadable."""


class RecordStoreFormatError(RecordStoreError):
    """Raised when the dataset is not valid JSON or fails record validation."""

    def __init__(self, message: str, error_count: int = 0) -> None:
        super().__init__(message)
        self.error_count = error_count


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class RecordStore:
    """Queryable, read-only view over a Dataset snapshot."""

    def __init__(self, dataset: Dataset) -> None:
        self._data = dataset
        self._bookings_by_id: dict[int, Booking] = {b.id: b for b in dataset.bookings}

    @property
    def dataset(self) -> Dataset:
        return self._data

    # ------------------------------------------------------------------
    # Technicians
    # ------------------------------------------------------------------

    def list_technicians(self, technician_id: int | None = None) -> list[Technician]:
        """All technicians, or the one matching technician_id (empty if unknown)."""
        if technician_id is None:
            return list(self._data.technicians)
        return [t for t in self._data.technicians if t.id == technician_id]

    def get_technician(self, technician_id: int) -> Technician | None:
        matches = self.list_technicians(technician_id)
        return matches[0] if matches else None

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    def query_bookings(
        self,
        technician_id: int | None = None,
        date_range: ReportWindow | None = None,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        results = []
        for booking in self._data.bookings:
            if technician_id is not None and booking.technician_id != technician_id:
                continue
            if date_range is not None and not date_range.contains(booking.scheduled_date):
                continue
            if status is not None and booking.status != status:
                continue
            results.append(booking)
        return results

    # ------------------------------------------------------------------
    # Earnings
    # ------------------------------------------------------------------

    def query_earnings(
        self,
        technician_id: int | None = None,
        date_range: ReportWindow | None = None,
        payment_status: PaymentStatus | None = None,
    ) -> list[Earning]:
        results = []
        for earning in self._data.earnings:
            if technician_id is not None and earning.technician_id != technician_id:
                continue
            if payment_status is not None and earning.payment_status != payment_status:
                continue
            if date_range is not None and not self._booking_in_window(earning.booking_id, date_range):
                continue
            results.append(earning)
        return results

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    def query_reviews(
        self,
        technician_id: int | None = None,
        date_range: ReportWindow | None = None,
        approved_only: bool = True,
    ) -> list[RatingReview]:
        results = []
        for review in self._data.reviews:
            if approved_only and not review.is_approved:
                continue
            if technician_id is not None and review.technician_id != technician_id:
                continue
            if date_range is not None and not self._booking_in_window(review.booking_id, date_range):
                continue
            results.append(review)
        return results

    def list_review_categories(self, active_only: bool = True) -> list[ReviewCategory]:
        """Review categories ordered by sort_order, then id."""
        categories = [c for c in self._data.review_categories if c.is_active or not active_only]
        return sorted(categories, key=lambda c: (c.sort_order, c.id))

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _booking_in_window(self, booking_id: int, window: ReportWindow) -> bool:
        """Records whose booking is missing from the snapshot never match a window."""
        booking = self._bookings_by_id.get(booking_id)
        return booking is not None and window.contains(booking.scheduled_date)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_record_store(path: str | Path) -> RecordStore:
    """
    Read a JSON dataset and return a store over it.

    Raises:
        RecordStoreUnavailableError: file missing or unreadable.
        RecordStoreFormatError: invalid JSON or records failing validation.
    """
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        log.error("record_store.missing", path=str(path))
        raise RecordStoreUnavailableError(f"Dataset file not found: {path.name}")
    except OSError:
        log.error("record_store.unreadable", path=str(path))
        raise RecordStoreUnavailableError(f"Dataset file could not be read: {path.name}")

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        log.error("record_store.invalid_json", path=str(path), line=exc.lineno)
        raise RecordStoreFormatError(f"Dataset is not valid JSON (line {exc.lineno})")

    try:
        dataset = Dataset.model_validate(payload)
    except ValidationError as exc:
        # Never include input values, they may contain booking details
        log.error("record_store.invalid_records", path=str(path), error_count=exc.error_count())
        raise RecordStoreFormatError(
            f"Dataset has {exc.error_count()} invalid record field(s)",
            error_count=exc.error_count(),
        )

    log.info(
        "record_store.loaded",
        technicians=len(dataset.technicians),
        bookings=len(dataset.bookings),
        earnings=len(dataset.earnings),
        reviews=len(dataset.reviews),
    )
    return RecordStore(dataset)


def open_record_store(settings: Settings) -> RecordStore:
    """Load the configured dataset. Relative paths resolve against the project directory."""
    path = Path(settings.data_file)
    if not path.is_absolute():
        path = _PROJECT_DIR / path
    return load_record_store(path)
