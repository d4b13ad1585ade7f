"""Root conftest — ensures project root is on sys.path for pytest.

Also points the log file at a scratch location so importing the tool modules
during collection never writes into the project's logs/ directory, and
provides a factory for in-memory record stores.
"""
from __future__ import annotations

import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

# Must happen before any local imports so tool modules can be collected.
sys.path.insert(0, str(Path(__file__).parent))

os.environ.setdefault("HVAC_LOG_FILE", str(Path(tempfile.gettempdir()) / "hvac_reports_test.log"))
os.environ.setdefault("HVAC_LOG_LEVEL", "DEBUG")

from record_store import RecordStore  # noqa: E402
from records import (  # noqa: E402
    Booking,
    CategoryScore,
    Dataset,
    Earning,
    RatingReview,
    ReviewCategory,
    Technician,
)


def tech(id: int, name: str, total_jobs: int = 0, **kw) -> Technician:
    return Technician(id=id, name=name, employee_id=f"TECH-{id:03d}", total_jobs=total_jobs, **kw)


def booking(id: int, technician_id: int | None, when: str, status: str = "completed",
            payment_status: str = "paid", amount: float = 1000.0, **kw) -> Booking:
    return Booking(
        id=id,
        booking_number=f"BK-{id:05d}",
        technician_id=technician_id,
        scheduled_start_at=datetime.fromisoformat(when),
        status=status,
        payment_status=payment_status,
        total_amount=amount,
        **kw,
    )


def earning(id: int, technician_id: int, booking_id: int, amount: float,
            payment_status: str = "paid") -> Earning:
    return Earning(
        id=id,
        technician_id=technician_id,
        booking_id=booking_id,
        total_amount=amount,
        commission_rate=80.0,
        payment_status=payment_status,
    )


def review(id: int, booking_id: int, technician_id: int, rating: float | None,
           approved: bool = True, scores: dict[int, int] | None = None) -> RatingReview:
    return RatingReview(
        id=id,
        booking_id=booking_id,
        technician_id=technician_id,
        overall_rating=rating,
        is_approved=approved,
        category_scores=tuple(
            CategoryScore(category_id=cid, score=s) for cid, s in (scores or {}).items()
        ),
    )


def category(id: int, name: str, sort_order: int = 0, is_active: bool = True) -> ReviewCategory:
    return ReviewCategory(id=id, name=name, sort_order=sort_order, is_active=is_active)


@pytest.fixture
def make_store():
    """Build a RecordStore from record lists: make_store(technicians=[...], bookings=[...])."""

    def _make(**records) -> RecordStore:
        return RecordStore(Dataset(**{k: tuple(v) for k, v in records.items()}))

    return _make
