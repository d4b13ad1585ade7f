import json
from datetime import date
from pathlib import Path

import pytest

from config import Settings
from conftest import booking, category, earning, review, tech
from record_store import (
    RecordStoreFormatError,
    RecordStoreUnavailableError,
    load_record_store,
    open_record_store,
)
from records import BookingStatus, PaymentStatus, ReportWindow

OCTOBER = ReportWindow(date(2026, 10, 1), date(2026, 10, 31))


@pytest.fixture
def store(make_store):
    return make_store(
        technicians=[tech(1, "Juan Dela Cruz"), tech(2, "Maria Santos")],
        bookings=[
            booking(10, 1, "2026-10-01T08:00:00"),
            booking(11, 2, "2026-10-31T23:30:00", status="pending", payment_status="pending"),
            booking(12, 1, "2026-11-01T00:00:00"),
            booking(13, None, "2026-10-15T09:00:00", status="pending"),
        ],
        earnings=[
            earning(1, 1, 10, 800.0),
            earning(2, 2, 11, 900.0, payment_status="pending"),
            earning(3, 1, 12, 700.0),
            earning(4, 1, 999, 100.0),
        ],
        reviews=[
            review(1, 10, 1, 5.0),
            review(2, 11, 2, 3.0, approved=False),
            review(3, 12, 1, 4.0),
        ],
        review_categories=[
            category(3, "Cleanliness", sort_order=2),
            category(1, "Punctuality", sort_order=1),
            category(2, "Pricing", sort_order=1, is_active=False),
        ],
    )


def test_bookings_filtered_by_inclusive_window(store):
    ids = [b.id for b in store.query_bookings(date_range=OCTOBER)]
    assert ids == [10, 11, 13]


def test_bookings_filtered_by_technician_and_status(store):
    assert [b.id for b in store.query_bookings(technician_id=1)] == [10, 12]
    assert [b.id for b in store.query_bookings(status=BookingStatus.PENDING)] == [11, 13]


def test_earnings_window_follows_linked_booking(store):
    ids = [e.id for e in store.query_earnings(date_range=OCTOBER)]
    # earning 4 points at a booking outside the snapshot
    assert ids == [1, 2]


def test_earnings_payment_status_filter(store):
    paid = store.query_earnings(technician_id=1, payment_status=PaymentStatus.PAID)
    assert [e.id for e in paid] == [1, 3, 4]


def test_reviews_approved_only_by_default(store):
    assert [r.id for r in store.query_reviews()] == [1, 3]
    assert [r.id for r in store.query_reviews(approved_only=False)] == [1, 2, 3]
    assert [r.id for r in store.query_reviews(date_range=OCTOBER)] == [1]


def test_review_categories_sorted_and_active(store):
    assert [c.id for c in store.list_review_categories()] == [1, 3]
    assert [c.id for c in store.list_review_categories(active_only=False)] == [1, 2, 3]


def test_unknown_technician_is_empty_not_error(store):
    assert store.list_technicians(42) == []
    assert store.get_technician(42) is None
    assert store.get_technician(2).name == "Maria Santos"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def test_load_missing_file(tmp_path):
    with pytest.raises(RecordStoreUnavailableError):
        load_record_store(tmp_path / "nope.json")


def test_load_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RecordStoreFormatError, match="not valid JSON"):
        load_record_store(path)


def test_load_invalid_records_hides_values(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(
        json.dumps({"bookings": [{"id": 1, "scheduled_start_at": "Juan's house", "total_amount": -5}]}),
        encoding="utf-8",
    )
    with pytest.raises(RecordStoreFormatError) as exc_info:
        load_record_store(path)
    assert exc_info.value.error_count == 2
    assert "Juan" not in str(exc_info.value)


def test_load_ignores_extra_columns(tmp_path):
    path = tmp_path / "extra.json"
    path.write_text(
        json.dumps(
            {
                "technicians": [{"id": 1, "name": "Juan", "phone": "0917"}],
                "bookings": [
                    {
                        "id": 5,
                        "technician_id": 1,
                        "scheduled_start_at": "2026-10-02T09:00:00",
                        "status": "completed",
                        "service_id": 4,
                        "customer_name": "Someone",
                    }
                ],
            }
        ),
        encoding="utf-8",
    )
    store = load_record_store(path)
    assert store.query_bookings(status=BookingStatus.COMPLETED)[0].id == 5
    assert not hasattr(store.dataset.bookings[0], "customer_name")
    assert not hasattr(store.dataset.bookings[0], "service_id")


def test_open_record_store_resolves_relative_to_project():
    store = open_record_store(Settings(data_file="data/hvac_records.json"))
    assert len(store.dataset.technicians) == 4
    assert Path(__file__).parent.parent.joinpath("data", "hvac_records.json").exists()
