from datetime import datetime

from conftest import booking, earning, review, tech
from dashboard import build_overview

NOW = datetime(2026, 10, 19, 15, 30)


def _store(make_store, pending: int = 1):
    bookings = [
        booking(1, 1, "2026-10-20T09:00:00", amount=1000.0, created_at=datetime(2026, 10, 19, 8, 0)),
        booking(2, 1, "2026-10-21T09:00:00", amount=500.0, payment_status="unpaid",
                created_at=datetime(2026, 10, 19, 9, 0)),
        booking(3, 2, "2026-10-05T09:00:00", amount=2000.0, created_at=datetime(2026, 10, 2, 9, 0)),
        booking(4, 2, "2026-09-29T09:00:00", amount=3000.0, created_at=datetime(2026, 9, 28, 9, 0)),
        booking(5, None, "2026-10-25T09:00:00", amount=700.0),
    ]
    bookings += [
        booking(100 + i, None, "2026-10-30T09:00:00", status="pending", payment_status="pending")
        for i in range(pending)
    ]
    return make_store(
        technicians=[tech(1, "Juan"), tech(2, "Maria"), tech(3, "Liza", is_active=False)],
        bookings=bookings,
        earnings=[earning(1, 1, 1, 800.0), earning(2, 2, 3, 1600.0, payment_status="pending")],
        reviews=[review(1, 1, 1, 5.0), review(2, 3, 2, 4.0), review(3, 4, 2, 1.0, approved=False)],
    )


def test_overview_counts_by_creation_date(make_store):
    overview = build_overview(_store(make_store), NOW)

    assert overview.generated_at == NOW
    assert overview.today_bookings == 2
    assert overview.today_revenue == 1000.0
    assert overview.monthly_bookings == 3
    assert overview.monthly_revenue == 3000.0
    assert overview.active_technicians == 2
    assert overview.average_rating == 4.5
    assert overview.total_paid_earnings == 800.0
    assert overview.pending_bookings == 1


def test_overview_colors(make_store):
    overview = build_overview(_store(make_store), NOW)
    assert overview.rating_color == "success"
    assert overview.pending_color == "primary"

    busy = build_overview(_store(make_store, pending=6), NOW)
    assert busy.pending_color == "danger"


def test_overview_empty_store(make_store):
    overview = build_overview(make_store(), NOW)
    assert overview.today_bookings == 0
    assert overview.average_rating == 0.0
    assert overview.rating_color == "danger"
