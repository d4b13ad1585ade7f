from datetime import date, datetime

import pytest

from conftest import booking, earning, review, tech
from performance import PerformanceTier
from query_validator import ReportRequest
from report_builder import (
    PLACEHOLDER_TITLE,
    GeneratedReport,
    NotGenerated,
    TechnicianReportSession,
    build_report,
)
from records import ReportWindow

NOW = datetime(2026, 10, 15, 10, 0)  # Thursday; week is Oct 12–18


def _jobs(start_id: int, technician_id: int, count: int, completed: int, day: str = "2026-10-13"):
    return [
        booking(
            start_id + i,
            technician_id,
            f"{day}T09:00:00",
            status="completed" if i < completed else "confirmed",
            payment_status="paid" if i < completed else "pending",
        )
        for i in range(count)
    ]


def test_ten_jobs_nine_completed_is_good(make_store):
    bookings = _jobs(100, 1, 10, 9)
    store = make_store(
        technicians=[tech(1, "Juan")],
        bookings=bookings,
        reviews=[review(1, 100, 1, 4.6)],
    )
    report = build_report(store, ReportRequest(report_type="weekly"), NOW)

    (row,) = report.rows
    assert row.total_jobs == 10
    assert row.completed_jobs == 9
    assert row.completion_rate == "90.0"
    assert row.average_rating == pytest.approx(4.6)
    assert row.tier is PerformanceTier.GOOD


def test_weekly_report_sorted_by_jobs_with_stable_ties(make_store):
    store = make_store(
        technicians=[tech(1, "Ana"), tech(2, "Ben"), tech(3, "Cora"), tech(4, "Dan")],
        bookings=_jobs(100, 2, 2, 2) + _jobs(200, 3, 5, 5) + _jobs(300, 4, 2, 1),
    )
    report = build_report(store, ReportRequest(report_type="weekly"), NOW)
    assert [r.technician_id for r in report.rows] == [3, 2, 4, 1]


def test_no_bookings_in_window(make_store):
    store = make_store(
        technicians=[tech(1, "Juan", total_jobs=50), tech(2, "Maria")],
        bookings=_jobs(100, 1, 3, 3, day="2026-09-01"),
    )
    report = build_report(store, ReportRequest(report_type="weekly"), NOW)

    assert report.report_generated is True
    assert len(report.rows) == 2
    for row in report.rows:
        assert row.total_jobs == 0
        assert row.completion_rate == "0"
        assert row.tier is PerformanceTier.NEEDS_IMPROVEMENT
    assert report.totals.total_bookings == 0
    assert report.totals.total_revenue == 0
    assert report.totals.average_rating == 0.0
    assert report.average_completion_rate == 0.0


def test_totals_are_independent_of_rows(make_store):
    store = make_store(
        technicians=[tech(1, "Juan"), tech(2, "Maria")],
        bookings=[
            booking(1, 1, "2026-10-12T08:00:00", amount=1000.0),
            booking(2, 2, "2026-10-13T08:00:00", amount=2500.0, payment_status="unpaid"),
            booking(3, None, "2026-10-14T08:00:00", amount=400.0),
            booking(4, 1, "2026-10-20T08:00:00", amount=9999.0),
        ],
        earnings=[earning(1, 1, 1, 800.0)],
        reviews=[review(1, 1, 1, 5.0), review(2, 2, 2, 3.0), review(3, 4, 1, 1.0)],
    )
    report = build_report(store, ReportRequest(report_type="weekly", technician_id=1), NOW)

    assert [r.technician_id for r in report.rows] == [1]
    assert report.totals.total_bookings == 3
    assert report.totals.total_revenue == 1400.0
    assert report.totals.average_rating == 4.0


def test_title_with_technician(make_store):
    store = make_store(technicians=[tech(7, "Ramon Reyes")])
    report = build_report(
        store,
        ReportRequest(report_type="custom", technician_id=7, start_date="2026-09-01", end_date="2026-09-30"),
        NOW,
    )
    assert report.window == ReportWindow(date(2026, 9, 1), date(2026, 9, 30))
    assert report.title == "Custom Report for Ramon Reyes (2026-09-01 to 2026-09-30)"


def test_title_without_technician(make_store):
    report = build_report(make_store(), ReportRequest(report_type="monthly"), NOW)
    assert report.title == "Monthly Report (2026-10-01 to 2026-10-31)"


def test_unknown_technician_gives_empty_rows(make_store):
    store = make_store(technicians=[tech(1, "Juan")], bookings=_jobs(100, 1, 2, 2))
    report = build_report(store, ReportRequest(technician_id=99), NOW)

    assert report.rows == ()
    assert report.report_generated is True
    assert report.title == "Weekly Report for Selected Technician (2026-10-12 to 2026-10-18)"
    assert report.totals.total_bookings == 2


def test_top_performers_by_rating(make_store):
    techs = [tech(i, f"Tech {i}") for i in range(1, 8)]
    bookings = [booking(i, i, "2026-10-13T09:00:00") for i in range(1, 8)]
    ratings = [3.0, 5.0, 4.0, 4.5, 4.5, 2.0, 3.5]
    reviews = [review(i, i, i, r) for i, r in enumerate(ratings, start=1)]
    store = make_store(technicians=techs, bookings=bookings, reviews=reviews)

    report = build_report(store, ReportRequest(), NOW, top_performers_limit=3)
    assert [r.technician_id for r in report.top_performers] == [2, 4, 5]
    assert report.average_completion_rate == 100.0
    assert report.generated_at == NOW


def test_report_has_no_rows_before_generation(make_store):
    session = TechnicianReportSession(make_store(), clock=lambda: NOW)
    assert isinstance(session.state, NotGenerated)
    assert session.state.report_generated is False
    assert session.title == PLACEHOLDER_TITLE
    assert not hasattr(session.state, "rows")
    assert not hasattr(session.state, "totals")


def test_session_generate_and_reset(make_store):
    store = make_store(technicians=[tech(1, "Juan")])
    session = TechnicianReportSession(store, clock=lambda: NOW)

    report = session.generate(ReportRequest(report_type="yearly"))
    assert isinstance(session.state, GeneratedReport)
    assert session.state is report
    assert session.title == "Yearly Report (2026-01-01 to 2026-12-31)"

    session.reset()
    assert session.state.report_generated is False


def test_window_resolved_from_injected_clock(make_store):
    store = make_store(technicians=[tech(1, "Juan")], bookings=_jobs(100, 1, 1, 1, day="2026-12-30"))
    session = TechnicianReportSession(store, clock=lambda: datetime(2026, 12, 31, 23, 59))
    report = session.generate(ReportRequest(report_type="weekly"))
    assert report.window == ReportWindow(date(2026, 12, 28), date(2027, 1, 3))
    assert report.rows[0].total_jobs == 1


def test_reversed_custom_window_is_empty_report(make_store):
    store = make_store(technicians=[tech(1, "Juan")], bookings=_jobs(100, 1, 4, 4, day="2026-09-10"))
    request = ReportRequest(report_type="custom", start_date="2026-09-30", end_date="2026-09-01")
    report = build_report(store, request, NOW)

    assert report.report_generated is True
    assert report.rows[0].total_jobs == 0
    assert report.rows[0].completion_rate == "0"
    assert report.totals.total_bookings == 0
    assert report.totals.total_revenue == 0
    assert report.title == "Custom Report (2026-09-30 to 2026-09-01)"


def test_non_positive_technician_id_is_unknown_technician(make_store):
    store = make_store(technicians=[tech(1, "Juan")])
    report = build_report(store, ReportRequest(technician_id=0), NOW)
    assert report.rows == ()
    assert report.title.startswith("Weekly Report for Selected Technician")
