"""
Technician performance report assembly.

A report is built in one pass:

  1. resolve the window once from the request and the injected clock
  2. aggregate metrics for every technician in scope
  3. derive completion rate and performance tier per row
  4. sort rows by total jobs, descending; ties keep store order
  5. compute window totals independently of the rows

Totals do not sum the rows: they cover every booking and
approved review in the window, including bookings with no technician.

Display state is explicit. TechnicianReportSession starts as NotGenerated —
no rows or totals exist at all — and only holds a GeneratedReport after
generate() runs. A generated report with zero rows is still "generated".
The generate_technician_report tool builds every report through a session,
so callers always receive a GeneratedReport rather than bare rows.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import structlog

from metrics import TechnicianMetrics, aggregate_technicians, average_rating
from performance import PerformanceTier, classify
from query_validator import ReportRequest
from rates import completion_rate
from record_store import RecordStore
from records import PaymentStatus, ReportWindow

log = structlog.get_logger(__name__)

PLACEHOLDER_TITLE = "Technician Performance Reports"
UNKNOWN_TECHNICIAN_NAME = "Selected Technician"
DEFAULT_TOP_PERFORMERS = 5

Clock = Callable[[], datetime]


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReportRow:
    technician_id: int
    technician_name: str
    employee_id: str
    total_jobs: int
    completed_jobs: int
    total_earnings: float
    average_rating: float
    completion_rate: str
    tier: PerformanceTier


@dataclass(frozen=True)
class ReportTotals:
    total_bookings: int
    total_revenue: float
    average_rating: float


@dataclass(frozen=True)
class NotGenerated:
    """Initial state: no report has been requested yet."""

    report_generated: bool = False
    title: str = PLACEHOLDER_TITLE


@dataclass(frozen=True)
class GeneratedReport:
    report_type: str
    window: ReportWindow
    technician_id: int | None
    technician_name: str | None
    rows: tuple[ReportRow, ...]
    totals: ReportTotals
    average_completion_rate: float
    top_performers: tuple[ReportRow, ...]
    generated_at: datetime
    report_generated: bool = True

    @property
    def title(self) -> str:
        label = self.report_type.capitalize()
        dates = f"({self.window.start.isoformat()} to {self.window.end.isoformat()})"
        if self.technician_id is not None:
            return f"{label} Report for {self.technician_name} {dates}"
        return f"{label} Report {dates}"


ReportState = NotGenerated | GeneratedReport


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def _to_row(m: TechnicianMetrics) -> ReportRow:
    rate = completion_rate(m.total_jobs, m.completed_jobs)
    return ReportRow(
        technician_id=m.technician.id,
        technician_name=m.technician.name,
        employee_id=m.technician.employee_id,
        total_jobs=m.total_jobs,
        completed_jobs=m.completed_jobs,
        total_earnings=m.total_earnings,
        average_rating=m.average_rating,
        completion_rate=rate,
        tier=classify(rate, m.average_rating),
    )


def summarize_window(store: RecordStore, window: ReportWindow) -> ReportTotals:
    """Bookings, paid revenue and approved-review average across the whole window."""
    bookings = store.query_bookings(date_range=window)
    revenue = sum(b.total_amount for b in bookings if b.payment_status == PaymentStatus.PAID)
    reviews = store.query_reviews(date_range=window, approved_only=True)
    return ReportTotals(
        total_bookings=len(bookings),
        total_revenue=revenue,
        average_rating=average_rating(reviews),
    )


def top_performers(rows: tuple[ReportRow, ...], limit: int) -> tuple[ReportRow, ...]:
    """Highest average rating first; ties keep row order."""
    return tuple(sorted(rows, key=lambda r: r.average_rating, reverse=True)[:limit])


def build_report(
    store: RecordStore,
    request: ReportRequest,
    now: datetime,
    top_performers_limit: int = DEFAULT_TOP_PERFORMERS,
) -> GeneratedReport:
    """
    Build a technician performance report for an already-validated request.

    An unknown technician_id yields an empty row set, not an error.
    """
    window = request.window(now.date())
    technicians = store.list_technicians(request.technician_id)

    technician_name: str | None = None
    if request.technician_id is not None:
        technician_name = technicians[0].name if technicians else UNKNOWN_TECHNICIAN_NAME

    metrics = aggregate_technicians(store, technicians, window)
    rows = tuple(
        sorted((_to_row(m) for m in metrics), key=lambda r: r.total_jobs, reverse=True)
    )

    avg_completion = (
        sum(float(r.completion_rate) for r in rows) / len(rows) if rows else 0.0
    )

    report = GeneratedReport(
        report_type=request.report_type,
        window=window,
        technician_id=request.technician_id,
        technician_name=technician_name,
        rows=rows,
        totals=summarize_window(store, window),
        average_completion_rate=avg_completion,
        top_performers=top_performers(rows, top_performers_limit),
        generated_at=now,
    )

    log.info(
        "report.generated",
        report_type=request.report_type,
        technician_id=request.technician_id,
        window_start=window.start.isoformat(),
        window_end=window.end.isoformat(),
        rows=len(rows),
        total_bookings=report.totals.total_bookings,
    )
    return report


# ---------------------------------------------------------------------------
# Session (display state)
# ---------------------------------------------------------------------------


class TechnicianReportSession:
    """
    Holds the report currently on display.

        session = TechnicianReportSession(store)
        session.state.report_generated      # False, nothing run yet
        session.generate(ReportRequest(report_type="monthly"))
        session.state.title                 # "Monthly Report (2026-10-01 to 2026-10-31)"
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Clock = datetime.now,
        top_performers_limit: int = DEFAULT_TOP_PERFORMERS,
    ) -> None:
        self._store = store
        self._clock = clock
        self._top_limit = top_performers_limit
        self._state: ReportState = NotGenerated()

    @property
    def state(self) -> ReportState:
        return self._state

    @property
    def title(self) -> str:
        return self._state.title

    def generate(self, request: ReportRequest) -> GeneratedReport:
        report = build_report(self._store, request, self._clock(), self._top_limit)
        self._state = report
        return report

    def reset(self) -> None:
        self._state = NotGenerated()
