"""
Technician report tools — list_technicians, generate_technician_report.
"""
from __future__ import annotations

from datetime import datetime

import structlog
from pydantic import ValidationError

from query_validator import ReportRequest, TechnicianNameQuery
from record_store import open_record_store
from report_builder import Clock, GeneratedReport, TechnicianReportSession
from server_config import mcp, settings
from shared_helpers import (
    find_technicians,
    fmt_currency,
    fmt_percent,
    fmt_rating,
    format_date_range,
    user_friendly_error,
)

log = structlog.get_logger(__name__)

# Report windows resolve against this clock
clock: Clock = datetime.now


@mcp.tool()
async def list_technicians(name_filter: str = "") -> str:
    """
    List technicians with their id, employee id and status.

    Args:
        name_filter: Optional full or partial technician name (e.g. "Juan", "Dela Cruz").
                     Leave empty to list everyone.

    Use the id from this list as technician_id in the report tools.
    """
    log.info("tool.list_technicians", name_filter=name_filter)

    try:
        query = TechnicianNameQuery(name_fragment=name_filter)
    except (ValidationError, ValueError) as exc:
        return f"Error: {user_friendly_error(exc)}"

    try:
        store = open_record_store(settings)
        techs = find_technicians(store, query.name_fragment)

        if not techs:
            if query.name_fragment:
                return f'No technician found matching "{query.name_fragment}".'
            return "No technicians on record."

        name_w = max(max(len(t.name) for t in techs), 10)
        header = f"{'ID':>4}  {'Technician':<{name_w}}  {'Employee':<10}  {'Jobs':>5}  {'Rating':>8}  {'Status':<18}"
        sep = "─" * len(header)
        lines = [f"Technicians ({len(techs)})", sep, header, sep]

        for t in techs:
            status = "Active" if t.is_active else "Inactive"
            if t.is_active and t.is_available:
                status += ", available"
            lines.append(
                f"{t.id:>4}  {t.name:<{name_w}}  {t.employee_id:<10}  {t.total_jobs:>5}  {fmt_rating(t.rating_average):>8}  {status:<18}".rstrip()
            )
        return "\n".join(lines)

    except Exception as exc:
        log.error("tool.list_technicians.error", error_type=type(exc).__name__)
        return f"Error: {user_friendly_error(exc)}"


def render_report(report: GeneratedReport, currency_symbol: str) -> str:
    """Lay out a generated report as a plain-text table."""
    window_label = format_date_range(report.window.start, report.window.end)
    lines = [report.title, f"Period: {window_label}"]

    if not report.rows:
        sep = "─" * 55
        lines += [sep, "No technicians match this report."]
    else:
        name_w = max(max(len(r.technician_name) for r in report.rows), 10)
        header = (
            f"{'Technician':<{name_w}}  {'Jobs':>5}  {'Done':>5}  {'Rate':>6}  "
            f"{'Earnings':>12}  {'Rating':>8}  {'Tier':<17}"
        )
        sep = "─" * len(header)
        lines += [sep, header, sep]
        for r in report.rows:
            lines.append(
                f"{r.technician_name:<{name_w}}  {r.total_jobs:>5}  {r.completed_jobs:>5}  "
                f"{r.completion_rate + '%':>6}  {fmt_currency(r.total_earnings, currency_symbol):>12}  "
                f"{r.average_rating:>8.2f}  {r.tier.value:<17}".rstrip()
            )

    totals = report.totals
    lines += [
        sep,
        f"Total bookings:   {totals.total_bookings}",
        f"Total revenue:    {fmt_currency(totals.total_revenue, currency_symbol)}",
        f"Average rating:   {fmt_rating(totals.average_rating)}",
        f"Avg completion:   {fmt_percent(report.average_completion_rate)}",
    ]

    if report.top_performers:
        lines.append("\nTop performers by rating:")
        for rank, r in enumerate(report.top_performers, start=1):
            lines.append(f"  {rank}. {r.technician_name} — {fmt_rating(r.average_rating)} ({r.tier.value})")

    lines.append(f"\nGenerated {report.generated_at.strftime('%Y-%m-%d %H:%M')}")
    return "\n".join(lines)


@mcp.tool()
async def generate_technician_report(
    report_type: str = "weekly",
    technician_id: int | None = None,
    start_date: str = "",
    end_date: str = "",
) -> str:
    """
    Generate a technician performance report: jobs, completion rate, earnings,
    average rating and performance tier per technician.

    Args:
        report_type: "weekly" (Mon–Sun this week), "monthly", "yearly" or "custom".
        technician_id: Optional id from list_technicians. Omit for every technician.
        start_date: Start date in YYYY-MM-DD format. Required for custom reports.
        end_date: End date in YYYY-MM-DD format. Required for custom reports.

    Rows are sorted by total jobs, highest first. Tiers: Excellent (≥95% and ≥4.5),
    Good (≥85% and ≥4.0), Average (≥70% and ≥3.5), otherwise Needs Improvement.
    No customer information is included.
    """
    log.info(
        "tool.generate_technician_report",
        report_type=report_type,
        technician_id=technician_id,
        start_date=start_date,
        end_date=end_date,
    )

    try:
        request = ReportRequest(
            report_type=report_type,
            technician_id=technician_id,
            start_date=start_date,
            end_date=end_date,
        )
    except (ValidationError, ValueError) as exc:
        return f"Error: {user_friendly_error(exc)}"

    try:
        store = open_record_store(settings)
        session = TechnicianReportSession(
            store,
            clock=clock,
            top_performers_limit=settings.top_performers_limit,
        )
        report = session.generate(request)
        return render_report(report, settings.currency_symbol)

    except Exception as exc:
        log.error("tool.generate_technician_report.error", error_type=type(exc).__name__)
        return f"Error: {user_friendly_error(exc)}"
