"""
Customer satisfaction tool — get_customer_satisfaction.
"""
from __future__ import annotations

from datetime import datetime

import structlog
from pydantic import ValidationError

from query_validator import SatisfactionRequest
from record_store import open_record_store
from satisfaction import SatisfactionReport, build_satisfaction_report
from server_config import mcp, settings
from shared_helpers import (
    fmt_percent,
    fmt_rating,
    format_date_range,
    format_window,
    user_friendly_error,
)

log = structlog.get_logger(__name__)

_BAR_WIDTH = 20


def render_satisfaction(report: SatisfactionReport, label: str) -> str:
    lines = [
        f"Customer Satisfaction — {label} ({format_window(report.window)})",
        f"Period: {format_date_range(report.window.start, report.window.end)}",
        "─" * 55,
    ]

    if not report.total_reviews:
        lines.append("No approved reviews in this period.")
        lines.append(f"Response rate:     {report.response_rate}")
        return "\n".join(lines)

    lines += [
        f"Reviews:           {report.total_reviews}",
        f"Average rating:    {fmt_rating(report.average_rating)}",
        f"Satisfied (4+):    {fmt_percent(report.satisfaction_rate)}",
        f"Response rate:     {report.response_rate}",
        "",
        "Rating distribution:",
    ]
    for bucket in report.distribution:
        bar = "█" * round(bucket.percentage / 100 * _BAR_WIDTH)
        lines.append(f"  {bucket.stars}★  {bucket.count:>4}  {fmt_percent(bucket.percentage):>6}  {bar}".rstrip())

    if report.categories:
        name_w = max(max(len(c.name) for c in report.categories), 10)
        lines += ["", "Category scores:"]
        for c in report.categories:
            score = f"{c.average_score:.2f}" if c.score_count else "—"
            lines.append(f"  {c.name:<{name_w}}  {score:>5}  ({c.score_count} scored)")

    if report.top_rated:
        lines += ["", "Top-rated technicians:"]
        for rank, t in enumerate(report.top_rated, start=1):
            plural = "s" if t.review_count != 1 else ""
            lines.append(f"  {rank:>2}. {t.name} — {fmt_rating(t.average_rating)} ({t.review_count} review{plural})")

    return "\n".join(lines)


@mcp.tool()
async def get_customer_satisfaction(
    report_type: str = "monthly",
    technician_id: int | None = None,
    start_date: str = "",
    end_date: str = "",
) -> str:
    """
    Summarise customer satisfaction from approved reviews.

    Args:
        report_type: "weekly", "monthly", "quarterly", "yearly" or "custom".
        technician_id: Optional id from list_technicians. Omit for all technicians.
        start_date: Start date in YYYY-MM-DD format. Required for custom reports.
        end_date: End date in YYYY-MM-DD format. Required for custom reports.

    Shows average rating, share of 4+ star reviews, the 5→1 star distribution,
    per-category scores, top-rated technicians and the review response rate.
    Review text and customer details are never included.
    """
    log.info(
        "tool.get_customer_satisfaction",
        report_type=report_type,
        technician_id=technician_id,
        start_date=start_date,
        end_date=end_date,
    )

    try:
        request = SatisfactionRequest(
            report_type=report_type,
            technician_id=technician_id,
            start_date=start_date,
            end_date=end_date,
        )
        window = request.window(datetime.now().date())
    except (ValidationError, ValueError) as exc:
        return f"Error: {user_friendly_error(exc)}"

    try:
        store = open_record_store(settings)
        report = build_satisfaction_report(
            store,
            window,
            technician_id=request.technician_id,
            top_rated_limit=settings.top_rated_limit,
        )

        label = request.type_label
        if request.technician_id is not None:
            tech = store.get_technician(request.technician_id)
            label += f" for {tech.name if tech else 'Selected Technician'}"
        return render_satisfaction(report, label)

    except Exception as exc:
        log.error("tool.get_customer_satisfaction.error", error_type=type(exc).__name__)
        return f"Error: {user_friendly_error(exc)}"
