"""
Dashboard tools — get_dashboard_overview, get_technician_stats.
"""
from __future__ import annotations

from datetime import datetime, timedelta

import structlog

from dashboard import DashboardOverview, build_overview
from record_store import open_record_store
from server_config import mcp, settings
from shared_helpers import fmt_currency, fmt_percent, fmt_rating, user_friendly_error
from technician_stats import TechnicianStats, build_technician_stats

log = structlog.get_logger(__name__)

_FLAGS = {"danger": "  ⚠", "warning": "  !"}


def render_overview(overview: DashboardOverview, currency_symbol: str) -> str:
    sep = "─" * 45
    rating_flag = _FLAGS.get(overview.rating_color, "")
    pending_flag = _FLAGS.get(overview.pending_color, "")
    return "\n".join(
        [
            f"Business Overview  |  {overview.generated_at.strftime('%B %d, %Y %H:%M')}",
            sep,
            f"Bookings today:        {overview.today_bookings:>8}",
            f"Revenue today:         {fmt_currency(overview.today_revenue, currency_symbol):>12}",
            f"Bookings this month:   {overview.monthly_bookings:>8}",
            f"Revenue this month:    {fmt_currency(overview.monthly_revenue, currency_symbol):>12}",
            sep,
            f"Active technicians:    {overview.active_technicians:>8}",
            f"Average rating:        {fmt_rating(overview.average_rating):>12}{rating_flag}",
            f"Paid earnings (all):   {fmt_currency(overview.total_paid_earnings, currency_symbol):>12}",
            f"Pending bookings:      {overview.pending_bookings:>8}{pending_flag}",
        ]
    )


@mcp.tool()
async def get_dashboard_overview() -> str:
    """
    Get today's and this month's booking activity at a glance.

    Shows bookings and paid revenue created today and this month, active
    technicians, the overall approved-review rating, total paid technician
    earnings and how many bookings are still pending (flagged above 5).
    No customer information is included.
    """
    log.info("tool.get_dashboard_overview")

    try:
        store = open_record_store(settings)
        overview = build_overview(store, datetime.now())
        return render_overview(overview, settings.currency_symbol)

    except Exception as exc:
        log.error("tool.get_dashboard_overview.error", error_type=type(exc).__name__)
        return f"Error: {user_friendly_error(exc)}"


def _trend(value: float, period: str) -> str:
    arrow = "↑" if value >= 0 else "↓"
    return f"{arrow} {abs(value):.1f}% from last {period}"


def render_technician_stats(stats: TechnicianStats, currency_symbol: str) -> str:
    sep = "─" * 55
    t = stats.technician

    def money(amount: float) -> str:
        return fmt_currency(amount, currency_symbol)

    lines = [
        f"Technician Stats — {t.name} ({t.employee_id})  |  {stats.generated_at.strftime('%B %d, %Y %H:%M')}",
        sep,
        f"Today's jobs:          {stats.today_jobs:>8}",
        f"Pending tasks:         {stats.pending_tasks:>8}",
        sep,
        f"This week:             {money(stats.week_earnings):>12}  {_trend(stats.week_trend, 'week')}",
        f"This month:            {money(stats.month_earnings):>12}  {_trend(stats.month_trend, 'month')}",
        f"This year:             {money(stats.year_earnings):>12}",
        f"All-time (paid):       {money(stats.total_earnings):>12}",
        f"Pending payments:      {money(stats.pending_payments):>12}",
        sep,
        f"Reviews:               {stats.total_reviews:>8}",
        f"Average rating:        {fmt_rating(stats.average_rating):>12}{_FLAGS.get(stats.rating_color, '')}",
        f"Satisfied (4+):        {fmt_percent(stats.satisfaction_rate):>12}{_FLAGS.get(stats.satisfaction_color, '')}",
        "",
        "Paid earnings, last 7 days:",
    ]
    start = stats.generated_at.date() - timedelta(days=len(stats.daily_earnings) - 1)
    for offset, amount in enumerate(stats.daily_earnings):
        day = start + timedelta(days=offset)
        lines.append(f"  {day.strftime('%a %b %d')}  {money(amount):>12}")
    return "\n".join(lines)


@mcp.tool()
async def get_technician_stats(technician_id: int) -> str:
    """
    Get one technician's own stats: today's jobs, pending tasks, paid earnings
    this week / month / year / all time with trends, pending payments, and
    their review rating and satisfaction rate.

    Args:
        technician_id: Id from list_technicians.

    No customer information is included.
    """
    log.info("tool.get_technician_stats", technician_id=technician_id)

    try:
        store = open_record_store(settings)
        stats = build_technician_stats(store, technician_id, datetime.now())
        if stats is None:
            return f"No technician found with id {technician_id}."
        return render_technician_stats(stats, settings.currency_symbol)

    except Exception as exc:
        log.error("tool.get_technician_stats.error", error_type=type(exc).__name__)
        return f"Error: {user_friendly_error(exc)}"
