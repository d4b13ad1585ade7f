"""
Input validation for report requests.

All external input (tool arguments from the admin client) passes through
these models before the record store is opened. Invalid input raises
ValueError / ValidationError with a user-friendly message — never a stack
trace, and never after a query has already run.

Rules enforced here:
  - Report type: one of the supported window kinds
  - Custom reports: start_date AND end_date both required. A reversed
    range is not an error: it matches no records and the report is empty
  - Technician ids: any integer; an unknown id is NOT an error here
    (the report simply comes back empty)
  - Technician name fragments: letters, spaces, hyphens, periods, apostrophes only
"""
from __future__ import annotations

import calendar
import re
from datetime import date, timedelta
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from records import ReportWindow

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_NAME_PATTERN = re.compile(r"^[A-Za-z\s\-.']+$")

ReportType = Literal["weekly", "monthly", "yearly", "custom"]
SatisfactionReportType = Literal["weekly", "monthly", "quarterly", "yearly", "custom"]


# ---------------------------------------------------------------------------
# Window resolution
# ---------------------------------------------------------------------------


def resolve_window(
    report_type: str,
    today: date,
    start_date: date | None = None,
    end_date: date | None = None,
) -> ReportWindow:
    """
    Return the inclusive window for a report type, relative to today.

      weekly    → Monday–Sunday of today's week
      monthly   → first–last day of today's month
      quarterly → first–last day of today's calendar quarter
      yearly    → Jan 1 – Dec 31 of today's year
      custom    → the supplied dates (both required)
    """
    if report_type == "weekly":
        monday = today - timedelta(days=today.weekday())
        return ReportWindow(monday, monday + timedelta(days=6))

    if report_type == "monthly":
        last_day = calendar.monthrange(today.year, today.month)[1]
        return ReportWindow(today.replace(day=1), today.replace(day=last_day))

    if report_type == "quarterly":
        first_month = 3 * ((today.month - 1) // 3) + 1
        last_month = first_month + 2
        last_day = calendar.monthrange(today.year, last_month)[1]
        return ReportWindow(
            date(today.year, first_month, 1),
            date(today.year, last_month, last_day),
        )

    if report_type == "yearly":
        return ReportWindow(date(today.year, 1, 1), date(today.year, 12, 31))

    if report_type == "custom":
        if start_date is None or end_date is None:
            raise ValueError("Custom reports require both start_date and end_date")
        return ReportWindow(start_date, end_date)

    raise ValueError(f"Unknown report type {report_type!r}")


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class ReportRequest(BaseModel):
    """
    Validated technician performance report request.

    Date handling:
      - weekly / monthly / yearly → window derived from "today" at
        generation time; any supplied dates are ignored
      - custom → start_date and end_date are both required; a start after
        the end yields an empty window rather than an error

    Used by: generate_technician_report, TechnicianReportSession.
    Extended by: SatisfactionRequest (adds the quarterly window).
    """

    report_type: ReportType = Field(default="weekly")
    technician_id: int | None = Field(default=None)
    start_date: date | None = Field(default=None)
    end_date: date | None = Field(default=None)

    @field_validator("report_type", mode="before")
    @classmethod
    def _normalise_type(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_date(cls, v: object) -> date | None:
        if v is None or v == "":
            return None
        if isinstance(v, date):
            return v
        try:
            return date.fromisoformat(str(v).strip())
        except ValueError:
            raise ValueError(f"Invalid date {v!r} — use YYYY-MM-DD format")

    @model_validator(mode="after")
    def _validate_custom_range(self) -> "ReportRequest":
        if self.report_type != "custom":
            return self
        if self.start_date is None or self.end_date is None:
            raise ValueError("Custom reports require both start_date and end_date")
        return self

    def window(self, today: date) -> ReportWindow:
        """Return the resolved (start, end) window for this request."""
        return resolve_window(self.report_type, today, self.start_date, self.end_date)

    @property
    def type_label(self) -> str:
        return self.report_type.capitalize()


class SatisfactionRequest(ReportRequest):
    """Customer satisfaction report request — also accepts a quarterly window."""

    report_type: SatisfactionReportType = Field(default="monthly")


class TechnicianNameQuery(BaseModel):
    """Validated technician name lookup — used by list_technicians."""

    name_fragment: str = Field(default="", max_length=100)

    @field_validator("name_fragment")
    @classmethod
    def _validate_fragment(cls, v: str) -> str:
        v = v.strip()
        if v and not _NAME_PATTERN.match(v):
            raise ValueError(
                "Search text may only contain letters, spaces, hyphens, periods, and apostrophes"
            )
        return v
