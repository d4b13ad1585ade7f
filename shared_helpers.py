"""
Shared helpers for MCP tool modules.

Contains:
  - Technician lookup by name fragment
  - Date / money / rating formatting utilities
  - User-friendly error formatting

All tool modules import from here. No tool-specific logic belongs in this file.
"""
from __future__ import annotations

import sys
from datetime import date

from pydantic import ValidationError

from record_store import (
    RecordStore,
    RecordStoreError,
    RecordStoreFormatError,
    RecordStoreUnavailableError,
)
from records import ReportWindow, Technician

# ---------------------------------------------------------------------------
# Technician lookup
# ---------------------------------------------------------------------------


def find_technicians(store: RecordStore, name_fragment: str) -> list[Technician]:
    """Return technicians whose name contains name_fragment (case-insensitive)."""
    needle = name_fragment.lower().strip()
    return [t for t in store.list_technicians() if needle in t.name.lower()]


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def format_date_range(start: date, end: date) -> str:
    if start == end:
        return start.strftime("%B %-d, %Y") if sys.platform != "win32" else start.strftime("%B %d, %Y").lstrip("0")
    return f"{start.strftime('%b %d').lstrip('0')} – {end.strftime('%b %d, %Y').lstrip('0')}"


def format_window(window: ReportWindow) -> str:
    """ISO form used in report titles: '2026-10-01 to 2026-10-31'."""
    return f"{window.start.isoformat()} to {window.end.isoformat()}"


def fmt_currency(amount: float, symbol: str = "₱") -> str:
    """Format a float as money with commas, e.g. ₱12,500.00."""
    return f"{symbol}{amount:,.2f}"


def fmt_rating(rating: float) -> str:
    """Rating out of five, e.g. '4.60/5.0'."""
    return f"{rating:.2f}/5.0"


def fmt_percent(value: float) -> str:
    return f"{value:.1f}%"


# ---------------------------------------------------------------------------
# Error formatting
# ---------------------------------------------------------------------------


def user_friendly_error(exc: Exception) -> str:
    """Convert internal exceptions to helpful, non-leaking user messages."""
    if isinstance(exc, RecordStoreUnavailableError):
        return "Booking records are unavailable right now. Check the data file configuration."
    if isinstance(exc, RecordStoreFormatError):
        return "Booking records could not be read — the data file is malformed."
    if isinstance(exc, RecordStoreError):
        return "Booking records could not be loaded. Please try again."
    if isinstance(exc, ValidationError):
        first = exc.errors()[0]
        return f"Invalid input: {first['msg']}"
    if isinstance(exc, ValueError):
        return str(exc)
    return "An unexpected error occurred. Please try again."
