"""
HVAC Reports MCP Server.

Exposes technician performance, customer satisfaction and booking overview
reports over the Model Context Protocol. All data returned is aggregated and
PII-free — no customer names, addresses, or contact details are ever sent.

Tools exposed:
  list_technicians            — technicians with id, employee id and status
  generate_technician_report  — weekly / monthly / yearly / custom performance report
  get_customer_satisfaction   — ratings, distribution, category scores, response rate
  get_dashboard_overview      — today's and this month's bookings and revenue
  get_technician_stats        — one technician's jobs today, earnings with trends, ratings

Run this script directly (stdio transport):
  python hvac_reports_server.py

Or check that the record file loads:
  python hvac_reports_server.py --check
"""
from __future__ import annotations

import sys

import structlog

from record_store import RecordStoreError, open_record_store
from server_config import mcp, settings

# Tool modules register themselves on the shared mcp instance at import time.
import tools_dashboard  # noqa: F401
import tools_reports  # noqa: F401
import tools_satisfaction  # noqa: F401

log = structlog.get_logger(__name__)


def check() -> int:
    """Load the record file once and print what it holds. Returns an exit code."""
    log.info("startup.checking_records", data_file=settings.data_file)
    try:
        store = open_record_store(settings)
    except RecordStoreError as exc:
        print(f"Record check FAILED — {exc}")
        return 1

    data = store.dataset
    print("Record check OK.")
    print(f"  technicians:       {len(data.technicians)}")
    print(f"  bookings:          {len(data.bookings)}")
    print(f"  earnings:          {len(data.earnings)}")
    print(f"  reviews:           {len(data.reviews)}")
    print(f"  review categories: {len(data.review_categories)}")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "--check":
        sys.exit(check())
    else:
        log.info("startup.starting_mcp_server")
        mcp.run(transport="stdio")
