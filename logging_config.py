"""
Structured logging configuration using structlog.

Guarantees enforced here:
  - Customer PII (names, mobile numbers, addresses) is REDACTED before output
  - Free-text review bodies and special instructions never reach the log
  - Report events carry ids and counts only; rows are never logged
  - JSON output format for machine-parseable log aggregation
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

# ---------------------------------------------------------------------------
# Fields that must never appear in logs in plaintext.
# Checked case-insensitively against all log event_dict keys.
# ---------------------------------------------------------------------------
_REDACTED_FIELDS: frozenset[str] = frozenset(
    {
        # Booking contact details
        "customer_name",
        "customer_mobile",
        "customer_address",
        "house_no_street",
        "nearest_landmark",
        "special_instructions",
        # Review content
        "review",
        "review_text",
        # Generic PII / credentials
        "email",
        "phone",
        "address",
        "password",
        "token",
        "secret",
    }
)


_FRAMEWORK_LOGGERS: tuple[str, ...] = ("mcp", "FastMCP")


def _scrub_sensitive(
    logger: Any,  # noqa: ANN401 — structlog typing requirement
    method: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    structlog processor: replace sensitive field values with [REDACTED].

    Runs before the renderer so nothing sensitive reaches stderr or the file.
    """
    for key in list(event_dict.keys()):
        if key.lower() in _REDACTED_FIELDS:
            event_dict[key] = "[REDACTED]"
    return event_dict


def configure_logging(log_level: str = "INFO", log_file: str | None = None) -> None:
    """
    Configure structlog for structured JSON logging.

    Call once at server startup before any log calls are made.

    Args:
        log_level: One of DEBUG / INFO / WARNING / ERROR / CRITICAL.
        log_file:  Optional file path. Parent directories are created if needed.
                   stderr always receives the logs (stdout carries the MCP
                   stdio transport and must stay clean).
    """
    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            log_file = None  # stderr-only if the directory can't be created

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _scrub_sensitive,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.ExceptionRenderer(),
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
    )

    handlers: list[logging.Handler] = []

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    handlers.append(stderr_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers = handlers
    root.setLevel(getattr(logging, log_level, logging.INFO))

    # The low-level MCP server logs every request at INFO ("mcp.server.lowlevel"),
    # and FastMCP logs tool and resource registration under "FastMCP.*"
    for name in _FRAMEWORK_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
