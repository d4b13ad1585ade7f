"""
Application configuration loaded from environment variables.

Every setting has a safe default so the server starts against the bundled
sample dataset. Values can be overridden in .env or the process environment.

Environment variables (all prefixed with HVAC_):
  HVAC_DATA_FILE            — JSON dataset read by the record store
  HVAC_CURRENCY_SYMBOL      — symbol used when formatting money (default ₱)
  HVAC_TOP_PERFORMERS_LIMIT — rows listed under "Top performers"
  HVAC_TOP_RATED_LIMIT      — technicians listed in the satisfaction report
  HVAC_LOG_LEVEL            — DEBUG / INFO / WARNING / ERROR / CRITICAL
  HVAC_LOG_FILE             — log file path, relative to the project directory
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings. Loaded once at startup; never mutated at runtime."""

    model_config = SettingsConfigDict(
        env_prefix="HVAC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Silently ignore unrecognised env vars
        case_sensitive=False,
    )

    # -------------------------------------------------------------------------
    # Record store
    # -------------------------------------------------------------------------
    data_file: str = Field(
        default="data/hvac_records.json",
        description="JSON dataset with technicians, bookings, earnings and reviews",
    )

    # -------------------------------------------------------------------------
    # Report presentation
    # -------------------------------------------------------------------------
    currency_symbol: str = Field(default="₱", min_length=1, max_length=3)
    top_performers_limit: int = Field(default=5, ge=1, le=20)
    top_rated_limit: int = Field(default=10, ge=1, le=50)

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: str = Field(default="INFO")
    log_file: str = Field(default="logs/hvac_reports.log")

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return upper

    @field_validator("data_file")
    @classmethod
    def _require_json(cls, v: str) -> str:
        v = v.strip()
        if not v.lower().endswith(".json"):
            raise ValueError("data_file must point to a .json dataset")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the singleton Settings instance.

    Cached after first call. Raises ValidationError if any env var is
    invalid — fail fast at startup, not mid-request.
    """
    return Settings()
