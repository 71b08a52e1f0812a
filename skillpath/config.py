from __future__ import annotations

import logging
import os
import sys
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load project-root .env early so both pydantic-settings and any direct os.getenv access
# see consistent values, even if the process CWD is not the repo root.
_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_IN_TEST = (os.getenv("SKILLPATH_ENVIRONMENT") or "").lower() == "test" or bool(os.getenv("PYTEST_CURRENT_TEST"))
if _ENV_PATH.exists() and not _IN_TEST:
    load_dotenv(dotenv_path=_ENV_PATH, override=False)


class Settings(BaseSettings):
    app_name: str = Field(default="skillpath")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development", validation_alias="SKILLPATH_ENVIRONMENT")
    log_level: str = Field(default="INFO", validation_alias="SKILLPATH_LOG_LEVEL")

    # Weight cache
    weight_cache_ttl_seconds: float = Field(default=3600.0, gt=0, validation_alias="SKILLPATH_WEIGHT_CACHE_TTL_SECONDS")
    weight_cache_max_entries: int = Field(default=1000, ge=1, validation_alias="SKILLPATH_WEIGHT_CACHE_MAX_ENTRIES")
    weight_cache_drift_tolerance: float = Field(
        default=0.20, ge=0, validation_alias="SKILLPATH_WEIGHT_CACHE_DRIFT_TOLERANCE"
    )

    # Fuzzy matching: distance-normalized score must stay below this to count as a match.
    fuzzy_threshold: float = Field(default=0.3, gt=0, le=1, validation_alias="SKILLPATH_FUZZY_THRESHOLD")

    # Market weight coefficients (must sum to 1.0)
    demand_coefficient: float = Field(default=0.40, ge=0, le=1, validation_alias="SKILLPATH_DEMAND_COEFFICIENT")
    salary_coefficient: float = Field(default=0.35, ge=0, le=1, validation_alias="SKILLPATH_SALARY_COEFFICIENT")
    tier_coefficient: float = Field(default=0.15, ge=0, le=1, validation_alias="SKILLPATH_TIER_COEFFICIENT")
    penetration_coefficient: float = Field(
        default=0.10, ge=0, le=1, validation_alias="SKILLPATH_PENETRATION_COEFFICIENT"
    )
    top_employer_tier: int = Field(default=4, ge=1, le=5, validation_alias="SKILLPATH_TOP_EMPLOYER_TIER")

    # Learning-path generation
    generator_timeout_seconds: float = Field(default=30.0, gt=0, validation_alias="SKILLPATH_GENERATOR_TIMEOUT_SECONDS")
    batch_concurrency: int = Field(default=4, ge=1, validation_alias="SKILLPATH_BATCH_CONCURRENCY")

    # Timeline defaults
    default_hours_per_week: int = Field(default=10, ge=1, validation_alias="SKILLPATH_DEFAULT_HOURS_PER_WEEK")
    default_duration: Literal["3-month", "6-month", "12-month"] = Field(
        default="3-month", validation_alias="SKILLPATH_DEFAULT_DURATION"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _validate_log_level(cls, v: object) -> str:
        level = str(v or "INFO").strip().upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}:
            raise ValueError(f"Unknown log level: {v!r}")
        return level

    @model_validator(mode="after")
    def _validate_coefficients(self) -> "Settings":
        total = (
            self.demand_coefficient
            + self.salary_coefficient
            + self.tier_coefficient
            + self.penetration_coefficient
        )
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Market weight coefficients must sum to 1.0 (got {total:.4f})")
        return self

    @property
    def coefficients(self) -> tuple[float, float, float, float]:
        return (
            self.demand_coefficient,
            self.salary_coefficient,
            self.tier_coefficient,
            self.penetration_coefficient,
        )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str | None = None) -> None:
    """Attach a single stream handler to the package logger.

    Only scripts call this; library modules just use `logging.getLogger(__name__)`.
    """

    root = logging.getLogger("skillpath")
    root.setLevel(level or get_settings().log_level)
    if not any(getattr(h, "_skillpath", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"))
        handler._skillpath = True  # type: ignore[attr-defined]
        root.addHandler(handler)
