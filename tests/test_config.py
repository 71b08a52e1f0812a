from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from skillpath.config import Settings, configure_logging, get_settings


def test_defaults() -> None:
    settings = Settings()
    assert settings.environment == "test"
    assert settings.weight_cache_ttl_seconds == 3600
    assert settings.weight_cache_max_entries == 1000
    assert settings.weight_cache_drift_tolerance == pytest.approx(0.20)
    assert settings.coefficients == (0.40, 0.35, 0.15, 0.10)
    assert settings.default_duration == "3-month"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SKILLPATH_WEIGHT_CACHE_TTL_SECONDS", "60")
    monkeypatch.setenv("SKILLPATH_LOG_LEVEL", "debug")
    monkeypatch.setenv("SKILLPATH_DEFAULT_DURATION", "6-month")
    settings = Settings()
    assert settings.weight_cache_ttl_seconds == 60
    assert settings.log_level == "DEBUG"
    assert settings.default_duration == "6-month"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("SKILLPATH_DEMAND_COEFFICIENT", "0.5"),
        ("SKILLPATH_LOG_LEVEL", "chatty"),
        ("SKILLPATH_DEFAULT_DURATION", "2-month"),
        ("SKILLPATH_WEIGHT_CACHE_MAX_ENTRIES", "0"),
    ],
)
def test_invalid_values_are_rejected(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        Settings()


def test_coefficients_may_be_rebalanced(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SKILLPATH_DEMAND_COEFFICIENT", "0.5")
    monkeypatch.setenv("SKILLPATH_SALARY_COEFFICIENT", "0.25")
    assert Settings().coefficients == (0.5, 0.25, 0.15, 0.10)


def test_get_settings_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    get_settings.cache_clear()
    try:
        first = get_settings()
        monkeypatch.setenv("SKILLPATH_BATCH_CONCURRENCY", "9")
        assert get_settings() is first
        get_settings.cache_clear()
        assert get_settings().batch_concurrency == 9
    finally:
        get_settings.cache_clear()


def test_configure_logging_adds_one_handler() -> None:
    logger = logging.getLogger("skillpath")
    before = list(logger.handlers)
    level = logger.level
    try:
        configure_logging("WARNING")
        configure_logging("DEBUG")
        added = [h for h in logger.handlers if h not in before]
        assert len(added) == 1
        assert logger.level == logging.DEBUG
    finally:
        for handler in logger.handlers[:]:
            if handler not in before:
                logger.removeHandler(handler)
        logger.setLevel(level)
