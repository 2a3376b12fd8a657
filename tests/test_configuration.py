"""Mini README: Tests for environment-driven settings and logging helpers."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from floymhub.configuration import FloymSettings, get_settings
from floymhub.logging_utils import _resolve_level, get_logger
from floymhub.reporting.formatting import format_currency


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """``FLOYM_*`` variables override defaults without touching the disk."""

    target = tmp_path / "ledger-data"
    monkeypatch.setenv("FLOYM_DATA_DIRECTORY", str(target))
    monkeypatch.setenv("FLOYM_INVOICE_NUMBER_BASE", "2000")
    monkeypatch.setenv("FLOYM_STORAGE_KEY_PREFIX", "branch2_")

    settings = FloymSettings()

    assert settings.data_directory == target.resolve()
    assert not target.exists()
    assert settings.invoice_number_base == 2000
    assert settings.storage_key_prefix == "branch2_"
    assert settings.upcoming_exam_limit == 5


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()


def test_formatting_with_default_settings_creates_no_folders(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Reading the currency symbol must not create the data directory as a side effect."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FLOYM_DATA_DIRECTORY", raising=False)
    monkeypatch.delenv("FLOYM_CURRENCY_SYMBOL", raising=False)
    get_settings.cache_clear()
    try:
        assert format_currency(-500) == "-₹500.00"
    finally:
        get_settings.cache_clear()

    assert list(tmp_path.iterdir()) == []


def test_log_levels_resolve_by_name() -> None:
    assert _resolve_level("debug") == logging.DEBUG
    assert _resolve_level(logging.WARNING) == logging.WARNING
    with pytest.raises(ValueError):
        _resolve_level("chatty")
    assert get_logger("floymhub.tests").name == "floymhub.tests"
