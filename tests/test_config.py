"""
Tests for environment-driven configuration.
"""
from pathlib import Path
from smartdhandha.config import AppConfig

FIX = Path(__file__).parent / "fixtures"


def test_defaults(monkeypatch):
    for name in ("SD_SNAPSHOT_PATH", "LOG_LEVEL", "SD_LOG_FILE", "SD_CURRENCY_SYMBOL", "SD_CHECK_TOTALS"):
        monkeypatch.delenv(name, raising=False)
    config = AppConfig.from_env()
    assert config.snapshot_path is None
    assert config.currency_symbol == "₹"
    assert config.check_totals is True
    assert config.log_level == "INFO"
    assert config.log_file is None
    assert config.validate() == ["SD_SNAPSHOT_PATH is required (or pass --data)"]


def test_values_from_env(monkeypatch):
    monkeypatch.setenv("SD_SNAPSHOT_PATH", f"  {FIX / 'snapshot.json'}  ")
    monkeypatch.setenv("SD_CURRENCY_SYMBOL", "Rs.")
    monkeypatch.setenv("SD_CHECK_TOTALS", "FALSE")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    config = AppConfig.from_env()
    assert config.snapshot_path == FIX / "snapshot.json"
    assert config.currency_symbol == "Rs."
    assert config.check_totals is False
    assert config.validate() == []


def test_blank_path_is_unset(monkeypatch):
    monkeypatch.setenv("SD_SNAPSHOT_PATH", "   ")
    assert AppConfig.from_env().snapshot_path is None


def test_validate_reports_problems(monkeypatch, tmp_path):
    monkeypatch.setenv("SD_SNAPSHOT_PATH", str(tmp_path / "missing.json"))
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    errors = AppConfig.from_env().validate()
    assert len(errors) == 2
    assert errors[0].startswith("Snapshot file not found")
    assert errors[1] == "Unknown LOG_LEVEL: LOUD"
