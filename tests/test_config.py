"""Tests for environment-driven settings."""

import pytest

from irswap.config import AppSettings, OracleSettings, SettlementSettings
from irswap.models import DayCount


class TestDefaults:
    def test_settlement_defaults(self) -> None:
        settings = SettlementSettings()
        assert settings.rounding == "down"
        assert settings.default_day_count == DayCount.ACT_360

    def test_oracle_defaults(self) -> None:
        assert OracleSettings().max_fixing_age_days == 5

    def test_app_settings_compose(self, mock_settings: AppSettings) -> None:
        assert mock_settings.log_level == "DEBUG"
        assert mock_settings.settlement.rounding == "down"


class TestEnvironment:
    def test_settlement_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SETTLEMENT_ROUNDING", "half_even")
        monkeypatch.setenv("SETTLEMENT_DEFAULT_DAY_COUNT", "ACT/365")

        settings = SettlementSettings()

        assert settings.rounding == "half_even"
        assert settings.default_day_count == DayCount.ACT_365

    def test_oracle_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ORACLE_MAX_FIXING_AGE_DAYS", "2")
        assert OracleSettings().max_fixing_age_days == 2

    def test_invalid_rounding_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SETTLEMENT_ROUNDING", "ceiling")
        with pytest.raises(ValueError):
            SettlementSettings()

    def test_nested_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ORACLE__MAX_FIXING_AGE_DAYS", "9")
        assert AppSettings().oracle.max_fixing_age_days == 9
