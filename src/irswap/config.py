"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from irswap.models import DayCount


class SettlementSettings(BaseSettings):
    """Settlement arithmetic conventions."""

    model_config = SettingsConfigDict(env_prefix="SETTLEMENT_")

    # Only the net amount is rounded; legs keep full Decimal precision
    rounding: Literal["down", "half_even", "half_up"] = "down"
    default_day_count: DayCount = DayCount.ACT_360


class OracleSettings(BaseSettings):
    """Benchmark oracle parameters."""

    model_config = SettingsConfigDict(env_prefix="ORACLE_")

    max_fixing_age_days: int = 5  # covers a long weekend plus a holiday


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    settlement: SettlementSettings = SettlementSettings()
    oracle: OracleSettings = OracleSettings()
