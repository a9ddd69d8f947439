"""Shared test fixtures for swap settlement."""

from datetime import date
from decimal import Decimal

import pytest

from irswap.config import AppSettings, OracleSettings, SettlementSettings
from irswap.models import DayCount, Frequency, SwapContract

PAYER = "0x1111111111111111111111111111111111111111"
RECEIVER = "0x2222222222222222222222222222222222222222"
TOKEN = "0x3333333333333333333333333333333333333333"


def make_contract(**kwargs) -> SwapContract:
    """Create a quarterly 1,000,000 notional swap: 250 bps fixed vs SOFR + 50 bps."""
    defaults = dict(
        contract_id="swap-1",
        payer=PAYER,
        receiver=RECEIVER,
        swap_rate_bps=Decimal("250"),
        spread_bps=Decimal("50"),
        notional_amount=1_000_000,
        frequency=Frequency.QUARTERLY,
        starting_date=date(2026, 1, 1),
        maturity_date=date(2027, 1, 1),
        benchmark_id="SOFR",
        asset_contract=TOKEN,
        day_count=DayCount.ACT_360,
    )
    defaults.update(kwargs)
    return SwapContract(**defaults)


@pytest.fixture
def contract() -> SwapContract:
    return make_contract()


@pytest.fixture
def contract_factory():
    """Factory for contracts that differ from the default in a few terms."""
    return make_contract


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults."""
    return AppSettings(
        log_level="DEBUG",
        settlement=SettlementSettings(rounding="down"),
        oracle=OracleSettings(max_fixing_age_days=5),
    )
