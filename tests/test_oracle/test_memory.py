"""Tests for InMemoryOracle fixing lookup and staleness detection."""

from datetime import date
from decimal import Decimal

import pytest

from irswap.config import OracleSettings
from irswap.exceptions import InvalidInput, OracleUnavailable
from irswap.oracle.memory import InMemoryOracle


@pytest.fixture
def oracle() -> InMemoryOracle:
    return InMemoryOracle(OracleSettings(max_fixing_age_days=5))


@pytest.mark.asyncio
async def test_exact_fixing_returned(oracle: InMemoryOracle) -> None:
    await oracle.publish_rate("SOFR", date(2026, 4, 1), Decimal("300"))

    rate = await oracle.fetch_rate("SOFR", date(2026, 4, 1))

    assert rate.benchmark_id == "SOFR"
    assert rate.rate_bps == Decimal("300")
    assert rate.fixing_date == date(2026, 4, 1)


@pytest.mark.asyncio
async def test_latest_fixing_on_or_before_date(oracle: InMemoryOracle) -> None:
    """Fixings published out of order are still looked up by date."""
    await oracle.publish_rate("SOFR", date(2026, 4, 3), Decimal("310"))
    await oracle.publish_rate("SOFR", date(2026, 3, 30), Decimal("290"))
    await oracle.publish_rate("SOFR", date(2026, 4, 1), Decimal("300"))

    rate = await oracle.fetch_rate("SOFR", date(2026, 4, 2))

    assert rate.fixing_date == date(2026, 4, 1)
    assert rate.rate_bps == Decimal("300")


@pytest.mark.asyncio
async def test_republish_overwrites(oracle: InMemoryOracle) -> None:
    await oracle.publish_rate("SOFR", date(2026, 4, 1), Decimal("300"))
    await oracle.publish_rate("SOFR", date(2026, 4, 1), Decimal("305"))

    rate = await oracle.fetch_rate("SOFR", date(2026, 4, 1))
    assert rate.rate_bps == Decimal("305")


@pytest.mark.asyncio
async def test_unknown_benchmark_unavailable(oracle: InMemoryOracle) -> None:
    await oracle.publish_rate("SOFR", date(2026, 4, 1), Decimal("300"))
    with pytest.raises(OracleUnavailable):
        await oracle.fetch_rate("ESTR", date(2026, 4, 1))


@pytest.mark.asyncio
async def test_only_future_fixings_unavailable(oracle: InMemoryOracle) -> None:
    await oracle.publish_rate("SOFR", date(2026, 4, 2), Decimal("300"))
    with pytest.raises(OracleUnavailable, match="No fixing"):
        await oracle.fetch_rate("SOFR", date(2026, 4, 1))


@pytest.mark.asyncio
async def test_stale_fixing_unavailable(oracle: InMemoryOracle) -> None:
    await oracle.publish_rate("SOFR", date(2026, 3, 20), Decimal("300"))
    with pytest.raises(OracleUnavailable, match="stale"):
        await oracle.fetch_rate("SOFR", date(2026, 4, 1))


@pytest.mark.asyncio
async def test_fixing_at_age_limit_is_usable(oracle: InMemoryOracle) -> None:
    await oracle.publish_rate("SOFR", date(2026, 3, 27), Decimal("300"))
    rate = await oracle.fetch_rate("SOFR", date(2026, 4, 1))
    assert rate.fixing_date == date(2026, 3, 27)


@pytest.mark.asyncio
async def test_negative_rate_rejected(oracle: InMemoryOracle) -> None:
    with pytest.raises(InvalidInput):
        await oracle.publish_rate("SOFR", date(2026, 4, 1), Decimal("-10"))


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["NaN", "Infinity"])
async def test_non_finite_rate_rejected(oracle: InMemoryOracle, value: str) -> None:
    with pytest.raises(InvalidInput, match="finite"):
        await oracle.publish_rate("SOFR", date(2026, 4, 1), Decimal(value))
    with pytest.raises(OracleUnavailable):
        await oracle.fetch_rate("SOFR", date(2026, 4, 1))
