"""Tests for the irswap structlog helpers."""

from datetime import date
from decimal import Decimal

import pytest
import structlog

from irswap.logging import render_domain_values, settlement_context


class TestRenderDomainValues:
    def test_decimal_and_date_rendered_exactly(self) -> None:
        event_dict = {
            "event": "settlement_emitted",
            "fixed_leg": Decimal("6250.000000000000001"),
            "period_end": date(2026, 4, 1),
            "amount": 2500,
        }

        rendered = render_domain_values(None, "info", event_dict)

        assert rendered["fixed_leg"] == "6250.000000000000001"
        assert rendered["period_end"] == "2026-04-01"
        assert rendered["amount"] == 2500


class TestSettlementContext:
    def test_binds_and_unbinds_period_fields(self) -> None:
        structlog.contextvars.clear_contextvars()

        with settlement_context("swap-1", date(2026, 4, 1)):
            bound = structlog.contextvars.get_contextvars()
            assert bound["contract_id"] == "swap-1"
            assert bound["period_end"] == date(2026, 4, 1)

        assert structlog.contextvars.get_contextvars() == {}

    def test_unbinds_when_settlement_raises(self) -> None:
        structlog.contextvars.clear_contextvars()

        with pytest.raises(RuntimeError):
            with settlement_context("swap-1", date(2026, 4, 1)):
                raise RuntimeError("transfer failed")

        assert structlog.contextvars.get_contextvars() == {}
