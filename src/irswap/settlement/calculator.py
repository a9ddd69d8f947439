"""Swap settlement calculation: fixed leg vs floating leg for one accrual period.

All calculations use Decimal arithmetic exclusively -- no float conversions anywhere.

Direction convention:
  - The payer pays fixed and receives floating.
  - floating leg > fixed leg  => the payer receives the difference
  - fixed leg > floating leg  => the receiver receives the difference
  - equal legs                => nothing is owed, no settlement event

Rounding: both legs keep full precision; only the net amount is rounded to an
integer (SettlementSettings.rounding, ROUND_DOWN by default so a settlement
never pays out more than was accrued).
"""

import re
from datetime import date
from decimal import ROUND_DOWN, ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal

from irswap.config import SettlementSettings
from irswap.exceptions import ExpiredContract, InvalidInput
from irswap.logging import get_logger
from irswap.models import (
    BASIS_POINTS,
    AccrualPeriod,
    BenchmarkRate,
    SettlementEvent,
    SettlementLegs,
    SwapContract,
)

logger = get_logger(__name__)

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")

_ROUNDING_MODES = {
    "down": ROUND_DOWN,
    "half_even": ROUND_HALF_EVEN,
    "half_up": ROUND_HALF_UP,
}


def _require_non_negative(name: str, value: Decimal | int) -> None:
    # NaN cannot be ordered against 0; reject it before comparing
    if not Decimal(value).is_finite():
        raise InvalidInput(f"{name} must be a finite number", context={name: str(value)})
    if value < 0:
        raise InvalidInput(f"{name} must be non-negative", context={name: str(value)})


def validate_contract(contract: SwapContract) -> None:
    """Check the static terms of a contract.

    Raises:
        InvalidInput: On negative notional, rate or spread, malformed or
            identical party addresses, or a maturity not after the start.
    """
    if isinstance(contract.notional_amount, bool) or not isinstance(
        contract.notional_amount, int
    ):
        raise InvalidInput(
            "notional_amount must be an integer",
            context={"contract_id": contract.contract_id},
        )
    _require_non_negative("notional_amount", contract.notional_amount)
    _require_non_negative("swap_rate_bps", contract.swap_rate_bps)
    _require_non_negative("spread_bps", contract.spread_bps)

    for role in ("payer", "receiver"):
        address = getattr(contract, role)
        if not _ADDRESS_RE.match(address):
            raise InvalidInput(
                f"{role} is not a valid address",
                context={"contract_id": contract.contract_id, role: address},
            )
    if contract.payer.lower() == contract.receiver.lower():
        raise InvalidInput(
            "payer and receiver must be different parties",
            context={"contract_id": contract.contract_id},
        )

    if contract.maturity_date <= contract.starting_date:
        raise InvalidInput(
            "Maturity date must be after starting date",
            context={
                "contract_id": contract.contract_id,
                "starting_date": contract.starting_date.isoformat(),
                "maturity_date": contract.maturity_date.isoformat(),
            },
        )


class SettlementCalculator:
    """Computes the net interest owed between the two parties of a swap.

    Stateless apart from its settings; safe to share between contracts.

    Args:
        settings: Rounding convention for the net amount.
    """

    def __init__(self, settings: SettlementSettings | None = None) -> None:
        self._settings = settings or SettlementSettings()
        self._rounding = _ROUNDING_MODES[self._settings.rounding]

    def calculate_legs(
        self,
        notional: int,
        swap_rate_bps: Decimal,
        benchmark_rate_bps: Decimal,
        spread_bps: Decimal,
        period_fraction: Decimal,
        payer: str,
        receiver: str,
    ) -> SettlementLegs:
        """Compare the fixed and floating interest for one period.

        Formula:
            fixed    = notional * swap_rate / 10000 * fraction
            floating = notional * (benchmark + spread) / 10000 * fraction
            net      = |fixed - floating|

        Args:
            notional: Reference principal (never exchanged).
            swap_rate_bps: Fixed rate in basis points.
            benchmark_rate_bps: Observed benchmark in basis points.
            spread_bps: Spread over the benchmark in basis points.
            period_fraction: Accrual fraction of a year (e.g. 0.25 for a quarter).
            payer: Fixed-rate payer address.
            receiver: Floating-rate payer address.

        Returns:
            SettlementLegs with both legs, the rounded net amount and the recipient.

        Raises:
            InvalidInput: If any numeric input is negative, NaN or infinite.
        """
        _require_non_negative("notional_amount", notional)
        _require_non_negative("swap_rate_bps", swap_rate_bps)
        _require_non_negative("benchmark_rate_bps", benchmark_rate_bps)
        _require_non_negative("spread_bps", spread_bps)
        _require_non_negative("period_fraction", period_fraction)

        notional_dec = Decimal(notional)
        fixed_leg = notional_dec * Decimal(swap_rate_bps) / BASIS_POINTS * Decimal(period_fraction)
        floating_rate_bps = Decimal(benchmark_rate_bps) + Decimal(spread_bps)
        floating_leg = notional_dec * floating_rate_bps / BASIS_POINTS * Decimal(period_fraction)

        net_amount = int(abs(fixed_leg - floating_leg).to_integral_value(rounding=self._rounding))

        if net_amount == 0:
            recipient = None
        elif floating_leg > fixed_leg:
            recipient = payer
        else:
            recipient = receiver

        return SettlementLegs(
            fixed_leg=fixed_leg,
            floating_leg=floating_leg,
            net_amount=net_amount,
            recipient=recipient,
        )

    def calculate_settlement(
        self,
        contract: SwapContract,
        benchmark: BenchmarkRate,
        period: AccrualPeriod,
        as_of: date,
    ) -> SettlementEvent | None:
        """Build the settlement event for one accrual period of a contract.

        Args:
            contract: Swap terms.
            benchmark: Benchmark fixing observed for this period.
            period: Accrual period being settled.
            as_of: Date the settlement is requested.

        Returns:
            SettlementEvent, or None when the legs net to zero (no transfer).

        Raises:
            InvalidInput: On invalid contract terms or a fixing for another benchmark.
            ExpiredContract: If as_of is after the maturity date.
        """
        validate_contract(contract)

        if as_of > contract.maturity_date:
            raise ExpiredContract(
                "Settlement requested after maturity",
                context={
                    "contract_id": contract.contract_id,
                    "maturity_date": contract.maturity_date.isoformat(),
                    "as_of": as_of.isoformat(),
                },
            )

        if benchmark.benchmark_id != contract.benchmark_id:
            raise InvalidInput(
                "Fixing does not match the contract benchmark",
                context={
                    "contract_id": contract.contract_id,
                    "expected": contract.benchmark_id,
                    "received": benchmark.benchmark_id,
                },
            )

        legs = self.calculate_legs(
            notional=contract.notional_amount,
            swap_rate_bps=contract.swap_rate_bps,
            benchmark_rate_bps=benchmark.rate_bps,
            spread_bps=contract.spread_bps,
            period_fraction=period.year_fraction,
            payer=contract.payer,
            receiver=contract.receiver,
        )

        if legs.recipient is None:
            logger.info(
                "settlement_zero_net",
                contract_id=contract.contract_id,
                period_end=period.end,
                fixed_leg=legs.fixed_leg,
                floating_leg=legs.floating_leg,
            )
            return None

        return SettlementEvent(
            contract_id=contract.contract_id,
            amount=legs.net_amount,
            recipient=legs.recipient,
            period_start=period.start,
            period_end=period.end,
            fixed_leg=legs.fixed_leg,
            floating_leg=legs.floating_leg,
            benchmark_rate_bps=benchmark.rate_bps,
        )
