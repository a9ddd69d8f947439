"""Shared data models for interest rate swap settlement.

CRITICAL: All rates and leg amounts use Decimal. Never use float for rates or money.
Rates are expressed in basis points (1 bp = 0.0001). Settled amounts are integers
in the smallest unit of the asset contract.
"""

import time
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

BASIS_POINTS = Decimal("10000")


class Frequency(str, Enum):
    """Payment frequency of the swap."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"

    @property
    def months(self) -> int:
        """Number of months between two payment dates."""
        return _FREQUENCY_MONTHS[self]


_FREQUENCY_MONTHS = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.SEMI_ANNUAL: 6,
    Frequency.ANNUAL: 12,
}


class DayCount(str, Enum):
    """Day count basis used to turn an accrual period into a year fraction."""

    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"
    THIRTY_360 = "30/360"


@dataclass(frozen=True)
class SwapContract:
    """Terms of one bilateral fixed-for-floating swap.

    The payer pays the fixed leg and receives the floating leg; the receiver
    does the opposite. Only the net interest difference ever changes hands.
    """

    contract_id: str
    payer: str
    receiver: str
    swap_rate_bps: Decimal  # fixed leg
    spread_bps: Decimal  # added to the benchmark on the floating leg
    notional_amount: int  # referential only, never transferred
    frequency: Frequency
    starting_date: date
    maturity_date: date
    benchmark_id: str  # e.g. "SOFR"
    asset_contract: str  # token the net amount is paid in
    oracle_address: str | None = None
    day_count: DayCount = DayCount.ACT_360


@dataclass(frozen=True)
class SettlementLegs:
    """Result of one fixed vs floating comparison.

    recipient is None only when both legs are equal and nothing is owed.
    """

    fixed_leg: Decimal
    floating_leg: Decimal
    net_amount: int
    recipient: str | None


@dataclass(frozen=True)
class AccrualPeriod:
    """One interest period, paid on its end date."""

    start: date
    end: date
    year_fraction: Decimal


@dataclass(frozen=True)
class BenchmarkRate:
    """A single benchmark fixing supplied by the oracle."""

    benchmark_id: str
    rate_bps: Decimal
    fixing_date: date


@dataclass
class SettlementEvent:
    """Record of a single net interest transfer to one of the two parties."""

    contract_id: str
    amount: int
    recipient: str
    period_start: date
    period_end: date
    fixed_leg: Decimal
    floating_leg: Decimal
    benchmark_rate_bps: Decimal
    settled_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        """Serialize for logging or JSON output. Decimals and dates become strings."""
        return {
            "contract_id": self.contract_id,
            "amount": self.amount,
            "recipient": self.recipient,
            "period_start": self.period_start.isoformat(),
            "period_end": self.period_end.isoformat(),
            "fixed_leg": str(self.fixed_leg),
            "floating_leg": str(self.floating_leg),
            "benchmark_rate_bps": str(self.benchmark_rate_bps),
            "settled_at": self.settled_at,
        }
