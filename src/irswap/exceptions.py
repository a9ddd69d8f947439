"""Custom exceptions for swap settlement.

All settlement, schedule and oracle exceptions live here
to avoid circular imports between modules.
"""

from typing import Any


class SwapError(Exception):
    """Base exception for all swap settlement errors.

    Attributes:
        message: Human-readable error description.
        context: Extra fields describing the failure (contract_id, dates, ...).
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class InvalidInput(SwapError):
    """Raised when a notional, rate, spread or period fraction is negative or malformed."""


class ExpiredContract(SwapError):
    """Raised when settlement is requested after the contract's maturity date."""


class OracleUnavailable(SwapError):
    """Raised when the benchmark rate cannot be obtained from the oracle."""


class SettlementNotDue(SwapError):
    """Raised when no accrual period has ended on or before the settlement date."""


class DuplicateSettlement(SwapError):
    """Raised when an accrual period that was already settled is settled again."""


class TransferFailed(SwapError):
    """Raised when a settlement listener (the asset transfer sink) fails.

    The period is left unsettled so that it becomes due again.
    """
