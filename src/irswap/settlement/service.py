"""Settlement service -- the swap() operation of a contract.

For one contract and a settlement date:
1. Reject the request if the contract has matured (as_of > maturity_date).
2. Find the earliest accrual period that has ended and is not yet settled.
3. Fetch the benchmark fixing for that period's payment date from the oracle.
4. Compute the net interest with SettlementCalculator.
5. Hand the event to listeners (the asset transfer sink lives outside this
   package), then record the period in the ledger. A failing listener leaves
   the period unsettled and surfaces as TransferFailed.

Settlements of the same contract are serialized with a per-contract
asyncio.Lock so that concurrent triggers cannot pay a period twice. A lock
exists only while some coroutine holds or waits for it, so the lock table is
bounded by the number of contracts being settled concurrently.
The oracle is never retried here; its failures surface as OracleUnavailable.
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import date

from irswap.exceptions import (
    ExpiredContract,
    OracleUnavailable,
    SettlementNotDue,
    SwapError,
    TransferFailed,
)
from irswap.logging import get_logger, settlement_context
from irswap.models import AccrualPeriod, BenchmarkRate, SettlementEvent, SwapContract
from irswap.oracle.client import BenchmarkOracle
from irswap.settlement.calculator import SettlementCalculator, validate_contract
from irswap.settlement.ledger import SettlementLedger
from irswap.settlement.schedule import accrual_periods

logger = get_logger(__name__)

SettlementListener = Callable[[SettlementEvent], None]


class SettlementService:
    """Drives settlement of swap contracts against a benchmark oracle.

    Args:
        calculator: Net interest calculator.
        oracle: Benchmark rate source.
        ledger: Settled-period record. A fresh ledger is created if omitted.
    """

    def __init__(
        self,
        calculator: SettlementCalculator,
        oracle: BenchmarkOracle,
        ledger: SettlementLedger | None = None,
    ) -> None:
        self._calculator = calculator
        self._oracle = oracle
        self._ledger = ledger or SettlementLedger()
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._listeners: list[SettlementListener] = []

    @property
    def ledger(self) -> SettlementLedger:
        return self._ledger

    def add_listener(self, listener: SettlementListener) -> None:
        """Register a callback invoked with every emitted SettlementEvent.

        A period is recorded as settled only after all listeners return, so a
        period is re-sent after any listener fails. Listeners should treat
        (contract_id, period_end) as an idempotency key.
        """
        self._listeners.append(listener)

    def next_due_period(self, contract: SwapContract, as_of: date) -> AccrualPeriod | None:
        """Return the earliest unsettled period whose payment date is on or before as_of."""
        for period in accrual_periods(contract):
            if period.end > as_of:
                return None
            if not self._ledger.is_settled(contract.contract_id, period.end):
                return period
        return None

    async def settle(self, contract: SwapContract, as_of: date) -> SettlementEvent | None:
        """Settle the next due period of a contract.

        Returns:
            The emitted SettlementEvent, or None if the period netted to zero.

        Raises:
            InvalidInput: On invalid contract terms.
            ExpiredContract: If as_of is after the maturity date.
            SettlementNotDue: If no unsettled period has ended by as_of.
            OracleUnavailable: If the benchmark fixing cannot be obtained.
            TransferFailed: If a listener raised; the period stays due.
        """
        self._check_settleable(contract, as_of)
        async with self._contract_lock(contract.contract_id):
            period = self.next_due_period(contract, as_of)
            if period is None:
                raise SettlementNotDue(
                    "No accrual period due",
                    context={"contract_id": contract.contract_id, "as_of": as_of.isoformat()},
                )
            return await self._settle_period(contract, period, as_of)

    async def settle_due(self, contract: SwapContract, as_of: date) -> list[SettlementEvent]:
        """Settle every period that has ended by as_of, oldest first.

        Stops at the first failure; periods settled before it stay recorded.
        The failure's context then lists them under "settled_periods".

        Returns:
            Emitted events (zero-net periods are settled but produce no event).
        """
        self._check_settleable(contract, as_of)
        events: list[SettlementEvent] = []
        settled: list[str] = []
        async with self._contract_lock(contract.contract_id):
            while True:
                period = self.next_due_period(contract, as_of)
                if period is None:
                    break
                try:
                    event = await self._settle_period(contract, period, as_of)
                except SwapError as exc:
                    exc.context["settled_periods"] = settled
                    raise
                settled.append(period.end.isoformat())
                if event is not None:
                    events.append(event)
        return events

    def _check_settleable(self, contract: SwapContract, as_of: date) -> None:
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

    @asynccontextmanager
    async def _contract_lock(self, contract_id: str) -> AsyncIterator[None]:
        """Hold the contract's lock; drop it from the table once nobody needs it."""
        lock = self._locks.setdefault(contract_id, asyncio.Lock())
        self._lock_users[contract_id] = self._lock_users.get(contract_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[contract_id] -= 1
            if self._lock_users[contract_id] == 0:
                del self._lock_users[contract_id]
                del self._locks[contract_id]

    async def _fetch_benchmark(self, contract: SwapContract, fixing_date: date) -> BenchmarkRate:
        try:
            return await self._oracle.fetch_rate(contract.benchmark_id, fixing_date)
        except OracleUnavailable:
            raise
        except Exception as exc:
            raise OracleUnavailable(
                "Benchmark oracle failed",
                context={
                    "contract_id": contract.contract_id,
                    "benchmark_id": contract.benchmark_id,
                    "oracle_address": contract.oracle_address,
                    "error": repr(exc),
                },
            ) from exc

    def _notify(self, event: SettlementEvent) -> None:
        for listener in self._listeners:
            try:
                listener(event)
            except Exception as exc:
                raise TransferFailed(
                    "Settlement listener failed; period left unsettled",
                    context={
                        "contract_id": event.contract_id,
                        "period_end": event.period_end.isoformat(),
                        "amount": event.amount,
                        "recipient": event.recipient,
                        "error": repr(exc),
                    },
                ) from exc

    async def _settle_period(
        self,
        contract: SwapContract,
        period: AccrualPeriod,
        as_of: date,
    ) -> SettlementEvent | None:
        with settlement_context(contract.contract_id, period.end):
            try:
                benchmark = await self._fetch_benchmark(contract, period.end)
            except OracleUnavailable:
                logger.warning("settlement_oracle_unavailable", exc_info=True)
                raise

            event = self._calculator.calculate_settlement(contract, benchmark, period, as_of)

            if event is not None:
                try:
                    self._notify(event)
                except TransferFailed:
                    logger.error("settlement_transfer_failed", exc_info=True)
                    raise

            # Recorded only after every listener accepted the event
            self._ledger.record(contract.contract_id, period.end, event)

            if event is None:
                return None

            logger.info(
                "settlement_emitted",
                amount=event.amount,
                recipient=event.recipient,
                fixed_leg=event.fixed_leg,
                floating_leg=event.floating_leg,
                benchmark_rate_bps=event.benchmark_rate_bps,
            )
            return event
