"""Settlement ledger -- which periods of each contract have been settled and to whom.

A period counts as settled once the service has processed it, whether or
not a transfer was due. Zero-net periods are marked settled without an event.
"""

from datetime import date

from irswap.exceptions import DuplicateSettlement
from irswap.logging import get_logger
from irswap.models import SettlementEvent, SwapContract

logger = get_logger(__name__)


class SettlementLedger:
    """In-memory record of settled periods and emitted settlement events."""

    def __init__(self) -> None:
        self._settled: dict[str, set[date]] = {}
        self._events: dict[str, list[SettlementEvent]] = {}

    def is_settled(self, contract_id: str, period_end: date) -> bool:
        """Return True if the period ending on period_end was already processed."""
        return period_end in self._settled.get(contract_id, set())

    def record(
        self,
        contract_id: str,
        period_end: date,
        event: SettlementEvent | None,
    ) -> None:
        """Mark a period as settled and store its event, if any.

        Raises:
            DuplicateSettlement: If the period was already recorded.
        """
        if self.is_settled(contract_id, period_end):
            raise DuplicateSettlement(
                "Period already settled",
                context={"contract_id": contract_id, "period_end": period_end.isoformat()},
            )
        self._settled.setdefault(contract_id, set()).add(period_end)
        if event is not None:
            self._events.setdefault(contract_id, []).append(event)

        logger.info(
            "ledger_period_recorded",
            contract_id=contract_id,
            period_end=period_end,
            amount=event.amount if event is not None else 0,
            recipient=event.recipient if event is not None else None,
        )

    def get_events(self, contract_id: str) -> list[SettlementEvent]:
        """Return emitted events for a contract in settlement order."""
        return list(self._events.get(contract_id, []))

    def settled_periods(self, contract_id: str) -> list[date]:
        """Return end dates of processed periods, ascending."""
        return sorted(self._settled.get(contract_id, set()))

    def total_received(self, contract_id: str, address: str) -> int:
        """Sum of all amounts paid to address under a contract."""
        return sum(
            e.amount
            for e in self._events.get(contract_id, [])
            if e.recipient.lower() == address.lower()
        )

    def get_summary(self, contract: SwapContract) -> dict:
        """Cumulative settlement totals for both parties.

        net_to_payer is positive when the payer has received more than
        the receiver over the life of the contract.
        """
        to_payer = self.total_received(contract.contract_id, contract.payer)
        to_receiver = self.total_received(contract.contract_id, contract.receiver)
        return {
            "contract_id": contract.contract_id,
            "periods_settled": len(self._settled.get(contract.contract_id, set())),
            "events": len(self._events.get(contract.contract_id, [])),
            "total_to_payer": to_payer,
            "total_to_receiver": to_receiver,
            "net_to_payer": to_payer - to_receiver,
        }
