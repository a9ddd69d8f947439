"""Settlement layer -- schedule, net interest calculation, ledger and service."""

from irswap.settlement.calculator import SettlementCalculator, validate_contract
from irswap.settlement.ledger import SettlementLedger
from irswap.settlement.service import SettlementService

__all__ = [
    "SettlementCalculator",
    "SettlementLedger",
    "SettlementService",
    "validate_contract",
]
