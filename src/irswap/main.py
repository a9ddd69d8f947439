"""Command-line entry point for swap settlement.

Loads a contract from a JSON file, seeds an in-memory oracle with the
supplied benchmark fixings, settles the due period(s) and prints the
emitted settlement events as JSON on stdout.

Example:
    irswap-settle swap.json --as-of 2026-04-01 --rate 300
    irswap-settle swap.json --as-of 2026-10-01 --fixing 2026-04-01=280 \
        --fixing 2026-07-01=310 --all
"""

import argparse
import asyncio
import json
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

from irswap.config import AppSettings
from irswap.exceptions import InvalidInput, SwapError
from irswap.logging import get_logger, setup_logging
from irswap.models import DayCount, Frequency, SwapContract
from irswap.oracle.memory import InMemoryOracle
from irswap.settlement.calculator import SettlementCalculator
from irswap.settlement.schedule import payment_dates
from irswap.settlement.service import SettlementService


def load_contract(path: Path, default_day_count: DayCount = DayCount.ACT_360) -> SwapContract:
    """Parse a SwapContract from a JSON document.

    Dates are ISO strings, rates are basis points (numbers or strings).

    Raises:
        InvalidInput: If a field is missing or malformed.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return SwapContract(
            contract_id=raw["contract_id"],
            payer=raw["payer"],
            receiver=raw["receiver"],
            swap_rate_bps=Decimal(str(raw["swap_rate_bps"])),
            spread_bps=Decimal(str(raw.get("spread_bps", 0))),
            notional_amount=_parse_notional(raw["notional_amount"]),
            frequency=Frequency(raw["frequency"]),
            starting_date=date.fromisoformat(raw["starting_date"]),
            maturity_date=date.fromisoformat(raw["maturity_date"]),
            benchmark_id=raw["benchmark_id"],
            asset_contract=raw["asset_contract"],
            oracle_address=raw.get("oracle_address"),
            day_count=DayCount(raw.get("day_count", default_day_count.value)),
        )
    except (OSError, KeyError, TypeError, ValueError, InvalidOperation) as exc:
        raise InvalidInput(f"Malformed contract file: {exc!r}", context={"path": str(path)}) from exc


def _parse_notional(value: object) -> int:
    """Accept integers and integral numbers (1000000 or 1000000.0), never truncate."""
    if isinstance(value, bool):
        raise ValueError(f"notional_amount must be an integer, got {value!r}")
    amount = Decimal(str(value))
    if not amount.is_finite() or amount != amount.to_integral_value():
        raise ValueError(f"notional_amount must be an integer, got {value!r}")
    return int(amount)


def _parse_bps(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"expected a number of basis points, got {value!r}") from exc


def _parse_fixing(value: str) -> tuple[date, Decimal]:
    fixing_date, _, rate = value.partition("=")
    try:
        return date.fromisoformat(fixing_date), Decimal(rate)
    except (ValueError, InvalidOperation) as exc:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD=BPS, got {value!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="irswap-settle",
        description="Settle an interest rate swap for the periods due on a date.",
    )
    parser.add_argument("contract", type=Path, help="path to the contract JSON file")
    parser.add_argument("--as-of", type=date.fromisoformat, required=True, help="settlement date")
    parser.add_argument(
        "--rate",
        type=_parse_bps,
        help="benchmark rate in bps, applied to every payment date up to --as-of",
    )
    parser.add_argument(
        "--fixing",
        type=_parse_fixing,
        action="append",
        default=[],
        help="benchmark fixing as YYYY-MM-DD=BPS (repeatable)",
    )
    parser.add_argument("--all", action="store_true", help="settle every due period")
    return parser


async def run(args: argparse.Namespace, settings: AppSettings) -> list[dict]:
    """Settle according to parsed CLI arguments and return serialized events."""
    contract = load_contract(args.contract, settings.settlement.default_day_count)

    oracle = InMemoryOracle(settings.oracle)
    if args.rate is not None:
        for payment_date in payment_dates(contract):
            if payment_date > args.as_of:
                break
            await oracle.publish_rate(contract.benchmark_id, payment_date, args.rate)
    for fixing_date, rate_bps in args.fixing:
        await oracle.publish_rate(contract.benchmark_id, fixing_date, rate_bps)

    service = SettlementService(SettlementCalculator(settings.settlement), oracle)
    if args.all:
        events = await service.settle_due(contract, args.as_of)
    else:
        event = await service.settle(contract, args.as_of)
        events = [event] if event is not None else []

    return [e.to_dict() for e in events]


def main(argv: list[str] | None = None) -> int:
    """Synchronous entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    settings = AppSettings()
    setup_logging(settings.log_level)
    logger = get_logger("irswap.main")

    try:
        events = asyncio.run(run(args, settings))
    except SwapError as exc:
        logger.error("settlement_failed", error=str(exc), error_type=type(exc).__name__)
        return 1

    json.dump(events, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
