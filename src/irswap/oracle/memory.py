"""In-memory benchmark fixing store.

Holds published fixings per benchmark and answers lookups with the most
recent fixing on or before the requested date. Uses asyncio.Lock for safe
concurrent publish/fetch from multiple coroutines.
"""

import asyncio
import bisect
from datetime import date
from decimal import Decimal

from irswap.config import OracleSettings
from irswap.exceptions import InvalidInput, OracleUnavailable
from irswap.logging import get_logger
from irswap.models import BenchmarkRate
from irswap.oracle.client import BenchmarkOracle

logger = get_logger(__name__)


class InMemoryOracle(BenchmarkOracle):
    """Benchmark oracle backed by a dict of fixings.

    Args:
        settings: Staleness limit for fixings.
    """

    def __init__(self, settings: OracleSettings | None = None) -> None:
        self._settings = settings or OracleSettings()
        # benchmark_id -> sorted fixing dates, and (benchmark_id, date) -> rate
        self._dates: dict[str, list[date]] = {}
        self._rates: dict[tuple[str, date], Decimal] = {}
        self._lock = asyncio.Lock()

    async def publish_rate(self, benchmark_id: str, fixing_date: date, rate_bps: Decimal) -> None:
        """Store (or overwrite) the fixing of a benchmark for a date.

        Raises:
            InvalidInput: If rate_bps is negative or not a finite number.
        """
        if not Decimal(rate_bps).is_finite() or rate_bps < 0:
            raise InvalidInput(
                "benchmark_rate_bps must be a finite, non-negative number",
                context={"benchmark_id": benchmark_id, "rate_bps": str(rate_bps)},
            )
        async with self._lock:
            key = (benchmark_id, fixing_date)
            if key not in self._rates:
                bisect.insort(self._dates.setdefault(benchmark_id, []), fixing_date)
            self._rates[key] = rate_bps

        logger.debug(
            "fixing_published",
            benchmark_id=benchmark_id,
            fixing_date=fixing_date,
            rate_bps=rate_bps,
        )

    async def fetch_rate(self, benchmark_id: str, as_of: date) -> BenchmarkRate:
        """Return the latest fixing on or before as_of.

        Raises:
            OracleUnavailable: If the benchmark has no fixing on or before as_of,
                or the latest one is older than max_fixing_age_days.
        """
        async with self._lock:
            dates = self._dates.get(benchmark_id, [])
            idx = bisect.bisect_right(dates, as_of)
            if idx == 0:
                raise OracleUnavailable(
                    "No fixing available",
                    context={"benchmark_id": benchmark_id, "as_of": as_of.isoformat()},
                )
            fixing_date = dates[idx - 1]
            rate_bps = self._rates[(benchmark_id, fixing_date)]

        age_days = (as_of - fixing_date).days
        if age_days > self._settings.max_fixing_age_days:
            raise OracleUnavailable(
                "Latest fixing is stale",
                context={
                    "benchmark_id": benchmark_id,
                    "as_of": as_of.isoformat(),
                    "fixing_date": fixing_date.isoformat(),
                    "age_days": age_days,
                },
            )

        return BenchmarkRate(
            benchmark_id=benchmark_id,
            rate_bps=rate_bps,
            fixing_date=fixing_date,
        )
