"""Abstract benchmark oracle interface.

Settlement code depends only on this interface, keeping the fixing
source (on-chain feed, market data vendor, test table) isolated in the
concrete implementation. Implementations own any retry policy; the
settlement service never retries.
"""

from abc import ABC, abstractmethod
from datetime import date

from irswap.models import BenchmarkRate


class BenchmarkOracle(ABC):
    """Abstract base class for benchmark rate sources."""

    @abstractmethod
    async def fetch_rate(self, benchmark_id: str, as_of: date) -> BenchmarkRate:
        """Return the benchmark fixing applicable on as_of.

        Raises:
            OracleUnavailable: If no usable fixing exists.
        """
        ...
