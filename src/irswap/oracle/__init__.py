"""Benchmark rate sources -- the oracle collaborator consulted at settlement."""

from irswap.oracle.client import BenchmarkOracle
from irswap.oracle.memory import InMemoryOracle

__all__ = ["BenchmarkOracle", "InMemoryOracle"]
