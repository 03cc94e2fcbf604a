"""Price discovery and swap execution across registered venues."""

from aggregator.routing.executor import SwapExecutor
from aggregator.routing.oracle import ReserveOracle
from aggregator.routing.quote import QuoteEngine
from aggregator.routing.registry import RegistrySnapshot, RouterRegistry
from aggregator.routing.types import PoolReserves, QuoteResult, SwapOutcome

__all__ = [
    "RouterRegistry",
    "RegistrySnapshot",
    "ReserveOracle",
    "QuoteEngine",
    "SwapExecutor",
    "PoolReserves",
    "QuoteResult",
    "SwapOutcome",
]
