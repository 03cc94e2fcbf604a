"""Multi-venue AMM swap aggregator."""

from aggregator.aggregator import Aggregator, build_aggregator, get_default_aggregator

__version__ = "0.1.0"
__all__ = ["Aggregator", "build_aggregator", "get_default_aggregator", "__version__"]
