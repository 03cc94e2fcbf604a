"""Aggregator facade.

Wires the registry, reserve oracle, quote engine and swap executor over one
contract network. Quotes run without locking; swaps and administrative
changes are serialized so execution follows a single-writer ledger model.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from functools import lru_cache

import structlog

from aggregator.config import DEFAULT_CONFIG, AggregatorConfig
from aggregator.routing import (
    QuoteEngine,
    QuoteResult,
    ReserveOracle,
    RouterRegistry,
    SwapExecutor,
    SwapOutcome,
)
from aggregator.venues.base import ContractNetwork

logger = structlog.get_logger()


class Aggregator:
    """Entry point for quoting and executing swaps.

    Args:
        network: Contract network the venues live on
        config: Aggregator configuration. If None, uses defaults.
    """

    def __init__(self, network: ContractNetwork, config: AggregatorConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self.network = network
        self.registry = RouterRegistry(network, owner=self.config.owner)
        self.oracle = ReserveOracle(network)
        self.quote_engine = QuoteEngine(
            self.registry,
            network,
            oracle=self.oracle,
            include_connectors=self.config.quote_connectors,
        )
        self.executor = SwapExecutor(
            self.registry,
            network,
            custody=self.config.executor,
            deadline_seconds=self.config.deadline_seconds,
        )
        self._lock = threading.Lock()

    def quote(self, amount_in: int, token_in: str, token_out: str) -> QuoteResult:
        return self.quote_engine.quote(amount_in, token_in, token_out)

    def swap(
        self,
        amount_in: int,
        amount_out_min: int,
        venue: str,
        path: list[str],
        caller: str,
        deadline: int | None = None,
    ) -> SwapOutcome:
        with self._lock:
            return self.executor.swap(amount_in, amount_out_min, venue, path, caller, deadline)

    def set_routers(self, caller: str, routers: Iterable[str]) -> None:
        with self._lock:
            self.registry.set_routers(caller, routers)

    def set_connectors(self, caller: str, connectors: Iterable[str]) -> None:
        with self._lock:
            self.registry.set_connectors(caller, connectors)

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        with self._lock:
            self.registry.transfer_ownership(caller, new_owner)

    @property
    def routers(self) -> list[str]:
        return self.registry.routers

    @property
    def connectors(self) -> list[str]:
        return self.registry.connectors


def build_aggregator(config: AggregatorConfig) -> Aggregator:
    """Create an aggregator for the configured network.

    Uses web3 when rpc_url is set, otherwise an empty in-memory network.
    """
    network: ContractNetwork
    if config.rpc_url:
        from aggregator.venues.onchain import Web3Network

        logger.info("web3_network_enabled", rpc_url=config.rpc_url[:50] + "...")
        network = Web3Network(config.rpc_url)
    else:
        from aggregator.venues.memory import InMemoryNetwork

        logger.info("in_memory_network_enabled", reason="AGGREGATOR_RPC_URL not set")
        network = InMemoryNetwork(fee_bps=config.fee_bps)
    return Aggregator(network, config)


@lru_cache(maxsize=1)
def get_default_aggregator() -> Aggregator:
    """Process-wide aggregator built from the environment."""
    return build_aggregator(AggregatorConfig.from_env())


__all__ = ["Aggregator", "build_aggregator", "get_default_aggregator"]
