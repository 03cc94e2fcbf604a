"""Pool reserve lookup."""

from __future__ import annotations

import structlog

from aggregator.errors import ExternalCallFailed
from aggregator.models.types import normalize_address
from aggregator.routing.types import PoolReserves
from aggregator.venues.base import ContractNetwork

logger = structlog.get_logger()


class ReserveOracle:
    """Reads live pool reserves through a venue's factory.

    Pools return reserves in token0/token1 order; get_reserves reorients
    them to the requested (token_in, token_out) direction.
    """

    def __init__(self, network: ContractNetwork) -> None:
        self._network = network

    def get_pool(self, factory: str, token_a: str, token_b: str) -> str | None:
        pool = self._network.factory(factory).get_pool(token_a, token_b)
        return normalize_address(pool) if pool else None

    def get_reserves(self, factory: str, token_in: str, token_out: str) -> PoolReserves | None:
        """Oriented reserves of the token_in/token_out pool.

        Returns:
            PoolReserves, or None if the factory has no pool for the pair

        Raises:
            ExternalCallFailed: If the pool does not hold token_in
        """
        pool_address = self.get_pool(factory, token_in, token_out)
        if pool_address is None:
            return None

        pool = self._network.pool(pool_address)
        reserve0, reserve1, _ = pool.get_reserves()
        token_in_norm = normalize_address(token_in)
        if token_in_norm == normalize_address(pool.token0()):
            return PoolReserves(pool_address, reserve0, reserve1)
        if token_in_norm == normalize_address(pool.token1()):
            return PoolReserves(pool_address, reserve1, reserve0)
        raise ExternalCallFailed(f"Pool {pool_address} does not hold token {token_in}")


__all__ = ["ReserveOracle"]
