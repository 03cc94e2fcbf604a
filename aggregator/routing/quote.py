"""Best-venue price discovery.

For each registered router, in registry order, the engine finds the pool for
the pair through the router's factory, reads its reserves and asks the
router what it would pay out. The highest output wins; on ties the earlier
router is kept, since later ones only replace the best on strict
improvement.

Only direct [token_in, token_out] pools are priced by default. With
include_connectors enabled, every allow-listed connector also yields a
[token_in, connector, token_out] candidate per router, priced after that
router's direct path.
"""

from __future__ import annotations

import structlog

from aggregator.errors import InvalidArgument
from aggregator.models.types import is_null_address, normalize_address
from aggregator.routing.oracle import ReserveOracle
from aggregator.routing.registry import RegistrySnapshot, RouterRegistry
from aggregator.routing.types import QuoteResult
from aggregator.uint import UintError
from aggregator.venues.base import ContractNetwork, Venue

logger = structlog.get_logger()


def _validated_token(address: str, name: str) -> str:
    try:
        return normalize_address(address, validate=True)
    except (ValueError, AttributeError) as err:
        raise InvalidArgument(f"Invalid {name} address: {address!r}") from err


class QuoteEngine:
    """Finds the venue with the best output for a swap.

    Stateless apart from its collaborators: nothing is cached between calls
    because reserves can change at any time.
    """

    def __init__(
        self,
        registry: RouterRegistry,
        network: ContractNetwork,
        oracle: ReserveOracle | None = None,
        include_connectors: bool = False,
    ) -> None:
        self.registry = registry
        self.network = network
        self.oracle = oracle or ReserveOracle(network)
        self.include_connectors = include_connectors

    def quote(self, amount_in: int, token_in: str, token_out: str) -> QuoteResult:
        """Return the best (amount_out, venue, path) across registered venues.

        Raises:
            InvalidArgument: If amount_in is not positive or overflows venue
                pricing, a token is null or malformed, the tokens are equal,
                or no router is registered
        """
        if amount_in <= 0:
            raise InvalidArgument(f"amount_in must be positive, got {amount_in}")
        if is_null_address(token_in) or is_null_address(token_out):
            raise InvalidArgument("token_in and token_out must be set")
        token_in = _validated_token(token_in, "token_in")
        token_out = _validated_token(token_out, "token_out")
        if token_in == token_out:
            raise InvalidArgument(f"token_in and token_out are identical: {token_in}")

        snapshot = self.registry.snapshot()
        if not snapshot.routers:
            raise InvalidArgument("no router defined")

        best = QuoteResult(amount_out=0, venue=None, path=[token_in, token_out])
        for router in snapshot.routers:
            venue = self.network.venue(router)
            factory = snapshot.factories[router]
            for path in self._candidate_paths(snapshot, token_in, token_out):
                amount_out = self._price_path(venue, factory, path, amount_in)
                if amount_out is None:
                    continue
                if amount_out > best.amount_out:
                    best = QuoteResult(amount_out=amount_out, venue=router, path=path)

        logger.debug(
            "quote_completed",
            token_in=token_in[-8:],
            token_out=token_out[-8:],
            amount_in=amount_in,
            amount_out=best.amount_out,
            venue=best.venue,
            routers=len(snapshot.routers),
        )
        return best

    def _candidate_paths(
        self, snapshot: RegistrySnapshot, token_in: str, token_out: str
    ) -> list[list[str]]:
        paths = [[token_in, token_out]]
        if self.include_connectors:
            paths.extend(
                [token_in, connector, token_out]
                for connector in snapshot.connectors
                if connector not in (token_in, token_out)
            )
        return paths

    def _price_path(
        self, venue: Venue, factory: str, path: list[str], amount_in: int
    ) -> int | None:
        """Output of amount_in along path on one venue, None if a hop is unusable."""
        amount = amount_in
        for hop_in, hop_out in zip(path, path[1:]):
            reserves = self.oracle.get_reserves(factory, hop_in, hop_out)
            if reserves is None:
                logger.debug("quote_venue_skipped", venue=venue.address, reason="no_pool")
                return None
            if not reserves.has_liquidity:
                logger.debug(
                    "quote_venue_skipped",
                    venue=venue.address,
                    pool=reserves.pool,
                    reason="insufficient_liquidity",
                )
                return None
            try:
                amount = venue.quote_out(amount, reserves.reserve_in, reserves.reserve_out)
            except UintError as err:
                raise InvalidArgument(
                    f"amount_in too large for venue pricing: {amount_in}"
                ) from err
        return amount


__all__ = ["QuoteEngine"]
