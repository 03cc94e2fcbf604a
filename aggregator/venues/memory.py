"""In-memory UniswapV2-style contract network.

A self-contained reference implementation of the venue interfaces: ERC20
ledgers, pair contracts holding real balances, factories and routers. It is
used by the test suite and as the default network when no RPC endpoint is
configured.

Routers validate everything (deadline, pools, slippage, allowance, balance)
before moving any token, so a swap either happens completely or leaves the
network untouched.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from aggregator.amm.base import PricingFormula
from aggregator.amm.constant_product import ConstantProduct
from aggregator.constants import DEFAULT_FEE_BPS
from aggregator.errors import (
    DeadlineExpired,
    ExternalCallFailed,
    InvalidArgument,
    SlippageExceeded,
    TransferFailed,
)
from aggregator.models.types import ZERO_ADDRESS, is_null_address, normalize_address

logger = structlog.get_logger()

# Arbitrary fixed genesis time so tests are deterministic
GENESIS_TIMESTAMP = 1_700_000_000


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Order a token pair the way UniswapV2 factories do (lower address first).

    Raises:
        InvalidArgument: If the tokens are identical or one is null
    """
    a = normalize_address(token_a)
    b = normalize_address(token_b)
    if a == b:
        raise InvalidArgument(f"Identical tokens: {a}")
    token0, token1 = (a, b) if int(a, 16) < int(b, 16) else (b, a)
    if token0 == ZERO_ADDRESS:
        raise InvalidArgument("Zero address token")
    return token0, token1


class InMemoryToken:
    """ERC20 ledger for one token."""

    def __init__(self, address: str, symbol: str | None = None) -> None:
        self.address = normalize_address(address)
        self.symbol = symbol
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}

    def __repr__(self) -> str:
        return f"InMemoryToken({self.symbol or self.address})"

    def mint(self, holder: str, amount: int) -> None:
        holder = normalize_address(holder)
        self._balances[holder] = self._balances.get(holder, 0) + amount

    def balance_of(self, holder: str) -> int:
        return self._balances.get(normalize_address(holder), 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def _move(self, sender: str, recipient: str, amount: int) -> bool:
        if amount < 0 or self.balance_of(sender) < amount:
            return False
        sender = normalize_address(sender)
        recipient = normalize_address(recipient)
        self._balances[sender] = self._balances.get(sender, 0) - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        return True

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        return self._move(sender, recipient, amount)

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        allowed = self.allowance(owner, spender)
        if allowed < amount or self.balance_of(owner) < amount:
            return False
        self._move(owner, recipient, amount)
        self._allowances[(normalize_address(owner), normalize_address(spender))] = (
            allowed - amount
        )
        return True

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        if amount < 0 or is_null_address(spender):
            return False
        self._allowances[(normalize_address(owner), normalize_address(spender))] = amount
        return True


class InMemoryPair:
    """Constant product pair whose reserves track its token balances."""

    def __init__(self, network: InMemoryNetwork, address: str, token0: str, token1: str) -> None:
        self.network = network
        self.address = normalize_address(address)
        self._token0 = token0
        self._token1 = token1
        self.reserve0 = 0
        self.reserve1 = 0
        self.block_timestamp_last = 0

    def __repr__(self) -> str:
        return f"InMemoryPair({self.address[-8:]}, r0={self.reserve0}, r1={self.reserve1})"

    def token0(self) -> str:
        return self._token0

    def token1(self) -> str:
        return self._token1

    def get_reserves(self) -> tuple[int, int, int]:
        return self.reserve0, self.reserve1, self.block_timestamp_last

    def sync(self) -> None:
        """Set reserves to the pair's current token balances."""
        self.reserve0 = self.network.token(self._token0).balance_of(self.address)
        self.reserve1 = self.network.token(self._token1).balance_of(self.address)
        self.block_timestamp_last = self.network.now()

    def swap(self, amount0_out: int, amount1_out: int, to: str) -> None:
        """Send out the requested amounts and resync.

        The caller must have transferred the input beforehand.
        """
        if amount0_out:
            self.network.token(self._token0).transfer(self.address, to, amount0_out)
        if amount1_out:
            self.network.token(self._token1).transfer(self.address, to, amount1_out)
        self.sync()


class InMemoryFactory:
    """Pair registry for one venue."""

    def __init__(self, network: InMemoryNetwork, address: str) -> None:
        self.network = network
        self.address = normalize_address(address)
        self._pairs: dict[tuple[str, str], str] = {}

    def get_pool(self, token_a: str, token_b: str) -> str | None:
        try:
            key = sort_tokens(token_a, token_b)
        except InvalidArgument:
            return None
        return self._pairs.get(key)

    def create_pool(self, token_a: str, token_b: str) -> str:
        """Deploy a pair for the tokens, or return the existing one."""
        key = sort_tokens(token_a, token_b)
        if key not in self._pairs:
            pair = InMemoryPair(self.network, self.network.next_address(), *key)
            self.network.register_pool(pair)
            self._pairs[key] = pair.address
        return self._pairs[key]


class InMemoryRouter:
    """UniswapV2Router02 equivalent over an InMemoryFactory."""

    def __init__(
        self,
        network: InMemoryNetwork,
        address: str,
        factory_address: str | None,
        formula: PricingFormula | None = None,
    ) -> None:
        self.network = network
        self.address = normalize_address(address)
        self._factory = factory_address
        self.formula = formula or ConstantProduct()

    def __repr__(self) -> str:
        return f"InMemoryRouter({self.address[-8:]}, {self.formula!r})"

    def factory(self) -> str:
        if self._factory is None:
            raise ExternalCallFailed(f"Router {self.address} has no factory")
        return self._factory

    def quote_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        return self.formula.get_amount_out(amount_in, reserve_in, reserve_out)

    def _pairs_along(self, path: list[str]) -> list[InMemoryPair]:
        factory = self.network.factory(self.factory())
        pairs = []
        for token_in, token_out in zip(path, path[1:]):
            pool_address = factory.get_pool(token_in, token_out)
            if pool_address is None:
                raise ExternalCallFailed(f"No pool for {token_in} -> {token_out}")
            pairs.append(self.network.pool(pool_address))
        return pairs

    def get_amounts_out(self, amount_in: int, path: list[str]) -> list[int]:
        """Per-hop output amounts for swapping amount_in along path."""
        if len(path) < 2:
            raise InvalidArgument(f"Invalid path length: {len(path)}")
        path = [normalize_address(t) for t in path]
        reserves = []
        for pair, token_in in zip(self._pairs_along(path), path):
            reserve0, reserve1, _ = pair.get_reserves()
            if token_in == pair.token0():
                reserves.append((reserve0, reserve1))
            else:
                reserves.append((reserve1, reserve0))
        return self.formula.get_amounts_out(amount_in, reserves)

    def swap_exact_tokens_for_tokens(
        self,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> list[int]:
        if deadline < self.network.now():
            raise DeadlineExpired(f"Deadline {deadline} < now {self.network.now()}")

        path = [normalize_address(t) for t in path]
        amounts = self.get_amounts_out(amount_in, path)
        if amounts[-1] < amount_out_min:
            raise SlippageExceeded(
                f"Insufficient output amount: {amounts[-1]} < {amount_out_min}"
            )

        token_in = self.network.token(path[0])
        if token_in.allowance(sender, self.address) < amount_in:
            raise TransferFailed(f"Router allowance from {sender} below {amount_in}")
        if token_in.balance_of(sender) < amount_in:
            raise TransferFailed(f"Balance of {sender} below {amount_in}")

        pairs = self._pairs_along(path)
        token_in.transfer_from(self.address, sender, pairs[0].address, amount_in)
        for i, pair in enumerate(pairs):
            amount_out = amounts[i + 1]
            to = pairs[i + 1].address if i + 1 < len(pairs) else recipient
            if path[i + 1] == pair.token0():
                pair.swap(amount_out, 0, to)
            else:
                pair.swap(0, amount_out, to)

        logger.debug(
            "venue_swap",
            router=self.address[-8:],
            path=[t[-8:] for t in path],
            amounts=amounts,
        )
        return amounts


class InMemoryNetwork:
    """Address space of in-memory contracts plus a settable clock."""

    def __init__(
        self,
        clock: Callable[[], int] | None = None,
        fee_bps: int = DEFAULT_FEE_BPS,
    ) -> None:
        self.timestamp = GENESIS_TIMESTAMP
        self._clock = clock
        self.fee_bps = fee_bps
        self._address_counter = 0
        self._tokens: dict[str, InMemoryToken] = {}
        self._factories: dict[str, InMemoryFactory] = {}
        self._pools: dict[str, InMemoryPair] = {}
        self._venues: dict[str, InMemoryRouter] = {}

    def now(self) -> int:
        if self._clock is not None:
            return self._clock()
        return self.timestamp

    def advance(self, seconds: int) -> None:
        self.timestamp += seconds

    def next_address(self) -> str:
        self._address_counter += 1
        return "0x" + f"{0xA66 << 140 | self._address_counter:040x}"

    def register_pool(self, pair: InMemoryPair) -> None:
        self._pools[pair.address] = pair

    # --- deployment helpers ---

    def deploy_token(self, address: str | None = None, symbol: str | None = None) -> InMemoryToken:
        token = InMemoryToken(address or self.next_address(), symbol)
        self._tokens[token.address] = token
        return token

    def deploy_factory(self) -> InMemoryFactory:
        factory = InMemoryFactory(self, self.next_address())
        self._factories[factory.address] = factory
        return factory

    def deploy_router(
        self,
        factory: InMemoryFactory | str | None,
        fee_bps: int | None = None,
    ) -> InMemoryRouter:
        """Deploy a router; factory=None gives a router whose factory() fails.

        fee_bps defaults to the network-wide fee.
        """
        factory_address = factory.address if isinstance(factory, InMemoryFactory) else factory
        router = InMemoryRouter(
            self,
            self.next_address(),
            normalize_address(factory_address) if factory_address else None,
            ConstantProduct(self.fee_bps if fee_bps is None else fee_bps),
        )
        self._venues[router.address] = router
        return router

    def add_liquidity(
        self,
        factory: InMemoryFactory,
        token_a: str,
        token_b: str,
        amount_a: int,
        amount_b: int,
    ) -> InMemoryPair:
        """Create the pair if needed, fund it and sync its reserves."""
        pair = self.pool(factory.create_pool(token_a, token_b))
        self.token(token_a).mint(pair.address, amount_a)
        self.token(token_b).mint(pair.address, amount_b)
        pair.sync()
        return pair

    # --- ContractNetwork ---

    def _lookup(self, registry: dict, address: str, kind: str):  # type: ignore[no-untyped-def]
        contract = registry.get(normalize_address(address))
        if contract is None:
            raise ExternalCallFailed(f"No {kind} deployed at {address}")
        return contract

    def venue(self, address: str) -> InMemoryRouter:
        return self._lookup(self._venues, address, "router")

    def factory(self, address: str) -> InMemoryFactory:
        return self._lookup(self._factories, address, "factory")

    def pool(self, address: str) -> InMemoryPair:
        return self._lookup(self._pools, address, "pool")

    def token(self, address: str) -> InMemoryToken:
        return self._lookup(self._tokens, address, "token")


__all__ = [
    "GENESIS_TIMESTAMP",
    "InMemoryFactory",
    "InMemoryNetwork",
    "InMemoryPair",
    "InMemoryRouter",
    "InMemoryToken",
    "sort_tokens",
]
