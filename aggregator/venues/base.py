"""Interfaces of the external contracts the aggregator talks to.

Contracts are addressed by their (lowercase) address. A ContractNetwork
turns an address into a client object implementing one of these protocols,
the same way a Solidity caller casts an address to an interface. This lets
the in-memory network and the web3 network be swapped freely.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Venue(Protocol):
    """A UniswapV2-compatible router."""

    address: str

    def factory(self) -> str:
        """Address of the factory backing this router."""
        ...

    def quote_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Output amount for amount_in against the given oriented reserves."""
        ...

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
        """Swap exactly amount_in of path[0] along path.

        The router pulls amount_in from sender using sender's allowance and
        delivers the final output to recipient.

        Returns:
            Amounts at each hop boundary (len(path) elements)

        Raises:
            SlippageExceeded: If the final output would be below amount_out_min
            DeadlineExpired: If deadline is in the past
        """
        ...


class Factory(Protocol):
    """Per-venue registry mapping a token pair to its pool."""

    address: str

    def get_pool(self, token_a: str, token_b: str) -> str | None:
        """Pool address for the pair (order independent), or None."""
        ...


class Pool(Protocol):
    """A two-token constant product pool."""

    address: str

    def token0(self) -> str:
        ...

    def token1(self) -> str:
        ...

    def get_reserves(self) -> tuple[int, int, int]:
        """Return (reserve0, reserve1, block_timestamp_last)."""
        ...


class TokenLedger(Protocol):
    """ERC20-style ledger of one token.

    The acting account (msg.sender on-chain) is passed explicitly as the
    first argument of every mutating call.
    """

    address: str

    def balance_of(self, holder: str) -> int:
        ...

    def allowance(self, owner: str, spender: str) -> int:
        ...

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        ...

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        """Move amount from owner to recipient, spending spender's allowance."""
        ...

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """Set spender's allowance over owner's tokens to amount."""
        ...


class ContractNetwork(Protocol):
    """Resolves addresses to contract clients."""

    def venue(self, address: str) -> Venue:
        ...

    def factory(self, address: str) -> Factory:
        ...

    def pool(self, address: str) -> Pool:
        ...

    def token(self, address: str) -> TokenLedger:
        ...

    def now(self) -> int:
        """Current timestamp (seconds) as seen by the network."""
        ...
