"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PoolReserves:
    """Reserves of a pool oriented to a swap direction."""

    pool: str
    reserve_in: int
    reserve_out: int

    @property
    def has_liquidity(self) -> bool:
        return self.reserve_in > 0 and self.reserve_out > 0


@dataclass(frozen=True)
class QuoteResult:
    """Best venue found for a swap.

    venue is None (and amount_out 0) when no registered venue has liquidity
    for the pair. That is a valid answer, not an error.
    """

    amount_out: int
    venue: str | None
    path: list[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.venue is not None and self.amount_out > 0

    @property
    def is_multihop(self) -> bool:
        return len(self.path) > 2


@dataclass(frozen=True)
class SwapOutcome:
    """Result of an executed swap."""

    amount_out: int
    amounts: list[int]


__all__ = ["PoolReserves", "QuoteResult", "SwapOutcome"]
