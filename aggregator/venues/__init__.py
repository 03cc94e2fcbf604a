"""Venue, factory, pool and token clients.

Provides the contract interfaces plus an in-memory network and web3 adapters.
The web3 adapters are not imported here so the package works without a node.
"""

from aggregator.venues.base import ContractNetwork, Factory, Pool, TokenLedger, Venue
from aggregator.venues.memory import (
    InMemoryFactory,
    InMemoryNetwork,
    InMemoryPair,
    InMemoryRouter,
    InMemoryToken,
    sort_tokens,
)

__all__ = [
    # Interfaces
    "ContractNetwork",
    "Venue",
    "Factory",
    "Pool",
    "TokenLedger",
    # In-memory network
    "InMemoryNetwork",
    "InMemoryRouter",
    "InMemoryFactory",
    "InMemoryPair",
    "InMemoryToken",
    "sort_tokens",
]
