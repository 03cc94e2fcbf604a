"""Test helpers module for shared test utilities.

- constants: Token and account addresses
- factories: In-memory network and venue builders
"""

from tests.helpers.constants import (
    ALICE,
    DAI,
    EXECUTOR,
    MALLORY,
    NOWHERE,
    OWNER,
    TOKEN_SYMBOLS,
    USDC,
    WBTC,
    WETH,
)
from tests.helpers.factories import fund, make_network, make_venue

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "WBTC",
    "TOKEN_SYMBOLS",
    "OWNER",
    "EXECUTOR",
    "ALICE",
    "MALLORY",
    "NOWHERE",
    # Factories
    "make_network",
    "make_venue",
    "fund",
]
