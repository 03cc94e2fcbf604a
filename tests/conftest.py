"""Pytest configuration and fixtures."""

from dataclasses import dataclass

import pytest
import structlog

from aggregator.aggregator import Aggregator
from aggregator.config import AggregatorConfig
from aggregator.venues.memory import InMemoryFactory, InMemoryNetwork, InMemoryRouter
from tests.helpers import EXECUTOR, OWNER, USDC, WBTC, WETH, make_network, make_venue


@dataclass
class Market:
    """Two venues on one in-memory network.

    Venue A: WETH/USDC (1000, 3000), USDC/WBTC (6000, 2000)
    Venue B: WETH/USDC (1000, 4000)
    """

    network: InMemoryNetwork
    factory_a: InMemoryFactory
    router_a: InMemoryRouter
    factory_b: InMemoryFactory
    router_b: InMemoryRouter


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any structlog.configure() done by a test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def network() -> InMemoryNetwork:
    """Network with WETH, USDC, DAI and WBTC deployed."""
    return make_network()


@pytest.fixture
def market(network: InMemoryNetwork) -> Market:
    factory_a, router_a = make_venue(
        network,
        pools=[(WETH, USDC, 1000, 3000), (USDC, WBTC, 6000, 2000)],
    )
    factory_b, router_b = make_venue(network, pools=[(WETH, USDC, 1000, 4000)])
    return Market(network, factory_a, router_a, factory_b, router_b)


@pytest.fixture
def config() -> AggregatorConfig:
    return AggregatorConfig(owner=OWNER, executor=EXECUTOR)


@pytest.fixture
def aggregator(network: InMemoryNetwork, config: AggregatorConfig) -> Aggregator:
    """Aggregator over the test network with no routers registered."""
    return Aggregator(network, config)


@pytest.fixture
def live_aggregator(market: Market, aggregator: Aggregator) -> Aggregator:
    """Aggregator with both market venues registered and USDC as connector."""
    aggregator.set_routers(OWNER, [market.router_a.address, market.router_b.address])
    aggregator.set_connectors(OWNER, [USDC])
    return aggregator
