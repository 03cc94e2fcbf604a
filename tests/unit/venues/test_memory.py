"""Tests for the in-memory contract network."""

import pytest

from aggregator.errors import (
    DeadlineExpired,
    ExternalCallFailed,
    InvalidArgument,
    SlippageExceeded,
    TransferFailed,
)
from aggregator.models.types import ZERO_ADDRESS
from aggregator.venues.base import Venue
from aggregator.venues.memory import sort_tokens
from tests.helpers import ALICE, DAI, NOWHERE, USDC, WBTC, WETH, fund, make_venue


class TestSortTokens:
    def test_lower_address_first(self):
        """USDC (0xa0b8...) sorts before WETH (0xc02a...)."""
        assert sort_tokens(WETH, USDC) == (USDC, WETH)
        assert sort_tokens(USDC, WETH) == (USDC, WETH)

    def test_case_insensitive(self):
        assert sort_tokens(WETH.upper().replace("0X", "0x"), USDC) == (USDC, WETH)

    def test_identical_rejected(self):
        with pytest.raises(InvalidArgument):
            sort_tokens(WETH, WETH)

    def test_zero_address_rejected(self):
        with pytest.raises(InvalidArgument):
            sort_tokens(ZERO_ADDRESS, WETH)


class TestInMemoryToken:
    """Tests for ERC20 ledger semantics."""

    def test_transfer_from_spends_allowance(self, network):
        token = network.token(WETH)
        fund(network, WETH, ALICE, 100, spender=NOWHERE)

        assert token.transfer_from(NOWHERE, ALICE, WBTC, 60)
        assert token.balance_of(ALICE) == 40
        assert token.balance_of(WBTC) == 60
        assert token.allowance(ALICE, NOWHERE) == 40

    def test_transfer_from_without_allowance_fails(self, network):
        token = network.token(WETH)
        fund(network, WETH, ALICE, 100)

        assert not token.transfer_from(NOWHERE, ALICE, WBTC, 1)
        assert token.balance_of(ALICE) == 100

    def test_transfer_from_insufficient_balance_fails(self, network):
        token = network.token(WETH)
        fund(network, WETH, ALICE, 10)
        token.approve(ALICE, NOWHERE, 100)

        assert not token.transfer_from(NOWHERE, ALICE, WBTC, 50)
        assert token.allowance(ALICE, NOWHERE) == 100

    def test_approve_zero_spender_rejected(self, network):
        assert not network.token(WETH).approve(ALICE, ZERO_ADDRESS, 1)

    def test_approve_overwrites(self, network):
        token = network.token(WETH)
        token.approve(ALICE, NOWHERE, 5)
        token.approve(ALICE, NOWHERE, 2)
        assert token.allowance(ALICE, NOWHERE) == 2


class TestInMemoryFactory:
    def test_get_pool_order_independent(self, network):
        factory, _ = make_venue(network, pools=[(WETH, USDC, 1000, 3000)])
        assert factory.get_pool(WETH, USDC) == factory.get_pool(USDC, WETH)
        assert factory.get_pool(WETH, USDC) is not None

    def test_missing_pool_is_none(self, network):
        factory, _ = make_venue(network)
        assert factory.get_pool(WETH, DAI) is None
        assert factory.get_pool(WETH, WETH) is None

    def test_pair_orders_reserves_by_token0(self, network):
        factory, _ = make_venue(network, pools=[(WETH, USDC, 1000, 3000)])
        pair = network.pool(factory.get_pool(WETH, USDC))

        assert pair.token0() == USDC
        assert pair.token1() == WETH
        reserve0, reserve1, _ = pair.get_reserves()
        assert (reserve0, reserve1) == (3000, 1000)

    def test_create_pool_is_idempotent(self, network):
        factory, _ = make_venue(network)
        assert factory.create_pool(WETH, USDC) == factory.create_pool(USDC, WETH)


class TestInMemoryRouter:
    """Tests for the router reference implementation."""

    def test_satisfies_venue_protocol(self, network):
        _, router = make_venue(network)
        assert isinstance(router, Venue)

    def test_get_amounts_out_orients_reserves(self, network):
        _, router = make_venue(network, pools=[(WETH, USDC, 1000, 3000)])
        assert router.get_amounts_out(100, [WETH, USDC]) == [100, 271]

    def test_get_amounts_out_missing_pool(self, network):
        _, router = make_venue(network)
        with pytest.raises(ExternalCallFailed):
            router.get_amounts_out(100, [WETH, DAI])

    def test_swap_moves_tokens_and_reserves(self, network):
        factory, router = make_venue(network, pools=[(WETH, USDC, 1000, 3000)])
        fund(network, WETH, ALICE, 100, spender=router.address)

        amounts = router.swap_exact_tokens_for_tokens(
            100, 271, [WETH, USDC], ALICE, network.now(), sender=ALICE
        )

        assert amounts == [100, 271]
        assert network.token(WETH).balance_of(ALICE) == 0
        assert network.token(USDC).balance_of(ALICE) == 271
        pair = network.pool(factory.get_pool(WETH, USDC))
        assert pair.get_reserves()[:2] == (3000 - 271, 1100)

    def test_multi_hop_swap(self, network):
        factory, router = make_venue(
            network, pools=[(WETH, USDC, 1000, 3000), (USDC, WBTC, 6000, 2000)]
        )
        fund(network, WETH, ALICE, 100, spender=router.address)

        amounts = router.swap_exact_tokens_for_tokens(
            100, 1, [WETH, USDC, WBTC], ALICE, network.now(), sender=ALICE
        )

        assert len(amounts) == 3
        assert network.token(WBTC).balance_of(ALICE) == amounts[2]
        # Intermediate tokens end up in the second pool, not with the recipient
        assert network.token(USDC).balance_of(ALICE) == 0
        usdc_wbtc = network.pool(factory.get_pool(USDC, WBTC))
        assert network.token(USDC).balance_of(usdc_wbtc.address) == 6000 + amounts[1]

    def test_slippage_leaves_state_untouched(self, network):
        factory, router = make_venue(network, pools=[(WETH, USDC, 1000, 3000)])
        fund(network, WETH, ALICE, 100, spender=router.address)

        with pytest.raises(SlippageExceeded):
            router.swap_exact_tokens_for_tokens(
                100, 272, [WETH, USDC], ALICE, network.now(), sender=ALICE
            )

        assert network.token(WETH).balance_of(ALICE) == 100
        assert network.token(WETH).allowance(ALICE, router.address) == 100
        pair = network.pool(factory.get_pool(WETH, USDC))
        assert pair.get_reserves()[:2] == (3000, 1000)

    def test_expired_deadline(self, network):
        _, router = make_venue(network, pools=[(WETH, USDC, 1000, 3000)])
        fund(network, WETH, ALICE, 100, spender=router.address)

        with pytest.raises(DeadlineExpired):
            router.swap_exact_tokens_for_tokens(
                100, 1, [WETH, USDC], ALICE, network.now() - 1, sender=ALICE
            )

    def test_missing_allowance(self, network):
        _, router = make_venue(network, pools=[(WETH, USDC, 1000, 3000)])
        fund(network, WETH, ALICE, 100)

        with pytest.raises(TransferFailed):
            router.swap_exact_tokens_for_tokens(
                100, 1, [WETH, USDC], ALICE, network.now(), sender=ALICE
            )
        assert network.token(WETH).balance_of(ALICE) == 100

    def test_router_without_factory(self, network):
        router = network.deploy_router(None)
        with pytest.raises(ExternalCallFailed):
            router.factory()


class TestInMemoryNetwork:
    def test_unknown_address_raises(self, network):
        with pytest.raises(ExternalCallFailed):
            network.venue(NOWHERE)
        with pytest.raises(ExternalCallFailed):
            network.token(NOWHERE)

    def test_clock(self, network):
        start = network.now()
        network.advance(30)
        assert network.now() == start + 30

    def test_external_clock(self):
        from aggregator.venues.memory import InMemoryNetwork

        network = InMemoryNetwork(clock=lambda: 42)
        assert network.now() == 42

    def test_generated_addresses_are_unique_and_valid(self, network):
        from aggregator.models.types import is_valid_address

        addresses = {network.next_address() for _ in range(50)}
        assert len(addresses) == 50
        assert all(is_valid_address(a) for a in addresses)
