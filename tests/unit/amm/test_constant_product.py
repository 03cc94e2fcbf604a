"""Tests for the constant product pricing formula."""

import pytest

from aggregator.amm.constant_product import ConstantProduct, constant_product
from aggregator.models.types import UINT256_MAX
from aggregator.uint import Overflow


class TestGetAmountOut:
    """Tests for get_amount_out."""

    def test_reference_example(self):
        """reserves (1000, 3000), 100 in, 0.3% fee.

        (100 * 9970 * 3000) // (1000 * 10000 + 100 * 9970)
        = 2_991_000_000 // 10_997_000 = 271
        """
        assert constant_product.get_amount_out(100, 1000, 3000) == 271

    def test_matches_997_over_1000_form(self):
        """30 bps in basis points equals UniswapV2's 997/1000 form."""
        amount_in, reserve_in, reserve_out = 10**18, 100 * 10**18, 250_000 * 10**6
        expected = (amount_in * 997 * reserve_out) // (reserve_in * 1000 + amount_in * 997)
        assert constant_product.get_amount_out(amount_in, reserve_in, reserve_out) == expected

    def test_rounds_down(self):
        """Floor division: 1 in against (10, 10) yields 0, never 1."""
        assert constant_product.get_amount_out(1, 10, 10) == 0

    def test_zero_fee(self):
        """Without fee the formula is the plain x*y=k output."""
        amm = ConstantProduct(fee_bps=0)
        assert amm.get_amount_out(100, 1000, 3000) == (100 * 3000) // 1100

    def test_higher_fee_gives_less(self):
        cheap = ConstantProduct(fee_bps=25)
        expensive = ConstantProduct(fee_bps=100)
        assert cheap.get_amount_out(10_000, 10**6, 10**6) > expensive.get_amount_out(
            10_000, 10**6, 10**6
        )

    def test_zero_input(self):
        assert constant_product.get_amount_out(0, 100, 100) == 0

    def test_zero_reserves(self):
        assert constant_product.get_amount_out(100, 0, 100) == 0
        assert constant_product.get_amount_out(100, 100, 0) == 0

    def test_overflow_raises(self):
        """Intermediate products beyond uint256 revert like checked Solidity math."""
        with pytest.raises(Overflow):
            constant_product.get_amount_out(UINT256_MAX // 2, 1, UINT256_MAX // 2)


class TestPricingProperties:
    """Monotonicity and bounds over a spread of inputs."""

    RESERVES = [(1, 1), (1000, 3000), (3000, 1000), (10**18, 10**6), (10**6, 10**24)]
    AMOUNTS = [1, 7, 100, 10**6, 10**18, 10**30]

    @pytest.mark.parametrize("reserve_in,reserve_out", RESERVES)
    def test_non_decreasing_in_amount_in(self, reserve_in, reserve_out):
        outputs = [
            constant_product.get_amount_out(a, reserve_in, reserve_out) for a in self.AMOUNTS
        ]
        assert outputs == sorted(outputs)

    @pytest.mark.parametrize("amount_in", AMOUNTS)
    def test_non_decreasing_in_reserve_out(self, amount_in):
        outputs = [
            constant_product.get_amount_out(amount_in, 10**6, r)
            for r in (1, 10, 10**3, 10**6, 10**9, 10**20)
        ]
        assert outputs == sorted(outputs)

    @pytest.mark.parametrize("reserve_in,reserve_out", RESERVES)
    @pytest.mark.parametrize("amount_in", AMOUNTS)
    def test_strictly_below_reserve_out(self, amount_in, reserve_in, reserve_out):
        assert constant_product.get_amount_out(amount_in, reserve_in, reserve_out) < reserve_out


class TestGetAmountIn:
    """Tests for get_amount_in."""

    def test_covers_desired_output(self):
        """Paying get_amount_in yields at least the requested output."""
        reserve_in, reserve_out = 100 * 10**18, 250_000 * 10**6
        desired = 2467 * 10**6
        required = constant_product.get_amount_in(desired, reserve_in, reserve_out)

        assert constant_product.get_amount_out(required, reserve_in, reserve_out) >= desired
        assert constant_product.get_amount_out(required - 1, reserve_in, reserve_out) <= desired

    def test_exceeding_reserve_returns_max(self):
        assert constant_product.get_amount_in(3000, 1000, 3000) == UINT256_MAX

    def test_zero_output(self):
        assert constant_product.get_amount_in(0, 1000, 3000) == 0


class TestGetAmountsOut:
    """Tests for chained multi-hop evaluation."""

    def test_single_hop(self):
        assert constant_product.get_amounts_out(100, [(1000, 3000)]) == [100, 271]

    def test_two_hops_chain_outputs(self):
        amounts = constant_product.get_amounts_out(100, [(1000, 3000), (6000, 2000)])

        assert amounts[:2] == [100, 271]
        assert amounts[2] == constant_product.get_amount_out(271, 6000, 2000)
        assert len(amounts) == 3


class TestFeeValidation:
    """Tests for ConstantProduct construction."""

    def test_fee_multiplier(self):
        assert ConstantProduct(30).fee_multiplier == 9970
        assert ConstantProduct(25).fee_multiplier == 9975

    @pytest.mark.parametrize("fee_bps", [-1, 10_000, 20_000])
    def test_invalid_fee_rejected(self, fee_bps):
        with pytest.raises(ValueError):
            ConstantProduct(fee_bps)
