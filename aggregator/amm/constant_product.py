"""Constant product (x * y = k) pricing.

Matches UniswapV2Library.getAmountOut / getAmountIn bit for bit: the fee is
taken from the input, all arithmetic is integer, and get_amount_out rounds
down while get_amount_in rounds up (+1). Settlement amounts on a real venue
are exactly these numbers, so the rounding rule must not change.
"""

from __future__ import annotations

from aggregator.amm.base import PricingFormula
from aggregator.constants import DEFAULT_FEE_BPS, FEE_DENOMINATOR
from aggregator.models.types import UINT256_MAX
from aggregator.uint import U


class ConstantProduct(PricingFormula):
    """UniswapV2-style constant product formula with an input fee.

    Formula:
        amount_out = (in * m * res_out) // (res_in * 10000 + in * m)

    where m = 10000 - fee_bps (9970 for the standard 0.3% fee).
    """

    def __init__(self, fee_bps: int = DEFAULT_FEE_BPS) -> None:
        if not 0 <= fee_bps < FEE_DENOMINATOR:
            raise ValueError(f"fee_bps must be in [0, {FEE_DENOMINATOR}), got {fee_bps}")
        self.fee_bps = fee_bps

    def __repr__(self) -> str:
        return f"ConstantProduct(fee_bps={self.fee_bps})"

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier (10000 - fee_bps); 9970 for 30 bps."""
        return FEE_DENOMINATOR - self.fee_bps

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate output amount using the constant product formula.

        Returns 0 when the input or either reserve is not positive (no
        liquidity), never raises for those cases.
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        amount_in_with_fee = U(amount_in) * self.fee_multiplier
        numerator = amount_in_with_fee * reserve_out
        denominator = U(reserve_in) * FEE_DENOMINATOR + amount_in_with_fee

        return (numerator // denominator).value

    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate required input for desired output.

        Formula: amount_in = (res_in * out * 10000) // ((res_out - out) * m) + 1

        Requesting the whole reserve or more returns max uint256.
        """
        if amount_out <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0
        if amount_out >= reserve_out:
            return UINT256_MAX

        numerator = U(reserve_in) * amount_out * FEE_DENOMINATOR
        denominator = (U(reserve_out) - amount_out) * self.fee_multiplier

        return (numerator // denominator + 1).value


# Standard 0.3% instance
constant_product = ConstantProduct()


__all__ = ["ConstantProduct", "constant_product"]
