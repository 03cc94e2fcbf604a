"""AMM pricing formulas."""

from aggregator.amm.base import PricingFormula
from aggregator.amm.constant_product import ConstantProduct, constant_product

__all__ = [
    "PricingFormula",
    "ConstantProduct",
    "constant_product",
]
