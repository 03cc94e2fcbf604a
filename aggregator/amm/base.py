"""Base classes for AMM pricing formulas."""

from abc import ABC, abstractmethod


class PricingFormula(ABC):
    """Abstract base class for AMM pricing formulas.

    A formula is a pure function of the input amount and the two reserves of
    a pool, oriented as (reserve_in, reserve_out). It has no state beyond its
    fee parameters.
    """

    @abstractmethod
    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate output amount for a given input.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount
        """
        ...

    @abstractmethod
    def get_amount_in(
        self,
        amount_out: int,
        reserve_in: int,
        reserve_out: int,
    ) -> int:
        """Calculate required input for a desired output.

        Args:
            amount_out: Desired output token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Required input token amount
        """
        ...

    def get_amounts_out(
        self,
        amount_in: int,
        reserves: list[tuple[int, int]],
    ) -> list[int]:
        """Chain get_amount_out across consecutive hops.

        Args:
            amount_in: Input amount for the first hop
            reserves: (reserve_in, reserve_out) for each hop, in path order

        Returns:
            Amounts at each hop boundary; the first element is amount_in and
            the last is the final output.
        """
        amounts = [amount_in]
        for reserve_in, reserve_out in reserves:
            amounts.append(self.get_amount_out(amounts[-1], reserve_in, reserve_out))
        return amounts
