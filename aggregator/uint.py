"""Checked uint256 arithmetic for token amounts.

Uint mirrors Solidity 0.8 checked math: every intermediate result must fit
in [0, 2**256 - 1]. Overflow, underflow and division by zero raise instead
of wrapping, which is what an on-chain venue would do (revert).

Usage pattern:
    from aggregator.uint import U

    def mul_div(a: int, b: int, c: int) -> int:
        return (U(a) * U(b) // U(c)).value
"""

from __future__ import annotations

from aggregator.models.types import UINT256_MAX


class UintError(ArithmeticError):
    """Base class for checked arithmetic errors."""

    pass


class DivisionByZero(UintError):
    """Division by zero."""

    pass


class Underflow(UintError):
    """Subtraction would produce a negative result."""

    pass


class Overflow(UintError):
    """Result exceeds uint256 maximum."""

    pass


def _check(value: int) -> int:
    if value < 0:
        raise Underflow(f"Negative uint256: {value}")
    if value > UINT256_MAX:
        raise Overflow(f"Value exceeds uint256 max: {value}")
    return value


class Uint:
    """Non-negative integer bounded by uint256 with checked operators.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | Uint) -> None:
        if isinstance(value, Uint):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = _check(value)
        else:
            raise TypeError(f"Uint requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"Uint({self._value})"

    def __hash__(self) -> int:
        return hash(self._value)

    def __add__(self, other: Uint | int) -> Uint:
        return Uint(self._value + _unwrap(other))

    __radd__ = __add__

    def __sub__(self, other: Uint | int) -> Uint:
        """Raises Underflow if other > self."""
        other_val = _unwrap(other)
        if other_val > self._value:
            raise Underflow(f"Underflow: {self._value} - {other_val}")
        return Uint(self._value - other_val)

    def __mul__(self, other: Uint | int) -> Uint:
        """Raises Overflow if the product does not fit in uint256."""
        return Uint(self._value * _unwrap(other))

    __rmul__ = __mul__

    def __floordiv__(self, other: Uint | int) -> Uint:
        """Floor division. Raises DivisionByZero."""
        other_val = _unwrap(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return Uint(self._value // other_val)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (Uint, int)):
            return self._value == _unwrap(other)
        return NotImplemented

    def __lt__(self, other: Uint | int) -> bool:
        return self._value < _unwrap(other)

    def __le__(self, other: Uint | int) -> bool:
        return self._value <= _unwrap(other)

    def __gt__(self, other: Uint | int) -> bool:
        return self._value > _unwrap(other)

    def __ge__(self, other: Uint | int) -> bool:
        return self._value >= _unwrap(other)

    def __bool__(self) -> bool:
        return self._value != 0


def _unwrap(x: Uint | int) -> int:
    if isinstance(x, Uint):
        return x._value
    return x


# Convenience alias for concise code
U = Uint
