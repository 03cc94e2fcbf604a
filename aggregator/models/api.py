"""Pydantic models for the HTTP API.

Amounts travel as uint256 decimal strings (ints are accepted on input);
field names are camelCase on the wire.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_serializer

from aggregator.models.types import Address, Uint256


class QuoteRequest(BaseModel):
    """Find the best venue for a swap."""

    amount_in: Uint256 = Field(alias="amountIn")
    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")

    model_config = {"populate_by_name": True}


class QuoteResponse(BaseModel):
    """Best venue found. router is None when no venue has liquidity."""

    amount_out: Uint256 = Field(alias="amountOut")
    router: Address | None = None
    path: list[Address]
    found: bool

    model_config = {"populate_by_name": True}

    @field_serializer("amount_out")
    def _amount_as_str(self, value: int) -> str:
        return str(value)


class SwapRequest(BaseModel):
    """Execute a swap on a chosen venue."""

    amount_in: Uint256 = Field(alias="amountIn")
    amount_out_min: Uint256 = Field(alias="amountOutMin")
    router: Address
    path: list[Address]
    caller: Address
    deadline: int | None = Field(default=None, ge=0)

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    """Realized swap amounts."""

    amount_out: Uint256 = Field(alias="amountOut")
    amounts: list[Uint256]

    model_config = {"populate_by_name": True}

    @field_serializer("amount_out")
    def _amount_as_str(self, value: int) -> str:
        return str(value)

    @field_serializer("amounts")
    def _amounts_as_str(self, value: list[int]) -> list[str]:
        return [str(v) for v in value]


class SetRoutersRequest(BaseModel):
    caller: Address
    routers: list[Address]


class SetConnectorsRequest(BaseModel):
    caller: Address
    connectors: list[Address]


class AddressList(BaseModel):
    items: list[Address]


class ErrorResponse(BaseModel):
    error: str
    detail: str


__all__ = [
    "QuoteRequest",
    "QuoteResponse",
    "SwapRequest",
    "SwapResponse",
    "SetRoutersRequest",
    "SetConnectorsRequest",
    "AddressList",
    "ErrorResponse",
]
