"""Pydantic models and shared types."""

from aggregator.models.api import (
    AddressList,
    ErrorResponse,
    QuoteRequest,
    QuoteResponse,
    SetConnectorsRequest,
    SetRoutersRequest,
    SwapRequest,
    SwapResponse,
)
from aggregator.models.types import Address, Uint256, normalize_address

__all__ = [
    # Types
    "Address",
    "Uint256",
    "normalize_address",
    # API models
    "QuoteRequest",
    "QuoteResponse",
    "SwapRequest",
    "SwapResponse",
    "SetRoutersRequest",
    "SetConnectorsRequest",
    "AddressList",
    "ErrorResponse",
]
