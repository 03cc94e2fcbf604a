"""Calldata encoding for UniswapV2 router and ERC20 calls."""

from __future__ import annotations

from eth_abi import encode  # type: ignore[attr-defined]

from aggregator.models.types import is_valid_address

# Function selectors
SWAP_EXACT_TOKENS_SELECTOR = "0x38ed1739"  # swapExactTokensForTokens(uint256,uint256,address[],address,uint256)
APPROVE_SELECTOR = "0x095ea7b3"  # approve(address,uint256)
TRANSFER_FROM_SELECTOR = "0x23b872dd"  # transferFrom(address,address,uint256)
TRANSFER_SELECTOR = "0xa9059cbb"  # transfer(address,uint256)


def _address_bytes(name: str, address: str) -> bytes:
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address}")
    return bytes.fromhex(address[2:])


def encode_swap_exact_tokens_for_tokens(
    amount_in: int,
    amount_out_min: int,
    path: list[str],
    recipient: str,
    deadline: int,
) -> str:
    """Encode swapExactTokensForTokens calldata.

    Args:
        amount_in: Amount of path[0] to sell
        amount_out_min: Minimum final output (slippage protection)
        path: Token path, 2 or more addresses
        recipient: Address receiving the final output
        deadline: Unix timestamp after which the router reverts

    Returns:
        0x-prefixed calldata

    Raises:
        ValueError: If any address is invalid
    """
    path_bytes = [_address_bytes(f"path[{i}]", addr) for i, addr in enumerate(path)]
    encoded_args = encode(
        ["uint256", "uint256", "address[]", "address", "uint256"],
        [amount_in, amount_out_min, path_bytes, _address_bytes("recipient", recipient), deadline],
    )
    return SWAP_EXACT_TOKENS_SELECTOR + encoded_args.hex()


def encode_approve(spender: str, amount: int) -> str:
    """Encode ERC20 approve calldata."""
    encoded_args = encode(["address", "uint256"], [_address_bytes("spender", spender), amount])
    return APPROVE_SELECTOR + encoded_args.hex()


def encode_transfer(recipient: str, amount: int) -> str:
    """Encode ERC20 transfer calldata."""
    encoded_args = encode(["address", "uint256"], [_address_bytes("recipient", recipient), amount])
    return TRANSFER_SELECTOR + encoded_args.hex()


def encode_transfer_from(owner: str, recipient: str, amount: int) -> str:
    """Encode ERC20 transferFrom calldata."""
    encoded_args = encode(
        ["address", "address", "uint256"],
        [_address_bytes("owner", owner), _address_bytes("recipient", recipient), amount],
    )
    return TRANSFER_FROM_SELECTOR + encoded_args.hex()


__all__ = [
    "SWAP_EXACT_TOKENS_SELECTOR",
    "APPROVE_SELECTOR",
    "TRANSFER_FROM_SELECTOR",
    "TRANSFER_SELECTOR",
    "encode_swap_exact_tokens_for_tokens",
    "encode_approve",
    "encode_transfer",
    "encode_transfer_from",
]
