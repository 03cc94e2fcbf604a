"""web3.py adapters for UniswapV2-compatible contracts.

Reads go through eth_call. Writes are sent as transactions from unlocked
node accounts (the executor's custody account and its callers), so this is
meant for dev chains and forks where the node holds the keys.

A failed view call is surfaced as ExternalCallFailed; a reverted write
returns False from token methods and raises from the router.
"""

from __future__ import annotations

from typing import Any

import structlog

from aggregator.errors import ExternalCallFailed, SlippageExceeded
from aggregator.models.types import is_null_address, normalize_address
from aggregator.venues.encoding import (
    encode_approve,
    encode_swap_exact_tokens_for_tokens,
    encode_transfer,
    encode_transfer_from,
)

logger = structlog.get_logger()

# Minimal ABIs: just the functions we call
ROUTER_ABI = [
    {
        "name": "factory",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "name": "getAmountOut",
        "type": "function",
        "stateMutability": "pure",
        "inputs": [
            {"name": "amountIn", "type": "uint256"},
            {"name": "reserveIn", "type": "uint256"},
            {"name": "reserveOut", "type": "uint256"},
        ],
        "outputs": [{"name": "amountOut", "type": "uint256"}],
    },
    {
        "name": "getAmountsOut",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "amountIn", "type": "uint256"},
            {"name": "path", "type": "address[]"},
        ],
        "outputs": [{"name": "amounts", "type": "uint256[]"}],
    },
]

FACTORY_ABI = [
    {
        "name": "getPair",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "tokenA", "type": "address"},
            {"name": "tokenB", "type": "address"},
        ],
        "outputs": [{"name": "pair", "type": "address"}],
    },
]

PAIR_ABI = [
    {
        "name": "token0",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "name": "token1",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "name": "getReserves",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {"name": "reserve0", "type": "uint112"},
            {"name": "reserve1", "type": "uint112"},
            {"name": "blockTimestampLast", "type": "uint32"},
        ],
    },
]

ERC20_ABI = [
    {
        "name": "balanceOf",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "allowance",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "spender", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]


class _Web3Contract:
    """Shared plumbing: a bound contract plus checked view calls."""

    abi: list[dict[str, Any]] = []

    def __init__(self, network: Web3Network, address: str) -> None:
        self.network = network
        self.address = normalize_address(address)
        self.contract = network.w3.eth.contract(
            address=network.checksum(self.address),
            abi=self.abi,
        )

    def _call(self, fn_name: str, *args: Any) -> Any:
        try:
            return getattr(self.contract.functions, fn_name)(*args).call()
        except Exception as e:
            logger.warning(
                "web3_call_failed",
                contract=self.address,
                function=fn_name,
                error=str(e),
            )
            raise ExternalCallFailed(f"{fn_name} on {self.address} failed: {e}") from e


class Web3Router(_Web3Contract):
    """UniswapV2Router02 client."""

    abi = ROUTER_ABI

    def factory(self) -> str:
        return normalize_address(self._call("factory"))

    def quote_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        return int(self._call("getAmountOut", amount_in, reserve_in, reserve_out))

    def get_amounts_out(self, amount_in: int, path: list[str]) -> list[int]:
        checksummed = [self.network.checksum(t) for t in path]
        return [int(a) for a in self._call("getAmountsOut", amount_in, checksummed)]

    def swap_exact_tokens_for_tokens(
        self,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        recipient: str,
        deadline: int,
        *,
        sender: str,
    ) -> list[int]:
        # Simulate first so slippage is reported as such instead of a bare revert
        amounts = self.get_amounts_out(amount_in, path)
        if amounts[-1] < amount_out_min:
            raise SlippageExceeded(
                f"Insufficient output amount: {amounts[-1]} < {amount_out_min}"
            )

        calldata = encode_swap_exact_tokens_for_tokens(
            amount_in, amount_out_min, [normalize_address(t) for t in path], recipient, deadline
        )
        if not self.network.send(sender, self.address, calldata):
            raise ExternalCallFailed(f"swapExactTokensForTokens reverted on {self.address}")
        return amounts


class Web3Factory(_Web3Contract):
    """UniswapV2Factory client."""

    abi = FACTORY_ABI

    def get_pool(self, token_a: str, token_b: str) -> str | None:
        pair = self._call(
            "getPair", self.network.checksum(token_a), self.network.checksum(token_b)
        )
        if is_null_address(pair):
            return None
        return normalize_address(pair)


class Web3Pair(_Web3Contract):
    """UniswapV2Pair client."""

    abi = PAIR_ABI

    def token0(self) -> str:
        return normalize_address(self._call("token0"))

    def token1(self) -> str:
        return normalize_address(self._call("token1"))

    def get_reserves(self) -> tuple[int, int, int]:
        reserve0, reserve1, timestamp = self._call("getReserves")
        return int(reserve0), int(reserve1), int(timestamp)


class Web3Token(_Web3Contract):
    """ERC20 client."""

    abi = ERC20_ABI

    def balance_of(self, holder: str) -> int:
        return int(self._call("balanceOf", self.network.checksum(holder)))

    def allowance(self, owner: str, spender: str) -> int:
        return int(
            self._call("allowance", self.network.checksum(owner), self.network.checksum(spender))
        )

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        return self.network.send(sender, self.address, encode_transfer(recipient, amount))

    def transfer_from(self, spender: str, owner: str, recipient: str, amount: int) -> bool:
        return self.network.send(
            spender, self.address, encode_transfer_from(owner, recipient, amount)
        )

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        return self.network.send(owner, self.address, encode_approve(spender, amount))


class Web3Network:
    """ContractNetwork backed by a JSON-RPC node."""

    def __init__(self, web3_provider: str | None = None, w3: Any = None) -> None:
        """Initialize from an RPC URL or an existing Web3 instance.

        Args:
            web3_provider: HTTP RPC URL (e.g., "http://127.0.0.1:8545")
            w3: Preconfigured Web3 instance (takes precedence)
        """
        try:
            from web3 import Web3
        except ImportError as e:
            raise ImportError(
                "web3 package required for Web3Network. Install with: pip install web3"
            ) from e

        if w3 is None:
            if web3_provider is None:
                raise ValueError("Either web3_provider or w3 is required")
            w3 = Web3(Web3.HTTPProvider(web3_provider))
        self.w3 = w3
        self._to_checksum = Web3.to_checksum_address

    def checksum(self, address: str) -> str:
        return self._to_checksum(normalize_address(address))

    def send(self, sender: str, to: str, data: str) -> bool:
        """Send a transaction and wait for it; True if it did not revert."""
        try:
            tx_hash = self.w3.eth.send_transaction(
                {"from": self.checksum(sender), "to": self.checksum(to), "data": data}
            )
            receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
        except Exception as e:
            logger.warning("web3_transaction_failed", sender=sender, to=to, error=str(e))
            return False
        return receipt["status"] == 1

    def now(self) -> int:
        return int(self.w3.eth.get_block("latest")["timestamp"])

    def venue(self, address: str) -> Web3Router:
        return Web3Router(self, address)

    def factory(self, address: str) -> Web3Factory:
        return Web3Factory(self, address)

    def pool(self, address: str) -> Web3Pair:
        return Web3Pair(self, address)

    def token(self, address: str) -> Web3Token:
        return Web3Token(self, address)


__all__ = [
    "Web3Network",
    "Web3Router",
    "Web3Factory",
    "Web3Pair",
    "Web3Token",
    "ROUTER_ABI",
    "FACTORY_ABI",
    "PAIR_ABI",
    "ERC20_ABI",
]
