"""Aggregator configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from aggregator.constants import DEFAULT_DEADLINE_SECONDS, DEFAULT_FEE_BPS, FEE_DENOMINATOR
from aggregator.models.types import normalize_address

ENV_PREFIX = "AGGREGATOR_"

_TRUE_VALUES = ("true", "1", "yes")

# Well-known dev accounts used when no owner / custody address is configured
DEFAULT_OWNER = "0x000000000000000000000000000000000000a11c"
DEFAULT_EXECUTOR = "0x000000000000000000000000000000000000e8ec"


@dataclass(frozen=True)
class AggregatorConfig:
    """Centralized configuration for the aggregator.

    Attributes:
        fee_bps: Venue fee in basis points for locally deployed venues (default: 30)
        deadline_seconds: Slack added to "now" when a swap has no explicit
            deadline (default: 1200)
        quote_connectors: If True, quote also prices [in, connector, out]
            paths through every allow-listed connector. Default False: only
            direct pools are quoted.
        owner: Address allowed to change the router and connector lists
        executor: Custody address the executor swaps from
        rpc_url: JSON-RPC endpoint. If set, contracts are reached via web3;
            otherwise an empty in-memory network is used.
        host: API bind host
        port: API bind port
        debug: Enable uvicorn reload
        log_level: structlog filtering level name
    """

    fee_bps: int = DEFAULT_FEE_BPS
    deadline_seconds: int = DEFAULT_DEADLINE_SECONDS
    quote_connectors: bool = False
    owner: str = DEFAULT_OWNER
    executor: str = DEFAULT_EXECUTOR
    rpc_url: str | None = None
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not 0 <= self.fee_bps < FEE_DENOMINATOR:
            raise ValueError(f"fee_bps must be in [0, {FEE_DENOMINATOR}), got {self.fee_bps}")
        if self.deadline_seconds < 0:
            raise ValueError(f"deadline_seconds cannot be negative: {self.deadline_seconds}")
        # Frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "owner", normalize_address(self.owner, validate=True))
        object.__setattr__(self, "executor", normalize_address(self.executor, validate=True))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AggregatorConfig:
        """Load configuration from AGGREGATOR_* environment variables.

        Unset variables keep their defaults.

        Raises:
            ValueError: If a variable has an invalid value
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            return env.get(ENV_PREFIX + name)

        kwargs: dict[str, object] = {}
        for name, field_name in (
            ("FEE_BPS", "fee_bps"),
            ("DEADLINE_SECONDS", "deadline_seconds"),
            ("PORT", "port"),
        ):
            raw = get(name)
            if raw is not None:
                try:
                    kwargs[field_name] = int(raw)
                except ValueError as err:
                    raise ValueError(f"{ENV_PREFIX}{name} must be an integer: {raw!r}") from err
        for name, field_name in (("QUOTE_CONNECTORS", "quote_connectors"), ("DEBUG", "debug")):
            raw = get(name)
            if raw is not None:
                kwargs[field_name] = raw.lower() in _TRUE_VALUES
        for name, field_name in (
            ("OWNER", "owner"),
            ("EXECUTOR", "executor"),
            ("RPC_URL", "rpc_url"),
            ("HOST", "host"),
            ("LOG_LEVEL", "log_level"),
        ):
            raw = get(name)
            if raw:
                kwargs[field_name] = raw
        return cls(**kwargs)  # type: ignore[arg-type]


# Default configuration instance
DEFAULT_CONFIG = AggregatorConfig()
