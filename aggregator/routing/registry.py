"""Router and connector allow-lists.

The registry holds an immutable snapshot of (routers, router -> factory,
connectors). Administrative calls build a complete new snapshot and swap it
in under a lock, so readers always see either the old lists or the new ones
in full.

Membership checks are plain list scans. Lists hold a handful of venues and
connectors, not thousands.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog

from aggregator.errors import AggregatorError, ExternalCallFailed, InvalidArgument, Unauthorized
from aggregator.models.types import is_null_address, is_valid_address, normalize_address
from aggregator.venues.base import ContractNetwork

logger = structlog.get_logger()


def _normalize_all(addresses: Iterable[str], kind: str) -> tuple[str, ...]:
    normalized = []
    for i, address in enumerate(addresses):
        try:
            normalized.append(normalize_address(address, validate=True))
        except (ValueError, AttributeError) as err:
            raise InvalidArgument(f"Invalid {kind} address at index {i}: {address!r}") from err
    return tuple(normalized)


@dataclass(frozen=True)
class RegistrySnapshot:
    """One consistent view of the allow-lists."""

    routers: tuple[str, ...] = ()
    factories: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    connectors: tuple[str, ...] = ()


class RouterRegistry:
    """Owner-controlled allow-lists of routers and connector tokens.

    Args:
        network: Resolves router addresses so their factory can be queried
        owner: The only address allowed to mutate the lists
    """

    def __init__(self, network: ContractNetwork, owner: str) -> None:
        self._network = network
        self._owner = normalize_address(owner, validate=True)
        self._snapshot = RegistrySnapshot()
        self._write_lock = threading.Lock()

    @property
    def owner(self) -> str:
        return self._owner

    def snapshot(self) -> RegistrySnapshot:
        """Current lists; never partially updated."""
        return self._snapshot

    @property
    def routers(self) -> list[str]:
        return list(self._snapshot.routers)

    @property
    def connectors(self) -> list[str]:
        return list(self._snapshot.connectors)

    def factory_of(self, router: str) -> str | None:
        return self._snapshot.factories.get(normalize_address(router))

    def _require_owner(self, caller: str, action: str) -> None:
        if not caller or normalize_address(caller) != self._owner:
            logger.warning("unauthorized_admin_call", action=action, caller=caller)
            raise Unauthorized(f"{action}: caller {caller} is not the owner")

    def _resolve_factory(self, router: str) -> str:
        try:
            factory = self._network.venue(router).factory()
        except AggregatorError as err:
            raise ExternalCallFailed(f"Router {router} did not return a factory: {err}") from err
        except Exception as err:
            raise ExternalCallFailed(f"Router {router} factory() call failed: {err}") from err
        if is_null_address(factory) or not is_valid_address(normalize_address(factory)):
            raise ExternalCallFailed(f"Router {router} returned invalid factory {factory!r}")
        return normalize_address(factory)

    def set_routers(self, caller: str, routers: Iterable[str]) -> None:
        """Replace the router list and re-derive each router's factory.

        Raises:
            Unauthorized: If caller is not the owner
            InvalidArgument: If an address is malformed
            ExternalCallFailed: If any router fails to report a factory.
                The previous lists stay in place.
        """
        self._require_owner(caller, "set_routers")
        new_routers = _normalize_all(routers, "router")
        factories = {router: self._resolve_factory(router) for router in new_routers}

        with self._write_lock:
            self._snapshot = RegistrySnapshot(
                routers=new_routers,
                factories=MappingProxyType(factories),
                connectors=self._snapshot.connectors,
            )
        logger.info("routers_updated", count=len(new_routers))

    def set_connectors(self, caller: str, connectors: Iterable[str]) -> None:
        """Replace the connector list.

        Raises:
            Unauthorized: If caller is not the owner
            InvalidArgument: If an address is malformed
        """
        self._require_owner(caller, "set_connectors")
        new_connectors = _normalize_all(connectors, "connector")

        with self._write_lock:
            self._snapshot = RegistrySnapshot(
                routers=self._snapshot.routers,
                factories=self._snapshot.factories,
                connectors=new_connectors,
            )
        logger.info("connectors_updated", count=len(new_connectors))

    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        """Hand the admin capability to another address."""
        self._require_owner(caller, "transfer_ownership")
        if is_null_address(new_owner) or not is_valid_address(normalize_address(new_owner)):
            raise InvalidArgument(f"Invalid new owner: {new_owner!r}")
        with self._write_lock:
            previous, self._owner = self._owner, normalize_address(new_owner)
        logger.info("ownership_transferred", previous=previous, new_owner=self._owner)

    def is_allowed_router(self, address: str | None) -> bool:
        if not address:
            return False
        address = normalize_address(address)
        for router in self._snapshot.routers:
            if router == address:
                return True
        return False

    def is_allowed_connector(self, address: str | None) -> bool:
        if not address:
            return False
        address = normalize_address(address)
        for connector in self._snapshot.connectors:
            if connector == address:
                return True
        return False


__all__ = ["RegistrySnapshot", "RouterRegistry"]
