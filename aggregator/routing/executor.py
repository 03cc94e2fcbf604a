"""Slippage-protected swap execution.

A swap is three external calls that must succeed or fail together:

1. pull amount_in of the source token from the caller into custody
2. approve the venue to spend amount_in from custody
3. have the venue swap along the path and pay the caller

Each completed step pushes a compensating action. If a later step fails, the
compensations run in reverse order (restore the previous allowance, return
the tokens to the caller) and the original error is re-raised.
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from aggregator.constants import DEFAULT_DEADLINE_SECONDS, MAX_PATH_LENGTH, MIN_PATH_LENGTH
from aggregator.errors import (
    AggregatorError,
    ApprovalFailed,
    InvalidArgument,
    TransferFailed,
    Unauthorized,
)
from aggregator.models.types import is_null_address, normalize_address
from aggregator.routing.registry import RouterRegistry
from aggregator.routing.types import SwapOutcome
from aggregator.venues.base import ContractNetwork

logger = structlog.get_logger()

Compensation = tuple[str, Callable[[], bool]]


class SwapExecutor:
    """Executes swaps on allow-listed venues from a custody account.

    Args:
        registry: Router and connector allow-lists
        network: Resolves venue and token addresses
        custody: Address that temporarily holds the input tokens
        deadline_seconds: Slack added to the network clock when the caller
            passes no deadline
    """

    def __init__(
        self,
        registry: RouterRegistry,
        network: ContractNetwork,
        custody: str,
        deadline_seconds: int = DEFAULT_DEADLINE_SECONDS,
    ) -> None:
        self.registry = registry
        self.network = network
        self.custody = normalize_address(custody, validate=True)
        self.deadline_seconds = deadline_seconds

    def validate(
        self,
        amount_in: int,
        amount_out_min: int,
        venue: str,
        path: list[str],
    ) -> list[str]:
        """Check every precondition; return the normalized path.

        Raises:
            InvalidArgument: Non-positive amounts, bad path length, null or
                identical endpoint tokens
            Unauthorized: Venue or connector not allow-listed
        """
        if amount_in <= 0:
            raise InvalidArgument(f"amount_in must be positive, got {amount_in}")
        if amount_out_min <= 0:
            raise InvalidArgument(f"amount_out_min must be positive, got {amount_out_min}")
        if not self.registry.is_allowed_router(venue):
            raise Unauthorized(f"Router {venue} is not allowed")
        if not MIN_PATH_LENGTH <= len(path) <= MAX_PATH_LENGTH:
            raise InvalidArgument(f"Path must have 2 or 3 tokens, got {len(path)}")
        if is_null_address(path[0]):
            raise InvalidArgument("Source token is null")
        if len(path) == MAX_PATH_LENGTH and not self.registry.is_allowed_connector(path[1]):
            raise Unauthorized(f"Connector {path[1]} is not allowed")
        if is_null_address(path[-1]):
            raise InvalidArgument("Destination token is null")

        normalized = [normalize_address(t) for t in path]
        if normalized[0] == normalized[-1]:
            raise InvalidArgument(f"Source and destination are identical: {normalized[0]}")
        return normalized

    def swap(
        self,
        amount_in: int,
        amount_out_min: int,
        venue: str,
        path: list[str],
        caller: str,
        deadline: int | None = None,
    ) -> SwapOutcome:
        """Swap amount_in of path[0] for at least amount_out_min of path[-1].

        Args:
            amount_in: Exact input amount pulled from caller
            amount_out_min: Minimum acceptable final output
            venue: Allow-listed router to execute on
            path: [source, destination] or [source, connector, destination]
            caller: Account paying the input and receiving the output
            deadline: Unix timestamp passed to the venue. Defaults to the
                network clock plus deadline_seconds.

        Returns:
            SwapOutcome with the final output and per-hop amounts

        Raises:
            InvalidArgument, Unauthorized: Before any token moves
            TransferFailed, ApprovalFailed, SlippageExceeded, DeadlineExpired,
            ExternalCallFailed: After rolling back completed steps
        """
        path = self.validate(amount_in, amount_out_min, venue, path)
        if is_null_address(caller):
            raise InvalidArgument("Caller is null")
        caller = normalize_address(caller)
        venue = normalize_address(venue)
        if deadline is None:
            deadline = self.network.now() + self.deadline_seconds

        token = self.network.token(path[0])
        venue_client = self.network.venue(venue)
        compensations: list[Compensation] = []

        try:
            if not self._call_ledger(
                TransferFailed, token.transfer_from, self.custody, caller, self.custody, amount_in
            ):
                raise TransferFailed(f"Could not pull {amount_in} of {path[0]} from {caller}")
            compensations.append(
                ("return_custody", lambda: token.transfer(self.custody, caller, amount_in))
            )

            previous_allowance = token.allowance(self.custody, venue)
            if not self._call_ledger(ApprovalFailed, token.approve, self.custody, venue, amount_in):
                raise ApprovalFailed(f"Could not approve {venue} for {amount_in} of {path[0]}")
            compensations.append(
                (
                    "restore_allowance",
                    lambda: token.approve(self.custody, venue, previous_allowance),
                )
            )

            amounts = venue_client.swap_exact_tokens_for_tokens(
                amount_in,
                amount_out_min,
                path,
                caller,
                deadline,
                sender=self.custody,
            )
        except Exception as exc:
            self._roll_back(compensations, exc)
            raise

        outcome = SwapOutcome(amount_out=amounts[-1], amounts=list(amounts))
        logger.info(
            "swap_executed",
            venue=venue,
            path=path,
            caller=caller,
            amount_in=amount_in,
            amount_out=outcome.amount_out,
        )
        return outcome

    @staticmethod
    def _call_ledger(
        error: type[AggregatorError], method: Callable[..., bool], *args: object
    ) -> bool:
        """Run a token call, surfacing a raising ledger as the step's error."""
        try:
            return method(*args)
        except AggregatorError:
            raise
        except Exception as err:
            raise error(f"{method.__name__} raised: {err}") from err

    def _roll_back(self, compensations: list[Compensation], exc: Exception) -> None:
        if not compensations:
            return
        logger.warning(
            "swap_rolled_back",
            error_type=type(exc).__name__,
            error=str(exc),
            steps=[name for name, _ in reversed(compensations)],
        )
        for name, action in reversed(compensations):
            try:
                ok = action()
            except Exception as rollback_exc:
                logger.error("rollback_step_failed", step=name, error=str(rollback_exc))
                exc.add_note(f"rollback step {name} raised: {rollback_exc}")
                continue
            if not ok:
                logger.error("rollback_step_failed", step=name, error="rejected by ledger")
                exc.add_note(f"rollback step {name} was rejected by the ledger")


__all__ = ["SwapExecutor"]
