"""Aggregator error classes.

Every operation either completes or raises one of these. Precondition errors
are raised before any side effect; side-effect errors are raised after the
executor has undone whatever it already did.
"""


class AggregatorError(Exception):
    """Base error for aggregator operations."""

    pass


class InvalidArgument(AggregatorError, ValueError):
    """Malformed input: zero amounts, null or equal tokens, bad path length."""

    pass


class Unauthorized(AggregatorError):
    """Router or connector not allow-listed, or admin call from a non-owner."""

    pass


class TransferFailed(AggregatorError):
    """Token ledger rejected a custody transfer."""

    pass


class ApprovalFailed(AggregatorError):
    """Token ledger rejected an allowance grant."""

    pass


class SlippageExceeded(AggregatorError):
    """Venue cannot deliver the requested minimum output."""

    pass


class DeadlineExpired(AggregatorError):
    """Venue refused a swap whose deadline is in the past."""

    pass


class ExternalCallFailed(AggregatorError):
    """A queried collaborator (router, factory, pool) misbehaved."""

    pass
