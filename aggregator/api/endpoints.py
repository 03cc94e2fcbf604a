"""API endpoints for the swap aggregator."""

import structlog
from fastapi import APIRouter, Depends

from aggregator.aggregator import Aggregator, get_default_aggregator
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

logger = structlog.get_logger()

router = APIRouter()

# Error bodies produced by the exception handler in aggregator.api.main
PRECONDITION_ERRORS: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
}
EXECUTION_ERRORS: dict[int | str, dict[str, object]] = {
    **PRECONDITION_ERRORS,
    409: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


def get_aggregator() -> Aggregator:
    """Dependency provider for the aggregator instance.

    Override this in tests to inject an aggregator over an in-memory network:
        app.dependency_overrides[get_aggregator] = lambda: aggregator
    """
    return get_default_aggregator()


@router.post(
    "/quote",
    response_model_by_alias=True,
    responses={**PRECONDITION_ERRORS, 502: {"model": ErrorResponse}},
)
def quote(
    request: QuoteRequest,
    aggregator: Aggregator = Depends(get_aggregator),
) -> QuoteResponse:
    """Best output across all registered routers.

    A pair without liquidity anywhere returns found=false and amountOut "0",
    not an error.
    """
    result = aggregator.quote(request.amount_in, request.token_in, request.token_out)
    logger.info(
        "quote_served",
        token_in=request.token_in,
        token_out=request.token_out,
        amount_in=request.amount_in,
        amount_out=result.amount_out,
        router=result.venue,
    )
    return QuoteResponse(
        amount_out=result.amount_out,
        router=result.venue,
        path=result.path,
        found=result.found,
    )


@router.post("/swap", response_model_by_alias=True, responses=EXECUTION_ERRORS)
def swap(
    request: SwapRequest,
    aggregator: Aggregator = Depends(get_aggregator),
) -> SwapResponse:
    """Execute a swap with a minimum-output guarantee.

    Error Handling:
        - Precondition failures: 400 / 403, nothing moved
        - Transfer, approval, slippage or deadline failures: 409, rolled back
        - Misbehaving contracts: 502, rolled back
    """
    outcome = aggregator.swap(
        request.amount_in,
        request.amount_out_min,
        request.router,
        request.path,
        request.caller,
        request.deadline,
    )
    return SwapResponse(amount_out=outcome.amount_out, amounts=outcome.amounts)


@router.get("/routers")
def list_routers(aggregator: Aggregator = Depends(get_aggregator)) -> AddressList:
    return AddressList(items=aggregator.routers)


@router.get("/connectors")
def list_connectors(aggregator: Aggregator = Depends(get_aggregator)) -> AddressList:
    return AddressList(items=aggregator.connectors)


@router.put("/admin/routers", responses=EXECUTION_ERRORS)
def set_routers(
    request: SetRoutersRequest,
    aggregator: Aggregator = Depends(get_aggregator),
) -> AddressList:
    aggregator.set_routers(request.caller, request.routers)
    return AddressList(items=aggregator.routers)


@router.put("/admin/connectors", responses=PRECONDITION_ERRORS)
def set_connectors(
    request: SetConnectorsRequest,
    aggregator: Aggregator = Depends(get_aggregator),
) -> AddressList:
    aggregator.set_connectors(request.caller, request.connectors)
    return AddressList(items=aggregator.connectors)
