"""om_nodes REST endpoints (mounted under /api, API key required).

GET /nodes                         : all configured nodes with threshold flag
GET /nodes/{address}/balance       : balance for one address
GET /nodes/{address}/transactions  : history + stats, optional fromDate/toDate
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request
from pydantic import ValidationError

from src.om_common.errors import ValidationFailedError, dependency_errors, validation_details
from src.om_indexer.domain.models import TimeWindow
from src.om_nodes.application.schemas import (
    BalanceOut,
    NodesResponse,
    TransactionHistoryQuery,
    TransactionsResponse,
    address_errors,
)
from src.om_nodes.application.service import NodeApplicationService

router = APIRouter(prefix="/nodes", tags=["nodes"])


def get_node_service(request: Request) -> NodeApplicationService:
    return request.app.state.node_service


def valid_address(address: Annotated[str, Path()]) -> str:
    """Reject malformed addresses before any query is issued."""
    errors = address_errors(address)
    if errors:
        raise ValidationFailedError({"address": errors})
    return address


def transaction_window(
    from_date: Annotated[str | None, Query(alias="fromDate")] = None,
    to_date: Annotated[str | None, Query(alias="toDate")] = None,
) -> TimeWindow:
    try:
        query = TransactionHistoryQuery.model_validate({"fromDate": from_date, "toDate": to_date})
    except ValidationError as exc:
        raise ValidationFailedError(validation_details(exc.errors())) from None
    return query.to_window()


@router.get("", response_model=NodesResponse)
async def list_nodes(
    service: Annotated[NodeApplicationService, Depends(get_node_service)],
) -> NodesResponse:
    with dependency_errors("fetching nodes"):
        return await service.list_nodes()


@router.get("/{address}/balance", response_model=BalanceOut)
async def get_balance(
    address: Annotated[str, Depends(valid_address)],
    service: Annotated[NodeApplicationService, Depends(get_node_service)],
) -> BalanceOut:
    with dependency_errors("fetching balance"):
        return await service.get_balance(address)


@router.get(
    "/{address}/transactions",
    response_model=TransactionsResponse,
    response_model_exclude_none=True,
)
async def get_transactions(
    address: Annotated[str, Depends(valid_address)],
    window: Annotated[TimeWindow, Depends(transaction_window)],
    service: Annotated[NodeApplicationService, Depends(get_node_service)],
) -> TransactionsResponse:
    with dependency_errors("fetching transactions"):
        return await service.get_transactions(address, window)
