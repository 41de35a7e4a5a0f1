"""
FastAPI router for quotes
Project: Iron Hub (customer ledger backend)

Defines the API endpoints for quotes and their status lifecycle.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ironhub.core.deps import CurrentActor, UnitOfWorkDep
from ironhub.schemas.quote import QuoteCreate, QuoteList, QuoteRead, QuoteStatus, QuoteStatusUpdate
from ironhub.services.quote_service import QuoteService

# Logger for this module
logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/quotes",
    tags=["Quotes"],
)


# -------------------------------------------------------------------
# Dependency Injection
# -------------------------------------------------------------------

def get_quote_service() -> QuoteService:
    """Dependency returning a QuoteService instance."""
    return QuoteService()


# -------------------------------------------------------------------
# Endpoints
# -------------------------------------------------------------------

@router.get(
    "/",
    name="quotes_list",
    summary="List quotes",
    description="All quotes in creation order, optionally filtered by status.",
    response_model=QuoteList,
    status_code=status.HTTP_200_OK,
)
async def get_quotes(
    uow: UnitOfWorkDep,
    status_filter: Optional[QuoteStatus] = Query(None, alias="status", description="Filter by status"),
    service: QuoteService = Depends(get_quote_service),
) -> QuoteList:
    quotes = await service.get_all(uow, status=status_filter)
    return QuoteList(
        items=[QuoteRead.model_validate(q) for q in quotes],
        total=len(quotes),
    )


@router.post(
    "/",
    name="quotes_create",
    summary="Create quote",
    description="Create a quote for an existing customer (draft unless a status is given).",
    response_model=QuoteRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_quote(
    quote_data: QuoteCreate,
    uow: UnitOfWorkDep,
    actor: CurrentActor,
    service: QuoteService = Depends(get_quote_service),
) -> QuoteRead:
    """
    Create a quote.

    Raises:
        NotFoundError: If the customer does not exist
    """
    quote = await service.create(uow, quote_data, actor)
    return QuoteRead.model_validate(quote)


@router.get(
    "/{quote_id}",
    name="quotes_detail",
    summary="Quote detail",
    response_model=QuoteRead,
    status_code=status.HTTP_200_OK,
)
async def get_quote(
    quote_id: str,
    uow: UnitOfWorkDep,
    service: QuoteService = Depends(get_quote_service),
) -> QuoteRead:
    quote = await service.get_by_id(uow, quote_id)
    return QuoteRead.model_validate(quote)


@router.patch(
    "/{quote_id}/status",
    name="quotes_status_update",
    summary="Change quote status",
    description="draft -> sent -> accepted | rejected. Accepting bills the customer.",
    response_model=QuoteRead,
    status_code=status.HTTP_200_OK,
)
async def update_quote_status(
    quote_id: str,
    status_data: QuoteStatusUpdate,
    uow: UnitOfWorkDep,
    actor: CurrentActor,
    service: QuoteService = Depends(get_quote_service),
) -> QuoteRead:
    """
    Move a quote along its lifecycle.

    Raises:
        NotFoundError: If the quote does not exist
        InvalidTransitionError: If the transition is not allowed
    """
    quote = await service.update_status(uow, quote_id, status_data.status, actor)
    return QuoteRead.model_validate(quote)
