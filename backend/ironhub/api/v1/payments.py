"""
FastAPI router for payments
Project: Iron Hub (customer ledger backend)

Single payments are recorded through /customers/{id}/payments; this router
carries the batch entry point.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from ironhub.core.deps import CurrentActor, UnitOfWorkDep
from ironhub.schemas.ledger import BulkResult
from ironhub.services.payment_service import PaymentService

router = APIRouter(
    prefix="/payments",
    tags=["Payments"],
)


def get_payment_service() -> PaymentService:
    """Dependency returning a PaymentService instance."""
    return PaymentService()


@router.post(
    "/bulk",
    name="payments_bulk_create",
    summary="Bulk record payments",
    description=(
        "Record several payments in one transaction. Each row is validated on its own; "
        "the result reports the outcome of every row."
    ),
    response_model=BulkResult,
    status_code=status.HTTP_200_OK,
)
async def bulk_create_payments(
    uow: UnitOfWorkDep,
    actor: CurrentActor,
    rows: list[dict[str, Any]] = Body(..., description="Payment rows, each with its customer_id"),
    service: PaymentService = Depends(get_payment_service),
) -> BulkResult:
    return await service.bulk_create(uow, rows, actor)
