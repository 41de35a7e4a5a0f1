"""
FastAPI router for reports
Project: Iron Hub (customer ledger backend)
"""

from fastapi import APIRouter, Depends, status

from ironhub.core.deps import UnitOfWorkDep
from ironhub.schemas.ledger import RevenueSummary
from ironhub.services.ledger_service import LedgerService

router = APIRouter(
    prefix="/reports",
    tags=["Reports"],
)


def get_ledger_service() -> LedgerService:
    """Dependency returning a LedgerService instance."""
    return LedgerService()


@router.get(
    "/revenue",
    name="reports_revenue",
    summary="Revenue summary",
    description="Quoted, billed and received totals across all accounts.",
    response_model=RevenueSummary,
    status_code=status.HTTP_200_OK,
)
async def get_revenue_summary(
    uow: UnitOfWorkDep,
    service: LedgerService = Depends(get_ledger_service),
) -> RevenueSummary:
    return await service.revenue_summary(uow)
