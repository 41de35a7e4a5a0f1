"""
FastAPI router for the data intake tool
Project: Iron Hub (customer ledger backend)

Receives rows already extracted by the external parser (legacy exports,
PDF text, spreadsheets) and imports them after validation.
"""

from fastapi import APIRouter, Depends, status

from ironhub.core.deps import CurrentActor, UnitOfWorkDep
from ironhub.schemas.intake import IntakeEntity, IntakeRequest
from ironhub.schemas.ledger import BulkResult
from ironhub.services.intake_service import IntakeService

router = APIRouter(
    prefix="/intake",
    tags=["Data Intake"],
)


def get_intake_service() -> IntakeService:
    """Dependency returning an IntakeService instance."""
    return IntakeService()


@router.post(
    "/{entity_type}",
    name="intake_ingest",
    summary="Import parsed rows",
    description="Normalize and import customers, inventory items or payments; reports every row.",
    response_model=BulkResult,
    status_code=status.HTTP_200_OK,
)
async def ingest_rows(
    entity_type: IntakeEntity,
    request: IntakeRequest,
    uow: UnitOfWorkDep,
    actor: CurrentActor,
    service: IntakeService = Depends(get_intake_service),
) -> BulkResult:
    return await service.ingest(uow, entity_type, request.rows, actor)
