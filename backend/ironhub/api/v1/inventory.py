"""
FastAPI router for the inventory registry
Project: Iron Hub (customer ledger backend)
"""

from fastapi import APIRouter, Depends, status

from ironhub.core.deps import CurrentActor, UnitOfWorkDep
from ironhub.schemas.inventory import InventoryItemCreate, InventoryItemRead
from ironhub.services.inventory_service import InventoryService

router = APIRouter(
    prefix="/inventory",
    tags=["Inventory"],
)


def get_inventory_service() -> InventoryService:
    """Dependency returning an InventoryService instance."""
    return InventoryService()


@router.get(
    "/",
    name="inventory_list",
    summary="List inventory",
    response_model=list[InventoryItemRead],
    status_code=status.HTTP_200_OK,
)
async def get_inventory(
    uow: UnitOfWorkDep,
    service: InventoryService = Depends(get_inventory_service),
) -> list[InventoryItemRead]:
    items = await service.get_all(uow)
    return [InventoryItemRead.model_validate(i) for i in items]


@router.post(
    "/",
    name="inventory_create",
    summary="Add inventory item",
    response_model=InventoryItemRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_inventory_item(
    item_data: InventoryItemCreate,
    uow: UnitOfWorkDep,
    actor: CurrentActor,
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryItemRead:
    item = await service.create(uow, item_data, actor)
    return InventoryItemRead.model_validate(item)
