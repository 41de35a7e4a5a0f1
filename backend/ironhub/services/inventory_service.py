"""
Service Layer for the inventory registry
Project: Iron Hub (customer ledger backend)

Equipment and parts on hand. Inventory is not tied to a customer account:
its audit entries carry no customer scope.
"""

import datetime
import logging
from typing import Any, Optional, Union

from pydantic import ValidationError

from ironhub.core.providers import Clock, IdGenerator
from ironhub.models import InventoryItem
from ironhub.repositories.base import UnitOfWork
from ironhub.schemas.inventory import InventoryItemCreate
from ironhub.schemas.ledger import BulkItemResult, BulkResult
from ironhub.services.audit_service import AuditService

# Logger for this module
logger = logging.getLogger(__name__)


class InventoryService:
    """Service for inventory items."""

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
        audit_service: Optional[AuditService] = None,
    ) -> None:
        self.id_generator = id_generator or IdGenerator()
        self.clock = clock or Clock()
        self.audit_service = audit_service or AuditService(self.id_generator, self.clock)

    async def get_all(self, uow: UnitOfWork) -> list[InventoryItem]:
        items = await uow.inventory.list_all()
        logger.info("Retrieved %s inventory items", len(items))
        return items

    async def create(self, uow: UnitOfWork, data: InventoryItemCreate, actor: str) -> InventoryItem:
        """Register one item and audit it."""
        async with uow:
            item = self._stage(uow, data, self.clock.now())
            self.audit_service.record(
                uow, actor, "Inventory Added", f"{item.type} '{item.name}' (qty {item.quantity}) added"
            )
            await uow.commit()

        logger.info("Created inventory item: %s - %s", item.id, item.name)
        return item

    async def bulk_create(
        self,
        uow: UnitOfWork,
        rows: list[Union[InventoryItemCreate, dict[str, Any]]],
        actor: str,
    ) -> BulkResult:
        """
        Register several items in one transaction.

        One "Bulk Ingest" audit entry summarizes the batch, written only
        when at least one row was accepted.
        """
        results: list[BulkItemResult] = []
        now = self.clock.now()

        async with uow:
            for index, row in enumerate(rows):
                try:
                    data = row if isinstance(row, InventoryItemCreate) else InventoryItemCreate.model_validate(row)
                except ValidationError as e:
                    logger.warning("Bulk inventory row %s rejected: %s", index, e.error_count())
                    results.append(BulkItemResult.rejected(index, e))
                    continue
                item = self._stage(uow, data, now)
                results.append(BulkItemResult.accepted(index, item.id))

            created = sum(1 for item in results if item.success)
            if created:
                self.audit_service.record(
                    uow, actor, "Bulk Ingest", f"{created} inventory items imported"
                )
                await uow.commit()

        result = BulkResult(items=results)
        logger.info("Bulk inventory import: %s created, %s rejected", result.created, result.failed)
        return result

    def _stage(self, uow: UnitOfWork, data: InventoryItemCreate, now: datetime.datetime) -> InventoryItem:
        item = InventoryItem(
            id=self.id_generator.new_uuid(),
            **data.model_dump(mode="python", exclude={"type"}),
            type=data.type.value,
            created_at=now,
            updated_at=now,
        )
        uow.inventory.add(item)
        return item
