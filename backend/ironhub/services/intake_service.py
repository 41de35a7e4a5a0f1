"""
Service Layer for the data intake tool
Project: Iron Hub (customer ledger backend)

Takes loosely-typed rows produced by an external parser, normalizes them
through the import row schemas and hands the clean rows to the bulk
operation of the matching service. A row that cannot be normalized is
reported as a failed row and never reaches the ledger.
"""

import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel, ValidationError

from ironhub.core.exceptions import BusinessValidationError, NotFoundError
from ironhub.core.providers import Clock, IdGenerator
from ironhub.repositories.base import UnitOfWork
from ironhub.schemas.intake import (
    CustomerImportRow,
    IntakeEntity,
    InventoryImportRow,
    PaymentImportRow,
)
from ironhub.schemas.ledger import BulkItemResult, BulkResult
from ironhub.schemas.payment import PaymentCreate
from ironhub.services.audit_service import AuditService
from ironhub.services.customer_service import CustomerService
from ironhub.services.inventory_service import InventoryService
from ironhub.services.payment_service import PaymentService

# Logger for this module
logger = logging.getLogger(__name__)


class IntakeService:
    """
    Dispatcher of parsed rows to the bulk operations.

    Usage:
        result = await IntakeService().ingest(uow, IntakeEntity.CUSTOMERS, rows, actor)
    """

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.id_generator = id_generator or IdGenerator()
        self.clock = clock or Clock()
        self.audit_service = AuditService(self.id_generator, self.clock)
        self.customer_service = CustomerService(self.id_generator, self.clock, self.audit_service)
        self.inventory_service = InventoryService(self.id_generator, self.clock, self.audit_service)
        self.payment_service = PaymentService(
            self.id_generator, self.clock, self.audit_service, self.customer_service
        )

    async def ingest(
        self,
        uow: UnitOfWork,
        entity_type: IntakeEntity,
        rows: list[dict[str, Any]],
        actor: str,
    ) -> BulkResult:
        """
        Normalize and import rows of one entity type.

        Args:
            uow: Unit of work
            entity_type: customers | inventory | payments
            rows: Raw rows as produced by the parser
            actor: Email of the operator performing the import

        Returns:
            BulkResult indexed on the raw rows
        """
        logger.info("Intake of %s %s rows by %s", len(rows), entity_type.value, actor)

        if entity_type == IntakeEntity.CUSTOMERS:
            return await self._dispatch(
                rows,
                lambda row: CustomerImportRow.model_validate(row).to_create(),
                lambda clean: self.customer_service.bulk_create(uow, clean, actor),
            )
        if entity_type == IntakeEntity.INVENTORY:
            return await self._dispatch(
                rows,
                lambda row: InventoryImportRow.model_validate(row).to_create(),
                lambda clean: self.inventory_service.bulk_create(uow, clean, actor),
            )

        # Payments: attribution may need a quote lookup, so normalize first
        normalized: list[Any] = []
        for row in rows:
            try:
                normalized.append(await self._payment_from_row(uow, row))
            except (ValidationError, BusinessValidationError, NotFoundError) as e:
                normalized.append(e)
        return await self._dispatch(
            normalized,
            _raise_or_return,
            lambda clean: self.payment_service.bulk_create(uow, clean, actor, imported=True),
        )

    async def _payment_from_row(self, uow: UnitOfWork, row: dict[str, Any]) -> PaymentCreate:
        parsed = PaymentImportRow.model_validate(row)
        customer_id = parsed.customer_id
        if customer_id is None:
            if not parsed.invoice_id:
                raise BusinessValidationError("Payment row names neither a customer nor an invoice")
            quote = await uow.quotes.get(parsed.invoice_id)
            if quote is None:
                raise NotFoundError(f"Quote {parsed.invoice_id} not found")
            customer_id = quote.customer_id
        return PaymentCreate(
            customer_id=customer_id,
            date=parsed.date,
            amount=parsed.amount,
            method=parsed.method,
            invoice_id=parsed.invoice_id,
            reference=parsed.reference,
        )

    async def _dispatch(
        self,
        rows: list[Any],
        normalize: Callable[[Any], BaseModel],
        bulk: Callable[[list[Any]], Any],
    ) -> BulkResult:
        """
        Normalize every row, send the clean ones to `bulk` and merge both
        outcomes back into raw-row order.
        """
        results: dict[int, BulkItemResult] = {}
        clean: list[BaseModel] = []
        positions: list[int] = []

        for index, row in enumerate(rows):
            try:
                clean.append(normalize(row))
                positions.append(index)
            except (ValidationError, BusinessValidationError, NotFoundError) as e:
                logger.warning("Intake row %s rejected: %s", index, e)
                results[index] = BulkItemResult.rejected(index, e)

        if clean:
            outcome: BulkResult = await bulk(clean)
            for item in outcome.items:
                original = positions[item.index]
                results[original] = item.model_copy(update={"index": original})

        return BulkResult(items=[results[index] for index in range(len(rows))])


def _raise_or_return(row: Any) -> Any:
    if isinstance(row, Exception):
        raise row
    return row
