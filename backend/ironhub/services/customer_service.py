"""
Service Layer for the Customer entity
Project: Iron Hub (customer ledger backend)

Business logic for customer accounts:
- Creation (single and bulk) with zeroed totals
- Monetary totals maintained by the payment and quote flows
- One audit entry per created account
"""

import datetime
import logging
import uuid
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import ValidationError

from ironhub.core.exceptions import (
    BusinessValidationError,
    InconsistentStateError,
    InvalidAmountError,
    NotFoundError,
)
from ironhub.core.money import MAX_AMOUNT, ZERO, to_money
from ironhub.core.providers import Clock, IdGenerator
from ironhub.models import Customer
from ironhub.repositories.base import UnitOfWork
from ironhub.schemas.customer import CustomerCreate
from ironhub.schemas.ledger import BulkItemResult, BulkResult
from ironhub.services.audit_service import AuditService

# Logger for this module
logger = logging.getLogger(__name__)


class CustomerService:
    """
    Service for customer accounts.

    total_billed and total_paid are never written from request data: a new
    account starts at zero and the totals only move through
    record_billing_applied / record_payment_applied, called by the quote
    and payment flows on a customer they have locked.

    Usage with Dependency Injection:
        @router.get("/customers/")
        async def list_customers(service: CustomerService = Depends(get_customer_service)):
            return await service.get_all(uow)
    """

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
        audit_service: Optional[AuditService] = None,
    ) -> None:
        self.id_generator = id_generator or IdGenerator()
        self.clock = clock or Clock()
        self.audit_service = audit_service or AuditService(self.id_generator, self.clock)

    async def get_all(self, uow: UnitOfWork) -> list[Customer]:
        """
        Snapshot of every customer, in creation order.

        Args:
            uow: Unit of work

        Returns:
            List of Customer (copies: mutating them changes nothing)
        """
        customers = await uow.customers.list_all()
        logger.info("Retrieved %s customers", len(customers))
        return customers

    async def get_by_id(self, uow: UnitOfWork, customer_id: uuid.UUID) -> Customer:
        """
        Retrieve a customer by ID.

        Raises:
            NotFoundError: If the customer does not exist
        """
        customer = await uow.customers.get(customer_id)
        if customer is None:
            logger.warning("Customer not found: %s", customer_id)
            raise NotFoundError(f"Customer {customer_id} not found")
        return customer

    async def create(self, uow: UnitOfWork, data: CustomerCreate, actor: str) -> Customer:
        """
        Create a customer with zero totals and audit it.

        Args:
            uow: Unit of work
            data: Validated customer data
            actor: Email of the operator performing the action

        Returns:
            The created Customer
        """
        async with uow:
            customer = self._stage(uow, data, actor, self.clock.now())
            await uow.commit()

        logger.info("Created customer: %s - %s", customer.id, customer.name)
        return customer

    async def bulk_create(
        self,
        uow: UnitOfWork,
        rows: list[Union[CustomerCreate, dict[str, Any]]],
        actor: str,
    ) -> BulkResult:
        """
        Create several customers in one transaction.

        Each row is validated on its own; rejected rows are reported and
        skipped, the valid ones are committed together.

        Args:
            uow: Unit of work
            rows: CustomerCreate instances or raw dicts
            actor: Email of the operator performing the action

        Returns:
            BulkResult with one entry per input row, in input order
        """
        results: list[BulkItemResult] = []
        now = self.clock.now()

        async with uow:
            for index, row in enumerate(rows):
                try:
                    data = row if isinstance(row, CustomerCreate) else CustomerCreate.model_validate(row)
                except ValidationError as e:
                    logger.warning("Bulk customer row %s rejected: %s", index, e.error_count())
                    results.append(BulkItemResult.rejected(index, e))
                    continue

                customer = self._stage(uow, data, actor, now)
                results.append(BulkItemResult.accepted(index, customer.id))

            if any(item.success for item in results):
                await uow.commit()

        result = BulkResult(items=results)
        logger.info("Bulk customer import: %s created, %s rejected", result.created, result.failed)
        return result

    # ------------------------------------------------------------
    # Totals (caller holds the customer lock)
    # ------------------------------------------------------------

    def record_payment_applied(self, customer: Optional[Customer], amount: Decimal) -> Customer:
        """
        Add a payment amount to total_paid.

        Raises:
            InconsistentStateError: customer is missing (a payment was
                accepted for an account that no longer exists)
            InvalidAmountError: total_paid would exceed MAX_AMOUNT
        """
        if customer is None:
            logger.error("Payment applied to a missing customer (amount %s)", amount)
            raise InconsistentStateError("Payment applied to a missing customer")
        total = to_money((customer.total_paid or ZERO) + amount)
        if total > MAX_AMOUNT:
            raise InvalidAmountError(
                f"Payment would take total_paid of customer {customer.id} above {MAX_AMOUNT}"
            )
        customer.total_paid = total
        customer.updated_at = self.clock.now()
        return customer

    def record_billing_applied(self, customer: Optional[Customer], amount: Decimal) -> Customer:
        """
        Add an accepted quote total to total_billed.

        Raises:
            InconsistentStateError: customer is missing
            BusinessValidationError: total_billed would exceed MAX_AMOUNT
        """
        if customer is None:
            logger.error("Billing applied to a missing customer (amount %s)", amount)
            raise InconsistentStateError("Billing applied to a missing customer")
        total = to_money((customer.total_billed or ZERO) + amount)
        if total > MAX_AMOUNT:
            raise BusinessValidationError(
                f"Billing would take total_billed of customer {customer.id} above {MAX_AMOUNT}"
            )
        customer.total_billed = total
        customer.updated_at = self.clock.now()
        return customer

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    def _stage(
        self,
        uow: UnitOfWork,
        data: CustomerCreate,
        actor: str,
        now: datetime.datetime,
    ) -> Customer:
        customer = Customer(
            id=self.id_generator.new_uuid(),
            name=data.name,
            email=str(data.email) if data.email else None,
            phone=data.phone,
            billing_address=data.billing_address.model_dump(),
            shipping_address=data.shipping_address.model_dump(),
            internal_notes=data.internal_notes,
            total_billed=ZERO,
            total_paid=ZERO,
            created_at=now,
            updated_at=now,
        )
        uow.customers.add(customer)
        self.audit_service.record(
            uow,
            actor,
            "Account Created",
            f"Customer account '{customer.name}' created",
            customer_id=customer.id,
        )
        return customer
