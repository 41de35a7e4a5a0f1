"""
Service Layer for payments
Project: Iron Hub (customer ledger backend)

Records payments against customer accounts and allocates them to quotes.

A payment write is one unit of work:
    validate amount -> lock customer -> check allocation -> stage payment
    -> increment total_paid -> audit -> commit
Any failure before the commit leaves the ledger untouched.
"""

import logging
import uuid
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import ValidationError

from ironhub.core.exceptions import (
    AppException,
    InvalidAllocationError,
    InvalidAmountError,
    NotFoundError,
)
from ironhub.core.money import MAX_AMOUNT, ZERO, to_money
from ironhub.core.providers import Clock, IdGenerator
from ironhub.models import Customer, Payment
from ironhub.repositories.base import UnitOfWork
from ironhub.schemas.ledger import BulkItemResult, BulkResult
from ironhub.schemas.payment import PaymentCreate, PaymentSource
from ironhub.schemas.quote import QuoteStatus
from ironhub.services.audit_service import AuditService
from ironhub.services.customer_service import CustomerService

# Logger for this module
logger = logging.getLogger(__name__)


def validate_amount(amount: Any) -> Decimal:
    """
    Round an amount to cents and require it to be positive.

    Raises:
        InvalidAmountError: amount is zero, negative, not a number or larger
            than an account total can hold
    """
    try:
        value = to_money(amount)
    except ValueError:
        raise InvalidAmountError(f"Invalid payment amount: {amount!r}")
    if value <= ZERO:
        raise InvalidAmountError(
            f"Payment amount must be greater than zero (got {value})",
            extra={"amount": str(value)},
        )
    if value > MAX_AMOUNT:
        raise InvalidAmountError(
            f"Payment amount exceeds the maximum of {MAX_AMOUNT}",
            extra={"amount": str(value)},
        )
    return value


class PaymentService:
    """
    Service for payments.

    Payments are immutable: there is no update or delete. A correction is
    a new record, which keeps total_paid equal to the sum of the payments.
    """

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
        audit_service: Optional[AuditService] = None,
        customer_service: Optional[CustomerService] = None,
    ) -> None:
        self.id_generator = id_generator or IdGenerator()
        self.clock = clock or Clock()
        self.audit_service = audit_service or AuditService(self.id_generator, self.clock)
        self.customer_service = customer_service or CustomerService(
            self.id_generator, self.clock, self.audit_service
        )

    async def get_by_customer(self, uow: UnitOfWork, customer_id: uuid.UUID) -> list[Payment]:
        """Payments of one customer, newest value date first."""
        payments = await uow.payments.list_by_customer(customer_id)
        return sorted(payments, key=lambda p: (p.date, p.created_at), reverse=True)

    async def create(self, uow: UnitOfWork, data: PaymentCreate, actor: str) -> Payment:
        """
        Record a payment and apply it to the customer's total_paid.

        Args:
            uow: Unit of work
            data: Payment data (customer_id, date, amount, method, invoice_id)
            actor: Email of the operator performing the action

        Returns:
            The recorded Payment

        Raises:
            InvalidAmountError: amount <= 0
            NotFoundError: customer or quote does not exist
            InvalidAllocationError: quote belongs to another customer or was rejected
        """
        try:
            amount = validate_amount(data.amount)
        except InvalidAmountError:
            logger.warning("Payment rejected for customer %s: invalid amount %s", data.customer_id, data.amount)
            raise

        async with uow:
            customer = await uow.lock_customer(data.customer_id)
            payment = await self._stage(uow, customer, data, amount, actor, imported=False)
            await uow.commit()

        logger.info(
            "Recorded payment %s: %s for customer %s (invoice %s)",
            payment.id, payment.amount, payment.customer_id, payment.invoice_id or "unallocated",
        )
        return payment

    async def bulk_create(
        self,
        uow: UnitOfWork,
        rows: list[Union[PaymentCreate, dict[str, Any]]],
        actor: str,
        imported: bool = False,
    ) -> BulkResult:
        """
        Record several payments in one transaction.

        Every row is validated on its own and rejected rows are reported
        without affecting the others. Customers touched by the batch are
        locked in sorted id order, then the accepted rows are applied one
        by one (each updates total_paid and writes its own audit entry) and
        committed together.

        Args:
            uow: Unit of work
            rows: PaymentCreate instances or raw dicts
            actor: Email of the operator performing the action
            imported: Rows come from the intake tool (PAY-INGEST- ids, source=import)

        Returns:
            BulkResult with one entry per input row, in input order
        """
        results: dict[int, BulkItemResult] = {}
        valid: list[tuple[int, PaymentCreate, Decimal]] = []

        for index, row in enumerate(rows):
            try:
                data = row if isinstance(row, PaymentCreate) else PaymentCreate.model_validate(row)
                amount = validate_amount(data.amount)
            except (ValidationError, InvalidAmountError) as e:
                logger.warning("Bulk payment row %s rejected: %s", index, e)
                results[index] = BulkItemResult.rejected(index, e)
                continue
            valid.append((index, data, amount))

        async with uow:
            # Sorted lock order: two batches touching the same accounts cannot deadlock
            locked: dict[uuid.UUID, Customer] = {}
            missing: set[uuid.UUID] = set()
            for customer_id in sorted({data.customer_id for _, data, _ in valid}, key=str):
                try:
                    locked[customer_id] = await uow.lock_customer(customer_id)
                except NotFoundError:
                    missing.add(customer_id)

            for index, data, amount in valid:
                if data.customer_id in missing:
                    results[index] = BulkItemResult.rejected(
                        index, NotFoundError(f"Customer {data.customer_id} not found")
                    )
                    continue
                try:
                    payment = await self._stage(
                        uow, locked[data.customer_id], data, amount, actor, imported=imported
                    )
                except AppException as e:
                    logger.warning("Bulk payment row %s rejected: %s", index, e.detail)
                    results[index] = BulkItemResult.rejected(index, e)
                    continue
                results[index] = BulkItemResult.accepted(index, payment.id)

            if any(item.success for item in results.values()):
                await uow.commit()

        result = BulkResult(items=[results[index] for index in range(len(rows))])
        logger.info("Bulk payments: %s recorded, %s rejected", result.created, result.failed)
        return result

    # ------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------

    async def _check_allocation(self, uow: UnitOfWork, customer: Customer, invoice_id: str) -> None:
        quote = await uow.quotes.get(invoice_id)
        if quote is None:
            logger.warning("Payment allocation to unknown quote %s", invoice_id)
            raise NotFoundError(f"Quote {invoice_id} not found")
        if quote.customer_id != customer.id:
            logger.warning(
                "Payment for customer %s allocated to quote %s of customer %s",
                customer.id, invoice_id, quote.customer_id,
            )
            raise InvalidAllocationError(
                f"Quote {invoice_id} belongs to a different customer",
                extra={"invoice_id": invoice_id},
            )
        if quote.status == QuoteStatus.REJECTED.value:
            raise InvalidAllocationError(
                f"Quote {invoice_id} was rejected and cannot receive payments",
                extra={"invoice_id": invoice_id},
            )

    async def _stage(
        self,
        uow: UnitOfWork,
        customer: Customer,
        data: PaymentCreate,
        amount: Decimal,
        actor: str,
        imported: bool,
    ) -> Payment:
        # All checks run before the first staged write
        if data.invoice_id:
            await self._check_allocation(uow, customer, data.invoice_id)

        payment = Payment(
            id=self.id_generator.payment_id(imported=imported),
            customer_id=customer.id,
            date=data.date,
            amount=amount,
            method=data.method.value,
            invoice_id=data.invoice_id,
            reference=data.reference,
            source=(PaymentSource.IMPORT if imported else PaymentSource.MANUAL).value,
            created_at=self.clock.now(),
        )
        self.customer_service.record_payment_applied(customer, amount)
        uow.payments.add(payment)
        uow.customers.update(customer)

        allocation = f"allocated to {payment.invoice_id}" if payment.invoice_id else "unallocated"
        self.audit_service.record(
            uow,
            actor,
            "Payment Recorded",
            f"Payment {payment.id} of {amount} via {payment.method} ({allocation})",
            customer_id=customer.id,
        )
        return payment
