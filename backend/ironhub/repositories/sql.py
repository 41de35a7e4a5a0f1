"""
SQLAlchemy storage backend
Project: Iron Hub (customer ledger backend)

Unit of work over one AsyncSession (STORAGE_BACKEND=postgres).
The customer row lock is a SELECT ... FOR UPDATE held until commit or
rollback; integrity failures on commit become ConflictError.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ironhub.core.exceptions import ConflictError, NotFoundError
from ironhub.models import AuditLog, Customer, InventoryItem, Payment, Quote
from ironhub.repositories.base import (
    AuditLogRepository,
    CustomerRepository,
    InventoryRepository,
    PaymentRepository,
    QuoteRepository,
    UnitOfWork,
)

# Logger for this module
logger = logging.getLogger(__name__)


class SqlCustomerRepository(CustomerRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, customer_id: uuid.UUID) -> Optional[Customer]:
        return await self.session.get(Customer, customer_id)

    async def list_all(self) -> list[Customer]:
        result = await self.session.execute(
            select(Customer).order_by(Customer.created_at.asc(), Customer.id.asc())
        )
        return list(result.scalars().all())

    def add(self, customer: Customer) -> None:
        self.session.add(customer)

    def update(self, customer: Customer) -> None:
        # Instances loaded through the session are already tracked
        self.session.add(customer)


class SqlQuoteRepository(QuoteRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, quote_id: str) -> Optional[Quote]:
        # Always re-read: status checks must not trust a cached row
        return await self.session.get(Quote, quote_id, populate_existing=True)

    async def list_all(self, status: Optional[str] = None) -> list[Quote]:
        query = select(Quote).order_by(Quote.created_at.asc(), Quote.id.asc())
        if status is not None:
            query = query.where(Quote.status == status)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def list_by_customer(self, customer_id: uuid.UUID) -> list[Quote]:
        result = await self.session.execute(
            select(Quote)
            .where(Quote.customer_id == customer_id)
            .order_by(Quote.created_at.asc(), Quote.id.asc())
        )
        return list(result.scalars().all())

    def add(self, quote: Quote) -> None:
        self.session.add(quote)

    def update(self, quote: Quote) -> None:
        self.session.add(quote)


class SqlPaymentRepository(PaymentRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, payment_id: str) -> Optional[Payment]:
        return await self.session.get(Payment, payment_id)

    async def list_all(self) -> list[Payment]:
        result = await self.session.execute(
            select(Payment).order_by(Payment.created_at.asc(), Payment.id.asc())
        )
        return list(result.scalars().all())

    async def list_by_customer(self, customer_id: uuid.UUID) -> list[Payment]:
        result = await self.session.execute(
            select(Payment)
            .where(Payment.customer_id == customer_id)
            .order_by(Payment.created_at.asc(), Payment.id.asc())
        )
        return list(result.scalars().all())

    def add(self, payment: Payment) -> None:
        self.session.add(payment)


class SqlAuditLogRepository(AuditLogRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_by_customer(self, customer_id: uuid.UUID) -> list[AuditLog]:
        result = await self.session.execute(
            select(AuditLog)
            .where(AuditLog.customer_id == customer_id)
            .order_by(AuditLog.created_at.asc(), AuditLog.id.asc())
        )
        return list(result.scalars().all())

    def add(self, entry: AuditLog) -> None:
        self.session.add(entry)


class SqlInventoryRepository(InventoryRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def list_all(self) -> list[InventoryItem]:
        result = await self.session.execute(
            select(InventoryItem).order_by(InventoryItem.created_at.asc(), InventoryItem.id.asc())
        )
        return list(result.scalars().all())

    def add(self, item: InventoryItem) -> None:
        self.session.add(item)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    Unit of work over an AsyncSession.

    Reads issued through the repositories see the committed state of the
    database plus whatever this session has already flushed.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.customers = SqlCustomerRepository(session)
        self.quotes = SqlQuoteRepository(session)
        self.payments = SqlPaymentRepository(session)
        self.audit_logs = SqlAuditLogRepository(session)
        self.inventory = SqlInventoryRepository(session)
        self._locked: dict[uuid.UUID, Customer] = {}

    async def lock_customer(self, customer_id: uuid.UUID) -> Customer:
        # Added in this unit of work and not flushed yet
        for obj in self.session.new:
            if isinstance(obj, Customer) and obj.id == customer_id:
                return obj
        # Row lock already held: re-selecting would overwrite unflushed totals
        if customer_id in self._locked:
            return self._locked[customer_id]

        result = await self.session.execute(
            select(Customer)
            .where(Customer.id == customer_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        customer = result.scalar_one_or_none()
        if customer is None:
            logger.warning("Customer not found for update: %s", customer_id)
            raise NotFoundError(f"Customer {customer_id} not found")
        self._locked[customer_id] = customer
        return customer

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator["SqlAlchemyUnitOfWork"]:
        """
        Run the reads of the block in one REPEATABLE READ transaction.

        At READ COMMITTED every SELECT sees its own snapshot, so a payment
        committed between two reads would show up in one and not the other.
        The isolation level can only be chosen when the transaction begins:
        inside an open transaction the block simply joins it.
        """
        if self.session.in_transaction():
            yield self
            return

        await self.session.connection(execution_options={"isolation_level": "REPEATABLE READ"})
        try:
            yield self
        finally:
            # Read-only transaction
            await self.session.rollback()

    async def commit(self) -> None:
        self._locked.clear()
        try:
            await self.session.commit()
        except IntegrityError as e:
            logger.error("IntegrityError on commit: %s - %s", e.__class__.__name__, e.orig)
            await self.session.rollback()
            raise ConflictError("The write conflicts with existing records")
        except SQLAlchemyError as e:
            logger.error("SQLAlchemy error on commit: %s - %s", e.__class__.__name__, e)
            await self.session.rollback()
            raise ConflictError("Database error while saving")

    async def rollback(self) -> None:
        self._locked.clear()
        await self.session.rollback()
