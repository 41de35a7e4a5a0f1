"""
Repository and Unit of Work interfaces
Project: Iron Hub (customer ledger backend)

The services only talk to these interfaces. Two implementations exist:
- ironhub.repositories.memory: process-local store (default backend, test double)
- ironhub.repositories.sql: SQLAlchemy AsyncSession (postgres backend)

Writes (add/update) are staged on the unit of work and become visible to
other units of work only on commit(). Leaving the unit of work without
committing discards them.
"""

import uuid
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from ironhub.models import AuditLog, Customer, InventoryItem, Payment, Quote


class CustomerRepository(ABC):
    """Customer accounts."""

    @abstractmethod
    async def get(self, customer_id: uuid.UUID) -> Optional[Customer]: ...

    @abstractmethod
    async def list_all(self) -> list[Customer]:
        """All customers in insertion order."""

    @abstractmethod
    def add(self, customer: Customer) -> None: ...

    @abstractmethod
    def update(self, customer: Customer) -> None: ...


class QuoteRepository(ABC):
    """Quotes (invoices)."""

    @abstractmethod
    async def get(self, quote_id: str) -> Optional[Quote]: ...

    @abstractmethod
    async def list_all(self, status: Optional[str] = None) -> list[Quote]: ...

    @abstractmethod
    async def list_by_customer(self, customer_id: uuid.UUID) -> list[Quote]: ...

    @abstractmethod
    def add(self, quote: Quote) -> None: ...

    @abstractmethod
    def update(self, quote: Quote) -> None: ...


class PaymentRepository(ABC):
    """Payments. Immutable: no update operation."""

    @abstractmethod
    async def get(self, payment_id: str) -> Optional[Payment]: ...

    @abstractmethod
    async def list_all(self) -> list[Payment]: ...

    @abstractmethod
    async def list_by_customer(self, customer_id: uuid.UUID) -> list[Payment]: ...

    @abstractmethod
    def add(self, payment: Payment) -> None: ...


class AuditLogRepository(ABC):
    """Append-only audit trail."""

    @abstractmethod
    async def list_by_customer(self, customer_id: uuid.UUID) -> list[AuditLog]: ...

    @abstractmethod
    def add(self, entry: AuditLog) -> None: ...


class InventoryRepository(ABC):
    """Equipment and parts registry."""

    @abstractmethod
    async def list_all(self) -> list[InventoryItem]: ...

    @abstractmethod
    def add(self, item: InventoryItem) -> None: ...


class UnitOfWork(ABC):
    """
    Transaction boundary for ledger writes.

    Usage:
        async with uow:
            customer = await uow.lock_customer(customer_id)
            ...
            await uow.commit()

    Exiting the block without commit() rolls back; an exception inside the
    block rolls back and propagates. A unit of work can be entered again
    after it has been committed or rolled back.
    """

    customers: CustomerRepository
    quotes: QuoteRepository
    payments: PaymentRepository
    audit_logs: AuditLogRepository
    inventory: InventoryRepository

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.rollback()

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator["UnitOfWork"]:
        """
        Group several reads so they all see the same committed state.

        The in-memory store needs nothing here: its repository reads never
        suspend, so no commit can land between two of them.
        """
        yield self

    @abstractmethod
    async def lock_customer(self, customer_id: uuid.UUID) -> Customer:
        """
        Load a customer for update, holding its single-writer lock until
        commit or rollback.

        Raises:
            NotFoundError: customer does not exist
        """

    @abstractmethod
    async def commit(self) -> None:
        """Make every staged write visible at once and release the locks."""

    @abstractmethod
    async def rollback(self) -> None:
        """Discard staged writes and release the locks."""
