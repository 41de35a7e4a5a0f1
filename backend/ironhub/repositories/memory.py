"""
In-memory storage backend
Project: Iron Hub (customer ledger backend)

Process-local store used when STORAGE_BACKEND=memory (the default) and as
the test double for the services.

Consistency model:
- Readers receive deep copies, never the stored objects.
- Writers stage copies on their unit of work; commit() swaps them into the
  store without awaiting, so a reader sees either the state before the
  commit or the state after it.
- One asyncio.Lock per customer serializes writers on the same account.
"""

import asyncio
import logging
import uuid
from functools import lru_cache
from typing import Any, Callable, Generic, Optional, TypeVar

from ironhub.core.exceptions import ConflictError, NotFoundError
from ironhub.models import AuditLog, Customer, InventoryItem, Payment, Quote
from ironhub.models.mixins import clone_entity
from ironhub.repositories.base import (
    AuditLogRepository,
    CustomerRepository,
    InventoryRepository,
    PaymentRepository,
    QuoteRepository,
    UnitOfWork,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MemoryStore:
    """Committed state of the ledger. Dicts keep insertion order."""

    def __init__(self) -> None:
        self.customers: dict[uuid.UUID, Customer] = {}
        self.quotes: dict[str, Quote] = {}
        self.payments: dict[str, Payment] = {}
        self.audit_logs: dict[uuid.UUID, AuditLog] = {}
        self.inventory: dict[uuid.UUID, InventoryItem] = {}
        self._customer_locks: dict[uuid.UUID, asyncio.Lock] = {}

    def customer_lock(self, customer_id: uuid.UUID) -> asyncio.Lock:
        """Single-writer lock of an account, created on first use."""
        return self._customer_locks.setdefault(customer_id, asyncio.Lock())


@lru_cache
def get_memory_store() -> MemoryStore:
    """Process-wide store shared by every request."""
    return MemoryStore()


class _MemoryTable(Generic[T]):
    """
    One table seen through a unit of work: committed rows overlaid with
    the rows staged by this unit of work.
    """

    def __init__(self, committed: dict[Any, T]) -> None:
        self.committed = committed
        self.added: dict[Any, T] = {}
        self.updated: dict[Any, T] = {}

    def get(self, key: Any) -> Optional[T]:
        if key in self.added:
            return self.added[key]
        if key in self.updated:
            return self.updated[key]
        row = self.committed.get(key)
        return clone_entity(row) if row is not None else None

    def rows(self, where: Optional[Callable[[T], bool]] = None) -> list[T]:
        result = []
        for key, row in list(self.committed.items()):
            row = self.updated[key] if key in self.updated else clone_entity(row)
            result.append(row)
        result.extend(self.added.values())
        if where is not None:
            result = [row for row in result if where(row)]
        return result

    def add(self, key: Any, row: T) -> None:
        self.added[key] = row

    def update(self, key: Any, row: T) -> None:
        if key in self.added:
            self.added[key] = row
        else:
            self.updated[key] = row

    def conflicts(self) -> list[Any]:
        return [key for key in self.added if key in self.committed]

    def apply(self) -> None:
        # Plain dict assignments only: no await between the first and last write
        for key, row in self.updated.items():
            self.committed[key] = clone_entity(row)
        for key, row in self.added.items():
            self.committed[key] = clone_entity(row)
        self.clear()

    def clear(self) -> None:
        self.added.clear()
        self.updated.clear()


# ------------------------------------------------------------
# Repositories
# ------------------------------------------------------------

class MemoryCustomerRepository(CustomerRepository):
    def __init__(self, table: _MemoryTable[Customer]) -> None:
        self._table = table

    async def get(self, customer_id: uuid.UUID) -> Optional[Customer]:
        return self._table.get(customer_id)

    async def list_all(self) -> list[Customer]:
        return self._table.rows()

    def add(self, customer: Customer) -> None:
        self._table.add(customer.id, customer)

    def update(self, customer: Customer) -> None:
        self._table.update(customer.id, customer)


class MemoryQuoteRepository(QuoteRepository):
    def __init__(self, table: _MemoryTable[Quote]) -> None:
        self._table = table

    async def get(self, quote_id: str) -> Optional[Quote]:
        return self._table.get(quote_id)

    async def list_all(self, status: Optional[str] = None) -> list[Quote]:
        if status is None:
            return self._table.rows()
        return self._table.rows(lambda q: q.status == status)

    async def list_by_customer(self, customer_id: uuid.UUID) -> list[Quote]:
        return self._table.rows(lambda q: q.customer_id == customer_id)

    def add(self, quote: Quote) -> None:
        self._table.add(quote.id, quote)

    def update(self, quote: Quote) -> None:
        self._table.update(quote.id, quote)


class MemoryPaymentRepository(PaymentRepository):
    def __init__(self, table: _MemoryTable[Payment]) -> None:
        self._table = table

    async def get(self, payment_id: str) -> Optional[Payment]:
        return self._table.get(payment_id)

    async def list_all(self) -> list[Payment]:
        return self._table.rows()

    async def list_by_customer(self, customer_id: uuid.UUID) -> list[Payment]:
        return self._table.rows(lambda p: p.customer_id == customer_id)

    def add(self, payment: Payment) -> None:
        self._table.add(payment.id, payment)


class MemoryAuditLogRepository(AuditLogRepository):
    def __init__(self, table: _MemoryTable[AuditLog]) -> None:
        self._table = table

    async def list_by_customer(self, customer_id: uuid.UUID) -> list[AuditLog]:
        return self._table.rows(lambda e: e.customer_id == customer_id)

    def add(self, entry: AuditLog) -> None:
        self._table.add(entry.id, entry)


class MemoryInventoryRepository(InventoryRepository):
    def __init__(self, table: _MemoryTable[InventoryItem]) -> None:
        self._table = table

    async def list_all(self) -> list[InventoryItem]:
        return self._table.rows()

    def add(self, item: InventoryItem) -> None:
        self._table.add(item.id, item)


# ------------------------------------------------------------
# Unit of Work
# ------------------------------------------------------------

class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of work over a MemoryStore.

    Usage:
        uow = InMemoryUnitOfWork(get_memory_store())
        async with uow:
            customer = await uow.lock_customer(customer_id)
            ...
            await uow.commit()
    """

    def __init__(self, store: MemoryStore) -> None:
        self.store = store
        self._tables = {
            "customers": _MemoryTable(store.customers),
            "quotes": _MemoryTable(store.quotes),
            "payments": _MemoryTable(store.payments),
            "audit_logs": _MemoryTable(store.audit_logs),
            "inventory": _MemoryTable(store.inventory),
        }
        self.customers = MemoryCustomerRepository(self._tables["customers"])
        self.quotes = MemoryQuoteRepository(self._tables["quotes"])
        self.payments = MemoryPaymentRepository(self._tables["payments"])
        self.audit_logs = MemoryAuditLogRepository(self._tables["audit_logs"])
        self.inventory = MemoryInventoryRepository(self._tables["inventory"])
        self._held_locks: dict[uuid.UUID, asyncio.Lock] = {}

    async def lock_customer(self, customer_id: uuid.UUID) -> Customer:
        customers = self._tables["customers"]

        # Created in this unit of work: nobody else can see it yet
        if customer_id in customers.added:
            return customers.added[customer_id]
        if customer_id in self._held_locks:
            return customers.updated[customer_id]
        if customer_id not in self.store.customers:
            raise NotFoundError(f"Customer {customer_id} not found")

        lock = self.store.customer_lock(customer_id)
        await lock.acquire()
        self._held_locks[customer_id] = lock

        # Copy taken after the lock: includes every earlier committed write
        customer = clone_entity(self.store.customers[customer_id])
        customers.update(customer_id, customer)
        return customer

    async def commit(self) -> None:
        try:
            conflicts = {
                name: table.conflicts()
                for name, table in self._tables.items()
                if table.conflicts()
            }
            if conflicts:
                logger.error("Duplicate identifiers on commit: %s", conflicts)
                self._discard()
                raise ConflictError("A record with the same identifier already exists")
            for table in self._tables.values():
                table.apply()
        finally:
            self._release_locks()

    async def rollback(self) -> None:
        self._discard()
        self._release_locks()

    def _discard(self) -> None:
        for table in self._tables.values():
            table.clear()

    def _release_locks(self) -> None:
        for lock in self._held_locks.values():
            lock.release()
        self._held_locks.clear()
