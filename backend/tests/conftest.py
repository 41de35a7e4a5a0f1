"""
Pytest configuration and fixtures for the ledger services.

The in-memory unit of work is the test double: every test gets an empty
MemoryStore, a clock that ticks one second per reading and services wired
to both.
"""

import datetime
import uuid
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from ironhub.core.providers import Clock, IdGenerator
from ironhub.repositories.memory import InMemoryUnitOfWork, MemoryStore
from ironhub.schemas.customer import CustomerCreate
from ironhub.schemas.quote import QuoteCreate, QuoteItem, QuoteStatus
from ironhub.services.audit_service import AuditService
from ironhub.services.customer_service import CustomerService
from ironhub.services.intake_service import IntakeService
from ironhub.services.inventory_service import InventoryService
from ironhub.services.ledger_service import LedgerService
from ironhub.services.payment_service import PaymentService
from ironhub.services.quote_service import QuoteService

ACTOR = "ops@americaniron.com"


# ============================================================
# Providers
# ============================================================


class TickingClock(Clock):
    """Deterministic clock: starts at a fixed instant, +1s per reading."""

    def __init__(self, start: datetime.datetime = datetime.datetime(2025, 3, 1, 9, 0, tzinfo=datetime.timezone.utc)):
        self.current = start

    def now(self) -> datetime.datetime:
        value = self.current
        self.current += datetime.timedelta(seconds=1)
        return value


class ScriptedIdGenerator(IdGenerator):
    """IdGenerator whose quote ids come from a list, then fall back to random ones."""

    def __init__(self, quote_ids: list[str]):
        super().__init__(quote_prefix="QT", payment_prefix="PAY")
        self.scripted = list(quote_ids)

    def quote_id(self, year: int) -> str:
        if self.scripted:
            return self.scripted.pop(0)
        return super().quote_id(year)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def id_generator():
    return IdGenerator(quote_prefix="QT", payment_prefix="PAY")


# ============================================================
# Storage
# ============================================================


@pytest.fixture
def store():
    """Empty committed state."""
    return MemoryStore()


@pytest.fixture
def uow(store):
    return InMemoryUnitOfWork(store)


@pytest.fixture
def make_uow(store):
    """Factory for independent units of work on the same store (concurrent callers)."""
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def mock_db():
    """Mock of AsyncSession."""
    db = AsyncMock(spec=AsyncSession)
    db.execute = AsyncMock()
    db.get = AsyncMock()
    db.add = MagicMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.flush = AsyncMock()
    db.new = set()
    return db


# ============================================================
# Services
# ============================================================


@pytest.fixture
def audit_service(id_generator, clock):
    return AuditService(id_generator, clock)


@pytest.fixture
def customer_service(id_generator, clock, audit_service):
    return CustomerService(id_generator, clock, audit_service)


@pytest.fixture
def quote_service(id_generator, clock, audit_service, customer_service):
    return QuoteService(id_generator, clock, audit_service, customer_service)


@pytest.fixture
def payment_service(id_generator, clock, audit_service, customer_service):
    return PaymentService(id_generator, clock, audit_service, customer_service)


@pytest.fixture
def ledger_service(id_generator, clock):
    return LedgerService(id_generator, clock)


@pytest.fixture
def inventory_service(id_generator, clock, audit_service):
    return InventoryService(id_generator, clock, audit_service)


@pytest.fixture
def intake_service(id_generator, clock):
    return IntakeService(id_generator, clock)


# ============================================================
# Data builders
# ============================================================


def customer_data(name: str = "Gulf Coast Hauling", **kwargs) -> CustomerCreate:
    """Valid customer payload."""
    values = {
        "name": name,
        "email": "billing@gulfcoasthauling.com",
        "phone": "(713) 555-0142",
        "billing_address": {
            "street": "4100 Navigation Blvd",
            "city": "Houston",
            "state": "TX",
            "zip": "77011",
            "country": "USA",
        },
    }
    values.update(kwargs)
    return CustomerCreate(**values)


def quote_data(
    customer_id: uuid.UUID,
    items: list[tuple[str, str, str]] = (("CAT 320 excavator rental", "1", "3000"),),
    status: QuoteStatus = QuoteStatus.DRAFT,
) -> QuoteCreate:
    """Quote payload from (description, quantity, price) tuples."""
    return QuoteCreate(
        customer_id=customer_id,
        items=[
            QuoteItem(description=d, quantity=Decimal(q), price=Decimal(p))
            for d, q, p in items
        ],
        status=status,
    )
