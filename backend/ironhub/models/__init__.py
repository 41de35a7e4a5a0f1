"""
SQLAlchemy database models
Project: Iron Hub (customer ledger backend)

Central import of every model, for metadata creation and general use.

The same classes serve both storage backends: the postgres backend persists
them through an AsyncSession, the in-memory backend keeps transient
instances.
"""

# SQLAlchemy 2.0 declarative base
# Defined here so every model module can import it
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


from ironhub.models.customer import Customer
from ironhub.models.quote import Quote
from ironhub.models.payment import Payment
from ironhub.models.audit_log import AuditLog
from ironhub.models.inventory import InventoryItem

__all__ = [
    "Base",
    "Customer",
    "Quote",
    "Payment",
    "AuditLog",
    "InventoryItem",
]
