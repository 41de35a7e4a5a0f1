"""
SQLAlchemy model for the audit trail
Project: Iron Hub (customer ledger backend)

Append-only: entries are never updated or deleted.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ironhub.models import Base
from ironhub.models.mixins import CreatedAtMixin, UUIDMixin


class AuditLog(Base, UUIDMixin, CreatedAtMixin):
    """
    Model for audit entries.

    Attributes:
        id: UUID primary key
        customer_id: Account the action affected (None for system-wide actions)
        user_email: Actor
        action: Category label ("Payment Recorded", "Bulk Ingest", ...)
        details: Free-text description
        created_at: Timestamp
    """

    __tablename__ = "audit_logs"

    # No foreign key: system entries carry no customer and the trail
    # must survive any future account archival.
    customer_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True,
        doc="Affected customer",
    )

    user_email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Actor email",
    )

    action: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Action category",
    )

    details: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Action details",
    )

    __table_args__ = (
        Index("ix_audit_logs_customer_id", "customer_id"),
    )

    def __repr__(self) -> str:
        return f"<AuditLog(id={self.id}, action={self.action!r}, customer_id={self.customer_id})>"
