"""
SQLAlchemy model for quotes (invoices)
Project: Iron Hub (customer ledger backend)

A quote is billed to its customer once accepted. The total is never stored:
it is computed from the line items by ironhub.core.money.compute_quote_total.
"""

from __future__ import annotations

import datetime
import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, JSON, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ironhub.models import Base
from ironhub.models.mixins import TimestampMixin


class Quote(Base, TimestampMixin):
    """
    Model for quotes.

    Attributes:
        id: Human-legible identifier (QT-<year><suffix>)
        customer_id: Customer the quote is addressed to
        client_name: Name printed on the quote
        client_email: Email the quote is sent to
        items: Line items [{description, quantity, price}], amounts as strings
        status: draft | sent | accepted | rejected
        sent_at: When the quote moved to sent
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    __tablename__ = "quotes"

    id: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        doc="Human-legible quote identifier",
    )

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        doc="Customer reference",
    )

    client_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Name printed on the quote",
    )

    client_email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Recipient email",
    )

    items: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Line items",
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="draft",
        doc="draft | sent | accepted | rejected",
    )

    sent_at: Mapped[Optional[datetime.datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="When the quote was sent",
    )

    __table_args__ = (
        Index("ix_quotes_customer_id", "customer_id"),
        Index("ix_quotes_status", "status"),
        CheckConstraint(
            "status IN ('draft', 'sent', 'accepted', 'rejected')",
            name="ck_quotes_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<Quote(id={self.id}, customer_id={self.customer_id}, status={self.status})>"
