"""
SQLAlchemy model for payments
Project: Iron Hub (customer ledger backend)

Payments are immutable once recorded. A payment may be allocated to one
quote of the same customer, or held unallocated.
"""

from __future__ import annotations

import datetime
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ironhub.models import Base
from ironhub.models.mixins import CreatedAtMixin


class Payment(Base, CreatedAtMixin):
    """
    Model for received payments.

    Attributes:
        id: PAY-<hex> (PAY-INGEST-<hex> for imported rows)
        customer_id: Paying customer
        date: Value date of the payment
        amount: Amount received (> 0)
        method: Bank Transfer | Credit Card | Check
        invoice_id: Quote the payment is allocated to (None = unallocated)
        reference: Wire reference, check number, etc.
        source: manual | import
        created_at: Recording timestamp
    """

    __tablename__ = "payments"

    id: Mapped[str] = mapped_column(
        String(50),
        primary_key=True,
        doc="Payment identifier",
    )

    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        doc="Paying customer",
    )

    date: Mapped[datetime.date] = mapped_column(
        Date,
        nullable=False,
        doc="Payment value date",
    )

    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        doc="Amount received",
    )

    method: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        doc="Payment method",
    )

    invoice_id: Mapped[Optional[str]] = mapped_column(
        String(50),
        ForeignKey("quotes.id", ondelete="RESTRICT"),
        nullable=True,
        doc="Allocated quote (None = unallocated funds)",
    )

    reference: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="External reference",
    )

    source: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default="manual",
        doc="manual | import",
    )

    __table_args__ = (
        Index("ix_payments_customer_id", "customer_id"),
        Index("ix_payments_invoice_id", "invoice_id"),
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
        CheckConstraint(
            "method IN ('Bank Transfer', 'Credit Card', 'Check')",
            name="ck_payments_method",
        ),
    )

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, customer_id={self.customer_id}, amount={self.amount})>"
