"""
SQLAlchemy model for the Customer entity
Project: Iron Hub (customer ledger backend)

A customer account and its derived monetary totals. The Customer row is the
consistency boundary of the ledger: every payment and every billed quote
updates it inside the same unit of work.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Index, JSON, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ironhub.models import Base
from ironhub.models.mixins import TimestampMixin, UUIDMixin


def empty_address() -> dict:
    """Blank address document used when a row carries no address."""
    return {"street": "", "city": "", "state": "", "zip": "", "country": ""}


class Customer(Base, UUIDMixin, TimestampMixin):
    """
    Model for customer accounts.

    Attributes:
        id: UUID primary key
        name: Company or person name (required)
        email: Contact email (not unique)
        phone: Contact phone
        billing_address: {street, city, state, zip, country}
        shipping_address: {street, city, state, zip, country}
        internal_notes: Staff-only notes
        total_billed: Sum of accepted quote totals
        total_paid: Sum of recorded payments
        created_at: Creation timestamp
        updated_at: Last update timestamp

    Properties:
        balance: total_billed - total_paid (negative means overpayment)
    """

    __tablename__ = "customers"

    # ------------------------------------------------------------
    # Contact columns
    # ------------------------------------------------------------
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Company or person name",
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Contact email",
    )

    phone: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        doc="Contact phone",
    )

    # ------------------------------------------------------------
    # Address columns
    # ------------------------------------------------------------
    billing_address: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=empty_address,
        doc="Billing address document",
    )

    shipping_address: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=empty_address,
        doc="Shipping address document",
    )

    internal_notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="Staff-only notes on the account",
    )

    # ------------------------------------------------------------
    # Ledger totals
    # ------------------------------------------------------------
    total_billed: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Sum of accepted quote totals",
    )

    total_paid: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        nullable=False,
        default=Decimal("0.00"),
        doc="Sum of recorded payments",
    )

    @property
    def balance(self) -> Decimal:
        """Amount still owed; recomputed on every access."""
        return (self.total_billed or Decimal("0")) - (self.total_paid or Decimal("0"))

    __table_args__ = (
        Index("ix_customers_email", "email"),
        CheckConstraint("total_billed >= 0", name="ck_customers_total_billed_positive"),
        CheckConstraint("total_paid >= 0", name="ck_customers_total_paid_positive"),
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name={self.name!r}, balance={self.balance})>"
