"""
SQLAlchemy model for the equipment and parts registry
Project: Iron Hub (customer ledger backend)
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ironhub.models import Base
from ironhub.models.mixins import TimestampMixin, UUIDMixin


class InventoryItem(Base, UUIDMixin, TimestampMixin):
    """
    Model for inventory units.

    Equipment is priced for sale (price), parts are tracked at cost (cost).

    Attributes:
        id: UUID primary key
        name: Item name
        description: Item description
        model_number: Manufacturer model number
        serial_number: Serial number (equipment)
        part_number: Part number (parts)
        price: Sale price
        cost: Unit cost
        quantity: Units on hand
        type: equipment | part
    """

    __tablename__ = "inventory"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    model_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    serial_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    part_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    price: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    cost: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    type: Mapped[str] = mapped_column(String(20), nullable=False)

    __table_args__ = (
        Index("ix_inventory_type", "type"),
        CheckConstraint("quantity >= 0", name="ck_inventory_quantity_positive"),
        CheckConstraint("type IN ('equipment', 'part')", name="ck_inventory_type"),
    )

    def __repr__(self) -> str:
        return f"<InventoryItem(id={self.id}, name={self.name!r}, quantity={self.quantity})>"
