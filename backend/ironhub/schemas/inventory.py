"""
Pydantic schemas for the inventory registry
Project: Iron Hub (customer ledger backend)
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ironhub.core.money import MAX_AMOUNT


class InventoryType(str, Enum):
    """Inventory unit type."""
    EQUIPMENT = "equipment"
    PART = "part"


class InventoryItemBase(BaseModel):
    """Shared inventory fields."""

    name: str = Field(..., min_length=1, max_length=255, description="Item name")
    description: Optional[str] = Field(None, description="Item description")
    model_number: Optional[str] = Field(None, max_length=100)
    serial_number: Optional[str] = Field(None, max_length=100)
    part_number: Optional[str] = Field(None, max_length=100)
    price: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT, description="Sale price (equipment)")
    cost: Optional[Decimal] = Field(None, ge=0, le=MAX_AMOUNT, description="Unit cost (parts)")
    quantity: int = Field(0, ge=0, description="Units on hand")
    type: InventoryType = Field(InventoryType.EQUIPMENT, description="equipment | part")

    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)


class InventoryItemCreate(InventoryItemBase):
    """Schema for creating an inventory item."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class InventoryItemRead(InventoryItemBase):
    """Schema for reading an inventory item."""

    id: uuid.UUID
    created_at: datetime.datetime
    updated_at: datetime.datetime
