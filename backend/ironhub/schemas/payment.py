"""
Pydantic schemas for payments
Project: Iron Hub (customer ledger backend)

Contains:
- Enum: PaymentMethod, PaymentSource
- Schemas for Payment create / read

The amount is deliberately not constrained here: PaymentService rejects
non-positive amounts with InvalidAmountError so the same rule applies to
API requests, bulk rows and imported rows.
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# -------------------------------------------------------------------
# Enum
# -------------------------------------------------------------------

class PaymentMethod(str, Enum):
    """Supported payment methods."""
    BANK_TRANSFER = "Bank Transfer"
    CREDIT_CARD = "Credit Card"
    CHECK = "Check"


class PaymentSource(str, Enum):
    """Where a payment record came from."""
    MANUAL = "manual"
    IMPORT = "import"


# -------------------------------------------------------------------
# Schemas
# -------------------------------------------------------------------

class PaymentBase(BaseModel):
    """Shared payment fields."""

    date: datetime.date = Field(..., description="Payment value date")
    amount: Decimal = Field(..., description="Amount received")
    method: PaymentMethod = Field(
        PaymentMethod.BANK_TRANSFER,
        description="Payment method",
    )
    invoice_id: Optional[str] = Field(
        None,
        max_length=50,
        description="Quote to allocate the payment to (empty = unallocated)",
    )
    reference: Optional[str] = Field(
        None,
        max_length=255,
        description="Wire reference, check number, etc.",
    )

    model_config = ConfigDict(from_attributes=True)

    @field_validator("invoice_id", mode="before")
    @classmethod
    def blank_invoice_is_unallocated(cls, v: Optional[str]) -> Optional[str]:
        """The portal form sends an empty string for 'no invoice'."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class PaymentRequest(PaymentBase):
    """Request body for a payment on a known customer (customer id in the path)."""
    pass


class PaymentCreate(PaymentBase):
    """Schema for creating a payment."""

    customer_id: uuid.UUID = Field(..., description="Paying customer")


class PaymentRead(PaymentBase):
    """Schema for reading a payment."""

    id: str = Field(..., description="Payment identifier")
    customer_id: uuid.UUID = Field(..., description="Paying customer")
    source: PaymentSource = Field(..., description="manual | import")
    created_at: datetime.datetime = Field(..., description="Recording timestamp")

    model_config = ConfigDict(from_attributes=True)
