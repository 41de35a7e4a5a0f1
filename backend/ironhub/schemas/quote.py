"""
Pydantic schemas for quotes
Project: Iron Hub (customer ledger backend)

Contains:
- Enum: QuoteStatus
- Schemas for line items
- Schemas for Quote create / status update / read
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from ironhub.core.money import MAX_AMOUNT, compute_quote_total


# -------------------------------------------------------------------
# Enum
# -------------------------------------------------------------------

class QuoteStatus(str, Enum):
    """Quote lifecycle: draft -> sent -> accepted | rejected."""
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# -------------------------------------------------------------------
# Line items
# -------------------------------------------------------------------

class QuoteItem(BaseModel):
    """A quote line item."""

    description: str = Field(..., min_length=1, max_length=500, description="Line description")
    quantity: Decimal = Field(..., ge=0, le=MAX_AMOUNT, description="Quantity")
    price: Decimal = Field(..., ge=0, le=MAX_AMOUNT, description="Unit price")

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def line_total(self) -> Decimal:
        """quantity * price for this line."""
        return compute_quote_total([self])


# -------------------------------------------------------------------
# Quote
# -------------------------------------------------------------------

class QuoteCreate(BaseModel):
    """
    Schema for creating a quote.

    status defaults to draft; an explicit valid status is kept.
    """

    customer_id: uuid.UUID = Field(..., description="Customer the quote is addressed to")
    client_name: Optional[str] = Field(
        None,
        max_length=255,
        description="Name printed on the quote (defaults to the customer name)",
    )
    client_email: Optional[str] = Field(
        None,
        max_length=255,
        description="Recipient email (defaults to the customer email)",
    )
    items: list[QuoteItem] = Field(default_factory=list, description="Line items")
    status: QuoteStatus = Field(QuoteStatus.DRAFT, description="Initial status")


class QuoteStatusUpdate(BaseModel):
    """Schema for a status transition."""

    status: QuoteStatus = Field(..., description="Target status")


class QuoteRead(BaseModel):
    """Schema for reading a quote."""

    id: str = Field(..., description="Quote identifier")
    customer_id: uuid.UUID = Field(..., description="Customer UUID")
    client_name: str
    client_email: Optional[str] = None
    items: list[QuoteItem] = Field(default_factory=list)
    status: QuoteStatus
    sent_at: Optional[datetime.datetime] = None
    created_at: datetime.datetime
    updated_at: datetime.datetime

    @computed_field
    @property
    def total(self) -> Decimal:
        """Quote total, recomputed from the items."""
        return compute_quote_total(self.items)

    model_config = ConfigDict(from_attributes=True)


class QuoteList(BaseModel):
    """Quote list."""

    items: list[QuoteRead] = Field(default_factory=list)
    total: int = Field(..., description="Number of quotes")
