"""
Pydantic schemas for the Customer entity
Project: Iron Hub (customer ledger backend)
"""
# Validation and serialization schemas for the API.

import datetime
import re
import uuid
from decimal import Decimal
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    computed_field,
    field_validator,
)


# -------------------------------------------------------------------
# Normalization helpers
# -------------------------------------------------------------------

def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a phone number.

    Strips spaces, dashes, dots and parentheses; accepts an optional
    leading + followed by digits.

    Args:
        phone: Phone number to normalize

    Returns:
        Normalized phone number or None

    Raises:
        ValueError: If the format is invalid
    """
    if phone is None:
        return None

    normalized = re.sub(r"[\s\-\.\(\)]", "", phone.strip())
    if not normalized:
        return None

    if not re.match(r"^\+?\d{5,20}$", normalized):
        raise ValueError("Invalid phone number")

    return normalized


# -------------------------------------------------------------------
# Address
# -------------------------------------------------------------------

class Address(BaseModel):
    """Postal address."""

    street: str = Field("", max_length=255)
    city: str = Field("", max_length=100)
    state: str = Field("", max_length=100)
    zip: str = Field("", max_length=20)
    country: str = Field("", max_length=100)

    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)


# -------------------------------------------------------------------
# Customer
# -------------------------------------------------------------------

class CustomerBase(BaseModel):
    """Shared customer fields."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Company or person name",
    )
    email: Optional[EmailStr] = Field(
        None,
        description="Contact email",
    )
    phone: Optional[str] = Field(
        None,
        max_length=50,
        description="Contact phone",
    )
    billing_address: Address = Field(
        default_factory=Address,
        description="Billing address",
    )
    shipping_address: Address = Field(
        default_factory=Address,
        description="Shipping address",
    )
    internal_notes: Optional[str] = Field(
        None,
        description="Staff-only notes",
    )

    model_config = ConfigDict(from_attributes=True, str_strip_whitespace=True)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return normalize_phone(v)


class CustomerCreate(CustomerBase):
    """
    Schema for creating a customer.

    Totals are not accepted: a new account always starts at zero.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class CustomerRead(CustomerBase):
    """Schema for reading a customer."""

    # Stored emails are shown as recorded, even if they would not validate today
    email: Optional[str] = None

    id: uuid.UUID = Field(..., description="Customer UUID")
    total_billed: Decimal = Field(..., description="Sum of accepted quote totals")
    total_paid: Decimal = Field(..., description="Sum of recorded payments")
    created_at: datetime.datetime = Field(..., description="Creation timestamp")
    updated_at: datetime.datetime = Field(..., description="Last update timestamp")

    @computed_field
    @property
    def balance(self) -> Decimal:
        """Amount still owed (negative = overpaid)."""
        return self.total_billed - self.total_paid

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return v

    model_config = ConfigDict(from_attributes=True)


class CustomerList(BaseModel):
    """Customer list."""

    items: list[CustomerRead] = Field(default_factory=list)
    total: int = Field(..., description="Number of customers")
