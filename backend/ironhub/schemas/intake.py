"""
Pydantic schemas for the data intake tool
Project: Iron Hub (customer ledger backend)

Rows arrive from an external parser (legacy exports, PDF text, spreadsheets)
with a loose shape. Each entity type has its own import row model that
normalizes the usual spellings into the ledger fields; nothing is trusted
until it has gone through one of these models.
"""

import datetime
import uuid
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ironhub.core.money import to_money
from ironhub.schemas.customer import Address, CustomerCreate
from ironhub.schemas.inventory import InventoryItemCreate, InventoryType
from ironhub.schemas.payment import PaymentMethod


class IntakeEntity(str, Enum):
    """Entity types accepted by the intake tool."""
    CUSTOMERS = "customers"
    INVENTORY = "inventory"
    PAYMENTS = "payments"


class IntakeRequest(BaseModel):
    """Raw rows to ingest."""

    rows: list[dict[str, Any]] = Field(..., description="Parsed rows, one dict per record")


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


# -------------------------------------------------------------------
# Customer rows
# -------------------------------------------------------------------

class CustomerImportRow(BaseModel):
    """A customer row from a legacy export."""

    name: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("name", "customer_name", "company", "company_name"),
    )
    email: Optional[str] = Field(None, validation_alias=AliasChoices("email", "email_address", "e_mail"))
    phone: Optional[str] = Field(None, validation_alias=AliasChoices("phone", "phone_number", "telephone"))
    billing_address: Optional[Address] = None
    shipping_address: Optional[Address] = None
    internal_notes: Optional[str] = Field(None, validation_alias=AliasChoices("internal_notes", "notes"))

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @field_validator("email", "phone", "internal_notes", mode="before")
    @classmethod
    def blank_fields(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("billing_address", "shipping_address", mode="before")
    @classmethod
    def address_from_text(cls, v: Any) -> Any:
        # Flat exports carry the whole address as one line
        v = _blank_to_none(v)
        if isinstance(v, str):
            return {"street": v}
        return v

    def to_create(self) -> CustomerCreate:
        billing = self.billing_address or Address()
        return CustomerCreate(
            name=self.name,
            email=self.email,
            phone=self.phone,
            billing_address=billing,
            shipping_address=self.shipping_address or billing,
            internal_notes=self.internal_notes,
        )


# -------------------------------------------------------------------
# Inventory rows
# -------------------------------------------------------------------

class InventoryImportRow(BaseModel):
    """An equipment or part row from a stock sheet."""

    name: str = Field(..., min_length=1, validation_alias=AliasChoices("name", "item", "item_name"))
    description: Optional[str] = None
    model_number: Optional[str] = Field(None, validation_alias=AliasChoices("model_number", "model"))
    serial_number: Optional[str] = Field(None, validation_alias=AliasChoices("serial_number", "serial"))
    part_number: Optional[str] = Field(None, validation_alias=AliasChoices("part_number", "part_no"))
    price: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    quantity: int = Field(0, ge=0, validation_alias=AliasChoices("quantity", "qty"))
    type: InventoryType = InventoryType.EQUIPMENT

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @field_validator("price", "cost", mode="before")
    @classmethod
    def parse_money(cls, v: Any) -> Optional[Decimal]:
        v = _blank_to_none(v)
        if v is None:
            return None
        if isinstance(v, str):
            v = v.replace("$", "").replace(",", "")
        return to_money(v)

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    def to_create(self) -> InventoryItemCreate:
        return InventoryItemCreate(**self.model_dump())


# -------------------------------------------------------------------
# Payment rows
# -------------------------------------------------------------------

class PaymentImportRow(BaseModel):
    """
    A receipt row from a bank statement or a legacy ledger.

    customer_id may be missing: the payment is then attributed to the
    customer of the quote named by invoice_id.
    """

    customer_id: Optional[uuid.UUID] = None
    date: datetime.date = Field(..., validation_alias=AliasChoices("date", "payment_date", "paid_on"))
    amount: Decimal
    method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    invoice_id: Optional[str] = Field(None, validation_alias=AliasChoices("invoice_id", "invoice", "quote_id"))
    reference: Optional[str] = None

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    @field_validator("customer_id", "invoice_id", "reference", mode="before")
    @classmethod
    def blank_fields(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Decimal:
        if isinstance(v, str):
            v = v.replace("$", "").replace(",", "")
        return to_money(v)

    @field_validator("method", mode="before")
    @classmethod
    def parse_method(cls, v: Any) -> Any:
        if v is None:
            return PaymentMethod.BANK_TRANSFER
        if isinstance(v, str):
            key = v.strip().lower().replace("_", " ").replace("-", " ")
            aliases = {
                "bank transfer": PaymentMethod.BANK_TRANSFER,
                "wire": PaymentMethod.BANK_TRANSFER,
                "wire transfer": PaymentMethod.BANK_TRANSFER,
                "ach": PaymentMethod.BANK_TRANSFER,
                "credit card": PaymentMethod.CREDIT_CARD,
                "card": PaymentMethod.CREDIT_CARD,
                "check": PaymentMethod.CHECK,
                "cheque": PaymentMethod.CHECK,
            }
            return aliases.get(key, v)
        return v
