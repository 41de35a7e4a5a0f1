"""
Pydantic schemas for the ledger views
Project: Iron Hub (customer ledger backend)

Contains:
- Account view (customer detail page)
- Balance, reconciliation and revenue reports
- Per-row results for bulk operations
"""

import datetime
import uuid
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field

from ironhub.core.exceptions import AppException

from ironhub.schemas.audit_log import AuditLogRead
from ironhub.schemas.customer import CustomerRead
from ironhub.schemas.payment import PaymentRead
from ironhub.schemas.quote import QuoteRead


# -------------------------------------------------------------------
# Account view
# -------------------------------------------------------------------

class QuoteLedgerEntry(QuoteRead):
    """A quote as it appears on the ledger, with its allocations."""

    allocated_amount: Decimal = Field(
        Decimal("0.00"),
        description="Sum of payments allocated to this quote",
    )

    @computed_field
    @property
    def remaining_amount(self) -> Decimal:
        """Quote total not yet covered by allocated payments."""
        return self.total - self.allocated_amount


class AccountView(BaseModel):
    """Everything the customer detail page shows."""

    customer: CustomerRead
    quotes: list[QuoteLedgerEntry] = Field(default_factory=list)
    payments: list[PaymentRead] = Field(
        default_factory=list,
        description="Payments, newest first",
    )
    logs: list[AuditLogRead] = Field(
        default_factory=list,
        description="Audit entries, newest first",
    )
    balance: Decimal = Field(..., description="total_billed - total_paid")
    unallocated_total: Decimal = Field(
        ...,
        description="Sum of payments not allocated to any quote",
    )


class BalanceRead(BaseModel):
    """Balance of an account."""

    customer_id: uuid.UUID
    total_billed: Decimal
    total_paid: Decimal
    balance: Decimal


# -------------------------------------------------------------------
# Reconciliation
# -------------------------------------------------------------------

class ReconciliationReport(BaseModel):
    """Stored totals compared with the totals recomputed from the records."""

    customer_id: uuid.UUID
    stored_total_paid: Decimal
    computed_total_paid: Decimal
    stored_total_billed: Decimal
    computed_total_billed: Decimal
    payments_count: int
    dry_run: bool = True
    repaired: bool = False

    @computed_field
    @property
    def is_consistent(self) -> bool:
        """True when the stored totals match the records."""
        return (
            self.stored_total_paid == self.computed_total_paid
            and self.stored_total_billed == self.computed_total_billed
        )


# -------------------------------------------------------------------
# Reports
# -------------------------------------------------------------------

class RevenueSummary(BaseModel):
    """Dashboard revenue aggregation."""

    total_quoted: Decimal = Field(..., description="Sum of all quote totals")
    total_billed: Decimal = Field(..., description="Sum of accepted quote totals")
    total_received: Decimal = Field(..., description="Sum of all payments")
    outstanding: Decimal = Field(..., description="total_billed - total_received")
    quotes_count: int
    accepted_count: int
    payments_count: int
    customers_count: int
    generated_at: datetime.datetime


# -------------------------------------------------------------------
# Bulk results
# -------------------------------------------------------------------

class BulkItemResult(BaseModel):
    """Outcome of one row of a bulk operation."""

    index: int = Field(..., description="Zero-based row position in the request")
    success: bool
    id: Optional[str] = Field(None, description="Identifier of the created record")
    error: Optional[str] = Field(None, description="Reason the row was rejected")
    error_code: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def accepted(cls, index: int, record_id: object) -> "BulkItemResult":
        return cls(index=index, success=True, id=str(record_id))

    @classmethod
    def rejected(cls, index: int, exc: Exception) -> "BulkItemResult":
        """Row rejected by schema validation or by a business rule."""
        if isinstance(exc, ValidationError):
            message = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'row'}: {err['msg']}"
                for err in exc.errors()
            )
            return cls(index=index, success=False, error=message, error_code="VALIDATION_ERROR")
        if isinstance(exc, AppException):
            return cls(index=index, success=False, error=exc.detail, error_code=exc.error_code)
        return cls(index=index, success=False, error=str(exc))


class BulkResult(BaseModel):
    """Outcome of a bulk operation, row by row."""

    items: list[BulkItemResult] = Field(default_factory=list)

    @computed_field
    @property
    def created(self) -> int:
        return sum(1 for item in self.items if item.success)

    @computed_field
    @property
    def failed(self) -> int:
        return sum(1 for item in self.items if not item.success)
