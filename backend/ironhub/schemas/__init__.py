"""
Pydantic schemas for Iron Hub

Validation and serialization schemas for the API.
"""

# Re-exported for direct import
# e.g. from ironhub.schemas import CustomerRead, PaymentCreate

from ironhub.schemas.token import LoginRequest, TokenResponse, TokenPayload
from ironhub.schemas.customer import Address, CustomerCreate, CustomerList, CustomerRead
from ironhub.schemas.quote import (
    QuoteCreate,
    QuoteItem,
    QuoteList,
    QuoteRead,
    QuoteStatus,
    QuoteStatusUpdate,
)
from ironhub.schemas.payment import (
    PaymentCreate,
    PaymentMethod,
    PaymentRead,
    PaymentRequest,
    PaymentSource,
)
from ironhub.schemas.audit_log import AuditLogRead
from ironhub.schemas.inventory import InventoryItemCreate, InventoryItemRead, InventoryType
from ironhub.schemas.ledger import (
    AccountView,
    BalanceRead,
    BulkItemResult,
    BulkResult,
    QuoteLedgerEntry,
    ReconciliationReport,
    RevenueSummary,
)
from ironhub.schemas.intake import (
    CustomerImportRow,
    IntakeEntity,
    IntakeRequest,
    InventoryImportRow,
    PaymentImportRow,
)

__all__ = [
    "LoginRequest",
    "TokenResponse",
    "TokenPayload",
    "Address",
    "CustomerCreate",
    "CustomerList",
    "CustomerRead",
    "QuoteCreate",
    "QuoteItem",
    "QuoteList",
    "QuoteRead",
    "QuoteStatus",
    "QuoteStatusUpdate",
    "PaymentCreate",
    "PaymentMethod",
    "PaymentRead",
    "PaymentRequest",
    "PaymentSource",
    "AuditLogRead",
    "InventoryItemCreate",
    "InventoryItemRead",
    "InventoryType",
    "AccountView",
    "BalanceRead",
    "BulkItemResult",
    "BulkResult",
    "QuoteLedgerEntry",
    "ReconciliationReport",
    "RevenueSummary",
    "CustomerImportRow",
    "IntakeEntity",
    "IntakeRequest",
    "InventoryImportRow",
    "PaymentImportRow",
]
