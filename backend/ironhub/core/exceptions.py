"""
Custom exceptions for the application.
Project: Iron Hub (customer ledger backend)

Domain-specific exceptions for centralized error handling. Every exception
carries the HTTP status code and error code that the API handlers return.

NOTE: BusinessValidationError is distinct from pydantic.ValidationError.
- pydantic.ValidationError: wrong format/type in input data (FastAPI -> 422)
- BusinessValidationError: business rule violations (our handler -> 422)
"""

from typing import Any, Dict, Optional

__all__ = [
    "AppException",
    "NotFoundError",
    "BusinessValidationError",
    "InvalidAmountError",
    "InvalidAllocationError",
    "InvalidTransitionError",
    "ConflictError",
    "InconsistentStateError",
]


class AppException(Exception):
    """
    Base exception for the application.

    Attributes:
        status_code: HTTP status code returned to the client
        error_code: Stable identifier the frontend can switch on
        detail: Human readable message, safe to display
        extra: Optional additional data for the frontend
    """

    # Default values - overridden in subclasses
    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        detail: str,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.detail = detail
        # Use provided error_code or fall back to class-level default
        self.error_code = error_code if error_code is not None else self.error_code
        self.extra = extra
        self.status_code = self.__class__.status_code
        super().__init__(detail)


class NotFoundError(AppException):
    """
    Raised when a referenced customer, quote or item does not exist.
    """

    status_code: int = 404
    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        detail: str = "Resource not found",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class BusinessValidationError(ValueError, AppException):
    """
    Raised for business rule violations.

    Inherits from ValueError so it can also be raised from Pydantic validators.

    Examples:
        - "Payment amount must be greater than zero"
        - "Quote QT-2025ABCD belongs to a different customer"
        - "Quote status cannot change from accepted to draft"
    """

    status_code: int = 422
    error_code: str = "BUSINESS_VALIDATION_ERROR"

    def __init__(
        self,
        detail: str = "Validation failed",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        # Call AppException.__init__ directly to skip ValueError's signature
        AppException.__init__(self, detail, error_code, extra)


class InvalidAmountError(BusinessValidationError):
    """Raised when a payment amount is zero or negative."""

    error_code: str = "INVALID_AMOUNT"

    def __init__(
        self,
        detail: str = "Payment amount must be greater than zero",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class InvalidAllocationError(BusinessValidationError):
    """Raised when a payment cannot be allocated to the requested quote."""

    error_code: str = "INVALID_ALLOCATION"

    def __init__(
        self,
        detail: str = "Payment cannot be allocated to this quote",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class InvalidTransitionError(BusinessValidationError):
    """Raised for a quote status change outside draft -> sent -> accepted/rejected."""

    error_code: str = "INVALID_TRANSITION"

    def __init__(
        self,
        detail: str = "Status transition not allowed",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class ConflictError(AppException):
    """
    Raised when the storage layer rejects a write (integrity violations,
    duplicate identifiers, lost connections during commit).
    """

    status_code: int = 409
    error_code: str = "CONFLICT_STATE"

    def __init__(
        self,
        detail: str = "State conflict",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)


class InconsistentStateError(AppException):
    """
    Raised when an internal ledger invariant is violated.

    Should never reach a client in normal operation: seeing it means a bug.
    The API returns a generic message for it.
    """

    status_code: int = 500
    error_code: str = "INCONSISTENT_STATE"

    def __init__(
        self,
        detail: str = "Ledger state is inconsistent",
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(detail, error_code, extra)
