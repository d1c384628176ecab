"""Error taxonomy shared by every bounded context.

Every failure a caller can observe carries one ``ErrorKind``. Services raise
the named subclasses; only the HTTP boundary translates a kind into a status
code (see ``HTTP_STATUS_BY_KIND``).
"""

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    VALIDATION = "validation_error"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INSUFFICIENT_STOCK = "insufficient_stock"
    TIMEOUT = "timeout"
    EXTERNAL_SERVICE = "external_service_error"


HTTP_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INSUFFICIENT_STOCK: 409,
    ErrorKind.TIMEOUT: 503,
    ErrorKind.EXTERNAL_SERVICE: 502,
}


class DomainError(Exception):
    """Base class for every error with a stable, caller-visible kind."""

    kind: ErrorKind = ErrorKind.VALIDATION
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message, "details": self.details}


class ValidationError(DomainError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid input"


class EmptyOrder(ValidationError):
    default_message = "An order needs at least one line item"


class InvalidSignature(ValidationError):
    default_message = "Invalid webhook signature"


class Unauthenticated(DomainError):
    kind = ErrorKind.UNAUTHENTICATED
    default_message = "Authentication required"


class Forbidden(DomainError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Forbidden"


class NotFound(DomainError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class ProductNotFound(NotFound):
    default_message = "Product not found"


class OrderNotFound(NotFound):
    default_message = "Order not found"


class PaymentNotFound(NotFound):
    default_message = "Payment not found"


class Conflict(DomainError):
    kind = ErrorKind.CONFLICT
    default_message = "Conflict"


class InsufficientStock(DomainError):
    kind = ErrorKind.INSUFFICIENT_STOCK
    default_message = "Insufficient stock"


class LockTimeout(DomainError):
    kind = ErrorKind.TIMEOUT
    default_message = "Timed out waiting for a locked resource"


class ExternalServiceError(DomainError):
    kind = ErrorKind.EXTERNAL_SERVICE
    default_message = "External service unavailable"


class TransientStorageError(Exception):
    """Deadlock or serialization failure; the whole unit of work may be retried."""
