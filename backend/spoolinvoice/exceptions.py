"""
SpoolInvoice Backend - Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the invoice workflow.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) catch these
       and return JSON error responses with the matching HTTP status code.
Who:   Raised by the invoice service; caught by global handlers.

Exception Hierarchy:
    SpoolInvoiceError (base)
    ├── ValidationError        → 400 Bad Request (client can fix)
    ├── NotFoundError          → 404 Not Found
    └── InvoiceStorageError    → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class SpoolInvoiceError(Exception):
    """
    Base exception for all SpoolInvoice application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for client errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SpoolInvoiceError):
    """
    Raised when invoice input fails validation.

    When:    Missing required field, unknown spool type, non-numeric price or
             quantity, request body that is not a JSON object.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "Invalid spool type: 99lb",
            "code": "validation_error",
            "details": {"field": "spoolType", "allowed": ["33lb", "44lb", "550lb"]},
            "request_id": "a1b2c3d4"
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(SpoolInvoiceError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/invoices/{id} with an identifier no invoice carries.
    HTTP:    404 Not Found

    The store returns None for a missing invoice; the service converts that
    into this exception so routes stay free of status-code logic.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class InvoiceStorageError(SpoolInvoiceError):
    """
    Raised when the invoice store fails unexpectedly.

    When:    Any non-application exception while building or storing an invoice.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The original
    exception type is kept in `context` and logged server-side only.
    """

    def __init__(
        self,
        message: str = "An internal error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
