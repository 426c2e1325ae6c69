"""
SpoolInvoice Backend - Pydantic Response Schemas
=================================================

What:  Pydantic models defining the JSON contract of the invoice API.
How:   FastAPI serializes responses through these models and generates the
       OpenAPI documentation from them. Field names are snake_case in Python
       and camelCase on the wire (clientName, pricePerPound, totalPrice, ...).

The create endpoint does not bind its body to a Pydantic model: required
field checks follow the service's presence rules and must answer 400 with
the service's own messages, so the body is read as a raw JSON object and
validated in InvoiceService.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from spoolinvoice.models.invoice import SpoolType


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class InvoiceResponse(BaseModel):
    """
    What:  Full representation of a stored invoice.
    Who:   Returned by GET /api/invoices (as list items), GET /api/invoices/{id},
           and embedded in the POST /api/invoices response.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str = Field(description="Invoice identifier (creation time in epoch milliseconds)")
    created_at: datetime = Field(description="When the invoice was created (UTC ISO 8601)")
    client_name: str = Field(description="Billed client's name")
    client_email: str = Field(description="Billed client's email address")
    spool_type: SpoolType = Field(description="Spool size: 33lb, 44lb or 550lb")
    price_per_pound: float = Field(description="Price per pound of material")
    spool_weight: float = Field(description="Weight in pounds of one spool of this type")
    quantity: int = Field(description="Number of spools billed")
    total_price: float = Field(description="price_per_pound × spool_weight × quantity, 2 decimals")


class InvoiceCreateResponse(BaseModel):
    """
    What:  Response after successfully creating an invoice.
    Who:   Returned by POST /api/invoices with HTTP 201 Created.
    """

    message: str = Field(
        default="Invoice created successfully",
        description="Human-readable success message",
    )
    invoice: InvoiceResponse = Field(description="The created invoice")


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Error body shared by every non-2xx response.

    Fields:
        error: Human-readable description for display to users
        code: Machine-readable error code (e.g. "validation_error", "not_found")
        details: Optional extra context (e.g. which fields were missing)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "Missing required fields",
            "code": "validation_error",
            "details": {"missing": ["quantity"]},
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error code")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response.
    Who:   Returned by GET /health for monitoring and container probes.
    """

    status: str = Field(description="Overall service status")
    version: str = Field(description="Application version")
    invoice_count: int = Field(description="Invoices held by the in-memory store")
    uptime_seconds: float = Field(description="Seconds since service started")
