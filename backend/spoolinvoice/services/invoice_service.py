"""
SpoolInvoice Backend - Invoice Service (Business Logic)
========================================================

What:  Validates invoice input, prices it, assigns id/timestamp and stores it;
       lists and looks up stored invoices.
How:   Stateless service; the InvoiceStore is passed into every call.
Who:   Called by the invoice route handlers.

Create Flow (POST /api/invoices):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────┐
    │  Body    │───▶│  Presence & │───▶│  Weight +    │───▶│  Append  │
    │  (Route) │    │  Type Check │    │  Total Price │    │  (Store) │
    └──────────┘    └─────────────┘    └──────────────┘    └──────────┘

Validation Rules (in order):
    1. Body must be a JSON object
    2. Presence: a field counts as missing when absent or falsy
       (None, "", 0, 0.0, NaN, False). A zero price or quantity is therefore
       reported as missing, not as out of range.
    3. spoolType must be one of 33lb, 44lb, 550lb
    4. clientName / clientEmail must be strings
    5. pricePerPound must be a finite number > 0 (numeric strings accepted)
    6. quantity must be an integer >= 1 (integral strings/floats accepted)
    7. pricePerPound × spoolWeight × quantity must be a finite float

Error Handling:
    Rule violations raise ValidationError (400). Any other exception raised
    while building or storing the record is logged and re-raised as
    InvoiceStorageError (500) with a generic message.
"""

import logging
import math
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from spoolinvoice.exceptions import (
    InvoiceStorageError,
    NotFoundError,
    SpoolInvoiceError,
    ValidationError,
)
from spoolinvoice.models.invoice import (
    SPOOL_WEIGHTS,
    Invoice,
    SpoolType,
    compute_total_price,
)
from spoolinvoice.schemas.invoice import InvoiceCreateResponse, InvoiceResponse
from spoolinvoice.storage import InvoiceStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("clientName", "clientEmail", "spoolType", "pricePerPound", "quantity")


def _current_millis() -> int:
    """Wall-clock time in epoch milliseconds; the source of invoice ids."""
    return time.time_ns() // 1_000_000


def _is_missing(value: Any) -> bool:
    """
    Presence check used for every required field.

    Absent, None, False, empty string, zero and NaN all count as missing.
    Non-empty strings (including "0") and any other value count as present.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, float):
        return value == 0 or math.isnan(value)
    if isinstance(value, int):
        return value == 0
    return False


def _require_text(payload: Dict[str, Any], field: str) -> str:
    value = payload[field]
    if not isinstance(value, str):
        raise ValidationError(message=f"{field} must be a string", field=field)
    return value


def _parse_price(value: Any) -> float:
    error = ValidationError(
        message="pricePerPound must be a positive number",
        field="pricePerPound",
    )
    if isinstance(value, bool):
        raise error
    if isinstance(value, (int, float)):
        price = float(value)
    elif isinstance(value, str):
        try:
            price = float(value.strip())
        except ValueError:
            raise error from None
    else:
        raise error

    if not math.isfinite(price) or price <= 0:
        raise error
    return price


def _parse_quantity(value: Any) -> int:
    error = ValidationError(
        message="quantity must be a whole number of at least 1",
        field="quantity",
    )
    if isinstance(value, bool):
        raise error
    if isinstance(value, int):
        quantity = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise error
        quantity = int(value)
    elif isinstance(value, str):
        try:
            quantity = int(value.strip())
        except ValueError:
            raise error from None
    else:
        raise error

    if quantity < 1:
        raise error
    return quantity


def _price_total(price_per_pound: float, spool_weight: float, quantity: int) -> float:
    """Compute the total, rejecting inputs whose product leaves the float range."""
    try:
        total = compute_total_price(price_per_pound, spool_weight, quantity)
    except OverflowError:
        # quantity too large to convert to float
        raise ValidationError(
            message="quantity is too large to price",
            field="quantity",
        ) from None
    if not math.isfinite(total):
        raise ValidationError(
            message="pricePerPound × quantity is too large to price",
            field="pricePerPound",
            context={"quantity": quantity},
        )
    return total


class InvoiceService:
    """
    Business logic layer for invoice operations.

    Responsibilities:
        - create_invoice(): validate → price → assign id → store
        - list_invoices(): every stored invoice, insertion order
        - get_invoice(): single invoice by id with not-found handling
    """

    async def create_invoice(self, store: InvoiceStore, payload: Any) -> InvoiceCreateResponse:
        """
        Validate a create request and store the resulting invoice.

        Args:
            store: Invoice store (injected by FastAPI)
            payload: Decoded JSON request body

        Returns:
            InvoiceCreateResponse with the stored invoice

        Raises:
            ValidationError: Missing field, unknown spool type, bad number (→ 400)
            InvoiceStorageError: Unexpected failure while storing (→ 500)
        """
        if not isinstance(payload, dict):
            raise ValidationError(message="Request body must be a JSON object")

        missing = [field for field in REQUIRED_FIELDS if _is_missing(payload.get(field))]
        if missing:
            raise ValidationError(
                message="Missing required fields",
                context={"missing": missing},
            )

        spool_type = SpoolType.parse(payload["spoolType"])
        if spool_type is None:
            raise ValidationError(
                message=f"Invalid spool type: {payload['spoolType']}",
                field="spoolType",
                context={"allowed": [member.value for member in SpoolType]},
            )

        client_name = _require_text(payload, "clientName")
        client_email = _require_text(payload, "clientEmail")
        price_per_pound = _parse_price(payload["pricePerPound"])
        quantity = _parse_quantity(payload["quantity"])
        spool_weight = SPOOL_WEIGHTS[spool_type]
        total_price = _price_total(price_per_pound, spool_weight, quantity)

        try:
            millis = _current_millis()
            invoice = Invoice(
                id=str(millis),
                created_at=datetime.fromtimestamp(millis // 1000, tz=timezone.utc)
                + timedelta(milliseconds=millis % 1000),
                client_name=client_name,
                client_email=client_email,
                spool_type=spool_type,
                price_per_pound=price_per_pound,
                spool_weight=spool_weight,
                quantity=quantity,
                total_price=total_price,
            )
            store.append(invoice)
        except SpoolInvoiceError:
            raise
        except Exception as e:
            logger.error("Unexpected error creating invoice: %s", str(e), exc_info=True)
            raise InvoiceStorageError(
                context={"original_error": type(e).__name__},
            ) from e

        logger.info(
            "Invoice %s created: %d x %s at %.2f/lb = %.2f",
            invoice.id,
            invoice.quantity,
            invoice.spool_type.value,
            invoice.price_per_pound,
            invoice.total_price,
        )

        return InvoiceCreateResponse(invoice=InvoiceResponse.model_validate(invoice))

    async def list_invoices(self, store: InvoiceStore) -> List[InvoiceResponse]:
        """Return every stored invoice in insertion order."""
        try:
            invoices = store.list_all()
        except Exception as e:
            logger.error("Store error listing invoices: %s", str(e), exc_info=True)
            raise InvoiceStorageError(
                message="Could not retrieve invoices. Please try again.",
                context={"original_error": type(e).__name__},
            ) from e

        return [InvoiceResponse.model_validate(invoice) for invoice in invoices]

    async def get_invoice(self, store: InvoiceStore, invoice_id: str) -> InvoiceResponse:
        """
        Retrieve a single invoice by id.

        Raises:
            NotFoundError: No invoice carries this id (→ 404)
        """
        invoice = store.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError(resource="invoice", resource_id=invoice_id)
        return InvoiceResponse.model_validate(invoice)


# Stateless, shared by all requests
invoice_service = InvoiceService()
