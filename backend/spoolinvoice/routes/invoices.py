"""
SpoolInvoice Backend - Invoice Route Handlers
==============================================

What:  POST /api/invoices (create), GET /api/invoices (list),
       GET /api/invoices/{invoice_id} (detail).
How:   Extracts the request data, delegates to InvoiceService, returns JSON.
Who:   Called by the invoice form client and any API consumer.

Any other method on these paths is answered with 405 by the router and
formatted by the global HTTPException handler in main.py.
"""

import json
import logging
from typing import Any, List

from fastapi import APIRouter, Depends, Request, Response

from spoolinvoice.exceptions import ValidationError
from spoolinvoice.models.invoice import SpoolType
from spoolinvoice.schemas.invoice import (
    ErrorResponse,
    InvoiceCreateResponse,
    InvoiceResponse,
)
from spoolinvoice.services.invoice_service import REQUIRED_FIELDS, invoice_service
from spoolinvoice.storage import InvoiceStore, get_invoice_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Invoices"])

# Documents the create body in OpenAPI; the body itself is validated by the service
CREATE_REQUEST_SCHEMA = {
    "requestBody": {
        "required": True,
        "content": {
            "application/json": {
                "schema": {
                    "type": "object",
                    "required": list(REQUIRED_FIELDS),
                    "properties": {
                        "clientName": {"type": "string"},
                        "clientEmail": {"type": "string"},
                        "spoolType": {"type": "string", "enum": [member.value for member in SpoolType]},
                        "pricePerPound": {"type": "number", "exclusiveMinimum": 0},
                        "quantity": {"type": "integer", "minimum": 1},
                    },
                },
                "example": {
                    "clientName": "Acme",
                    "clientEmail": "a@b.com",
                    "spoolType": "44lb",
                    "pricePerPound": 10,
                    "quantity": 2,
                },
            }
        },
    }
}


async def _read_json_body(request: Request) -> Any:
    """Decode the request body as JSON, mapping malformed input to a 400."""
    body = await request.body()
    try:
        return json.loads(body.decode("utf-8"))
    except UnicodeDecodeError:
        raise ValidationError(message="Request body must be UTF-8 encoded JSON") from None
    except json.JSONDecodeError as exc:
        raise ValidationError(
            message="Request body must be valid JSON",
            context={"detail": f"{exc.msg} (line {exc.lineno}, column {exc.colno})"},
        ) from None
    except (ValueError, RecursionError) as exc:
        # Over-long integer literals and too deeply nested documents
        raise ValidationError(
            message="Request body must be valid JSON",
            context={"detail": str(exc)},
        ) from None


@router.post(
    "/invoices",
    status_code=201,
    response_model=InvoiceCreateResponse,
    responses={
        201: {"description": "Invoice created", "model": InvoiceCreateResponse},
        400: {"description": "Missing or invalid fields", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create an invoice",
    description=(
        "Validates the five required fields, looks up the spool weight, computes "
        "totalPrice = pricePerPound × spoolWeight × quantity (2 decimals) and stores "
        "the invoice in memory."
    ),
    openapi_extra=CREATE_REQUEST_SCHEMA,
)
async def create_invoice(
    request: Request,
    store: InvoiceStore = Depends(get_invoice_store),
) -> InvoiceCreateResponse:
    payload = await _read_json_body(request)
    return await invoice_service.create_invoice(store, payload)


@router.get(
    "/invoices",
    response_model=List[InvoiceResponse],
    responses={
        200: {"description": "Every invoice, oldest first"},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List invoices",
    description="Returns all stored invoices in creation order. No pagination or filtering.",
)
async def list_invoices(
    response: Response,
    store: InvoiceStore = Depends(get_invoice_store),
) -> List[InvoiceResponse]:
    invoices = await invoice_service.list_invoices(store)
    response.headers["X-Total-Count"] = str(len(invoices))
    return invoices


@router.get(
    "/invoices/{invoice_id}",
    response_model=InvoiceResponse,
    responses={
        200: {"description": "The invoice", "model": InvoiceResponse},
        404: {"description": "Invoice not found", "model": ErrorResponse},
    },
    summary="Get a single invoice by ID",
)
async def get_invoice(
    invoice_id: str,
    store: InvoiceStore = Depends(get_invoice_store),
) -> InvoiceResponse:
    """
    Get one invoice.

    Args:
        invoice_id: Exact identifier as returned by the create endpoint.
                    Lookup is a linear scan; with duplicate ids the oldest wins.
    """
    return await invoice_service.get_invoice(store, invoice_id)
