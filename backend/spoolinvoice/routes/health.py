"""
SpoolInvoice Backend - Health Check Route
==========================================

What:  Health check endpoint for monitoring and container probes.
How:   Reports version, uptime and how many invoices the store holds.
Who:   Called by Docker health checks, load balancers and monitoring.

The only dependency is the in-process store, so the service is healthy
whenever it can answer at all.
"""

import logging
import time

from fastapi import APIRouter, Depends

from spoolinvoice import __version__
from spoolinvoice.schemas.invoice import HealthResponse
from spoolinvoice.storage import InvoiceStore, get_invoice_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Set once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(store: InvoiceStore = Depends(get_invoice_store)) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        invoice_count=store.count(),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
