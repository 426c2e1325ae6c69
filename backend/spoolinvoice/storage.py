"""
SpoolInvoice Backend - Invoice Storage
=======================================

What:  Storage interface for invoices, its in-memory implementation, and the
       FastAPI dependency that hands the store to route handlers.
How:   InvoiceStore is an abstract base class with append / list / get-by-id.
       InMemoryInvoiceStore keeps invoices in an ordered Python list for the
       lifetime of the process. create_app() puts one instance on
       `app.state.invoice_store`; `get_invoice_store` reads it back per request.
Who:   InvoiceService calls the store; routes receive it via Depends().
When:  The store is created once per app instance, at app creation time.

Durability:
    None. Everything held here is lost when the process exits.

Concurrency:
    Store methods are synchronous and contain no await points, so under a
    single asyncio event loop (uvicorn default) an append cannot interleave
    with another request's read or append. No lock is taken; running several
    worker processes gives each worker its own independent store.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from starlette.requests import Request

from spoolinvoice.models.invoice import Invoice


class InvoiceStore(ABC):
    """
    Abstract interface for invoice persistence.

    Contract:
        - append() adds an invoice at the end of the sequence
        - list_all() returns every invoice in insertion order
        - get_by_id() returns the first invoice with a matching id, or None
        - count() returns the number of stored invoices
    """

    @abstractmethod
    def append(self, invoice: Invoice) -> None:
        ...

    @abstractmethod
    def list_all(self) -> List[Invoice]:
        ...

    @abstractmethod
    def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        ...

    @abstractmethod
    def count(self) -> int:
        ...


class InMemoryInvoiceStore(InvoiceStore):
    """Unbounded, process-lifetime list of invoices."""

    def __init__(self) -> None:
        self._invoices: List[Invoice] = []

    def append(self, invoice: Invoice) -> None:
        self._invoices.append(invoice)

    def list_all(self) -> List[Invoice]:
        # Copy; the stored sequence stays append-only
        return list(self._invoices)

    def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        """Linear scan; the first invoice with an exact id match wins."""
        for invoice in self._invoices:
            if invoice.id == invoice_id:
                return invoice
        return None

    def count(self) -> int:
        return len(self._invoices)


# ── Store Dependency ──────────────────────────────────────────────────────
def get_invoice_store(request: Request) -> InvoiceStore:
    """
    FastAPI dependency that provides the app's invoice store.

    Example usage in a route:
        @router.get("/invoices")
        async def list_invoices(store: InvoiceStore = Depends(get_invoice_store)):
            return invoice_service.list_invoices(store)
    """
    return request.app.state.invoice_store
