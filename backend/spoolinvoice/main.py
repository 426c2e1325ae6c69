"""
SpoolInvoice Backend - FastAPI Application Factory
===================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       with its own invoice store.
Who:   Called by uvicorn to start the server (uvicorn spoolinvoice.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────┐ ┌──────┐ ┌──────┐         │
    │  │  Req ID  │→│ Logging │→│ GZip │→│ CORS │         │
    │  └──────────┘ └─────────┘ └──────┘ └──────┘         │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────┐ ┌────────────┐              │
    │  │ /api/invoices[/id] │ │ GET /health│              │
    │  └────────────────────┘ └────────────┘              │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ HTTP→status  │   │
    │  │ Storage→500    │ Exception→500               │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, log the listening address
    Shutdown: log the number of invoices being discarded
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from spoolinvoice import __version__
from spoolinvoice.config import settings
from spoolinvoice.exceptions import (
    InvoiceStorageError,
    NotFoundError,
    SpoolInvoiceError,
    ValidationError,
)
from spoolinvoice.middleware.logging import RequestLoggingMiddleware
from spoolinvoice.middleware.request_id import (
    UNEXPECTED_ERROR_MESSAGE,
    RequestIDMiddleware,
    error_response,
    request_id_var,
)
from spoolinvoice.routes import health, invoices
from spoolinvoice.storage import InMemoryInvoiceStore, InvoiceStore

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    404: "not_found",
    405: "method_not_allowed",
}


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by Docker / the process supervisor)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # uvicorn's access log duplicates RequestLoggingMiddleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("%s %s starting up", settings.app_name, __version__)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("Invoices are held in memory and are lost on restart")

    yield

    logger.info(
        "Shutting down; discarding %d in-memory invoice(s)",
        app.state.invoice_store.count(),
    )


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError            → 400 Bad Request
        RequestValidationError     → 400 Bad Request (FastAPI path/body parsing)
        NotFoundError              → 404 Not Found
        StarletteHTTPException     → its own status (unknown route 404, 405)
        InvoiceStorageError        → 500 Internal Server Error
        SpoolInvoiceError (base)   → 500 Internal Server Error
        Exception (fallback)       → 500 Internal Server Error

    Exceptions that reach the top of the stack are answered by
    RequestIDMiddleware first, so they still get an X-Request-ID header;
    the Exception handler covers errors raised outside that middleware.

    Every body has the shape {"error", "code", "request_id"[, "details"]}.
    500 responses never include exception details; those are logged.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(400, exc.message, "validation_error", details=exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        return error_response(
            400,
            "Invalid request",
            "validation_error",
            details={"errors": [error.get("msg") for error in exc.errors()]},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, exc.message, "not_found")

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return error_response(
            exc.status_code,
            str(exc.detail),
            HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(InvoiceStorageError)
    async def handle_storage_error(request: Request, exc: InvoiceStorageError):
        logger.error(
            "[%s] Invoice storage error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return error_response(500, exc.message, "server_error")

    @app.exception_handler(SpoolInvoiceError)
    async def handle_app_error(request: Request, exc: SpoolInvoiceError):
        logger.error(
            "[%s] Application error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return error_response(
            500,
            "An internal error occurred. Please try again later.",
            "server_error",
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return error_response(
            500,
            UNEXPECTED_ERROR_MESSAGE,
            "internal_server_error",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(store: Optional[InvoiceStore] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Invoice store for this app instance. Defaults to a fresh
               InMemoryInvoiceStore; tests pass their own to inspect it.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title=settings.app_name,
        description=(
            "Invoice generation for material spools. Create invoices from client, "
            "spool type, price per pound and quantity; list and fetch them by ID."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.invoice_store = store if store is not None else InMemoryInvoiceStore()

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added executes first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(invoices.router)
    app.include_router(health.router)

    return app


# uvicorn expects `spoolinvoice.main:app` to be importable
app = create_app()
