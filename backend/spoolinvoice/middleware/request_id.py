"""
SpoolInvoice Backend - Request ID Middleware
=============================================

What:  Assigns an identifier to each incoming request and returns it in the
       X-Request-ID response header.
How:   Honors a client-supplied X-Request-ID, otherwise generates a short
       UUID. The value is stored in a ContextVar so loggers and exception
       handlers can include it, and in request.state for route handlers.

Unhandled exceptions escaping the app are turned into the common 500 error
body here, so those responses carry the header too.
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

# Coroutine-local storage for the current request ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def error_response(
    status_code: int,
    message: str,
    code: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build the {"error", "code", "request_id"[, "details"]} body."""
    content: Dict[str, Any] = {
        "error": message,
        "code": code,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that tags every request and response with a request ID."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 chars of a UUID4 is enough to correlate log lines
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("[%s] Unexpected error: %s", rid, str(e), exc_info=True)
            response = error_response(500, UNEXPECTED_ERROR_MESSAGE, "internal_server_error")

        response.headers["X-Request-ID"] = rid
        return response
