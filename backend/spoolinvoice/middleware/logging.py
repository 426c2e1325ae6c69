"""
SpoolInvoice Backend - Request Logging Middleware
==================================================

What:  One access log line per HTTP request: method, path, status,
       duration and request ID.
How:   Times the downstream call and logs on the `spoolinvoice.access`
       logger at a level chosen from the status class.
When:  Runs inside RequestIDMiddleware, so the request ID is already set.

Request bodies are never logged; they carry client names and emails.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from spoolinvoice.middleware.request_id import request_id_var

logger = logging.getLogger("spoolinvoice.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status code and duration for each request.

    Level by status:
        5xx → ERROR
        4xx → WARNING
        2xx/3xx → INFO

    GET /health is not logged; probes hit it every few seconds.
    """

    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path
        rid = request_id_var.get("")

        # An exception escaping the app is answered as a 500 further out
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
        finally:
            self._log_request(method, path, status, start_time, rid, client_ip)

        return response

    @staticmethod
    def _log_request(
        method: str, path: str, status: int, start_time: float, rid: str, client_ip: str
    ) -> None:
        duration_ms = (time.perf_counter() - start_time) * 1000
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
