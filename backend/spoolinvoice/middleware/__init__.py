# Middleware package init
"""
SpoolInvoice Backend - Middleware Package
==========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: sets the correlation ID used by every later log line
    2. Logging: records method, path, status and duration
    3. GZip / CORS: Starlette built-ins configured in main.py

    Responses travel the chain in reverse, so the logging middleware sees
    the final status code and the request ID header is added last.
"""
