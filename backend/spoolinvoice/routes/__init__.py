# Routes package init
"""
SpoolInvoice Backend - API Routes Package
==========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - invoices.py: POST /api/invoices          (create invoice)
                   GET  /api/invoices          (list all invoices)
                   GET  /api/invoices/{id}     (get single invoice)
    - health.py:   GET  /health                (service health check)

Routes are thin: they read the request, call InvoiceService and set
status codes/headers. Business rules live in the service.
"""
