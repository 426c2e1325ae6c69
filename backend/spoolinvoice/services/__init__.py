# Services package init
"""
SpoolInvoice Backend - Services Layer
======================================

What:  Business logic layer between routes (HTTP) and storage.
How:   Services receive the InvoiceStore per call, apply the invoice rules,
       and return response schemas or raise application exceptions.

Service Inventory:
    - InvoiceService: validation, pricing, id assignment, list and lookup
"""
