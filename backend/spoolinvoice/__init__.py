"""
SpoolInvoice Backend - Application Package Initializer
=======================================================

What: Marks the `spoolinvoice` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │       Services (Business Logic)     │  ← Validation, pricing, ids
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Domain dataclasses + Pydantic
    ├─────────────────────────────────────┤
    │          Storage (In-Memory)        │  ← InvoiceStore interface
    └─────────────────────────────────────┘

    Routes handle status codes and headers and delegate to services.
    Services can be exercised directly against an InvoiceStore without HTTP.
"""

__version__ = "1.0.0"
