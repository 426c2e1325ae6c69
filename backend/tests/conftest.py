"""
SpoolInvoice Backend - Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures (function-scoped, fresh for each test):
    ├── invoice_store: Empty InMemoryInvoiceStore
    ├── valid_payload: A create request body that passes validation
    ├── test_app: FastAPI app bound to invoice_store
    └── test_client: HTTPX AsyncClient talking to test_app
"""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Override settings for testing BEFORE any app imports
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CORS_ORIGINS"] = "http://testserver"

from spoolinvoice.main import create_app  # noqa: E402
from spoolinvoice.storage import InMemoryInvoiceStore  # noqa: E402


@pytest.fixture
def invoice_store():
    """An empty in-memory store, isolated per test."""
    return InMemoryInvoiceStore()


@pytest.fixture
def valid_payload():
    """
    Create request body from the reference example.

    44lb spool × 10.00/lb × 2 spools = 880.00
    """
    return {
        "clientName": "Acme",
        "clientEmail": "a@b.com",
        "spoolType": "44lb",
        "pricePerPound": 10,
        "quantity": 2,
    }


@pytest.fixture
def test_app(invoice_store):
    return create_app(store=invoice_store)


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
