"""
SpoolInvoice Backend - Invoice Service Unit Tests
==================================================

What:  Tests for InvoiceService business logic (create, list, get).
How:   Calls the service directly against an InMemoryInvoiceStore; no HTTP.

What we test:
    ✅ Pricing rule for every spool type
    ✅ Missing / falsy fields rejected, store unchanged
    ✅ Unknown spool type rejected, store unchanged
    ✅ Numeric strings accepted, malformed numbers rejected
    ✅ Unexpected store failure wrapped in InvoiceStorageError
    ✅ Same-millisecond creations share an id (known defect)
"""

from unittest.mock import patch

import pytest

from spoolinvoice.exceptions import InvoiceStorageError, NotFoundError, ValidationError
from spoolinvoice.models.invoice import SPOOL_WEIGHTS, SpoolType
from spoolinvoice.services.invoice_service import InvoiceService, _is_missing
from spoolinvoice.storage import InMemoryInvoiceStore


class FailingStore(InMemoryInvoiceStore):
    """Store whose writes and reads blow up, for error-path tests."""

    def append(self, invoice):
        raise RuntimeError("disk on fire")

    def list_all(self):
        raise RuntimeError("disk on fire")


class TestInvoiceServiceCreate:
    """Tests for the create_invoice workflow."""

    def setup_method(self):
        self.service = InvoiceService()

    @pytest.mark.asyncio
    async def test_create_reference_example(self, invoice_store, valid_payload):
        """44lb × 10/lb × 2 should total 880.00."""
        result = await self.service.create_invoice(invoice_store, valid_payload)

        assert result.message == "Invoice created successfully"
        assert result.invoice.total_price == 880.00
        assert result.invoice.spool_weight == 44.0
        assert result.invoice.spool_type == SpoolType.LB_44
        assert result.invoice.client_name == "Acme"
        assert result.invoice.client_email == "a@b.com"
        assert invoice_store.count() == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("spool_type", ["33lb", "44lb", "550lb"])
    @pytest.mark.parametrize(
        "price, quantity",
        [(10, 2), (0.333, 1), (12.345, 3), (1.99, 7), (0.01, 100)],
    )
    async def test_total_price_rule(self, invoice_store, valid_payload, spool_type, price, quantity):
        """totalPrice == round(price × weight × quantity, 2) for every spool type."""
        payload = {**valid_payload, "spoolType": spool_type, "pricePerPound": price, "quantity": quantity}

        result = await self.service.create_invoice(invoice_store, payload)

        weight = SPOOL_WEIGHTS[SpoolType(spool_type)]
        assert result.invoice.spool_weight == weight
        assert result.invoice.total_price == round(price * weight * quantity, 2)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field",
        ["clientName", "clientEmail", "spoolType", "pricePerPound", "quantity"],
    )
    async def test_missing_field_rejected(self, invoice_store, valid_payload, field):
        """Dropping any required field should raise and leave the store empty."""
        payload = dict(valid_payload)
        del payload[field]

        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_invoice(invoice_store, payload)

        assert exc_info.value.message == "Missing required fields"
        assert exc_info.value.context["missing"] == [field]
        assert invoice_store.count() == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field, value",
        [
            ("clientName", ""),
            ("clientEmail", None),
            ("pricePerPound", 0),
            ("pricePerPound", 0.0),
            ("quantity", 0),
            ("quantity", False),
        ],
    )
    async def test_falsy_values_count_as_missing(self, invoice_store, valid_payload, field, value):
        """Zero price/quantity are indistinguishable from missing (baseline behavior)."""
        payload = {**valid_payload, field: value}

        with pytest.raises(ValidationError, match="Missing required fields"):
            await self.service.create_invoice(invoice_store, payload)
        assert invoice_store.count() == 0

    @pytest.mark.asyncio
    async def test_reports_every_missing_field(self, invoice_store):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_invoice(invoice_store, {"clientName": "Acme"})

        assert exc_info.value.context["missing"] == [
            "clientEmail",
            "spoolType",
            "pricePerPound",
            "quantity",
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("spool_type", ["99lb", "33LB", "33", " 44lb"])
    async def test_unknown_spool_type_rejected(self, invoice_store, valid_payload, spool_type):
        payload = {**valid_payload, "spoolType": spool_type}

        with pytest.raises(ValidationError, match="Invalid spool type") as exc_info:
            await self.service.create_invoice(invoice_store, payload)

        assert exc_info.value.field == "spoolType"
        assert invoice_store.count() == 0

    @pytest.mark.asyncio
    async def test_non_object_body_rejected(self, invoice_store):
        with pytest.raises(ValidationError, match="JSON object"):
            await self.service.create_invoice(invoice_store, ["Acme", "a@b.com"])

    @pytest.mark.asyncio
    async def test_numeric_strings_accepted(self, invoice_store, valid_payload):
        """Form submissions send numbers as strings."""
        payload = {**valid_payload, "pricePerPound": "2.50", "quantity": "4"}

        result = await self.service.create_invoice(invoice_store, payload)

        assert result.invoice.price_per_pound == 2.5
        assert result.invoice.quantity == 4
        assert result.invoice.total_price == 440.00

    @pytest.mark.asyncio
    @pytest.mark.parametrize("price", ["abc", -5, "-1", True, [10], "inf"])
    async def test_invalid_price_rejected(self, invoice_store, valid_payload, price):
        payload = {**valid_payload, "pricePerPound": price}

        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_invoice(invoice_store, payload)

        assert exc_info.value.field == "pricePerPound"
        assert invoice_store.count() == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [1.5, "2.5", "two", -3, True, {"n": 1}])
    async def test_invalid_quantity_rejected(self, invoice_store, valid_payload, quantity):
        payload = {**valid_payload, "quantity": quantity}

        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_invoice(invoice_store, payload)

        assert exc_info.value.field == "quantity"
        assert invoice_store.count() == 0

    @pytest.mark.asyncio
    async def test_overflowing_total_rejected(self, invoice_store, valid_payload):
        """A finite price whose total overflows to inf is not stored."""
        payload = {**valid_payload, "spoolType": "550lb", "pricePerPound": 1e308}

        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_invoice(invoice_store, payload)

        assert exc_info.value.field == "pricePerPound"
        assert invoice_store.count() == 0
        assert await self.service.list_invoices(invoice_store) == []

    @pytest.mark.asyncio
    async def test_quantity_beyond_float_range_rejected(self, invoice_store, valid_payload):
        payload = {**valid_payload, "quantity": 10**400}

        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_invoice(invoice_store, payload)

        assert exc_info.value.field == "quantity"
        assert invoice_store.count() == 0

    @pytest.mark.asyncio
    async def test_integral_float_quantity_accepted(self, invoice_store, valid_payload):
        result = await self.service.create_invoice(invoice_store, {**valid_payload, "quantity": 3.0})
        assert result.invoice.quantity == 3

    @pytest.mark.asyncio
    async def test_non_string_client_name_rejected(self, invoice_store, valid_payload):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_invoice(invoice_store, {**valid_payload, "clientName": 42})
        assert exc_info.value.field == "clientName"

    @pytest.mark.asyncio
    async def test_id_and_timestamp_from_clock(self, invoice_store, valid_payload):
        with patch(
            "spoolinvoice.services.invoice_service._current_millis",
            return_value=1_700_000_000_123,
        ):
            result = await self.service.create_invoice(invoice_store, valid_payload)

        assert result.invoice.id == "1700000000123"
        assert result.invoice.created_at.isoformat() == "2023-11-14T22:13:20.123000+00:00"

    @pytest.mark.asyncio
    async def test_same_millisecond_ids_collide(self, invoice_store, valid_payload):
        """
        Known defect: ids are millisecond timestamps, so two creations in the
        same millisecond get the same id. Lookup returns the first one.
        """
        with patch(
            "spoolinvoice.services.invoice_service._current_millis",
            return_value=1_700_000_000_000,
        ):
            first = await self.service.create_invoice(
                invoice_store, {**valid_payload, "clientName": "First"}
            )
            second = await self.service.create_invoice(
                invoice_store, {**valid_payload, "clientName": "Second"}
            )

        assert first.invoice.id == second.invoice.id
        assert invoice_store.count() == 2
        found = await self.service.get_invoice(invoice_store, first.invoice.id)
        assert found.client_name == "First"

    @pytest.mark.asyncio
    async def test_store_failure_wrapped(self, valid_payload):
        """Unexpected store errors surface as InvoiceStorageError with a generic message."""
        with pytest.raises(InvoiceStorageError) as exc_info:
            await self.service.create_invoice(FailingStore(), valid_payload)

        assert "disk on fire" not in exc_info.value.message
        assert exc_info.value.context["original_error"] == "RuntimeError"


class TestInvoiceServiceRead:
    """Tests for list_invoices and get_invoice."""

    def setup_method(self):
        self.service = InvoiceService()

    @pytest.mark.asyncio
    async def test_list_empty(self, invoice_store):
        assert await self.service.list_invoices(invoice_store) == []

    @pytest.mark.asyncio
    async def test_list_insertion_order(self, invoice_store, valid_payload):
        for name in ("A", "B", "C"):
            await self.service.create_invoice(invoice_store, {**valid_payload, "clientName": name})

        result = await self.service.list_invoices(invoice_store)

        assert [invoice.client_name for invoice in result] == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_get_found(self, invoice_store, valid_payload):
        created = await self.service.create_invoice(invoice_store, valid_payload)

        result = await self.service.get_invoice(invoice_store, created.invoice.id)

        assert result == created.invoice

    @pytest.mark.asyncio
    async def test_get_not_found(self, invoice_store):
        with pytest.raises(NotFoundError):
            await self.service.get_invoice(invoice_store, "does-not-exist")

    @pytest.mark.asyncio
    async def test_list_failure_wrapped(self):
        with pytest.raises(InvoiceStorageError):
            await self.service.list_invoices(FailingStore())


class TestPresenceCheck:
    """The falsy-equivalent presence rule."""

    @pytest.mark.parametrize("value", [None, False, "", 0, 0.0, float("nan")])
    def test_missing_values(self, value):
        assert _is_missing(value) is True

    @pytest.mark.parametrize("value", ["0", " ", "Acme", 1, -1, 0.5, True, [], {}, 10**400])
    def test_present_values(self, value):
        assert _is_missing(value) is False
