"""
SpoolInvoice Backend - Invoice Domain Model
============================================

What:  The Invoice record and the spool type weight table.
How:   Invoice is a frozen dataclass; once built by InvoiceService it cannot
       be mutated. Stores hold these objects and the API layer serializes
       them through `spoolinvoice.schemas.invoice.InvoiceResponse`.
Who:   Built by InvoiceService, held by InvoiceStore implementations.

Pricing rule:
    total_price = round(price_per_pound × spool_weight × quantity, 2)
    where spool_weight is looked up from the spool type:

        33lb  →  33.0
        44lb  →  44.0
        550lb → 550.0
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional


class SpoolType(str, Enum):
    """Fixed set of spool sizes an invoice can bill for."""

    LB_33 = "33lb"
    LB_44 = "44lb"
    LB_550 = "550lb"

    @classmethod
    def parse(cls, value: object) -> Optional["SpoolType"]:
        """Returns the matching member, or None for any unknown value."""
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


SPOOL_WEIGHTS: Dict[SpoolType, float] = {
    SpoolType.LB_33: 33.0,
    SpoolType.LB_44: 44.0,
    SpoolType.LB_550: 550.0,
}

# Decimal places kept on total_price
PRICE_PRECISION = 2


def compute_total_price(price_per_pound: float, spool_weight: float, quantity: int) -> float:
    """Applies the pricing rule: price × weight × quantity, rounded to cents."""
    return round(price_per_pound * spool_weight * quantity, PRICE_PRECISION)


@dataclass(frozen=True)
class Invoice:
    """
    Immutable record of a billed quantity of spools at a computed total price.

    Lifecycle:
        1. Built by InvoiceService after the request passes validation
        2. Appended to the process-lifetime InvoiceStore
        3. Never updated or deleted; lost when the process exits

    Identifier:
        `id` is the creation time in epoch milliseconds, as a string. Two
        invoices created within the same millisecond share an id; lookups
        return the first one stored.
    """

    id: str
    created_at: datetime
    client_name: str
    client_email: str
    spool_type: SpoolType
    price_per_pound: float
    spool_weight: float
    quantity: int
    total_price: float

    def __repr__(self) -> str:
        return (
            f"<Invoice(id={self.id}, spool_type='{self.spool_type.value}', "
            f"quantity={self.quantity}, total_price={self.total_price})>"
        )
