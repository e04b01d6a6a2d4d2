"""Materialized Line Item

Concrete, priced invoice line produced from a LineItemTemplate at
generation time. Amounts are Decimal end to end.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from src.domain.base import BaseModel

CENT = Decimal("0.01")


class LineItem(BaseModel):
    """
    Line Item - priced invoice line

    Domain Rules:
    - total = quantity * unit_price, exact (never rounded)
    - tax_amount = total * tax_rate / 100, rounded half-up to cents
    """

    product_id: Optional[str] = None
    description: str
    quantity: Decimal
    unit_price: Decimal
    tax_rate: Decimal = Decimal("0")
    total: Decimal
    tax_amount: Decimal = Decimal("0")

    @classmethod
    def build(
        cls,
        description: str,
        quantity: Decimal,
        unit_price: Decimal,
        tax_rate: Decimal = Decimal("0"),
        product_id: Optional[str] = None,
    ) -> "LineItem":
        total = quantity * unit_price
        tax_amount = (total * tax_rate / Decimal("100")).quantize(CENT, rounding=ROUND_HALF_UP)
        return cls(
            product_id=product_id,
            description=description,
            quantity=quantity,
            unit_price=unit_price,
            tax_rate=tax_rate,
            total=total,
            tax_amount=tax_amount,
        )
