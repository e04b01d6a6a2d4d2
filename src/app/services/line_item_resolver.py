"""Line-Item Template Resolver

Expands the templates stored on a series into priced invoice lines.
"""

import logging
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from src.app.services.product_catalog import ProductCatalog
from src.domain.line_item import LineItem
from src.domain.recurring_invoice import LineItemTemplate, RecurringInvoice

logger = logging.getLogger(__name__)


class PricePolicy(str, Enum):
    """Which unit price a generated invoice uses"""
    SNAPSHOT = "snapshot"  # price copied into the template when the product was attached
    LIVE = "live"          # catalog price at generation time


class LineItemResolver:
    """
    Materializes line items for a series

    With PricePolicy.SNAPSHOT the catalog is never read. With PricePolicy.LIVE,
    templates bound to a product take the catalog's current price, unless the
    product is gone or priced in another currency; the snapshot price is kept
    in that case.
    """

    def __init__(
        self,
        catalog: Optional[ProductCatalog] = None,
        price_policy: PricePolicy = PricePolicy.SNAPSHOT,
    ):
        self.catalog = catalog
        self.price_policy = PricePolicy(price_policy)

        if self.price_policy == PricePolicy.LIVE and catalog is None:
            raise ValueError("PricePolicy.LIVE requires a product catalog")

    async def materialize(self, series: RecurringInvoice) -> List[LineItem]:
        """
        Build priced lines for every template of series, in order

        Args:
            series: Series whose templates are expanded

        Returns:
            List of LineItem with exact Decimal totals
        """
        line_items = []
        for template in series.templates():
            unit_price = await self._resolve_unit_price(series, template)
            line_items.append(
                LineItem.build(
                    description=template.description,
                    quantity=template.quantity_value,
                    unit_price=unit_price,
                    tax_rate=template.tax_rate_value,
                    product_id=template.product_id,
                )
            )
        return line_items

    async def _resolve_unit_price(self, series: RecurringInvoice, template: LineItemTemplate) -> Decimal:
        snapshot_price = template.unit_price_value

        if self.price_policy == PricePolicy.SNAPSHOT or not template.product_id:
            return snapshot_price

        product = await self.catalog.get_product(template.product_id)

        if product is None:
            logger.warning(
                f"Product {template.product_id} not found for series {series.id}, "
                f"keeping snapshot price {snapshot_price}"
            )
            return snapshot_price

        if product.currency.upper() != series.currency.upper():
            logger.warning(
                f"Product {template.product_id} is priced in {product.currency}, "
                f"series {series.id} bills in {series.currency}; keeping snapshot price"
            )
            return snapshot_price

        return product.unit_price


def subtotal(line_items: List[LineItem]) -> Decimal:
    return sum((item.total for item in line_items), Decimal("0"))


def tax_total(line_items: List[LineItem]) -> Decimal:
    return sum((item.tax_amount for item in line_items), Decimal("0"))
