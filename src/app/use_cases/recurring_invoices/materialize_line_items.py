"""MaterializeLineItems Use Case

Expands the templates of a series into priced invoice lines without
generating anything. Used for previews and by the generation flow.
"""

from libs.result import Result, Return, Error
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from src.app.services.line_item_resolver import LineItemResolver, subtotal, tax_total
from src.app.services.product_catalog import CatalogLookupError
from .dtos import MaterializedInvoiceDTO


class MaterializeLineItems:
    """
    Use Case: Materialize line items for a series

    Errors:
        SERIES_NOT_FOUND: No series with this ID
        CATALOG_LOOKUP_FAILED: Live pricing could not reach the catalog
    """

    def __init__(
        self,
        series_repo: RecurringInvoiceRepository,
        resolver: LineItemResolver,
    ):
        self.series_repo = series_repo
        self.resolver = resolver

    async def execute(self, series_id: str) -> Result[MaterializedInvoiceDTO]:
        series = await self.series_repo.get_by_id(series_id)
        if series is None:
            return Return.err(
                Error(
                    code="SERIES_NOT_FOUND",
                    message=f"Recurring invoice {series_id} not found",
                )
            )

        try:
            line_items = await self.resolver.materialize(series)
        except CatalogLookupError as e:
            return Return.err(
                Error(
                    code="CATALOG_LOOKUP_FAILED",
                    message="Failed to read current catalog prices",
                    reason=str(e),
                )
            )

        items_subtotal = subtotal(line_items)
        items_tax = tax_total(line_items)

        return Return.ok(
            MaterializedInvoiceDTO(
                series_id=series.id,
                currency=series.currency,
                line_items=line_items,
                subtotal=items_subtotal,
                tax_total=items_tax,
                total=items_subtotal + items_tax,
            )
        )
