"""Get Recurring Invoice Use Case

Retrieves a single series.
"""

from libs.result import Result, Return, Error
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from .dtos import RecurringInvoiceResponseDTO


class GetRecurringInvoice:
    """Read-only operation returning one series"""

    def __init__(self, series_repo: RecurringInvoiceRepository):
        self.series_repo = series_repo

    async def execute(self, series_id: str) -> Result[RecurringInvoiceResponseDTO]:
        """
        Execute get series operation

        Errors:
            SERIES_NOT_FOUND: No series with this ID
        """
        series = await self.series_repo.get_by_id(series_id)

        if series is None:
            return Return.err(
                Error(
                    code="SERIES_NOT_FOUND",
                    message=f"Recurring invoice {series_id} not found",
                )
            )

        return Return.ok(RecurringInvoiceResponseDTO.from_entity(series))
