"""List Recurring Invoices Use Case

Paginated listing of series with optional filters.
"""

from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from src.domain.recurring_invoice import RecurringInvoiceStatus
from .dtos import ListRecurringInvoicesResponseDTO, RecurringInvoiceResponseDTO

MAX_PAGE_SIZE = 200


class ListRecurringInvoices:
    def __init__(self, series_repo: RecurringInvoiceRepository):
        self.series_repo = series_repo

    async def execute(
        self,
        workspace_id: Optional[str] = None,
        status: Optional[RecurringInvoiceStatus] = None,
        client_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Result[ListRecurringInvoicesResponseDTO]:
        if limit < 1 or limit > MAX_PAGE_SIZE:
            return Return.err(
                Error(
                    code="INVALID_PAGINATION",
                    message=f"limit must be between 1 and {MAX_PAGE_SIZE}",
                )
            )
        if offset < 0:
            return Return.err(
                Error(code="INVALID_PAGINATION", message="offset cannot be negative")
            )

        series = await self.series_repo.list_series(
            workspace_id=workspace_id,
            status=status,
            client_id=client_id,
            limit=limit,
            offset=offset,
        )

        return Return.ok(
            ListRecurringInvoicesResponseDTO(
                series=[RecurringInvoiceResponseDTO.from_entity(s) for s in series],
                count=len(series),
                limit=limit,
                offset=offset,
            )
        )
