"""List Generated Invoices Use Case

Audit trail of the invoices a series produced.
"""

from libs.result import Result, Return, Error
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from src.app.repositories.generated_invoice_repository import GeneratedInvoiceRepository
from .dtos import GeneratedInvoiceDTO, ListGeneratedInvoicesResponseDTO


class ListGeneratedInvoices:
    def __init__(
        self,
        series_repo: RecurringInvoiceRepository,
        generated_repo: GeneratedInvoiceRepository,
    ):
        self.series_repo = series_repo
        self.generated_repo = generated_repo

    async def execute(
        self, series_id: str, limit: int = 50, offset: int = 0
    ) -> Result[ListGeneratedInvoicesResponseDTO]:
        series = await self.series_repo.get_by_id(series_id)
        if series is None:
            return Return.err(
                Error(
                    code="SERIES_NOT_FOUND",
                    message=f"Recurring invoice {series_id} not found",
                )
            )

        records = await self.generated_repo.list_by_series(series_id, limit=limit, offset=offset)

        return Return.ok(
            ListGeneratedInvoicesResponseDTO(
                series_id=series.id,
                total_invoices_generated=series.total_invoices_generated,
                invoices=[GeneratedInvoiceDTO.from_entity(r) for r in records],
            )
        )
