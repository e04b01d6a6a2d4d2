"""List Due Recurring Invoices Use Case

Series a scheduler should fire for a given date.
"""

from datetime import date
from typing import List
from libs.result import Result, Return
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from src.domain.schedule import is_due
from .dtos import RecurringInvoiceResponseDTO


class ListDueRecurringInvoices:
    """
    Filters persisted series with is_due(series, as_of)

    The repository pre-filters in the database; the domain rule is
    re-applied so a stale or over-broad query never leaks a paused series.
    """

    def __init__(self, series_repo: RecurringInvoiceRepository):
        self.series_repo = series_repo

    async def execute(self, as_of: date) -> Result[List[RecurringInvoiceResponseDTO]]:
        candidates = await self.series_repo.get_due(as_of)
        return Return.ok(
            [
                RecurringInvoiceResponseDTO.from_entity(series)
                for series in candidates
                if is_due(series, as_of)
            ]
        )
