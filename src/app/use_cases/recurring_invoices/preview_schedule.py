"""PreviewSchedule Use Case

Lists the upcoming generation dates of a series.
"""

from datetime import date
from typing import Optional
from libs.result import Result, Return, Error
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from src.domain.calendar_math import advance, occurrences
from src.domain.recurring_invoice import RecurringInvoice, RecurringInvoiceStatus
from .dtos import SchedulePreviewDTO

MAX_PREVIEW_COUNT = 120


class PreviewSchedule:
    """
    Upcoming anchors starting at next_generation_date

    Terminal series have no upcoming dates. Paused series show the dates
    they would follow once resumed.
    """

    def __init__(self, series_repo: RecurringInvoiceRepository):
        self.series_repo = series_repo

    async def execute(self, series_id: str, count: int = 12) -> Result[SchedulePreviewDTO]:
        if count < 1 or count > MAX_PREVIEW_COUNT:
            return Return.err(
                Error(
                    code="INVALID_PREVIEW_COUNT",
                    message=f"count must be between 1 and {MAX_PREVIEW_COUNT}",
                )
            )

        series = await self.series_repo.get_by_id(series_id)
        if series is None:
            return Return.err(
                Error(
                    code="SERIES_NOT_FOUND",
                    message=f"Recurring invoice {series_id} not found",
                )
            )

        status = RecurringInvoiceStatus(series.status)
        if status.is_terminal:
            upcoming = []
        else:
            upcoming = occurrences(
                series.next_generation_date,
                series.frequency,
                series.day_of_month,
                count,
                end_date=series.end_date,
            )

        return Return.ok(
            SchedulePreviewDTO(
                series_id=series.id,
                status=status,
                upcoming_dates=upcoming,
                ends_on=self._last_generation_date(series),
            )
        )

    def _last_generation_date(self, series: RecurringInvoice) -> Optional[date]:
        if series.end_date is None:
            return None

        last = series.next_generation_date
        while True:
            candidate = advance(last, series.frequency, series.day_of_month)
            if candidate > series.end_date:
                return last
            last = candidate
