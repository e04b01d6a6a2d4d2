"""DeleteRecurringInvoice Use Case

Explicit destructive removal of a series and its generation history.
Invoices already created stay in the invoicing service.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository

logger = logging.getLogger(__name__)


class DeleteRecurringInvoice:
    def __init__(
        self,
        uow: UnitOfWork,
        series_repo: RecurringInvoiceRepository,
    ):
        self.uow = uow
        self.series_repo = series_repo

    async def execute(self, series_id: str) -> Result[bool]:
        try:
            deleted = await self.series_repo.delete(series_id)
            if not deleted:
                return Return.err(
                    Error(
                        code="SERIES_NOT_FOUND",
                        message=f"Recurring invoice {series_id} not found",
                    )
                )

            await self.uow.commit()
            logger.info(f"Deleted recurring invoice {series_id}")
            return Return.ok(True)

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="DELETE_RECURRING_INVOICE_FAILED",
                    message="Failed to delete recurring invoice",
                    reason=str(e),
                )
            )
