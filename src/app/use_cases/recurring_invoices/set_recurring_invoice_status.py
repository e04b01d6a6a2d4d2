"""SetRecurringInvoiceStatus Use Case

Pauses, resumes or cancels a series.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from src.domain import status_machine
from src.domain.errors import NotFoundError, RecurringInvoiceError
from src.domain.recurring_invoice import RecurringInvoiceStatus
from .dtos import RecurringInvoiceResponseDTO
from .errors import to_error

logger = logging.getLogger(__name__)


class SetRecurringInvoiceStatus:
    """
    Use Case: Change the status of a series

    Business Rules:
    1. active <-> paused and active|paused -> cancelled are allowed
    2. Nothing leaves completed or cancelled (TERMINAL_STATE)
    3. completed is never user-requested (INVALID_TRANSITION)
    4. Requesting the current status is an idempotent no-op
    5. next_generation_date is never touched: a paused series waits in place
    """

    def __init__(
        self,
        uow: UnitOfWork,
        series_repo: RecurringInvoiceRepository,
    ):
        self.uow = uow
        self.series_repo = series_repo

    async def execute(
        self, series_id: str, target: RecurringInvoiceStatus
    ) -> Result[RecurringInvoiceResponseDTO]:
        """
        Execute status change

        Args:
            series_id: Series identifier
            target: Requested status

        Returns:
            Result[RecurringInvoiceResponseDTO]: Success with the series or error
        """
        try:
            series = await self.series_repo.get_by_id(series_id)
            if series is None:
                raise NotFoundError(f"Recurring invoice {series_id} not found")

            previous = RecurringInvoiceStatus(series.status)
            expected_version = series.version

            if not status_machine.apply_transition(series, target):
                return Return.ok(RecurringInvoiceResponseDTO.from_entity(series))

            series.updated_at = datetime.utcnow()
            updated = await self.series_repo.update(series, expected_version=expected_version)
            await self.uow.commit()

            logger.info(
                f"Recurring invoice {series_id} moved from {previous.value} "
                f"to {RecurringInvoiceStatus(target).value}"
            )

            return Return.ok(RecurringInvoiceResponseDTO.from_entity(updated))

        except RecurringInvoiceError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SET_RECURRING_INVOICE_STATUS_FAILED",
                    message="Failed to change recurring invoice status",
                    reason=str(e),
                )
            )
