"""CreateRecurringInvoice Use Case

Validates a series definition and persists it as an active series.
"""

import logging
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from src.domain.calendar_math import clamp_to_day
from src.domain.errors import RecurringInvoiceError, ValidationError
from src.domain.recurring_invoice import RecurringInvoice, RecurringInvoiceStatus
from src.domain.validation import validate_definition
from .dtos import CreateRecurringInvoiceCommandDTO, RecurringInvoiceResponseDTO
from .errors import to_error

logger = logging.getLogger(__name__)


class CreateRecurringInvoice:
    """
    Use Case: Create a recurring invoice series

    Business Rules:
    1. day_of_month within [1, 31]
    2. At least one item; quantities and prices are decimal strings
    3. auto_send requires recipient_email
    4. end_date, if set, is not before start_date
    5. Series starts active with next_generation_date = clamp(start_date, day_of_month)
    6. No write happens when validation fails

    Flow:
    1. Validate the definition
    2. Compute the first generation date
    3. Persist the series
    4. Commit transaction
    5. Return response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        series_repo: RecurringInvoiceRepository,
        default_currency: str = "EUR",
    ):
        self.uow = uow
        self.series_repo = series_repo
        self.default_currency = default_currency

    async def execute(self, command: CreateRecurringInvoiceCommandDTO) -> Result[RecurringInvoiceResponseDTO]:
        """
        Execute series creation

        Args:
            command: CreateRecurringInvoiceCommandDTO with the series definition

        Returns:
            Result[RecurringInvoiceResponseDTO]: Success with the created series or error
        """
        try:
            currency = (command.currency or self.default_currency).upper()

            # Step 1: Validate the definition
            items = validate_definition(
                frequency=command.frequency,
                start_date=command.start_date,
                end_date=command.end_date,
                day_of_month=command.day_of_month,
                auto_send=command.auto_send,
                recipient_email=command.recipient_email,
                notification_days_before=command.notification_days_before,
                items=[item.model_dump() for item in command.items],
                currency=currency,
            )

            # Step 2: First generation date
            first_date = clamp_to_day(command.start_date, command.day_of_month)
            if command.end_date is not None and first_date > command.end_date:
                raise ValidationError(
                    f"No generation date on day {command.day_of_month} between "
                    f"{command.start_date.isoformat()} and {command.end_date.isoformat()}"
                )

            # Step 3: Persist
            series = RecurringInvoice(
                workspace_id=command.workspace_id,
                client_id=command.client_id,
                name=command.name,
                frequency=command.frequency,
                status=RecurringInvoiceStatus.ACTIVE,
                start_date=command.start_date,
                end_date=command.end_date,
                day_of_month=command.day_of_month,
                next_generation_date=first_date,
                auto_send=command.auto_send,
                recipient_email=command.recipient_email or None,
                notification_days_before=command.notification_days_before,
                total_invoices_generated=0,
                currency=currency,
                template_name=command.template_name,
                notes=command.notes,
                items=items,
                version=1,
            )

            created = await self.series_repo.create(series)

            # Step 4: Commit transaction
            await self.uow.commit()

            logger.info(
                f"Created recurring invoice {created.id} for client {created.client_id}, "
                f"first generation on {created.next_generation_date.isoformat()}"
            )

            # Step 5: Build response
            return Return.ok(RecurringInvoiceResponseDTO.from_entity(created))

        except RecurringInvoiceError as e:
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_RECURRING_INVOICE_FAILED",
                    message="Failed to create recurring invoice",
                    reason=str(e),
                )
            )
