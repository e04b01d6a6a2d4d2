"""UpdateRecurringInvoice Use Case

Applies a partial edit to a series definition.
"""

import logging
from datetime import datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from src.domain.calendar_math import clamp_to_day, clamped_date
from src.domain.errors import (
    NotFoundError,
    RecurringInvoiceError,
    TerminalStateError,
    ValidationError,
)
from src.domain.recurring_invoice import RecurringInvoiceStatus
from src.domain.validation import validate_definition
from .dtos import RecurringInvoiceResponseDTO, UpdateRecurringInvoiceCommandDTO
from .errors import to_error

logger = logging.getLogger(__name__)

# Frozen once the series has generated its first invoice
SCHEDULE_ANCHOR_FIELDS = ("frequency", "start_date")


class UpdateRecurringInvoice:
    """
    Use Case: Partially update a series

    Business Rules:
    1. Completed and cancelled series cannot be edited
    2. client_id and status are not editable here (status goes through SetRecurringInvoiceStatus)
    3. frequency and start_date are frozen after the first generation
    4. Before the first generation, next_generation_date is recomputed from start_date
    5. After it, a day_of_month change re-targets the pending anchor within its month
    6. end_date cannot be moved before the pending next_generation_date
    7. The merged definition must pass the same validation as creation
    8. Stale versions are rejected (optimistic concurrency)

    Flow:
    1. Load series
    2. Merge the explicitly set fields
    3. Validate and recompute the anchor
    4. Persist with version check
    5. Commit transaction
    6. Return response
    """

    def __init__(
        self,
        uow: UnitOfWork,
        series_repo: RecurringInvoiceRepository,
    ):
        self.uow = uow
        self.series_repo = series_repo

    async def execute(
        self, series_id: str, command: UpdateRecurringInvoiceCommandDTO
    ) -> Result[RecurringInvoiceResponseDTO]:
        """
        Execute series update

        Args:
            series_id: Series identifier
            command: Fields to change; unset fields are left untouched

        Returns:
            Result[RecurringInvoiceResponseDTO]: Success with the updated series or error
        """
        try:
            # Step 1: Load series
            series = await self.series_repo.get_by_id(series_id)
            if series is None:
                raise NotFoundError(f"Recurring invoice {series_id} not found")

            status = RecurringInvoiceStatus(series.status)
            if status.is_terminal:
                raise TerminalStateError(
                    f"Recurring invoice {series_id} is {status.value} and can no longer be edited"
                )

            # Step 2: Merge changes
            changes = command.model_dump(exclude_unset=True)
            if "items" in changes and changes["items"] is not None:
                changes["items"] = [item.model_dump() for item in command.items]

            has_generated = series.total_invoices_generated > 0
            if has_generated:
                for field in SCHEDULE_ANCHOR_FIELDS:
                    if field in changes and changes[field] != getattr(series, field):
                        raise ValidationError(
                            f"{field} cannot change after the series generated its first invoice",
                            reason="Re-create the series to change its cadence",
                        )

            merged = {
                "frequency": series.frequency,
                "start_date": series.start_date,
                "end_date": series.end_date,
                "day_of_month": series.day_of_month,
                "auto_send": series.auto_send,
                "recipient_email": series.recipient_email,
                "notification_days_before": series.notification_days_before,
                "items": series.items,
                "currency": series.currency,
            }
            for field in merged:
                if field in changes:
                    merged[field] = changes[field]

            if merged["currency"]:
                merged["currency"] = merged["currency"].upper()
            for required in ("frequency", "start_date", "day_of_month", "auto_send", "currency"):
                if merged[required] is None:
                    raise ValidationError(f"{required} cannot be null")

            # Step 3: Validate and recompute the anchor
            items = validate_definition(**merged)

            if has_generated:
                anchor = series.next_generation_date
                next_date = clamped_date(anchor.year, anchor.month, merged["day_of_month"])
            else:
                next_date = clamp_to_day(merged["start_date"], merged["day_of_month"])

            if merged["end_date"] is not None and next_date > merged["end_date"]:
                raise ValidationError(
                    f"end_date {merged['end_date'].isoformat()} is before the next generation "
                    f"date {next_date.isoformat()}"
                )

            expected_version = series.version

            series.frequency = merged["frequency"]
            series.start_date = merged["start_date"]
            series.end_date = merged["end_date"]
            series.day_of_month = merged["day_of_month"]
            series.auto_send = merged["auto_send"]
            series.recipient_email = merged["recipient_email"] or None
            series.notification_days_before = merged["notification_days_before"]
            series.currency = merged["currency"]
            series.items = items
            series.next_generation_date = next_date
            for field in ("name", "template_name", "notes"):
                if field in changes:
                    setattr(series, field, changes[field])
            series.updated_at = datetime.utcnow()

            # Step 4: Persist with version check
            updated = await self.series_repo.update(series, expected_version=expected_version)

            # Step 5: Commit transaction
            await self.uow.commit()

            logger.info(f"Updated recurring invoice {series_id} (fields: {sorted(changes)})")

            # Step 6: Build response
            return Return.ok(RecurringInvoiceResponseDTO.from_entity(updated))

        except RecurringInvoiceError as e:
            await self.uow.rollback()
            return Return.err(to_error(e))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="UPDATE_RECURRING_INVOICE_FAILED",
                    message="Failed to update recurring invoice",
                    reason=str(e),
                )
            )
