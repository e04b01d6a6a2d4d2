"""DispatchReminders Use Case

Sends the pre-generation reminder of every active series whose reminder
day is as_of.
"""

import logging
from datetime import date
from libs.result import Result, Return, Error
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from src.app.services.notification_service import NotificationService
from src.domain.schedule import notification_due, reminder_key
from .dtos import ReminderSweepResultDTO

logger = logging.getLogger(__name__)


class DispatchReminders:
    """
    Use Case: Send reminders due on a date

    Business Rules:
    1. A reminder is due iff notification_days_before > 0, the series is
       active and as_of == next_generation_date - notification_days_before
    2. At most one reminder per (series_id, next_generation_date); the caller
       runs this once per day
    3. A failing series never aborts the sweep
    """

    def __init__(
        self,
        series_repo: RecurringInvoiceRepository,
        notification_service: NotificationService,
    ):
        self.series_repo = series_repo
        self.notification_service = notification_service

    async def execute(self, as_of: date) -> Result[ReminderSweepResultDTO]:
        try:
            active_series = await self.series_repo.get_active()
        except Exception as e:
            return Return.err(
                Error(
                    code="DISPATCH_REMINDERS_FAILED",
                    message="Failed to load active recurring invoices",
                    reason=str(e),
                )
            )

        due = [series for series in active_series if notification_due(series, as_of)]
        sent_keys = []
        failed = 0

        for series in due:
            key = reminder_key(series)
            try:
                if await self.notification_service.send_reminder(series):
                    sent_keys.append(key)
                else:
                    failed += 1
                    logger.warning(f"Reminder {key} was not delivered")
            except Exception as e:
                failed += 1
                logger.error(f"Failed to send reminder {key}: {e}")

        if due:
            logger.info(
                f"Reminder sweep for {as_of.isoformat()}: "
                f"{len(sent_keys)}/{len(due)} sent"
            )

        return Return.ok(
            ReminderSweepResultDTO(
                as_of=as_of,
                total_checked=len(active_series),
                reminders_due=len(due),
                reminders_sent=len(sent_keys),
                reminders_failed=failed,
                reminder_keys=sent_keys,
            )
        )
