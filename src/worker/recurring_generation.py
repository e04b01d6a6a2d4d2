"""Recurring Invoice Generation Background Worker

Fires every due recurring invoice series once per run and sends the
pre-generation reminders due that day.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
import time
from datetime import date, datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.recurring_invoice_repository import SqlAlchemyRecurringInvoiceRepository
from src.adapter.repositories.generated_invoice_repository import SqlAlchemyGeneratedInvoiceRepository
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.invoice_gateway import InvoiceGateway
from src.app.services.line_item_resolver import LineItemResolver
from src.app.services.notification_service import NotificationService
from src.app.use_cases.recurring_invoices import (
    DispatchReminders,
    GenerateRecurringInvoice,
    RecurringGenerationResultDTO,
)
from src.depends import build_invoice_gateway, build_line_item_resolver

logger = logging.getLogger(__name__)

# Outcomes that leave the series for a later run rather than counting as failures
SKIPPED_ERROR_CODES = ("NOT_DUE", "CONCURRENCY_CONFLICT")


class RecurringInvoiceWorker:
    """
    Background worker for recurring invoice generation

    Features:
    - Fires each due series exactly once per run; a series several periods
      behind catches up one period per run
    - One isolated session per series so a failure never affects the others
    - Safe to run on several replicas: the version check lets only one of
      them advance a given anchor
    - Sends the reminders due on the run date after the generation sweep

    Usage:
        # Run once for today
        worker = RecurringInvoiceWorker()
        result = await worker.run_once()

        # Run once for a given date
        result = await worker.run_once(as_of=date(2024, 2, 1))

        # Run continuously
        await worker.run_forever()
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        resolver: Optional[LineItemResolver] = None,
        invoice_gateway: Optional[InvoiceGateway] = None,
        notification_service: Optional[NotificationService] = None,
        reminders_enabled: Optional[bool] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            resolver: Line-item resolver (defaults to the configured price policy)
            invoice_gateway: Invoicing service client (defaults to INVOICE_SERVICE_URL)
            notification_service: Reminder channel (defaults to log + optional webhook)
            reminders_enabled: Run the reminder sweep (defaults to RECURRING_REMINDERS_ENABLED)
        """
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.resolver = resolver or build_line_item_resolver()
        self.invoice_gateway = invoice_gateway or build_invoice_gateway()
        self.notification_service = notification_service or create_notification_service(
            ApplicationConfig.REMINDER_WEBHOOK_URL
        )
        self.reminders_enabled = (
            ApplicationConfig.RECURRING_REMINDERS_ENABLED
            if reminders_enabled is None
            else reminders_enabled
        )

        # Create engine and session factory
        self.engine = create_async_engine(self.db_uri, echo=False, future=True)
        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

        logger.info("RecurringInvoiceWorker initialized")

    async def run_once(
        self, as_of: Optional[date] = None, send_reminders: Optional[bool] = None
    ) -> RecurringGenerationResultDTO:
        """
        Run one generation sweep followed by the reminder sweep

        Args:
            as_of: Date to run for (defaults to today, UTC)
            send_reminders: Override reminders_enabled for this run

        Returns:
            RecurringGenerationResultDTO with summary
        """
        start_time = time.time()
        as_of = as_of or datetime.utcnow().date()

        logger.info(f"Starting recurring invoice generation for {as_of.isoformat()}")

        invoices_generated = 0
        series_completed = 0
        failed = 0
        skipped = 0

        async with self.async_session_factory() as session:
            due_series = await SqlAlchemyRecurringInvoiceRepository(session).get_due(as_of)
            due_ids = [series.id for series in due_series]

        total_due = len(due_ids)
        logger.info(f"Found {total_due} due recurring invoices")

        for series_id in due_ids:
            try:
                # Create a new session for each series to isolate transactions
                async with self.async_session_factory() as series_session:
                    use_case = GenerateRecurringInvoice(
                        uow=SqlAlchemyUnitOfWork(series_session),
                        series_repo=SqlAlchemyRecurringInvoiceRepository(series_session),
                        generated_repo=SqlAlchemyGeneratedInvoiceRepository(series_session),
                        resolver=self.resolver,
                        invoice_gateway=self.invoice_gateway,
                    )
                    result = await use_case.execute(series_id, as_of)

                if result.is_err():
                    if result.error.code in SKIPPED_ERROR_CODES:
                        skipped += 1
                        logger.info(
                            f"Skipped recurring invoice {series_id}: {result.error.message}"
                        )
                    else:
                        failed += 1
                        logger.error(
                            f"Failed to generate recurring invoice {series_id}: "
                            f"{result.error.code} {result.error.message}"
                        )
                    continue

                invoices_generated += 1
                if result.value.completed:
                    series_completed += 1

            except Exception as e:
                logger.error(f"Unexpected error processing recurring invoice {series_id}: {e}")
                failed += 1

        if send_reminders is None:
            send_reminders = self.reminders_enabled

        reminders_sent = 0
        if send_reminders:
            reminders_sent = await self._dispatch_reminders(as_of)

        execution_time_ms = int((time.time() - start_time) * 1000)

        result = RecurringGenerationResultDTO(
            as_of=as_of,
            total_due=total_due,
            invoices_generated=invoices_generated,
            series_completed=series_completed,
            failed=failed,
            skipped=skipped,
            reminders_sent=reminders_sent,
            execution_time_ms=execution_time_ms,
        )

        logger.info(
            f"Recurring generation complete: "
            f"{invoices_generated}/{total_due} generated, "
            f"{series_completed} completed, {failed} failed, {skipped} skipped, "
            f"{reminders_sent} reminders, {execution_time_ms}ms"
        )

        return result

    async def _dispatch_reminders(self, as_of: date) -> int:
        try:
            async with self.async_session_factory() as session:
                use_case = DispatchReminders(
                    series_repo=SqlAlchemyRecurringInvoiceRepository(session),
                    notification_service=self.notification_service,
                )
                result = await use_case.execute(as_of)
        except Exception as e:
            logger.error(f"Reminder sweep failed: {e}")
            return 0

        if result.is_err():
            logger.error(f"Reminder sweep failed: {result.error.message}")
            return 0

        return result.value.reminders_sent

    async def run_forever(self, interval_seconds: Optional[int] = None):
        """
        Run sweeps continuously

        Re-running within the same day is harmless: a fired series is no longer
        due, so only reminders of a day may be resent after a restart.

        Args:
            interval_seconds: Seconds between sweeps
                (defaults to RECURRING_GENERATION_INTERVAL_SECONDS)
        """
        interval_seconds = interval_seconds or ApplicationConfig.RECURRING_GENERATION_INTERVAL_SECONDS

        if not ApplicationConfig.RECURRING_GENERATION_ENABLED:
            logger.warning("Recurring generation is disabled, worker not started")
            return

        logger.info(f"Starting continuous recurring generation with {interval_seconds}s interval")

        last_reminder_day = None

        while True:
            try:
                today = datetime.utcnow().date()
                send_reminders = self.reminders_enabled and last_reminder_day != today
                result = await self.run_once(as_of=today, send_reminders=send_reminders)
                if send_reminders:
                    last_reminder_day = today
                logger.info(
                    f"Processed recurring generation: {result.invoices_generated} generated"
                )

            except Exception as e:
                logger.error(f"Recurring generation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        await self.engine.dispose()
        logger.info("RecurringInvoiceWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run for today
        python -m src.worker.recurring_generation

        # Run for a specific date
        python -m src.worker.recurring_generation --as-of 2024-02-01

        # Run continuously
        python -m src.worker.recurring_generation --continuous
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Recurring Invoice Generation Worker")
    parser.add_argument(
        "--as-of", type=date.fromisoformat, help="Run date (YYYY-MM-DD), defaults to today"
    )
    parser.add_argument(
        "--continuous", action="store_true", help="Run continuously"
    )
    args = parser.parse_args()

    worker = RecurringInvoiceWorker()

    try:
        if args.continuous:
            await worker.run_forever()
        else:
            result = await worker.run_once(as_of=args.as_of)
            print(f"Recurring generation complete for {result.as_of.isoformat()}:")
            print(f"  Due series: {result.total_due}")
            print(f"  Invoices generated: {result.invoices_generated}")
            print(f"  Series completed: {result.series_completed}")
            print(f"  Failed: {result.failed}")
            print(f"  Skipped: {result.skipped}")
            print(f"  Reminders sent: {result.reminders_sent}")
            print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
