"""GenerateRecurringInvoice Use Case

Fires one generation event of a series: materializes its line items,
creates the invoice through the invoicing service and advances the schedule.
"""

import logging
from datetime import date, datetime
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.invoice_gateway import InvoiceDraftDTO, InvoiceGateway, InvoiceGatewayError
from src.app.services.line_item_resolver import LineItemResolver, subtotal
from src.app.services.product_catalog import CatalogLookupError
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from src.app.repositories.generated_invoice_repository import GeneratedInvoiceRepository
from src.domain.errors import ConcurrencyConflictError, NotFoundError, RecurringInvoiceError
from src.domain.generated_invoice import GeneratedInvoiceRecord
from src.domain.recurring_invoice import RecurringInvoiceStatus
from src.domain.schedule import ensure_due, generation_key, record_generation
from .dtos import GenerationResultDTO
from .errors import to_error

logger = logging.getLogger(__name__)


class GenerateRecurringInvoice:
    """
    Use Case: Generate the next invoice of a series

    Business Rules:
    1. Only active series whose next_generation_date <= as_of are fired
       (force=True skips the date check, never the status check)
    2. Exactly one period is consumed per call; catching up missed periods
       means calling again
    3. The invoice is created with idempotency key recurring:{series_id}:{anchor},
       so a retried call cannot create a second invoice for the same anchor
    4. The schedule is written back with a compare-and-swap on the version
       and on status == active; a conflict retries the whole cycle once
    5. When the next anchor would pass end_date the series completes and
       keeps its last valid anchor
    6. auto_send delivery happens after commit; a delivery failure is logged
       and reported, it does not undo the generation
    7. The invoice is created before the schedule is saved. A series paused
       between load and save is left untouched and reuses that invoice through
       the idempotency key once resumed; a series cancelled in that window
       leaves the invoice orphaned in the invoicing service

    Flow:
    1. Load series and check due-ness
    2. Materialize line items
    3. Create invoice
    4. Advance schedule (counter, anchor or completion)
    5. Save with version check and record the generated invoice
    6. Commit transaction
    7. Auto-send if configured
    8. Return response
    """

    MAX_ATTEMPTS = 2

    def __init__(
        self,
        uow: UnitOfWork,
        series_repo: RecurringInvoiceRepository,
        generated_repo: GeneratedInvoiceRepository,
        resolver: LineItemResolver,
        invoice_gateway: InvoiceGateway,
    ):
        self.uow = uow
        self.series_repo = series_repo
        self.generated_repo = generated_repo
        self.resolver = resolver
        self.invoice_gateway = invoice_gateway

    async def execute(
        self, series_id: str, as_of: date, force: bool = False
    ) -> Result[GenerationResultDTO]:
        """
        Execute one generation

        Args:
            series_id: Series identifier
            as_of: Date the scheduler runs for
            force: Generate now even if next_generation_date is in the future

        Returns:
            Result[GenerationResultDTO]: Success with the generation outcome or error
        """
        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            try:
                return Return.ok(await self._fire(series_id, as_of, force))

            except ConcurrencyConflictError as e:
                await self.uow.rollback()
                if attempt < self.MAX_ATTEMPTS:
                    logger.warning(
                        f"Concurrent update on recurring invoice {series_id}, "
                        f"retrying from a fresh copy"
                    )
                    continue
                logger.error(
                    f"Recurring invoice {series_id} still conflicting after "
                    f"{self.MAX_ATTEMPTS} attempts, leaving it for the next run"
                )
                return Return.err(to_error(e))

            except RecurringInvoiceError as e:
                await self.uow.rollback()
                return Return.err(to_error(e))

            except CatalogLookupError as e:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="CATALOG_LOOKUP_FAILED",
                        message=f"Failed to price line items of recurring invoice {series_id}",
                        reason=str(e),
                    )
                )

            except InvoiceGatewayError as e:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="INVOICE_CREATION_FAILED",
                        message=f"Invoicing service failed for recurring invoice {series_id}",
                        reason=str(e),
                    )
                )

            except Exception as e:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code="GENERATE_RECURRING_INVOICE_FAILED",
                        message="Failed to generate recurring invoice",
                        reason=str(e),
                    )
                )

    async def _fire(self, series_id: str, as_of: date, force: bool) -> GenerationResultDTO:
        # Step 1: Load series and check due-ness
        series = await self.series_repo.get_by_id(series_id)
        if series is None:
            raise NotFoundError(f"Recurring invoice {series_id} not found")

        ensure_due(series, as_of, force=force)

        expected_version = series.version
        generation_date = series.next_generation_date
        idempotency_key = generation_key(series)

        # Step 2: Materialize line items
        line_items = await self.resolver.materialize(series)
        items_subtotal = subtotal(line_items)

        # Step 3: Create invoice
        invoice_id = await self.invoice_gateway.create_invoice(
            InvoiceDraftDTO(
                client_id=series.client_id,
                series_id=series.id,
                issue_date=generation_date,
                currency=series.currency,
                line_items=line_items,
                subtotal=items_subtotal,
                template_name=series.template_name,
                notes=series.notes,
                idempotency_key=idempotency_key,
            )
        )

        # Step 4: Advance schedule; status is re-checked right before advancing
        generated_at = datetime.utcnow()
        plan = record_generation(series, as_of, generated_at=generated_at, force=force)
        series.updated_at = generated_at

        # Step 5: Save with version check and record the generated invoice
        await self.series_repo.save_schedule_state(series, expected_version=expected_version)

        record = await self.generated_repo.create(
            GeneratedInvoiceRecord(
                series_id=series.id,
                invoice_id=invoice_id,
                sequence_number=series.total_invoices_generated,
                generation_date=generation_date,
                generated_at=generated_at,
            )
        )

        # Step 6: Commit transaction
        await self.uow.commit()

        logger.info(
            f"Generated invoice {invoice_id} for recurring invoice {series.id} "
            f"(#{series.total_invoices_generated}, anchor {generation_date.isoformat()})"
        )
        if plan.completes:
            logger.info(
                f"Recurring invoice {series.id} completed: next date "
                f"{plan.candidate_date.isoformat()} is past end_date {series.end_date.isoformat()}"
            )

        # Step 7: Auto-send
        sent = False
        if series.auto_send and series.recipient_email:
            sent = await self._send(invoice_id, series.recipient_email, series.id)
            if sent:
                await self._mark_sent(record)

        # Step 8: Build response
        return GenerationResultDTO(
            series_id=series.id,
            invoice_id=invoice_id,
            sequence_number=series.total_invoices_generated,
            generation_date=generation_date,
            next_generation_date=series.next_generation_date,
            status=RecurringInvoiceStatus(series.status),
            completed=plan.completes,
            sent=sent,
            line_items=line_items,
            subtotal=items_subtotal,
            total_invoices_generated=series.total_invoices_generated,
        )

    async def _send(self, invoice_id: str, recipient_email: str, series_id: str) -> bool:
        try:
            sent = await self.invoice_gateway.send_invoice(invoice_id, recipient_email)
        except InvoiceGatewayError as e:
            logger.error(
                f"Auto-send of invoice {invoice_id} (recurring invoice {series_id}) failed: {e}"
            )
            return False

        if not sent:
            logger.warning(f"Invoice {invoice_id} was not accepted for delivery to {recipient_email}")
        return sent

    async def _mark_sent(self, record: GeneratedInvoiceRecord) -> None:
        # The generation is already committed; a failure here only loses the sent flag
        try:
            record.sent = True
            await self.generated_repo.update(record)
            await self.uow.commit()
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Failed to mark invoice {record.invoice_id} as sent: {e}")
