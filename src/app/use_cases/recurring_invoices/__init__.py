"""Recurring invoice use cases"""
from .create_recurring_invoice import CreateRecurringInvoice
from .update_recurring_invoice import UpdateRecurringInvoice
from .set_recurring_invoice_status import SetRecurringInvoiceStatus
from .delete_recurring_invoice import DeleteRecurringInvoice
from .get_recurring_invoice import GetRecurringInvoice
from .list_recurring_invoices import ListRecurringInvoices
from .list_due_recurring_invoices import ListDueRecurringInvoices
from .generate_recurring_invoice import GenerateRecurringInvoice
from .materialize_line_items import MaterializeLineItems
from .preview_schedule import PreviewSchedule
from .list_generated_invoices import ListGeneratedInvoices
from .dispatch_reminders import DispatchReminders
from .dtos import (
    LineItemTemplateDTO,
    CreateRecurringInvoiceCommandDTO,
    UpdateRecurringInvoiceCommandDTO,
    RecurringInvoiceResponseDTO,
    ListRecurringInvoicesResponseDTO,
    MaterializedInvoiceDTO,
    GenerationResultDTO,
    GeneratedInvoiceDTO,
    ListGeneratedInvoicesResponseDTO,
    SchedulePreviewDTO,
    ReminderSweepResultDTO,
    RecurringGenerationResultDTO,
)

__all__ = [
    "CreateRecurringInvoice",
    "UpdateRecurringInvoice",
    "SetRecurringInvoiceStatus",
    "DeleteRecurringInvoice",
    "GetRecurringInvoice",
    "ListRecurringInvoices",
    "ListDueRecurringInvoices",
    "GenerateRecurringInvoice",
    "MaterializeLineItems",
    "PreviewSchedule",
    "ListGeneratedInvoices",
    "DispatchReminders",
    "LineItemTemplateDTO",
    "CreateRecurringInvoiceCommandDTO",
    "UpdateRecurringInvoiceCommandDTO",
    "RecurringInvoiceResponseDTO",
    "ListRecurringInvoicesResponseDTO",
    "MaterializedInvoiceDTO",
    "GenerationResultDTO",
    "GeneratedInvoiceDTO",
    "ListGeneratedInvoicesResponseDTO",
    "SchedulePreviewDTO",
    "ReminderSweepResultDTO",
    "RecurringGenerationResultDTO",
]
