from .recurring_invoice_repository import RecurringInvoiceRepository
from .generated_invoice_repository import GeneratedInvoiceRepository

__all__ = [
    "RecurringInvoiceRepository",
    "GeneratedInvoiceRepository",
]
