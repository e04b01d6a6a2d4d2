from .recurring_invoice_repository import SqlAlchemyRecurringInvoiceRepository
from .generated_invoice_repository import SqlAlchemyGeneratedInvoiceRepository

__all__ = [
    "SqlAlchemyRecurringInvoiceRepository",
    "SqlAlchemyGeneratedInvoiceRepository",
]
