"""Background workers for recurring invoice service"""
from .recurring_generation import RecurringInvoiceWorker

__all__ = ["RecurringInvoiceWorker"]
