from .base import BaseModel, generate_uuid
from .recurring_invoice import (
    RecurringInvoice,
    RecurringInvoiceStatus,
    RecurrenceFrequency,
    LineItemTemplate,
)
from .generated_invoice import GeneratedInvoiceRecord
from .errors import (
    RecurringInvoiceError,
    ValidationError,
    InvalidTransitionError,
    TerminalStateError,
    NotDueError,
    NotFoundError,
    ConcurrencyConflictError,
)

__all__ = [
    "BaseModel",
    "generate_uuid",
    "RecurringInvoice",
    "RecurringInvoiceStatus",
    "RecurrenceFrequency",
    "LineItemTemplate",
    "GeneratedInvoiceRecord",
    "RecurringInvoiceError",
    "ValidationError",
    "InvalidTransitionError",
    "TerminalStateError",
    "NotDueError",
    "NotFoundError",
    "ConcurrencyConflictError",
]
