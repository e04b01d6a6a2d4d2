"""Recurring Invoice Domain Errors

Every error is local to a single series. Use cases translate them into
``libs.result.Error`` values using the ``code`` attribute.
"""

from typing import Optional


class RecurringInvoiceError(Exception):
    """Base class for recurring invoice domain errors"""

    code = "RECURRING_INVOICE_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason


class ValidationError(RecurringInvoiceError):
    """Malformed series definition at create/update time"""

    code = "VALIDATION_ERROR"


class InvalidTransitionError(ValidationError):
    """Status change that is never allowed, even from a non-terminal state"""

    code = "INVALID_TRANSITION"


class TerminalStateError(RecurringInvoiceError):
    """Status change requested on a completed or cancelled series"""

    code = "TERMINAL_STATE"


class NotDueError(RecurringInvoiceError):
    """Generation requested for a series that is not due"""

    code = "NOT_DUE"


class NotFoundError(RecurringInvoiceError):
    code = "SERIES_NOT_FOUND"


class ConcurrencyConflictError(RecurringInvoiceError):
    """Stale optimistic-concurrency token detected while saving a series"""

    code = "CONCURRENCY_CONFLICT"
