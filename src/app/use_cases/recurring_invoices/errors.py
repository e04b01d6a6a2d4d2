"""Translation of domain exceptions into Result errors"""

from libs.result import Error
from src.domain.errors import RecurringInvoiceError


def to_error(exc: RecurringInvoiceError) -> Error:
    return Error(code=exc.code, message=exc.message, reason=exc.reason)
