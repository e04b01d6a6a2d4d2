"""Series State Machine

Owns the legal status transitions of a recurring invoice series.

    active  <-> paused         (user)
    active   -> completed      (schedule engine only)
    active   -> cancelled      (user)
    paused   -> cancelled      (user)
    completed, cancelled       terminal
"""

from src.domain.errors import InvalidTransitionError, TerminalStateError
from src.domain.recurring_invoice import RecurringInvoice, RecurringInvoiceStatus

Status = RecurringInvoiceStatus

USER_TRANSITIONS = {
    Status.ACTIVE: {Status.PAUSED, Status.CANCELLED},
    Status.PAUSED: {Status.ACTIVE, Status.CANCELLED},
    Status.COMPLETED: set(),
    Status.CANCELLED: set(),
}


def check_transition(current: RecurringInvoiceStatus, target: RecurringInvoiceStatus) -> bool:
    """
    Validate a user-requested status change

    Args:
        current: Status the series is in
        target: Requested status

    Returns:
        True if the status changes, False for an idempotent same-state request

    Raises:
        TerminalStateError: current is completed or cancelled
        InvalidTransitionError: target is not reachable from current
    """
    current = RecurringInvoiceStatus(current)
    target = RecurringInvoiceStatus(target)

    if current.is_terminal:
        raise TerminalStateError(
            f"Series is {current.value}; it cannot move to {target.value}",
            reason="completed and cancelled are terminal states",
        )

    if current == target:
        return False

    if target not in USER_TRANSITIONS[current]:
        raise InvalidTransitionError(
            f"Cannot move a series from {current.value} to {target.value}",
            reason="completed is only reached by the schedule engine",
        )

    return True


def apply_transition(series: RecurringInvoice, target: RecurringInvoiceStatus) -> bool:
    """Apply a user-requested status change to series; see check_transition"""
    changed = check_transition(series.status, target)
    if changed:
        series.status = RecurringInvoiceStatus(target)
    return changed


def complete(series: RecurringInvoice) -> None:
    """Automatic active -> completed transition fired by the schedule engine"""
    current = RecurringInvoiceStatus(series.status)
    if current.is_terminal:
        raise TerminalStateError(f"Series is already {current.value}")
    if current != Status.ACTIVE:
        raise InvalidTransitionError(
            f"Only active series can complete, series is {current.value}"
        )
    series.status = Status.COMPLETED


def can_generate(status: RecurringInvoiceStatus) -> bool:
    return RecurringInvoiceStatus(status) == Status.ACTIVE
