"""Schedule Rules

Pure functions deciding due-ness, reminders and how a series moves forward
after an invoice has been generated. No I/O happens here; the generation use
case wires these rules to the repositories and the invoicing service.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from src.domain import status_machine
from src.domain.calendar_math import advance
from src.domain.errors import NotDueError
from src.domain.recurring_invoice import RecurringInvoice, RecurringInvoiceStatus


@dataclass(frozen=True)
class ScheduleAdvance:
    """Outcome of advancing a series by one period"""

    previous_date: date
    candidate_date: date
    next_generation_date: date
    completes: bool


def is_due(series: RecurringInvoice, today: date) -> bool:
    return (
        status_machine.can_generate(series.status)
        and today >= series.next_generation_date
    )


def ensure_due(series: RecurringInvoice, today: date, force: bool = False) -> None:
    """
    Raise NotDueError unless the series may generate now

    force skips the date check (manual "generate now") but never the status check.
    """
    if not status_machine.can_generate(series.status):
        raise NotDueError(
            f"Series {series.id} is {RecurringInvoiceStatus(series.status).value}",
            reason="Only active series generate invoices",
        )
    if not force and today < series.next_generation_date:
        raise NotDueError(
            f"Series {series.id} is not due before {series.next_generation_date.isoformat()}",
            reason=f"as_of {today.isoformat()} is earlier than next_generation_date",
        )


def plan_advance(series: RecurringInvoice) -> ScheduleAdvance:
    """
    Compute where the anchor moves after one generation

    The anchor never passes end_date: when the candidate would, the series
    completes and keeps its last valid anchor.
    """
    current = series.next_generation_date
    candidate = advance(current, series.frequency, series.day_of_month)
    completes = series.end_date is not None and candidate > series.end_date
    return ScheduleAdvance(
        previous_date=current,
        candidate_date=candidate,
        next_generation_date=current if completes else candidate,
        completes=completes,
    )


def record_generation(
    series: RecurringInvoice,
    today: date,
    generated_at: Optional[datetime] = None,
    force: bool = False,
) -> ScheduleAdvance:
    """
    Apply one generation event to series in place

    Increments the counter, stamps last_generated_at and either advances
    next_generation_date or completes the series. Exactly one period is
    consumed per call, however far today is past the anchor.

    Raises:
        NotDueError: series is not active, or not yet due and force is False
    """
    ensure_due(series, today, force=force)

    plan = plan_advance(series)
    series.total_invoices_generated = (series.total_invoices_generated or 0) + 1
    series.last_generated_at = generated_at or datetime.utcnow()

    if plan.completes:
        status_machine.complete(series)
    else:
        series.next_generation_date = plan.next_generation_date

    return plan


def reminder_date(series: RecurringInvoice) -> Optional[date]:
    if not series.notification_days_before:
        return None
    return series.next_generation_date - timedelta(days=series.notification_days_before)


def notification_due(series: RecurringInvoice, today: date) -> bool:
    """True on the single day a pre-generation reminder should go out"""
    if series.notification_days_before <= 0:
        return False
    if not status_machine.can_generate(series.status):
        return False
    return today == reminder_date(series)


def reminder_key(series: RecurringInvoice) -> str:
    """Idempotency key for a reminder: one per (series, anchor)"""
    return f"reminder:{series.id}:{series.next_generation_date.isoformat()}"


def generation_key(series: RecurringInvoice) -> str:
    """Idempotency key for a generation: one per (series, anchor)"""
    return f"recurring:{series.id}:{series.next_generation_date.isoformat()}"
