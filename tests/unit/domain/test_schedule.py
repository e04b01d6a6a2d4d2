"""Unit tests for schedule rules

Tests cover:
- Due-ness by status and date
- Advancing after a generation (counter, anchor, timestamps)
- Completion at end_date keeping the last valid anchor
- Pause/resume keeping due-ness
- Reminder dates and idempotency keys
"""

import pytest
from datetime import date, datetime

from src.domain.errors import NotDueError
from src.domain.recurring_invoice import RecurringInvoiceStatus, RecurrenceFrequency
from src.domain.schedule import (
    ensure_due,
    generation_key,
    is_due,
    notification_due,
    plan_advance,
    record_generation,
    reminder_date,
    reminder_key,
)
from src.domain import status_machine


class TestIsDue:
    def test_due_on_anchor_date(self, make_series):
        series = make_series(next_generation_date=date(2024, 2, 1))
        assert is_due(series, date(2024, 2, 1)) is True

    def test_due_after_anchor_date(self, make_series):
        series = make_series(next_generation_date=date(2024, 2, 1))
        assert is_due(series, date(2024, 5, 1)) is True

    def test_not_due_before_anchor_date(self, make_series):
        series = make_series(next_generation_date=date(2024, 2, 1))
        assert is_due(series, date(2024, 1, 31)) is False

    @pytest.mark.parametrize(
        "status",
        [
            RecurringInvoiceStatus.PAUSED,
            RecurringInvoiceStatus.COMPLETED,
            RecurringInvoiceStatus.CANCELLED,
        ],
    )
    def test_never_due_unless_active(self, make_series, status):
        series = make_series(status=status, next_generation_date=date(2024, 2, 1))
        assert is_due(series, date(2024, 3, 1)) is False


class TestEnsureDue:
    def test_force_skips_date_check(self, make_series):
        series = make_series(next_generation_date=date(2024, 3, 1))
        ensure_due(series, date(2024, 1, 1), force=True)

    def test_force_does_not_skip_status_check(self, make_series):
        series = make_series(
            status=RecurringInvoiceStatus.PAUSED, next_generation_date=date(2024, 3, 1)
        )
        with pytest.raises(NotDueError):
            ensure_due(series, date(2024, 3, 1), force=True)

    def test_not_yet_due_raises(self, make_series):
        series = make_series(next_generation_date=date(2024, 3, 1))
        with pytest.raises(NotDueError) as exc_info:
            ensure_due(series, date(2024, 2, 28))

        assert exc_info.value.code == "NOT_DUE"


class TestRecordGeneration:
    def test_monthly_day_31_scenario(self, make_series):
        """
        Given: Monthly series, day 31, next date 2024-01-31
        When: It fires on 2024-01-31 and again on 2024-02-29
        Then: The anchor moves to 2024-02-29 then 2024-03-31, counter 1 then 2
        """
        # Arrange
        series = make_series(
            start_date=date(2024, 1, 31),
            day_of_month=31,
            next_generation_date=date(2024, 1, 31),
        )

        # Act & Assert
        record_generation(series, date(2024, 1, 31))
        assert series.next_generation_date == date(2024, 2, 29)
        assert series.total_invoices_generated == 1

        record_generation(series, date(2024, 2, 29))
        assert series.next_generation_date == date(2024, 3, 31)
        assert series.total_invoices_generated == 2
        assert series.status == RecurringInvoiceStatus.ACTIVE

    def test_yearly_series_completes_at_end_date(self, make_series):
        """
        Given: Yearly series starting 2024-03-01 with end_date 2025-02-15
        When: It fires on 2024-03-01
        Then: Counter is 1, status completed, next date stays 2024-03-01
        """
        # Arrange
        series = make_series(
            frequency=RecurrenceFrequency.YEARLY,
            start_date=date(2024, 3, 1),
            end_date=date(2025, 2, 15),
            day_of_month=1,
            next_generation_date=date(2024, 3, 1),
        )

        # Act
        plan = record_generation(series, date(2024, 3, 1))

        # Assert
        assert plan.completes is True
        assert plan.candidate_date == date(2025, 3, 1)
        assert series.total_invoices_generated == 1
        assert series.status == RecurringInvoiceStatus.COMPLETED
        assert series.next_generation_date == date(2024, 3, 1)

    def test_not_due_right_after_firing(self, make_series):
        series = make_series(next_generation_date=date(2024, 1, 31))

        record_generation(series, date(2024, 1, 31))

        assert is_due(series, date(2024, 1, 31)) is False
        with pytest.raises(NotDueError):
            record_generation(series, date(2024, 1, 31))
        assert series.total_invoices_generated == 1

    def test_fires_once_when_far_behind(self, make_series):
        """
        Given: A series whose anchor is months in the past
        When: It fires once
        Then: Exactly one period is consumed
        """
        series = make_series(next_generation_date=date(2024, 1, 31))

        record_generation(series, date(2024, 6, 15))

        assert series.total_invoices_generated == 1
        assert series.next_generation_date == date(2024, 2, 29)
        assert is_due(series, date(2024, 6, 15)) is True

    def test_end_date_on_next_anchor_keeps_series_active(self, make_series):
        series = make_series(
            day_of_month=15,
            start_date=date(2024, 1, 15),
            next_generation_date=date(2024, 1, 15),
            end_date=date(2024, 2, 15),
        )

        plan = record_generation(series, date(2024, 1, 15))

        assert plan.completes is False
        assert series.next_generation_date == date(2024, 2, 15)
        assert series.status == RecurringInvoiceStatus.ACTIVE

    def test_stamps_last_generated_at(self, make_series):
        series = make_series(next_generation_date=date(2024, 1, 31))
        generated_at = datetime(2024, 1, 31, 6, 0, 0)

        record_generation(series, date(2024, 1, 31), generated_at=generated_at)

        assert series.last_generated_at == generated_at

    def test_paused_series_is_not_advanced(self, make_series):
        series = make_series(
            status=RecurringInvoiceStatus.PAUSED, next_generation_date=date(2024, 1, 31)
        )

        with pytest.raises(NotDueError):
            record_generation(series, date(2024, 2, 15))

        assert series.next_generation_date == date(2024, 1, 31)
        assert series.total_invoices_generated == 0

    def test_forced_generation_consumes_pending_period(self, make_series):
        series = make_series(next_generation_date=date(2024, 3, 31))

        record_generation(series, date(2024, 3, 10), force=True)

        assert series.next_generation_date == date(2024, 4, 30)
        assert series.total_invoices_generated == 1


class TestPlanAdvance:
    def test_does_not_mutate_series(self, make_series):
        series = make_series(next_generation_date=date(2024, 1, 31))

        plan = plan_advance(series)

        assert plan.previous_date == date(2024, 1, 31)
        assert plan.next_generation_date == date(2024, 2, 29)
        assert series.next_generation_date == date(2024, 1, 31)


class TestPauseResume:
    def test_due_series_paused_then_resumed_is_still_due(self, make_series):
        """
        Given: A series due on 2024-02-01
        When: It is paused and later resumed without firing
        Then: It is due again with the same anchor
        """
        series = make_series(next_generation_date=date(2024, 2, 1))
        today = date(2024, 2, 10)
        assert is_due(series, today) is True

        status_machine.apply_transition(series, RecurringInvoiceStatus.PAUSED)
        assert is_due(series, today) is False

        status_machine.apply_transition(series, RecurringInvoiceStatus.ACTIVE)
        assert is_due(series, today) is True
        assert series.next_generation_date == date(2024, 2, 1)


class TestReminders:
    def test_reminder_date(self, make_series):
        series = make_series(next_generation_date=date(2024, 3, 1), notification_days_before=3)
        assert reminder_date(series) == date(2024, 2, 27)

    def test_no_reminder_date_when_disabled(self, make_series):
        series = make_series(notification_days_before=0)
        assert reminder_date(series) is None

    def test_notification_due_only_on_reminder_day(self, make_series):
        series = make_series(next_generation_date=date(2024, 3, 1), notification_days_before=3)

        assert notification_due(series, date(2024, 2, 27)) is True
        assert notification_due(series, date(2024, 2, 26)) is False
        assert notification_due(series, date(2024, 2, 28)) is False

    def test_notification_not_due_when_disabled(self, make_series):
        series = make_series(next_generation_date=date(2024, 3, 1), notification_days_before=0)
        assert notification_due(series, date(2024, 3, 1)) is False

    def test_notification_not_due_when_paused(self, make_series):
        series = make_series(
            status=RecurringInvoiceStatus.PAUSED,
            next_generation_date=date(2024, 3, 1),
            notification_days_before=3,
        )
        assert notification_due(series, date(2024, 2, 27)) is False

    def test_keys_are_per_series_and_anchor(self, make_series):
        series = make_series(id="abc", next_generation_date=date(2024, 3, 1))

        assert reminder_key(series) == "reminder:abc:2024-03-01"
        assert generation_key(series) == "recurring:abc:2024-03-01"
