"""Unit tests for DispatchReminders use case"""

import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.recurring_invoices import DispatchReminders
from src.domain.recurring_invoice import RecurringInvoiceStatus


@pytest.fixture
def mock_series_repo():
    repo = MagicMock()
    repo.get_active = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_notification_service():
    service = MagicMock()
    service.send_reminder = AsyncMock(return_value=True)
    return service


@pytest.mark.asyncio
class TestDispatchReminders:
    async def test_sends_only_reminders_due_today(
        self, mock_series_repo, mock_notification_service, make_series
    ):
        """
        Given: Three active series with different reminder days
        When: Reminders are dispatched for 2024-02-27
        Then: Only the series whose reminder day is 2024-02-27 is notified
        """
        # Arrange
        mock_series_repo.get_active.return_value = [
            make_series(id="due", next_generation_date=date(2024, 3, 1), notification_days_before=3),
            make_series(id="later", next_generation_date=date(2024, 3, 5), notification_days_before=3),
            make_series(id="off", next_generation_date=date(2024, 2, 27), notification_days_before=0),
        ]
        use_case = DispatchReminders(mock_series_repo, mock_notification_service)

        # Act
        result = await use_case.execute(date(2024, 2, 27))

        # Assert
        assert result.is_ok()
        assert result.value.total_checked == 3
        assert result.value.reminders_due == 1
        assert result.value.reminders_sent == 1
        assert result.value.reminder_keys == ["reminder:due:2024-03-01"]
        mock_notification_service.send_reminder.assert_awaited_once()

    async def test_paused_series_gets_no_reminder(
        self, mock_series_repo, mock_notification_service, make_series
    ):
        mock_series_repo.get_active.return_value = [
            make_series(
                status=RecurringInvoiceStatus.PAUSED,
                next_generation_date=date(2024, 3, 1),
                notification_days_before=3,
            )
        ]
        use_case = DispatchReminders(mock_series_repo, mock_notification_service)

        result = await use_case.execute(date(2024, 2, 27))

        assert result.value.reminders_due == 0
        mock_notification_service.send_reminder.assert_not_called()

    async def test_failures_do_not_abort_sweep(
        self, mock_series_repo, mock_notification_service, make_series
    ):
        mock_series_repo.get_active.return_value = [
            make_series(id="a", next_generation_date=date(2024, 3, 1), notification_days_before=3),
            make_series(id="b", next_generation_date=date(2024, 3, 1), notification_days_before=3),
            make_series(id="c", next_generation_date=date(2024, 3, 1), notification_days_before=3),
        ]
        mock_notification_service.send_reminder.side_effect = [
            RuntimeError("webhook down"),
            False,
            True,
        ]
        use_case = DispatchReminders(mock_series_repo, mock_notification_service)

        result = await use_case.execute(date(2024, 2, 27))

        assert result.value.reminders_due == 3
        assert result.value.reminders_sent == 1
        assert result.value.reminders_failed == 2
        assert result.value.reminder_keys == ["reminder:c:2024-03-01"]

    async def test_repository_failure(self, mock_series_repo, mock_notification_service):
        mock_series_repo.get_active.side_effect = Exception("Database connection error")
        use_case = DispatchReminders(mock_series_repo, mock_notification_service)

        result = await use_case.execute(date(2024, 2, 27))

        assert result.error.code == "DISPATCH_REMINDERS_FAILED"
