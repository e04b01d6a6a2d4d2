"""Unit tests for UpdateRecurringInvoice use case"""

import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.recurring_invoices import (
    UpdateRecurringInvoice,
    UpdateRecurringInvoiceCommandDTO,
)
from src.domain.errors import ConcurrencyConflictError
from src.domain.recurring_invoice import RecurringInvoiceStatus, RecurrenceFrequency


@pytest.fixture
def mock_series_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.update = AsyncMock(side_effect=lambda series, expected_version: series)
    return repo


@pytest.mark.asyncio
class TestUpdateRecurringInvoice:
    async def test_updates_plain_fields(self, mock_uow, mock_series_repo, make_series):
        # Arrange
        mock_series_repo.get_by_id.return_value = make_series(version=3)
        use_case = UpdateRecurringInvoice(mock_uow, mock_series_repo)

        # Act
        result = await use_case.execute(
            "series_123",
            UpdateRecurringInvoiceCommandDTO(name="Renamed", notes="Thanks", notification_days_before=2),
        )

        # Assert
        assert result.is_ok()
        assert result.value.name == "Renamed"
        assert result.value.notes == "Thanks"
        assert result.value.notification_days_before == 2
        mock_series_repo.update.assert_awaited_once()
        assert mock_series_repo.update.call_args.kwargs["expected_version"] == 3
        mock_uow.commit.assert_awaited_once()

    async def test_unset_fields_are_untouched(self, mock_uow, mock_series_repo, make_series):
        mock_series_repo.get_by_id.return_value = make_series(name="Keep me", end_date=date(2025, 1, 1))
        use_case = UpdateRecurringInvoice(mock_uow, mock_series_repo)

        result = await use_case.execute("series_123", UpdateRecurringInvoiceCommandDTO(notes="x"))

        assert result.value.name == "Keep me"
        assert result.value.end_date == date(2025, 1, 1)

    async def test_clearing_end_date(self, mock_uow, mock_series_repo, make_series):
        mock_series_repo.get_by_id.return_value = make_series(end_date=date(2025, 1, 1))
        use_case = UpdateRecurringInvoice(mock_uow, mock_series_repo)

        result = await use_case.execute("series_123", UpdateRecurringInvoiceCommandDTO(end_date=None))

        assert result.value.end_date is None

    async def test_frequency_change_before_first_generation(self, mock_uow, mock_series_repo, make_series):
        mock_series_repo.get_by_id.return_value = make_series(total_invoices_generated=0)
        use_case = UpdateRecurringInvoice(mock_uow, mock_series_repo)

        result = await use_case.execute(
            "series_123",
            UpdateRecurringInvoiceCommandDTO(frequency=RecurrenceFrequency.QUARTERLY),
        )

        assert result.is_ok()
        assert result.value.frequency == RecurrenceFrequency.QUARTERLY

    async def test_frequency_change_after_first_generation_rejected(
        self, mock_uow, mock_series_repo, make_series
    ):
        """
        Given: A series that already generated an invoice
        When: Its frequency is changed
        Then: VALIDATION_ERROR is returned and nothing is written
        """
        mock_series_repo.get_by_id.return_value = make_series(
            total_invoices_generated=1, next_generation_date=date(2024, 2, 29)
        )
        use_case = UpdateRecurringInvoice(mock_uow, mock_series_repo)

        result = await use_case.execute(
            "series_123",
            UpdateRecurringInvoiceCommandDTO(frequency=RecurrenceFrequency.YEARLY),
        )

        assert result.error.code == "VALIDATION_ERROR"
        mock_series_repo.update.assert_not_called()

    async def test_start_date_recomputes_first_anchor(self, mock_uow, mock_series_repo, make_series):
        mock_series_repo.get_by_id.return_value = make_series(
            day_of_month=15, start_date=date(2024, 1, 1), next_generation_date=date(2024, 1, 15)
        )
        use_case = UpdateRecurringInvoice(mock_uow, mock_series_repo)

        result = await use_case.execute(
            "series_123", UpdateRecurringInvoiceCommandDTO(start_date=date(2024, 3, 20))
        )

        assert result.value.next_generation_date == date(2024, 4, 15)

    async def test_day_change_after_generation_retargets_pending_anchor(
        self, mock_uow, mock_series_repo, make_series
    ):
        mock_series_repo.get_by_id.return_value = make_series(
            total_invoices_generated=1, next_generation_date=date(2024, 2, 29)
        )
        use_case = UpdateRecurringInvoice(mock_uow, mock_series_repo)

        result = await use_case.execute("series_123", UpdateRecurringInvoiceCommandDTO(day_of_month=10))

        assert result.value.day_of_month == 10
        assert result.value.next_generation_date == date(2024, 2, 10)

    async def test_end_date_before_next_generation_rejected(
        self, mock_uow, mock_series_repo, make_series
    ):
        mock_series_repo.get_by_id.return_value = make_series(
            total_invoices_generated=1, next_generation_date=date(2024, 2, 29)
        )
        use_case = UpdateRecurringInvoice(mock_uow, mock_series_repo)

        result = await use_case.execute(
            "series_123", UpdateRecurringInvoiceCommandDTO(end_date=date(2024, 2, 15))
        )

        assert result.error.code == "VALIDATION_ERROR"

    @pytest.mark.parametrize(
        "status", [RecurringInvoiceStatus.COMPLETED, RecurringInvoiceStatus.CANCELLED]
    )
    async def test_terminal_series_cannot_be_edited(
        self, mock_uow, mock_series_repo, make_series, status
    ):
        mock_series_repo.get_by_id.return_value = make_series(status=status)
        use_case = UpdateRecurringInvoice(mock_uow, mock_series_repo)

        result = await use_case.execute("series_123", UpdateRecurringInvoiceCommandDTO(name="x"))

        assert result.error.code == "TERMINAL_STATE"
        mock_series_repo.update.assert_not_called()

    async def test_not_found(self, mock_uow, mock_series_repo):
        use_case = UpdateRecurringInvoice(mock_uow, mock_series_repo)

        result = await use_case.execute("missing", UpdateRecurringInvoiceCommandDTO(name="x"))

        assert result.error.code == "SERIES_NOT_FOUND"

    async def test_concurrent_modification(self, mock_uow, mock_series_repo, make_series):
        mock_series_repo.get_by_id.return_value = make_series()
        mock_series_repo.update.side_effect = ConcurrencyConflictError("modified concurrently")
        use_case = UpdateRecurringInvoice(mock_uow, mock_series_repo)

        result = await use_case.execute("series_123", UpdateRecurringInvoiceCommandDTO(name="x"))

        assert result.error.code == "CONCURRENCY_CONFLICT"
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_called()

    async def test_enabling_auto_send_requires_email(self, mock_uow, mock_series_repo, make_series):
        mock_series_repo.get_by_id.return_value = make_series(recipient_email=None)
        use_case = UpdateRecurringInvoice(mock_uow, mock_series_repo)

        result = await use_case.execute("series_123", UpdateRecurringInvoiceCommandDTO(auto_send=True))

        assert result.error.code == "VALIDATION_ERROR"
