"""Unit tests for SetRecurringInvoiceStatus use case"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.recurring_invoices import SetRecurringInvoiceStatus
from src.domain.errors import ConcurrencyConflictError
from src.domain.recurring_invoice import RecurringInvoiceStatus as Status


@pytest.fixture
def mock_series_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.update = AsyncMock(side_effect=lambda series, expected_version: series)
    return repo


@pytest.mark.asyncio
class TestSetRecurringInvoiceStatus:
    async def test_pause_active_series(self, mock_uow, mock_series_repo, make_series):
        # Arrange
        mock_series_repo.get_by_id.return_value = make_series(status=Status.ACTIVE, version=2)
        use_case = SetRecurringInvoiceStatus(mock_uow, mock_series_repo)

        # Act
        result = await use_case.execute("series_123", Status.PAUSED)

        # Assert
        assert result.is_ok()
        assert result.value.status == Status.PAUSED
        assert mock_series_repo.update.call_args.kwargs["expected_version"] == 2
        mock_uow.commit.assert_awaited_once()

    async def test_resume_keeps_next_generation_date(self, mock_uow, mock_series_repo, make_series):
        series = make_series(status=Status.PAUSED)
        anchor = series.next_generation_date
        mock_series_repo.get_by_id.return_value = series
        use_case = SetRecurringInvoiceStatus(mock_uow, mock_series_repo)

        result = await use_case.execute("series_123", Status.ACTIVE)

        assert result.value.status == Status.ACTIVE
        assert result.value.next_generation_date == anchor

    async def test_same_status_is_a_no_op(self, mock_uow, mock_series_repo, make_series):
        mock_series_repo.get_by_id.return_value = make_series(status=Status.PAUSED)
        use_case = SetRecurringInvoiceStatus(mock_uow, mock_series_repo)

        result = await use_case.execute("series_123", Status.PAUSED)

        assert result.is_ok()
        assert result.value.status == Status.PAUSED
        mock_series_repo.update.assert_not_called()
        mock_uow.commit.assert_not_called()

    @pytest.mark.parametrize("current", [Status.COMPLETED, Status.CANCELLED])
    @pytest.mark.parametrize("target", list(Status))
    async def test_terminal_state_rejects_every_target(
        self, mock_uow, mock_series_repo, make_series, current, target
    ):
        mock_series_repo.get_by_id.return_value = make_series(status=current)
        use_case = SetRecurringInvoiceStatus(mock_uow, mock_series_repo)

        result = await use_case.execute("series_123", target)

        assert result.error.code == "TERMINAL_STATE"
        mock_series_repo.update.assert_not_called()

    async def test_user_cannot_complete(self, mock_uow, mock_series_repo, make_series):
        mock_series_repo.get_by_id.return_value = make_series(status=Status.ACTIVE)
        use_case = SetRecurringInvoiceStatus(mock_uow, mock_series_repo)

        result = await use_case.execute("series_123", Status.COMPLETED)

        assert result.error.code == "INVALID_TRANSITION"

    async def test_not_found(self, mock_uow, mock_series_repo):
        use_case = SetRecurringInvoiceStatus(mock_uow, mock_series_repo)

        result = await use_case.execute("missing", Status.PAUSED)

        assert result.error.code == "SERIES_NOT_FOUND"

    async def test_concurrent_modification(self, mock_uow, mock_series_repo, make_series):
        mock_series_repo.get_by_id.return_value = make_series(status=Status.ACTIVE)
        mock_series_repo.update.side_effect = ConcurrencyConflictError("modified concurrently")
        use_case = SetRecurringInvoiceStatus(mock_uow, mock_series_repo)

        result = await use_case.execute("series_123", Status.CANCELLED)

        assert result.error.code == "CONCURRENCY_CONFLICT"
        mock_uow.rollback.assert_awaited_once()
