import pytest
from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock

from src.domain.recurring_invoice import (
    RecurringInvoice,
    RecurringInvoiceStatus,
    RecurrenceFrequency,
)


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def make_series():
    """Factory for RecurringInvoice entities with sensible defaults"""

    def _make(**overrides):
        values = dict(
            id="series_123",
            workspace_id="ws_1",
            client_id="client_456",
            name="Monthly maintenance",
            frequency=RecurrenceFrequency.MONTHLY,
            status=RecurringInvoiceStatus.ACTIVE,
            start_date=date(2024, 1, 31),
            end_date=None,
            day_of_month=31,
            next_generation_date=date(2024, 1, 31),
            auto_send=False,
            recipient_email=None,
            notification_days_before=0,
            total_invoices_generated=0,
            currency="EUR",
            items=[
                {
                    "product_id": None,
                    "description": "Service",
                    "quantity": "2",
                    "unit_price": "50.00",
                    "tax_rate": "0",
                }
            ],
            version=1,
            created_at=datetime(2024, 1, 1, 9, 0, 0),
            updated_at=datetime(2024, 1, 1, 9, 0, 0),
        )
        values.update(overrides)
        return RecurringInvoice(**values)

    return _make
