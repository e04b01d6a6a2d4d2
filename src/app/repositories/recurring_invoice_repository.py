"""Recurring Invoice Repository Interface

Defines the contract for recurring invoice series persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, List
from src.domain.recurring_invoice import RecurringInvoice, RecurringInvoiceStatus


class RecurringInvoiceRepository(ABC):
    """
    Repository interface for RecurringInvoice persistence

    Writes are guarded by the series version: an update carrying a stale
    version raises ConcurrencyConflictError instead of overwriting.
    """

    @abstractmethod
    async def get_by_id(self, series_id: str) -> Optional[RecurringInvoice]:
        """
        Retrieve a series by ID

        Args:
            series_id: Series identifier

        Returns:
            RecurringInvoice if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_series(
        self,
        workspace_id: Optional[str] = None,
        status: Optional[RecurringInvoiceStatus] = None,
        client_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[RecurringInvoice]:
        """
        List series, most recently created first

        Args:
            workspace_id: Optional filter by workspace
            status: Optional filter by status
            client_id: Optional filter by client
            limit: Maximum number of series to return
            offset: Offset for pagination

        Returns:
            List of series
        """
        pass

    @abstractmethod
    async def get_due(self, as_of: date) -> List[RecurringInvoice]:
        """
        Retrieve active series whose next_generation_date <= as_of

        Args:
            as_of: Reference date

        Returns:
            List of due series ordered by next_generation_date
        """
        pass

    @abstractmethod
    async def get_active(self) -> List[RecurringInvoice]:
        """
        Retrieve all active series

        Used by the reminder sweep.

        Returns:
            List of active series
        """
        pass

    @abstractmethod
    async def create(self, series: RecurringInvoice) -> RecurringInvoice:
        """
        Create a new series

        Args:
            series: RecurringInvoice entity to persist

        Returns:
            Created RecurringInvoice
        """
        pass

    @abstractmethod
    async def update(self, series: RecurringInvoice, expected_version: int) -> RecurringInvoice:
        """
        Persist edited definition or status fields

        Args:
            series: Series carrying the new values
            expected_version: Version the caller loaded

        Returns:
            Updated RecurringInvoice with its version bumped

        Raises:
            ConcurrencyConflictError: stored version differs from expected_version
        """
        pass

    @abstractmethod
    async def save_schedule_state(self, series: RecurringInvoice, expected_version: int) -> RecurringInvoice:
        """
        Write back next_generation_date, status, counter and last_generated_at

        The write only succeeds if the stored series still has expected_version
        and is still active.

        Args:
            series: Series after a generation was applied
            expected_version: Version the caller loaded

        Returns:
            Updated RecurringInvoice with its version bumped

        Raises:
            ConcurrencyConflictError: series changed or left the active state meanwhile
        """
        pass

    @abstractmethod
    async def delete(self, series_id: str) -> bool:
        """
        Delete a series and its generated-invoice records

        Args:
            series_id: Series identifier

        Returns:
            True if a series was deleted, False if it did not exist
        """
        pass
