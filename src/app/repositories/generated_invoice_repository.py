"""Generated Invoice Record Repository Interface

Defines the contract for the series -> invoice audit trail.
"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.generated_invoice import GeneratedInvoiceRecord


class GeneratedInvoiceRepository(ABC):
    """Repository interface for GeneratedInvoiceRecord persistence"""

    @abstractmethod
    async def create(self, record: GeneratedInvoiceRecord) -> GeneratedInvoiceRecord:
        """
        Create a new generated-invoice record

        Args:
            record: GeneratedInvoiceRecord entity to persist

        Returns:
            Created record with generated ID
        """
        pass

    @abstractmethod
    async def update(self, record: GeneratedInvoiceRecord) -> GeneratedInvoiceRecord:
        """
        Update an existing record (e.g. mark it as sent)

        Args:
            record: GeneratedInvoiceRecord with updated values

        Returns:
            Updated record
        """
        pass

    @abstractmethod
    async def list_by_series(
        self, series_id: str, limit: int = 50, offset: int = 0
    ) -> List[GeneratedInvoiceRecord]:
        """
        List records of a series, newest first

        Args:
            series_id: Series identifier
            limit: Maximum number of records to return
            offset: Offset for pagination

        Returns:
            List of records
        """
        pass
