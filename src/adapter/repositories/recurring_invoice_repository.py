"""SQLAlchemy Recurring Invoice Repository Implementation

Implements series persistence using SQLAlchemy async session. Writes are
compare-and-swap UPDATE statements on the version column.
"""

from datetime import date
from typing import Optional, List
from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.recurring_invoice_repository import RecurringInvoiceRepository
from src.domain.errors import ConcurrencyConflictError
from src.domain.generated_invoice import GeneratedInvoiceRecord
from src.domain.recurring_invoice import RecurringInvoice, RecurringInvoiceStatus

# Columns a definition edit or a status change may write
DEFINITION_FIELDS = (
    "name",
    "frequency",
    "status",
    "start_date",
    "end_date",
    "day_of_month",
    "next_generation_date",
    "auto_send",
    "recipient_email",
    "notification_days_before",
    "currency",
    "template_name",
    "notes",
    "items",
    "updated_at",
)

# Columns written back after a generation
SCHEDULE_FIELDS = (
    "next_generation_date",
    "status",
    "total_invoices_generated",
    "last_generated_at",
    "updated_at",
)


class SqlAlchemyRecurringInvoiceRepository(RecurringInvoiceRepository):
    """
    SQLAlchemy implementation of RecurringInvoiceRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, series_id: str) -> Optional[RecurringInvoice]:
        """
        Retrieve a series by ID

        Args:
            series_id: Series identifier

        Returns:
            RecurringInvoice if found, None otherwise
        """
        statement = select(RecurringInvoice).where(RecurringInvoice.id == series_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def list_series(
        self,
        workspace_id: Optional[str] = None,
        status: Optional[RecurringInvoiceStatus] = None,
        client_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[RecurringInvoice]:
        statement = select(RecurringInvoice)

        if workspace_id:
            statement = statement.where(RecurringInvoice.workspace_id == workspace_id)
        if status:
            statement = statement.where(RecurringInvoice.status == status)
        if client_id:
            statement = statement.where(RecurringInvoice.client_id == client_id)

        statement = (
            statement.order_by(RecurringInvoice.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_due(self, as_of: date) -> List[RecurringInvoice]:
        """
        Retrieve active series due on or before as_of

        Args:
            as_of: Reference date

        Returns:
            List of due series, oldest anchor first
        """
        statement = (
            select(RecurringInvoice)
            .where(RecurringInvoice.status == RecurringInvoiceStatus.ACTIVE)
            .where(RecurringInvoice.next_generation_date <= as_of)
            .order_by(RecurringInvoice.next_generation_date)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_active(self) -> List[RecurringInvoice]:
        statement = select(RecurringInvoice).where(
            RecurringInvoice.status == RecurringInvoiceStatus.ACTIVE
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def create(self, series: RecurringInvoice) -> RecurringInvoice:
        """
        Create a new series

        Args:
            series: RecurringInvoice entity to persist

        Returns:
            Created RecurringInvoice
        """
        self.session.add(series)
        await self.session.flush()
        await self.session.refresh(series)
        return series

    async def update(self, series: RecurringInvoice, expected_version: int) -> RecurringInvoice:
        """
        Persist definition and status fields if the version still matches

        Raises:
            ConcurrencyConflictError: stored version differs from expected_version
        """
        await self._compare_and_swap(series, expected_version, DEFINITION_FIELDS)
        return series

    async def save_schedule_state(self, series: RecurringInvoice, expected_version: int) -> RecurringInvoice:
        """
        Persist the schedule pointer after a generation

        The stored row must still carry expected_version and be active.

        Raises:
            ConcurrencyConflictError: series changed or left the active state meanwhile
        """
        await self._compare_and_swap(
            series,
            expected_version,
            SCHEDULE_FIELDS,
            require_status=RecurringInvoiceStatus.ACTIVE,
        )
        return series

    async def delete(self, series_id: str) -> bool:
        await self.session.execute(
            delete(GeneratedInvoiceRecord).where(GeneratedInvoiceRecord.series_id == series_id)
        )
        result = await self.session.execute(
            delete(RecurringInvoice).where(RecurringInvoice.id == series_id)
        )
        return result.rowcount > 0

    async def _compare_and_swap(
        self,
        series: RecurringInvoice,
        expected_version: int,
        fields: tuple,
        require_status: Optional[RecurringInvoiceStatus] = None,
    ) -> None:
        values = {field: getattr(series, field) for field in fields}
        values["version"] = expected_version + 1

        statement = (
            update(RecurringInvoice)
            .where(RecurringInvoice.id == series.id)
            .where(RecurringInvoice.version == expected_version)
        )
        if require_status is not None:
            statement = statement.where(RecurringInvoice.status == require_status)

        result = await self.session.execute(
            statement.values(**values).execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            raise ConcurrencyConflictError(
                f"Recurring invoice {series.id} was modified concurrently",
                reason=f"expected version {expected_version}",
            )

        series.version = expected_version + 1
