"""SQLAlchemy Generated Invoice Record Repository Implementation"""

from typing import List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.generated_invoice_repository import GeneratedInvoiceRepository
from src.domain.generated_invoice import GeneratedInvoiceRecord


class SqlAlchemyGeneratedInvoiceRepository(GeneratedInvoiceRepository):
    """
    SQLAlchemy implementation of GeneratedInvoiceRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, record: GeneratedInvoiceRecord) -> GeneratedInvoiceRecord:
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def update(self, record: GeneratedInvoiceRecord) -> GeneratedInvoiceRecord:
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def list_by_series(
        self, series_id: str, limit: int = 50, offset: int = 0
    ) -> List[GeneratedInvoiceRecord]:
        statement = (
            select(GeneratedInvoiceRecord)
            .where(GeneratedInvoiceRecord.series_id == series_id)
            .order_by(GeneratedInvoiceRecord.sequence_number.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())
