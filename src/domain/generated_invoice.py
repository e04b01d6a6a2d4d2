"""Generated Invoice Record Domain Entity

Links a recurring series to each invoice it produced.
"""

from datetime import datetime, date
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Date, ForeignKey, Integer, String
from src.domain.base import BaseModel


class GeneratedInvoiceRecord(BaseModel, table=True):
    """
    Generated Invoice Record - Audit link between a series and an invoice

    Domain Rules:
    - One record per (series_id, generation_date)
    - sequence_number is the series counter value after the generation (1-based)
    - The invoice document itself lives in the invoicing service
    """

    __tablename__ = "recurring_generated_invoices"
    __table_args__ = (
        Index('ix_recurring_generated_invoices_series_id', 'series_id'),
        Index(
            'ix_recurring_generated_invoices_series_date',
            'series_id', 'generation_date',
            unique=True,
        ),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True),
        description="Unique record identifier (auto-increment)"
    )

    series_id: str = Field(
        sa_column=Column(String(36), ForeignKey("recurring_invoices.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to RecurringInvoice"
    )

    invoice_id: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Invoice identifier returned by the invoicing service"
    )

    sequence_number: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Position of this invoice within the series (1-based)"
    )

    generation_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Anchor date that fired"
    )

    sent: bool = Field(
        default=False,
        description="Whether the invoice was auto-sent to the recipient"
    )

    generated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Generation timestamp"
    )

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "series_id": "0b7d9c57-3d38-4d0a-9a53-5d6b0c1f8e21",
                "invoice_id": "inv_789",
                "sequence_number": 1,
                "generation_date": "2024-01-31",
                "sent": True,
                "generated_at": "2024-01-31T06:00:00Z"
            }
        }
