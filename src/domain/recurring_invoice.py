"""Recurring Invoice Domain Entity

A recurring invoice series: a client, a cadence, a calendar anchor and the
line-item templates expanded into a real invoice every time the series fires.
"""

from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Date, Integer, JSON, String, Text
from src.domain.base import BaseModel, generate_uuid


class RecurrenceFrequency(str, Enum):
    """Series cadence"""
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def months(self) -> int:
        return _FREQUENCY_MONTHS[self]


_FREQUENCY_MONTHS = {
    RecurrenceFrequency.MONTHLY: 1,
    RecurrenceFrequency.QUARTERLY: 3,
    RecurrenceFrequency.YEARLY: 12,
}


class RecurringInvoiceStatus(str, Enum):
    """Series status types"""
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"    # terminal, set by the schedule engine
    CANCELLED = "cancelled"    # terminal, set by a user

    @property
    def is_terminal(self) -> bool:
        return self in (RecurringInvoiceStatus.COMPLETED, RecurringInvoiceStatus.CANCELLED)


class LineItemTemplate(BaseModel):
    """
    Line-item template stored on a series

    Quantities and prices are kept as decimal strings exactly as entered,
    so the price agreed when the product was attached is what gets billed.
    """

    product_id: Optional[str] = None
    description: str = Field(min_length=1)
    quantity: str
    unit_price: str
    tax_rate: str = "0"

    @property
    def quantity_value(self) -> Decimal:
        return Decimal(self.quantity)

    @property
    def unit_price_value(self) -> Decimal:
        return Decimal(self.unit_price)

    @property
    def tax_rate_value(self) -> Decimal:
        return Decimal(self.tax_rate)


class RecurringInvoice(BaseModel, table=True):
    """
    Recurring Invoice - Schedule definition for periodic invoice generation

    Domain Rules:
    - day_of_month is within [1, 31] and clamped to short months
    - next_generation_date >= start_date at all times
    - next_generation_date never exceeds end_date; the series completes instead
    - completed and cancelled are terminal
    - items holds at least one template
    - total_invoices_generated only ever increases
    - version is bumped on every write (optimistic concurrency token)
    """

    __tablename__ = "recurring_invoices"
    __table_args__ = (
        Index('ix_recurring_invoices_workspace_id', 'workspace_id'),
        Index('ix_recurring_invoices_client_id', 'client_id'),
        Index('ix_recurring_invoices_status_next', 'status', 'next_generation_date'),
        CheckConstraint('day_of_month BETWEEN 1 AND 31', name='day_of_month_range'),
        CheckConstraint('notification_days_before >= 0', name='notification_days_non_negative'),
        CheckConstraint('total_invoices_generated >= 0', name='total_generated_non_negative'),
        CheckConstraint('next_generation_date >= start_date', name='next_date_after_start'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(36), primary_key=True),
        description="Opaque series identifier (uuid4)"
    )

    workspace_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
        description="Owning workspace"
    )

    client_id: str = Field(
        sa_column=Column(String(64), nullable=False),
        description="Billing recipient (immutable after creation)"
    )

    name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Optional human label"
    )

    frequency: RecurrenceFrequency = Field(
        description="Series cadence (monthly, quarterly, yearly)"
    )

    status: RecurringInvoiceStatus = Field(
        default=RecurringInvoiceStatus.ACTIVE,
        description="Series status (active, paused, completed, cancelled)"
    )

    start_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="First possible generation anchor"
    )

    end_date: Optional[date] = Field(
        default=None,
        sa_column=Column(Date, nullable=True),
        description="Last allowed generation date (None = open ended)"
    )

    day_of_month: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Target day within the period (1-31)"
    )

    next_generation_date: date = Field(
        sa_column=Column(Date, nullable=False),
        description="Anchor date driving due-ness"
    )

    auto_send: bool = Field(
        default=False,
        description="Dispatch generated invoices to recipient_email"
    )

    recipient_email: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Recipient of auto-sent invoices"
    )

    notification_days_before: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Days before generation to send a reminder (0 = none)"
    )

    total_invoices_generated: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Number of invoices generated so far"
    )

    last_generated_at: Optional[datetime] = Field(
        default=None,
        description="Timestamp of the last successful generation"
    )

    currency: str = Field(
        default="EUR",
        sa_column=Column(String(3), nullable=False),
        description="Currency code (ISO 4217)"
    )

    template_name: Optional[str] = Field(
        default=None,
        sa_column=Column(String(100), nullable=True),
        description="Invoice template used by the invoicing service"
    )

    notes: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Notes copied onto every generated invoice"
    )

    items: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
        description="Ordered line-item templates"
    )

    version: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, default=1),
        description="Optimistic concurrency token"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Series creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    def templates(self) -> List[LineItemTemplate]:
        return [LineItemTemplate(**item) for item in self.items]

    @property
    def is_terminal(self) -> bool:
        return RecurringInvoiceStatus(self.status).is_terminal

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": "0b7d9c57-3d38-4d0a-9a53-5d6b0c1f8e21",
                "workspace_id": "ws_123",
                "client_id": "client_456",
                "name": "Monthly maintenance",
                "frequency": "monthly",
                "status": "active",
                "start_date": "2024-01-31",
                "end_date": None,
                "day_of_month": 31,
                "next_generation_date": "2024-02-29",
                "auto_send": True,
                "recipient_email": "billing@client.example",
                "notification_days_before": 3,
                "total_invoices_generated": 1,
                "currency": "EUR",
                "items": [
                    {"description": "Service", "quantity": "2", "unit_price": "50.00", "tax_rate": "0"}
                ],
                "version": 2,
            }
        }
