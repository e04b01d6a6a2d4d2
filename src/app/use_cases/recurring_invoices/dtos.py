"""Data Transfer Objects for Recurring Invoice Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from src.domain.line_item import LineItem
from src.domain.recurring_invoice import (
    RecurringInvoice,
    RecurringInvoiceStatus,
    RecurrenceFrequency,
)
from src.domain.generated_invoice import GeneratedInvoiceRecord
from src.domain.schedule import reminder_date


class LineItemTemplateDTO(BaseModel):
    """Line-item template as entered by the user"""

    product_id: Optional[str] = Field(
        default=None,
        description="Catalog product the line was created from"
    )

    description: str = Field(
        ...,
        description="Line description"
    )

    quantity: str = Field(
        ...,
        description="Quantity as a decimal string"
    )

    unit_price: str = Field(
        ...,
        description="Unit price as a decimal string, snapshotted when the product was attached"
    )

    tax_rate: str = Field(
        default="0",
        description="Tax rate in percent as a decimal string"
    )


class CreateRecurringInvoiceCommandDTO(BaseModel):
    """
    Command DTO for creating a series

    Used as input to CreateRecurringInvoice use case.
    """

    workspace_id: Optional[str] = Field(default=None, description="Owning workspace")
    client_id: str = Field(..., description="Billing recipient")
    name: Optional[str] = Field(default=None, description="Human label")
    frequency: RecurrenceFrequency = Field(..., description="monthly, quarterly or yearly")
    start_date: date = Field(..., description="First possible generation date")
    end_date: Optional[date] = Field(default=None, description="Last allowed generation date")
    day_of_month: int = Field(..., description="Target day of month (1-31)")
    auto_send: bool = Field(default=False, description="Send generated invoices automatically")
    recipient_email: Optional[str] = Field(default=None, description="Required when auto_send")
    notification_days_before: int = Field(default=0, description="Reminder lead time in days")
    currency: Optional[str] = Field(default=None, description="Currency code, defaults to configuration")
    template_name: Optional[str] = Field(default=None, description="Invoice template")
    notes: Optional[str] = Field(default=None, description="Notes copied onto invoices")
    items: List[LineItemTemplateDTO] = Field(default_factory=list, description="Line-item templates")

    class Config:
        json_schema_extra = {
            "example": {
                "client_id": "client_456",
                "name": "Monthly maintenance",
                "frequency": "monthly",
                "start_date": "2024-01-31",
                "day_of_month": 31,
                "auto_send": True,
                "recipient_email": "billing@client.example",
                "notification_days_before": 3,
                "items": [
                    {"description": "Service", "quantity": "2", "unit_price": "50.00"}
                ]
            }
        }


class UpdateRecurringInvoiceCommandDTO(BaseModel):
    """
    Command DTO for partially updating a series

    Only fields explicitly set are applied; client_id and status are not editable here.
    """

    name: Optional[str] = None
    frequency: Optional[RecurrenceFrequency] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    day_of_month: Optional[int] = None
    auto_send: Optional[bool] = None
    recipient_email: Optional[str] = None
    notification_days_before: Optional[int] = None
    currency: Optional[str] = None
    template_name: Optional[str] = None
    notes: Optional[str] = None
    items: Optional[List[LineItemTemplateDTO]] = None


class RecurringInvoiceResponseDTO(BaseModel):
    """
    Response DTO for a series

    Returned by create, update, status and read use cases.
    """

    id: str
    workspace_id: Optional[str] = None
    client_id: str
    name: Optional[str] = None
    frequency: RecurrenceFrequency
    status: RecurringInvoiceStatus
    start_date: date
    end_date: Optional[date] = None
    day_of_month: int
    next_generation_date: date
    reminder_date: Optional[date] = None
    auto_send: bool
    recipient_email: Optional[str] = None
    notification_days_before: int
    total_invoices_generated: int
    last_generated_at: Optional[datetime] = None
    currency: str
    template_name: Optional[str] = None
    notes: Optional[str] = None
    items: List[LineItemTemplateDTO]
    version: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, series: RecurringInvoice) -> "RecurringInvoiceResponseDTO":
        return cls(
            id=series.id,
            workspace_id=series.workspace_id,
            client_id=series.client_id,
            name=series.name,
            frequency=series.frequency,
            status=series.status,
            start_date=series.start_date,
            end_date=series.end_date,
            day_of_month=series.day_of_month,
            next_generation_date=series.next_generation_date,
            reminder_date=reminder_date(series),
            auto_send=series.auto_send,
            recipient_email=series.recipient_email,
            notification_days_before=series.notification_days_before,
            total_invoices_generated=series.total_invoices_generated,
            last_generated_at=series.last_generated_at,
            currency=series.currency,
            template_name=series.template_name,
            notes=series.notes,
            items=[LineItemTemplateDTO(**item) for item in series.items],
            version=series.version,
            created_at=series.created_at,
            updated_at=series.updated_at,
        )


class ListRecurringInvoicesResponseDTO(BaseModel):
    """Response DTO for series listings"""

    series: List[RecurringInvoiceResponseDTO]
    count: int = Field(..., description="Number of series in this page")
    limit: int
    offset: int


class MaterializedInvoiceDTO(BaseModel):
    """
    Response DTO for materialized line items

    Returned by MaterializeLineItems use case.
    """

    series_id: str
    currency: str
    line_items: List[LineItem]
    subtotal: Decimal
    tax_total: Decimal
    total: Decimal


class GenerationResultDTO(BaseModel):
    """
    Response DTO for one generation event

    Returned by GenerateRecurringInvoice use case.
    """

    series_id: str
    invoice_id: str
    sequence_number: int = Field(..., description="Series counter after this generation")
    generation_date: date = Field(..., description="Anchor that fired")
    next_generation_date: date
    status: RecurringInvoiceStatus
    completed: bool = Field(..., description="True if this generation completed the series")
    sent: bool = Field(..., description="True if the invoice was auto-sent")
    line_items: List[LineItem]
    subtotal: Decimal
    total_invoices_generated: int


class GeneratedInvoiceDTO(BaseModel):
    """Generated invoice audit entry"""

    invoice_id: str
    sequence_number: int
    generation_date: date
    sent: bool
    generated_at: datetime

    @classmethod
    def from_entity(cls, record: GeneratedInvoiceRecord) -> "GeneratedInvoiceDTO":
        return cls(
            invoice_id=record.invoice_id,
            sequence_number=record.sequence_number,
            generation_date=record.generation_date,
            sent=record.sent,
            generated_at=record.generated_at,
        )


class ListGeneratedInvoicesResponseDTO(BaseModel):
    series_id: str
    total_invoices_generated: int
    invoices: List[GeneratedInvoiceDTO]


class SchedulePreviewDTO(BaseModel):
    """Upcoming generation dates of a series"""

    series_id: str
    status: RecurringInvoiceStatus
    upcoming_dates: List[date]
    ends_on: Optional[date] = Field(
        default=None, description="Last generation date when the series has an end_date"
    )


class ReminderSweepResultDTO(BaseModel):
    """
    Response DTO for a reminder sweep

    Returned by DispatchReminders use case.
    """

    as_of: date
    total_checked: int
    reminders_due: int
    reminders_sent: int
    reminders_failed: int
    reminder_keys: List[str] = Field(default_factory=list, description="Keys of reminders sent")


class RecurringGenerationResultDTO(BaseModel):
    """
    Summary of one worker sweep

    Returned by RecurringInvoiceWorker.run_once.
    """

    as_of: date
    total_due: int
    invoices_generated: int
    series_completed: int
    failed: int
    skipped: int
    reminders_sent: int
    execution_time_ms: int
