"""Request schemas for Recurring Invoice API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from src.domain.recurring_invoice import RecurrenceFrequency, RecurringInvoiceStatus


class LineItemTemplateSchema(BaseModel):
    """Line-item template; amounts travel as decimal strings"""

    product_id: Optional[str] = Field(
        default=None,
        description="Catalog product the line was created from"
    )

    description: str = Field(
        ...,
        min_length=1,
        description="Line description (required, non-empty)"
    )

    quantity: str = Field(
        ...,
        description="Quantity as a decimal string (must be > 0)"
    )

    unit_price: str = Field(
        ...,
        description="Unit price as a decimal string (must be >= 0)"
    )

    tax_rate: str = Field(
        default="0",
        description="Tax rate in percent (0-100)"
    )

    @field_validator('quantity', 'unit_price', 'tax_rate', mode='before')
    @classmethod
    def amounts_as_strings(cls, v):
        """Accept JSON numbers but keep them as exact decimal strings"""
        if isinstance(v, bool):
            raise ValueError("Amount must be a decimal number")
        if isinstance(v, (int, float, Decimal)):
            return str(v)
        return v


class CreateRecurringInvoiceRequestSchema(BaseModel):
    """
    Request schema for creating a recurring invoice

    Used for POST /recurring-invoices endpoint.
    """

    workspace_id: Optional[str] = Field(default=None, description="Owning workspace")

    client_id: str = Field(
        ...,
        min_length=1,
        description="Billing recipient (required, non-empty)"
    )

    name: Optional[str] = Field(default=None, max_length=255, description="Human label")

    frequency: RecurrenceFrequency = Field(..., description="monthly, quarterly or yearly")

    start_date: date = Field(..., description="First possible generation date")

    end_date: Optional[date] = Field(default=None, description="Last allowed generation date")

    day_of_month: int = Field(..., ge=1, le=31, description="Target day of month")

    auto_send: bool = Field(default=False, description="Send generated invoices automatically")

    recipient_email: Optional[str] = Field(default=None, description="Required when auto_send is set")

    notification_days_before: int = Field(default=0, ge=0, description="Reminder lead time in days")

    currency: Optional[str] = Field(default=None, description="ISO currency code")

    template_name: Optional[str] = Field(default=None, description="Invoice template")

    notes: Optional[str] = Field(default=None, description="Notes copied onto invoices")

    items: List[LineItemTemplateSchema] = Field(
        ...,
        min_length=1,
        description="Line-item templates (at least one)"
    )

    @field_validator('client_id')
    @classmethod
    def validate_client_id(cls, v):
        """Ensure client_id is not blank"""
        if not v.strip():
            raise ValueError("client_id cannot be blank")
        return v.strip()

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
                    {"description": "Service", "quantity": "2", "unit_price": "50.00", "tax_rate": "20"}
                ]
            }
        }


class UpdateRecurringInvoiceRequestSchema(BaseModel):
    """
    Request schema for partially updating a recurring invoice

    Used for PATCH /recurring-invoices/{id}. Omitted fields are left untouched.
    """

    name: Optional[str] = Field(default=None, max_length=255)
    frequency: Optional[RecurrenceFrequency] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)
    auto_send: Optional[bool] = None
    recipient_email: Optional[str] = None
    notification_days_before: Optional[int] = Field(default=None, ge=0)
    currency: Optional[str] = None
    template_name: Optional[str] = None
    notes: Optional[str] = None
    items: Optional[List[LineItemTemplateSchema]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "end_date": "2025-12-31",
                "notification_days_before": 5
            }
        }


class UpdateStatusRequestSchema(BaseModel):
    """
    Request schema for status changes

    Used for PATCH /recurring-invoices/{id}/status endpoint.
    """

    status: RecurringInvoiceStatus = Field(..., description="active, paused or cancelled")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "paused"
            }
        }
