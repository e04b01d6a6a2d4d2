"""Invoice Gateway Interface

Invoice creation and delivery belong to the invoicing service; the
recurring scheduler only hands it a draft and asks for delivery.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.line_item import LineItem


class InvoiceDraftDTO(BaseModel):
    """Everything the invoicing service needs to create one invoice"""

    client_id: str = Field(..., description="Billing recipient")
    series_id: str = Field(..., description="Recurring series that produced the invoice")
    issue_date: date = Field(..., description="Anchor date that fired")
    currency: str = Field(..., description="Currency code (ISO 4217)")
    line_items: List[LineItem] = Field(..., min_length=1, description="Materialized lines")
    subtotal: Decimal = Field(..., description="Sum of line totals")
    template_name: Optional[str] = Field(default=None, description="Invoice template")
    notes: Optional[str] = Field(default=None, description="Notes printed on the invoice")
    idempotency_key: str = Field(
        ..., description="recurring:{series_id}:{anchor}; repeated calls must return the same invoice"
    )


class InvoiceGateway(ABC):
    """Abstract invoicing service client"""

    @abstractmethod
    async def create_invoice(self, draft: InvoiceDraftDTO) -> str:
        """
        Create an invoice

        Args:
            draft: Invoice draft with materialized line items

        Returns:
            Identifier of the created invoice
        """
        pass

    @abstractmethod
    async def send_invoice(self, invoice_id: str, recipient_email: str) -> bool:
        """
        Deliver an invoice to a recipient

        Args:
            invoice_id: Invoice identifier returned by create_invoice
            recipient_email: Destination address

        Returns:
            True if the delivery was accepted, False otherwise
        """
        pass


class InvoiceGatewayError(Exception):
    """Invoicing service rejected or failed a request"""
    pass
