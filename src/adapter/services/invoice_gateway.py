"""Invoicing Service Client

Creates and sends invoices through the invoicing service HTTP API.
"""

import logging
from typing import Optional
import httpx
from src.app.services.invoice_gateway import InvoiceDraftDTO, InvoiceGateway, InvoiceGatewayError

logger = logging.getLogger(__name__)


class HttpInvoiceGateway(InvoiceGateway):
    """
    Invoicing service client

    - POST {base_url}/invoices with an Idempotency-Key header
    - POST {base_url}/invoices/{id}/send
    """

    def __init__(self, base_url: str, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client

    async def create_invoice(self, draft: InvoiceDraftDTO) -> str:
        payload = draft.model_dump(mode="json")
        response = await self._post(
            f"{self.base_url}/invoices",
            payload,
            headers={"Idempotency-Key": draft.idempotency_key},
        )
        invoice_id = response.json().get("id")
        if not invoice_id:
            raise InvoiceGatewayError(
                f"Invoicing service returned no invoice id for {draft.idempotency_key}"
            )
        logger.info(f"Invoice {invoice_id} created for {draft.idempotency_key}")
        return str(invoice_id)

    async def send_invoice(self, invoice_id: str, recipient_email: str) -> bool:
        try:
            await self._post(
                f"{self.base_url}/invoices/{invoice_id}/send",
                {"recipient_email": recipient_email},
            )
        except InvoiceGatewayError as e:
            logger.error(f"Failed to send invoice {invoice_id}: {e}")
            return False
        return True

    async def _post(self, url: str, payload: dict, headers: Optional[dict] = None) -> httpx.Response:
        try:
            if self.client is not None:
                response = await self.client.post(url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()
            return response
        except httpx.HTTPError as e:
            raise InvoiceGatewayError(f"POST {url} failed: {e}") from e
