"""Product Catalog Client

Reads catalog entries from the catalog service over HTTP.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional
import httpx
from src.app.services.product_catalog import CatalogLookupError, ProductCatalog, ProductDTO

logger = logging.getLogger(__name__)


class HttpProductCatalog(ProductCatalog):
    """
    Product catalog backed by GET {base_url}/products/{id}

    A 404 means the product was deleted; any other failure raises
    CatalogLookupError.
    """

    def __init__(self, base_url: str, timeout: float = 10.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client

    async def get_product(self, product_id: str) -> Optional[ProductDTO]:
        url = f"{self.base_url}/products/{product_id}"
        try:
            if self.client is not None:
                response = await self.client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url)

            if response.status_code == 404:
                return None
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Catalog lookup for product {product_id} failed: {e}")
            raise CatalogLookupError(f"Catalog lookup for product {product_id} failed: {e}") from e

        data = response.json()
        try:
            return ProductDTO(
                id=str(data.get("id", product_id)),
                name=data["name"],
                unit_price=Decimal(str(data.get("unit_price", data.get("unitPrice")))),
                currency=data.get("currency", ""),
            )
        except (KeyError, InvalidOperation) as e:
            raise CatalogLookupError(f"Malformed catalog entry for product {product_id}: {e}") from e
