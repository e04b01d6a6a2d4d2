"""Product Catalog Interface

Read-only access to the product catalog owned by another service.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class ProductDTO(BaseModel):
    """Catalog entry as seen by the line-item resolver"""

    id: str = Field(..., description="Product identifier")
    name: str = Field(..., description="Product display name")
    unit_price: Decimal = Field(..., description="Current catalog price")
    currency: str = Field(..., description="Currency code (ISO 4217)")


class ProductCatalog(ABC):
    """Abstract product catalog"""

    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[ProductDTO]:
        """
        Retrieve a catalog entry

        Args:
            product_id: Product identifier

        Returns:
            ProductDTO if found, None otherwise
        """
        pass


class CatalogLookupError(Exception):
    """Product catalog could not be reached or answered with an error"""
    pass
