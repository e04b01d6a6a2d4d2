from .unit_of_work import UnitOfWork
from .notification_service import NotificationService
from .product_catalog import ProductCatalog, ProductDTO, CatalogLookupError
from .invoice_gateway import InvoiceGateway, InvoiceDraftDTO, InvoiceGatewayError
from .line_item_resolver import LineItemResolver, PricePolicy

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "ProductCatalog",
    "ProductDTO",
    "CatalogLookupError",
    "InvoiceGateway",
    "InvoiceDraftDTO",
    "InvoiceGatewayError",
    "LineItemResolver",
    "PricePolicy",
]
