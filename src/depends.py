from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.invoice_gateway import HttpInvoiceGateway
from src.adapter.services.product_catalog import HttpProductCatalog
from src.app.services.invoice_gateway import InvoiceGateway
from src.app.services.line_item_resolver import LineItemResolver, PricePolicy

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def build_line_item_resolver(config=ApplicationConfig) -> LineItemResolver:
    policy = PricePolicy(config.PRICE_POLICY)
    catalog = None
    if policy == PricePolicy.LIVE:
        catalog = HttpProductCatalog(
            config.CATALOG_SERVICE_URL, timeout=config.COLLABORATOR_TIMEOUT_SECONDS
        )
    return LineItemResolver(catalog=catalog, price_policy=policy)


def build_invoice_gateway(config=ApplicationConfig) -> InvoiceGateway:
    return HttpInvoiceGateway(
        config.INVOICE_SERVICE_URL, timeout=config.COLLABORATOR_TIMEOUT_SECONDS
    )


def get_line_item_resolver() -> LineItemResolver:
    return build_line_item_resolver()


def get_invoice_gateway() -> InvoiceGateway:
    return build_invoice_gateway()
