import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from unittest.mock import AsyncMock, MagicMock

import src.domain  # noqa: F401  registers the tables on SQLModel.metadata
from src.app.services.line_item_resolver import LineItemResolver
from src.depends import get_session, get_invoice_gateway, get_line_item_resolver


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create a throwaway SQLite database file per test"""
    test_db_url = f"sqlite+aiosqlite:///{tmp_path / 'recurring_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def invoice_gateway():
    """Invoicing service double handing out sequential invoice ids"""
    gateway = MagicMock()
    gateway.create_invoice = AsyncMock(side_effect=[f"inv_{n:03d}" for n in range(1, 100)])
    gateway.send_invoice = AsyncMock(return_value=True)
    return gateway


@pytest_asyncio.fixture
async def client(db_session, invoice_gateway):
    """Create test client with database session and collaborator overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # Override the session dependency to use test session
    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_line_item_resolver] = lambda: LineItemResolver()
    app.dependency_overrides[get_invoice_gateway] = lambda: invoice_gateway

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
