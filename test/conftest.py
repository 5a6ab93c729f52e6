"""
Pytest configuration and fixtures for the content type pipeline tests
"""

import os
import sys
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH119, PTH120

from app.content_types import BlockManager, ContentTypeManager  # noqa: E402
from app.database import Base, get_db  # noqa: E402
from app.fields import FieldTypeRegistry, build_widget_registry  # noqa: E402
from app.modules import MODULES  # noqa: E402

# SQLite in memory; StaticPool keeps one connection so every session sees the same database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def test_engine():
    """A fresh in-memory database with the catalogue tables for each test"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session for tests that need it."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def field_types() -> FieldTypeRegistry:
    return FieldTypeRegistry()


@pytest.fixture
def widget_registry(field_types):
    """Registry with the core widgets and every module's widgets"""
    return build_widget_registry(field_types)


@pytest.fixture
def content_manager(field_types) -> ContentTypeManager:
    """Content type manager with the modules' code-defined types registered"""
    manager = ContentTypeManager(field_types, schema_sync_enabled=True)
    for module in MODULES:
        manager.register_code_types(module.content_types)
    return manager


@pytest.fixture
def block_manager(field_types) -> BlockManager:
    manager = BlockManager(field_types)
    for module in MODULES:
        manager.register_code_types(module.block_types)
    return manager


@pytest.fixture
def test_app(session_factory):
    """Application without lifespan, bound to the test database"""
    from main import create_app

    application = create_app(use_lifespan=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for the test application"""
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as http_client:
        yield http_client
