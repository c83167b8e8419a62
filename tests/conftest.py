"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory async database, session factory, blob/broker mocks,
fake kombu messages, FastAPI app and client
Dependencies: pytest, pytest_asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import os
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

# Keep settings off real infrastructure before any module reads them.
os.environ.setdefault("POSTGRES_URL_OVERRIDE", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RABBITMQ_HOST", "localhost")


@pytest_asyncio.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with all tables.

    StaticPool keeps a single connection so every session sees the same
    in-memory database. Foreign keys are enforced as on PostgreSQL.
    """
    from sqlalchemy import event
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    from csv_processor.boundary.db.base import Base
    import csv_processor.boundary.db.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    """Session factory bound to the in-memory engine."""
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def test_async_db(test_session_factory):
    """
    Create in-memory SQLite async database session for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    async with test_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def mock_blob_client():
    """
    Create mock BlobStorageClient.

    Returns:
        MagicMock: Blob client with synchronous methods, as the real one
    """
    client = MagicMock()
    client.bucket = "csvfiles"
    client.upload = MagicMock(return_value=None)
    client.download = MagicMock(return_value=b"")
    client.exists = MagicMock(return_value=True)
    return client


@pytest.fixture
def mock_broker():
    """Create mock RabbitMQClient."""
    broker = MagicMock()
    broker.publish_to_queue = MagicMock(return_value=None)
    broker.publish_to_exchange = MagicMock(return_value=None)
    return broker


class FakeMessage:
    """Stand-in for a kombu Message recording how it was settled."""

    def __init__(self, body):
        self.body = body
        self.acked = False
        self.requeued = False

    def ack(self):
        self.acked = True

    def requeue(self):
        self.requeued = True


@pytest.fixture
def make_message():
    """Factory for FakeMessage deliveries."""
    return FakeMessage


@pytest.fixture
def app():
    """
    FastAPI app for endpoint tests.

    Services are swapped in through dependency_overrides, so no database,
    blob store or broker is touched.
    """
    from csv_processor.api.main import create_app

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """TestClient without lifespan (logging is left as pytest set it up)."""
    from fastapi.testclient import TestClient

    return TestClient(app)
