from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError

from csv_processor.boundary.db import get_async_db


def override_db(app, session):
    async def _db():
        yield session

    app.dependency_overrides[get_async_db] = _db


def test_health_check(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_correlation_id_is_echoed(client):
    response = client.get("/api/v1/health", headers={"X-Correlation-ID": "req-42"})
    assert response.headers["X-Correlation-ID"] == "req-42"


def test_correlation_id_is_generated(client):
    response = client.get("/api/v1/health")
    assert len(response.headers["X-Correlation-ID"]) == 36


def test_health_check_db(app, client):
    session = AsyncMock()
    override_db(app, session)

    response = client.get("/api/v1/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Database connection OK"}
    session.execute.assert_awaited_once()


def test_health_check_db_unreachable(app, client):
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
    override_db(app, session)

    response = client.get("/api/v1/health/db")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"
