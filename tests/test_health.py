from __future__ import annotations

from nilo import __version__
from nilo.api.dependencies import get_db
from nilo.database.connection import DatabaseConnection
from nilo.models.chat import HealthResponse


def test_health_ok(client) -> None:
    res = client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "healthy"
    assert body["version"] == __version__
    assert body["timestamp"].endswith(("Z", "+00:00"))


def test_ready_with_database(client, app, db) -> None:
    app.dependency_overrides[get_db] = lambda: db

    res = client.get("/health/ready")

    assert res.json()["status"] == "ready"
    assert res.json()["database"] == "ok"


def test_degraded_without_database(client, app, tmp_path) -> None:
    unreachable = DatabaseConnection(f"sqlite:///{tmp_path / 'missing' / 'nope.sqlite3'}")
    app.dependency_overrides[get_db] = lambda: unreachable

    res = client.get("/health/ready")

    assert res.status_code == 200
    assert res.json()["status"] == "degraded"
    assert res.json()["database"] == "unreachable"


def test_response_time_header(client) -> None:
    assert "X-Response-Time" in client.get("/health").headers


def test_root(client) -> None:
    assert client.get("/").json()["documentation"] == "/docs"


def test_default_timestamp_is_utc() -> None:
    assert HealthResponse(version=__version__).timestamp.utcoffset().total_seconds() == 0
