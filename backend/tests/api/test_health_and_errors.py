"""Health probes and global error handling.

Tests cover:
    - Liveness always 200, readiness 200 with a reachable database
    - DatabaseError from the service surfaces as 503 DATABASE_ERROR
    - Envelope never carries the internal SQL detail
"""

from uuid import uuid4

from accounts.api.routes.users import get_user_service
from accounts.core.errors import DatabaseError
from accounts.main import app


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_store_failure_maps_to_503(client):
    class _FailingService:
        async def find_one(self, user_id):
            raise DatabaseError("Connection or operational error", "execute")

    app.dependency_overrides[get_user_service] = lambda: _FailingService()

    res = await client.get(f"/api/v1/users/{uuid4()}")

    assert res.status_code == 503
    error = res.json()["error"]
    assert error["code"] == "DATABASE_ERROR"
    assert error["category"] == "database"
    assert error["severity"] == "critical"
