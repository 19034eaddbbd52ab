from datetime import UTC, datetime

from fastapi.testclient import TestClient
from signage.api.routes.health import get_health_service
from signage.core.config import Settings
from signage.main import app
from signage.models.schemas.health import DatabaseHealth, HealthResponse
from signage.realtime.change_feed import ChangeFeed
from signage.services.health_service import HealthService


class _HealthyService:
    def get_health(self) -> HealthResponse:
        return HealthResponse(
            status="ok",
            environment="test",
            queue_timezone="America/Sao_Paulo",
            identity_provider_configured=True,
            database=DatabaseHealth(connected=True, migrated=True),
            timestamp=datetime.now(UTC),
        )


class _DownRepository:
    def check_connection(self, database_url: str) -> DatabaseHealth:
        return DatabaseHealth(connected=False, message="connection timeout")


def test_health_ok(client: TestClient) -> None:
    app.dependency_overrides[get_health_service] = _HealthyService
    response = client.get("/api/health")
    app.dependency_overrides.clear()

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["service"] == "signage-queue-backend"
    assert payload["database"]["connected"] is True


def test_health_degrades_when_database_is_down() -> None:
    feed = ChangeFeed()
    feed.subscribe("tickets", lambda _: None)
    service = HealthService(
        repository=_DownRepository(),
        settings=Settings(app_env="test", supabase_url=None, supabase_anon_key=None),
        change_feed=feed,
    )

    health = service.get_health()

    assert health.status == "degraded"
    assert health.database.message == "connection timeout"
    assert health.identity_provider_configured is False
    assert health.live_subscriptions == 1


class _UnmigratedRepository:
    def check_connection(self, database_url: str) -> DatabaseHealth:
        return DatabaseHealth(connected=True, migrated=False, message="Missing tables: tickets.")


def test_health_degrades_until_schema_is_migrated() -> None:
    service = HealthService(
        repository=_UnmigratedRepository(),
        settings=Settings(app_env="test", supabase_url="http://auth", supabase_anon_key="anon"),
    )

    health = service.get_health()

    assert health.status == "degraded"
    assert health.database.connected is True
    assert health.identity_provider_configured is True
    assert health.live_subscriptions == 0
