from signage.core.config import Settings
from signage.models.schemas.health import HealthResponse
from signage.realtime.change_feed import ChangeFeed
from signage.repositories.health_repository import HealthRepository


class HealthService:
    def __init__(
        self,
        repository: HealthRepository,
        settings: Settings,
        change_feed: ChangeFeed | None = None,
    ) -> None:
        self.repository = repository
        self.settings = settings
        self.change_feed = change_feed

    def get_health(self) -> HealthResponse:
        database_health = self.repository.check_connection(self.settings.database_url)
        # The queue keeps working for kiosks without auth, so only the database degrades health.
        status = "ok" if database_health.connected and database_health.migrated else "degraded"
        return HealthResponse(
            status=status,
            environment=self.settings.app_env,
            queue_timezone=self.settings.queue_timezone,
            identity_provider_configured=bool(
                self.settings.supabase_url and self.settings.supabase_anon_key
            ),
            live_subscriptions=(
                self.change_feed.subscriber_count if self.change_feed is not None else 0
            ),
            database=database_health,
        )
