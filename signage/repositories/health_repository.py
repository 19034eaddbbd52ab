from signage.core.db import inspect_database
from signage.models.schemas.health import DatabaseHealth


class HealthRepository:
    def check_connection(self, database_url: str) -> DatabaseHealth:
        db_status = inspect_database(database_url)
        if not db_status.connected:
            return DatabaseHealth(connected=False, migrated=False, message=db_status.error)
        if db_status.missing_tables:
            missing = ", ".join(db_status.missing_tables)
            return DatabaseHealth(
                connected=True,
                migrated=False,
                message=f"Missing tables: {missing}. Run alembic upgrade head.",
            )
        return DatabaseHealth(connected=True, migrated=True)
