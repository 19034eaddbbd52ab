from dataclasses import dataclass

from psycopg import Error, connect

REQUIRED_TABLES = ("tickets", "service_types", "tvs", "playlists")


@dataclass(frozen=True, slots=True)
class DatabaseStatus:
    connected: bool
    missing_tables: tuple[str, ...] = ()
    error: str | None = None


def inspect_database(
    database_url: str,
    timeout_seconds: int = 3,
    required_tables: tuple[str, ...] = REQUIRED_TABLES,
) -> DatabaseStatus:
    """Connect once and report which queue tables are not there yet."""
    try:
        with connect(database_url, connect_timeout=timeout_seconds) as connection:
            with connection.cursor() as cursor:
                cursor.execute(
                    "SELECT name FROM unnest(%s::text[]) AS name WHERE to_regclass(name) IS NULL",
                    (list(required_tables),),
                )
                missing = tuple(row[0] for row in cursor.fetchall())
    except Error as exc:
        return DatabaseStatus(connected=False, error=str(exc))
    return DatabaseStatus(connected=True, missing_tables=missing)
