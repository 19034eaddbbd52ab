from typing import Any
from uuid import UUID

from psycopg import Connection

from signage.models.entities import DisplayEntity, Orientation
from signage.repositories.base import Repository

DISPLAY_COLUMNS = """
    id, name, location, width, height, orientation, display_mode,
    assigned_playlist_id, size_inches, created_at
"""


def _to_display_entity(row: dict[str, Any]) -> DisplayEntity:
    return DisplayEntity(
        id=row["id"],
        name=row["name"],
        location=row["location"],
        width=row["width"],
        height=row["height"],
        orientation=row["orientation"],
        display_mode=row["display_mode"],
        assigned_playlist_id=row["assigned_playlist_id"],
        size_inches=row["size_inches"],
        created_at=row["created_at"],
    )


class DisplayRepository(Repository):
    def create(
        self,
        *,
        name: str,
        location: str,
        width: int,
        height: int,
        orientation: Orientation,
        size_inches: int | None = None,
        connection: Connection | None = None,
    ) -> DisplayEntity:
        query = f"""
            INSERT INTO tvs (name, location, width, height, orientation, display_mode, size_inches)
            VALUES (%s, %s, %s, %s, %s, 'playlist', %s)
            RETURNING {DISPLAY_COLUMNS}
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (name, location, width, height, orientation, size_inches))
                row = cursor.fetchone()
        if row is None:
            raise RuntimeError("Failed to create display.")
        return _to_display_entity(row)

    def get_by_id(
        self,
        display_id: UUID,
        connection: Connection | None = None,
    ) -> DisplayEntity | None:
        query = f"SELECT {DISPLAY_COLUMNS} FROM tvs WHERE id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (display_id,))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_display_entity(row)

    def update(
        self,
        *,
        display_id: UUID,
        updates: dict[str, Any],
        connection: Connection | None = None,
    ) -> DisplayEntity | None:
        allowed = [
            column
            for column in ("name", "location", "display_mode", "assigned_playlist_id")
            if column in updates
        ]
        if not allowed:
            return self.get_by_id(display_id, connection=connection)

        assignments = ", ".join(f"{column} = %s" for column in allowed)
        query = f"""
            UPDATE tvs
            SET {assignments}
            WHERE id = %s
            RETURNING {DISPLAY_COLUMNS}
        """
        params = [updates[column] for column in allowed] + [display_id]
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, params)
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_display_entity(row)

    def delete(self, display_id: UUID, connection: Connection | None = None) -> bool:
        query = "DELETE FROM tvs WHERE id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (display_id,))
                return cursor.rowcount > 0

    def list(self, connection: Connection | None = None) -> list[DisplayEntity]:
        query = f"SELECT {DISPLAY_COLUMNS} FROM tvs ORDER BY created_at ASC"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query)
                rows = cursor.fetchall()
        return [_to_display_entity(row) for row in rows]
