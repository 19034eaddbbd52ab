from typing import Any
from uuid import UUID

from psycopg import Connection

from signage.models.entities import AttendantEntity
from signage.repositories.base import Repository


def _to_attendant_entity(row: dict[str, Any]) -> AttendantEntity:
    return AttendantEntity(
        id=row["id"],
        name=row["name"],
        desk_number=row["desk_number"],
        created_at=row["created_at"],
    )


class AttendantRepository(Repository):
    def create(
        self,
        *,
        name: str,
        desk_number: str | None = None,
        connection: Connection | None = None,
    ) -> AttendantEntity:
        query = """
            INSERT INTO attendants (name, desk_number)
            VALUES (%s, %s)
            RETURNING id, name, desk_number, created_at
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (name, desk_number))
                row = cursor.fetchone()
        if row is None:
            raise RuntimeError("Failed to create attendant.")
        return _to_attendant_entity(row)

    def get_by_id(
        self,
        attendant_id: UUID,
        connection: Connection | None = None,
    ) -> AttendantEntity | None:
        query = "SELECT id, name, desk_number, created_at FROM attendants WHERE id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (attendant_id,))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_attendant_entity(row)

    def delete(self, attendant_id: UUID, connection: Connection | None = None) -> bool:
        query = "DELETE FROM attendants WHERE id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (attendant_id,))
                return cursor.rowcount > 0

    def list(self, connection: Connection | None = None) -> list[AttendantEntity]:
        query = """
            SELECT id, name, desk_number, created_at
            FROM attendants
            ORDER BY name ASC
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query)
                rows = cursor.fetchall()
        return [_to_attendant_entity(row) for row in rows]
