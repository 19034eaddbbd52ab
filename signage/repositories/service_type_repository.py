from typing import Any
from uuid import UUID

from psycopg import Connection

from signage.models.entities import ServiceTypeEntity
from signage.repositories.base import Repository


def _to_service_type_entity(row: dict[str, Any]) -> ServiceTypeEntity:
    return ServiceTypeEntity(id=row["id"], name=row["name"], created_at=row["created_at"])


class ServiceTypeRepository(Repository):
    def create(self, *, name: str, connection: Connection | None = None) -> ServiceTypeEntity:
        query = """
            INSERT INTO service_types (name)
            VALUES (%s)
            RETURNING id, name, created_at
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (name,))
                row = cursor.fetchone()
        if row is None:
            raise RuntimeError("Failed to create service type.")
        return _to_service_type_entity(row)

    def get_by_id(
        self,
        service_type_id: UUID,
        connection: Connection | None = None,
    ) -> ServiceTypeEntity | None:
        query = "SELECT id, name, created_at FROM service_types WHERE id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (service_type_id,))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_service_type_entity(row)

    def delete(self, service_type_id: UUID, connection: Connection | None = None) -> bool:
        query = "DELETE FROM service_types WHERE id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (service_type_id,))
                return cursor.rowcount > 0

    def list(self, connection: Connection | None = None) -> list[ServiceTypeEntity]:
        query = "SELECT id, name, created_at FROM service_types ORDER BY name ASC"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query)
                rows = cursor.fetchall()
        return [_to_service_type_entity(row) for row in rows]
