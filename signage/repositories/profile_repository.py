from typing import Any
from uuid import UUID

from psycopg import Connection

from signage.models.entities import ProfileEntity, ProfileRole
from signage.repositories.base import Repository


def _to_profile_entity(row: dict[str, Any]) -> ProfileEntity:
    return ProfileEntity(
        id=row["id"],
        role=row["role"],
        email=row["email"],
        name=row["name"],
        desk_info=row["desk_info"],
    )


class ProfileRepository(Repository):
    def upsert(
        self,
        *,
        profile_id: UUID,
        role: ProfileRole,
        email: str | None = None,
        name: str | None = None,
        desk_info: str | None = None,
        connection: Connection | None = None,
    ) -> ProfileEntity:
        query = """
            INSERT INTO profiles (id, role, email, name, desk_info)
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (id) DO UPDATE
            SET role = EXCLUDED.role,
                email = COALESCE(EXCLUDED.email, profiles.email),
                name = EXCLUDED.name,
                desk_info = EXCLUDED.desk_info
            RETURNING id, role, email, name, desk_info
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (profile_id, role, email, name, desk_info))
                row = cursor.fetchone()
        if row is None:
            raise RuntimeError("Failed to save profile.")
        return _to_profile_entity(row)

    def get_by_id(
        self,
        profile_id: UUID,
        connection: Connection | None = None,
    ) -> ProfileEntity | None:
        query = "SELECT id, role, email, name, desk_info FROM profiles WHERE id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (profile_id,))
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_profile_entity(row)

    def update(
        self,
        *,
        profile_id: UUID,
        updates: dict[str, Any],
        connection: Connection | None = None,
    ) -> ProfileEntity | None:
        allowed = [column for column in ("name", "desk_info", "role") if column in updates]
        if not allowed:
            return self.get_by_id(profile_id, connection=connection)

        assignments = ", ".join(f"{column} = %s" for column in allowed)
        query = f"""
            UPDATE profiles
            SET {assignments}
            WHERE id = %s
            RETURNING id, role, email, name, desk_info
        """
        params = [updates[column] for column in allowed] + [profile_id]
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, params)
                row = cursor.fetchone()
        if row is None:
            return None
        return _to_profile_entity(row)

    def delete(self, profile_id: UUID, connection: Connection | None = None) -> bool:
        query = "DELETE FROM profiles WHERE id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (profile_id,))
                return cursor.rowcount > 0

    def list(self, connection: Connection | None = None) -> list[ProfileEntity]:
        query = """
            SELECT id, role, email, name, desk_info
            FROM profiles
            ORDER BY created_at ASC
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query)
                rows = cursor.fetchall()
        return [_to_profile_entity(row) for row in rows]
