from typing import Any
from uuid import UUID

from psycopg import Connection

from signage.models.entities import PlaylistEntity, SlideEntity, SlideType
from signage.repositories.base import Repository

SLIDE_COLUMNS = 'id, playlist_id, type, url, duration, "order"'


def _to_playlist_entity(row: dict[str, Any]) -> PlaylistEntity:
    return PlaylistEntity(id=row["id"], name=row["name"], created_at=row["created_at"])


def _to_slide_entity(row: dict[str, Any]) -> SlideEntity:
    return SlideEntity(
        id=row["id"],
        playlist_id=row["playlist_id"],
        type=row["type"],
        url=row["url"],
        duration=row["duration"],
        order=row["order"],
    )


class PlaylistRepository(Repository):
    def create(self, *, name: str, connection: Connection | None = None) -> PlaylistEntity:
        query = """
            INSERT INTO playlists (name)
            VALUES (%s)
            RETURNING id, name, created_at
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (name,))
                row = cursor.fetchone()
        if row is None:
            raise RuntimeError("Failed to create playlist.")
        return _to_playlist_entity(row)

    def get_by_id(
        self,
        playlist_id: UUID,
        connection: Connection | None = None,
    ) -> PlaylistEntity | None:
        query = "SELECT id, name, created_at FROM playlists WHERE id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (playlist_id,))
                row = cursor.fetchone()
                if row is None:
                    return None
                playlist = _to_playlist_entity(row)
                cursor.execute(
                    f'SELECT {SLIDE_COLUMNS} FROM slides WHERE playlist_id = %s ORDER BY "order" ASC',
                    (playlist_id,),
                )
                playlist.slides = [_to_slide_entity(slide) for slide in cursor.fetchall()]
        return playlist

    def delete(self, playlist_id: UUID, connection: Connection | None = None) -> bool:
        query = "DELETE FROM playlists WHERE id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (playlist_id,))
                return cursor.rowcount > 0

    def detach_displays(self, playlist_id: UUID, connection: Connection | None = None) -> list[UUID]:
        """Clear the assignment on every display showing the playlist; returns their ids."""
        query = """
            UPDATE tvs
            SET assigned_playlist_id = NULL
            WHERE assigned_playlist_id = %s
            RETURNING id
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (playlist_id,))
                return [row["id"] for row in cursor.fetchall()]

    def list(self, connection: Connection | None = None) -> list[PlaylistEntity]:
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute("SELECT id, name, created_at FROM playlists ORDER BY created_at ASC")
                playlists = [_to_playlist_entity(row) for row in cursor.fetchall()]
                cursor.execute(f'SELECT {SLIDE_COLUMNS} FROM slides ORDER BY "order" ASC')
                slides = [_to_slide_entity(row) for row in cursor.fetchall()]

        by_id = {playlist.id: playlist for playlist in playlists}
        for slide in slides:
            if slide.playlist_id in by_id:
                by_id[slide.playlist_id].slides.append(slide)
        return playlists

    def add_slide(
        self,
        *,
        playlist_id: UUID,
        url: str,
        duration: int,
        slide_type: SlideType = "image",
        connection: Connection | None = None,
    ) -> SlideEntity:
        query = f"""
            INSERT INTO slides (playlist_id, type, url, duration, "order")
            VALUES (
                %s, %s, %s, %s,
                (SELECT COALESCE(MAX("order") + 1, 0) FROM slides WHERE playlist_id = %s)
            )
            RETURNING {SLIDE_COLUMNS}
        """
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (playlist_id, slide_type, url, duration, playlist_id))
                row = cursor.fetchone()
        if row is None:
            raise RuntimeError("Failed to add slide.")
        return _to_slide_entity(row)

    def delete_slide(self, slide_id: UUID, connection: Connection | None = None) -> bool:
        query = "DELETE FROM slides WHERE id = %s"
        with self._use_connection(connection) as active_connection:
            with active_connection.cursor() as cursor:
                cursor.execute(query, (slide_id,))
                return cursor.rowcount > 0
