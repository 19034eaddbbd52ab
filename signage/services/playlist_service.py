import logging
from uuid import UUID

from signage.core.database import get_connection
from signage.core.errors import not_found_error
from signage.models.entities import PlaylistEntity, SlideEntity
from signage.models.schemas.playlist import (
    PlaylistRead,
    PlaylistWriteRequest,
    SlideCreateRequest,
    SlideRead,
)
from signage.realtime.change_feed import ChangeFeed
from signage.repositories.playlist_repository import PlaylistRepository
from signage.services.service_type_service import validate_name

logger = logging.getLogger(__name__)


def to_slide_read(slide: SlideEntity) -> SlideRead:
    return SlideRead(
        id=slide.id,
        playlist_id=slide.playlist_id,
        type=slide.type,
        url=slide.url,
        duration=slide.duration,
        order=slide.order,
    )


def to_playlist_read(playlist: PlaylistEntity) -> PlaylistRead:
    slides = sorted(playlist.slides, key=lambda slide: slide.order)
    return PlaylistRead(
        id=playlist.id,
        name=playlist.name,
        created_at=playlist.created_at,
        slides=[to_slide_read(slide) for slide in slides],
    )


class PlaylistService:
    def __init__(
        self,
        playlist_repository: PlaylistRepository,
        change_feed: ChangeFeed,
        database_url: str | None = None,
    ) -> None:
        self.playlist_repository = playlist_repository
        self.change_feed = change_feed
        self.database_url = database_url

    def list_playlists(self) -> list[PlaylistRead]:
        return [to_playlist_read(playlist) for playlist in self.playlist_repository.list()]

    def get_playlist(self, playlist_id: UUID) -> PlaylistRead:
        playlist = self.playlist_repository.get_by_id(playlist_id)
        if playlist is None:
            raise not_found_error("playlist", playlist_id)
        return to_playlist_read(playlist)

    def create_playlist(self, payload: PlaylistWriteRequest) -> PlaylistRead:
        name = validate_name(payload.name, max_length=120, code="INVALID_PLAYLIST_NAME")
        created = self.playlist_repository.create(name=name)
        logger.info("Playlist %r created", name)
        self.change_feed.notify("playlists", "INSERT", created.id)
        return to_playlist_read(created)

    def delete_playlist(self, playlist_id: UUID) -> None:
        # Slides cascade; displays showing it fall back to no playlist.
        with get_connection(self.database_url) as connection:
            playlist = self.playlist_repository.get_by_id(playlist_id, connection=connection)
            if playlist is None:
                raise not_found_error("playlist", playlist_id)
            cleared = self.playlist_repository.detach_displays(playlist_id, connection=connection)
            self.playlist_repository.delete(playlist_id, connection=connection)

        logger.info(
            "Playlist %r deleted with %d slides, cleared from %d displays",
            playlist.name,
            len(playlist.slides),
            len(cleared),
        )
        self.change_feed.notify("playlists", "DELETE", playlist_id)
        for slide in playlist.slides:
            self.change_feed.notify("slides", "DELETE", slide.id)
        for display_id in cleared:
            self.change_feed.notify("tvs", "UPDATE", display_id)

    def add_slide(self, playlist_id: UUID, payload: SlideCreateRequest) -> SlideRead:
        if self.playlist_repository.get_by_id(playlist_id) is None:
            raise not_found_error("playlist", playlist_id)
        slide = self.playlist_repository.add_slide(
            playlist_id=playlist_id,
            url=payload.url.strip(),
            duration=payload.duration,
            slide_type=payload.type,
        )
        self.change_feed.notify("slides", "INSERT", slide.id)
        return to_slide_read(slide)

    def delete_slide(self, slide_id: UUID) -> None:
        if not self.playlist_repository.delete_slide(slide_id):
            raise not_found_error("slide", slide_id)
        self.change_feed.notify("slides", "DELETE", slide_id)
