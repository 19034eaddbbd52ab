import logging
from typing import Any
from uuid import UUID

from fastapi import status
from psycopg.errors import ForeignKeyViolation

from signage.core.errors import AppError, not_found_error
from signage.models.entities import DisplayEntity, Orientation
from signage.models.schemas.display import (
    DisplayContent,
    DisplayCreateRequest,
    DisplayRead,
    DisplayUpdateRequest,
    Resolution,
)
from signage.realtime.change_feed import ChangeFeed
from signage.repositories.display_repository import DisplayRepository
from signage.repositories.playlist_repository import PlaylistRepository
from signage.services.playlist_service import to_playlist_read
from signage.services.queue_service import QueueService
from signage.services.service_type_service import validate_name

logger = logging.getLogger(__name__)

DEFAULT_RESOLUTIONS: dict[Orientation, Resolution] = {
    "landscape": Resolution(width=1920, height=1080),
    "portrait": Resolution(width=1080, height=1920),
}


def to_display_read(display: DisplayEntity) -> DisplayRead:
    return DisplayRead(
        id=display.id,
        name=display.name,
        location=display.location,
        resolution=Resolution(width=display.width, height=display.height),
        orientation=display.orientation,
        display_mode=display.display_mode,
        assigned_playlist_id=display.assigned_playlist_id,
        size_inches=display.size_inches,
        created_at=display.created_at,
    )


class DisplayService:
    def __init__(
        self,
        display_repository: DisplayRepository,
        playlist_repository: PlaylistRepository,
        change_feed: ChangeFeed,
    ) -> None:
        self.display_repository = display_repository
        self.playlist_repository = playlist_repository
        self.change_feed = change_feed

    def list_displays(self) -> list[DisplayRead]:
        return [to_display_read(display) for display in self.display_repository.list()]

    def get_display(self, display_id: UUID) -> DisplayRead:
        return to_display_read(self._get_or_raise(display_id))

    def create_display(self, payload: DisplayCreateRequest) -> DisplayRead:
        name = validate_name(payload.name, max_length=120, code="INVALID_DISPLAY_NAME")
        resolution = payload.resolution or DEFAULT_RESOLUTIONS[payload.orientation]
        created = self.display_repository.create(
            name=name,
            location=payload.location.strip(),
            width=resolution.width,
            height=resolution.height,
            orientation=payload.orientation,
            size_inches=payload.size_inches,
        )
        logger.info("Display %r registered (%s)", name, created.id)
        self.change_feed.notify("tvs", "INSERT", created.id)
        return to_display_read(created)

    def update_display(self, display_id: UUID, payload: DisplayUpdateRequest) -> DisplayRead:
        updates: dict[str, Any] = payload.model_dump(exclude_unset=True)
        if "name" in updates:
            if updates["name"] is None:
                updates.pop("name")
            else:
                updates["name"] = validate_name(
                    updates["name"], max_length=120, code="INVALID_DISPLAY_NAME"
                )
        for column in ("location", "display_mode"):
            if column in updates and updates[column] is None:
                updates.pop(column)
        return self._apply_updates(display_id, updates)

    def assign_playlist(self, display_id: UUID, playlist_id: UUID | None) -> DisplayRead:
        return self._apply_updates(display_id, {"assigned_playlist_id": playlist_id})

    def delete_display(self, display_id: UUID) -> None:
        if not self.display_repository.delete(display_id):
            raise not_found_error("display", display_id)
        self.change_feed.notify("tvs", "DELETE", display_id)

    def get_content(self, display_id: UUID, queue_service: QueueService) -> DisplayContent:
        display = self._get_or_raise(display_id)
        playlist = None
        if display.assigned_playlist_id is not None:
            assigned = self.playlist_repository.get_by_id(display.assigned_playlist_id)
            playlist = to_playlist_read(assigned) if assigned is not None else None

        queue = queue_service.display() if display.display_mode == "queue" else None
        return DisplayContent(display=to_display_read(display), playlist=playlist, queue=queue)

    def _apply_updates(self, display_id: UUID, updates: dict[str, Any]) -> DisplayRead:
        try:
            updated = self.display_repository.update(display_id=display_id, updates=updates)
        except ForeignKeyViolation as exc:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="INVALID_PLAYLIST",
                message="Playlist does not exist.",
                details={"playlist_id": str(updates.get("assigned_playlist_id"))},
            ) from exc
        if updated is None:
            raise not_found_error("display", display_id)

        logger.info("Display %s updated: %s", display_id, sorted(updates))
        self.change_feed.notify("tvs", "UPDATE", display_id)
        return to_display_read(updated)

    def _get_or_raise(self, display_id: UUID) -> DisplayEntity:
        display = self.display_repository.get_by_id(display_id)
        if display is None:
            raise not_found_error("display", display_id)
        return display
