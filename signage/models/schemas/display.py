from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from signage.models.entities import DisplayMode, Orientation
from signage.models.schemas.playlist import PlaylistRead
from signage.models.schemas.queue import DisplayQueueView


class Resolution(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)


class DisplayRead(BaseModel):
    id: UUID
    name: str
    location: str
    resolution: Resolution
    orientation: Orientation
    display_mode: DisplayMode
    assigned_playlist_id: UUID | None = None
    size_inches: int | None = None
    created_at: datetime


class DisplayCreateRequest(BaseModel):
    name: str
    location: str = ""
    orientation: Orientation = "landscape"
    resolution: Resolution | None = None
    size_inches: int | None = Field(default=None, gt=0)


class DisplayUpdateRequest(BaseModel):
    name: str | None = None
    location: str | None = None
    display_mode: DisplayMode | None = None
    assigned_playlist_id: UUID | None = None


class PlaylistAssignRequest(BaseModel):
    playlist_id: UUID | None = None


class DisplayContent(BaseModel):
    display: DisplayRead
    playlist: PlaylistRead | None = None
    queue: DisplayQueueView | None = None


class DisplayDataResponse(BaseModel):
    data: DisplayRead


class DisplayListResponse(BaseModel):
    data: list[DisplayRead]


class DisplayContentResponse(BaseModel):
    data: DisplayContent
