from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from signage.models.entities import SlideType


class SlideRead(BaseModel):
    id: UUID
    playlist_id: UUID
    type: SlideType
    url: str
    duration: int
    order: int


class PlaylistRead(BaseModel):
    id: UUID
    name: str
    created_at: datetime
    slides: list[SlideRead]


class PlaylistWriteRequest(BaseModel):
    name: str


class SlideCreateRequest(BaseModel):
    url: str
    duration: int = Field(gt=0)
    type: SlideType = "image"


class PlaylistDataResponse(BaseModel):
    data: PlaylistRead


class PlaylistListResponse(BaseModel):
    data: list[PlaylistRead]


class SlideDataResponse(BaseModel):
    data: SlideRead
