from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal
from uuid import UUID

TicketStatus = Literal["waiting", "called", "completed"]
ProfileRole = Literal["super_admin", "editor", "viewer", "attendant"]
DisplayMode = Literal["playlist", "queue"]
Orientation = Literal["landscape", "portrait"]
SlideType = Literal["image"]

TICKET_STATUSES: tuple[TicketStatus, ...] = ("waiting", "called", "completed")
PROFILE_ROLES: tuple[ProfileRole, ...] = ("super_admin", "editor", "viewer", "attendant")


@dataclass(slots=True)
class TicketEntity:
    id: UUID
    number: str
    status: TicketStatus
    created_at: datetime
    called_at: datetime | None = None
    attendant_ref: str | None = None
    attendant_label: str | None = None
    service_type_ref: UUID | None = None


@dataclass(slots=True)
class ServiceTypeEntity:
    id: UUID
    name: str
    created_at: datetime


@dataclass(slots=True)
class AttendantEntity:
    id: UUID
    name: str
    desk_number: str | None
    created_at: datetime


@dataclass(slots=True)
class ProfileEntity:
    id: UUID
    role: ProfileRole
    email: str | None = None
    name: str | None = None
    desk_info: str | None = None


@dataclass(slots=True)
class DisplayEntity:
    id: UUID
    name: str
    location: str
    width: int
    height: int
    orientation: Orientation
    display_mode: DisplayMode
    assigned_playlist_id: UUID | None
    created_at: datetime
    size_inches: int | None = None


@dataclass(slots=True)
class SlideEntity:
    id: UUID
    playlist_id: UUID
    type: SlideType
    url: str
    duration: int
    order: int


@dataclass(slots=True)
class PlaylistEntity:
    id: UUID
    name: str
    created_at: datetime
    slides: list[SlideEntity] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class CallerIdentity:
    """Whoever calls and completes tickets: an account profile or a legacy attendant."""

    ref: str
    label: str
    desk: str | None = None
    role: ProfileRole = "attendant"

    @property
    def is_super_admin(self) -> bool:
        return self.role == "super_admin"
