"""Domain models and API schemas."""

from signage.models.entities import (
    AttendantEntity,
    CallerIdentity,
    DisplayEntity,
    PlaylistEntity,
    ProfileEntity,
    ServiceTypeEntity,
    SlideEntity,
    TicketEntity,
    TicketStatus,
)

__all__ = [
    "AttendantEntity",
    "CallerIdentity",
    "DisplayEntity",
    "PlaylistEntity",
    "ProfileEntity",
    "ServiceTypeEntity",
    "SlideEntity",
    "TicketEntity",
    "TicketStatus",
]
