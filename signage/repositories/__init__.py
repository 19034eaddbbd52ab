"""Database repositories."""

from signage.repositories.attendant_repository import AttendantRepository
from signage.repositories.display_repository import DisplayRepository
from signage.repositories.health_repository import HealthRepository
from signage.repositories.playlist_repository import PlaylistRepository
from signage.repositories.profile_repository import ProfileRepository
from signage.repositories.service_type_repository import ServiceTypeRepository
from signage.repositories.ticket_repository import TicketRepository

__all__ = [
    "AttendantRepository",
    "DisplayRepository",
    "HealthRepository",
    "PlaylistRepository",
    "ProfileRepository",
    "ServiceTypeRepository",
    "TicketRepository",
]
