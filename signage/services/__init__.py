"""Business services."""

from signage.services.attendant_service import AttendantService
from signage.services.display_service import DisplayService
from signage.services.health_service import HealthService
from signage.services.identity_service import IdentityService
from signage.services.playlist_service import PlaylistService
from signage.services.queue_service import QueueService
from signage.services.report_service import ReportService
from signage.services.service_type_service import ServiceTypeService
from signage.services.ticket_service import TicketService
from signage.services.user_service import UserService

__all__ = [
    "AttendantService",
    "DisplayService",
    "HealthService",
    "IdentityService",
    "PlaylistService",
    "QueueService",
    "ReportService",
    "ServiceTypeService",
    "TicketService",
    "UserService",
]
