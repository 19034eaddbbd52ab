"""Pydantic schema definitions."""

from signage.models.schemas.attendant import AttendantRead, AttendantWriteRequest
from signage.models.schemas.display import DisplayContent, DisplayRead, Resolution
from signage.models.schemas.health import DatabaseHealth, HealthResponse
from signage.models.schemas.playlist import PlaylistRead, SlideRead
from signage.models.schemas.queue import (
    AttendantQueueView,
    CalledTicket,
    DisplayQueueView,
    KioskTicketView,
)
from signage.models.schemas.report import AttendantStat, QueueReport, ServiceTypeStat
from signage.models.schemas.service_type import ServiceTypeRead, ServiceTypeWriteRequest
from signage.models.schemas.ticket import TicketCompleteRequest, TicketRead
from signage.models.schemas.user import ProfileRead, StepResult, UserDeletionResult

__all__ = [
    "AttendantQueueView",
    "AttendantRead",
    "AttendantStat",
    "AttendantWriteRequest",
    "CalledTicket",
    "DatabaseHealth",
    "DisplayContent",
    "DisplayQueueView",
    "DisplayRead",
    "HealthResponse",
    "KioskTicketView",
    "PlaylistRead",
    "ProfileRead",
    "QueueReport",
    "Resolution",
    "ServiceTypeRead",
    "ServiceTypeStat",
    "ServiceTypeWriteRequest",
    "SlideRead",
    "StepResult",
    "TicketCompleteRequest",
    "TicketRead",
    "UserDeletionResult",
]
