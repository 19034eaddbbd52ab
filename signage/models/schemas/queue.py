from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from signage.models.entities import TicketStatus
from signage.models.schemas.ticket import TicketRead


class CalledTicket(BaseModel):
    id: UUID
    number: str
    called_at: datetime
    attendant_ref: str | None = None
    attendant_label: str | None = None
    desk: str | None = None


class KioskTicketView(BaseModel):
    number: str
    status: TicketStatus
    called: bool
    attendant_label: str | None = None
    desk: str | None = None


class AttendantQueueView(BaseModel):
    waiting: list[TicketRead]
    waiting_count: int
    current: TicketRead | None = None
    in_service: bool


class DisplayQueueView(BaseModel):
    current: CalledTicket | None = None
    history: list[CalledTicket]
    waiting_count: int
    announcement: str | None = None


class KioskTicketResponse(BaseModel):
    data: KioskTicketView


class AttendantQueueResponse(BaseModel):
    data: AttendantQueueView


class DisplayQueueResponse(BaseModel):
    data: DisplayQueueView
