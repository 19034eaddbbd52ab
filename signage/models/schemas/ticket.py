from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from signage.models.entities import TicketStatus


class TicketRead(BaseModel):
    id: UUID
    number: str
    status: TicketStatus
    created_at: datetime
    called_at: datetime | None = None
    attendant_ref: str | None = None
    attendant_label: str | None = None
    service_type_ref: UUID | None = None


class TicketCompleteRequest(BaseModel):
    service_type_id: UUID | None = None


class TicketDataResponse(BaseModel):
    data: TicketRead


class TicketListResponse(BaseModel):
    data: list[TicketRead]
