from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class AttendantWriteRequest(BaseModel):
    name: str
    desk_number: str | None = None


class AttendantRead(BaseModel):
    id: UUID
    name: str
    desk_number: str | None = None
    created_at: datetime


class AttendantDataResponse(BaseModel):
    data: AttendantRead


class AttendantListResponse(BaseModel):
    data: list[AttendantRead]
