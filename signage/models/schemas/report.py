from datetime import date
from uuid import UUID

from pydantic import BaseModel


class ServiceTypeStat(BaseModel):
    service_type_id: UUID
    name: str
    count: int
    average_wait_minutes: int


class AttendantStat(BaseModel):
    attendant_ref: str
    name: str
    role: str
    count: int


class QueueReport(BaseModel):
    start_date: date
    end_date: date
    total_created: int
    total_handled: int
    in_progress: int
    average_wait_minutes: int
    efficiency_percent: int
    service_types: list[ServiceTypeStat]
    attendants: list[AttendantStat]
    hourly: list[int]
    peak_hour: int | None = None


class QueueReportResponse(BaseModel):
    data: QueueReport
