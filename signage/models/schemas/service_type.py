from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class ServiceTypeWriteRequest(BaseModel):
    name: str


class ServiceTypeRead(BaseModel):
    id: UUID
    name: str
    created_at: datetime


class ServiceTypeDataResponse(BaseModel):
    data: ServiceTypeRead


class ServiceTypeListResponse(BaseModel):
    data: list[ServiceTypeRead]
