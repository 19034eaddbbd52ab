from typing import Annotated

from fastapi import APIRouter, Depends

from signage.api.dependencies import Caller, SettingsDep, get_identity_service
from signage.models.schemas.queue import (
    AttendantQueueResponse,
    DisplayQueueResponse,
    KioskTicketResponse,
)
from signage.repositories.ticket_repository import TicketRepository
from signage.services.identity_service import IdentityService
from signage.services.queue_service import QueueService

router = APIRouter(prefix="/queue")


def get_queue_service(
    settings: SettingsDep,
    identity_service: Annotated[IdentityService, Depends(get_identity_service)],
) -> QueueService:
    return QueueService(
        ticket_repository=TicketRepository(),
        identity_service=identity_service,
        tz=settings.timezone,
        history_size=settings.display_history_size,
    )


QueueServiceDep = Annotated[QueueService, Depends(get_queue_service)]


@router.get("/kiosk/{number}", response_model=KioskTicketResponse)
def kiosk_ticket(number: str, queue_service: QueueServiceDep) -> KioskTicketResponse:
    return KioskTicketResponse(data=queue_service.kiosk(number))


@router.get("/attendant", response_model=AttendantQueueResponse)
def attendant_queue(queue_service: QueueServiceDep, caller: Caller) -> AttendantQueueResponse:
    return AttendantQueueResponse(data=queue_service.attendant(caller))


@router.get("/display", response_model=DisplayQueueResponse)
def display_queue(queue_service: QueueServiceDep) -> DisplayQueueResponse:
    return DisplayQueueResponse(data=queue_service.display())
