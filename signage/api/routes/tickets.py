from datetime import datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from signage.api.dependencies import Caller, ChangeFeedDep, SettingsDep
from signage.models.entities import TicketStatus
from signage.models.schemas.ticket import (
    TicketCompleteRequest,
    TicketDataResponse,
    TicketListResponse,
)
from signage.repositories.service_type_repository import ServiceTypeRepository
from signage.repositories.ticket_repository import TicketRepository
from signage.services.ticket_numbering import TicketNumberGenerator
from signage.services.ticket_service import TicketService

router = APIRouter(prefix="/tickets")


def get_ticket_service(settings: SettingsDep, change_feed: ChangeFeedDep) -> TicketService:
    ticket_repository = TicketRepository()
    return TicketService(
        ticket_repository=ticket_repository,
        service_type_repository=ServiceTypeRepository(),
        number_generator=TicketNumberGenerator(
            ticket_repository=ticket_repository,
            strategy=settings.ticket_number_strategy,
            tz=settings.timezone,
        ),
        change_feed=change_feed,
        require_service_type=settings.require_service_type_on_complete,
    )


TicketServiceDep = Annotated[TicketService, Depends(get_ticket_service)]


@router.post("", response_model=TicketDataResponse, status_code=status.HTTP_201_CREATED)
def create_ticket(ticket_service: TicketServiceDep) -> TicketDataResponse:
    return TicketDataResponse(data=ticket_service.create_ticket())


@router.get("", response_model=TicketListResponse)
def list_tickets(
    ticket_service: TicketServiceDep,
    status: Annotated[TicketStatus | None, Query()] = None,
    created_from: Annotated[datetime | None, Query()] = None,
    created_to: Annotated[datetime | None, Query()] = None,
) -> TicketListResponse:
    return ticket_service.list_tickets(
        status=status,
        created_from=created_from,
        created_to=created_to,
    )


@router.post("/call-next", response_model=TicketDataResponse)
def call_next_ticket(ticket_service: TicketServiceDep, caller: Caller) -> TicketDataResponse:
    return TicketDataResponse(data=ticket_service.call_next(caller))


@router.get("/{ticket_id}", response_model=TicketDataResponse)
def get_ticket(ticket_id: UUID, ticket_service: TicketServiceDep) -> TicketDataResponse:
    return TicketDataResponse(data=ticket_service.get_ticket(ticket_id))


@router.post("/{ticket_id}/call", response_model=TicketDataResponse)
def call_ticket(
    ticket_id: UUID,
    ticket_service: TicketServiceDep,
    caller: Caller,
) -> TicketDataResponse:
    return TicketDataResponse(data=ticket_service.call_ticket(ticket_id, caller))


@router.post("/{ticket_id}/complete", response_model=TicketDataResponse)
def complete_ticket(
    ticket_id: UUID,
    ticket_service: TicketServiceDep,
    caller: Caller,
    payload: TicketCompleteRequest | None = None,
) -> TicketDataResponse:
    ticket = ticket_service.complete_ticket(
        ticket_id,
        caller,
        service_type_id=payload.service_type_id if payload else None,
    )
    return TicketDataResponse(data=ticket)
