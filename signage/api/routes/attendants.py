from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from signage.api.dependencies import ChangeFeedDep, SignedInCaller
from signage.models.schemas.attendant import (
    AttendantDataResponse,
    AttendantListResponse,
    AttendantWriteRequest,
)
from signage.repositories.attendant_repository import AttendantRepository
from signage.services.attendant_service import AttendantService

router = APIRouter(prefix="/attendants")


def get_attendant_service(change_feed: ChangeFeedDep) -> AttendantService:
    return AttendantService(attendant_repository=AttendantRepository(), change_feed=change_feed)


AttendantServiceDep = Annotated[AttendantService, Depends(get_attendant_service)]


@router.get("", response_model=AttendantListResponse)
def list_attendants(service: AttendantServiceDep) -> AttendantListResponse:
    return AttendantListResponse(data=service.list_attendants())


@router.post("", response_model=AttendantDataResponse, status_code=status.HTTP_201_CREATED)
def create_attendant(
    payload: AttendantWriteRequest,
    service: AttendantServiceDep,
    _: SignedInCaller,
) -> AttendantDataResponse:
    return AttendantDataResponse(data=service.create_attendant(payload))


@router.delete("/{attendant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_attendant(
    attendant_id: UUID,
    service: AttendantServiceDep,
    _: SignedInCaller,
) -> Response:
    service.delete_attendant(attendant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
