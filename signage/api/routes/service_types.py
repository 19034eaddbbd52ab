from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from signage.api.dependencies import ChangeFeedDep, SignedInCaller
from signage.models.schemas.service_type import (
    ServiceTypeDataResponse,
    ServiceTypeListResponse,
    ServiceTypeWriteRequest,
)
from signage.repositories.service_type_repository import ServiceTypeRepository
from signage.services.service_type_service import ServiceTypeService

router = APIRouter(prefix="/service-types")


def get_service_type_service(change_feed: ChangeFeedDep) -> ServiceTypeService:
    return ServiceTypeService(
        service_type_repository=ServiceTypeRepository(),
        change_feed=change_feed,
    )


ServiceTypeServiceDep = Annotated[ServiceTypeService, Depends(get_service_type_service)]


@router.get("", response_model=ServiceTypeListResponse)
def list_service_types(service: ServiceTypeServiceDep) -> ServiceTypeListResponse:
    return ServiceTypeListResponse(data=service.list_service_types())


@router.post("", response_model=ServiceTypeDataResponse, status_code=status.HTTP_201_CREATED)
def create_service_type(
    payload: ServiceTypeWriteRequest,
    service: ServiceTypeServiceDep,
    _: SignedInCaller,
) -> ServiceTypeDataResponse:
    return ServiceTypeDataResponse(data=service.create_service_type(payload))


@router.delete("/{service_type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_service_type(
    service_type_id: UUID,
    service: ServiceTypeServiceDep,
    _: SignedInCaller,
) -> Response:
    service.delete_service_type(service_type_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
