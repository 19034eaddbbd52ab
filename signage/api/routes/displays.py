from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from signage.api.dependencies import ChangeFeedDep, SignedInCaller
from signage.api.routes.queue import QueueServiceDep
from signage.models.schemas.display import (
    DisplayContentResponse,
    DisplayCreateRequest,
    DisplayDataResponse,
    DisplayListResponse,
    DisplayUpdateRequest,
    PlaylistAssignRequest,
)
from signage.repositories.display_repository import DisplayRepository
from signage.repositories.playlist_repository import PlaylistRepository
from signage.services.display_service import DisplayService

router = APIRouter(prefix="/displays")


def get_display_service(change_feed: ChangeFeedDep) -> DisplayService:
    return DisplayService(
        display_repository=DisplayRepository(),
        playlist_repository=PlaylistRepository(),
        change_feed=change_feed,
    )


DisplayServiceDep = Annotated[DisplayService, Depends(get_display_service)]


@router.get("", response_model=DisplayListResponse)
def list_displays(service: DisplayServiceDep) -> DisplayListResponse:
    return DisplayListResponse(data=service.list_displays())


@router.post("", response_model=DisplayDataResponse, status_code=status.HTTP_201_CREATED)
def create_display(
    payload: DisplayCreateRequest,
    service: DisplayServiceDep,
    _: SignedInCaller,
) -> DisplayDataResponse:
    return DisplayDataResponse(data=service.create_display(payload))


@router.get("/{display_id}", response_model=DisplayDataResponse)
def get_display(display_id: UUID, service: DisplayServiceDep) -> DisplayDataResponse:
    return DisplayDataResponse(data=service.get_display(display_id))


@router.patch("/{display_id}", response_model=DisplayDataResponse)
def update_display(
    display_id: UUID,
    payload: DisplayUpdateRequest,
    service: DisplayServiceDep,
    _: SignedInCaller,
) -> DisplayDataResponse:
    return DisplayDataResponse(data=service.update_display(display_id, payload))


@router.delete("/{display_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_display(
    display_id: UUID,
    service: DisplayServiceDep,
    _: SignedInCaller,
) -> Response:
    service.delete_display(display_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{display_id}/playlist", response_model=DisplayDataResponse)
def assign_playlist(
    display_id: UUID,
    payload: PlaylistAssignRequest,
    service: DisplayServiceDep,
    _: SignedInCaller,
) -> DisplayDataResponse:
    return DisplayDataResponse(data=service.assign_playlist(display_id, payload.playlist_id))


@router.get("/{display_id}/content", response_model=DisplayContentResponse)
def display_content(
    display_id: UUID,
    service: DisplayServiceDep,
    queue_service: QueueServiceDep,
) -> DisplayContentResponse:
    return DisplayContentResponse(data=service.get_content(display_id, queue_service))
