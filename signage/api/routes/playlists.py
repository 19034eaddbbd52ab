from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from signage.api.dependencies import ChangeFeedDep, SignedInCaller
from signage.models.schemas.playlist import (
    PlaylistDataResponse,
    PlaylistListResponse,
    PlaylistWriteRequest,
    SlideCreateRequest,
    SlideDataResponse,
)
from signage.repositories.playlist_repository import PlaylistRepository
from signage.services.playlist_service import PlaylistService

router = APIRouter()


def get_playlist_service(change_feed: ChangeFeedDep) -> PlaylistService:
    return PlaylistService(playlist_repository=PlaylistRepository(), change_feed=change_feed)


PlaylistServiceDep = Annotated[PlaylistService, Depends(get_playlist_service)]


@router.get("/playlists", response_model=PlaylistListResponse)
def list_playlists(service: PlaylistServiceDep) -> PlaylistListResponse:
    return PlaylistListResponse(data=service.list_playlists())


@router.post("/playlists", response_model=PlaylistDataResponse, status_code=status.HTTP_201_CREATED)
def create_playlist(
    payload: PlaylistWriteRequest,
    service: PlaylistServiceDep,
    _: SignedInCaller,
) -> PlaylistDataResponse:
    return PlaylistDataResponse(data=service.create_playlist(payload))


@router.delete("/playlists/{playlist_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_playlist(
    playlist_id: UUID,
    service: PlaylistServiceDep,
    _: SignedInCaller,
) -> Response:
    service.delete_playlist(playlist_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/playlists/{playlist_id}/slides",
    response_model=SlideDataResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_slide(
    playlist_id: UUID,
    payload: SlideCreateRequest,
    service: PlaylistServiceDep,
    _: SignedInCaller,
) -> SlideDataResponse:
    return SlideDataResponse(data=service.add_slide(playlist_id, payload))


@router.delete("/slides/{slide_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_slide(
    slide_id: UUID,
    service: PlaylistServiceDep,
    _: SignedInCaller,
) -> Response:
    service.delete_slide(slide_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
