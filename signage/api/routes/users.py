from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from signage.api.dependencies import Caller, ChangeFeedDep, get_identity_provider
from signage.auth.provider import IdentityProvider
from signage.models.schemas.user import (
    ProfileDataResponse,
    ProfileListResponse,
    UserCreateRequest,
    UserDeletionResponse,
    UserUpdateRequest,
)
from signage.repositories.profile_repository import ProfileRepository
from signage.repositories.ticket_repository import TicketRepository
from signage.services.user_service import UserService

router = APIRouter(prefix="/users")


def get_user_service(
    change_feed: ChangeFeedDep,
    identity_provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> UserService:
    return UserService(
        profile_repository=ProfileRepository(),
        ticket_repository=TicketRepository(),
        identity_provider=identity_provider,
        change_feed=change_feed,
    )


UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.get("", response_model=ProfileListResponse)
def list_users(user_service: UserServiceDep, caller: Caller) -> ProfileListResponse:
    return ProfileListResponse(data=user_service.list_users(caller))


@router.get("/me", response_model=ProfileDataResponse)
def get_me(user_service: UserServiceDep, caller: Caller) -> ProfileDataResponse:
    return ProfileDataResponse(data=user_service.get_me(caller))


@router.post("", response_model=ProfileDataResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreateRequest,
    user_service: UserServiceDep,
    caller: Caller,
) -> ProfileDataResponse:
    return ProfileDataResponse(data=user_service.create_user(caller, payload))


@router.patch("/{user_id}", response_model=ProfileDataResponse)
def update_user(
    user_id: UUID,
    payload: UserUpdateRequest,
    user_service: UserServiceDep,
    caller: Caller,
) -> ProfileDataResponse:
    return ProfileDataResponse(data=user_service.update_user(caller, user_id, payload))


@router.delete("/{user_id}", response_model=UserDeletionResponse)
def delete_user(user_id: UUID, user_service: UserServiceDep, caller: Caller) -> UserDeletionResponse:
    return UserDeletionResponse(data=user_service.delete_user(caller, user_id))
