"""Shared FastAPI dependencies: settings-bound collaborators and the caller."""

from typing import Annotated

from fastapi import Depends, Header

from signage.auth.provider import IdentityProvider
from signage.auth.supabase import SupabaseAuthClient
from signage.core.config import Settings, get_settings
from signage.core.errors import unauthenticated_error
from signage.models.entities import CallerIdentity
from signage.realtime.change_feed import ChangeFeed, get_change_feed
from signage.repositories.attendant_repository import AttendantRepository
from signage.repositories.profile_repository import ProfileRepository
from signage.services.identity_service import IdentityService

BEARER_PREFIX = "bearer "


def get_identity_provider(
    settings: Annotated[Settings, Depends(get_settings)],
) -> IdentityProvider:
    return SupabaseAuthClient(settings)


def get_identity_service(
    settings: Annotated[Settings, Depends(get_settings)],
    identity_provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> IdentityService:
    return IdentityService(
        profile_repository=ProfileRepository(),
        attendant_repository=AttendantRepository(),
        identity_provider=identity_provider,
        allow_legacy_attendants=settings.allow_legacy_attendants,
    )


def bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX) :].strip()
    return token or None


def get_caller(
    identity_service: Annotated[IdentityService, Depends(get_identity_service)],
    authorization: Annotated[str | None, Header()] = None,
    x_attendant_id: Annotated[str | None, Header()] = None,
) -> CallerIdentity | None:
    return identity_service.resolve(
        access_token=bearer_token(authorization),
        legacy_attendant_id=x_attendant_id,
    )


def require_caller(
    caller: Annotated[CallerIdentity | None, Depends(get_caller)],
) -> CallerIdentity:
    if caller is None:
        raise unauthenticated_error()
    return caller


Caller = Annotated[CallerIdentity | None, Depends(get_caller)]
SignedInCaller = Annotated[CallerIdentity, Depends(require_caller)]
ChangeFeedDep = Annotated[ChangeFeed, Depends(get_change_feed)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
