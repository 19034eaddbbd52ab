import logging
from collections.abc import Iterable, Iterator
from uuid import UUID

from fastapi import status
from psycopg import Connection

from signage.auth.provider import AuthProviderError, IdentityProvider
from signage.core.errors import AppError, forbidden_error, unauthenticated_error
from signage.models.entities import (
    AttendantEntity,
    CallerIdentity,
    ProfileEntity,
    ProfileRole,
    TicketEntity,
)
from signage.repositories.attendant_repository import AttendantRepository
from signage.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

OPERATOR_ROLES: tuple[ProfileRole, ...] = ("super_admin", "attendant")


def identity_from_profile(profile: ProfileEntity) -> CallerIdentity:
    return CallerIdentity(
        ref=str(profile.id),
        label=profile.name or profile.email or "Attendant",
        desk=profile.desk_info,
        role=profile.role,
    )


def identity_from_attendant(attendant: AttendantEntity) -> CallerIdentity:
    return CallerIdentity(
        ref=str(attendant.id),
        label=attendant.name,
        desk=attendant.desk_number,
        role="attendant",
    )


class IdentityDirectory:
    """Every known caller identity, keyed by the ref stored on tickets."""

    def __init__(self, identities: Iterable[CallerIdentity] = ()) -> None:
        self._by_ref = {identity.ref: identity for identity in identities}

    def __iter__(self) -> Iterator[CallerIdentity]:
        return iter(self._by_ref.values())

    def __len__(self) -> int:
        return len(self._by_ref)

    def get(self, ref: str | None) -> CallerIdentity | None:
        if ref is None:
            return None
        return self._by_ref.get(ref)

    def describe(self, ticket: TicketEntity) -> tuple[str | None, str | None]:
        """Label and desk of whoever called ``ticket``."""
        identity = self.get(ticket.attendant_ref)
        if identity is not None:
            return identity.label, identity.desk
        return ticket.attendant_label, None


def require_operator(identity: CallerIdentity | None) -> CallerIdentity:
    if identity is None:
        raise unauthenticated_error()
    if identity.role not in OPERATOR_ROLES:
        raise forbidden_error("attendant")
    return identity


def require_super_admin(identity: CallerIdentity | None) -> CallerIdentity:
    if identity is None:
        raise unauthenticated_error()
    if not identity.is_super_admin:
        raise forbidden_error("super_admin")
    return identity


class IdentityService:
    def __init__(
        self,
        profile_repository: ProfileRepository,
        attendant_repository: AttendantRepository,
        identity_provider: IdentityProvider,
        allow_legacy_attendants: bool = False,
    ) -> None:
        self.profile_repository = profile_repository
        self.attendant_repository = attendant_repository
        self.identity_provider = identity_provider
        self.allow_legacy_attendants = allow_legacy_attendants

    def resolve(
        self,
        *,
        access_token: str | None,
        legacy_attendant_id: str | None = None,
    ) -> CallerIdentity | None:
        if access_token:
            return self._resolve_account(access_token)
        if legacy_attendant_id and self.allow_legacy_attendants:
            return self._resolve_legacy_attendant(legacy_attendant_id)
        return None

    def _resolve_account(self, access_token: str) -> CallerIdentity | None:
        try:
            user = self.identity_provider.get_user(access_token)
        except AuthProviderError as exc:
            logger.warning("Identity provider rejected token lookup: %s", exc)
            raise AppError(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                code="BACKEND_UNAVAILABLE",
                message="Could not verify the current session.",
            ) from exc
        if user is None:
            return None

        profile = self.profile_repository.get_by_id(UUID(user.id))
        if profile is None:
            logger.info("Authenticated user %s has no profile yet", user.id)
            return CallerIdentity(ref=user.id, label=user.email or user.id, role="viewer")
        return identity_from_profile(profile)

    def _resolve_legacy_attendant(self, attendant_id: str) -> CallerIdentity | None:
        try:
            parsed = UUID(attendant_id)
        except ValueError:
            return None
        attendant = self.attendant_repository.get_by_id(parsed)
        if attendant is None:
            return None
        return identity_from_attendant(attendant)

    def directory(
        self,
        connection: Connection | None = None,
        *,
        include_legacy: bool = True,
    ) -> IdentityDirectory:
        identities = [
            identity_from_profile(profile)
            for profile in self.profile_repository.list(connection=connection)
        ]
        if include_legacy:
            identities.extend(
                identity_from_attendant(attendant)
                for attendant in self.attendant_repository.list(connection=connection)
            )
        return IdentityDirectory(identities)
