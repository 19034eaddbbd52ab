from datetime import UTC, datetime
from uuid import uuid4

import httpx
import pytest
from fastapi import status
from signage.auth.provider import AuthProviderError, AuthUser
from signage.auth.supabase import SupabaseAuthClient
from signage.core.config import Settings
from signage.core.errors import AppError
from signage.models.entities import AttendantEntity, ProfileEntity
from signage.services.identity_service import IdentityService
from tests.helpers.fakes import (
    FakeAttendantRepository,
    FakeIdentityProvider,
    FakeProfileRepository,
)

PROFILE = ProfileEntity(id=uuid4(), role="attendant", email="ana@example.com", desk_info="Desk 2")
LEGACY = AttendantEntity(id=uuid4(), name="Carlos", desk_number="Guiche 5", created_at=datetime.now(UTC))


def _service(provider: FakeIdentityProvider, allow_legacy: bool = False) -> IdentityService:
    return IdentityService(
        profile_repository=FakeProfileRepository([PROFILE]),
        attendant_repository=FakeAttendantRepository([LEGACY]),
        identity_provider=provider,
        allow_legacy_attendants=allow_legacy,
    )


def test_token_resolves_profile_identity() -> None:
    provider = FakeIdentityProvider({"good": AuthUser(id=str(PROFILE.id), email=PROFILE.email)})

    identity = _service(provider).resolve(access_token="good")

    assert identity is not None
    assert identity.ref == str(PROFILE.id)
    # No name on the profile: the email is shown instead.
    assert identity.label == "ana@example.com"
    assert identity.desk == "Desk 2"


def test_unknown_token_is_anonymous() -> None:
    assert _service(FakeIdentityProvider()).resolve(access_token="nope") is None


def test_user_without_profile_is_a_viewer() -> None:
    user = AuthUser(id=str(uuid4()), email="new@example.com")
    identity = _service(FakeIdentityProvider({"t": user})).resolve(access_token="t")

    assert identity is not None
    assert identity.role == "viewer"


def test_legacy_attendant_only_when_enabled() -> None:
    provider = FakeIdentityProvider()

    assert _service(provider).resolve(access_token=None, legacy_attendant_id=str(LEGACY.id)) is None

    identity = _service(provider, allow_legacy=True).resolve(
        access_token=None,
        legacy_attendant_id=str(LEGACY.id),
    )
    assert identity is not None
    assert identity.label == "Carlos"
    assert identity.desk == "Guiche 5"

    assert (
        _service(provider, allow_legacy=True).resolve(
            access_token=None, legacy_attendant_id="not-a-uuid"
        )
        is None
    )


def test_provider_outage_is_backend_unavailable() -> None:
    class _Broken(FakeIdentityProvider):
        def get_user(self, access_token: str) -> AuthUser | None:
            raise AuthProviderError("timeout")

    with pytest.raises(AppError) as exc:
        _service(_Broken()).resolve(access_token="any")
    assert exc.value.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


def test_unreachable_auth_server_is_backend_unavailable() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    provider = SupabaseAuthClient(
        Settings(supabase_url="https://auth.example.test", supabase_anon_key="anon"),
        transport=httpx.MockTransport(refuse),
    )

    with pytest.raises(AppError) as exc:
        _service(provider).resolve(access_token="tok")
    assert exc.value.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert exc.value.code == "BACKEND_UNAVAILABLE"


def test_directory_covers_profiles_and_legacy_attendants() -> None:
    directory = _service(FakeIdentityProvider()).directory()

    assert len(directory) == 2
    assert directory.get(str(LEGACY.id)).label == "Carlos"
    assert directory.get(str(PROFILE.id)).label == "ana@example.com"
    assert directory.get(None) is None


def test_directory_can_leave_out_legacy_attendants() -> None:
    directory = _service(FakeIdentityProvider()).directory(include_legacy=False)

    assert len(directory) == 1
    assert directory.get(str(LEGACY.id)) is None
