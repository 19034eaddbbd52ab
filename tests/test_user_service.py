from datetime import UTC, datetime
from uuid import uuid4

import httpx
import pytest
from fastapi import status
from psycopg import OperationalError
from signage.auth.supabase import SupabaseAuthClient
from signage.core.config import Settings
from signage.core.errors import AppError
from signage.models.entities import CallerIdentity, ProfileEntity
from signage.models.schemas.user import UserCreateRequest, UserUpdateRequest
from signage.realtime.change_feed import ChangeFeed
from signage.services.user_service import UserService
from tests.helpers.fakes import (
    FakeIdentityProvider,
    FakeProfileRepository,
    FakeTicketRepository,
    make_ticket,
)

NOW = datetime(2026, 10, 18, 12, tzinfo=UTC)


@pytest.fixture
def admin() -> ProfileEntity:
    return ProfileEntity(id=uuid4(), role="super_admin", email="admin@example.com", name="Admin")


@pytest.fixture
def attendant() -> ProfileEntity:
    return ProfileEntity(
        id=uuid4(),
        role="attendant",
        email="ana@example.com",
        name="Ana",
        desk_info="Desk 3",
    )


@pytest.fixture
def profiles(admin: ProfileEntity, attendant: ProfileEntity) -> FakeProfileRepository:
    return FakeProfileRepository([admin, attendant])


@pytest.fixture
def tickets(attendant: ProfileEntity) -> FakeTicketRepository:
    return FakeTicketRepository(
        [
            make_ticket(
                "#001",
                NOW,
                status="completed",
                called_at=NOW,
                attendant_ref=str(attendant.id),
            )
        ]
    )


@pytest.fixture
def provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def user_service(
    profiles: FakeProfileRepository,
    tickets: FakeTicketRepository,
    provider: FakeIdentityProvider,
) -> UserService:
    return UserService(
        profile_repository=profiles,
        ticket_repository=tickets,
        identity_provider=provider,
        change_feed=ChangeFeed(),
    )


def _as(profile: ProfileEntity) -> CallerIdentity:
    return CallerIdentity(ref=str(profile.id), label=profile.name or "", role=profile.role)


def test_only_super_admin_manages_accounts(
    user_service: UserService,
    attendant: ProfileEntity,
) -> None:
    with pytest.raises(AppError) as exc:
        user_service.list_users(_as(attendant))
    assert exc.value.status_code == status.HTTP_403_FORBIDDEN

    with pytest.raises(AppError) as exc:
        user_service.list_users(None)
    assert exc.value.status_code == status.HTTP_401_UNAUTHORIZED


def test_create_user_registers_account_and_profile(
    user_service: UserService,
    admin: ProfileEntity,
    provider: FakeIdentityProvider,
    profiles: FakeProfileRepository,
) -> None:
    created = user_service.create_user(
        _as(admin),
        UserCreateRequest(
            email="  Bruno@Example.com ",
            password="secret1",
            name=" Bruno ",
            desk_info="Desk 4",
        ),
    )

    assert created.email == "bruno@example.com"
    assert created.name == "Bruno"
    assert created.role == "attendant"
    assert provider.created[0].id == str(created.id)
    assert profiles.get_by_id(created.id) is not None


def test_create_user_reports_provider_rejection(
    user_service: UserService,
    admin: ProfileEntity,
    provider: FakeIdentityProvider,
) -> None:
    provider.fail_create = "User already registered"

    with pytest.raises(AppError) as exc:
        user_service.create_user(
            _as(admin),
            UserCreateRequest(email="ana@example.com", password="secret1", name="Ana"),
        )
    assert exc.value.code == "USER_CREATE_FAILED"
    assert exc.value.message == "User already registered"


def test_update_user_changes_only_sent_fields(
    user_service: UserService,
    admin: ProfileEntity,
    attendant: ProfileEntity,
) -> None:
    updated = user_service.update_user(
        _as(admin),
        attendant.id,
        UserUpdateRequest(desk_info="Desk 9", role=None),
    )

    assert updated.desk_info == "Desk 9"
    assert updated.name == "Ana"
    assert updated.role == "attendant"


def test_delete_user_runs_every_step(
    user_service: UserService,
    admin: ProfileEntity,
    attendant: ProfileEntity,
    tickets: FakeTicketRepository,
    profiles: FakeProfileRepository,
    provider: FakeIdentityProvider,
) -> None:
    result = user_service.delete_user(_as(admin), attendant.id)

    assert result.success is True
    assert [step.step for step in result.steps] == [
        "detach_tickets",
        "delete_profile",
        "delete_account",
    ]
    assert profiles.get_by_id(attendant.id) is None
    assert provider.deleted == [str(attendant.id)]

    # History keeps who served the ticket.
    ticket = next(iter(tickets.store.values()))
    assert ticket.attendant_ref == str(attendant.id)
    assert ticket.attendant_label == "Ana"


def test_delete_user_reports_partial_failure_and_can_be_retried(
    user_service: UserService,
    admin: ProfileEntity,
    attendant: ProfileEntity,
    profiles: FakeProfileRepository,
    provider: FakeIdentityProvider,
) -> None:
    provider.fail_delete = "auth service unavailable"

    first = user_service.delete_user(_as(admin), attendant.id)

    assert first.success is False
    outcomes = {step.step: step.success for step in first.steps}
    assert outcomes == {"detach_tickets": True, "delete_profile": True, "delete_account": False}
    assert profiles.get_by_id(attendant.id) is None

    provider.fail_delete = None
    retry = user_service.delete_user(_as(admin), attendant.id)

    assert retry.success is True
    assert provider.deleted == [str(attendant.id)]


def test_delete_user_keeps_going_after_database_step_fails(
    user_service: UserService,
    admin: ProfileEntity,
    attendant: ProfileEntity,
    tickets: FakeTicketRepository,
    provider: FakeIdentityProvider,
) -> None:
    def broken_freeze(**_: object) -> int:
        raise OperationalError("connection lost")

    tickets.freeze_attendant_label = broken_freeze

    result = user_service.delete_user(_as(admin), attendant.id)

    assert result.success is False
    assert result.steps[0].success is False
    assert result.steps[1].success is True
    assert result.steps[2].success is True
    assert provider.deleted == [str(attendant.id)]


def test_admin_cannot_delete_self(user_service: UserService, admin: ProfileEntity) -> None:
    with pytest.raises(AppError) as exc:
        user_service.delete_user(_as(admin), admin.id)
    assert exc.value.code == "CANNOT_DELETE_SELF"


def _unreachable_provider() -> SupabaseAuthClient:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    settings = Settings(
        supabase_url="https://auth.example.test",
        supabase_anon_key="anon",
        supabase_service_role_key="service",
    )
    return SupabaseAuthClient(settings, transport=httpx.MockTransport(refuse))


def test_delete_user_reports_unreachable_provider_as_failed_step(
    admin: ProfileEntity,
    attendant: ProfileEntity,
    profiles: FakeProfileRepository,
    tickets: FakeTicketRepository,
) -> None:
    service = UserService(
        profile_repository=profiles,
        ticket_repository=tickets,
        identity_provider=_unreachable_provider(),
        change_feed=ChangeFeed(),
    )

    result = service.delete_user(_as(admin), attendant.id)

    assert result.success is False
    outcomes = {step.step: step.success for step in result.steps}
    assert outcomes == {"detach_tickets": True, "delete_profile": True, "delete_account": False}
    assert "connection refused" in (result.steps[2].message or "")
    assert profiles.get_by_id(attendant.id) is None


def test_create_user_with_unreachable_provider_is_unavailable(
    admin: ProfileEntity,
    profiles: FakeProfileRepository,
    tickets: FakeTicketRepository,
) -> None:
    service = UserService(
        profile_repository=profiles,
        ticket_repository=tickets,
        identity_provider=_unreachable_provider(),
        change_feed=ChangeFeed(),
    )

    with pytest.raises(AppError) as exc:
        service.create_user(
            _as(admin),
            UserCreateRequest(email="bruno@example.com", password="secret1", name="Bruno"),
        )
    assert exc.value.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert exc.value.code == "BACKEND_UNAVAILABLE"
