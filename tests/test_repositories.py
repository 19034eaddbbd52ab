import os
from datetime import UTC, date, datetime, timedelta
from uuid import uuid4

import pytest
from psycopg import connect
from psycopg.errors import CheckViolation, UniqueViolation
from signage.repositories.display_repository import DisplayRepository
from signage.repositories.health_repository import HealthRepository
from signage.repositories.playlist_repository import PlaylistRepository
from signage.repositories.profile_repository import ProfileRepository
from signage.repositories.service_type_repository import ServiceTypeRepository
from signage.repositories.ticket_repository import TicketRepository
from tests.helpers.db_env import isolated_database, truncate_tables

NOW = datetime(2026, 10, 18, 13, 0, tzinfo=UTC)


@pytest.fixture(scope="module")
def repository_database_url() -> str:
    base_url = os.getenv("TEST_DATABASE_URL")
    if not base_url:
        pytest.skip("Set TEST_DATABASE_URL to run repository tests.")

    with isolated_database(base_url, schema_prefix="signage_repo_test") as scoped_url:
        yield scoped_url


@pytest.fixture(autouse=True)
def clean_database(repository_database_url: str) -> None:
    truncate_tables(repository_database_url)


def test_ticket_transitions_are_conditional(repository_database_url: str) -> None:
    repository = TicketRepository(database_url=repository_database_url)
    created = repository.create(number="#001", created_at=NOW)
    assert created.status == "waiting"

    called = repository.mark_called(ticket_id=created.id, attendant_ref="ana", called_at=NOW)
    assert called is not None
    assert called.status == "called"

    # A second call loses; the first caller is kept.
    assert repository.mark_called(ticket_id=created.id, attendant_ref="bruno", called_at=NOW) is None
    assert repository.get_by_id(created.id).attendant_ref == "ana"

    completed = repository.mark_completed(ticket_id=created.id, service_type_ref=uuid4())
    assert completed is not None
    assert completed.called_at == called.called_at
    assert repository.mark_completed(ticket_id=created.id, service_type_ref=None) is None


def test_ticket_consistency_constraints(repository_database_url: str) -> None:
    repository = TicketRepository(database_url=repository_database_url)
    created = repository.create(number="#001", created_at=NOW)

    with connect(repository_database_url) as connection:
        with pytest.raises(CheckViolation):
            connection.execute(
                "UPDATE tickets SET status = 'called' WHERE id = %s",
                (created.id,),
            )


def test_daily_sequence_is_per_day(repository_database_url: str) -> None:
    repository = TicketRepository(database_url=repository_database_url)
    today = date(2026, 10, 18)

    assert [repository.next_daily_sequence(day=today) for _ in range(3)] == [1, 2, 3]
    assert repository.next_daily_sequence(day=today + timedelta(days=1)) == 1


def test_first_waiting_and_snapshot(repository_database_url: str) -> None:
    repository = TicketRepository(database_url=repository_database_url)
    old_done = repository.create(number="#001", created_at=NOW - timedelta(days=1))
    repository.mark_called(ticket_id=old_done.id, attendant_ref="ana", called_at=NOW - timedelta(days=1))
    repository.mark_completed(ticket_id=old_done.id, service_type_ref=None)
    first = repository.create(number="#001", created_at=NOW - timedelta(minutes=5))
    repository.create(number="#002", created_at=NOW)

    assert repository.first_waiting().id == first.id
    snapshot = repository.list_snapshot(since=NOW - timedelta(hours=1))
    assert [ticket.number for ticket in snapshot] == ["#001", "#002"]
    assert repository.count_created_between(start=NOW - timedelta(hours=1), end=NOW + timedelta(seconds=1)) == 2


def test_service_type_names_are_unique_ignoring_case(repository_database_url: str) -> None:
    repository = ServiceTypeRepository(database_url=repository_database_url)
    repository.create(name="Enrollment")

    with pytest.raises(UniqueViolation):
        repository.create(name="enrollment")


def test_deleting_service_type_keeps_completed_ticket_reference(
    repository_database_url: str,
) -> None:
    service_types = ServiceTypeRepository(database_url=repository_database_url)
    tickets = TicketRepository(database_url=repository_database_url)
    documents = service_types.create(name="Documents")
    ticket = tickets.create(number="#001", created_at=NOW)
    tickets.mark_called(ticket_id=ticket.id, attendant_ref="ana", called_at=NOW)
    tickets.mark_completed(ticket_id=ticket.id, service_type_ref=documents.id)

    assert service_types.delete(documents.id) is True
    assert tickets.get_by_id(ticket.id).service_type_ref == documents.id


def test_freeze_attendant_label(repository_database_url: str) -> None:
    profiles = ProfileRepository(database_url=repository_database_url)
    tickets = TicketRepository(database_url=repository_database_url)
    profile = profiles.upsert(profile_id=uuid4(), role="attendant", name="Ana")
    ticket = tickets.create(number="#001", created_at=NOW)
    tickets.mark_called(ticket_id=ticket.id, attendant_ref=str(profile.id), called_at=NOW)

    assert tickets.freeze_attendant_label(attendant_ref=str(profile.id), label="Ana") == 1
    assert profiles.delete(profile.id) is True
    assert tickets.get_by_id(ticket.id).attendant_label == "Ana"
    assert tickets.freeze_attendant_label(attendant_ref=str(profile.id), label="Ana") == 0


def test_playlist_slides_and_display_assignment(repository_database_url: str) -> None:
    playlists = PlaylistRepository(database_url=repository_database_url)
    displays = DisplayRepository(database_url=repository_database_url)
    playlist = playlists.create(name="Morning")
    first = playlists.add_slide(playlist_id=playlist.id, url="a.png", duration=10)
    second = playlists.add_slide(playlist_id=playlist.id, url="b.png", duration=5)
    assert (first.order, second.order) == (0, 1)

    display = displays.create(
        name="Lobby",
        location="Hall",
        width=1920,
        height=1080,
        orientation="landscape",
    )
    assert display.display_mode == "playlist"
    assigned = displays.update(display_id=display.id, updates={"assigned_playlist_id": playlist.id})
    assert assigned.assigned_playlist_id == playlist.id

    assert playlists.detach_displays(playlist.id) == [display.id]
    assert displays.get_by_id(display.id).assigned_playlist_id is None
    assert playlists.detach_displays(playlist.id) == []

    displays.update(display_id=display.id, updates={"assigned_playlist_id": playlist.id})
    assert playlists.delete(playlist.id) is True
    assert displays.get_by_id(display.id).assigned_playlist_id is None
    assert playlists.get_by_id(playlist.id) is None


def test_health_check_sees_migrated_schema(repository_database_url: str) -> None:
    health = HealthRepository().check_connection(repository_database_url)

    assert health.connected is True
    assert health.migrated is True
    assert health.message is None
