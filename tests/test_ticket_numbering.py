from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
from signage.services.ticket_numbering import (
    TicketNumberGenerator,
    format_ticket_number,
    local_day_bounds,
)
from tests.helpers.fakes import FakeTicketRepository, make_ticket

SAO_PAULO = ZoneInfo("America/Sao_Paulo")


@pytest.mark.parametrize(
    ("position", "expected"),
    [(1, "#001"), (2, "#002"), (12, "#012"), (999, "#999"), (1000, "#1000")],
)
def test_format_ticket_number(position: int, expected: str) -> None:
    assert format_ticket_number(position) == expected


def test_format_ticket_number_rejects_non_positive() -> None:
    with pytest.raises(ValueError):
        format_ticket_number(0)


def test_local_day_bounds_use_local_midnight() -> None:
    # 02:30 UTC on the 18th is still the evening of the 17th in Sao Paulo (UTC-3).
    start, end = local_day_bounds(datetime(2026, 10, 18, 2, 30, tzinfo=UTC), SAO_PAULO)

    assert start == datetime(2026, 10, 17, tzinfo=SAO_PAULO)
    assert end == datetime(2026, 10, 18, tzinfo=SAO_PAULO)
    assert start.astimezone(UTC) == datetime(2026, 10, 17, 3, tzinfo=UTC)


def test_count_strategy_numbers_from_tickets_created_today() -> None:
    now = datetime(2026, 10, 18, 15, tzinfo=UTC)
    repository = FakeTicketRepository(
        [
            make_ticket("#040", now - timedelta(days=1)),
            make_ticket("#001", now - timedelta(hours=2)),
        ]
    )
    generator = TicketNumberGenerator(repository, strategy="count", tz=SAO_PAULO)

    assert generator.next_number(now) == "#002"


def test_first_ticket_of_the_day_is_001() -> None:
    now = datetime(2026, 10, 18, 15, tzinfo=UTC)
    repository = FakeTicketRepository([make_ticket("#099", now - timedelta(days=1))])
    generator = TicketNumberGenerator(repository, strategy="count", tz=SAO_PAULO)

    assert generator.next_number(now) == "#001"


def test_sequence_strategy_restarts_per_local_day() -> None:
    repository = FakeTicketRepository()
    generator = TicketNumberGenerator(repository, strategy="sequence", tz=SAO_PAULO)
    morning = datetime(2026, 10, 18, 12, tzinfo=UTC)

    numbers = [generator.next_number(morning) for _ in range(12)]
    assert numbers[:2] == ["#001", "#002"]
    assert numbers[-1] == "#012"

    next_day = morning + timedelta(days=1)
    assert generator.next_number(next_day) == "#001"
    assert repository.sequences[date(2026, 10, 18)] == 12
