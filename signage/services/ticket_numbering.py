"""Day-scoped, human readable ticket numbers (``#001``, ``#002``, ...).

Two strategies are supported:

* ``sequence`` keeps a per-day counter row that is incremented atomically in
  the same transaction as the ticket insert, so numbers never repeat within
  a day.
* ``count`` derives the number from how many tickets were created since local
  midnight. Two kiosks creating tickets at the same moment can read the same
  count and hand out the same number; deployments that accept that can keep
  the lighter scheme.

Either way the number is computed inside the insert transaction: if it cannot
be computed the ticket is not created.
"""

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from psycopg import Connection

from signage.core.config import TicketNumberStrategy
from signage.repositories.ticket_repository import TicketRepository

NUMBER_PREFIX = "#"
NUMBER_WIDTH = 3


def format_ticket_number(position: int) -> str:
    """Zero-pad to three digits; positions past 999 simply widen (``#1000``)."""
    if position < 1:
        raise ValueError(f"Ticket position must be positive, got {position}")
    return f"{NUMBER_PREFIX}{position:0{NUMBER_WIDTH}d}"


def local_day(now: datetime, tz: ZoneInfo) -> date:
    return now.astimezone(tz).date()


def local_day_bounds(now: datetime, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Return ``[local midnight, next local midnight)`` for the day containing ``now``."""
    day = local_day(now, tz)
    return day_range_bounds(day, day, tz)


def day_range_bounds(start_day: date, end_day: date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    start = datetime.combine(start_day, time.min, tzinfo=tz)
    end = datetime.combine(end_day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end


class TicketNumberGenerator:
    def __init__(
        self,
        ticket_repository: TicketRepository,
        strategy: TicketNumberStrategy,
        tz: ZoneInfo,
    ) -> None:
        self.ticket_repository = ticket_repository
        self.strategy = strategy
        self.tz = tz

    def next_position(self, now: datetime, connection: Connection | None = None) -> int:
        if self.strategy == "sequence":
            return self.ticket_repository.next_daily_sequence(
                day=local_day(now, self.tz),
                connection=connection,
            )

        start, end = local_day_bounds(now, self.tz)
        created_today = self.ticket_repository.count_created_between(
            start=start,
            end=end,
            connection=connection,
        )
        return created_today + 1

    def next_number(self, now: datetime, connection: Connection | None = None) -> str:
        return format_ticket_number(self.next_position(now, connection=connection))
