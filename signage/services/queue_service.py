from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from fastapi import status
from psycopg import Connection

from signage.core.database import get_connection
from signage.core.errors import AppError, not_found_error
from signage.models.entities import CallerIdentity, TicketEntity
from signage.models.schemas.queue import AttendantQueueView, DisplayQueueView, KioskTicketView
from signage.repositories.ticket_repository import TicketRepository
from signage.services.identity_service import IdentityService, require_operator
from signage.services.queue_projection import (
    DEFAULT_HISTORY_SIZE,
    attendant_view,
    display_view,
    kiosk_view,
)
from signage.services.ticket_numbering import format_ticket_number, local_day_bounds


def normalize_ticket_number(raw: str) -> str:
    digits = raw.strip().lstrip("#")
    if not digits.isdigit() or int(digits) < 1:
        raise AppError(
            status_code=status.HTTP_400_BAD_REQUEST,
            code="INVALID_TICKET_NUMBER",
            message="Ticket numbers look like #001.",
            details={"number": raw},
        )
    return format_ticket_number(int(digits))


class QueueService:
    """Loads the current ticket snapshot and hands it to the queue projections."""

    def __init__(
        self,
        ticket_repository: TicketRepository,
        identity_service: IdentityService,
        tz: ZoneInfo,
        history_size: int = DEFAULT_HISTORY_SIZE,
        database_url: str | None = None,
    ) -> None:
        self.ticket_repository = ticket_repository
        self.identity_service = identity_service
        self.tz = tz
        self.history_size = history_size
        self.database_url = database_url

    def _snapshot(self, now: datetime | None, connection: Connection) -> list[TicketEntity]:
        day_start, _ = local_day_bounds(now or datetime.now(UTC), self.tz)
        return self.ticket_repository.list_snapshot(since=day_start, connection=connection)

    def kiosk(self, number: str, now: datetime | None = None) -> KioskTicketView:
        normalized = normalize_ticket_number(number)
        with get_connection(self.database_url) as connection:
            tickets = self._snapshot(now, connection)
            directory = self.identity_service.directory(connection=connection)

        view = kiosk_view(tickets, normalized, directory)
        if view is None:
            raise not_found_error("ticket", normalized)
        return view

    def attendant(
        self,
        caller: CallerIdentity | None,
        now: datetime | None = None,
    ) -> AttendantQueueView:
        operator = require_operator(caller)
        with get_connection(self.database_url) as connection:
            tickets = self._snapshot(now, connection)
        return attendant_view(tickets, operator.ref)

    def display(self, now: datetime | None = None) -> DisplayQueueView:
        with get_connection(self.database_url) as connection:
            tickets = self._snapshot(now, connection)
            directory = self.identity_service.directory(connection=connection)
        return display_view(tickets, directory, history_size=self.history_size)
