import logging
from collections.abc import Callable

from signage.client.store import StoreSnapshot
from signage.models.schemas.ticket import TicketRead

logger = logging.getLogger(__name__)


class KioskWatcher:
    """Follows the ticket a visitor took and fires ``on_your_turn`` once it is called."""

    def __init__(
        self,
        number: str | None = None,
        on_your_turn: Callable[[TicketRead], None] | None = None,
    ) -> None:
        self.on_your_turn = on_your_turn
        self.number: str | None = None
        self.ticket: TicketRead | None = None
        self._notified = False
        if number:
            self.watch(number)

    def watch(self, number: str) -> None:
        self.number = number
        self.ticket = None
        self._notified = False

    def clear(self) -> None:
        self.number = None
        self.ticket = None
        self._notified = False

    @property
    def is_called(self) -> bool:
        return self.ticket is not None and self.ticket.status == "called"

    def observe(self, snapshot: StoreSnapshot) -> TicketRead | None:
        if self.number is None:
            return None

        # Numbers restart every day; the newest ticket with the number is ours.
        matches = [ticket for ticket in snapshot.tickets if ticket.number == self.number]
        self.ticket = max(matches, key=lambda ticket: ticket.created_at) if matches else None

        if self.is_called and not self._notified:
            self._notified = True
            logger.info("Ticket %s was called", self.number)
            if self.on_your_turn is not None:
                self.on_your_turn(self.ticket)
        return self.ticket
