"""Read-side views derived from a full ticket snapshot.

Every function here is pure: the same snapshot always produces the same view,
so recomputing after each refresh (or twice for the same refresh) is safe.
"""

from collections.abc import Iterable

from signage.models.entities import TicketEntity
from signage.models.schemas.queue import (
    AttendantQueueView,
    CalledTicket,
    DisplayQueueView,
    KioskTicketView,
)
from signage.models.schemas.ticket import TicketRead
from signage.services.identity_service import IdentityDirectory

DEFAULT_HISTORY_SIZE = 3


def to_ticket_read(ticket: TicketEntity) -> TicketRead:
    return TicketRead(
        id=ticket.id,
        number=ticket.number,
        status=ticket.status,
        created_at=ticket.created_at,
        called_at=ticket.called_at,
        attendant_ref=ticket.attendant_ref,
        attendant_label=ticket.attendant_label,
        service_type_ref=ticket.service_type_ref,
    )


def waiting_tickets(tickets: Iterable[TicketEntity]) -> list[TicketEntity]:
    """Strict FIFO: oldest ticket first, id breaks ties."""
    waiting = [ticket for ticket in tickets if ticket.status == "waiting"]
    return sorted(waiting, key=lambda ticket: (ticket.created_at, str(ticket.id)))


def called_tickets(tickets: Iterable[TicketEntity]) -> list[TicketEntity]:
    """Tickets still being served, most recently called first."""
    called = [
        ticket for ticket in tickets if ticket.status == "called" and ticket.called_at is not None
    ]
    return sorted(called, key=lambda ticket: (ticket.called_at, str(ticket.id)), reverse=True)


def current_ticket_for(
    tickets: Iterable[TicketEntity],
    attendant_ref: str,
) -> TicketEntity | None:
    for ticket in called_tickets(tickets):
        if ticket.attendant_ref == attendant_ref:
            return ticket
    return None


def announcement_text(number: str, label: str | None, desk: str | None) -> str:
    parts = [f"Ticket {number}"]
    if label:
        parts.append(label)
    if desk:
        parts.append(desk)
    return ". ".join(parts) + "."


def _to_called_ticket(ticket: TicketEntity, directory: IdentityDirectory) -> CalledTicket:
    label, desk = directory.describe(ticket)
    return CalledTicket(
        id=ticket.id,
        number=ticket.number,
        called_at=ticket.called_at,
        attendant_ref=ticket.attendant_ref,
        attendant_label=label,
        desk=desk,
    )


def kiosk_view(
    tickets: Iterable[TicketEntity],
    number: str,
    directory: IdentityDirectory | None = None,
) -> KioskTicketView | None:
    matches = [ticket for ticket in tickets if ticket.number == number]
    if not matches:
        return None

    # Numbers restart every day; the newest ticket carrying it is the one in hand.
    ticket = max(matches, key=lambda item: (item.created_at, str(item.id)))
    label, desk = (directory or IdentityDirectory()).describe(ticket)
    return KioskTicketView(
        number=ticket.number,
        status=ticket.status,
        called=ticket.status == "called",
        attendant_label=label,
        desk=desk,
    )


def attendant_view(tickets: Iterable[TicketEntity], viewer_ref: str) -> AttendantQueueView:
    snapshot = list(tickets)
    waiting = waiting_tickets(snapshot)
    current = current_ticket_for(snapshot, viewer_ref)
    return AttendantQueueView(
        waiting=[to_ticket_read(ticket) for ticket in waiting],
        waiting_count=len(waiting),
        current=to_ticket_read(current) if current is not None else None,
        in_service=current is not None,
    )


def display_view(
    tickets: Iterable[TicketEntity],
    directory: IdentityDirectory,
    history_size: int = DEFAULT_HISTORY_SIZE,
) -> DisplayQueueView:
    snapshot = list(tickets)
    called = called_tickets(snapshot)
    current = _to_called_ticket(called[0], directory) if called else None
    history = [_to_called_ticket(ticket, directory) for ticket in called[1 : 1 + history_size]]

    announcement = None
    if current is not None:
        announcement = announcement_text(current.number, current.attendant_label, current.desk)

    return DisplayQueueView(
        current=current,
        history=history,
        waiting_count=len(waiting_tickets(snapshot)),
        announcement=announcement,
    )
