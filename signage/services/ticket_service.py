import logging
from datetime import UTC, datetime
from uuid import UUID

from fastapi import status
from psycopg import Connection

from signage.core.database import get_connection
from signage.core.errors import AppError, not_found_error
from signage.models.entities import CallerIdentity, TicketEntity, TicketStatus
from signage.models.schemas.ticket import TicketListResponse, TicketRead
from signage.realtime.change_feed import ChangeFeed
from signage.repositories.service_type_repository import ServiceTypeRepository
from signage.repositories.ticket_repository import TicketRepository
from signage.services.identity_service import require_operator
from signage.services.queue_projection import to_ticket_read
from signage.services.ticket_numbering import TicketNumberGenerator

logger = logging.getLogger(__name__)


class TicketService:
    """Ticket lifecycle: waiting -> called -> completed, never backwards."""

    def __init__(
        self,
        ticket_repository: TicketRepository,
        service_type_repository: ServiceTypeRepository,
        number_generator: TicketNumberGenerator,
        change_feed: ChangeFeed,
        require_service_type: bool = True,
        database_url: str | None = None,
        max_call_attempts: int = 3,
    ) -> None:
        self.ticket_repository = ticket_repository
        self.service_type_repository = service_type_repository
        self.number_generator = number_generator
        self.change_feed = change_feed
        self.require_service_type = require_service_type
        self.database_url = database_url
        self.max_call_attempts = max_call_attempts

    def create_ticket(self, now: datetime | None = None) -> TicketRead:
        created_at = now or datetime.now(UTC)

        with get_connection(self.database_url) as connection:
            number = self.number_generator.next_number(created_at, connection=connection)
            ticket = self.ticket_repository.create(
                number=number,
                created_at=created_at,
                connection=connection,
            )

        logger.info("Ticket %s created (%s)", ticket.number, ticket.id)
        self.change_feed.notify("tickets", "INSERT", ticket.id)
        return to_ticket_read(ticket)

    def get_ticket(self, ticket_id: UUID) -> TicketRead:
        ticket = self.ticket_repository.get_by_id(ticket_id)
        if ticket is None:
            raise not_found_error("ticket", ticket_id)
        return to_ticket_read(ticket)

    def list_tickets(
        self,
        *,
        status: TicketStatus | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
    ) -> TicketListResponse:
        tickets = self.ticket_repository.list_filtered(
            status=status,
            created_from=created_from,
            created_to=created_to,
        )
        return TicketListResponse(data=[to_ticket_read(ticket) for ticket in tickets])

    def call_ticket(
        self,
        ticket_id: UUID,
        caller: CallerIdentity | None,
        now: datetime | None = None,
    ) -> TicketRead:
        operator = require_operator(caller)
        called_at = now or datetime.now(UTC)

        with get_connection(self.database_url) as connection:
            current = self.ticket_repository.get_by_id(ticket_id, connection=connection)
            if current is None:
                raise not_found_error("ticket", ticket_id)

            called = self.ticket_repository.mark_called(
                ticket_id=ticket_id,
                attendant_ref=operator.ref,
                called_at=called_at,
                connection=connection,
            )
            if called is None:
                self._raise_not_waiting(current)

        self._log_called(called, operator)
        self.change_feed.notify("tickets", "UPDATE", called.id)
        return to_ticket_read(called)

    def call_next(self, caller: CallerIdentity | None, now: datetime | None = None) -> TicketRead:
        operator = require_operator(caller)
        called_at = now or datetime.now(UTC)

        for attempt in range(1, self.max_call_attempts + 1):
            with get_connection(self.database_url) as connection:
                called = self._call_head(operator, called_at, connection)
            if called is not None:
                self._log_called(called, operator)
                self.change_feed.notify("tickets", "UPDATE", called.id)
                return to_ticket_read(called)
            logger.info(
                "Attendant %s lost the race for the queue head (attempt %d)", operator.ref, attempt
            )

        raise AppError(
            status_code=status.HTTP_409_CONFLICT,
            code="CALL_CONFLICT",
            message="Other attendants called the next tickets first. Try again.",
            details={"attempts": self.max_call_attempts},
        )

    def _call_head(
        self,
        operator: CallerIdentity,
        called_at: datetime,
        connection: Connection,
    ) -> TicketEntity | None:
        head = self.ticket_repository.first_waiting(connection=connection)
        if head is None:
            raise AppError(
                status_code=status.HTTP_409_CONFLICT,
                code="QUEUE_EMPTY",
                message="There are no waiting tickets.",
            )
        return self.ticket_repository.mark_called(
            ticket_id=head.id,
            attendant_ref=operator.ref,
            called_at=called_at,
            connection=connection,
        )

    def complete_ticket(
        self,
        ticket_id: UUID,
        caller: CallerIdentity | None,
        service_type_id: UUID | None = None,
    ) -> TicketRead:
        operator = require_operator(caller)
        if self.require_service_type and service_type_id is None:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="SERVICE_TYPE_REQUIRED",
                message="Select a service type before completing the ticket.",
                details={"ticket_id": str(ticket_id)},
            )

        with get_connection(self.database_url) as connection:
            current = self.ticket_repository.get_by_id(ticket_id, connection=connection)
            if current is None:
                raise not_found_error("ticket", ticket_id)

            if service_type_id is not None:
                service_type = self.service_type_repository.get_by_id(
                    service_type_id, connection=connection
                )
                if service_type is None:
                    raise AppError(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        code="INVALID_SERVICE_TYPE",
                        message="Service type does not exist.",
                        details={"service_type_id": str(service_type_id)},
                    )

            completed = self.ticket_repository.mark_completed(
                ticket_id=ticket_id,
                service_type_ref=service_type_id,
                connection=connection,
            )
            if completed is None:
                raise AppError(
                    status_code=status.HTTP_409_CONFLICT,
                    code="TICKET_NOT_CALLED",
                    message="Only called tickets can be completed.",
                    details={"ticket_id": str(ticket_id), "status": current.status},
                )

        logger.info("Ticket %s completed by %s", completed.number, operator.ref)
        self.change_feed.notify("tickets", "UPDATE", completed.id)
        return to_ticket_read(completed)

    def _log_called(self, ticket: TicketEntity, operator: CallerIdentity) -> None:
        logger.info("Ticket %s called by %s (%s)", ticket.number, operator.label, operator.ref)

    def _raise_not_waiting(self, ticket: TicketEntity) -> None:
        raise AppError(
            status_code=status.HTTP_409_CONFLICT,
            code="TICKET_NOT_WAITING",
            message="Ticket has already been called.",
            details={"ticket_id": str(ticket.id), "status": ticket.status},
        )
