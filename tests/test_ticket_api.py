from datetime import UTC, datetime
from uuid import UUID, uuid4

from fastapi import status
from fastapi.testclient import TestClient
from signage.api.dependencies import get_caller
from signage.api.routes.queue import get_queue_service
from signage.api.routes.tickets import get_ticket_service
from signage.core.errors import AppError, not_found_error, unauthenticated_error
from signage.main import app
from signage.models.entities import CallerIdentity
from signage.models.schemas.queue import (
    AttendantQueueView,
    DisplayQueueView,
    KioskTicketView,
)
from signage.models.schemas.ticket import TicketListResponse, TicketRead
from signage.services.queue_service import normalize_ticket_number

ATTENDANT = CallerIdentity(ref=str(uuid4()), label="Ana", desk="Desk 1")
MISSING = UUID("00000000-0000-0000-0000-000000000404")


class _FakeTicketService:
    def __init__(self) -> None:
        self.ticket = TicketRead(
            id=uuid4(),
            number="#001",
            status="waiting",
            created_at=datetime.now(UTC),
        )
        self.completed_with: list[UUID | None] = []

    def create_ticket(self) -> TicketRead:
        return self.ticket

    def list_tickets(self, *, status=None, created_from=None, created_to=None) -> TicketListResponse:
        items = [self.ticket] if status in (None, self.ticket.status) else []
        return TicketListResponse(data=items)

    def get_ticket(self, ticket_id: UUID) -> TicketRead:
        if ticket_id == MISSING:
            raise not_found_error("ticket", ticket_id)
        return self.ticket

    def call_ticket(self, ticket_id: UUID, caller: CallerIdentity | None) -> TicketRead:
        return self.call_next(caller)

    def call_next(self, caller: CallerIdentity | None) -> TicketRead:
        if caller is None:
            raise unauthenticated_error()
        if self.ticket.status != "waiting":
            raise AppError(
                status_code=status.HTTP_409_CONFLICT,
                code="TICKET_NOT_WAITING",
                message="Ticket has already been called.",
            )
        self.ticket = self.ticket.model_copy(
            update={"status": "called", "called_at": datetime.now(UTC), "attendant_ref": caller.ref}
        )
        return self.ticket

    def complete_ticket(self, ticket_id, caller, service_type_id=None) -> TicketRead:
        self.completed_with.append(service_type_id)
        self.ticket = self.ticket.model_copy(
            update={"status": "completed", "service_type_ref": service_type_id}
        )
        return self.ticket


class _FakeQueueService:
    def kiosk(self, number: str) -> KioskTicketView:
        normalized = normalize_ticket_number(number)
        return KioskTicketView(number=normalized, status="waiting", called=False)

    def attendant(self, caller: CallerIdentity | None) -> AttendantQueueView:
        if caller is None:
            raise unauthenticated_error()
        return AttendantQueueView(waiting=[], waiting_count=0, current=None, in_service=False)

    def display(self) -> DisplayQueueView:
        return DisplayQueueView(current=None, history=[], waiting_count=3)


def test_ticket_lifecycle_routes(client: TestClient) -> None:
    service = _FakeTicketService()
    app.dependency_overrides[get_ticket_service] = lambda: service
    app.dependency_overrides[get_caller] = lambda: ATTENDANT

    created = client.post("/api/tickets")
    assert created.status_code == status.HTTP_201_CREATED
    ticket_id = created.json()["data"]["id"]
    assert created.json()["data"]["number"] == "#001"

    listing = client.get("/api/tickets", params={"status": "waiting"})
    assert listing.status_code == status.HTTP_200_OK
    assert len(listing.json()["data"]) == 1

    called = client.post("/api/tickets/call-next")
    assert called.status_code == status.HTTP_200_OK
    assert called.json()["data"]["attendant_ref"] == ATTENDANT.ref

    again = client.post(f"/api/tickets/{ticket_id}/call")
    assert again.status_code == status.HTTP_409_CONFLICT
    assert again.json()["error"]["code"] == "TICKET_NOT_WAITING"

    service_type_id = str(uuid4())
    completed = client.post(
        f"/api/tickets/{ticket_id}/complete",
        json={"service_type_id": service_type_id},
    )
    assert completed.status_code == status.HTTP_200_OK
    assert completed.json()["data"]["status"] == "completed"
    assert str(service.completed_with[0]) == service_type_id

    app.dependency_overrides.clear()


def test_call_without_identity_is_unauthenticated(client: TestClient) -> None:
    app.dependency_overrides[get_ticket_service] = _FakeTicketService
    app.dependency_overrides[get_caller] = lambda: None

    response = client.post("/api/tickets/call-next")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["error"]["message"] == "Sign in to continue."
    app.dependency_overrides.clear()


def test_ticket_errors_use_envelope(client: TestClient) -> None:
    app.dependency_overrides[get_ticket_service] = _FakeTicketService

    missing = client.get(f"/api/tickets/{MISSING}")
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["error"]["code"] == "TICKET_NOT_FOUND"

    invalid = client.get("/api/tickets/not-a-uuid")
    assert invalid.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT
    assert invalid.json()["error"]["code"] == "VALIDATION_ERROR"

    bad_status = client.get("/api/tickets", params={"status": "cancelled"})
    assert bad_status.status_code == status.HTTP_422_UNPROCESSABLE_CONTENT

    app.dependency_overrides.clear()


def test_queue_routes(client: TestClient) -> None:
    app.dependency_overrides[get_queue_service] = _FakeQueueService
    app.dependency_overrides[get_caller] = lambda: ATTENDANT

    kiosk = client.get("/api/queue/kiosk/7")
    assert kiosk.status_code == status.HTTP_200_OK
    assert kiosk.json()["data"]["number"] == "#007"

    bad_number = client.get("/api/queue/kiosk/abc")
    assert bad_number.status_code == status.HTTP_400_BAD_REQUEST
    assert bad_number.json()["error"]["code"] == "INVALID_TICKET_NUMBER"

    attendant = client.get("/api/queue/attendant")
    assert attendant.status_code == status.HTTP_200_OK
    assert attendant.json()["data"]["in_service"] is False

    display = client.get("/api/queue/display")
    assert display.json()["data"]["waiting_count"] == 3

    app.dependency_overrides.clear()
