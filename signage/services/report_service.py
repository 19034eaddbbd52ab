"""Queue performance figures for the admin dashboard.

Figures are computed from the tickets created inside the selected local date
range; nothing is stored.
"""

import math
from collections.abc import Iterable
from datetime import date
from uuid import UUID
from zoneinfo import ZoneInfo

from fastapi import status

from signage.core.database import get_connection
from signage.core.errors import AppError, unauthenticated_error
from signage.models.entities import CallerIdentity, ServiceTypeEntity, TicketEntity
from signage.models.schemas.report import AttendantStat, QueueReport, ServiceTypeStat
from signage.repositories.service_type_repository import ServiceTypeRepository
from signage.repositories.ticket_repository import TicketRepository
from signage.services.identity_service import IdentityService
from signage.services.ticket_numbering import day_range_bounds

LEADERBOARD_ROLES = ("attendant", "super_admin")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def wait_minutes(tickets: Iterable[TicketEntity]) -> int:
    waits = [
        (ticket.called_at - ticket.created_at).total_seconds()
        for ticket in tickets
        if ticket.called_at is not None and ticket.called_at >= ticket.created_at
    ]
    if not waits:
        return 0
    return round_half_up(sum(waits) / len(waits) / 60)


def efficiency_percent(tickets: list[TicketEntity]) -> int:
    if not tickets:
        return 0
    attended = sum(1 for ticket in tickets if ticket.status in ("called", "completed"))
    return round_half_up(attended / len(tickets) * 100)


def hourly_histogram(tickets: Iterable[TicketEntity], tz: ZoneInfo) -> list[int]:
    buckets = [0] * 24
    for ticket in tickets:
        buckets[ticket.created_at.astimezone(tz).hour] += 1
    return buckets


def service_type_stats(
    completed: list[TicketEntity],
    service_types: Iterable[ServiceTypeEntity],
) -> list[ServiceTypeStat]:
    stats = []
    for service_type in service_types:
        tagged = [ticket for ticket in completed if ticket.service_type_ref == service_type.id]
        stats.append(
            ServiceTypeStat(
                service_type_id=service_type.id,
                name=service_type.name,
                count=len(tagged),
                average_wait_minutes=wait_minutes(tagged),
            )
        )
    return sorted(stats, key=lambda stat: stat.count, reverse=True)


def attendant_leaderboard(
    completed: list[TicketEntity],
    identities: Iterable[CallerIdentity],
) -> list[AttendantStat]:
    stats = [
        AttendantStat(
            attendant_ref=identity.ref,
            name=identity.label,
            role=identity.role,
            count=sum(1 for ticket in completed if ticket.attendant_ref == identity.ref),
        )
        for identity in identities
        if identity.role in LEADERBOARD_ROLES
    ]
    return sorted(stats, key=lambda stat: stat.count, reverse=True)


def build_report(
    tickets: Iterable[TicketEntity],
    *,
    start_date: date,
    end_date: date,
    tz: ZoneInfo,
    service_types: Iterable[ServiceTypeEntity] = (),
    identities: Iterable[CallerIdentity] = (),
    service_type_id: UUID | None = None,
    attendant_ref: str | None = None,
) -> QueueReport:
    start, end = day_range_bounds(start_date, end_date, tz)
    window = [ticket for ticket in tickets if start <= ticket.created_at < end]
    if attendant_ref is not None:
        window = [ticket for ticket in window if ticket.attendant_ref == attendant_ref]
    if service_type_id is not None:
        window = [ticket for ticket in window if ticket.service_type_ref == service_type_id]

    completed = [ticket for ticket in window if ticket.status == "completed"]
    hourly = hourly_histogram(window, tz)

    return QueueReport(
        start_date=start_date,
        end_date=end_date,
        total_created=len(window),
        total_handled=sum(1 for ticket in window if ticket.status != "waiting"),
        in_progress=sum(1 for ticket in window if ticket.status == "called"),
        average_wait_minutes=wait_minutes(window),
        efficiency_percent=efficiency_percent(window),
        service_types=service_type_stats(completed, service_types),
        attendants=attendant_leaderboard(completed, identities),
        hourly=hourly,
        peak_hour=hourly.index(max(hourly)) if any(hourly) else None,
    )


class ReportService:
    def __init__(
        self,
        ticket_repository: TicketRepository,
        service_type_repository: ServiceTypeRepository,
        identity_service: IdentityService,
        tz: ZoneInfo,
        database_url: str | None = None,
    ) -> None:
        self.ticket_repository = ticket_repository
        self.service_type_repository = service_type_repository
        self.identity_service = identity_service
        self.tz = tz
        self.database_url = database_url

    def queue_report(
        self,
        *,
        viewer: CallerIdentity | None,
        start_date: date,
        end_date: date,
        service_type_id: UUID | None = None,
        attendant_ref: str | None = None,
    ) -> QueueReport:
        if viewer is None:
            raise unauthenticated_error()
        if end_date < start_date:
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="INVALID_DATE_RANGE",
                message="The end date must not be before the start date.",
                details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
            )

        # Only super admins may look at other attendants' numbers.
        if not viewer.is_super_admin:
            attendant_ref = viewer.ref

        start, end = day_range_bounds(start_date, end_date, self.tz)
        with get_connection(self.database_url) as connection:
            tickets = self.ticket_repository.list_filtered(
                created_from=start,
                created_to=end,
                connection=connection,
            )
            service_types = self.service_type_repository.list(connection=connection)
            # Legacy attendants only rank while they can still call tickets.
            directory = self.identity_service.directory(
                connection=connection,
                include_legacy=self.identity_service.allow_legacy_attendants,
            )

        return build_report(
            tickets,
            start_date=start_date,
            end_date=end_date,
            tz=self.tz,
            service_types=service_types,
            identities=directory,
            service_type_id=service_type_id,
            attendant_ref=attendant_ref,
        )
