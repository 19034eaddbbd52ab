from datetime import UTC, date, datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from signage.api.dependencies import Caller, SettingsDep, get_identity_service
from signage.models.schemas.report import QueueReportResponse
from signage.repositories.service_type_repository import ServiceTypeRepository
from signage.repositories.ticket_repository import TicketRepository
from signage.services.identity_service import IdentityService
from signage.services.report_service import ReportService
from signage.services.ticket_numbering import local_day

router = APIRouter(prefix="/reports")


def get_report_service(
    settings: SettingsDep,
    identity_service: Annotated[IdentityService, Depends(get_identity_service)],
) -> ReportService:
    return ReportService(
        ticket_repository=TicketRepository(),
        service_type_repository=ServiceTypeRepository(),
        identity_service=identity_service,
        tz=settings.timezone,
    )


@router.get("/queue", response_model=QueueReportResponse)
def queue_report(
    report_service: Annotated[ReportService, Depends(get_report_service)],
    settings: SettingsDep,
    caller: Caller,
    start_date: Annotated[date | None, Query()] = None,
    end_date: Annotated[date | None, Query()] = None,
    service_type_id: Annotated[UUID | None, Query()] = None,
    attendant_ref: Annotated[str | None, Query()] = None,
) -> QueueReportResponse:
    today = local_day(datetime.now(UTC), settings.timezone)
    report = report_service.queue_report(
        viewer=caller,
        start_date=start_date or today,
        end_date=end_date or today,
        service_type_id=service_type_id,
        attendant_ref=attendant_ref,
    )
    return QueueReportResponse(data=report)
