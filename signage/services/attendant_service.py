import logging
from uuid import UUID

from signage.core.errors import not_found_error
from signage.models.entities import AttendantEntity
from signage.models.schemas.attendant import AttendantRead, AttendantWriteRequest
from signage.realtime.change_feed import ChangeFeed
from signage.repositories.attendant_repository import AttendantRepository
from signage.services.service_type_service import validate_name

logger = logging.getLogger(__name__)


class AttendantService:
    """Desk attendants picked from a list, used before accounts carried desk data."""

    def __init__(self, attendant_repository: AttendantRepository, change_feed: ChangeFeed) -> None:
        self.attendant_repository = attendant_repository
        self.change_feed = change_feed

    def list_attendants(self) -> list[AttendantRead]:
        return [self._to_read(item) for item in self.attendant_repository.list()]

    def create_attendant(self, payload: AttendantWriteRequest) -> AttendantRead:
        name = validate_name(payload.name, max_length=120, code="INVALID_ATTENDANT_NAME")
        desk_number = payload.desk_number.strip() if payload.desk_number else None
        created = self.attendant_repository.create(name=name, desk_number=desk_number or None)
        logger.info("Attendant %r created", name)
        self.change_feed.notify("attendants", "INSERT", created.id)
        return self._to_read(created)

    def delete_attendant(self, attendant_id: UUID) -> None:
        if not self.attendant_repository.delete(attendant_id):
            raise not_found_error("attendant", attendant_id)
        self.change_feed.notify("attendants", "DELETE", attendant_id)

    def _to_read(self, attendant: AttendantEntity) -> AttendantRead:
        return AttendantRead(
            id=attendant.id,
            name=attendant.name,
            desk_number=attendant.desk_number,
            created_at=attendant.created_at,
        )
