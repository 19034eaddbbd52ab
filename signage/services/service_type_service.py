import logging
from uuid import UUID

from fastapi import status
from psycopg.errors import UniqueViolation

from signage.core.errors import AppError, not_found_error
from signage.models.entities import ServiceTypeEntity
from signage.models.schemas.service_type import ServiceTypeRead, ServiceTypeWriteRequest
from signage.realtime.change_feed import ChangeFeed
from signage.repositories.service_type_repository import ServiceTypeRepository

logger = logging.getLogger(__name__)


def validate_name(name: str, *, max_length: int, code: str = "INVALID_NAME") -> str:
    normalized = name.strip()
    if not 1 <= len(normalized) <= max_length:
        raise AppError(
            status_code=status.HTTP_400_BAD_REQUEST,
            code=code,
            message=f"Name length must be between 1 and {max_length} characters.",
        )
    return normalized


class ServiceTypeService:
    def __init__(
        self,
        service_type_repository: ServiceTypeRepository,
        change_feed: ChangeFeed,
    ) -> None:
        self.service_type_repository = service_type_repository
        self.change_feed = change_feed

    def list_service_types(self) -> list[ServiceTypeRead]:
        return [self._to_read(item) for item in self.service_type_repository.list()]

    def create_service_type(self, payload: ServiceTypeWriteRequest) -> ServiceTypeRead:
        name = validate_name(payload.name, max_length=50, code="INVALID_SERVICE_TYPE_NAME")
        try:
            created = self.service_type_repository.create(name=name)
        except UniqueViolation as exc:
            raise AppError(
                status_code=status.HTTP_409_CONFLICT,
                code="SERVICE_TYPE_NAME_CONFLICT",
                message="Service type name already exists.",
                details={"name": name},
            ) from exc

        logger.info("Service type %r created", name)
        self.change_feed.notify("service_types", "INSERT", created.id)
        return self._to_read(created)

    def delete_service_type(self, service_type_id: UUID) -> None:
        # Completed tickets keep their service_type_ref; there is no cascade.
        deleted = self.service_type_repository.delete(service_type_id)
        if not deleted:
            raise not_found_error("service_type", service_type_id)
        logger.info("Service type %s deleted", service_type_id)
        self.change_feed.notify("service_types", "DELETE", service_type_id)

    def _to_read(self, service_type: ServiceTypeEntity) -> ServiceTypeRead:
        return ServiceTypeRead(
            id=service_type.id,
            name=service_type.name,
            created_at=service_type.created_at,
        )
