from typing import Annotated

from fastapi import APIRouter, Depends

from signage.api.dependencies import ChangeFeedDep, SettingsDep
from signage.models.schemas.health import HealthResponse
from signage.repositories.health_repository import HealthRepository
from signage.services.health_service import HealthService

router = APIRouter()


def get_health_service(settings: SettingsDep, change_feed: ChangeFeedDep) -> HealthService:
    return HealthService(
        repository=HealthRepository(),
        settings=settings,
        change_feed=change_feed,
    )


@router.get("/health", response_model=HealthResponse)
def health(
    health_service: Annotated[HealthService, Depends(get_health_service)],
) -> HealthResponse:
    return health_service.get_health()
