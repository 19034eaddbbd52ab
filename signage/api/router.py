from fastapi import APIRouter

from signage.api.routes.attendants import router as attendant_router
from signage.api.routes.displays import router as display_router
from signage.api.routes.events import router as event_router
from signage.api.routes.health import router as health_router
from signage.api.routes.playlists import router as playlist_router
from signage.api.routes.queue import router as queue_router
from signage.api.routes.reports import router as report_router
from signage.api.routes.service_types import router as service_type_router
from signage.api.routes.tickets import router as ticket_router
from signage.api.routes.users import router as user_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(ticket_router, tags=["tickets"])
api_router.include_router(queue_router, tags=["queue"])
api_router.include_router(report_router, tags=["reports"])
api_router.include_router(service_type_router, tags=["service-types"])
api_router.include_router(attendant_router, tags=["attendants"])
api_router.include_router(user_router, tags=["users"])
api_router.include_router(display_router, tags=["displays"])
api_router.include_router(playlist_router, tags=["playlists"])
api_router.include_router(event_router, tags=["events"])
