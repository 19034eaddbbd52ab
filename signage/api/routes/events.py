import json
import logging
from collections.abc import AsyncIterator
from typing import Annotated, Any

from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse

from signage.api.dependencies import ChangeFeedDep, SettingsDep
from signage.realtime.change_feed import ANY_TABLE, ChangeFeed

logger = logging.getLogger(__name__)

router = APIRouter()


def format_sse(event: str, payload: dict[str, Any]) -> str:
    return f"event: {event}\ndata: {json.dumps(payload)}\n\n"


async def change_event_stream(
    change_feed: ChangeFeed,
    table: str = ANY_TABLE,
    heartbeat_seconds: float | None = None,
) -> AsyncIterator[str]:
    """Server-sent events for table changes, with a heartbeat while idle."""
    logger.info("Change stream opened for %s", table)
    try:
        async for event in change_feed.stream(table, heartbeat_seconds=heartbeat_seconds):
            if event is None:
                yield format_sse("heartbeat", {"type": "heartbeat"})
            else:
                yield format_sse("change", event.to_payload())
    finally:
        logger.info("Change stream closed for %s", table)


@router.get("/events")
async def events(
    change_feed: ChangeFeedDep,
    settings: SettingsDep,
    table: Annotated[str, Query(min_length=1)] = ANY_TABLE,
) -> StreamingResponse:
    return StreamingResponse(
        change_event_stream(change_feed, table, settings.event_heartbeat_seconds),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
