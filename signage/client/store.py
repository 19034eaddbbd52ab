"""Client-side state container for admin, kiosk and player screens.

The store holds one immutable :class:`StoreSnapshot`. Every action calls the
backend and then refetches everything; there is no optimistic patching, so a
snapshot is always a copy of what the server had at fetch time.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from signage.client.api_client import OperationResult, SignageApiClient
from signage.models.schemas.display import DisplayRead
from signage.models.schemas.playlist import PlaylistRead
from signage.models.schemas.service_type import ServiceTypeRead
from signage.models.schemas.ticket import TicketRead

logger = logging.getLogger(__name__)

Listener = Callable[["StoreSnapshot"], None]

_displays = TypeAdapter(tuple[DisplayRead, ...])
_playlists = TypeAdapter(tuple[PlaylistRead, ...])
_tickets = TypeAdapter(tuple[TicketRead, ...])
_service_types = TypeAdapter(tuple[ServiceTypeRead, ...])


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    tvs: tuple[DisplayRead, ...] = ()
    playlists: tuple[PlaylistRead, ...] = ()
    tickets: tuple[TicketRead, ...] = ()
    service_types: tuple[ServiceTypeRead, ...] = ()
    fetched_at: datetime | None = None

    def playlist(self, playlist_id: UUID | None) -> PlaylistRead | None:
        if playlist_id is None:
            return None
        return next((item for item in self.playlists if item.id == playlist_id), None)

    def display(self, display_id: UUID) -> DisplayRead | None:
        return next((item for item in self.tvs if item.id == display_id), None)


class QueueStore:
    def __init__(self, api: SignageApiClient) -> None:
        self.api = api
        self._snapshot = StoreSnapshot()
        self._listeners: list[Listener] = []
        self.last_error: str | None = None

    @property
    def snapshot(self) -> StoreSnapshot:
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def replace(self, snapshot: StoreSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Store listener failed")

    def refresh(self) -> OperationResult:
        """Refetch the whole state; on any failure keep the previous snapshot."""
        fetches = (
            ("tvs", self.api.list_displays, _displays),
            ("playlists", self.api.list_playlists, _playlists),
            ("tickets", self.api.list_tickets, _tickets),
            ("service_types", self.api.list_service_types, _service_types),
        )
        values: dict[str, Any] = {}
        for name, fetch, adapter in fetches:
            result = fetch()
            if not result.success:
                self.last_error = result.message
                return result
            try:
                values[name] = adapter.validate_python(result.data or [])
            except ValidationError as exc:
                logger.error("Unexpected %s payload: %s", name, exc)
                self.last_error = f"Unexpected {name} payload."
                return OperationResult(success=False, message=self.last_error)

        self.last_error = None
        self.replace(StoreSnapshot(fetched_at=datetime.now(UTC), **values))
        return OperationResult(success=True, data=self._snapshot)

    def _then_refresh(self, result: OperationResult) -> OperationResult:
        if not result.success:
            self.last_error = result.message
            return result
        refreshed = self.refresh()
        if not refreshed.success:
            logger.warning("Action succeeded but refresh failed: %s", refreshed.message)
        return result

    # Queue actions
    def create_ticket(self) -> TicketRead | None:
        result = self._then_refresh(self.api.create_ticket())
        return TicketRead.model_validate(result.data) if result.success else None

    def call_ticket(self, ticket_id: UUID | str) -> OperationResult:
        return self._then_refresh(self.api.call_ticket(ticket_id))

    def call_next(self) -> OperationResult:
        return self._then_refresh(self.api.call_next())

    def complete_ticket(
        self,
        ticket_id: UUID | str,
        service_type_id: UUID | str | None = None,
    ) -> OperationResult:
        return self._then_refresh(self.api.complete_ticket(ticket_id, service_type_id))

    def add_service_type(self, name: str) -> OperationResult:
        return self._then_refresh(self.api.create_service_type(name))

    def remove_service_type(self, service_type_id: UUID | str) -> OperationResult:
        return self._then_refresh(self.api.delete_service_type(service_type_id))

    # Signage actions
    def add_display(self, **fields: Any) -> OperationResult:
        return self._then_refresh(self.api.create_display(**fields))

    def update_display(self, display_id: UUID | str, **fields: Any) -> OperationResult:
        return self._then_refresh(self.api.update_display(display_id, **fields))

    def remove_display(self, display_id: UUID | str) -> OperationResult:
        return self._then_refresh(self.api.delete_display(display_id))

    def assign_playlist(
        self,
        display_id: UUID | str,
        playlist_id: UUID | str | None,
    ) -> OperationResult:
        return self._then_refresh(self.api.assign_playlist(display_id, playlist_id))

    def add_playlist(self, name: str) -> OperationResult:
        return self._then_refresh(self.api.create_playlist(name))

    def remove_playlist(self, playlist_id: UUID | str) -> OperationResult:
        return self._then_refresh(self.api.delete_playlist(playlist_id))

    def add_slide(self, playlist_id: UUID | str, url: str, duration: int) -> OperationResult:
        return self._then_refresh(self.api.add_slide(playlist_id, url, duration))

    def remove_slide(self, slide_id: UUID | str) -> OperationResult:
        return self._then_refresh(self.api.delete_slide(slide_id))
