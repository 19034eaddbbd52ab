"""HTTP client for the signage queue API.

Every call returns an :class:`OperationResult`; transport failures and error
envelopes are turned into ``success=False`` results with the server's message
instead of escaping as exceptions.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any
from uuid import UUID

import httpx

logger = logging.getLogger(__name__)

CONFIGURATION_MESSAGE = "System configuration error."


@dataclass(frozen=True, slots=True)
class OperationResult:
    success: bool
    message: str | None = None
    data: Any = None
    status_code: int | None = None


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return f"Request failed with status {response.status_code}."
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return f"Request failed with status {response.status_code}."


class SignageApiClient:
    def __init__(
        self,
        base_url: str | None,
        *,
        access_token: str | None = None,
        attendant_id: str | None = None,
        transport: httpx.BaseTransport | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self.access_token = access_token
        self.attendant_id = attendant_id
        self.transport = transport
        self.timeout_seconds = timeout_seconds

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if self.attendant_id:
            headers["X-Attendant-Id"] = self.attendant_id
        return headers

    def http_client(self, timeout: float | httpx.Timeout | None = None) -> httpx.Client:
        if not self.base_url:
            raise ValueError("base_url is not configured")
        return httpx.Client(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.timeout_seconds if timeout is None else timeout,
            transport=self.transport,
        )

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> OperationResult:
        if not self.base_url:
            logger.error("Signage API base URL is not configured")
            return OperationResult(success=False, message=CONFIGURATION_MESSAGE)

        if params:
            params = {key: str(value) for key, value in params.items() if value is not None}
        try:
            with self.http_client() as client:
                response = client.request(method, path, json=json, params=params or None)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            return OperationResult(success=False, message=f"Could not reach the server: {exc}")

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning("%s %s returned %d: %s", method, path, response.status_code, message)
            return OperationResult(
                success=False,
                message=message,
                status_code=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return OperationResult(success=True, status_code=response.status_code)

        payload = response.json()
        data = payload.get("data", payload) if isinstance(payload, dict) else payload
        return OperationResult(success=True, data=data, status_code=response.status_code)

    # Queue
    def health(self) -> OperationResult:
        return self._request("GET", "/health")

    def create_ticket(self) -> OperationResult:
        return self._request("POST", "/tickets")

    def list_tickets(self, **filters: Any) -> OperationResult:
        return self._request("GET", "/tickets", params=filters)

    def get_ticket(self, ticket_id: UUID | str) -> OperationResult:
        return self._request("GET", f"/tickets/{ticket_id}")

    def call_ticket(self, ticket_id: UUID | str) -> OperationResult:
        return self._request("POST", f"/tickets/{ticket_id}/call")

    def call_next(self) -> OperationResult:
        return self._request("POST", "/tickets/call-next")

    def complete_ticket(
        self,
        ticket_id: UUID | str,
        service_type_id: UUID | str | None = None,
    ) -> OperationResult:
        body = {"service_type_id": str(service_type_id) if service_type_id else None}
        return self._request("POST", f"/tickets/{ticket_id}/complete", json=body)

    def kiosk_ticket(self, number: str) -> OperationResult:
        return self._request("GET", f"/queue/kiosk/{number.lstrip('#')}")

    def attendant_queue(self) -> OperationResult:
        return self._request("GET", "/queue/attendant")

    def display_queue(self) -> OperationResult:
        return self._request("GET", "/queue/display")

    def queue_report(
        self,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        service_type_id: UUID | str | None = None,
        attendant_ref: str | None = None,
    ) -> OperationResult:
        return self._request(
            "GET",
            "/reports/queue",
            params={
                "start_date": start_date,
                "end_date": end_date,
                "service_type_id": service_type_id,
                "attendant_ref": attendant_ref,
            },
        )

    # Settings
    def list_service_types(self) -> OperationResult:
        return self._request("GET", "/service-types")

    def create_service_type(self, name: str) -> OperationResult:
        return self._request("POST", "/service-types", json={"name": name})

    def delete_service_type(self, service_type_id: UUID | str) -> OperationResult:
        return self._request("DELETE", f"/service-types/{service_type_id}")

    def list_attendants(self) -> OperationResult:
        return self._request("GET", "/attendants")

    def create_attendant(self, name: str, desk_number: str | None = None) -> OperationResult:
        return self._request("POST", "/attendants", json={"name": name, "desk_number": desk_number})

    def delete_attendant(self, attendant_id: UUID | str) -> OperationResult:
        return self._request("DELETE", f"/attendants/{attendant_id}")

    # Accounts
    def get_me(self) -> OperationResult:
        return self._request("GET", "/users/me")

    def list_users(self) -> OperationResult:
        return self._request("GET", "/users")

    def create_user(self, **fields: Any) -> OperationResult:
        return self._request("POST", "/users", json=fields)

    def update_user(self, user_id: UUID | str, **fields: Any) -> OperationResult:
        return self._request("PATCH", f"/users/{user_id}", json=fields)

    def delete_user(self, user_id: UUID | str) -> OperationResult:
        result = self._request("DELETE", f"/users/{user_id}")
        if result.success and isinstance(result.data, dict) and not result.data.get("success"):
            failed = [step["step"] for step in result.data.get("steps", []) if not step["success"]]
            return OperationResult(
                success=False,
                message=f"Account deletion incomplete: {', '.join(failed)}",
                data=result.data,
                status_code=result.status_code,
            )
        return result

    # Signage
    def list_displays(self) -> OperationResult:
        return self._request("GET", "/displays")

    def create_display(self, **fields: Any) -> OperationResult:
        return self._request("POST", "/displays", json=fields)

    def get_display(self, display_id: UUID | str) -> OperationResult:
        return self._request("GET", f"/displays/{display_id}")

    def update_display(self, display_id: UUID | str, **fields: Any) -> OperationResult:
        return self._request("PATCH", f"/displays/{display_id}", json=fields)

    def delete_display(self, display_id: UUID | str) -> OperationResult:
        return self._request("DELETE", f"/displays/{display_id}")

    def assign_playlist(
        self,
        display_id: UUID | str,
        playlist_id: UUID | str | None,
    ) -> OperationResult:
        body = {"playlist_id": str(playlist_id) if playlist_id else None}
        return self._request("PUT", f"/displays/{display_id}/playlist", json=body)

    def display_content(self, display_id: UUID | str) -> OperationResult:
        return self._request("GET", f"/displays/{display_id}/content")

    def list_playlists(self) -> OperationResult:
        return self._request("GET", "/playlists")

    def create_playlist(self, name: str) -> OperationResult:
        return self._request("POST", "/playlists", json={"name": name})

    def delete_playlist(self, playlist_id: UUID | str) -> OperationResult:
        return self._request("DELETE", f"/playlists/{playlist_id}")

    def add_slide(self, playlist_id: UUID | str, url: str, duration: int) -> OperationResult:
        return self._request(
            "POST",
            f"/playlists/{playlist_id}/slides",
            json={"url": url, "duration": duration, "type": "image"},
        )

    def delete_slide(self, slide_id: UUID | str) -> OperationResult:
        return self._request("DELETE", f"/slides/{slide_id}")
