"""Client for the hosted auth REST API (Supabase GoTrue).

Token validation is delegated to the auth server (``/auth/v1/user``); account
management uses the admin endpoints with the service role key.
"""

import logging

import httpx

from signage.auth.provider import AuthProviderError, AuthProviderUnavailable, AuthUser
from signage.core.config import Settings
from signage.core.errors import configuration_error

logger = logging.getLogger(__name__)


def _to_auth_user(payload: dict) -> AuthUser:
    return AuthUser(
        id=payload["id"],
        email=payload.get("email"),
        metadata=payload.get("user_metadata") or {},
    )


class SupabaseAuthClient:
    def __init__(
        self,
        settings: Settings,
        transport: httpx.BaseTransport | None = None,
        timeout_seconds: float = 5.0,
    ) -> None:
        self.settings = settings
        self.transport = transport
        self.timeout_seconds = timeout_seconds

    def _client(self) -> httpx.Client:
        if not self.settings.supabase_url:
            raise configuration_error(["SUPABASE_URL"])
        return httpx.Client(
            base_url=self.settings.supabase_url.rstrip("/"),
            timeout=self.timeout_seconds,
            transport=self.transport,
        )

    def _admin_headers(self) -> dict[str, str]:
        key = self.settings.supabase_service_role_key
        if not key:
            logger.error("Missing SUPABASE_SERVICE_ROLE_KEY for account management")
            raise configuration_error(["SUPABASE_SERVICE_ROLE_KEY"])
        return {"apikey": key, "Authorization": f"Bearer {key}"}

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        with self._client() as client:
            try:
                return client.request(method, path, **kwargs)
            except httpx.TimeoutException as exc:
                logger.warning("Auth provider timed out on %s %s", method, path)
                raise AuthProviderUnavailable("Auth provider timed out.") from exc
            except httpx.HTTPError as exc:
                logger.warning("Auth provider request %s %s failed: %s", method, path, exc)
                raise AuthProviderUnavailable(f"Auth provider unreachable: {exc}") from exc

    def get_user(self, access_token: str) -> AuthUser | None:
        api_key = self.settings.supabase_anon_key or self.settings.supabase_service_role_key
        if not api_key:
            raise configuration_error(["SUPABASE_ANON_KEY"])

        response = self._send(
            "GET",
            "/auth/v1/user",
            headers={"apikey": api_key, "Authorization": f"Bearer {access_token}"},
        )
        if response.status_code in (401, 403):
            return None
        if response.status_code != 200:
            raise AuthProviderError(f"Token validation failed with status {response.status_code}")
        return _to_auth_user(response.json())

    def create_user(self, *, email: str, password: str, name: str | None = None) -> AuthUser:
        headers = self._admin_headers()
        response = self._send(
            "POST",
            "/auth/v1/admin/users",
            headers=headers,
            json={
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"name": name} if name else {},
            },
        )
        if response.status_code not in (200, 201):
            raise AuthProviderError(_error_message(response))
        return _to_auth_user(response.json())

    def find_user_by_email(self, email: str) -> AuthUser | None:
        headers = self._admin_headers()
        response = self._send(
            "GET", "/auth/v1/admin/users", headers=headers, params={"per_page": 1000}
        )
        if response.status_code != 200:
            raise AuthProviderError(_error_message(response))
        wanted = email.strip().lower()
        for payload in response.json().get("users", []):
            if (payload.get("email") or "").lower() == wanted:
                return _to_auth_user(payload)
        return None

    def delete_user(self, user_id: str) -> None:
        headers = self._admin_headers()
        response = self._send("DELETE", f"/auth/v1/admin/users/{user_id}", headers=headers)
        if response.status_code == 404:
            logger.info("Auth user %s was already deleted", user_id)
            return
        if response.status_code not in (200, 204):
            raise AuthProviderError(_error_message(response))


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return f"Auth provider returned status {response.status_code}"
    return str(payload.get("msg") or payload.get("message") or payload.get("error_description") or payload)
