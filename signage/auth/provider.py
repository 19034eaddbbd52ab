from dataclasses import dataclass, field
from typing import Any, Protocol


class AuthProviderError(Exception):
    """Raised when the identity provider rejects or cannot complete a request."""


class AuthProviderUnavailable(AuthProviderError):
    """The identity provider could not be reached (timeout, refused connection)."""


@dataclass(slots=True)
class AuthUser:
    id: str
    email: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class IdentityProvider(Protocol):
    def get_user(self, access_token: str) -> AuthUser | None: ...

    def create_user(self, *, email: str, password: str, name: str | None = None) -> AuthUser: ...

    def delete_user(self, user_id: str) -> None: ...
