"""Identity provider clients."""

from signage.auth.provider import (
    AuthProviderError,
    AuthProviderUnavailable,
    AuthUser,
    IdentityProvider,
)
from signage.auth.supabase import SupabaseAuthClient

__all__ = [
    "AuthProviderError",
    "AuthProviderUnavailable",
    "AuthUser",
    "IdentityProvider",
    "SupabaseAuthClient",
]
