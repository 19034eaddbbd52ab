"""Create (or promote) the first super admin account.

Reads SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY and DATABASE_URL from the
environment or `.env`; the email and password come from SEED_ADMIN_EMAIL and
SEED_ADMIN_PASSWORD.
"""

from __future__ import annotations

import os
import sys
from uuid import UUID

from signage.auth.provider import AuthProviderError
from signage.auth.supabase import SupabaseAuthClient
from signage.core.config import get_settings
from signage.core.errors import AppError
from signage.repositories.profile_repository import ProfileRepository

DEFAULT_EMAIL = "admin@example.com"


def seed_admin(email: str, password: str) -> UUID:
    settings = get_settings()
    auth_client = SupabaseAuthClient(settings)

    existing = auth_client.find_user_by_email(email)
    if existing is not None:
        print(f"User {email} already exists. Updating role...")
        user = existing
    else:
        print(f"Creating user {email}...")
        user = auth_client.create_user(email=email, password=password, name="Administrator")
        print("Auth user created.")

    profile = ProfileRepository(database_url=settings.database_url).upsert(
        profile_id=UUID(user.id),
        role="super_admin",
        email=email,
        name="Administrator",
    )
    return profile.id


def main() -> int:
    email = os.getenv("SEED_ADMIN_EMAIL", DEFAULT_EMAIL)
    password = os.getenv("SEED_ADMIN_PASSWORD")
    if not password:
        print("SEED_ADMIN_PASSWORD is not set.", file=sys.stderr)
        return 1

    try:
        profile_id = seed_admin(email, password)
    except (AuthProviderError, AppError) as exc:
        print(f"Seeding failed: {exc}", file=sys.stderr)
        return 1

    print(f"Super admin ready: {email} ({profile_id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
