import logging
from collections.abc import Callable
from uuid import UUID

from fastapi import status
from psycopg import Error as DatabaseError

from signage.auth.provider import AuthProviderError, AuthProviderUnavailable, IdentityProvider
from signage.core.errors import AppError, not_found_error, unauthenticated_error
from signage.models.entities import CallerIdentity, ProfileEntity
from signage.models.schemas.user import (
    ProfileRead,
    StepResult,
    UserCreateRequest,
    UserDeletionResult,
    UserUpdateRequest,
)
from signage.realtime.change_feed import ChangeFeed
from signage.repositories.profile_repository import ProfileRepository
from signage.repositories.ticket_repository import TicketRepository
from signage.services.identity_service import identity_from_profile, require_super_admin
from signage.services.service_type_service import validate_name

logger = logging.getLogger(__name__)

STEP_ERRORS = (DatabaseError, AuthProviderError, AppError)


class UserService:
    def __init__(
        self,
        profile_repository: ProfileRepository,
        ticket_repository: TicketRepository,
        identity_provider: IdentityProvider,
        change_feed: ChangeFeed,
    ) -> None:
        self.profile_repository = profile_repository
        self.ticket_repository = ticket_repository
        self.identity_provider = identity_provider
        self.change_feed = change_feed

    def get_me(self, viewer: CallerIdentity | None) -> ProfileRead:
        if viewer is None:
            raise unauthenticated_error()
        try:
            profile_id = UUID(viewer.ref)
        except ValueError:
            profile_id = None
        profile = self.profile_repository.get_by_id(profile_id) if profile_id else None
        if profile is None:
            raise not_found_error("profile", viewer.ref)
        return self._to_read(profile)

    def list_users(self, viewer: CallerIdentity | None) -> list[ProfileRead]:
        require_super_admin(viewer)
        return [self._to_read(profile) for profile in self.profile_repository.list()]

    def create_user(self, viewer: CallerIdentity | None, payload: UserCreateRequest) -> ProfileRead:
        require_super_admin(viewer)
        name = validate_name(payload.name, max_length=120, code="INVALID_USER_NAME")
        email = payload.email.strip().lower()

        try:
            user = self.identity_provider.create_user(
                email=email,
                password=payload.password,
                name=name,
            )
        except AuthProviderUnavailable as exc:
            logger.warning("Account creation for %s could not reach the provider: %s", email, exc)
            raise AppError(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                code="BACKEND_UNAVAILABLE",
                message="The account service is unavailable. Try again later.",
                details={"email": email},
            ) from exc
        except AuthProviderError as exc:
            logger.warning("Account creation for %s failed: %s", email, exc)
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="USER_CREATE_FAILED",
                message=str(exc),
                details={"email": email},
            ) from exc

        try:
            profile = self.profile_repository.upsert(
                profile_id=UUID(user.id),
                role=payload.role,
                email=email,
                name=name,
                desk_info=payload.desk_info,
            )
        except DatabaseError:
            logger.exception("Account %s created but its profile could not be saved", user.id)
            raise

        logger.info("Account %s created with role %s", profile.id, profile.role)
        self.change_feed.notify("profiles", "INSERT", profile.id)
        return self._to_read(profile)

    def update_user(
        self,
        viewer: CallerIdentity | None,
        user_id: UUID,
        payload: UserUpdateRequest,
    ) -> ProfileRead:
        require_super_admin(viewer)
        updates = payload.model_dump(exclude_unset=True)
        if "name" in updates and updates["name"] is not None:
            updates["name"] = validate_name(updates["name"], max_length=120, code="INVALID_USER_NAME")
        if updates.get("role") is None:
            updates.pop("role", None)

        updated = self.profile_repository.update(profile_id=user_id, updates=updates)
        if updated is None:
            raise not_found_error("profile", user_id)
        self.change_feed.notify("profiles", "UPDATE", user_id)
        return self._to_read(updated)

    def delete_user(self, viewer: CallerIdentity | None, user_id: UUID) -> UserDeletionResult:
        """Remove an account in three steps, each safe to re-run.

        A failed step is logged and reported, and the remaining steps still
        run; the overall result only reports success when every step did.
        """
        admin = require_super_admin(viewer)
        if admin.ref == str(user_id):
            raise AppError(
                status_code=status.HTTP_400_BAD_REQUEST,
                code="CANNOT_DELETE_SELF",
                message="You cannot delete your own account.",
            )

        steps = [
            self._run_step("detach_tickets", lambda: self._detach_tickets(user_id)),
            self._run_step("delete_profile", lambda: self._delete_profile(user_id)),
            self._run_step("delete_account", lambda: self._delete_account(user_id)),
        ]
        result = UserDeletionResult(
            user_id=user_id,
            success=all(step.success for step in steps),
            steps=steps,
        )
        if result.success:
            logger.info("Account %s deleted", user_id)
        else:
            failed = [step.step for step in steps if not step.success]
            logger.error("Account %s deletion incomplete, failed steps: %s", user_id, failed)
        self.change_feed.notify("profiles", "DELETE", user_id)
        return result

    def _run_step(self, name: str, action: Callable[[], str | None]) -> StepResult:
        try:
            message = action()
        except STEP_ERRORS as exc:
            logger.exception("Account deletion step %s failed", name)
            return StepResult(step=name, success=False, message=str(exc))
        return StepResult(step=name, success=True, message=message)

    def _detach_tickets(self, user_id: UUID) -> str:
        profile = self.profile_repository.get_by_id(user_id)
        if profile is None:
            return "Profile already removed; nothing to detach."
        label = identity_from_profile(profile).label
        detached = self.ticket_repository.freeze_attendant_label(
            attendant_ref=str(user_id),
            label=label,
        )
        if detached:
            self.change_feed.notify("tickets", "UPDATE")
        return f"{detached} tickets detached."

    def _delete_profile(self, user_id: UUID) -> str:
        if self.profile_repository.delete(user_id):
            return "Profile deleted."
        return "Profile already removed."

    def _delete_account(self, user_id: UUID) -> str:
        self.identity_provider.delete_user(str(user_id))
        return "Account deleted."

    def _to_read(self, profile: ProfileEntity) -> ProfileRead:
        return ProfileRead(
            id=profile.id,
            role=profile.role,
            email=profile.email,
            name=profile.name,
            desk_info=profile.desk_info,
        )
