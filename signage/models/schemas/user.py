from uuid import UUID

from pydantic import BaseModel, Field

from signage.models.entities import ProfileRole


class ProfileRead(BaseModel):
    id: UUID
    role: ProfileRole
    email: str | None = None
    name: str | None = None
    desk_info: str | None = None


class UserCreateRequest(BaseModel):
    email: str
    password: str = Field(min_length=6)
    name: str
    role: ProfileRole = "attendant"
    desk_info: str | None = None


class UserUpdateRequest(BaseModel):
    name: str | None = None
    desk_info: str | None = None
    role: ProfileRole | None = None


class StepResult(BaseModel):
    step: str
    success: bool
    message: str | None = None


class UserDeletionResult(BaseModel):
    user_id: UUID
    success: bool
    steps: list[StepResult]


class ProfileDataResponse(BaseModel):
    data: ProfileRead


class ProfileListResponse(BaseModel):
    data: list[ProfileRead]


class UserDeletionResponse(BaseModel):
    data: UserDeletionResult
