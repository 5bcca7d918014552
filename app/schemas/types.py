"""GraphQL object and input types."""
from datetime import datetime

import strawberry

from app.models.user import UserRole
from app.schemas.users import UserResponse

UserRoleEnum = strawberry.enum(UserRole, name="UserRole")


@strawberry.type(name="User")
class UserType:
    id: int
    email: str
    role: UserRoleEnum
    verified: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_response(cls, user: UserResponse) -> "UserType":
        return cls(**user.model_dump())


@strawberry.type
class CoreOutput:
    ok: bool
    error: str | None = None


@strawberry.type
class CreateAccountOutput(CoreOutput):
    pass


@strawberry.type
class LoginOutput(CoreOutput):
    token: str | None = None


@strawberry.type
class EditProfileOutput(CoreOutput):
    pass


@strawberry.type
class VerifyEmailOutput(CoreOutput):
    pass


@strawberry.type
class UserProfileOutput(CoreOutput):
    user: UserType | None = None


@strawberry.input
class CreateAccountInput:
    email: str
    password: str
    role: UserRoleEnum


@strawberry.input
class LoginInput:
    email: str
    password: str


@strawberry.input
class EditProfileInput:
    email: str | None = None
    password: str | None = None


@strawberry.input
class VerifyEmailInput:
    code: str
