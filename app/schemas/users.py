"""Account service inputs and result envelopes."""
from datetime import datetime

from pydantic import BaseModel, EmailStr, ConfigDict, field_validator
from app.models.user import UserRole


def _password_not_blank(v: str | None) -> str | None:
    if v is not None and not v.strip():
        raise ValueError("Password cannot be empty")
    return v


class CreateAccountInput(BaseModel):
    email: EmailStr
    password: str
    role: UserRole

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, v):
        return _password_not_blank(v)


class LoginInput(BaseModel):
    email: EmailStr
    password: str


class EditProfileInput(BaseModel):
    email: EmailStr | None = None
    password: str | None = None

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, v):
        return _password_not_blank(v)


class VerifyEmailInput(BaseModel):
    code: str


class UserResponse(BaseModel):
    """Public view of a user; the password hash is never exposed."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: UserRole
    verified: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CoreOutput(BaseModel):
    ok: bool
    error: str | None = None


class CreateAccountOutput(CoreOutput):
    pass


class LoginOutput(CoreOutput):
    token: str | None = None


class EditProfileOutput(CoreOutput):
    pass


class VerifyEmailOutput(CoreOutput):
    pass


class UserProfileOutput(CoreOutput):
    user: UserResponse | None = None
