from app.schemas.users import (
    CoreOutput,
    CreateAccountInput,
    CreateAccountOutput,
    EditProfileInput,
    EditProfileOutput,
    LoginInput,
    LoginOutput,
    UserProfileOutput,
    UserResponse,
    VerifyEmailInput,
    VerifyEmailOutput,
)
