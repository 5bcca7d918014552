"""Account service: create, login, profile edits and email verification.

Every function returns an envelope (ok/error). Expected failures never raise;
unexpected database errors are rolled back, logged and reported with a
generic message.
"""
import logging
import secrets

from fastapi import BackgroundTasks
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.user import User
from app.models.verification import Verification
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
from app.services.auth import create_access_token, get_password_hash, verify_password
from app.services.notifications import deliver_verification_email

logger = logging.getLogger("uvicorn.error")

EMAIL_TAKEN = "There is a user with that email already"
EMAIL_IN_USE = "That email is already in use"
LOGIN_USER_NOT_FOUND = "User not found"
WRONG_PASSWORD = "Wrong Password"
USER_NOT_FOUND = "User Not Found"
VERIFICATION_NOT_FOUND = "Verification Not Found."
ALREADY_VERIFIED = "Email is already verified"


def _generate_verification_code() -> str:
    return secrets.token_hex(16)


def _issue_verification(db: Session, user: User) -> Verification:
    """Attach a fresh verification to user, dropping any previous one. Caller commits."""
    if user.verification is not None:
        # delete-orphan removes the old row; flush so the unique user_id slot is free
        user.verification = None
        db.flush()
    verification = Verification(code=_generate_verification_code(), user=user)
    db.add(verification)
    return verification


def _queue_verification_email(background_tasks: BackgroundTasks, email: str, code: str) -> None:
    background_tasks.add_task(deliver_verification_email, email, code)


def create_account(db: Session, background_tasks: BackgroundTasks, data: CreateAccountInput) -> CreateAccountOutput:
    if db.query(User).filter(User.email == data.email).first():
        return CreateAccountOutput(ok=False, error=EMAIL_TAKEN)
    user = User(
        email=data.email,
        hashed_password=get_password_hash(data.password),
        role=data.role,
        verified=False,
    )
    db.add(user)
    try:
        verification = _issue_verification(db, user)
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same email
        db.rollback()
        return CreateAccountOutput(ok=False, error=EMAIL_TAKEN)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("create_account failed for %s", data.email)
        return CreateAccountOutput(ok=False, error="Could not create account")
    logger.info("[Account] Created user id=%s role=%s", user.id, user.role.value)
    _queue_verification_email(background_tasks, user.email, verification.code)
    return CreateAccountOutput(ok=True)


def login(db: Session, data: LoginInput) -> LoginOutput:
    try:
        user = db.query(User).filter(User.email == data.email).first()
    except SQLAlchemyError:
        logger.exception("login lookup failed for %s", data.email)
        return LoginOutput(ok=False, error="Could not log in")
    if not user:
        return LoginOutput(ok=False, error=LOGIN_USER_NOT_FOUND)
    if not verify_password(data.password, user.hashed_password):
        return LoginOutput(ok=False, error=WRONG_PASSWORD)
    return LoginOutput(ok=True, token=create_access_token(user.id))


def find_by_id(db: Session, user_id: int) -> UserProfileOutput:
    try:
        user = db.get(User, user_id)
    except SQLAlchemyError:
        logger.exception("find_by_id failed for user id=%s", user_id)
        return UserProfileOutput(ok=False, error="Could not load profile")
    if not user:
        return UserProfileOutput(ok=False, error=USER_NOT_FOUND)
    return UserProfileOutput(ok=True, user=UserResponse.model_validate(user))


def edit_profile(
    db: Session,
    background_tasks: BackgroundTasks,
    user_id: int,
    data: EditProfileInput,
) -> EditProfileOutput:
    user = db.get(User, user_id)
    if not user:
        return EditProfileOutput(ok=False, error=USER_NOT_FOUND)

    verification = None
    email_changed = data.email is not None and data.email != user.email
    if email_changed:
        taken = db.query(User).filter(User.email == data.email, User.id != user.id).first()
        if taken:
            return EditProfileOutput(ok=False, error=EMAIL_IN_USE)
        user.email = data.email
        user.verified = False
    # Hash only when the password actually changes
    if data.password is not None and not verify_password(data.password, user.hashed_password):
        user.hashed_password = get_password_hash(data.password)

    try:
        if email_changed:
            verification = _issue_verification(db, user)
        db.commit()
    except IntegrityError:
        db.rollback()
        return EditProfileOutput(ok=False, error=EMAIL_IN_USE)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("edit_profile failed for user id=%s", user_id)
        return EditProfileOutput(ok=False, error="Could not update profile")

    if verification is not None:
        _queue_verification_email(background_tasks, user.email, verification.code)
    return EditProfileOutput(ok=True)


def verify_email(db: Session, data: VerifyEmailInput) -> VerifyEmailOutput:
    try:
        verification = db.query(Verification).filter(Verification.code == data.code).first()
    except SQLAlchemyError:
        logger.exception("verify_email lookup failed")
        return VerifyEmailOutput(ok=False, error="Could not verify email")
    if not verification:
        return VerifyEmailOutput(ok=False, error=VERIFICATION_NOT_FOUND)
    verification_id = verification.id
    try:
        verification.user.verified = True
        db.delete(verification)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("verify_email failed for verification id=%s", verification_id)
        return VerifyEmailOutput(ok=False, error="Could not verify email")
    return VerifyEmailOutput(ok=True)


def resend_verification(db: Session, background_tasks: BackgroundTasks, user_id: int) -> CoreOutput:
    """Replace the pending code with a new one and email it again."""
    user = db.get(User, user_id)
    if not user:
        return CoreOutput(ok=False, error=USER_NOT_FOUND)
    if user.verified:
        return CoreOutput(ok=False, error=ALREADY_VERIFIED)
    try:
        verification = _issue_verification(db, user)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("resend_verification failed for user id=%s", user_id)
        return CoreOutput(ok=False, error="Could not send verification")
    _queue_verification_email(background_tasks, user.email, verification.code)
    return CoreOutput(ok=True)
