"""Auth service: JWT issuance/verification and password hashing."""
from datetime import datetime, timezone
import bcrypt
import jwt
from app.config import get_settings

settings = get_settings()


def _pwd_bytes(password: str, max_len: int = 72) -> bytes:
    return password.encode("utf-8")[:max_len]


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_pwd_bytes(plain), hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_pwd_bytes(password), bcrypt.gensalt()).decode("utf-8")


def create_access_token(user_id: int) -> str:
    """Signed token carrying the user id and issue time. No expiry claim."""
    payload = {"id": user_id, "iat": int(datetime.now(timezone.utc).timestamp())}
    raw = jwt.encode(
        payload,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return raw if isinstance(raw, str) else raw.decode("utf-8")


def decode_token_with_error(token: str) -> tuple[dict | None, str | None]:
    """Decode JWT; returns (payload, error_message)."""
    if not token or not isinstance(token, str):
        return None, "empty token"
    token = token.strip()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        return payload, None
    except jwt.PyJWTError as e:
        return None, str(e)


def verify_access_token(token: str | None) -> int | None:
    """Return the user id a valid token was issued for, else None. Never raises."""
    payload, _ = decode_token_with_error(token)
    if not payload:
        return None
    user_id = payload.get("id")
    # bool is an int subclass; reject it explicitly
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        return None
    return user_id
