"""Shared dependencies: DB session, current user, role guard."""
from fastapi import Depends, Header
from graphql import GraphQLResolveInfo
from sqlalchemy.orm import Session
from strawberry.extensions import SchemaExtension
from strawberry.fastapi import BaseContext

from app.database import get_db
from app.models.user import User, UserRole
from app.services.auth import verify_access_token

# Sentinel role: any authenticated user may call the operation
ANY_ROLE = "Any"

# GraphQL root field -> roles allowed to call it. Fields not listed are public.
OPERATION_ROLES: dict[str, frozenset] = {
    "me": frozenset({ANY_ROLE}),
    "userProfile": frozenset({ANY_ROLE}),
    "editProfile": frozenset({ANY_ROLE}),
    "resendVerification": frozenset({ANY_ROLE}),
}

ROOT_TYPES = ("Query", "Mutation")


class ForbiddenError(Exception):
    def __init__(self, message: str = "Forbidden resource"):
        super().__init__(message)


class Context(BaseContext):
    """Per-request state handed to every resolver."""

    def __init__(self, db: Session, user: User | None = None):
        super().__init__()
        self.db = db
        self.user = user


def resolve_current_user(db: Session, token: str | None) -> User | None:
    user_id = verify_access_token(token)
    if user_id is None:
        return None
    return db.get(User, user_id)


def get_context(
    db: Session = Depends(get_db),
    x_jwt: str | None = Header(default=None),
) -> Context:
    return Context(db=db, user=resolve_current_user(db, x_jwt))


def check_access(operation: str, user: User | None) -> None:
    """Raise ForbiddenError unless user may call operation."""
    roles = OPERATION_ROLES.get(operation)
    if roles is None:
        return
    if user is None:
        raise ForbiddenError()
    if ANY_ROLE in roles:
        return
    role = user.role.value if isinstance(user.role, UserRole) else user.role
    if role not in roles:
        raise ForbiddenError()


class AuthGuard(SchemaExtension):
    """Checks OPERATION_ROLES before any root Query/Mutation resolver runs."""

    def resolve(self, _next, root, info: GraphQLResolveInfo, *args, **kwargs):
        if info.parent_type.name in ROOT_TYPES:
            check_access(info.field_name, info.context.user)
        return _next(root, info, *args, **kwargs)
