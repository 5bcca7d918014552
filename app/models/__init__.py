"""
All SQLAlchemy models. Schema is the source of truth for new DBs.
Base.metadata.create_all() creates every table.
"""
from app.models.user import User, UserRole
from app.models.verification import Verification

__all__ = [
    "User",
    "UserRole",
    "Verification",
]
