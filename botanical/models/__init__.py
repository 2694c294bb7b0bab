"""SQLAlchemy ORM models."""

from botanical.models.base import Base
from botanical.models.user import ADMIN_ROLE, DEFAULT_ROLE, User

__all__ = ["ADMIN_ROLE", "Base", "DEFAULT_ROLE", "User"]
