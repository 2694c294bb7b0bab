"""Pydantic request/response schemas."""

from botanical.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    PasswordChangeRequest,
    RegisterRequest,
    UserSummary,
)
from botanical.schemas.health import HealthResponse
from botanical.schemas.user import (
    ProfileUpdate,
    UserCreate,
    UserDetail,
    UsersPage,
    UserUpdate,
)

__all__ = [
    "AuthResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PasswordChangeRequest",
    "ProfileUpdate",
    "RegisterRequest",
    "UserCreate",
    "UserDetail",
    "UserSummary",
    "UserUpdate",
    "UsersPage",
]
