"""Schemas for account management endpoints (/me and /users)."""

from datetime import datetime

from pydantic import BaseModel, Field

from botanical.schemas.auth import UserSummary


class UserDetail(UserSummary):
    """Account as returned by profile and admin endpoints."""

    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileUpdate(BaseModel):
    """Fields an account may change on itself; omitted fields are left as is."""

    username: str | None = Field(default=None, min_length=1, max_length=50)
    phone: str | None = Field(default=None, min_length=1, max_length=20)


class UserUpdate(ProfileUpdate):
    """Admin update; may also change the role marker."""

    user_role: int | None = Field(default=None, ge=0, le=9)


class UserCreate(BaseModel):
    """Admin-created account with an explicit role."""

    username: str = Field(..., min_length=1, max_length=50)
    phone: str = Field(..., min_length=1, max_length=20)
    password: str = Field(..., min_length=1, max_length=128)
    user_role: int = Field(default=1, ge=0, le=9)


class UsersPage(BaseModel):
    """Response for GET /users (admin only)."""

    items: list[UserDetail]
    total: int
    page: int
    size: int
