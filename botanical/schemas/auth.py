"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """New account details. Password strength is checked by the account service."""

    username: str = Field(..., min_length=1, max_length=50, description="Display name")
    phone: str = Field(..., min_length=1, max_length=20, description="Phone number (login key)")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class LoginRequest(BaseModel):
    """Credentials for login."""

    phone: str = Field(..., min_length=1, max_length=20, description="Phone number")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class PasswordChangeRequest(BaseModel):
    old_password: str = Field(..., min_length=1, max_length=128)
    new_password: str = Field(..., min_length=1, max_length=128)


class UserSummary(BaseModel):
    """Public account fields; never includes the password hash or token."""

    id: int
    username: str
    phone: str
    user_role: int

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    """JWT returned after login or registration."""

    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserSummary


class MessageResponse(BaseModel):
    message: str
