"""Registration and login endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from botanical.api.v1.deps import get_account_service
from botanical.core.security import PasswordPolicyError
from botanical.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserSummary
from botanical.services.accounts import AccountExistsError, AccountService, CredentialError

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> AuthResponse:
    """
    Create an account and log it in immediately.

    Password must be 6-20 characters and contain both letters and digits.
    """
    try:
        accounts.register(body.username, body.phone, body.password)
    except AccountExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except PasswordPolicyError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        ) from e

    result = accounts.login(body.phone, body.password)
    return AuthResponse(token=result.token, user=UserSummary.model_validate(result.user))


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> AuthResponse:
    """
    Authenticate with phone and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    Logging in again replaces the previously stored session token.
    """
    try:
        result = accounts.login(body.phone, body.password)
    except CredentialError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e
    return AuthResponse(token=result.token, user=UserSummary.model_validate(result.user))
