"""Endpoints for the calling account."""

from typing import Annotated

from fastapi import APIRouter, Depends

from botanical.api.v1.deps import get_account_service, get_current_user
from botanical.api.v1.users import change_password_or_raise, update_account_or_raise
from botanical.models.user import User
from botanical.schemas.auth import MessageResponse, PasswordChangeRequest
from botanical.schemas.user import ProfileUpdate, UserDetail
from botanical.services.accounts import AccountService

router = APIRouter()


@router.get("", response_model=UserDetail)
def get_me(current_user: Annotated[User, Depends(get_current_user)]) -> UserDetail:
    return UserDetail.model_validate(current_user)


@router.put("", response_model=UserDetail)
def update_me(
    body: ProfileUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> UserDetail:
    """Update the caller's username or phone. The role cannot be changed here."""
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    return update_account_or_raise(accounts, current_user.id, fields)


@router.put("/password", response_model=MessageResponse)
def change_my_password(
    body: PasswordChangeRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    """Change the caller's password; the current token stays valid until it expires."""
    return change_password_or_raise(accounts, current_user.id, body)
