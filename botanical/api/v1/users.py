"""Account management endpoints. Listing, creation, updates and deletion are admin only."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from botanical.api.v1.deps import (
    current_principal,
    get_account_service,
    get_current_user,
    get_user_repository,
    is_admin,
    raise_forbidden,
    require_admin,
)
from botanical.core.config import Settings, get_settings
from botanical.core.security import PasswordPolicyError
from botanical.models.user import User
from botanical.repositories.user_repository import UserRepository
from botanical.schemas.auth import MessageResponse, PasswordChangeRequest
from botanical.schemas.user import UserCreate, UserDetail, UsersPage, UserUpdate
from botanical.services.accounts import (
    AccountExistsError,
    AccountNotFoundError,
    AccountService,
    CredentialError,
)

router = APIRouter()


def change_password_or_raise(
    accounts: AccountService, user_id: int, body: PasswordChangeRequest
) -> MessageResponse:
    """Run a password change and translate service errors to HTTP errors."""
    try:
        accounts.change_password(user_id, body.old_password, body.new_password)
    except AccountNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except CredentialError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except PasswordPolicyError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        ) from e
    return MessageResponse(message="Password changed.")


def update_account_or_raise(
    accounts: AccountService, user_id: int, fields: dict
) -> UserDetail:
    try:
        user = accounts.update_profile(user_id, fields)
    except AccountNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except AccountExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return UserDetail.model_validate(user)


@router.get("", response_model=UsersPage)
def list_users(
    _admin: Annotated[User, Depends(require_admin)],
    repo: Annotated[UserRepository, Depends(get_user_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
    page: Annotated[int, Query(ge=1)] = 1,
    size: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> UsersPage:
    """List accounts page by page (admin only)."""
    size = size or settings.DEFAULT_PAGE_SIZE
    users, total = repo.list_page(offset=(page - 1) * size, limit=size)
    return UsersPage(
        items=[UserDetail.model_validate(u) for u in users],
        total=total,
        page=page,
        size=size,
    )


@router.post("", response_model=UserDetail, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    _admin: Annotated[User, Depends(require_admin)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> UserDetail:
    """Create an account with an explicit role (admin only). No session is issued."""
    try:
        user = accounts.register(body.username, body.phone, body.password, role=body.user_role)
    except AccountExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    except PasswordPolicyError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message
        ) from e
    return UserDetail.model_validate(user)


@router.get("/{user_id}", response_model=UserDetail)
def get_user(
    user_id: int,
    _user: Annotated[User, Depends(get_current_user)],
    repo: Annotated[UserRepository, Depends(get_user_repository)],
) -> UserDetail:
    user = repo.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found.")
    return UserDetail.model_validate(user)


@router.put("/{user_id}", response_model=UserDetail)
def update_user(
    user_id: int,
    body: UserUpdate,
    _admin: Annotated[User, Depends(require_admin)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> UserDetail:
    """Partially update an account (admin only); omitted fields are unchanged."""
    fields = body.model_dump(exclude_unset=True, exclude_none=True)
    return update_account_or_raise(accounts, user_id, fields)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    admin: Annotated[User, Depends(require_admin)],
    repo: Annotated[UserRepository, Depends(get_user_repository)],
) -> MessageResponse:
    """Delete an account (admin only). Tokens issued to it stop authenticating."""
    if user_id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Administrators cannot delete their own account.",
        )
    if not repo.delete(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found.")
    return MessageResponse(message="Account deleted.")


@router.put("/{user_id}/password", response_model=MessageResponse)
def change_user_password(
    user_id: int,
    body: PasswordChangeRequest,
    request: Request,
    _user: Annotated[User, Depends(get_current_user)],
    accounts: Annotated[AccountService, Depends(get_account_service)],
) -> MessageResponse:
    """Change an account's password. Allowed for the account itself or an administrator."""
    principal = current_principal(request)
    if principal is None or (principal.id != user_id and not is_admin(principal)):
        raise_forbidden("Not allowed to change another account's password")
    return change_password_or_raise(accounts, user_id, body)
