"""Auth dependencies: authentication gate, admin gate and request principal access."""

import logging
from typing import Annotated, NoReturn

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from botanical.core.config import Settings, get_settings
from botanical.core.database import get_db
from botanical.core.tokens import TokenError, TokenIssuer, TokenValidator
from botanical.models.user import ADMIN_ROLE, User
from botanical.repositories.user_repository import UserRepository
from botanical.services.accounts import AccountService

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
_PRINCIPAL_ATTR = "principal"

# Reads the raw header so a token sent without the "Bearer " scheme is still accepted.
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def raise_unauthenticated(detail: str = "Not authenticated") -> NoReturn:
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def raise_forbidden(detail: str = "Admin access required") -> NoReturn:
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def set_principal(request: Request, user: User) -> None:
    setattr(request.state, _PRINCIPAL_ATTR, user)


def current_principal(request: Request) -> User | None:
    """Return the account authenticated for this request, or None."""
    principal = getattr(request.state, _PRINCIPAL_ATTR, None)
    return principal if isinstance(principal, User) else None


def is_admin(user: User | None) -> bool:
    return user is not None and user.user_role == ADMIN_ROLE


def get_token_validator(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenValidator:
    return TokenValidator(
        settings.JWT_SECRET.get_secret_value(),
        issuer=settings.JWT_ISSUER,
    )


def get_token_issuer(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TokenIssuer:
    return TokenIssuer(
        settings.JWT_SECRET.get_secret_value(),
        ttl_hours=settings.JWT_EXPIRE_HOURS,
        issuer=settings.JWT_ISSUER,
    )


def get_user_repository(db: Annotated[Session, Depends(get_db)]) -> UserRepository:
    return UserRepository(db)


def get_account_service(
    repo: Annotated[UserRepository, Depends(get_user_repository)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AccountService:
    return AccountService(repo, issuer)


def _strip_scheme(header_value: str) -> str:
    value = header_value.strip()
    if value[: len(BEARER_PREFIX)].lower() == BEARER_PREFIX.lower():
        value = value[len(BEARER_PREFIX):].strip()
    return value


def get_current_user(
    request: Request,
    authorization: Annotated[str | None, Depends(authorization_header)],
    validator: Annotated[TokenValidator, Depends(get_token_validator)],
    repo: Annotated[UserRepository, Depends(get_user_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User:
    """
    Dependency: require a valid token and return the current account.

    Every failure is a 401. Expired, not-yet-valid and malformed tokens are
    named in the detail; a token whose account no longer exists gets the
    same detail as a malformed one.
    """
    if not authorization or not authorization.strip():
        raise_unauthenticated("Missing Authorization header")
    token = _strip_scheme(authorization)
    if not token:
        raise_unauthenticated("Missing bearer token")

    try:
        claims = validator.parse(token)
    except TokenError as e:
        logger.info("Token rejected", extra={"reason": e.message, "path": request.url.path})
        raise_unauthenticated(f"Invalid or expired token: {e.message}")

    user = repo.get_by_id(claims.account_id)
    if user is None:
        logger.info(
            "Token rejected: account not found",
            extra={"user_id": claims.account_id, "path": request.url.path},
        )
        raise_unauthenticated("Invalid or expired token: token is malformed")

    if settings.SINGLE_SESSION_ENFORCED and user.token != token:
        logger.info("Token rejected: superseded session", extra={"user_id": user.id})
        raise_unauthenticated("Invalid or expired token: session has been replaced by a newer login")

    set_principal(request, user)
    return user


def require_admin(
    request: Request,
    _user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency: require an authenticated administrator. Raises 403 otherwise."""
    principal = current_principal(request)
    if not is_admin(principal):
        logger.info(
            "Admin access denied",
            extra={"user_id": principal.id if principal else None, "path": request.url.path},
        )
        raise_forbidden()
    return principal
