"""Account lifecycle: registration, login and password change."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError

from botanical.core.security import (
    hash_password,
    validate_password_strength,
    verify_password,
)
from botanical.core.tokens import TokenIssuer
from botanical.models.user import DEFAULT_ROLE, User
from botanical.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid phone or password."
PHONE_TAKEN_MESSAGE = "An account with this phone already exists."


class AccountError(Exception):
    """Base class for account lifecycle failures."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class AccountExistsError(AccountError):
    """Raised when the login key is already registered."""


class AccountNotFoundError(AccountError):
    """Raised when the target account does not exist."""


class CredentialError(AccountError):
    """Raised on a failed password check. The message never says which part was wrong."""


@dataclass(frozen=True)
class LoginResult:
    token: str
    expires_at: datetime
    user: User


class AccountService:
    """Orchestrates the password hasher, token issuer and credential store."""

    def __init__(self, repo: UserRepository, issuer: TokenIssuer) -> None:
        self.repo = repo
        self.issuer = issuer

    def register(
        self,
        username: str,
        phone: str,
        password: str,
        role: int = DEFAULT_ROLE,
    ) -> User:
        """
        Create an account with no active session.

        Raises AccountExistsError if phone is taken and PasswordPolicyError
        if the password is too weak; nothing is written in either case.
        """
        if self.repo.phone_exists(phone):
            raise AccountExistsError(PHONE_TAKEN_MESSAGE)
        validate_password_strength(password)
        user = User(
            username=username or "user",
            phone=phone,
            password_hash=hash_password(password),
            user_role=role,
        )
        try:
            user = self.repo.create(user)
        except IntegrityError as e:
            # Lost a race with a concurrent registration of the same phone.
            raise AccountExistsError(PHONE_TAKEN_MESSAGE, cause=e) from e
        logger.info(
            "Account registered",
            extra={"user_id": user.id, "user_role": user.user_role},
        )
        return user

    def login(self, phone: str, password: str) -> LoginResult:
        """
        Verify credentials and start a new session.

        The new token replaces any stored one, so the previous session is no
        longer the account's active token.
        """
        user = self.repo.get_by_phone(phone)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Login rejected", extra={"phone": phone})
            raise CredentialError(INVALID_CREDENTIALS_MESSAGE)

        issued = self.issuer.issue(user.id, user.username)
        self.repo.save_token(user.id, issued.token, issued.expires_at)
        logger.info("Login succeeded", extra={"user_id": user.id})
        return LoginResult(token=issued.token, expires_at=issued.expires_at, user=user)

    def update_profile(self, user_id: int, fields: dict[str, Any]) -> User:
        """Apply a partial update; a new phone must not belong to another account."""
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise AccountNotFoundError("Account not found.")
        phone = fields.get("phone")
        if phone and phone != user.phone and self.repo.phone_exists(phone):
            raise AccountExistsError(PHONE_TAKEN_MESSAGE)
        try:
            self.repo.update_fields(user_id, fields)
        except IntegrityError as e:
            raise AccountExistsError(PHONE_TAKEN_MESSAGE, cause=e) from e
        if fields:
            logger.info("Account updated", extra={"user_id": user_id, "fields": sorted(fields)})
        return self.repo.get_by_id(user_id)

    def change_password(self, user_id: int, old_password: str, new_password: str) -> None:
        """
        Replace the password hash after re-verifying old_password.

        Whether the caller may act on user_id is decided by the caller.
        The current session token stays valid until it expires.
        """
        user = self.repo.get_by_id(user_id)
        if user is None:
            raise AccountNotFoundError("Account not found.")
        if not verify_password(old_password, user.password_hash):
            logger.info("Password change rejected: old password mismatch", extra={"user_id": user_id})
            raise CredentialError("Old password is incorrect.")
        validate_password_strength(new_password)
        self.repo.save_password_hash(user_id, hash_password(new_password))
        logger.info("Password changed", extra={"user_id": user_id})
