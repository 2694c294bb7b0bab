"""Password hashing, verification and strength policy."""

import bcrypt

from botanical.core.config import settings

PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 20


class PasswordPolicyError(Exception):
    """Raised when a password does not satisfy the strength policy."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def validate_password_strength(password: str) -> None:
    """
    Enforce the password policy before hashing.

    6-20 characters with at least one digit and at least one letter.
    Raises PasswordPolicyError naming the rule that failed.
    """
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        raise PasswordPolicyError(
            f"Password must be between {PASSWORD_MIN_LEN} and {PASSWORD_MAX_LEN} characters."
        )
    has_digit = any(ch.isdigit() for ch in password)
    has_letter = any(ch.isalpha() for ch in password)
    if not (has_digit and has_letter):
        raise PasswordPolicyError("Password must contain both letters and digits.")


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; the policy keeps passwords well under it.
    pw_bytes = plain_password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    if not hashed:
        return False
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False
