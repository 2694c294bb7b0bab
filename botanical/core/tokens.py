"""JWT issuance and validation for account sessions."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

# Fixed signing algorithm; decode accepts nothing else.
TOKEN_ALGORITHM = "HS256"
DEFAULT_ISSUER = "botanical-api"


class TokenError(Exception):
    """Base class for token validation failures."""

    reason = "invalid token"

    def __init__(self, message: str | None = None, cause: Exception | None = None) -> None:
        self.message = message or self.reason
        self.cause = cause
        super().__init__(self.message)


class TokenMalformedError(TokenError):
    """Bad signature, wrong algorithm, damaged structure or unusable claims."""

    reason = "token is malformed"


class TokenNotYetValidError(TokenError):
    reason = "token is not valid yet"


class TokenExpiredError(TokenError):
    reason = "token has expired"


@dataclass(frozen=True)
class TokenClaims:
    """Claims carried by a session token."""

    account_id: int
    display_name: str
    issued_at: datetime
    expires_at: datetime
    issuer: str
    not_before: datetime | None = None


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


def _from_timestamp(value: Any) -> datetime:
    return datetime.fromtimestamp(int(value), tz=UTC)


class TokenIssuer:
    """Builds signed session tokens. The secret is injected, never read globally."""

    def __init__(self, secret: str, ttl_hours: int, issuer: str = DEFAULT_ISSUER) -> None:
        if not secret:
            raise ValueError("Token signing secret must be non-empty")
        self._secret = secret
        self._ttl_hours = ttl_hours
        self._issuer = issuer

    def issue(
        self,
        account_id: int,
        display_name: str,
        ttl_hours: int | None = None,
        now: datetime | None = None,
    ) -> IssuedToken:
        """Create a token for account_id valid for ttl_hours (defaults to the configured TTL)."""
        # JWT timestamps are whole seconds; keep the persisted expiry identical.
        issued_at = (now or datetime.now(UTC)).replace(microsecond=0)
        hours = self._ttl_hours if ttl_hours is None else ttl_hours
        expires_at = issued_at + timedelta(hours=hours)
        payload: dict[str, Any] = {
            "id": account_id,
            "username": display_name,
            "iat": issued_at,
            "exp": expires_at,
            "iss": self._issuer,
        }
        token = jwt.encode(payload, self._secret, algorithm=TOKEN_ALGORITHM)
        return IssuedToken(token=token, expires_at=expires_at)


class TokenValidator:
    """
    Verifies signature and time bounds of session tokens.

    Signature is checked before any claim, so a forged token is always
    reported as malformed even when its timestamps are also out of range.
    The credential store is not consulted here: a token superseded by a
    later login still parses until its own expiry.
    """

    def __init__(self, secret: str, issuer: str = DEFAULT_ISSUER, leeway: int = 0) -> None:
        if not secret:
            raise ValueError("Token signing secret must be non-empty")
        self._secret = secret
        self._issuer = issuer
        self._leeway = leeway

    def parse(self, token: str) -> TokenClaims:
        """Decode token and return its claims. Raises a TokenError subclass on failure."""
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[TOKEN_ALGORITHM],
                issuer=self._issuer,
                leeway=self._leeway,
                options={"require": ["id", "exp", "iat", "iss"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError(cause=e) from e
        except jwt.ImmatureSignatureError as e:
            raise TokenNotYetValidError(cause=e) from e
        except jwt.PyJWTError as e:
            raise TokenMalformedError(cause=e) from e

        account_id = payload.get("id")
        if isinstance(account_id, bool) or not isinstance(account_id, int):
            raise TokenMalformedError("token account id is not an integer")
        display_name = payload.get("username", "")
        if not isinstance(display_name, str):
            raise TokenMalformedError("token username is not a string")

        nbf = payload.get("nbf")
        return TokenClaims(
            account_id=account_id,
            display_name=display_name,
            issued_at=_from_timestamp(payload["iat"]),
            expires_at=_from_timestamp(payload["exp"]),
            issuer=payload["iss"],
            not_before=_from_timestamp(nbf) if nbf is not None else None,
        )
