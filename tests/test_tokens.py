"""Unit tests for botanical.core.tokens: issuing and validating session JWTs."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt

from botanical.core.tokens import (
    TOKEN_ALGORITHM,
    TokenClaims,
    TokenExpiredError,
    TokenIssuer,
    TokenMalformedError,
    TokenNotYetValidError,
    TokenValidator,
)

SECRET = "unit-test-signing-secret-0123456789abcdef"
OTHER_SECRET = "another-signing-secret-0123456789abcdef"


def _flip_last_char(token: str) -> str:
    # 'A'-'D' differ only in base64 padding bits of the last signature char.
    replacement = "Q" if token[-1] in "ABCD" else "A"
    return token[:-1] + replacement


def _clock_at(moment: datetime) -> type[datetime]:
    """A datetime class whose now() always returns moment; patched into PyJWT."""

    class FrozenDatetime(datetime):
        @classmethod
        def now(cls, tz=None):
            return moment if tz is None else moment.astimezone(tz)

    return FrozenDatetime


def _payload(**overrides: object) -> dict[str, object]:
    now = datetime.now(UTC)
    payload: dict[str, object] = {
        "id": 1,
        "username": "a",
        "iat": now,
        "exp": now + timedelta(hours=1),
        "iss": "botanical-api",
    }
    payload.update(overrides)
    return {k: v for k, v in payload.items() if v is not None}


class TestIssueAndParse(unittest.TestCase):
    """A freshly issued token parses back to the same claims."""

    def setUp(self) -> None:
        self.issuer = TokenIssuer(SECRET, ttl_hours=24)
        self.validator = TokenValidator(SECRET)

    def test_round_trip_claims(self) -> None:
        issued = self.issuer.issue(7, "rose")
        claims = self.validator.parse(issued.token)
        self.assertIsInstance(claims, TokenClaims)
        self.assertEqual(claims.account_id, 7)
        self.assertEqual(claims.display_name, "rose")
        self.assertEqual(claims.issuer, "botanical-api")
        self.assertEqual(claims.expires_at, issued.expires_at)
        self.assertEqual(claims.expires_at - claims.issued_at, timedelta(hours=24))
        self.assertIsNone(claims.not_before)

    def test_ttl_override(self) -> None:
        now = datetime.now(UTC)
        issued = self.issuer.issue(1, "a", ttl_hours=2, now=now)
        self.assertEqual(issued.expires_at, now.replace(microsecond=0) + timedelta(hours=2))

    def test_uses_hs256(self) -> None:
        issued = self.issuer.issue(1, "a")
        header = jwt.get_unverified_header(issued.token)
        self.assertEqual(header["alg"], TOKEN_ALGORITHM)

    def test_second_token_does_not_invalidate_first(self) -> None:
        first = self.issuer.issue(3, "fern", now=datetime.now(UTC) - timedelta(seconds=5))
        second = self.issuer.issue(3, "fern")
        self.assertNotEqual(first.token, second.token)
        self.assertEqual(self.validator.parse(first.token).account_id, 3)
        self.assertEqual(self.validator.parse(second.token).account_id, 3)

    def test_empty_secret_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TokenIssuer("", ttl_hours=1)
        with self.assertRaises(ValueError):
            TokenValidator("")


class TestTimeBounds(unittest.TestCase):
    """Expired and not-yet-valid tokens raise distinct errors."""

    def setUp(self) -> None:
        self.issuer = TokenIssuer(SECRET, ttl_hours=24)
        self.validator = TokenValidator(SECRET)

    def test_expired(self) -> None:
        issued = self.issuer.issue(1, "a", now=datetime.now(UTC) - timedelta(hours=25))
        with self.assertRaises(TokenExpiredError) as ctx:
            self.validator.parse(issued.token)
        self.assertEqual(ctx.exception.message, "token has expired")

    def test_expired_at_exactly_exp(self) -> None:
        issued = self.issuer.issue(1, "a", now=datetime(2030, 1, 1, tzinfo=UTC))
        with patch("jwt.api_jwt.datetime", _clock_at(issued.expires_at)):
            with self.assertRaises(TokenExpiredError):
                self.validator.parse(issued.token)

    def test_valid_one_second_before_exp(self) -> None:
        issued = self.issuer.issue(1, "a", now=datetime(2030, 1, 1, tzinfo=UTC))
        last_second = issued.expires_at - timedelta(seconds=1)
        with patch("jwt.api_jwt.datetime", _clock_at(last_second)):
            claims = self.validator.parse(issued.token)
        self.assertEqual(claims.expires_at, issued.expires_at)

    def test_not_yet_valid(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "id": 1,
                "username": "a",
                "iat": now,
                "nbf": now + timedelta(hours=1),
                "exp": now + timedelta(hours=2),
                "iss": "botanical-api",
            },
            SECRET,
            algorithm=TOKEN_ALGORITHM,
        )
        with self.assertRaises(TokenNotYetValidError):
            self.validator.parse(token)

    def test_nbf_in_past_is_reported(self) -> None:
        now = datetime.now(UTC).replace(microsecond=0)
        token = jwt.encode(
            {
                "id": 1,
                "username": "a",
                "iat": now,
                "nbf": now - timedelta(minutes=1),
                "exp": now + timedelta(hours=1),
                "iss": "botanical-api",
            },
            SECRET,
            algorithm=TOKEN_ALGORITHM,
        )
        claims = self.validator.parse(token)
        self.assertEqual(claims.not_before, now - timedelta(minutes=1))


class TestMalformed(unittest.TestCase):
    """Anything that fails signature or structure checks is TokenMalformedError."""

    def setUp(self) -> None:
        self.issuer = TokenIssuer(SECRET, ttl_hours=24)
        self.validator = TokenValidator(SECRET)

    def test_flipped_signature(self) -> None:
        token = self.issuer.issue(1, "a").token
        with self.assertRaises(TokenMalformedError):
            self.validator.parse(_flip_last_char(token))

    def test_wrong_secret(self) -> None:
        token = TokenIssuer(OTHER_SECRET, ttl_hours=1).issue(1, "a").token
        with self.assertRaises(TokenMalformedError):
            self.validator.parse(token)

    def test_forged_expired_token_is_malformed(self) -> None:
        past = datetime.now(UTC) - timedelta(hours=30)
        token = TokenIssuer(OTHER_SECRET, ttl_hours=1).issue(1, "a", now=past).token
        with self.assertRaises(TokenMalformedError):
            self.validator.parse(token)

    def test_garbage(self) -> None:
        for token in ("", "abc", "a.b.c", "Bearer"):
            with self.subTest(token=token):
                with self.assertRaises(TokenMalformedError):
                    self.validator.parse(token)

    def test_other_hmac_algorithm_rejected(self) -> None:
        token = jwt.encode(_payload(), SECRET, algorithm="HS512")
        with self.assertRaises(TokenMalformedError):
            self.validator.parse(token)

    def test_unsigned_token_rejected(self) -> None:
        token = jwt.encode(_payload(), None, algorithm="none")
        with self.assertRaises(TokenMalformedError):
            self.validator.parse(token)

    def test_wrong_issuer(self) -> None:
        token = TokenIssuer(SECRET, ttl_hours=1, issuer="someone-else").issue(1, "a").token
        with self.assertRaises(TokenMalformedError):
            self.validator.parse(token)

    def test_missing_account_id(self) -> None:
        token = jwt.encode(_payload(id=None), SECRET, algorithm=TOKEN_ALGORITHM)
        with self.assertRaises(TokenMalformedError):
            self.validator.parse(token)

    def test_non_integer_account_id(self) -> None:
        token = jwt.encode(_payload(id="7"), SECRET, algorithm=TOKEN_ALGORITHM)
        with self.assertRaises(TokenMalformedError):
            self.validator.parse(token)
