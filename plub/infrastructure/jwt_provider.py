"""JWT Provider - issues and validates access, refresh and sign tokens.

Invariants:
    - Subject is always the encrypted account email (never plaintext)
    - Every token carries a `type` claim; decode() rejects a token of another type
    - Expired, malformed or badly signed tokens never reach the services:
      access/refresh failures map to FILTER_ACCESS_DENIED, sign failures to SIGNUP_TOKEN_ERROR

Design Decisions:
    - Refresh-token persistence lives in services.auth_service (it needs the DB);
      this module stays free of IO
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from plub.config import Settings
from plub.core.domain_types import Role, TokenType
from plub.core.errors import ErrorKind, PlubError
from plub.infrastructure.crypto import EmailCipher

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def resolve_bearer(raw: str | None) -> str | None:
    """Strip the `Bearer ` prefix; None when the header is absent or malformed."""
    if raw and raw.startswith(BEARER_PREFIX):
        return raw[len(BEARER_PREFIX):].strip() or None
    return None


class JwtProvider:
    """Creates and validates HMAC-signed JWTs."""

    def __init__(
        self,
        secret_key: str,
        cipher: EmailCipher,
        access_duration: int,
        refresh_duration: int,
        sign_duration: int,
        algorithm: str = "HS256",
    ):
        self._secret_key = secret_key
        self._cipher = cipher
        self._algorithm = algorithm
        self.access_duration = access_duration
        self.refresh_duration = refresh_duration
        self.sign_duration = sign_duration

    @classmethod
    def from_settings(cls, settings: Settings) -> "JwtProvider":
        return cls(
            secret_key=settings.jwt_secret_key,
            cipher=EmailCipher(settings.encryption_key),
            access_duration=settings.jwt_access_duration,
            refresh_duration=settings.jwt_refresh_duration,
            sign_duration=settings.jwt_sign_duration,
            algorithm=settings.jwt_algorithm,
        )

    def _encode(
        self, email: str, token_type: TokenType, ttl: int, **claims: str,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": self._cipher.encrypt(email),
            "type": token_type.value,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + timedelta(seconds=ttl),
            **claims,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def create_access_token(self, email: str, role: Role | str) -> str:
        return self._encode(
            email, TokenType.ACCESS, self.access_duration, role=Role(role).value,
        )

    def create_refresh_token(self, email: str) -> str:
        return self._encode(email, TokenType.REFRESH, self.refresh_duration)

    def create_sign_token(self, email: str) -> str:
        return self._encode(
            email, TokenType.SIGN, self.sign_duration, sign=Role.USER.value,
        )

    def create_pair(self, email: str, role: Role | str) -> TokenPair:
        return TokenPair(
            access_token=self.create_access_token(email, role),
            refresh_token=self.create_refresh_token(email),
        )

    def decode(self, token: str, expected: TokenType) -> dict:
        """Validate signature, expiry and type; return the claims."""
        failure = (
            ErrorKind.SIGNUP_TOKEN_ERROR if expected is TokenType.SIGN
            else ErrorKind.FILTER_ACCESS_DENIED
        )
        try:
            claims = jwt.decode(
                token, self._secret_key, algorithms=[self._algorithm],
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Expired JWT")
            raise PlubError(failure, "token expired.")
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid JWT: {e}")
            raise PlubError(failure)
        if claims.get("type") != expected.value:
            logger.warning(
                f"JWT type mismatch: expected {expected.value}, got {claims.get('type')}",
            )
            raise PlubError(failure)
        return claims

    def email_of(self, token: str, expected: TokenType) -> str:
        """Decode a token and return the decrypted subject email."""
        claims = self.decode(token, expected)
        return self._cipher.decrypt(claims["sub"])
