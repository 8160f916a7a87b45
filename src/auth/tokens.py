"""Bearer token issuance and verification.

Tokens are HMAC-signed JWTs carrying ``userId``, ``username``, ``iat`` and
``exp``. Nothing is stored server-side: a token is accepted if and only if it
is well formed, correctly signed and not expired.

Every failure surfaces as an ``AuthError`` whose code names the reason
(``MISSING_TOKEN``, ``MALFORMED_HEADER`` or ``INVALID_TOKEN``); errors from
the JWT library never escape this module.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt
from loguru import logger
from pydantic import BaseModel, ConfigDict, SecretStr

from src.auth.credentials import Identity
from src.core.config import AuthConfig
from src.core.constants import (
    CLAIM_EXPIRES_AT,
    CLAIM_ISSUED_AT,
    CLAIM_USER_ID,
    CLAIM_USERNAME,
)
from src.core.exceptions import AuthError, ErrorCode

BEARER_SCHEME = "Bearer"


class TokenClaims(BaseModel):
    """Decoded claims of a verified token."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str
    issued_at: datetime
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TokenService:
    """Issues and verifies signed, time-limited bearer tokens.

    Args:
        secret: HMAC signing secret.
        algorithm: JWT algorithm name (HS256 by default).
        ttl: Token lifetime.
        clock: Source of the current time, used for ``iat``/``exp``.
    """

    def __init__(
        self,
        secret: SecretStr,
        *,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    @classmethod
    def from_config(cls, config: AuthConfig) -> "TokenService":
        """Build the service from ``AuthConfig``."""
        return cls(
            config.jwt_secret,
            algorithm=config.jwt_algorithm,
            ttl=timedelta(seconds=config.token_ttl_seconds),
        )

    def issue(self, identity: Identity) -> str:
        """Issue a token for ``identity`` expiring one TTL from now.

        Args:
            identity: The authenticated principal.

        Returns:
            str: The encoded token.
        """
        issued_at = self._clock()
        payload = {
            CLAIM_USER_ID: identity.user_id,
            CLAIM_USERNAME: identity.username,
            CLAIM_ISSUED_AT: issued_at,
            CLAIM_EXPIRES_AT: issued_at + self._ttl,
        }
        token = jwt.encode(
            payload, self._secret.get_secret_value(), algorithm=self._algorithm
        )
        logger.debug("Issued token for user {}", identity.user_id)
        return token

    def decode(self, token: str) -> TokenClaims:
        """Validate a raw token and return its claims.

        Args:
            token: The encoded token, without the scheme prefix.

        Returns:
            TokenClaims: The decoded claims.

        Raises:
            AuthError: With ``INVALID_TOKEN`` on any signature, structure or
                expiry failure.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret.get_secret_value(),
                algorithms=[self._algorithm],
                options={"require": [CLAIM_EXPIRES_AT, CLAIM_ISSUED_AT]},
            )
            return TokenClaims(
                user_id=int(payload[CLAIM_USER_ID]),
                username=str(payload[CLAIM_USERNAME]),
                issued_at=datetime.fromtimestamp(payload[CLAIM_ISSUED_AT], UTC),
                expires_at=datetime.fromtimestamp(payload[CLAIM_EXPIRES_AT], UTC),
            )
        except (jwt.PyJWTError, KeyError, TypeError, ValueError) as e:
            logger.warning("Token rejected: {}", type(e).__name__)
            raise AuthError(
                ErrorCode.INVALID_TOKEN, "Invalid/Expired token", cause=e
            ) from e

    def verify(self, authorization: str | None) -> TokenClaims:
        """Verify the value of an ``Authorization`` header.

        Args:
            authorization: Raw header value, or None if the header was absent.

        Returns:
            TokenClaims: The decoded claims.

        Raises:
            AuthError: ``MISSING_TOKEN`` if absent, ``MALFORMED_HEADER`` unless
                the value is exactly ``Bearer <token>``, ``INVALID_TOKEN`` if
                the token itself is rejected.
        """
        if not authorization:
            raise AuthError(ErrorCode.MISSING_TOKEN, "Missing Authorization header")

        parts = authorization.split(" ")
        if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:  # noqa: PLR2004
            raise AuthError(
                ErrorCode.MALFORMED_HEADER, "Invalid Authorization format"
            )

        return self.decode(parts[1])
