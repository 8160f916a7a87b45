"""Username/password verification.

The service knows a single identity, taken from configuration. Callers depend
on the ``CredentialVerifier`` protocol rather than the static implementation
so a user store can be swapped in without touching the login route.
"""

import hmac
from typing import Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict, SecretStr

from src.core.config import AuthConfig
from src.core.exceptions import AuthError, ErrorCode


class Identity(BaseModel):
    """An authenticated principal."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str


class CredentialVerifier(Protocol):
    """Checks a username/password pair and returns the matching identity."""

    def verify(self, username: str, password: str) -> Identity:
        """Return the identity for valid credentials.

        Raises:
            AuthError: With ``INVALID_CREDENTIALS`` when the pair does not match.
        """
        ...


class StaticCredentialVerifier:
    """Verifies credentials against one fixed identity.

    Both fields are always compared, in constant time, so a wrong username
    and a wrong password take the same path.

    Args:
        user_id: ID of the known identity.
        username: Expected username.
        password: Expected password.
    """

    def __init__(self, user_id: int, username: str, password: SecretStr) -> None:
        self._identity = Identity(user_id=user_id, username=username)
        self._password = password

    @classmethod
    def from_config(cls, config: AuthConfig) -> "StaticCredentialVerifier":
        """Build the verifier from the demo identity in ``AuthConfig``."""
        return cls(config.demo_user_id, config.demo_username, config.demo_password)

    def verify(self, username: str, password: str) -> Identity:
        """Return the known identity if both fields match exactly.

        Args:
            username: Presented username.
            password: Presented password.

        Returns:
            Identity: The known identity.

        Raises:
            AuthError: With ``INVALID_CREDENTIALS`` on any mismatch.
        """
        username_ok = hmac.compare_digest(
            username.encode(), self._identity.username.encode()
        )
        password_ok = hmac.compare_digest(
            password.encode(), self._password.get_secret_value().encode()
        )
        if not (username_ok and password_ok):
            logger.warning("Login rejected for username {!r}", username)
            raise AuthError(ErrorCode.INVALID_CREDENTIALS, "Invalid credentials")

        logger.info("Login accepted", user_id=self._identity.user_id)
        return self._identity
