"""Unit tests for src/auth/credentials.py."""

import pytest
from pydantic import SecretStr

from src.auth.credentials import CredentialVerifier, Identity, StaticCredentialVerifier
from src.core.config import AuthConfig
from src.core.exceptions import AuthError, ErrorCode


@pytest.fixture
def verifier() -> StaticCredentialVerifier:
    """Verifier for the default demo identity."""
    return StaticCredentialVerifier.from_config(AuthConfig())


@pytest.mark.unit
class TestStaticCredentialVerifier:
    """Exact-match verification against the configured identity."""

    def test_valid_credentials(self, verifier: StaticCredentialVerifier) -> None:
        """Verify the demo pair returns the demo identity."""
        identity = verifier.verify("admin", "admin123")

        assert identity == Identity(user_id=1, username="admin")

    @pytest.mark.parametrize(
        ("username", "password"),
        [
            ("admin", "wrong"),
            ("root", "admin123"),
            ("", ""),
            ("Admin", "admin123"),
            ("admin", "admin123 "),
        ],
    )
    def test_invalid_credentials(
        self, verifier: StaticCredentialVerifier, username: str, password: str
    ) -> None:
        """Verify any mismatch is rejected with INVALID_CREDENTIALS."""
        with pytest.raises(AuthError) as exc_info:
            verifier.verify(username, password)

        assert exc_info.value.reason is ErrorCode.INVALID_CREDENTIALS
        assert exc_info.value.message == "Invalid credentials"

    def test_custom_identity(self) -> None:
        """Verify the identity comes from the constructor arguments."""
        verifier = StaticCredentialVerifier(7, "keeper", SecretStr("zoo"))

        identity = verifier.verify("keeper", "zoo")

        assert identity == Identity(user_id=7, username="keeper")

    def test_satisfies_protocol(self, verifier: StaticCredentialVerifier) -> None:
        """Verify the static verifier can stand in for the protocol."""
        typed: CredentialVerifier = verifier

        assert typed.verify("admin", "admin123").username == "admin"

    def test_identity_is_immutable(self) -> None:
        """Verify identities cannot be modified after creation."""
        identity = Identity(user_id=1, username="admin")

        with pytest.raises(ValueError, match="frozen"):
            identity.username = "other"  # type: ignore[misc]
