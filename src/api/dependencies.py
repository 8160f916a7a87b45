"""Request-level dependencies for authentication and application services.

The token service, credential verifier and settings are built once by
``create_app`` and kept on ``app.state``. Handlers receive the verified
``TokenClaims`` as a parameter; nothing about the caller is attached to the
request object.
"""

from typing import Annotated

from fastapi import Depends, Header, Request

from src.auth.credentials import CredentialVerifier
from src.auth.tokens import TokenClaims, TokenService
from src.core.config import Settings


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    """Return the application's token service."""
    return request.app.state.token_service


def get_credential_verifier(request: Request) -> CredentialVerifier:
    """Return the application's credential verifier."""
    return request.app.state.credential_verifier


async def require_auth(
    tokens: Annotated[TokenService, Depends(get_token_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> TokenClaims:
    """Verify the bearer token on the current request.

    Raises:
        AuthError: If the header is missing, malformed, or carries a token
            that is invalid or expired.
    """
    return tokens.verify(authorization)


async def require_write_access(
    settings: Annotated[Settings, Depends(get_app_settings)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> TokenClaims | None:
    """Gate update and delete routes when ``protect_all_writes`` is enabled.

    Returns None without inspecting the header when the flag is off.
    """
    if not settings.auth_config.protect_all_writes:
        return None
    return tokens.verify(authorization)


AuthContext = Annotated[TokenClaims, Depends(require_auth)]
WriteAccess = Annotated[TokenClaims | None, Depends(require_write_access)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
CredentialVerifierDep = Annotated[CredentialVerifier, Depends(get_credential_verifier)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
