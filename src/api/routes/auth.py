"""Login endpoint."""

from typing import Annotated

from fastapi import APIRouter, Body

from src.api.dependencies import CredentialVerifierDep, TokenServiceDep
from src.api.schemas.auth import LoginRequest, TokenResponse

router = APIRouter(tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(
    verifier: CredentialVerifierDep,
    tokens: TokenServiceDep,
    credentials: Annotated[LoginRequest, Body()] = LoginRequest(),  # noqa: B008
) -> TokenResponse:
    """Exchange a username and password for a bearer token.

    A request without a body is treated like one with empty credentials.

    Raises:
        AuthError: With ``INVALID_CREDENTIALS`` (401) when the pair is wrong.
    """
    identity = verifier.verify(credentials.username, credentials.password)
    return TokenResponse(token=tokens.issue(identity))
