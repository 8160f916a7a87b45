"""Login request and token response models."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials presented to ``POST /login``.

    Missing fields default to empty strings and are rejected as invalid
    credentials (401) rather than as a malformed body.
    """

    username: str = Field(default="", examples=["admin"])
    password: str = Field(default="", examples=["admin123"])


class TokenResponse(BaseModel):
    """Bearer token issued on successful login."""

    token: str
