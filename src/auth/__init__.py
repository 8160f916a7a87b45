"""Request authorization: credentials, bearer tokens and origin allowlisting."""

from src.auth.credentials import CredentialVerifier, Identity, StaticCredentialVerifier
from src.auth.origins import OriginGate
from src.auth.tokens import TokenClaims, TokenService

__all__ = [
    "CredentialVerifier",
    "Identity",
    "OriginGate",
    "StaticCredentialVerifier",
    "TokenClaims",
    "TokenService",
]
