"""Core application constants."""

# Time constants
MILLISECONDS_PER_SECOND = 1000

# Redaction marker used in logs and error details
REDACTED = "[REDACTED]"

# Bearer token claim names
CLAIM_USER_ID = "userId"
CLAIM_USERNAME = "username"
CLAIM_ISSUED_AT = "iat"
CLAIM_EXPIRES_AT = "exp"
