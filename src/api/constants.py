"""API-related constants."""

# HTTP headers
CORRELATION_ID_HEADER = "X-Correlation-ID"
REQUEST_ID_HEADER = "X-Request-ID"
ORIGIN_HEADER = "origin"

# CORS preflight cache lifetime in seconds
CORS_MAX_AGE_SECONDS = 600

# Liveness message returned by GET /
LIVENESS_MESSAGE = "Animal API is running!"
