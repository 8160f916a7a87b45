"""Middleware and exception handlers shared by every route.

Outermost first, a request passes through:

1. ``RequestContextMiddleware``: sets the correlation ID
2. ``RequestLoggingMiddleware``: access log with timing
3. ``OriginGateMiddleware``: refuses browser origins outside the allowlist
4. Starlette ``CORSMiddleware``: answers preflights and adds CORS headers

Exceptions raised by routes are rendered by the handlers registered in
``error_handler``.
"""
