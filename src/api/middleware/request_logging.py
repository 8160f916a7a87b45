"""Access logging for HTTP requests.

Logs one record when a request starts and one when it completes or fails,
with timing, client address and sizes bound as structured fields. Paths in
``LogConfig.excluded_paths`` (the health probe by default) are not logged.
Header values named in the sensitive-field list, such as ``Authorization``,
are redacted before they reach the log.
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from src.api.constants import ORIGIN_HEADER, REQUEST_ID_HEADER
from src.core.config import LogConfig, Settings, get_settings
from src.core.context import generate_request_id
from src.core.error_context import sanitize_headers

MAX_USER_AGENT_LENGTH = 200


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs request start, completion, failures and slow requests.

    Args:
        app: The ASGI application.
        log_config: Logging configuration.
        settings: Application settings; defaults to ``get_settings()``.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        log_config: LogConfig,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(app)
        self.log_config = log_config
        self.excluded_paths = set(log_config.excluded_paths)
        self.settings = settings or get_settings()

    def _get_client_ip(self, request: Request) -> str:
        # Proxy headers are trusted only behind the production load balancer
        if self.settings.environment == "production":
            forwarded_for = request.headers.get("x-forwarded-for")
            if forwarded_for:
                return forwarded_for.split(",")[0].strip()
            real_ip = request.headers.get("x-real-ip")
            if real_ip:
                return real_ip.strip()

        if request.client:
            return request.client.host
        return "unknown"

    @staticmethod
    def _get_user_agent(request: Request) -> str:
        ua = request.headers.get("user-agent", "")
        return ua[:MAX_USER_AGENT_LENGTH] if ua else "unknown"

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Log the request around the downstream call.

        Raises:
            Exception: Anything raised downstream is logged and re-raised.
        """
        if request.url.path in self.excluded_paths:
            return await call_next(request)

        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()

        with logger.contextualize(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=self._get_client_ip(request),
            user_agent=self._get_user_agent(request),
            origin=request.headers.get(ORIGIN_HEADER),
        ):
            logger.info(
                "Request started",
                query_params=(
                    dict(request.query_params) if request.query_params else None
                ),
            )
            if self.settings.debug:
                logger.debug(
                    "Request headers", headers=sanitize_headers(dict(request.headers))
                )

            start_time = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception as exc:
                duration_ms = (time.perf_counter() - start_time) * 1000
                logger.error(
                    "Request failed",
                    duration_ms=round(duration_ms, 2),
                    error_type=type(exc).__name__,
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
                response_size=int(response.headers.get("content-length", 0)),
            )
            response.headers[REQUEST_ID_HEADER] = request_id

            if duration_ms > self.log_config.slow_request_threshold_ms:
                logger.warning(
                    "Slow request detected",
                    duration_ms=round(duration_ms, 2),
                    threshold_ms=self.log_config.slow_request_threshold_ms,
                )

            return response
