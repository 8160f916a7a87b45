"""Origin allowlisting for browser requests.

Runs ahead of CORS header handling so a disallowed origin is refused with
403 before any route, preflight response or CORS header is produced.
Requests without an ``Origin`` header pass through untouched.
"""

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.api.constants import ORIGIN_HEADER
from src.api.middleware.error_handler import build_error_response
from src.auth.origins import OriginGate
from src.core.config import Settings
from src.core.exceptions import OriginError


class OriginGateMiddleware(BaseHTTPMiddleware):
    """Rejects requests whose ``Origin`` is not on the allowlist.

    Args:
        app: The ASGI application.
        gate: The allowlist to check against.
        settings: Settings used to render the error body.
    """

    def __init__(
        self, app: ASGIApp, *, gate: OriginGate, settings: Settings | None = None
    ) -> None:
        super().__init__(app)
        self.gate = gate
        self.settings = settings

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        origin = request.headers.get(ORIGIN_HEADER)
        if self.gate.allow(origin):
            return await call_next(request)

        logger.warning(
            "Rejected request from disallowed origin",
            origin=origin,
            method=request.method,
            path=request.url.path,
        )
        return build_error_response(OriginError(origin or ""), self.settings)
