"""Cross-origin allowlisting."""

from collections.abc import Iterable


class OriginGate:
    """Decides whether a request's ``Origin`` is permitted.

    Requests without an ``Origin`` header (curl, server-to-server calls) are
    always allowed. Otherwise the origin must match an allowlist entry
    exactly; a trailing-slash variant of an allowed origin is rejected.

    Args:
        allowed_origins: Origins as they appear in browser ``Origin`` headers.
    """

    def __init__(self, allowed_origins: Iterable[str]) -> None:
        self._allowed = frozenset(allowed_origins)

    @property
    def allowed_origins(self) -> frozenset[str]:
        """The configured allowlist."""
        return self._allowed

    def allow(self, origin: str | None) -> bool:
        """Return True if a request carrying ``origin`` may proceed."""
        if origin is None:
            return True
        return origin in self._allowed
