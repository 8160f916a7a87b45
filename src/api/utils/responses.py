"""JSON response class rendered with orjson.

``ORJSONResponse`` is the application's default response class, so route
return values and error bodies are all serialized by orjson, which handles
datetimes and Pydantic models natively.
"""

from typing import Any

import orjson
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ORJSONResponse(JSONResponse):
    """JSON response serialized with orjson."""

    media_type = "application/json"

    def render(self, content: Any) -> bytes:  # noqa: ANN401 - any JSON-serializable content
        """Serialize ``content`` to JSON bytes.

        Args:
            content: The content to serialize.

        Returns:
            bytes: The JSON-encoded body.
        """
        if isinstance(content, BaseModel):
            content = content.model_dump(mode="json")
        return orjson.dumps(content, option=orjson.OPT_NON_STR_KEYS)
