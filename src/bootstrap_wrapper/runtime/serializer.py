"""
JSON serializer used between the Runtime API and the handler adapter.

Strings returned by a handler are encoded as JSON string literals, so a
handler returning "pong" produces the response body b'"pong"'.
"""

import json
from typing import Any


class JsonSerializer:
    content_type = "application/json"

    def deserialize(self, data: bytes) -> Any:
        """Decode a request body. An empty body decodes to None."""
        if not data:
            return None
        return json.loads(data)

    def serialize(self, value: Any) -> bytes:
        """Encode a handler result as a UTF-8 JSON document."""
        return json.dumps(value).encode("utf-8")
