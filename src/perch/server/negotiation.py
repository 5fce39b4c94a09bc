"""Content negotiation — maps API handler return values to Response objects.

isinstance-based dispatch, no magic, fully predictable.
"""

import json as json_module
from typing import Any

from perch.http.response import APPLICATION_JSON, TEXT_HTML, AnyResponse, Response, StreamingResponse


def negotiate(value: Any) -> AnyResponse:
    """Convert an API handler's return value to a Response.

    Dispatch order:

    1. ``Response`` / ``StreamingResponse`` -> pass through
    2. ``str``             -> 200, text/html
    3. ``bytes``           -> 200, application/octet-stream
    4. ``dict`` / ``list`` -> 200, application/json
    5. ``(value, int)``    -> negotiate value, override status

    Raises:
        TypeError: For any other value, ``None`` included.
    """
    match value:
        case Response() | StreamingResponse():
            return value
        case str():
            return Response(body=value, content_type=TEXT_HTML)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response(body=json_module.dumps(value), content_type=APPLICATION_JSON)
        case (inner, int() as status):
            return negotiate(inner).with_status(status)
        case _:
            msg = (
                f"API handler returned {type(value).__name__}; expected a Response, "
                "str, bytes, dict, list, or a (value, status) tuple"
            )
            raise TypeError(msg)
