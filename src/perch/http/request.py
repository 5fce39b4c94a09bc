"""HTTP request as seen by the dispatcher.

Unlike the response, the request is mutable: route parameters are merged
into ``query`` and the parsed URL is attached as ``route_url`` while a
request is being dispatched. The request belongs to a single dispatch
call and is never shared across requests.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from perch._internal.asgi import Receive, Scope
from perch.http.headers import Headers
from perch.http.query import QueryParams
from perch.http.url import RequestURL


async def _empty_body() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(slots=True, eq=False)
class Request:
    """An HTTP request.

    ``query`` is parsed from ``url`` at creation. ``route_url`` is unset
    until a route matches; the dispatcher then points it at a URL whose
    query string includes the route parameters.

    Body is accessed asynchronously via ``.body()``, ``.json()``, ``.text()``.
    """

    method: str
    url: str
    headers: Headers = field(default_factory=Headers)
    http_version: str = "1.1"
    client: tuple[str, int] | None = None
    route_url: RequestURL | None = None
    query: QueryParams = field(init=False)

    # Private: ASGI receive callable for body streaming
    _receive: Receive = field(default=_empty_body, repr=False)

    # Private: body cache
    _cache: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        self.query = QueryParams(RequestURL.parse(self.url).query)

    # -- Computed properties --

    @property
    def path(self) -> str:
        """Path component of ``url``, without query string."""
        return RequestURL.parse(self.url).path

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        import json as json_module

        raw = await self.body()
        return json_module.loads(raw)

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI HTTP scope and receive callable."""
        # raw_path keeps percent-escapes, so an encoded "?" or "#" stays in the path
        raw_path = scope.get("raw_path")
        url = raw_path.decode("latin-1") if raw_path else quote(scope.get("path") or "/")
        query_string = scope.get("query_string", b"")
        if query_string:
            url = f"{url}?{query_string.decode('latin-1')}"
        client = scope.get("client")
        return cls(
            method=scope["method"],
            url=url,
            headers=Headers(tuple(scope.get("headers", ()))),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
        )
