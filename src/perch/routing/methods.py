"""Per-verb handler tables for API routes.

An API route resolves to a ``RouteHandler``: one optional handler function
per HTTP method. Lookup goes through the closed ``HTTPMethod`` enumeration,
so an unknown or lower-case method token simply has no handler.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields, replace
from enum import StrEnum
from typing import Any, TypeAlias

# (request, params) -> response value; sync or async
ApiHandler: TypeAlias = Callable[..., Any]


class HTTPMethod(StrEnum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, token: str) -> HTTPMethod | None:
        """Map a transport method token to a member, case-sensitively."""
        try:
            return cls(token)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class RouteHandler:
    """Handler functions for one API route, keyed by verb.

    Usage::

        async def get_user(request, params):
            return Response.json({"id": params["id"]})

        users = RouteHandler(get=get_user)
    """

    get: ApiHandler | None = None
    head: ApiHandler | None = None
    post: ApiHandler | None = None
    put: ApiHandler | None = None
    patch: ApiHandler | None = None
    delete: ApiHandler | None = None
    options: ApiHandler | None = None

    @classmethod
    def from_mapping(cls, handlers: Mapping[str, ApiHandler]) -> RouteHandler:
        """Build from ``{"GET": fn, ...}``.

        Raises:
            ValueError: If a key is not a supported method token.
        """
        kwargs: dict[str, ApiHandler] = {}
        for token, func in handlers.items():
            method = HTTPMethod.parse(token)
            if method is None:
                msg = f"Unsupported HTTP method {token!r}"
                raise ValueError(msg)
            kwargs[method.value.lower()] = func
        return cls(**kwargs)

    def with_handler(self, method: HTTPMethod, func: ApiHandler) -> RouteHandler:
        """Return a copy with *func* bound to *method*."""
        return replace(self, **{method.value.lower(): func})

    def for_method(self, token: str) -> ApiHandler | None:
        """The handler for a request method token, or ``None``."""
        method = HTTPMethod.parse(token)
        match method:
            case HTTPMethod.GET:
                return self.get
            case HTTPMethod.HEAD:
                return self.head
            case HTTPMethod.POST:
                return self.post
            case HTTPMethod.PUT:
                return self.put
            case HTTPMethod.PATCH:
                return self.patch
            case HTTPMethod.DELETE:
                return self.delete
            case HTTPMethod.OPTIONS:
                return self.options
            case None:
                return None

    @property
    def allowed(self) -> frozenset[str]:
        """Method tokens that have a handler."""
        return frozenset(
            f.name.upper() for f in fields(self) if getattr(self, f.name) is not None
        )
