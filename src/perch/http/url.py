"""Parsed request URL.

Requests may carry an absolute URL (``http://host/path?q``) or just a path
(``/path?q``). Relative URLs resolve against a placeholder origin so the
path component is always available.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from urllib.parse import urlsplit, urlunsplit

from perch.http.query import QueryParams

PLACEHOLDER_ORIGIN = ("http", "localhost")


@dataclass(frozen=True, slots=True)
class RequestURL:
    """A request URL split into its components.

    ``query`` is the encoded query string without the leading ``?``.
    """

    scheme: str
    netloc: str
    path: str
    query: str = ""
    fragment: str = ""

    @classmethod
    def parse(cls, url: str) -> RequestURL:
        """Parse an absolute or path-only URL."""
        parts = urlsplit(url)
        scheme, netloc = (parts.scheme, parts.netloc) if parts.netloc else PLACEHOLDER_ORIGIN
        return cls(
            scheme=scheme,
            netloc=netloc,
            path=parts.path or "/",
            query=parts.query,
            fragment=parts.fragment,
        )

    @property
    def params(self) -> QueryParams:
        """The query string parsed into a fresh ``QueryParams``."""
        return QueryParams(self.query)

    def with_params(self, params: QueryParams) -> RequestURL:
        """Return a copy whose query string is *params*."""
        return replace(self, query=params.encode())

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.path, self.query, self.fragment))
