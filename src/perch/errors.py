"""Perch exception hierarchy.

Shared across the manifest loader, dispatcher, and error pipeline so every
module raises and catches the same types. ``HTTPError`` subclasses never
escape the dispatcher: they are mapped to plain-text responses.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when server configuration is invalid."""


class ManifestError(ConfigurationError):
    """Raised when a routes manifest cannot be parsed or compiled."""


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code.

    Raised by the dispatcher stages. The dispatcher catches these and
    turns them into a ``text/plain`` response carrying ``detail``.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route in any category matched the request path."""

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(status=404, detail=detail)


class ManifestNotFound(NotFound):  # noqa: N818
    """404 — no routes manifest is available.

    A setup problem rather than a runtime fault, so it is never sent to
    the error reporter.
    """

    def __init__(self, detail: str = "No routes manifest found") -> None:
        super().__init__(detail)


class ContentUnavailable(NotFound):  # noqa: N818
    """404 — a route matched but its resolver produced nothing.

    Usually means the manifest declares a route whose build artifact or
    handler is missing. The status stays 404 so internals don't leak.
    """

    def __init__(self, detail: str = "Not found") -> None:
        super().__init__(detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — an API route matched but has no handler for the method.

    Includes an ``Allow`` header listing the methods the route implements.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "Method not allowed") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail,
            headers=(("Allow", allow_value),) if allow_value else (),
        )
