"""Error and fallback pipeline.

Maps HTTPError exceptions and unexpected failures to plain-text Response
objects. Every failure the dispatcher sees ends here, so the transport
only ever receives a response.
"""

import logging
from collections.abc import Callable
from typing import Any

from perch._internal.invoke import invoke
from perch.errors import HTTPError
from perch.http.request import Request
from perch.http.response import TEXT_PLAIN, Response

logger = logging.getLogger("perch.server")

# (error) -> None; sync or async, never expected to raise
ErrorReporter = Callable[[BaseException], Any]


def plain_text(body: str, status: int) -> Response:
    """A synthesized diagnostic response."""
    return Response(body=body, status=status, content_type=TEXT_PLAIN)


def default_error_reporter(error: BaseException) -> None:
    """Log a handler failure with its traceback."""
    logger.error("API route execution failed: %s", error, exc_info=error)


async def report_error(reporter: ErrorReporter, error: BaseException) -> None:
    """Hand *error* to *reporter* without letting the reporter fail the request.

    Sync and async reporters are both awaited to completion.
    """
    try:
        await invoke(reporter, error)
    except Exception:
        logger.exception("Error reporter %r raised", reporter)


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to its plain-text response."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
    response = plain_text(exc.detail or f"Error {exc.status}", exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


async def handle_internal_error(
    exc: Exception,
    request: Request,
    reporter: ErrorReporter,
) -> Response:
    """Report an unexpected exception and answer 500.

    The response body is generic; error details only go to the reporter.
    """
    logger.debug("500 %s %s", request.method, request.path)
    await report_error(reporter, exc)
    return plain_text("Internal server error", 500)
