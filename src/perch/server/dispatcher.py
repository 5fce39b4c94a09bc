"""Request dispatcher — resolves a request against the routes manifest.

The only entry point into routing. One call handles one request through
a fixed sequence of stages:

1. acquire the manifest (per-request supplier, or the cached default)
2. HTML routes (GET/HEAD only)
3. API routes (any method)
4. not-found routes (any method)
5. default 404

The first matching descriptor in a stage decides the outcome; later
descriptors and later stages are never consulted. Every failure is turned
into a response, so ``RequestHandler.__call__`` never raises.
"""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from anyio import to_thread

from perch._internal.invoke import invoke
from perch.errors import ContentUnavailable, HTTPError, ManifestNotFound, MethodNotAllowed, NotFound
from perch.http.request import Request
from perch.http.response import TEXT_HTML, AnyResponse, Response, StreamingResponse
from perch.manifest import DEFAULT_MANIFEST_PATH, RouteDescriptor, RouteManifest, get_routes_manifest
from perch.resolvers import ApiResolver, HandlerRegistry, HtmlResolver, StaticHtmlResolver
from perch.routing.augment import augment_request
from perch.routing.matcher import match_route
from perch.routing.methods import RouteHandler
from perch.server.errors import (
    ErrorReporter,
    default_error_reporter,
    handle_http_error,
    handle_internal_error,
)
from perch.server.negotiation import negotiate

logger = logging.getLogger("perch.server")

# (dist_dir) -> RouteManifest | None; sync or async
ManifestSupplier = Callable[[Path], Any]


class RequestHandler:
    """Dispatches requests against a distribution folder's routes.

    Usage::

        handler = RequestHandler("dist", api_resolver=registry)
        response = await handler(request)

    Without ``manifest_supplier`` the manifest is read from
    ``<dist_dir>/<manifest_path>`` on first use and cached for the
    handler's lifetime. With a supplier, it is called for every request
    (useful during development when routes change between builds).
    """

    __slots__ = (
        "_api_resolver",
        "_dist_dir",
        "_error_reporter",
        "_html_resolver",
        "_manifest",
        "_manifest_path",
        "_manifest_supplier",
    )

    def __init__(
        self,
        dist_dir: str | Path,
        *,
        manifest_supplier: ManifestSupplier | None = None,
        html_resolver: HtmlResolver | None = None,
        api_resolver: ApiResolver | None = None,
        error_reporter: ErrorReporter = default_error_reporter,
        manifest_path: str = DEFAULT_MANIFEST_PATH,
    ) -> None:
        self._dist_dir = Path(dist_dir)
        self._manifest_path = manifest_path
        self._manifest_supplier = manifest_supplier
        self._html_resolver = (
            html_resolver if html_resolver is not None else StaticHtmlResolver(self._dist_dir)
        )
        self._api_resolver = api_resolver if api_resolver is not None else HandlerRegistry()
        self._error_reporter = error_reporter
        self._manifest: RouteManifest | None = None

    @property
    def manifest(self) -> RouteManifest | None:
        """The most recently acquired manifest, if any."""
        return self._manifest

    async def __call__(self, request: Request) -> AnyResponse:
        try:
            manifest = await self._acquire_manifest()
            path = request.path
            logger.debug("Request %s %s", request.method, path)
            return await self._dispatch(manifest, request, path)
        except HTTPError as exc:
            return handle_http_error(exc, request)
        except Exception as exc:
            return await handle_internal_error(exc, request, self._error_reporter)

    # -- Stages --

    async def _acquire_manifest(self) -> RouteManifest:
        if self._manifest_supplier is not None:
            manifest = await invoke(self._manifest_supplier, self._dist_dir)
            # A previously cached manifest is left in place, not invalidated.
            if manifest is None:
                raise ManifestNotFound()
            self._manifest = manifest
            return manifest

        if self._manifest is None:
            manifest = await to_thread.run_sync(
                get_routes_manifest, self._dist_dir, self._manifest_path
            )
            if manifest is None:
                raise ManifestNotFound()
            self._manifest = manifest
        return self._manifest

    async def _dispatch(self, manifest: RouteManifest, request: Request, path: str) -> AnyResponse:
        if request.method in ("GET", "HEAD"):
            route = _first_match(manifest.html_routes, path)
            if route is not None:
                return await self._serve_html(request, route, status=200)

        route = _first_match(manifest.api_routes, path)
        if route is not None:
            return await self._serve_api(request, route)

        route = _first_match(manifest.not_found_routes, path)
        if route is not None:
            return await self._serve_html(request, route, status=404)

        raise NotFound()

    async def _serve_html(
        self,
        request: Request,
        route: RouteDescriptor,
        *,
        status: int,
    ) -> AnyResponse:
        augment_request(request, route)
        contents = await invoke(self._html_resolver, request, route)
        if not contents:
            raise ContentUnavailable()
        if isinstance(contents, (Response, StreamingResponse)):
            return contents
        return Response(body=contents, status=status, content_type=TEXT_HTML)

    async def _serve_api(self, request: Request, route: RouteDescriptor) -> AnyResponse:
        logger.debug("Handling API route: %s", route.page or route.file)
        resolved = await invoke(self._api_resolver, route)
        if isinstance(resolved, (Response, StreamingResponse)):
            return resolved
        if resolved is None:
            raise ContentUnavailable()
        if isinstance(resolved, Mapping):
            resolved = RouteHandler.from_mapping(resolved)

        handler = resolved.for_method(request.method)
        if handler is None:
            raise MethodNotAllowed(resolved.allowed)

        params = augment_request(request, route)
        try:
            return negotiate(await invoke(handler, request, params))
        except Exception as exc:
            return await handle_internal_error(exc, request, self._error_reporter)


def _first_match(routes: tuple[RouteDescriptor, ...], path: str) -> RouteDescriptor | None:
    for route in routes:
        if match_route(route, path) is not None:
            return route
    return None


def create_request_handler(
    dist_dir: str | Path,
    *,
    manifest_supplier: ManifestSupplier | None = None,
    html_resolver: HtmlResolver | None = None,
    api_resolver: ApiResolver | None = None,
    error_reporter: ErrorReporter = default_error_reporter,
    manifest_path: str = DEFAULT_MANIFEST_PATH,
) -> RequestHandler:
    """Build a ``RequestHandler`` for a distribution folder."""
    return RequestHandler(
        dist_dir,
        manifest_supplier=manifest_supplier,
        html_resolver=html_resolver,
        api_resolver=api_resolver,
        error_reporter=error_reporter,
        manifest_path=manifest_path,
    )
