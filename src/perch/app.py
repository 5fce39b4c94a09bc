"""ASGI application serving a built distribution folder.

``App`` is the transport adapter around ``RequestHandler``: it turns ASGI
HTTP scopes into ``Request`` objects, dispatches them, and writes the
resulting response back through ``send``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from anyio import to_thread

from perch._internal.asgi import Receive, Scope, Send
from perch.config import ServerConfig
from perch.errors import ConfigurationError
from perch.http.request import Request
from perch.http.response import StreamingResponse
from perch.manifest import RouteManifest, get_routes_manifest
from perch.resolvers import ApiResolver, HandlerRegistry, HtmlResolver, TemplateHtmlResolver
from perch.routing.methods import ApiHandler
from perch.server.dispatcher import ManifestSupplier, RequestHandler
from perch.server.errors import ErrorReporter, default_error_reporter
from perch.server.sender import send_response, send_streaming_response

logger = logging.getLogger("perch.server")


class App:
    """A perch application.

    Usage::

        from perch import App, ServerConfig, Response

        app = App(ServerConfig(dist_dir="dist"))

        @app.route("./users/[id]+api.ts", methods=["GET"])
        async def get_user(request, params):
            return Response.json({"id": params["id"]})

        app.run()

    With ``debug=True`` and no explicit supplier, the manifest is re-read
    on every request so rebuilt routes are picked up without a restart.
    """

    __slots__ = ("_api", "_handler", "config")

    def __init__(
        self,
        config: ServerConfig | None = None,
        *,
        api: ApiResolver | None = None,
        html_resolver: HtmlResolver | None = None,
        manifest_supplier: ManifestSupplier | None = None,
        error_reporter: ErrorReporter = default_error_reporter,
    ) -> None:
        self.config = config or ServerConfig()
        self._api = api if api is not None else HandlerRegistry()

        if html_resolver is None and self.config.template_dir is not None:
            html_resolver = TemplateHtmlResolver(
                self.config.template_dir,
                auto_reload=self.config.debug,
            )

        if manifest_supplier is None and self.config.debug:
            manifest_supplier = self._reload_manifest

        self._handler = RequestHandler(
            self.config.dist_dir,
            manifest_supplier=manifest_supplier,
            html_resolver=html_resolver,
            api_resolver=self._api,
            error_reporter=error_reporter,
            manifest_path=self.config.manifest_path,
        )

    @property
    def handler(self) -> RequestHandler:
        return self._handler

    async def _reload_manifest(self, dist_dir: Path) -> RouteManifest | None:
        return await to_thread.run_sync(get_routes_manifest, dist_dir, self.config.manifest_path)

    # -- Registration --

    def route(
        self,
        key: str,
        *,
        methods: Iterable[str] = ("GET",),
    ) -> Callable[[ApiHandler], ApiHandler]:
        """Register an API handler for the route whose ``file`` is *key*.

        Only available when the app owns its ``HandlerRegistry``.
        """
        if not isinstance(self._api, HandlerRegistry):
            msg = "app.route() requires a HandlerRegistry api resolver."
            raise ConfigurationError(msg)
        return self._api.route(key, methods=methods)

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the app with pounce."""
        from perch.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.reload,
            log_level=self.config.log_level,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        response = await self._handler(request)

        if isinstance(response, StreamingResponse):
            await send_streaming_response(response, send, method=request.method)
        else:
            await send_response(response, send, method=request.method)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge lifespan startup and shutdown."""
        while True:
            message: dict[str, Any] = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                logger.debug("Serving %s", Path(self.config.dist_dir).resolve())
                await send({"type": "lifespan.startup.complete"})
            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
