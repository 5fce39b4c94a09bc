"""Perch — serve a built app's routes manifest over ASGI.

Resolves each request against three ordered route tables (HTML pages, API
endpoints, not-found pages) and dispatches it to prebuilt content or a
registered handler. Every request gets exactly one response.

Basic usage::

    from perch import App, Response, ServerConfig

    app = App(ServerConfig(dist_dir="dist"))

    @app.route("./users/[id]+api.ts", methods=["GET", "DELETE"])
    async def user(request, params):
        return Response.json({"id": params["id"]})

    app.run()

Embedding the dispatcher without ASGI::

    from perch import create_request_handler

    handler = create_request_handler("dist", api_resolver=registry)
    response = await handler(request)
"""

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "App",
    "ConfigurationError",
    "ContentUnavailable",
    "HTTPError",
    "HTTPMethod",
    "HandlerRegistry",
    "ManifestError",
    "ManifestNotFound",
    "MethodNotAllowed",
    "NotFound",
    "PerchError",
    "Request",
    "RequestHandler",
    "Response",
    "RouteDescriptor",
    "RouteHandler",
    "RouteManifest",
    "ServerConfig",
    "StaticHtmlResolver",
    "StreamingResponse",
    "TemplateHtmlResolver",
    "create_request_handler",
    "load_manifest",
    "parse_manifest",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name == "App":
        from perch.app import App

        return App

    if name == "ServerConfig":
        from perch.config import ServerConfig

        return ServerConfig

    if name == "Request":
        from perch.http.request import Request

        return Request

    if name in ("AnyResponse", "Response", "StreamingResponse"):
        from perch.http import response as _resp

        return getattr(_resp, name)

    if name in ("RouteDescriptor", "RouteManifest", "load_manifest", "parse_manifest"):
        from perch import manifest as _manifest

        return getattr(_manifest, name)

    if name in ("HTTPMethod", "RouteHandler"):
        from perch.routing import methods as _methods

        return getattr(_methods, name)

    if name in ("HandlerRegistry", "StaticHtmlResolver", "TemplateHtmlResolver"):
        from perch import resolvers as _resolvers

        return getattr(_resolvers, name)

    if name in ("RequestHandler", "create_request_handler"):
        from perch.server import dispatcher as _dispatcher

        return getattr(_dispatcher, name)

    if name in (
        "ConfigurationError",
        "ContentUnavailable",
        "HTTPError",
        "ManifestError",
        "ManifestNotFound",
        "MethodNotAllowed",
        "NotFound",
        "PerchError",
    ):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
