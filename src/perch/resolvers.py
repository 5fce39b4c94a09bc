"""Content resolvers — turn a matched route into servable content.

Two capabilities are injected into the dispatcher:

- an HTML resolver, ``(request, descriptor) -> str | Response | None``,
  used for HTML and not-found routes;
- an API resolver, ``(descriptor) -> RouteHandler | Response | None``,
  used for API routes.

Either may be sync or async. ``None`` means "nothing to serve" and becomes
a 404. The implementations here cover the common cases: prebuilt HTML on
disk, server-rendered kida templates, and an in-process handler registry.
"""

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any, Protocol

from anyio import to_thread
from kida import Environment, FileSystemLoader

from perch.http.request import Request
from perch.http.response import AnyResponse
from perch.manifest import RouteDescriptor
from perch.routing.methods import ApiHandler, HTTPMethod, RouteHandler


class HtmlResolver(Protocol):
    def __call__(
        self, request: Request, descriptor: RouteDescriptor, /
    ) -> Any: ...  # str | bytes | AnyResponse | None, possibly awaitable


class ApiResolver(Protocol):
    def __call__(
        self, descriptor: RouteDescriptor, /
    ) -> Any: ...  # RouteHandler | AnyResponse | None, possibly awaitable


def _page_file(root: Path, page: str | None) -> Path | None:
    """``<root>/<page>.html`` if it exists inside *root*."""
    if not page:
        return None
    candidate = (root / f"{page}.html").resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        return None
    return candidate


class StaticHtmlResolver:
    """Serves prebuilt ``<page>.html`` files from a distribution folder.

    Files are read in a worker thread. A descriptor without a page, a
    missing file, or a page that resolves outside the folder yields
    ``None``.
    """

    __slots__ = ("_root",)

    def __init__(self, dist_dir: str | Path) -> None:
        self._root = Path(dist_dir).resolve()

    async def __call__(self, request: Request, descriptor: RouteDescriptor) -> str | None:
        path = _page_file(self._root, descriptor.page)
        if path is None:
            return None
        return await to_thread.run_sync(path.read_text, "utf-8")


class TemplateHtmlResolver:
    """Server-side renders ``<page>.html`` kida templates.

    Templates receive ``params`` (the request's query parameters, route
    parameters included), ``page``, and ``request``::

        <h1>User {{ params.id }}</h1>
    """

    __slots__ = ("_env", "_root")

    def __init__(
        self,
        template_dir: str | Path,
        *,
        autoescape: bool = True,
        auto_reload: bool = False,
    ) -> None:
        self._root = Path(template_dir).resolve()
        self._env = Environment(
            loader=FileSystemLoader(str(self._root)),
            autoescape=autoescape,
            auto_reload=auto_reload,
        )

    @property
    def environment(self) -> Environment:
        return self._env

    async def __call__(self, request: Request, descriptor: RouteDescriptor) -> str | None:
        return await to_thread.run_sync(self._render, request, descriptor)

    def _render(self, request: Request, descriptor: RouteDescriptor) -> str | None:
        if _page_file(self._root, descriptor.page) is None:
            return None
        template = self._env.get_template(f"{descriptor.page}.html")
        return template.render(
            {
                "params": request.query.to_dict(),
                "page": descriptor.page,
                "request": request,
            }
        )


class HandlerRegistry:
    """In-process API resolver: route identifier -> ``RouteHandler``.

    Routes are looked up by the descriptor's ``file`` reference, then by
    its ``page``. A leading ``./`` is ignored on both sides.

    Usage::

        api = HandlerRegistry()

        @api.route("./users/[id]+api.ts", methods=["GET"])
        async def get_user(request, params):
            return Response.json({"id": params["id"]})
    """

    __slots__ = ("_handlers",)

    def __init__(self, handlers: Mapping[str, RouteHandler] | None = None) -> None:
        self._handlers: dict[str, RouteHandler] = {}
        for key, handler in (handlers or {}).items():
            self.register(key, handler)

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and _normalize(key) in self._handlers

    def register(self, key: str, handler: RouteHandler | Mapping[str, ApiHandler]) -> None:
        """Bind a handler table to a route identifier, replacing any existing one."""
        if not isinstance(handler, RouteHandler):
            handler = RouteHandler.from_mapping(handler)
        self._handlers[_normalize(key)] = handler

    def route(
        self,
        key: str,
        *,
        methods: Iterable[str] = ("GET",),
    ) -> Callable[[ApiHandler], ApiHandler]:
        """Decorator form of ``register`` for a single function."""
        parsed: list[HTTPMethod] = []
        for token in methods:
            method = HTTPMethod.parse(token)
            if method is None:
                msg = f"Unsupported HTTP method {token!r}"
                raise ValueError(msg)
            parsed.append(method)

        def decorator(func: ApiHandler) -> ApiHandler:
            normalized = _normalize(key)
            handler = self._handlers.get(normalized, RouteHandler())
            for method in parsed:
                handler = handler.with_handler(method, func)
            self._handlers[normalized] = handler
            return func

        return decorator

    def __call__(self, descriptor: RouteDescriptor) -> RouteHandler | AnyResponse | None:
        for key in (descriptor.file, descriptor.page):
            if key and (handler := self._handlers.get(_normalize(key))) is not None:
                return handler
        return None


def _normalize(key: str) -> str:
    return key.removeprefix("./")
