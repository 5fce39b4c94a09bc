"""Tests for perch.resolvers — HTML content and API handler resolution."""

from pathlib import Path

import pytest

from perch.http.request import Request
from perch.manifest import RouteDescriptor, compile_pattern
from perch.resolvers import HandlerRegistry, StaticHtmlResolver, TemplateHtmlResolver
from perch.routing.methods import RouteHandler


def _route(*, page: str | None = None, file: str = "") -> RouteDescriptor:
    return RouteDescriptor(named_pattern=compile_pattern("^/.*$"), file=file, page=page)


async def _get(request, params):
    return "ok"


class TestStaticHtmlResolver:
    async def test_reads_page_file(self, dist_dir: Path) -> None:
        resolver = StaticHtmlResolver(dist_dir)
        contents = await resolver(Request(method="GET", url="/"), _route(page="index"))
        assert contents == "<h1>Home</h1>"

    async def test_nested_page(self, dist_dir: Path) -> None:
        resolver = StaticHtmlResolver(dist_dir)
        contents = await resolver(Request(method="GET", url="/blog/x"), _route(page="blog/[slug]"))
        assert contents == "<h1>Post</h1>"

    async def test_missing_file(self, dist_dir: Path) -> None:
        resolver = StaticHtmlResolver(dist_dir)
        assert await resolver(Request(method="GET", url="/"), _route(page="nope")) is None

    async def test_no_page(self, dist_dir: Path) -> None:
        resolver = StaticHtmlResolver(dist_dir)
        assert await resolver(Request(method="GET", url="/"), _route()) is None

    async def test_traversal_rejected(self, tmp_path: Path, dist_dir: Path) -> None:
        (tmp_path / "secret.html").write_text("secret")
        resolver = StaticHtmlResolver(dist_dir)
        assert await resolver(Request(method="GET", url="/"), _route(page="../secret")) is None


class TestTemplateHtmlResolver:
    async def test_renders_template(self, tmp_path: Path) -> None:
        (tmp_path / "hello.html").write_text("Hello {{ page }} at {{ request.path }}")
        resolver = TemplateHtmlResolver(tmp_path)
        contents = await resolver(Request(method="GET", url="/greet"), _route(page="hello"))
        assert contents == "Hello hello at /greet"

    async def test_missing_template(self, tmp_path: Path) -> None:
        resolver = TemplateHtmlResolver(tmp_path)
        assert await resolver(Request(method="GET", url="/"), _route(page="missing")) is None

    async def test_no_page(self, tmp_path: Path) -> None:
        resolver = TemplateHtmlResolver(tmp_path)
        assert await resolver(Request(method="GET", url="/"), _route()) is None


class TestHandlerRegistry:
    def test_lookup_by_file(self) -> None:
        handler = RouteHandler(get=_get)
        registry = HandlerRegistry({"./api/users+api.ts": handler})
        assert registry(_route(file="./api/users+api.ts")) is handler

    def test_leading_dot_slash_ignored(self) -> None:
        handler = RouteHandler(get=_get)
        registry = HandlerRegistry({"api/users+api.ts": handler})
        assert registry(_route(file="./api/users+api.ts")) is handler
        assert "./api/users+api.ts" in registry

    def test_falls_back_to_page(self) -> None:
        handler = RouteHandler(get=_get)
        registry = HandlerRegistry({"api/users": handler})
        assert registry(_route(page="api/users", file="./other.ts")) is handler

    def test_unknown_route(self) -> None:
        assert HandlerRegistry()(_route(file="./x.ts")) is None

    def test_register_mapping(self) -> None:
        registry = HandlerRegistry()
        registry.register("x", {"GET": _get})
        resolved = registry(_route(file="x"))
        assert isinstance(resolved, RouteHandler)
        assert resolved.get is _get

    def test_route_decorator_accumulates_methods(self) -> None:
        registry = HandlerRegistry()

        @registry.route("./items+api.ts", methods=["GET", "HEAD"])
        async def read(request, params):
            return "read"

        @registry.route("./items+api.ts", methods=["POST"])
        async def create(request, params):
            return "create"

        resolved = registry(_route(file="./items+api.ts"))
        assert isinstance(resolved, RouteHandler)
        assert resolved.allowed == frozenset({"GET", "HEAD", "POST"})
        assert resolved.post is create
        assert len(registry) == 1

    def test_route_decorator_rejects_unknown_method(self) -> None:
        registry = HandlerRegistry()
        with pytest.raises(ValueError):
            registry.route("x", methods=["FETCH"])
