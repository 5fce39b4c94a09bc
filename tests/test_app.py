"""Tests for perch.app — the ASGI adapter around the dispatcher."""

import json
from pathlib import Path

import pytest

from perch import App, Response, ServerConfig
from perch.errors import ConfigurationError
from perch.testing import TestClient


def _app(dist_dir: Path, **config) -> App:
    return App(ServerConfig(dist_dir=dist_dir, **config))


class TestServing:
    async def test_html_page(self, dist_dir: Path) -> None:
        async with TestClient(_app(dist_dir)) as client:
            response = await client.get("/")
        assert response.status == 200
        assert response.content_type == "text/html"
        assert response.text_body == "<h1>Home</h1>"
        assert response.header("content-length") == "13"

    async def test_head_has_no_body(self, dist_dir: Path) -> None:
        async with TestClient(_app(dist_dir)) as client:
            response = await client.head("/")
        assert response.status == 200
        assert response.body == b""
        assert response.header("content-length") == "13"

    async def test_not_found_page(self, dist_dir: Path) -> None:
        async with TestClient(_app(dist_dir)) as client:
            response = await client.get("/no/such/page")
        assert response.status == 404
        assert response.text_body == "<h1>Lost</h1>"

    async def test_missing_manifest(self, tmp_path: Path) -> None:
        async with TestClient(_app(tmp_path)) as client:
            response = await client.get("/")
        assert response.status == 404
        assert response.content_type == "text/plain"
        assert response.text_body == "No routes manifest found"

    async def test_custom_manifest_path(self, tmp_path: Path) -> None:
        (tmp_path / "routes.json").write_text(
            json.dumps({"htmlRoutes": [{"page": "index", "namedRegex": "^/$"}]})
        )
        (tmp_path / "index.html").write_text("custom")
        async with TestClient(_app(tmp_path, manifest_path="routes.json")) as client:
            response = await client.get("/")
        assert response.text_body == "custom"


class TestApiRoutes:
    async def test_route_decorator(self, dist_dir: Path) -> None:
        app = _app(dist_dir)

        @app.route("./api/users/[id]+api.ts", methods=["GET", "POST"])
        async def user(request, params):
            if request.method == "POST":
                payload = await request.json()
                return {"id": params["id"], **payload}, 201
            return Response.json({"id": int(params["id"]), "tab": request.query.get("tab")})

        async with TestClient(app) as client:
            got = await client.get("/api/users/42?tab=posts")
            created = await client.post("/api/users/7", json={"name": "Ada"})
            denied = await client.delete("/api/users/42")

        assert got.status == 200
        assert got.content_type == "application/json"
        assert json.loads(got.body) == {"id": 42, "tab": "posts"}

        assert created.status == 201
        assert json.loads(created.body) == {"id": "7", "name": "Ada"}

        assert denied.status == 405
        assert denied.content_type == "text/plain"
        assert set(denied.header("allow").split(", ")) == {"GET", "POST"}

    async def test_app_serves_its_own_registry(self, dist_dir: Path) -> None:
        app = _app(dist_dir)
        assert app.handler._api_resolver is app._api

        @app.route("./api/users/[id]+api.ts")
        def user(request, params):
            return Response.json(params)

        async with TestClient(app) as client:
            response = await client.get("/api/users/42")
        assert response.status == 200
        assert json.loads(response.body) == {"id": "42"}

    @pytest.mark.parametrize(("raw", "expected"), [("a%3Fb", "a?b"), ("a%23b", "a#b")])
    async def test_encoded_path_params(self, dist_dir: Path, raw: str, expected: str) -> None:
        app = _app(dist_dir)

        @app.route("./api/users/[id]+api.ts")
        def user(request, params):
            return {"id": params["id"], "tab": request.query.get("tab")}

        async with TestClient(app) as client:
            response = await client.get(f"/api/users/{raw}?tab=1")
        assert json.loads(response.body) == {"id": expected, "tab": "1"}

    async def test_async_error_reporter(self, dist_dir: Path) -> None:
        reported: list[BaseException] = []

        async def reporter(error: BaseException) -> None:
            reported.append(error)

        app = App(ServerConfig(dist_dir=dist_dir), error_reporter=reporter)

        @app.route("./api/users/[id]+api.ts")
        def user(request, params):
            raise RuntimeError("boom")

        async with TestClient(app) as client:
            response = await client.get("/api/users/1")
        assert response.status == 500
        assert len(reported) == 1

    async def test_handler_error(self, dist_dir: Path) -> None:
        reported: list[BaseException] = []
        app = App(ServerConfig(dist_dir=dist_dir), error_reporter=reported.append)

        @app.route("api/users/[id]")
        def user(request, params):
            raise KeyError("secret")

        async with TestClient(app) as client:
            response = await client.get("/api/users/1")
        assert response.status == 500
        assert response.text_body == "Internal server error"
        assert len(reported) == 1

    async def test_streaming(self, dist_dir: Path) -> None:
        from perch import StreamingResponse

        app = _app(dist_dir)

        @app.route("./api/users/[id]+api.ts")
        def user(request, params):
            return StreamingResponse(chunks=iter(["a", "b"]), content_type="text/plain")

        async with TestClient(app) as client:
            response = await client.get("/api/users/1")
        assert response.text_body == "ab"
        assert response.header("transfer-encoding") == "chunked"

    def test_route_requires_registry(self, dist_dir: Path) -> None:
        app = App(ServerConfig(dist_dir=dist_dir), api=lambda descriptor: None)
        with pytest.raises(ConfigurationError):
            app.route("./api/users/[id]+api.ts")


class TestTemplates:
    async def test_renders_template(self, dist_dir: Path, tmp_path: Path) -> None:
        templates = tmp_path / "templates"
        (templates / "blog").mkdir(parents=True)
        (templates / "blog" / "[slug].html").write_text('<h1>{{ params["slug"] }}</h1>')

        app = _app(dist_dir, template_dir=templates)
        async with TestClient(app) as client:
            response = await client.get("/blog/hello")
        assert response.status == 200
        assert response.text_body == "<h1>hello</h1>"


class TestDebugReload:
    async def test_manifest_reread(self, dist_dir: Path) -> None:
        app = _app(dist_dir, debug=True)
        async with TestClient(app) as client:
            before = await client.get("/about")

            (dist_dir / "about.html").write_text("<h1>About</h1>")
            (dist_dir / "_expo" / "routes.json").write_text(
                json.dumps({"htmlRoutes": [{"page": "about", "namedRegex": "^/about$"}]})
            )
            after = await client.get("/about")

        assert before.text_body == "<h1>Lost</h1>"
        assert after.text_body == "<h1>About</h1>"

    async def test_cached_without_debug(self, dist_dir: Path) -> None:
        app = _app(dist_dir)
        async with TestClient(app) as client:
            await client.get("/")
            (dist_dir / "_expo" / "routes.json").unlink()
            response = await client.get("/")
        assert response.status == 200


class TestAsgi:
    async def test_lifespan(self, dist_dir: Path) -> None:
        incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
        sent: list[dict] = []

        async def receive() -> dict:
            return incoming.pop(0)

        async def send(message: dict) -> None:
            sent.append(message)

        await _app(dist_dir)({"type": "lifespan"}, receive, send)
        assert sent == [
            {"type": "lifespan.startup.complete"},
            {"type": "lifespan.shutdown.complete"},
        ]

    async def test_websocket_ignored(self, dist_dir: Path) -> None:
        sent: list[dict] = []

        async def receive() -> dict:
            return {}

        async def send(message: dict) -> None:
            sent.append(message)

        await _app(dist_dir)({"type": "websocket"}, receive, send)
        assert sent == []
