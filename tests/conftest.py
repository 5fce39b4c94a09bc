"""Shared fixtures: a built distribution folder with a routes manifest."""

import json
from pathlib import Path

import pytest

ROUTES = {
    "htmlRoutes": [
        {"page": "index", "file": "./index.tsx", "namedRegex": "^/(?:/)?$", "routeKeys": {}},
        {
            "page": "blog/[slug]",
            "file": "./blog/[slug].tsx",
            "namedRegex": "^/blog/(?<nxtPslug>[^/]+?)(?:/)?$",
            "routeKeys": {"nxtPslug": "slug"},
        },
    ],
    "apiRoutes": [
        {
            "page": "api/users/[id]",
            "file": "./api/users/[id]+api.ts",
            "namedRegex": "^/api/users/(?<nxtPid>[^/]+?)(?:/)?$",
            "routeKeys": {"nxtPid": "id"},
        },
    ],
    "notFoundRoutes": [
        {
            "page": "+not-found",
            "file": "./+not-found.tsx",
            "namedRegex": "^(?:/(?<nxtPnotfound>.+?))?(?:/)?$",
            "routeKeys": {"nxtPnotfound": "notfound"},
        },
    ],
}


def write_dist(root: Path, routes: dict | None = None) -> Path:
    """Write a distribution folder with the manifest and built pages."""
    (root / "_expo").mkdir(parents=True, exist_ok=True)
    (root / "_expo" / "routes.json").write_text(json.dumps(ROUTES if routes is None else routes))
    (root / "index.html").write_text("<h1>Home</h1>")
    (root / "blog").mkdir(exist_ok=True)
    (root / "blog" / "[slug].html").write_text("<h1>Post</h1>")
    (root / "+not-found.html").write_text("<h1>Lost</h1>")
    return root


@pytest.fixture
def dist_dir(tmp_path: Path) -> Path:
    """A distribution folder with HTML, API, and not-found routes."""
    return write_dist(tmp_path / "dist")


@pytest.fixture
def make_dist(tmp_path: Path):
    """Factory for distribution folders with a custom manifest."""

    def factory(routes: dict, name: str = "custom") -> Path:
        return write_dist(tmp_path / name, routes)

    return factory
