"""Route manifest — the compiled, ordered route table.

The manifest is produced at build time and stored as JSON inside the
distribution folder. Each category holds descriptors in priority order;
the dispatcher never reorders them.

On-disk format::

    {
      "htmlRoutes": [{"page": "index", "file": "./index.tsx",
                      "namedRegex": "^/(?:/)?$", "routeKeys": {}}],
      "apiRoutes": [...],
      "notFoundRoutes": [...]
    }

``namedRegex`` is written with JavaScript named groups (``(?<id>...)``),
which are translated to Python syntax at load time.
"""

import json
import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from perch.errors import ManifestError

logger = logging.getLogger("perch.manifest")

DEFAULT_MANIFEST_PATH = "_expo/routes.json"

# "(?<name>" but not the lookbehind forms "(?<=" / "(?<!"
_JS_NAMED_GROUP = re.compile(r"\(\?<(?![=!])")
# "\k<name>" named backreference
_JS_NAMED_BACKREF = re.compile(r"\\k<(\w+)>")


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """One compiled manifest entry.

    ``route_keys`` maps a capture group's internal name to the public
    parameter name handlers see.
    """

    named_pattern: re.Pattern[str]
    file: str
    page: str | None = None
    route_keys: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RouteManifest:
    """The full ordered route table, partitioned into three categories."""

    html_routes: tuple[RouteDescriptor, ...] = ()
    api_routes: tuple[RouteDescriptor, ...] = ()
    not_found_routes: tuple[RouteDescriptor, ...] = ()

    @property
    def routes(self) -> Iterator[tuple[str, RouteDescriptor]]:
        """Yield ``(category, descriptor)`` pairs in dispatch order."""
        for descriptor in self.html_routes:
            yield "html", descriptor
        for descriptor in self.api_routes:
            yield "api", descriptor
        for descriptor in self.not_found_routes:
            yield "not-found", descriptor

    def __len__(self) -> int:
        return len(self.html_routes) + len(self.api_routes) + len(self.not_found_routes)


def compile_pattern(source: str) -> re.Pattern[str]:
    """Compile a stored route pattern, accepting JavaScript named groups.

    Both ``(?<name>...)`` groups and ``\\k<name>`` backreferences are
    rewritten to their Python forms.
    """
    translated = _JS_NAMED_GROUP.sub("(?P<", source)
    translated = _JS_NAMED_BACKREF.sub(r"(?P=\1)", translated)
    try:
        return re.compile(translated)
    except re.error as exc:
        msg = f"Invalid route pattern {source!r}: {exc}"
        raise ManifestError(msg) from exc


def _parse_descriptor(entry: Any, category: str) -> RouteDescriptor:
    if not isinstance(entry, Mapping):
        msg = f"{category} entry must be an object, got {type(entry).__name__}"
        raise ManifestError(msg)
    try:
        source = entry["namedRegex"]
    except KeyError:
        msg = f"{category} entry is missing 'namedRegex'"
        raise ManifestError(msg) from None

    page = entry.get("page")
    return RouteDescriptor(
        named_pattern=compile_pattern(source),
        file=entry.get("file") or "",
        page=page if page else None,
        route_keys=dict(entry.get("routeKeys") or {}),
    )


def _parse_category(data: Mapping[str, Any], key: str) -> tuple[RouteDescriptor, ...]:
    entries = data.get(key) or []
    if not isinstance(entries, list):
        msg = f"{key!r} must be a list"
        raise ManifestError(msg)
    return tuple(_parse_descriptor(entry, key) for entry in entries)


def parse_manifest(data: Mapping[str, Any]) -> RouteManifest:
    """Build a RouteManifest from decoded ``routes.json`` data.

    Missing categories are treated as empty.

    Raises:
        ManifestError: If an entry is malformed or a pattern won't compile.
    """
    if not isinstance(data, Mapping):
        msg = f"Routes manifest must be an object, got {type(data).__name__}"
        raise ManifestError(msg)
    return RouteManifest(
        html_routes=_parse_category(data, "htmlRoutes"),
        api_routes=_parse_category(data, "apiRoutes"),
        not_found_routes=_parse_category(data, "notFoundRoutes"),
    )


def load_manifest(path: str | Path) -> RouteManifest:
    """Read and parse a routes manifest file."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"Routes manifest {str(path)!r} is not valid JSON: {exc}"
        raise ManifestError(msg) from exc
    manifest = parse_manifest(data)
    logger.debug("Loaded %d routes from %s", len(manifest), path)
    return manifest


def get_routes_manifest(
    dist_dir: str | Path,
    manifest_path: str = DEFAULT_MANIFEST_PATH,
) -> RouteManifest | None:
    """Load the manifest stored in a distribution folder.

    Returns ``None`` when the folder has no manifest, which the dispatcher
    reports as a configuration problem.
    """
    path = Path(dist_dir) / manifest_path
    if not path.is_file():
        logger.debug("No routes manifest at %s", path)
        return None
    return load_manifest(path)
