"""Server configuration.

ServerConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Server configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServerConfig(dist_dir="build", port=3000)
    """

    # Distribution folder produced by the build step
    dist_dir: str | Path = "dist"
    manifest_path: str = "_expo/routes.json"  # Relative to dist_dir

    # Server-side rendering: when set, HTML routes render kida templates
    # from this directory instead of reading prebuilt .html files
    template_dir: str | Path | None = None

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    reload: bool = False

    log_level: str = "info"
