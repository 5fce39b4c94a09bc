"""``perch serve`` — serve a distribution folder with pounce."""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from perch.app import App
from perch.cli._resolve import resolve_registry
from perch.config import ServerConfig
from perch.resolvers import HandlerRegistry


def build_app(args: argparse.Namespace) -> App:
    """Build the App described by ``perch serve`` arguments."""
    config = ServerConfig(dist_dir=args.dist, debug=args.dev, reload=args.dev)
    if args.manifest:
        config = replace(config, manifest_path=args.manifest)
    if args.templates:
        config = replace(config, template_dir=args.templates)
    if args.host:
        config = replace(config, host=args.host)
    if args.port:
        config = replace(config, port=args.port)

    registry = resolve_registry(args.api) if args.api else HandlerRegistry()
    return App(config, api=registry)


def run_serve(args: argparse.Namespace) -> None:
    """Start a pounce server for ``args.dist``."""
    if not Path(args.dist).is_dir():
        print(f"Error: {args.dist!r} is not a directory", file=sys.stderr)
        raise SystemExit(1)

    try:
        app = build_app(args)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app.run()
