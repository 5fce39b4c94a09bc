"""Perch CLI — serve a distribution folder and inspect its routes.

Entry point registered as ``perch`` in ``pyproject.toml``::

    [project.scripts]
    perch = "perch.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``perch`` command."""
    parser = argparse.ArgumentParser(
        prog="perch",
        description="Perch — serve a built app's routes manifest over ASGI.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- perch serve ------------------------------------------------------
    serve_parser = subparsers.add_parser("serve", help="Serve a distribution folder")
    serve_parser.add_argument("dist", help="Distribution folder containing the routes manifest")
    serve_parser.add_argument(
        "--api",
        default=None,
        help="Import string of a HandlerRegistry for API routes (e.g. myapp.api:registry)",
    )
    serve_parser.add_argument(
        "--templates",
        default=None,
        help="Render HTML routes from kida templates in this directory",
    )
    serve_parser.add_argument(
        "--manifest",
        default=None,
        help="Manifest location relative to the dist folder",
    )
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    serve_parser.add_argument(
        "--dev",
        action="store_true",
        help="Re-read the routes manifest on every request and reload on changes",
    )

    # -- perch routes -----------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the routes in a manifest")
    routes_parser.add_argument("dist", help="Distribution folder containing the routes manifest")
    routes_parser.add_argument(
        "--manifest",
        default=None,
        help="Manifest location relative to the dist folder",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from perch.cli._serve import run_serve

        run_serve(args)
    elif args.command == "routes":
        from perch.cli._routes import run_routes

        run_routes(args)
