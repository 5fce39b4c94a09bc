"""``perch routes`` — list the routes in a distribution's manifest.

Prints every descriptor in dispatch order with its category, pattern,
page, and file reference.
"""

import argparse
import sys

from perch.errors import ManifestError
from perch.manifest import DEFAULT_MANIFEST_PATH, get_routes_manifest


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of CATEGORY, PATTERN, PAGE, and FILE."""
    try:
        manifest = get_routes_manifest(args.dist, args.manifest or DEFAULT_MANIFEST_PATH)
    except ManifestError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if manifest is None:
        print(f"No routes manifest found in {args.dist!r}.", file=sys.stderr)
        raise SystemExit(1)

    rows = [
        (category, route.named_pattern.pattern, route.page or "-", route.file or "-")
        for category, route in manifest.routes
    ]
    if not rows:
        print("No routes declared.")
        return

    widths = [
        max(len(header), *(len(row[i]) for row in rows))
        for i, header in enumerate(("CATEGORY", "PATTERN", "PAGE"))
    ]
    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"
    print(fmt.format("CATEGORY", "PATTERN", "PAGE", "FILE"))
    print("-" * min(sum(widths) + 6 + max(len(row[3]) for row in rows), 80))
    for row in rows:
        print(fmt.format(*row))
