"""Pattern matching against compiled route descriptors."""

from perch.manifest import RouteDescriptor


def match_route(descriptor: RouteDescriptor, path: str) -> dict[str, str] | None:
    """Match *path* against a descriptor's pattern.

    The pattern must match the whole path. Returns named captures keyed by
    their internal group name, or ``None`` when the path doesn't match.
    Optional groups that didn't participate are left out.
    """
    match = descriptor.named_pattern.fullmatch(path)
    if match is None:
        return None
    return {name: value for name, value in match.groupdict().items() if value is not None}
