"""Invoke helper — call sync or async collaborators uniformly.

Manifest suppliers, content resolvers, route handlers, and error reporters
can all be ``def`` or ``async def``. The sync/async check lives here so the
dispatcher awaits every collaborator the same way::

    from perch._internal.invoke import invoke

    contents = await invoke(html_resolver, request, descriptor)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
