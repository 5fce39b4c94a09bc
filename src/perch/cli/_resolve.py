"""Import-string resolution for ``perch serve --api``."""

import importlib

from perch.resolvers import HandlerRegistry


def resolve_registry(import_string: str) -> HandlerRegistry:
    """Resolve ``"module:attribute"`` to a HandlerRegistry.

    When the attribute portion is omitted, defaults to ``"registry"``.
    A callable attribute that isn't a registry is treated as a factory
    and called with no arguments.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the attribute does not exist on the module.
        TypeError: If the resolved object is not a HandlerRegistry.
    """
    module_path, _, attr_name = import_string.partition(":")
    if not attr_name:
        attr_name = "registry"

    module = importlib.import_module(module_path)
    obj = getattr(module, attr_name)

    if callable(obj) and not isinstance(obj, HandlerRegistry):
        try:
            obj = obj()
        except Exception as exc:
            msg = f"Factory function {import_string!r} raised an error: {exc}"
            raise TypeError(msg) from exc

    if not isinstance(obj, HandlerRegistry):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a perch.HandlerRegistry"
        raise TypeError(msg)

    return obj
