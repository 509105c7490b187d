import importlib
import inspect
import re
from typing import Any


def callable_name(cb: Any) -> str:
    """Return a human-readable name for a callable, safe for logging.

    Falls back through ``__qualname__``, ``__name__``, and ``repr()``
    so that ``functools.partial``, callable instances, and other exotic
    callables never raise ``AttributeError``.

    Args:
        cb: Any callable object.

    Returns:
        Display name string.
    """
    return (
        getattr(cb, "__qualname__", None) or getattr(cb, "__name__", None) or repr(cb)
    )


async def resolve[T](value: T | Any) -> T:
    """Await *value* if it is awaitable, otherwise return it unchanged.

    Lets hooks, transforms, formatters and error handlers be either plain
    functions or coroutine functions.
    """
    if inspect.isawaitable(value):
        return await value
    return value


def normalize_name(name: str) -> str:
    """Normalize a package/plugin name per PEP 503.

    Replaces any run of hyphens, underscores, or periods with a single
    hyphen and lower-cases the result, so that ``My_Plugin``,
    ``my-plugin``, and ``my.plugin`` all map to ``my-plugin``.

    Args:
        name: Raw plugin or package name.

    Returns:
        Normalized name string.
    """
    return re.sub(r"[-_.]+", "-", name).lower()


def import_reference(reference: str) -> Any:
    """Import an object from a ``module.path:attribute`` reference.

    The attribute part may be dotted (``pkg.mod:Class.method``).

    Args:
        reference: Reference string.

    Returns:
        The referenced object.

    Raises:
        ValueError: If the reference has no ``:`` separator.
        ImportError: If the module cannot be imported.
        AttributeError: If the attribute does not exist.
    """
    module_path, sep, attr_path = reference.partition(":")
    if not sep or not module_path or not attr_path:
        raise ValueError(f"expected 'module:attribute', got {reference!r}")
    obj: Any = importlib.import_module(module_path)
    for attr in attr_path.split("."):
        obj = getattr(obj, attr)
    return obj
