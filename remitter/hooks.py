"""Hook pipeline shared by pre-dispatch (global) and pre-process (listener) hooks."""

from collections.abc import Sequence

from loguru import logger

from remitter._types import EventHook
from remitter.events import DROP, Drop, Event
from remitter.exceptions import HookError
from remitter.utils import callable_name, resolve

log = logger.bind(source=__name__)


def normalize_hooks(
    hooks: Sequence[EventHook] | EventHook | None,
) -> tuple[EventHook, ...]:
    """Return *hooks* as a tuple; a single hook or None are accepted."""
    if hooks is None:
        return ()
    if callable(hooks):
        return (hooks,)
    return tuple(hooks)


async def apply_hooks(
    hooks: Sequence[EventHook] | EventHook | None,
    event: Event,
) -> Event | Drop:
    """Run *hooks* over *event*, one after the other.

    Each hook receives the current event and is awaited (when it returns an
    awaitable) before the next one starts. A hook may:

    - return None: the event is kept as is;
    - return an Event: it replaces the current event for the next hooks;
    - return ``DROP``: the pipeline halts and ``DROP`` is returned.

    Args:
        hooks: Ordered hooks, a single hook, or None (no-op).
        event: Event to process.

    Returns:
        The resulting event, or ``DROP``.

    Raises:
        HookError: If a hook raises, or returns anything else. The
            original exception is chained via ``__cause__``.
    """
    current = event
    for hook in normalize_hooks(hooks):
        name = callable_name(hook)
        try:
            result = await resolve(hook(current))
        except Exception as exc:
            raise HookError(
                f"hook {name} failed on event {current.name!r}: "
                f"{type(exc).__name__}: {exc}",
                hook_name=name,
            ) from exc
        if result is None:
            continue
        if result is DROP:
            log.debug("Hook {} dropped {} (uid={})", name, current.name, current.uid)
            return DROP
        if not isinstance(result, Event):
            raise HookError(
                f"hook {name} returned {type(result).__name__}, "
                "expected Event, DROP or None",
                hook_name=name,
            ) from TypeError(type(result).__name__)
        current = result
    return current
