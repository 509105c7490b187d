"""Listener selection: name matching followed by the fan-out strategy."""

from collections.abc import Sequence

from remitter._types import DispatchStrategy, Matcher
from remitter.events import Event
from remitter.listeners import Listener
from remitter.matching import is_match

DISPATCH_STRATEGIES: tuple[DispatchStrategy, ...] = (
    "multi",
    "first_match",
    "last_match",
)


def _fold_multi(matched: list[Listener]) -> list[Listener]:
    """Resolve ``multi_strategy`` of matched listeners in one left-to-right pass.

    The first listener is always kept. After that, ``replace`` restarts the
    selection with the listener, ``skip`` leaves the listener out and
    ``none`` appends it.
    """
    selected: list[Listener] = []
    for listener in matched:
        if not selected:
            selected.append(listener)
            continue
        match listener.multi_strategy:
            case "replace":
                selected = [listener]
            case "skip":
                pass
            case _:
                selected.append(listener)
    return selected


def select_listeners(
    listeners: Sequence[Listener],
    event: Event,
    strategy: DispatchStrategy = "multi",
    *,
    matcher: Matcher = is_match,
) -> list[Listener]:
    """Return the listeners that should receive *event*.

    Listeners whose patterns match ``event.name`` are kept in configuration
    order, then narrowed by *strategy*:

    - ``first_match``: only the first matching listener;
    - ``last_match``: only the last matching listener;
    - ``multi``: see :func:`_fold_multi`.

    Args:
        listeners: Configured listeners, in order.
        event: Event being dispatched.
        strategy: Fan-out strategy.
        matcher: Name/pattern predicate.

    Returns:
        Selected listeners; empty if none matched.

    Raises:
        ValueError: If *strategy* is unknown.
    """
    if strategy not in DISPATCH_STRATEGIES:
        raise ValueError(
            f"unknown dispatch strategy {strategy!r}, "
            f"expected one of {DISPATCH_STRATEGIES}"
        )
    matched = [
        listener for listener in listeners if matcher(event.name, listener.patterns)
    ]
    if not matched:
        return []
    match strategy:
        case "first_match":
            return [matched[0]]
        case "last_match":
            return [matched[-1]]
        case _:
            return _fold_multi(matched)
