"""Per-listener delivery pipeline: hooks, transform, formatter, transport."""

from loguru import logger

from remitter.events import DROP, Event, FormattedEvent
from remitter.exceptions import DeliveryError
from remitter.hooks import apply_hooks
from remitter.listeners import Listener
from remitter.utils import callable_name, resolve

log = logger.bind(source=__name__)


def _stage_error(stage: str, listener: Listener, exc: Exception) -> DeliveryError:
    return DeliveryError(
        f"{stage} failed for listener {listener.label!r}: {type(exc).__name__}: {exc}",
        stage=stage,
    )


async def deliver(listener: Listener, event: Event) -> bool:
    """Deliver *event* through *listener*.

    The caller hands over an event the listener owns exclusively (a clone);
    the listener's hooks may mutate it freely.

    Args:
        listener: Listener to deliver through.
        event: The listener's own copy of the dispatched event.

    Returns:
        True if the transport accepted the payload, False if a hook dropped
        the event.

    Raises:
        HookError: If a listener-local hook fails.
        DeliveryError: If the transform, formatter or transport fails.
    """
    result = await apply_hooks(listener.pre_process_hooks, event)
    if result is DROP:
        log.debug("Listener {} dropped event {}", listener.label, event.name)
        return False
    event = result

    try:
        data = await resolve(listener.transform(event)) if listener.transform else event
    except Exception as exc:
        raise _stage_error("transform", listener, exc) from exc

    try:
        formatted = FormattedEvent.coerce(await resolve(listener.formatter(data)))
    except Exception as exc:
        raise _stage_error("format", listener, exc) from exc

    try:
        await listener.transport.send(formatted, event)
    except DeliveryError:
        raise
    except Exception as exc:
        raise _stage_error("send", listener, exc) from exc

    log.debug(
        "Delivered {} (uid={}) via {} as {}",
        event.name,
        event.uid,
        callable_name(type(listener.transport)),
        formatted.content_type,
    )
    return True
