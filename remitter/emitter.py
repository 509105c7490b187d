"""Remote event emitter: the dispatch engine."""

import asyncio
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any, Literal

from loguru import logger

from remitter._types import (
    Clock,
    DispatchStrategy,
    ErrorHandler,
    EventHook,
    Matcher,
    UidGenerator,
)
from remitter.boundary import RAISE, ErrorBoundary
from remitter.delivery import deliver
from remitter.events import DROP, Event, default_uid
from remitter.exceptions import CreationError, HookError
from remitter.hooks import apply_hooks, normalize_hooks
from remitter.listeners import Listener
from remitter.matching import is_match
from remitter.selector import DISPATCH_STRATEGIES, select_listeners

log = logger.bind(source=__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RemoteEventEmitter:
    """Route named events to outbound listeners.

    Each :meth:`emit` call builds an :class:`Event`, runs the pre-dispatch
    hooks, selects listeners by name and strategy, then delivers a private
    copy of the event to every selected listener concurrently.

    Listener configuration is fixed for the lifetime of the emitter; build
    a new emitter to change routing.

    Example::

        emitter = RemoteEventEmitter(
            listeners=[
                Listener(
                    match="order.*",
                    transport=HttpTransport("https://example.com/{eventName}"),
                )
            ],
        )
        delivered = await emitter.emit("order.created", {"id": 42})

    Args:
        listeners: Routing rules, in priority order.
        pre_dispatch_hooks: Hooks run on every event before selection.
        dispatch_strategy: ``multi`` (default), ``first_match`` or
            ``last_match``.
        uid_generator: Event id factory (default: random base-36).
        clock: Timestamp factory (default: current UTC time).
        matcher: Name/pattern predicate (default: :func:`is_match`).
        on_error: Error handler, or ``"raise"`` (see :class:`ErrorBoundary`).

    Raises:
        ValueError: If *dispatch_strategy* is unknown.
    """

    def __init__(
        self,
        *,
        listeners: Sequence[Listener],
        pre_dispatch_hooks: Sequence[EventHook] | EventHook | None = None,
        dispatch_strategy: DispatchStrategy = "multi",
        uid_generator: UidGenerator | None = None,
        clock: Clock | None = None,
        matcher: Matcher | None = None,
        on_error: ErrorHandler | Literal["raise"] = RAISE,
    ) -> None:
        if dispatch_strategy not in DISPATCH_STRATEGIES:
            raise ValueError(
                f"unknown dispatch strategy {dispatch_strategy!r}, "
                f"expected one of {DISPATCH_STRATEGIES}"
            )
        self._listeners = tuple(listeners)
        self._pre_dispatch_hooks = normalize_hooks(pre_dispatch_hooks)
        self._strategy: DispatchStrategy = dispatch_strategy
        self._uid_generator = uid_generator or default_uid
        self._clock = clock or _utcnow
        self._matcher = matcher or is_match
        self._boundary = ErrorBoundary(on_error)
        self._in_flight = 0
        # Created by wait_idle() in the running loop, reset once idle.
        self._idle: asyncio.Event | None = None

    @property
    def listeners(self) -> tuple[Listener, ...]:
        """Configured listeners (read-only)."""
        return self._listeners

    @property
    def dispatch_strategy(self) -> DispatchStrategy:
        """Fan-out policy applied to matched listeners."""
        return self._strategy

    @property
    def in_flight(self) -> int:
        """Number of emit() calls that have not settled yet."""
        return self._in_flight

    async def wait_idle(self) -> None:
        """Wait until no emit() call is in flight.

        Returns immediately when nothing is in flight. Emits started while
        waiting are waited for as well. Nothing is cancelled.
        """
        if self._in_flight == 0:
            return
        if self._idle is None:
            self._idle = asyncio.Event()
        await self._idle.wait()

    async def emit(self, event_name: str, event_data: Any = None) -> bool:
        """Create an event and dispatch it to the selected listeners.

        Listener-scoped failures never abort sibling deliveries nor this
        call: they are routed to the error boundary and count as not
        delivered. Call-scoped failures (event creation, pre-dispatch hooks)
        end the call early and are routed to the error boundary as well.

        Args:
            event_name: Name used to match listeners.
            event_data: Payload, opaque to the emitter.

        Returns:
            True if at least one listener received the event.

        Post:
            Every selected listener's pipeline has settled.

        Raises:
            EmitError: For call-scoped failures when ``on_error="raise"``.
            Exception: Anything the error handler raises (grouped in an
                ``ExceptionGroup`` when raised during fan-out).
        """
        self._in_flight += 1
        try:
            return await self._emit(event_name, event_data)
        finally:
            self._in_flight -= 1
            if self._in_flight == 0 and self._idle is not None:
                self._idle.set()
                self._idle = None

    async def _emit(self, event_name: str, event_data: Any) -> bool:
        try:
            event = self._create_event(event_name, event_data)
        except CreationError as exc:
            await self._boundary.handle(exc)
            return False

        log.debug("Emit {} (uid={})", event.name, event.uid)
        try:
            result = await apply_hooks(self._pre_dispatch_hooks, event)
        except HookError as exc:
            await self._boundary.handle(exc, event=event)
            return False
        if result is DROP:
            log.debug("Event {} (uid={}) dropped by hooks", event.name, event.uid)
            return False
        event = result

        listeners = select_listeners(
            self._listeners, event, self._strategy, matcher=self._matcher
        )
        log.debug(
            "Event {} (uid={}) selected {}",
            event.name,
            event.uid,
            [listener.label for listener in listeners],
        )
        if not listeners:
            return False

        # Handler failures surface only after every sibling has settled.
        results = await asyncio.gather(
            *(self._deliver_or_handle(listener, event) for listener in listeners),
            return_exceptions=True,
        )
        failures = [result for result in results if isinstance(result, BaseException)]
        if failures:
            raise BaseExceptionGroup(
                f"error handler failed while dispatching {event.name!r}", failures
            )
        return any(results)

    async def _deliver_or_handle(self, listener: Listener, event: Event) -> bool:
        """Deliver a private clone of *event*, routing failures to the boundary.

        The clone is taken before the first await, so no listener ever sees
        another listener's mutations.

        Args:
            listener: Listener to deliver through.
            event: The dispatched event, shared by all selected listeners.

        Returns:
            Delivery result, False on failure.
        """
        try:
            copy = event.clone()
        except Exception as exc:
            await self._boundary.handle(exc, event=event, listener=listener)
            return False
        try:
            return await deliver(listener, copy)
        except Exception as exc:
            await self._boundary.handle(exc, event=copy, listener=listener)
            return False

    def _create_event(self, event_name: str, event_data: Any) -> Event:
        """Build the event for one emit() call.

        Raises:
            CreationError: If the uid generator, the clock or validation fails.
        """
        try:
            return Event(
                name=event_name,
                timestamp=self._clock(),
                uid=self._uid_generator(),
                payload=event_data,
            )
        except Exception as exc:
            raise CreationError(
                f"could not create event {event_name!r}: {type(exc).__name__}: {exc}"
            ) from exc
