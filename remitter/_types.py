"""Shared type definitions for remitter.

All type aliases use PEP 695 ``type`` statement syntax. Every capability
(hook, transform, formatter, error handler) may be a plain function or a
coroutine function; the emitter awaits whatever comes back.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Literal

from remitter.events import Drop, Event, FormattedEvent
from remitter.exceptions import EmitError

type MaybeAwaitable[T] = T | Awaitable[T]
"""A value, or an awaitable resolving to it."""

type HookResult = Event | Drop | None
"""What a hook may return: a replacement event, ``DROP``, or None for no change."""

type EventHook = Callable[[Event], MaybeAwaitable[HookResult]]
"""Mutation/short-circuit step applied to an event."""

type Transform = Callable[[Event], MaybeAwaitable[Any]]
"""Maps an event to the data handed to the formatter."""

type Formatter = Callable[[Any], MaybeAwaitable[FormattedEvent | tuple[str, bytes]]]
"""Serializes transformed data into content type + bytes."""

type Matcher = Callable[[str, str | tuple[str, ...] | list[str]], bool]
"""Predicate telling whether an event name matches any of the patterns."""

type UidGenerator = Callable[[], str]
"""Returns a fresh, non-empty event identifier."""

type Clock = Callable[[], Any]
"""Returns the creation time of a new event (a datetime)."""

type MultiStrategy = Literal["none", "replace", "skip"]
"""How a listener interacts with previously selected listeners under ``multi``."""

type DispatchStrategy = Literal["multi", "first_match", "last_match"]
"""Fan-out policy selecting which matched listeners receive an event."""

type ErrorHandler = Callable[[EmitError], MaybeAwaitable[None]]
"""Receives every failure routed to the error boundary."""
