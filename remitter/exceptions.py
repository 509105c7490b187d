"""Exception hierarchy for remitter.

All custom exceptions inherit from RemitterError base class.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from remitter.events import Event
    from remitter.listeners import Listener


class RemitterError(Exception):
    """Base exception for all remitter errors.

    All custom exceptions in the remitter package inherit from this class,
    allowing users to catch all package-specific errors with a single except clause.
    """


class EventValidationError(RemitterError, ValueError):
    """Event validation failed.

    Raised when event fields fail pydantic validation, e.g. an empty
    ``name`` or ``uid``.

    This wraps pydantic.ValidationError to provide a package-specific exception type.
    """


class CreationError(RemitterError):
    """Event construction failed.

    Raised when the uid generator or the clock fails while building the
    event for an ``emit()`` call. The original exception is chained via
    ``__cause__``.
    """


class HookError(RemitterError):
    """A hook raised, or returned something other than an event, None or DROP.

    Attributes:
        hook_name: Display name of the failing hook.
    """

    def __init__(self, message: str, *, hook_name: str) -> None:
        super().__init__(message)
        self.hook_name = hook_name


class DeliveryError(RemitterError):
    """Transform, formatter or transport failed for one listener.

    Transports raise this directly on delivery failure. The delivery
    pipeline wraps any other exception raised by a listener's transform,
    formatter or transport into it.

    Attributes:
        stage: Pipeline stage that failed (``transform``, ``format`` or ``send``).
    """

    def __init__(self, message: str, *, stage: str = "send") -> None:
        super().__init__(message)
        self.stage = stage


class EmitError(RemitterError):
    """Dispatch-time failure record handed to the error handler.

    Attributes:
        cause: The underlying exception (also chained via ``__cause__``).
        event: Event in scope, or None when the event was never built.
        listener: Listener in scope, or None for call-scoped failures.
    """

    def __init__(
        self,
        cause: BaseException,
        *,
        event: "Event | None" = None,
        listener: "Listener | None" = None,
    ) -> None:
        super().__init__(self._describe(cause, event, listener))
        self.cause = cause
        self.event = event
        self.listener = listener
        self.__cause__ = cause

    @property
    def listener_scoped(self) -> bool:
        """True when the failure happened inside one listener's pipeline."""
        return self.listener is not None

    @staticmethod
    def _describe(cause: BaseException, event: Any, listener: Any) -> str:
        parts = ["emit failed"]
        if event is not None:
            parts.append(f"for event {event.name!r} (uid={event.uid})")
        if listener is not None:
            parts.append(f"in listener {listener.label!r}")
        return f"{' '.join(parts)}: {type(cause).__name__}: {cause}"


class ConfigError(RemitterError, ValueError):
    """Routing configuration is invalid.

    Raised when the ``[tool.remitter]`` table fails validation or one of its
    ``module:attribute`` references cannot be resolved.
    """


# -- Plugin errors ------------------------------------------------------------


class PluginError(RemitterError):
    """Base exception for transport plugin loading errors."""


class PluginNotFoundError(PluginError):
    """Required plugin package is not installed.

    Raised when a plugin declared in the [tool.remitter] plugins list
    cannot be found among installed packages.
    """


class PluginVersionError(PluginError):
    """Installed plugin version does not satisfy the requirement specifier."""


class PluginEntryPointError(PluginError):
    """No transport is registered under the requested name.

    Raised when neither a built-in transport nor an entry point in the
    ``remitter.transports`` group matches a configured transport type.
    """


class PluginImportError(PluginError):
    """Plugin entry point failed to load.

    The original exception is chained via ``__cause__``.
    """
