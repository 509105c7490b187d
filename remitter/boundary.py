"""Error boundary for failures caught by the emitter."""

import asyncio
from typing import Literal

from loguru import logger

from remitter._types import ErrorHandler
from remitter.events import Event
from remitter.exceptions import EmitError
from remitter.listeners import Listener
from remitter.utils import callable_name, resolve

log = logger.bind(source=__name__)

RAISE: Literal["raise"] = "raise"


class ErrorBoundary:
    """Wrap dispatch failures with context and route them.

    With a handler configured, every failure is wrapped in an
    :class:`EmitError` and passed to it. Failures of the handler itself are
    not caught.

    With ``"raise"`` (the default):

    - call-scoped failures (no listener in scope) are raised from
      :meth:`handle`, and therefore from ``emit()``;
    - listener-scoped failures are reported to the running event loop's
      exception handler, so that sibling deliveries and ``emit()`` carry on.

    Args:
        on_error: Error handler, or ``"raise"``.
    """

    def __init__(self, on_error: ErrorHandler | Literal["raise"] = RAISE) -> None:
        if on_error != RAISE and not callable(on_error):
            raise TypeError(f"on_error must be callable or 'raise', got {on_error!r}")
        self._on_error = on_error

    @property
    def raises(self) -> bool:
        """True when no handler is configured."""
        return self._on_error == RAISE

    async def handle(
        self,
        error: BaseException,
        *,
        event: Event | None = None,
        listener: Listener | None = None,
    ) -> None:
        """Wrap *error* and route it to the handler or the fallback.

        Args:
            error: The underlying failure.
            event: Event in scope, if known.
            listener: Listener in scope, for listener-scoped failures.

        Raises:
            EmitError: For call-scoped failures when no handler is configured.
            Exception: Anything the handler raises.
        """
        wrapped = EmitError(error, event=event, listener=listener)
        log.opt(exception=error).warning("{}", wrapped)

        if self.raises:
            if wrapped.listener_scoped:
                asyncio.get_running_loop().call_exception_handler(
                    {"message": str(wrapped), "exception": wrapped}
                )
                return
            raise wrapped

        log.debug("Routing failure to {}", callable_name(self._on_error))
        await resolve(self._on_error(wrapped))
