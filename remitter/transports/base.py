"""Transport protocol.

A transport performs the actual delivery of a formatted event, e.g. an
HTTP request. It is the only part of a listener allowed to do I/O on the
event's behalf.
"""

from typing import Protocol, runtime_checkable

from remitter.events import Event, FormattedEvent


@runtime_checkable
class Transport(Protocol):
    """Protocol every transport implements.

    ``send`` receives the formatted payload plus the listener's (post-hook)
    event, e.g. to expand a URL template from the event name. It must raise
    :class:`~remitter.exceptions.DeliveryError` when delivery fails; any
    other exception is wrapped into one by the delivery pipeline.
    """

    async def send(self, formatted: FormattedEvent, event: Event) -> None:
        """Deliver *formatted* for *event*."""
        ...
