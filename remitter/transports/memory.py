from remitter.events import Event, FormattedEvent


class RecordingTransport:
    """Transport that keeps every send in memory.

    Useful as a stand-in for a real transport in tests and dry runs.

    Attributes:
        sent: ``(formatted, event)`` pairs in the order they were sent.
    """

    def __init__(self) -> None:
        self.sent: list[tuple[FormattedEvent, Event]] = []

    async def send(self, formatted: FormattedEvent, event: Event) -> None:
        self.sent.append((formatted, event))

    @property
    def payloads(self) -> list[bytes]:
        """Content of every recorded send."""
        return [formatted.content for formatted, _ in self.sent]

    def clear(self) -> None:
        self.sent.clear()
