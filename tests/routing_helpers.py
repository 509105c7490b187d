"""Importable callables referenced by configuration tests."""

from remitter import DROP, Event, FormattedEvent

handled = []


def stamp(event: Event) -> None:
    event.payload = {**(event.payload or {}), "stamped": True}


def drop_all(event: Event):
    return DROP


def explode(event: Event) -> None:
    raise RuntimeError("hook exploded")


def order_shape(event: Event) -> dict:
    return {"event": event.name, "data": event.payload}


class PlainTextFormatter:
    def __call__(self, data) -> FormattedEvent:
        return FormattedEvent(content_type="text/plain", content=str(data).encode())


def record_error(error) -> None:
    handled.append(error)


class FakeTransport:
    def __init__(self, queue: str = "default") -> None:
        self.queue = queue
        self.sent = []

    async def send(self, formatted: FormattedEvent, event: Event) -> None:
        self.sent.append(formatted)


def not_a_transport(**options):
    return object()


NOT_CALLABLE = 42
