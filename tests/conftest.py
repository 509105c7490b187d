"""Shared test helpers and fixtures for remitter tests."""

import asyncio
from datetime import UTC, datetime

import pytest

from remitter import DeliveryError, EmitError, Event, FormattedEvent, Listener
from remitter.transports import RecordingTransport

FIXED_TIME = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)


class FailingTransport:
    """Transport whose every send fails with *error*."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error or DeliveryError("connection refused")
        self.calls = 0

    async def send(self, formatted: FormattedEvent, event: Event) -> None:
        self.calls += 1
        raise self.error


class GateTransport:
    """Transport that blocks until *expected* sends are in progress at once."""

    def __init__(self, gate: "Gate") -> None:
        self.gate = gate

    async def send(self, formatted: FormattedEvent, event: Event) -> None:
        await self.gate.arrive()


class Gate:
    def __init__(self, expected: int) -> None:
        self.expected = expected
        self.arrived = 0
        self.open = asyncio.Event()

    async def arrive(self) -> None:
        self.arrived += 1
        if self.arrived >= self.expected:
            self.open.set()
        await self.open.wait()


def make_listener(
    match: str | list[str] = "*",
    multi_strategy: str = "none",
    *,
    name: str | None = None,
    **fields,
) -> Listener:
    """Build a listener with a fresh RecordingTransport unless one is given."""
    fields.setdefault("transport", RecordingTransport())
    return Listener(match=match, multi_strategy=multi_strategy, name=name, **fields)


def make_event(name: str = "order.created", payload=None) -> Event:
    return Event(name=name, timestamp=FIXED_TIME, uid="abc123", payload=payload)


@pytest.fixture
def errors() -> list[EmitError]:
    """List collecting errors routed to the error boundary."""
    return []


@pytest.fixture
def collect(errors):
    """Error handler appending to the ``errors`` fixture."""

    def handler(error: EmitError) -> None:
        errors.append(error)

    return handler
