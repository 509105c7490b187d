"""Listener (routing rule) model.

A listener pairs glob patterns with everything needed to deliver a
matching event: local hooks, a transform, a formatter and a transport.
Listeners are frozen; reconfiguring routing means building a new emitter.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from remitter._types import EventHook, Formatter, MultiStrategy, Transform
from remitter.exceptions import ConfigError
from remitter.formatters import JsonFormatter
from remitter.transports.base import Transport


class Listener(BaseModel):
    """A configured routing target.

    Example:
        >>> from remitter.transports import RecordingTransport
        >>> orders = Listener(match="order.*", transport=RecordingTransport())
        >>> orders.patterns
        ('order.*',)

    Attributes:
        match: One glob pattern or a tuple of patterns (lists are accepted).
        multi_strategy: Behaviour under the ``multi`` dispatch strategy
            relative to listeners selected before this one.
        pre_process_hooks: Listener-local hooks run on the listener's own
            copy of the event (a single hook is accepted).
        transform: Maps the event to the data to serialize; identity if None.
        formatter: Serializes transformed data (default: canonical JSON).
        transport: Performs the delivery.
        name: Optional label for logs and error messages.

    Raises:
        ConfigError: If fields fail validation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    match: str | tuple[str, ...]
    multi_strategy: MultiStrategy = "none"
    pre_process_hooks: tuple[EventHook, ...] = ()
    transform: Transform | None = None
    formatter: Formatter = Field(default_factory=JsonFormatter)
    transport: Transport
    name: str | None = None

    def __init__(self, **data: Any) -> None:
        """Wrap pydantic ValidationError into ConfigError."""
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc

    @field_validator("match", mode="before")
    @classmethod
    def _normalize_match(cls, value: Any) -> Any:
        if isinstance(value, list):
            value = tuple(value)
        if not value:
            raise ValueError("at least one match pattern is required")
        if isinstance(value, tuple) and not all(value):
            raise ValueError("match patterns must be non-empty strings")
        return value

    @field_validator("pre_process_hooks", mode="before")
    @classmethod
    def _normalize_hooks(cls, value: Any) -> Any:
        if value is None:
            return ()
        if callable(value):
            return (value,)
        if isinstance(value, list):
            return tuple(value)
        return value

    @property
    def patterns(self) -> tuple[str, ...]:
        """Match patterns as a tuple."""
        if isinstance(self.match, str):
            return (self.match,)
        return self.match

    @property
    def label(self) -> str:
        """Display name: ``name`` if set, else the patterns."""
        return self.name or ",".join(self.patterns)
