"""Event model for remitter.

This module provides the Event model routed by the emitter, the
FormattedEvent produced by formatters, and the DROP sentinel hooks return
to stop a pipeline.
"""

import secrets
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from remitter.exceptions import EventValidationError

_BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


class Drop(Enum):
    """Sentinel type for the drop signal.

    A hook returns ``DROP`` to halt its pipeline. This is distinct from
    returning ``None``, which leaves the event unchanged.
    """

    DROP = "drop"

    def __repr__(self) -> str:
        return "DROP"


DROP: Final = Drop.DROP


def to_base36(number: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if number < 0:
        raise ValueError(f"expected a non-negative integer, got {number}")
    digits = []
    while True:
        number, rem = divmod(number, 36)
        digits.append(_BASE36_ALPHABET[rem])
        if number == 0:
            break
    return "".join(reversed(digits))


def default_uid() -> str:
    """Return a random base-36 identifier (64 bits of entropy)."""
    return to_base36(secrets.randbits(64)).rjust(13, "0")


class Event(BaseModel):
    """One named occurrence flowing through the emitter.

    Events are created by :meth:`RemoteEventEmitter.emit`. Hooks may mutate
    fields in place (assignments are validated) or return a replacement
    event. ``name`` is frozen once the event exists.

    Example:
        >>> event = Event(name="order.created", uid="k3x9", payload={"id": 42})
        >>> event.payload["id"]
        42

    Attributes:
        name: Dot- or slash-segmented identifier used for matching.
        timestamp: Timezone-aware creation time.
        uid: Opaque unique identifier used for correlation.
        payload: Arbitrary data, opaque to the emitter.

    Raises:
        EventValidationError: If fields fail pydantic validation.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    name: str = Field(min_length=1, frozen=True)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    uid: str = Field(default_factory=default_uid, min_length=1)
    payload: Any = None

    def __init__(self, **data: Any) -> None:
        """Wrap pydantic ValidationError into EventValidationError."""
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise EventValidationError(str(exc)) from exc

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            super().__setattr__(name, value)
        except ValidationError as exc:
            raise EventValidationError(str(exc)) from exc

    def clone(self) -> "Event":
        """Return a deep structural copy sharing no mutable state with self."""
        return self.model_copy(deep=True)


class FormattedEvent(BaseModel):
    """Serialized event produced by a formatter.

    Attributes:
        content_type: MIME type of ``content``.
        content: Serialized bytes handed to the transport.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    content_type: str = Field(min_length=1)
    content: bytes

    @classmethod
    def coerce(cls, value: Any) -> "FormattedEvent":
        """Accept a FormattedEvent or a ``(content_type, content)`` pair.

        ``str`` content is encoded as UTF-8.

        Raises:
            TypeError: If value has neither shape.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, tuple) and len(value) == 2:
            content_type, content = value
            if isinstance(content, str):
                content = content.encode("utf-8")
            return cls(content_type=content_type, content=content)
        raise TypeError(
            f"formatter returned {type(value).__name__}, "
            "expected FormattedEvent or (content_type, content)"
        )
