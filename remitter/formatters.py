"""Payload formatters.

A formatter turns whatever a listener's transform produced into a
:class:`FormattedEvent`. Formatters must be pure: the same input always
yields the same bytes.
"""

import json
from typing import Any

from pydantic import TypeAdapter

from remitter.events import FormattedEvent

JSON_CONTENT_TYPE = "application/json"

_ANY = TypeAdapter(Any)


class JsonFormatter:
    """Serialize data as canonical JSON.

    Keys are sorted and separators are compact so that equal inputs
    produce byte-identical output. Pydantic models (including
    :class:`Event`), datetimes, bytes and other values pydantic knows how
    to dump are converted to JSON-compatible values by pydantic first.
    """

    content_type = JSON_CONTENT_TYPE

    def __init__(self, *, ensure_ascii: bool = False) -> None:
        self.ensure_ascii = ensure_ascii

    def __call__(self, data: Any) -> FormattedEvent:
        text = json.dumps(
            _ANY.dump_python(data, mode="json"),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=self.ensure_ascii,
        )
        return FormattedEvent(content_type=self.content_type, content=text.encode())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(ensure_ascii={self.ensure_ascii})"


def create_json_formatter() -> JsonFormatter:
    """Return the default JSON formatter."""
    return JsonFormatter()
