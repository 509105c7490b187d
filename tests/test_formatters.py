"""Tests for the JSON formatter."""

import json

from conftest import FIXED_TIME, make_event

from remitter import FormattedEvent, JsonFormatter, create_json_formatter


class TestJsonFormatter:
    def test_content_type(self):
        formatted = JsonFormatter()({"a": 1})
        assert isinstance(formatted, FormattedEvent)
        assert formatted.content_type == "application/json"

    def test_deterministic(self):
        """Identical input → byte-identical output."""
        formatter = create_json_formatter()
        data = {"b": [1, 2, {"y": 2, "x": 1}], "a": "é", "t": FIXED_TIME}
        first = formatter(data)
        second = formatter(data)
        assert first.content == second.content
        assert first.content_type == second.content_type

    def test_key_order_does_not_matter(self):
        """Equal mappings built in different orders serialize identically."""
        formatter = JsonFormatter()
        first = formatter({"a": 1, "b": 2})
        assert first.content == formatter({"b": 2, "a": 1}).content

    def test_canonical_layout(self):
        assert JsonFormatter()({"b": 1, "a": [1, 2]}).content == b'{"a":[1,2],"b":1}'

    def test_unicode_kept_by_default(self):
        assert JsonFormatter()({"s": "é"}).content == '{"s":"é"}'.encode()

    def test_ensure_ascii(self):
        formatted = JsonFormatter(ensure_ascii=True)({"s": "é"})
        assert formatted.content == b'{"s":"\\u00e9"}'

    def test_event_serialization(self):
        """Events serialize with name, uid, timestamp and payload."""
        body = json.loads(JsonFormatter()(make_event(payload={"id": 42})).content)
        assert body == {
            "name": "order.created",
            "uid": "abc123",
            "timestamp": body["timestamp"],
            "payload": {"id": 42},
        }
        assert body["timestamp"].startswith("2024-01-02T03:04:05")

    def test_nested_values(self):
        """Models, datetimes, bytes and sets nested in plain data are dumped."""
        data = {
            "event": make_event(),
            "at": FIXED_TIME,
            "raw": b"ok",
            "tags": {"a"},
        }
        body = json.loads(JsonFormatter()(data).content)
        assert body["event"]["uid"] == "abc123"
        assert body["at"].startswith("2024-01-02T03:04:05")
        assert body["raw"] == "ok"
        assert body["tags"] == ["a"]
