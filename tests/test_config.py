"""Tests for [tool.remitter] configuration loading."""

import json
from pathlib import Path

import pytest
import routing_helpers

from remitter import ConfigError, HttpTransport, JsonFormatter, PluginEntryPointError
from remitter.config import build_emitter, load_config, parse_config
from remitter.transports import RecordingTransport

PYPROJECT = """\
[project]
name = "shop"

[tool.remitter]
strategy = "multi"
pre_dispatch_hooks = ["routing_helpers:stamp"]

[[tool.remitter.listeners]]
name = "orders"
match = ["order.*"]
transform = "routing_helpers:order_shape"
transport = { type = "recording" }

[[tool.remitter.listeners]]
name = "audit"
match = "*"
multi_strategy = "skip"
formatter = "routing_helpers:PlainTextFormatter"
transport = { type = "http", url = "https://audit.example.com/{eventName}", timeout = 2.5 }
"""


def write_pyproject(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "pyproject.toml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_valid(self, tmp_path):
        """A complete table validates into RoutingConfig."""
        config = load_config(write_pyproject(tmp_path, PYPROJECT))

        assert config.strategy == "multi"
        assert config.pre_dispatch_hooks == ["routing_helpers:stamp"]
        assert [entry.name for entry in config.listeners] == ["orders", "audit"]
        audit = config.listeners[1]
        assert audit.multi_strategy == "skip"
        assert audit.transport.type == "http"
        assert audit.transport.options == {
            "url": "https://audit.example.com/{eventName}",
            "timeout": 2.5,
        }

    def test_missing_table(self, tmp_path):
        with pytest.raises(ConfigError, match="tool.remitter"):
            load_config(write_pyproject(tmp_path, '[project]\nname = "x"\n'))

    def test_invalid_toml(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(write_pyproject(tmp_path, "[tool.remitter\n"))

    def test_invalid_strategy(self):
        with pytest.raises(ConfigError):
            parse_config({"strategy": "broadcast"})

    def test_unknown_key(self):
        with pytest.raises(ConfigError):
            parse_config({"listener": []})

    def test_listener_requires_transport(self):
        with pytest.raises(ConfigError):
            parse_config({"listeners": [{"match": "*"}]})

    def test_empty_table(self):
        config = parse_config({})
        assert config.listeners == []
        assert config.on_error == "raise"


class TestBuildEmitter:
    def test_builds_listeners(self, tmp_path):
        """References are resolved and transports built from their tables."""
        emitter = build_emitter(load_config(write_pyproject(tmp_path, PYPROJECT)))

        orders, audit = emitter.listeners
        assert orders.name == "orders"
        assert orders.patterns == ("order.*",)
        assert orders.transform is routing_helpers.order_shape
        assert isinstance(orders.formatter, JsonFormatter)
        assert isinstance(orders.transport, RecordingTransport)

        assert audit.multi_strategy == "skip"
        assert isinstance(audit.formatter, routing_helpers.PlainTextFormatter)
        assert isinstance(audit.transport, HttpTransport)
        assert audit.transport.timeout == 2.5

    @pytest.mark.asyncio
    async def test_emit_through_configuration(self, tmp_path):
        emitter = build_emitter(load_config(write_pyproject(tmp_path, PYPROJECT)))
        transport = emitter.listeners[0].transport

        # "audit" is skipped under multi because "orders" matched first.
        assert await emitter.emit("order.created", {"id": 42}) is True

        formatted, _ = transport.sent[0]
        assert json.loads(formatted.content) == {
            "event": "order.created",
            "data": {"id": 42, "stamped": True},
        }

    @pytest.mark.asyncio
    async def test_global_drop_hook(self):
        config = parse_config(
            {
                "pre_dispatch_hooks": ["routing_helpers:drop_all"],
                "listeners": [{"match": "*", "transport": {"type": "recording"}}],
            }
        )
        emitter = build_emitter(config)
        assert await emitter.emit("anything") is False
        assert emitter.listeners[0].transport.sent == []

    @pytest.mark.asyncio
    async def test_error_handler_reference(self):
        routing_helpers.handled.clear()
        config = parse_config(
            {
                "on_error": "routing_helpers:record_error",
                "listeners": [
                    {
                        "match": "*",
                        "hooks": ["routing_helpers:explode"],
                        "transport": {"type": "recording"},
                    }
                ],
            }
        )
        emitter = build_emitter(config)

        assert await emitter.emit("anything") is False
        assert len(routing_helpers.handled) == 1

    def test_unresolvable_reference(self):
        config = parse_config(
            {
                "listeners": [
                    {
                        "match": "*",
                        "transform": "routing_helpers:missing",
                        "transport": {"type": "recording"},
                    }
                ]
            }
        )
        with pytest.raises(ConfigError, match="routing_helpers:missing"):
            build_emitter(config)

    def test_malformed_reference(self):
        config = parse_config({"pre_dispatch_hooks": ["routing_helpers.stamp"]})
        with pytest.raises(ConfigError):
            build_emitter(config)

    def test_not_callable_reference(self):
        config = parse_config({"pre_dispatch_hooks": ["routing_helpers:NOT_CALLABLE"]})
        with pytest.raises(ConfigError, match="not callable"):
            build_emitter(config)

    def test_unknown_transport_type(self):
        config = parse_config(
            {"listeners": [{"match": "*", "transport": {"type": "carrier-pigeon"}}]}
        )
        with pytest.raises(PluginEntryPointError):
            build_emitter(config)

    def test_bad_transport_options(self):
        config = parse_config(
            {"listeners": [{"match": "*", "transport": {"type": "http"}}]}
        )
        with pytest.raises(ConfigError):
            build_emitter(config)

    def test_empty_match_rejected(self):
        config = parse_config(
            {"listeners": [{"match": [], "transport": {"type": "recording"}}]}
        )
        with pytest.raises(ConfigError):
            build_emitter(config)
