"""Tests for the Listener model."""

import pytest
from conftest import make_listener
from pydantic import ValidationError

from remitter import ConfigError, JsonFormatter, Listener
from remitter.transports import RecordingTransport


class TestListener:
    def test_defaults(self):
        listener = Listener(match="order.*", transport=RecordingTransport())
        assert listener.multi_strategy == "none"
        assert listener.pre_process_hooks == ()
        assert listener.transform is None
        assert isinstance(listener.formatter, JsonFormatter)
        assert listener.name is None

    def test_patterns(self):
        """A list of patterns is stored as a tuple."""
        listener = make_listener(["order.*", "user.*"])
        assert listener.match == ("order.*", "user.*")
        assert listener.patterns == ("order.*", "user.*")
        assert make_listener("order.*").patterns == ("order.*",)

    def test_single_hook(self):
        def hook(event):
            return None

        assert make_listener(pre_process_hooks=hook).pre_process_hooks == (hook,)

    def test_label(self):
        assert make_listener("order.*", name="orders").label == "orders"
        assert make_listener(["order.*", "user.*"]).label == "order.*,user.*"

    def test_frozen(self):
        """Listeners cannot be reconfigured after construction."""
        listener = make_listener()
        with pytest.raises(ValidationError):
            listener.multi_strategy = "skip"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "fields",
        [
            {"match": "*"},
            {"match": "", "transport": RecordingTransport()},
            {"match": [], "transport": RecordingTransport()},
            {"match": ["a", ""], "transport": RecordingTransport()},
            {"match": "*", "transport": object()},
            {
                "match": "*",
                "transport": RecordingTransport(),
                "multi_strategy": "merge",
            },
            {"match": "*", "transport": RecordingTransport(), "formatter": "json"},
        ],
    )
    def test_invalid(self, fields):
        """Invalid listener fields raise ConfigError."""
        with pytest.raises(ConfigError):
            Listener(**fields)
