"""remitter - route named application events to remote destinations.

This package provides an asynchronous emitter that matches events against
glob-style listener patterns, runs mutation hooks, and delivers a
formatted copy of the event through each selected listener's transport.
"""

__version__ = "0.1.0"

from loguru import logger

# Disable all remitter logging by default.  Users opt in with:
#     from loguru import logger
#     logger.enable("remitter")
logger.disable("remitter")

from remitter.boundary import ErrorBoundary
from remitter.delivery import deliver
from remitter.emitter import RemoteEventEmitter
from remitter.events import DROP, Drop, Event, FormattedEvent, default_uid
from remitter.exceptions import (
    ConfigError,
    CreationError,
    DeliveryError,
    EmitError,
    EventValidationError,
    HookError,
    PluginEntryPointError,
    PluginError,
    PluginImportError,
    PluginNotFoundError,
    PluginVersionError,
    RemitterError,
)
from remitter.formatters import JsonFormatter, create_json_formatter
from remitter.hooks import apply_hooks
from remitter.listeners import Listener
from remitter.matching import is_match
from remitter.selector import select_listeners
from remitter.transports import HttpTransport, RecordingTransport, Transport

__all__ = [
    # Version
    "__version__",
    # Event model
    "Event",
    "FormattedEvent",
    "DROP",
    "Drop",
    "default_uid",
    # Routing
    "Listener",
    "RemoteEventEmitter",
    "ErrorBoundary",
    "apply_hooks",
    "select_listeners",
    "deliver",
    "is_match",
    # Formatters and transports
    "JsonFormatter",
    "create_json_formatter",
    "Transport",
    "HttpTransport",
    "RecordingTransport",
    # Exception classes
    "RemitterError",
    "EventValidationError",
    "CreationError",
    "HookError",
    "DeliveryError",
    "EmitError",
    "ConfigError",
    "PluginError",
    "PluginNotFoundError",
    "PluginVersionError",
    "PluginEntryPointError",
    "PluginImportError",
]
