"""Routing configuration from ``[tool.remitter]`` in ``pyproject.toml``.

Example::

    [tool.remitter]
    strategy = "multi"
    pre_dispatch_hooks = ["myapp.hooks:stamp"]

    [[tool.remitter.listeners]]
    name = "orders"
    match = ["order.*"]
    transform = "myapp.shapes:order_shape"
    transport = { type = "http", url = "https://example.com/hooks/{eventName}" }

Callables are given as ``module.path:attribute`` references. A formatter
reference may name a class, which is instantiated without arguments.
"""

import tomllib
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from remitter._types import DispatchStrategy, MultiStrategy
from remitter.composer import PluginComposer
from remitter.emitter import RemoteEventEmitter
from remitter.exceptions import ConfigError
from remitter.listeners import Listener
from remitter.utils import import_reference

log = logger.bind(source=__name__)

CONFIG_TABLE = "remitter"


class TransportConfig(BaseModel):
    """Transport table: ``type`` plus factory options (any other key)."""

    model_config = ConfigDict(extra="allow", frozen=True)

    type: str = "http"

    @property
    def options(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class ListenerConfig(BaseModel):
    """One ``[[tool.remitter.listeners]]`` entry."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str | None = None
    match: str | list[str]
    multi_strategy: MultiStrategy = "none"
    hooks: list[str] = Field(default_factory=list)
    transform: str | None = None
    formatter: str | None = None
    transport: TransportConfig


class RoutingConfig(BaseModel):
    """The ``[tool.remitter]`` table."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    strategy: DispatchStrategy = "multi"
    pre_dispatch_hooks: list[str] = Field(default_factory=list)
    plugins: list[str] = Field(default_factory=list)
    on_error: str = "raise"
    listeners: list[ListenerConfig] = Field(default_factory=list)


def parse_config(table: dict[str, Any]) -> RoutingConfig:
    """Validate a ``[tool.remitter]`` table.

    Raises:
        ConfigError: If the table fails validation.
    """
    try:
        return RoutingConfig.model_validate(table)
    except ValidationError as exc:
        raise ConfigError(f"invalid [tool.{CONFIG_TABLE}] table: {exc}") from exc


def load_config(pyproject_path: Path) -> RoutingConfig:
    """Read and validate ``[tool.remitter]`` from a ``pyproject.toml`` file.

    Args:
        pyproject_path: Path to the ``pyproject.toml`` file.

    Returns:
        The validated routing configuration.

    Raises:
        ConfigError: If the file is not valid TOML, has no
            ``[tool.remitter]`` table, or the table is invalid.
    """
    try:
        with open(pyproject_path, "rb") as fh:
            document = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{pyproject_path} is not valid TOML: {exc}") from exc

    table = document.get("tool", {}).get(CONFIG_TABLE)
    if table is None:
        raise ConfigError(f"no [tool.{CONFIG_TABLE}] table in {pyproject_path}")
    config = parse_config(table)
    log.debug(
        "Loaded {} listener(s) from {}", len(config.listeners), pyproject_path
    )
    return config


def _resolve(reference: str, what: str) -> Any:
    try:
        obj = import_reference(reference)
    except (ValueError, ImportError, AttributeError) as exc:
        raise ConfigError(f"cannot resolve {what} {reference!r}: {exc}") from exc
    if not callable(obj):
        raise ConfigError(f"{what} {reference!r} is not callable")
    return obj


def build_listener(config: ListenerConfig, composer: PluginComposer) -> Listener:
    """Build a :class:`Listener` from its configuration entry.

    Raises:
        ConfigError: If a reference cannot be resolved or a field is invalid.
        PluginEntryPointError: If the transport type is unknown.
    """
    fields: dict[str, Any] = {
        "name": config.name,
        "match": config.match,
        "multi_strategy": config.multi_strategy,
        "pre_process_hooks": [_resolve(ref, "hook") for ref in config.hooks],
        "transport": composer.build_transport(
            config.transport.type, config.transport.options
        ),
    }
    if config.transform is not None:
        fields["transform"] = _resolve(config.transform, "transform")
    if config.formatter is not None:
        formatter = _resolve(config.formatter, "formatter")
        fields["formatter"] = formatter() if isinstance(formatter, type) else formatter
    return Listener(**fields)


def build_emitter(
    config: RoutingConfig,
    *,
    composer: PluginComposer | None = None,
) -> RemoteEventEmitter:
    """Build a :class:`RemoteEventEmitter` from a routing configuration.

    Plugins listed in ``config.plugins`` are loaded first so that their
    transport types can be used by listeners.

    Args:
        config: Validated routing configuration.
        composer: Plugin composer to use (default: a fresh one).

    Returns:
        The configured emitter.

    Raises:
        ConfigError: If a reference cannot be resolved.
        PluginError: If a plugin cannot be loaded or a transport type is unknown.
    """
    composer = composer or PluginComposer()
    composer.compose(config.plugins)

    on_error = config.on_error
    if on_error != "raise":
        on_error = _resolve(on_error, "error handler")

    return RemoteEventEmitter(
        listeners=[build_listener(entry, composer) for entry in config.listeners],
        pre_dispatch_hooks=[
            _resolve(ref, "hook") for ref in config.pre_dispatch_hooks
        ],
        dispatch_strategy=config.strategy,
        on_error=on_error,
    )
