"""Transport plugin composer for remitter.

Resolves the ``type`` of a configured transport to a factory. Built-in
transports (``http``, ``recording``) are always available; plugin packages
add more by declaring entry points in the ``remitter.transports`` group,
where the entry point name is the transport type and its value a factory
accepting the transport options as keyword arguments.

Host applications list required plugins (with optional version
constraints) in ``[tool.remitter]`` of their ``pyproject.toml``::

    [tool.remitter]
    plugins = ["remitter-sqs>=0.2"]

Typical usage::

    from remitter.composer import PluginComposer

    composer = PluginComposer()
    composer.compose(["remitter-sqs>=0.2"])
    transport = composer.build_transport("sqs", {"queue": "events"})
"""

import importlib.metadata
from collections.abc import Callable
from typing import Any

from loguru import logger
from packaging.requirements import InvalidRequirement, Requirement
from packaging.version import Version

from remitter.exceptions import (
    ConfigError,
    PluginEntryPointError,
    PluginImportError,
    PluginNotFoundError,
    PluginVersionError,
)
from remitter.transports import HttpTransport, RecordingTransport, Transport
from remitter.utils import normalize_name

log = logger.bind(source=__name__)

ENTRY_POINT_GROUP = "remitter.transports"

BUILTIN_TRANSPORTS: dict[str, Callable[..., Transport]] = {
    "http": HttpTransport,
    "recording": RecordingTransport,
}


class PluginComposer:
    """Discover transport plugins and build transports by type name.

    Attributes:
        loaded_plugins: Normalized names of plugins loaded so far.
    """

    def __init__(self) -> None:
        self.loaded_plugins: set[str] = set()
        self._factories: dict[str, Callable[..., Transport]] = dict(BUILTIN_TRANSPORTS)

    # -- public API -----------------------------------------------------------

    @property
    def transport_types(self) -> list[str]:
        """Transport types currently available, sorted."""
        return sorted(self._factories)

    def register(self, type_name: str, factory: Callable[..., Transport]) -> None:
        """Make *factory* available under *type_name*, replacing any previous one."""
        self._factories[type_name] = factory

    def compose(self, plugin_requirements: list[str]) -> None:
        """Load transport plugins matching the given requirement strings.

        For each requirement string the method:

        1. Parses the PEP 508 specifier.
        2. Verifies the package is installed and satisfies the version
           constraint.
        3. Loads every entry point the package declares in the
           ``remitter.transports`` group.

        Args:
            plugin_requirements: PEP 508 requirement strings,
                e.g. ``["remitter-sqs>=0.2"]``.

        Raises:
            ConfigError: If a requirement string is malformed.
            PluginNotFoundError: If a required plugin is not installed.
            PluginVersionError: If the installed version does not satisfy
                the requirement.
            PluginEntryPointError: If the plugin declares no entry point
                in the ``remitter.transports`` group.
            PluginImportError: If an entry point fails to load.
        """
        for req_str in plugin_requirements:
            try:
                requirement = Requirement(req_str)
            except InvalidRequirement as exc:
                raise ConfigError(f"invalid plugin requirement {req_str!r}") from exc
            self._load_plugin(requirement)

    def build_transport(self, type_name: str, options: dict[str, Any]) -> Transport:
        """Build a transport of *type_name* from *options*.

        Args:
            type_name: Built-in or plugin transport type.
            options: Keyword arguments for the factory.

        Returns:
            The transport.

        Raises:
            PluginEntryPointError: If no factory is known for *type_name*.
            ConfigError: If the factory rejects the options or returns
                something that is not a transport.
        """
        factory = self._factories.get(type_name)
        if factory is None:
            raise PluginEntryPointError(
                f"unknown transport type {type_name!r}, "
                f"available: {self.transport_types}"
            )
        try:
            transport = factory(**options)
        except (TypeError, ValueError) as exc:
            raise ConfigError(
                f"cannot build {type_name!r} transport from {options!r}: {exc}"
            ) from exc
        if not isinstance(transport, Transport):
            raise ConfigError(
                f"factory for {type_name!r} returned {type(transport).__name__}, "
                "which has no async send(formatted, event) method"
            )
        return transport

    # -- internals ------------------------------------------------------------

    def _load_plugin(self, requirement: Requirement) -> None:
        """Resolve, validate, and load a single plugin.

        Args:
            requirement: Parsed PEP 508 requirement.
        """
        plugin_name = requirement.name
        normalized_name = normalize_name(plugin_name)

        if normalized_name in self.loaded_plugins:
            log.debug("Plugin already loaded: {}", plugin_name)
            return

        # 1. Check installation
        try:
            dist = importlib.metadata.distribution(plugin_name)
        except importlib.metadata.PackageNotFoundError as err:
            raise PluginNotFoundError(
                f"Required plugin '{plugin_name}' is not installed"
            ) from err

        # 2. Check version constraint
        installed_version = Version(dist.version)
        if not requirement.specifier.contains(installed_version, prereleases=True):
            raise PluginVersionError(
                f"Plugin '{plugin_name}' version {installed_version} "
                f"does not satisfy requirement '{requirement}'"
            )

        # 3. Find the plugin's entry points
        eps = [ep for ep in dist.entry_points if ep.group == ENTRY_POINT_GROUP]
        if not eps:
            raise PluginEntryPointError(
                f"Plugin '{plugin_name}' has no entry point "
                f"in group '{ENTRY_POINT_GROUP}'"
            )

        # 4. Load each factory
        for ep in eps:
            try:
                log.debug("Loading transport '{}' from {}", ep.name, ep.value)
                self.register(ep.name, ep.load())
            except Exception as exc:
                log.exception("Failed to load plugin '{}'", plugin_name)
                raise PluginImportError(
                    f"Failed to load transport '{ep.name}' from plugin '{plugin_name}'"
                ) from exc

        self.loaded_plugins.add(normalized_name)
        log.info("Plugin '{}' v{} loaded", plugin_name, installed_version)
