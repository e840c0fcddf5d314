"""The set of plugins active for one process.

Built-in plugins are listed in :func:`builtin_plugins`. Third-party plugins
are discovered from the ``terraform_wheels.plugins`` entry point group; an
entry point may name a :class:`Plugin` subclass, a factory returning one, or
an instance.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from importlib.metadata import entry_points
from typing import Any

from terraform_wheels.config.schema import PluginsConfig
from terraform_wheels.errors import DuplicateCommandError
from terraform_wheels.plugins.base import Command, Plugin

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "terraform_wheels.plugins"


class PluginRegistry:
    """Plugins in registration order plus a command-name index.

    Raises:
        DuplicateCommandError: If two plugins declare the same command
        ValueError: If two plugins share a name
    """

    def __init__(self, plugins: Iterable[Plugin]) -> None:
        self._plugins: list[Plugin] = []
        self._commands: dict[str, tuple[Plugin, Command]] = {}

        names: set[str] = set()
        for plugin in plugins:
            if plugin.name in names:
                raise ValueError(f"Plugin '{plugin.name}' is registered twice")
            names.add(plugin.name)
            self._plugins.append(plugin)

            for command in plugin.commands():
                if command.name in self._commands:
                    owner = self._commands[command.name][0]
                    raise DuplicateCommandError(command.name, owner.name, plugin.name)
                self._commands[command.name] = (plugin, command)

    def __iter__(self) -> Iterator[Plugin]:
        return iter(self._plugins)

    def __len__(self) -> int:
        return len(self._plugins)

    @property
    def plugins(self) -> list[Plugin]:
        return list(self._plugins)

    def get_plugin(self, name: str) -> Plugin | None:
        for plugin in self._plugins:
            if plugin.name == name:
                return plugin
        return None

    def find_command(self, name: str) -> tuple[Plugin, Command] | None:
        return self._commands.get(name)

    def commands(self) -> list[tuple[Plugin, Command]]:
        """Every plugin command, in plugin then declaration order."""
        return list(self._commands.values())


def builtin_plugins() -> list[Plugin]:
    from terraform_wheels.plugins.aws_cluster import AwsClusterPlugin
    from terraform_wheels.plugins.provider import ProviderPlugin
    from terraform_wheels.plugins.service import ServicePlugin
    from terraform_wheels.plugins.ssh_agent import SshAgentPlugin

    return [AwsClusterPlugin(), SshAgentPlugin(), ServicePlugin(), ProviderPlugin()]


def _instantiate(obj: Any) -> Plugin:
    if isinstance(obj, Plugin):
        return obj
    if callable(obj):
        plugin = obj()
        if isinstance(plugin, Plugin):
            return plugin
    raise TypeError(f"{obj!r} is not a Plugin, a Plugin subclass or a factory returning one")


def discover_entry_point_plugins(blocked: Iterable[str] = ()) -> list[Plugin]:
    """Load plugins registered under the ``terraform_wheels.plugins`` group.

    Broken plugins are logged and skipped.
    """
    blocked = set(blocked)
    plugins: list[Plugin] = []

    for ep in entry_points(group=ENTRY_POINT_GROUP):
        if ep.name in blocked:
            logger.info("Plugin '%s' is disabled, skipping", ep.name)
            continue
        try:
            plugin = _instantiate(ep.load())
        except Exception as e:
            logger.warning("Failed to load plugin '%s': %s", ep.name, e)
            continue
        if not plugin.name:
            plugin.name = ep.name
        logger.info("Loaded plugin '%s' (entrypoint)", plugin.name)
        plugins.append(plugin)

    return plugins


def build_registry(config: PluginsConfig | None = None) -> PluginRegistry:
    """Built-in plugins followed by installed ones, minus the disabled ones."""
    config = config or PluginsConfig()
    disabled = set(config.disabled)

    plugins = [p for p in builtin_plugins() if p.name not in disabled]
    if config.discover_entry_points:
        plugins.extend(discover_entry_point_plugins(blocked=disabled))

    return PluginRegistry(plugins)
