"""Decides who handles an argument vector: a plugin, terraform, or help."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from terraform_wheels.plugins.base import Command, Plugin
from terraform_wheels.plugins.registry import PluginRegistry

# Keep in sync with the supported terraform release
KNOWN_TERRAFORM_COMMANDS: frozenset[str] = frozenset(
    {
        "apply",
        "console",
        "destroy",
        "env",
        "fmt",
        "get",
        "graph",
        "import",
        "init",
        "output",
        "plan",
        "providers",
        "push",
        "refresh",
        "show",
        "taint",
        "untaint",
        "validate",
        "version",
        "workspace",
        "0.12checklist",
        "debug",
        "force-unlock",
        "state",
    }
)


class RouteKind(str, Enum):
    HELP = "help"
    PLUGIN = "plugin"
    PASSTHROUGH = "passthrough"


@dataclass
class Route:
    """Where an invocation goes.

    For ``PLUGIN`` routes ``args`` holds the arguments after the command name;
    for ``PASSTHROUGH`` it is the full original vector.
    """

    kind: RouteKind
    command: str | None = None
    args: list[str] = field(default_factory=list)
    plugin: Plugin | None = None
    handler: Command | None = None


def wants_help(args: list[str]) -> bool:
    return any("help" in arg for arg in args)


def effective_command(args: list[str]) -> tuple[int, str] | None:
    """Index and value of the first argument that is not a flag."""
    for i, arg in enumerate(args):
        if not arg.startswith("-"):
            return i, arg
    return None


class CommandRouter:
    """Classifies argument vectors against a plugin registry."""

    def __init__(self, registry: PluginRegistry, extra_commands: Iterable[str] = ()) -> None:
        self.registry = registry
        self.terraform_commands = KNOWN_TERRAFORM_COMMANDS | frozenset(extra_commands)

    def route(self, args: list[str]) -> Route:
        """Route ``args`` (the process arguments without the program name)."""
        if not args or wants_help(args):
            return Route(RouteKind.HELP)

        found = effective_command(args)
        if found is None:
            return Route(RouteKind.HELP)
        index, name = found

        owner = self.registry.find_command(name)
        if owner is not None:
            plugin, command = owner
            return Route(
                RouteKind.PLUGIN,
                command=name,
                args=list(args[index + 1 :]),
                plugin=plugin,
                handler=command,
            )

        if name in self.terraform_commands:
            return Route(RouteKind.PASSTHROUGH, command=name, args=list(args))

        return Route(RouteKind.HELP, command=name)
