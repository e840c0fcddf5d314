"""Command-line interface: routing, plugin lifecycle and entry point."""

from terraform_wheels.cli.lifecycle import PluginLifecycle
from terraform_wheels.cli.router import KNOWN_TERRAFORM_COMMANDS, CommandRouter, Route, RouteKind

__all__ = [
    "KNOWN_TERRAFORM_COMMANDS",
    "CommandRouter",
    "PluginLifecycle",
    "Route",
    "RouteKind",
]
