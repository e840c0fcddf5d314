"""Plugin system for terraform-wheels.

A plugin contributes top-level commands and/or hooks around terraform runs.
"""

from terraform_wheels.plugins.base import Command, CommandHandler, Plugin
from terraform_wheels.plugins.registry import (
    PluginRegistry,
    build_registry,
    builtin_plugins,
    discover_entry_point_plugins,
)

__all__ = [
    "Command",
    "CommandHandler",
    "Plugin",
    "PluginRegistry",
    "build_registry",
    "builtin_plugins",
    "discover_entry_point_plugins",
]
