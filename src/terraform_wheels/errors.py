"""Exception hierarchy for terraform-wheels.

Everything raised on purpose derives from :class:`WheelsError`; the entry
point turns any of them into a fatal error with exit status 1.
"""

from __future__ import annotations


class WheelsError(Exception):
    """Base class for all terraform-wheels errors."""


class SandboxError(WheelsError):
    """The project directory could not be read or written."""


class TerraformNotFoundError(WheelsError):
    """No usable terraform binary was found."""


class TerraformRunError(WheelsError):
    """terraform exited with a non-zero status."""

    def __init__(self, args: list[str], exit_code: int) -> None:
        self.args_list = list(args)
        self.exit_code = exit_code
        command = " ".join(args) if args else "(no arguments)"
        super().__init__(f"terraform {command} exited with status {exit_code}")


class PluginError(WheelsError):
    """A plugin hook or command failed."""

    def __init__(self, plugin_name: str, message: str) -> None:
        self.plugin_name = plugin_name
        super().__init__(message)


class DuplicateCommandError(WheelsError):
    """Two plugins declare a command with the same name."""

    def __init__(self, command: str, first: str, second: str) -> None:
        self.command = command
        super().__init__(
            f"Command '{command}' is declared by both plugin '{first}' and plugin '{second}'"
        )


class FlagValueError(WheelsError):
    """A flag value could not be parsed."""

    def __init__(self, flag_name: str, message: str) -> None:
        self.flag_name = flag_name
        super().__init__(message)


class FormatError(WheelsError):
    """The formatter rejected the generated configuration."""


class UpgradeError(WheelsError):
    """Self-upgrade failed."""
