"""Base types for plugins and the commands they contribute."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from terraform_wheels.sandbox import ProjectSandbox
    from terraform_wheels.terraform import TerraformWrapper

CommandHandler = Callable[[list[str], "ProjectSandbox", "TerraformWrapper"], None]


@dataclass(frozen=True)
class Command:
    """A top-level command contributed by a plugin.

    The handler receives the arguments after the command name and raises on
    failure.
    """

    name: str
    description: str
    handler: CommandHandler

    def handle(self, args: list[str], sandbox: ProjectSandbox, tf: TerraformWrapper) -> None:
        self.handler(args, sandbox, tf)


class Plugin(ABC):
    """A plugin that may add commands and wrap terraform runs.

    Plugins are built once per process and keep no state between
    invocations apart from what they write to the project directory.
    """

    #: Unique, human-readable plugin name used in messages
    name: str = ""

    def commands(self) -> list[Command]:
        """Commands this plugin adds, in the order they are listed in help."""
        return []

    @abstractmethod
    def is_used(self, sandbox: ProjectSandbox) -> bool:
        """Whether the current project needs this plugin's hooks.

        Raising aborts the whole invocation.
        """

    def before_run(self, sandbox: ProjectSandbox, tf: TerraformWrapper, is_init: bool) -> None:
        """Called before terraform runs; raising prevents the run."""

    def after_run(
        self,
        sandbox: ProjectSandbox,
        tf: TerraformWrapper,
        run_error: Exception | None,
    ) -> None:
        """Called after terraform exits, with its error if it failed."""
