"""Runs plugin hooks around a terraform invocation.

One invocation goes through::

    is_used (every plugin) -> before_run (active) -> terraform -> after_run (active)

Any failing hook aborts with a :class:`PluginError`. A failing terraform run
does not: its error is handed to every ``after_run`` and returned.
"""

from __future__ import annotations

import logging

from rich.console import Console

from terraform_wheels.errors import PluginError
from terraform_wheels.plugins.base import Plugin
from terraform_wheels.plugins.registry import PluginRegistry
from terraform_wheels.sandbox import ProjectSandbox
from terraform_wheels.terraform import TerraformWrapper

logger = logging.getLogger(__name__)


class PluginLifecycle:
    """Sequences plugin hooks around terraform for a registry."""

    def __init__(self, registry: PluginRegistry, console: Console | None = None) -> None:
        self.registry = registry
        self.console = console or Console()

    def load_plugins(self, sandbox: ProjectSandbox) -> list[Plugin]:
        """Plugins whose ``is_used`` is true for ``sandbox``, in registration order."""
        active: list[Plugin] = []
        for plugin in self.registry:
            try:
                used = plugin.is_used(sandbox)
            except Exception as e:
                raise PluginError(plugin.name, f"Could not check plugin {plugin.name}: {e}") from e

            if used:
                self.console.print(f"[bold blue]==>[/bold blue] Using plugin [bold]{plugin.name}[/bold]")
                active.append(plugin)
        return active

    def invoke(
        self,
        sandbox: ProjectSandbox,
        tf: TerraformWrapper,
        plugins: list[Plugin],
        args: list[str],
    ) -> Exception | None:
        """Run ``terraform <args>`` wrapped in the hooks of ``plugins``.

        Returns:
            The terraform run error, or None if it succeeded

        Raises:
            PluginError: If a ``before_run`` or ``after_run`` hook fails
        """
        is_init = "init" in args

        for plugin in plugins:
            try:
                plugin.before_run(sandbox, tf, is_init)
            except Exception as e:
                raise PluginError(plugin.name, f"Could not start {plugin.name}: {e}") from e

        run_error: Exception | None = None
        try:
            tf.invoke(args)
        except Exception as e:
            logger.info("terraform failed: %s", e)
            run_error = e

        for plugin in plugins:
            try:
                plugin.after_run(sandbox, tf, run_error)
            except Exception as e:
                raise PluginError(plugin.name, f"Could not finalize {plugin.name}: {e}") from e

        return run_error

    def run(self, sandbox: ProjectSandbox, tf: TerraformWrapper, args: list[str]) -> Exception | None:
        """Load the applicable plugins for ``sandbox`` and :meth:`invoke` with them."""
        return self.invoke(sandbox, tf, self.load_plugins(sandbox), args)

    def auto_init(self, sandbox: ProjectSandbox, tf: TerraformWrapper) -> Exception | None:
        """Initialize a project whose first terraform file was just created."""
        self.console.print("[bold green]==>[/bold green] Terraform project created, initializing now")
        sandbox.reload_terraform_project()
        return self.run(sandbox, tf, ["init"])
