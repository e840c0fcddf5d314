"""Entry point: route the command line to plugins or terraform."""

import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from terraform_wheels.cli.lifecycle import PluginLifecycle
from terraform_wheels.cli.meta_cmd import META_COMMANDS, meta_app
from terraform_wheels.cli.router import CommandRouter, Route, RouteKind
from terraform_wheels.config.loader import find_config_path, load_config
from terraform_wheels.config.schema import WheelsConfig
from terraform_wheels.errors import PluginError, TerraformRunError, WheelsError
from terraform_wheels.logging_setup import setup_logging
from terraform_wheels.plugins.registry import PluginRegistry, build_registry
from terraform_wheels.sandbox import ProjectSandbox, open_sandbox

PROG = "terraform-wheels"

console = Console()


def exit_code_for(run_error: Exception | None, propagate: bool = False) -> int:
    """Process exit status after a terraform run.

    A failed run is not fatal: terraform already reported it, so the status is
    0 unless ``propagate`` asks for terraform's own.
    """
    if run_error is None or not propagate:
        return 0
    if isinstance(run_error, TerraformRunError) and run_error.exit_code > 0:
        return run_error.exit_code
    return 1


class WheelsApp:
    """One terraform-wheels invocation against a registry of plugins."""

    def __init__(
        self,
        registry: PluginRegistry,
        config: WheelsConfig | None = None,
        console: Console | None = None,
        prog: str = PROG,
    ) -> None:
        self.config = config or WheelsConfig()
        self.registry = registry
        self.console = console or Console()
        self.prog = prog
        self.router = CommandRouter(registry, extra_commands=self.config.terraform.extra_commands)
        self.lifecycle = PluginLifecycle(registry, console=self.console)

    def run(self, args: list[str], sandbox: ProjectSandbox) -> int:
        """Handle ``args`` in ``sandbox`` and return the process exit status.

        Raises:
            WheelsError: On any fatal error
        """
        route = self.router.route(args)
        if route.kind is RouteKind.HELP:
            return self.show_help(sandbox)

        had_terraform_files = sandbox.has_terraform_files()

        if route.kind is RouteKind.PLUGIN:
            return self.dispatch_plugin(route, sandbox, had_terraform_files)
        return self.passthrough(route, sandbox, had_terraform_files)

    def dispatch_plugin(self, route: Route, sandbox: ProjectSandbox, had_terraform_files: bool) -> int:
        if route.plugin is None or route.handler is None:
            raise WheelsError(f"'{route.command}' is not a plugin command")
        tf = sandbox.get_terraform()

        try:
            route.handler.handle(route.args, sandbox, tf)
        except WheelsError:
            raise
        except Exception as e:
            raise PluginError(route.plugin.name, f"{route.command} ({route.plugin.name}): {e}") from e

        # First terraform file in this directory: save the user an explicit init
        if not had_terraform_files and sandbox.has_terraform_files():
            run_error = self.lifecycle.auto_init(sandbox, tf)
            return exit_code_for(run_error, self.config.terraform.propagate_exit_code)
        return 0

    def passthrough(self, route: Route, sandbox: ProjectSandbox, had_terraform_files: bool) -> int:
        tf = sandbox.get_terraform()
        run_error = self.lifecycle.run(sandbox, tf, route.args)

        if not had_terraform_files:
            self.console.print("")
            self.console.print(
                f"Consider running [bold]{self.prog} add-aws-cluster[/bold] if you are trying to"
            )
            self.console.print(
                f"launch a DC/OS cluster. Or [bold]{self.prog} -help[/bold] to see all options"
            )
        return exit_code_for(run_error, self.config.terraform.propagate_exit_code)

    def show_help(self, sandbox: ProjectSandbox) -> int:
        """Print terraform's help followed by the plugin commands. Always returns 1."""
        if sandbox.has_terraform():
            tf = sandbox.get_terraform()
            try:
                tf.invoke([])
            except TerraformRunError:
                # terraform exits non-zero after printing its usage
                pass
        else:
            self.show_missing_terraform_help()

        self.show_plugin_help()
        return 1

    def show_missing_terraform_help(self) -> None:
        prefix = self.config.terraform.required_version_prefix
        self.console.print("Your system does not have terraform installed, or its version is not")
        self.console.print(f"compatible with our {prefix}x requirements. This means we cannot show you")
        self.console.print("the terraform help screen.")
        self.console.print("")
        self.console.print("Install terraform, or place it in")
        self.console.print(f"{self.config.terraform.bin_dir} inside your project directory, to use the")
        self.console.print("following commands:")

    def show_plugin_help(self) -> None:
        rows = [
            ("wheels-version", f"Check the version of {self.prog}"),
            ("wheels-upgrade", f"Upgrade to the latest version of {self.prog}"),
        ]
        rows.extend((command.name, command.description) for _, command in self.registry.commands())

        self.console.print("")
        self.console.print("Wheels Commands:")
        for name, description in rows:
            self.console.print(f"    {name:<18} {escape(description)}", highlight=False)


def run(args: list[str], cwd: Path | None = None) -> int:
    """Load config, sandbox and plugins for ``cwd`` and handle ``args``."""
    cwd = cwd or Path.cwd()
    config = load_config(find_config_path(cwd))
    setup_logging(config.logging.level)

    sandbox = open_sandbox(cwd, config.terraform)
    registry = build_registry(config.plugins)
    return WheelsApp(registry, config=config).run(args, sandbox)


def main():
    """Entry point for the CLI."""
    args = sys.argv[1:]
    try:
        if args and args[0] in META_COMMANDS:
            meta_app(args=args, prog_name=PROG)
            return
        code = run(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
