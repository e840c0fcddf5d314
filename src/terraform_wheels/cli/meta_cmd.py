"""``wheels-*`` commands that manage terraform-wheels itself.

They are handled before any project or plugin logic runs.
"""

import typer
from rich.console import Console
from rich.markup import escape

from terraform_wheels import __version__
from terraform_wheels.config.loader import ConfigError, load_config
from terraform_wheels.errors import WheelsError
from terraform_wheels.upgrade import complete_upgrade, get_latest_version, is_newer, perform_upgrade

META_COMMANDS = frozenset({"wheels-version", "wheels-upgrade", "wheels-complete-upgrade"})

meta_app = typer.Typer(
    name="terraform-wheels",
    help="Manage the terraform-wheels installation",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def _fail(error: Exception) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(1) from None


@meta_app.command("wheels-version")
def wheels_version():
    """Show the terraform-wheels version."""
    console.print(f"[bold green]==>[/bold green] You are using terraform-wheels version [bold]{__version__}[/bold]")


@meta_app.command("wheels-upgrade")
def wheels_upgrade():
    """Upgrade to the latest released version."""
    try:
        config = load_config()
        latest = get_latest_version(config.upgrade)
        if not is_newer(latest, __version__):
            console.print("[bold green]==>[/bold green] You are running the latest released version")
            return

        console.print(
            f"[bold green]==>[/bold green] Upgrading from [bold]{__version__}[/bold] "
            f"to [bold]{latest.version}[/bold]"
        )
        perform_upgrade(latest, config.upgrade)
    except (ConfigError, WheelsError) as e:
        _fail(e)


@meta_app.command("wheels-complete-upgrade", hidden=True)
def wheels_complete_upgrade(
    path: str = typer.Argument(..., help="Leftover file of the previous version"),
):
    """Finish an upgrade started by the previous version."""
    console.print("[bold green]==>[/bold green] 🍺 Upgraded to latest version")
    try:
        complete_upgrade(path)
    except WheelsError as e:
        _fail(e)
