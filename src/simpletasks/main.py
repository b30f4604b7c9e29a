"""Main entry point for the SimpleTasks CLI."""

import typer

from simpletasks import __version__
from simpletasks.commands import auth, config, tasks
from simpletasks.utils.typer_helpers import SuggestingGroup
from simpletasks.utils.ui.console import get_console

app = typer.Typer(
    name="simpletasks",
    cls=SuggestingGroup,
    help="Command-line client for SimpleTasks",
    no_args_is_help=True,
)

console = get_console()

app.command("login")(auth.login)
app.command("register")(auth.register)
app.command("logout")(auth.logout)
app.add_typer(tasks.app, name="tasks", help="Task management commands")
app.add_typer(config.app, name="config", help="Configuration management")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]SimpleTasks[/bold] version [cyan]{__version__}[/cyan]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
