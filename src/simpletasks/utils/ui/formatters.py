"""Output formatters."""

import json
from datetime import datetime
from typing import Any

from rich.markup import escape
from rich.table import Table

from simpletasks.models import Task, TaskPriority
from simpletasks.utils.ui.console import get_console

PRIORITY_STYLES = {
    TaskPriority.LOW: "dim",
    TaskPriority.NORMAL: "yellow",
    TaskPriority.HIGH: "bold red",
}


def format_due(due_by: int | None) -> str:
    """Render an epoch timestamp as a local date, like the task details screen."""
    if due_by is None:
        return "Unspecified"
    return datetime.fromtimestamp(due_by).astimezone().strftime("%b %d, %Y")


def format_tasks_table(tasks: list[Task], title: str = "Tasks") -> None:
    """Display tasks as a table, in list order."""
    console = get_console()
    if not tasks:
        console.print("[yellow]No tasks[/yellow]")
        return

    table = Table(title=title)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Title")
    table.add_column("Priority")
    table.add_column("Due")

    for task in tasks:
        style = PRIORITY_STYLES.get(task.priority, "")
        table.add_row(
            str(task.id),
            escape(task.title),
            f"[{style}]{task.priority.value}[/{style}]" if style else task.priority.value,
            format_due(task.due_by),
        )

    console.print(table)


def format_task(task: Task) -> None:
    """Display a single task."""
    console = get_console()
    console.print(f"[bold]{escape(task.title)}[/bold] [dim](#{task.id})[/dim]")
    console.print(f"  Priority: {task.priority.value}")
    console.print(f"  Due:      {format_due(task.due_by)}")


def format_json(data: Any) -> None:
    """Print data as indented JSON."""
    print(json.dumps(data, indent=2, default=str))


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console().print(f"[bold red]Error:[/bold red] {escape(message)}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    get_console().print(f"[bold green]Success:[/bold green] {escape(message)}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    get_console().print(f"[bold blue]Info:[/bold blue] {escape(message)}")
