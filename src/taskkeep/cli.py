"""CLI interface for taskkeep."""

from __future__ import annotations

from datetime import datetime

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from taskkeep import __version__
from taskkeep.config import TaskkeepConfig
from taskkeep.logging_setup import setup_logging
from taskkeep.task import Task
from taskkeep.task_store import StoreResult, TaskStore

console = Console()

SHORT_ID_LENGTH = 8


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="taskkeep")
@click.pass_context
def main(ctx: click.Context) -> None:
    """taskkeep - a to-do list kept in a settings file.

    \b
    Examples:
      taskkeep add "Buy milk" --due 2025-01-10
      taskkeep list
      taskkeep done 3F2A
    """
    config = TaskkeepConfig.load()
    setup_logging(config.logging.level)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["store"] = TaskStore.from_config(config)

    if config.settings.backend == "memory" and ctx.invoked_subcommand is not None:
        console.print(
            "[yellow]Using the memory backend: changes are not kept after this run.[/yellow]"
        )

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _load_tasks(ctx: click.Context) -> list[Task]:
    """Load all tasks, exiting on failure unless configured to degrade."""
    config: TaskkeepConfig = ctx.obj["config"]
    store: TaskStore = ctx.obj["store"]

    if config.store.degrade_to_empty:
        return store.load_all_or_empty()

    result = store.load_all()
    if not result.ok:
        _report_failure(ctx, result)
    return result.unwrap()


def _report_failure(ctx: click.Context, result: StoreResult) -> None:
    failure = result.failure
    console.print(f"[red]Task store error ({failure.kind}):[/red] {escape(failure.message)}")
    ctx.exit(1)


def _find_task(ctx: click.Context, task_id: str) -> Task:
    """Find a task by full id or unique id prefix."""
    tasks = _load_tasks(ctx)
    wanted = task_id.upper()
    matches = [t for t in tasks if t.id.startswith(wanted)]

    if not matches:
        console.print(f"[red]Task not found:[/red] {escape(task_id)}")
        ctx.exit(1)
    if len(matches) > 1:
        console.print(f"[red]Ambiguous task id:[/red] {escape(task_id)} matches {len(matches)} tasks")
        ctx.exit(1)

    return matches[0]


def _save(ctx: click.Context, task: Task) -> None:
    result = task.save(ctx.obj["store"])
    if not result.ok:
        _report_failure(ctx, result)


@main.command()
@click.argument("title")
@click.option("--note", "-n", help="Optional note")
@click.option(
    "--due",
    "-d",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M"]),
    help="Due date (defaults to now)",
)
@click.pass_context
def add(ctx: click.Context, title: str, note: str | None, due: datetime | None) -> None:
    """Add a new task."""
    if due is None:
        task = Task(title=title, note=note)
    else:
        task = Task(title=title, note=note, due_date=due)

    _save(ctx, task)
    console.print(f"[green]Task added:[/green] {task.id[:SHORT_ID_LENGTH]} {escape(task.title)}")


@main.command("list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    """List all tasks in saved order."""
    tasks = _load_tasks(ctx)

    if not tasks:
        console.print("[dim]No tasks.[/dim]")
        return

    table = Table(title="Tasks", show_header=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("", width=1)
    table.add_column("Title", style="white")
    table.add_column("Due", style="dim", no_wrap=True)

    for task in tasks:
        icon = "[green]✓[/green]" if task.is_complete else "○"
        title = escape(task.title)
        if task.note:
            title = f"{title}\n[dim]{escape(task.note)}[/dim]"
        table.add_row(
            task.id[:SHORT_ID_LENGTH],
            icon,
            title,
            task.due_date.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)

    complete = sum(1 for t in tasks if t.is_complete)
    console.print(f"  {complete}/{len(tasks)} complete")


@main.command()
@click.argument("task_id")
@click.pass_context
def done(ctx: click.Context, task_id: str) -> None:
    """Mark a task as complete."""
    task = _find_task(ctx, task_id)
    task.mark_complete()
    _save(ctx, task)
    console.print(f"[green]Task completed:[/green] {escape(task.title)}")


@main.command()
@click.argument("task_id")
@click.pass_context
def reopen(ctx: click.Context, task_id: str) -> None:
    """Mark a completed task as not complete."""
    task = _find_task(ctx, task_id)
    task.mark_incomplete()
    _save(ctx, task)
    console.print(f"[yellow]Task reopened:[/yellow] {escape(task.title)}")


if __name__ == "__main__":
    main()
