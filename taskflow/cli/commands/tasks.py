"""
FILE: taskflow/cli/commands/tasks.py
PURPOSE: Task management commands (add, show, edit, mv, done, rm)
"""

import json
from typing import List, Optional

import typer

from ..main import (
    app,
    console,
    error_console,
    check_choice,
    check_title,
    get_store,
    parse_due,
    resolve_task,
)
from ...core.constants import (
    STATUS_COMPLETED,
    STATUS_LABELS,
    VALID_PRIORITIES,
    VALID_STATUSES,
)
from ...core.exceptions import (
    TaskFlowError,
    TaskNotFoundError,
    InvalidInputError,
)
from ...core.models import Task
from ...formatting import TaskFormatter, parse_id_list, parse_tag_list, short_id


@app.command()
def add(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Task title"),
    description: str = typer.Option("", "--desc", "-d", help="Longer description"),
    priority: str = typer.Option("medium", "--priority", "-p", help="low, medium, or high"),
    status: str = typer.Option("todo", "--status", "-s", help="todo, in-progress, or completed"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD or ISO-8601)"),
    tags: Optional[str] = typer.Option(None, "--tags", "-t", help="Comma-separated tags"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new task.

    Example:
        taskflow add "Write documentation"
        taskflow add "Fix bug" -p high --due 2025-03-01 --tags work,urgent
    """
    try:
        task = get_store(ctx).add(
            title=check_title(title),
            description=description.strip(),
            priority=check_choice(priority, VALID_PRIORITIES, "priority"),
            status=check_choice(status, VALID_STATUSES, "status"),
            due_date=parse_due(due),
            tags=parse_tag_list(tags),
        )

        if json_output:
            console.print_json(task.to_json())
        elif raw:
            typer.echo(f"{task.id}: {task.title}")
        else:
            console.print(f"[green]✓ Created task [bold]{short_id(task.id)}[/bold]:[/green] {task.title}")

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except TaskFlowError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def show(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix) to view"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show full details for a task including description.

    Example:
        taskflow show 3f2a
    """
    try:
        task = resolve_task(get_store(ctx), task_id)

        if json_output:
            console.print_json(task.to_json())
            return

        if raw:
            lines = [
                f"Task {task.id}",
                f"Title: {task.title}",
                f"Description: {task.description}" if task.description else None,
                f"Status: {task.status}",
                f"Priority: {task.priority}",
                f"Due: {task.due_date}" if task.due_date else None,
                f"Tags: {', '.join(task.tags)}" if task.tags else None,
                f"Created: {task.created_at}",
                f"Updated: {task.updated_at}" if task.updated_at else None,
            ]
            for line in lines:
                if line is not None:
                    typer.echo(line)
            return

        console.print(TaskFormatter.create_details_panel(task))

    except TaskFlowError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def edit(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID (or unique prefix) to edit"),
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    description: Optional[str] = typer.Option(None, "--desc", "-d", help="New description"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="low, medium, or high"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="todo, in-progress, or completed"),
    due: Optional[str] = typer.Option(None, "--due", help="New due date (YYYY-MM-DD or ISO-8601)"),
    no_due: bool = typer.Option(False, "--no-due", help="Clear the due date"),
    tags: Optional[str] = typer.Option(None, "--tags", "-t", help="Replace tags (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Update one or more fields of a task.

    Example:
        taskflow edit 3f2a --title "Updated task title"
        taskflow edit 3f2a --priority high --tags work,client
        taskflow edit 3f2a --no-due
    """
    try:
        if due is not None and no_due:
            raise InvalidInputError("Use either --due or --no-due, not both")

        updates = {}
        if title is not None:
            updates["title"] = check_title(title)
        if description is not None:
            updates["description"] = description.strip()
        if priority is not None:
            updates["priority"] = check_choice(priority, VALID_PRIORITIES, "priority")
        if status is not None:
            updates["status"] = check_choice(status, VALID_STATUSES, "status")
        if due is not None:
            updates["due_date"] = parse_due(due)
        if no_due:
            updates["due_date"] = None
        if tags is not None:
            updates["tags"] = parse_tag_list(tags)

        if not updates:
            raise InvalidInputError("Nothing to update; pass at least one field option")

        store = get_store(ctx)
        task = store.update(resolve_task(store, task_id).id, updates)
        if task is None:
            raise TaskNotFoundError(task_id)

        if json_output:
            console.print_json(task.to_json())
        elif raw:
            typer.echo(f"Updated task {task.id}: {task.title}")
        else:
            console.print(f"[blue]✎[/blue] Updated task {short_id(task.id)}: {task.title}")

    except TaskNotFoundError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except TaskFlowError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


def _move_tasks(ctx: typer.Context, task_ids: str, status: str) -> List[Task]:
    """Set ``status`` on each listed task; prints per-task errors, returns moved tasks."""
    store = get_store(ctx)
    moved = []
    errors = []

    for ref in parse_id_list(task_ids):
        try:
            task = store.update(resolve_task(store, ref).id, status=status)
            if task is None:
                raise TaskNotFoundError(ref)
            moved.append(task)
        except (TaskNotFoundError, InvalidInputError) as e:
            errors.append(str(e))

    for error in errors:
        error_console.print(f"[red]Error:[/red] {error}")
    if errors and not moved:
        raise typer.Exit(1)
    return moved


def _print_moved(tasks: List[Task], status: str, json_output: bool, raw: bool) -> None:
    if json_output:
        console.print_json(json.dumps([task.to_dict() for task in tasks]))
    elif raw:
        for task in tasks:
            typer.echo(f"{task.id}: {status}")
    else:
        label = STATUS_LABELS[status]
        for task in tasks:
            console.print(f"[blue]→[/blue] Moved {short_id(task.id)} to [cyan]{label}[/cyan]: {task.title}")


@app.command()
def mv(
    ctx: typer.Context,
    task_ids: str = typer.Argument(..., help="Task ID(s) to move (comma-separated)"),
    status: str = typer.Argument(..., help="Target column: todo, in-progress, or completed"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Move one or more tasks to a different board column.

    Example:
        taskflow mv 3f2a in-progress
        taskflow mv 3f2a,9bc1 todo
    """
    try:
        status = check_choice(status, VALID_STATUSES, "status")
        moved = _move_tasks(ctx, task_ids, status)
        _print_moved(moved, status, json_output, raw)
    except TaskFlowError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def done(
    ctx: typer.Context,
    task_ids: str = typer.Argument(..., help="Task ID(s) to complete (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Mark one or more tasks as completed.

    Example:
        taskflow done 3f2a
        taskflow done 3f2a,9bc1
    """
    try:
        moved = _move_tasks(ctx, task_ids, STATUS_COMPLETED)
        _print_moved(moved, STATUS_COMPLETED, json_output, raw)
    except TaskFlowError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def rm(
    ctx: typer.Context,
    task_ids: str = typer.Argument(..., help="Task ID(s) to delete (comma-separated or '*' for all)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete one or more tasks permanently.

    Supports:
    - taskflow rm 3f2a          - delete single task
    - taskflow rm 3f2a,9bc1     - delete multiple tasks
    - taskflow rm '*'           - delete all tasks

    Confirms before deleting multiple tasks (use -y to skip).
    """
    try:
        store = get_store(ctx)

        # Handle wildcard: delete all tasks
        if task_ids.strip() == "*":
            total = store.count()
            if not total:
                console.print("[yellow]No tasks to delete[/yellow]")
                return

            if not yes:
                console.print(f"[yellow]About to delete {total} task(s)[/yellow]")
                if not typer.confirm("Continue?", default=False):
                    console.print("[yellow]Cancelled[/yellow]")
                    return

            removed = store.clear()
            if json_output:
                console.print_json(json.dumps({"deleted": removed}))
            elif raw:
                typer.echo(f"Deleted {removed} task(s)")
            else:
                console.print(f"[green]✓ Deleted {removed} task(s)[/green]")
            return

        # Resolve every ID before deleting anything
        targets: List[Task] = []
        errors = []
        for ref in parse_id_list(task_ids):
            try:
                targets.append(resolve_task(store, ref))
            except (TaskNotFoundError, InvalidInputError) as e:
                errors.append(str(e))

        if not targets:
            for error in errors or ["No task IDs given"]:
                error_console.print(f"[red]Error:[/red] {error}")
            raise typer.Exit(1)

        if not yes and len(targets) > 1:
            console.print(f"[yellow]About to delete {len(targets)} task(s)[/yellow]")
            if not typer.confirm("Continue?", default=False):
                console.print("[yellow]Cancelled[/yellow]")
                return

        deleted = [task for task in targets if store.delete(task.id)]

        if json_output:
            console.print_json(json.dumps([{"id": t.id, "title": t.title} for t in deleted]))
        elif raw:
            for task in deleted:
                typer.echo(f"Deleted task {task.id}: {task.title}")
        else:
            for task in deleted:
                console.print(f"[red]✗[/red] Deleted task {short_id(task.id)}: {task.title}")

        for error in errors:
            error_console.print(f"[red]Error:[/red] {error}")

    except TaskFlowError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
