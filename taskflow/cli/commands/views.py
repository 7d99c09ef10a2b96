"""
FILE: taskflow/cli/commands/views.py
PURPOSE: Read-only view commands (ls, board, tags)
"""

import json
from typing import Optional

import typer

from ..main import app, console, error_console, check_choice, get_store
from ...core.constants import (
    SORT_CREATED_AT,
    SORT_DUE_DATE,
    VALID_DIRECTIONS,
    VALID_PRIORITIES,
    VALID_SORT_KEYS,
    VALID_STATUSES,
)
from ...core.exceptions import TaskFlowError, InvalidInputError
from ...core.queries import TaskFilter
from ...formatting import TaskFormatter, parse_tag_list, short_id

# Spellings accepted by --sort (matched case-insensitively)
SORT_OPTIONS = {key.lower(): key for key in VALID_SORT_KEYS}
SORT_OPTIONS.update({
    "due": SORT_DUE_DATE,
    "due_date": SORT_DUE_DATE,
    "created": SORT_CREATED_AT,
    "created_at": SORT_CREATED_AT,
})


def _build_filter(
    status: Optional[str],
    priority: Optional[str],
    tags: Optional[str],
    search: Optional[str],
) -> TaskFilter:
    return TaskFilter(
        status=check_choice(status, VALID_STATUSES, "status"),
        priority=check_choice(priority, VALID_PRIORITIES, "priority"),
        tags=parse_tag_list(tags),
        search=search or None,
    )


def _sort_key(sort: str) -> str:
    key = SORT_OPTIONS.get(sort.strip().lower())
    if key is None:
        raise typer.BadParameter(
            f"Invalid sort key '{sort}'. Must be one of: due, priority, title, created "
            f"(or {', '.join(VALID_SORT_KEYS)})"
        )
    return key


@app.command()
def ls(
    ctx: typer.Context,
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Only tasks with this status"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="Only tasks with this priority"),
    tags: Optional[str] = typer.Option(None, "--tags", "-t", help="Only tasks carrying all these tags (comma-separated)"),
    search: Optional[str] = typer.Option(None, "--search", "-q", help="Case-insensitive text in title or description"),
    sort: str = typer.Option("created", "--sort", help="due, priority, title, or created"),
    direction: str = typer.Option("desc", "--dir", help="asc or desc"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks, newest first by default.

    Example:
        taskflow ls
        taskflow ls --status todo --tags work
        taskflow ls --search proposal
        taskflow ls --sort due --dir asc
        taskflow ls --json
    """
    try:
        criteria = _build_filter(status, priority, tags, search)
        tasks = get_store(ctx).query(
            criteria,
            sort_by=_sort_key(sort),
            direction=check_choice(direction, VALID_DIRECTIONS, "direction"),
        )

        if json_output:
            console.print_json(TaskFormatter.to_json_array(tasks))

        elif raw:
            # Plain text, one per line
            for line in TaskFormatter.to_raw_lines(tasks):
                typer.echo(line)

        else:
            if not tasks:
                message = "No tasks found" if criteria.is_empty() else "No tasks match the filters"
                console.print(f"[dim]{message}[/dim]")
                return

            console.print(TaskFormatter.create_table(tasks))
            console.print(f"\n[dim]Total: {len(tasks)} task(s)[/dim]")

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except TaskFlowError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def board(
    ctx: typer.Context,
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="Only tasks with this priority"),
    tags: Optional[str] = typer.Option(None, "--tags", "-t", help="Only tasks carrying all these tags (comma-separated)"),
    search: Optional[str] = typer.Option(None, "--search", "-q", help="Case-insensitive text in title or description"),
    sort: str = typer.Option("created", "--sort", help="Order within each column: due, priority, title, or created"),
    direction: str = typer.Option("desc", "--dir", help="asc or desc"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show tasks as a kanban board with one column per status.

    Example:
        taskflow board
        taskflow board --tags work --sort priority
    """
    try:
        columns = get_store(ctx).board(
            _build_filter(None, priority, tags, search),
            sort_by=_sort_key(sort),
            direction=check_choice(direction, VALID_DIRECTIONS, "direction"),
        )

        if json_output:
            console.print_json(TaskFormatter.board_to_json(columns))

        elif raw:
            for status, tasks in columns.items():
                typer.echo(f"{status} ({len(tasks)})")
                for task in tasks:
                    typer.echo(f"  {short_id(task.id)}: {task.title}")

        else:
            console.print(TaskFormatter.create_board(columns))

    except TaskFlowError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def tags(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List every distinct tag in use.
    """
    try:
        all_tags = get_store(ctx).get_all_tags()

        if json_output:
            console.print_json(json.dumps(all_tags))
        elif raw:
            for tag in all_tags:
                typer.echo(tag)
        elif not all_tags:
            console.print("[dim]No tags yet[/dim]")
        else:
            console.print("  ".join(f"[magenta]#{tag}[/magenta]" for tag in all_tags))

    except TaskFlowError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)
