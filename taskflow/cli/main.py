"""
FILE: taskflow/cli/main.py
PURPOSE: Typer-based CLI for task management commands
EXPORTS:
  - app (Typer application)
  - main() (entry point)
  - console, error_console (rich consoles shared by command modules)
  - CliState (lazy TaskStore holder stored on ctx.obj)
  - get_store(ctx) -> TaskStore
  - resolve_task(store, ref) -> Task
  - check_choice(value, choices, name) -> value
  - check_title(title) -> str
  - parse_due(value) -> str | None
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output)
  - taskflow.config (settings from environment)
  - taskflow.logging_setup (logging handlers)
  - taskflow.core (TaskStore, JsonFileBackend, exceptions)
NOTES:
  - All listing commands support --json and --raw flags
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - Commands accept full task IDs or any unique ID prefix
"""

from pathlib import Path
from typing import Optional, Sequence

import typer
from rich.console import Console

from .. import __version__
from ..config import Settings, get_settings
from ..core.exceptions import InvalidInputError, TaskNotFoundError
from ..core.models import Task, format_timestamp, parse_timestamp
from ..core.storage import JsonFileBackend
from ..core.store import TaskStore
from ..logging_setup import setup_logging

# Typer app setup
app = typer.Typer(
    name="taskflow",
    help="Single-user task tracker with list and board views",
    add_completion=False,
)

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)


class CliState:
    """Per-invocation state; the store is only opened when a command needs it."""

    def __init__(self, settings: Settings, data_dir: Optional[Path] = None) -> None:
        self.settings = settings
        self.data_dir = data_dir or settings.data_dir
        self._store: Optional[TaskStore] = None

    @property
    def store(self) -> TaskStore:
        if self._store is None:
            backend = JsonFileBackend(self.data_dir, self.settings.storage_key)
            first_run = not backend.path.exists()
            self._store = TaskStore(backend)
            if first_run and self.settings.seed_on_first_run:
                self._store.initialize_with_samples()
        return self._store


@app.callback()
def default_command(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        help="Directory holding task storage (default: ~/.taskflow or TASKFLOW_DATA_DIR)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """
    TaskFlow: create, filter, sort, and view tasks as a list or a board.
    """
    # The REPL passes its own state in so every line shares one store
    if isinstance(ctx.obj, CliState):
        return

    settings = get_settings()
    setup_logging("DEBUG" if verbose else settings.log_level, settings.log_file)
    ctx.obj = CliState(settings, data_dir.expanduser() if data_dir else None)


def get_store(ctx: typer.Context) -> TaskStore:
    state = ctx.obj
    if state is None:
        state = ctx.obj = CliState(get_settings())
    return state.store


def resolve_task(store: TaskStore, ref: str) -> Task:
    """
    Find a task by full ID or unique ID prefix.

    Raises:
        TaskNotFoundError: If nothing matches
        InvalidInputError: If the prefix matches more than one task
    """
    matches = store.find_by_prefix(ref.strip())
    if not matches:
        raise TaskNotFoundError(ref)
    if len(matches) > 1:
        raise InvalidInputError(
            f"ID prefix '{ref}' is ambiguous ({len(matches)} tasks match); use more characters"
        )
    return matches[0]


def check_choice(value: Optional[str], choices: Sequence[str], name: str) -> Optional[str]:
    """Validate an enumerated option; None passes through."""
    if value is None:
        return None
    value = value.strip().lower()
    if value not in choices:
        raise typer.BadParameter(f"Invalid {name} '{value}'. Must be one of: {', '.join(choices)}")
    return value


def check_title(title: str) -> str:
    """Trim and reject empty titles."""
    title = title.strip()
    if not title:
        raise InvalidInputError("Task title cannot be empty")
    return title


def parse_due(value: Optional[str]) -> Optional[str]:
    """Parse a --due value (YYYY-MM-DD or full ISO-8601) into a stored timestamp."""
    if value is None:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise typer.BadParameter(f"Invalid date '{value}'. Use YYYY-MM-DD or ISO-8601.")
    return format_timestamp(parsed)


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (  # noqa: E402
    # Task commands
    add,
    show,
    edit,
    mv,
    done,
    rm,
    # View commands
    ls,
    board,
    tags,
    # System commands
    seed,
    version,
    repl,
)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
