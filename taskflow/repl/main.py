"""
FILE: taskflow/repl/main.py
PURPOSE: Interactive REPL that runs CLI commands against one open store
EXPORTS:
  - execute_line(line, state, command) -> bool
  - run_repl(state) - Main REPL loop
DEPENDENCIES:
  - prompt_toolkit (REPL interface, history, completion)
  - rich (formatted output)
  - taskflow.cli.main (app, CliState)
  - taskflow.repl.completer (autocomplete)
NOTES:
  - Each line is split like a shell command and run through the same Typer
    app as the command line, so output and errors are identical
  - Commands run in standalone mode; the SystemExit they end with is caught
    so a failing command never ends the session
  - The CliState is shared, so the store is opened once per session
  - Command history is in-memory only
  - Ctrl+D or "exit"/"quit" to exit
  - Without a TTY (pipes, tests) falls back to plain input()
"""

import logging
import shlex
import sys
from typing import Any, Optional

import typer
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console

from ..cli.main import CliState, app
from .completer import create_completer

logger = logging.getLogger(__name__)

console = Console()

PROMPT = "taskflow> "


def execute_line(line: str, state: CliState, command: Optional[Any] = None) -> bool:
    """
    Run one REPL line.

    Args:
        line: Raw user input, e.g. 'add "Write docs" -p high'
        state: Shared CLI state holding the open store
        command: Command object built from the Typer app (built on demand)

    Returns:
        False when the user asked to leave, True otherwise
    """
    try:
        args = shlex.split(line)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        return True

    if not args:
        return True

    name = args[0].lower()
    if name in ("exit", "quit"):
        return False
    if name == "help":
        args = ["--help"]
    elif name == "repl":
        console.print("[yellow]Already in the REPL[/yellow]")
        return True

    command = command or typer.main.get_command(app)
    try:
        command.main(args=args, prog_name="taskflow", obj=state, standalone_mode=True)
    except SystemExit as e:
        logger.debug("REPL command %r exited with %s", name, e.code)

    return True


def run_repl(state: CliState) -> None:
    """
    Main REPL loop.

    Exits on:
    - Ctrl+D (EOFError)
    - "exit" or "quit" commands
    """
    command = typer.main.get_command(app)
    has_tty = sys.stdin.isatty() and sys.stdout.isatty()

    session = None
    if has_tty:
        session = PromptSession(
            history=InMemoryHistory(),
            completer=create_completer(
                task_ids=lambda: [task.id for task in state.store.get_all()],
                tags=state.store.get_all_tags,
            ),
            complete_while_typing=True,
        )

    console.print("[bold cyan]TaskFlow REPL[/bold cyan] - Type 'help' for commands, 'exit' to quit")
    if session is None:
        console.print("[dim](Running in simple mode - no autocomplete)[/dim]")
    console.print()

    while True:
        try:
            user_input = session.prompt(PROMPT) if session else input(PROMPT)
            if not execute_line(user_input, state, command):
                break
        except KeyboardInterrupt:
            console.print("[dim]^C (Press Ctrl+D or type 'exit' to quit)[/dim]")
            continue
        except EOFError:
            console.print()
            break

    console.print("[dim]Goodbye![/dim]")
