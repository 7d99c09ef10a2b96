"""
FILE: taskflow/cli/commands/system.py
PURPOSE: System commands (version, seed, repl)
"""

import typer

# Import shared objects from main module
# These will be available after main.py imports this module
from ..main import app, console, error_console, get_store, __version__
from ...core.exceptions import TaskFlowError
from ...formatting import TaskFormatter


@app.command()
def version():
    """Show TaskFlow version."""
    console.print(f"TaskFlow v{__version__}")


@app.command()
def seed(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Load the demonstration tasks into an empty collection.

    Does nothing when any task already exists.
    """
    try:
        seeded = get_store(ctx).initialize_with_samples()

        if json_output:
            console.print_json(TaskFormatter.to_json_array(seeded))
        elif raw:
            for line in TaskFormatter.to_raw_lines(seeded):
                typer.echo(line)
        elif seeded:
            console.print(TaskFormatter.create_table(seeded, title="Sample tasks"))
            console.print(f"\n[green]✓ Seeded {len(seeded)} sample task(s)[/green]")
        else:
            console.print("[yellow]Collection is not empty; nothing seeded[/yellow]")

    except TaskFlowError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def repl(ctx: typer.Context):
    """Launch the interactive REPL (history and autocomplete)."""
    from ...repl import run_repl

    try:
        run_repl(ctx.obj)
    except TaskFlowError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
