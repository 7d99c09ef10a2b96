"""
FILE: taskflow/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

# Export all command handlers for easy importing
from .tasks import (
    add,
    show,
    edit,
    mv,
    done,
    rm,
)
from .views import (
    ls,
    board,
    tags,
)
from .system import (
    seed,
    version,
    repl,
)

__all__ = [
    "add",
    "show",
    "edit",
    "mv",
    "done",
    "rm",
    "ls",
    "board",
    "tags",
    "seed",
    "version",
    "repl",
]
