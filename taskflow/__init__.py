"""
FILE: taskflow/__init__.py
PURPOSE: TaskFlow - single-user task tracker with list and board views
EXPORTS:
  - __version__
  - TaskStore, Task, TaskFilter, create_task
  - JsonFileBackend, MemoryBackend
NOTES:
  - The core (taskflow.core) has no third-party dependencies; the CLI uses
    typer and rich
"""

from .core import (
    JsonFileBackend,
    MemoryBackend,
    Task,
    TaskFilter,
    TaskStore,
    create_task,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "JsonFileBackend",
    "MemoryBackend",
    "Task",
    "TaskFilter",
    "TaskStore",
    "create_task",
]
