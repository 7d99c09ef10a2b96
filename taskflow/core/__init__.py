"""
FILE: taskflow/core/__init__.py
PURPOSE: Task storage and query engine (Task Model + Task Store)
EXPORTS:
  - Task, create_task (models)
  - TaskFilter (queries)
  - TaskStore (store)
  - StorageBackend, JsonFileBackend, MemoryBackend (storage)
"""

from .models import Task, create_task
from .queries import TaskFilter
from .storage import JsonFileBackend, MemoryBackend, StorageBackend
from .store import TaskStore

__all__ = [
    "Task",
    "create_task",
    "TaskFilter",
    "TaskStore",
    "StorageBackend",
    "JsonFileBackend",
    "MemoryBackend",
]
