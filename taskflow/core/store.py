"""
FILE: taskflow/core/store.py
PURPOSE: Task Store - owns the persisted task collection and answers queries
EXPORTS:
  - TaskStore
    - get_all() -> List[Task]
    - get_by_id(task_id) -> Task | None
    - get_or_raise(task_id) -> Task
    - find_by_prefix(prefix) -> List[Task]
    - count() -> int
    - add(partial, **fields) -> Task
    - update(task_id, updates, **fields) -> Task | None
    - delete(task_id) -> bool
    - clear() -> int
    - filter(criteria, **kwargs) -> List[Task]
    - sort(tasks, sort_by, direction) -> List[Task]
    - query(criteria, sort_by, direction) -> List[Task]
    - board(criteria, sort_by, direction) -> Dict[str, List[Task]]
    - get_all_tags() -> List[str]
    - initialize_with_samples() -> List[Task]
DEPENDENCIES:
  - threading (stdlib, guards the read-modify-persist cycle)
  - taskflow.core.models (Task, create_task, normalize_fields)
  - taskflow.core.queries (filter/sort/grouping helpers)
  - taskflow.core.storage (StorageBackend)
  - taskflow.core.samples (seed data)
  - taskflow.core.exceptions
NOTES:
  - The store is the only writer of its backend
  - Every mutation re-reads the full collection, computes the next one, and
    writes it back in full; no partial writes
  - Absence is signalled with None/False, not exceptions (get_or_raise is
    the exception-raising variant for UI layers)
  - Persistence failures propagate to the caller unchanged
"""

from dataclasses import asdict, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional, Union
import logging
import threading

from .constants import (
    DEFAULT_DIRECTION,
    DEFAULT_SORT_KEY,
    VALID_PRIORITIES,
    VALID_STATUSES,
)
from .exceptions import InvalidInputError, InvalidRecordError, TaskNotFoundError
from .models import Clock, Task, create_task, format_timestamp, normalize_fields, parse_timestamp
from .queries import TaskFilter, collect_tags, filter_tasks, group_by_status, sort_tasks
from .samples import sample_task_fields
from .storage import StorageBackend

logger = logging.getLogger(__name__)

Criteria = Union[TaskFilter, Mapping[str, Any], None]

# Attributes an update may never change
PROTECTED_FIELDS = ("id", "created_at", "updated_at")

TIMESTAMP_RESOLUTION = timedelta(milliseconds=1)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _validate(task: Task) -> None:
    """Enforce the enumerated-field invariants before anything is persisted."""
    if task.status not in VALID_STATUSES:
        raise InvalidInputError(
            f"Invalid status '{task.status}'. Must be one of: {', '.join(VALID_STATUSES)}"
        )
    if task.priority not in VALID_PRIORITIES:
        raise InvalidInputError(
            f"Invalid priority '{task.priority}'. Must be one of: {', '.join(VALID_PRIORITIES)}"
        )
    if not isinstance(task.title, str) or not isinstance(task.description, str):
        raise InvalidInputError("Task title and description must be strings")


def _coerce_criteria(criteria: Criteria, overrides: Mapping[str, Any]) -> TaskFilter:
    if isinstance(criteria, TaskFilter):
        base = asdict(criteria)
    else:
        base = dict(criteria or {})
    base.update(overrides)
    return TaskFilter.from_mapping(base)


class TaskStore:
    """
    Task collection backed by a single persistence slot.

    Args:
        backend: Persistence backend (JsonFileBackend, MemoryBackend, ...)
        clock: Optional callable returning the current time; defaults to UTC now

    Thread-safety:
    - a re-entrant lock serializes each read-modify-persist cycle, so threads
      sharing one store cannot lose updates
    - separate processes sharing a slot are not coordinated (last write wins)
    """

    def __init__(self, backend: StorageBackend, clock: Optional[Clock] = None) -> None:
        self._backend = backend
        self._clock = clock or _utc_now
        self._lock = threading.RLock()
        logger.info("TaskStore ready backend=%r", backend)

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    # ---- low-level helpers ----

    def _load(self) -> List[Task]:
        records = self._backend.read()
        if records is None:
            return []
        tasks = [Task.from_dict(record) for record in records]
        seen = set()
        for task in tasks:
            if task.id in seen:
                raise InvalidRecordError(f"Task id {task.id} appears more than once", task.to_dict())
            seen.add(task.id)
        return tasks

    def _save(self, tasks: List[Task]) -> None:
        self._backend.write([task.to_dict() for task in tasks])

    def _next_update_stamp(self, task: Task) -> str:
        """Current time, nudged forward so it is strictly after the task's last stamp."""
        stamp = parse_timestamp(format_timestamp(self._clock()))
        previous = [
            ts for ts in (parse_timestamp(task.created_at), parse_timestamp(task.updated_at)) if ts
        ]
        if previous and stamp <= max(previous):
            stamp = max(previous) + TIMESTAMP_RESOLUTION
        return format_timestamp(stamp)

    # ---- queries ----

    def get_all(self) -> List[Task]:
        """
        Return every task in storage order.

        Returns:
            List of tasks; empty if nothing has been persisted yet

        Raises:
            PersistenceError: If the slot cannot be read or is corrupt
        """
        with self._lock:
            return self._load()

    def get_by_id(self, task_id: str) -> Optional[Task]:
        """
        Fetch single task by ID.

        Returns:
            Task object if found, None otherwise
        """
        for task in self.get_all():
            if task.id == task_id:
                return task
        return None

    def get_or_raise(self, task_id: str) -> Task:
        """Like get_by_id, but raises TaskNotFoundError when absent."""
        task = self.get_by_id(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def find_by_prefix(self, prefix: str) -> List[Task]:
        """
        Tasks whose id starts with ``prefix``.

        An exact id match is returned on its own even if it is also a
        prefix of other ids. An empty prefix matches nothing.
        """
        if not prefix:
            return []
        tasks = self.get_all()
        for task in tasks:
            if task.id == prefix:
                return [task]
        return [task for task in tasks if task.id.startswith(prefix)]

    def count(self) -> int:
        return len(self.get_all())

    def filter(self, criteria: Criteria = None, **kwargs: Any) -> List[Task]:
        """
        Return tasks matching all provided criteria.

        Args:
            criteria: TaskFilter or mapping with any of status, priority,
                      tags (all required), search (title or description)
            **kwargs: Same keys as keywords; override ``criteria``

        Returns:
            New list in storage order; the collection is not modified
        """
        return filter_tasks(self.get_all(), _coerce_criteria(criteria, kwargs))

    def sort(
        self,
        tasks: List[Task],
        sort_by: Optional[str] = DEFAULT_SORT_KEY,
        direction: Optional[str] = DEFAULT_DIRECTION,
    ) -> List[Task]:
        """Return ``tasks`` ordered by ``sort_by``. See queries.sort_tasks."""
        return sort_tasks(tasks, sort_by, direction)

    def query(
        self,
        criteria: Criteria = None,
        sort_by: Optional[str] = DEFAULT_SORT_KEY,
        direction: Optional[str] = DEFAULT_DIRECTION,
    ) -> List[Task]:
        """Filter then sort; newest first by default."""
        return self.sort(self.filter(criteria), sort_by, direction)

    def board(
        self,
        criteria: Criteria = None,
        sort_by: Optional[str] = DEFAULT_SORT_KEY,
        direction: Optional[str] = DEFAULT_DIRECTION,
    ) -> Dict[str, List[Task]]:
        """
        Kanban view of the collection.

        Returns:
            Dict of status -> tasks, always holding the three status columns
            in board order, each column sorted as requested
        """
        return group_by_status(self.query(criteria, sort_by, direction))

    def get_all_tags(self) -> List[str]:
        """Distinct tags across the collection, in first-seen order."""
        return collect_tags(self.get_all())

    # ---- mutations ----

    def add(self, partial: Optional[Mapping[str, Any]] = None, **fields: Any) -> Task:
        """
        Create a task and append it to the collection.

        Args:
            partial: Any subset of task attributes (snake_case or camelCase)
            **fields: Attribute values as keywords

        Returns:
            The newly created Task

        Raises:
            InvalidInputError: If status/priority are not valid values, or a
                caller-supplied id is already taken
            PersistenceError: If the collection cannot be read or written
        """
        task = create_task(partial, clock=self._clock, **fields)
        # New tasks have never been updated
        task.updated_at = None
        _validate(task)

        with self._lock:
            tasks = self._load()
            if any(existing.id == task.id for existing in tasks):
                raise InvalidInputError(f"Task id {task.id} already exists")
            tasks.append(task)
            self._save(tasks)

        logger.debug("Task added id=%s status=%s priority=%s", task.id, task.status, task.priority)
        return task

    def update(
        self,
        task_id: str,
        updates: Optional[Mapping[str, Any]] = None,
        **fields: Any,
    ) -> Optional[Task]:
        """
        Shallow-merge ``updates`` onto an existing task.

        Returns:
            The updated Task, or None if no task has ``task_id`` (nothing is
            written in that case)

        Raises:
            InvalidInputError: If the merged task has an invalid status/priority
            PersistenceError: If the collection cannot be read or written

        Notes:
            - id and created_at are never changed, even if present in updates
            - updated_at is stamped to now, strictly after the previous stamp
        """
        changes = normalize_fields(updates, fields)
        for name in PROTECTED_FIELDS:
            changes.pop(name, None)
        for name in ("title", "description"):
            if name in changes and changes[name] is None:
                changes[name] = ""

        with self._lock:
            tasks = self._load()
            for index, task in enumerate(tasks):
                if task.id == task_id:
                    break
            else:
                logger.debug("Update skipped, task not found id=%s", task_id)
                return None

            updated = replace(task, **changes)
            updated.updated_at = self._next_update_stamp(task)
            _validate(updated)

            tasks[index] = updated
            self._save(tasks)

        logger.debug("Task updated id=%s fields=%s", task_id, ",".join(sorted(changes)))
        return updated

    def delete(self, task_id: str) -> bool:
        """
        Remove a task permanently.

        Returns:
            True if a task was removed, False if no task had ``task_id``
            (idempotent, nothing is written)
        """
        with self._lock:
            tasks = self._load()
            remaining = [task for task in tasks if task.id != task_id]
            if len(remaining) == len(tasks):
                return False
            self._save(remaining)

        logger.debug("Task deleted id=%s", task_id)
        return True

    def clear(self) -> int:
        """Remove every task. Returns how many were removed."""
        with self._lock:
            removed = len(self._load())
            self._save([])

        logger.debug("Cleared %d task(s)", removed)
        return removed

    def initialize_with_samples(self) -> List[Task]:
        """
        Seed demonstration tasks into an empty collection.

        Returns:
            The seeded tasks, or an empty list if the collection already held
            any task (no-op)
        """
        with self._lock:
            if self._load():
                return []
            now = self._clock()
            seeded = [create_task(fields, clock=self._clock) for fields in sample_task_fields(now)]
            self._save(seeded)

        logger.info("Seeded %d sample task(s)", len(seeded))
        return seeded
