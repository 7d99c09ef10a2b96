"""
FILE: taskflow/core/queries.py
PURPOSE: Pure query helpers over task sequences (filter, sort, board grouping, tags)
EXPORTS:
  - TaskFilter (dataclass)
  - matches(task, criteria) -> bool
  - filter_tasks(tasks, criteria) -> List[Task]
  - sort_tasks(tasks, sort_by, direction) -> List[Task]
  - group_by_status(tasks) -> Dict[str, List[Task]]
  - collect_tags(tasks) -> List[str]
DEPENDENCIES:
  - unicodedata (stdlib, title collation)
  - taskflow.core.models (Task, parse_timestamp, normalize_tags)
  - taskflow.core.constants
NOTES:
  - Single-pass predicate evaluation, no indexes (personal-scale data)
  - Never mutates the input sequence
  - Sorts rely on Python's stable sort; reverse=True keeps equal items in input order
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional
import unicodedata

from .constants import (
    PRIORITY_RANK,
    SORT_ASC,
    SORT_CREATED_AT,
    SORT_DUE_DATE,
    SORT_PRIORITY,
    SORT_TITLE,
    DEFAULT_SORT_KEY,
    DEFAULT_DIRECTION,
    VALID_STATUSES,
)
from .models import Task, normalize_tags, parse_timestamp

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)

# snake_case spellings accepted for sort keys
SORT_KEY_ALIASES = {
    "due_date": SORT_DUE_DATE,
    "created_at": SORT_CREATED_AT,
}


@dataclass
class TaskFilter:
    """
    Optional-field filter criteria.

    Empty values (None, "", []) impose no constraint.
    """

    status: Optional[str] = None
    priority: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    search: Optional[str] = None

    @classmethod
    def from_mapping(cls, criteria: Optional[Mapping[str, Any]]) -> "TaskFilter":
        """Build criteria from a plain dict such as {"status": "todo", "tags": ["work"]}."""
        criteria = criteria or {}
        unknown = set(criteria) - {"status", "priority", "tags", "search"}
        if unknown:
            raise TypeError(f"Unknown filter criteria: {', '.join(sorted(unknown))}")
        return cls(
            status=criteria.get("status") or None,
            priority=criteria.get("priority") or None,
            tags=normalize_tags(criteria.get("tags")),
            search=criteria.get("search") or None,
        )

    def is_empty(self) -> bool:
        return not (self.status or self.priority or self.tags or self.search)


def matches(task: Task, criteria: TaskFilter) -> bool:
    """True when the task satisfies every criterion that was provided."""
    if criteria.status and task.status != criteria.status:
        return False

    if criteria.priority and task.priority != criteria.priority:
        return False

    # All listed tags must be present (logical AND)
    if criteria.tags and not all(tag in task.tags for tag in criteria.tags):
        return False

    # Title OR description contains the search text
    if criteria.search:
        needle = criteria.search.casefold()
        if needle not in task.title.casefold() and needle not in task.description.casefold():
            return False

    return True


def filter_tasks(tasks: Iterable[Task], criteria: Optional[TaskFilter] = None) -> List[Task]:
    """Return the tasks matching ``criteria`` as a new list, in input order."""
    if criteria is None or criteria.is_empty():
        return list(tasks)
    return [task for task in tasks if matches(task, criteria)]


def _due_key(task: Task) -> Optional[datetime]:
    return parse_timestamp(task.due_date) if task.due_date else None


def _created_key(task: Task) -> datetime:
    return parse_timestamp(task.created_at) or _EARLIEST


def _priority_key(task: Task) -> int:
    return PRIORITY_RANK.get(task.priority, 0)


def _title_key(task: Task):
    # Case-insensitive, accent-aware collation with the raw title as tiebreak
    folded = unicodedata.normalize("NFKD", task.title).casefold()
    return (folded, task.title)


def sort_tasks(
    tasks: Iterable[Task],
    sort_by: Optional[str] = DEFAULT_SORT_KEY,
    direction: Optional[str] = DEFAULT_DIRECTION,
) -> List[Task]:
    """
    Return a new list of tasks ordered by ``sort_by``.

    Args:
        tasks: Tasks to sort (not modified)
        sort_by: 'dueDate', 'priority', 'title', or 'createdAt' (anything
                 else falls back to 'createdAt')
        direction: 'asc' for smallest/earliest first; anything else sorts
                   descending

    Notes:
        - Stable: equal elements keep their relative input order
        - Tasks without a due date always come after dated tasks when sorting
          by dueDate, whichever the direction
        - Priority ranks high=3, medium=2, low=1
    """
    items = list(tasks)
    descending = direction != SORT_ASC
    key = SORT_KEY_ALIASES.get(sort_by, sort_by)

    if key == SORT_DUE_DATE:
        dated = [task for task in items if _due_key(task) is not None]
        undated = [task for task in items if _due_key(task) is None]
        dated.sort(key=_due_key, reverse=descending)
        return dated + undated

    if key == SORT_PRIORITY:
        items.sort(key=_priority_key, reverse=descending)
    elif key == SORT_TITLE:
        items.sort(key=_title_key, reverse=descending)
    else:
        items.sort(key=_created_key, reverse=descending)
    return items


def group_by_status(tasks: Iterable[Task]) -> Dict[str, List[Task]]:
    """
    Group tasks into board columns.

    Returns:
        Dict with one key per status in board order (todo, in-progress,
        completed); columns with no tasks map to an empty list
    """
    columns: Dict[str, List[Task]] = {status: [] for status in VALID_STATUSES}
    for task in tasks:
        if task.status in columns:
            columns[task.status].append(task)
    return columns


def collect_tags(tasks: Iterable[Task]) -> List[str]:
    """Distinct tags across all tasks, in first-seen order."""
    seen: Dict[str, None] = {}
    for task in tasks:
        for tag in task.tags:
            seen.setdefault(tag, None)
    return list(seen)
