"""
FILE: taskflow/core/models.py
PURPOSE: Task domain model and the factory that builds well-formed tasks
EXPORTS:
  - Task (dataclass)
  - create_task(partial, **fields) -> Task
  - normalize_fields(partial, fields) -> dict
  - normalize_tags(tags) -> List[str]
  - now_iso(clock) -> str
  - format_timestamp(moment) -> str
  - parse_timestamp(value) -> datetime | None
DEPENDENCIES:
  - dataclasses (stdlib)
  - datetime (stdlib)
  - json (stdlib)
  - re (stdlib)
  - uuid (stdlib)
  - taskflow.core.constants
  - taskflow.core.exceptions (InvalidRecordError)
NOTES:
  - Python attributes are snake_case; persisted records use camelCase keys
  - Timestamps stored as ISO-8601 strings (UTC, millisecond precision, trailing Z)
  - create_task does no enum validation; those checks live in the store
"""

from dataclasses import dataclass, asdict, field, fields as dataclass_fields
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional
import json
import logging
import re
import uuid

from .constants import DEFAULT_STATUS, DEFAULT_PRIORITY, VALID_STATUSES, VALID_PRIORITIES
from .exceptions import InvalidInputError, InvalidRecordError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# Seconds with a fractional part of any length
FRACTION_PATTERN = re.compile(r"(:\d{2})\.(\d+)")

# Persisted (camelCase) key -> attribute name
FIELD_ALIASES = {
    "dueDate": "due_date",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}
PERSISTED_KEYS = {attr: key for key, attr in FIELD_ALIASES.items()}


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as a UTC ISO-8601 instant, e.g. 2024-01-01T09:30:00.000Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def now_iso(clock: Optional[Clock] = None) -> str:
    """Current time as an ISO-8601 instant string."""
    moment = clock() if clock else datetime.now(timezone.utc)
    return format_timestamp(moment)


def _pad_fraction(match: "re.Match") -> str:
    return f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 string into an aware datetime.

    Accepts full instants ("2024-01-01T09:30:00.000Z"), offsets, naive
    timestamps and date-only values ("2024-01-01" -> midnight). Naive values
    are treated as UTC.

    Returns:
        Aware datetime, or None for empty or unparseable input
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        # fromisoformat before 3.11 only takes 3 or 6 fractional digits
        text = FRACTION_PATTERN.sub(_pad_fraction, text, count=1)
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def normalize_tags(tags: Any) -> List[str]:
    """
    Turn user-supplied tags into a duplicate-free list.

    A string is read as a comma-separated list. Order of first appearance
    is kept for display.
    """
    if not tags:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    elif not isinstance(tags, (list, tuple, set)):
        raise InvalidInputError(f"Tags must be a list of strings, got {type(tags).__name__}")
    cleaned = (str(tag).strip() for tag in tags)
    return list(dict.fromkeys(tag for tag in cleaned if tag))


@dataclass
class Task:
    """A unit of work with status, priority, and scheduling metadata."""

    id: str
    title: str = ""
    description: str = ""
    status: str = DEFAULT_STATUS
    priority: str = DEFAULT_PRIORITY
    due_date: Optional[str] = None
    created_at: str = ""
    updated_at: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, record: Any) -> "Task":
        """Convert a persisted record to a Task."""
        if not isinstance(record, Mapping):
            raise InvalidRecordError(
                f"Task record must be an object, got {type(record).__name__}", record
            )
        task_id = record.get("id")
        if not isinstance(task_id, str) or not task_id:
            raise InvalidRecordError("Task record has no id", record)
        tags = record.get("tags") or []
        if not isinstance(tags, list):
            raise InvalidRecordError(f"Task {task_id} has malformed tags", record)
        status = record.get("status") or DEFAULT_STATUS
        if status not in VALID_STATUSES:
            raise InvalidRecordError(f"Task {task_id} has unknown status '{status}'", record)
        priority = record.get("priority") or DEFAULT_PRIORITY
        if priority not in VALID_PRIORITIES:
            raise InvalidRecordError(f"Task {task_id} has unknown priority '{priority}'", record)

        return cls(
            id=task_id,
            title=str(record.get("title") or ""),
            description=str(record.get("description") or ""),
            status=status,
            priority=priority,
            due_date=record.get("dueDate"),
            created_at=str(record.get("createdAt") or ""),
            updated_at=record.get("updatedAt"),
            tags=[str(tag) for tag in tags],
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted (camelCase) record."""
        data = asdict(self)
        return {PERSISTED_KEYS.get(key, key): value for key, value in data.items()}

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


_ATTRIBUTES = tuple(f.name for f in dataclass_fields(Task))


def normalize_fields(
    partial: Optional[Mapping[str, Any]] = None, fields: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """
    Merge a partial mapping and keyword fields into attribute-named values.

    Keys may be attribute names (due_date) or persisted names (dueDate).
    Keyword fields win over the mapping. Unknown keys are dropped.
    """
    merged: Dict[str, Any] = {}
    for source in (partial or {}, fields or {}):
        for key, value in source.items():
            name = FIELD_ALIASES.get(key, key)
            if name not in _ATTRIBUTES:
                logger.warning("Ignoring unknown task field %r", key)
                continue
            if name == "tags":
                value = normalize_tags(value)
            elif isinstance(value, datetime):
                value = format_timestamp(value)
            elif isinstance(value, date):
                value = value.isoformat()
            merged[name] = value
    return merged


def create_task(
    partial: Optional[Mapping[str, Any]] = None,
    *,
    clock: Optional[Clock] = None,
    **fields: Any,
) -> Task:
    """
    Build a complete Task from any subset of its attributes.

    Args:
        partial: Mapping of attribute values (snake_case or camelCase keys)
        clock: Optional callable returning "now" (for deterministic tests)
        **fields: Attribute values as keywords, applied over ``partial``

    Returns:
        A new Task with a fresh id and created_at, defaults for every
        attribute not supplied, and the caller's values everywhere else

    Notes:
        - No persistence and no enum validation
        - A None for a required attribute falls back to its default
    """
    values = {
        "id": str(uuid.uuid4()),
        "title": "",
        "description": "",
        "status": DEFAULT_STATUS,
        "priority": DEFAULT_PRIORITY,
        "due_date": None,
        "created_at": now_iso(clock),
        "updated_at": None,
        "tags": [],
    }
    for name, value in normalize_fields(partial, fields).items():
        if value is None and name not in ("due_date", "updated_at"):
            continue
        values[name] = value

    return Task(**values)
