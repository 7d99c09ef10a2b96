"""
Test the task model, factory, and timestamp helpers.
"""

# Path setup handled by conftest.py
import json
import logging
import uuid
from datetime import date, datetime, timedelta, timezone

import pytest

from taskflow.core.exceptions import InvalidInputError, InvalidRecordError
from taskflow.core.models import (
    Task,
    create_task,
    format_timestamp,
    normalize_tags,
    now_iso,
    parse_timestamp,
)


def test_create_task_fills_defaults(clock):
    """Test that an empty partial gives a complete task with defaults."""
    task = create_task(clock=clock)

    assert uuid.UUID(task.id).version == 4
    assert task.title == ""
    assert task.description == ""
    assert task.status == "todo"
    assert task.priority == "medium"
    assert task.due_date is None
    assert task.updated_at is None
    assert task.tags == []
    assert task.created_at == "2024-01-15T09:30:00.000Z"


def test_create_task_caller_values_win(clock):
    """Test that supplied values override defaults, including id and createdAt."""
    task = create_task(
        {"id": "fixed-id", "createdAt": "2020-05-01T00:00:00.000Z", "dueDate": "2024-02-01"},
        clock=clock,
        title="Write report",
        priority="high",
    )

    assert task.id == "fixed-id"
    assert task.created_at == "2020-05-01T00:00:00.000Z"
    assert task.due_date == "2024-02-01"
    assert task.title == "Write report"
    assert task.priority == "high"


def test_create_task_keywords_override_partial():
    """Test that keyword fields win over the partial mapping."""
    task = create_task({"title": "From mapping"}, title="From keyword")
    assert task.title == "From keyword"


def test_create_task_none_falls_back_to_default():
    """Test that None for a required field keeps the default."""
    task = create_task(title=None, status=None, tags=None)
    assert task.title == ""
    assert task.status == "todo"
    assert task.tags == []


def test_create_task_formats_datetime_values():
    """Test that datetime and date due values are stored as ISO strings."""
    moment = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    assert create_task(due_date=moment).due_date == "2024-03-01T12:00:00.000Z"
    assert create_task(due_date=date(2024, 3, 1)).due_date == "2024-03-01"


def test_create_task_drops_unknown_fields(caplog):
    """Test that unknown keys are ignored with a warning."""
    with caplog.at_level(logging.WARNING, logger="taskflow.core.models"):
        task = create_task({"title": "Known", "colour": "red"})

    assert task.title == "Known"
    assert not hasattr(task, "colour")
    assert "colour" in caplog.text


def test_create_task_ids_are_unique():
    """Test that repeated factory calls never reuse an id."""
    ids = {create_task().id for _ in range(200)}
    assert len(ids) == 200


def test_normalize_tags():
    """Test tag cleanup: split strings, strip, drop empties and duplicates."""
    assert normalize_tags(None) == []
    assert normalize_tags("work, client,,work") == ["work", "client"]
    assert normalize_tags(["b", "a", "b", " "]) == ["b", "a"]

    with pytest.raises(InvalidInputError):
        normalize_tags(42)


def test_to_dict_uses_persisted_keys():
    """Test that records use the camelCase layout."""
    task = create_task(title="Layout", due_date="2024-01-01", tags=["x"])
    record = task.to_dict()

    assert set(record) == {
        "id", "title", "description", "status", "priority",
        "dueDate", "createdAt", "updatedAt", "tags",
    }
    assert record["dueDate"] == "2024-01-01"
    assert record["updatedAt"] is None


def test_from_dict_restores_task():
    """Test that a record read back gives an equal task."""
    task = create_task(title="Round trip", tags=["a", "b"], status="in-progress")
    assert Task.from_dict(task.to_dict()) == task
    assert json.loads(task.to_json()) == task.to_dict()


def test_from_dict_fills_missing_fields():
    """Test that sparse records get defaults."""
    task = Task.from_dict({"id": "abc"})
    assert task.title == ""
    assert task.status == "todo"
    assert task.priority == "medium"
    assert task.tags == []


@pytest.mark.parametrize(
    "record",
    [
        "not a record",
        {"title": "No id"},
        {"id": ""},
        {"id": "abc", "tags": "work"},
        {"id": "abc", "status": "archived"},
        {"id": "abc", "priority": "urgent"},
    ],
)
def test_from_dict_rejects_malformed_records(record):
    """Test that malformed records raise InvalidRecordError."""
    with pytest.raises(InvalidRecordError):
        Task.from_dict(record)


def test_format_timestamp():
    """Test millisecond precision, UTC conversion, and trailing Z."""
    moment = datetime(2024, 1, 1, 9, 30, 0, 123456, tzinfo=timezone.utc)
    assert format_timestamp(moment) == "2024-01-01T09:30:00.123Z"

    # Naive values are taken as UTC
    assert format_timestamp(datetime(2024, 1, 1, 9, 30)) == "2024-01-01T09:30:00.000Z"

    # Offsets are converted
    plus_two = timezone(timedelta(hours=2))
    assert format_timestamp(datetime(2024, 1, 1, 11, 30, tzinfo=plus_two)) == "2024-01-01T09:30:00.000Z"


def test_now_iso_uses_clock(clock):
    assert now_iso(clock) == "2024-01-15T09:30:00.000Z"


def test_parse_timestamp():
    """Test tolerant ISO-8601 parsing."""
    parsed = parse_timestamp("2024-01-01T09:30:00.000Z")
    assert parsed == datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)

    # Date-only means midnight UTC
    assert parse_timestamp("2024-01-01") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    # Naive timestamps are UTC
    assert parse_timestamp("2024-01-01T09:30:00").tzinfo is not None

    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None
    assert parse_timestamp("next tuesday") is None

    # Fractions of any length
    assert parse_timestamp("2024-01-01T09:30:00.12Z") == datetime(2024, 1, 1, 9, 30, 0, 120000, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-01T09:30:00.1234567Z") == datetime(2024, 1, 1, 9, 30, 0, 123456, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-01T11:30:00.5+02:00") == datetime(2024, 1, 1, 9, 30, 0, 500000, tzinfo=timezone.utc)
