"""
FILE: taskflow/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - TaskFlowError (base exception)
  - TaskNotFoundError
  - InvalidInputError
  - PersistenceError
  - StorageCorruptedError
  - InvalidRecordError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from TaskFlowError for easy catching
  - Exceptions include context (IDs, slot locations) for helpful error messages
  - Store queries signal "not found" with None/False; TaskNotFoundError is for
    callers that want an exception instead (CLI)
"""


class TaskFlowError(Exception):
    """Base exception for all TaskFlow errors."""
    pass


class TaskNotFoundError(TaskFlowError):
    """Task with given ID doesn't exist."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class InvalidInputError(TaskFlowError):
    """Input validation failed."""

    def __init__(self, message: str):
        super().__init__(message)


class PersistenceError(TaskFlowError):
    """The persistence slot could not be read or written."""

    def __init__(self, message: str, location: str = ""):
        self.location = location
        if location:
            message = f"{message} ({location})"
        super().__init__(message)


class StorageCorruptedError(PersistenceError):
    """The persistence slot exists but does not hold a task collection."""
    pass


class InvalidRecordError(StorageCorruptedError):
    """A single persisted task record is malformed."""

    def __init__(self, message: str, record=None):
        self.record = record
        super().__init__(message)
