"""
FILE: taskflow/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - STATUS_* / VALID_STATUSES: Task status values, in board column order
  - PRIORITY_* / VALID_PRIORITIES: Task priority values
  - PRIORITY_RANK: Ordinal ranking used for priority sorts
  - SORT_* / VALID_SORT_KEYS: Sort keys accepted by the store
  - DEFAULT_STORAGE_KEY: Name of the persistence slot
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Centralized constants to avoid magic strings
  - Sort keys and persisted field names use camelCase to match the stored layout
"""

# Task status constants (board column order)
STATUS_TODO = "todo"
STATUS_IN_PROGRESS = "in-progress"
STATUS_COMPLETED = "completed"
VALID_STATUSES = (STATUS_TODO, STATUS_IN_PROGRESS, STATUS_COMPLETED)

STATUS_LABELS = {
    STATUS_TODO: "To Do",
    STATUS_IN_PROGRESS: "In Progress",
    STATUS_COMPLETED: "Completed",
}

# Task priority constants
PRIORITY_LOW = "low"
PRIORITY_MEDIUM = "medium"
PRIORITY_HIGH = "high"
VALID_PRIORITIES = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH)

PRIORITY_RANK = {
    PRIORITY_HIGH: 3,
    PRIORITY_MEDIUM: 2,
    PRIORITY_LOW: 1,
}

# Defaults for new tasks
DEFAULT_STATUS = STATUS_TODO
DEFAULT_PRIORITY = PRIORITY_MEDIUM

# Sort keys
SORT_DUE_DATE = "dueDate"
SORT_PRIORITY = "priority"
SORT_TITLE = "title"
SORT_CREATED_AT = "createdAt"
VALID_SORT_KEYS = (SORT_DUE_DATE, SORT_PRIORITY, SORT_TITLE, SORT_CREATED_AT)
DEFAULT_SORT_KEY = SORT_CREATED_AT

SORT_ASC = "asc"
SORT_DESC = "desc"
VALID_DIRECTIONS = (SORT_ASC, SORT_DESC)
DEFAULT_DIRECTION = SORT_DESC

# Persistence slot
DEFAULT_STORAGE_KEY = "taskflow_tasks"
