"""
FILE: taskflow/core/samples.py
PURPOSE: Demonstration tasks seeded into an empty collection on first run
EXPORTS:
  - sample_task_fields(now) -> List[dict]
DEPENDENCIES:
  - datetime (stdlib)
  - taskflow.core.constants
  - taskflow.core.models (format_timestamp)
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List

from .constants import (
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
)
from .models import format_timestamp

PROPOSAL_DUE_IN = timedelta(days=3)


def sample_task_fields(now: datetime) -> List[Dict[str, Any]]:
    """Partial attribute sets for the four demonstration tasks."""
    return [
        {
            "title": "Complete project proposal",
            "description": "Write a detailed project proposal for the new client",
            "priority": PRIORITY_HIGH,
            "due_date": format_timestamp(now + PROPOSAL_DUE_IN),
            "tags": ["work", "client"],
        },
        {
            "title": "Schedule team meeting",
            "description": "Coordinate with team members for the weekly sync up",
            "priority": PRIORITY_MEDIUM,
            "status": STATUS_IN_PROGRESS,
            "tags": ["work", "team"],
        },
        {
            "title": "Research new technologies",
            "description": "Look into new frameworks for upcoming projects",
            "priority": PRIORITY_LOW,
            "tags": ["development", "learning"],
        },
        {
            "title": "Update documentation",
            "description": "Update the project documentation with recent changes",
            "status": STATUS_COMPLETED,
            "priority": PRIORITY_MEDIUM,
            "tags": ["documentation"],
        },
    ]
