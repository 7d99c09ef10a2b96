"""
FILE: taskflow/formatting.py
PURPOSE: Shared formatting utilities for CLI output
EXPORTS:
  - TaskFormatter: Class for formatting tasks (table, board, details, JSON, raw)
  - parse_id_list: Parse comma-separated task IDs
  - parse_tag_list: Parse comma-separated tags
DEPENDENCIES:
  - rich (tables, panels, columns)
  - json (for JSON serialization)
  - taskflow.core.models (Task)
  - taskflow.dates (relative dates, overdue checks)
NOTES:
  - Centralized formatting logic for consistency across commands
  - Styles keyed by status/priority so list and board views agree
"""

import json
from datetime import datetime
from typing import Dict, List, Optional

from rich.columns import Columns
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.constants import (
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_LABELS,
    STATUS_TODO,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
)
from .core.models import Task
from .dates import format_date, format_relative, is_overdue, is_today

STATUS_STYLES = {
    STATUS_TODO: "blue",
    STATUS_IN_PROGRESS: "yellow",
    STATUS_COMPLETED: "green",
}

STATUS_MARKERS = {
    STATUS_TODO: " ",
    STATUS_IN_PROGRESS: "~",
    STATUS_COMPLETED: "✓",
}

PRIORITY_STYLES = {
    PRIORITY_HIGH: "bold red",
    PRIORITY_MEDIUM: "yellow",
    PRIORITY_LOW: "dim",
}


def short_id(task_id: str) -> str:
    """First block of a UUID, enough to recognize a task on screen."""
    return task_id.split("-", 1)[0]


class TaskFormatter:
    """Centralized task display formatting."""

    @staticmethod
    def _due_cell(task: Task, now: Optional[datetime] = None) -> str:
        if not task.due_date:
            return "-"
        label = format_relative(task.due_date, now)
        if is_overdue(task, now):
            return f"[bold red]{label} (overdue)[/bold red]"
        if task.status != STATUS_COMPLETED and is_today(task.due_date, now):
            return f"[yellow]{label} (today)[/yellow]"
        return label

    @staticmethod
    def create_table(
        tasks: List[Task],
        title: str = "Tasks",
        show_status: bool = True,
        show_tags: bool = True,
        now: Optional[datetime] = None,
    ) -> Table:
        """
        Create Rich table for tasks.

        Args:
            tasks: List of tasks to display
            title: Table title
            show_status: Whether to show the status column
            show_tags: Whether to show the tags column
            now: Reference time for relative due dates

        Returns:
            Rich Table object ready for display
        """
        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=8, no_wrap=True)
        table.add_column("Title", style="white")

        if show_status:
            table.add_column("Status", width=12)

        table.add_column("Priority", width=8)
        table.add_column("Due", width=18)

        if show_tags:
            table.add_column("Tags", style="magenta")

        for task in tasks:
            row_data = [short_id(task.id), task.title or "[dim](untitled)[/dim]"]

            if show_status:
                style = STATUS_STYLES.get(task.status, "white")
                row_data.append(f"[{style}]{task.status}[/{style}]")

            priority_style = PRIORITY_STYLES.get(task.priority, "white")
            row_data.append(f"[{priority_style}]{task.priority}[/{priority_style}]")
            row_data.append(TaskFormatter._due_cell(task, now))

            if show_tags:
                row_data.append(", ".join(task.tags) if task.tags else "-")

            table.add_row(*row_data)

        return table

    @staticmethod
    def create_board(columns: Dict[str, List[Task]], now: Optional[datetime] = None) -> Columns:
        """
        Create a kanban board: one table per status column, side by side.

        Args:
            columns: Ordered mapping of status -> tasks (TaskStore.board())
            now: Reference time for relative due dates
        """
        tables = []
        for status, tasks in columns.items():
            style = STATUS_STYLES.get(status, "white")
            table = Table(
                title=f"[{style}]{STATUS_LABELS.get(status, status)}[/{style}] ({len(tasks)})",
                show_header=False,
                expand=True,
                border_style=style,
            )
            table.add_column("Task")

            if not tasks:
                table.add_row("[dim]No tasks[/dim]")

            for task in tasks:
                card = Text()
                card.append(f"{short_id(task.id)} ", style="cyan")
                card.append(task.title or "(untitled)", style="bold white")
                card.append("\n")
                card.append(task.priority, style=PRIORITY_STYLES.get(task.priority, "white"))
                if task.due_date:
                    overdue = is_overdue(task, now)
                    card.append(
                        f"  due {format_relative(task.due_date, now)}",
                        style="bold red" if overdue else "dim",
                    )
                if task.tags:
                    card.append("\n")
                    card.append(" ".join(f"#{tag}" for tag in task.tags), style="magenta")
                table.add_row(card)

            tables.append(table)

        return Columns(tables, equal=True, expand=True)

    @staticmethod
    def create_details_panel(task: Task, now: Optional[datetime] = None) -> Panel:
        """Full task details: description, status, priority, dates, tags."""
        details = Text()
        details.append(f"Task {task.id}\n", style="bold cyan")
        details.append(f"{task.title or '(untitled)'}\n\n", style="bold white")

        if task.description:
            details.append("Description:\n", style="dim")
            details.append(f"{task.description}\n\n", style="white")

        details.append("Status: ", style="dim")
        details.append(
            f"{STATUS_LABELS.get(task.status, task.status)}\n",
            style=STATUS_STYLES.get(task.status, "white"),
        )

        details.append("Priority: ", style="dim")
        details.append(f"{task.priority}\n", style=PRIORITY_STYLES.get(task.priority, "white"))

        if task.due_date:
            details.append("Due: ", style="dim")
            overdue = is_overdue(task, now)
            details.append(
                f"{format_date(task.due_date)} ({format_relative(task.due_date, now)})",
                style="bold red" if overdue else "white",
            )
            details.append(" overdue\n" if overdue else "\n", style="bold red")

        if task.tags:
            details.append("Tags: ", style="dim")
            details.append(f"{', '.join(task.tags)}\n", style="magenta")

        details.append("Created: ", style="dim")
        details.append(f"{format_relative(task.created_at, now)}\n", style="white")

        if task.updated_at:
            details.append("Updated: ", style="dim")
            details.append(f"{format_relative(task.updated_at, now)}\n", style="white")

        return Panel(details, border_style="blue", padding=(1, 2))

    @staticmethod
    def to_json_array(tasks: List[Task]) -> str:
        """
        Convert task list to JSON array string (persisted record layout).
        """
        return json.dumps([task.to_dict() for task in tasks], indent=2)

    @staticmethod
    def board_to_json(columns: Dict[str, List[Task]]) -> str:
        return json.dumps(
            {status: [task.to_dict() for task in tasks] for status, tasks in columns.items()},
            indent=2,
        )

    @staticmethod
    def to_raw_lines(tasks: List[Task]) -> List[str]:
        """
        Convert task list to plain text lines.

        Returns:
            List of formatted strings, one per task
        """
        lines = []
        for task in tasks:
            marker = STATUS_MARKERS.get(task.status, "?")
            lines.append(f"{task.id}: [{marker}] {task.title}")
        return lines


def parse_id_list(id_string: str) -> List[str]:
    """
    Parse comma-separated task IDs.

    Args:
        id_string: Comma-separated string of IDs (e.g., "a1b2,c3d4")

    Returns:
        List of non-empty, stripped IDs in the given order
    """
    ids = [part.strip() for part in id_string.split(",")]
    return [task_id for task_id in ids if task_id]


def parse_tag_list(tag_string: Optional[str]) -> List[str]:
    """Parse comma-separated tags; None or blank gives an empty list."""
    if not tag_string:
        return []
    return parse_id_list(tag_string)
