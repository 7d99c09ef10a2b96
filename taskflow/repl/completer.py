"""
FILE: taskflow/repl/completer.py
PURPOSE: Autocomplete for REPL commands, flags, enumerated values and task IDs
EXPORTS:
  - TaskFlowCompleter (Completer for command/arg completion)
  - create_completer(task_ids, tags) -> TaskFlowCompleter
DEPENDENCIES:
  - prompt_toolkit.completion (Completer, Completion)
  - taskflow.core.constants (statuses, priorities)
NOTES:
  - Suggests command names when at start of line
  - Suggests task IDs for commands expecting IDs; statuses after "mv <id>"
  - Suggests values after --status, --priority, --sort, --dir, --tags
  - Task IDs and tags come from callables so suggestions track the store
  - Case-insensitive matching
"""

from typing import Callable, Iterable, List, Optional

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from ..core.constants import VALID_DIRECTIONS, VALID_PRIORITIES, VALID_STATUSES

Provider = Callable[[], List[str]]


class TaskFlowCompleter(Completer):
    """
    Context-aware completer for the TaskFlow REPL.

    Args:
        task_ids: Callable returning the current task IDs
        tags: Callable returning the tags currently in use
    """

    COMMANDS = [
        "add", "ls", "board", "show", "edit", "mv", "done", "rm",
        "tags", "seed", "version", "help", "exit", "quit",
    ]

    COMMAND_DESCRIPTIONS = {
        "add": "Create a new task",
        "ls": "List tasks",
        "board": "Kanban board by status",
        "show": "Task details",
        "edit": "Update task fields",
        "mv": "Move task to another column",
        "done": "Mark task(s) completed",
        "rm": "Delete task(s)",
        "tags": "List tags in use",
        "seed": "Load demonstration tasks",
        "version": "Show version",
        "help": "Show commands",
        "exit": "Leave the REPL",
        "quit": "Leave the REPL",
    }

    FILTER_FLAGS = ["--priority", "--tags", "--search", "--sort", "--dir"]

    COMMAND_FLAGS = {
        "add": ["--desc", "--priority", "--status", "--due", "--tags"],
        "ls": ["--status"] + FILTER_FLAGS,
        "board": FILTER_FLAGS,
        "edit": ["--title", "--desc", "--priority", "--status", "--due", "--no-due", "--tags"],
        "rm": ["--yes"],
    }

    # Commands whose first argument is a task ID
    ID_FIRST_COMMANDS = {"show", "edit", "mv", "done", "rm"}

    SORT_VALUES = ["due", "priority", "title", "created"]

    def __init__(self, task_ids: Optional[Provider] = None, tags: Optional[Provider] = None):
        self._task_ids = task_ids or list
        self._tags = tags or list

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text_before_cursor = document.text_before_cursor
        words = text_before_cursor.split()
        at_new_word = text_before_cursor.endswith(" ")
        current = "" if at_new_word else (words[-1] if words else "")

        # Empty input or typing the first word -> suggest commands
        if not words or (len(words) == 1 and not at_new_word):
            yield from self._complete_commands(current)
            return

        command = words[0].lower()
        position = len(words) if at_new_word else len(words) - 1

        # Value for the flag just before the cursor
        previous = words[position - 1] if position >= 1 else ""
        values = self._flag_values(previous)
        if values is not None:
            yield from self._complete_values(values, current)
            return

        if command in self.ID_FIRST_COMMANDS and position == 1:
            yield from self._complete_values(self._task_ids(), current)
            return

        if command == "mv" and position == 2:
            yield from self._complete_values(VALID_STATUSES, current)
            return

        if current.startswith("-") or at_new_word:
            flags = self.COMMAND_FLAGS.get(command, [])
            yield from self._complete_values(flags, current)

    def _flag_values(self, flag: str) -> Optional[List[str]]:
        if flag in ("--status", "-s"):
            return list(VALID_STATUSES)
        if flag in ("--priority", "-p"):
            return list(VALID_PRIORITIES)
        if flag == "--sort":
            return self.SORT_VALUES
        if flag == "--dir":
            return list(VALID_DIRECTIONS)
        if flag in ("--tags", "-t"):
            return self._tags()
        return None

    def _complete_commands(self, word: str) -> Iterable[Completion]:
        word_lower = word.lower()
        for command in self.COMMANDS:
            if command.startswith(word_lower):
                yield Completion(
                    command,
                    start_position=-len(word),
                    display=command,
                    display_meta=self.COMMAND_DESCRIPTIONS.get(command, ""),
                )

    def _complete_values(self, values: Iterable[str], word: str) -> Iterable[Completion]:
        word_lower = word.lower()
        for value in values:
            if value.lower().startswith(word_lower):
                yield Completion(value, start_position=-len(word), display=value)


def create_completer(
    task_ids: Optional[Provider] = None, tags: Optional[Provider] = None
) -> TaskFlowCompleter:
    """Factory function to create a completer instance."""
    return TaskFlowCompleter(task_ids=task_ids, tags=tags)
