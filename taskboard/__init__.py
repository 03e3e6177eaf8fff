"""
TASKBOARD - Kanban Task Board
=============================

Single-user kanban board: tasks move between three fixed stages, can be
soft-deleted into a recoverable trash, and are filtered by text and
priority. The whole board persists as one JSON blob.

Usage:
    from taskboard import Board, JsonFileStorage

    board = Board(JsonFileStorage("~/.local/share/taskboard"))
    view = board.submit({"title": "Write spec", "priority": "high", "tags": "docs"})
    task_id = view.columns["TODO"][0]["id"]

    # After a drag, the rendering layer reports where every card now sits
    board.drop({"IN_PROGRESS": [task_id]})

    board.search("docs")
    board.delete(task_id)      # to trash
    board.restore(task_id)     # back on the board, stage kept
"""

from .schema import (
    Task,
    TaskStatus,
    TaskPriority,
    BoardFilter,
    dump_tasks,
    parse_tasks
)

from .storage import STORAGE_KEY, KeyValueStorage, JsonFileStorage, MemoryStorage, TaskRepository
from .store import TaskStore
from .reconciler import BoardReconciler
from .filters import visible, trash
from .views import BoardView, project, blank_form, form_values, parse_form
from .board import Board

__version__ = "1.0.0"
__all__ = [
    "Board",
    "BoardView",
    "BoardFilter",
    "BoardReconciler",
    "TaskStore",
    "TaskRepository",
    "KeyValueStorage",
    "JsonFileStorage",
    "MemoryStorage",
    "STORAGE_KEY",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "dump_tasks",
    "parse_tasks",
    "visible",
    "trash",
    "project",
    "blank_form",
    "form_values",
    "parse_form"
]
