"""
TASKBOARD - Board
=================
Application facade for one board: owns the TaskStore, the reconciler and
the current filter, and maps each UI event onto them. Every handler
returns a freshly projected ``BoardView``.

Usage:
    board = Board(MemoryStorage())
    view = board.submit({"title": "Write spec", "priority": "high"})
    task_id = view.columns["TODO"][0]["id"]
    board.drop({"IN_PROGRESS": [task_id]})
"""

import logging
import random
from typing import Any, Dict, Mapping, Optional, Union

from .reconciler import BoardReconciler, Snapshot
from .schema import BoardFilter, Task, TaskStatus
from .storage import STORAGE_KEY, KeyValueStorage, TaskRepository
from .store import TaskStore
from .views import BoardView, blank_form, form_values, parse_form, project

logger = logging.getLogger("taskboard.board")


class Board:
    """One kanban board bound to one storage key"""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = STORAGE_KEY,
        rng: Optional[random.Random] = None
    ):
        self.store = TaskStore(TaskRepository(storage, key), rng=rng)
        self.reconciler = BoardReconciler(self.store)
        self.filter = BoardFilter()

    def render(self) -> BoardView:
        return project(self.store.all(), self.filter)

    # ========================================
    # TASK EVENTS
    # ========================================

    def submit(self, raw_form: Mapping[str, Any], task_id: Optional[str] = None) -> BoardView:
        """Create (no id) or edit (id given) from submitted form values"""
        task_id = task_id or raw_form.get("id") or None
        fields = parse_form(raw_form)
        if task_id:
            self.store.update(task_id, fields)
        else:
            self.store.create(fields)
        return self.render()

    def edit_form(self, task_id: str) -> Dict[str, str]:
        """Form values for editing a task (blank form if it is gone)"""
        task = self.store.get(task_id)
        return form_values(task) if task else blank_form()

    def delete(self, task_id: str) -> BoardView:
        self.store.soft_delete(task_id)
        return self.render()

    def restore(self, task_id: str) -> BoardView:
        self.store.restore(task_id)
        return self.render()

    def purge(self, task_id: str) -> BoardView:
        self.store.purge(task_id)
        return self.render()

    def empty_trash(self) -> BoardView:
        self.store.empty_trash()
        return self.render()

    # ========================================
    # DRAG & DROP
    # ========================================

    def drop(self, snapshot: Snapshot) -> BoardView:
        """Reconcile the rendered stage -> ids layout after a drag"""
        self.reconciler.reconcile(snapshot)
        return self.render()

    def move(self, task_id: str, stage: Union[TaskStatus, str]) -> BoardView:
        """
        Drop a single card at the bottom of a column.

        Builds the snapshot the rendering layer would report: the target
        column's currently visible ids with the moved card appended.
        """
        target = TaskStatus.parse(stage)
        if target is None:
            logger.warning(f"Ignoring move of {task_id} to unknown stage {stage!r}")
            return self.render()

        ids = [i for i in self.render().column_ids(target) if i != task_id]
        ids.append(task_id)
        return self.drop({target: ids})

    # ========================================
    # FILTERS
    # ========================================

    def search(self, term: str) -> BoardView:
        self.filter = self.filter.model_copy(update={"search": BoardFilter(search=term).search})
        return self.render()

    def filter_priority(self, value: str) -> BoardView:
        self.filter = self.filter.model_copy(update={"priority": BoardFilter(priority=value).priority})
        return self.render()

    def get(self, task_id: str) -> Optional[Task]:
        return self.store.get(task_id)
