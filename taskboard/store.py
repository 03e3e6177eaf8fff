"""
TASKBOARD - Task Store
======================
Owns the authoritative in-memory task collection.

Every mutating operation persists the full collection right after the
in-memory change. Invalid input and unknown ids are no-ops: nothing in
here raises to the caller.
"""

import logging
import random
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set

from pydantic import ValidationError

from .ids import generate_task_id
from .schema import Task, TaskStatus, normalize_fields
from .storage import TaskRepository

logger = logging.getLogger("taskboard.store")


class TaskStore:
    """
    Authoritative task collection for one board.

    Callers only ever get deep copies back; the list itself is mutated
    exclusively through the methods below.
    """

    def __init__(self, repository: TaskRepository, rng: Optional[random.Random] = None):
        self.repository = repository
        self._rng = rng
        self._tasks: List[Task] = []
        self._retired_ids: Set[str] = set()
        self._load()

    # ========================================
    # PERSISTENCE
    # ========================================

    def _load(self) -> None:
        seen: Set[str] = set()
        for task in self.repository.load():
            if not task.id or task.id in seen:
                old_id = task.id
                task.id = generate_task_id(seen, self._rng)
                logger.warning(f"Stored task '{task.title}' had missing/duplicate id {old_id!r}, assigned {task.id}")
            seen.add(task.id)
            self._tasks.append(task)
        logger.info(f"📂 Loaded {len(self._tasks)} tasks ({len(self.trash())} in trash)")

    def save(self) -> bool:
        """Write the full collection through the repository"""
        return self.repository.save(self._tasks)

    # ========================================
    # TASK OPERATIONS
    # ========================================

    def create(self, fields: Mapping[str, Any]) -> Optional[Task]:
        """Create a task from submitted fields; None if the title is empty"""
        data = normalize_fields(dict(fields))
        data.pop("id", None)
        data.pop("deleted", None)

        try:
            task = Task.model_validate(data)
        except ValidationError as e:
            logger.info(f"Rejected new task: {e.errors()[0]['msg']}")
            return None

        task.id = generate_task_id(self._taken_ids(), self._rng)
        if task.status is None:
            task.status = TaskStatus.TODO

        self._tasks.append(task)
        self.save()

        logger.info(f"➕ Created task: {task.title} ({task.id})")
        return task.model_copy(deep=True)

    def update(self, task_id: str, fields: Mapping[str, Any]) -> Optional[Task]:
        """Merge submitted fields over an existing task"""
        idx = self._index_of(task_id)
        if idx is None:
            logger.debug(f"Update ignored, unknown task: {task_id}")
            return None

        changes = normalize_fields(dict(fields))
        changes.pop("id", None)

        merged = self._tasks[idx].model_dump()
        merged.update(changes)
        try:
            task = Task.model_validate(merged)
        except ValidationError as e:
            logger.info(f"Rejected edit of {task_id}: {e.errors()[0]['msg']}")
            return None

        if "status" in changes and task.status is None:
            task.status = TaskStatus.TODO

        self._tasks[idx] = task
        self.save()

        logger.info(f"✏️ Updated task: {task.title} ({task_id}) fields={sorted(changes)}")
        return task.model_copy(deep=True)

    def soft_delete(self, task_id: str) -> None:
        """Move a task to the trash"""
        task = self._find(task_id)
        if not task:
            return
        task.deleted = True
        self.save()
        logger.info(f"🗑️ Trashed task: {task.title} ({task_id})")

    def restore(self, task_id: str) -> None:
        """Bring a task back from the trash; status defaults to TODO if unset"""
        task = self._find(task_id)
        if not task:
            return
        task.deleted = False
        if not task.status:
            task.status = TaskStatus.TODO
        self.save()
        logger.info(f"↩️ Restored task: {task.title} ({task_id}) -> {task.status.value}")

    def purge(self, task_id: str) -> None:
        """Permanently remove a task"""
        idx = self._index_of(task_id)
        if idx is None:
            return
        task = self._tasks.pop(idx)
        self._retired_ids.add(task.id)
        self.save()
        logger.info(f"❌ Purged task: {task.title} ({task_id})")

    def empty_trash(self) -> None:
        """Permanently remove every trashed task"""
        purged = [t for t in self._tasks if t.deleted]
        self._tasks = [t for t in self._tasks if not t.deleted]
        self._retired_ids.update(t.id for t in purged)
        self.save()
        logger.info(f"🧹 Emptied trash: {len(purged)} tasks purged")

    def apply_statuses(
        self,
        assignments: Mapping[str, TaskStatus],
        order: Optional[Sequence[str]] = None
    ) -> int:
        """
        Batch status change with a single save.

        Unknown and trashed ids are skipped. When ``order`` is given, the
        tasks it names are rearranged into that order within the slots
        they already occupy; every other task keeps its position.

        Returns the number of tasks whose status changed.
        """
        changed = 0
        for task_id, status in assignments.items():
            task = self._find(task_id)
            if task is None:
                logger.debug(f"Ignoring stale id in board snapshot: {task_id}")
                continue
            if task.deleted:
                logger.debug(f"Ignoring trashed task in board snapshot: {task_id}")
                continue
            if task.status != status:
                task.status = status
                changed += 1

        if order:
            self._reorder(order)

        self.save()
        return changed

    # ========================================
    # QUERIES
    # ========================================

    def all(self) -> List[Task]:
        """Snapshot of the collection in current order"""
        return [t.model_copy(deep=True) for t in self._tasks]

    def get(self, task_id: str) -> Optional[Task]:
        task = self._find(task_id)
        return task.model_copy(deep=True) if task else None

    def active(self) -> List[Task]:
        return [t.model_copy(deep=True) for t in self._tasks if not t.deleted]

    def trash(self) -> List[Task]:
        return [t.model_copy(deep=True) for t in self._tasks if t.deleted]

    def status_summary(self) -> Dict[str, int]:
        """Active task counts per stage, plus the trash size"""
        summary = {status.value: 0 for status in TaskStatus}
        summary["trash"] = 0
        for task in self._tasks:
            if task.deleted:
                summary["trash"] += 1
            else:
                summary[(task.status or TaskStatus.TODO).value] += 1
        return summary

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return self._index_of(task_id) is not None

    # ========================================
    # HELPER METHODS
    # ========================================

    def _index_of(self, task_id: object) -> Optional[int]:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    def _find(self, task_id: object) -> Optional[Task]:
        idx = self._index_of(task_id)
        return self._tasks[idx] if idx is not None else None

    def _taken_ids(self) -> Set[str]:
        return {t.id for t in self._tasks} | self._retired_ids

    def _reorder(self, order: Sequence[str]) -> None:
        positions = {t.id: i for i, t in enumerate(self._tasks)}
        wanted = [
            task_id for task_id in dict.fromkeys(order)
            if task_id in positions and not self._tasks[positions[task_id]].deleted
        ]
        slots = sorted(positions[task_id] for task_id in wanted)
        moved = [self._tasks[positions[task_id]] for task_id in wanted]
        for slot, task in zip(slots, moved):
            self._tasks[slot] = task
