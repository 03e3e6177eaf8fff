"""
TASKBOARD - Board Reconciler
============================
Turns the rendering layer's post-drag snapshot (stage -> ordered task ids)
into authoritative status changes on the TaskStore.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Union

from .schema import TaskStatus
from .store import TaskStore

logger = logging.getLogger("taskboard.reconciler")

StageKey = Union[TaskStatus, str]
Snapshot = Mapping[StageKey, Optional[Sequence[str]]]


class BoardReconciler:
    """
    Applies board snapshots to a TaskStore.

    Stale ids (unknown or trashed) are ignored, stages missing from the
    snapshot contribute nothing and tasks not named anywhere keep their
    status. Reconciling the same snapshot twice is a no-op the second time.
    """

    def __init__(self, store: TaskStore):
        self.store = store

    def reconcile(self, snapshot: Snapshot) -> int:
        """Apply a snapshot with one persistence write. Returns tasks moved."""
        stages = self._stages(snapshot)

        assignments: Dict[str, TaskStatus] = {}
        order: List[str] = []
        # An id listed under several stages ends up in the last one
        for stage in TaskStatus:
            for task_id in stages.get(stage, []):
                if task_id in assignments:
                    order.remove(task_id)
                assignments[task_id] = stage
                order.append(task_id)

        moved = self.store.apply_statuses(assignments, order)
        if moved:
            logger.info(f"🔀 Reconciled board: {moved} task(s) changed stage")
        else:
            logger.debug(f"Reconciled board: no stage changes ({len(assignments)} ids)")
        return moved

    def _stages(self, snapshot: Snapshot) -> Dict[TaskStatus, List[str]]:
        stages: Dict[TaskStatus, List[str]] = {}
        for key, ids in (snapshot or {}).items():
            stage = TaskStatus.parse(key)
            if stage is None:
                logger.warning(f"Ignoring unknown stage in board snapshot: {key!r}")
                continue
            if not ids or isinstance(ids, str):
                continue
            stages.setdefault(stage, []).extend(str(task_id) for task_id in ids)
        return stages
