"""
Board projection and task-form helpers.

The rendering layer consumes ``BoardView`` (plain records only) and
reports back form submissions, which ``parse_form`` turns into the field
mapping TaskStore.create/update expect.
"""

from typing import Any, Dict, Iterable, List, Mapping

from pydantic import BaseModel, Field

from . import filters
from .schema import BoardFilter, Task, TaskPriority, TaskStatus

Record = Dict[str, Any]


class BoardView(BaseModel):
    """Everything needed to draw the board once"""
    columns: Dict[str, List[Record]] = Field(
        default_factory=lambda: {status.value: [] for status in TaskStatus}
    )
    trash: List[Record] = Field(default_factory=list)
    filter: BoardFilter = Field(default_factory=BoardFilter)

    def column_ids(self, stage: TaskStatus) -> List[str]:
        return [record["id"] for record in self.columns.get(stage.value, [])]

    @property
    def visible_count(self) -> int:
        return sum(len(records) for records in self.columns.values())


def project(tasks: Iterable[Task], board_filter: BoardFilter) -> BoardView:
    """Split visible tasks into stage columns and list the trash"""
    tasks = list(tasks)
    view = BoardView(filter=board_filter)
    for task in filters.visible(tasks, board_filter.search, board_filter.priority):
        # Tasks with an unset status render in the first column
        stage = task.status or TaskStatus.TODO
        view.columns[stage.value].append(task.to_record())
    view.trash = [task.to_record() for task in filters.trash(tasks)]
    return view


# ============================================================
# TASK FORM
# ============================================================

def blank_form() -> Dict[str, str]:
    """Values of an empty create form"""
    return {
        "id": "",
        "title": "",
        "description": "",
        "priority": TaskPriority.MEDIUM.value,
        "tags": "",
        "dueDate": "",
        "status": TaskStatus.TODO.value,
    }


def form_values(task: Task) -> Dict[str, str]:
    """Edit form pre-filled with a task's current values"""
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description or "",
        "priority": (task.priority or TaskPriority.MEDIUM).value,
        "tags": ", ".join(task.tags),
        "dueDate": task.due_date or "",
        "status": (task.status or TaskStatus.TODO).value,
    }


def parse_form(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert submitted form values into task fields.

    Only keys present in ``raw`` are returned, so an edit touches just the
    fields that were submitted.
    """
    fields: Dict[str, Any] = {}
    if "title" in raw:
        fields["title"] = str(raw["title"] or "").strip()
    if "description" in raw:
        fields["description"] = str(raw["description"] or "").strip()
    if "status" in raw:
        fields["status"] = raw["status"]
    if "priority" in raw:
        fields["priority"] = raw["priority"]
    if "tags" in raw:
        tags = raw["tags"] or ""
        if isinstance(tags, str):
            tags = tags.split(",")
        fields["tags"] = [str(t).strip() for t in tags if str(t).strip()]
    for key in ("dueDate", "due_date"):
        if key in raw:
            fields["dueDate"] = str(raw[key] or "").strip() or None
    return fields
