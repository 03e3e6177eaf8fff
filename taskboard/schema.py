"""
TASKBOARD - Task Schema Definition
==================================
Kanban task model: three fixed stages, a priority, free-form tags and a
soft-delete flag that moves a task into the trash.

Defaults (status, priority) are resolved here, at the model boundary,
so nothing downstream has to guess at missing or malformed values.
"""

import json
import logging
from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

logger = logging.getLogger("taskboard.schema")


class TaskStatus(str, Enum):
    """Workflow stages (board columns)"""
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @classmethod
    def parse(cls, value: Any) -> Optional["TaskStatus"]:
        """Return the matching stage, or None for anything unrecognized"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


class TaskPriority(str, Enum):
    """Task priority levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: Any) -> "TaskPriority":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            return cls.MEDIUM


# Wire name -> model field name
FIELD_ALIASES = {"dueDate": "due_date"}
EDITABLE_FIELDS = ("title", "description", "status", "priority", "tags", "due_date", "deleted")


class Task(BaseModel):
    """Individual kanban task"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    title: str
    description: str = ""
    # None only for records loaded without a usable status
    status: Optional[TaskStatus] = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    tags: List[str] = Field(default_factory=list)
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    deleted: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("title", mode="before")
    @classmethod
    def _require_title(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, str):
            return value  # rejected by the str check
        title = (value or "").strip()
        if not title:
            raise ValueError("title must not be empty")
        return title

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> Optional[TaskStatus]:
        return TaskStatus.parse(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _parse_priority(cls, value: Any) -> TaskPriority:
        return TaskPriority.parse(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _clean_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)):
            return value  # rejected by the List[str] check
        return [str(tag).strip() for tag in value if tag is not None and str(tag).strip()]

    @field_validator("due_date", mode="before")
    @classmethod
    def _coerce_due_date(cls, value: Any) -> Optional[str]:
        if isinstance(value, date):
            return value.isoformat()
        if value is None or not str(value).strip():
            return None
        return str(value).strip()

    @field_validator("deleted", mode="before")
    @classmethod
    def _coerce_deleted(cls, value: Any) -> Any:
        return False if value is None else value

    def to_record(self) -> Dict[str, Any]:
        """Plain record with wire (camelCase) keys"""
        return self.model_dump(mode="json", by_alias=True)


def normalize_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Map wire names onto model fields and drop keys the model does not know."""
    normalized: Dict[str, Any] = {}
    for key, value in (fields or {}).items():
        name = FIELD_ALIASES.get(key, key)
        if name in EDITABLE_FIELDS or name == "id":
            normalized[name] = value
    return normalized


class BoardFilter(BaseModel):
    """Search and priority controls for the board view"""
    search: str = ""
    priority: str = ""  # "" means no filter

    @field_validator("search", mode="before")
    @classmethod
    def _coerce_search(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _restrict_priority(cls, value: Any) -> str:
        if isinstance(value, TaskPriority):
            return value.value
        if isinstance(value, str) and value in {p.value for p in TaskPriority}:
            return value
        return ""


# ============================================================
# COLLECTION (DE)SERIALIZATION
# ============================================================

_TASK_LIST = TypeAdapter(List[Task])


def dump_tasks(tasks: Iterable[Task]) -> str:
    """Serialize the whole collection as one JSON array"""
    return _TASK_LIST.dump_json(list(tasks), by_alias=True).decode("utf-8")


def parse_tasks(blob: Optional[str]) -> List[Task]:
    """
    Parse a persisted blob into tasks.

    Never raises: a missing or malformed blob yields an empty collection,
    and individual bad records are skipped.
    """
    if not blob or not blob.strip():
        return []

    try:
        data = json.loads(blob)
    except (ValueError, RecursionError) as e:
        logger.error(f"Failed to parse stored tasks: {e}")
        return []

    if not isinstance(data, list):
        logger.error(f"Stored tasks must be a JSON array, got {type(data).__name__}")
        return []

    tasks = []
    for i, raw in enumerate(data):
        if not isinstance(raw, dict):
            logger.warning(f"Skipping stored record #{i}: not an object")
            continue
        try:
            tasks.append(Task.model_validate(raw))
        except ValidationError as e:
            logger.warning(f"Skipping stored record #{i}: {e.error_count()} validation error(s)")
    return tasks
