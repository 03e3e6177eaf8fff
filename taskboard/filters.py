"""Read-only board filtering: text search over title/tags plus a priority selector."""

from typing import Iterable, List

from .schema import Task


def matches_search(task: Task, term: str) -> bool:
    """Case-insensitive substring match against the title or any tag"""
    needle = term.strip().lower()
    if not needle:
        return True
    if needle in task.title.lower():
        return True
    return any(needle in tag.lower() for tag in task.tags)


def visible(tasks: Iterable[Task], search_term: str = "", priority_filter: str = "") -> List[Task]:
    """
    Tasks to show on the board, in collection order.

    Trashed tasks are always excluded. A non-empty ``priority_filter``
    must equal the task priority exactly; a non-empty ``search_term``
    must occur in the title or one of the tags.
    """
    result = [t for t in tasks if not t.deleted]
    if priority_filter:
        result = [t for t in result if t.priority.value == priority_filter]
    if search_term and search_term.strip():
        result = [t for t in result if matches_search(t, search_term)]
    return result


def trash(tasks: Iterable[Task]) -> List[Task]:
    """Trashed tasks in collection order; filters never apply here"""
    return [t for t in tasks if t.deleted]
