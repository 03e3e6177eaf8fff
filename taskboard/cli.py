#!/usr/bin/env python3
"""
TASKBOARD - CLI Interface
=========================
Command-line front-end for a persistent kanban board.

Usage:
    taskboard add "Write spec" -p high -t docs,urgent
    taskboard board --search urgent --priority high
    taskboard move T4821 ip
    taskboard edit T4821 --due 2026-11-01
    taskboard delete T4821
    taskboard trash
    taskboard restore T4821
    taskboard purge T4821
    taskboard empty-trash
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .board import Board
from .config import get_settings
from .schema import TaskPriority, TaskStatus
from .storage import JsonFileStorage
from .views import BoardView, parse_form

STAGE_ALIASES = {
    "t": TaskStatus.TODO,
    "todo": TaskStatus.TODO,
    "ip": TaskStatus.IN_PROGRESS,
    "in_progress": TaskStatus.IN_PROGRESS,
    "in-progress": TaskStatus.IN_PROGRESS,
    "d": TaskStatus.DONE,
    "done": TaskStatus.DONE,
}

STAGE_TITLES = {
    TaskStatus.TODO: "TO DO",
    TaskStatus.IN_PROGRESS: "IN PROGRESS",
    TaskStatus.DONE: "DONE",
}

PRIORITY_ICONS = {
    TaskPriority.LOW.value: "🟢",
    TaskPriority.MEDIUM.value: "🟡",
    TaskPriority.HIGH.value: "🔴",
}


def _stage(value: str) -> TaskStatus:
    stage = STAGE_ALIASES.get(value.lower()) or TaskStatus.parse(value.upper())
    if stage is None:
        raise argparse.ArgumentTypeError(f"invalid stage: {value} (use t/ip/d or TODO/IN_PROGRESS/DONE)")
    return stage


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--dir", help="Data directory (default: $TASKBOARD_DATA_DIR)")
    common.add_argument("--key", help="Storage key (default: $TASKBOARD_STORAGE_KEY)")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    parser = argparse.ArgumentParser(
        prog="taskboard",
        description="TASKBOARD - single-user kanban board",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  taskboard add "Write spec" -p high -t docs   Create a task
  taskboard board --search docs                Show the filtered board
  taskboard move T4821 ip                      Move a card (t/ip/d)
  taskboard delete T4821                       Move a task to trash
  taskboard restore T4821                      Restore from trash
  taskboard empty-trash                        Purge everything in trash
        """
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    def task_fields(p: argparse.ArgumentParser) -> None:
        p.add_argument("-d", "--description", help="Description")
        p.add_argument("-p", "--priority", help="low / medium / high")
        p.add_argument("-t", "--tags", help="Comma-separated tags")
        p.add_argument("--due", help="Due date (YYYY-MM-DD, '' to clear)")
        p.add_argument("-s", "--status", type=_stage, help="Stage (t/ip/d)")

    # ADD command
    add_parser = subparsers.add_parser("add", parents=[common], help="Create a task")
    add_parser.add_argument("title", help="Task title")
    task_fields(add_parser)

    # EDIT command
    edit_parser = subparsers.add_parser("edit", parents=[common], help="Edit fields of a task")
    edit_parser.add_argument("task_id", help="Task ID")
    edit_parser.add_argument("--title", help="New title")
    task_fields(edit_parser)

    # MOVE command
    move_parser = subparsers.add_parser("move", parents=[common], help="Move a task to another stage")
    move_parser.add_argument("task_id", help="Task ID")
    move_parser.add_argument("stage", type=_stage, help="t / ip / d")

    for name, help_text in (
        ("delete", "Move a task to trash"),
        ("restore", "Restore a task from trash"),
        ("purge", "Permanently delete a task"),
    ):
        p = subparsers.add_parser(name, parents=[common], help=help_text)
        p.add_argument("task_id", help="Task ID")

    subparsers.add_parser("empty-trash", parents=[common], help="Permanently delete all trashed tasks")

    # BOARD command
    board_parser = subparsers.add_parser("board", parents=[common], help="Show the board")
    board_parser.add_argument("--search", default="", help="Match title or tags")
    board_parser.add_argument("--priority", default="", choices=["", "low", "medium", "high"])
    board_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # TRASH command
    trash_parser = subparsers.add_parser("trash", parents=[common], help="List trashed tasks")
    trash_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # SHOW command
    show_parser = subparsers.add_parser("show", parents=[common], help="Show one task")
    show_parser.add_argument("task_id", help="Task ID")
    show_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def _form_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Only options actually given end up in the form"""
    form: Dict[str, Any] = {}
    if getattr(args, "title", None) is not None:
        form["title"] = args.title
    if args.description is not None:
        form["description"] = args.description
    if args.priority is not None:
        form["priority"] = args.priority
    if args.tags is not None:
        form["tags"] = args.tags
    if args.due is not None:
        form["dueDate"] = args.due
    if args.status is not None:
        form["status"] = args.status.value
    return form


def _format_task(record: Dict[str, Any]) -> str:
    icon = PRIORITY_ICONS.get(record.get("priority"), "⚪")
    line = f"  {icon} [{record['id']}] {record['title']}"
    if record.get("tags"):
        line += "  #" + " #".join(record["tags"])
    if record.get("dueDate"):
        line += f"  (due {record['dueDate']})"
    return line


def format_board(view: BoardView) -> str:
    """Human-readable board"""
    lines: List[str] = []
    active = view.filter.search or view.filter.priority
    if active:
        lines.append(f"🔎 search={view.filter.search!r} priority={view.filter.priority or 'any'}")
        lines.append("")
    for stage in TaskStatus:
        records = view.columns.get(stage.value, [])
        lines.append(f"📋 {STAGE_TITLES[stage]} ({len(records)})")
        lines.append("-" * 40)
        if not records:
            lines.append("  (empty)")
        lines.extend(_format_task(r) for r in records)
        lines.append("")
    lines.append(f"🗑️ Trash: {len(view.trash)}")
    return "\n".join(lines)


def format_trash(view: BoardView) -> str:
    if not view.trash:
        return "Trash is empty"
    lines = ["🗑️ Trash:", "-" * 40]
    for record in view.trash:
        info = record.get("description") or "No description"
        if record.get("dueDate"):
            info += f" • Due: {record['dueDate']}"
        lines.append(f"  [{record['id']}] {record['title']}")
        lines.append(f"      {info}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    board = Board(
        JsonFileStorage(args.dir or settings.data_dir),
        key=args.key or settings.storage_key,
    )

    task_id = getattr(args, "task_id", None)
    if task_id is not None and board.get(task_id) is None:
        print(f"❌ Task not found: {task_id}")
        return 1

    if args.command == "add":
        task = board.store.create(parse_form(_form_from_args(args)))
        if not task:
            print("❌ Title required")
            return 1
        print(f"✅ Created: {task.id}")
        print(f"   Title: {task.title}")
        print(f"   Stage: {task.status.value} | Priority: {task.priority.value}")

    elif args.command == "edit":
        form = _form_from_args(args)
        if not form:
            print("Nothing to change")
            return 0
        task = board.store.update(task_id, parse_form(form))
        if not task:
            print(f"❌ Edit rejected (title required): {task_id}")
            return 1
        print(f"✏️ Updated: [{task.id}] {task.title}")

    elif args.command == "move":
        if board.get(task_id).deleted:
            print(f"⛔ Task {task_id} is in trash, restore it first")
            return 1
        board.move(task_id, args.stage)
        print(f"🔀 Moved {task_id} to {STAGE_TITLES[args.stage]}")

    elif args.command == "delete":
        board.delete(task_id)
        print(f"🗑️ Moved to trash: {task_id}")

    elif args.command == "restore":
        board.restore(task_id)
        task = board.get(task_id)
        print(f"↩️ Restored: [{task_id}] {task.title} ({task.status.value})")

    elif args.command == "purge":
        board.purge(task_id)
        print(f"❌ Deleted permanently: {task_id}")

    elif args.command == "empty-trash":
        count = len(board.store.trash())
        board.empty_trash()
        print(f"🧹 Emptied trash ({count} tasks)")

    elif args.command == "board":
        board.search(args.search)
        view = board.filter_priority(args.priority)
        if args.json:
            print(json.dumps(view.model_dump(mode="json"), indent=2))
        else:
            print(format_board(view))

    elif args.command == "trash":
        view = board.render()
        if args.json:
            print(json.dumps(view.trash, indent=2))
        else:
            print(format_trash(view))

    elif args.command == "show":
        task = board.get(task_id)
        if args.json:
            print(json.dumps(task.to_record(), indent=2))
        else:
            stage = task.status.value if task.status else "-"
            print(f"[{task.id}] {task.title}")
            print(f"   Stage: {stage} | Priority: {task.priority.value}{' | 🗑️ in trash' if task.deleted else ''}")
            if task.description:
                print(f"   {task.description}")
            if task.tags:
                print(f"   Tags: {', '.join(task.tags)}")
            if task.due_date:
                print(f"   Due: {task.due_date}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
