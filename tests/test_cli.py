"""
Tests for the taskboard CLI and environment settings.
"""
import json

import pytest

from taskboard import cli
from taskboard.config import DEFAULT_DATA_DIR, get_settings


@pytest.fixture
def run(tmp_path, capsys):
    def _run(*argv):
        code = cli.main([argv[0], "--dir", str(tmp_path), *argv[1:]])
        return code, capsys.readouterr().out
    return _run


def _tasks(run):
    code, out = run("board", "--json")
    assert code == 0
    view = json.loads(out)
    return view


def _only_id(run):
    view = _tasks(run)
    ids = [r["id"] for col in view["columns"].values() for r in col]
    assert len(ids) == 1
    return ids[0]


def test_add_and_board(run):
    code, out = run("add", "Write spec", "-p", "high", "-t", "docs, urgent")
    assert code == 0
    assert "Created" in out

    view = _tasks(run)
    record = view["columns"]["TODO"][0]
    assert record["title"] == "Write spec"
    assert record["priority"] == "high"
    assert record["tags"] == ["docs", "urgent"]

    code, out = run("board")
    assert "Write spec" in out
    assert "TO DO (1)" in out


def test_add_blank_title_fails(run):
    code, out = run("add", "   ")
    assert code == 1
    assert _tasks(run)["columns"]["TODO"] == []


def test_move_delete_restore_purge(run):
    run("add", "Write spec")
    task_id = _only_id(run)

    assert run("move", task_id, "ip")[0] == 0
    assert _tasks(run)["columns"]["IN_PROGRESS"][0]["id"] == task_id

    assert run("delete", task_id)[0] == 0
    assert run("move", task_id, "d")[0] == 1
    code, out = run("trash", "--json")
    assert [r["id"] for r in json.loads(out)] == [task_id]

    code, out = run("restore", task_id)
    assert "IN_PROGRESS" in out
    assert run("purge", task_id)[0] == 0
    assert run("purge", task_id)[0] == 1


def test_edit_only_given_fields(run):
    run("add", "Write spec", "-p", "high", "-d", "draft")
    task_id = _only_id(run)

    assert run("edit", task_id, "--due", "2026-11-01")[0] == 0

    code, out = run("show", task_id, "--json")
    record = json.loads(out)
    assert record["dueDate"] == "2026-11-01"
    assert record["priority"] == "high"
    assert record["description"] == "draft"

    assert run("edit", task_id, "--title", "  ")[0] == 1


def test_board_filters(run):
    run("add", "Fix bug", "-t", "Urgent-Fix", "-p", "low")
    run("add", "Write docs", "-p", "high")
    code, out = run("board", "--search", "urgent", "--json")
    titles = [r["title"] for r in json.loads(out)["columns"]["TODO"]]
    assert titles == ["Fix bug"]


def test_empty_trash(run):
    run("add", "a")
    task_id = _only_id(run)
    run("delete", task_id)
    code, out = run("empty-trash")
    assert code == 0
    assert "1 tasks" in out
    assert json.loads(run("trash", "--json")[1]) == []


def test_unknown_task(run):
    code, out = run("show", "T-nope")
    assert code == 1
    assert "not found" in out


def test_invalid_stage_exits(run):
    with pytest.raises(SystemExit):
        run("move", "T1", "archive")


def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("TASKBOARD_DATA_DIR", "/tmp/boards")
    monkeypatch.setenv("TASKBOARD_STORAGE_KEY", "work")
    monkeypatch.setenv("TASKBOARD_LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.data_dir == "/tmp/boards"
    assert settings.storage_key == "work"
    assert settings.log_level == "DEBUG"


def test_settings_defaults(monkeypatch):
    for name in ("TASKBOARD_DATA_DIR", "TASKBOARD_STORAGE_KEY", "TASKBOARD_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TASKBOARD_LOG_LEVEL", "chatty")
    settings = get_settings()
    assert settings.data_dir == DEFAULT_DATA_DIR
    assert settings.storage_key == "mini_trello_tasks"
    assert settings.log_level == "INFO"
