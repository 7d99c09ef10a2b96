"""
Test the command-line interface end to end against a temporary data directory.
"""

# Path setup handled by conftest.py
import json

import pytest

from taskflow import __version__
from taskflow.cli.main import app


@pytest.fixture(autouse=True)
def _cli_env(cli_env):
    """Every test here runs against its own empty data directory."""
    yield cli_env


def invoke(runner, *args, **kwargs):
    return runner.invoke(app, list(args), **kwargs)


def add_task(runner, title, *args):
    result = invoke(runner, "add", title, "--json", *args)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def list_json(runner, *args):
    result = invoke(runner, "ls", "--json", *args)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


# --- add / ls ---


def test_add_then_ls_shows_task(runner):
    """Test that a created task appears in the JSON listing."""
    created = add_task(runner, "Write documentation", "-p", "high", "--tags", "work,docs")

    assert created["title"] == "Write documentation"
    assert created["priority"] == "high"
    assert created["status"] == "todo"
    assert created["tags"] == ["work", "docs"]

    tasks = list_json(runner)
    assert [t["id"] for t in tasks] == [created["id"]]


def test_add_writes_json_slot(runner, cli_env):
    created = add_task(runner, "On disk")
    records = json.loads((cli_env / "taskflow_tasks.json").read_text(encoding="utf-8"))
    assert records[0]["id"] == created["id"]
    assert "createdAt" in records[0]


def test_add_with_due_date(runner):
    created = add_task(runner, "Pay rent", "--due", "2024-02-01")
    assert created["dueDate"] == "2024-02-01T00:00:00.000Z"


def test_add_rejects_empty_title(runner):
    result = invoke(runner, "add", "   ")
    assert result.exit_code == 1
    assert "cannot be empty" in result.output
    assert list_json(runner) == []


def test_add_rejects_bad_priority(runner):
    result = invoke(runner, "add", "Task", "--priority", "urgent")
    assert result.exit_code != 0
    assert list_json(runner) == []


def test_add_rejects_bad_due_date(runner):
    result = invoke(runner, "add", "Task", "--due", "someday")
    assert result.exit_code != 0
    assert list_json(runner) == []


def test_add_plain_output(runner):
    result = invoke(runner, "add", "Plain task")
    assert result.exit_code == 0
    assert "Created task" in result.stdout
    assert "Plain task" in result.stdout


def test_ls_empty(runner):
    result = invoke(runner, "ls")
    assert result.exit_code == 0
    assert "No tasks found" in result.stdout


def test_ls_filters(runner):
    """Test status, tag, and search filters on the listing."""
    a = add_task(runner, "Write proposal", "--tags", "work,client")
    b = add_task(runner, "Team sync", "-s", "in-progress", "--tags", "work", "-d", "Discuss the proposal")
    c = add_task(runner, "Read book", "--tags", "personal")

    assert [t["id"] for t in list_json(runner, "--status", "in-progress")] == [b["id"]]
    assert {t["id"] for t in list_json(runner, "--tags", "work")} == {a["id"], b["id"]}
    assert [t["id"] for t in list_json(runner, "--tags", "work,client")] == [a["id"]]
    assert {t["id"] for t in list_json(runner, "--search", "PROPOSAL")} == {a["id"], b["id"]}
    assert [t["id"] for t in list_json(runner, "--search", "book")] == [c["id"]]


def test_ls_sort_by_priority(runner):
    low = add_task(runner, "Low", "-p", "low")
    high = add_task(runner, "High", "-p", "high")
    medium = add_task(runner, "Medium", "-p", "medium")

    desc = list_json(runner, "--sort", "priority", "--dir", "desc")
    assert [t["id"] for t in desc] == [high["id"], medium["id"], low["id"]]

    asc = list_json(runner, "--sort", "priority", "--dir", "asc")
    assert [t["id"] for t in asc] == [low["id"], medium["id"], high["id"]]


def test_ls_sort_by_due_puts_undated_last(runner):
    undated = add_task(runner, "Someday")
    later = add_task(runner, "Later", "--due", "2024-03-01")
    sooner = add_task(runner, "Sooner", "--due", "2024-02-01")

    for direction, expected in (("asc", [sooner, later]), ("desc", [later, sooner])):
        tasks = list_json(runner, "--sort", "due", "--dir", direction)
        assert [t["id"] for t in tasks] == [t["id"] for t in expected] + [undated["id"]]


def test_ls_rejects_unknown_sort(runner):
    result = invoke(runner, "ls", "--sort", "colour")
    assert result.exit_code != 0
    assert "createdAt" in result.output


def test_ls_accepts_stored_sort_key_names(runner):
    for key in ("dueDate", "createdAt", "PRIORITY"):
        result = invoke(runner, "ls", "--sort", key, "--json")
        assert result.exit_code == 0, result.output


def test_ls_raw(runner):
    task = add_task(runner, "Raw task")
    result = invoke(runner, "ls", "--raw")
    assert result.exit_code == 0
    assert result.stdout.strip() == f"{task['id']}: [ ] Raw task"


def test_ls_table(runner):
    add_task(runner, "Table task")
    result = invoke(runner, "ls")
    assert result.exit_code == 0
    assert "Total: 1 task(s)" in result.stdout


# --- show / edit ---


def test_show_by_prefix(runner):
    task = add_task(runner, "Find me", "-d", "Full description")
    result = invoke(runner, "show", task["id"][:8], "--json")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["description"] == "Full description"

    result = invoke(runner, "show", task["id"], "--raw")
    assert f"Task {task['id']}" in result.stdout
    assert "Description: Full description" in result.stdout


def test_show_unknown_task(runner):
    result = invoke(runner, "show", "nonexistent")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_ambiguous_prefix(runner, cli_env):
    """Test that a prefix matching several tasks is refused."""
    records = [
        {"id": "abc1", "title": "One", "createdAt": "2024-01-01T00:00:00.000Z"},
        {"id": "abc2", "title": "Two", "createdAt": "2024-01-01T00:00:00.000Z"},
    ]
    (cli_env / "taskflow_tasks.json").write_text(json.dumps(records), encoding="utf-8")

    result = invoke(runner, "show", "abc")
    assert result.exit_code == 1
    assert "ambiguous" in result.output

    result = invoke(runner, "show", "abc2", "--json")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["title"] == "Two"


def test_edit_fields(runner):
    """Test updating several fields keeps identity and stamps updatedAt."""
    task = add_task(runner, "Draft", "--due", "2024-02-01")

    result = invoke(runner, "edit", task["id"], "--title", "Final", "-p", "low", "--tags", "a,b", "--json")
    assert result.exit_code == 0, result.output
    edited = json.loads(result.stdout)

    assert edited["id"] == task["id"]
    assert edited["createdAt"] == task["createdAt"]
    assert edited["title"] == "Final"
    assert edited["priority"] == "low"
    assert edited["tags"] == ["a", "b"]
    assert edited["dueDate"] == task["dueDate"]
    assert edited["updatedAt"] is not None


def test_edit_clear_due(runner):
    task = add_task(runner, "Due soon", "--due", "2024-02-01")
    result = invoke(runner, "edit", task["id"], "--no-due", "--json")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["dueDate"] is None


def test_edit_requires_a_field(runner):
    task = add_task(runner, "Unchanged")
    result = invoke(runner, "edit", task["id"])
    assert result.exit_code == 1
    assert "Nothing to update" in result.output


def test_edit_unknown_task(runner):
    result = invoke(runner, "edit", "missing", "--title", "x")
    assert result.exit_code == 1


# --- mv / done ---


def test_mv_changes_status(runner):
    task = add_task(runner, "Move me")
    result = invoke(runner, "mv", task["id"], "in-progress", "--json")
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)[0]["status"] == "in-progress"


def test_mv_rejects_unknown_status(runner):
    task = add_task(runner, "Stay")
    result = invoke(runner, "mv", task["id"], "archived")
    assert result.exit_code != 0
    assert list_json(runner)[0]["status"] == "todo"


def test_done_multiple(runner):
    """Test completing tasks given as a comma-separated list."""
    t1 = add_task(runner, "Task 1")
    t2 = add_task(runner, "Task 2")
    add_task(runner, "Task 3")

    result = invoke(runner, "done", f"{t1['id']},{t2['id']}")
    assert result.exit_code == 0, result.output
    assert "Completed" in result.stdout

    completed = list_json(runner, "--status", "completed")
    assert {t["id"] for t in completed} == {t1["id"], t2["id"]}


def test_done_with_only_unknown_ids_fails(runner):
    result = invoke(runner, "done", "nope1,nope2")
    assert result.exit_code == 1


# --- rm ---


def test_rm_single(runner):
    task = add_task(runner, "Delete me")
    keep = add_task(runner, "Keep me")

    result = invoke(runner, "rm", task["id"])
    assert result.exit_code == 0
    assert "Deleted" in result.stdout
    assert [t["id"] for t in list_json(runner)] == [keep["id"]]


def test_rm_unknown_task(runner):
    result = invoke(runner, "rm", "nonexistent")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_rm_multiple_asks_for_confirmation(runner):
    t1 = add_task(runner, "One")
    t2 = add_task(runner, "Two")
    ids = f"{t1['id']},{t2['id']}"

    result = invoke(runner, "rm", ids, input="n\n")
    assert result.exit_code == 0
    assert "Cancelled" in result.stdout
    assert len(list_json(runner)) == 2

    result = invoke(runner, "rm", ids, "-y", "--json")
    assert result.exit_code == 0
    assert {t["id"] for t in json.loads(result.stdout)} == {t1["id"], t2["id"]}
    assert list_json(runner) == []


def test_rm_all(runner):
    add_task(runner, "One")
    add_task(runner, "Two")

    result = invoke(runner, "rm", "*", "-y", "--json")
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"deleted": 2}
    assert list_json(runner) == []


# --- board / tags / seed / version ---


def test_board_json_has_three_columns(runner):
    todo = add_task(runner, "Todo task")
    doing = add_task(runner, "Doing task", "-s", "in-progress")

    result = invoke(runner, "board", "--json")
    assert result.exit_code == 0
    columns = json.loads(result.stdout)

    assert list(columns) == ["todo", "in-progress", "completed"]
    assert [t["id"] for t in columns["todo"]] == [todo["id"]]
    assert [t["id"] for t in columns["in-progress"]] == [doing["id"]]
    assert columns["completed"] == []


def test_board_renders(runner):
    add_task(runner, "Card title")
    result = invoke(runner, "board")
    assert result.exit_code == 0
    assert "To Do" in result.stdout or "todo" in result.stdout.lower()


def test_board_raw(runner):
    add_task(runner, "Card")
    result = invoke(runner, "board", "--raw")
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[0] == "todo (1)"
    assert "in-progress (0)" in lines
    assert "completed (0)" in lines


def test_tags(runner):
    add_task(runner, "A", "--tags", "work,client")
    add_task(runner, "B", "--tags", "team,work")

    result = invoke(runner, "tags", "--json")
    assert result.exit_code == 0
    assert json.loads(result.stdout) == ["work", "client", "team"]

    result = invoke(runner, "tags", "--raw")
    assert result.stdout.splitlines() == ["work", "client", "team"]


def test_seed_only_into_empty_collection(runner):
    result = invoke(runner, "seed", "--json")
    assert result.exit_code == 0
    seeded = json.loads(result.stdout)
    assert len(seeded) == 4

    result = invoke(runner, "seed", "--json")
    assert json.loads(result.stdout) == []
    assert len(list_json(runner)) == 4


def test_first_run_seeds_samples(runner, monkeypatch):
    """Test that a brand new data directory is seeded when enabled, once."""
    monkeypatch.setenv("TASKFLOW_SEED_SAMPLES", "1")

    tasks = list_json(runner)
    assert len(tasks) == 4
    assert [t["title"] for t in list_json(runner, "--search", "proposal")] == ["Complete project proposal"]

    result = invoke(runner, "rm", "*", "-y")
    assert result.exit_code == 0
    assert list_json(runner) == []


def test_data_dir_option(runner, tmp_path):
    other = tmp_path / "elsewhere"
    result = invoke(runner, "--data-dir", str(other), "add", "Elsewhere", "--json")
    assert result.exit_code == 0
    assert (other / "taskflow_tasks.json").exists()
    assert list_json(runner) == []


def test_corrupt_storage_exits_with_error(runner, cli_env):
    """Test that a corrupt slot is reported and left untouched."""
    slot = cli_env / "taskflow_tasks.json"
    slot.write_text("{broken", encoding="utf-8")

    result = invoke(runner, "ls")
    assert result.exit_code == 1
    assert "not valid JSON" in result.output

    result = invoke(runner, "add", "Would overwrite")
    assert result.exit_code == 1
    assert slot.read_text(encoding="utf-8") == "{broken"


def test_version(runner):
    result = invoke(runner, "version")
    assert result.exit_code == 0
    assert __version__ in result.stdout
