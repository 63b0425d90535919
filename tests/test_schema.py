"""
Tests for the board schema: wire decoding, payload building, patches.
"""
from pkg.taskflow.schema import (
    Assignee,
    Board,
    COLUMN_PALETTE,
    Subtask,
    Task,
    TaskDraft,
    TaskPatch,
    TaskPriority,
    User,
    palette_color,
)


WIRE_BOARD = {
    "id": "board-default",
    "title": "TaskFlow",
    "description": "Team board",
    "columns": [
        {
            "id": "col-1",
            "title": "Backlog",
            "accentColor": "#f2c94c",
            "tasks": [
                {
                    "id": "task-1",
                    "title": "Write docs",
                    "description": "Public API",
                    "priority": "medium",
                    "dueDate": "2026-11-01",
                    "tags": ["docs", "api"],
                    "assignee": {"name": "Anna Smirnova", "initials": "AS"},
                    "subtasks": [
                        {"id": "s-1", "title": "Outline", "isDone": True},
                        {"id": "s-2", "title": "Draft", "isDone": False},
                    ],
                    "createdAt": "ignored",
                },
            ],
        },
        {"id": "col-2", "title": "Done", "accentColor": "#10b981", "tasks": []},
    ],
}


def test_board_from_wire():
    """Test camelCase JSON decodes into the nested model"""
    board = Board.from_dict(WIRE_BOARD)
    assert board.id == "board-default"
    assert [c.id for c in board.columns] == ["col-1", "col-2"]

    task = board.columns[0].tasks[0]
    assert task.priority is TaskPriority.MEDIUM
    assert task.due_date == "2026-11-01"
    assert task.tags == ("docs", "api")
    assert task.assignee == Assignee("Anna Smirnova", "AS")
    assert task.subtasks[0] == Subtask("s-1", "Outline", True)
    assert task.subtask_progress == (1, 2)


def test_board_to_wire_matches_input_shape():
    board = Board.from_dict(WIRE_BOARD)
    data = board.to_dict()
    assert data["columns"][0]["accentColor"] == "#f2c94c"
    assert data["columns"][0]["tasks"][0]["dueDate"] == "2026-11-01"
    assert data["columns"][0]["tasks"][0]["subtasks"][0]["isDone"] is True
    assert "createdAt" not in data["columns"][0]["tasks"][0]


def test_optional_fields_default_when_missing():
    task = Task.from_dict({"id": 7, "title": "Bare", "priority": "urgent"})
    assert task.id == "7"
    assert task.priority is TaskPriority.MEDIUM
    assert task.description is None
    assert task.due_date is None
    assert task.tags == ()
    assert task.subtasks == ()
    assert "dueDate" not in task.to_dict()
    assert "tags" not in task.to_dict()


def test_priority_rank_order():
    assert TaskPriority.HIGH.rank < TaskPriority.MEDIUM.rank < TaskPriority.LOW.rank
    assert TaskPriority.from_str("HIGH") is TaskPriority.HIGH
    assert TaskPriority.from_str(None) is TaskPriority.MEDIUM


def test_board_lookups():
    board = Board.from_dict(WIRE_BOARD)
    assert board.column_index("col-2") == 1
    assert board.column_index("nope") == -1
    assert board.get_column("nope") is None
    column, task = board.find_task("task-1")
    assert column.id == "col-1" and task.title == "Write docs"
    assert board.find_task("nope") is None
    assert board.task_count == 1


def test_search_text_includes_all_fields():
    task = Board.from_dict(WIRE_BOARD).columns[0].tasks[0]
    text = task.search_text()
    for needle in ("Write docs", "Public API", "Anna Smirnova", "docs", "api"):
        assert needle in text


def test_draft_payload():
    draft = TaskDraft(
        title="Deploy",
        priority=TaskPriority.HIGH,
        assignee=Assignee("Ivan Petrov", "IP"),
        tags=["ops"],
        subtasks=["Backup", "Migrate"],
    )
    assert draft.to_payload() == {
        "title": "Deploy",
        "priority": "high",
        "assigneeName": "Ivan Petrov",
        "assigneeInitials": "IP",
        "tags": ["ops"],
        "subtasks": [{"title": "Backup"}, {"title": "Migrate"}],
    }


def test_patch_sends_only_set_fields():
    assert TaskPatch().to_payload() == {}
    assert TaskPatch().is_empty()
    assert TaskPatch(title="New").to_payload() == {"title": "New"}
    assert TaskPatch(priority=TaskPriority.LOW, tags=[]).to_payload() == {"priority": "low", "tags": []}


def test_patch_apply_keeps_unset_fields():
    task = Task(id="t", title="Old", priority=TaskPriority.LOW, due_date="2026-10-30")
    patched = TaskPatch(title="New").apply(task)
    assert patched.title == "New"
    assert patched.priority is TaskPriority.LOW
    assert patched.due_date == "2026-10-30"
    assert task.title == "Old"


def test_user_round_trip():
    user = User.from_dict({"id": 5, "fullName": "Anna", "email": "anna@example.com"})
    assert user.id == "5"
    assert user.to_dict() == {"fullName": "Anna", "email": "anna@example.com", "id": "5"}


def test_palette_color_wraps():
    assert palette_color(0) == COLUMN_PALETTE[0]
    assert palette_color(len(COLUMN_PALETTE)) == COLUMN_PALETTE[0]
    assert palette_color(3) == "#10b981"
