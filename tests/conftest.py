"""Shared fixtures for TaskFlow tests: sample boards and an in-memory backend."""

import itertools
from dataclasses import replace

import pytest

from pkg.taskflow import reorder
from pkg.taskflow.api import ApiError
from pkg.taskflow.schema import (
    Assignee,
    Board,
    Column,
    Subtask,
    Task,
    TaskPriority,
)


def make_task(task_id, title=None, priority=TaskPriority.MEDIUM, **kwargs):
    assignee = kwargs.pop("assignee", Assignee("Anna Smirnova", "AS"))
    return Task(id=task_id, title=title or task_id, priority=priority, assignee=assignee, **kwargs)


def make_board(board_id="board-1", **columns):
    """make_board(backlog=["a", "b"], done=[]) -> Board with those columns in order."""
    cols = tuple(
        Column(id=col_id, title=col_id.title(), tasks=tuple(
            t if isinstance(t, Task) else make_task(t) for t in tasks
        ))
        for col_id, tasks in columns.items()
    )
    return Board(id=board_id, title="TaskFlow", columns=cols)


class FakeBackend:
    """
    In-memory stand-in for TaskFlowClient.

    Applies mutations with the same reordering rules the server uses, records
    every call, and raises ApiError for method names listed in `failing`.
    """

    def __init__(self, *boards):
        self.boards = {b.id: b for b in boards}
        self.calls = []
        self.failing = set()
        self.token = None
        self._ids = itertools.count(1)

    def _check(self, name, *args, **kwargs):
        self.calls.append((name, args, kwargs))
        if name in self.failing:
            raise ApiError(f"{name} failed", status=500, body={"message": "boom"})

    def _board(self, board_id):
        if board_id not in self.boards:
            raise ApiError(f"board {board_id} not found", status=404)
        return self.boards[board_id]

    def call_names(self):
        return [c[0] for c in self.calls]

    def set_token(self, token):
        self.token = token

    # boards
    def list_boards(self):
        self._check("list_boards")
        return list(self.boards.values())

    def get_board(self, board_id):
        self._check("get_board", board_id)
        return self._board(board_id)

    def create_board(self, title, description=None):
        self._check("create_board", title, description)
        board = Board(id=f"board-new-{next(self._ids)}", title=title, description=description)
        self.boards[board.id] = board
        return board

    def update_board(self, board_id, title=None, description=None):
        self._check("update_board", board_id, title=title, description=description)
        board = self._board(board_id)
        if title is not None:
            board = replace(board, title=title)
        if description is not None:
            board = replace(board, description=description)
        self.boards[board_id] = board
        return board

    def delete_board(self, board_id):
        self._check("delete_board", board_id)
        self.boards.pop(board_id, None)

    # columns
    def create_column(self, board_id, title, accent_color=None):
        self._check("create_column", board_id, title, accent_color)
        column_id = f"col-{next(self._ids)}"
        board = reorder.add_column(self._board(board_id), title, accent_color, column_id=column_id)
        self.boards[board_id] = board
        return board.get_column(column_id)

    def update_column(self, board_id, column_id, title=None, accent_color=None):
        self._check("update_column", board_id, column_id, title=title, accent_color=accent_color)
        board = reorder.update_column(self._board(board_id), column_id, title, accent_color)
        self.boards[board_id] = board
        return board.get_column(column_id)

    def delete_column(self, board_id, column_id):
        self._check("delete_column", board_id, column_id)
        self.boards[board_id] = reorder.remove_column(self._board(board_id), column_id)

    def reorder_columns(self, board_id, column_ids):
        self._check("reorder_columns", board_id, list(column_ids))
        board = self._board(board_id)
        by_id = {c.id: c for c in board.columns}
        self.boards[board_id] = replace(board, columns=tuple(by_id[c] for c in column_ids))

    # tasks
    def create_task(self, board_id, column_id, draft):
        self._check("create_task", board_id, column_id, draft)
        board = self._board(board_id)
        idx = board.column_index(column_id)
        if idx == -1:
            raise ApiError("column not found", status=404)
        task = draft.to_task(f"task-{next(self._ids)}")
        columns = list(board.columns)
        columns[idx] = replace(columns[idx], tasks=columns[idx].tasks + (task,))
        self.boards[board_id] = replace(board, columns=tuple(columns))
        return task

    def update_task(self, board_id, column_id, task_id, patch, new_column_id=None):
        self._check("update_task", board_id, column_id, task_id, patch, new_column_id=new_column_id)
        board = reorder.update_task(self._board(board_id), task_id, column_id, patch, new_column_id)
        self.boards[board_id] = board
        return board.find_task(task_id)[1]

    def delete_task(self, board_id, column_id, task_id):
        self._check("delete_task", board_id, column_id, task_id)
        self.boards[board_id] = reorder.remove_task(self._board(board_id), column_id, task_id)

    def move_task(self, board_id, column_id, task_id, target_column_id, target_task_id=None):
        self._check("move_task", board_id, column_id, task_id, target_column_id, target_task_id)
        self.boards[board_id] = reorder.move_task(
            self._board(board_id), task_id, column_id, target_column_id, target_task_id
        )

    def toggle_subtask(self, board_id, column_id, task_id, subtask_id, is_done):
        self._check("toggle_subtask", board_id, column_id, task_id, subtask_id, is_done)
        self.boards[board_id] = reorder.set_subtask_done(
            self._board(board_id), column_id, task_id, subtask_id, is_done
        )
        return Subtask(id=subtask_id, title="", is_done=is_done)


@pytest.fixture
def sample_board():
    """backlog=[t1, t2, t3], doing=[t4], done=[]"""
    return make_board(
        backlog=[
            make_task("t1", "Write spec", TaskPriority.LOW, due_date="2026-11-02", tags=("docs",)),
            make_task("t2", "Fix login bug", TaskPriority.HIGH,
                      subtasks=(Subtask("s1", "Reproduce"), Subtask("s2", "Patch", True))),
            make_task("t3", "Deploy", TaskPriority.MEDIUM, due_date="2026-10-20",
                      description="Roll out to staging"),
        ],
        doing=[make_task("t4", "Review PR", TaskPriority.HIGH)],
        done=[],
    )


@pytest.fixture
def backend(sample_board):
    return FakeBackend(sample_board)
