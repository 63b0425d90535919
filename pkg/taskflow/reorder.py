"""
Pure reordering and local-mutation functions for boards.

Nothing here touches the network or the store: every function takes a value
and returns a new value, leaving its input unchanged.

`move_column` and `move_task` are what the board store applies for optimistic
moves. The edit reducers (`add_task`, `update_task`, `remove_task`,
`set_subtask_done`, `add_column`, `update_column`, `remove_column`) are not
applied by the store, which always waits for the refetched board after an
edit. They model the server's result of each edit, which is what an
in-memory backend needs to stand in for the REST API.
"""
import uuid
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple, TypeVar

from .schema import Board, Column, Task, TaskDraft, TaskPatch, palette_color

T = TypeVar("T")


def array_move(items: Sequence[T], from_index: int, to_index: int) -> List[T]:
    """Return a copy with the item at `from_index` relocated to `to_index`."""
    result = list(items)
    item = result.pop(from_index)
    result.insert(to_index, item)
    return result


def reordered_column_ids(board: Board, active_id: str, over_id: str) -> Optional[List[str]]:
    """
    Column id order after dragging `active_id` onto `over_id`.

    Returns None when either id is unknown or both are the same column.
    """
    from_index = board.column_index(active_id)
    to_index = board.column_index(over_id)
    if from_index == -1 or to_index == -1 or from_index == to_index:
        return None
    return [c.id for c in array_move(board.columns, from_index, to_index)]


def insertion_index(
    target_tasks: Sequence[Task],
    anchor_id: Optional[str],
    same_column: bool,
    removed_from: int,
) -> int:
    """
    Where a moved task lands in the target column once it has been removed
    from its source.

    `target_tasks` is the target column as it was before the move. A missing
    or unknown anchor means append. Within one column, removing the task from
    before the insertion point shifts everything after it left by one, so the
    index is decremented to compensate.
    """
    index = _index_of(target_tasks, anchor_id)
    if index == -1:
        index = len(target_tasks)
    if same_column and removed_from < index:
        index -= 1
    return index


# ── Board reducers ───────────────────────────────────────────────────────────


def move_column(board: Board, active_id: str, over_id: str) -> Board:
    from_index = board.column_index(active_id)
    to_index = board.column_index(over_id)
    if from_index == -1 or to_index == -1 or from_index == to_index:
        return board
    return replace(board, columns=tuple(array_move(board.columns, from_index, to_index)))


def move_task(
    board: Board,
    task_id: str,
    source_column_id: str,
    target_column_id: str,
    target_task_id: Optional[str] = None,
) -> Board:
    """Move a task before `target_task_id` (or to the end) of the target column."""
    source_index = board.column_index(source_column_id)
    target_index = board.column_index(target_column_id)
    if source_index == -1 or target_index == -1:
        return board
    if target_task_id and target_task_id == task_id:
        return board

    columns = [list(c.tasks) for c in board.columns]
    source_tasks = columns[source_index]
    task_index = board.columns[source_index].task_index(task_id)
    if task_index == -1:
        return board

    insert_at = insertion_index(
        board.columns[target_index].tasks,
        target_task_id,
        source_index == target_index,
        task_index,
    )
    task = source_tasks.pop(task_index)
    columns[target_index].insert(insert_at, task)

    return _with_task_lists(board, columns)


# ── Edit reducers (server-side results) ──────────────────────────────────────


def add_task(board: Board, column_id: str, draft: TaskDraft, task_id: Optional[str] = None) -> Board:
    """Insert a new task at the front of a column."""
    idx = board.column_index(column_id)
    if idx == -1:
        return board
    task = draft.to_task(task_id or str(uuid.uuid4()))
    columns = [list(c.tasks) for c in board.columns]
    columns[idx].insert(0, task)
    return _with_task_lists(board, columns)


def update_task(
    board: Board,
    task_id: str,
    from_column_id: str,
    patch: TaskPatch,
    to_column_id: Optional[str] = None,
) -> Board:
    """
    Merge `patch` into a task, optionally reassigning its column.

    A task that stays in its column keeps its position; a task that changes
    column goes to the front of the destination.
    """
    source_index = board.column_index(from_column_id)
    if source_index == -1:
        return board
    task_index = board.columns[source_index].task_index(task_id)
    if task_index == -1:
        return board
    destination_id = to_column_id or from_column_id
    destination_index = board.column_index(destination_id)
    if destination_index == -1:
        return board

    columns = [list(c.tasks) for c in board.columns]
    task = patch.apply(columns[source_index].pop(task_index))
    insert_at = task_index if destination_index == source_index else 0
    columns[destination_index].insert(insert_at, task)
    return _with_task_lists(board, columns)


def remove_task(board: Board, column_id: str, task_id: str) -> Board:
    idx = board.column_index(column_id)
    if idx == -1:
        return board
    column = board.columns[idx]
    tasks = tuple(t for t in column.tasks if t.id != task_id)
    if len(tasks) == len(column.tasks):
        return board
    return _replace_column(board, idx, replace(column, tasks=tasks))


def set_subtask_done(board: Board, column_id: str, task_id: str, subtask_id: str, is_done: bool) -> Board:
    idx = board.column_index(column_id)
    if idx == -1:
        return board
    column = board.columns[idx]
    t_idx = column.task_index(task_id)
    if t_idx == -1:
        return board
    task = column.tasks[t_idx]
    subtasks = tuple(
        replace(s, is_done=is_done) if s.id == subtask_id else s for s in task.subtasks
    )
    tasks = list(column.tasks)
    tasks[t_idx] = replace(task, subtasks=subtasks)
    return _replace_column(board, idx, replace(column, tasks=tuple(tasks)))


def add_column(board: Board, title: str, accent_color: Optional[str] = None,
               column_id: Optional[str] = None) -> Board:
    column = Column(
        id=column_id or str(uuid.uuid4()),
        title=title,
        accent_color=accent_color or palette_color(len(board.columns)),
    )
    return replace(board, columns=board.columns + (column,))


def update_column(board: Board, column_id: str, title: Optional[str] = None,
                  accent_color: Optional[str] = None) -> Board:
    idx = board.column_index(column_id)
    if idx == -1:
        return board
    column = board.columns[idx]
    if title is not None:
        column = replace(column, title=title)
    if accent_color is not None:
        column = replace(column, accent_color=accent_color)
    return _replace_column(board, idx, column)


def remove_column(board: Board, column_id: str) -> Board:
    columns = tuple(c for c in board.columns if c.id != column_id)
    if len(columns) == len(board.columns):
        return board
    return replace(board, columns=columns)


# ── Helpers ──────────────────────────────────────────────────────────────────


def _index_of(tasks: Sequence[Task], task_id: Optional[str]) -> int:
    if not task_id:
        return -1
    for i, task in enumerate(tasks):
        if task.id == task_id:
            return i
    return -1


def _with_task_lists(board: Board, task_lists: List[List[Task]]) -> Board:
    columns: Tuple[Column, ...] = tuple(
        replace(column, tasks=tuple(tasks)) for column, tasks in zip(board.columns, task_lists)
    )
    return replace(board, columns=columns)


def _replace_column(board: Board, index: int, column: Column) -> Board:
    columns = list(board.columns)
    columns[index] = column
    return replace(board, columns=tuple(columns))
