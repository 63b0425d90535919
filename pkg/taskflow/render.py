"""
Plain-text board rendering for terminals and logs.
"""
from typing import List

from .filters import BoardView, ColumnView
from .schema import Task, TaskPriority

PRIORITY_LABELS = {
    TaskPriority.HIGH: "High",
    TaskPriority.MEDIUM: "Medium",
    TaskPriority.LOW: "Low",
}


def format_task(task: Task) -> str:
    """One-line task summary."""
    parts = [f"[{PRIORITY_LABELS[task.priority]}]", task.title]
    if task.due_date:
        parts.append(f"(due {task.due_date})")
    if task.tags:
        parts.append(" ".join(f"#{t}" for t in task.tags))
    done, total = task.subtask_progress
    parts.append(f"{done}/{total} subtasks" if total else "no subtasks")
    parts.append(f"@{task.assignee.initials}")
    return " ".join(parts) + f"  <{task.id}>"


def format_column(view: ColumnView) -> List[str]:
    column = view.column
    count = f"{len(view.tasks)} of {view.total}" if view.is_filtered else str(view.total)
    lines = [f"■ {column.title} {column.accent_color} ({count})  <{column.id}>"]
    if not view.tasks:
        lines.append("    No tasks match the filters" if view.total else "    No tasks")
    for task in view.tasks:
        lines.append(f"  - {format_task(task)}")
        if task.description:
            lines.append(f"      {task.description}")
        for subtask in task.subtasks:
            mark = "x" if subtask.is_done else " "
            lines.append(f"      [{mark}] {subtask.title}  <{subtask.id}>")
    return lines


def format_board(view: BoardView) -> str:
    board = view.board
    lines = [f"📋 {board.title}  <{board.id}>"]
    if board.description:
        lines.append(board.description)
    summary = f"Columns: {len(view.columns)}  Tasks: {view.visible_tasks}"
    if view.visible_tasks != view.total_tasks:
        summary += f"  Total: {view.total_tasks}"
    lines.append(summary)
    if not view.columns:
        lines.append("")
        lines.append("No columns yet. Add one to get started.")
    for column_view in view.columns:
        lines.append("")
        lines.extend(format_column(column_view))
    return "\n".join(lines)
