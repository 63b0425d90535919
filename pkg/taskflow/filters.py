"""
Derived board views: search, priority filter and sort.

Nothing here mutates the board; a view is recomputed from the board each time
the filters change.
"""
import locale
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .schema import Board, Column, Task, TaskPriority


class SortMode(Enum):
    PRIORITY = "priority"
    ALPHABETICAL = "alphabetical"
    DUE_DATE_ASC = "dueDateAsc"
    DUE_DATE_DESC = "dueDateDesc"

    @classmethod
    def from_str(cls, value: str) -> "SortMode":
        for mode in cls:
            if mode.value.lower() == (value or "").lower():
                return mode
        return cls.PRIORITY


# None stands for "all priorities"
PriorityFilter = Optional[TaskPriority]


def parse_priority_filter(value: Optional[str]) -> PriorityFilter:
    if not value or value.lower() == "all":
        return None
    try:
        return TaskPriority(value.lower())
    except ValueError:
        return None


@dataclass(frozen=True)
class ColumnView:
    column: Column
    tasks: Tuple[Task, ...]
    total: int

    @property
    def is_filtered(self) -> bool:
        return len(self.tasks) != self.total


@dataclass(frozen=True)
class BoardView:
    board: Board
    columns: Tuple[ColumnView, ...]

    @property
    def visible_tasks(self) -> int:
        return sum(len(c.tasks) for c in self.columns)

    @property
    def total_tasks(self) -> int:
        return sum(c.total for c in self.columns)


def matches_query(task: Task, query: str) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    return needle in task.search_text().lower()


def matches_priority(task: Task, priority: PriorityFilter) -> bool:
    return priority is None or task.priority == priority


def _fold(text: str) -> str:
    """Drop accents from Latin letters; other scripts keep their letters intact."""
    out = []
    base = ""
    for ch in unicodedata.normalize("NFD", text):
        if unicodedata.combining(ch):
            if base.isascii():
                continue
        else:
            base = ch
        out.append(ch)
    return unicodedata.normalize("NFC", "".join(out))


def _collate(text: str) -> str:
    try:
        return locale.strxfrm(text)
    except (ValueError, locale.Error):
        return text


def _alpha_key(task: Task) -> Tuple[str, str]:
    """Collation key: base letters first, accents and case only break ties."""
    title = task.title.casefold()
    return _collate(_fold(title)), _collate(title)


def sort_tasks(tasks: List[Task], mode: SortMode) -> List[Task]:
    """Stable sort by `mode`; tasks without a due date go last (asc) or first (desc)."""
    if mode is SortMode.PRIORITY:
        return sorted(tasks, key=lambda t: t.priority.rank)
    if mode is SortMode.ALPHABETICAL:
        return sorted(tasks, key=_alpha_key)

    dated = [t for t in tasks if t.due_date]
    undated = [t for t in tasks if not t.due_date]
    if mode is SortMode.DUE_DATE_ASC:
        return sorted(dated, key=lambda t: t.due_date) + undated
    return undated + sorted(dated, key=lambda t: t.due_date, reverse=True)


def filter_board(board: Board, query: str = "", priority: PriorityFilter = None,
                 sort_mode: SortMode = SortMode.PRIORITY) -> BoardView:
    """Per-column filtered and sorted tasks, with the unfiltered counts."""
    views = []
    for column in board.columns:
        kept = [t for t in column.tasks if matches_query(t, query) and matches_priority(t, priority)]
        views.append(ColumnView(column=column, tasks=tuple(sort_tasks(kept, sort_mode)),
                                total=len(column.tasks)))
    return BoardView(board=board, columns=tuple(views))
