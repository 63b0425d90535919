"""
TaskFlow board schema.

Structure:
  Board → Columns (ordered) → Tasks (ordered) → Subtasks (ordered)

Wire format is the backend's camelCase JSON; Python attributes are snake_case.
Entities are frozen so board states can be shared between snapshots.
"""
from enum import Enum
from dataclasses import dataclass, field, replace
from typing import Optional, List, Dict, Any, Tuple


class TaskPriority(Enum):
    """Task priority, ordered from most to least urgent."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_str(cls, value: Optional[str]) -> "TaskPriority":
        try:
            return cls[(value or "").upper()]
        except KeyError:
            return cls.MEDIUM

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {TaskPriority.HIGH: 0, TaskPriority.MEDIUM: 1, TaskPriority.LOW: 2}

# Accent colors offered for new columns, in selection order
COLUMN_PALETTE: Tuple[str, ...] = (
    "#6d5efc",
    "#3b82f6",
    "#f2c94c",
    "#10b981",
    "#f59e0b",
    "#ef4444",
)

DEFAULT_ASSIGNEE_NAME = "Unassigned"


@dataclass(frozen=True)
class Assignee:
    name: str
    initials: str

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "initials": self.initials}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Assignee":
        data = data or {}
        return cls(name=data.get("name", ""), initials=data.get("initials", ""))


@dataclass(frozen=True)
class Subtask:
    id: str
    title: str
    is_done: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "isDone": self.is_done}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subtask":
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title", ""),
            is_done=bool(data.get("isDone", False)),
        )


@dataclass(frozen=True)
class Task:
    """A card on the board."""

    id: str
    title: str
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee: Assignee = field(default_factory=lambda: Assignee(DEFAULT_ASSIGNEE_NAME, "??"))
    description: Optional[str] = None
    due_date: Optional[str] = None     # ISO date, e.g. 2026-10-19
    tags: Tuple[str, ...] = ()
    subtasks: Tuple[Subtask, ...] = ()

    @property
    def subtask_progress(self) -> Tuple[int, int]:
        """(completed, total) subtasks."""
        return sum(1 for s in self.subtasks if s.is_done), len(self.subtasks)

    def search_text(self) -> str:
        """Text the board search matches against."""
        parts = [self.title, self.description or "", self.assignee.name, " ".join(self.tags)]
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "priority": self.priority.value,
            "assignee": self.assignee.to_dict(),
        }
        if self.description is not None:
            data["description"] = self.description
        if self.due_date is not None:
            data["dueDate"] = self.due_date
        if self.tags:
            data["tags"] = list(self.tags)
        if self.subtasks:
            data["subtasks"] = [s.to_dict() for s in self.subtasks]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title", ""),
            priority=TaskPriority.from_str(data.get("priority")),
            assignee=Assignee.from_dict(data.get("assignee")),
            description=data.get("description") or None,
            due_date=data.get("dueDate") or None,
            tags=tuple(data.get("tags") or ()),
            subtasks=tuple(Subtask.from_dict(s) for s in data.get("subtasks") or ()),
        )


@dataclass(frozen=True)
class Column:
    id: str
    title: str
    accent_color: str = COLUMN_PALETTE[0]
    tasks: Tuple[Task, ...] = ()

    def task_index(self, task_id: str) -> int:
        """Position of a task in this column, or -1."""
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                return i
        return -1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "accentColor": self.accent_color,
            "tasks": [t.to_dict() for t in self.tasks],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Column":
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title", ""),
            accent_color=data.get("accentColor") or COLUMN_PALETTE[0],
            tasks=tuple(Task.from_dict(t) for t in data.get("tasks") or ()),
        )


@dataclass(frozen=True)
class Board:
    id: str
    title: str
    description: Optional[str] = None
    columns: Tuple[Column, ...] = ()

    def column_index(self, column_id: str) -> int:
        """Position of a column on this board, or -1."""
        for i, column in enumerate(self.columns):
            if column.id == column_id:
                return i
        return -1

    def get_column(self, column_id: str) -> Optional[Column]:
        idx = self.column_index(column_id)
        return self.columns[idx] if idx != -1 else None

    def find_task(self, task_id: str) -> Optional[Tuple[Column, Task]]:
        """Locate a task anywhere on the board."""
        for column in self.columns:
            idx = column.task_index(task_id)
            if idx != -1:
                return column, column.tasks[idx]
        return None

    @property
    def task_count(self) -> int:
        return sum(len(c.tasks) for c in self.columns)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "columns": [c.to_dict() for c in self.columns],
        }
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Board":
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title", ""),
            description=data.get("description") or None,
            columns=tuple(Column.from_dict(c) for c in data.get("columns") or ()),
        )


@dataclass(frozen=True)
class User:
    full_name: str
    email: str
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"fullName": self.full_name, "email": self.email}
        if self.id is not None:
            data["id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "User":
        data = data or {}
        user_id = data.get("id")
        return cls(
            full_name=data.get("fullName", ""),
            email=data.get("email", ""),
            id=str(user_id) if user_id is not None else None,
        )


# ── Mutation payloads ────────────────────────────────────────────────────────


@dataclass
class TaskDraft:
    """Everything needed to create a task; the server assigns the id."""
    title: str
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee: Assignee = field(default_factory=lambda: Assignee(DEFAULT_ASSIGNEE_NAME, "??"))
    description: Optional[str] = None
    due_date: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    subtasks: List[str] = field(default_factory=list)  # titles

    def to_payload(self) -> Dict[str, Any]:
        """Task creation body."""
        payload: Dict[str, Any] = {
            "title": self.title,
            "priority": self.priority.value,
            "assigneeName": self.assignee.name,
            "assigneeInitials": self.assignee.initials,
        }
        if self.description:
            payload["description"] = self.description
        if self.due_date:
            payload["dueDate"] = self.due_date
        if self.tags:
            payload["tags"] = list(self.tags)
        if self.subtasks:
            payload["subtasks"] = [{"title": t} for t in self.subtasks]
        return payload

    def to_task(self, task_id: str, subtask_ids: Optional[List[str]] = None) -> Task:
        """Materialize locally (used only by client-side reducers)."""
        ids = subtask_ids or [f"{task_id}-{i}" for i in range(len(self.subtasks))]
        return Task(
            id=task_id,
            title=self.title,
            priority=self.priority,
            assignee=self.assignee,
            description=self.description,
            due_date=self.due_date,
            tags=tuple(self.tags),
            subtasks=tuple(Subtask(id=sid, title=t) for sid, t in zip(ids, self.subtasks)),
        )


@dataclass
class TaskPatch:
    """Partial task update. Fields left as None are not sent."""
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[str] = None
    tags: Optional[List[str]] = None
    assignee: Optional[Assignee] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.title is not None:
            payload["title"] = self.title
        if self.description is not None:
            payload["description"] = self.description
        if self.priority is not None:
            payload["priority"] = self.priority.value
        if self.due_date is not None:
            payload["dueDate"] = self.due_date
        if self.tags is not None:
            payload["tags"] = list(self.tags)
        if self.assignee is not None:
            payload["assigneeName"] = self.assignee.name
            payload["assigneeInitials"] = self.assignee.initials
        return payload

    def apply(self, task: Task) -> Task:
        """Merge into a task, keeping fields the patch does not set."""
        changes: Dict[str, Any] = {}
        if self.title is not None:
            changes["title"] = self.title
        if self.description is not None:
            changes["description"] = self.description
        if self.priority is not None:
            changes["priority"] = self.priority
        if self.due_date is not None:
            changes["due_date"] = self.due_date
        if self.tags is not None:
            changes["tags"] = tuple(self.tags)
        if self.assignee is not None:
            changes["assignee"] = self.assignee
        return replace(task, **changes)

    def is_empty(self) -> bool:
        return not self.to_payload()


def palette_color(column_count: int) -> str:
    """Accent color for the next column on a board with `column_count` columns."""
    return COLUMN_PALETTE[column_count % len(COLUMN_PALETTE)]
