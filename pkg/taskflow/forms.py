"""
Form validation for tasks, columns and authentication.

Forms turn raw user input into the payload objects the store accepts. Invalid
input raises ValidationError before anything is sent to the backend.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .schema import Assignee, DEFAULT_ASSIGNEE_NAME, TaskDraft, TaskPatch, TaskPriority

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2


class ValidationError(Exception):
    """Raised when form input fails validation. `errors` maps field -> message."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))


def initials_for(name: str) -> str:
    """First letters of the first two words, upper-cased; '??' for no name."""
    parts = name.split()
    return "".join(p[0].upper() for p in parts[:2]) or "??"


def normalize_tags(tags: List[str]) -> List[str]:
    return [t.strip() for t in tags if t and t.strip()]


# ── Task form ────────────────────────────────────────────────────────────────


@dataclass
class TaskForm:
    title: str = ""
    column_id: str = ""
    description: str = ""
    priority: str = TaskPriority.MEDIUM.value
    due_date: str = ""
    assignee_name: str = ""
    tags: List[str] = field(default_factory=list)
    subtasks: List[str] = field(default_factory=list)

    def validate(self) -> None:
        errors = {}
        if not self.title.strip():
            errors["title"] = "Title is required"
        if not self.column_id:
            errors["column_id"] = "Choose a column"
        if self.priority not in {p.value for p in TaskPriority}:
            errors["priority"] = f"Unknown priority: {self.priority}"
        if errors:
            raise ValidationError(errors)

    def _assignee(self) -> Assignee:
        name = self.assignee_name.strip()
        return Assignee(name=name or DEFAULT_ASSIGNEE_NAME, initials=initials_for(name))

    def to_draft(self) -> TaskDraft:
        self.validate()
        return TaskDraft(
            title=self.title.strip(),
            priority=TaskPriority(self.priority),
            assignee=self._assignee(),
            description=self.description.strip() or None,
            due_date=self.due_date.strip() or None,
            tags=normalize_tags(self.tags),
            subtasks=[s.strip() for s in self.subtasks if s.strip()],
        )

    def to_patch(self) -> TaskPatch:
        """Patch for editing; empty optional fields are left out."""
        self.validate()
        tags = normalize_tags(self.tags)
        return TaskPatch(
            title=self.title.strip(),
            description=self.description.strip() or None,
            priority=TaskPriority(self.priority),
            due_date=self.due_date.strip() or None,
            tags=tags or None,
            assignee=self._assignee(),
        )


# ── Column form ──────────────────────────────────────────────────────────────


@dataclass
class ColumnForm:
    title: str = ""
    accent_color: Optional[str] = None

    def validate(self) -> str:
        """Return the trimmed title."""
        title = self.title.strip()
        if not title:
            raise ValidationError({"title": "Column title is required"})
        return title


# ── Auth form ────────────────────────────────────────────────────────────────


@dataclass
class AuthForm:
    email: str = ""
    password: str = ""
    full_name: str = ""
    confirm_password: str = ""
    register: bool = False

    def errors(self) -> Dict[str, str]:
        errors = {}
        if self.register:
            name = self.full_name.strip()
            if not name:
                errors["full_name"] = "Enter your name"
            elif len(name) < MIN_NAME_LENGTH:
                errors["full_name"] = f"Name must be at least {MIN_NAME_LENGTH} characters"

        email = self.email.strip()
        if not email:
            errors["email"] = "Enter your email"
        elif not EMAIL_RE.match(email.lower()):
            errors["email"] = "Invalid email"

        if not self.password:
            errors["password"] = "Enter a password"
        elif len(self.password) < MIN_PASSWORD_LENGTH:
            errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"

        if self.register:
            if not self.confirm_password:
                errors["confirm_password"] = "Repeat the password"
            elif self.confirm_password != self.password:
                errors["confirm_password"] = "Passwords do not match"
        return errors

    def validate(self) -> None:
        errors = self.errors()
        if errors:
            raise ValidationError(errors)
