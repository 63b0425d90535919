"""
Drag-and-drop translation.

The presentation layer reports a finished drag as two items: the one being
dragged and the one under the pointer when it was dropped. This module decides
which store call that drop means.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .store import BoardStore

logger = logging.getLogger(__name__)


class DragKind(Enum):
    COLUMN = "column"
    TASK = "task"
    DROPZONE = "task-droppable"   # a column's task area, used when it is empty


@dataclass(frozen=True)
class DragItem:
    kind: DragKind
    id: str
    column_id: str


def dropzone_id(column_id: str) -> str:
    return f"column-{column_id}-dropzone"


def handle_drag_end(store: BoardStore, active: DragItem, over: Optional[DragItem]) -> bool:
    """Apply a finished drag; returns True when a move was sent and reconciled."""
    if over is None or active.id == over.id:
        return False

    if active.kind is DragKind.COLUMN:
        target = over.id if over.kind is DragKind.COLUMN else over.column_id
        if target == active.id:
            return False
        return store.move_column(active.id, target)

    if active.kind is DragKind.TASK:
        if over.kind is DragKind.TASK:
            return store.move_task(active.id, active.column_id, over.column_id, over.id)
        return store.move_task(active.id, active.column_id, over.column_id)

    logger.warning(f"Ignoring drag of unsupported kind {active.kind.value}")
    return False
