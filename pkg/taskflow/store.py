"""
Board store: the client's single source of board state.

Every mutation goes to the backend first and is then reconciled by refetching
the affected board; the refetched board replaces the local copy. Failures are
logged and leave the state as it was. With optimistic moves enabled, column
and task moves are applied locally before the request and rolled back if it
fails.
"""
import logging
from typing import Callable, List, Optional, Tuple

from . import reorder
from .api import ApiError, TaskFlowClient
from .schema import Board, TaskDraft, TaskPatch, palette_color
from .state import (
    BoardState,
    remove_board,
    select_board,
    set_boards,
    update_active_board,
    upsert_board,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[[BoardState], None]


class BoardStore:
    """Holds the current BoardState and exposes every board mutation."""

    def __init__(self, client: TaskFlowClient, state: Optional[BoardState] = None,
                 optimistic_moves: bool = False):
        self.client = client
        self.optimistic_moves = optimistic_moves
        self._state = state or BoardState()
        self.subscribers: List[Subscriber] = []

    # ── State access ─────────────────────────────────────────────────────────

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def boards(self) -> Tuple[Board, ...]:
        return self._state.boards

    @property
    def active_board(self) -> Optional[Board]:
        return self._state.active_board

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for state replacements; returns an unsubscribe function."""
        self.subscribers.append(callback)

        def unsubscribe():
            if callback in self.subscribers:
                self.subscribers.remove(callback)

        return unsubscribe

    def _set_state(self, new_state: BoardState) -> None:
        if new_state is self._state:
            return
        self._state = new_state
        for callback in list(self.subscribers):
            try:
                callback(new_state)
            except Exception:
                logger.exception("Board state subscriber failed")

    # ── Loading / reconciliation ─────────────────────────────────────────────

    def load_boards(self) -> bool:
        """Fetch every board for the current user."""
        try:
            boards = self.client.list_boards()
        except ApiError as e:
            logger.error(f"Failed to load boards: {e}")
            return False
        self._set_state(set_boards(self._state, boards))
        logger.debug(f"Loaded {len(boards)} boards, active={self._state.active_board_id}")
        return True

    def load_board(self, board_id: str) -> bool:
        """Refetch one board and replace (or append) it locally."""
        try:
            board = self.client.get_board(board_id)
        except ApiError as e:
            logger.error(f"Failed to reload board {board_id}: {e}")
            return False
        self._set_state(upsert_board(self._state, board))
        logger.debug(f"Reconciled board {board_id}")
        return True

    def set_active_board(self, board_id: str) -> bool:
        if self._state.get_board(board_id) is None:
            logger.warning(f"Ignoring selection of unknown board {board_id}")
            return False
        self._set_state(select_board(self._state, board_id))
        return True

    def _active_id(self, operation: str) -> Optional[str]:
        board_id = self._state.active_board_id
        if board_id is None:
            logger.debug(f"{operation}: no active board, skipping")
        return board_id

    def _mutate(self, board_id: str, operation: str, call: Callable[[], object]) -> bool:
        """Run a remote mutation, then reconcile the board it touched."""
        try:
            call()
        except ApiError as e:
            logger.error(f"{operation} failed on board {board_id}: {e}")
            return False
        return self.load_board(board_id)

    # ── Boards ───────────────────────────────────────────────────────────────

    def create_board(self, title: str, description: Optional[str] = None) -> Optional[Board]:
        try:
            board = self.client.create_board(title, description)
        except ApiError as e:
            logger.error(f"Failed to create board {title!r}: {e}")
            return None
        if not self.load_board(board.id):
            self._set_state(upsert_board(self._state, board))
        self._set_state(select_board(self._state, board.id))
        return self._state.get_board(board.id)

    def update_board(self, board_id: str, title: Optional[str] = None,
                     description: Optional[str] = None) -> bool:
        return self._mutate(
            board_id, "update_board",
            lambda: self.client.update_board(board_id, title=title, description=description),
        )

    def delete_board(self, board_id: str) -> bool:
        try:
            self.client.delete_board(board_id)
        except ApiError as e:
            logger.error(f"Failed to delete board {board_id}: {e}")
            return False
        self._set_state(remove_board(self._state, board_id))
        return True

    # ── Tasks ────────────────────────────────────────────────────────────────

    def add_task(self, column_id: str, draft: TaskDraft) -> bool:
        board_id = self._active_id("add_task")
        if board_id is None:
            return False
        return self._mutate(
            board_id, "add_task",
            lambda: self.client.create_task(board_id, column_id, draft),
        )

    def update_task(self, task_id: str, from_column_id: str, patch: TaskPatch,
                    to_column_id: Optional[str] = None) -> bool:
        board_id = self._active_id("update_task")
        if board_id is None:
            return False
        new_column = to_column_id if to_column_id and to_column_id != from_column_id else None
        return self._mutate(
            board_id, "update_task",
            lambda: self.client.update_task(board_id, from_column_id, task_id, patch,
                                            new_column_id=new_column),
        )

    def delete_task(self, column_id: str, task_id: str) -> bool:
        board_id = self._active_id("delete_task")
        if board_id is None:
            return False
        return self._mutate(
            board_id, "delete_task",
            lambda: self.client.delete_task(board_id, column_id, task_id),
        )

    def toggle_subtask(self, column_id: str, task_id: str, subtask_id: str, is_done: bool) -> bool:
        board_id = self._active_id("toggle_subtask")
        if board_id is None:
            return False
        return self._mutate(
            board_id, "toggle_subtask",
            lambda: self.client.toggle_subtask(board_id, column_id, task_id, subtask_id, is_done),
        )

    def move_task(self, task_id: str, source_column_id: str, target_column_id: str,
                  target_task_id: Optional[str] = None) -> bool:
        board_id = self._active_id("move_task")
        if board_id is None:
            return False
        if target_task_id and target_task_id == task_id:
            return False

        def local(board: Board) -> Board:
            return reorder.move_task(board, task_id, source_column_id, target_column_id, target_task_id)

        return self._move(
            board_id, "move_task", local,
            lambda: self.client.move_task(board_id, source_column_id, task_id,
                                          target_column_id, target_task_id),
        )

    # ── Columns ──────────────────────────────────────────────────────────────

    def add_column(self, title: str, accent_color: Optional[str] = None) -> bool:
        board_id = self._active_id("add_column")
        if board_id is None:
            return False
        color = accent_color or palette_color(len(self.active_board.columns))
        return self._mutate(
            board_id, "add_column",
            lambda: self.client.create_column(board_id, title, color),
        )

    def update_column(self, column_id: str, title: Optional[str] = None,
                      accent_color: Optional[str] = None) -> bool:
        board_id = self._active_id("update_column")
        if board_id is None:
            return False
        return self._mutate(
            board_id, "update_column",
            lambda: self.client.update_column(board_id, column_id, title=title,
                                              accent_color=accent_color),
        )

    def delete_column(self, column_id: str) -> bool:
        board_id = self._active_id("delete_column")
        if board_id is None:
            return False
        return self._mutate(
            board_id, "delete_column",
            lambda: self.client.delete_column(board_id, column_id),
        )

    def move_column(self, active_id: str, over_id: str) -> bool:
        board_id = self._active_id("move_column")
        if board_id is None:
            return False
        column_ids = reorder.reordered_column_ids(self.active_board, active_id, over_id)
        if column_ids is None:
            return False

        def local(board: Board) -> Board:
            return reorder.move_column(board, active_id, over_id)

        return self._move(
            board_id, "move_column", local,
            lambda: self.client.reorder_columns(board_id, column_ids),
        )

    def _move(self, board_id: str, operation: str, local: Callable[[Board], Board],
              call: Callable[[], object]) -> bool:
        """Optionally apply a move locally, then send it and reconcile."""
        if not self.optimistic_moves:
            return self._mutate(board_id, operation, call)

        previous = self._state
        self._set_state(update_active_board(previous, local))
        try:
            call()
        except ApiError as e:
            logger.error(f"{operation} failed on board {board_id}, rolling back: {e}")
            self._set_state(previous)
            return False
        return self.load_board(board_id)
