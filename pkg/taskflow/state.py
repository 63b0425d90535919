"""
Client board state.

BoardState is an immutable snapshot: the loaded boards plus the active board id.
Every change is a pure function from (state, payload) to a new state, so a
store only ever swaps one reference for another.
"""
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional, Tuple

from .schema import Board


@dataclass(frozen=True)
class BoardState:
    boards: Tuple[Board, ...] = ()
    active_board_id: Optional[str] = None

    @property
    def active_board(self) -> Optional[Board]:
        return self.get_board(self.active_board_id) if self.active_board_id else None

    def get_board(self, board_id: str) -> Optional[Board]:
        for board in self.boards:
            if board.id == board_id:
                return board
        return None


def set_boards(state: BoardState, boards: Iterable[Board]) -> BoardState:
    """
    Replace the board list.

    Keeps the active selection when it still exists, otherwise selects the
    first board (or nothing when the list is empty).
    """
    boards = tuple(boards)
    active = state.active_board_id
    if active is None or not any(b.id == active for b in boards):
        active = boards[0].id if boards else None
    return BoardState(boards=boards, active_board_id=active)


def upsert_board(state: BoardState, board: Board) -> BoardState:
    """Replace a board in place, or append it when it is not loaded yet."""
    boards = list(state.boards)
    for i, existing in enumerate(boards):
        if existing.id == board.id:
            boards[i] = board
            break
    else:
        boards.append(board)
    return replace(state, boards=tuple(boards))


def remove_board(state: BoardState, board_id: str) -> BoardState:
    boards = tuple(b for b in state.boards if b.id != board_id)
    active = state.active_board_id
    if active == board_id:
        active = boards[0].id if boards else None
    return BoardState(boards=boards, active_board_id=active)


def select_board(state: BoardState, board_id: str) -> BoardState:
    if state.get_board(board_id) is None:
        return state
    return replace(state, active_board_id=board_id)


def update_active_board(state: BoardState, fn: Callable[[Board], Board]) -> BoardState:
    """Apply a board reducer to the active board; no active board means no change."""
    board = state.active_board
    if board is None:
        return state
    updated = fn(board)
    if updated is board:
        return state
    return upsert_board(state, updated)
