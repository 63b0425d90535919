"""
HTTP client for the TaskFlow REST backend.

Thin wrapper: one method per endpoint, JSON in and out. Every failure, whether
transport or a non-2xx status, surfaces as ApiError so callers have a single
exception type to handle.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from .schema import Board, Column, Subtask, Task, TaskDraft, TaskPatch

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A request to the backend failed."""

    def __init__(self, message: str, status: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status = status
        self.body = body

    def user_message(self, fallback: str) -> str:
        """Best human-readable message found in the response body."""
        body = self.body
        if isinstance(body, dict):
            message = body.get("message")
            if isinstance(message, str) and message.strip():
                return message
            if isinstance(message, list):
                for item in message:
                    if isinstance(item, str) and item.strip():
                        return item
            error = body.get("error")
            if isinstance(error, str) and error.strip():
                return error
        return fallback


class TaskFlowClient:
    """HTTP client for the TaskFlow API."""

    def __init__(self, base_url: str = "http://localhost:3000/api", timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("Content-Type", "application/json")

    # ── Auth header ──────────────────────────────────────────────────────────

    def set_token(self, token: Optional[str]) -> None:
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            self.session.headers.pop("Authorization", None)

    # ── Transport ────────────────────────────────────────────────────────────

    def _request(self, method: str, path: str, json: Any = None,
                 params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            r = self.session.request(method, url, json=json, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ApiError(f"{method} {path} failed: {e}") from e

        body: Any = None
        if r.content:
            try:
                body = r.json()
            except ValueError:
                body = r.text

        if not r.ok:
            raise ApiError(f"{method} {path} returned {r.status_code}", status=r.status_code, body=body)

        logger.debug(f"{method} {path} -> {r.status_code}")
        return body

    # ── Response parsing ─────────────────────────────────────────────────────

    @staticmethod
    def _parse(entity, body: Any):
        """Parse an echoed entity; mutations may answer with no body at all."""
        return entity.from_dict(body) if isinstance(body, dict) else None

    @staticmethod
    def _require(entity, body: Any, what: str):
        """Parse an entity the caller cannot do without."""
        if not isinstance(body, dict):
            raise ApiError(f"Expected {what} in response, got {type(body).__name__}", body=body)
        return entity.from_dict(body)

    # ── Boards ───────────────────────────────────────────────────────────────

    def list_boards(self) -> List[Board]:
        body = self._request("GET", "/boards")
        if not isinstance(body, list):
            raise ApiError(f"Expected a board list in response, got {type(body).__name__}", body=body)
        return [self._require(Board, b, "a board") for b in body]

    def get_board(self, board_id: str) -> Board:
        return self._require(Board, self._request("GET", f"/boards/{board_id}"), "a board")

    def create_board(self, title: str, description: Optional[str] = None) -> Board:
        payload: Dict[str, Any] = {"title": title}
        if description:
            payload["description"] = description
        return self._require(Board, self._request("POST", "/boards", json=payload), "the new board")

    def update_board(self, board_id: str, title: Optional[str] = None,
                     description: Optional[str] = None) -> Optional[Board]:
        payload: Dict[str, Any] = {}
        if title is not None:
            payload["title"] = title
        if description is not None:
            payload["description"] = description
        return self._parse(Board, self._request("PATCH", f"/boards/{board_id}", json=payload))

    def delete_board(self, board_id: str) -> None:
        self._request("DELETE", f"/boards/{board_id}")

    # ── Columns ──────────────────────────────────────────────────────────────

    def create_column(self, board_id: str, title: str,
                      accent_color: Optional[str] = None) -> Optional[Column]:
        payload: Dict[str, Any] = {"title": title}
        if accent_color:
            payload["accentColor"] = accent_color
        return self._parse(Column, self._request("POST", f"/boards/{board_id}/columns", json=payload))

    def update_column(self, board_id: str, column_id: str, title: Optional[str] = None,
                      accent_color: Optional[str] = None) -> Optional[Column]:
        payload: Dict[str, Any] = {}
        if title is not None:
            payload["title"] = title
        if accent_color is not None:
            payload["accentColor"] = accent_color
        return self._parse(
            Column, self._request("PATCH", f"/boards/{board_id}/columns/{column_id}", json=payload)
        )

    def delete_column(self, board_id: str, column_id: str) -> None:
        self._request("DELETE", f"/boards/{board_id}/columns/{column_id}")

    def reorder_columns(self, board_id: str, column_ids: List[str]) -> None:
        self._request("POST", f"/boards/{board_id}/columns/reorder", json={"columnIds": list(column_ids)})

    # ── Tasks ────────────────────────────────────────────────────────────────

    def _task_path(self, board_id: str, column_id: str, task_id: str = "") -> str:
        path = f"/boards/{board_id}/columns/{column_id}/tasks"
        return f"{path}/{task_id}" if task_id else path

    def create_task(self, board_id: str, column_id: str, draft: TaskDraft) -> Optional[Task]:
        return self._parse(
            Task, self._request("POST", self._task_path(board_id, column_id), json=draft.to_payload())
        )

    def update_task(self, board_id: str, column_id: str, task_id: str, patch: TaskPatch,
                    new_column_id: Optional[str] = None) -> Optional[Task]:
        payload = patch.to_payload()
        if new_column_id:
            payload["columnId"] = new_column_id
        return self._parse(
            Task, self._request("PATCH", self._task_path(board_id, column_id, task_id), json=payload)
        )

    def delete_task(self, board_id: str, column_id: str, task_id: str) -> None:
        self._request("DELETE", self._task_path(board_id, column_id, task_id))

    def move_task(self, board_id: str, column_id: str, task_id: str, target_column_id: str,
                  target_task_id: Optional[str] = None) -> None:
        payload: Dict[str, Any] = {"targetColumnId": target_column_id}
        if target_task_id:
            payload["targetTaskId"] = target_task_id
        self._request("POST", f"{self._task_path(board_id, column_id, task_id)}/move", json=payload)

    def toggle_subtask(self, board_id: str, column_id: str, task_id: str, subtask_id: str,
                       is_done: bool) -> Subtask:
        path = f"{self._task_path(board_id, column_id, task_id)}/subtasks/{subtask_id}"
        body = self._request("PATCH", path, params={"isDone": "true" if is_done else "false"})
        if not isinstance(body, dict):
            body = {"id": subtask_id, "isDone": is_done}
        return Subtask.from_dict(body)

    # ── Auth ─────────────────────────────────────────────────────────────────

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def register(self, full_name: str, email: str, password: str) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/auth/register",
            json={"fullName": full_name, "email": email, "password": password},
        )
