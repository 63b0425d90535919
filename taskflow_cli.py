#!/usr/bin/env python3
"""
TaskFlow command-line client
----------------------------
Drives the board store against a TaskFlow backend and prints the board.

Usage:
    taskflow login --email anna@example.com
    taskflow boards
    taskflow show --query deploy --priority high --sort dueDateAsc
    taskflow add-task <column-id> "Write release notes" --priority high --tag docs
    taskflow move-task <task-id> <column-id> [--before <task-id>]
    taskflow move-column <column-id> <over-column-id>
    taskflow add-column "Review" [--color '#3b82f6']
    taskflow toggle-subtask <task-id> <subtask-id> --done

Config:
    taskflow.yaml next to the package, or --config PATH.
    TASKFLOW_API_URL and TASKFLOW_LOG_LEVEL override the file.
"""

import argparse
import getpass
import locale
import logging
import sys

from pkg.taskflow.api import TaskFlowClient
from pkg.taskflow.auth import AuthSession
from pkg.taskflow.config import Config, ConfigError
from pkg.taskflow.filters import SortMode, filter_board, parse_priority_filter
from pkg.taskflow.forms import ColumnForm, TaskForm, ValidationError
from pkg.taskflow.render import format_board
from pkg.taskflow.store import BoardStore

logger = logging.getLogger("taskflow")


def _print_errors(errors: dict) -> None:
    for field_name, message in errors.items():
        print(f"  {field_name}: {message}", file=sys.stderr)


def _show(store: BoardStore, args) -> int:
    board = store.active_board
    if board is None:
        print("No boards available. Create one to get started.")
        return 1
    view = filter_board(
        board,
        query=getattr(args, "query", "") or "",
        priority=parse_priority_filter(getattr(args, "priority", None)),
        sort_mode=SortMode.from_str(getattr(args, "sort", "priority")),
    )
    print(format_board(view))
    return 0


def _open_store(cfg: Config, client: TaskFlowClient, args) -> BoardStore:
    store = BoardStore(client, optimistic_moves=cfg.optimistic_moves)
    store.load_boards()
    if getattr(args, "board", None):
        store.set_active_board(args.board)
    return store


# ── Commands ─────────────────────────────────────────────────────────────────


def cmd_login(session: AuthSession, args) -> int:
    password = args.password or getpass.getpass("Password: ")
    result = session.login(args.email, password)
    if not result.success:
        print(result.message or "Login failed", file=sys.stderr)
        _print_errors(result.errors)
        return 1
    print(f"Signed in as {session.user.full_name or session.user.email}")
    return 0


def cmd_register(session: AuthSession, args) -> int:
    password = args.password or getpass.getpass("Password: ")
    confirm = args.password or getpass.getpass("Repeat password: ")
    result = session.register(args.name, args.email, password, confirm)
    if not result.success:
        print(result.message or "Registration failed", file=sys.stderr)
        _print_errors(result.errors)
        return 1
    print(f"Account created for {session.user.email}")
    return 0


def cmd_boards(store: BoardStore, args) -> int:
    if not store.boards:
        print("No boards.")
        return 1
    for board in store.boards:
        marker = "*" if board.id == store.state.active_board_id else " "
        print(f"{marker} {board.title}  <{board.id}>  {len(board.columns)} columns, {board.task_count} tasks")
    return 0


def cmd_add_task(store: BoardStore, args) -> int:
    form = TaskForm(
        title=args.title,
        column_id=args.column,
        description=args.description or "",
        priority=args.priority,
        due_date=args.due or "",
        assignee_name=args.assignee or "",
        tags=args.tag or [],
        subtasks=args.subtask or [],
    )
    try:
        draft = form.to_draft()
    except ValidationError as e:
        _print_errors(e.errors)
        return 2
    store.add_task(args.column, draft)
    return _show(store, args)


def cmd_move_task(store: BoardStore, args) -> int:
    board = store.active_board
    found = board.find_task(args.task) if board else None
    if found is None:
        print(f"Task {args.task} not found", file=sys.stderr)
        return 1
    source, _ = found
    store.move_task(args.task, source.id, args.column, args.before)
    return _show(store, args)


def cmd_move_column(store: BoardStore, args) -> int:
    store.move_column(args.column, args.over)
    return _show(store, args)


def cmd_add_column(store: BoardStore, args) -> int:
    try:
        title = ColumnForm(title=args.title, accent_color=args.color).validate()
    except ValidationError as e:
        _print_errors(e.errors)
        return 2
    store.add_column(title, args.color)
    return _show(store, args)


def cmd_toggle_subtask(store: BoardStore, args) -> int:
    board = store.active_board
    found = board.find_task(args.task) if board else None
    if found is None:
        print(f"Task {args.task} not found", file=sys.stderr)
        return 1
    column, _ = found
    store.toggle_subtask(column.id, args.task, args.subtask, args.done)
    return _show(store, args)


# ── Main ─────────────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="TaskFlow board client")
    ap.add_argument("--config", default=None, help="Path to taskflow.yaml")
    ap.add_argument("--api", default=None, help="Backend base URL (overrides config)")
    ap.add_argument("--board", default=None, help="Board id to act on (default: first board)")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("login", help="Sign in and remember the session")
    p.add_argument("--email", required=True)
    p.add_argument("--password", default=None)

    p = sub.add_parser("register", help="Create an account")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--password", default=None)

    sub.add_parser("logout", help="Forget the stored session")
    sub.add_parser("boards", help="List boards")

    p = sub.add_parser("show", help="Print the board")
    p.add_argument("--query", default="")
    p.add_argument("--priority", default="all", choices=["all", "high", "medium", "low"])
    p.add_argument("--sort", default="priority", choices=[m.value for m in SortMode])

    p = sub.add_parser("add-task", help="Create a task in a column")
    p.add_argument("column")
    p.add_argument("title")
    p.add_argument("--priority", default="medium", choices=["high", "medium", "low"])
    p.add_argument("--due", default=None, help="Due date, YYYY-MM-DD")
    p.add_argument("--description", default=None)
    p.add_argument("--assignee", default=None)
    p.add_argument("--tag", action="append")
    p.add_argument("--subtask", action="append")

    p = sub.add_parser("move-task", help="Move a task to a column, optionally before another task")
    p.add_argument("task")
    p.add_argument("column")
    p.add_argument("--before", default=None, help="Anchor task id")

    p = sub.add_parser("move-column", help="Move a column to another column's position")
    p.add_argument("column")
    p.add_argument("over")

    p = sub.add_parser("add-column", help="Create a column")
    p.add_argument("title")
    p.add_argument("--color", default=None)

    p = sub.add_parser("toggle-subtask", help="Mark a subtask done or not done")
    p.add_argument("task")
    p.add_argument("subtask")
    group = p.add_mutually_exclusive_group(required=True)
    group.add_argument("--done", dest="done", action="store_true")
    group.add_argument("--undone", dest="done", action="store_false")

    return ap


STORE_COMMANDS = {
    "boards": cmd_boards,
    "show": _show,
    "add-task": cmd_add_task,
    "move-task": cmd_move_task,
    "move-column": cmd_move_column,
    "add-column": cmd_add_column,
    "toggle-subtask": cmd_toggle_subtask,
}


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = Config.load(args.config)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    if args.api:
        cfg.api_base_url = args.api.rstrip("/")

    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.INFO),
        format="%(asctime)s [taskflow] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Alphabetical sort follows the user's collation rules
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning(f"System locale unavailable, titles sort by code point: {e}")

    client = TaskFlowClient(cfg.api_base_url, timeout=cfg.request_timeout)
    session = AuthSession(client, cfg.session_path)

    if args.command == "login":
        return cmd_login(session, args)
    if args.command == "register":
        return cmd_register(session, args)
    if args.command == "logout":
        session.logout()
        print("Signed out.")
        return 0

    if not session.restore():
        print("Not signed in. Run: taskflow login --email <email>", file=sys.stderr)
        return 1

    store = _open_store(cfg, client, args)
    return STORE_COMMANDS[args.command](store, args)


if __name__ == "__main__":
    sys.exit(main())
