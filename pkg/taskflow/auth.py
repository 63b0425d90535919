"""
Client-side authentication session.

Logs in or registers against the backend, installs the access token on the
API client, and persists token + minimal profile to a local JSON file so the
next start can skip the login form.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .api import ApiError, TaskFlowClient
from .forms import AuthForm
from .schema import User

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Could not complete the request"


@dataclass
class AuthResult:
    success: bool
    message: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)


class AuthSession:
    """Current user + access token, backed by a session file."""

    def __init__(self, client: TaskFlowClient, session_path: str):
        self.client = client
        self.session_path = Path(session_path)
        self.user: Optional[User] = None
        self.access_token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    # ── Login / register ─────────────────────────────────────────────────────

    def login(self, email: str, password: str) -> AuthResult:
        form = AuthForm(email=email, password=password)
        errors = form.errors()
        if errors:
            return AuthResult(success=False, errors=errors)
        try:
            body = self.client.login(email.strip(), password)
        except ApiError as e:
            logger.warning(f"Login failed for {email.strip()}: {e}")
            return AuthResult(success=False, message=e.user_message(GENERIC_FAILURE))
        return self._accept(body)

    def register(self, full_name: str, email: str, password: str,
                 confirm_password: Optional[str] = None) -> AuthResult:
        form = AuthForm(
            email=email,
            password=password,
            full_name=full_name,
            confirm_password=password if confirm_password is None else confirm_password,
            register=True,
        )
        errors = form.errors()
        if errors:
            return AuthResult(success=False, errors=errors)
        try:
            body = self.client.register(full_name.strip(), email.strip(), password)
        except ApiError as e:
            logger.warning(f"Registration failed for {email.strip()}: {e}")
            return AuthResult(success=False, message=e.user_message(GENERIC_FAILURE))
        return self._accept(body)

    def _accept(self, body) -> AuthResult:
        token = body.get("accessToken") if isinstance(body, dict) else None
        if not token:
            logger.error("Auth response carried no access token")
            return AuthResult(success=False, message=GENERIC_FAILURE)
        self.access_token = token
        self.user = User.from_dict(body.get("user"))
        self.client.set_token(token)
        self.save()
        logger.info(f"Signed in as {self.user.email}")
        return AuthResult(success=True)

    def logout(self) -> None:
        self.access_token = None
        self.user = None
        self.client.set_token(None)
        self.session_path.unlink(missing_ok=True)

    # ── Persistence ──────────────────────────────────────────────────────────

    def save(self) -> None:
        """Persist token and profile (full name, email only)."""
        data = {
            "accessToken": self.access_token,
            "user": {
                "fullName": self.user.full_name if self.user else "",
                "email": self.user.email if self.user else "",
            },
        }
        try:
            self.session_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.session_path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to write session file {self.session_path}: {e}")

    def restore(self) -> bool:
        """Load a persisted session; returns True when a token was found."""
        if not self.session_path.exists():
            return False
        try:
            with open(self.session_path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.session_path}: {e}")
            return False
        token = data.get("accessToken") if isinstance(data, dict) else None
        if not token:
            return False
        self.access_token = token
        self.user = User.from_dict(data.get("user"))
        self.client.set_token(token)
        return True
