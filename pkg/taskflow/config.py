# TaskFlow client configuration
# Override defaults via taskflow.yaml, a --config path, or environment variables.

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

CONFIG_PATH = Path(__file__).parent / "taskflow.yaml"


class ConfigError(Exception):
    """Raised when a config file exists but cannot be used."""
    pass


@dataclass
class Config:
    """Runtime configuration for the TaskFlow client."""

    # Backend
    api_base_url: str = "http://localhost:3000/api"
    request_timeout: float = 10.0

    # Persisted login (token + profile)
    session_path: str = "~/.local/share/taskflow/session.json"

    # Apply drag moves locally before the server confirms them
    optimistic_moves: bool = False

    log_level: str = "INFO"

    def resolve(self):
        """Apply environment overrides and expand paths."""
        env_url = os.environ.get("TASKFLOW_API_URL")
        if env_url:
            self.api_base_url = env_url
        env_level = os.environ.get("TASKFLOW_LOG_LEVEL")
        if env_level:
            self.log_level = env_level
        self.api_base_url = self.api_base_url.rstrip("/")
        self.log_level = self.log_level.upper()
        self.session_path = str(Path(self.session_path).expanduser())

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML file, falling back to defaults."""
        cfg_path = Path(path) if path else CONFIG_PATH
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Cannot parse {cfg_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"{cfg_path} must contain a mapping, got {type(data).__name__}")
            known = {f.name for f in fields(cls)}
            cfg = cls(**{k: v for k, v in data.items() if k in known})
        else:
            cfg = cls()
        cfg.resolve()
        return cfg
