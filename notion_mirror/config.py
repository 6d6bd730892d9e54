"""Process settings loaded from the environment.

Variables (a project-root .env file is honoured for keys not already set):

- NOTION_API_KEY            integration token (required for fetch runs)
- NOTION_DATABASE_ID        root database listed by a fetch run (required for fetch runs)
- NOTION_API_BASE_URL       default https://api.notion.com/v1
- NOTION_VERSION            Notion-Version header, default 2022-06-28
- NOTION_TIMEOUT            per-request timeout in seconds, default 10
- NOTION_MAX_DEPTH          default 5
- NOTION_OVERALL_DEPTH_LIMIT default 7
- SNAPSHOT_PATH             default articles.json
- LOG_LEVEL                 default INFO
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Optional

DEFAULT_BASE_URL = "https://api.notion.com/v1"
DEFAULT_NOTION_VERSION = "2022-06-28"
DEFAULT_MAX_DEPTH = 5
DEFAULT_OVERALL_DEPTH_LIMIT = 7
DEFAULT_SNAPSHOT_PATH = "articles.json"


@dataclass(frozen=True)
class Settings:
    notion_api_key: Optional[str]
    database_id: Optional[str]
    base_url: str = DEFAULT_BASE_URL
    notion_version: str = DEFAULT_NOTION_VERSION
    timeout: float = 10.0
    max_depth: int = DEFAULT_MAX_DEPTH
    overall_depth_limit: int = DEFAULT_OVERALL_DEPTH_LIMIT
    snapshot_path: str = DEFAULT_SNAPSHOT_PATH
    log_level: str = "INFO"

    def require_notion(self) -> None:
        """Raise a helpful RuntimeError when the fetch-run settings are missing."""
        missing = []
        if not self.notion_api_key:
            missing.append("NOTION_API_KEY")
        if not self.database_id:
            missing.append("NOTION_DATABASE_ID")
        if missing:
            raise RuntimeError(
                "One or more Notion settings are missing: " + ", ".join(missing) +
                "\nDefine them in your environment or in a .env file at the project root.\n"
                "Example:\n"
                "export NOTION_API_KEY='secret_xxx'; export NOTION_DATABASE_ID='0123abcd...'"
            )


ENV_FILE = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".env"))


def read_env_file(path: str) -> Dict[str, str]:
    """Parse KEY=value lines; a missing file yields no values."""
    values: Dict[str, str] = {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except FileNotFoundError:
        return values
    for line in lines:
        key, sep, val = line.strip().partition("=")
        key = key.strip()
        if not sep or not key or key.startswith("#"):
            continue
        values[key] = val.strip().strip("\"'")
    return values


def _as_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


def _as_float(name: str, raw: Optional[str], default: float) -> float:
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}")


def get_settings(env_file: Optional[str] = None) -> Settings:
    """Build Settings from the process environment, falling back to the .env file.

    Re-read on every call so tests and operators can change variables at runtime.
    """
    file_values = read_env_file(env_file or ENV_FILE)

    def env(name: str) -> Optional[str]:
        return os.environ.get(name) or file_values.get(name) or None

    return Settings(
        notion_api_key=env("NOTION_API_KEY"),
        database_id=env("NOTION_DATABASE_ID") or env("DATABASE_ID"),
        base_url=(env("NOTION_API_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        notion_version=env("NOTION_VERSION") or DEFAULT_NOTION_VERSION,
        timeout=_as_float("NOTION_TIMEOUT", env("NOTION_TIMEOUT"), 10.0),
        max_depth=_as_int("NOTION_MAX_DEPTH", env("NOTION_MAX_DEPTH"), DEFAULT_MAX_DEPTH),
        overall_depth_limit=_as_int(
            "NOTION_OVERALL_DEPTH_LIMIT", env("NOTION_OVERALL_DEPTH_LIMIT"), DEFAULT_OVERALL_DEPTH_LIMIT
        ),
        snapshot_path=env("SNAPSHOT_PATH") or DEFAULT_SNAPSHOT_PATH,
        log_level=(env("LOG_LEVEL") or "INFO").upper(),
    )
