# src/mstodo_sync/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object, passed explicitly to whatever needs it.
- No secrets required at import time.
- Nothing here is read implicitly by the sync core.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "MSTODO"

DEFAULT_GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_path(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- Microsoft Graph ----
    graph_token: Optional[str]
    token_file: Optional[Path]
    graph_base_url: str
    http_timeout_seconds: Optional[float]

    # ---- Local data paths (ignored by git) ----
    data_dir: Path

    def __repr__(self) -> str:
        # Keep the token out of reprs (and therefore out of logs/tracebacks).
        return (
            f"Settings(app_name={self.app_name!r}, log_level={self.log_level!r}, "
            f"graph_base_url={self.graph_base_url!r}, token_configured={bool(self.graph_token)}, "
            f"token_file={self.token_file!r}, data_dir={self.data_dir!r})"
        )

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "mstodo").strip() or "mstodo"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        graph_token = _first_env(_k("GRAPH_TOKEN"), "MS_GRAPH_TOKEN", default=None)
        if graph_token is not None:
            graph_token = graph_token.strip()
        token_file = _env_path(_k("TOKEN_FILE"), None)

        graph_base_url = (_env(_k("GRAPH_BASE_URL"), DEFAULT_GRAPH_BASE_URL).strip()
                          or DEFAULT_GRAPH_BASE_URL).rstrip("/")
        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), None)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/mstodo")) or Path(".local/mstodo")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            graph_token=graph_token,
            token_file=token_file,
            graph_base_url=graph_base_url,
            http_timeout_seconds=http_timeout_seconds,
            data_dir=data_dir,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load .env (without overriding real env vars) and build Settings once."""
    load_dotenv(override=False)
    return Settings.from_env()
