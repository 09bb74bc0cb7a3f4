# src/mstodo_sync/core/credentials.py

"""
Credential stores.

Token acquisition/refresh is out of scope: a store only hands back a token
that was provisioned elsewhere (env var, .env, or a token file).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .ports import CredentialStore

logger = logging.getLogger(__name__)


def _clean(token: str | None) -> str | None:
    if token is None:
        return None
    token = token.strip()
    return token or None


@dataclass(frozen=True, slots=True)
class StaticTokenStore:
    token: str | None = None

    def get_token(self) -> str | None:
        return _clean(self.token)

    def __repr__(self) -> str:
        # Never leak the token through reprs/log lines.
        return f"StaticTokenStore(configured={self.get_token() is not None})"


@dataclass(frozen=True, slots=True)
class FileTokenStore:
    """Reads the token from a file whenever asked; callers pin it per operation."""

    path: Path

    def get_token(self) -> str | None:
        try:
            raw = self.path.read_text("utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Failed to read token file %s: %r", self.path, e)
            return None
        return _clean(raw)


def credentials_from_settings(settings) -> CredentialStore:
    """Env/.env token wins; otherwise fall back to the token file if one is configured."""
    token = _clean(getattr(settings, "graph_token", None))
    if token is not None:
        return StaticTokenStore(token)
    token_file = getattr(settings, "token_file", None)
    if token_file:
        return FileTokenStore(Path(token_file))
    return StaticTokenStore(None)
