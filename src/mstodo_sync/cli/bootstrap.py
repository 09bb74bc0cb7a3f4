# src/mstodo_sync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the credential store and Graph client into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.credentials import credentials_from_settings
from ..core.state import AppState
from ..graph.client import create_graph_client

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    credentials = credentials_from_settings(settings)
    client = create_graph_client(settings, credentials)
    if not client.has_credentials():
        logger.warning("No Graph token configured. Set MSTODO_GRAPH_TOKEN (or MSTODO_TOKEN_FILE).")

    return AppState(settings=settings, client=client)


async def close_state(state: AppState) -> None:
    aclose = getattr(state.client, "aclose", None)
    if aclose is not None:
        await aclose()
