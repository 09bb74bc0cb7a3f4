# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from mstodo_sync.core.state import AppState

from .fakes import FakeTodoRemote


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the client factory and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment/.env.
    """
    return SimpleNamespace(
        app_name="mstodo-test",
        log_level="DEBUG",
        log_to_file=False,
        graph_token="test-token",
        token_file=None,
        graph_base_url="https://graph.test/v1.0",
        http_timeout_seconds=None,
        data_dir=tmp_path / "data",
    )


@pytest.fixture()
def remote() -> FakeTodoRemote:
    """
    Two lists; list "l1" has one task with two checklist items, list "l2"
    has one task with no checklist items.
    """
    return FakeTodoRemote(
        lists=[
            {"id": "l1", "displayName": "Work"},
            {"id": "l2", "displayName": "Home"},
        ],
        tasks={
            "l1": [{"id": "t1", "title": "Write report", "status": "notStarted"}],
            "l2": [{"id": "t2", "title": "Buy milk", "status": "completed"}],
        },
        checklists={
            ("l1", "t1"): [
                {"id": "c1", "displayName": "Outline", "isChecked": True},
                {"id": "c2", "displayName": "Draft", "isChecked": False},
            ],
        },
    )


@pytest.fixture()
def state(settings: SimpleNamespace, remote: FakeTodoRemote) -> AppState:
    return AppState(settings=settings, client=remote)
