# tests/test_graph_client.py

from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest

from mstodo_sync.core.credentials import FileTokenStore, StaticTokenStore
from mstodo_sync.graph.client import GraphTodoClient, create_graph_client
from mstodo_sync.graph.errors import (
    GENERIC_API_ERROR,
    RemoteRejected,
    Unauthenticated,
    Unexpected,
    Unreachable,
)
from mstodo_sync.sync.fetcher import fetch_hierarchy

BASE = "https://graph.test/v1.0"


class Recorder:
    """MockTransport handler: records requests, replies from a route table."""

    def __init__(self, routes: dict[tuple[str, str], httpx.Response] | None = None) -> None:
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.raw_path.decode())
        response = self.routes.get(key)
        if response is None:
            return httpx.Response(404, json={"error": {"code": "NotFound", "message": f"no route {key}"}})
        return response


def _client(handler, token: str | None = "secret-token") -> GraphTodoClient:
    return GraphTodoClient(
        StaticTokenStore(token),
        base_url=BASE,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_list_operations_hit_graph_paths_with_auth_headers() -> None:
    rec = Recorder(
        {
            ("GET", "/v1.0/me/todo/lists"): httpx.Response(
                200, json={"value": [{"id": "l1", "displayName": "Work"}]}
            ),
            ("GET", "/v1.0/me/todo/lists/l1/tasks"): httpx.Response(
                200, json={"value": [{"id": "t1", "title": "x", "status": "completed"}]}
            ),
            ("GET", "/v1.0/me/todo/lists/l1/tasks/t1/checklistItems"): httpx.Response(
                200, json={"value": [{"id": "c1", "displayName": "y", "isChecked": True}]}
            ),
        }
    )
    async with _client(rec) as client:
        assert await client.list_task_lists() == [{"id": "l1", "displayName": "Work"}]
        assert (await client.list_tasks("l1"))[0]["id"] == "t1"
        assert (await client.list_checklist_items("l1", "t1"))[0]["isChecked"] is True

    assert len(rec.requests) == 3
    for req in rec.requests:
        assert req.method == "GET"
        assert req.headers["Authorization"] == "Bearer secret-token"
        assert req.headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_patch_bodies() -> None:
    rec = Recorder(
        {
            ("PATCH", "/v1.0/me/todo/lists/l1/tasks/t1"): httpx.Response(200, json={"id": "t1"}),
            ("PATCH", "/v1.0/me/todo/lists/l1/tasks/t1/checklistItems/c1"): httpx.Response(204),
        }
    )
    async with _client(rec) as client:
        assert await client.patch_task("l1", "t1", "completed") == {"id": "t1"}
        assert await client.patch_checklist_item("l1", "t1", "c1", False) == {}

    assert json.loads(rec.requests[0].content) == {"status": "completed"}
    assert json.loads(rec.requests[1].content) == {"isChecked": False}
    assert all(r.method == "PATCH" for r in rec.requests)


@pytest.mark.asyncio
async def test_identifiers_are_path_quoted() -> None:
    rec = Recorder(
        {("GET", "/v1.0/me/todo/lists/AQ%3D%3D%2Fx/tasks"): httpx.Response(200, json={"value": []})}
    )
    async with _client(rec) as client:
        assert await client.list_tasks("AQ==/x") == []


@pytest.mark.asyncio
async def test_missing_value_array_reads_as_empty() -> None:
    rec = Recorder({("GET", "/v1.0/me/todo/lists"): httpx.Response(200, json={})})
    async with _client(rec) as client:
        assert await client.list_task_lists() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "   "])
async def test_no_token_raises_before_any_request(token) -> None:
    rec = Recorder()
    async with _client(rec, token=token) as client:
        assert not client.has_credentials()
        with pytest.raises(Unauthenticated):
            await client.list_task_lists()
        with pytest.raises(Unauthenticated):
            await client.patch_task("l1", "t1", "completed")
    assert rec.requests == []


@pytest.mark.asyncio
async def test_rejection_message_comes_from_error_payload() -> None:
    rec = Recorder(
        {
            ("GET", "/v1.0/me/todo/lists"): httpx.Response(
                401, json={"error": {"code": "InvalidAuthenticationToken", "message": "X"}}
            )
        }
    )
    async with _client(rec) as client:
        with pytest.raises(RemoteRejected) as exc_info:
            await client.list_task_lists()

    assert str(exc_info.value) == "X"
    assert exc_info.value.message == "X"
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500),
        httpx.Response(500, text="<html>oops</html>"),
        httpx.Response(400, json={"error": "bad"}),
        httpx.Response(400, json={"error": {"code": "x"}}),
        httpx.Response(400, json=["not", "a", "dict"]),
    ],
)
async def test_rejection_without_usable_message_uses_generic_text(response) -> None:
    rec = Recorder({("GET", "/v1.0/me/todo/lists"): response})
    async with _client(rec) as client:
        with pytest.raises(RemoteRejected) as exc_info:
            await client.list_task_lists()
    assert str(exc_info.value) == GENERIC_API_ERROR


@pytest.mark.asyncio
@pytest.mark.parametrize("exc_type", [httpx.ConnectError, httpx.ReadTimeout])
async def test_transport_failures_are_unreachable(exc_type) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("network down", request=request)

    async with _client(handler) as client:
        with pytest.raises(Unreachable) as exc_info:
            await client.list_task_lists()
    assert str(exc_info.value) == "Unable to connect to Microsoft Graph API"


@pytest.mark.asyncio
async def test_invalid_success_body_is_unexpected() -> None:
    rec = Recorder({("GET", "/v1.0/me/todo/lists"): httpx.Response(200, text="not json")})
    async with _client(rec) as client:
        with pytest.raises(Unexpected):
            await client.list_task_lists()


@pytest.mark.asyncio
async def test_other_failures_are_unexpected() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise RuntimeError("handler exploded")

    async with _client(handler) as client:
        with pytest.raises(Unexpected) as exc_info:
            await client.list_task_lists()
    assert exc_info.value.message == "handler exploded"


@pytest.mark.asyncio
async def test_token_never_logged(caplog) -> None:
    rec = Recorder({("GET", "/v1.0/me/todo/lists"): httpx.Response(200, json={"value": []})})
    caplog.set_level("DEBUG")
    async with _client(rec) as client:
        await client.list_task_lists()
    assert "secret-token" not in caplog.text


@pytest.mark.asyncio
async def test_factory_uses_settings() -> None:
    settings = SimpleNamespace(
        graph_token=" abc ",
        token_file=None,
        graph_base_url="https://graph.example/beta/",
        http_timeout_seconds=3.0,
    )
    client = create_graph_client(settings)
    try:
        assert client.base_url == "https://graph.example/beta"
        assert client.require_token() == "abc"
    finally:
        await client.aclose()


@pytest.mark.asyncio
async def test_fetch_keeps_one_token_for_the_whole_run(tmp_path) -> None:
    token_file = tmp_path / "token"
    token_file.write_text("first-token\n", "utf-8")
    seen_auth: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_auth.append(request.headers["Authorization"])
        path = request.url.raw_path.decode()
        if path == "/v1.0/me/todo/lists":
            # Token disappears mid-run, after the lists call was answered.
            token_file.unlink()
            return httpx.Response(200, json={"value": [{"id": "l1", "displayName": "Work"}]})
        if path == "/v1.0/me/todo/lists/l1/tasks":
            return httpx.Response(200, json={"value": [{"id": "t1", "title": "x", "status": "notStarted"}]})
        return httpx.Response(200, json={"value": []})

    client = GraphTodoClient(
        FileTokenStore(token_file),
        base_url=BASE,
        transport=httpx.MockTransport(handler),
    )
    async with client:
        result = await fetch_hierarchy(client)
        assert [t.id for t in result.tasks] == ["t1"]
        assert result.skipped == []
        assert seen_auth == ["Bearer first-token"] * 3

        # The next run sees the missing token and fails fast.
        with pytest.raises(Unauthenticated):
            await fetch_hierarchy(client)
    assert len(seen_auth) == 3


@pytest.mark.asyncio
async def test_pinned_client_ignores_later_token_changes(tmp_path) -> None:
    token_file = tmp_path / "token"
    token_file.write_text("old", "utf-8")
    rec = Recorder({("GET", "/v1.0/me/todo/lists"): httpx.Response(200, json={"value": []})})

    async with GraphTodoClient(
        FileTokenStore(token_file), base_url=BASE, transport=httpx.MockTransport(rec)
    ) as client:
        pinned = client.pinned()
        token_file.write_text("new", "utf-8")
        await pinned.list_task_lists()
        await client.list_task_lists()

    assert [r.headers["Authorization"] for r in rec.requests] == ["Bearer old", "Bearer new"]


@pytest.mark.asyncio
async def test_pinned_without_token_raises() -> None:
    async with _client(Recorder(), token=None) as client:
        with pytest.raises(Unauthenticated):
            client.pinned()
