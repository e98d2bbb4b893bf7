"""Unit tests for the HttpResourceClient."""

import asyncio
import json

import httpx
import pytest

from admin_sync.domain.entities import get_resource_type
from admin_sync.domain.exceptions import RemoteFailure
from admin_sync.infrastructure.http import HttpResourceClient

ROLES = get_resource_type("roles")
BASE_URL = "http://backend.test/api"


# ── Helpers ──


def _make_mock_transport(
    response_data=None,
    status_code: int = 200,
    requests: list | None = None,
) -> httpx.MockTransport:
    """Create a mock transport that returns a fixed JSON response and records requests."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, json=response_data)

    return httpx.MockTransport(handler)


def _client(transport: httpx.MockTransport, timeout: float = 5.0) -> HttpResourceClient:
    return HttpResourceClient(
        ROLES,
        BASE_URL,
        timeout=timeout,
        http_client=httpx.AsyncClient(transport=transport),
    )


# ── Tests ──


@pytest.mark.asyncio
async def test_list_parses_rows():
    requests: list[httpx.Request] = []
    transport = _make_mock_transport(
        [
            {"id": 1, "name": "Admin", "status": "active", "created_at": "2024-01-15T08:00:00.000Z"},
            {"id": "2", "name": "Nurse", "createdAt": "2024-02-01"},
        ],
        requests=requests,
    )

    records = await _client(transport).list()

    assert [r.id for r in records] == ["1", "2"]
    assert records[0].get("name") == "Admin"
    assert records[0].created_at.year == 2024
    # Missing status falls back to the resource default
    assert records[1].status == "active"
    assert records[1].created_at.month == 2
    assert "createdAt" not in records[1].fields
    assert requests[0].method == "GET"
    assert str(requests[0].url) == f"{BASE_URL}/roles"


@pytest.mark.asyncio
async def test_create_posts_fields_to_collection():
    requests: list[httpx.Request] = []
    transport = _make_mock_transport(
        {"id": 7, "name": "Cashier", "status": "active"}, status_code=201, requests=requests
    )

    record = await _client(transport).create({"name": "Cashier", "status": "active"})

    assert record.id == "7"
    assert requests[0].method == "POST"
    assert json.loads(requests[0].content) == {"name": "Cashier", "status": "active"}


@pytest.mark.asyncio
async def test_update_puts_to_item_url():
    requests: list[httpx.Request] = []
    transport = _make_mock_transport(
        {"id": 7, "name": "Head Cashier", "status": "active"}, requests=requests
    )

    record = await _client(transport).update("7", {"name": "Head Cashier"})

    assert record.get("name") == "Head Cashier"
    assert requests[0].method == "PUT"
    assert str(requests[0].url) == f"{BASE_URL}/roles/7"


@pytest.mark.asyncio
async def test_delete_accepts_empty_no_content_response():
    transport = httpx.MockTransport(lambda request: httpx.Response(204))

    assert await _client(transport).delete("7") is True


@pytest.mark.asyncio
async def test_error_status_raises_remote_failure_with_backend_message():
    transport = _make_mock_transport({"error": "Role name already exists"}, status_code=409)

    with pytest.raises(RemoteFailure) as exc_info:
        await _client(transport).create({"name": "Admin"})

    assert exc_info.value.status_code == 409
    assert exc_info.value.message == "Role name already exists"
    assert exc_info.value.timed_out is False


@pytest.mark.asyncio
async def test_non_array_list_body_is_rejected():
    transport = _make_mock_transport({"data": []})

    with pytest.raises(RemoteFailure, match="expected a JSON array"):
        await _client(transport).list()


@pytest.mark.asyncio
async def test_row_without_id_is_rejected():
    transport = _make_mock_transport([{"name": "No id"}])

    with pytest.raises(RemoteFailure, match="malformed record"):
        await _client(transport).list()


@pytest.mark.asyncio
async def test_non_json_body_is_rejected():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"<html>"))

    with pytest.raises(RemoteFailure, match="not JSON"):
        await _client(transport).list()


@pytest.mark.asyncio
async def test_connection_error_is_remote_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RemoteFailure) as exc_info:
        await _client(httpx.MockTransport(handler)).list()

    assert exc_info.value.status_code is None
    assert "ConnectError" in exc_info.value.message


@pytest.mark.asyncio
async def test_httpx_timeout_is_flagged():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(RemoteFailure) as exc_info:
        await _client(httpx.MockTransport(handler)).list()

    assert exc_info.value.timed_out is True


@pytest.mark.asyncio
async def test_slow_backend_is_bounded_by_request_timeout():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1)
        return httpx.Response(200, json=[])

    with pytest.raises(RemoteFailure) as exc_info:
        await _client(httpx.MockTransport(handler), timeout=0.05).list()

    assert exc_info.value.timed_out is True
