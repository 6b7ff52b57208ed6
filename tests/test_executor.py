"""Tests for HttpExecutor against httpx.MockTransport."""

import json

import httpx
import pytest

from restpact.executor import HttpExecutor, ResponseRecord, redact_sensitive
from restpact.request_spec import RequestSpecBuilder
from restpact.types import NetworkError


@pytest.mark.asyncio
class TestExecute:
    async def test_json_response(self, make_executor) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"id": 1, "title": "Backpack"}, headers={"X-Trace": "abc"})

        executor = make_executor(handler)
        resp = await executor.execute(RequestSpecBuilder().get("https://store.test/products/1").build())

        assert resp.status_code == 200
        assert resp.body == {"id": 1, "title": "Backpack"}
        assert resp.is_json
        assert resp.header("x-trace") == "abc"
        assert resp.headers["content-type"] == "application/json"
        assert resp.elapsed_ms >= 0

    async def test_request_carries_method_body_headers_query(self, make_executor) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            seen["content_type"] = request.headers["content-type"]
            seen["custom"] = request.headers["x-client"]
            return httpx.Response(201, json={"id": 21})

        spec = (
            RequestSpecBuilder()
            .post("https://store.test/users")
            .with_json({"username": "ann"})
            .with_header("X-Client", "restpact")
            .with_query({"expand": "address"})
            .build()
        )
        resp = await make_executor(handler).execute(spec)

        assert resp.status_code == 201
        assert seen["method"] == "POST"
        assert seen["url"] == "https://store.test/users?expand=address"
        assert seen["body"] == {"username": "ann"}
        assert seen["content_type"] == "application/json"
        assert seen["custom"] == "restpact"

    async def test_error_statuses_are_returned_not_raised(self, make_executor) -> None:
        executor = make_executor(lambda request: httpx.Response(401, json={"message": "bad creds"}))
        resp = await executor.execute(RequestSpecBuilder().post("https://store.test/auth/login").with_json({}).build())
        assert resp.status_code == 401

    async def test_non_json_body_kept_as_bytes(self, make_executor) -> None:
        executor = make_executor(lambda request: httpx.Response(200, content=b"<html>hi</html>"))
        resp = await executor.execute(RequestSpecBuilder().get("https://store.test/").build())
        assert resp.body == b"<html>hi</html>"
        assert not resp.is_json

    async def test_empty_body_is_none(self, make_executor) -> None:
        executor = make_executor(lambda request: httpx.Response(200))
        resp = await executor.execute(RequestSpecBuilder().delete("https://items.test/items/1").build())
        assert resp.body is None

    async def test_sends_exactly_once_even_on_5xx(self, make_executor) -> None:
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        executor = make_executor(handler)
        resp = await executor.execute(RequestSpecBuilder().get("https://store.test/x").build())
        assert resp.status_code == 503
        assert len(calls) == 1
        assert executor.requests_sent == 1

    async def test_connection_error_becomes_network_error(self, make_executor) -> None:
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NetworkError) as exc_info:
            await make_executor(handler).execute(RequestSpecBuilder().get("https://down.test/x").build())
        err = exc_info.value
        assert "connection refused" in str(err)
        assert err.method == "GET"
        assert err.url == "https://down.test/x"

    async def test_timeout_becomes_network_error(self, make_executor) -> None:
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        spec = RequestSpecBuilder().get("https://slow.test/x").with_timeout(50).build()
        with pytest.raises(NetworkError, match="timeout after 50ms"):
            await make_executor(handler).execute(spec)

    async def test_owned_client_closes(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(204))
        async with HttpExecutor(transport=transport) as executor:
            resp = await executor.execute(RequestSpecBuilder().get("https://store.test/").build())
        assert resp.status_code == 204
        assert executor._client.is_closed


class TestResponseRecord:
    def test_headers_are_lowercased_and_read_only(self) -> None:
        rec = ResponseRecord(status_code=200, headers={"Content-Type": "text/plain"})
        assert rec.header("CONTENT-TYPE") == "text/plain"
        with pytest.raises(TypeError):
            rec.headers["x"] = "y"


def test_redact_sensitive() -> None:
    data = {"username": "mor_2314", "password": "83r5^_", "nested": [{"Authorization": "Bearer x"}]}
    assert redact_sensitive(data) == {
        "username": "mor_2314",
        "password": "[REDACTED]",
        "nested": [{"Authorization": "[REDACTED]"}],
    }
