"""
Shared pytest fixtures: executors backed by httpx.MockTransport, so no test
in this directory touches the network (except tests/integration, marked live).
"""

import json
from typing import Callable, Dict, Optional

import httpx
import pytest

from restpact.config import Settings
from restpact.executor import HttpExecutor
from restpact.fake_data import FakeDataGenerator
from restpact.reporter import Reporter

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        fakestore_base_url="https://store.test",
        simpleapi_base_url="https://items.test/simpleapi",
        openlibrary_base_url="https://library.test",
        thetestrequest_base_url="https://blog.test",
        default_timeout_ms=5000,
    )


@pytest.fixture
def fake() -> FakeDataGenerator:
    return FakeDataGenerator(seed=1234)


@pytest.fixture
def make_executor() -> Callable[[Handler], HttpExecutor]:
    """Factory: wrap a request handler in an HttpExecutor."""
    def factory(handler: Handler) -> HttpExecutor:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HttpExecutor(client=client)
    return factory


@pytest.fixture
def reporter(tmp_path) -> Reporter:
    return Reporter(reports_dir=str(tmp_path / "reports"), run_id="test-run")


class FakeItemsApi:
    """In-memory stand-in for the simple inventory API."""

    def __init__(self):
        self.items: Dict[int, dict] = {
            6: {"id": 6, "type": "book", "isbn13": "123-4-56-789012-3", "price": 5.99, "numberinstock": 1},
            7: {"id": 7, "type": "dvd", "isbn13": "152-7-65-672400-8", "price": 20.0, "numberinstock": 10},
        }
        self.next_id = 100
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.method, request.url.path))
        parts = [p for p in request.url.path.split("/") if p]
        # /simpleapi/items[/<id>]
        item_id: Optional[int] = int(parts[2]) if len(parts) > 2 else None
        body = json.loads(request.content) if request.content else None

        if request.method == "GET" and item_id is not None:
            if item_id not in self.items:
                return httpx.Response(404, json={"errorMessages": ["not found"]})
            return httpx.Response(200, json=self.items[item_id])

        if request.method == "POST" and item_id is None:
            if not body or "type" not in body:
                return httpx.Response(400, json={"errorMessages": ["type is required"]})
            item = {"id": self.next_id, **body}
            self.items[self.next_id] = item
            self.next_id += 1
            return httpx.Response(201, json=item)

        if request.method == "PUT" and item_id is not None:
            if item_id not in self.items:
                return httpx.Response(400, json={"errorMessages": ["cannot update missing item"]})
            self.items[item_id] = {"id": item_id, **body}
            return httpx.Response(200, json=self.items[item_id])

        if request.method == "DELETE" and item_id is not None:
            if self.items.pop(item_id, None) is None:
                return httpx.Response(404)
            return httpx.Response(200)

        return httpx.Response(405)


@pytest.fixture
def items_api() -> FakeItemsApi:
    return FakeItemsApi()
