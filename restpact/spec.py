# restpact/spec.py
"""
Fluent contract spec: one request plus the expectations on its response.

    await (
        ctx.spec()
        .get("/products/1")
        .expect_status(200)
        .expect_json_like({"id": 1})
        .run()
    )

``run()`` builds the RequestSpec, sends it once and verifies the
expectations in declaration order. It returns the ResponseRecord so a case
can chain dependent calls (create, then delete the created id).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from restpact.assertions import (
    ExpectationSet,
    HasKeys,
    HeaderContains,
    HeaderEquals,
    JsonLike,
    JsonMatch,
    JsonSchema,
    ResponseTimeAtMost,
    StatusEquals,
)
from restpact.executor import HttpExecutor, ResponseRecord
from restpact.request_spec import DEFAULT_TIMEOUT_MS, HttpMethod, RequestSpecBuilder

logger = logging.getLogger(__name__)


class Spec:
    def __init__(
        self,
        executor: HttpExecutor,
        base_url: str = "",
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ):
        self._executor = executor
        self._builder = RequestSpecBuilder(base_url=base_url, default_timeout_ms=default_timeout_ms)
        self._expectations = ExpectationSet()

    # ==================== Request ====================

    def get(self, url: str) -> "Spec":
        self._builder.method(HttpMethod.GET, url)
        return self

    def post(self, url: str) -> "Spec":
        self._builder.method(HttpMethod.POST, url)
        return self

    def put(self, url: str) -> "Spec":
        self._builder.method(HttpMethod.PUT, url)
        return self

    def patch(self, url: str) -> "Spec":
        self._builder.method(HttpMethod.PATCH, url)
        return self

    def delete(self, url: str) -> "Spec":
        self._builder.method(HttpMethod.DELETE, url)
        return self

    def with_json(self, body: Any) -> "Spec":
        self._builder.with_json(body)
        return self

    def with_headers(self, headers: Mapping[str, str]) -> "Spec":
        self._builder.with_headers(headers)
        return self

    def with_query(self, params: Mapping[str, Any]) -> "Spec":
        self._builder.with_query(params)
        return self

    def with_timeout(self, timeout_ms: int) -> "Spec":
        self._builder.with_timeout(timeout_ms)
        return self

    # ==================== Expectations ====================

    def expect_status(self, status: int) -> "Spec":
        self._expectations.add(StatusEquals(int(status)))
        return self

    def expect_json_like(self, expected: Any, path: Optional[str] = None) -> "Spec":
        self._expectations.add(JsonLike(expected, path))
        return self

    def expect_json_match(self, expected: Any, path: Optional[str] = None) -> "Spec":
        self._expectations.add(JsonMatch(expected, path))
        return self

    def expect_keys(self, *keys: str) -> "Spec":
        self._expectations.add(HasKeys(tuple(keys)))
        return self

    def expect_header(self, name: str, value: str) -> "Spec":
        self._expectations.add(HeaderEquals(name, value))
        return self

    def expect_header_contains(self, name: str, needle: str) -> "Spec":
        self._expectations.add(HeaderContains(name, needle))
        return self

    def expect_json_schema(self, schema: Dict[str, Any]) -> "Spec":
        self._expectations.add(JsonSchema(schema))
        return self

    def expect_response_time(self, max_ms: int) -> "Spec":
        self._expectations.add(ResponseTimeAtMost(int(max_ms)))
        return self

    # ==================== Execute ====================

    async def run(self) -> ResponseRecord:
        """Build, send once, verify. Raises BuildError, NetworkError or ContractAssertionError."""
        request = self._builder.build()
        response = await self._executor.execute(request)
        logger.info(f"{request.describe()} → {response.status_code} ({response.elapsed_ms}ms)")
        self._expectations.verify(response)
        return response
