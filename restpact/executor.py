# restpact/executor.py
"""
HTTP executor: sends a RequestSpec exactly once and returns a ResponseRecord.

No retry, backoff or circuit breaker. Every HTTP status is returned to the
caller as-is; only transport failures raise ``NetworkError``.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import httpx

from restpact.request_spec import RequestSpec
from restpact.types import NetworkError

logger = logging.getLogger(__name__)

_SENSITIVE_KEYS = {
    "authorization", "x-api-key", "api_key", "apikey", "token",
    "access_token", "cookie", "set-cookie", "x-auth-token", "password",
}


def redact_sensitive(data: Any) -> Any:
    """Recursively redact sensitive information"""
    if isinstance(data, Mapping):
        return {
            k: "[REDACTED]" if str(k).lower() in _SENSITIVE_KEYS else redact_sensitive(v)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [redact_sensitive(item) for item in data]
    return data


@dataclass(frozen=True)
class ResponseRecord:
    """What came back for one executed RequestSpec. Header names are lower-cased."""
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    elapsed_ms: int = 0
    url: str = ""

    def __post_init__(self):
        object.__setattr__(
            self, "headers", MappingProxyType({k.lower(): v for k, v in self.headers.items()})
        )

    @property
    def is_json(self) -> bool:
        return not isinstance(self.body, (bytes, bytearray))

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())


def _decode_body(content: bytes) -> Any:
    if not content:
        return None
    try:
        return json.loads(content)
    except (ValueError, UnicodeDecodeError):
        return content


class HttpExecutor:
    """
    Thin async wrapper around one ``httpx.AsyncClient``.

    Use as an async context manager, or pass an existing client (tests inject
    one built on ``httpx.MockTransport``).
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        verify_ssl: bool = True,
        follow_redirects: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            verify=verify_ssl,
            follow_redirects=follow_redirects,
            transport=transport,
        )
        self.requests_sent = 0

    async def __aenter__(self) -> "HttpExecutor":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def execute(self, spec: RequestSpec) -> ResponseRecord:
        """Send ``spec`` once. Raises ``NetworkError`` on transport failure."""
        method = spec.method.value
        headers = dict(spec.headers)
        kwargs: Dict[str, Any] = {
            "params": dict(spec.query) or None,
            "timeout": spec.timeout_ms / 1000.0,
        }
        if spec.has_body:
            kwargs["content"] = json.dumps(spec.body).encode("utf-8")
            if not any(k.lower() == "content-type" for k in headers):
                headers["Content-Type"] = "application/json"
        kwargs["headers"] = headers or None

        logger.debug(
            f"→ {method} {spec.url} headers={redact_sensitive(dict(spec.headers))} "
            f"body={redact_sensitive(spec.body)}"
        )

        self.requests_sent += 1
        t0 = time.perf_counter()
        try:
            resp = await self._client.request(method, spec.url, **kwargs)
        except httpx.TimeoutException as e:
            raise NetworkError(f"timeout after {spec.timeout_ms}ms: {e!r}", method, spec.url) from e
        except httpx.TransportError as e:
            raise NetworkError(f"transport error: {e!r}", method, spec.url) from e
        elapsed_ms = int((time.perf_counter() - t0) * 1000)

        record = ResponseRecord(
            status_code=resp.status_code,
            headers=dict(resp.headers),
            body=_decode_body(resp.content),
            elapsed_ms=elapsed_ms,
            url=str(resp.url),
        )
        logger.debug(f"← {resp.status_code} {method} {spec.url} ({elapsed_ms}ms)")
        return record
