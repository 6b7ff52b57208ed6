"""Tests for RequestSpec and RequestSpecBuilder."""

import dataclasses

import pytest

from restpact.request_spec import (
    DEFAULT_TIMEOUT_MS,
    HttpMethod,
    RequestSpec,
    RequestSpecBuilder,
    join_url,
)
from restpact.types import BuildError


class TestBuilder:
    def test_minimal_get(self) -> None:
        spec = RequestSpecBuilder().get("https://fakestoreapi.com/products/1").build()
        assert spec.method is HttpMethod.GET
        assert spec.url == "https://fakestoreapi.com/products/1"
        assert spec.timeout_ms == DEFAULT_TIMEOUT_MS
        assert spec.has_body is False
        assert spec.body is None
        assert dict(spec.headers) == {}

    def test_missing_method_fails(self) -> None:
        with pytest.raises(BuildError, match="method"):
            RequestSpecBuilder().with_json({"a": 1}).build()

    def test_missing_url_fails(self) -> None:
        with pytest.raises(BuildError, match="url"):
            RequestSpecBuilder().get("").build()

    def test_relative_url_without_base_fails(self) -> None:
        with pytest.raises(BuildError, match="absolute"):
            RequestSpecBuilder().get("/products/1").build()

    def test_non_http_scheme_fails(self) -> None:
        with pytest.raises(BuildError):
            RequestSpecBuilder().get("ftp://example.com/file").build()

    def test_unknown_method_fails(self) -> None:
        with pytest.raises(BuildError, match="Unsupported"):
            RequestSpecBuilder().method("TRACE", "https://example.com")

    def test_method_from_string_is_case_insensitive(self) -> None:
        spec = RequestSpecBuilder().method("patch", "https://example.com/x").build()
        assert spec.method is HttpMethod.PATCH

    def test_base_url_join(self) -> None:
        spec = RequestSpecBuilder(base_url="https://thetestrequest.com/").get("/authors/1").build()
        assert spec.url == "https://thetestrequest.com/authors/1"

    def test_absolute_url_overrides_base(self) -> None:
        spec = RequestSpecBuilder(base_url="https://a.test").get("https://b.test/x").build()
        assert spec.url == "https://b.test/x"

    def test_json_body_sets_content_type(self) -> None:
        spec = RequestSpecBuilder().post("https://example.com/items").with_json({"type": "cd"}).build()
        assert spec.has_body is True
        assert spec.body == {"type": "cd"}
        assert spec.headers["Content-Type"] == "application/json"

    def test_explicit_content_type_is_kept(self) -> None:
        spec = (
            RequestSpecBuilder()
            .post("https://example.com/items")
            .with_header("content-type", "application/vnd.api+json")
            .with_json({})
            .build()
        )
        assert spec.headers["content-type"] == "application/vnd.api+json"
        assert "Content-Type" not in spec.headers

    def test_body_is_copied(self) -> None:
        payload = {"products": [{"productId": 1}]}
        spec = RequestSpecBuilder().post("https://example.com/carts").with_json(payload).build()
        payload["products"].append({"productId": 2})
        assert spec.body == {"products": [{"productId": 1}]}

    def test_timeout_and_query(self) -> None:
        spec = (
            RequestSpecBuilder(default_timeout_ms=1000)
            .get("https://example.com/search")
            .with_query({"q": "fox", "page": 2})
            .build()
        )
        assert spec.timeout_ms == 1000
        assert dict(spec.query) == {"q": "fox", "page": "2"}
        assert RequestSpecBuilder().get("https://e.com").with_timeout(250).build().timeout_ms == 250

    def test_non_positive_timeout_fails(self) -> None:
        with pytest.raises(BuildError, match="timeout"):
            RequestSpecBuilder().get("https://example.com").with_timeout(0).build()


class TestRequestSpec:
    def test_is_immutable(self) -> None:
        spec = RequestSpecBuilder().get("https://example.com").with_header("X-A", "1").build()
        with pytest.raises(dataclasses.FrozenInstanceError):
            spec.url = "https://other.com"
        with pytest.raises(TypeError):
            spec.headers["X-B"] = "2"

    def test_direct_construction_validates(self) -> None:
        with pytest.raises(BuildError):
            RequestSpec(method=HttpMethod.GET, url="not a url")

    def test_describe(self) -> None:
        spec = RequestSpec(method=HttpMethod.DELETE, url="https://example.com/items/1")
        assert spec.describe() == "DELETE https://example.com/items/1"


def test_join_url() -> None:
    assert join_url("https://a.test/api/", "/items") == "https://a.test/api/items"
    assert join_url("", "https://a.test") == "https://a.test"
    assert join_url("https://a.test", "http://b.test/x") == "http://b.test/x"
