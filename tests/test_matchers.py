"""Tests for placeholders and JSON subset / pattern matching."""

import re

import pytest

from restpact import matchers
from restpact.matchers import (
    Kind,
    Literal,
    Pattern,
    TypeTag,
    extract_path,
    is_missing,
    json_path,
    match_like,
    match_pattern,
    to_expected,
)

PRODUCT = {
    "id": 1,
    "title": "Fjallraven Backpack",
    "price": 109.95,
    "rating": {"rate": 3.9, "count": 120},
    "tags": ["bags", "outdoor"],
    "active": True,
    "discount": None,
}


class TestSubsetMatch:
    """Subset semantics: expected keys must match, extra actual keys are ignored."""

    def test_extra_keys_are_ignored(self) -> None:
        assert match_like({"id": 1}, PRODUCT) is None

    def test_nested_subset(self) -> None:
        assert match_like({"rating": {"count": 120}}, PRODUCT) is None

    def test_missing_key_reports_path(self) -> None:
        mismatch = match_like({"rating": {"votes": 1}}, PRODUCT)
        assert mismatch is not None
        assert mismatch.path == "$.rating.votes"
        assert mismatch.reason == "missing key"

    def test_value_difference_reports_expected_and_actual(self) -> None:
        mismatch = match_like({"title": "Other"}, PRODUCT)
        assert mismatch.path == "$.title"
        assert mismatch.expected == "Other"
        assert mismatch.actual == "Fjallraven Backpack"
        assert "Other" in mismatch.describe()
        assert "Fjallraven Backpack" in mismatch.describe()

    def test_type_mismatch(self) -> None:
        mismatch = match_like({"id": "1"}, PRODUCT)
        assert "type mismatch" in mismatch.reason

    def test_null_literal(self) -> None:
        assert match_like({"discount": None}, PRODUCT) is None
        assert match_like({"discount": 0}, PRODUCT) is not None

    def test_boolean_is_not_a_number(self) -> None:
        assert match_like({"active": 1}, PRODUCT) is not None
        assert match_like({"flag": True}, {"flag": 1}) is not None

    def test_object_expected_but_scalar_found(self) -> None:
        mismatch = match_like({"price": {"amount": 1}}, PRODUCT)
        assert mismatch.path == "$.price"

    @pytest.mark.parametrize("doc", [
        PRODUCT,
        {},
        {"a": [1, 2, 3], "b": {"c": [{"d": "x"}]}},
        {"list": [{"x": 1}], "empty": [], "f": 0.1 + 0.2},
    ])
    def test_reflexive(self, doc) -> None:
        assert match_like(doc, doc) is None
        assert match_pattern(doc, doc) is None


class TestArrays:
    def test_elementwise_positions(self) -> None:
        assert match_like([1, 2], [1, 2, 3]) is None
        mismatch = match_like([1, 3], [1, 2, 3])
        assert mismatch.path == "$[1]"

    def test_elementwise_actual_too_short(self) -> None:
        mismatch = match_like([1, 2, 3], [1, 2])
        assert "length mismatch" in mismatch.reason

    def test_broadcast_template_matches_every_element(self) -> None:
        authors = [
            {"id": 1, "name": "Ann", "email": "ann@example.com"},
            {"id": 2, "name": "Bob", "email": "bob@example.com"},
        ]
        template = [{"id": matchers.number(), "name": matchers.string()}]
        assert match_like(template, authors) is None

    def test_broadcast_reports_first_failing_element(self) -> None:
        authors = [{"id": 1}, {"id": "two"}, {"id": 3}]
        mismatch = match_like([{"id": matchers.number()}], authors)
        assert mismatch.path == "$[1].id"

    def test_broadcast_is_vacuous_for_empty_array(self) -> None:
        assert match_like([{"id": matchers.number()}], []) is None

    def test_broadcast_literal(self) -> None:
        assert match_like([{"author_id": 1}], [{"author_id": 1}, {"author_id": 1}]) is None
        assert match_like([{"author_id": 1}], [{"author_id": 1}, {"author_id": 2}]) is not None

    def test_array_expected_but_object_found(self) -> None:
        mismatch = match_like([{"id": 1}], {"id": 1})
        assert "expected array" in mismatch.reason


class TestPatternMatch:
    """Pattern semantics: exact keys at the top of the compared subtree."""

    def test_exact_keys_pass(self) -> None:
        assert match_pattern({"id": 1, "name": "x"}, {"name": "x", "id": 1}) is None

    def test_extra_top_level_key_fails(self) -> None:
        mismatch = match_pattern({"id": 1}, {"id": 1, "name": "x"})
        assert mismatch is not None
        assert "unexpected keys" in mismatch.reason
        assert "name" in mismatch.reason

    def test_nested_levels_stay_subset(self) -> None:
        assert match_pattern({"id": 1, "meta": {"a": 1}}, {"id": 1, "meta": {"a": 1, "b": 2}}) is None

    def test_array_length_must_match(self) -> None:
        assert match_pattern([1, 2], [1, 2, 3]) is not None
        assert match_pattern([1, 2], [1, 2]) is None


class TestPlaceholders:
    @pytest.mark.parametrize("tag, value, ok", [
        (matchers.number(), 1, True),
        (matchers.number(), 1.5, True),
        (matchers.number(), "1", False),
        (matchers.number(), True, False),
        (matchers.string(), "x", True),
        (matchers.string(), 1, False),
        (matchers.boolean(), False, True),
        (matchers.boolean(), 0, False),
        (matchers.array(), [], True),
        (matchers.obj(), {}, True),
        (matchers.anything(), None, True),
    ])
    def test_type_tags(self, tag, value, ok) -> None:
        assert (match_like({"v": tag}, {"v": value}) is None) is ok

    def test_type_tag_on_missing_key(self) -> None:
        mismatch = match_like({"v": matchers.anything()}, {})
        assert mismatch.reason == "missing key"

    def test_regex_against_number(self) -> None:
        assert match_like({"id": matchers.regex(r"\d+")}, {"id": 11}) is None

    def test_regex_search_semantics(self) -> None:
        assert match_like({"token": matchers.regex(r"\w+")}, {"token": "eyJhbGciOi.J9"}) is None

    def test_regex_failure(self) -> None:
        mismatch = match_like({"id": matchers.regex(r"^\d+$")}, {"id": "abc"})
        assert mismatch.reason == "value does not match pattern"
        assert "/^\\d+$/" in mismatch.describe()

    def test_regex_never_matches_containers(self) -> None:
        assert match_like({"id": matchers.regex(".*")}, {"id": {"a": 1}}) is not None

    def test_raw_compiled_pattern_is_promoted(self) -> None:
        assert isinstance(to_expected(re.compile("x")), Pattern)
        assert match_like({"id": re.compile(r"\d")}, {"id": 5}) is None

    def test_to_expected_variants(self) -> None:
        assert to_expected(5) == Literal(5)
        assert to_expected(TypeTag(Kind.STRING)) == TypeTag(Kind.STRING)
        assert to_expected({"a": 1}) == {"a": 1}


class TestFloats:
    def test_within_epsilon(self) -> None:
        assert match_like({"price": 20.0}, {"price": 19.999999}) is None

    def test_outside_epsilon(self) -> None:
        assert match_like({"price": 20.0}, {"price": 20.5}) is not None

    def test_int_and_float_compare_by_value(self) -> None:
        assert match_like({"price": 20}, {"price": 20.0}) is None

    def test_integers_are_exact(self) -> None:
        assert match_like({"n": 10**17}, {"n": 10**17 + 1}) is not None


class TestPaths:
    def test_extract_nested(self) -> None:
        assert extract_path(PRODUCT, "rating.count") == 120
        assert extract_path(PRODUCT, "tags.1") == "outdoor"
        assert extract_path(PRODUCT, None) is PRODUCT

    def test_extract_missing(self) -> None:
        assert is_missing(extract_path(PRODUCT, "rating.nope"))
        assert is_missing(extract_path(PRODUCT, "tags.9"))
        assert is_missing(extract_path(PRODUCT, "tags.x"))

    def test_json_path_rendering(self) -> None:
        assert json_path("data.items.0.id") == "$.data.items[0].id"
        assert json_path(None) == "$"
