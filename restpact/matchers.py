# restpact/matchers.py
"""
Expected-value placeholders and JSON subset / pattern matching.

An expected value is one of three variants:

- ``Literal``  a plain JSON value compared for equality
- ``Pattern``  a regular expression searched in the JSON text of a scalar
- ``TypeTag``  "any value of this runtime type"

Nested dicts and lists inside an expected document are walked structurally;
their leaves are promoted to one of the variants above by ``to_expected``.
Raw ``re.Pattern`` objects are accepted and promoted to ``Pattern``.

Matching returns ``None`` on success or the first ``Mismatch`` found, with the
JSON path at which the divergence occurred.
"""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

FLOAT_REL_TOL = 1e-6
FLOAT_ABS_TOL = 1e-9


class Kind(str, Enum):
    NUMBER = "is-number"
    STRING = "is-string"
    BOOLEAN = "is-boolean"
    ARRAY = "is-array"
    OBJECT = "is-object"
    ANY = "is-any"


@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class Pattern:
    regex: "re.Pattern[str]"

    def __repr__(self) -> str:
        return f"/{self.regex.pattern}/"


@dataclass(frozen=True)
class TypeTag:
    kind: Kind

    def __repr__(self) -> str:
        return f"<{self.kind.value}>"


Expected = Union[Literal, Pattern, TypeTag]


# ==================== Placeholder constructors ====================

def number() -> TypeTag:
    return TypeTag(Kind.NUMBER)


def string() -> TypeTag:
    return TypeTag(Kind.STRING)


def boolean() -> TypeTag:
    return TypeTag(Kind.BOOLEAN)


def array() -> TypeTag:
    return TypeTag(Kind.ARRAY)


def obj() -> TypeTag:
    return TypeTag(Kind.OBJECT)


def anything() -> TypeTag:
    return TypeTag(Kind.ANY)


def regex(pattern: str, flags: int = 0) -> Pattern:
    return Pattern(re.compile(pattern, flags))


def to_expected(value: Any) -> Any:
    """Promote a leaf to an Expected variant; dicts and lists are left for the walker."""
    if isinstance(value, (Literal, Pattern, TypeTag)):
        return value
    if isinstance(value, re.Pattern):
        return Pattern(value)
    if isinstance(value, (dict, list)):
        return value
    return Literal(value)


# ==================== Mismatch ====================

@dataclass(frozen=True)
class Mismatch:
    """First point of divergence between expected and actual."""
    path: str
    expected: Any
    actual: Any
    reason: str

    def describe(self) -> str:
        return (
            f"at {self.path}: {self.reason} "
            f"(expected {render(self.expected)}, got {render(self.actual)})"
        )


_MISSING = object()


def render(value: Any) -> str:
    """Short, JSON-ish rendering for failure messages."""
    if value is _MISSING:
        return "<missing>"
    if isinstance(value, (Literal,)):
        value = value.value
    if isinstance(value, (Pattern, TypeTag)):
        return repr(value)
    if isinstance(value, re.Pattern):
        return f"/{value.pattern}/"
    if isinstance(value, (bytes, bytearray)):
        text = bytes(value[:200]).decode("utf-8", errors="replace")
        return f"<bytes {len(value)}: {text!r}>"
    try:
        out = json.dumps(value, default=repr, ensure_ascii=False)
    except (TypeError, ValueError):
        out = repr(value)
    return out if len(out) <= 300 else out[:297] + "..."


def _child(path: str, key: Any) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}"


# ==================== Leaf comparisons ====================

def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _type_name(v: Any) -> str:
    if v is None:
        return "null"
    if isinstance(v, bool):
        return "boolean"
    if _is_number(v):
        return "number"
    if isinstance(v, str):
        return "string"
    if isinstance(v, list):
        return "array"
    if isinstance(v, dict):
        return "object"
    return type(v).__name__


def numbers_equal(expected: Any, actual: Any) -> bool:
    if isinstance(expected, int) and isinstance(actual, int):
        return expected == actual
    return math.isclose(float(expected), float(actual), rel_tol=FLOAT_REL_TOL, abs_tol=FLOAT_ABS_TOL)


def _match_type(tag: TypeTag, actual: Any, path: str) -> Optional[Mismatch]:
    kind = tag.kind
    if actual is _MISSING:
        return Mismatch(path, tag, actual, "missing key")
    ok = {
        Kind.NUMBER: _is_number(actual),
        Kind.STRING: isinstance(actual, str),
        Kind.BOOLEAN: isinstance(actual, bool),
        Kind.ARRAY: isinstance(actual, list),
        Kind.OBJECT: isinstance(actual, dict),
        Kind.ANY: True,
    }[kind]
    if ok:
        return None
    return Mismatch(path, tag, actual, f"type {_type_name(actual)} does not satisfy {kind.value}")


def _match_pattern(pattern: Pattern, actual: Any, path: str) -> Optional[Mismatch]:
    if isinstance(actual, (dict, list)) or actual is None:
        return Mismatch(path, pattern, actual, f"{_type_name(actual)} cannot match a pattern")
    text = actual if isinstance(actual, str) else json.dumps(actual)
    if pattern.regex.search(text):
        return None
    return Mismatch(path, pattern, actual, "value does not match pattern")


def _match_literal(expected: Any, actual: Any, path: str) -> Optional[Mismatch]:
    if _is_number(expected) and _is_number(actual):
        if numbers_equal(expected, actual):
            return None
        return Mismatch(path, expected, actual, "number differs")
    if _type_name(expected) != _type_name(actual):
        return Mismatch(
            path, expected, actual,
            f"type mismatch (expected {_type_name(expected)}, got {_type_name(actual)})",
        )
    if expected != actual:
        return Mismatch(path, expected, actual, "value differs")
    return None


# ==================== Structural walk ====================

def match(expected: Any, actual: Any, path: str = "$", exact_keys: bool = False) -> Optional[Mismatch]:
    """
    Match ``actual`` against ``expected``.

    Subset semantics throughout; with ``exact_keys`` the top level of the
    compared subtree must also have exactly the expected keys (objects) or
    length (element-wise arrays). Nested levels are always subset matches.
    """
    exp = to_expected(expected)

    if isinstance(exp, TypeTag):
        return _match_type(exp, actual, path)
    if isinstance(exp, Pattern):
        if actual is _MISSING:
            return Mismatch(path, exp, actual, "missing key")
        return _match_pattern(exp, actual, path)
    if isinstance(exp, dict):
        return _match_object(exp, actual, path, exact_keys)
    if isinstance(exp, list):
        return _match_array(exp, actual, path, exact_keys)

    if actual is _MISSING:
        return Mismatch(path, exp, actual, "missing key")
    return _match_literal(exp.value, actual, path)


def _match_object(expected: dict, actual: Any, path: str, exact_keys: bool) -> Optional[Mismatch]:
    if actual is _MISSING:
        return Mismatch(path, expected, actual, "missing key")
    if not isinstance(actual, dict):
        return Mismatch(path, expected, actual, f"expected object, got {_type_name(actual)}")

    for key, exp_value in expected.items():
        found = match(exp_value, actual.get(key, _MISSING), _child(path, key))
        if found is not None:
            return found

    if exact_keys:
        extra = [k for k in actual if k not in expected]
        if extra:
            return Mismatch(path, sorted(expected), sorted(actual), f"unexpected keys {extra}")
    return None


def _match_array(expected: list, actual: Any, path: str, exact_keys: bool) -> Optional[Mismatch]:
    if actual is _MISSING:
        return Mismatch(path, expected, actual, "missing key")
    if not isinstance(actual, list):
        return Mismatch(path, expected, actual, f"expected array, got {_type_name(actual)}")

    if len(expected) == 1:
        # one-element template applies to every actual element
        template = expected[0]
        for i, item in enumerate(actual):
            found = match(template, item, _child(path, i))
            if found is not None:
                return found
        return None

    if len(actual) < len(expected) or (exact_keys and len(actual) != len(expected)):
        return Mismatch(
            path, expected, actual,
            f"length mismatch (expected {len(expected)}, got {len(actual)})",
        )
    for i, exp_item in enumerate(expected):
        found = match(exp_item, actual[i], _child(path, i))
        if found is not None:
            return found
    return None


def match_like(expected: Any, actual: Any, path: str = "$") -> Optional[Mismatch]:
    """Subset match: extra keys in ``actual`` are ignored."""
    return match(expected, actual, path, exact_keys=False)


def match_pattern(expected: Any, actual: Any, path: str = "$") -> Optional[Mismatch]:
    """Pattern match: keys must correspond exactly at the top of the subtree."""
    return match(expected, actual, path, exact_keys=True)


# ==================== Paths ====================

def extract_path(obj: Any, dotted: Optional[str]) -> Any:
    """Extract value from nested object using dotted path ("data.items.0.id")."""
    if not dotted:
        return obj
    cur = obj
    for p in (p for p in dotted.split(".") if p):
        if isinstance(cur, list):
            try:
                idx = int(p)
            except ValueError:
                return _MISSING
            if idx < 0 or idx >= len(cur):
                return _MISSING
            cur = cur[idx]
        elif isinstance(cur, dict):
            if p not in cur:
                return _MISSING
            cur = cur[p]
        else:
            return _MISSING
    return cur


def json_path(dotted: Optional[str]) -> str:
    """Render a dotted path as the JSON path used in failure messages."""
    path = "$"
    for p in (p for p in (dotted or "").split(".") if p):
        path = _child(path, int(p)) if p.isdigit() else _child(path, p)
    return path


def is_missing(value: Any) -> bool:
    return value is _MISSING
