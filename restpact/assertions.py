# restpact/assertions.py
"""
Assertion engine.

An ``ExpectationSet`` is an ordered list of predicates over a ``ResponseRecord``.
``evaluate`` runs them in declaration order and stops at the first failure,
reporting the predicate kind, JSON path, expected and actual values.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import jsonschema

from restpact.executor import ResponseRecord
from restpact.matchers import (
    Mismatch,
    extract_path,
    is_missing,
    json_path,
    match_like,
    match_pattern,
)
from restpact.types import TestOutcome

logger = logging.getLogger(__name__)


class ContractAssertionError(AssertionError):
    """A predicate did not hold. Carries the failing predicate kind and mismatch."""
    def __init__(self, kind: str, mismatch: Mismatch):
        self.kind = kind
        self.mismatch = mismatch
        super().__init__(format_failure(kind, mismatch))


def format_failure(kind: str, mismatch: Mismatch) -> str:
    return f"{kind} failed {mismatch.describe()}"


# ==================== Predicates ====================

class Predicate(ABC):
    """One expectation about a response."""

    kind: str = "predicate"

    @abstractmethod
    def check(self, response: ResponseRecord) -> Optional[Mismatch]:
        """Return None when satisfied, otherwise the first mismatch."""

    def _json_body(self, response: ResponseRecord) -> Tuple[Any, Optional[Mismatch]]:
        if not response.is_json:
            return None, Mismatch("$", "JSON body", response.body, "response body is not valid JSON")
        return response.body, None


@dataclass
class StatusEquals(Predicate):
    status: int
    kind: str = field(default="status", init=False)

    def check(self, response: ResponseRecord) -> Optional[Mismatch]:
        if response.status_code == int(self.status):
            return None
        return Mismatch("status", int(self.status), response.status_code, "status code differs")


@dataclass
class JsonLike(Predicate):
    """Subset match, optionally against the subtree at a dotted ``path``."""
    expected: Any
    path: Optional[str] = None
    kind: str = field(default="json-like", init=False)

    def check(self, response: ResponseRecord) -> Optional[Mismatch]:
        body, err = self._json_body(response)
        if err:
            return err
        actual = extract_path(body, self.path)
        return match_like(self.expected, actual, json_path(self.path))


@dataclass
class JsonMatch(Predicate):
    """Pattern match: exact key correspondence at the top of the compared subtree."""
    expected: Any
    path: Optional[str] = None
    kind: str = field(default="json-match", init=False)

    def check(self, response: ResponseRecord) -> Optional[Mismatch]:
        body, err = self._json_body(response)
        if err:
            return err
        actual = extract_path(body, self.path)
        return match_pattern(self.expected, actual, json_path(self.path))


@dataclass
class HasKeys(Predicate):
    keys: Tuple[str, ...]
    kind: str = field(default="has-keys", init=False)

    def check(self, response: ResponseRecord) -> Optional[Mismatch]:
        body, err = self._json_body(response)
        if err:
            return err
        for key in self.keys:
            if is_missing(extract_path(body, key)):
                present = sorted(body) if isinstance(body, dict) else body
                return Mismatch(json_path(key), key, present, "missing key")
        return None


@dataclass
class HeaderEquals(Predicate):
    name: str
    value: str
    kind: str = field(default="header", init=False)

    def check(self, response: ResponseRecord) -> Optional[Mismatch]:
        got = response.header(self.name)
        if got == self.value:
            return None
        return Mismatch(f"headers.{self.name.lower()}", self.value, got, "header differs")


@dataclass
class HeaderContains(Predicate):
    name: str
    needle: str
    kind: str = field(default="header-contains", init=False)

    def check(self, response: ResponseRecord) -> Optional[Mismatch]:
        got = response.header(self.name)
        if got is not None and self.needle in got:
            return None
        return Mismatch(f"headers.{self.name.lower()}", self.needle, got, "header missing substring")


@dataclass
class JsonSchema(Predicate):
    schema: Dict[str, Any]
    kind: str = field(default="json-schema", init=False)

    def check(self, response: ResponseRecord) -> Optional[Mismatch]:
        body, err = self._json_body(response)
        if err:
            return err
        try:
            jsonschema.validate(instance=body, schema=self.schema)
        except jsonschema.ValidationError as e:
            path = "$" + "".join(f"[{p}]" if isinstance(p, int) else f".{p}" for p in e.absolute_path)
            return Mismatch(path, e.schema, e.instance, e.message)
        return None


@dataclass
class ResponseTimeAtMost(Predicate):
    max_ms: int
    kind: str = field(default="response-time", init=False)

    def check(self, response: ResponseRecord) -> Optional[Mismatch]:
        if response.elapsed_ms <= self.max_ms:
            return None
        return Mismatch("elapsed_ms", self.max_ms, response.elapsed_ms, "response too slow")


# ==================== Expectation set ====================

class ExpectationSet:
    """Ordered predicates; evaluation order is declaration order."""

    def __init__(self, predicates: Optional[Iterable[Predicate]] = None):
        self._predicates: List[Predicate] = list(predicates or [])

    def add(self, predicate: Predicate) -> "ExpectationSet":
        self._predicates.append(predicate)
        return self

    def __iter__(self):
        return iter(self._predicates)

    def __len__(self) -> int:
        return len(self._predicates)

    def first_failure(self, response: ResponseRecord) -> Optional[Tuple[Predicate, Mismatch]]:
        for predicate in self._predicates:
            mismatch = predicate.check(response)
            if mismatch is not None:
                return predicate, mismatch
        return None

    def verify(self, response: ResponseRecord) -> None:
        """Raise ``ContractAssertionError`` for the first failing predicate."""
        failure = self.first_failure(response)
        if failure is not None:
            predicate, mismatch = failure
            raise ContractAssertionError(predicate.kind, mismatch)


def evaluate(
    expectations: ExpectationSet,
    response: ResponseRecord,
    name: str = "",
    duration_ms: int = 0,
) -> TestOutcome:
    """Evaluate expectations fail-fast and wrap the result in a TestOutcome."""
    failure = expectations.first_failure(response)
    if failure is None:
        return TestOutcome(name=name, passed=True, duration_ms=duration_ms)

    predicate, mismatch = failure
    detail = format_failure(predicate.kind, mismatch)
    logger.debug(f"{name or 'response'}: {detail}")
    return TestOutcome(name=name, passed=False, duration_ms=duration_ms, failure_detail=detail)
