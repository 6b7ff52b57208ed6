# restpact/types.py
"""
Shared types, dataclasses and the error taxonomy for the contract harness.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


# ==================== Outcomes ====================

@dataclass(frozen=True)
class TestOutcome:
    """Result of one contract case after all its expectations ran."""
    __test__ = False  # not a pytest class

    name: str
    passed: bool
    duration_ms: int = 0
    failure_detail: Optional[str] = None
    skipped: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FailureEntry:
    name: str
    failure_detail: str


@dataclass
class SummaryReport:
    """Suite-level summary emitted once by the reporter."""
    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    total_duration_ms: int = 0
    failures: List[FailureEntry] = field(default_factory=list)
    incomplete: List[str] = field(default_factory=list)
    outcomes: List[TestOutcome] = field(default_factory=list)
    run_id: str = "run"
    started_at: Optional[str] = None
    finished_at: Optional[str] = None

    @property
    def exit_code(self) -> int:
        """0 iff nothing failed and nothing was left unfinished."""
        return 0 if self.failed == 0 and not self.incomplete else 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            **asdict(self),
            "exit_code": self.exit_code,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


# ==================== Errors ====================

class RestpactError(Exception):
    """Base exception for harness errors."""
    pass


class BuildError(RestpactError):
    """Raised when a request specification cannot be built."""
    pass


class NetworkError(RestpactError):
    """Raised when the transport fails (timeout, DNS, refused or reset connection)."""
    def __init__(self, message: str, method: Optional[str] = None, url: Optional[str] = None):
        self.method = method
        self.url = url
        target = f" ({method} {url})" if method and url else ""
        super().__init__(f"{message}{target}")


class SuiteError(RestpactError):
    """Reporter/runner lifecycle misuse. Fatal to the suite run."""
    pass
