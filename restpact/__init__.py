# restpact/__init__.py
"""
restpact: a small HTTP contract-testing harness.

Build a request, send it once, assert on status and JSON shape, and collect
outcomes for a suite summary.
"""

from restpact.assertions import (
    ContractAssertionError,
    ExpectationSet,
    HasKeys,
    HeaderContains,
    HeaderEquals,
    JsonLike,
    JsonMatch,
    JsonSchema,
    ResponseTimeAtMost,
    StatusEquals,
    evaluate,
)
from restpact.config import Settings, get_settings
from restpact.executor import HttpExecutor, ResponseRecord
from restpact.fake_data import DataKind, FakeDataGenerator
from restpact.reporter import Reporter
from restpact.request_spec import HttpMethod, RequestSpec, RequestSpecBuilder
from restpact.runner import CaseContext, ContractCase, ContractSuite, SuiteRunner, run_case
from restpact.spec import Spec
from restpact.types import (
    BuildError,
    FailureEntry,
    NetworkError,
    RestpactError,
    SuiteError,
    SummaryReport,
    TestOutcome,
)

__version__ = "0.1.0"

__all__ = [
    "BuildError",
    "CaseContext",
    "ContractAssertionError",
    "ContractCase",
    "ContractSuite",
    "DataKind",
    "ExpectationSet",
    "FailureEntry",
    "FakeDataGenerator",
    "HasKeys",
    "HeaderContains",
    "HeaderEquals",
    "HttpExecutor",
    "HttpMethod",
    "JsonLike",
    "JsonMatch",
    "JsonSchema",
    "NetworkError",
    "Reporter",
    "RequestSpec",
    "RequestSpecBuilder",
    "ResponseRecord",
    "ResponseTimeAtMost",
    "RestpactError",
    "Settings",
    "Spec",
    "StatusEquals",
    "SuiteError",
    "SuiteRunner",
    "SummaryReport",
    "TestOutcome",
    "evaluate",
    "get_settings",
    "run_case",
]
