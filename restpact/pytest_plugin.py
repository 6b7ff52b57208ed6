# restpact/pytest_plugin.py
"""
pytest integration: every test's outcome is fed to a Reporter.

Enabled through ``pytest_plugins`` in the root conftest.py. One
``ContractReporterPlugin`` instance is registered per session and owns the
reporter. At session end the summary is printed after pytest's own, and
written to ``RESTPACT_REPORTS_DIR`` when ``RESTPACT_WRITE_REPORTS`` is set.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pytest

from restpact.config import get_settings
from restpact.reporter import Reporter
from restpact.types import SummaryReport, TestOutcome

logger = logging.getLogger(__name__)

PLUGIN_NAME = "restpact-reporter"


def _failure_message(report: pytest.TestReport) -> str:
    crash = getattr(report.longrepr, "reprcrash", None)
    if crash is not None:
        return f"{report.when}: {crash.message}"
    text = (report.longreprtext or "").strip()
    return f"{report.when}: {text.splitlines()[-1] if text else 'failed'}"


def outcome_from_reports(nodeid: str, reports: List[pytest.TestReport]) -> TestOutcome:
    """Fold setup/call/teardown reports of one test into a single outcome."""
    duration_ms = int(sum(r.duration for r in reports) * 1000)
    for r in reports:
        if r.failed:
            return TestOutcome(nodeid, passed=False, duration_ms=duration_ms, failure_detail=_failure_message(r))
    skipped = any(r.skipped for r in reports)
    return TestOutcome(nodeid, passed=not skipped, duration_ms=duration_ms, skipped=skipped)


class ContractReporterPlugin:
    def __init__(self, reporter: Reporter):
        self.reporter = reporter
        self.summary: Optional[SummaryReport] = None
        self._reports: Dict[str, List[pytest.TestReport]] = {}

    def pytest_runtest_logstart(self, nodeid, location):
        self._reports[nodeid] = []
        self.reporter.on_test_start(nodeid)

    def pytest_runtest_logreport(self, report: pytest.TestReport):
        self._reports.setdefault(report.nodeid, []).append(report)

    def pytest_runtest_logfinish(self, nodeid, location):
        reports = self._reports.pop(nodeid, [])
        self.reporter.on_test_end(outcome_from_reports(nodeid, reports))

    def pytest_sessionfinish(self, session, exitstatus):
        self.summary = self.reporter.on_suite_end()
        if self.reporter.reports_dir is not None:
            self.reporter.write_reports(self.summary)

    def pytest_terminal_summary(self, terminalreporter, exitstatus, config):
        if self.summary is None:
            return
        for line in Reporter.format_console(self.summary).splitlines():
            terminalreporter.write_line(line)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "live: contract cases that call external APIs over the network")
    if config.pluginmanager.has_plugin(PLUGIN_NAME):
        return
    settings = get_settings()
    reporter = Reporter(reports_dir=settings.reports_dir if settings.write_reports else None)
    config.pluginmanager.register(ContractReporterPlugin(reporter), PLUGIN_NAME)


def pytest_unconfigure(config: pytest.Config) -> None:
    plugin = config.pluginmanager.get_plugin(PLUGIN_NAME)
    if plugin is not None:
        config.pluginmanager.unregister(plugin, PLUGIN_NAME)
