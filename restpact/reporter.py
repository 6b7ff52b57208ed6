# restpact/reporter.py
"""
Reporter: collects per-case outcomes for one suite run and emits the summary.

One instance per run, passed explicitly to whoever drives the cases (the
SuiteRunner or the pytest plugin). Outcomes are appended under a lock in order
of arrival, so cases running in parallel can report concurrently.

Artifacts written by ``write_reports``:
- ``<run_id>.json``       the SummaryReport
- ``<run_id>.junit.xml``  JUnit XML for CI
- ``<run_id>.html``       human-readable page (Jinja2)
"""

from __future__ import annotations

import json
import logging
import threading
import time
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
from xml.etree import ElementTree as ET

from jinja2 import BaseLoader, Environment, select_autoescape

from restpact.types import FailureEntry, SuiteError, SummaryReport, TestOutcome

logger = logging.getLogger(__name__)

INCOMPLETE_DETAIL = "incomplete: cancelled before finishing"

# ==================== HTML Template ====================

_HTML_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>Contract run {{ summary.run_id }}</title>
<meta name="viewport" content="width=device-width,initial-scale=1"/>
<style>
  :root { --bg:#f7fafc; --fg:#111; --muted:#666; --card:#fff; --ok:#1a7f37; --bad:#d00000; --warn:#f59e0b; }
  body { font-family: Inter, 'Segoe UI', Roboto, sans-serif; background: var(--bg); color: var(--fg); margin: 0; padding: 20px; }
  .wrap { max-width: 1100px; margin: 0 auto; }
  .card { background: var(--card); border-radius: 12px; box-shadow: 0 4px 12px rgba(0,0,0,0.08); padding: 20px; margin-bottom: 16px; }
  .muted { color: var(--muted); font-size: 13px; }
  .badge { display: inline-block; padding: 4px 12px; border-radius: 6px; font-size: 12px; font-weight: 600; text-transform: uppercase; color: #fff; }
  .badge.success { background: var(--ok); }
  .badge.fail { background: var(--bad); }
  .badge.warn { background: var(--warn); }
  table { width: 100%; border-collapse: collapse; font-size: 14px; }
  th, td { padding: 10px; border-bottom: 1px solid #eee; text-align: left; vertical-align: top; }
  th { background: #eef4ff; font-weight: 600; }
  pre { background: #f0f3f7; padding: 8px; border-radius: 6px; white-space: pre-wrap; font-size: 12px; margin: 0; }
</style>
</head>
<body>
<div class="wrap">
  <h1>Contract Run Report</h1>
  <div class="muted"><strong>{{ summary.run_id }}</strong> &bull; {{ summary.started_at }} &rarr; {{ summary.finished_at }}</div>

  <div class="card">
    <span class="badge {{ 'success' if summary.exit_code == 0 else 'fail' }}">
      {{ 'passed' if summary.exit_code == 0 else 'failed' }}
    </span>
    <p>
      {{ summary.total }} total &bull; {{ summary.passed }} passed &bull; {{ summary.failed }} failed
      {% if summary.skipped %}&bull; {{ summary.skipped }} skipped{% endif %}
      {% if summary.incomplete %}&bull; {{ summary.incomplete|length }} incomplete{% endif %}
      &bull; {{ summary.total_duration_ms }} ms
    </p>
  </div>

  {% if summary.failures %}
  <div class="card">
    <h3>Failures</h3>
    <table>
      <thead><tr><th>Case</th><th>Detail</th></tr></thead>
      <tbody>
        {% for f in summary.failures %}
        <tr><td>{{ f.name }}</td><td><pre>{{ f.failure_detail }}</pre></td></tr>
        {% endfor %}
      </tbody>
    </table>
  </div>
  {% endif %}

  <div class="card">
    <h3>Cases</h3>
    <table>
      <thead><tr><th>Case</th><th>Status</th><th>Duration</th></tr></thead>
      <tbody>
        {% for o in summary.outcomes %}
        <tr>
          <td>{{ o.name }}</td>
          <td>
            {% if o.skipped %}<span class="badge warn">skipped</span>
            {% elif o.passed %}<span class="badge success">passed</span>
            {% else %}<span class="badge fail">failed</span>{% endif %}
          </td>
          <td>{{ o.duration_ms }} ms</td>
        </tr>
        {% endfor %}
      </tbody>
    </table>
  </div>
</div>
</body>
</html>
"""

_env = Environment(
    loader=BaseLoader(),
    autoescape=select_autoescape(enabled_extensions=("html", "xml"), default_for_string=True),
    enable_async=False,
)


class Reporter:
    """
    Outcome collector with an explicit lifecycle.

    ``on_test_start`` / ``on_test_end`` bracket every case; ``on_suite_end``
    is called exactly once and returns the SummaryReport. Any call that breaks
    that contract raises ``SuiteError``.
    """

    def __init__(self, reports_dir: Optional[str] = None, run_id: Optional[str] = None):
        self.reports_dir = Path(reports_dir) if reports_dir else None
        self.run_id = run_id or f"run-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}-{uuid.uuid4().hex[:6]}"
        self._lock = threading.Lock()
        self._outcomes: List[TestOutcome] = []
        self._in_flight: Dict[str, float] = {}
        self._incomplete: List[str] = []
        self._finished = False
        self._started_at = datetime.now(timezone.utc)
        self._t0 = time.perf_counter()

    # ==================== Lifecycle ====================

    def on_test_start(self, name: str) -> None:
        with self._lock:
            self._ensure_open("on_test_start")
            if name in self._in_flight:
                raise SuiteError(f"on_test_start({name!r}) called twice without on_test_end")
            self._in_flight[name] = time.perf_counter()
        logger.info(f"▶️  {name}")

    def on_test_end(self, outcome: TestOutcome) -> None:
        with self._lock:
            self._ensure_open("on_test_end")
            if outcome.name not in self._in_flight:
                raise SuiteError(f"on_test_end({outcome.name!r}) without matching on_test_start")
            del self._in_flight[outcome.name]
            self._outcomes.append(outcome)

        if outcome.skipped:
            logger.info(f"⏭️  {outcome.name} skipped")
        elif outcome.passed:
            logger.info(f"✅ {outcome.name} ({outcome.duration_ms}ms)")
        else:
            logger.warning(f"❌ {outcome.name}: {outcome.failure_detail}")

    def mark_incomplete(self, names: Iterable[str]) -> None:
        """Record cases that never finished (suite-level abort)."""
        with self._lock:
            self._ensure_open("mark_incomplete")
            for name in names:
                self._in_flight.pop(name, None)
                if name not in self._incomplete:
                    self._incomplete.append(name)

    def in_flight(self) -> List[str]:
        with self._lock:
            return list(self._in_flight)

    def on_suite_end(self) -> SummaryReport:
        with self._lock:
            self._ensure_open("on_suite_end")
            self._finished = True
            # anything still open at teardown never reported an outcome
            for name in self._in_flight:
                if name not in self._incomplete:
                    self._incomplete.append(name)
            self._in_flight.clear()
            outcomes = list(self._outcomes)
            incomplete = list(self._incomplete)

        passed = sum(1 for o in outcomes if o.passed and not o.skipped)
        skipped = sum(1 for o in outcomes if o.skipped)
        failures = [
            FailureEntry(name=o.name, failure_detail=o.failure_detail or "failed")
            for o in outcomes
            if not o.passed and not o.skipped
        ]
        summary = SummaryReport(
            total=len(outcomes),
            passed=passed,
            failed=len(failures),
            skipped=skipped,
            total_duration_ms=int((time.perf_counter() - self._t0) * 1000),
            failures=failures,
            incomplete=incomplete,
            outcomes=outcomes,
            run_id=self.run_id,
            started_at=self._started_at.isoformat(),
            finished_at=datetime.now(timezone.utc).isoformat(),
        )
        logger.info(
            f"Suite finished: {summary.passed}/{summary.total} passed, "
            f"{summary.failed} failed, {len(summary.incomplete)} incomplete"
        )
        return summary

    def _ensure_open(self, call: str) -> None:
        if self._finished:
            raise SuiteError(f"{call} called after on_suite_end")

    # ==================== Output ====================

    @staticmethod
    def format_console(summary: SummaryReport) -> str:
        """Itemize failing cases; passing cases are only counted."""
        lines = [
            "=" * 60,
            f"Contract run {summary.run_id}",
            f"  total={summary.total} passed={summary.passed} failed={summary.failed}"
            + (f" skipped={summary.skipped}" if summary.skipped else "")
            + f" duration={summary.total_duration_ms}ms",
        ]
        if summary.failures:
            lines.append("Failures:")
            for f in summary.failures:
                lines.append(f"  ❌ {f.name}")
                lines.append(f"     {f.failure_detail}")
        if summary.incomplete:
            lines.append("Incomplete:")
            for name in summary.incomplete:
                lines.append(f"  ⏹️  {name}: {INCOMPLETE_DETAIL}")
        lines.append("=" * 60)
        return "\n".join(lines)

    def write_reports(self, summary: SummaryReport) -> Dict[str, str]:
        """Write JSON, JUnit XML and HTML reports. Returns their paths."""
        if self.reports_dir is None:
            raise SuiteError("write_reports needs a reports_dir")
        self.reports_dir.mkdir(parents=True, exist_ok=True)

        json_path = self.reports_dir / f"{summary.run_id}.json"
        junit_path = self.reports_dir / f"{summary.run_id}.junit.xml"
        html_path = self.reports_dir / f"{summary.run_id}.html"

        self._atomic_json_dump(json_path, summary.to_dict())
        logger.info(f"✅ JSON report → {json_path}")

        self._atomic_text_write(junit_path, self._generate_junit_xml(summary))
        logger.info(f"✅ JUnit XML → {junit_path}")

        html = _env.from_string(_HTML_TEMPLATE).render(summary=summary)
        self._atomic_text_write(html_path, html)
        logger.info(f"✅ HTML report → {html_path}")

        return {"json": str(json_path), "junit": str(junit_path), "html": str(html_path)}

    @staticmethod
    def _generate_junit_xml(summary: SummaryReport) -> str:
        root = ET.Element("testsuites", name=summary.run_id)
        suite = ET.SubElement(
            root,
            "testsuite",
            name=summary.run_id,
            tests=str(summary.total + len(summary.incomplete)),
            failures=str(summary.failed),
            errors=str(len(summary.incomplete)),
            skipped=str(summary.skipped),
            time=f"{summary.total_duration_ms / 1000:.3f}",
        )
        for o in summary.outcomes:
            case = ET.SubElement(suite, "testcase", name=o.name, time=f"{o.duration_ms / 1000:.3f}")
            if o.skipped:
                ET.SubElement(case, "skipped")
            elif not o.passed:
                failure = ET.SubElement(case, "failure", message=(o.failure_detail or "failed")[:200])
                failure.text = o.failure_detail or "failed"
        for name in summary.incomplete:
            case = ET.SubElement(suite, "testcase", name=name)
            ET.SubElement(case, "error", message=INCOMPLETE_DETAIL)
        return ET.tostring(root, encoding="unicode", method="xml")

    @staticmethod
    def _atomic_text_write(path: Path, text: str) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(text, encoding="utf-8")
        tmp.replace(path)

    @staticmethod
    def _atomic_json_dump(path: Path, data: Any) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp.replace(path)
