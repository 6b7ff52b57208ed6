# restpact/runner.py
"""
Suite runner for contract cases.

A ``ContractSuite`` groups async case functions against one external API.
``SuiteRunner`` executes them sequentially (default) or in parallel with a
concurrency bound, feeds every outcome to an explicitly passed ``Reporter``
and returns the SummaryReport.

Per-case failures (BuildError, NetworkError, assertion mismatches, anything
else raised by case code) fail only that case. ``SuiteError`` aborts the run.
A global ``suite_timeout_s`` cancels in-flight requests; cases that did not
finish are reported as incomplete.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, List, Optional

from restpact.assertions import ContractAssertionError
from restpact.config import Settings, get_settings
from restpact.executor import HttpExecutor
from restpact.fake_data import FakeDataGenerator
from restpact.reporter import Reporter
from restpact.spec import Spec
from restpact.types import BuildError, NetworkError, SuiteError, SummaryReport, TestOutcome

logger = logging.getLogger(__name__)

CaseFunc = Callable[["CaseContext"], Awaitable[None]]


# ==================== Suite model ====================

@dataclass
class ContractCase:
    name: str
    func: CaseFunc
    suite: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.suite} :: {self.name}" if self.suite else self.name


@dataclass
class ContractSuite:
    """A named group of cases sharing a base URL."""
    name: str
    base_url: str
    cases: List[ContractCase] = field(default_factory=list)

    def case(self, name: str) -> Callable[[CaseFunc], CaseFunc]:
        """Decorator registering an async case function under ``name``."""
        def register(func: CaseFunc) -> CaseFunc:
            if any(c.name == name for c in self.cases):
                raise SuiteError(f"duplicate case {name!r} in suite {self.name!r}")
            self.cases.append(ContractCase(name=name, func=func, suite=self.name))
            return func
        return register


@dataclass
class CaseContext:
    """Everything a case needs: a spec factory bound to the suite's base URL and fake data."""
    executor: HttpExecutor
    fake: FakeDataGenerator
    base_url: str = ""
    default_timeout_ms: int = 30000
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("restpact.case"))

    def spec(self) -> Spec:
        return Spec(self.executor, base_url=self.base_url, default_timeout_ms=self.default_timeout_ms)


# ==================== Outcome mapping ====================

async def run_case(case: ContractCase, ctx: CaseContext) -> TestOutcome:
    """Run one case and map its result to a TestOutcome. SuiteError and cancellation propagate."""
    t0 = time.perf_counter()
    detail: Optional[str] = None
    try:
        await case.func(ctx)
    except ContractAssertionError as e:
        detail = str(e)
    except BuildError as e:
        detail = f"BuildError: {e}"
    except NetworkError as e:
        detail = f"NetworkError: {e}"
    except SuiteError:
        raise
    except AssertionError as e:
        detail = f"AssertionError: {e}"
    except Exception as e:
        logger.error(f"Unexpected error in {case.full_name}", exc_info=True)
        detail = f"{type(e).__name__}: {e}"
    duration_ms = int((time.perf_counter() - t0) * 1000)
    return TestOutcome(
        name=case.full_name,
        passed=detail is None,
        duration_ms=duration_ms,
        failure_detail=detail,
    )


# ==================== Runner ====================

class SuiteRunner:
    """
    Executes contract suites against a shared executor.

    The reporter and executor are injected; when no executor is given the
    runner opens one from settings for the duration of the run.
    """

    def __init__(
        self,
        reporter: Reporter,
        settings: Optional[Settings] = None,
        executor: Optional[HttpExecutor] = None,
        fake: Optional[FakeDataGenerator] = None,
        parallel: Optional[bool] = None,
        max_concurrency: Optional[int] = None,
        suite_timeout_s: Optional[float] = None,
    ):
        self.settings = settings or get_settings()
        self.reporter = reporter
        self._executor = executor
        self.fake = fake or FakeDataGenerator(seed=self.settings.faker_seed, locale=self.settings.faker_locale)
        self.parallel = self.settings.parallel if parallel is None else parallel
        self.max_concurrency = max_concurrency if max_concurrency is not None else self.settings.max_concurrency
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {self.max_concurrency}")
        self.suite_timeout_s = suite_timeout_s if suite_timeout_s is not None else self.settings.suite_timeout_s
        if self.suite_timeout_s is not None and self.suite_timeout_s <= 0:
            raise ValueError(f"suite_timeout_s must be > 0, got {self.suite_timeout_s}")

    # ==================== Public API ====================

    def run(self, suites: Iterable[ContractSuite]) -> SummaryReport:
        """Synchronous wrapper for run_async"""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop and loop.is_running():
            raise RuntimeError("run() called inside running loop; use await run_async()")

        return asyncio.run(self.run_async(suites))

    async def run_async(self, suites: Iterable[ContractSuite]) -> SummaryReport:
        suites = list(suites)
        cases = [(s, c) for s in suites for c in s.cases]
        logger.info(
            f"Running {len(cases)} cases from {len(suites)} suites "
            f"({'parallel x' + str(self.max_concurrency) if self.parallel else 'sequential'})"
        )

        finished: set = set()
        executor = self._executor
        owns_executor = executor is None
        if owns_executor:
            executor = HttpExecutor(
                verify_ssl=self.settings.verify_ssl,
                follow_redirects=self.settings.follow_redirects,
            )

        try:
            work = self._run_all(executor, cases, finished)
            if self.suite_timeout_s is not None:
                try:
                    await asyncio.wait_for(work, timeout=self.suite_timeout_s)
                except asyncio.TimeoutError:
                    logger.warning(f"⏱️ Suite timeout after {self.suite_timeout_s}s; cancelling in-flight cases")
            else:
                await work
        finally:
            if owns_executor:
                await executor.aclose()

        unfinished = [c.full_name for _, c in cases if c.full_name not in finished]
        if unfinished:
            self.reporter.mark_incomplete(unfinished)
        return self.reporter.on_suite_end()

    # ==================== Internals ====================

    def _context(self, executor: HttpExecutor, suite: ContractSuite) -> CaseContext:
        return CaseContext(
            executor=executor,
            fake=self.fake,
            base_url=suite.base_url,
            default_timeout_ms=self.settings.default_timeout_ms,
        )

    async def _run_one(self, executor: HttpExecutor, suite: ContractSuite, case: ContractCase, finished: set) -> None:
        self.reporter.on_test_start(case.full_name)
        outcome = await run_case(case, self._context(executor, suite))
        self.reporter.on_test_end(outcome)
        finished.add(case.full_name)

    async def _run_all(self, executor: HttpExecutor, cases: List[Any], finished: set) -> None:
        if not self.parallel:
            for suite, case in cases:
                await self._run_one(executor, suite, case, finished)
            return

        sem = asyncio.Semaphore(self.max_concurrency)

        async def bounded(suite: ContractSuite, case: ContractCase) -> None:
            async with sem:
                await self._run_one(executor, suite, case, finished)

        tasks = [asyncio.create_task(bounded(s, c)) for s, c in cases]
        try:
            await asyncio.gather(*tasks)
        finally:
            # gather does not cancel siblings when one raises (SuiteError) or on outer cancel
            for t in tasks:
                if not t.done():
                    t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
