# restpact/cli.py
"""
Run the bundled contract suites from the command line.

Usage:
    # All suites, sequential
    restpact

    # One suite, parallel, reports written to ./reports
    restpact --suite fakestore --parallel --reports-dir reports

    # Abort everything still running after 60s
    restpact --timeout 60

Exit code is 0 only when every case passed and none was left incomplete.
"""

import argparse
import logging
import sys
from typing import List, Optional

from restpact.config import get_settings
from restpact.fake_data import FakeDataGenerator
from restpact.reporter import Reporter
from restpact.runner import SuiteRunner
from restpact.suites import build_suites, get_all_suite_names
from restpact.types import SuiteError

logger = logging.getLogger("restpact")


def positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return n


def positive_float(value: str) -> float:
    x = float(value)
    if x <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return x


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="restpact",
        description="Run HTTP contract suites against external REST APIs",
    )
    parser.add_argument("--suite", "-s", action="append", choices=get_all_suite_names(),
                        help="suite to run (repeatable; default: all)")
    parser.add_argument("--parallel", "-p", action="store_true", default=None,
                        help="run cases in parallel")
    parser.add_argument("--max-concurrency", type=positive_int, help="parallel case limit")
    parser.add_argument("--timeout", "-t", type=positive_float, help="global suite timeout in seconds")
    parser.add_argument("--reports-dir", "-r", help="write JSON/JUnit/HTML reports here")
    parser.add_argument("--seed", type=int, help="seed the fake data generator")
    parser.add_argument("--list", action="store_true", help="list cases and exit")
    parser.add_argument("--debug", "-D", action="store_true", help="log requests and responses")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    suites = build_suites(settings, args.suite)

    if args.list:
        for suite in suites:
            print(f"{suite.name} ({suite.base_url})")
            for case in suite.cases:
                print(f"  - {case.name}")
        return 0

    reports_dir = args.reports_dir or (settings.reports_dir if settings.write_reports else None)
    reporter = Reporter(reports_dir=reports_dir)
    seed = args.seed if args.seed is not None else settings.faker_seed
    runner = SuiteRunner(
        reporter,
        settings=settings,
        fake=FakeDataGenerator(seed=seed, locale=settings.faker_locale),
        parallel=args.parallel,
        max_concurrency=args.max_concurrency,
        suite_timeout_s=args.timeout,
    )

    try:
        summary = runner.run(suites)
    except SuiteError as e:
        logger.error(f"Suite aborted: {e}")
        return 2

    print(Reporter.format_console(summary))
    if reports_dir:
        reporter.write_reports(summary)
    return summary.exit_code


if __name__ == "__main__":
    sys.exit(main())
