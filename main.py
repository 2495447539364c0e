"""
Command-line runner: execute statements through the query analyzer.

Usage:
  python main.py "SELECT * FROM users WHERE id = 1"
  cat statements.sql | python main.py

Connection and analyzer behaviour come from the environment / .env
(DATABASE_URL, ENVIRONMENT, ANALYZER_ENABLED, REPORT_DIR, EXPLAIN_* ...).
"""

import argparse
import asyncio
import logging
import sys

from query_analyzer import AnalyzerOptions, CsvReportWriter, enable_analyzer, report_destination
from query_analyzer.config import settings
from query_analyzer.database import SQLAlchemyExecutor, create_engine_from_settings
from query_analyzer.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def _read_statements(args: argparse.Namespace) -> list[str]:
    if args.statements:
        return args.statements
    return [line.strip() for line in sys.stdin if line.strip()]


async def run(statements: list[str]) -> int:
    executor = SQLAlchemyExecutor(create_engine_from_settings())
    writer = CsvReportWriter(settings.report_dir)
    execute = await enable_analyzer(executor, AnalyzerOptions.from_settings(settings), writer=writer)

    failures = 0
    try:
        for statement in statements:
            try:
                rows = await execute(statement)
            except Exception as exc:
                failures += 1
                logger.error("Statement failed: %s", exc)
                continue
            print(f"{len(rows)} row(s): {statement[:80]}")
    finally:
        await executor.dispose()

    if execute.enabled:
        print(f"Report: {writer.path_for(report_destination())}")
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run SQL statements through the query analyzer")
    parser.add_argument("statements", nargs="*", help="SQL statements (read from stdin when omitted)")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level, settings.log_json)
    logger.info(f"Running in {settings.environment} mode")
    return asyncio.run(run(_read_statements(args)))


if __name__ == "__main__":
    sys.exit(main())
