"""
Query Analyzer

Wraps an async execute capability so that every statement passing through
it is timed, re-run with an EXPLAIN prefix where appropriate, and recorded
in the daily report. The caller always gets back exactly what the original
execute function returned, or exactly the error it raised; analysis is
best-effort and never changes that contract.

Usage:
    from query_analyzer import attach, AnalyzerOptions

    execute = attach(executor, AnalyzerOptions(slow_query_threshold=200))
    rows = await execute("SELECT * FROM users WHERE id = :id", {"replacements": {"id": 1}})
"""

import inspect
import json
import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from query_analyzer.config import settings
from query_analyzer.exceptions import (
    AnalyzerError,
    ErrorKind,
    ExecutionFailure,
    ExplainFailure,
    PersistenceFailure,
)
from query_analyzer.schemas import (
    AnalysisMode,
    AnalysisRecord,
    AnalyzerOptions,
    ExecOptions,
    ModeKind,
    Statement,
)
from query_analyzer.services.classifier import classify, is_bypassed
from query_analyzer.services.plan_parser import PlanMetrics, extract_metrics, plan_lines_from_rows
from query_analyzer.services.report_writer import CsvReportWriter, ReportSink, report_destination
from query_analyzer.utils.metrics import record_error, record_slow_query, record_statement

logger = logging.getLogger(__name__)

RAW_QUERY_TYPE = "RAW"

ExecuteFn = Callable[..., Awaitable[Any]]


def statement_text_of(statement: Statement) -> str:
    """SQL text from either a bare string or a mapping with a ``query`` key."""
    if isinstance(statement, str):
        return statement
    if isinstance(statement, Mapping):
        query = statement.get("query")
        return query if isinstance(query, str) else ""
    return ""


def _with_query(statement: Statement, query: str) -> Statement:
    if isinstance(statement, Mapping):
        return {**statement, "query": query}
    return query


def _serialize_params(params: Any) -> str:
    return json.dumps(params, indent=2, default=str)


def should_enable_analyzer(options: AnalyzerOptions, current_environment: str | None) -> bool:
    """
    Gating policy, evaluated once when the analyzer is attached.

    ``enabled`` wins when set. Otherwise a configured ``environment`` must
    match the current one. With neither set, analysis is on.
    """
    if options.enabled is not None:
        return options.enabled
    if options.environment is not None:
        return current_environment == options.environment
    return True


class QueryAnalyzer:
    """Drop-in replacement for an execute function that analyzes each statement."""

    def __init__(
        self,
        execute: ExecuteFn,
        options: AnalyzerOptions | None = None,
        *,
        writer: ReportSink | None = None,
        environment: str | None = None,
    ):
        self.__wrapped__ = execute
        self._execute = execute
        self.options = options or AnalyzerOptions()
        self.writer: ReportSink = writer if writer is not None else CsvReportWriter(settings.report_dir)
        current_environment = environment if environment is not None else settings.environment
        self.enabled = should_enable_analyzer(self.options, current_environment)

    async def __call__(self, statement: Statement, exec_options: ExecOptions = None, **kwargs: Any) -> Any:
        statement_text = statement_text_of(statement)

        if not self.enabled or is_bypassed(statement_text):
            return await self._invoke(statement, exec_options, kwargs)

        started = time.perf_counter()
        try:
            results = await self._invoke(statement, exec_options, kwargs)
        except Exception as exc:
            await self._report(ExecutionFailure(statement_text, exc))
            raise
        actual_execution_time = int((time.perf_counter() - started) * 1000)

        record = await self._analyze(statement, statement_text, exec_options, kwargs, actual_execution_time)
        await self._persist(record)
        await self._check_slow_query(record)
        return results

    async def _invoke(self, statement: Statement, exec_options: ExecOptions, kwargs: dict[str, Any]) -> Any:
        if exec_options is None:
            return await self._execute(statement, **kwargs)
        return await self._execute(statement, exec_options, **kwargs)

    async def _analyze(
        self,
        statement: Statement,
        statement_text: str,
        exec_options: ExecOptions,
        kwargs: dict[str, Any],
        actual_execution_time: int,
    ) -> AnalysisRecord:
        mode = AnalysisMode(ModeKind.NONE)
        metrics = PlanMetrics()
        params: str | None = None

        try:
            mode = classify(statement_text, self.options.explain)
            explain_options = exec_options

            if mode.kind == ModeKind.EXPLAIN:
                bind = statement.get("bind") if isinstance(statement, Mapping) else None
                params = _serialize_params(bind or {})
            elif mode.kind == ModeKind.EXPLAIN_ANALYZE and exec_options is not None:
                explain_options = {**exec_options, "type": RAW_QUERY_TYPE}
                if "replacements" in exec_options:
                    params = _serialize_params(exec_options["replacements"] or {})

            if mode.prefix is not None:
                explain_statement = _with_query(statement, mode.rewrite(statement_text))
                rows = await self._invoke(explain_statement, explain_options, kwargs)
                metrics = extract_metrics(plan_lines_from_rows(rows))
        except Exception as exc:
            metrics = PlanMetrics()
            await self._report(ExplainFailure(statement_text, exc))

        record_statement(mode.kind, actual_execution_time)
        return AnalysisRecord(
            statement_text=statement_text,
            actual_execution_time=actual_execution_time,
            plan_text=metrics.plan_text,
            planning_time=metrics.planning_time,
            execution_time=metrics.execution_time,
            start_cost=metrics.start_cost,
            end_cost=metrics.end_cost,
            params=params,
        )

    async def _persist(self, record: AnalysisRecord) -> None:
        destination = report_destination()
        try:
            await self.writer.append(destination, record)
        except Exception as exc:
            await self._report(PersistenceFailure(record.statement_text, exc))

    async def _check_slow_query(self, record: AnalysisRecord) -> None:
        if record.actual_execution_time < self.options.slow_query_threshold:
            return

        record_slow_query()
        logger.warning(
            "Slow query detected (%dms): %s",
            record.actual_execution_time,
            record.statement_text[:200],
            extra={"duration_ms": record.actual_execution_time, "statement": record.statement_text},
        )
        if self.options.on_slow_query is not None:
            await self._dispatch(self.options.on_slow_query, record, "on_slow_query")

    async def _report(self, error: AnalyzerError) -> None:
        record_error(error.code)
        extra = {"code": error.code, "statement": error.statement_text}
        if error.kind == ErrorKind.EXECUTION:
            logger.error("%s", error.formatted_message(), extra=extra)
        else:
            logger.warning("%s", error.formatted_message(), extra=extra)

        if self.options.on_error is not None:
            await self._dispatch(self.options.on_error, error, "on_error")

    async def _dispatch(self, callback: Callable[[Any], Any], argument: Any, name: str) -> None:
        try:
            result = callback(argument)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Analyzer %s callback raised", name)


def attach(
    execute: ExecuteFn,
    options: AnalyzerOptions | Mapping[str, Any] | None = None,
    *,
    writer: ReportSink | None = None,
    environment: str | None = None,
) -> QueryAnalyzer:
    """
    Wrap ``execute`` with the analyzer and return the replacement.

    Args:
        execute: Async ``execute(statement, exec_options=None)`` capability
        options: AnalyzerOptions, or a mapping of its fields
        writer: Report sink; defaults to CSV files under ``settings.report_dir``
        environment: Current runtime environment; defaults to ``settings.environment``

    Returns:
        QueryAnalyzer callable with the same call signature as ``execute``
    """
    if isinstance(options, Mapping):
        options = AnalyzerOptions(**options)
    return QueryAnalyzer(execute, options, writer=writer, environment=environment)


async def enable_analyzer(
    target: Any,
    options: AnalyzerOptions | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> QueryAnalyzer:
    """
    Set up the analyzer for an execute-capable object.

    ``target`` may be an object exposing an async ``execute`` method or an
    async callable. The target itself is left untouched; use the returned
    callable in its place.
    """
    execute = getattr(target, "execute", None)
    if execute is None and callable(target):
        execute = target
    if execute is None:
        raise TypeError(f"{type(target).__name__} has no execute capability")

    analyzer = attach(execute, options, **kwargs)
    logger.info("Query analyzer attached (enabled=%s)", analyzer.enabled)
    return analyzer
