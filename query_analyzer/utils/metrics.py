"""
Prometheus Metrics Module

Process-level counters for the analyzer itself: how many statements were
analyzed, how many analyzer failures occurred and how long the original
statements took. Plan metrics are persisted in reports, not here.
"""

from prometheus_client import Counter, Histogram

from query_analyzer.schemas import ModeKind

# =============================================================================
# Analyzer Metrics
# =============================================================================

ANALYZER_STATEMENTS_TOTAL = Counter(
    "query_analyzer_statements_total",
    "Statements that went through the analysis path",
    ["mode"],
)

ANALYZER_ERRORS_TOTAL = Counter(
    "query_analyzer_errors_total",
    "Analyzer failures by error code",
    ["code"],
)

ANALYZER_SLOW_QUERIES_TOTAL = Counter(
    "query_analyzer_slow_queries_total",
    "Statements at or above the slow query threshold",
)

ANALYZER_STATEMENT_DURATION_SECONDS = Histogram(
    "query_analyzer_statement_duration_seconds",
    "Wall-clock duration of the original statement in seconds",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)


def record_statement(mode: ModeKind, duration_ms: int) -> None:
    ANALYZER_STATEMENTS_TOTAL.labels(mode=mode.value).inc()
    ANALYZER_STATEMENT_DURATION_SECONDS.observe(duration_ms / 1000)


def record_error(code: str) -> None:
    ANALYZER_ERRORS_TOTAL.labels(code=code).inc()


def record_slow_query() -> None:
    ANALYZER_SLOW_QUERIES_TOTAL.inc()
