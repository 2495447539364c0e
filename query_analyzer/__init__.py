"""
Query Analyzer

Intercepts SQL statements issued through an async execute function, re-runs
them with EXPLAIN / EXPLAIN (ANALYZE, ...), extracts plan metrics and appends
one record per statement to a daily CSV report.
"""

from .exceptions import (
    AnalyzerError,
    ErrorKind,
    ExecutionFailure,
    ExplainFailure,
    ParseFailure,
    PersistenceFailure,
)
from .schemas import AnalysisMode, AnalysisRecord, AnalyzerOptions, ExplainOptions, ModeKind, SerializeMode
from .services.analyzer import QueryAnalyzer, attach, enable_analyzer, should_enable_analyzer
from .services.classifier import classify, is_bypassed
from .services.plan_parser import PlanMetrics, extract_metrics, plan_lines_from_rows
from .services.report_writer import CsvReportWriter, ReportSink, report_destination

__all__ = [
    # Engine
    "QueryAnalyzer",
    "attach",
    "enable_analyzer",
    "should_enable_analyzer",
    # Classification and parsing
    "classify",
    "is_bypassed",
    "extract_metrics",
    "plan_lines_from_rows",
    "PlanMetrics",
    # Persistence
    "ReportSink",
    "CsvReportWriter",
    "report_destination",
    # Models
    "AnalysisMode",
    "AnalysisRecord",
    "AnalyzerOptions",
    "ExplainOptions",
    "ModeKind",
    "SerializeMode",
    # Errors
    "AnalyzerError",
    "ErrorKind",
    "ExecutionFailure",
    "ExplainFailure",
    "ParseFailure",
    "PersistenceFailure",
]
