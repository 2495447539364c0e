"""
Statement Classifier

Decides from the statement text how (and whether) a statement gets
re-run with an EXPLAIN prefix.
"""

from query_analyzer.constants import (
    BYPASS_PREFIXES,
    MUTATING_STATEMENT_PATTERN,
    PROCEDURE_CALL_PATTERN,
)
from query_analyzer.schemas import AnalysisMode, ExplainOptions, ModeKind


def is_bypassed(statement_text: str) -> bool:
    """True for EXPLAIN requests and transaction control, which are never analyzed."""
    return statement_text.lstrip().startswith(BYPASS_PREFIXES)


def is_mutating(statement_text: str) -> bool:
    return MUTATING_STATEMENT_PATTERN.search(statement_text) is not None


def classify(statement_text: str, explain_options: ExplainOptions | None = None) -> AnalysisMode:
    """
    Pick the analysis mode for a statement.

    Procedure calls are never analyzed. Mutating statements get a plain
    EXPLAIN (plan only, no second execution). Everything else is run with
    EXPLAIN (ANALYZE, ...) using the enabled modifiers.

    Args:
        statement_text: SQL as submitted by the caller
        explain_options: Modifiers for the ANALYZE case

    Returns:
        AnalysisMode for this statement
    """
    if PROCEDURE_CALL_PATTERN.search(statement_text):
        return AnalysisMode(ModeKind.NONE)

    if is_mutating(statement_text):
        return AnalysisMode(ModeKind.EXPLAIN)

    options = explain_options or ExplainOptions()
    return AnalysisMode(ModeKind.EXPLAIN_ANALYZE, tuple(options.modifiers()))
