"""
Query Analyzer Constants

Keywords, patterns and sentinels shared by the classifier, the plan parser
and the report writer.
"""

import re

# Placeholder for any metric that could not be extracted from a plan
NOT_AVAILABLE = "N/A"

# Written to the report in place of an absent params value
UNDEFINED_PARAMS = "undefined"

EXPLAIN_KEYWORD = "EXPLAIN"

# Statements starting with these are passed straight through
BYPASS_PREFIXES: tuple[str, ...] = (EXPLAIN_KEYWORD, "START", "ROLLBACK", "COMMIT")

# ── Classification ────────────────────────────────────────────────────────────
PROCEDURE_CALL_PATTERN = re.compile(r"\bCALL\b")
MUTATING_STATEMENT_PATTERN = re.compile(r"\b(UPDATE|DELETE|INSERT)\b", re.IGNORECASE)

# ── Plan extraction ───────────────────────────────────────────────────────────
PLAN_COLUMN = "QUERY PLAN"
COST_RANGE_PATTERN = re.compile(r"cost=(\d+(?:\.\d+)?)\.\.(\d+(?:\.\d+)?)")
EXECUTION_TIME_PATTERN = re.compile(r"Execution Time: (\d+(?:\.\d+)?) ms")
PLANNING_TIME_PATTERN = re.compile(r"Planning Time: (\d+(?:\.\d+)?) ms")

# ── Reports ───────────────────────────────────────────────────────────────────
REPORT_PREFIX = "report"
REPORT_COLUMNS: tuple[str, ...] = (
    "query",
    "actualExecutionTime",
    "queryPlan",
    "planningTime",
    "executionTime",
    "startCost",
    "endCost",
    "params",
)

DEFAULT_SLOW_QUERY_THRESHOLD_MS = 1000
