"""
Plan Metric Extractor

Turns textual EXPLAIN output into the timing and cost fields stored on an
AnalysisRecord. Nothing here raises: a field that cannot be found or
parsed is reported as "N/A".
"""

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from query_analyzer.constants import (
    COST_RANGE_PATTERN,
    EXECUTION_TIME_PATTERN,
    NOT_AVAILABLE,
    PLAN_COLUMN,
    PLANNING_TIME_PATTERN,
)


@dataclass(frozen=True)
class PlanMetrics:
    plan_text: str = ""
    planning_time: str = NOT_AVAILABLE
    execution_time: str = NOT_AVAILABLE
    start_cost: str = NOT_AVAILABLE
    end_cost: str = NOT_AVAILABLE


def _format_ms(pattern: re.Pattern, plan_text: str) -> str:
    match = pattern.search(plan_text)
    if not match:
        return NOT_AVAILABLE
    try:
        return f"{float(match.group(1)):.2f}"
    except ValueError:
        return NOT_AVAILABLE


def extract_metrics(plan_lines: Iterable[str]) -> PlanMetrics:
    """
    Extract planning/execution time and the top-level cost range.

    Only the first ``cost=A..B`` occurrence is used, which is the root
    node of a text-format plan.
    """
    plan_text = "\n".join(str(line) for line in plan_lines)

    cost_match = COST_RANGE_PATTERN.search(plan_text)
    start_cost = cost_match.group(1) if cost_match else NOT_AVAILABLE
    end_cost = cost_match.group(2) if cost_match else NOT_AVAILABLE

    return PlanMetrics(
        plan_text=plan_text,
        planning_time=_format_ms(PLANNING_TIME_PATTERN, plan_text),
        execution_time=_format_ms(EXECUTION_TIME_PATTERN, plan_text),
        start_cost=start_cost,
        end_cost=end_cost,
    )


def _plan_line(row: Any) -> str:
    if isinstance(row, Mapping):
        return str(row.get(PLAN_COLUMN, ""))
    if isinstance(row, Sequence) and not isinstance(row, (str, bytes)):
        return str(row[0]) if row else ""
    mapping = getattr(row, "_mapping", None)
    if mapping is not None:
        return str(mapping.get(PLAN_COLUMN, ""))
    return str(row)


def plan_lines_from_rows(rows: Iterable[Any] | None) -> list[str]:
    """Flatten execute() results (one level of nesting) into plan text lines."""
    lines: list[str] = []
    for row in rows or []:
        if isinstance(row, list):
            lines.extend(_plan_line(item) for item in row)
        else:
            lines.append(_plan_line(row))
    return lines
