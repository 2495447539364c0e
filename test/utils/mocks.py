"""
Mock utilities for testing the analyzer

Provides in-memory stand-ins for:
- The execute capability (records every call, returns plan rows for EXPLAIN)
- The report sink (keeps appended records in a list)
"""

import asyncio
from typing import Any

SAMPLE_PLAN_LINES = [
    "Seq Scan on users  (cost=0.00..35.50 rows=2550 width=4) (actual time=0.010..0.012 rows=3 loops=1)",
    "Planning Time: 0.123 ms",
    "Execution Time: 5.456 ms",
]


class FakeExecutor:
    """Records calls and answers like a PostgreSQL driver would"""

    def __init__(
        self,
        rows: list[Any] | None = None,
        plan_lines: list[str] | None = None,
        error: Exception | None = None,
        explain_error: Exception | None = None,
        delay: float = 0.0,
    ):
        self.rows = rows if rows is not None else [{"id": 1, "name": "alice"}]
        self.plan_lines = plan_lines if plan_lines is not None else list(SAMPLE_PLAN_LINES)
        self.error = error
        self.explain_error = explain_error
        self.delay = delay
        self.calls: list[tuple[Any, Any]] = []

    async def execute(self, statement, exec_options=None):
        self.calls.append((statement, exec_options))
        text = statement["query"] if isinstance(statement, dict) else statement

        if text.startswith("EXPLAIN"):
            if self.explain_error:
                raise self.explain_error
            return [{"QUERY PLAN": line} for line in self.plan_lines]

        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.rows

    __call__ = execute

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def statements(self) -> list[str]:
        return [s["query"] if isinstance(s, dict) else s for s, _ in self.calls]

    @property
    def explain_calls(self) -> list[tuple[Any, Any]]:
        return [
            (s, o) for s, o in self.calls if (s["query"] if isinstance(s, dict) else s).startswith("EXPLAIN")
        ]


class MemoryReportSink:
    """Report sink that keeps records in memory"""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.appended: list[tuple[str, Any]] = []

    async def append(self, destination_id, record):
        if self.error:
            raise self.error
        self.appended.append((destination_id, record))

    @property
    def records(self) -> list[Any]:
        return [record for _, record in self.appended]

    def clear(self):
        self.appended.clear()
