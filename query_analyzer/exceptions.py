"""
Analyzer Exception Classes

Every failure inside the analyzer is described by a single AnalyzerError
tagged with an ErrorKind. The kind fixes the error code and message; callers
branch on ``error.kind`` rather than on the concrete class.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Tag identifying what went wrong. The value is the public error code."""

    EXECUTION = "QUERY_EXECUTION_FAILED"
    EXPLAIN = "EXPLAIN_FAILED"
    PERSISTENCE = "PERSISTENCE_FAILED"
    PARSE = "PARSE_FAILED"

    @property
    def code(self) -> str:
        return self.value


ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.EXECUTION: "Query execution failed",
    ErrorKind.EXPLAIN: "Failed to analyze query with EXPLAIN",
    ErrorKind.PERSISTENCE: "Failed to write query analysis report",
    ErrorKind.PARSE: "Failed to parse {field} from query plan",
}


class AnalyzerError(Exception):
    """Base exception carrying the failing statement and the original cause"""

    def __init__(
        self,
        kind: ErrorKind,
        statement_text: str,
        original_error: BaseException | None = None,
        message: str | None = None,
    ):
        self.kind = kind
        self.message = message or ERROR_MESSAGES[kind]
        self.statement_text = statement_text
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return self.kind.code

    def formatted_message(self) -> str:
        """Human readable, multi-line description used in log output."""
        return (
            f"[{self.code}] {self.message}\n"
            f"\tQuery: {self.statement_text}\n"
            f"\tTime: {self.timestamp.isoformat()}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.name,
            "code": self.code,
            "message": self.message,
            "query": self.statement_text,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_error) if self.original_error is not None else None,
        }


# ============================================================================
# Kind-specific constructors
# ============================================================================


class ExecutionFailure(AnalyzerError):
    """The original statement failed. Reported, then the cause is re-raised."""

    def __init__(self, statement_text: str, original_error: BaseException | None = None):
        super().__init__(ErrorKind.EXECUTION, statement_text, original_error)


class ExplainFailure(AnalyzerError):
    """The plan-analysis re-invocation failed"""

    def __init__(self, statement_text: str, original_error: BaseException | None = None):
        super().__init__(ErrorKind.EXPLAIN, statement_text, original_error)


class PersistenceFailure(AnalyzerError):
    """The analysis record could not be appended to its report"""

    def __init__(self, statement_text: str, original_error: BaseException | None = None):
        super().__init__(ErrorKind.PERSISTENCE, statement_text, original_error)


class ParseFailure(AnalyzerError):
    """A plan field could not be parsed"""

    def __init__(self, statement_text: str, field: str, original_error: BaseException | None = None):
        super().__init__(
            ErrorKind.PARSE,
            statement_text,
            original_error,
            message=ERROR_MESSAGES[ErrorKind.PARSE].format(field=field),
        )
        self.field = field
