from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from query_analyzer.config import Settings
from query_analyzer.constants import (
    DEFAULT_SLOW_QUERY_THRESHOLD_MS,
    EXPLAIN_KEYWORD,
    NOT_AVAILABLE,
    UNDEFINED_PARAMS,
)

# Either raw SQL text or a mapping carrying ``query`` (and optionally ``bind``)
Statement = Union[str, Mapping[str, Any]]
ExecOptions = Optional[Mapping[str, Any]]


class SerializeMode(str, Enum):
    NONE = "NONE"
    TEXT = "TEXT"
    BINARY = "BINARY"


class ExplainOptions(BaseModel):
    """Modifiers appended after ANALYZE, in declaration order."""

    verbose: bool = Field(False, description="Append VERBOSE")
    costs: bool = Field(False, description="Append COSTS")
    settings: bool = Field(False, description="Append SETTINGS")
    buffers: bool = Field(False, description="Append BUFFERS")
    serialize: SerializeMode = Field(SerializeMode.NONE, description="Append SERIALIZE <mode> unless NONE")
    wal: bool = Field(False, description="Append WAL")
    timing: bool = Field(False, description="Append TIMING")
    summary: bool = Field(False, description="Append SUMMARY")

    model_config = ConfigDict(frozen=True)

    def modifiers(self) -> list[str]:
        tokens = ["ANALYZE"]
        if self.verbose:
            tokens.append("VERBOSE")
        if self.costs:
            tokens.append("COSTS")
        if self.settings:
            tokens.append("SETTINGS")
        if self.buffers:
            tokens.append("BUFFERS")
        if self.serialize != SerializeMode.NONE:
            tokens.append(f"SERIALIZE {self.serialize.value}")
        if self.wal:
            tokens.append("WAL")
        if self.timing:
            tokens.append("TIMING")
        if self.summary:
            tokens.append("SUMMARY")
        return tokens


class AnalyzerOptions(BaseModel):
    enabled: Optional[bool] = Field(None, description="Master switch. False always disables analysis.")
    environment: Optional[str] = Field(None, description="Only analyze when the runtime environment matches.")
    slow_query_threshold: float = Field(
        DEFAULT_SLOW_QUERY_THRESHOLD_MS, ge=0, description="Milliseconds at which on_slow_query fires."
    )
    on_slow_query: Optional[Callable[..., Any]] = None
    on_error: Optional[Callable[..., Any]] = None
    explain: ExplainOptions = Field(default_factory=ExplainOptions)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, config: Settings, **overrides: Any) -> "AnalyzerOptions":
        values: dict[str, Any] = {
            "enabled": config.analyzer_enabled,
            "environment": config.analyzer_environment,
            "slow_query_threshold": config.slow_query_threshold_ms,
            "explain": ExplainOptions(
                verbose=config.explain_verbose,
                costs=config.explain_costs,
                settings=config.explain_settings,
                buffers=config.explain_buffers,
                serialize=SerializeMode(config.explain_serialize),
                wal=config.explain_wal,
                timing=config.explain_timing,
                summary=config.explain_summary,
            ),
        }
        values.update(overrides)
        return cls(**values)


class ModeKind(str, Enum):
    NONE = "NONE"
    EXPLAIN = "EXPLAIN"
    EXPLAIN_ANALYZE = "EXPLAIN_ANALYZE"


@dataclass(frozen=True)
class AnalysisMode:
    """How a statement is re-run for its plan. Computed once per statement."""

    kind: ModeKind
    modifiers: tuple[str, ...] = ()

    @property
    def prefix(self) -> str | None:
        if self.kind == ModeKind.NONE:
            return None
        if self.kind == ModeKind.EXPLAIN:
            return EXPLAIN_KEYWORD
        return f"{EXPLAIN_KEYWORD} ({', '.join(self.modifiers)})"

    def rewrite(self, statement_text: str) -> str:
        if self.prefix is None:
            return statement_text
        return f"{self.prefix} {statement_text}"


class AnalysisRecord(BaseModel):
    """One analyzed statement, as written to the daily report."""

    statement_text: str = Field(..., alias="query")
    actual_execution_time: int = Field(..., ge=0, alias="actualExecutionTime")
    plan_text: str = Field("", alias="queryPlan")
    planning_time: str = Field(NOT_AVAILABLE, alias="planningTime")
    execution_time: str = Field(NOT_AVAILABLE, alias="executionTime")
    start_cost: str = Field(NOT_AVAILABLE, alias="startCost")
    end_cost: str = Field(NOT_AVAILABLE, alias="endCost")
    params: Optional[str] = Field(None, alias="params")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def csv_values(self) -> list[str]:
        """Field values in report column order, absent params as ``undefined``."""
        values = self.model_dump(by_alias=True)
        if values["params"] is None:
            values["params"] = UNDEFINED_PARAMS
        return [str(value) for value in values.values()]
