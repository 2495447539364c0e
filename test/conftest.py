"""
Pytest configuration and fixtures for query analyzer tests
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH120

from query_analyzer import AnalyzerOptions, attach  # noqa: E402
from utils.mocks import SAMPLE_PLAN_LINES, FakeExecutor, MemoryReportSink  # noqa: E402


@pytest.fixture
def executor():
    """Execute capability returning one row and a sample plan for EXPLAIN"""
    return FakeExecutor()


@pytest.fixture
def sink():
    return MemoryReportSink()


@pytest.fixture
def plan_lines():
    return list(SAMPLE_PLAN_LINES)


@pytest.fixture
def make_analyzer(executor, sink):
    """
    Factory for an analyzer wired to the fake executor and in-memory sink.
    Keyword arguments are AnalyzerOptions fields.
    """

    def _make(runtime_environment: str = "development", **option_fields):
        return attach(executor, AnalyzerOptions(**option_fields), writer=sink, environment=runtime_environment)

    return _make
