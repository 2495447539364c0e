"""
Report Writer

Durable, append-only storage for AnalysisRecords. Records are grouped into
one destination per calendar day ("report-YYYY-MM-DD").

The engine only depends on the ReportSink protocol; CsvReportWriter is the
default implementation and writes one CSV file per destination.
"""

import asyncio
import csv
import logging
import threading
from datetime import date
from pathlib import Path
from typing import Protocol, runtime_checkable

from query_analyzer.constants import REPORT_COLUMNS, REPORT_PREFIX
from query_analyzer.schemas import AnalysisRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class ReportSink(Protocol):
    async def append(self, destination_id: str, record: AnalysisRecord) -> None: ...


def report_destination(day: date | None = None) -> str:
    """Destination identifier for the given day (defaults to today, local time)."""
    day = day or date.today()
    return f"{REPORT_PREFIX}-{day:%Y-%m-%d}"


class CsvReportWriter:
    """
    Appends records to ``<directory>/<destination_id>.csv``.

    The header line is written once, when the file is first created. Every
    value is wrapped in double quotes with embedded quotes doubled, so
    commas and newlines inside a plan survive intact.
    """

    def __init__(self, directory: str | Path = "analyzer"):
        self.directory = Path(directory)
        self._lock = threading.Lock()

    def path_for(self, destination_id: str) -> Path:
        return self.directory / f"{destination_id}.csv"

    async def append(self, destination_id: str, record: AnalysisRecord) -> None:
        await asyncio.to_thread(self._append_sync, self.path_for(destination_id), record)

    def _append_sync(self, path: Path, record: AnalysisRecord) -> None:
        with self._lock:
            is_new = not path.exists()
            if is_new:
                path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8", newline="") as fh:
                if is_new:
                    fh.write(",".join(REPORT_COLUMNS) + "\n")
                    logger.info("Created analyzer report %s", path)
                writer = csv.writer(fh, quoting=csv.QUOTE_ALL, lineterminator="\n")
                writer.writerow(record.csv_values())
