"""
Aggregation of per-file results and the JSON report.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set

from rich.console import Console
from rich.live import Live
from rich.text import Text

from .models import ReportMap, ResultRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Progress:
    processed: int
    total: int
    files_with_errors: int


class ReportAggregator:
    """Collects result records into the report map.

    Subscribers are called with a Progress snapshot after every record; they
    observe the run but never affect the report.
    """

    def __init__(self, total: int, subscribers: Iterable[Callable[[Progress], None]] = ()):
        self.total = total
        self.processed = 0
        self.report: ReportMap = {}
        self._seen: Set[str] = set()
        self._subscribers: List[Callable[[Progress], None]] = list(subscribers)

    @property
    def files_with_errors(self) -> int:
        return len(self.report)

    def add(self, record: ResultRecord) -> None:
        if record.source_path in self._seen:
            raise ValueError(f"Result for {record.source_path} received twice")
        self._seen.add(record.source_path)
        if record.has_findings:
            self.report[record.source_path] = list(record.findings)
        self.processed += 1

        progress = Progress(self.processed, self.total, self.files_with_errors)
        for subscriber in self._subscribers:
            subscriber(progress)


class ProgressDisplay:
    """Live progress line on the terminal"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self._live = Live(console=self.console, auto_refresh=False, transient=False)
        self._last: Optional[Progress] = None

    def __enter__(self) -> "ProgressDisplay":
        self._live.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._live.stop()
        if exc_type is None and self._last is not None:
            self.console.print(
                f"\n{self._last.total} files validated, "
                f"{self._last.files_with_errors} files with errors found"
            )

    def __call__(self, progress: Progress) -> None:
        self._last = progress
        self._live.update(
            Text(
                f"{progress.processed}/{progress.total} files validated, "
                f"with {progress.files_with_errors} files with errors"
            ),
            refresh=True,
        )


def report_to_json(report: ReportMap) -> str:
    serializable = {
        source_path: [finding.to_dict() for finding in findings]
        for source_path, findings in sorted(report.items())
    }
    return json.dumps(serializable, indent=2)


def write_report(report: ReportMap, output_file: str) -> Path:
    """Write the report as indented JSON, replacing any existing file"""
    output_path = Path(output_file)
    if output_path.parent != Path("."):
        output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(report_to_json(report) + "\n", encoding="utf-8")
    logger.debug("Wrote %d entries to %s", len(report), output_path)
    return output_path
