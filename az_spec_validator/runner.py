"""
Worker pool that validates discovered specification files concurrently.

All paths are queued up front; each worker drains the job queue and pushes
exactly one ResultRecord per path onto the result queue. The calling thread
receives the records one at a time and is the only writer of the report.
"""

import logging
import queue
import threading
from typing import Callable, Iterable, List, Optional

from .categories import LOAD_ERROR, RULE_EVALUATION_FAILED, Category, EnabledCategories
from .checker import check_consistency
from .loader import load_spec_document
from .locator import SourcePath, parse_source_path
from .models import Finding, LoadError, ReportMap, ResultRecord
from .report import Progress, ReportAggregator
from .schema import SchemaValidator

logger = logging.getLogger(__name__)

WORKER_COUNT = 10


class SpecValidationRunner:
    """Runs the enabled checks over a list of specification files"""

    def __init__(
        self,
        enabled: EnabledCategories,
        schema_validator: Optional[SchemaValidator] = None,
        workers: int = WORKER_COUNT,
    ):
        if Category.SCHEMA_VALIDATION_FAILED in enabled and schema_validator is None:
            schema_validator = SchemaValidator()
        self.enabled = enabled
        self.schema_validator = schema_validator
        self.workers = workers

    def validate_file(self, source: SourcePath) -> ResultRecord:
        """Load one document and run every enabled check on it"""
        try:
            document = load_spec_document(source.path)
        except LoadError as e:
            logger.warning("%s", e)
            return ResultRecord(source.path, (Finding(LOAD_ERROR, str(e)),))

        findings = check_consistency(document, source, self.enabled)

        if self.schema_validator is not None and Category.SCHEMA_VALIDATION_FAILED in self.enabled:
            try:
                findings.extend(self.schema_validator.validate(document))
            except Exception as e:
                logger.exception("Schema validation failed on %s", source.path)
                findings.append(Finding(RULE_EVALUATION_FAILED, f"schema validation could not run: {e}"))

        logger.debug("Validated %s: %d findings", source.path, len(findings))
        return ResultRecord(source.path, tuple(findings))

    def _work(self, jobs: "queue.Queue[SourcePath]", results: "queue.Queue[ResultRecord]") -> None:
        while True:
            try:
                source = jobs.get_nowait()
            except queue.Empty:
                return
            try:
                record = self.validate_file(source)
            except Exception as e:
                # every queued path must still yield exactly one record
                logger.exception("Validation crashed on %s", source.path)
                record = ResultRecord(
                    source.path,
                    (Finding(RULE_EVALUATION_FAILED, f"validation could not run: {type(e).__name__}: {e}"),),
                )
            results.put(record)

    def run(
        self,
        spec_files: List[str],
        subscribers: Iterable[Callable[[Progress], None]] = (),
    ) -> ReportMap:
        """Validate every file and return the findings keyed by file.

        Raises:
            SourcePathError: a path is too shallow for the directory convention.
                Raised before any worker starts.
        """
        sources = [parse_source_path(path) for path in spec_files]

        jobs: "queue.Queue[SourcePath]" = queue.Queue()
        for source in sources:
            jobs.put(source)
        results: "queue.Queue[ResultRecord]" = queue.Queue(maxsize=len(sources))

        for index in range(self.workers):
            worker = threading.Thread(
                target=self._work,
                args=(jobs, results),
                name=f"spec-validator-{index}",
                daemon=True,
            )
            worker.start()

        aggregator = ReportAggregator(len(sources), subscribers)
        for _ in range(len(sources)):
            aggregator.add(results.get())
        return aggregator.report
