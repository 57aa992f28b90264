"""Scan, merge and save in one step."""

import logging
from dataclasses import dataclass

from daysync.database import CatalogStore, Dataset
from daysync.merge import MergeSummary, merge, summarize
from daysync.scanner import ImportBatch, Scanner
from daysync.scanner.filesystem import FileSource

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Outcome of one pipeline run."""

    batch: ImportBatch
    dataset: Dataset
    summary: MergeSummary
    files_seen: int


class ImportPipeline:
    """Runs a scan of source and merges the result into the store."""

    def __init__(
        self,
        source: FileSource,
        store: CatalogStore,
        scanner: Scanner | None = None,
        source_label: str = "",
    ):
        self.source = source
        self.store = store
        self.scanner = scanner or Scanner()
        self.source_label = source_label

    def run(self) -> ImportResult:
        session_id = self.store.begin_session(self.source_label)

        try:
            batch = self.scanner.scan(self.source)
            existing = self.store.load()
            updated = merge(existing, batch)
            if updated != existing:
                self.store.save(updated)
        except Exception as e:
            self.store.fail_session(session_id, str(e))
            raise

        summary = summarize(existing, updated)
        files_seen = self.scanner.stats.files_seen
        self.store.complete_session(
            session_id,
            files_seen=files_seen,
            test_days_added=summary.test_days_added,
            runs_added=summary.runs_added,
            setups_added=summary.setups_added,
            files_skipped=len(batch.diagnostics),
        )

        logger.info(
            "Import of %s added %d test days, %d runs, %d setups",
            self.source_label or "source",
            summary.test_days_added,
            summary.runs_added,
            summary.setups_added,
        )
        return ImportResult(batch=batch, dataset=updated, summary=summary, files_seen=files_seen)
