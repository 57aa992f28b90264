"""Deduplicating union of an import batch into the catalog dataset."""

from collections import Counter
from dataclasses import dataclass, replace

from daysync.database.models import Dataset, Run, Setup, TestDay
from daysync.scanner.models import ImportBatch, RunRecord, SetupRecord, TestDayFolder

RUN_TAGS = ("imported", "xrk")


@dataclass
class MergeSummary:
    """Counts of records a merge added."""

    test_days_added: int = 0
    runs_added: int = 0
    setups_added: int = 0

    @property
    def total_added(self) -> int:
        return self.test_days_added + self.runs_added + self.setups_added


def merge(existing: Dataset, batch: ImportBatch) -> Dataset:
    """
    Combine a batch with an existing dataset.

    Records are matched on their keys only: test days on the normalized
    folder name, runs on the telemetry file's relative path, setups on the
    file name. A record whose key is already present is never replaced, so
    applying the same batch twice changes nothing the second time.

    The one field refreshed on existing data is the run count of test days
    the batch touched. existing is not modified.
    """
    runs = _union(existing.runs, (_to_run(r) for r in batch.runs), key=lambda r: r.key)
    setups = _union(existing.setups, (_to_setup(s) for s in batch.setups), key=lambda s: s.key)
    test_days = _union(
        existing.test_days,
        (_to_test_day(d) for d in batch.test_days),
        key=lambda d: d.key,
    )

    touched = {day.key for day in batch.test_days}
    counts = Counter(run.test_day_key for run in runs)
    test_days = [
        replace(day, run_count=counts[day.key]) if day.key in touched else day
        for day in test_days
    ]

    return Dataset(
        test_days=tuple(test_days),
        runs=tuple(runs),
        setups=tuple(setups),
        tire_sets=existing.tire_sets,
    )


def summarize(before: Dataset, after: Dataset) -> MergeSummary:
    return MergeSummary(
        test_days_added=len(after.test_days) - len(before.test_days),
        runs_added=len(after.runs) - len(before.runs),
        setups_added=len(after.setups) - len(before.setups),
    )


def _union(existing, incoming, key) -> list:
    # First write wins, including duplicates within incoming.
    merged = list(existing)
    seen = {key(item) for item in merged}
    for item in incoming:
        item_key = key(item)
        if item_key in seen:
            continue
        seen.add(item_key)
        merged.append(item)
    return merged


def _to_test_day(folder: TestDayFolder) -> TestDay:
    return TestDay(
        key=folder.key,
        date=folder.date.isoformat(),
        venue=folder.venue,
        run_count=len(folder.telemetry_files),
    )


def _to_run(record: RunRecord) -> Run:
    source = record.source_file
    return Run(
        key=record.key,
        test_day_key=record.test_day_key,
        run_number=record.sequence,
        venue=record.venue,
        source_path=source.relative_path,
        size=source.size,
        modified_at=source.modified_at,
        drivers=(record.driver,),
        notes=f"Imported from {source.filename}",
        tags=RUN_TAGS,
    )


def _to_setup(record: SetupRecord) -> Setup:
    return Setup(
        key=record.key,
        setup_id=record.setup_id,
        name=record.name,
        document=record.document,
    )
