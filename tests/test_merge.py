"""Tests for the merge engine."""

from daysync.database.models import Dataset, Run, Setup, TestDay, TireSet
from daysync.merge import merge, summarize
from daysync.scanner.models import FileEntry, ImportBatch, SetupRecord
from daysync.scanner.scanner import Scanner


def _batch(*paths: str, size: int = 100) -> ImportBatch:
    entries = [FileEntry(relative_path=p, size=size, modified_at=1.0) for p in paths]
    return Scanner().classify(entries)


def _setup_record(key: str, name: str) -> SetupRecord:
    return SetupRecord(
        key=key,
        source_path=f"Setups/{key}",
        name=name,
        setup_id=f"setup-{key.removesuffix('.json')}",
        document={"name": name},
    )


class TestMerge:
    """Tests for merge function."""

    def test_into_empty_dataset(self):
        batch = _batch("2025-4-11 - Villa/datadump/run1.xrk", "2025-4-11 - Villa/datadump/run2.xrk")

        result = merge(Dataset(), batch)

        assert result.test_days == (
            TestDay(key="2025-04-11 - Villa", date="2025-04-11", venue="Villa", run_count=2),
        )
        assert [r.key for r in result.runs] == [
            "2025-4-11 - Villa/datadump/run1.xrk",
            "2025-4-11 - Villa/datadump/run2.xrk",
        ]
        run = result.runs[0]
        assert run.run_number == 1
        assert run.drivers == ("Unknown",)
        assert run.notes == "Imported from run1.xrk"
        assert run.tags == ("imported", "xrk")

    def test_idempotent(self):
        existing = Dataset(tire_sets=(TireSet(id="TS-24-03-A", compound="Hoosier R20"),))
        batch = _batch("2025-4-11 - Villa/run1.xrk", "2025-4-12 - Ayrton/run1.xrk")
        batch.setups.append(_setup_record("baseline.json", "Baseline"))

        once = merge(existing, batch)
        twice = merge(once, batch)

        assert twice == once

    def test_new_files_added_once(self):
        first = _batch("2025-4-11 - Villa/run1.xrk", "2025-4-11 - Villa/run2.xrk")
        second = _batch(
            "2025-4-11 - Villa/run1.xrk",
            "2025-4-11 - Villa/run2.xrk",
            "2025-4-11 - Villa/run3.xrk",
            "2025-4-11 - Villa/run4.xrk",
        )

        before = merge(Dataset(), first)
        after = merge(before, second)

        assert len(after.runs) == 4
        assert summarize(before, after).runs_added == 2
        assert after.test_days[0].run_count == 4

    def test_existing_run_wins_on_key_conflict(self):
        first = merge(Dataset(), _batch("2025-4-11 - Villa/run1.xrk", size=100))
        second = merge(first, _batch("2025-4-11 - Villa/run1.xrk", size=999))

        assert len(second.runs) == 1
        assert second.runs[0].size == 100

    def test_existing_test_day_fields_untouched(self):
        existing = Dataset(
            test_days=(
                TestDay(
                    key="2025-04-11 - Villa",
                    date="2025-04-11",
                    venue="Villa",
                    run_count=0,
                    notes="Wet in the morning",
                ),
            )
        )

        result = merge(existing, _batch("2025-4-11 - Villa/run1.xrk"))

        assert len(result.test_days) == 1
        assert result.test_days[0].notes == "Wet in the morning"
        assert result.test_days[0].run_count == 1

    def test_differently_padded_folders_share_test_day(self):
        batch = _batch("2025-4-11 - Villa/a.xrk", "2025-04-11_Villa/b.xrk")

        result = merge(Dataset(), batch)

        assert [d.key for d in result.test_days] == ["2025-04-11 - Villa"]
        assert len(result.runs) == 2
        assert result.test_days[0].run_count == 2

    def test_untouched_test_days_keep_run_count(self):
        existing = Dataset(
            test_days=(TestDay(key="2024-9-1 - Old", date="2024-09-01", venue="Old", run_count=7),)
        )

        result = merge(existing, _batch("2025-4-11 - Villa/run1.xrk"))

        assert result.test_days[0].run_count == 7

    def test_existing_setup_wins(self):
        existing = Dataset(
            setups=(
                Setup(
                    key="baseline.json",
                    setup_id="setup-baseline",
                    name="Baseline (edited)",
                    document={"name": "Baseline (edited)"},
                ),
            )
        )
        batch = ImportBatch(setups=[_setup_record("baseline.json", "Baseline")])

        result = merge(existing, batch)

        assert len(result.setups) == 1
        assert result.setups[0].name == "Baseline (edited)"

    def test_duplicate_setup_keys_in_batch_first_wins(self):
        batch = ImportBatch(
            setups=[_setup_record("a.json", "First"), _setup_record("a.json", "Second")]
        )

        result = merge(Dataset(), batch)

        assert [s.name for s in result.setups] == ["First"]

    def test_tire_sets_pass_through(self):
        tires = (TireSet(id="TS-24-03-A"), TireSet(id="TS-24-03-B", notes="New"))
        result = merge(Dataset(tire_sets=tires), _batch("2025-4-11 - Villa/run1.xrk"))
        assert result.tire_sets == tires

    def test_existing_not_mutated(self):
        existing_run = Run(
            key="2025-4-11 - Villa/run1.xrk",
            test_day_key="2025-04-11 - Villa",
            run_number=1,
            venue="Villa",
            source_path="2025-4-11 - Villa/run1.xrk",
            size=100,
            modified_at=1.0,
        )
        existing = Dataset(runs=(existing_run,))
        snapshot = Dataset(runs=(existing_run,))

        merge(existing, _batch("2025-4-11 - Villa/run1.xrk", "2025-4-11 - Villa/run2.xrk"))

        assert existing == snapshot

    def test_empty_batch_is_noop(self):
        existing = merge(Dataset(), _batch("2025-4-11 - Villa/run1.xrk"))
        assert merge(existing, ImportBatch()) == existing

    def test_marker_only_day_added_without_runs(self):
        result = merge(Dataset(), _batch("2025-5-2 - Ayrton/testday.json"))

        assert result.test_days == (
            TestDay(key="2025-05-02 - Ayrton", date="2025-05-02", venue="Ayrton", run_count=0),
        )
        assert result.runs == ()


class TestSummarize:
    """Tests for summarize function."""

    def test_counts_added_records(self):
        batch = _batch("2025-4-11 - Villa/run1.xrk", "2025-4-12 - Villa/run1.xrk")
        batch.setups.append(_setup_record("baseline.json", "Baseline"))

        after = merge(Dataset(), batch)
        summary = summarize(Dataset(), after)

        assert summary.test_days_added == 2
        assert summary.runs_added == 2
        assert summary.setups_added == 1
        assert summary.total_added == 5

    def test_nothing_added(self):
        dataset = merge(Dataset(), _batch("2025-4-11 - Villa/run1.xrk"))
        assert summarize(dataset, dataset).total_added == 0

