"""Directory scanner: classifies enumerated files into an import batch."""

import logging
from concurrent.futures import ThreadPoolExecutor

from daysync.config import ScannerConfig
from daysync.scanner.filesystem import FileSource
from daysync.scanner.models import (
    Diagnostic,
    FileEntry,
    ImportBatch,
    RunRecord,
    ScanStats,
    SetupRecord,
    TestDayFolder,
)
from daysync.scanner.patterns import (
    is_metadata_marker,
    is_setup_file,
    is_telemetry_file,
    match_test_day_folder,
)
from daysync.scanner.setups import SetupParseError, parse_setup_document

logger = logging.getLogger(__name__)


class Scanner:
    """Turns a flat file listing into test days, runs and setups.

    The scanner keeps no state between scans. Scanning an unchanged
    listing twice yields equal batches.
    """

    def __init__(self, config: ScannerConfig | None = None):
        self.config = config or ScannerConfig()
        self.stats = ScanStats()

    def scan(self, source: FileSource) -> ImportBatch:
        """Enumerate the source, classify its files and read setup documents.

        Only an enumeration failure raised by the source propagates; files
        that cannot be read or parsed become diagnostics.
        """
        self.stats = ScanStats()
        entries = source.list_files()
        self.stats.files_seen = len(entries)

        batch = self.classify(entries)
        candidates = self.find_setup_candidates(entries)
        self.stats.setup_candidates = len(candidates)

        setups, diagnostics = self._read_setups(source, candidates)
        batch.setups.extend(setups)
        batch.diagnostics.extend(diagnostics)

        self.stats.test_days = len(batch.test_days)
        self.stats.telemetry_files = batch.telemetry_file_count
        self.stats.setups_parsed = len(setups)
        self.stats.files_skipped = len(diagnostics)

        logger.info(
            "Scanned %d files: %d test days, %d telemetry files, %d setups, %d skipped",
            self.stats.files_seen,
            self.stats.test_days,
            self.stats.telemetry_files,
            self.stats.setups_parsed,
            self.stats.files_skipped,
        )
        return batch

    def classify(self, entries: list[FileEntry]) -> ImportBatch:
        """Group entries into test days and number their runs.

        Pure: no file content is read.
        """
        folders: dict[str, TestDayFolder] = {}

        for entry in entries:
            folder = self._owning_folder(entry, folders)
            if folder is None:
                continue

            filename = entry.filename
            if is_telemetry_file(filename, self.config.telemetry_extension):
                folder.telemetry_files.append(entry)
            elif is_metadata_marker(filename, self.config.metadata_filename):
                folder.has_metadata_marker = True
            else:
                logger.debug("Ignoring %s", entry.relative_path)

        batch = ImportBatch()
        for folder in folders.values():
            if not folder.is_recognized:
                logger.debug("No telemetry or marker in %s, skipping", folder.name)
                continue
            batch.test_days.append(folder)
            batch.runs.extend(_runs_for(folder))

        return batch

    def find_setup_candidates(self, entries: list[FileEntry]) -> list[FileEntry]:
        return [
            entry
            for entry in entries
            if is_setup_file(entry.relative_path, entry.filename, self.config.setup_directory)
        ]

    def _owning_folder(
        self,
        entry: FileEntry,
        folders: dict[str, TestDayFolder],
    ) -> TestDayFolder | None:
        # The first matching directory segment owns the file.
        for segment in entry.segments[:-1]:
            if segment in folders:
                return folders[segment]
            match = match_test_day_folder(segment)
            if match:
                folder = TestDayFolder(name=segment, date=match.date, venue=match.venue)
                folders[segment] = folder
                return folder
        return None

    def _read_setups(
        self,
        source: FileSource,
        candidates: list[FileEntry],
    ) -> tuple[list[SetupRecord], list[Diagnostic]]:
        if not candidates:
            return [], []

        workers = max(1, min(self.config.setup_read_workers, len(candidates)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda e: _read_setup(source, e), candidates))

        setups: list[SetupRecord] = []
        diagnostics: list[Diagnostic] = []
        for result in results:
            if isinstance(result, Diagnostic):
                logger.warning("Skipping setup file %s: %s", result.path, result.reason)
                diagnostics.append(result)
            else:
                setups.append(result)
        return setups, diagnostics


def _read_setup(source: FileSource, entry: FileEntry) -> SetupRecord | Diagnostic:
    try:
        text = source.read_text(entry.relative_path)
    except (OSError, UnicodeDecodeError) as e:
        return Diagnostic(entry.relative_path, f"unreadable: {e}")

    try:
        return parse_setup_document(text, entry.relative_path)
    except SetupParseError as e:
        return Diagnostic(entry.relative_path, str(e))


def _runs_for(folder: TestDayFolder) -> list[RunRecord]:
    return [
        RunRecord(
            key=entry.relative_path,
            test_day_key=folder.key,
            sequence=index,
            venue=folder.venue,
            source_file=entry,
        )
        for index, entry in enumerate(folder.telemetry_files, start=1)
    ]
