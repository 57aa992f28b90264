"""Scanner module for test-day folder discovery."""

from .filesystem import EnumerationError, FileSource, LocalFileSource, walk_directory
from .models import Diagnostic, FileEntry, ImportBatch, RunRecord, SetupRecord, TestDayFolder
from .patterns import is_setup_file, is_telemetry_file, match_test_day_folder
from .scanner import Scanner
from .setups import SetupParseError, parse_setup_document

__all__ = [
    "Scanner",
    "EnumerationError",
    "FileSource",
    "LocalFileSource",
    "walk_directory",
    "FileEntry",
    "TestDayFolder",
    "RunRecord",
    "SetupRecord",
    "Diagnostic",
    "ImportBatch",
    "match_test_day_folder",
    "is_telemetry_file",
    "is_setup_file",
    "parse_setup_document",
    "SetupParseError",
]
