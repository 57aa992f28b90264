"""Folder and file name conventions for test-day data."""

import re
from dataclasses import dataclass
from datetime import date
from pathlib import PurePosixPath

TELEMETRY_EXTENSION = ".xrk"
METADATA_FILENAME = "testday.json"
SETUP_DIRECTORY = "Setups"
SETUP_EXTENSION = ".json"


@dataclass(frozen=True)
class TestDayMatch:
    """Date and venue parsed from a test-day folder name."""

    __test__ = False  # not a pytest class

    date: date
    venue: str


# Regex for a test-day folder: YYYY-M-D, then one or more of "-"/"_"
# (optionally padded with spaces), then the venue.
# ASCII digits only so unicode digits never match.
TEST_DAY_PATTERN = re.compile(
    r"\s*(?P<year>[0-9]{4})-(?P<month>[0-9]{1,2})-(?P<day>[0-9]{1,2})"
    r"\s*[-_][-_\s]*(?P<venue>[^\s_-].*?)\s*"
)


def is_valid_date(year: int, month: int, day: int) -> bool:
    """Check if the given year, month, day form a valid date."""
    try:
        date(year, month, day)
        return True
    except ValueError:
        return False


def match_test_day_folder(segment: str) -> TestDayMatch | None:
    """
    Parse a single path segment as a test-day folder name.

    Accepts names like:
    - 2025-4-11 - Villa
    - 2025-04-11_Villa
    - 2025-12-25 -- Test Track

    Returns None when the segment does not follow the convention or the
    embedded date is not a real calendar date.
    """
    match = TEST_DAY_PATTERN.fullmatch(segment)
    if not match:
        return None

    year = int(match.group("year"))
    month = int(match.group("month"))
    day = int(match.group("day"))

    if not is_valid_date(year, month, day):
        return None

    return TestDayMatch(date=date(year, month, day), venue=match.group("venue"))


def format_test_day_name(day: date, venue: str) -> str:
    """Canonical folder name for a test day, also used as its catalog key."""
    return f"{day.isoformat()} - {venue.strip()}"


def is_telemetry_file(filename: str, extension: str = TELEMETRY_EXTENSION) -> bool:
    return filename.lower().endswith(extension.lower())


def is_metadata_marker(filename: str, marker: str = METADATA_FILENAME) -> bool:
    return filename.lower() == marker.lower()


def is_setup_file(
    path: str,
    filename: str,
    setup_directory: str = SETUP_DIRECTORY,
    extension: str = SETUP_EXTENSION,
) -> bool:
    """Check if a file is a setup document stored below the setup directory.

    Args:
        path: Relative, slash-separated path of the file.
        filename: Final path segment.
        setup_directory: Reserved directory name, matched case-insensitively
            against every directory segment of the path.
        extension: Required filename extension.
    """
    if not filename.lower().endswith(extension.lower()):
        return False

    directories = PurePosixPath(path).parts[:-1]
    wanted = setup_directory.lower()
    return any(part.lower() == wanted for part in directories)
