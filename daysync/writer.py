"""Writing test-day folders and setup files into the test-data root."""

import json
import logging
import os
from datetime import date, datetime, timezone
from pathlib import Path

from daysync.config import ScannerConfig
from daysync.database.models import Setup
from daysync.scanner.patterns import format_test_day_name, match_test_day_folder

logger = logging.getLogger(__name__)

DATA_DUMP_DIRECTORY = "Data Dump"


class WriteAccessError(Exception):
    """Raised when the test-data root cannot be written to."""


class WriteCapability:
    """Write access to one test-data root.

    Acquire once per root with acquire() and pass it to whatever needs to
    create files there.
    """

    def __init__(self, root: Path, config: ScannerConfig | None = None):
        self.root = root
        self.config = config or ScannerConfig()

    @classmethod
    def acquire(cls, root: Path, config: ScannerConfig | None = None) -> "WriteCapability":
        """Check root is a writable directory and make sure the setup directory exists."""
        if not root.is_dir():
            raise WriteAccessError(f"Not a directory: {root}")
        if not os.access(root, os.W_OK):
            raise WriteAccessError(f"No write permission for: {root}")

        capability = cls(root, config)
        capability.setup_directory.mkdir(exist_ok=True)
        logger.info("Write access granted to %s", root)
        return capability

    @property
    def setup_directory(self) -> Path:
        return self.root / self.config.setup_directory

    def create_test_day(self, day: date, venue: str) -> Path:
        """Create "<date> - <venue>/Data Dump/" with a testday.json marker.

        The marker lets a scan recognise the day before any telemetry exists.
        Existing folders are reused and their marker is left untouched.
        """
        venue = venue.strip()
        if not venue:
            raise ValueError("venue must not be empty")
        if "/" in venue or "\\" in venue:
            raise ValueError(f"venue must not contain path separators: {venue!r}")

        folder_name = format_test_day_name(day, venue)
        match = match_test_day_folder(folder_name)
        if match is None or match.venue != venue:
            raise ValueError(f"venue does not form a valid test-day name: {venue!r}")

        day_dir = self.root / folder_name
        (day_dir / DATA_DUMP_DIRECTORY).mkdir(parents=True, exist_ok=True)

        marker = day_dir / self.config.metadata_filename
        if not marker.exists():
            _write_json(
                marker,
                {
                    "date": day.isoformat(),
                    "track": venue,
                    "createdAt": datetime.now(timezone.utc).isoformat(),
                },
            )

        logger.info("Created test day folder %s", day_dir)
        return day_dir

    def write_setup(self, setup: Setup) -> Path:
        """Write a setup document to the setup directory under its key."""
        if Path(setup.key).name != setup.key:
            raise ValueError(f"setup key must be a plain file name: {setup.key!r}")

        document = dict(setup.document)
        document.setdefault("id", setup.setup_id)
        document.setdefault("name", setup.name)

        self.setup_directory.mkdir(exist_ok=True)
        path = self.setup_directory / setup.key
        _write_json(path, document)
        logger.info("Wrote setup %s", path)
        return path


def _write_json(path: Path, data: dict) -> None:
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
