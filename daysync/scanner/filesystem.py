"""Filesystem enumeration of a selected test-data root."""

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol

from daysync.scanner.models import FileEntry

logger = logging.getLogger(__name__)


class EnumerationError(Exception):
    """Raised when the selected root cannot be enumerated at all."""


class FileSource(Protocol):
    """Anything that can list files below a root and read them back."""

    def list_files(self) -> list[FileEntry]:
        """Return every file below the root, in a stable order."""

    def read_text(self, relative_path: str) -> str:
        """Return the text content of a listed file."""


class LocalFileSource:
    """Files below a directory on the local filesystem."""

    def __init__(self, root: Path, max_path_length: int = 4096):
        self.root = root
        self.max_path_length = max_path_length

    def list_files(self) -> list[FileEntry]:
        root = self.root.resolve()
        _check_root(root)
        return list(walk_directory(root, self.max_path_length))

    def read_text(self, relative_path: str) -> str:
        return (self.root / relative_path).read_text(encoding="utf-8")


def _check_root(root: Path) -> None:
    if not root.exists():
        raise EnumerationError(f"Selected location does not exist: {root}")
    if not root.is_dir():
        raise EnumerationError(f"Selected location is not a directory: {root}")
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise EnumerationError(f"Could not read selected location {root}: {e}") from e


def walk_directory(source_root: Path, max_path_length: int = 4096) -> Iterator[FileEntry]:
    """Yield files below source_root.

    Files of a directory come first, sorted by name, followed by its
    subdirectories in name order. Symlinks are skipped.
    """
    yield from _walk_recursive(source_root, source_root, max_path_length)


def _walk_recursive(
    current_dir: Path,
    source_root: Path,
    max_path_length: int,
) -> Iterator[FileEntry]:
    files, subdirs = _read_directory(current_dir)

    for entry in files:
        file_entry = _to_file_entry(entry, source_root, max_path_length)
        if file_entry:
            yield file_entry

    for subdir in subdirs:
        yield from _walk_recursive(subdir, source_root, max_path_length)


def _read_directory(directory: Path) -> tuple[list[os.DirEntry], list[Path]]:
    """List one directory as (files, subdirectories), each sorted by name."""
    files: list[os.DirEntry] = []
    subdirs: list[Path] = []
    try:
        with os.scandir(directory) as listing:
            for entry in listing:
                if entry.is_symlink():
                    continue
                if entry.is_dir(follow_symlinks=False):
                    subdirs.append(Path(entry.path))
                elif entry.is_file(follow_symlinks=False):
                    files.append(entry)
    except PermissionError:
        logger.warning("No permission to read folder, skipping: %s", directory)
        return [], []
    except OSError as e:
        logger.error("Could not read folder %s: %s", directory, e)
        return [], []

    files.sort(key=lambda e: e.name)
    subdirs.sort(key=lambda p: p.name)
    return files, subdirs


def _to_file_entry(
    entry: os.DirEntry,
    source_root: Path,
    max_path_length: int,
) -> FileEntry | None:
    if len(entry.path) > max_path_length:
        logger.warning("Path too long, skipping: %s", entry.path)
        return None

    try:
        stat_result = entry.stat(follow_symlinks=False)
    except FileNotFoundError:
        logger.warning("File disappeared during scan: %s", entry.path)
        return None
    except OSError as e:
        logger.warning("Could not stat %s, skipping: %s", entry.path, e)
        return None

    return FileEntry(
        relative_path=Path(entry.path).relative_to(source_root).as_posix(),
        size=stat_result.st_size,
        modified_at=stat_result.st_mtime,
    )
