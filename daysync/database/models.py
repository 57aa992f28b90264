"""Catalog records held by the local store."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ImportStatus(Enum):
    """Status of an import session."""

    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class TestDay:
    """Represents a test day in the catalog."""

    __test__ = False  # not a pytest class

    key: str  # "YYYY-MM-DD - Venue"
    date: str  # ISO date
    venue: str
    run_count: int = 0
    notes: str | None = None


@dataclass(frozen=True)
class Run:
    """Represents a run record, keyed by the relative path of its telemetry file."""

    key: str
    test_day_key: str
    run_number: int
    venue: str
    source_path: str
    size: int
    modified_at: float
    drivers: tuple[str, ...] = ()
    notes: str | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class Setup:
    """Represents a setup snapshot, keyed by its file name."""

    key: str
    setup_id: str
    name: str
    document: dict[str, Any] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class TireSet:
    """Represents a tire set. Never produced by a scan."""

    id: str
    compound: str | None = None
    size: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class Dataset:
    """The full catalog at one point in time."""

    test_days: tuple[TestDay, ...] = ()
    runs: tuple[Run, ...] = ()
    setups: tuple[Setup, ...] = ()
    tire_sets: tuple[TireSet, ...] = ()


@dataclass
class ImportSession:
    """Represents an import session record."""

    id: int | None
    source_root: str
    started_at_unix: float
    started_at: int
    completed_at_unix: float | None
    completed_at: int | None
    status: ImportStatus
    error_message: str | None
    files_seen: int
    test_days_added: int
    runs_added: int
    setups_added: int
    files_skipped: int
