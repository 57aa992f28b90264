"""Configuration module for daysync."""

from dataclasses import dataclass, field
from pathlib import Path


def _get_project_root() -> Path:
    return Path(__file__).parent.parent


@dataclass
class ScannerConfig:
    telemetry_extension: str = ".xrk"
    metadata_filename: str = "testday.json"
    setup_directory: str = "Setups"
    setup_read_workers: int = 4
    max_path_length: int = 4096


@dataclass
class SyncConfig:
    interval_seconds: float = 15.0


@dataclass
class Config:
    database_path: Path = field(default_factory=lambda: _get_project_root() / "data" / "catalog.db")
    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
