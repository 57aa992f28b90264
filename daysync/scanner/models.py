"""Records produced by a single scan."""

import time
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from daysync.scanner.patterns import format_test_day_name

UNKNOWN_DRIVER = "Unknown"


@dataclass(frozen=True)
class FileEntry:
    """A file enumerated below the selected root."""

    relative_path: str  # slash-separated, relative to the root
    size: int
    modified_at: float  # unix seconds

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(self.relative_path.split("/"))

    @property
    def filename(self) -> str:
        return self.segments[-1]


@dataclass
class TestDayFolder:
    """A folder named after a test day, with the telemetry found below it."""

    __test__ = False  # not a pytest class

    name: str
    date: date
    venue: str
    telemetry_files: list[FileEntry] = field(default_factory=list)
    has_metadata_marker: bool = False

    @property
    def key(self) -> str:
        return format_test_day_name(self.date, self.venue)

    @property
    def is_recognized(self) -> bool:
        return bool(self.telemetry_files) or self.has_metadata_marker


@dataclass(frozen=True)
class RunRecord:
    """One telemetry file, imported as a run of its test day."""

    key: str  # relative path of the telemetry file
    test_day_key: str
    sequence: int
    venue: str
    source_file: FileEntry
    driver: str = UNKNOWN_DRIVER


# Setup document groups. Every field is optional; JSON keys are the
# camelCase forms of the attribute names.


@dataclass
class AeroGroup:
    aero_setup: str | None = None
    aero_config_notes: str | None = None


@dataclass
class TireGroup:
    tire_set_id: str | None = None
    cold_pressure_front: float | None = None
    cold_pressure_rear: float | None = None
    hot_pressure_front: float | None = None
    hot_pressure_rear: float | None = None


@dataclass
class BrakesGroup:
    brake_bias: float | None = None
    hydraulic_brake_onset: str | None = None
    brake_bias_bar: str | None = None
    proportioning_valve: float | None = None  # 1 = fully front, 6 = fully rear


@dataclass
class WeightGroup:
    """Corner weights in lbs, without driver."""

    fl_lbs: float | None = None
    fr_lbs: float | None = None
    rl_lbs: float | None = None
    rr_lbs: float | None = None
    front_lbs: float | None = None
    rear_lbs: float | None = None
    total_lbs: float | None = None
    cross_weight: float | None = None


@dataclass
class RideHeightGroup:
    front_cm: float | None = None
    rear_cm: float | None = None
    min_ground_clearance: float | None = None


@dataclass
class AlignmentGroup:
    camber_front: float | None = None
    camber_rear: float | None = None
    toe_front: float | None = None
    toe_rear: float | None = None


@dataclass
class SpringsDampersGroup:
    spring_rate_front: float | None = None
    spring_rate_rear: float | None = None
    roll_damper_front: str | None = None
    roll_damper_rear: str | None = None
    heave_damper_front: str | None = None
    heave_damper_rear: str | None = None


@dataclass
class DrivetrainGroup:
    diff_preload: str | None = None
    gear_ratio: str | None = None


@dataclass
class FirmwareGroup:
    fc_hash: str | None = None
    rc_hash: str | None = None
    acm_hash: str | None = None
    inverter_eeprom: str | None = None


@dataclass
class LimitsGroup:
    torque_limit: float | None = None
    current_limit: float | None = None
    power_limit: float | None = None


@dataclass
class BatteryGroup:
    initial_pack_soc: float | None = None
    final_pack_soc: float | None = None


@dataclass
class SetupRecord:
    """A setup snapshot read from the global setup directory."""

    key: str  # file name inside the setup directory
    source_path: str
    name: str
    setup_id: str
    document: dict[str, Any]
    based_on: str | None = None
    setup_goal: str | None = None
    aero: AeroGroup | None = None
    tire: TireGroup | None = None
    brakes: BrakesGroup | None = None
    weight: WeightGroup | None = None
    ride_height: RideHeightGroup | None = None
    alignment: AlignmentGroup | None = None
    springs_dampers: SpringsDampersGroup | None = None
    drivetrain: DrivetrainGroup | None = None
    firmware: FirmwareGroup | None = None
    limits: LimitsGroup | None = None
    battery: BatteryGroup | None = None


@dataclass(frozen=True)
class Diagnostic:
    """A file skipped during a scan, and why."""

    path: str
    reason: str


@dataclass
class ImportBatch:
    """Everything one scan found."""

    test_days: list[TestDayFolder] = field(default_factory=list)
    runs: list[RunRecord] = field(default_factory=list)
    setups: list[SetupRecord] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    # Display only; never part of identity.
    scanned_at: float = field(default_factory=time.time, compare=False)

    @property
    def is_empty(self) -> bool:
        return not (self.test_days or self.setups or self.diagnostics)

    @property
    def telemetry_file_count(self) -> int:
        return sum(len(day.telemetry_files) for day in self.test_days)


@dataclass
class ScanStats:
    """Statistics for a scan operation."""

    files_seen: int = 0
    test_days: int = 0
    telemetry_files: int = 0
    setup_candidates: int = 0
    setups_parsed: int = 0
    files_skipped: int = 0
    start_time: float = field(default_factory=time.time)

    @property
    def elapsed_seconds(self) -> float:
        return time.time() - self.start_time
