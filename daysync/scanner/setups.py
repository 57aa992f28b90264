"""Parsing of setup snapshot JSON documents."""

import json
import re
from dataclasses import fields
from pathlib import PurePosixPath
from typing import Any

from daysync.scanner.models import (
    AeroGroup,
    AlignmentGroup,
    BatteryGroup,
    BrakesGroup,
    DrivetrainGroup,
    FirmwareGroup,
    LimitsGroup,
    RideHeightGroup,
    SetupRecord,
    SpringsDampersGroup,
    TireGroup,
    WeightGroup,
)


class SetupParseError(ValueError):
    """Raised when a setup file does not hold a usable setup document."""


# Document key -> (SetupRecord attribute, group class)
SETUP_GROUPS: dict[str, tuple[str, type]] = {
    "aero": ("aero", AeroGroup),
    "tire": ("tire", TireGroup),
    "brakes": ("brakes", BrakesGroup),
    "weight": ("weight", WeightGroup),
    "rideHeight": ("ride_height", RideHeightGroup),
    "alignment": ("alignment", AlignmentGroup),
    "springsDampers": ("springs_dampers", SpringsDampersGroup),
    "drivetrain": ("drivetrain", DrivetrainGroup),
    "firmware": ("firmware", FirmwareGroup),
    "limits": ("limits", LimitsGroup),
    "battery": ("battery", BatteryGroup),
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def camel_to_snake(name: str) -> str:
    """Convert a camelCase document key to an attribute name.

    Runs of capitals stay together: ``initialPackSOC`` -> ``initial_pack_soc``.
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def parse_setup_document(text: str, source_path: str) -> SetupRecord:
    """Parse the content of a setup file into a SetupRecord.

    Unknown keys, at the top level or inside a group, are kept in the
    record's ``document`` and otherwise ignored.

    Raises:
        SetupParseError: If the text is not JSON (including numbers too
            long or nesting too deep to decode), the document is not an
            object, ``name`` is not a string, or a group is not an object.
    """
    try:
        document = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise SetupParseError(f"invalid JSON: {e}") from e

    if not isinstance(document, dict):
        raise SetupParseError(f"expected a JSON object, got {type(document).__name__}")

    filename = PurePosixPath(source_path).name
    stem = PurePosixPath(filename).stem

    name = document.get("name")
    if name is not None and not isinstance(name, str):
        raise SetupParseError("'name' must be a string")
    if not name:
        name = stem

    setup_id = document.get("id")
    if not isinstance(setup_id, str) or not setup_id:
        setup_id = f"setup-{stem}"

    groups = {}
    for doc_key, (attribute, group_cls) in SETUP_GROUPS.items():
        value = document.get(doc_key)
        if value is None:
            continue
        if not isinstance(value, dict):
            raise SetupParseError(f"'{doc_key}' must be an object")
        groups[attribute] = _build_group(group_cls, value)

    return SetupRecord(
        key=filename,
        source_path=source_path,
        name=name,
        setup_id=setup_id,
        document=document,
        based_on=_optional_str(document.get("basedOn")),
        setup_goal=_optional_str(document.get("setupGoal")),
        **groups,
    )


def _build_group(group_cls: type, value: dict[str, Any]) -> Any:
    known = {f.name for f in fields(group_cls)}
    kwargs = {}
    for key, item in value.items():
        attribute = camel_to_snake(key)
        if attribute in known:
            kwargs[attribute] = item
    return group_cls(**kwargs)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)
