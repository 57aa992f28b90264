"""Tests for setup document parsing."""

import json

import pytest

from daysync.scanner.models import BatteryGroup, TireGroup
from daysync.scanner.setups import SetupParseError, camel_to_snake, parse_setup_document


class TestCamelToSnake:
    """Tests for camel_to_snake function."""

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("coldPressureFront", "cold_pressure_front"),
            ("flLbs", "fl_lbs"),
            ("initialPackSOC", "initial_pack_soc"),
            ("fcHash", "fc_hash"),
            ("brakeBias", "brake_bias"),
            ("camber", "camber"),
        ],
    )
    def test_conversion(self, key: str, expected: str):
        assert camel_to_snake(key) == expected


class TestParseSetupDocument:
    """Tests for parse_setup_document function."""

    def test_minimal_document(self):
        record = parse_setup_document('{"name": "Baseline"}', "Setups/baseline.json")

        assert record.key == "baseline.json"
        assert record.source_path == "Setups/baseline.json"
        assert record.name == "Baseline"
        assert record.setup_id == "setup-baseline"
        assert record.tire is None
        assert record.aero is None

    def test_name_falls_back_to_file_stem(self):
        record = parse_setup_document("{}", "Setups/wet-weather.json")
        assert record.name == "wet-weather"

    def test_explicit_id_kept(self):
        record = parse_setup_document(
            '{"id": "SET-2025-04-18-Autocross", "name": "Autocross"}', "Setups/a.json"
        )
        assert record.setup_id == "SET-2025-04-18-Autocross"

    def test_groups_parsed(self):
        document = {
            "name": "Endurance",
            "basedOn": "SET-1",
            "setupGoal": "Conserve SOC",
            "tire": {"tireSetId": "TS-24-03-A", "coldPressureFront": 10.5},
            "battery": {"initialPackSOC": 98, "finalPackSOC": 12},
            "springsDampers": {"rollDamperFront": "12 clicks"},
        }

        record = parse_setup_document(json.dumps(document), "Setups/endurance.json")

        assert record.based_on == "SET-1"
        assert record.setup_goal == "Conserve SOC"
        assert record.tire == TireGroup(tire_set_id="TS-24-03-A", cold_pressure_front=10.5)
        assert record.battery == BatteryGroup(initial_pack_soc=98, final_pack_soc=12)
        assert record.springs_dampers is not None
        assert record.springs_dampers.roll_damper_front == "12 clicks"
        assert record.weight is None

    def test_unknown_fields_preserved(self):
        document = {
            "name": "Baseline",
            "kvs": [{"key": "wing", "value": "3"}],
            "aero": {"aeroSetup": "Aero-2025-01", "flapAngle": 12},
        }

        record = parse_setup_document(json.dumps(document), "Setups/baseline.json")

        assert record.document == document
        assert record.aero is not None
        assert record.aero.aero_setup == "Aero-2025-01"

    def test_invalid_json(self):
        with pytest.raises(SetupParseError, match="invalid JSON"):
            parse_setup_document("{not json", "Setups/broken.json")

    def test_non_object_document(self):
        with pytest.raises(SetupParseError, match="JSON object"):
            parse_setup_document("[1, 2, 3]", "Setups/list.json")

    def test_non_string_name(self):
        with pytest.raises(SetupParseError, match="name"):
            parse_setup_document('{"name": 42}', "Setups/numbered.json")

    def test_group_must_be_object(self):
        with pytest.raises(SetupParseError, match="brakes"):
            parse_setup_document('{"name": "x", "brakes": 55}', "Setups/x.json")

    def test_null_group_means_not_recorded(self):
        record = parse_setup_document('{"name": "x", "limits": null}', "Setups/x.json")
        assert record.limits is None

    def test_empty_name_falls_back_to_file_stem(self):
        record = parse_setup_document('{"name": ""}', "Setups/skidpad.json")
        assert record.name == "skidpad"

    def test_oversized_number(self):
        text = '{"name": "X", "n": ' + "9" * 5000 + "}"
        with pytest.raises(SetupParseError, match="invalid JSON"):
            parse_setup_document(text, "Setups/huge.json")

    def test_nesting_too_deep(self):
        text = "[" * 200_000 + "]" * 200_000
        with pytest.raises(SetupParseError, match="invalid JSON"):
            parse_setup_document(text, "Setups/deep.json")
