import pytest
from pydantic import ValidationError

from erv_service.models import ErrorKind, InputRecord
from erv_service.validator import issues_from_parse_error, validate_inputs


def _kinds(issues):
    return [i.kind for i in issues]


def test_design_inputs_pass(design_record):
    assert validate_inputs(design_record) == []


def test_outdoor_exceeds_supply(design_inputs):
    record = InputRecord(**{**design_inputs, "outdoor_air_cfm": 1500.0, "supply_air_cfm": 1000.0})
    issues = validate_inputs(record)
    assert "Outdoor Air CFM cannot exceed Supply Air CFM" in [i.message for i in issues]
    assert ErrorKind.OUTDOOR_EXCEEDS_SUPPLY in _kinds(issues)


@pytest.mark.parametrize(
    "field",
    ["oa_dry_bulb_cooling", "ra_wet_bulb_cooling", "supply_air_cfm", "outdoor_air_cfm", "erv_size_selection"],
)
def test_missing_required_field(design_inputs, field):
    record = InputRecord(**{**design_inputs, field: None})
    issues = validate_inputs(record)
    assert any(i.field == field and i.kind == ErrorKind.MISSING_FIELD for i in issues)


def test_heating_is_optional(design_record):
    assert design_record.oa_dry_bulb_heating is None
    assert validate_inputs(design_record) == []


@pytest.mark.parametrize(
    "db_field,wb_field",
    [("oa_dry_bulb_cooling", "oa_wet_bulb_cooling"), ("ra_dry_bulb_heating", "ra_wet_bulb_heating")],
)
def test_wet_bulb_above_dry_bulb(design_inputs, db_field, wb_field):
    record = InputRecord(**{**design_inputs, db_field: 60.0, wb_field: 65.0})
    issues = validate_inputs(record)
    assert any(i.field == wb_field and i.kind == ErrorKind.WET_BULB_EXCEEDS_DRY_BULB for i in issues)


def test_temperature_out_of_range(design_inputs):
    record = InputRecord(**{**design_inputs, "oa_dry_bulb_cooling": 160.0})
    assert ErrorKind.TEMPERATURE_OUT_OF_RANGE in _kinds(validate_inputs(record))


@pytest.mark.parametrize("cfm", [100.0, 12000.0])
def test_cfm_range(design_inputs, cfm):
    record = InputRecord(**{**design_inputs, "outdoor_air_cfm": cfm, "supply_air_cfm": 20000.0})
    assert ErrorKind.CFM_OUT_OF_RANGE in _kinds(validate_inputs(record))
    assert validate_inputs(record, enforce_cfm_range=False) == []


def test_non_positive_cfm(design_inputs):
    record = InputRecord(**{**design_inputs, "supply_air_cfm": -5.0})
    issues = validate_inputs(record)
    assert "Supply Air CFM must be a positive number" in [i.message for i in issues]


def test_non_finite_value(design_inputs):
    record = InputRecord(**{**design_inputs, "oa_dry_bulb_cooling": float("nan")})
    assert ErrorKind.INVALID_VALUE in _kinds(validate_inputs(record))


def test_unknown_choices(design_inputs):
    record = InputRecord(**{**design_inputs, "wheel_type": "Cardboard", "filter_type": "MERV 99"})
    fields = {i.field for i in validate_inputs(record)}
    assert {"wheel_type", "filter_type"} <= fields


def test_collects_every_issue():
    issues = validate_inputs(InputRecord())
    assert len([i for i in issues if i.kind == ErrorKind.MISSING_FIELD]) == 7


def test_parse_error_translation():
    with pytest.raises(ValidationError) as exc_info:
        InputRecord.model_validate({"supply_air_cfm": "lots"})
    issues = issues_from_parse_error(exc_info.value)
    assert issues[0].field == "supply_air_cfm"
    assert issues[0].kind == ErrorKind.INVALID_VALUE
    assert issues[0].message.startswith("Supply Air CFM")


@pytest.mark.parametrize("altitude", [-2000.0, 15001.0, 40000.0])
def test_altitude_out_of_range(design_inputs, altitude):
    record = InputRecord(**{**design_inputs, "altitude_ft": altitude})
    issues = validate_inputs(record)
    assert [(i.field, i.kind) for i in issues] == [("altitude_ft", ErrorKind.INVALID_VALUE)]


@pytest.mark.parametrize("altitude", [-1500.0, 0.0, 5280.0, 15000.0])
def test_altitude_in_range(design_inputs, altitude):
    assert validate_inputs(InputRecord(**{**design_inputs, "altitude_ft": altitude})) == []
