"""Input checks run before any computation.

Problems are collected into a list of ValidationIssue rather than raised, so a
caller sees every gap in one pass.
"""
from __future__ import annotations

import math
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from .catalog import FILTER_MULTIPLIERS, WHEEL_TYPES
from .models import ErrorKind, InputRecord, ValidationIssue

TEMPERATURE_MIN_F = -50.0
TEMPERATURE_MAX_F = 150.0
# Manual altitude entry window (ft)
ALTITUDE_MIN_FT = -1500.0
ALTITUDE_MAX_FT = 15000.0

FIELD_LABELS = {
    "oa_dry_bulb_cooling": "OA Dry Bulb Cooling",
    "oa_wet_bulb_cooling": "OA Wet Bulb Cooling",
    "ra_dry_bulb_cooling": "RA Dry Bulb Cooling",
    "ra_wet_bulb_cooling": "RA Wet Bulb Cooling",
    "oa_dry_bulb_heating": "OA Dry Bulb Heating",
    "oa_wet_bulb_heating": "OA Wet Bulb Heating",
    "ra_dry_bulb_heating": "RA Dry Bulb Heating",
    "ra_wet_bulb_heating": "RA Wet Bulb Heating",
    "supply_air_cfm": "Supply Air CFM",
    "outdoor_air_cfm": "Outdoor Air CFM",
    "exhaust_air_cfm": "Exhaust Air CFM",
    "erv_size_selection": "ERV Size Selection",
}

# (dry bulb, wet bulb) pairs; cooling pairs are required, heating pairs optional
COOLING_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("oa_dry_bulb_cooling", "oa_wet_bulb_cooling"),
    ("ra_dry_bulb_cooling", "ra_wet_bulb_cooling"),
)
HEATING_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("oa_dry_bulb_heating", "oa_wet_bulb_heating"),
    ("ra_dry_bulb_heating", "ra_wet_bulb_heating"),
)
POSITIVE_CFM_FIELDS = ("supply_air_cfm", "outdoor_air_cfm")


def _label(field: Optional[str]) -> str:
    if not field:
        return "Input"
    return FIELD_LABELS.get(field, field.replace("_", " ").title())


def issues_from_parse_error(exc: ValidationError) -> List[ValidationIssue]:
    """Translate a pydantic parse failure into validation issues."""
    issues = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err.get("loc", ())) or None
        issues.append(ValidationIssue(
            field=field,
            kind=ErrorKind.INVALID_VALUE,
            message=f"{_label(field)}: {err.get('msg', 'invalid value')}",
        ))
    return issues


def validate_inputs(
    record: InputRecord,
    enforce_cfm_range: bool = True,
    min_cfm: float = 500.0,
    max_cfm: float = 10000.0,
) -> List[ValidationIssue]:
    """Return every problem with ``record``; an empty list means it can be computed."""
    issues: List[ValidationIssue] = []

    for field in (*(f for pair in COOLING_PAIRS for f in pair), *POSITIVE_CFM_FIELDS, "erv_size_selection"):
        value = getattr(record, field)
        if value is None or value == "":
            issues.append(ValidationIssue(
                field=field, kind=ErrorKind.MISSING_FIELD, message=f"{_label(field)} is required",
            ))

    for field in (*(f for pair in COOLING_PAIRS + HEATING_PAIRS for f in pair),
                  *POSITIVE_CFM_FIELDS, "exhaust_air_cfm", "unit_tons", "unit_stated_eer",
                  "altitude_ft", "pre_heater_size"):
        value = getattr(record, field)
        if value is not None and not math.isfinite(value):
            issues.append(ValidationIssue(
                field=field, kind=ErrorKind.INVALID_VALUE, message=f"{_label(field)} must be a finite number",
            ))

    issues.extend(_check_temperatures(record))
    issues.extend(_check_airflow(record, enforce_cfm_range, min_cfm, max_cfm))
    issues.extend(_check_altitude(record))
    issues.extend(_check_choices(record))
    return issues


# ------------------------------------------------------------------
# internals
# ------------------------------------------------------------------

def _finite(value: Any) -> bool:
    return value is not None and math.isfinite(value)


def _check_temperatures(record: InputRecord) -> List[ValidationIssue]:
    issues = []
    for db_field, wb_field in COOLING_PAIRS + HEATING_PAIRS:
        db, wb = getattr(record, db_field), getattr(record, wb_field)
        for field, value in ((db_field, db), (wb_field, wb)):
            if _finite(value) and not TEMPERATURE_MIN_F <= value <= TEMPERATURE_MAX_F:
                issues.append(ValidationIssue(
                    field=field,
                    kind=ErrorKind.TEMPERATURE_OUT_OF_RANGE,
                    message=f"{_label(field)} must be between {TEMPERATURE_MIN_F:g} and {TEMPERATURE_MAX_F:g} °F",
                ))
        if _finite(db) and _finite(wb) and wb > db:
            issues.append(ValidationIssue(
                field=wb_field,
                kind=ErrorKind.WET_BULB_EXCEEDS_DRY_BULB,
                message=f"{_label(wb_field)} cannot exceed {_label(db_field)}",
            ))
    return issues


def _check_airflow(
    record: InputRecord, enforce_cfm_range: bool, min_cfm: float, max_cfm: float
) -> List[ValidationIssue]:
    issues = []
    for field in (*POSITIVE_CFM_FIELDS, "exhaust_air_cfm"):
        value = getattr(record, field)
        if _finite(value) and value <= 0:
            issues.append(ValidationIssue(
                field=field, kind=ErrorKind.INVALID_VALUE, message=f"{_label(field)} must be a positive number",
            ))

    supply, outdoor = record.supply_air_cfm, record.outdoor_air_cfm
    if _finite(supply) and _finite(outdoor) and outdoor > supply:
        issues.append(ValidationIssue(
            field="outdoor_air_cfm",
            kind=ErrorKind.OUTDOOR_EXCEEDS_SUPPLY,
            message="Outdoor Air CFM cannot exceed Supply Air CFM",
        ))

    if enforce_cfm_range and _finite(outdoor) and outdoor > 0 and not min_cfm <= outdoor <= max_cfm:
        issues.append(ValidationIssue(
            field="outdoor_air_cfm",
            kind=ErrorKind.CFM_OUT_OF_RANGE,
            message=f"CFM must be between {min_cfm:,.0f} and {max_cfm:,.0f}",
        ))
    return issues


def _check_altitude(record: InputRecord) -> List[ValidationIssue]:
    altitude = record.altitude_ft
    if _finite(altitude) and not ALTITUDE_MIN_FT <= altitude <= ALTITUDE_MAX_FT:
        return [ValidationIssue(
            field="altitude_ft",
            kind=ErrorKind.INVALID_VALUE,
            message=f"Altitude must be between {ALTITUDE_MIN_FT:,.0f} and {ALTITUDE_MAX_FT:,.0f} ft",
        )]
    return []


def _check_choices(record: InputRecord) -> List[ValidationIssue]:
    issues = []
    if record.wheel_type and record.wheel_type not in WHEEL_TYPES:
        issues.append(ValidationIssue(
            field="wheel_type", kind=ErrorKind.INVALID_VALUE,
            message=f"Unknown ERV wheel type: {record.wheel_type}",
        ))
    if record.filter_type and record.filter_type.strip().lower() not in FILTER_MULTIPLIERS:
        issues.append(ValidationIssue(
            field="filter_type", kind=ErrorKind.INVALID_VALUE,
            message=f"Unknown filter type: {record.filter_type}",
        ))
    return issues
