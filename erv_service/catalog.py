"""catalog.py – reference tables for ERV wheels, fans, motors and drive parts.

Values are the ones carried by the legacy selection workbook (AirXchange, FanFactors,
Parts, Flow Limits and PickList sheets). Everything here is immutable module data;
lookups are exact-match on the identifier string.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping, Optional

from .models import DrivePart, DriveComponents, ERVSelection, FanCandidate, MotorBracket, MotorPart

RATED_PRESSURE_DROP = 0.434589058481117  # in. w.c. at the rated 2000 CFM point

# Face areas (ft²) back-calculated from the rated 2000 CFM face velocities
ERV_SELECTIONS: Mapping[str, ERVSelection] = MappingProxyType({
    s.model: s
    for s in (
        ERVSelection(model="ERC-3014", cooling_effectiveness=0.85, heating_effectiveness=0.82,
                     face_area_sqft=3.5, pressure_drop=RATED_PRESSURE_DROP,
                     wheel_diameter_in=30, min_flow_cfm=210, max_flow_cfm=1785),
        ERVSelection(model="ERC-3622", cooling_effectiveness=0.87, heating_effectiveness=0.84,
                     face_area_sqft=31 / 6, pressure_drop=RATED_PRESSURE_DROP,
                     wheel_diameter_in=36, min_flow_cfm=310, max_flow_cfm=2635),
        ERVSelection(model="ERC-4136", cooling_effectiveness=0.88, heating_effectiveness=0.85,
                     face_area_sqft=41 / 6, pressure_drop=RATED_PRESSURE_DROP,
                     wheel_diameter_in=41, min_flow_cfm=410, max_flow_cfm=3485),
        ERVSelection(model="ERC-4634", cooling_effectiveness=0.89, heating_effectiveness=0.86,
                     face_area_sqft=26 / 3, pressure_drop=RATED_PRESSURE_DROP,
                     wheel_diameter_in=46, min_flow_cfm=520, max_flow_cfm=4420),
        ERVSelection(model="ERC-5262", cooling_effectiveness=0.90, heating_effectiveness=0.87,
                     face_area_sqft=71 / 6, pressure_drop=RATED_PRESSURE_DROP,
                     wheel_diameter_in=52, min_flow_cfm=710, max_flow_cfm=6035),
        ERVSelection(model="ERC-4132C-4M", cooling_effectiveness=0.8752023172092118,
                     heating_effectiveness=0.8435680521122568,
                     face_area_sqft=31 / 6, pressure_drop=RATED_PRESSURE_DROP,
                     wheel_diameter_in=41, min_flow_cfm=410, max_flow_cfm=3485),
    )
})

WHEEL_TYPES = (
    "Aluminum ERC Series (Airxchange)",
    "MS Coated ERC Series (Airxchange)",
    "Polymer ERC Series (Airxchange)",
)

FILTER_MULTIPLIERS: Mapping[str, float] = MappingProxyType({
    "merv 8": 1.0,
    "merv 13": 1.3,
    "hepa": 1.8,
})

# Nominal tonnage per packaged unit; None where the workbook carries no rating
UNIT_MODELS: Mapping[str, Optional[float]] = MappingProxyType({
    "Trane - Voyager A": 10.0,
    "Trane - Voyager B": 12.0,
    "Trane - Voyager C": 14.0,
    "Trane - Precedent E": None,
    "Custom Unit": 0.0,
})


MOTOR_HP_STEPS = (1.0, 1.5, 2.0, 3.0, 5.0)


def _brackets(*caps: float) -> List[MotorBracket]:
    return [MotorBracket(hp=hp, max_bhp=cap) for hp, cap in zip(MOTOR_HP_STEPS, caps)]


FAN_CANDIDATES: Mapping[str, FanCandidate] = MappingProxyType({
    f.fan_type: f
    for f in (
        FanCandidate(
            fan_type="10-10B",
            rpm=934.0984829173981,
            cfm_points=[2000, 3000],
            bhp_points=[0.3129912967172189, 0.38403902749047303],
            static_pressure_points=[0.9691851384756108, 0.9816074727621578],
            motor_brackets=_brackets(0.5189436016207767, 0.778415402431165, 1.0378872032415534,
                                     1.55683080486233, 2.594718008103883),
            heavy_duty_type="10-10R",
        ),
        FanCandidate(
            fan_type="W10-10BL",
            rpm=967.1009543264221,
            cfm_points=[4000, 6000],
            bhp_points=[0.5010931834247503, 0.529391083402822],
            static_pressure_points=[0.9662234502646515, 0.975056288687103],
            motor_brackets=_brackets(0.5372783079591233, 0.8059174619386851, 1.0745566159182467,
                                     1.6118349238773702, 2.6863915397956166),
            heavy_duty_type="W10-10BP",
        ),
        FanCandidate(
            fan_type="9-6B",
            rpm=1121.9057550302468,
            cfm_points=[1500, 2500],
            bhp_points=[0.4, 0.5],
            static_pressure_points=[0.95, 0.97],
            motor_brackets=_brackets(0.6232809750168038, 0.9349214625252057, 1.2465619500336076,
                                     1.8698429250504114, 3.1164048750840188),
            max_motor_hp=2.0,
        ),
        FanCandidate(
            fan_type="W9-6BL",
            rpm=1009.1148158905701,
            cfm_points=[3000, 5000],
            bhp_points=[1.2, 1.5],
            static_pressure_points=[0.95, 0.98],
            motor_brackets=_brackets(15, 15, 15, 15, 15),
            max_motor_hp=2.0,
        ),
    )
})

STANDARD_FAN_PAIR = ("10-10B", "W10-10BL")
PRECEDENT_FAN_PAIR = ("9-6B", "W9-6BL")

MOTOR_PARTS: Mapping[float, MotorPart] = MappingProxyType({
    m.hp: m
    for m in (
        MotorPart(hp=1.0, shaft="7/8", part_number="VELMTR-0183", model="143TTDR6027", code="A"),
        MotorPart(hp=1.5, shaft="7/8", part_number="VELMTR-0138", model="145TTDR6028", code="C"),
        MotorPart(hp=2.0, shaft="7/8", part_number="VELMTR-0139", model="145TTDR6029", code="E"),
        MotorPart(hp=3.0, shaft="1-1/8", part_number="VELMTR-0140", model="182TTDB6026", code="G"),
        MotorPart(hp=5.0, shaft="1-1/8", part_number="VELMTR-0141", model="184TTDB6026", code="J"),
    )
})

STANDARD_DRIVE = DriveComponents(
    driver=DrivePart(value="1VM50X7/8", part_number="VCPBLW-0117"),
    driven=DrivePart(value="MB83X3/4", part_number="VCPBLW-0302"),
    belt=DrivePart(value="BX34", part_number="VCPBLW-0308"),
)

# The workbook ships a single drive kit; every motor step maps to it
DRIVE_KITS: Mapping[float, DriveComponents] = MappingProxyType({hp: STANDARD_DRIVE for hp in MOTOR_HP_STEPS})


# Pulley and belt stock used by the optional dynamic drive sizing: (size, diameter in, shaft, part number)
DRIVER_PULLEYS = (
    ("1VM25X7/8", 2.5, "7/8", "VCPBLW-0101"),
    ("1VM30X7/8", 3.0, "7/8", "VCPBLW-0102"),
    ("1VM35X7/8", 3.5, "7/8", "VCPBLW-0103"),
    ("1VM40X7/8", 4.0, "7/8", "VCPBLW-0104"),
    ("1VM45X7/8", 4.5, "7/8", "VCPBLW-0105"),
    ("1VM50X7/8", 5.0, "7/8", "VCPBLW-0117"),
)

DRIVEN_PULLEYS = (
    ("MB63X3/4", 6.3, "3/4", "VCPBLW-0201"),
    ("MB71X3/4", 7.1, "3/4", "VCPBLW-0202"),
    ("MB79X3/4", 7.9, "3/4", "VCPBLW-0301"),
    ("MB83X3/4", 8.3, "3/4", "VCPBLW-0302"),
    ("MB95X3/4", 9.5, "3/4", "VCPBLW-0303"),
)

# (size, pitch length in, part number)
BX_BELTS = (
    ("BX21", 21, "VCPBLW-0301"),
    ("BX25", 25, "VCPBLW-0302"),
    ("BX31", 31, "VCPBLW-0305"),
    ("BX34", 34, "VCPBLW-0308"),
    ("BX38", 38, "VCPBLW-0310"),
    ("BX42", 42, "VCPBLW-0312"),
    ("BX46", 46, "VCPBLW-0315"),
    ("BX51", 51, "VCPBLW-0318"),
)


def get_erv_selection(model: Optional[str]) -> Optional[ERVSelection]:
    if not model:
        return None
    return ERV_SELECTIONS.get(model)


def get_fan_candidate(fan_type: str) -> Optional[FanCandidate]:
    return FAN_CANDIDATES.get(fan_type)


def get_motor_part(hp: float) -> Optional[MotorPart]:
    return MOTOR_PARTS.get(float(hp))


def get_drive_kit(hp: float) -> DriveComponents:
    return DRIVE_KITS.get(float(hp), STANDARD_DRIVE)


def get_filter_multiplier(filter_type: Optional[str]) -> float:
    if not filter_type:
        return 1.0
    return FILTER_MULTIPLIERS.get(filter_type.strip().lower(), 1.0)


def is_known_unit_model(unit_model: Optional[str]) -> bool:
    return bool(unit_model) and unit_model in UNIT_MODELS


def unit_nominal_tons(unit_model: Optional[str]) -> Optional[float]:
    if not unit_model:
        return None
    return UNIT_MODELS.get(unit_model)
