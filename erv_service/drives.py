"""drives.py – belt drive sizing from motor and fan speeds.

Pure helpers; pulley and belt stock comes from catalog. The fan engine only calls
``size_drive`` when dynamic drive sizing is switched on.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

from .catalog import BX_BELTS, DRIVEN_PULLEYS, DRIVER_PULLEYS
from .models import DriveComponents, DrivePart

Pulley = Tuple[str, float, str, str]  # (size, pitch diameter in, bore, part number)
Belt = Tuple[str, float, str]  # (size, pitch length in, part number)


def drive_ratio(motor_rpm: float, fan_rpm: float) -> float:
    """Speed reduction motor → fan (driven pitch diameter / driver pitch diameter)."""
    if fan_rpm <= 0:
        raise ValueError("fan_rpm must be positive")
    return motor_rpm / fan_rpm


def select_pulleys(
    ratio: float,
    motor_shaft: str,
    drivers: Sequence[Pulley] = DRIVER_PULLEYS,
    driven: Sequence[Pulley] = DRIVEN_PULLEYS,
) -> Optional[Tuple[Pulley, Pulley]]:
    """Driver/driven pair whose diameter ratio is closest to ``ratio``.

    Only driver pulleys bored for the motor shaft are considered. Returns None when
    none fit. Ties keep the first pair in stock order.
    """
    best = None
    best_error = math.inf
    for drv in drivers:
        if drv[2] != motor_shaft:
            continue
        for dvn in driven:
            error = abs(dvn[1] / drv[1] - ratio)
            if error < best_error:
                best, best_error = (drv, dvn), error
    return best


def belt_length(driver_dia: float, driven_dia: float, center_distance: float) -> float:
    """Open-belt pitch length: 2C + π(D+d)/2 + (D−d)²/4C."""
    return (
        2 * center_distance
        + math.pi * (driver_dia + driven_dia) / 2
        + (driven_dia - driver_dia) ** 2 / (4 * center_distance)
    )


def select_belt(length: float, belts: Sequence[Belt] = BX_BELTS) -> Belt:
    """Stock belt with the pitch length nearest ``length``; shorter wins a tie."""
    return min(belts, key=lambda b: (abs(b[1] - length), b[1]))


def size_drive(
    motor_rpm: float, fan_rpm: float, motor_shaft: str, center_distance: float
) -> Optional[DriveComponents]:
    """Size a complete drive kit, or None when no driver pulley fits the shaft."""
    ratio = drive_ratio(motor_rpm, fan_rpm)
    pair = select_pulleys(ratio, motor_shaft)
    if pair is None:
        return None
    drv, dvn = pair
    belt = select_belt(belt_length(drv[1], dvn[1], center_distance))
    return DriveComponents(
        driver=DrivePart(value=drv[0], part_number=drv[3]),
        driven=DrivePart(value=dvn[0], part_number=dvn[3]),
        belt=DrivePart(value=belt[0], part_number=belt[2]),
        sized=True,
        drive_ratio=ratio,
    )
