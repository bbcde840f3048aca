"""fans.py – fan, motor and drive selection for the ERV supply fan.

Picks between the two candidate housings for a unit family by forecast BHP at the
design outdoor airflow, then sizes the motor from the winner's bracket table and
attaches catalog parts. Deterministic: same inputs, same parts.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .catalog import (
    PRECEDENT_FAN_PAIR,
    STANDARD_FAN_PAIR,
    get_drive_kit,
    get_fan_candidate,
    get_motor_part,
    is_known_unit_model,
)
from .drives import size_drive
from .exceptions import UnknownModelError
from .models import (
    CalculationWarning,
    DriveComponents,
    FanCandidate,
    FanSelection,
    MotorBracket,
    WarningKind,
)
from .psychrometrics import forecast

logger = logging.getLogger(__name__)

SERVICE_FACTOR = 1.15
BLANK_UNIT_MODELS = ("", "(blank)")


def select_fan_pair(unit_model: str) -> Tuple[str, str]:
    """Candidate housings for a unit family."""
    if "precedent" in unit_model.lower():
        return PRECEDENT_FAN_PAIR
    return STANDARD_FAN_PAIR


def candidate_bhp(candidate: FanCandidate, cfm: float) -> float:
    """Forecast brake horsepower at ``cfm`` including the service factor."""
    return forecast(cfm, candidate.cfm_points, candidate.bhp_points) * SERVICE_FACTOR


def static_pressure(candidate: FanCandidate, cfm: float) -> float:
    return forecast(cfm, candidate.cfm_points, candidate.static_pressure_points)


def select_motor(brackets: List[MotorBracket], bhp: float) -> Tuple[MotorBracket, bool]:
    """Smallest bracket whose rated BHP covers ``bhp``.

    Returns (bracket, oversized); when nothing covers it the largest bracket is
    returned with oversized=True.
    """
    ordered = sorted(brackets, key=lambda b: b.hp)
    for bracket in ordered:
        if bracket.max_bhp >= bhp:
            return bracket, False
    return ordered[-1], True


class FanSelectionEngine:
    """Maps unit model and outdoor airflow to a fan, motor and drive.

    Parameters
    ----------
    strict : bool
        Raise UnknownModelError for a named unit model missing from the catalog.
    dynamic_drive : bool
        Size pulleys and belt from the drive ratio instead of the static kit.
    motor_rpm, center_distance : float
        Drive sizing inputs, used only with ``dynamic_drive``.
    """

    def __init__(
        self,
        strict: bool = False,
        dynamic_drive: bool = False,
        motor_rpm: float = 1725.0,
        center_distance: float = 6.5,
    ) -> None:
        self.strict = strict
        self.dynamic_drive = dynamic_drive
        self.motor_rpm = motor_rpm
        self.center_distance = center_distance

    def select(self, unit_model: Optional[str], outdoor_cfm: float) -> Tuple[FanSelection, List[CalculationWarning]]:
        name = (unit_model or "").strip()
        if name in BLANK_UNIT_MODELS:
            return self._unresolved("No unit model selected; fan selection unavailable")
        if not is_known_unit_model(name):
            if self.strict:
                raise UnknownModelError("unit model", name)
            logger.warning("Unit model %r not in catalog; fan selection unavailable", name)
            return self._unresolved(f"Unit model {name!r} not found; fan selection unavailable")

        warnings: List[CalculationWarning] = []
        first, second = (get_fan_candidate(t) for t in select_fan_pair(name))
        bhp_first = candidate_bhp(first, outdoor_cfm)
        bhp_second = candidate_bhp(second, outdoor_cfm)
        # Ties go to the second housing
        winner, bhp = (first, bhp_first) if bhp_first < bhp_second else (second, bhp_second)
        logger.debug("Fan compare at %.0f CFM: %s=%.4f %s=%.4f -> %s",
                     outdoor_cfm, first.fan_type, bhp_first, second.fan_type, bhp_second, winner.fan_type)

        bracket, oversized = select_motor(winner.motor_brackets, bhp)
        if oversized:
            logger.warning("Fan %s BHP %.3f exceeds every motor bracket; using %.1f HP",
                           winner.fan_type, bhp, bracket.hp)
            warnings.append(CalculationWarning(
                kind=WarningKind.OVERSIZED_MOTOR,
                message=f"{winner.fan_type} requires {bhp:.3f} BHP, above the largest {bracket.hp:g} HP bracket",
            ))

        fan_type = winner.fan_type
        if bracket.hp == 5.0 and winner.heavy_duty_type:
            fan_type = winner.heavy_duty_type
        if winner.max_motor_hp is not None and bracket.hp > winner.max_motor_hp:
            warnings.append(CalculationWarning(
                kind=WarningKind.MOTOR_EXCEEDS_FAN_RATING,
                message=f"{bracket.hp:g} HP motor exceeds the {winner.max_motor_hp:g} HP rating of the {winner.fan_type} housing",
            ))

        motor = get_motor_part(bracket.hp)
        drive = self._drive(bracket.hp, winner.rpm, motor.shaft if motor else None, warnings)

        selection = FanSelection(
            fan_type=fan_type,
            motor_hp=bracket.hp,
            fan_rpm=winner.rpm,
            fan_bhp=bhp,
            total_static_pressure=static_pressure(winner, outdoor_cfm),
            motor=motor,
            drive=drive,
            bhp_comparison={first.fan_type: bhp_first, second.fan_type: bhp_second},
        )
        return selection, warnings

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _drive(
        self, hp: float, fan_rpm: float, shaft: Optional[str], warnings: List[CalculationWarning]
    ) -> DriveComponents:
        if not self.dynamic_drive or shaft is None:
            return get_drive_kit(hp)
        sized = size_drive(self.motor_rpm, fan_rpm, shaft, self.center_distance)
        if sized is not None:
            return sized
        logger.info("No driver pulley for %s shaft; using standard drive kit", shaft)
        warnings.append(CalculationWarning(
            kind=WarningKind.DRIVE_SIZING_FALLBACK,
            message=f"No driver pulley fits a {shaft} motor shaft; standard drive kit used",
        ))
        return get_drive_kit(hp)

    @staticmethod
    def _unresolved(message: str) -> Tuple[FanSelection, List[CalculationWarning]]:
        return FanSelection(), [CalculationWarning(kind=WarningKind.UNRESOLVED_FAN, message=message)]
