"""Psychrometric primitives in IP units – pure functions.

These functions avoid side effects and logging and are suitable for unit/property tests.
They reproduce the spreadsheet's custom Grains/wetbulb/enthalpy/humidity cells, including
the blank-cell fallbacks those cells show on missing input.
"""
from __future__ import annotations

import math
from enum import Enum
from typing import NamedTuple, Optional, Sequence

SEA_LEVEL_PSIA = 14.696
ALTITUDE_LAPSE_RATE = 0.0000368  # per foot
BAROMETRIC_EXPONENT = 5.25588

MOLECULAR_WEIGHT_RATIO = 0.62198
GRAINS_PER_LB = 7000.0
RANKINE_OFFSET = 459.67
DRY_AIR_GAS_CONSTANT = 53.35  # ft·lbf/(lbm·°R)
STANDARD_AIR_DENSITY = 0.075  # lb/ft³ at sea level, 70°F

# Antoine constants as used by the spreadsheet (natural-exponent form, kPa)
ANTOINE_A = 8.07131
ANTOINE_B = 1730.63
ANTOINE_C = 233.426
KPA_TO_PSIA = 0.14503773

WETBULB_TOLERANCE_F = 0.01
WETBULB_MAX_ITERATIONS = 20
WETBULB_FLOOR_F = 32.0
WETBULB_SEARCH_MIN_F = -50.0

SPECIFIC_VOLUME_FALLBACK = 13.5


class WetBulbMode(str, Enum):
    """What the wet-bulb solver matches against."""
    HUMIDITY = "humidity"  # target is a humidity ratio (lb/lb)
    ENTHALPY = "enthalpy"  # target is an enthalpy (Btu/lb dry air)


class WetBulbSolution(NamedTuple):
    value: float
    iterations: int
    converged: bool


def f_to_c(temp_f: float) -> float:
    return (temp_f - 32.0) * 5.0 / 9.0


def saturation_pressure(temp_f: float) -> float:
    """Saturation vapor pressure (psia) at `temp_f` using the Antoine approximation."""
    t_c = f_to_c(temp_f)
    return math.exp(ANTOINE_A - ANTOINE_B / (t_c + ANTOINE_C)) * KPA_TO_PSIA


def atmospheric_pressure(altitude_ft: float = 0.0) -> float:
    """Barometric pressure (psia) at altitude; exactly 14.696 at sea level."""
    base = max(1.0 - ALTITUDE_LAPSE_RATE * altitude_ft, 0.0)
    return SEA_LEVEL_PSIA * base ** BAROMETRIC_EXPONENT


def air_density(altitude_ft: float = 0.0, temp_f: float = 70.0) -> float:
    """Approximate air density (lb/ft³) corrected for altitude and temperature."""
    pressure_ratio = atmospheric_pressure(altitude_ft) / SEA_LEVEL_PSIA
    temp_ratio = (temp_f + RANKINE_OFFSET) / (70.0 + RANKINE_OFFSET)
    return STANDARD_AIR_DENSITY * pressure_ratio / temp_ratio


def humidity_ratio_from_wet_bulb(dry_bulb: float, pressure: float, wet_bulb: float) -> float:
    """Humidity ratio W (lb/lb) implied by a dry bulb / wet bulb pair."""
    pws = saturation_pressure(wet_bulb)
    pv = pws - (pressure - pws) * (dry_bulb - wet_bulb) * 0.00066 * (1.0 + 0.00115 * wet_bulb)
    return MOLECULAR_WEIGHT_RATIO * pv / max(pressure - pv, 1e-9)


def grains(dry_bulb: Optional[float], pressure: Optional[float], wet_bulb: Optional[float]) -> float:
    """Grains of moisture per pound of dry air (≥ 0).

    Returns 0.0 when a temperature or the pressure is missing, matching the spreadsheet's
    blank-cell behavior. Callers that need to tell "no input" from "dry air" must check
    their inputs first.
    """
    if dry_bulb is None or wet_bulb is None or not pressure:
        return 0.0
    w = humidity_ratio_from_wet_bulb(dry_bulb, pressure, wet_bulb)
    return max(0.0, w * GRAINS_PER_LB)


def _moist_enthalpy(dry_bulb: float, w: float) -> float:
    return 0.24 * dry_bulb + w * (1061.0 + 0.444 * dry_bulb)


def enthalpy(dry_bulb: Optional[float], pressure: Optional[float], wet_bulb: Optional[float]) -> float:
    """Moist-air enthalpy (Btu/lb dry air); 0.0 on missing input."""
    if dry_bulb is None or wet_bulb is None or not pressure:
        return 0.0
    w = grains(dry_bulb, pressure, wet_bulb) / GRAINS_PER_LB
    return _moist_enthalpy(dry_bulb, w)


def humidity_fraction(dry_bulb: Optional[float], pressure: Optional[float], wet_bulb: Optional[float]) -> float:
    """Relative humidity as a fraction in [0, 1]; 0.0 on missing input."""
    if dry_bulb is None or wet_bulb is None or not pressure:
        return 0.0
    pws_db = saturation_pressure(dry_bulb)
    pws_wb = saturation_pressure(wet_bulb)
    pv = pws_wb - (pressure - pws_wb) * (dry_bulb - wet_bulb) * 0.00066
    return max(0.0, min(1.0, pv / pws_db))


def dewpoint(dry_bulb: Optional[float], relative_humidity: Optional[float]) -> float:
    """Dew point (°F) from dry bulb and RH fraction (Magnus formula).

    Missing input or a non-positive RH gives 0.0.
    """
    if dry_bulb is None or relative_humidity is None or relative_humidity <= 0:
        return 0.0
    rh = min(relative_humidity, 1.0)
    t_c = f_to_c(dry_bulb)
    alpha = math.log(rh) + (17.625 * t_c) / (243.04 + t_c)
    dp_c = 243.04 * alpha / (17.625 - alpha)
    return dp_c * 9.0 / 5.0 + 32.0


def specific_volume(dry_bulb: Optional[float], pressure: Optional[float], humidity_ratio: Optional[float] = None) -> float:
    """Specific volume (ft³/lb dry air); 13.5 on missing temperature or pressure."""
    if dry_bulb is None or not pressure:
        return SPECIFIC_VOLUME_FALLBACK
    w = humidity_ratio or 0.0
    temp_r = dry_bulb + RANKINE_OFFSET
    return DRY_AIR_GAS_CONSTANT * temp_r * (1.0 + 1.608 * w) / (144.0 * pressure)


def solve_wetbulb(
    dry_bulb: float,
    pressure: float,
    target: float,
    mode: WetBulbMode = WetBulbMode.HUMIDITY,
    tolerance: float = WETBULB_TOLERANCE_F,
    max_iterations: int = WETBULB_MAX_ITERATIONS,
) -> WetBulbSolution:
    """Find the wet bulb whose humidity ratio (or enthalpy) matches `target`.

    Bisection on [-50°F, dry_bulb]. The humidity ratio grows monotonically with wet bulb,
    so an enthalpy target is converted to its humidity ratio first. When the target lies
    outside what the bracket can reach, or the cap is hit, the last iterate is returned
    with converged=False. The value is floored at 32°F and never exceeds the dry bulb.
    """
    if mode == WetBulbMode.ENTHALPY:
        target_w = (target - 0.24 * dry_bulb) / (1061.0 + 0.444 * dry_bulb)
    else:
        target_w = target

    lo, hi = min(WETBULB_SEARCH_MIN_F, dry_bulb), dry_bulb
    w_lo = humidity_ratio_from_wet_bulb(dry_bulb, pressure, lo)
    w_hi = humidity_ratio_from_wet_bulb(dry_bulb, pressure, hi)

    if target_w >= w_hi:
        return WetBulbSolution(_clamp_wetbulb(hi, dry_bulb), 0, math.isclose(target_w, w_hi, abs_tol=1e-9))
    if target_w <= w_lo:
        return WetBulbSolution(_clamp_wetbulb(lo, dry_bulb), 0, math.isclose(target_w, w_lo, abs_tol=1e-9))

    wb = (lo + hi) / 2.0
    iterations = 0
    converged = False
    while iterations < max_iterations:
        iterations += 1
        wb = (lo + hi) / 2.0
        if humidity_ratio_from_wet_bulb(dry_bulb, pressure, wb) < target_w:
            lo = wb
        else:
            hi = wb
        if (hi - lo) / 2.0 < tolerance:
            wb = (lo + hi) / 2.0
            converged = True
            break

    return WetBulbSolution(_clamp_wetbulb(wb, dry_bulb), iterations, converged)


def wetbulb(
    dry_bulb: Optional[float],
    pressure: Optional[float],
    target: float,
    mode: WetBulbMode = WetBulbMode.HUMIDITY,
) -> float:
    """Wet bulb (°F) for a target humidity ratio or enthalpy; `dry_bulb - 5` on missing input."""
    if dry_bulb is None:
        return 0.0
    if not pressure:
        return dry_bulb - 5.0
    return solve_wetbulb(dry_bulb, pressure, target, mode).value


def _clamp_wetbulb(wb: float, dry_bulb: float) -> float:
    # The 32°F floor never lifts the wet bulb above a sub-freezing dry bulb
    return min(dry_bulb, max(WETBULB_FLOOR_F, wb))


def forecast(x: float, known_xs: Sequence[float], known_ys: Sequence[float]) -> float:
    """Spreadsheet FORECAST over two points: linear inter/extrapolation, never clamped."""
    if len(known_xs) != 2 or len(known_ys) != 2:
        raise ValueError("forecast requires exactly two known points")
    x1, x2 = known_xs
    y1, y2 = known_ys
    if x1 == x2:
        raise ValueError("forecast reference points must differ")
    return y1 + (x - x1) * (y2 - y1) / (x2 - x1)
