"""erv.py – ERV wheel performance: effectiveness, outlet and mixed air, capacities.

A linear pipeline per calculation. Each season is its own branch: a missing
temperature leaves that branch's fields unavailable without touching the other.
"""
from __future__ import annotations

import logging
import math
from typing import List, NamedTuple, Optional, Tuple

from .catalog import get_erv_selection, get_filter_multiplier
from .exceptions import UnknownModelError
from .models import (
    Capacities,
    CalculationWarning,
    ERVPerformance,
    ERVSelection,
    InputRecord,
    PreheatTemperatures,
    PsychrometricState,
    WarningKind,
)
from .psychrometrics import (
    GRAINS_PER_LB,
    WetBulbMode,
    dewpoint,
    enthalpy,
    grains,
    humidity_fraction,
    solve_wetbulb,
)

logger = logging.getLogger(__name__)

MAX_EFFECTIVENESS = 0.99
AIR_DENSITY_FACTOR = 1.08  # Btu/(hr·CFM·°F)
BTU_PER_TON = 12000.0
BTU_PER_MBH = 1000.0
OUTLET_WET_BULB_DEPRESSION = 5.0
PREHEAT_RISE_F = 26.3


class ERVOutcome(NamedTuple):
    performance: ERVPerformance
    capacities: Capacities
    warnings: List[CalculationWarning]


def clamp_effectiveness(value: float) -> float:
    """Keep rated effectiveness in [0, 0.99]; a wheel is never reported at 100%."""
    return max(0.0, min(MAX_EFFECTIVENESS, value))


def build_state(dry_bulb: Optional[float], wet_bulb: Optional[float], pressure: float) -> PsychrometricState:
    """Psychrometric state for one air stream; empty when either temperature is missing."""
    if dry_bulb is None or wet_bulb is None:
        return PsychrometricState(dry_bulb=dry_bulb, wet_bulb=wet_bulb)
    rh = humidity_fraction(dry_bulb, pressure, wet_bulb)
    return PsychrometricState(
        dry_bulb=dry_bulb,
        wet_bulb=wet_bulb,
        grains=grains(dry_bulb, pressure, wet_bulb),
        enthalpy=enthalpy(dry_bulb, pressure, wet_bulb),
        relative_humidity=rh,
        dew_point=dewpoint(dry_bulb, rh),
    )


def preheat_temperatures(record: InputRecord) -> PreheatTemperatures:
    """Outdoor heating air after the fixed preheat rise, rounded to 0.1°F."""
    db, wb = record.oa_dry_bulb_heating, record.oa_wet_bulb_heating
    return PreheatTemperatures(
        post_preheat_dry_bulb=round(db + PREHEAT_RISE_F, 1) if db is not None else None,
        post_preheat_wet_bulb=round(wb + PREHEAT_RISE_F, 1) if wb is not None else None,
    )


def outdoor_heating_state(record: InputRecord, pressure: float) -> PsychrometricState:
    """OA heating stream, evaluated after the preheater when one is fitted."""
    db, wb = record.oa_dry_bulb_heating, record.oa_wet_bulb_heating
    if (record.pre_heater_size or 0) > 0 and db is not None and wb is not None:
        return build_state(db + PREHEAT_RISE_F, wb + PREHEAT_RISE_F, pressure)
    return build_state(db, wb, pressure)


def capacity(cfm: float, entering: float, leaving: float, divisor: float) -> float:
    return abs(cfm * AIR_DENSITY_FACTOR * (entering - leaving)) / divisor


class ERVPerformanceModel:
    """Evaluates a wheel selection against one input record.

    Parameters
    ----------
    strict : bool
        Raise UnknownModelError for unknown size selections instead of falling back.
    default_model : str
        Size used in compatibility mode when the selection is unknown.
    """

    def __init__(self, strict: bool = False, default_model: str = "ERC-4132C-4M") -> None:
        self.strict = strict
        self.default_model = default_model

    def select(self, erv_size: Optional[str]) -> Tuple[ERVSelection, List[CalculationWarning]]:
        selection = get_erv_selection(erv_size)
        if selection is not None:
            return selection, []
        if self.strict:
            raise UnknownModelError("ERV size selection", erv_size or "")
        fallback = get_erv_selection(self.default_model)
        if fallback is None:
            raise UnknownModelError("default ERV model", self.default_model)
        logger.warning("ERV size %r not found; falling back to %s", erv_size, fallback.model)
        return fallback, [
            CalculationWarning(
                kind=WarningKind.DEFAULT_MODEL_FALLBACK,
                message=f"ERV size {erv_size!r} not found; using {fallback.model}",
            )
        ]

    def evaluate(
        self,
        record: InputRecord,
        pressure: float,
        ra_cooling: PsychrometricState,
        ra_heating: PsychrometricState,
    ) -> ERVOutcome:
        selection, warnings = self.select(record.erv_size_selection)

        eff_c = clamp_effectiveness(selection.cooling_effectiveness)
        eff_h = clamp_effectiveness(selection.heating_effectiveness)
        perf = {
            "model_designation": selection.model,
            "cooling_effectiveness": eff_c,
            "heating_effectiveness": eff_h,
            "pressure_drop_cooling": selection.pressure_drop,
            "pressure_drop_heating": selection.pressure_drop,
            "filter_pressure_drop": selection.pressure_drop * get_filter_multiplier(record.filter_type),
        }
        caps = {}

        oa_cfm = record.outdoor_air_cfm
        supply_cfm = record.supply_air_cfm
        if oa_cfm is not None:
            perf["face_velocity"] = oa_cfm / selection.face_area_sqft
            warnings.extend(self._check_flow(selection, oa_cfm))

        # Cooling branch
        oa_db, ra_db = record.oa_dry_bulb_cooling, record.ra_dry_bulb_cooling
        if oa_db is not None and ra_db is not None:
            erv_db = oa_db - (oa_db - ra_db) * eff_c
            perf["erv_dry_bulb_cooling"] = erv_db
            perf["erv_wet_bulb_cooling"] = erv_db - OUTLET_WET_BULB_DEPRESSION
            if oa_cfm is not None:
                caps["erv_cooling_tons"] = capacity(oa_cfm, oa_db, erv_db, BTU_PER_TON)
                caps["erv_cooling_mbh"] = capacity(oa_cfm, oa_db, erv_db, BTU_PER_MBH)
            msa = self._mixed_supply(erv_db, ra_db, oa_cfm, supply_cfm)
            if msa is not None:
                perf["msa_dry_bulb_cooling"] = msa
                perf["msa_wet_bulb_cooling"] = self._mixed_wet_bulb(msa, pressure, ra_cooling, "cooling", warnings)
                caps["cooling_sensible_mbh"] = capacity(supply_cfm, oa_db, msa, BTU_PER_MBH)
        else:
            logger.debug("Cooling branch skipped: OA/RA dry bulb missing")

        # Heating branch
        oa_db, ra_db = record.oa_dry_bulb_heating, record.ra_dry_bulb_heating
        if oa_db is not None and ra_db is not None:
            erv_db = oa_db + (ra_db - oa_db) * eff_h
            perf["erv_dry_bulb_heating"] = erv_db
            perf["erv_wet_bulb_heating"] = erv_db - OUTLET_WET_BULB_DEPRESSION
            if oa_cfm is not None:
                caps["erv_heating_tons"] = capacity(oa_cfm, erv_db, oa_db, BTU_PER_TON)
                caps["heating_sensible_mbh"] = capacity(oa_cfm, erv_db, oa_db, BTU_PER_MBH)
            msa = self._mixed_supply(erv_db, ra_db, oa_cfm, supply_cfm)
            if msa is not None:
                perf["msa_dry_bulb_heating"] = msa
                perf["msa_wet_bulb_heating"] = self._mixed_wet_bulb(msa, pressure, ra_heating, "heating", warnings)
        else:
            logger.debug("Heating branch skipped: OA/RA dry bulb missing")

        perf = _drop_non_finite(perf, warnings)
        caps = _drop_non_finite(caps, warnings)
        return ERVOutcome(ERVPerformance(**perf), Capacities(**caps), warnings)

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    @staticmethod
    def _mixed_supply(
        erv_db: float, ra_db: float, oa_cfm: Optional[float], supply_cfm: Optional[float]
    ) -> Optional[float]:
        if oa_cfm is None or not supply_cfm:
            return None
        return (erv_db * oa_cfm + ra_db * (supply_cfm - oa_cfm)) / supply_cfm

    @staticmethod
    def _mixed_wet_bulb(
        msa_db: float,
        pressure: float,
        ra_state: PsychrometricState,
        season: str,
        warnings: List[CalculationWarning],
    ) -> Optional[float]:
        if ra_state.grains is None:
            return None
        solution = solve_wetbulb(msa_db, pressure, ra_state.grains / GRAINS_PER_LB, WetBulbMode.HUMIDITY)
        if not solution.converged:
            logger.warning(
                "Wet bulb solve did not converge (%s, db=%.2f, iterations=%d); using %.2f",
                season, msa_db, solution.iterations, solution.value,
            )
            warnings.append(
                CalculationWarning(
                    kind=WarningKind.NON_CONVERGENCE,
                    message=f"Mixed supply air wet bulb ({season}) did not converge; last estimate {solution.value:.2f}°F",
                )
            )
        return solution.value

    @staticmethod
    def _check_flow(selection: ERVSelection, oa_cfm: float) -> List[CalculationWarning]:
        lo, hi = selection.min_flow_cfm, selection.max_flow_cfm
        if lo is None or hi is None or lo <= oa_cfm <= hi:
            return []
        logger.info("Outdoor CFM %.0f outside %s wheel range %.0f-%.0f", oa_cfm, selection.model, lo, hi)
        return [
            CalculationWarning(
                kind=WarningKind.FLOW_OUT_OF_RANGE,
                message=f"Outdoor air {oa_cfm:.0f} CFM is outside the {selection.model} wheel range ({lo:.0f}-{hi:.0f} CFM)",
            )
        ]


def _drop_non_finite(values: dict, warnings: List[CalculationWarning]) -> dict:
    out = {}
    for name, value in values.items():
        if isinstance(value, float) and not math.isfinite(value):
            logger.warning("Non-finite value for %s dropped", name)
            warnings.append(CalculationWarning(kind=WarningKind.NON_FINITE_VALUE, message=f"{name} is not finite"))
            continue
        out[name] = value
    return out
