"""engine.py – the single calculation entry point.

This module owns:
- Parsing and validating an input record
- Running altitude, psychrometric, ERV, fan and unit steps in order
- Collecting warnings onto one ResultRecord

It knows nothing about storage, sessions or presentation beyond ResultRecord.display().
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError

from .altitude import AltitudeResolver
from .config import config
from .erv import ERVPerformanceModel, build_state, outdoor_heating_state, preheat_temperatures
from .fans import FanSelectionEngine
from .models import (
    CalculationWarning,
    InputRecord,
    PreheatTemperatures,
    ResultRecord,
    ValidationErrors,
)
from .psychrometrics import air_density
from .unit_performance import adjust_unit_performance
from .validator import issues_from_parse_error, validate_inputs

logger = logging.getLogger(__name__)

CalculationResult = Union[ResultRecord, ValidationErrors]


class ERVEngine:
    """Stateless calculator; one instance may serve any number of calls.

    Parameters
    ----------
    strict : bool, optional
        Reject unknown ERV sizes, unit models and locations. Defaults to
        ``config.STRICT_MODE``.
    """

    def __init__(self, strict: Optional[bool] = None) -> None:
        self.strict = config.STRICT_MODE if strict is None else strict
        self.altitudes = AltitudeResolver(strict=self.strict)
        self.erv_model = ERVPerformanceModel(strict=self.strict, default_model=config.DEFAULT_ERV_MODEL)
        self.fans = FanSelectionEngine(
            strict=self.strict,
            dynamic_drive=config.DYNAMIC_DRIVE_SIZING,
            motor_rpm=config.MOTOR_RPM,
            center_distance=config.DRIVE_CENTER_DISTANCE_IN,
        )

    def calculate(self, record: Union[InputRecord, Mapping[str, Any]]) -> CalculationResult:
        """Compute a full result, or return the validation problems that prevent it.

        Raises UnknownModelError / UnknownLocationError only in strict mode.
        """
        parsed = self._parse(record)
        if isinstance(parsed, ValidationErrors):
            return parsed

        issues = validate_inputs(
            parsed,
            enforce_cfm_range=config.ENFORCE_CFM_RANGE,
            min_cfm=config.MIN_CFM,
            max_cfm=config.MAX_CFM,
        )
        if issues:
            logger.info("Validation failed with %d issue(s)", len(issues))
            return ValidationErrors(errors=issues)

        warnings: List[CalculationWarning] = []
        atmosphere, notes = self.altitudes.resolve(parsed.location, parsed.altitude_ft)
        warnings.extend(notes)
        pressure = atmosphere.pressure_psia
        logger.debug("Atmosphere: %s ft -> %.4f psia (%s)", atmosphere.altitude_ft, pressure, atmosphere.source)

        ra_cooling = build_state(parsed.ra_dry_bulb_cooling, parsed.ra_wet_bulb_cooling, pressure)
        ra_heating = build_state(parsed.ra_dry_bulb_heating, parsed.ra_wet_bulb_heating, pressure)

        outcome = self.erv_model.evaluate(parsed, pressure, ra_cooling, ra_heating)
        warnings.extend(outcome.warnings)

        fan, notes = self.fans.select(parsed.unit_model, parsed.outdoor_air_cfm)
        warnings.extend(notes)

        unit = adjust_unit_performance(
            parsed.unit_tons,
            parsed.unit_stated_eer,
            outcome.capacities.erv_cooling_tons,
            parsed.unit_model,
        )

        has_preheat = (parsed.pre_heater_size or 0) > 0
        result = ResultRecord(
            atmosphere=atmosphere,
            air_density=air_density(atmosphere.altitude_ft),
            oa_cooling=build_state(parsed.oa_dry_bulb_cooling, parsed.oa_wet_bulb_cooling, pressure),
            ra_cooling=ra_cooling,
            oa_heating=outdoor_heating_state(parsed, pressure),
            ra_heating=ra_heating,
            mixed_return_cfm=parsed.supply_air_cfm - parsed.outdoor_air_cfm,
            erv=outcome.performance,
            capacities=outcome.capacities,
            fan=fan,
            unit=unit,
            preheat=preheat_temperatures(parsed) if has_preheat else PreheatTemperatures(),
            warnings=warnings,
        )
        logger.debug("Calculation complete: %s, fan %s, %d warning(s)",
                     result.erv.model_designation, result.fan.fan_type, len(warnings))
        return result

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    @staticmethod
    def _parse(record: Union[InputRecord, Mapping[str, Any]]) -> Union[InputRecord, ValidationErrors]:
        if isinstance(record, InputRecord):
            return record
        try:
            return InputRecord.model_validate(dict(record))
        except ValidationError as e:
            logger.info("Input record could not be parsed: %d error(s)", e.error_count())
            return ValidationErrors(errors=issues_from_parse_error(e))


def calculate(record: Union[InputRecord, Mapping[str, Any]], strict: Optional[bool] = None) -> CalculationResult:
    """Convenience wrapper around ``ERVEngine(strict).calculate``."""
    return ERVEngine(strict=strict).calculate(record)
