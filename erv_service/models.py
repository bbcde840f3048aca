"""
Pydantic models for the ERV calculation engine
"""

import json
import math
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

UNAVAILABLE = "--"
UNRESOLVED_FAN = "…"


class WarningKind(str, Enum):
    """Non-fatal conditions attached to a result"""
    NON_CONVERGENCE = "non_convergence"
    OVERSIZED_MOTOR = "oversized_motor"
    UNRESOLVED_LOCATION = "unresolved_location"
    DEFAULT_MODEL_FALLBACK = "default_model_fallback"
    UNRESOLVED_FAN = "unresolved_fan"
    FLOW_OUT_OF_RANGE = "flow_out_of_range"
    MOTOR_EXCEEDS_FAN_RATING = "motor_exceeds_fan_rating"
    DRIVE_SIZING_FALLBACK = "drive_sizing_fallback"
    NON_FINITE_VALUE = "non_finite_value"


class ErrorKind(str, Enum):
    """Validation failure categories"""
    MISSING_FIELD = "missing_field"
    INVALID_VALUE = "invalid_value"
    WET_BULB_EXCEEDS_DRY_BULB = "wet_bulb_exceeds_dry_bulb"
    OUTDOOR_EXCEEDS_SUPPLY = "outdoor_exceeds_supply"
    CFM_OUT_OF_RANGE = "cfm_out_of_range"
    TEMPERATURE_OUT_OF_RANGE = "temperature_out_of_range"


class InputRecord(BaseModel):
    """One calculation request. Numeric fields are optional so the validator can report gaps."""
    model_config = ConfigDict(frozen=True)

    # Cooling season (°F)
    oa_dry_bulb_cooling: Optional[float] = None
    oa_wet_bulb_cooling: Optional[float] = None
    ra_dry_bulb_cooling: Optional[float] = None
    ra_wet_bulb_cooling: Optional[float] = None
    # Heating season (°F)
    oa_dry_bulb_heating: Optional[float] = None
    oa_wet_bulb_heating: Optional[float] = None
    ra_dry_bulb_heating: Optional[float] = None
    ra_wet_bulb_heating: Optional[float] = None

    # Airflow (CFM)
    supply_air_cfm: Optional[float] = None
    outdoor_air_cfm: Optional[float] = None
    exhaust_air_cfm: Optional[float] = None

    wheel_type: Optional[str] = None
    unit_model: Optional[str] = None
    erv_size_selection: Optional[str] = None
    filter_type: Optional[str] = None
    purge_angle: Optional[float] = None

    unit_tons: Optional[float] = None
    unit_stated_eer: Optional[float] = None
    unit_voltage: Optional[int] = None

    location: Optional[str] = None
    altitude_ft: Optional[float] = Field(None, description="Manual altitude; overrides the city lookup")
    pre_heater_size: Optional[float] = None
    motor_grounding_ring: bool = False
    vav_vfd: bool = False


class CalculationWarning(BaseModel):
    """Non-fatal condition raised while computing"""
    kind: WarningKind
    message: str


class ValidationIssue(BaseModel):
    """A single input problem found before computing"""
    field: Optional[str] = None
    kind: ErrorKind
    message: str


class ValidationErrors(BaseModel):
    """Structured validation failure returned instead of a result"""
    errors: List[ValidationIssue]

    @property
    def messages(self) -> List[str]:
        return [e.message for e in self.errors]


class AtmosphericContext(BaseModel):
    location: Optional[str] = None
    altitude_ft: float = 0.0
    pressure_psia: float
    resolved: bool = True
    source: str = "city"


class PsychrometricState(BaseModel):
    """Properties of one air stream; absent values are unavailable"""
    dry_bulb: Optional[float] = None
    wet_bulb: Optional[float] = None
    grains: Optional[float] = None
    enthalpy: Optional[float] = None
    relative_humidity: Optional[float] = None
    dew_point: Optional[float] = None


class ERVSelection(BaseModel):
    """Rated data for one wheel size"""
    model_config = ConfigDict(frozen=True)

    model: str
    cooling_effectiveness: float = Field(..., ge=0.0, le=1.0)
    heating_effectiveness: float = Field(..., ge=0.0, le=1.0)
    face_area_sqft: float
    rated_cfm: float = 2000.0
    pressure_drop: float
    wheel_diameter_in: Optional[float] = None
    min_flow_cfm: Optional[float] = None
    max_flow_cfm: Optional[float] = None

    @property
    def rated_face_velocity(self) -> float:
        return self.rated_cfm / self.face_area_sqft


class MotorBracket(BaseModel):
    model_config = ConfigDict(frozen=True)

    hp: float
    max_bhp: float


class FanCandidate(BaseModel):
    """Two-point fan curve used by the forecast interpolation"""
    model_config = ConfigDict(frozen=True)

    fan_type: str
    rpm: float
    cfm_points: List[float]
    bhp_points: List[float]
    static_pressure_points: List[float]
    motor_brackets: List[MotorBracket]
    heavy_duty_type: Optional[str] = None
    max_motor_hp: Optional[float] = None


class MotorPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    hp: float
    shaft: str
    part_number: str
    model: str
    code: str


class DrivePart(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    part_number: str


class DriveComponents(BaseModel):
    model_config = ConfigDict(frozen=True)

    driver: DrivePart
    driven: DrivePart
    belt: DrivePart
    sized: bool = False
    drive_ratio: Optional[float] = None


class ERVPerformance(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_designation: Optional[str] = None
    cooling_effectiveness: Optional[float] = None
    heating_effectiveness: Optional[float] = None
    pressure_drop_cooling: Optional[float] = None
    pressure_drop_heating: Optional[float] = None
    filter_pressure_drop: Optional[float] = None
    face_velocity: Optional[float] = None
    erv_dry_bulb_cooling: Optional[float] = None
    erv_wet_bulb_cooling: Optional[float] = None
    erv_dry_bulb_heating: Optional[float] = None
    erv_wet_bulb_heating: Optional[float] = None
    msa_dry_bulb_cooling: Optional[float] = None
    msa_wet_bulb_cooling: Optional[float] = None
    msa_dry_bulb_heating: Optional[float] = None
    msa_wet_bulb_heating: Optional[float] = None


class Capacities(BaseModel):
    erv_cooling_tons: Optional[float] = None
    erv_cooling_mbh: Optional[float] = None
    cooling_sensible_mbh: Optional[float] = None
    erv_heating_tons: Optional[float] = None
    heating_sensible_mbh: Optional[float] = None


class FanSelection(BaseModel):
    fan_type: str = UNRESOLVED_FAN
    motor_hp: Optional[float] = None
    fan_rpm: Optional[float] = None
    fan_bhp: Optional[float] = None
    total_static_pressure: Optional[float] = None
    motor: Optional[MotorPart] = None
    drive: Optional[DriveComponents] = None
    bhp_comparison: Dict[str, float] = Field(default_factory=dict)

    @property
    def resolved(self) -> bool:
        return self.fan_type != UNRESOLVED_FAN


class UnitPerformance(BaseModel):
    original_tons: Optional[float] = None
    original_eer: Optional[float] = None
    tonnage_with_erv: Optional[float] = None
    eer_with_erv: Optional[float] = None


class PreheatTemperatures(BaseModel):
    post_preheat_dry_bulb: Optional[float] = None
    post_preheat_wet_bulb: Optional[float] = None


class ResultRecord(BaseModel):
    """Full calculation output with a stable shape"""
    atmosphere: AtmosphericContext
    air_density: Optional[float] = None
    oa_cooling: PsychrometricState = Field(default_factory=PsychrometricState)
    ra_cooling: PsychrometricState = Field(default_factory=PsychrometricState)
    oa_heating: PsychrometricState = Field(default_factory=PsychrometricState)
    ra_heating: PsychrometricState = Field(default_factory=PsychrometricState)
    mixed_return_cfm: Optional[float] = None
    erv: ERVPerformance = Field(default_factory=ERVPerformance)
    capacities: Capacities = Field(default_factory=Capacities)
    fan: FanSelection = Field(default_factory=FanSelection)
    unit: UnitPerformance = Field(default_factory=UnitPerformance)
    preheat: PreheatTemperatures = Field(default_factory=PreheatTemperatures)
    warnings: List[CalculationWarning] = Field(default_factory=list)

    def has_warning(self, kind: WarningKind) -> bool:
        return any(w.kind == kind for w in self.warnings)

    def display(self) -> Dict[str, str]:
        """Flat, display-ready table using the legacy precision and "--" placeholders."""
        erv, cap, fan, unit = self.erv, self.capacities, self.fan, self.unit
        drive = fan.drive
        return {
            "location": self.atmosphere.location or UNAVAILABLE,
            "altitude": _fmt(self.atmosphere.altitude_ft, 1),
            "pressure": _fmt(self.atmosphere.pressure_psia, 3),
            "oaGrainsCooling": _fmt(self.oa_cooling.grains, 1),
            "raGrainsCooling": _fmt(self.ra_cooling.grains, 1),
            "oaGrainsHeating": _fmt(self.oa_heating.grains, 1),
            "raGrainsHeating": _fmt(self.ra_heating.grains, 1),
            "mixedReturnCFM": _fmt(self.mixed_return_cfm, 0),
            "modelDesignation": erv.model_designation or UNAVAILABLE,
            "unitEffectivenessCooling": _pct(erv.cooling_effectiveness),
            "unitEffectivenessHeating": _pct(erv.heating_effectiveness),
            "pressureDropCooling": _fmt(erv.pressure_drop_cooling, 3),
            "pressureDropHeating": _fmt(erv.pressure_drop_heating, 3),
            "velocity": _fmt(erv.face_velocity, 0),
            "ervDryBulbCooling": _fmt(erv.erv_dry_bulb_cooling, 1),
            "ervWetBulbCooling": _fmt(erv.erv_wet_bulb_cooling, 1),
            "ervDryBulbHeating": _fmt(erv.erv_dry_bulb_heating, 1),
            "ervWetBulbHeating": _fmt(erv.erv_wet_bulb_heating, 1),
            "msaDryBulbCooling": _fmt(erv.msa_dry_bulb_cooling, 1),
            "msaWetBulbCooling": _fmt(erv.msa_wet_bulb_cooling, 1),
            "msaDryBulbHeating": _fmt(erv.msa_dry_bulb_heating, 1),
            "msaWetBulbHeating": _fmt(erv.msa_wet_bulb_heating, 1),
            "ervEffectiveCoolingTons": _fmt(cap.erv_cooling_tons, 2),
            "coolingSensibleMBH": _fmt(cap.cooling_sensible_mbh, 1),
            "ervEffectiveHeatingTons": _fmt(cap.erv_heating_tons, 2),
            "heatingSensibleMBH": _fmt(cap.heating_sensible_mbh, 1),
            "tonnageWithERV": _fmt(unit.tonnage_with_erv, 1),
            "eerValue": _fmt(unit.eer_with_erv, 1),
            "postPreheatTempCooling": _fmt(self.preheat.post_preheat_dry_bulb, 1),
            "postPreheatTempHeating": _fmt(self.preheat.post_preheat_wet_bulb, 1),
            "fanType": fan.fan_type if fan.resolved else UNAVAILABLE,
            "motorSizeHP": _fmt(fan.motor_hp, 1),
            "fanRPM": _fmt(fan.fan_rpm, 0),
            "fanMotorBHP": _fmt(fan.fan_bhp, 3),
            "totalStaticPressure": _fmt(fan.total_static_pressure, 3),
            "motorValue": fan.motor.model if fan.motor else UNAVAILABLE,
            "motorPN": fan.motor.part_number if fan.motor else UNAVAILABLE,
            "driverValue": drive.driver.value if drive else UNAVAILABLE,
            "driverPN": drive.driver.part_number if drive else UNAVAILABLE,
            "drivenValue": drive.driven.value if drive else UNAVAILABLE,
            "drivenPN": drive.driven.part_number if drive else UNAVAILABLE,
            "beltValue": drive.belt.value if drive else UNAVAILABLE,
            "beltPN": drive.belt.part_number if drive else UNAVAILABLE,
        }


class CalculationHistoryEntry(BaseModel):
    """Persisted-history shape: who ran what, when, with which inputs and results"""
    user_id: str
    calculation_date: datetime
    input_data: str
    result_data: str
    description: Optional[str] = "ERV Wheel Calculation"

    @classmethod
    def from_calculation(
        cls,
        user_id: str,
        inputs: InputRecord,
        result: Union[ResultRecord, ValidationErrors],
        description: Optional[str] = None,
        calculation_date: Optional[datetime] = None,
    ) -> "CalculationHistoryEntry":
        return cls(
            user_id=user_id,
            calculation_date=calculation_date or datetime.now(),
            input_data=inputs.model_dump_json(),
            result_data=result.model_dump_json(),
            description=description or "ERV Wheel Calculation",
        )

    def load_inputs(self) -> InputRecord:
        return InputRecord.model_validate_json(self.input_data)

    def load_result(self) -> Union[ResultRecord, ValidationErrors]:
        data = json.loads(self.result_data)
        if "errors" in data:
            return ValidationErrors.model_validate(data)
        return ResultRecord.model_validate(data)


def _fmt(value: Optional[float], decimals: int) -> str:
    if value is None or not math.isfinite(value):
        return UNAVAILABLE
    return f"{value:.{decimals}f}"


def _pct(value: Optional[float], decimals: int = 1) -> str:
    if value is None or not math.isfinite(value):
        return UNAVAILABLE
    return f"{value * 100:.{decimals}f}%"
