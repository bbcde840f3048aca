import math
import pytest

from erv_service.psychrometrics import (
    GRAINS_PER_LB,
    WetBulbMode,
    air_density,
    atmospheric_pressure,
    dewpoint,
    enthalpy,
    forecast,
    grains,
    humidity_fraction,
    saturation_pressure,
    solve_wetbulb,
    specific_volume,
    wetbulb,
)

SEA_LEVEL = 14.696


def test_atmospheric_pressure_at_sea_level():
    assert atmospheric_pressure(0) == 14.696


def test_atmospheric_pressure_non_increasing():
    altitudes = [0, 500, 1000, 2500, 5280, 8000, 12000]
    pressures = [atmospheric_pressure(a) for a in altitudes]
    assert all(a >= b for a, b in zip(pressures, pressures[1:]))


def test_saturation_pressure_monotonic():
    assert saturation_pressure(40) < saturation_pressure(60) < saturation_pressure(90)


def test_grains_design_day_range():
    g = grains(95, SEA_LEVEL, 78)
    assert 100 < g < 150


def test_grains_deterministic_for_saturated_air():
    first = grains(70, SEA_LEVEL, 70)
    assert all(grains(70, SEA_LEVEL, 70) == first for _ in range(5))


@pytest.mark.parametrize("db,p,wb", [(None, SEA_LEVEL, 60), (80, SEA_LEVEL, None), (80, None, 60), (80, 0, 60)])
def test_grains_zero_on_missing_input(db, p, wb):
    assert grains(db, p, wb) == 0.0


def test_grains_drop_with_wet_bulb_depression():
    assert grains(90, SEA_LEVEL, 60) < grains(90, SEA_LEVEL, 75)


@pytest.mark.parametrize(
    "db,wb",
    [(40, 35), (55, 48), (70, 60), (80, 67), (95, 78), (100, 72)],
)
def test_wetbulb_round_trip(db, wb):
    target = grains(db, SEA_LEVEL, wb) / GRAINS_PER_LB
    assert abs(wetbulb(db, SEA_LEVEL, target, WetBulbMode.HUMIDITY) - wb) <= 0.5


def test_wetbulb_enthalpy_mode_round_trip():
    h = enthalpy(85, SEA_LEVEL, 70)
    assert abs(wetbulb(85, SEA_LEVEL, h, WetBulbMode.ENTHALPY) - 70) <= 0.5


def test_solve_wetbulb_reports_convergence():
    target = grains(80, SEA_LEVEL, 65) / GRAINS_PER_LB
    solution = solve_wetbulb(80, SEA_LEVEL, target)
    assert solution.converged
    assert 0 < solution.iterations <= 20


def test_solve_wetbulb_iteration_cap():
    target = grains(80, SEA_LEVEL, 65) / GRAINS_PER_LB
    solution = solve_wetbulb(80, SEA_LEVEL, target, max_iterations=2)
    assert not solution.converged
    assert solution.iterations == 2


@pytest.mark.parametrize("db", [45, 60, 75, 90])
def test_wetbulb_clamped_to_dry_bulb(db):
    # Supersaturated target cannot push the wet bulb above the dry bulb
    assert wetbulb(db, SEA_LEVEL, 0.5) <= db


def test_wetbulb_floor():
    assert wetbulb(40, SEA_LEVEL, 0.0) == 32.0


def test_wetbulb_missing_input_fallbacks():
    assert wetbulb(None, SEA_LEVEL, 0.01) == 0.0
    assert wetbulb(80, None, 0.01) == 75.0


def test_humidity_fraction_bounds():
    assert humidity_fraction(70, SEA_LEVEL, 70) == pytest.approx(1.0, abs=0.02)
    assert 0.0 <= humidity_fraction(95, SEA_LEVEL, 60) < 0.2
    assert humidity_fraction(None, SEA_LEVEL, 60) == 0.0


def test_dewpoint_fallbacks():
    assert dewpoint(None, 0.5) == 0
    assert dewpoint(80, 0) == 0.0
    assert dewpoint(80, -0.1) == 0.0


def test_dewpoint_below_dry_bulb():
    assert dewpoint(80, 0.5) < 80
    assert dewpoint(80, 1.0) == pytest.approx(80, abs=0.1)


def test_specific_volume_fallback_and_range():
    assert specific_volume(None, SEA_LEVEL) == 13.5
    assert 13.0 < specific_volume(70, SEA_LEVEL, 0.008) < 14.0


def test_air_density_lower_at_altitude():
    assert air_density(0) == pytest.approx(0.075)
    assert air_density(5280) < air_density(0)


def test_forecast_midpoint():
    assert forecast(2500, [2000, 3000], [0.3, 0.5]) == pytest.approx(0.4)


def test_forecast_extrapolates():
    assert forecast(4000, [2000, 3000], [1.0, 2.0]) == pytest.approx(3.0)
    assert forecast(1000, [2000, 3000], [1.0, 2.0]) == pytest.approx(0.0)


def test_forecast_rejects_bad_points():
    with pytest.raises(ValueError):
        forecast(1, [1, 1], [0, 1])
    with pytest.raises(ValueError):
        forecast(1, [1, 2, 3], [0, 1, 2])


def test_enthalpy_missing_and_finite():
    assert enthalpy(None, SEA_LEVEL, 60) == 0.0
    assert math.isfinite(enthalpy(95, SEA_LEVEL, 78))


@pytest.mark.parametrize("db", [-10.0, 0.0, 20.0, 31.5])
def test_wetbulb_never_above_sub_freezing_dry_bulb(db):
    assert wetbulb(db, SEA_LEVEL, 0.0) == db
    assert wetbulb(db, SEA_LEVEL, 0.5) == db
