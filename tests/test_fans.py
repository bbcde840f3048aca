import pytest

from erv_service import fans
from erv_service.catalog import FAN_CANDIDATES, STANDARD_DRIVE
from erv_service.exceptions import UnknownModelError
from erv_service.fans import FanSelectionEngine, candidate_bhp, select_fan_pair, select_motor
from erv_service.models import FanCandidate, MotorBracket, WarningKind


@pytest.mark.parametrize(
    "unit_model,pair",
    [
        ("Trane - Voyager C", ("10-10B", "W10-10BL")),
        ("Trane - Precedent E", ("9-6B", "W9-6BL")),
        ("trane - PRECEDENT e", ("9-6B", "W9-6BL")),
        ("Custom Unit", ("10-10B", "W10-10BL")),
    ],
)
def test_select_fan_pair(unit_model, pair):
    assert select_fan_pair(unit_model) == pair


def test_candidate_bhp_includes_service_factor():
    fan = FAN_CANDIDATES["10-10B"]
    assert candidate_bhp(fan, 3000) == pytest.approx(0.38403902749047303 * 1.15)


def test_voyager_c_selection():
    selection, warnings = FanSelectionEngine().select("Trane - Voyager C", 3000)
    assert selection.fan_type == "10-10B"
    assert selection.motor_hp == 1.0
    assert selection.fan_rpm == pytest.approx(934.0984829173981)
    assert selection.fan_bhp == pytest.approx(0.38403902749047303 * 1.15)
    assert selection.total_static_pressure == pytest.approx(0.9816074727621578)
    assert selection.motor.part_number == "VELMTR-0183"
    assert selection.motor.model == "143TTDR6027"
    assert selection.drive == STANDARD_DRIVE
    assert set(selection.bhp_comparison) == {"10-10B", "W10-10BL"}
    assert warnings == []


def test_selection_is_deterministic():
    engine = FanSelectionEngine()
    first, _ = engine.select("Trane - Voyager C", 3000)
    for _ in range(3):
        again, _ = engine.select("Trane - Voyager C", 3000)
        assert again == first


def test_precedent_selection():
    selection, warnings = FanSelectionEngine().select("Trane - Precedent E", 3000)
    assert selection.fan_type == "9-6B"
    assert selection.motor_hp == 1.5
    assert warnings == []


def test_precedent_motor_above_housing_rating():
    selection, warnings = FanSelectionEngine().select("Trane - Precedent E", 20000)
    assert selection.fan_type == "9-6B"
    assert selection.motor_hp == 5.0
    assert WarningKind.MOTOR_EXCEEDS_FAN_RATING in [w.kind for w in warnings]


@pytest.mark.parametrize("unit_model", [None, "", "(blank)"])
def test_blank_unit_model_unresolved(unit_model):
    selection, warnings = FanSelectionEngine(strict=True).select(unit_model, 3000)
    assert selection.fan_type == "…"
    assert not selection.resolved
    assert selection.motor is None
    assert [w.kind for w in warnings] == [WarningKind.UNRESOLVED_FAN]


def test_unknown_unit_model():
    selection, warnings = FanSelectionEngine().select("Carrier - Mystery", 3000)
    assert not selection.resolved
    assert [w.kind for w in warnings] == [WarningKind.UNRESOLVED_FAN]
    with pytest.raises(UnknownModelError):
        FanSelectionEngine(strict=True).select("Carrier - Mystery", 3000)


def test_select_motor_brackets():
    brackets = [MotorBracket(hp=hp, max_bhp=cap) for hp, cap in [(2.0, 1.0), (1.0, 0.5), (5.0, 3.0)]]
    assert select_motor(brackets, 0.4) == (brackets[1], False)
    assert select_motor(brackets, 0.5) == (brackets[1], False)
    assert select_motor(brackets, 0.9) == (brackets[0], False)
    assert select_motor(brackets, 4.0) == (brackets[2], True)


def _heavy_fans():
    # A pair where the 10-10B housing wins and needs the 5 HP bracket
    heavy = FanCandidate(
        fan_type="10-10B", rpm=900.0, cfm_points=[2000, 3000], bhp_points=[1.8, 2.0],
        static_pressure_points=[1.0, 1.1],
        motor_brackets=[MotorBracket(hp=3.0, max_bhp=1.5), MotorBracket(hp=5.0, max_bhp=2.5)],
        heavy_duty_type="10-10R",
    )
    other = FanCandidate(
        fan_type="W10-10BL", rpm=950.0, cfm_points=[2000, 3000], bhp_points=[3.0, 3.0],
        static_pressure_points=[1.0, 1.0],
        motor_brackets=[MotorBracket(hp=5.0, max_bhp=2.0)],
        heavy_duty_type="W10-10BP",
    )
    return {"10-10B": heavy, "W10-10BL": other}


def test_five_hp_switches_to_heavy_duty(monkeypatch):
    monkeypatch.setattr(fans, "get_fan_candidate", _heavy_fans().get)
    selection, warnings = FanSelectionEngine().select("Trane - Voyager A", 3000)
    assert selection.motor_hp == 5.0
    assert selection.fan_type == "10-10R"
    assert selection.motor.shaft == "1-1/8"
    assert warnings == []


def test_oversized_motor_warning(monkeypatch):
    monkeypatch.setattr(fans, "get_fan_candidate", _heavy_fans().get)
    selection, warnings = FanSelectionEngine().select("Trane - Voyager A", 5000)
    assert selection.motor_hp == 5.0
    assert WarningKind.OVERSIZED_MOTOR in [w.kind for w in warnings]


def test_equal_bhp_prefers_second_candidate(monkeypatch):
    same = dict(rpm=900.0, cfm_points=[2000, 3000], bhp_points=[0.3, 0.4],
                static_pressure_points=[1.0, 1.0], motor_brackets=[MotorBracket(hp=1.0, max_bhp=1.0)])
    pair = {
        "10-10B": FanCandidate(fan_type="10-10B", **same),
        "W10-10BL": FanCandidate(fan_type="W10-10BL", **same),
    }
    monkeypatch.setattr(fans, "get_fan_candidate", pair.get)
    selection, _ = FanSelectionEngine().select("Trane - Voyager B", 2500)
    assert selection.fan_type == "W10-10BL"


def test_dynamic_drive_sizing():
    selection, warnings = FanSelectionEngine(dynamic_drive=True).select("Trane - Voyager C", 3000)
    assert selection.drive.sized
    assert selection.drive.driver.value == "1VM45X7/8"
    assert selection.drive.driven.value == "MB83X3/4"
    assert selection.drive.belt.value == "BX34"
    assert warnings == []


def test_dynamic_drive_falls_back_for_large_shaft(monkeypatch):
    monkeypatch.setattr(fans, "get_fan_candidate", _heavy_fans().get)
    selection, warnings = FanSelectionEngine(dynamic_drive=True).select("Trane - Voyager A", 3000)
    assert selection.drive == STANDARD_DRIVE
    assert WarningKind.DRIVE_SIZING_FALLBACK in [w.kind for w in warnings]
