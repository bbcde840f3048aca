import pytest

from erv_service.models import InputRecord


@pytest.fixture
def design_inputs():
    """Cooling-only design day used across the engine tests."""
    return {
        "oa_dry_bulb_cooling": 95.0,
        "oa_wet_bulb_cooling": 78.0,
        "ra_dry_bulb_cooling": 75.0,
        "ra_wet_bulb_cooling": 62.5,
        "supply_air_cfm": 5600.0,
        "outdoor_air_cfm": 1200.0,
        "erv_size_selection": "ERC-4136",
        "unit_model": "Trane - Voyager C",
        "location": "Miami, FL",
    }


@pytest.fixture
def design_record(design_inputs):
    return InputRecord(**design_inputs)
