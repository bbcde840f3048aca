"""Unit tonnage and EER once the ERV takes part of the cooling load."""
from __future__ import annotations

from typing import Optional

from .catalog import unit_nominal_tons
from .models import UnitPerformance


def adjust_unit_performance(
    unit_tons: Optional[float],
    unit_eer: Optional[float],
    erv_cooling_tons: Optional[float],
    unit_model: Optional[str] = None,
) -> UnitPerformance:
    """Tonnage and EER with the ERV, both rounded to 0.1.

    The unit's stated tonnage falls back to the catalog nominal value for its model.
    EER scales with the tonnage reduction; with no remaining tonnage it is left as stated.
    """
    original_tons = unit_tons if unit_tons is not None else unit_nominal_tons(unit_model)
    if original_tons is None:
        return UnitPerformance(original_eer=unit_eer)

    adjusted = max(0.0, round(original_tons - (erv_cooling_tons or 0.0), 1))
    eer = None
    if unit_eer is not None:
        eer = round(unit_eer * original_tons / adjusted, 1) if adjusted > 0 else round(unit_eer, 1)
    return UnitPerformance(
        original_tons=original_tons,
        original_eer=unit_eer,
        tonnage_with_erv=adjusted,
        eer_with_erv=eer,
    )
