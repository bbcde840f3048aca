"""altitude.py – location → altitude → atmospheric pressure.

The city table ships with the package and is read once; after that every lookup is an
in-memory exact-name match.
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from .exceptions import UnknownLocationError
from .models import AtmosphericContext, CalculationWarning, WarningKind
from .psychrometrics import atmospheric_pressure

logger = logging.getLogger(__name__)

CITY_TABLE_PATH = Path(__file__).parent / "data" / "city_altitudes.json"


@lru_cache(maxsize=1)
def load_city_altitudes() -> Mapping[str, float]:
    """Load the city → altitude (ft) table from the packaged JSON file."""
    with open(CITY_TABLE_PATH, "r", encoding="utf-8") as f:
        rows = json.load(f)
    table = {row["city"]: float(row["altitude"]) for row in rows}
    logger.debug("Loaded %d city altitudes", len(table))
    return MappingProxyType(table)


def available_locations() -> List[str]:
    return sorted(load_city_altitudes())


class AltitudeResolver:
    """Resolves an AtmosphericContext for a location.

    Parameters
    ----------
    strict : bool
        Reject unresolved locations with UnknownLocationError instead of falling back
        to sea level.
    table : Mapping[str, float], optional
        City → altitude table; defaults to the packaged one.
    """

    def __init__(self, strict: bool = False, table: Optional[Mapping[str, float]] = None) -> None:
        self.strict = strict
        self._table = table if table is not None else load_city_altitudes()

    def lookup_altitude(self, location: Optional[str]) -> Optional[float]:
        if not location:
            return None
        return self._table.get(location)

    def resolve(
        self, location: Optional[str], altitude_override: Optional[float] = None
    ) -> Tuple[AtmosphericContext, List[CalculationWarning]]:
        """Return the atmospheric context plus any fallback warnings."""
        if altitude_override is not None:
            return (
                AtmosphericContext(
                    location=location,
                    altitude_ft=altitude_override,
                    pressure_psia=atmospheric_pressure(altitude_override),
                    source="manual",
                ),
                [],
            )

        altitude = self.lookup_altitude(location)
        if altitude is not None:
            return (
                AtmosphericContext(
                    location=location,
                    altitude_ft=altitude,
                    pressure_psia=atmospheric_pressure(altitude),
                    source="city",
                ),
                [],
            )

        if self.strict:
            raise UnknownLocationError(location or "")

        logger.warning("Location %r not found; assuming sea level", location)
        warning = CalculationWarning(
            kind=WarningKind.UNRESOLVED_LOCATION,
            message=f"Location {location!r} not found; altitude assumed 0 ft (sea level)",
        )
        return (
            AtmosphericContext(
                location=location,
                altitude_ft=0.0,
                pressure_psia=atmospheric_pressure(0.0),
                resolved=False,
                source="default",
            ),
            [warning],
        )
