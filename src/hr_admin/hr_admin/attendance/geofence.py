"""Office-proximity check used before marking attendance.

The check is advisory: it trusts whatever coordinates the client reports.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..core.constants import (
    DEFAULT_OFFICE_LAT,
    DEFAULT_OFFICE_LNG,
    DEFAULT_OFFICE_RADIUS_M,
    EARTH_RADIUS_M,
)
from ..core.enums import WorkLocation
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class OfficeLocation:
    lat: float = DEFAULT_OFFICE_LAT
    lng: float = DEFAULT_OFFICE_LNG
    allowed_radius_m: float = DEFAULT_OFFICE_RADIUS_M
    enforce: bool = True

    @classmethod
    def from_settings(cls, settings) -> "OfficeLocation":
        return cls(
            lat=float(getattr(settings, "OFFICE_LAT", DEFAULT_OFFICE_LAT)),
            lng=float(getattr(settings, "OFFICE_LNG", DEFAULT_OFFICE_LNG)),
            allowed_radius_m=float(getattr(settings, "OFFICE_RADIUS_M", DEFAULT_OFFICE_RADIUS_M)),
            enforce=bool(getattr(settings, "ENFORCE_LOCATION_CHECK", True)),
        )


@dataclass(frozen=True)
class ProximityResult:
    within_range: bool
    distance_m: int


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters between two coordinates."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def round_meters(distance: float) -> int:
    """Whole meters, halves rounded up (2.5 -> 3)."""
    return int(math.floor(distance + 0.5))


def validate_coordinates(lat: Optional[float], lng: Optional[float]) -> None:
    if lat is None or lng is None:
        return
    if not (-90 <= lat <= 90):
        raise ValidationError("Latitude must be between -90 and 90")
    if not (-180 <= lng <= 180):
        raise ValidationError("Longitude must be between -180 and 180")


def check_proximity(lat: float, lng: float, office: OfficeLocation) -> ProximityResult:
    distance = haversine_distance(lat, lng, office.lat, office.lng)
    # Boundary is inclusive and compared before rounding.
    return ProximityResult(within_range=distance <= office.allowed_radius_m, distance_m=round_meters(distance))


def check_employee_proximity(
    work_location: WorkLocation,
    lat: float,
    lng: float,
    office: OfficeLocation,
) -> ProximityResult:
    """Apply the office radius only to in-office employees."""

    if work_location != WorkLocation.IN_OFFICE or not office.enforce:
        return ProximityResult(within_range=True, distance_m=0)
    return check_proximity(lat, lng, office)
