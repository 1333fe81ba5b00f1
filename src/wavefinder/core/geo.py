from __future__ import annotations

from math import asin, cos, radians, sin, sqrt
from typing import Protocol

"""
Geospatial helpers.

A tiny geometry layer so travel estimation can do distance calculations
without pulling in heavier GIS dependencies.
"""

EARTH_RADIUS_KM = 6371.0


class LatLng(Protocol):
    """Anything with `lat`/`lng` attributes in decimal degrees."""

    lat: float
    lng: float


def haversine_km(a: LatLng, b: LatLng) -> float:
    """Compute great-circle distance in kilometers between two points."""
    lat1 = radians(a.lat)
    lng1 = radians(a.lng)
    lat2 = radians(b.lat)
    lng2 = radians(b.lng)

    dlat = lat2 - lat1
    dlng = lng2 - lng1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlng / 2) ** 2
    # Rounding noise can push h a hair past 1.0 for antipodal points.
    return 2 * EARTH_RADIUS_KM * asin(sqrt(min(1.0, h)))
