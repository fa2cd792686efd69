"""
modules/tool_usage/distance_tool.py
-------------------------------------
Arithmetic tool: great-circle distance between two geographic coordinates.
Local computation, no external API required.

Inputs are not validated: NaN coordinates propagate to a NaN distance, so
callers must validate coordinates upstream.
"""

from __future__ import annotations
import math

from schemas.place import LatLng


# Earth radius constants
_EARTH_RADIUS_KM = 6371.0
_KM_TO_MILES = 0.621371


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Compute great-circle distance between two points using the Haversine formula.

    Args:
        lat1, lon1: Coordinates of point A (decimal degrees).
        lat2, lon2: Coordinates of point B (decimal degrees).

    Returns:
        Distance in kilometres.
    """
    r = _EARTH_RADIUS_KM
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lam = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    # Rounding can push `a` a hair above 1 for antipodal points.
    return 2 * r * math.asin(math.sqrt(min(a, 1.0)))


def distance_km(a: LatLng, b: LatLng) -> float:
    """Haversine distance between two LatLng values, in kilometres."""
    return haversine_km(a.lat, a.lng, b.lat, b.lng)


class DistanceTool:
    """
    Wraps distance calculation logic.
    Provides a consistent interface matching the Tool-usage Module pattern.
    """

    def __init__(self, unit: str = "km"):
        self.unit = unit if unit in ("km", "miles") else "km"

    def calculate(self, a: LatLng, b: LatLng) -> float:
        """
        Compute distance between two geographic points.

        Returns:
            Distance in self.unit.
        """
        km = distance_km(a, b)
        if self.unit == "miles":
            return km * _KM_TO_MILES
        return km

    def path_length(self, points: list[LatLng]) -> float:
        """Sum of leg distances along an ordered list of points."""
        return sum(self.calculate(a, b) for a, b in zip(points, points[1:]))
