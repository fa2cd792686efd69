"""
schemas/place.py
----------------
Dataclass definitions for points of interest as returned by the Place Directory.

Place records are immutable once fetched: the planner only reorders and wraps
them, it never edits a Place in place.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class LatLng:
    """A coordinate pair in decimal degrees."""
    lat: float
    lng: float


@dataclass(frozen=True)
class Place:
    """
    A single point of interest.

    `types` is an ordered tag list (e.g. ("museum", "tourist_attraction")).
    The first tag is treated as the primary category.
    """
    place_id: str
    name: str
    location: LatLng
    types: tuple[str, ...] = ()
    price_level: Optional[int] = None     # 0–4 ordinal
    rating: Optional[float] = None        # 0–5
    address: str = ""


@dataclass(frozen=True)
class PlaceDetails(Place):
    """Place + the extended fields returned by a details lookup."""
    opening_hours: tuple[str, ...] = ()
    website: str = ""
    phone: str = ""
    user_ratings_total: int = 0
    raw: dict = field(default_factory=dict, compare=False, hash=False, repr=False)


@dataclass(frozen=True)
class Destination:
    """Trip destination. Location is optional; the planner only needs the name."""
    name: str
    location: Optional[LatLng] = None
