"""
schemas/api.py
--------------
Request bodies of the HTTP surface. Validated by pydantic, then converted to
the engine's dataclasses with the to_*() helpers.
"""

from __future__ import annotations
from typing import List, Optional

from pydantic import BaseModel, Field

import config
from schemas.budget import (
    BudgetPreferences, ComfortLevel, DiningStyle, LocalTransport, TripSpec,
)
from schemas.itinerary import Pace
from schemas.place import Destination, LatLng, Place
from schemas.transport import TravelMode


class LatLngModel(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    def to_latlng(self) -> LatLng:
        return LatLng(self.lat, self.lng)


class PlaceModel(BaseModel):
    place_id: str
    name: str = ""
    location: LatLngModel
    types: List[str] = []
    price_level: Optional[int] = Field(default=None, ge=0, le=4)
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    address: str = ""

    def to_place(self) -> Place:
        return Place(
            place_id=self.place_id,
            name=self.name,
            location=self.location.to_latlng(),
            types=tuple(self.types),
            price_level=self.price_level,
            rating=self.rating,
            address=self.address,
        )


class BudgetPreferencesModel(BaseModel):
    accommodation_level: Optional[ComfortLevel] = None
    food_level: Optional[ComfortLevel] = None
    dining_style: Optional[DiningStyle] = None
    transport_mode: Optional[LocalTransport] = None
    budget_total: Optional[float] = Field(default=None, ge=0)

    def to_preferences(self) -> BudgetPreferences:
        return BudgetPreferences(
            accommodation_level=self.accommodation_level,
            food_level=self.food_level,
            dining_style=self.dining_style,
            transport_mode=self.transport_mode,
            budget_total=self.budget_total,
        )


class ItineraryRequest(BaseModel):
    destination: str
    places: List[PlaceModel] = []
    trip_length_days: int = Field(default=1, ge=0)
    pace: Optional[Pace] = None
    travelers: int = Field(default=1, ge=1)
    preferences: Optional[BudgetPreferencesModel] = None


class BudgetRequest(BaseModel):
    destination: Optional[str] = None
    duration_days: Optional[int] = Field(default=None, ge=0)
    travelers: int = Field(default=1, ge=1)
    places: List[PlaceModel] = []
    preferences: Optional[BudgetPreferencesModel] = None

    def to_trip(self) -> TripSpec:
        return TripSpec(
            destination=Destination(self.destination) if self.destination else None,
            duration_days=self.duration_days,
            travelers=self.travelers,
            places=[p.to_place() for p in self.places],
        )


class TransportCompareRequest(BaseModel):
    origin: LatLngModel
    destination: LatLngModel
    modes: List[TravelMode] = Field(
        default_factory=lambda: [TravelMode(m) for m in config.DEFAULT_TRANSPORT_MODES]
    )
