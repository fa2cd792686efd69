"""
schemas/itinerary.py
--------------------
Dataclass definitions for the clustering, scheduling and itinerary structures.

Clusters, day allocations and itineraries are rebuilt from scratch on every
planning run; nothing here is mutated after the run that produced it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from schemas.budget import BudgetEstimate
from schemas.place import Destination, LatLng, Place
from schemas.transport import TravelLeg


class Pace(str, Enum):
    RELAXED  = "relaxed"
    MODERATE = "moderate"
    PACKED   = "packed"


class TimeBlock(str, Enum):
    MORNING   = "Morning"
    MIDDAY    = "Midday"
    AFTERNOON = "Afternoon"
    EVENING   = "Evening"


@dataclass
class Cluster:
    """
    A spatially co-located group of places.
    The centroid is derived from the full member list every time it is read.
    """
    places: list[Place] = field(default_factory=list)

    @property
    def centroid(self) -> LatLng:
        if not self.places:
            return LatLng(0.0, 0.0)
        n = len(self.places)
        return LatLng(
            lat=sum(p.location.lat for p in self.places) / n,
            lng=sum(p.location.lng for p in self.places) / n,
        )


@dataclass
class DayAllocation:
    """Day Scheduler output: which places go on which day, not yet ordered."""
    day: int
    theme: str = ""
    places: list[Place] = field(default_factory=list)


@dataclass
class ScheduledPlace:
    """A place positioned within a day."""
    place: Place
    time: str                          # "HH:MM"
    time_block: TimeBlock
    estimated_duration_minutes: int
    order: int                         # 1-based
    travel_to_next: Optional[TravelLeg] = None


@dataclass
class DayPlan:
    """One day's ordered, timed stops."""
    day: int
    theme: str = ""
    places: list[ScheduledPlace] = field(default_factory=list)
    estimated_duration_minutes: int = 0  # sum of stop durations
    travel_distance_km: float = 0.0     # straight-line sum over consecutive stops
    travel_minutes: float = 0.0         # structural overhead between stops
    exceeds_soft_cap: bool = False      # advisory, never enforced
    over_pace_cap: bool = False         # more places than the pace allows (wraparound)

    @property
    def place_ids(self) -> list[str]:
        return [sp.place.place_id for sp in self.places]


@dataclass
class ItineraryMetadata:
    total_places: int = 0
    average_places_per_day: float = 0.0
    estimated_budget: Optional[BudgetEstimate] = None
    generated_at: str = ""              # ISO-8601 timestamp
    pace: Pace = Pace.MODERATE
    overflow_days: list[int] = field(default_factory=list)


@dataclass
class Itinerary:
    """
    Top-level output of the planning pipeline.
    Holds exactly one DayPlan per trip day, 1..N, including empty days.
    """
    itinerary_id: str = ""
    destination: Optional[Destination] = None
    trip_length_days: int = 0
    days: list[DayPlan] = field(default_factory=list)
    metadata: ItineraryMetadata = field(default_factory=ItineraryMetadata)

    def all_places(self) -> list[Place]:
        return [sp.place for day in self.days for sp in day.places]

    def find_day(self, place_id: str) -> Optional[DayPlan]:
        for day in self.days:
            if place_id in day.place_ids:
                return day
        return None
