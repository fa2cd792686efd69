"""
schemas/transport.py
--------------------
Dataclass definitions for Directions Provider results and the Transport Mode
Advisor's comparison output.

A provider answers every (origin, destination, mode) query with either a
RouteResult or a RouteUnavailable, never by raising.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from schemas.place import LatLng


class TravelMode(str, Enum):
    WALKING   = "walking"
    DRIVING   = "driving"
    TRANSIT   = "transit"
    BICYCLING = "bicycling"


@dataclass
class TransitDetails:
    """Line/stop details attached to a transit step."""
    line_name: str = ""
    line_short_name: str = ""
    vehicle: str = ""
    departure_stop: str = ""
    arrival_stop: str = ""
    departure_time: str = ""
    arrival_time: str = ""
    headsign: str = ""
    num_stops: int = 0


@dataclass
class Step:
    """One turn-by-turn instruction of a route."""
    step_number: int
    instruction: str
    distance_meters: int = 0
    duration_seconds: int = 0
    travel_mode: str = ""
    start_location: Optional[LatLng] = None
    end_location: Optional[LatLng] = None
    transit: Optional[TransitDetails] = None


@dataclass
class Fare:
    value: float
    currency: str = ""
    text: str = ""


@dataclass
class RouteResult:
    """A successful route for one travel mode."""
    mode: TravelMode
    duration_seconds: int
    distance_meters: int
    steps: list[Step] = field(default_factory=list)
    fare: Optional[Fare] = None
    summary: str = ""
    warnings: list[str] = field(default_factory=list)
    source: str = ""          # "backend" | "google" | "heuristic" | caller-defined

    @property
    def distance_km(self) -> float:
        return self.distance_meters / 1000.0

    @property
    def duration_minutes(self) -> float:
        return self.duration_seconds / 60.0


@dataclass
class RouteUnavailable:
    """No route could be produced for this mode."""
    mode: TravelMode
    reason: str = ""


RouteOutcome = Union[RouteResult, RouteUnavailable]


@dataclass
class ModeSummary:
    """Per-mode figures used in the comparison table."""
    mode: TravelMode
    duration_seconds: int
    distance_meters: int
    estimated_cost: float
    eco_score: float
    pros: list[str] = field(default_factory=list)
    cons: list[str] = field(default_factory=list)


@dataclass
class ModeComparison:
    fastest: TravelMode
    shortest: TravelMode
    cheapest: TravelMode
    most_eco_friendly: TravelMode
    summary: dict[str, ModeSummary] = field(default_factory=dict)


@dataclass
class TransportRecommendation:
    mode: TravelMode
    reason: str
    confidence: float          # 0.0–0.95
    score: float = 0.0


@dataclass
class TransportComparison:
    """Full output of TransportModeAdvisor.compare()."""
    origin: LatLng
    destination: LatLng
    routes: dict[str, RouteResult] = field(default_factory=dict)
    unavailable: dict[str, str] = field(default_factory=dict)   # mode → reason
    comparison: Optional[ModeComparison] = None
    recommendation: Optional[TransportRecommendation] = None
    status: str = "ok"                                           # "ok" | "unavailable"
    generated_at: str = ""


@dataclass
class ModeEta:
    mode: TravelMode
    eta_seconds: int
    eta_text: str


@dataclass
class TravelLeg:
    """Recommended way to reach the next stop of a day."""
    mode: TravelMode
    duration_seconds: int
    distance_meters: int
    reason: str = ""
