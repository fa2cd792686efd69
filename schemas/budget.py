"""
schemas/budget.py
-----------------
Dataclass definitions for budget estimation inputs and outputs.

Every preference field is optional: the estimator applies defaults and only
lowers its confidence when a field is missing.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from schemas.place import Destination, Place


class CityTier(str, Enum):
    TIER1 = "tier1"   # expensive
    TIER2 = "tier2"   # moderate
    TIER3 = "tier3"   # budget-friendly


class ComfortLevel(str, Enum):
    BUDGET   = "budget"
    MODERATE = "moderate"
    LUXURY   = "luxury"


class DiningStyle(str, Enum):
    STANDARD      = "standard"
    STREET_FOOD   = "street_food"
    FINE_DINING   = "fine_dining"
    SELF_CATERING = "self_catering"


class LocalTransport(str, Enum):
    MIXED            = "mixed"
    PUBLIC_TRANSPORT = "public_transport"
    WALKING          = "walking"
    TAXI             = "taxi"
    UBER             = "uber"
    RENTAL_CAR       = "rental_car"


class AlignmentStatus(str, Enum):
    UNDER_BUDGET = "under_budget"
    ON_BUDGET    = "on_budget"
    OVER_BUDGET  = "over_budget"
    UNKNOWN      = "unknown"


@dataclass
class TripSpec:
    """Raw trip parameters. duration_days=None means "not known yet"."""
    destination: Union[Destination, str, None] = None
    duration_days: Optional[int] = None
    travelers: int = 1
    places: list[Place] = field(default_factory=list)

    @property
    def destination_name(self) -> str:
        if isinstance(self.destination, Destination):
            return self.destination.name
        return self.destination or ""


@dataclass
class BudgetPreferences:
    accommodation_level: Optional[ComfortLevel] = None
    food_level: Optional[ComfortLevel] = None
    dining_style: Optional[DiningStyle] = None
    transport_mode: Optional[LocalTransport] = None
    budget_total: Optional[float] = None      # caller's target for the whole trip


# ── Breakdown categories ──────────────────────────────────────────────────────

@dataclass
class AccommodationEstimate:
    total: float
    per_night: float
    nights: int
    rooms: int
    base_rate: float
    level: ComfortLevel


@dataclass
class FoodEstimate:
    total: float
    per_day: float          # whole group
    per_person: float       # per person per day
    level: ComfortLevel
    dining_style: DiningStyle
    multiplier: float
    meals: dict[str, float] = field(default_factory=dict)   # breakfast/lunch/dinner per person-day


@dataclass
class TransportationEstimate:
    total: float
    per_day: float
    mode: LocalTransport
    daily_transport: float
    inter_attraction: float
    airport_transfer: float


@dataclass
class ActivitiesEstimate:
    total: float
    per_activity: float
    amounts: dict[str, float] = field(default_factory=dict)   # bucket → per-person sum
    counts: dict[str, int] = field(default_factory=dict)      # bucket → number of places


@dataclass
class MiscellaneousEstimate:
    total: float
    per_day: float
    split: dict[str, float] = field(default_factory=dict)     # shopping/tips/emergency/souvenirs


@dataclass
class BudgetBreakdown:
    accommodation: AccommodationEstimate
    food: FoodEstimate
    transportation: TransportationEstimate
    activities: ActivitiesEstimate
    miscellaneous: MiscellaneousEstimate

    def category(self, name: str):
        return getattr(self, name, None) if name in BREAKDOWN_CATEGORIES else None


BREAKDOWN_CATEGORIES: tuple[str, ...] = (
    "accommodation", "food", "transportation", "activities", "miscellaneous",
)


@dataclass
class BudgetAlignment:
    status: AlignmentStatus
    message: str
    difference: Optional[float] = None     # absolute amount
    percentage: Optional[float] = None     # absolute percent of the target


@dataclass
class CostRecommendation:
    category: str
    type: str                  # "cost_saving" | "upgrade"
    message: str
    savings: Optional[float] = None
    added_cost: Optional[float] = None


@dataclass
class BudgetEstimate:
    total: float
    per_person: float
    per_day: float
    confidence: float
    breakdown: BudgetBreakdown
    budget_alignment: BudgetAlignment
    recommendations: list[CostRecommendation] = field(default_factory=list)
    city_tier: CityTier = CityTier.TIER3
    currency: str = ""


@dataclass
class CategoryDetail:
    """One category of an estimate with its share of the total."""
    category: str
    total: float
    percentage: float
    recommendations: list[CostRecommendation] = field(default_factory=list)


@dataclass
class BudgetOptionComparison:
    option: int                      # 1-based
    preferences: BudgetPreferences
    estimate: BudgetEstimate
    savings: float = 0.0             # relative to option 1 (positive = cheaper)
