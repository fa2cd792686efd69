"""
modules/planning/cost_tables.py
---------------------------------
Per-tier unit costs and the curated city lists used by the Budget Estimator.

All amounts are in config.CURRENCY_UNIT, per unit stated next to each table:
    accommodation: per room per night
    food         : per person per day
    transport    : daily flat rate per person; taxi/uber per ride
    activities   : per person per place
"""

from __future__ import annotations
from dataclasses import dataclass

import config
from schemas.budget import CityTier, ComfortLevel


@dataclass(frozen=True)
class TierCosts:
    accommodation: dict[ComfortLevel, float]
    food: dict[ComfortLevel, float]
    transport_daily: float
    taxi_per_ride: float
    uber_per_ride: float
    activities: dict[str, float]          # free | budget | moderate | premium


COST_DATABASE: dict[CityTier, TierCosts] = {
    CityTier.TIER1: TierCosts(       # NYC, London, Tokyo ...
        accommodation={ComfortLevel.BUDGET: 80, ComfortLevel.MODERATE: 150, ComfortLevel.LUXURY: 300},
        food={ComfortLevel.BUDGET: 40, ComfortLevel.MODERATE: 70, ComfortLevel.LUXURY: 120},
        transport_daily=15, taxi_per_ride=3.5, uber_per_ride=2.8,
        activities={"free": 0, "budget": 15, "moderate": 30, "premium": 60},
    ),
    CityTier.TIER2: TierCosts(       # Barcelona, Prague ...
        accommodation={ComfortLevel.BUDGET: 50, ComfortLevel.MODERATE: 100, ComfortLevel.LUXURY: 200},
        food={ComfortLevel.BUDGET: 25, ComfortLevel.MODERATE: 45, ComfortLevel.LUXURY: 80},
        transport_daily=10, taxi_per_ride=2.5, uber_per_ride=2.0,
        activities={"free": 0, "budget": 10, "moderate": 20, "premium": 40},
    ),
    CityTier.TIER3: TierCosts(       # everywhere else
        accommodation={ComfortLevel.BUDGET: 25, ComfortLevel.MODERATE: 60, ComfortLevel.LUXURY: 120},
        food={ComfortLevel.BUDGET: 15, ComfortLevel.MODERATE: 25, ComfortLevel.LUXURY: 50},
        transport_daily=5, taxi_per_ride=1.5, uber_per_ride=1.2,
        activities={"free": 0, "budget": 5, "moderate": 15, "premium": 25},
    ),
}

TIER1_CITIES: tuple[str, ...] = (
    "new york", "london", "tokyo", "paris", "zurich", "geneva", "oslo",
    "copenhagen", "sydney", "singapore", "hong kong", "san francisco",
    "los angeles", "boston", "washington dc", "seattle", "vancouver",
)

TIER2_CITIES: tuple[str, ...] = (
    "barcelona", "madrid", "rome", "milan", "amsterdam", "berlin",
    "vienna", "prague", "dublin", "edinburgh", "stockholm", "helsinki",
    "toronto", "montreal", "chicago", "philadelphia", "miami", "las vegas",
)

DINING_MULTIPLIERS: dict[str, float] = {
    "standard":      1.0,
    "street_food":   0.7,
    "fine_dining":   1.5,
    "self_catering": 0.5,
}

MEAL_SPLIT: dict[str, float] = {"breakfast": 0.25, "lunch": 0.35, "dinner": 0.40}

MISC_DAILY_PER_TRAVELER: float = 20.0
MISC_SPLIT: dict[str, float] = {"shopping": 0.4, "tips": 0.2, "emergency": 0.2, "souvenirs": 0.2}

RIDES_PER_DAY: int = 10
WALKING_TRANSPORT_FACTOR: float = 0.3
RENTAL_CAR_DAILY: float = 40.0
INTER_ATTRACTION_TAXI_SHARE: float = 0.5
AIRPORT_TRANSFER_PER_TRAVELER: float = 50.0


def determine_city_tier(destination_name: str) -> CityTier:
    """
    Case-insensitive substring match against the curated lists, so
    "Paris, France" and "Greater London" both resolve to tier 1.
    """
    name = (destination_name or "").lower()
    if not name:
        return CityTier.TIER3
    if any(city in name for city in TIER1_CITIES + tuple(config.EXTRA_TIER1_CITIES)):
        return CityTier.TIER1
    if any(city in name for city in TIER2_CITIES + tuple(config.EXTRA_TIER2_CITIES)):
        return CityTier.TIER2
    return CityTier.TIER3
