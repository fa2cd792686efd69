"""
modules/planning/budget_estimator.py
--------------------------------------
Tiered trip cost model.

Steps:
  1. City tier from the destination name (cost_tables.determine_city_tier).
  2. Five additive categories, each rounded to cents:
       accommodation  rate[level] × nights × ceil(travelers / 2)
       food           rate[level] × dining multiplier × nights × travelers
       transportation (daily mode rate + inter-attraction) × travelers × nights
                      + airport transfer × travelers
       activities     Σ tier rate[price bucket] × travelers
       miscellaneous  flat daily rate × nights × travelers
  3. total = sum of the rounded category totals.
  4. Confidence, alignment with the caller's target, rule-based recommendations.

Missing preferences never fail the estimate: defaults are applied and the
confidence drops instead. nights = trip duration in days.
"""

from __future__ import annotations
from enum import Enum
from typing import TypeVar
import logging
import math

import config
from schemas.budget import (
    AccommodationEstimate, ActivitiesEstimate, AlignmentStatus, BudgetAlignment,
    BudgetBreakdown, BudgetEstimate, BudgetOptionComparison, BudgetPreferences,
    CategoryDetail, ComfortLevel, CostRecommendation, DiningStyle, FoodEstimate,
    LocalTransport, MiscellaneousEstimate, TransportationEstimate, TripSpec,
)
from schemas.itinerary import Itinerary
from schemas.place import Place
from modules.memory.ttl_cache import TTLCache, make_cache_key
from modules.planning.cost_tables import (
    AIRPORT_TRANSFER_PER_TRAVELER, COST_DATABASE, DINING_MULTIPLIERS,
    INTER_ATTRACTION_TAXI_SHARE, MEAL_SPLIT, MISC_DAILY_PER_TRAVELER, MISC_SPLIT,
    RENTAL_CAR_DAILY, RIDES_PER_DAY, WALKING_TRANSPORT_FACTOR, TierCosts,
    determine_city_tier,
)

log = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

# Alignment band: within ±20 % of the target counts as on budget.
ALIGNMENT_THRESHOLD_PCT = 20.0
MAX_CONFIDENCE = 0.95


def _coerce(enum_cls: type[E], value: object, default: E) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        return default


def _cents(value: float) -> float:
    return round(value, 2)


def price_bucket(place: Place) -> str:
    level = place.price_level
    if not level:
        return "free"
    if level == 1:
        return "budget"
    if level == 2:
        return "moderate"
    return "premium"


class BudgetEstimator:
    """
    Estimates the cost of a trip and compares it against the caller's target.
    Results are cached per (trip, preferences) for the cache's TTL.
    """

    def __init__(self, cache: TTLCache | None = None, currency: str = config.CURRENCY_UNIT):
        self.cache = cache if cache is not None else TTLCache(config.BUDGET_CACHE_TTL_SECONDS)
        self.currency = currency

    # ── Public entry points ───────────────────────────────────────────────────

    def estimate(self, trip: TripSpec, preferences: BudgetPreferences | None = None) -> BudgetEstimate:
        """
        Args:
            trip:        Destination, duration, travelers and selected places.
            preferences: Optional comfort levels, dining style, transport mode, target.

        Returns:
            BudgetEstimate whose category totals sum to `total`.
        """
        preferences = preferences or BudgetPreferences()
        key = make_cache_key("budget", trip, preferences)
        cached = self.cache.get(key)
        if cached is not None:
            log.debug("Budget estimate cache hit for %s", trip.destination_name)
            return cached

        estimate = self._compute(trip, preferences)
        self.cache.set(key, estimate)
        log.info(
            "Estimated %s %.2f for %s (%s, %d traveler(s))",
            estimate.currency, estimate.total, trip.destination_name or "unknown destination",
            estimate.city_tier.value, max(trip.travelers, 1),
        )
        return estimate

    def estimate_for_itinerary(
        self,
        itinerary: Itinerary,
        travelers: int = 1,
        preferences: BudgetPreferences | None = None,
    ) -> BudgetEstimate:
        trip = TripSpec(
            destination=itinerary.destination,
            duration_days=itinerary.trip_length_days or None,
            travelers=travelers,
            places=itinerary.all_places(),
        )
        return self.estimate(trip, preferences)

    def compare_options(
        self,
        trip: TripSpec,
        options: list[BudgetPreferences],
    ) -> list[BudgetOptionComparison]:
        """Estimate each preference set; savings are measured against option 1."""
        comparisons: list[BudgetOptionComparison] = []
        for idx, prefs in enumerate(options):
            est = self.estimate(trip, prefs)
            savings = _cents(comparisons[0].estimate.total - est.total) if comparisons else 0.0
            comparisons.append(BudgetOptionComparison(
                option=idx + 1, preferences=prefs, estimate=est, savings=savings,
            ))
        return comparisons

    @staticmethod
    def detailed_breakdown(estimate: BudgetEstimate, category: str) -> CategoryDetail | None:
        part = estimate.breakdown.category(category)
        if part is None:
            return None
        share = (part.total / estimate.total * 100) if estimate.total else 0.0
        return CategoryDetail(
            category=category,
            total=part.total,
            percentage=round(share, 2),
            recommendations=[r for r in estimate.recommendations if r.category == category],
        )

    # ── Core computation ──────────────────────────────────────────────────────

    def _compute(self, trip: TripSpec, prefs: BudgetPreferences) -> BudgetEstimate:
        tier = determine_city_tier(trip.destination_name)
        costs = COST_DATABASE[tier]

        nights = trip.duration_days if trip.duration_days and trip.duration_days > 0 else config.DEFAULT_TRIP_DAYS
        travelers = max(int(trip.travelers or 1), 1)

        accommodation_level = _coerce(ComfortLevel, prefs.accommodation_level, ComfortLevel.MODERATE)
        food_level = _coerce(ComfortLevel, prefs.food_level, ComfortLevel.MODERATE)
        dining = _coerce(DiningStyle, prefs.dining_style, DiningStyle.STANDARD)
        transport = _coerce(LocalTransport, prefs.transport_mode, LocalTransport.MIXED)

        breakdown = BudgetBreakdown(
            accommodation=self._accommodation(costs, nights, travelers, accommodation_level),
            food=self._food(costs, nights, travelers, food_level, dining),
            transportation=self._transportation(costs, nights, travelers, trip.places, transport),
            activities=self._activities(costs, trip.places, travelers),
            miscellaneous=self._miscellaneous(nights, travelers),
        )
        total = _cents(
            breakdown.accommodation.total + breakdown.food.total
            + breakdown.transportation.total + breakdown.activities.total
            + breakdown.miscellaneous.total
        )

        return BudgetEstimate(
            total=total,
            per_person=_cents(total / travelers),
            per_day=_cents(total / nights),
            confidence=self._confidence(trip, prefs),
            breakdown=breakdown,
            budget_alignment=self._alignment(total, prefs.budget_total),
            recommendations=self._recommendations(total, accommodation_level, food_level, transport, prefs),
            city_tier=tier,
            currency=self.currency,
        )

    @staticmethod
    def _accommodation(costs: TierCosts, nights: int, travelers: int, level: ComfortLevel) -> AccommodationEstimate:
        base_rate = costs.accommodation[level]
        rooms = math.ceil(travelers / 2)     # two travelers share a room
        return AccommodationEstimate(
            total=_cents(base_rate * nights * rooms),
            per_night=_cents(base_rate * rooms),
            nights=nights,
            rooms=rooms,
            base_rate=base_rate,
            level=level,
        )

    @staticmethod
    def _food(
        costs: TierCosts, nights: int, travelers: int, level: ComfortLevel, dining: DiningStyle,
    ) -> FoodEstimate:
        multiplier = DINING_MULTIPLIERS[dining.value]
        daily = costs.food[level] * multiplier
        return FoodEstimate(
            total=_cents(daily * nights * travelers),
            per_day=_cents(daily * travelers),
            per_person=_cents(daily),
            level=level,
            dining_style=dining,
            multiplier=multiplier,
            meals={meal: _cents(daily * share) for meal, share in MEAL_SPLIT.items()},
        )

    @staticmethod
    def _transportation(
        costs: TierCosts, nights: int, travelers: int, places: list[Place], mode: LocalTransport,
    ) -> TransportationEstimate:
        if mode == LocalTransport.WALKING:
            daily = costs.transport_daily * WALKING_TRANSPORT_FACTOR
        elif mode == LocalTransport.TAXI:
            daily = costs.taxi_per_ride * RIDES_PER_DAY
        elif mode == LocalTransport.UBER:
            daily = costs.uber_per_ride * RIDES_PER_DAY
        elif mode == LocalTransport.RENTAL_CAR:
            daily = RENTAL_CAR_DAILY
        else:
            daily = costs.transport_daily

        places_per_day = len(places) / nights
        inter_attraction = places_per_day * costs.taxi_per_ride * INTER_ATTRACTION_TAXI_SHARE
        per_day = (daily + inter_attraction) * travelers
        airport = AIRPORT_TRANSFER_PER_TRAVELER * travelers

        return TransportationEstimate(
            total=_cents(per_day * nights + airport),
            per_day=_cents(per_day),
            mode=mode,
            daily_transport=_cents(daily * travelers * nights),
            inter_attraction=_cents(inter_attraction * travelers * nights),
            airport_transfer=_cents(airport),
        )

    @staticmethod
    def _activities(costs: TierCosts, places: list[Place], travelers: int) -> ActivitiesEstimate:
        amounts = {bucket: 0.0 for bucket in ("free", "budget", "moderate", "premium")}
        counts = {bucket: 0 for bucket in amounts}
        for place in places:
            bucket = price_bucket(place)
            amounts[bucket] += costs.activities[bucket]
            counts[bucket] += 1

        total = sum(amounts.values()) * travelers
        return ActivitiesEstimate(
            total=_cents(total),
            per_activity=_cents(total / max(len(places), 1)),
            amounts={k: _cents(v) for k, v in amounts.items()},
            counts=counts,
        )

    @staticmethod
    def _miscellaneous(nights: int, travelers: int) -> MiscellaneousEstimate:
        total = MISC_DAILY_PER_TRAVELER * nights * travelers
        return MiscellaneousEstimate(
            total=_cents(total),
            per_day=_cents(MISC_DAILY_PER_TRAVELER * travelers),
            split={k: _cents(total * share) for k, share in MISC_SPLIT.items()},
        )

    # ── Confidence, alignment, recommendations ────────────────────────────────

    @staticmethod
    def _confidence(trip: TripSpec, prefs: BudgetPreferences) -> float:
        confidence = 0.7
        if trip.destination_name:
            confidence += 0.1
        if trip.duration_days:
            confidence += 0.1
        if trip.places:
            confidence += 0.1
        if prefs.accommodation_level:
            confidence += 0.05
        if prefs.food_level:
            confidence += 0.05
        return round(min(confidence, MAX_CONFIDENCE), 2)

    @staticmethod
    def _alignment(estimate_total: float, target: float | None) -> BudgetAlignment:
        if not target or target <= 0:
            return BudgetAlignment(
                status=AlignmentStatus.UNKNOWN,
                message="No budget specified for comparison",
            )

        difference = target - estimate_total
        pct = difference / target * 100
        if pct > ALIGNMENT_THRESHOLD_PCT:
            status = AlignmentStatus.UNDER_BUDGET
            message = f"You're {round(abs(pct))}% under budget! Consider upgrading experiences."
        elif pct < -ALIGNMENT_THRESHOLD_PCT:
            status = AlignmentStatus.OVER_BUDGET
            message = f"You're {round(abs(pct))}% over budget. Consider cost-saving options."
        else:
            status = AlignmentStatus.ON_BUDGET
            message = "Your estimate aligns well with your budget!"

        return BudgetAlignment(
            status=status,
            message=message,
            difference=_cents(abs(difference)),
            percentage=round(abs(pct), 2),
        )

    @staticmethod
    def _recommendations(
        total: float,
        accommodation_level: ComfortLevel,
        food_level: ComfortLevel,
        transport: LocalTransport,
        prefs: BudgetPreferences,
    ) -> list[CostRecommendation]:
        recs: list[CostRecommendation] = []

        # Only explicit choices trigger advice; defaults are "moderate".
        if prefs.accommodation_level and accommodation_level == ComfortLevel.LUXURY:
            recs.append(CostRecommendation(
                category="accommodation", type="cost_saving",
                message="Consider moderate accommodation to save up to 50%",
                savings=_cents(total * 0.15),
            ))
        elif prefs.accommodation_level and accommodation_level == ComfortLevel.BUDGET:
            recs.append(CostRecommendation(
                category="accommodation", type="upgrade",
                message="Upgrade to moderate accommodation for better comfort",
                added_cost=_cents(total * 0.10),
            ))

        if prefs.food_level and food_level == ComfortLevel.LUXURY:
            recs.append(CostRecommendation(
                category="food", type="cost_saving",
                message="Mix fine dining with local eateries to save 30%",
                savings=_cents(total * 0.12),
            ))

        if transport in (LocalTransport.TAXI, LocalTransport.UBER):
            recs.append(CostRecommendation(
                category="transportation", type="cost_saving",
                message="Use public transport to save up to 70%",
                savings=_cents(total * 0.08),
            ))

        return recs
