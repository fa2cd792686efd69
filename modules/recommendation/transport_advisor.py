"""
modules/recommendation/transport_advisor.py
---------------------------------------------
Transport Mode Advisor: compares travel modes between two points and
recommends one.

Fan-out:
  one Directions Provider query per requested mode, run concurrently with
  asyncio.gather(return_exceptions=True). A mode that raises or answers
  RouteUnavailable is recorded under `unavailable` and left out of the
  comparison; the others are unaffected. Zero successes → status
  "unavailable", no comparison, no recommendation.

Per successful mode:
  cost        walking / bicycling 0
              transit   fare if provided else max(2, km × 0.5)
              driving   km × 0.3
  eco score   walking 10, bicycling 9, transit 7, driving 3

Recommendation score = distance band + duration band + cost band + eco / 2
  distance  < 1 km   walking 10, others 5
            < 5 km   bicycling 10, transit 8, others 6
            ≥ 5 km   transit 10, driving 8, others 3
  duration  < 15 min 5, < 30 min 3, else 1
  cost      0 → 5, < 5 → 3, else 1

confidence = min(0.95, 0.5 + (best − runner-up) / 20); a single mode → 0.5.
Ties go to the mode requested first.
"""

from __future__ import annotations
from dataclasses import replace
from datetime import datetime, timezone
import asyncio
import inspect
import logging

import config
from schemas.itinerary import Itinerary
from schemas.place import LatLng
from schemas.transport import (
    ModeComparison, ModeEta, ModeSummary, RouteOutcome, RouteResult, TransportComparison,
    TransportRecommendation, TravelLeg, TravelMode,
)
from modules.memory.ttl_cache import TTLCache, make_cache_key
from modules.tool_usage.directions_tool import DirectionsProvider, build_directions_provider
from modules.tool_usage.time_tool import TimeTool

log = logging.getLogger(__name__)


ECO_SCORES: dict[TravelMode, float] = {
    TravelMode.WALKING:   10,
    TravelMode.BICYCLING: 9,
    TravelMode.TRANSIT:   7,
    TravelMode.DRIVING:   3,
}
DEFAULT_ECO_SCORE = 5

MODE_PROS: dict[TravelMode, list[str]] = {
    TravelMode.WALKING:   ["Free", "Healthy", "Eco-friendly", "See more details"],
    TravelMode.BICYCLING: ["Fast for short distances", "Eco-friendly", "Healthy", "Flexible"],
    TravelMode.TRANSIT:   ["Cost-effective", "No parking needed", "Relaxing", "Eco-friendly"],
    TravelMode.DRIVING:   ["Flexible timing", "Direct route", "Comfortable", "Good for groups"],
}
MODE_CONS: dict[TravelMode, list[str]] = {
    TravelMode.WALKING:   ["Slow for long distances", "Weather dependent", "Can be tiring"],
    TravelMode.BICYCLING: ["Weather dependent", "Need bike", "Traffic safety", "Limited storage"],
    TravelMode.TRANSIT:   ["Fixed schedules", "Potential delays", "Crowded", "Limited coverage"],
    TravelMode.DRIVING:   ["Parking costs", "Traffic", "Expensive", "Environmental impact"],
}

MIN_TRANSIT_FARE = 2.0
TRANSIT_COST_PER_KM = 0.5
DRIVING_COST_PER_KM = 0.3

SINGLE_MODE_CONFIDENCE = 0.5
MAX_CONFIDENCE = 0.95

ETA_MODES: list[str] = ["walking", "transit", "driving"]


# ── Per-mode figures ──────────────────────────────────────────────────────────

def estimate_cost(route: RouteResult) -> float:
    km = route.distance_km
    if route.mode == TravelMode.TRANSIT:
        return route.fare.value if route.fare else max(MIN_TRANSIT_FARE, km * TRANSIT_COST_PER_KM)
    if route.mode == TravelMode.DRIVING:
        return km * DRIVING_COST_PER_KM
    return 0.0


def eco_score(mode: TravelMode) -> float:
    return ECO_SCORES.get(mode, DEFAULT_ECO_SCORE)


def mode_score(route: RouteResult) -> float:
    km = route.distance_km
    minutes = route.duration_minutes
    mode = route.mode

    if km < 1:
        score = 10 if mode == TravelMode.WALKING else 5
    elif km < 5:
        score = 10 if mode == TravelMode.BICYCLING else 8 if mode == TravelMode.TRANSIT else 6
    else:
        score = 10 if mode == TravelMode.TRANSIT else 8 if mode == TravelMode.DRIVING else 3

    if minutes < 15:
        score += 5
    elif minutes < 30:
        score += 3
    else:
        score += 1

    cost = estimate_cost(route)
    score += 5 if cost == 0 else 3 if cost < 5 else 1

    return score + eco_score(mode) / 2


def recommendation_reason(route: RouteResult) -> str:
    km = route.distance_km
    if route.mode == TravelMode.WALKING and km < 1:
        return "Short distance - walking is healthy and free"
    if route.mode == TravelMode.BICYCLING and km < 5:
        return "Perfect distance for cycling - fast and eco-friendly"
    if route.mode == TravelMode.TRANSIT:
        return "Public transit offers good balance of cost and convenience"
    if route.mode == TravelMode.DRIVING:
        return "Driving provides flexibility and comfort for this route"
    return "Best overall option considering distance, time, and cost"


def _first_min(routes: list[RouteResult], key) -> TravelMode:
    best = routes[0]
    for r in routes[1:]:
        if key(r) < key(best):
            best = r
    return best.mode


# ── Advisor ───────────────────────────────────────────────────────────────────

class TransportModeAdvisor:
    """
    Multi-mode comparison over a Directions Provider.
    The provider may be synchronous (run in a worker thread) or async.
    """

    def __init__(
        self,
        provider: DirectionsProvider | None = None,
        cache: TTLCache | None = None,
    ):
        self.provider = provider or build_directions_provider()
        self.cache = cache if cache is not None else TTLCache(config.DIRECTIONS_CACHE_TTL_SECONDS)

    async def compare(
        self,
        origin: LatLng,
        destination: LatLng,
        modes: list[TravelMode | str] | None = None,
    ) -> TransportComparison:
        """
        Args:
            origin, destination: Endpoints.
            modes:               Requested modes in priority order
                                 (default config.DEFAULT_TRANSPORT_MODES).

        Returns:
            TransportComparison; status "unavailable" when no mode succeeded.
        """
        requested, unavailable = self._normalise_modes(modes)
        key = make_cache_key("directions", origin, destination, [m.value for m in requested],
                             sorted(unavailable))
        cached = self.cache.get(key)
        if cached is not None:
            log.debug("Transport comparison cache hit")
            return cached

        outcomes = await asyncio.gather(
            *[self._route(origin, destination, mode) for mode in requested],
            return_exceptions=True,
        )

        routes: dict[str, RouteResult] = {}
        for mode, outcome in zip(requested, outcomes):
            if isinstance(outcome, RouteResult):
                routes[mode.value] = outcome
            elif isinstance(outcome, BaseException):
                log.warning("Directions for %s raised: %s", mode.value, outcome)
                unavailable[mode.value] = str(outcome) or type(outcome).__name__
            else:
                reason = getattr(outcome, "reason", "") or "no route"
                log.warning("Directions for %s unavailable: %s", mode.value, reason)
                unavailable[mode.value] = reason

        result = TransportComparison(
            origin=origin,
            destination=destination,
            routes=routes,
            unavailable=unavailable,
            generated_at=datetime.now(timezone.utc).isoformat(),
        )
        successes = list(routes.values())
        if not successes:
            result.status = "unavailable"
            log.warning("No travel mode available between %s and %s", origin, destination)
            return result

        result.comparison = self._compare_modes(successes)
        result.recommendation = self._recommend(successes)
        self.cache.set(key, result)
        return result

    async def live_etas(
        self,
        origin: LatLng,
        destination: LatLng,
        modes: list[TravelMode | str] | None = None,
    ) -> list[ModeEta]:
        """ETA of every available mode, in requested order."""
        comparison = await self.compare(origin, destination, modes or ETA_MODES)
        return [
            ModeEta(mode=r.mode, eta_seconds=r.duration_seconds,
                    eta_text=TimeTool.format_duration(r.duration_seconds))
            for r in comparison.routes.values()
        ]

    async def annotate_itinerary(
        self,
        itinerary: Itinerary,
        modes: list[TravelMode | str] | None = None,
    ) -> Itinerary:
        """
        Returns a new Itinerary whose stops carry the recommended leg to the
        next stop of the same day. The last stop of a day gets no leg, and
        neither does a pair with no available mode.
        """
        pairs = [
            (d_idx, s_idx)
            for d_idx, day in enumerate(itinerary.days)
            for s_idx in range(len(day.places) - 1)
        ]
        comparisons = await asyncio.gather(*[
            self.compare(
                itinerary.days[d].places[s].place.location,
                itinerary.days[d].places[s + 1].place.location,
                modes,
            )
            for d, s in pairs
        ])

        legs: dict[tuple[int, int], TravelLeg] = {}
        for (d, s), comp in zip(pairs, comparisons):
            rec = comp.recommendation
            if rec is None:
                continue
            route = comp.routes[rec.mode.value]
            legs[(d, s)] = TravelLeg(
                mode=rec.mode,
                duration_seconds=route.duration_seconds,
                distance_meters=route.distance_meters,
                reason=rec.reason,
            )

        days = [
            replace(day, places=[
                replace(stop, travel_to_next=legs.get((d, s)))
                for s, stop in enumerate(day.places)
            ])
            for d, day in enumerate(itinerary.days)
        ]
        return replace(itinerary, days=days)

    # ── internals ─────────────────────────────────────────────────────────────

    @staticmethod
    def _normalise_modes(modes) -> tuple[list[TravelMode], dict[str, str]]:
        requested: list[TravelMode] = []
        unavailable: dict[str, str] = {}
        for raw in modes or config.DEFAULT_TRANSPORT_MODES:
            try:
                mode = TravelMode(raw)
            except ValueError:
                unavailable[str(raw)] = "unsupported travel mode"
                continue
            if mode not in requested:
                requested.append(mode)
        return requested, unavailable

    async def _route(self, origin: LatLng, destination: LatLng, mode: TravelMode) -> RouteOutcome:
        route_fn = self.provider.route
        if inspect.iscoroutinefunction(route_fn):
            return await route_fn(origin, destination, mode)
        outcome = await asyncio.to_thread(route_fn, origin, destination, mode)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        return outcome

    @staticmethod
    def _compare_modes(routes: list[RouteResult]) -> ModeComparison:
        summary: dict[str, ModeSummary] = {}
        for r in routes:
            summary[r.mode.value] = ModeSummary(
                mode=r.mode,
                duration_seconds=r.duration_seconds,
                distance_meters=r.distance_meters,
                estimated_cost=round(estimate_cost(r), 2),
                eco_score=eco_score(r.mode),
                pros=list(MODE_PROS.get(r.mode, [])),
                cons=list(MODE_CONS.get(r.mode, [])),
            )

        return ModeComparison(
            fastest=_first_min(routes, lambda r: r.duration_seconds),
            shortest=_first_min(routes, lambda r: r.distance_meters),
            cheapest=_first_min(routes, estimate_cost),
            most_eco_friendly=_first_min(routes, lambda r: -eco_score(r.mode)),
            summary=summary,
        )

    @staticmethod
    def _recommend(routes: list[RouteResult]) -> TransportRecommendation:
        scored = [(mode_score(r), r) for r in routes]

        best_score, best = scored[0]
        for score, r in scored[1:]:
            if score > best_score:
                best_score, best = score, r

        if len(scored) < 2:
            confidence = SINGLE_MODE_CONFIDENCE
        else:
            ranked = sorted((s for s, _ in scored), reverse=True)
            confidence = min(MAX_CONFIDENCE, 0.5 + (ranked[0] - ranked[1]) / 20)

        return TransportRecommendation(
            mode=best.mode,
            reason=recommendation_reason(best),
            confidence=round(confidence, 3),
            score=best_score,
        )
