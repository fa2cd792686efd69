"""
orchestrator/trip_engine.py
-----------------------------
Engine facade consumed by the UI and by the chat assistant's itinerary
actions. Wires the planner, estimator, advisor, editor and place directory
together and exposes:

    cluster_and_schedule(destination, places, trip_length_days, pace) -> Itinerary
    estimate_budget(trip, preferences)                                -> BudgetEstimate
    compare_transport_modes(origin, destination, modes)  (async)      -> TransportComparison

plus place search / details (PlaceSearchResult with status "ok" | "no_data"),
itinerary edits, and travel-leg annotation.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional
import logging

from schemas.budget import BudgetEstimate, BudgetOptionComparison, BudgetPreferences, TripSpec
from schemas.itinerary import Itinerary, Pace
from schemas.place import LatLng, Place, PlaceDetails
from schemas.transport import ModeEta, TransportComparison, TravelMode
from modules.planning.budget_estimator import BudgetEstimator
from modules.planning.itinerary_planner import DestinationLike, ItineraryPlanner
from modules.recommendation.transport_advisor import TransportModeAdvisor
from modules.reoptimization.itinerary_editor import EditResult, ItineraryEditor
from modules.tool_usage.errors import PlaceDirectoryError
from modules.tool_usage.places_tool import GooglePlacesTool, PlaceDirectory

log = logging.getLogger(__name__)


@dataclass
class PlaceSearchResult:
    """Place Directory answer. status "no_data" means the directory failed."""
    status: str = "ok"
    places: list[Place] = field(default_factory=list)
    details: Optional[PlaceDetails] = None
    message: str = ""


class TripEngine:

    def __init__(
        self,
        planner: ItineraryPlanner | None = None,
        estimator: BudgetEstimator | None = None,
        advisor: TransportModeAdvisor | None = None,
        places: PlaceDirectory | None = None,
        editor: ItineraryEditor | None = None,
    ):
        self.estimator = estimator or BudgetEstimator()
        self.planner   = planner or ItineraryPlanner(estimator=self.estimator)
        self.advisor   = advisor or TransportModeAdvisor()
        self.places    = places or GooglePlacesTool()
        self.editor    = editor or ItineraryEditor(planner=self.planner)

    # ── Planning ──────────────────────────────────────────────────────────────

    def cluster_and_schedule(
        self,
        destination: DestinationLike,
        places: list[Place],
        trip_length_days: int,
        pace: Pace | str | None = None,
        travelers: int = 1,
        budget_preferences: BudgetPreferences | None = None,
    ) -> Itinerary:
        return self.planner.plan(
            destination, places, trip_length_days, pace,
            travelers=travelers, budget_preferences=budget_preferences,
        )

    def edit_itinerary(self, itinerary: Itinerary, action_type: str, parameters: dict[str, Any] | None = None) -> EditResult:
        return self.editor.apply_action(itinerary, action_type, parameters)

    # ── Budget ────────────────────────────────────────────────────────────────

    def estimate_budget(self, trip: TripSpec, preferences: BudgetPreferences | None = None) -> BudgetEstimate:
        return self.estimator.estimate(trip, preferences)

    def compare_budget_options(self, trip: TripSpec, options: list[BudgetPreferences]) -> list[BudgetOptionComparison]:
        return self.estimator.compare_options(trip, options)

    # ── Transport ─────────────────────────────────────────────────────────────

    async def compare_transport_modes(
        self,
        origin: LatLng,
        destination: LatLng,
        modes: list[TravelMode | str] | None = None,
    ) -> TransportComparison:
        return await self.advisor.compare(origin, destination, modes)

    async def live_etas(self, origin: LatLng, destination: LatLng, modes: list[TravelMode | str] | None = None) -> list[ModeEta]:
        return await self.advisor.live_etas(origin, destination, modes)

    async def annotate_travel(self, itinerary: Itinerary, modes: list[TravelMode | str] | None = None) -> Itinerary:
        return await self.advisor.annotate_itinerary(itinerary, modes)

    # ── Place Directory ───────────────────────────────────────────────────────

    def search_places(self, query: str, **options: Any) -> PlaceSearchResult:
        try:
            found = self.places.search(query, **options)
        except PlaceDirectoryError as exc:
            log.warning("Place search failed for %r: %s", query, exc)
            return PlaceSearchResult(status="no_data", message=str(exc))
        except Exception as exc:
            log.exception("Place directory raised during search for %r", query)
            return PlaceSearchResult(status="no_data", message=str(exc))
        return PlaceSearchResult(places=list(found))

    def place_details(self, place_id: str) -> PlaceSearchResult:
        try:
            details = self.places.details(place_id)
        except PlaceDirectoryError as exc:
            log.warning("Place details failed for %r: %s", place_id, exc)
            return PlaceSearchResult(status="no_data", message=str(exc))
        except Exception as exc:
            log.exception("Place directory raised during details for %r", place_id)
            return PlaceSearchResult(status="no_data", message=str(exc))
        return PlaceSearchResult(places=[details], details=details)
