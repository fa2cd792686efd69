"""
modules/planning/itinerary_planner.py
---------------------------------------
Multi-day itinerary planner: destination + selected places → Itinerary.

Pipeline:
  1. ProximityClusterer   places → clusters (radius config.CLUSTER_RADIUS_KM)
  2. DayScheduler         clusters → one DayAllocation per day under the pace cap
  3. RouteSequencer       per day: nearest-neighbour order
  4. TimeAssigner         per day: time blocks, durations, travel overhead
  5. Metadata             totals, average per day, overflow days, budget

Every input place lands in exactly one DayPlan; the planner never drops or
duplicates a place. Days 1..N are always all present, empty ones included.
"""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Union
import logging
import uuid

from schemas.budget import BudgetPreferences
from schemas.itinerary import DayAllocation, DayPlan, Itinerary, ItineraryMetadata, Pace
from schemas.place import Destination, Place
from modules.planning.budget_estimator import BudgetEstimator
from modules.planning.clustering import ProximityClusterer
from modules.planning.day_scheduler import DayScheduler, max_places_per_day, resolve_pace
from modules.planning.route_sequencer import RouteSequencer
from modules.planning.time_assigner import TimeAssigner

log = logging.getLogger(__name__)

DestinationLike = Union[Destination, str, None]


def as_destination(destination: DestinationLike) -> Destination:
    if isinstance(destination, Destination):
        return destination
    return Destination(name=destination or "")


class ItineraryPlanner:
    """
    Runs the clustering → scheduling → sequencing → timing pipeline.
    Each stage is injectable; defaults read their settings from config.
    """

    def __init__(
        self,
        clusterer: ProximityClusterer | None = None,
        scheduler: DayScheduler | None = None,
        sequencer: RouteSequencer | None = None,
        assigner: TimeAssigner | None = None,
        estimator: BudgetEstimator | None = None,
    ):
        self.clusterer = clusterer or ProximityClusterer()
        self.scheduler = scheduler or DayScheduler()
        self.sequencer = sequencer or RouteSequencer()
        self.assigner  = assigner  or TimeAssigner()
        self.estimator = estimator or BudgetEstimator()

    # ── Public entry points ───────────────────────────────────────────────────

    def plan(
        self,
        destination: DestinationLike,
        places: list[Place],
        trip_length_days: int,
        pace: Pace | str | None = None,
        travelers: int = 1,
        budget_preferences: BudgetPreferences | None = None,
        include_budget: bool = True,
    ) -> Itinerary:
        """
        Args:
            destination:        Destination or its name.
            places:             Selected places, in caller order.
            trip_length_days:   Values below 1 are treated as 1.
            pace:               relaxed | moderate | packed (unknown → config default).
            travelers:          Party size for the budget estimate.
            budget_preferences: Passed through to the Budget Estimator.
            include_budget:     False leaves metadata.estimated_budget as None.

        Returns:
            Itinerary with exactly one DayPlan per day.
        """
        resolved = resolve_pace(pace)
        clusters = self.clusterer.cluster(list(places))
        allocations = self.scheduler.schedule(clusters, trip_length_days, resolved)
        days = self.build_days(allocations, resolved)

        itinerary = self.assemble(
            destination, days, resolved,
            travelers=travelers,
            budget_preferences=budget_preferences,
            include_budget=include_budget,
        )
        log.info(
            "Planned %d place(s) over %d day(s) for %s (%s pace, %d cluster(s))",
            itinerary.metadata.total_places, len(days), itinerary.destination.name or "?",
            resolved.value, len(clusters),
        )
        return itinerary

    def cluster_and_schedule(
        self,
        destination: DestinationLike,
        places: list[Place],
        trip_length_days: int,
        pace: Pace | str | None = None,
    ) -> Itinerary:
        return self.plan(destination, places, trip_length_days, pace)

    # ── Building blocks shared with the Itinerary Editor ─────────────────────

    def build_days(self, allocations: list[DayAllocation], pace: Pace | str | None) -> list[DayPlan]:
        """Sequence and time each day's allocation."""
        cap = max_places_per_day(pace)
        return [
            self.assigner.build_day_plan(
                alloc.day, alloc.theme, self.sequencer.sequence(alloc.places), pace_cap=cap,
            )
            for alloc in allocations
        ]

    def assemble(
        self,
        destination: DestinationLike,
        days: list[DayPlan],
        pace: Pace | str | None,
        travelers: int = 1,
        budget_preferences: BudgetPreferences | None = None,
        include_budget: bool = True,
        itinerary_id: str | None = None,
    ) -> Itinerary:
        """Wrap finished DayPlans into an Itinerary and fill in its metadata."""
        resolved = resolve_pace(pace)
        total = sum(len(d.places) for d in days)
        num_days = len(days)

        itinerary = Itinerary(
            itinerary_id=itinerary_id or str(uuid.uuid4()),
            destination=as_destination(destination),
            trip_length_days=num_days,
            days=days,
            metadata=ItineraryMetadata(
                total_places=total,
                average_places_per_day=round(total / num_days, 1) if num_days else 0.0,
                generated_at=datetime.now(timezone.utc).isoformat(),
                pace=resolved,
                overflow_days=[d.day for d in days if d.over_pace_cap],
            ),
        )

        if include_budget:
            itinerary.metadata.estimated_budget = self.estimator.estimate_for_itinerary(
                itinerary, travelers, budget_preferences,
            )
        return itinerary
