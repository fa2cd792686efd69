"""
modules/planning/day_scheduler.py
-----------------------------------
Day Scheduler: distributes clustered places across the trip's days under a
pace cap and labels each day with a theme.

Distribution:
  Places are taken cluster by cluster, in cluster order, and appended to the
  current day. When the current day reaches the cap for the current pass the
  scheduler moves to the next day. After the last day it wraps back to day 1
  and starts a new pass whose per-day cap is cap × (pass + 1).

  No place is ever dropped. When the trip cannot hold every place at the pace
  cap, the overflow lands on the earliest days of the next pass and those
  days are reported by `overflow_days()`.

  Example: 9 places, relaxed (3), 2 days
      pass 1: day 1 ← 3, day 2 ← 3
      pass 2: day 1 ← 3 more  → day 1 = 6, day 2 = 3

Theme:
  Most frequent tag across the day's places (every tag of every place is
  counted), mapped through THEME_MAP. A tie for the top count, an unmapped
  dominant tag, or an empty day gives DEFAULT_THEME.
"""

from __future__ import annotations
from collections import Counter
import logging

import config
from schemas.itinerary import Cluster, DayAllocation, Pace
from schemas.place import Place

log = logging.getLogger(__name__)


PACE_LIMITS: dict[Pace, int] = {
    Pace.RELAXED:  3,
    Pace.MODERATE: 4,
    Pace.PACKED:   6,
}

THEME_MAP: dict[str, str] = {
    "tourist_attraction": "Sightseeing",
    "museum":             "Cultural",
    "restaurant":         "Culinary",
    "shopping_mall":      "Shopping",
    "park":               "Nature",
    "night_club":         "Nightlife",
    "spa":                "Relaxation",
}
DEFAULT_THEME = "Mixed Activities"


def resolve_pace(pace: Pace | str | None) -> Pace:
    """Accepts a Pace or its string value; unknown values fall back to config.DEFAULT_PACE."""
    if isinstance(pace, Pace):
        return pace
    try:
        return Pace(str(pace).lower())
    except ValueError:
        fallback = Pace(config.DEFAULT_PACE)
        if pace is not None:
            log.warning("Unknown pace %r, using %s", pace, fallback.value)
        return fallback


def max_places_per_day(pace: Pace | str | None) -> int:
    return PACE_LIMITS[resolve_pace(pace)]


def day_theme(places: list[Place]) -> str:
    counts: Counter[str] = Counter(tag for p in places for tag in p.types)
    if not counts:
        return DEFAULT_THEME

    ranked = counts.most_common(2)
    if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
        return DEFAULT_THEME
    return THEME_MAP.get(ranked[0][0], DEFAULT_THEME)


class DayScheduler:
    """Assigns places to trip days. Ordering within a day happens later."""

    def schedule(
        self,
        clusters: list[Cluster],
        trip_length_days: int,
        pace: Pace | str | None = None,
    ) -> list[DayAllocation]:
        """
        Args:
            clusters:         Output of ProximityClusterer, in cluster order.
            trip_length_days: Number of days; values below 1 are treated as 1.
            pace:             relaxed | moderate | packed.

        Returns:
            One DayAllocation per day, 1..N, including empty days.
        """
        num_days = max(int(trip_length_days), 1)
        cap = max_places_per_day(pace)
        days = [DayAllocation(day=d + 1) for d in range(num_days)]

        current = 0
        pass_no = 0
        for cluster in clusters:
            for place in cluster.places:
                while len(days[current].places) >= cap * (pass_no + 1):
                    current += 1
                    if current == num_days:
                        current = 0
                        pass_no += 1
                days[current].places.append(place)

        for day in days:
            day.theme = day_theme(day.places)

        overflow = self.overflow_days(days, pace)
        if overflow:
            log.info("Pace cap %d exceeded on day(s) %s after wraparound", cap, overflow)
        return days

    @staticmethod
    def overflow_days(days: list[DayAllocation], pace: Pace | str | None) -> list[int]:
        cap = max_places_per_day(pace)
        return [d.day for d in days if len(d.places) > cap]
