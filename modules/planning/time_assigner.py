"""
modules/planning/time_assigner.py
-----------------------------------
Time & Duration Assigner: maps a day's ordered places to coarse time blocks
and estimates how long each visit takes.

Block by relative position i / n:
    [0.00, 0.25)  Morning    09:00
    [0.25, 0.50)  Midday     12:00
    [0.50, 0.75)  Afternoon  14:00
    [0.75, 1.00]  Evening    18:00

Duration by the first tag (in the place's own tag order) found in
DURATION_MINUTES; DEFAULT_DURATION_MINUTES otherwise.

Blocks are display labels, not a precise timetable: several stops can share a
start time and the day total may exceed the soft cap (flagged, not enforced).
"""

from __future__ import annotations

import config
from schemas.itinerary import DayPlan, ScheduledPlace, TimeBlock
from schemas.place import Place
from modules.tool_usage.distance_tool import DistanceTool
from modules.tool_usage.time_tool import TimeTool


BLOCK_START: dict[TimeBlock, str] = {
    TimeBlock.MORNING:   "09:00",
    TimeBlock.MIDDAY:    "12:00",
    TimeBlock.AFTERNOON: "14:00",
    TimeBlock.EVENING:   "18:00",
}

DURATION_MINUTES: dict[str, int] = {
    "tourist_attraction": 120,
    "museum":             180,
    "restaurant":          90,
    "shopping_mall":      120,
    "park":                90,
    "night_club":         180,
    "spa":                120,
    "amusement_park":     240,
}
DEFAULT_DURATION_MINUTES = 90


def time_block_for(index: int, total: int) -> TimeBlock:
    ratio = index / total if total else 0.0
    if ratio < 0.25:
        return TimeBlock.MORNING
    if ratio < 0.5:
        return TimeBlock.MIDDAY
    if ratio < 0.75:
        return TimeBlock.AFTERNOON
    return TimeBlock.EVENING


def estimated_duration(place: Place) -> int:
    for tag in place.types:
        if tag in DURATION_MINUTES:
            return DURATION_MINUTES[tag]
    return DEFAULT_DURATION_MINUTES


class TimeAssigner:

    def __init__(
        self,
        time_tool: TimeTool | None = None,
        soft_cap_minutes: int = config.SOFT_DAILY_CAP_MINUTES,
    ):
        self.distance_tool = DistanceTool(unit="km")
        self.time_tool = time_tool or TimeTool()
        self.soft_cap_minutes = soft_cap_minutes

    def assign_time_blocks(self, ordered_places: list[Place]) -> list[ScheduledPlace]:
        n = len(ordered_places)
        scheduled: list[ScheduledPlace] = []
        for i, place in enumerate(ordered_places):
            block = time_block_for(i, n)
            scheduled.append(ScheduledPlace(
                place=place,
                time=BLOCK_START[block],
                time_block=block,
                estimated_duration_minutes=estimated_duration(place),
                order=i + 1,
            ))
        return scheduled

    def build_day_plan(
        self,
        day: int,
        theme: str,
        ordered_places: list[Place],
        pace_cap: int | None = None,
    ) -> DayPlan:
        """Wrap ordered places into a DayPlan with duration, travel overhead and cap flags."""
        stops = self.assign_time_blocks(ordered_places)
        travel_km = self.distance_tool.path_length([p.location for p in ordered_places])
        travel_min = self.time_tool.estimate_travel_time(travel_km)

        plan = DayPlan(
            day=day,
            theme=theme,
            places=stops,
            estimated_duration_minutes=sum(sp.estimated_duration_minutes for sp in stops),
            travel_distance_km=round(travel_km, 3),
            travel_minutes=round(travel_min, 1),
        )
        plan.exceeds_soft_cap = plan.estimated_duration_minutes + travel_min > self.soft_cap_minutes
        plan.over_pace_cap = pace_cap is not None and len(stops) > pace_cap
        return plan
