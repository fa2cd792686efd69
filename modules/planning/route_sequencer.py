"""
modules/planning/route_sequencer.py
-------------------------------------
Route Sequencer: orders one day's places with a nearest-neighbour walk.

  start  = first place in input order
  repeat: among the remaining places pick the one closest (haversine) to the
          last placed stop; ties go to the earliest in input order

This is a greedy heuristic, not an optimal tour. Identical input gives
identical output.
"""

from __future__ import annotations

from schemas.place import Place
from modules.tool_usage.distance_tool import distance_km


class RouteSequencer:

    def sequence(self, places: list[Place]) -> list[Place]:
        if len(places) <= 1:
            return list(places)

        ordered = [places[0]]
        remaining = list(places[1:])

        while remaining:
            current = ordered[-1].location
            best_idx = 0
            best_dist = distance_km(current, remaining[0].location)
            for idx in range(1, len(remaining)):
                d = distance_km(current, remaining[idx].location)
                if d < best_dist:
                    best_dist = d
                    best_idx = idx
            ordered.append(remaining.pop(best_idx))

        return ordered
