"""
modules/tool_usage/time_tool.py
---------------------------------
Arithmetic tool: duration formatting and straight-line travel-time estimates.
Local computation, no external API required.

Travel time here is a speed approximation per travel mode. It feeds the
day-overhead estimate and the heuristic directions strategy; real routed
durations come from the Directions Provider.
"""

from __future__ import annotations

from schemas.transport import TravelMode


# Average door-to-door speeds (km/h) in an urban setting.
_MODE_SPEED_KMH: dict[TravelMode, float] = {
    TravelMode.WALKING:   4.8,
    TravelMode.BICYCLING: 15.0,
    TravelMode.TRANSIT:   20.0,
    TravelMode.DRIVING:   30.0,
}
_TRANSIT_WAIT_MINUTES = 5.0
_DEFAULT_SPEED_KM_PER_H = 30.0


class TimeTool:
    """
    Wraps time-arithmetic operations used by the planner.
    Provides duration formatting and travel-time estimation.
    """

    def __init__(self, speed_kmh: float = _DEFAULT_SPEED_KM_PER_H):
        self.speed_kmh = speed_kmh

    def estimate_travel_time(self, distance_km: float, mode: TravelMode | None = None) -> float:
        """
        Estimate travel time in minutes from a straight-line distance.

        Args:
            distance_km: Distance in kilometres (output of DistanceTool).
            mode:        Travel mode; None uses the tool's default speed.
        """
        speed = _MODE_SPEED_KMH.get(mode, self.speed_kmh) if mode else self.speed_kmh
        minutes = distance_km / speed * 60
        if mode == TravelMode.TRANSIT and distance_km > 0:
            minutes += _TRANSIT_WAIT_MINUTES
        return minutes

    @staticmethod
    def format_duration(seconds: float) -> str:
        """Format as "12 min" below an hour, "1h 5m" above."""
        minutes = round(seconds / 60)
        if minutes < 60:
            return f"{minutes} min"
        return f"{minutes // 60}h {minutes % 60}m"
