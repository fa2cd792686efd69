"""
modules/tool_usage/directions_tool.py
---------------------------------------
Directions Provider strategies. Each answers route(origin, destination, mode)
with a RouteResult or a RouteUnavailable and never raises.

  BackendDirectionsStrategy   application backend proxy (Google-shaped JSON)
  GoogleDirectionsStrategy    Google Directions API, routes[0].legs[0]
  HeuristicDirectionsStrategy haversine × DETOUR_FACTOR at per-mode speed

build_directions_provider() assembles them into a FallbackChain from config.
"""

from __future__ import annotations
from typing import Any
import logging
import re

import requests

import config
from schemas.place import LatLng
from schemas.transport import (
    Fare, RouteOutcome, RouteResult, RouteUnavailable, Step, TransitDetails, TravelMode,
)
from modules.tool_usage.distance_tool import distance_km
from modules.tool_usage.errors import DirectionsError, ToolError
from modules.tool_usage.fallback_chain import DirectionsProvider, FallbackChain
from modules.tool_usage.time_tool import TimeTool

log = logging.getLogger(__name__)

__all__ = [
    "DirectionsProvider", "BackendDirectionsStrategy", "GoogleDirectionsStrategy",
    "HeuristicDirectionsStrategy", "build_directions_provider", "parse_directions_payload",
]

# Road distance is longer than the great-circle distance.
DETOUR_FACTOR = 1.3

_TAG_RE = re.compile(r"<[^>]*>")


def _latlng(raw: dict | None) -> LatLng | None:
    if not raw or "lat" not in raw or "lng" not in raw:
        return None
    return LatLng(float(raw["lat"]), float(raw["lng"]))


def _transit_details(raw: dict) -> TransitDetails:
    line = raw.get("line", {}) or {}
    return TransitDetails(
        line_name=line.get("name", ""),
        line_short_name=line.get("short_name", ""),
        vehicle=(line.get("vehicle", {}) or {}).get("name", ""),
        departure_stop=(raw.get("departure_stop", {}) or {}).get("name", ""),
        arrival_stop=(raw.get("arrival_stop", {}) or {}).get("name", ""),
        departure_time=(raw.get("departure_time", {}) or {}).get("text", ""),
        arrival_time=(raw.get("arrival_time", {}) or {}).get("text", ""),
        headsign=raw.get("headsign", ""),
        num_stops=int(raw.get("num_stops", 0) or 0),
    )


def parse_directions_payload(data: dict[str, Any], mode: TravelMode, source: str) -> RouteOutcome:
    """
    Convert a Google Directions response body into a RouteResult.
    Only the first route and its first leg are used.
    """
    routes = data.get("routes") or []
    if not routes or not routes[0].get("legs"):
        return RouteUnavailable(mode=mode, reason=f"{source}: no route returned")

    route = routes[0]
    leg = route["legs"][0]

    steps: list[Step] = []
    for idx, raw in enumerate(leg.get("steps", []) or []):
        instruction = raw.get("html_instructions")
        instruction = _TAG_RE.sub("", instruction) if instruction else raw.get("instructions", "")
        steps.append(Step(
            step_number=idx + 1,
            instruction=instruction,
            distance_meters=int((raw.get("distance") or {}).get("value", 0)),
            duration_seconds=int((raw.get("duration") or {}).get("value", 0)),
            travel_mode=raw.get("travel_mode") or mode.value.upper(),
            start_location=_latlng(raw.get("start_location")),
            end_location=_latlng(raw.get("end_location")),
            transit=_transit_details(raw["transit_details"]) if raw.get("transit_details") else None,
        ))

    fare = None
    if route.get("fare"):
        raw_fare = route["fare"]
        fare = Fare(
            value=float(raw_fare.get("value", 0.0)),
            currency=raw_fare.get("currency", ""),
            text=raw_fare.get("text", ""),
        )

    return RouteResult(
        mode=mode,
        duration_seconds=int(leg["duration"]["value"]),
        distance_meters=int(leg["distance"]["value"]),
        steps=steps,
        fare=fare,
        summary=route.get("summary", ""),
        warnings=list(route.get("warnings", []) or []),
        source=source,
    )


class _HttpDirectionsStrategy:
    """Shared request / error handling for the two HTTP strategies."""

    name = "http"

    def __init__(self, api_url: str, timeout: float = config.DIRECTIONS_TIMEOUT_SECONDS):
        self.api_url = api_url
        self.timeout = timeout

    def _params(self, origin: LatLng, destination: LatLng, mode: TravelMode) -> dict[str, Any]:
        return {
            "origin": f"{origin.lat},{origin.lng}",
            "destination": f"{destination.lat},{destination.lng}",
            "mode": mode.value,
        }

    def _unconfigured_reason(self) -> str:
        return ""

    def _fetch(self, params: dict[str, Any]) -> dict[str, Any]:
        response = requests.get(self.api_url, params=params, timeout=self.timeout)
        if response.status_code != 200:
            raise DirectionsError(f"HTTP {response.status_code}", status=str(response.status_code))
        data: dict = response.json()
        status = data.get("status", "OK")
        if status != "OK":
            raise DirectionsError(data.get("error_message") or f"status {status}", status=status)
        return data

    def route(self, origin: LatLng, destination: LatLng, mode: TravelMode) -> RouteOutcome:
        mode = TravelMode(mode)
        unconfigured = self._unconfigured_reason()
        if unconfigured:
            return RouteUnavailable(mode=mode, reason=unconfigured)
        try:
            data = self._fetch(self._params(origin, destination, mode))
            return parse_directions_payload(data, mode, self.name)
        except (ToolError, requests.RequestException, KeyError, ValueError) as exc:
            log.warning("%s directions failed for %s: %s", self.name, mode.value, exc)
            return RouteUnavailable(mode=mode, reason=str(exc) or type(exc).__name__)


class BackendDirectionsStrategy(_HttpDirectionsStrategy):
    """Application backend that proxies the Directions API."""

    name = "backend"

    def __init__(self, api_url: str = config.DIRECTIONS_BACKEND_URL, timeout: float = config.DIRECTIONS_TIMEOUT_SECONDS):
        super().__init__(api_url, timeout)

    def _unconfigured_reason(self) -> str:
        if self.api_url == "UNSPECIFIED" or not self.api_url:
            return "directions backend not configured"
        return ""


class GoogleDirectionsStrategy(_HttpDirectionsStrategy):
    """Direct call to the Google Directions API."""

    name = "google"

    def __init__(
        self,
        api_key: str = config.GOOGLE_MAPS_API_KEY,
        api_url: str = config.DIRECTIONS_API_URL,
        timeout: float = config.DIRECTIONS_TIMEOUT_SECONDS,
    ):
        super().__init__(api_url, timeout)
        self.api_key = api_key

    def _unconfigured_reason(self) -> str:
        return "" if self.api_key else "GOOGLE_MAPS_API_KEY not set"

    def _params(self, origin: LatLng, destination: LatLng, mode: TravelMode) -> dict[str, Any]:
        params = super()._params(origin, destination, mode)
        params["key"] = self.api_key
        return params


class HeuristicDirectionsStrategy:
    """
    Offline estimate: great-circle distance × DETOUR_FACTOR, timed with the
    per-mode speeds of TimeTool. Always succeeds.
    """

    name = "heuristic"

    def __init__(self, time_tool: TimeTool | None = None):
        self.time_tool = time_tool or TimeTool()

    def route(self, origin: LatLng, destination: LatLng, mode: TravelMode) -> RouteOutcome:
        mode = TravelMode(mode)
        km = distance_km(origin, destination) * DETOUR_FACTOR
        seconds = int(round(self.time_tool.estimate_travel_time(km, mode) * 60))
        meters = int(round(km * 1000))
        return RouteResult(
            mode=mode,
            duration_seconds=seconds,
            distance_meters=meters,
            steps=[Step(
                step_number=1,
                instruction=f"Head to destination ({km:.1f} km)",
                distance_meters=meters,
                duration_seconds=seconds,
                travel_mode=mode.value.upper(),
                start_location=origin,
                end_location=destination,
            )],
            summary="Estimated route",
            warnings=["Estimated from straight-line distance; live directions unavailable"],
            source=self.name,
        )


def build_directions_provider(
    heuristic_fallback: bool = config.DIRECTIONS_HEURISTIC_FALLBACK,
) -> FallbackChain:
    strategies: list[DirectionsProvider] = [BackendDirectionsStrategy(), GoogleDirectionsStrategy()]
    if heuristic_fallback:
        strategies.append(HeuristicDirectionsStrategy())
    return FallbackChain(strategies)
