"""
modules/tool_usage/places_tool.py
-----------------------------------
Place Directory adapter: Google Places Text Search and Place Details.

Without an API key the tool returns fixed stub places so the planner can be
exercised offline. Upstream failures are raised as PlaceDirectoryError; the
engine facade turns them into a "no_data" result.
"""

from __future__ import annotations
from typing import Any, Protocol, runtime_checkable
import logging

import requests

import config
from schemas.place import LatLng, Place, PlaceDetails
from modules.tool_usage.errors import PlaceDirectoryError

log = logging.getLogger(__name__)

DEFAULT_SEARCH_RADIUS_M = 50_000


@runtime_checkable
class PlaceDirectory(Protocol):

    def search(self, query: str, **options: Any) -> list[Place]:
        ...

    def details(self, place_id: str) -> PlaceDetails:
        ...


_STUB_PLACES: list[Place] = [
    Place(place_id="stub_museum", name="City Museum", location=LatLng(48.8606, 2.3376),
          types=("museum", "tourist_attraction"), price_level=2, rating=4.6,
          address="Central District"),
    Place(place_id="stub_park", name="Riverside Park", location=LatLng(48.8637, 2.3275),
          types=("park",), price_level=0, rating=4.4, address="Riverside"),
    Place(place_id="stub_restaurant", name="Old Town Bistro", location=LatLng(48.8530, 2.3499),
          types=("restaurant", "food"), price_level=2, rating=4.3, address="Old Town"),
    Place(place_id="stub_tower", name="Observation Tower", location=LatLng(48.8584, 2.2945),
          types=("tourist_attraction",), price_level=3, rating=4.7, address="West Bank"),
]


def _parse_place(item: dict) -> Place:
    location = (item.get("geometry") or {}).get("location") or {}
    return Place(
        place_id=item.get("place_id", ""),
        name=item.get("name", ""),
        location=LatLng(float(location.get("lat", 0.0)), float(location.get("lng", 0.0))),
        types=tuple(item.get("types", []) or ()),
        price_level=item.get("price_level"),
        rating=item.get("rating"),
        address=item.get("formatted_address") or item.get("vicinity", ""),
    )


def _parse_details(item: dict) -> PlaceDetails:
    base = _parse_place(item)
    hours = (item.get("opening_hours") or {}).get("weekday_text", []) or []
    return PlaceDetails(
        place_id=base.place_id,
        name=base.name,
        location=base.location,
        types=base.types,
        price_level=base.price_level,
        rating=base.rating,
        address=base.address,
        opening_hours=tuple(hours),
        website=item.get("website", ""),
        phone=item.get("formatted_phone_number", ""),
        user_ratings_total=int(item.get("user_ratings_total", 0) or 0),
        raw=item,
    )


class GooglePlacesTool:
    """Wraps the Google Places web service."""

    def __init__(
        self,
        api_key: str = config.GOOGLE_MAPS_API_KEY,
        api_url: str = config.PLACES_API_URL,
        timeout: float = config.PLACES_TIMEOUT_SECONDS,
    ):
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def search(self, query: str, **options: Any) -> list[Place]:
        """
        Text search.

        Args:
            query:   Free text, e.g. "museums in Paris".
            **options:
                location: LatLng to bias results towards.
                radius:   Bias radius in metres (default 50 km).
                type:     Google place type filter.

        Returns:
            Places in upstream ranking order. ZERO_RESULTS → [].
        """
        if not self.api_key:
            log.info("[DUMMY API] GooglePlacesTool.search(%r) returning stub data", query)
            return list(_STUB_PLACES)

        params: dict[str, Any] = {"query": query, "key": self.api_key}
        location = options.get("location")
        if location is not None:
            params["location"] = f"{location.lat},{location.lng}"
            params["radius"] = options.get("radius", DEFAULT_SEARCH_RADIUS_M)
        if options.get("type"):
            params["type"] = options["type"]

        data = self._get("textsearch/json", params)
        return [self._parse(_parse_place, item) for item in data.get("results") or []]

    def details(self, place_id: str) -> PlaceDetails:
        if not self.api_key:
            log.info("[DUMMY API] GooglePlacesTool.details(%r) returning stub data", place_id)
            for place in _STUB_PLACES:
                if place.place_id == place_id:
                    return PlaceDetails(**{f: getattr(place, f) for f in (
                        "place_id", "name", "location", "types", "price_level", "rating", "address",
                    )})
            raise PlaceDirectoryError(f"Unknown place id {place_id!r}", status="NOT_FOUND")

        data = self._get("details/json", {"place_id": place_id, "key": self.api_key})
        result = data.get("result")
        if not result:
            raise PlaceDirectoryError(f"No details for {place_id!r}", status="NOT_FOUND")
        return self._parse(_parse_details, result)

    def _get(self, path: str, params: dict[str, Any]) -> dict:
        try:
            response = requests.get(f"{self.api_url}/{path}", params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise PlaceDirectoryError(f"Places request failed: {exc}") from exc

        if response.status_code != 200:
            raise PlaceDirectoryError(f"Places HTTP {response.status_code}", status=str(response.status_code))
        try:
            data = response.json()
        except ValueError as exc:
            raise PlaceDirectoryError(f"Places returned a non-JSON body: {exc}") from exc
        if not isinstance(data, dict):
            raise PlaceDirectoryError("Places returned an unexpected payload")
        status = data.get("status", "OK")
        if status not in ("OK", "ZERO_RESULTS"):
            raise PlaceDirectoryError(data.get("error_message") or f"Places status {status}", status=status)
        return data

    @staticmethod
    def _parse(parser, item):
        try:
            return parser(item)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise PlaceDirectoryError(f"Malformed Places payload: {exc}") from exc
