"""
modules/reoptimization/itinerary_editor.py
--------------------------------------------
Itinerary edit actions issued by the chat assistant:

  add_place     with a day: append to that day and re-sequence it
                without:    full re-plan including the new place
  remove_place  drop a place; its day is re-sequenced
  move_place    move a place to another day; both days re-sequenced
  change_pace   full re-plan at the new pace
  reoptimize    re-sequence every day (or one day)

Every action returns an EditResult and never mutates the input Itinerary.
A rejected action carries the reason and the unchanged input itinerary.
Untouched days are carried over as-is; the itinerary id is preserved.

apply_action() maps the assistant's tool names onto these methods:
  add_activity | remove_activity | move_activity | change_pace | optimize_route
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Callable
import logging

from schemas.budget import BudgetPreferences
from schemas.itinerary import DayAllocation, DayPlan, Itinerary, Pace
from schemas.place import LatLng, Place
from modules.planning.day_scheduler import day_theme
from modules.planning.itinerary_planner import ItineraryPlanner

log = logging.getLogger(__name__)


@dataclass
class EditResult:
    accepted: bool
    itinerary: Itinerary
    rejection_reason: str = ""
    action: str = ""


def place_from_params(raw: Any) -> Place:
    """Accept a Place or a plain dict as sent by the assistant."""
    if isinstance(raw, Place):
        return raw
    if not isinstance(raw, dict):
        raise TypeError("place must be an object")
    location = raw.get("location") or {}
    if isinstance(location, LatLng):
        latlng = location
    else:
        latlng = LatLng(float(location["lat"]), float(location["lng"]))
    return Place(
        place_id=str(raw["place_id"]),
        name=str(raw.get("name", "")),
        location=latlng,
        types=tuple(raw.get("types", ()) or ()),
        price_level=raw.get("price_level"),
        rating=raw.get("rating"),
        address=str(raw.get("address", "")),
    )


class ItineraryEditor:

    def __init__(
        self,
        planner: ItineraryPlanner | None = None,
        travelers: int = 1,
        budget_preferences: BudgetPreferences | None = None,
    ):
        self.planner = planner or ItineraryPlanner()
        self.travelers = travelers
        self.budget_preferences = budget_preferences

    # ── Actions ───────────────────────────────────────────────────────────────

    def add_place(self, itinerary: Itinerary, place: Place, day: int | None = None) -> EditResult:
        if place.place_id in self._place_ids(itinerary):
            return self._reject(itinerary, "add_place", f"Place {place.place_id!r} is already in the itinerary")

        if day is None:
            places = itinerary.all_places() + [place]
            return self._replan(itinerary, "add_place", places, itinerary.metadata.pace)

        if not self._valid_day(itinerary, day):
            return self._reject(itinerary, "add_place", f"Day {day} is outside 1..{len(itinerary.days)}")

        target = itinerary.days[day - 1]
        return self._accept(itinerary, "add_place", {day: self._places_of(target) + [place]})

    def remove_place(self, itinerary: Itinerary, place_id: str) -> EditResult:
        source = itinerary.find_day(place_id)
        if source is None:
            return self._reject(itinerary, "remove_place", f"Unknown place id {place_id!r}")

        remaining = [p for p in self._places_of(source) if p.place_id != place_id]
        return self._accept(itinerary, "remove_place", {source.day: remaining})

    def move_place(self, itinerary: Itinerary, place_id: str, to_day: int) -> EditResult:
        source = itinerary.find_day(place_id)
        if source is None:
            return self._reject(itinerary, "move_place", f"Unknown place id {place_id!r}")
        if not self._valid_day(itinerary, to_day):
            return self._reject(itinerary, "move_place", f"Day {to_day} is outside 1..{len(itinerary.days)}")
        if source.day == to_day:
            return self._accept(itinerary, "move_place", {})

        moving = next(p for p in self._places_of(source) if p.place_id == place_id)
        target = itinerary.days[to_day - 1]
        return self._accept(itinerary, "move_place", {
            source.day: [p for p in self._places_of(source) if p.place_id != place_id],
            to_day: self._places_of(target) + [moving],
        })

    def change_pace(self, itinerary: Itinerary, pace: Pace | str) -> EditResult:
        try:
            resolved = Pace(pace.lower() if isinstance(pace, str) else pace)
        except ValueError:
            return self._reject(itinerary, "change_pace", f"Unknown pace {pace!r}")
        return self._replan(itinerary, "change_pace", itinerary.all_places(), resolved)

    def reoptimize(self, itinerary: Itinerary, day: int | None = None) -> EditResult:
        if day is not None and not self._valid_day(itinerary, day):
            return self._reject(itinerary, "reoptimize", f"Day {day} is outside 1..{len(itinerary.days)}")
        targets = [itinerary.days[day - 1]] if day is not None else itinerary.days
        return self._accept(itinerary, "reoptimize", {d.day: self._places_of(d) for d in targets})

    def apply_action(self, itinerary: Itinerary, action_type: str, parameters: dict | None = None) -> EditResult:
        """Dispatch one assistant tool call. Malformed parameters are rejected, not raised."""
        params = parameters or {}
        handlers: dict[str, Callable[[], EditResult]] = {
            "add_activity":   lambda: self.add_place(
                itinerary, place_from_params(params["place"]), self._opt_int(params.get("day"))),
            "remove_activity": lambda: self.remove_place(itinerary, str(params["place_id"])),
            "move_activity":  lambda: self.move_place(
                itinerary, str(params["place_id"]), int(params["to_day"])),
            "change_pace":    lambda: self.change_pace(itinerary, params["pace"]),
            "optimize_route": lambda: self.reoptimize(itinerary, self._opt_int(params.get("day"))),
        }

        handler = handlers.get(action_type)
        if handler is None:
            return self._reject(itinerary, action_type, f"Unknown action {action_type!r}")
        try:
            return handler()
        except (KeyError, TypeError, ValueError) as exc:
            return self._reject(itinerary, action_type, f"Invalid parameters: {exc}")

    # ── internals ─────────────────────────────────────────────────────────────

    @staticmethod
    def _opt_int(value: Any) -> int | None:
        return None if value is None else int(value)

    @staticmethod
    def _places_of(day: DayPlan) -> list[Place]:
        return [sp.place for sp in day.places]

    @staticmethod
    def _place_ids(itinerary: Itinerary) -> set[str]:
        return {p.place_id for p in itinerary.all_places()}

    @staticmethod
    def _valid_day(itinerary: Itinerary, day: int) -> bool:
        return 1 <= day <= len(itinerary.days)

    @staticmethod
    def _reject(itinerary: Itinerary, action: str, reason: str) -> EditResult:
        log.info("Rejected %s: %s", action, reason)
        return EditResult(accepted=False, itinerary=itinerary, rejection_reason=reason, action=action)

    def _accept(self, itinerary: Itinerary, action: str, changed: dict[int, list[Place]]) -> EditResult:
        """Rebuild the changed days (re-themed and re-sequenced) and re-assemble."""
        pace = itinerary.metadata.pace
        rebuilt = {
            d.day: d
            for d in self.planner.build_days(
                [DayAllocation(day=n, theme=day_theme(places), places=places)
                 for n, places in sorted(changed.items())],
                pace,
            )
        }
        days = [rebuilt.get(d.day, d) for d in itinerary.days]

        edited = self.planner.assemble(
            itinerary.destination, days, pace,
            travelers=self.travelers,
            budget_preferences=self.budget_preferences,
            include_budget=itinerary.metadata.estimated_budget is not None,
            itinerary_id=itinerary.itinerary_id,
        )
        log.debug("Applied %s to day(s) %s", action, sorted(changed))
        return EditResult(accepted=True, itinerary=edited, action=action)

    def _replan(self, itinerary: Itinerary, action: str, places: list[Place], pace: Pace) -> EditResult:
        fresh = self.planner.plan(
            itinerary.destination, places, len(itinerary.days) or itinerary.trip_length_days, pace,
            travelers=self.travelers,
            budget_preferences=self.budget_preferences,
            include_budget=itinerary.metadata.estimated_budget is not None,
        )
        return EditResult(
            accepted=True,
            itinerary=replace(fresh, itinerary_id=itinerary.itinerary_id),
            action=action,
        )
