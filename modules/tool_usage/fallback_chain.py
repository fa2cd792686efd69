"""
modules/tool_usage/fallback_chain.py
--------------------------------------
Ordered list of directions strategies tried in sequence.

    backend proxy  →  Google Directions  →  straight-line heuristic

Each strategy answers with a RouteResult or a RouteUnavailable. The chain
returns the first RouteResult; when every strategy is unavailable it returns
one RouteUnavailable whose reason lists each strategy's reason in order.
A strategy that raises is treated as unavailable for that strategy only.
"""

from __future__ import annotations
from typing import Protocol, runtime_checkable
import logging

from schemas.place import LatLng
from schemas.transport import RouteOutcome, RouteResult, RouteUnavailable, TravelMode

log = logging.getLogger(__name__)


@runtime_checkable
class DirectionsProvider(Protocol):
    """Anything that can route one (origin, destination, mode) query."""

    def route(self, origin: LatLng, destination: LatLng, mode: TravelMode) -> RouteOutcome:
        ...


class FallbackChain:

    def __init__(self, strategies: list[DirectionsProvider]):
        self.strategies = list(strategies)

    @property
    def name(self) -> str:
        return " -> ".join(getattr(s, "name", type(s).__name__) for s in self.strategies)

    def route(self, origin: LatLng, destination: LatLng, mode: TravelMode) -> RouteOutcome:
        mode = TravelMode(mode)
        reasons: list[str] = []

        for strategy in self.strategies:
            label = getattr(strategy, "name", type(strategy).__name__)
            try:
                outcome = strategy.route(origin, destination, mode)
            except Exception as exc:
                log.warning("Directions strategy %s raised for %s: %s", label, mode.value, exc)
                reasons.append(f"{label}: {exc}")
                continue

            if isinstance(outcome, RouteResult):
                if reasons:
                    log.info("Directions for %s served by %s after %d fallback(s)",
                             mode.value, label, len(reasons))
                return outcome
            reasons.append(f"{label}: {outcome.reason or 'unavailable'}")

        if not self.strategies:
            reasons.append("no directions strategy configured")
        return RouteUnavailable(mode=mode, reason="; ".join(reasons))
