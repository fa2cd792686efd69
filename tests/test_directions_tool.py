import pytest
import requests

from schemas.place import LatLng
from schemas.transport import RouteResult, RouteUnavailable, TravelMode
from modules.tool_usage import directions_tool
from modules.tool_usage.directions_tool import (
    DETOUR_FACTOR, BackendDirectionsStrategy, GoogleDirectionsStrategy,
    HeuristicDirectionsStrategy, build_directions_provider, parse_directions_payload,
)
from modules.tool_usage.distance_tool import distance_km
from modules.tool_usage.fallback_chain import FallbackChain

A = LatLng(48.8584, 2.2945)
B = LatLng(48.8606, 2.3376)


GOOGLE_PAYLOAD = {
    "status": "OK",
    "routes": [{
        "summary": "Line 6",
        "warnings": ["Walking directions are in beta."],
        "fare": {"value": 2.15, "currency": "EUR", "text": "€2.15"},
        "legs": [{
            "duration": {"value": 1260, "text": "21 mins"},
            "distance": {"value": 3400, "text": "3.4 km"},
            "steps": [
                {
                    "html_instructions": "Walk to <b>Bir-Hakeim</b>",
                    "distance": {"value": 400}, "duration": {"value": 300},
                    "travel_mode": "WALKING",
                    "start_location": {"lat": 48.8584, "lng": 2.2945},
                    "end_location": {"lat": 48.8539, "lng": 2.2893},
                },
                {
                    "html_instructions": "Metro towards <div>Nation</div>",
                    "distance": {"value": 3000}, "duration": {"value": 960},
                    "travel_mode": "TRANSIT",
                    "transit_details": {
                        "line": {"name": "Line 6", "short_name": "6", "vehicle": {"name": "Subway"}},
                        "departure_stop": {"name": "Bir-Hakeim"},
                        "arrival_stop": {"name": "Montparnasse"},
                        "headsign": "Nation",
                        "num_stops": 5,
                    },
                },
            ],
        }],
    }],
}


class StubStrategy:
    def __init__(self, name, outcome):
        self.name = name
        self.outcome = outcome
        self.calls = 0

    def route(self, origin, destination, mode):
        self.calls += 1
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload


# ── FallbackChain ─────────────────────────────────────────────────────────────

def test_chain_returns_first_success(make_route):
    ok = make_route("walking", 100, 200)
    first = StubStrategy("backend", RouteUnavailable(TravelMode.WALKING, "down"))
    second = StubStrategy("google", ok)
    third = StubStrategy("heuristic", make_route("walking", 999, 999))

    assert FallbackChain([first, second, third]).route(A, B, TravelMode.WALKING) is ok
    assert (first.calls, second.calls, third.calls) == (1, 1, 0)


def test_chain_collects_every_reason():
    chain = FallbackChain([
        StubStrategy("backend", RouteUnavailable(TravelMode.DRIVING, "not configured")),
        StubStrategy("google", RuntimeError("boom")),
    ])
    outcome = chain.route(A, B, "driving")
    assert isinstance(outcome, RouteUnavailable)
    assert outcome.mode == TravelMode.DRIVING
    assert outcome.reason == "backend: not configured; google: boom"


def test_empty_chain_is_unavailable():
    outcome = FallbackChain([]).route(A, B, TravelMode.TRANSIT)
    assert isinstance(outcome, RouteUnavailable)


def test_default_provider_order():
    chain = build_directions_provider(heuristic_fallback=True)
    assert [s.name for s in chain.strategies] == ["backend", "google", "heuristic"]
    assert [s.name for s in build_directions_provider(heuristic_fallback=False).strategies] == ["backend", "google"]


# ── Strategies ────────────────────────────────────────────────────────────────

def test_parse_google_payload():
    result = parse_directions_payload(GOOGLE_PAYLOAD, TravelMode.TRANSIT, "google")
    assert isinstance(result, RouteResult)
    assert (result.duration_seconds, result.distance_meters) == (1260, 3400)
    assert result.fare.value == pytest.approx(2.15)
    assert result.fare.currency == "EUR"
    assert [s.instruction for s in result.steps] == ["Walk to Bir-Hakeim", "Metro towards Nation"]
    assert [s.step_number for s in result.steps] == [1, 2]
    assert result.steps[0].start_location == LatLng(48.8584, 2.2945)
    assert result.steps[1].transit.line_short_name == "6"
    assert result.steps[1].transit.num_stops == 5
    assert result.warnings == ["Walking directions are in beta."]


def test_parse_empty_routes_is_unavailable():
    outcome = parse_directions_payload({"status": "OK", "routes": []}, TravelMode.WALKING, "google")
    assert isinstance(outcome, RouteUnavailable)


def test_google_without_key_is_unavailable():
    outcome = GoogleDirectionsStrategy(api_key="").route(A, B, TravelMode.WALKING)
    assert isinstance(outcome, RouteUnavailable)
    assert "GOOGLE_MAPS_API_KEY" in outcome.reason


def test_google_success(monkeypatch):
    seen = {}

    def fake_get(url, params=None, timeout=None):
        seen.update(url=url, params=params, timeout=timeout)
        return FakeResponse(GOOGLE_PAYLOAD)

    monkeypatch.setattr(directions_tool.requests, "get", fake_get)
    outcome = GoogleDirectionsStrategy(api_key="k", api_url="https://maps.test/directions", timeout=3).route(
        A, B, TravelMode.TRANSIT)

    assert isinstance(outcome, RouteResult)
    assert outcome.source == "google"
    assert seen["params"]["mode"] == "transit"
    assert seen["params"]["key"] == "k"
    assert seen["params"]["origin"] == "48.8584,2.2945"
    assert seen["timeout"] == 3


def test_google_error_status_is_unavailable(monkeypatch):
    monkeypatch.setattr(directions_tool.requests, "get",
                        lambda *a, **kw: FakeResponse({"status": "REQUEST_DENIED", "error_message": "bad key"}))
    outcome = GoogleDirectionsStrategy(api_key="k").route(A, B, TravelMode.DRIVING)
    assert isinstance(outcome, RouteUnavailable)
    assert outcome.reason == "bad key"


def test_network_error_is_unavailable(monkeypatch):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("no route to host")

    monkeypatch.setattr(directions_tool.requests, "get", boom)
    outcome = GoogleDirectionsStrategy(api_key="k").route(A, B, TravelMode.WALKING)
    assert isinstance(outcome, RouteUnavailable)
    assert "no route to host" in outcome.reason


def test_backend_http_error_is_unavailable(monkeypatch):
    monkeypatch.setattr(directions_tool.requests, "get", lambda *a, **kw: FakeResponse({}, status_code=502))
    outcome = BackendDirectionsStrategy(api_url="https://backend.test/directions").route(A, B, TravelMode.WALKING)
    assert isinstance(outcome, RouteUnavailable)
    assert outcome.reason == "HTTP 502"


def test_unconfigured_backend_is_unavailable():
    outcome = BackendDirectionsStrategy(api_url="UNSPECIFIED").route(A, B, TravelMode.WALKING)
    assert isinstance(outcome, RouteUnavailable)


def test_heuristic_estimate():
    result = HeuristicDirectionsStrategy().route(A, B, TravelMode.WALKING)
    km = distance_km(A, B) * DETOUR_FACTOR
    assert result.distance_meters == round(km * 1000)
    assert result.duration_seconds == pytest.approx(km / 4.8 * 3600, abs=1)
    assert result.source == "heuristic"
    assert len(result.steps) == 1
    assert result.warnings
