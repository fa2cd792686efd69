import pytest

from schemas.place import LatLng, Place
from schemas.transport import RouteResult, RouteUnavailable, TravelMode


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDirections:
    """
    Sync Directions Provider answering from a table keyed by mode value.
    A table value may be a RouteResult, a RouteUnavailable or an exception.
    """

    def __init__(self, table: dict):
        self.table = table
        self.calls: list[str] = []

    def route(self, origin, destination, mode):
        mode = TravelMode(mode)
        self.calls.append(mode.value)
        answer = self.table.get(mode.value, RouteUnavailable(mode=mode, reason="not in table"))
        if isinstance(answer, Exception):
            raise answer
        return answer


def route(mode: str, seconds: int, meters: int, **kwargs) -> RouteResult:
    return RouteResult(mode=TravelMode(mode), duration_seconds=seconds, distance_meters=meters, **kwargs)


def _make_place(pid: str, lat: float, lng: float, types=(), price_level=None) -> Place:
    return Place(place_id=pid, name=pid.title(), location=LatLng(lat, lng),
                 types=tuple(types), price_level=price_level)


@pytest.fixture
def make_place():
    return _make_place


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_route():
    return route


@pytest.fixture
def fake_directions():
    return FakeDirections


@pytest.fixture
def walking_driving_provider():
    """500 m trip: walking 6 min, driving 2 min over 600 m of road."""
    return FakeDirections({
        "walking": route("walking", 360, 500),
        "driving": route("driving", 120, 600),
    })
