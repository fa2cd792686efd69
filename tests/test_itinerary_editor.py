import copy

import pytest

from schemas.itinerary import Pace
from modules.planning.itinerary_planner import ItineraryPlanner
from modules.reoptimization.itinerary_editor import ItineraryEditor


@pytest.fixture
def planner():
    return ItineraryPlanner()


@pytest.fixture
def editor(planner):
    return ItineraryEditor(planner=planner)


@pytest.fixture
def itinerary(planner, make_place):
    # two far-apart groups → two clusters → one per day at relaxed pace
    left = [make_place(f"l{i}", 48.85 + i * 0.001, 2.29, ("museum",)) for i in range(3)]
    right = [make_place(f"r{i}", 48.89 + i * 0.001, 2.39, ("park",)) for i in range(2)]
    return planner.plan("Paris", left + right, 2, "relaxed")


def _ids(day):
    return day.place_ids


def test_add_place_to_day(editor, itinerary, make_place):
    snapshot = copy.deepcopy(itinerary)
    result = editor.add_place(itinerary, make_place("new", 48.891, 2.391, ("park",)), day=2)

    assert result.accepted
    assert "new" in _ids(result.itinerary.days[1])
    assert result.itinerary.days[0] is itinerary.days[0]
    assert result.itinerary.itinerary_id == itinerary.itinerary_id
    assert result.itinerary.metadata.total_places == 6
    assert itinerary == snapshot


def test_add_place_without_day_replans(editor, itinerary, make_place):
    result = editor.add_place(itinerary, make_place("new", 48.851, 2.291, ("museum",)))
    assert result.accepted
    assert sorted(p.place_id for p in result.itinerary.all_places()) == ["l0", "l1", "l2", "new", "r0", "r1"]
    assert len(result.itinerary.days) == 2


def test_add_duplicate_is_rejected(editor, itinerary, make_place):
    result = editor.add_place(itinerary, make_place("l0", 0, 0), day=1)
    assert not result.accepted
    assert "already" in result.rejection_reason
    assert result.itinerary is itinerary


def test_add_to_missing_day_is_rejected(editor, itinerary, make_place):
    result = editor.add_place(itinerary, make_place("new", 0, 0), day=5)
    assert not result.accepted
    assert "Day 5" in result.rejection_reason


def test_remove_place(editor, itinerary):
    result = editor.remove_place(itinerary, "l1")
    assert result.accepted
    assert "l1" not in [p.place_id for p in result.itinerary.all_places()]
    assert [s.order for s in result.itinerary.days[0].places] == [1, 2]
    assert result.itinerary.metadata.total_places == 4


def test_remove_unknown_is_rejected(editor, itinerary):
    result = editor.remove_place(itinerary, "ghost")
    assert not result.accepted
    assert "ghost" in result.rejection_reason


def test_move_place(editor, itinerary):
    result = editor.move_place(itinerary, "r0", 1)
    assert result.accepted
    assert "r0" in _ids(result.itinerary.days[0])
    assert "r0" not in _ids(result.itinerary.days[1])
    assert result.itinerary.metadata.overflow_days == [1]


def test_move_to_invalid_day_is_rejected(editor, itinerary):
    assert not editor.move_place(itinerary, "r0", 0).accepted
    assert not editor.move_place(itinerary, "ghost", 1).accepted


def test_change_pace(editor, itinerary):
    result = editor.change_pace(itinerary, "packed")
    assert result.accepted
    assert result.itinerary.metadata.pace == Pace.PACKED
    assert result.itinerary.metadata.total_places == 5

    rejected = editor.change_pace(itinerary, "frantic")
    assert not rejected.accepted


def test_reoptimize_keeps_nearest_neighbour_order(editor, itinerary, make_place):
    shuffled = editor.add_place(itinerary, make_place("l3", 48.8505, 2.29, ("museum",)), day=1).itinerary
    result = editor.reoptimize(shuffled)
    assert result.accepted
    assert _ids(result.itinerary.days[0]) == _ids(shuffled.days[0])
    assert not editor.reoptimize(itinerary, day=3).accepted


def test_apply_action_dispatch(editor, itinerary):
    added = editor.apply_action(itinerary, "add_activity", {
        "place": {"place_id": "cafe", "name": "Cafe", "location": {"lat": 48.852, "lng": 2.29},
                  "types": ["restaurant"]},
        "day": 1,
    })
    assert added.accepted
    assert "cafe" in _ids(added.itinerary.days[0])

    removed = editor.apply_action(added.itinerary, "remove_activity", {"place_id": "cafe"})
    assert removed.accepted

    moved = editor.apply_action(itinerary, "move_activity", {"place_id": "l0", "to_day": "2"})
    assert moved.accepted

    paced = editor.apply_action(itinerary, "change_pace", {"pace": "moderate"})
    assert paced.itinerary.metadata.pace == Pace.MODERATE

    assert editor.apply_action(itinerary, "optimize_route", {}).accepted


def test_apply_action_rejections(editor, itinerary):
    unknown = editor.apply_action(itinerary, "book_flight", {})
    assert not unknown.accepted
    assert "Unknown action" in unknown.rejection_reason

    malformed = editor.apply_action(itinerary, "add_activity", {"place": {"name": "no id"}})
    assert not malformed.accepted
    assert "Invalid parameters" in malformed.rejection_reason

    missing = editor.apply_action(itinerary, "remove_activity", None)
    assert not missing.accepted
