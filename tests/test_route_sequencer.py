from modules.planning.route_sequencer import RouteSequencer


def _ids(places):
    return [p.place_id for p in places]


def test_nearest_neighbour_order(make_place):
    a = make_place("a", 0.00, 0.0)
    c = make_place("c", 0.03, 0.0)
    b = make_place("b", 0.01, 0.0)
    d = make_place("d", 0.02, 0.0)
    assert _ids(RouteSequencer().sequence([a, c, b, d])) == ["a", "b", "d", "c"]


def test_starts_with_first_input_place(make_place):
    far = make_place("far", 1.0, 1.0)
    near = [make_place(f"n{i}", 0.001 * i, 0.0) for i in range(3)]
    ordered = RouteSequencer().sequence([far] + near)
    assert ordered[0].place_id == "far"
    assert len(ordered) == 4


def test_tie_goes_to_earlier_input(make_place):
    start = make_place("start", 0.0, 0.0)
    east = make_place("east", 0.0, 0.01)
    west = make_place("west", 0.0, -0.01)
    assert _ids(RouteSequencer().sequence([start, east, west]))[1] == "east"
    assert _ids(RouteSequencer().sequence([start, west, east]))[1] == "west"


def test_sequencing_is_deterministic(make_place):
    places = [make_place(f"p{i}", (i * 7 % 5) * 0.003, (i * 3 % 4) * 0.004) for i in range(8)]
    seq = RouteSequencer()
    assert _ids(seq.sequence(places)) == _ids(seq.sequence(places))


def test_trivial_inputs(make_place):
    seq = RouteSequencer()
    assert seq.sequence([]) == []
    one = [make_place("solo", 1.0, 1.0)]
    assert seq.sequence(one) == one
    assert seq.sequence(one) is not one
