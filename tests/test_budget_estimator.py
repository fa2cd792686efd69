import pytest

from schemas.budget import (
    AlignmentStatus, BudgetPreferences, CityTier, ComfortLevel, DiningStyle, LocalTransport, TripSpec,
)
from schemas.place import Destination
from modules.memory.ttl_cache import TTLCache
from modules.planning.budget_estimator import BudgetEstimator, price_bucket
from modules.planning.cost_tables import determine_city_tier


@pytest.fixture
def estimator(clock):
    return BudgetEstimator(cache=TTLCache(3600, clock=clock))


@pytest.fixture
def tokyo_trip():
    return TripSpec(destination=Destination("Tokyo"), duration_days=3, travelers=2)


@pytest.fixture
def taxi_prefs():
    return BudgetPreferences(
        accommodation_level=ComfortLevel.MODERATE,
        food_level=ComfortLevel.MODERATE,
        transport_mode=LocalTransport.TAXI,
    )


def _category_sum(est):
    b = est.breakdown
    return (b.accommodation.total + b.food.total + b.transportation.total
            + b.activities.total + b.miscellaneous.total)


def test_tier_one_scenario(estimator, tokyo_trip, taxi_prefs):
    est = estimator.estimate(tokyo_trip, taxi_prefs)

    assert est.city_tier == CityTier.TIER1
    assert est.breakdown.accommodation.total == 450          # 150 × 3 nights × 1 room
    assert est.breakdown.accommodation.rooms == 1
    assert est.breakdown.food.total == 420                   # 70 × 3 × 2
    assert est.breakdown.transportation.total == pytest.approx(310)   # 3.5 × 10 × 2 × 3 + 50 × 2
    assert est.breakdown.miscellaneous.total == 120
    assert est.total == pytest.approx(1300)
    assert est.per_person == pytest.approx(650)
    assert est.per_day == pytest.approx(433.33)
    assert est.currency == "USD"


def test_categories_sum_to_total(estimator, make_place):
    trip = TripSpec(
        destination="Prague",
        duration_days=4,
        travelers=3,
        places=[make_place(f"p{i}", 50.08, 14.42, price_level=i % 5) for i in range(7)],
    )
    prefs = BudgetPreferences(dining_style=DiningStyle.STREET_FOOD, transport_mode=LocalTransport.UBER)
    est = estimator.estimate(trip, prefs)
    assert abs(_category_sum(est) - est.total) <= 1


def test_food_applies_dining_multiplier_and_meal_split(estimator, tokyo_trip):
    est = estimator.estimate(tokyo_trip, BudgetPreferences(dining_style=DiningStyle.STREET_FOOD))
    assert est.breakdown.food.total == pytest.approx(70 * 0.7 * 3 * 2)
    assert est.breakdown.food.meals == {
        "breakfast": pytest.approx(12.25), "lunch": pytest.approx(17.15), "dinner": pytest.approx(19.6),
    }


def test_rooms_round_up_for_odd_party(estimator):
    est = estimator.estimate(TripSpec(destination="London", duration_days=2, travelers=3))
    assert est.breakdown.accommodation.rooms == 2
    assert est.breakdown.accommodation.total == 150 * 2 * 2


def test_inter_attraction_cost_scales_with_places(estimator, tokyo_trip, taxi_prefs, make_place):
    tokyo_trip.places = [make_place(f"p{i}", 35.68, 139.76) for i in range(6)]
    est = estimator.estimate(tokyo_trip, taxi_prefs)
    # (35 + 2 places/day × 3.5 × 0.5) × 2 travelers × 3 nights + 100
    assert est.breakdown.transportation.total == pytest.approx(331)


def test_walking_and_rental_car_rates(estimator, tokyo_trip):
    walk = estimator.estimate(tokyo_trip, BudgetPreferences(transport_mode=LocalTransport.WALKING))
    car = estimator.estimate(tokyo_trip, BudgetPreferences(transport_mode=LocalTransport.RENTAL_CAR))
    assert walk.breakdown.transportation.total == pytest.approx(15 * 0.3 * 2 * 3 + 100)
    assert car.breakdown.transportation.total == pytest.approx(40 * 2 * 3 + 100)


def test_activities_bucketed_by_price_level(estimator, make_place):
    places = [
        make_place("free", 0, 0, price_level=None),
        make_place("cheap", 0, 0, price_level=1),
        make_place("mid", 0, 0, price_level=2),
        make_place("lux", 0, 0, price_level=4),
    ]
    est = estimator.estimate(TripSpec(destination="Springfield", duration_days=2, travelers=2, places=places))
    acts = est.breakdown.activities
    assert est.city_tier == CityTier.TIER3
    assert acts.total == (0 + 5 + 15 + 25) * 2
    assert acts.counts == {"free": 1, "budget": 1, "moderate": 1, "premium": 1}
    assert [price_bucket(p) for p in places] == ["free", "budget", "moderate", "premium"]


def test_confidence_bounds(estimator, tokyo_trip, taxi_prefs, make_place):
    bare = estimator.estimate(TripSpec())
    assert bare.confidence == pytest.approx(0.7)

    tokyo_trip.places = [make_place("p", 35.0, 139.0)]
    full = estimator.estimate(tokyo_trip, taxi_prefs)
    assert full.confidence == pytest.approx(0.95)

    partial = estimator.estimate(TripSpec(destination="Oslo", duration_days=2))
    assert partial.confidence == pytest.approx(0.9)

    for est in (bare, full, partial):
        assert 0 <= est.confidence <= 0.95


def test_missing_preferences_use_defaults(estimator):
    est = estimator.estimate(TripSpec(destination="Rome"), None)
    assert est.breakdown.accommodation.level == ComfortLevel.MODERATE
    assert est.breakdown.accommodation.nights == 3
    assert est.breakdown.transportation.mode == LocalTransport.MIXED
    assert est.recommendations == []


@pytest.mark.parametrize("target, status, pct", [
    (1300, AlignmentStatus.ON_BUDGET, 0.0),
    (1000, AlignmentStatus.OVER_BUDGET, 30.0),
    (2000, AlignmentStatus.UNDER_BUDGET, 35.0),
])
def test_budget_alignment(estimator, tokyo_trip, taxi_prefs, target, status, pct):
    taxi_prefs.budget_total = target
    alignment = estimator.estimate(tokyo_trip, taxi_prefs).budget_alignment
    assert alignment.status == status
    assert alignment.percentage == pytest.approx(pct)
    assert alignment.difference == pytest.approx(abs(target - 1300))


def test_alignment_unknown_without_target(estimator, tokyo_trip):
    alignment = estimator.estimate(tokyo_trip).budget_alignment
    assert alignment.status == AlignmentStatus.UNKNOWN
    assert alignment.message
    assert alignment.difference is None


def test_recommendations(estimator, tokyo_trip, taxi_prefs):
    taxi_prefs.accommodation_level = ComfortLevel.LUXURY
    taxi_prefs.food_level = ComfortLevel.LUXURY
    est = estimator.estimate(tokyo_trip, taxi_prefs)
    by_category = {r.category: r for r in est.recommendations}

    assert by_category["accommodation"].savings == pytest.approx(est.total * 0.15, abs=0.01)
    assert by_category["food"].savings == pytest.approx(est.total * 0.12, abs=0.01)
    assert by_category["transportation"].savings == pytest.approx(est.total * 0.08, abs=0.01)

    upgrade = estimator.estimate(tokyo_trip, BudgetPreferences(accommodation_level=ComfortLevel.BUDGET))
    assert upgrade.recommendations[0].type == "upgrade"
    assert upgrade.recommendations[0].added_cost == pytest.approx(upgrade.total * 0.10, abs=0.01)


def test_results_are_cached_until_ttl(estimator, clock, tokyo_trip, taxi_prefs):
    first = estimator.estimate(tokyo_trip, taxi_prefs)
    assert estimator.estimate(tokyo_trip, taxi_prefs) == first

    clock.advance(3599)
    assert estimator.estimate(tokyo_trip, taxi_prefs) == first

    clock.advance(1)
    again = estimator.estimate(tokyo_trip, taxi_prefs)
    assert again is not first
    assert again == first


def test_compare_options(estimator, tokyo_trip):
    options = [
        BudgetPreferences(accommodation_level=ComfortLevel.LUXURY),
        BudgetPreferences(accommodation_level=ComfortLevel.BUDGET),
    ]
    results = estimator.compare_options(tokyo_trip, options)
    assert [r.option for r in results] == [1, 2]
    assert results[0].savings == 0.0
    assert results[1].savings == pytest.approx(results[0].estimate.total - results[1].estimate.total)
    assert results[1].savings > 0


def test_detailed_breakdown(estimator, tokyo_trip, taxi_prefs):
    est = estimator.estimate(tokyo_trip, taxi_prefs)
    food = estimator.detailed_breakdown(est, "food")
    assert food.total == 420
    assert food.percentage == pytest.approx(32.31)

    transport = estimator.detailed_breakdown(est, "transportation")
    assert [r.category for r in transport.recommendations] == ["transportation"]

    assert estimator.detailed_breakdown(est, "flights") is None


def test_city_tier_matching():
    assert determine_city_tier("Paris, France") == CityTier.TIER1
    assert determine_city_tier("Greater LONDON") == CityTier.TIER1
    assert determine_city_tier("Prague") == CityTier.TIER2
    assert determine_city_tier("Springfield") == CityTier.TIER3
    assert determine_city_tier("") == CityTier.TIER3


def test_mutating_a_cached_estimate_does_not_leak(estimator, tokyo_trip, taxi_prefs):
    first = estimator.estimate(tokyo_trip, taxi_prefs)
    total, food = first.total, first.breakdown.food.total
    first.total = -1.0
    first.breakdown.food.total = 0.0

    again = estimator.estimate(tokyo_trip, taxi_prefs)
    assert again.total == total
    assert again.breakdown.food.total == food
