import pytest

from counter_app.services.types import (
    ALL_TYPES, TYPE_CHART, bucket_weaknesses, clean_types, super_effective, type_effectiveness,
    validate_chart, weakness_vector,
)
from counter_app.utils.errors import ChartError


@pytest.mark.parametrize("defender", ALL_TYPES)
def test_single_type_matches_chart(defender):
    vec = weakness_vector([defender])
    for atk in ALL_TYPES:
        assert vec[atk] == TYPE_CHART[atk].get(defender, 1.0)


def test_dual_type_is_order_independent():
    for d1 in ALL_TYPES:
        for d2 in ALL_TYPES:
            if d1 != d2:
                assert weakness_vector([d1, d2]) == weakness_vector([d2, d1])


def test_values_stay_in_closed_set():
    allowed = {0, 0.25, 0.5, 1, 2, 4}
    for d1 in ALL_TYPES:
        for d2 in ALL_TYPES:
            if d1 != d2:
                assert set(weakness_vector([d1, d2]).values()) <= allowed


def test_empty_defender_is_neutral():
    vec = weakness_vector([])
    assert set(vec) == set(ALL_TYPES)
    assert all(m == 1 for m in vec.values())


def test_fire_flying_takes_quad_from_rock():
    assert weakness_vector(["Fire", "Flying"])["Rock"] == 4


def test_normal_weak_to_fighting_immune_to_ghost():
    vec = weakness_vector(["Normal"])
    assert vec["Fighting"] == 2
    assert vec["Ghost"] == 0


def test_ice_hits_grass_super_effectively():
    assert type_effectiveness("Ice", ["Grass"]) == 2


def test_lowercase_names_are_normalized():
    assert weakness_vector(["fire", "FLYING"]) == weakness_vector(["Fire", "Flying"])
    assert type_effectiveness("rock", ["fire"]) == 2


def test_super_effective_sorted_desc_chart_order_on_ties():
    weak = super_effective(weakness_vector(["Fire", "Flying"]))
    assert weak == [("Rock", 4.0), ("Water", 2.0), ("Electric", 2.0)]


def test_buckets():
    b = bucket_weaknesses(weakness_vector(["Water", "Ground"]))
    assert ("Grass", 4.0) in b["x4"]
    assert ("Electric", 0.0) in b["immune"]
    assert ("Fire", 0.5) in b["resist"]
    assert ("Grass", 0.25) in bucket_weaknesses(weakness_vector(["Steel", "Flying"]))["resist"]
    assert b["x2"] == []


def test_default_chart_is_valid():
    validate_chart(TYPE_CHART)


def test_missing_attacking_row_fails():
    chart = {k: v for k, v in TYPE_CHART.items() if k != "Fairy"}
    with pytest.raises(ChartError):
        validate_chart(chart)


def test_unknown_multiplier_fails():
    chart = dict(TYPE_CHART)
    chart["Fire"] = {"Grass": 3.0}
    with pytest.raises(ChartError):
        validate_chart(chart)


def test_unknown_type_fails():
    chart = dict(TYPE_CHART)
    chart["Fire"] = {"Stellar": 2.0}
    with pytest.raises(ChartError):
        validate_chart(chart)


def test_repeated_defender_type_is_not_squared():
    assert weakness_vector(["Fire", "Fire"])["Water"] == 2
    assert weakness_vector(["Fire", "fire"]) == weakness_vector(["Fire"])


def test_unknown_defender_type_is_dropped():
    assert weakness_vector(["Fire", "Foo"]) == weakness_vector(["Fire"])


def test_defender_capped_at_two_types():
    assert weakness_vector(["Fire", "Flying", "Rock"]) == weakness_vector(["Fire", "Flying"])


def test_clean_types():
    assert clean_types([" water", "Water", "??", "ground", "Steel"]) == ["Water", "Ground"]
    assert clean_types(None) == []
