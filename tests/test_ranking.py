import pytest

from counter_app.models.attacker import AttackerRecord, Filters
from counter_app.services.abilities import ABILITY_EFFECTS, AbilityEffect
from counter_app.services.pool_loader import load_curated_pool
from counter_app.services.ranking import RankingEngine, best_hit, rank_counters, risk_bucket
from counter_app.services.types import TYPE_CHART, weakness_vector
from counter_app.utils.errors import AbilityTableError, ChartError


def rec(name, types, strong, power=90, **kw):
    return AttackerRecord(name=name, types=tuple(types), strong=tuple(strong), power=power, **kw)


RAMPARDOS = rec("Rampardos", ["Rock"], ["Rock"], power=96)
ZAPDOS = rec("Zapdos", ["Electric", "Flying"], ["Electric", "Flying"], power=90)


def test_single_candidate_scenario():
    result = rank_counters(["Fire", "Flying"], pool=[RAMPARDOS])
    assert len(result.picks) == 1
    pick = result.picks[0]
    assert pick.hit_type == "Rock"
    assert pick.mult == 4
    assert pick.damage_potential == 100
    assert pick.offense == pytest.approx(3.84)
    assert pick.risk == 25
    assert pick.score == pytest.approx(3.99)
    assert pick.display_score == 3.99


def test_weaknesses_output():
    result = rank_counters(["Fire", "Flying"], pool=[])
    assert result.weaknesses == [("Rock", 4.0), ("Water", 2.0), ("Electric", 2.0)]
    assert result.picks == []


def test_empty_target_returns_empty_result():
    result = rank_counters([], pool=[RAMPARDOS])
    assert result.picks == []
    assert result.weaknesses == []


def test_no_counter_found_is_not_an_error():
    assert rank_counters(["Water"], pool=[rec("Snorlax", ["Normal"], ["Normal"])]).picks == []


def test_neutral_strong_type_never_appears():
    # Rock contra Water es x1
    assert rank_counters(["Water"], pool=[RAMPARDOS]).picks == []


def test_quad_weak_target_scores_higher_than_double_weak():
    quad = rank_counters(["Fire", "Flying"], pool=[RAMPARDOS]).picks[0]
    double = rank_counters(["Ice"], pool=[RAMPARDOS]).picks[0]
    neutral = rank_counters(["Water"], pool=[RAMPARDOS]).picks
    assert quad.score > double.score
    assert neutral == []


def test_damage_potential_is_relative_to_best():
    result = rank_counters(["Fire", "Flying"], pool=[ZAPDOS, RAMPARDOS])
    assert [p.attacker.name for p in result.picks] == ["Rampardos", "Zapdos"]
    assert result.picks[0].damage_potential == 100
    assert result.picks[1].damage_potential == 47  # 1.8 / 3.84
    assert result.picks[1].risk == 50
    assert result.picks[1].score == pytest.approx(1.85)


def test_best_hit_is_max_multiplier_not_first_match():
    att = rec("Mamo", ["Ice", "Rock"], ["Rock", "Ice"])
    pick = rank_counters(["Flying", "Dragon"], pool=[att]).picks[0]
    assert pick.hit_type == "Ice"
    assert pick.mult == 4


def test_best_hit_tie_keeps_stored_order():
    weak = weakness_vector(["Fire", "Rock"])
    assert best_hit(["Water", "Ground"], weak) == ("Water", 4.0)
    assert best_hit(["Ground", "Water"], weak) == ("Ground", 4.0)
    assert best_hit(["Normal"], weak) is None


def test_risk_buckets_are_ordered():
    assert risk_bucket(0.25) < risk_bucket(1) < risk_bucket(2) < risk_bucket(4)


def test_incoming_risk_uses_worst_target_stab():
    # Garchomp recibe x4 de Ice
    chomp = rec("Garchomp", ["Dragon", "Ground"], ["Dragon", "Ground"], power=91)
    pick = rank_counters(["Ice", "Steel"], pool=[chomp]).picks[0]
    assert pick.hit_type == "Ground"
    assert pick.risk == 100
    assert pick.score == pytest.approx(pick.offense)


def test_filters():
    legend = rec("Mewtwo", ["Psychic"], ["Psychic"], power=96, restricted=True)
    mega = rec("Heracross (Mega)", ["Bug", "Fighting"], ["Bug", "Fighting"], power=94, is_mega=True)
    plain = rec("Iron Hands", ["Fighting", "Electric"], ["Fighting", "Electric"], power=88)
    pool = [legend, mega, plain]

    def names(filters):
        return {p.attacker.name for p in rank_counters(["Poison"], filters, pool=pool).picks} | \
               {p.attacker.name for p in rank_counters(["Dark"], filters, pool=pool).picks}

    assert names(Filters()) == {"Mewtwo", "Heracross (Mega)", "Iron Hands"}
    assert "Mewtwo" not in names(Filters(allow_restricted=False))
    assert "Heracross (Mega)" not in names(Filters(show_mega=False))


def test_malformed_records_are_skipped():
    broken = AttackerRecord(name="", types=("Rock",), strong=("Rock",))
    untyped = AttackerRecord(name="Nothing", types=(), strong=("Rock",))
    result = rank_counters(["Fire", "Flying"], pool=[broken, untyped, RAMPARDOS])
    assert [p.attacker.name for p in result.picks] == ["Rampardos"]


def test_equal_scores_keep_pool_order():
    a = rec("A", ["Rock"], ["Rock"], power=90)
    b = rec("B", ["Rock"], ["Rock"], power=90)
    assert [p.attacker.name for p in rank_counters(["Fire"], pool=[a, b]).picks] == ["A", "B"]
    assert [p.attacker.name for p in rank_counters(["Fire"], pool=[b, a]).picks] == ["B", "A"]


def test_rank_is_idempotent():
    pool = load_curated_pool()
    first = rank_counters(["Dragon", "Ground"], pool=pool)
    second = rank_counters(["Dragon", "Ground"], pool=pool)
    assert first == second
    assert [p.score for p in first.picks] == sorted((p.score for p in first.picks), reverse=True)


def test_pool_is_not_mutated():
    pool = load_curated_pool()
    snapshot = list(pool)
    rank_counters(["Water"], Filters(show_mega=False), "drizzle", pool)
    assert pool == snapshot


def test_target_ability_negates_fire_counters():
    heatran = rec("Heatran", ["Fire", "Steel"], ["Fire", "Steel"], power=92)
    plain = rank_counters(["Grass"], pool=[heatran]).picks[0]
    sea = rank_counters(["Grass"], target_ability="primordial-sea", pool=[heatran]).picks[0]
    assert sea.offense == pytest.approx(plain.offense * 0.6)
    assert sea.risk == 30


def test_weather_setter_gets_only_survivability_bonus():
    ttar = rec("Tyranitar (Mega)", ["Rock", "Dark"], ["Rock", "Dark"], power=99, ability_tag="sand-stream")
    pick = rank_counters(["Fire", "Flying"], pool=[ttar]).picks[0]
    # Fire vs Rock/Dark x0.5, Flying vs Rock/Dark x0.5 -> resiste
    assert pick.score == pytest.approx(pick.offense + 0.15)
    assert pick.score == pytest.approx(4 * 0.99 + 0.15)


def test_sand_stream_does_not_outrank_identical_attacker():
    plain = rec("Plain", ["Rock", "Dark"], ["Rock"], power=100)
    sand = rec("Sandy", ["Rock", "Dark"], ["Rock"], power=100, ability_tag="sand-stream")
    picks = rank_counters(["Fire", "Flying"], pool=[plain, sand]).picks
    assert [p.attacker.name for p in picks] == ["Plain", "Sandy"]
    assert picks[0].score == picks[1].score == pytest.approx(4.15)


def test_zero_offense_gives_zero_damage_potential():
    digger = rec("Excadrill", ["Ground", "Steel"], ["Ground"], power=90)
    pick = rank_counters(["Electric"], target_ability="levitate", pool=[digger]).picks[0]
    assert pick.offense == 0
    assert pick.damage_potential == 0


def test_engine_accepts_alternate_tables():
    chart = {k: dict(v) for k, v in TYPE_CHART.items()}
    chart["Rock"]["Water"] = 2.0
    engine = RankingEngine(chart=chart, abilities={"rock-head": AbilityEffect(flat_offense=2.0)})
    att = rec("Rocky", ["Rock"], ["Rock"], power=100, ability_tag="rock-head")
    pick = engine.rank(["Water"], pool=[att]).picks[0]
    assert pick.mult == 2
    assert pick.offense == pytest.approx(4.0)
    # la tabla por defecto no se ve afectada
    assert rank_counters(["Water"], pool=[att]).picks == []


def test_engine_rejects_invalid_tables():
    with pytest.raises(ChartError):
        RankingEngine(chart={"Fire": {}})
    with pytest.raises(AbilityTableError):
        RankingEngine(abilities={"x": AbilityEffect(weather="fog")})
    assert "drizzle" in ABILITY_EFFECTS


def test_repeated_target_type_counts_once():
    result = rank_counters(["Fire", "Fire"], pool=[RAMPARDOS])
    assert result.picks[0].mult == 2
    assert result == rank_counters(["Fire"], pool=[RAMPARDOS])


def test_unknown_target_type_does_not_raise_risk():
    pick = rank_counters(["Fire", "Foo"], pool=[RAMPARDOS]).picks[0]
    assert pick.risk == 25
    assert pick.mult == 2


def test_target_types_capped_at_two():
    assert rank_counters(["Fire", "Flying", "Grass"], pool=[RAMPARDOS]) == \
        rank_counters(["Fire", "Flying"], pool=[RAMPARDOS])
