# counter_app/services/ranking.py
"""
Motor de ranking de counters.

Para cada candidato del pool: mejor golpe súper eficaz de su set "strong",
riesgo entrante según los STAB del objetivo, ajuste por habilidades y un
pequeño bonus de supervivencia. Sin estado entre llamadas.
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..models.attacker import AttackerRecord, Filters, RankedPick, RankResult
from .abilities import ABILITY_EFFECTS, AbilityEffect, resolve_ability, validate_ability_table
from .pool_loader import filter_pool
from .types import TYPE_CHART, clean_types, normalize_type, super_effective, type_effectiveness, validate_chart, weakness_vector

log = logging.getLogger(__name__)

SE_THRESHOLD = 2.0

# Riesgo por peor STAB entrante (heurística de pantalla, no balance de juego)
RISK_QUAD = 100
RISK_WEAK = 75
RISK_NEUTRAL = 50
RISK_RESIST = 25

SURVIVE_RESIST = 0.15
SURVIVE_NEUTRAL = 0.05


def risk_bucket(worst_incoming: float) -> int:
    if worst_incoming >= 4:
        return RISK_QUAD
    if worst_incoming >= 2:
        return RISK_WEAK
    if worst_incoming <= 0.5:
        return RISK_RESIST
    return RISK_NEUTRAL


def survival_bonus(worst_incoming: float) -> float:
    if worst_incoming <= 0.5:
        return SURVIVE_RESIST
    if worst_incoming == 1:
        return SURVIVE_NEUTRAL
    return 0.0


def best_hit(strong: Sequence[str], weaknesses: Dict[str, float]) -> Optional[Tuple[str, float]]:
    """Tipo del set strong con mayor multiplicador >= 2; empate -> el primero guardado."""
    best = None
    for t in strong:
        m = weaknesses.get(normalize_type(t), 1.0)
        if m < SE_THRESHOLD:
            continue
        if best is None or m > best[1]:
            best = (normalize_type(t), m)
    return best


class RankingEngine:
    def __init__(self,
                 chart: Dict[str, Dict[str, float]] = TYPE_CHART,
                 abilities: Mapping[str, AbilityEffect] = ABILITY_EFFECTS):
        validate_chart(chart)
        validate_ability_table(abilities)
        self.chart = chart
        self.abilities = abilities

    def worst_incoming(self, target_types: Sequence[str], attacker_types: Sequence[str]) -> float:
        return max(type_effectiveness(stab, attacker_types, self.chart) for stab in target_types)

    def rank(self,
             target_types: Iterable[str],
             filters: Optional[Filters] = None,
             target_ability: Optional[str] = None,
             pool: Iterable[AttackerRecord] = ()) -> RankResult:
        targets = clean_types(target_types)
        if not targets:
            return RankResult()
        filters = filters or Filters()

        weaknesses = weakness_vector(targets, self.chart)
        candidates = filter_pool(pool, filters)

        scored: List[Tuple[AttackerRecord, str, float, float, int, float]] = []
        for att in candidates:
            hit = best_hit(att.strong, weaknesses)
            if hit is None:
                continue
            hit_type, mult = hit

            worst = self.worst_incoming(targets, att.types)
            offense = mult * (att.power / 100.0)
            risk = risk_bucket(worst)

            offense, risk = resolve_ability(
                offense, risk, hit_type, mult,
                att.ability_tag, target_ability, targets, self.abilities,
            )
            risk = max(0, min(100, int(round(risk))))
            score = offense + survival_bonus(worst)
            scored.append((att, hit_type, mult, offense, risk, score))

        top = max((s[3] for s in scored), default=0.0)
        picks = [
            RankedPick(
                attacker=att, hit_type=hit_type, mult=mult, offense=offense,
                damage_potential=int(round(100 * offense / top)) if top > 0 else 0,
                risk=risk, score=score,
            )
            for att, hit_type, mult, offense, risk, score in scored
        ]
        # sorted() es estable: a igual score se respeta el orden del pool
        picks = sorted(picks, key=lambda p: p.score, reverse=True)

        log.debug("rank %s (ability=%s): %d candidatos, %d picks",
                  "/".join(targets), target_ability, len(candidates), len(picks))
        return RankResult(weaknesses=super_effective(weaknesses), picks=picks)


DEFAULT_ENGINE = RankingEngine()

def rank_counters(target_types: Iterable[str],
                  filters: Optional[Filters] = None,
                  target_ability: Optional[str] = None,
                  pool: Iterable[AttackerRecord] = ()) -> RankResult:
    """Atajo con la tabla y las habilidades por defecto."""
    return DEFAULT_ENGINE.rank(target_types, filters, target_ability, pool)
