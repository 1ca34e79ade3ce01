# counter_app/services/abilities.py
"""
Heurísticas de habilidades (ligeras).

Cada habilidad soportada tiene un AbilityEffect con campos opcionales que
ajustan la ofensiva del atacante o el riesgo que corre. La tabla se valida al
importar; un clima, terreno o tipo desconocido rompe la carga, no la consulta.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .types import ALL_TYPES
from ..utils.errors import AbilityTableError

WEATHERS = ("rain", "sun", "sand", "snow", "none")
TERRAINS = ("electric", "grassy", "psychic", "misty", "none")

# Tipo potenciado por cada clima (para el choque lluvia/sol)
WEATHER_ELEMENT = {"rain": "Water", "sun": "Fire"}
OPPOSING_WEATHERS = {("rain", "sun"), ("sun", "rain")}

NEGATE_OFFENSE = 0.6
NEGATE_RISK = 1.2


@dataclass(frozen=True)
class SignatureBonus:
    type: str
    mult: float


@dataclass(frozen=True)
class AbilityEffect:
    flat_offense: Optional[float] = None
    atk_by_type: Mapping[str, float] = field(default_factory=dict)
    stab_boost: Optional[float] = None
    weather: Optional[str] = None
    terrain: Optional[str] = None
    signature_se: Optional[SignatureBonus] = None
    immune_types: Tuple[str, ...] = ()
    negate_types: Tuple[str, ...] = ()
    risk_mods_against: Mapping[str, float] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not any((
            self.flat_offense, self.atk_by_type, self.stab_boost,
            self.weather, self.terrain, self.signature_se,
            self.immune_types, self.negate_types, self.risk_mods_against,
        ))


ABILITY_EFFECTS: Mapping[str, AbilityEffect] = MappingProxyType({
    "drizzle": AbilityEffect(weather="rain", atk_by_type={"Water": 1.5}, risk_mods_against={"Fire": 0.8}),
    "drought": AbilityEffect(weather="sun", atk_by_type={"Fire": 1.5}, risk_mods_against={"Water": 0.8}),
    "primordial-sea": AbilityEffect(weather="rain", atk_by_type={"Water": 1.6}, negate_types=("Fire",)),
    "desolate-land": AbilityEffect(weather="sun", atk_by_type={"Fire": 1.6}, negate_types=("Water",)),
    "sand-stream": AbilityEffect(weather="sand"),
    "snow-warning": AbilityEffect(weather="snow"),
    "orichalcum-pulse": AbilityEffect(weather="sun", flat_offense=1.3,
                                      signature_se=SignatureBonus("Fighting", 1.33)),
    "hadron-engine": AbilityEffect(terrain="electric", flat_offense=1.3, atk_by_type={"Electric": 1.3},
                                   signature_se=SignatureBonus("Electric", 1.33)),
    "huge-power": AbilityEffect(flat_offense=1.5),
    "adaptability": AbilityEffect(stab_boost=1.33),
    # respuestas defensivas (cuentan cuando las lleva el objetivo)
    "levitate": AbilityEffect(immune_types=("Ground",)),
    "flash-fire": AbilityEffect(immune_types=("Fire",)),
    "water-absorb": AbilityEffect(immune_types=("Water",)),
    "volt-absorb": AbilityEffect(immune_types=("Electric",)),
    "sap-sipper": AbilityEffect(immune_types=("Grass",)),
    "earth-eater": AbilityEffect(immune_types=("Ground",)),
})

# Las que se detectan como habilidad del atacante (clima / ofensiva)
SUPPORTED_ABILITIES = frozenset({
    "drizzle", "drought", "primordial-sea", "desolate-land", "sand-stream",
    "snow-warning", "orichalcum-pulse", "hadron-engine", "huge-power", "adaptability",
})
# Solo cuentan como respuesta del objetivo; nunca desplazan a las de arriba
DEFENSIVE_ABILITIES = frozenset(ABILITY_EFFECTS) - SUPPORTED_ABILITIES


def _check_types(tag: str, what: str, types: Iterable[str]) -> None:
    for t in types:
        if t not in ALL_TYPES:
            raise AbilityTableError(f"'{tag}': tipo desconocido '{t}' en {what}")


def _check_mult(tag: str, what: str, value: float) -> None:
    if value is None:
        return
    if float(value) <= 0:
        raise AbilityTableError(f"'{tag}': multiplicador no positivo en {what} ({value})")


def validate_ability_table(table: Mapping[str, AbilityEffect]) -> None:
    for tag, eff in table.items():
        if not tag or tag != tag.strip().lower():
            raise AbilityTableError(f"Identificador de habilidad inválido: '{tag}'")
        if eff.is_empty():
            raise AbilityTableError(f"'{tag}' no declara ningún efecto")
        if eff.weather is not None and eff.weather not in WEATHERS:
            raise AbilityTableError(f"'{tag}': clima desconocido '{eff.weather}'")
        if eff.terrain is not None and eff.terrain not in TERRAINS:
            raise AbilityTableError(f"'{tag}': terreno desconocido '{eff.terrain}'")
        _check_types(tag, "atk_by_type", eff.atk_by_type)
        _check_types(tag, "immune_types", eff.immune_types)
        _check_types(tag, "negate_types", eff.negate_types)
        _check_types(tag, "risk_mods_against", eff.risk_mods_against)
        _check_mult(tag, "flat_offense", eff.flat_offense)
        _check_mult(tag, "stab_boost", eff.stab_boost)
        for t, m in eff.atk_by_type.items():
            _check_mult(tag, f"atk_by_type[{t}]", m)
        for t, m in eff.risk_mods_against.items():
            _check_mult(tag, f"risk_mods_against[{t}]", m)
        if eff.signature_se is not None:
            _check_types(tag, "signature_se", [eff.signature_se.type])
            _check_mult(tag, "signature_se", eff.signature_se.mult)


def normalize_ability(tag: Optional[str]) -> Optional[str]:
    """'Sand Stream' / 'sand_stream' -> 'sand-stream'."""
    s = (tag or "").strip().lower().replace("_", "-").replace(" ", "-")
    return s or None


def weather_clash_factor(attacker: AbilityEffect, target: Optional[AbilityEffect], hit_type: str) -> float:
    """Lluvia contra sol: se deshace el boost propio del atacante sobre su elemento."""
    if target is None or not attacker.weather or not target.weather:
        return 1.0
    if (attacker.weather, target.weather) not in OPPOSING_WEATHERS:
        return 1.0
    if WEATHER_ELEMENT.get(attacker.weather) != hit_type:
        return 1.0
    return 1.0 / attacker.atk_by_type.get(hit_type, 1.0)


def resolve_ability(
    offense: float,
    risk: float,
    hit_type: str,
    mult: float,
    attacker_tag: Optional[str],
    target_tag: Optional[str],
    target_types: Iterable[str] = (),
    table: Mapping[str, AbilityEffect] = ABILITY_EFFECTS,
) -> Tuple[float, float]:
    """
    Ajusta (ofensiva, riesgo) de un atacante según su habilidad y la del objetivo.
    Orden fijo: plano, por tipo, STAB, firma, choque de clima, respuesta del
    objetivo (inmunidad / negación) y modificadores de riesgo.
    """
    att = table.get(normalize_ability(attacker_tag) or "")
    tgt = table.get(normalize_ability(target_tag) or "")
    v, r = offense, risk

    if att is not None:
        if att.flat_offense:
            v *= att.flat_offense
        if hit_type in att.atk_by_type:
            v *= att.atk_by_type[hit_type]
        if att.stab_boost:
            v *= att.stab_boost
        sig = att.signature_se
        if sig and sig.type == hit_type and mult >= 2:
            v *= sig.mult
        v *= weather_clash_factor(att, tgt, hit_type)

    if tgt is not None:
        if hit_type in tgt.immune_types:
            v = 0.0
        elif hit_type in tgt.negate_types:
            v *= NEGATE_OFFENSE
            r *= NEGATE_RISK

    if att is not None:
        for t in target_types or []:
            m = att.risk_mods_against.get(t)
            if m:
                r = round(r * m)

    return max(0.0, v), r


validate_ability_table(ABILITY_EFFECTS)
