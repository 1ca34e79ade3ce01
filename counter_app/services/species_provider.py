# counter_app/services/species_provider.py
"""
Resolución del objetivo: nombre/slug -> tipos + habilidad.
1) índice local (nombre, slug o alias)
2) cache JSON de consultas anteriores
3) PokéAPI /pokemon/<slug>, y se guarda en el cache
"""
from __future__ import annotations

import json
import logging
import os
from typing import Dict, Iterable, List, Optional, Tuple

import requests

from ..models.attacker import AttackerRecord, Target
from ..utils.slugs import to_slug
from .abilities import DEFENSIVE_ABILITIES, SUPPORTED_ABILITIES, normalize_ability

log = logging.getLogger(__name__)

POKEAPI_ROOT = "https://pokeapi.co/api/v2/pokemon/"
TIMEOUT = 15


def pick_ability_tags(abilities: Iterable[dict],
                      supported: Iterable[str] = SUPPORTED_ABILITIES,
                      fallback: Iterable[str] = DEFENSIVE_ABILITIES) -> Tuple[Optional[str], Optional[str]]:
    """
    Recibe la lista 'abilities' de PokéAPI ({"ability":{"name":..}, "is_hidden":bool}).
    Devuelve (habilidad_probable, habilidad_oculta):
    primero una normal soportada, luego la oculta soportada y solo si no hay
    ninguna, una defensiva (levitate, flash-fire...). Politoed -> drizzle, no water-absorb.
    """
    names = []
    for a in abilities or []:
        node = (a or {}).get("ability") or {}
        tag = normalize_ability(node.get("name"))
        if tag:
            names.append((tag, bool(a.get("is_hidden"))))

    def first(pool, want_hidden):
        pool = set(pool)
        return next((n for n, hidden in names if hidden == want_hidden and n in pool), None)

    hidden = first(supported, True)
    tag = first(supported, False) or hidden
    if tag is None:
        tag = first(fallback, False) or first(fallback, True)
    return tag, hidden


def types_from_api(data: dict) -> List[str]:
    """Tipos ordenados por slot: [{"slot":1,"type":{"name":"steel"}}, ...] -> ['Steel', ...]"""
    nodes = sorted(data.get("types", []), key=lambda t: t.get("slot", 0))
    types = []
    for t in nodes:
        tname = ((t.get("type") or {}).get("name") or "").strip()
        if tname:
            types.append(tname.capitalize())
    return types


def fetch_target_from_pokeapi(slug: str, session: Optional[requests.Session] = None) -> Target:
    """Lanza requests.HTTPError si PokéAPI no conoce el slug."""
    http = session or requests
    r = http.get(POKEAPI_ROOT + slug, timeout=TIMEOUT)
    r.raise_for_status()
    data = r.json()
    ability, hidden = pick_ability_tags(data.get("abilities", []))
    return Target(
        name=data.get("name", slug),
        slug=data.get("name", slug),
        id=data.get("id"),
        types=tuple(types_from_api(data)),
        ability_tag=ability,
        hidden_ability_tag=hidden,
    )


def _target_from_record(rec: AttackerRecord) -> Target:
    return Target(name=rec.name, slug=rec.slug, id=rec.id, types=rec.types,
                  ability_tag=rec.ability_tag, hidden_ability_tag=rec.hidden_ability_tag)


class TargetResolver:
    def __init__(self, pool: Iterable[AttackerRecord] = (), cache_path: Optional[str] = None,
                 session: Optional[requests.Session] = None):
        self.cache_path = cache_path or os.environ.get("COUNTER_TYPES_CACHE")
        self.session = session
        self._by_key: Dict[str, AttackerRecord] = {}
        for rec in pool:
            for key in (rec.name.lower(), rec.slug.lower(), *rec.aliases):
                self._by_key.setdefault(key, rec)

    def _load_cache(self) -> dict:
        if not self.cache_path or not os.path.exists(self.cache_path):
            return {}
        try:
            with open(self.cache_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            log.warning("Cache de tipos corrupto en %s, se ignora: %s", self.cache_path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save_cache(self, cache: dict) -> None:
        if not self.cache_path:
            return
        os.makedirs(os.path.dirname(os.path.abspath(self.cache_path)), exist_ok=True)
        with open(self.cache_path, "w", encoding="utf-8") as f:
            json.dump(cache, f, ensure_ascii=False, indent=2)

    def resolve_local(self, query: str) -> Optional[Target]:
        key = (query or "").strip().lower()
        rec = self._by_key.get(key) or self._by_key.get(to_slug(query))
        return _target_from_record(rec) if rec else None

    def resolve(self, query: str) -> Target:
        """Nunca falla: si no se encuentra, devuelve un Target sin tipos."""
        name = (query or "").strip()
        slug = to_slug(name)
        if not slug:
            return Target(name=name, slug=slug)

        local = self.resolve_local(name)
        if local:
            return local

        cache = self._load_cache()
        hit = cache.get(slug)
        if isinstance(hit, dict) and hit.get("types"):
            return Target(name=hit.get("name", slug), slug=slug, id=hit.get("id"),
                          types=tuple(hit["types"]), ability_tag=hit.get("abilityTag"),
                          hidden_ability_tag=hit.get("hiddenAbilityTag"))

        try:
            target = fetch_target_from_pokeapi(slug, self.session)
        except (requests.RequestException, ValueError) as e:
            log.warning("No se pudo resolver '%s' en PokéAPI: %s", name, e)
            return Target(name=name, slug=slug)

        cache[slug] = {
            "name": target.name, "id": target.id, "types": list(target.types),
            "abilityTag": target.ability_tag, "hiddenAbilityTag": target.hidden_ability_tag,
        }
        self._save_cache(cache)
        return target
