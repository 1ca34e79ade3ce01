# counter_app/services/index_builder.py
"""
Construye el índice compacto del pool a partir de PokéAPI:
tipos, id, power, tipos STAB con movimiento fuerte, habilidad soportada,
y flags mega/restringido.

Proceso offline; la app solo consume el JSON resultante (o la tabla SQLite).
"""
from __future__ import annotations

import json
import logging
import os
import re
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

import requests

from .species_provider import pick_ability_tags, types_from_api

log = logging.getLogger(__name__)

API_ROOT = "https://pokeapi.co/api/v2"
POKE_LIMIT = 20000
MOVE_LIMIT = 20000
CONCURRENCY = 12
STRONG_BP = 70   # >= esto cuenta como "fuerte"
TRIES = 4
TIMEOUT = 30

# Formas que no combaten (modos de montura, etc.)
EXCLUDE_SLUGS = {
    "koraidon-limited-build",
    "koraidon-sprinting-build",
    "koraidon-swimming-build",
    "koraidon-gliding-build",
    "miraidon-low-power-mode",
    "miraidon-drive-mode",
}

# Movimientos firma que PokéAPI reporta con poder raro en algunas generaciones
FORCE_STRONG = {
    "collision-course": 100,
    "electro-drift": 100,
}

MEGA_RE = re.compile(r"-mega|-primal")


def make_session() -> requests.Session:
    s = requests.Session()
    s.headers.update({"User-Agent": "counter-app-index-builder/1.0", "Accept": "application/json"})
    return s


def get_json(session: requests.Session, url: str, tries: int = TRIES,
             sleep: Optional[Callable[[float], None]] = None) -> dict:
    """GET con reintentos (espera 250 ms x intento). Propaga el último error."""
    last: Optional[Exception] = None
    for i in range(tries):
        try:
            r = session.get(url, timeout=TIMEOUT)
            r.raise_for_status()
            return r.json()
        except (requests.RequestException, ValueError) as e:
            last = e
            log.debug("GET %s falló (intento %d/%d): %s", url, i + 1, tries, e)
            (sleep or time.sleep)(0.25 * (i + 1))
    raise last


def calc_power(stats: Optional[Iterable[dict]]) -> int:
    """Cuánto pega: el mejor de Atk/SpA más un pequeño bonus por el total (~80–135)."""
    if not isinstance(stats, list):
        return 80
    atk = spa = 80
    total = 0
    for s in stats:
        name = ((s or {}).get("stat") or {}).get("name")
        base = s.get("base_stat", 80) if s else 80
        total += base
        if name == "attack":
            atk = base
        elif name == "special-attack":
            spa = base
    return round(max(atk, spa) + total / 12)


def is_strong(move: Optional[dict], want_type: str) -> bool:
    if not move or not move.get("type"):
        return False
    if move["type"].lower() != want_type.lower():
        return False
    power = move.get("power") or 0
    return power >= STRONG_BP


def strong_types(types: List[str], learnset: Iterable[dict], move_index: Dict[str, dict]) -> List[str]:
    """Tipos propios para los que aprende al menos un movimiento fuerte, en orden de los tipos."""
    found = set()
    for mv in learnset or []:
        mname = (((mv or {}).get("move") or {}).get("name") or "").lower()
        info = move_index.get(mname)
        if info and info.get("type") and info["type"].capitalize() in types and is_strong(info, info["type"]):
            found.add(info["type"].capitalize())
    return [t for t in types if t in found]


def build_entry(pokemon: dict, species: dict, move_index: Dict[str, dict]) -> Optional[dict]:
    """Entrada del índice para un /pokemon/{slug} + su /pokemon-species. None si se excluye."""
    slug = (pokemon.get("name") or "").lower()
    if not slug or slug in EXCLUDE_SLUGS:
        return None
    types = types_from_api(pokemon)
    if not types:
        return None
    ability, hidden = pick_ability_tags(pokemon.get("abilities", []))
    return {
        "name": slug,
        "slug": slug,
        "apiSlug": slug,
        "id": pokemon.get("id"),
        "types": types,
        "power": calc_power(pokemon.get("stats")),
        "restricted": bool(species.get("is_legendary") or species.get("is_mythical")),
        "isMega": bool(MEGA_RE.search(slug)),
        "strong": strong_types(types, pokemon.get("moves", []), move_index),
        "abilityTag": ability,
        "hiddenAbilityTag": hidden,
    }


def build_move_index(session: requests.Session, limit: int = MOVE_LIMIT) -> Dict[str, dict]:
    listing = get_json(session, f"{API_ROOT}/move?limit={limit}")
    urls = [m["url"] for m in listing.get("results", [])]

    def one(url: str) -> Optional[tuple]:
        try:
            d = get_json(session, url)
        except (requests.RequestException, ValueError) as e:
            log.warning("Movimiento omitido %s: %s", url, e)
            return None
        name = d["name"].lower()
        power = FORCE_STRONG.get(name, d.get("power"))
        return name, {"type": (d.get("type") or {}).get("name"), "power": power}

    out: Dict[str, dict] = {}
    with ThreadPoolExecutor(max_workers=CONCURRENCY) as pool:
        for res in pool.map(one, urls):
            if res:
                out[res[0]] = res[1]
    log.info("Índice de movimientos: %d", len(out))
    return out


def build_dex(session: requests.Session, move_index: Dict[str, dict], limit: int = POKE_LIMIT) -> List[dict]:
    listing = get_json(session, f"{API_ROOT}/pokemon?limit={limit}")
    urls = [p["url"] for p in listing.get("results", [])]

    def one(url: str) -> Optional[dict]:
        try:
            d = get_json(session, url)
            species = get_json(session, d["species"]["url"])
        except (requests.RequestException, ValueError) as e:
            log.warning("Pokémon omitido %s: %s", url, e)
            return None
        return build_entry(d, species, move_index)

    with ThreadPoolExecutor(max_workers=CONCURRENCY) as pool:
        entries = [e for e in pool.map(one, urls) if e]
    log.info("Pokémon en el índice: %d", len(entries))
    return entries


def make_artifact(entries: List[dict]) -> dict:
    entries = [e for e in entries if e.get("types")]
    return {
        "version": 1,
        "generatedAt": datetime.now(timezone.utc).isoformat(),
        "count": len(entries),
        "names": sorted({e["name"] for e in entries}),
        "pokemon": entries,
    }


def write_artifact(artifact: dict, out_path: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(out_path)), exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(artifact, f, ensure_ascii=False, indent=2)
    log.info("Escrito %s con %d entradas", out_path, artifact["count"])
