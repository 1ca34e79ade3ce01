# counter_app/services/pool_loader.py
"""
Carga del pool de atacantes desde el índice JSON (o la lista curada).

Acepta variantes de esquema de distintas versiones del builder:
  - {"pokemon": [...]} o directamente [...]
  - "strong" | "learnedStrong" | "strongMoves"
  - "slug" | "apiSlug"
Entradas sin nombre o sin tipos se descartan (problema de datos del builder).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..models.attacker import AttackerRecord, Filters
from ..utils.errors import PoolFormatError
from ..utils.slugs import to_slug
from .types import ALL_TYPES, normalize_type

log = logging.getLogger(__name__)

CURATED_POOL_PATH = Path(__file__).resolve().parents[1] / "data" / "curated_pool.json"

_STRONG_KEYS = ("strong", "learnedStrong", "strongMoves")


def _types(raw: Any) -> tuple:
    if not isinstance(raw, (list, tuple)):
        return ()
    out = []
    for t in raw:
        name = normalize_type(str(t))
        if name in ALL_TYPES and name not in out:
            out.append(name)
    return tuple(out)


def _opt_str(raw: Any) -> Optional[str]:
    s = str(raw).strip() if raw is not None else ""
    return s or None


def _opt_int(raw: Any) -> Optional[int]:
    try:
        return int(raw) if raw is not None else None
    except (TypeError, ValueError):
        return None


def parse_entry(entry: Dict[str, Any]) -> Optional[AttackerRecord]:
    """Convierte una entrada del índice en AttackerRecord; None si le faltan nombre o tipos."""
    if not isinstance(entry, dict):
        return None
    name = _opt_str(entry.get("name"))
    types = _types(entry.get("types"))
    if not name or not types or len(types) > 2:
        return None

    strong_raw = next((entry[k] for k in _STRONG_KEYS if entry.get(k) is not None), [])
    try:
        power = float(entry.get("power") if entry.get("power") is not None else 80)
    except (TypeError, ValueError):
        power = 80.0

    return AttackerRecord(
        name=name,
        slug=_opt_str(entry.get("slug")) or _opt_str(entry.get("apiSlug")) or to_slug(name),
        id=_opt_int(entry.get("id")),
        types=types,
        power=power,
        strong=_types(strong_raw),
        ability_tag=_opt_str(entry.get("abilityTag")),
        hidden_ability_tag=_opt_str(entry.get("hiddenAbilityTag")),
        is_mega=bool(entry.get("isMega", False)),
        restricted=bool(entry.get("restricted", False)),
        aliases=tuple(a.lower() for a in (entry.get("aliases") or []) if isinstance(a, str)),
    )


def parse_pool(document: Any) -> List[AttackerRecord]:
    if isinstance(document, dict):
        entries = document.get("pokemon")
    else:
        entries = document
    if not isinstance(entries, list):
        raise PoolFormatError("El índice debe ser una lista o un objeto con la clave 'pokemon'.")

    pool: List[AttackerRecord] = []
    skipped = 0
    for entry in entries:
        rec = parse_entry(entry)
        if rec is None:
            skipped += 1
            continue
        pool.append(rec)
    if skipped:
        log.warning("Se descartaron %d entradas sin nombre o tipos", skipped)
    return pool


def load_pool(path: str | Path) -> List[AttackerRecord]:
    with open(path, "r", encoding="utf-8") as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise PoolFormatError(f"JSON inválido en '{path}': {e}") from e
    pool = parse_pool(document)
    log.info("Pool cargado desde %s: %d atacantes", path, len(pool))
    return pool


def load_curated_pool() -> List[AttackerRecord]:
    return load_pool(CURATED_POOL_PATH)


def load_names(path: str | Path) -> List[str]:
    """Lista 'names' del índice (para autocompletar); si no está, se deriva de las entradas."""
    with open(path, "r", encoding="utf-8") as f:
        document = json.load(f)
    if isinstance(document, dict) and isinstance(document.get("names"), list):
        return sorted({str(n) for n in document["names"]})
    return sorted({rec.name for rec in parse_pool(document)})


def is_valid_record(rec: AttackerRecord) -> bool:
    return bool(rec.name) and 1 <= len(rec.types or ()) <= 2


def filter_pool(pool: Iterable[AttackerRecord], filters: Filters) -> List[AttackerRecord]:
    out = []
    for rec in pool or []:
        if not is_valid_record(rec):
            continue
        if rec.restricted and not filters.allow_restricted:
            continue
        if rec.is_mega and not filters.show_mega:
            continue
        out.append(rec)
    return out


def search_names(names: Sequence[str], query: str, limit: int = 12) -> List[str]:
    """Autocompletar: primero los que empiezan por la consulta, después los que la contienen."""
    q = (query or "").strip().lower()
    if not q:
        return list(names[:limit])
    prefix = [n for n in names if n.lower().startswith(q)]
    contains = [n for n in names if q in n.lower() and not n.lower().startswith(q)]
    return (prefix + contains)[:limit]
