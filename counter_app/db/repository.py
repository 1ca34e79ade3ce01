from __future__ import annotations

import json
from typing import Iterable, List, Optional
from sqlalchemy import select, func
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from .base import Base, engine as default_engine, session_scope
from .models import Attacker
from ..models.attacker import AttackerRecord, Filters

def init_db(bind: Optional[Engine] = None):
    Base.metadata.create_all(bind=bind or default_engine)

def _apply(row: Attacker, rec: AttackerRecord) -> None:
    row.name = rec.name
    row.dex_id = rec.id
    row.power = float(rec.power)
    row.types_json = json.dumps(list(rec.types), ensure_ascii=False)
    row.strong_json = json.dumps(list(rec.strong), ensure_ascii=False)
    row.aliases_json = json.dumps(list(rec.aliases), ensure_ascii=False)
    row.ability_tag = rec.ability_tag
    row.hidden_ability_tag = rec.hidden_ability_tag
    row.is_mega = bool(rec.is_mega)
    row.restricted = bool(rec.restricted)

def save_pool(session: Session, records: Iterable[AttackerRecord]) -> int:
    """Upsert por slug. Devuelve cuántas filas se escribieron."""
    existing = {row.slug: row for row in session.scalars(select(Attacker))}
    n = 0
    for rec in records:
        row = existing.get(rec.slug)
        if row is None:
            row = Attacker(slug=rec.slug)
            session.add(row)
            existing[rec.slug] = row
        _apply(row, rec)
        n += 1
    session.flush()
    return n

def _to_record(row: Attacker) -> AttackerRecord:
    return AttackerRecord(
        name=row.name,
        slug=row.slug,
        id=row.dex_id,
        types=tuple(json.loads(row.types_json or "[]")),
        power=row.power,
        strong=tuple(json.loads(row.strong_json or "[]")),
        aliases=tuple(json.loads(row.aliases_json or "[]")),
        ability_tag=row.ability_tag,
        hidden_ability_tag=row.hidden_ability_tag,
        is_mega=bool(row.is_mega),
        restricted=bool(row.restricted),
    )

def load_pool_from_db(session: Session, filters: Optional[Filters] = None) -> List[AttackerRecord]:
    stmt = select(Attacker)
    if filters is not None:
        if not filters.allow_restricted:
            stmt = stmt.where(Attacker.restricted.is_(False))
        if not filters.show_mega:
            stmt = stmt.where(Attacker.is_mega.is_(False))
    stmt = stmt.order_by(Attacker.id.asc())
    return [_to_record(row) for row in session.scalars(stmt)]

def count_attackers(session: Session) -> int:
    return int(session.execute(select(func.count(Attacker.id))).scalar_one())

def load_stored_pool(bind: Optional[Engine] = None) -> List[AttackerRecord]:
    """Pool guardado por build_index --db; lista vacía si la tabla no tiene filas."""
    init_db(bind)
    with session_scope(bind) as s:
        if count_attackers(s) == 0:
            return []
        return load_pool_from_db(s)
