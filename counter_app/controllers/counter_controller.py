import logging
import os
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..db.repository import load_stored_pool
from ..models.attacker import AttackerRecord, Filters, RankResult, Target
from ..services.ranking import RankingEngine, DEFAULT_ENGINE
from ..services.species_provider import TargetResolver
from ..services.pool_loader import load_curated_pool, load_names, load_pool, search_names
from ..utils.errors import PoolFormatError

log = logging.getLogger(__name__)

class CounterController:
    """Superficie de consulta para la capa de presentación."""

    def __init__(self, pool: Iterable[AttackerRecord],
                 engine: Optional[RankingEngine] = None,
                 resolver: Optional[TargetResolver] = None,
                 names: Optional[List[str]] = None):
        self.pool = tuple(pool)
        self.engine = engine or DEFAULT_ENGINE
        self.resolver = resolver or TargetResolver(self.pool)
        self.names = names or sorted({p.name for p in self.pool})

    def query(self, target_types: Iterable[str], target_ability: Optional[str] = None,
              filters: Optional[Filters] = None) -> RankResult:
        return self.engine.rank(target_types, filters, target_ability, self.pool)

    def query_by_name(self, name: str, filters: Optional[Filters] = None) -> Tuple[Target, RankResult]:
        target = self.resolver.resolve(name)
        return target, self.query(target.types, target.ability_tag, filters)

    def suggest(self, text: str, limit: int = 12) -> List[str]:
        return search_names(self.names, text, limit)


def load_controller(bind: Optional[Engine] = None,
                    index_path: Optional[str] = None,
                    cache_path: Optional[str] = None) -> CounterController:
    """
    Origen del pool, en este orden:
    1) tabla SQLite (COUNTER_DB_URL) si tiene filas
    2) índice JSON de COUNTER_POOL_PATH
    3) la lista curada
    """
    index_path = index_path or os.environ.get("COUNTER_POOL_PATH")
    pool: List[AttackerRecord] = []
    names = None

    try:
        pool = load_stored_pool(bind)
    except SQLAlchemyError as e:
        log.warning("No se pudo leer el pool de la base de datos: %s", e)
    if pool:
        log.info("Pool desde la base de datos: %d atacantes", len(pool))
    elif index_path and os.path.exists(index_path):
        try:
            pool = load_pool(index_path)
            names = load_names(index_path)
        except PoolFormatError as e:
            log.error("Índice inválido en %s: %s; se usa la lista curada", index_path, e)
            pool = []

    if not pool:
        pool = load_curated_pool()
        names = None
    return CounterController(pool, resolver=TargetResolver(pool, cache_path=cache_path), names=names)
