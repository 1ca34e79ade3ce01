"""
Construye el índice del pool desde PokéAPI.

    python -m counter_app.build_index -o counter_app/data/index.json [--db sqlite:///counters.db]
"""
from __future__ import annotations

import argparse
import logging
import sys

from counter_app.db.base import make_engine, session_scope
from counter_app.db.repository import init_db, save_pool
from counter_app.services import index_builder as ib
from counter_app.services.pool_loader import parse_pool
from counter_app.utils.logging_setup import setup_logging

log = logging.getLogger("counter_app.build_index")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Construye el índice de atacantes desde PokéAPI.")
    parser.add_argument("-o", "--output", default="counter_app/data/index.json", help="Ruta del JSON de salida")
    parser.add_argument("--db", default=None, help="URL SQLAlchemy donde guardar también el pool")
    parser.add_argument("--limit", type=int, default=ib.POKE_LIMIT, help="Máximo de Pokémon a consultar")
    parser.add_argument("--move-limit", type=int, default=ib.MOVE_LIMIT, help="Máximo de movimientos a consultar")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO)
    session = ib.make_session()

    log.info("Construyendo índice de movimientos…")
    moves = ib.build_move_index(session, args.move_limit)
    log.info("Cargando detalles de Pokémon…")
    entries = ib.build_dex(session, moves, args.limit)

    artifact = ib.make_artifact(entries)
    ib.write_artifact(artifact, args.output)

    if args.db:
        engine = make_engine(args.db)
        init_db(engine)
        with session_scope(engine) as s:
            n = save_pool(s, parse_pool(artifact))
        log.info("Guardados %d atacantes en %s", n, args.db)
    return 0


if __name__ == "__main__":
    sys.exit(main())
