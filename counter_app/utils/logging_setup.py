"""Configuración de logging de la app.

Uso:
    from counter_app.utils.logging_setup import setup_logging
    setup_logging()
"""
from __future__ import annotations
import logging
import logging.handlers
import os
from pathlib import Path
import sys

FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'

def setup_logging(level: int | None = None, log_to_file: bool = False, log_dir: str | None = None) -> None:
    logger = logging.getLogger()
    if logger.handlers:
        # Ya configurado
        return
    if level is None:
        level = getattr(logging, os.environ.get("COUNTER_LOG_LEVEL", "INFO").upper(), logging.INFO)
    logger.setLevel(level)

    fmt = logging.Formatter(FORMAT)

    ch = logging.StreamHandler(stream=sys.stdout)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_to_file:
        path = Path(log_dir or (Path.cwd() / 'logs'))
        path.mkdir(parents=True, exist_ok=True)
        fh = logging.handlers.RotatingFileHandler(path / 'counters.log', maxBytes=2_000_000, backupCount=3, encoding='utf-8')
        fh.setFormatter(fmt)
        logger.addHandler(fh)
