from __future__ import annotations
import os
from contextlib import contextmanager
from typing import Iterator, Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session

DEFAULT_DB_PATH = os.path.join(os.path.dirname(__file__), "..", "..", "counters.db")
DEFAULT_DB_URL = os.environ.get("COUNTER_DB_URL", f"sqlite:///{os.path.abspath(DEFAULT_DB_PATH)}")

engine = create_engine(DEFAULT_DB_URL, echo=False, future=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

class Base(DeclarativeBase):
    pass

def make_engine(url: str) -> Engine:
    return create_engine(url, echo=False, future=True)

@contextmanager
def session_scope(bind: Optional[Engine] = None) -> Iterator[Session]:
    session = SessionLocal(bind=bind) if bind is not None else SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
