from __future__ import annotations
from datetime import datetime, timezone
from sqlalchemy import Integer, String, DateTime, Text, Float, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from .base import Base

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

class Attacker(Base):
    __tablename__ = "attackers"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(96), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(96))
    dex_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    power: Mapped[float] = mapped_column(Float, default=80.0)

    types_json: Mapped[str] = mapped_column(Text)
    strong_json: Mapped[str] = mapped_column(Text, default="[]")
    aliases_json: Mapped[str] = mapped_column(Text, default="[]")

    ability_tag: Mapped[str | None] = mapped_column(String(64), nullable=True)
    hidden_ability_tag: Mapped[str | None] = mapped_column(String(64), nullable=True)
    is_mega: Mapped[bool] = mapped_column(Boolean, default=False)
    restricted: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
