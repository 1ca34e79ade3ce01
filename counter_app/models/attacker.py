from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class AttackerRecord:
    """Candidato a counter. Se construye al cargar el índice y no se modifica."""
    name: str
    types: Tuple[str, ...]
    power: float = 80.0
    strong: Tuple[str, ...] = ()
    slug: str = ""
    ability_tag: Optional[str] = None
    hidden_ability_tag: Optional[str] = None
    is_mega: bool = False
    restricted: bool = False
    id: Optional[int] = None  # solo para el arte oficial
    aliases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Filters:
    allow_restricted: bool = True
    show_mega: bool = True


@dataclass(frozen=True)
class Target:
    name: str
    slug: str = ""
    types: Tuple[str, ...] = ()
    ability_tag: Optional[str] = None
    hidden_ability_tag: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class RankedPick:
    attacker: AttackerRecord
    hit_type: str
    mult: float
    offense: float
    damage_potential: int
    risk: int
    score: float

    @property
    def display_score(self) -> float:
        return round(self.score, 3)


@dataclass
class RankResult:
    weaknesses: List[Tuple[str, float]] = field(default_factory=list)
    picks: List[RankedPick] = field(default_factory=list)


ART_URL = "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/other/official-artwork/{id}.png"

def art_url(dex_id: Optional[int]) -> Optional[str]:
    return ART_URL.format(id=dex_id) if dex_id else None
