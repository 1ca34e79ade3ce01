from typing import Dict, Iterable, List, Tuple

from ..utils.errors import ChartError

ALL_TYPES = [
    "Normal","Fire","Water","Electric","Grass","Ice",
    "Fighting","Poison","Ground","Flying","Psychic","Bug",
    "Rock","Ghost","Dragon","Dark","Steel","Fairy",
]

VALID_MULTIPLIERS = (0.0, 0.5, 1.0, 2.0)

# Tabla Gen 9 (multiplicadores: 2, 0.5, 0). Lo que no aparece vale 1.
# Formato: TYPE_CHART[atk_type][def_type] = mult
TYPE_CHART = {
    "Normal":  {"Rock":0.5,"Ghost":0.0,"Steel":0.5},
    "Fire":    {"Fire":0.5,"Water":0.5,"Grass":2.0,"Ice":2.0,"Bug":2.0,"Rock":0.5,"Dragon":0.5,"Steel":2.0},
    "Water":   {"Fire":2.0,"Water":0.5,"Grass":0.5,"Ground":2.0,"Rock":2.0,"Dragon":0.5},
    "Electric":{"Water":2.0,"Electric":0.5,"Grass":0.5,"Ground":0.0,"Flying":2.0,"Dragon":0.5},
    "Grass":   {"Fire":0.5,"Water":2.0,"Grass":0.5,"Poison":0.5,"Ground":2.0,"Flying":0.5,"Bug":0.5,"Rock":2.0,"Dragon":0.5,"Steel":0.5},
    "Ice":     {"Fire":0.5,"Water":0.5,"Grass":2.0,"Ice":0.5,"Ground":2.0,"Flying":2.0,"Dragon":2.0,"Steel":0.5},
    "Fighting":{"Normal":2.0,"Ice":2.0,"Rock":2.0,"Dark":2.0,"Steel":2.0,"Poison":0.5,"Flying":0.5,"Psychic":0.5,"Bug":0.5,"Ghost":0.0,"Fairy":0.5},
    "Poison":  {"Grass":2.0,"Poison":0.5,"Ground":0.5,"Rock":0.5,"Ghost":0.5,"Steel":0.0,"Fairy":2.0},
    "Ground":  {"Fire":2.0,"Electric":2.0,"Grass":0.5,"Poison":2.0,"Flying":0.0,"Bug":0.5,"Rock":2.0,"Steel":2.0},
    "Flying":  {"Electric":0.5,"Grass":2.0,"Fighting":2.0,"Bug":2.0,"Rock":0.5,"Steel":0.5},
    "Psychic": {"Fighting":2.0,"Poison":2.0,"Psychic":0.5,"Dark":0.0,"Steel":0.5},
    "Bug":     {"Fire":0.5,"Grass":2.0,"Fighting":0.5,"Poison":0.5,"Flying":0.5,"Psychic":2.0,"Ghost":0.5,"Dark":2.0,"Steel":0.5,"Fairy":0.5},
    "Rock":    {"Fire":2.0,"Ice":2.0,"Fighting":0.5,"Ground":0.5,"Flying":2.0,"Bug":2.0,"Steel":0.5},
    "Ghost":   {"Normal":0.0,"Psychic":2.0,"Ghost":2.0,"Dark":0.5},
    "Dragon":  {"Dragon":2.0,"Steel":0.5,"Fairy":0.0},
    "Dark":    {"Fighting":0.5,"Psychic":2.0,"Ghost":2.0,"Dark":0.5,"Fairy":0.5},
    "Steel":   {"Fire":0.5,"Water":0.5,"Electric":0.5,"Ice":2.0,"Rock":2.0,"Fairy":2.0,"Steel":0.5},
    "Fairy":   {"Fire":0.5,"Fighting":2.0,"Poison":0.5,"Dragon":2.0,"Dark":2.0,"Steel":0.5},
}


def normalize_type(name: str) -> str:
    """'fire' / 'FIRE' / ' Fire ' -> 'Fire'."""
    return (name or "").strip().capitalize()


def clean_types(types: Iterable[str]) -> List[str]:
    """Tipos de un Pokémon: solo los 18 conocidos, sin repetir y como mucho dos."""
    out: List[str] = []
    for t in types or []:
        n = normalize_type(t)
        if n in ALL_TYPES and n not in out:
            out.append(n)
    return out[:2]


def validate_chart(chart: Dict[str, Dict[str, float]]) -> None:
    """
    Falla al cargar si la tabla está mal formada:
    - falta una fila de tipo atacante
    - aparece un tipo fuera de los 18
    - un multiplicador no está en {0, 0.5, 1, 2}
    """
    missing = [t for t in ALL_TYPES if t not in chart]
    if missing:
        raise ChartError(f"Faltan filas de tipo atacante: {', '.join(missing)}")
    for atk, row in chart.items():
        if atk not in ALL_TYPES:
            raise ChartError(f"Tipo atacante desconocido: '{atk}'")
        for dfn, mult in row.items():
            if dfn not in ALL_TYPES:
                raise ChartError(f"Tipo defensor desconocido: '{dfn}' (fila {atk})")
            if float(mult) not in VALID_MULTIPLIERS:
                raise ChartError(f"Multiplicador inválido {mult!r} para {atk} -> {dfn}")


def type_effectiveness(move_type: str, defender_types: Iterable[str],
                       chart: Dict[str, Dict[str, float]] = TYPE_CHART) -> float:
    """Devuelve el multiplicador de efectividad combinando los tipos del defensor."""
    row = chart.get(normalize_type(move_type), {})
    mult = 1.0
    for dt in defender_types or []:
        mult *= row.get(normalize_type(dt), 1.0)
    return mult


def weakness_vector(defender_types: Iterable[str],
                    chart: Dict[str, Dict[str, float]] = TYPE_CHART) -> Dict[str, float]:
    """
    Multiplicador recibido por el defensor para cada uno de los 18 tipos.
    Sin tipos (objetivo desconocido) todo queda en 1.
    """
    defs = clean_types(defender_types)
    return {atk: type_effectiveness(atk, defs, chart) for atk in ALL_TYPES}


def super_effective(vector: Dict[str, float]) -> List[Tuple[str, float]]:
    """Subconjunto con x2 o más, de mayor a menor (empates en orden de la tabla)."""
    weak = [(t, m) for t, m in vector.items() if m >= 2]
    return sorted(weak, key=lambda x: x[1], reverse=True)


def bucket_weaknesses(vector: Dict[str, float]) -> Dict[str, List[Tuple[str, float]]]:
    """Agrupa el vector en filas para mostrar: x4, x2, neutro, resiste (0.5 y 0.25) e inmune."""
    buckets: Dict[str, List[Tuple[str, float]]] = {"x4": [], "x2": [], "x1": [], "resist": [], "immune": []}
    for t, m in vector.items():
        if m >= 4:
            buckets["x4"].append((t, m))
        elif m >= 2:
            buckets["x2"].append((t, m))
        elif m == 1:
            buckets["x1"].append((t, m))
        elif m == 0:
            buckets["immune"].append((t, m))
        else:
            buckets["resist"].append((t, m))
    return buckets


validate_chart(TYPE_CHART)
