# counter_app/utils/slugs.py
from __future__ import annotations

import re

# Nombres "bonitos" de la lista curada -> slug de PokéAPI
DISPLAY_FORMS = {
    "(mega x)": "mega-x",
    "(mega y)": "mega-y",
    "(mega)": "mega",
    "(primal)": "primal",
}

NAME_ONLY_CASES = {
    "lycanroc": "lycanroc-midday",
    "basculegion": "basculegion-male",
    "indeedee": "indeedee-male",
    "urshifu": "urshifu-single-strike",
}


def to_slug(name: str) -> str:
    """
    Convierte nombres de especie al slug que usa PokéAPI:
    - 'Charizard (Mega Y)' -> 'charizard-mega-y'
    - símbolos de género -> -f / -m
    - sin acentos, apóstrofes ni puntos
    """
    s = (name or "").strip().lower()
    for form, suffix in DISPLAY_FORMS.items():
        if s.endswith(form):
            s = s[: -len(form)].strip() + "-" + suffix
    s = s.replace("♀", "-f").replace("♂", "-m")
    s = (s.replace("é", "e").replace("á", "a").replace("í", "i")
           .replace("ó", "o").replace("ú", "u"))
    s = s.replace("’", "").replace("'", "").replace(".", "").replace(":", "")
    s = re.sub(r"\s+", "-", s)
    s = re.sub(r"[^a-z0-9\-]", "", s)
    s = re.sub(r"-+", "-", s).strip("-")
    return NAME_ONLY_CASES.get(s, s)
