# typedex/type_names.py
from typing import Optional

TYPES = [
    "normal","fire","water","electric","grass","ice","fighting","poison","ground",
    "flying","psychic","bug","rock","ghost","dragon","dark","steel","fairy"
]

# PokeAPI ids of the canonical types, used when no synced type index is around
TYPE_IDS = {
    "normal": 1, "fighting": 2, "flying": 3, "poison": 4, "ground": 5, "rock": 6,
    "bug": 7, "ghost": 8, "steel": 9, "fire": 10, "water": 11, "grass": 12,
    "electric": 13, "psychic": 14, "ice": 15, "dragon": 16, "dark": 17, "fairy": 18,
}

_TYPE_SET = frozenset(TYPES)


def normalize(value) -> str:
    return str(value).strip().lower()


def canonicalize(raw) -> Optional[str]:
    """Return the canonical type name for raw input, or None if it is not one of the 18."""
    if raw is None:
        return None
    n = normalize(raw)
    return n if n in _TYPE_SET else None


def canonical_list(values) -> list[str]:
    """Keep canonical names only, first occurrence wins."""
    out = []
    for v in values or []:
        t = canonicalize(v)
        if t and t not in out:
            out.append(t)
    return out
