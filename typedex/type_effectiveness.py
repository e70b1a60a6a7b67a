# typedex/type_effectiveness.py
from typing import Callable, Dict, List, Sequence, Tuple

from typedex.logger import log_action, log_verbose
from typedex.models import TypeDamageRelations
from typedex.type_names import TYPES

IMMUNE = "immune"
SUPER_EFFECTIVE = "super-effective"
RESISTED = "resisted"
NEUTRAL = "neutral"

DEF_BUCKETS_ORDER = ["4x", "2x", "1x", "1/2x", "1/4x", "0x"]
OFF_BUCKETS_ORDER = ["4x", "2x", "1x", "1/2x", "1/4x", "0x"]
BUCKET_LABELS = {4.0: "4x", 2.0: "2x", 1.0: "1x", 0.5: "1/2x", 0.25: "1/4x", 0.0: "0x"}


class TypeRelationCache:
    """
    Per-process memo of type name -> damage relations.

    Entries are filled on first use through `fetch` and never invalidated. Concurrent
    first requests may both fetch; the later write simply replaces the earlier one.
    """

    def __init__(self, fetch: Callable[[str], TypeDamageRelations]):
        self._fetch = fetch
        self._entries: Dict[str, TypeDamageRelations] = {}

    def __contains__(self, type_name) -> bool:
        return type_name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def prime(self, type_name: str, relations: TypeDamageRelations):
        self._entries[type_name] = relations

    def relations_for(self, type_name: str) -> TypeDamageRelations:
        hit = self._entries.get(type_name)
        if hit is not None:
            log_verbose(f"CACHE HIT: relations {type_name}")
            return hit
        rel = self._fetch(type_name)
        self._entries[type_name] = rel
        log_action(f"Loaded damage relations for {type_name}")
        return rel


class TypeChart:
    """Multipliers computed from damage relations; inputs must already be canonical."""

    def __init__(self, relations: TypeRelationCache):
        self.relations = relations

    def factor(self, attacker: str, defender: str) -> Tuple[float, str]:
        """Single defender: multiplier and reason. Immunity is checked first."""
        rel = self.relations.relations_for(defender)
        if attacker in rel.no_from:
            return 0.0, IMMUNE
        if attacker in rel.double_from:
            return 2.0, SUPER_EFFECTIVE
        if attacker in rel.half_from:
            return 0.5, RESISTED
        return 1.0, NEUTRAL

    def multiplier(self, attacker: str, defenders: Sequence[str]) -> float:
        """Product over defenders; an empty defender list is neutral."""
        mult = 1.0
        for d in defenders:
            mult *= self.factor(attacker, d)[0]
        return mult

    def breakdown(self, attacker: str, defenders: Sequence[str]) -> List[dict]:
        out = []
        for d in defenders:
            m, reason = self.factor(attacker, d)
            out.append({"defendingType": d, "multiplier": m, "reason": reason})
        return out

    def all_multipliers(self, defenders: Sequence[str]) -> Dict[str, float]:
        """Every attacking type vs the same defender combination, in canonical order."""
        return {atk: self.multiplier(atk, defenders) for atk in TYPES}

    def offense_row(self, attacker: str) -> Dict[str, float]:
        """One attacking type vs each single defending type, from its damage-to lists."""
        rel = self.relations.relations_for(attacker)
        row = {}
        for defn in TYPES:
            if defn in rel.no_to:
                row[defn] = 0.0
            elif defn in rel.double_to:
                row[defn] = 2.0
            elif defn in rel.half_to:
                row[defn] = 0.5
            else:
                row[defn] = 1.0
        return row

    def defense_buckets(self, defenders: Sequence[str]) -> Dict[str, List[str]]:
        buckets = {k: [] for k in DEF_BUCKETS_ORDER}
        for atk, mult in self.all_multipliers(defenders).items():
            buckets[BUCKET_LABELS[mult]].append(atk)
        return buckets

    def offense_buckets(self, attackers: Sequence[str]) -> Dict[str, List[str]]:
        """Combined attacking types (1-2) vs every single defending type."""
        rows = [self.offense_row(a) for a in attackers]
        buckets = {k: [] for k in OFF_BUCKETS_ORDER}
        for d in TYPES:
            mult = 1.0
            for row in rows:
                mult *= row[d]
            buckets[BUCKET_LABELS[mult]].append(d)
        return buckets
