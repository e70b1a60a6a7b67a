# typedex/coverage.py
# Type-only coverage analysis built on TypeChart multipliers.
# No movesets, abilities or items are considered anywhere in here.

from typing import Dict, List, Optional, Sequence

from typedex import config
from typedex.errors import MalformedLocalRecord
from typedex.logger import log_action
from typedex.type_names import TYPES


def best_counters(chart, target_types: Sequence[str], count: int = 5) -> List[dict]:
    """
    Attacking types that hit the target super-effectively, strongest first.

    Types at 1x or below are dropped, not just sorted last. Ties keep canonical
    type order.
    """
    mults = chart.all_multipliers(target_types)
    hits = [{"type": t, "multiplier": m} for t, m in mults.items() if m > 1]
    hits.sort(key=lambda x: x["multiplier"], reverse=True)
    return hits[:count]


def collect_examples(store, attack_types: Sequence[str], per_type: int) -> Optional[Dict[str, List[dict]]]:
    """
    Example species from the synced data carrying each attacking type.

    Returns None when there is no synced species index. The index is scanned in file
    order, so that order decides which species are picked. The scan stops as soon as
    every type has `per_type` examples.
    """
    if per_type <= 0:
        return None
    entries = store.read_index(config.SPECIES)
    if entries is None:
        return None

    examples = {t: [] for t in attack_types}
    missing = len(examples)
    for entry in entries:
        if missing == 0:
            break
        sid = entry.id
        if sid is None:
            continue
        try:
            record = store.read_synced(config.SPECIES, sid)
        except MalformedLocalRecord as e:
            log_action(f"Skipping example candidate {entry.name}: {e}")
            continue
        if record is None:
            continue
        types = record.type_names
        for t, found in examples.items():
            if len(found) >= per_type or t not in types:
                continue
            found.append({"id": sid, "name": entry.name})
            if len(found) == per_type:
                missing -= 1
    return examples


def weakness_ranking(chart, member_types: Sequence[Sequence[str]], count: int = 6) -> List[dict]:
    """
    Tally weak / resist / immune / neutral members per attacking type and rank.

    score = 2*weak - resist - 2*immune. A member without types counts as neutral
    against everything.
    """
    stats = {t: {"weak": 0, "resist": 0, "immune": 0, "neutral": 0} for t in TYPES}
    for types in member_types:
        mults = chart.all_multipliers(types)
        for atk in TYPES:
            v = mults[atk]
            s = stats[atk]
            if v == 0:
                s["immune"] += 1
            elif v >= 2:
                s["weak"] += 1
            elif v <= 0.5:
                s["resist"] += 1
            else:
                s["neutral"] += 1

    ranking = []
    for t in TYPES:
        s = stats[t]
        score = 2 * s["weak"] - s["resist"] - 2 * s["immune"]
        ranking.append({"type": t, "score": score, **s})
    ranking.sort(key=lambda x: x["score"], reverse=True)
    return ranking[:count]


def suggest_defensive_types(chart, weakness_types: Sequence[str], count: int = 5) -> List[dict]:
    """Score each single type by how it handles the weaknesses: +3 immune, +2 resist."""
    suggestions = []
    for candidate in TYPES:
        sug = {"type": candidate, "score": 0, "resists": [], "immunes": []}
        for atk in weakness_types:
            mult = chart.multiplier(atk, [candidate])
            if mult == 0:
                sug["score"] += 3
                sug["immunes"].append(atk)
            elif mult <= 0.5:
                sug["score"] += 2
                sug["resists"].append(atk)
        suggestions.append(sug)
    suggestions.sort(key=lambda x: x["score"], reverse=True)
    return suggestions[:count]
