# typedex/resolver.py
# Name-or-id -> numeric id, from locally synced indexes only. Never goes remote.

from typing import Optional

from typedex import config
from typedex.logger import log_verbose
from typedex.models import ResolvedIdentifier
from typedex.type_names import TYPE_IDS, canonicalize, normalize


def _positive_int(raw: str) -> Optional[int]:
    # isdigit alone admits "²" and friends, which int() rejects
    if not (raw.isascii() and raw.isdigit()):
        return None
    n = int(raw)
    return n if n > 0 else None


class Resolver:
    def __init__(self, store):
        self.store = store

    def _find(self, kind: str, target: str):
        for entry in self.store.read_index(kind) or []:
            if normalize(entry.name) == target:
                return entry
        return None

    def resolve_species(self, name_or_id) -> Optional[ResolvedIdentifier]:
        """Numeric input is returned as-is; names are matched against the synced index."""
        raw = str(name_or_id or "").strip()
        if not raw:
            return None
        n = _positive_int(raw)
        if n:
            return ResolvedIdentifier(id=n)
        hit = self._find(config.SPECIES, raw.lower())
        if hit is None or hit.id is None:
            return None
        log_verbose(f"RESOLVED species {raw} -> {hit.id}")
        return ResolvedIdentifier(id=hit.id, name=hit.name)

    def resolve_type(self, name_or_id) -> Optional[ResolvedIdentifier]:
        """Numeric first, then the canonical 18, then the synced type index."""
        raw = str(name_or_id or "").strip()
        if not raw:
            return None
        n = _positive_int(raw)
        if n:
            return ResolvedIdentifier(id=n)

        canonical = canonicalize(raw)
        target = canonical or raw.lower()
        hit = self._find(config.TYPE, target)
        if hit is not None and hit.id is not None:
            return ResolvedIdentifier(id=hit.id, name=normalize(hit.name))
        if canonical:
            # no synced index (or an index without this entry): fixed PokeAPI ids
            return ResolvedIdentifier(id=TYPE_IDS[canonical], name=canonical)
        return None

    def search_species(self, query: str, limit: int = 10) -> list[dict]:
        """Case-insensitive substring search over the synced species index."""
        q = str(query or "").strip().lower()
        entries = self.store.read_index(config.SPECIES) or []
        matches = []
        for entry in entries:
            if len(matches) >= limit:
                break
            if q in entry.name.lower() and entry.id is not None:
                matches.append({"name": entry.name, "id": entry.id})
        return matches
