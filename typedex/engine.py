# typedex/engine.py
# One engine instance owns its record store, resolver and relation cache. The public
# methods return plain JSON-ready dicts.

from typing import Optional, Sequence

from typedex import config, coverage
from typedex.cache import ORIGINS, Loaded, RecordStore
from typedex.errors import InvalidArgument, UnknownTypeName, UnresolvedIdentifier
from typedex.logger import log_action
from typedex.pokeapi import PokeApiClient
from typedex.resolver import Resolver
from typedex.type_effectiveness import TypeChart, TypeRelationCache
from typedex.type_names import TYPES, canonicalize, normalize

TYPE_ONLY_NOTE = "This is type-based only (no movesets/abilities/items)."


def _bounded(value, lo: int, hi: int, name: str, default: int) -> int:
    if value is None:
        return default
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}") from None
    if n < lo or n > hi:
        raise InvalidArgument(f"{name} must be between {lo} and {hi}, got {n}")
    return n


class Engine:
    def __init__(self, settings: Optional[config.Settings] = None, client=None):
        settings = settings or config.load_settings()
        self.settings = settings
        self.store = RecordStore(
            settings.synced_root,
            settings.cache_root,
            client or PokeApiClient(settings.pokeapi_base, settings.http_timeout),
        )
        self.resolver = Resolver(self.store)
        self.relations = TypeRelationCache(self._fetch_relations)
        self.chart = TypeChart(self.relations)

    # ---- building blocks -------------------------------------------------- #

    def _fetch_relations(self, type_name: str):
        resolved = self.resolver.resolve_type(type_name)
        if resolved is None:
            raise UnknownTypeName(type_name)
        loaded = self.store.load(config.TYPE, record_id=resolved.id, name=resolved.name or type_name)
        return loaded.record.relations()

    def require_type(self, raw) -> str:
        t = canonicalize(raw)
        if t is None:
            raise UnknownTypeName(raw, normalize(raw), TYPES)
        return t

    def require_types(self, raws, lo: int = 1, hi: int = 2, name: str = "types") -> list[str]:
        raws = list(raws or [])
        if len(raws) < lo or len(raws) > hi:
            raise InvalidArgument(f"{name} takes {lo}-{hi} entries, got {len(raws)}")
        return [self.require_type(r) for r in raws]

    def load_species(self, name_or_id) -> Loaded:
        """Resolve locally when possible, otherwise ask PokeAPI by name."""
        raw = str(name_or_id or "").strip()
        if not raw:
            raise UnresolvedIdentifier(name_or_id, "", config.SPECIES)
        resolved = self.resolver.resolve_species(raw)
        if resolved is not None:
            return self.store.load(config.SPECIES, record_id=resolved.id, name=resolved.name)
        log_action(f"{raw!r} not in local species index, trying PokeAPI by name")
        return self.store.load(config.SPECIES, name=raw.lower())

    # ---- operations ------------------------------------------------------- #

    def search_species(self, query: str, limit=None) -> dict:
        if not str(query or "").strip():
            raise InvalidArgument("query must not be blank")
        limit = _bounded(limit, 1, 50, "limit", 10)
        if not self.store.has_index(config.SPECIES):
            return {
                "query": query,
                "matches": [],
                "note": f"Local species index not found at {self.store.index_path(config.SPECIES)}.",
            }
        return {"query": query, "matches": self.resolver.search_species(query, limit)}

    def get_species(self, name_or_id) -> dict:
        loaded = self.load_species(name_or_id)
        rec = loaded.record
        return {
            "input": name_or_id,
            "resolved": {"id": rec.id, "name": rec.name},
            "source": loaded.source or "pokeapi",
            "origin": ORIGINS[loaded.tier],
            "pokemon": loaded.raw,
        }

    def type_effectiveness(self, attacking_type, defending_types: Sequence[str]) -> dict:
        atk = self.require_type(attacking_type)
        defs = self.require_types(defending_types, name="defendingTypes")
        breakdown = self.chart.breakdown(atk, defs)
        total = 1.0
        for b in breakdown:
            total *= b["multiplier"]
        return {
            "attackingType": atk,
            "defendingTypes": defs,
            "multiplier": total,
            "breakdown": breakdown,
        }

    def type_buckets(self, defending_types=(), attacking_types=()) -> dict:
        """Bucketed defense (1-2 defenders) and offense (1-2 attackers) views."""
        out = {"defense": None, "offense": None}
        if defending_types:
            defs = self.require_types(defending_types, name="defendingTypes")
            out["defendingTypes"] = defs
            out["defense"] = self.chart.defense_buckets(defs)
        if attacking_types:
            atks = self.require_types(attacking_types, name="attackingTypes")
            out["attackingTypes"] = atks
            out["offense"] = self.chart.offense_buckets(atks)
        return out

    def counter_species(self, target_name_or_id, top_types=None, sample_per_type=None) -> dict:
        top_types = _bounded(top_types, 1, 10, "topTypes", 5)
        sample_per_type = _bounded(sample_per_type, 0, 20, "samplePokemonPerType", 5)

        rec = self.load_species(target_name_or_id).record
        target_types = rec.type_names
        top = coverage.best_counters(self.chart, target_types, top_types)

        result = {
            "target": {
                "input": target_name_or_id,
                "id": rec.id,
                "name": rec.name,
                "types": target_types,
            },
            "bestAttackingTypes": top,
        }
        examples = coverage.collect_examples(self.store, [t["type"] for t in top], sample_per_type)
        if examples is not None:
            result["examples"] = examples
            result["note"] = "Examples derived from local api-data; not based on movesets."
        elif sample_per_type == 0:
            result["note"] = "Examples not requested; returning types only."
        else:
            result["note"] = "Local api-data index not found; returning types only."
        if not target_types:
            result["note"] += f" No known types for {target_name_or_id}, every matchup is neutral."
        return result

    def suggest_team(self, team: Sequence[str], top_weaknesses=None, suggested_types=None) -> dict:
        team = list(team or [])
        if not 1 <= len(team) <= 6:
            raise InvalidArgument(f"team takes 1-6 members, got {len(team)}")
        top_weaknesses = _bounded(top_weaknesses, 1, 10, "topWeaknesses", 6)
        suggested_types = _bounded(suggested_types, 1, 10, "suggestedDefensiveTypes", 5)

        members = []
        for entry in team:
            rec = self.load_species(entry).record
            members.append({"input": entry, "id": rec.id, "name": rec.name, "types": rec.type_names})

        ranking = coverage.weakness_ranking(self.chart, [m["types"] for m in members], top_weaknesses)
        suggested = coverage.suggest_defensive_types(
            self.chart, [w["type"] for w in ranking], suggested_types
        )
        return {
            "team": members,
            "topWeaknesses": ranking,
            "suggestedDefensiveTypes": suggested,
            "note": TYPE_ONLY_NOTE,
        }
