# typedex/cache.py
# Tiered record store: synced api-data -> on-disk cache -> live PokeAPI (written through).
#
# The synced tree is never written. Cache writes are whole-file atomic replaces, so two
# requests racing on the same id at worst both fetch and both write identical content.

import json
import os
import tempfile
from typing import Any, NamedTuple, Optional

import requests

from typedex import config
from typedex.errors import MalformedLocalRecord, SourceUnavailable, UnresolvedIdentifier
from typedex.logger import log_action, log_verbose
from typedex.models import ResourceIndex, SpeciesRecord, TypeRecord, parse_record
from typedex.pokeapi import PokeApiClient
from typedex.type_names import normalize

SYNCED = "synced"
CACHE = "cache"
REMOTE = "remote"

# origin labels reported to callers, per tier
ORIGINS = {SYNCED: "local-sync", CACHE: "cache", REMOTE: "pokeapi-cached"}

MODELS = {config.SPECIES: SpeciesRecord, config.TYPE: TypeRecord}


class Loaded(NamedTuple):
    record: Any
    raw: dict
    tier: str
    source: Optional[str]


def _atomic_write(path: str, obj: dict):
    """Atomically write JSON (utf-8); readers never see a half-written file."""
    d = os.path.dirname(path) or "."
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile("w", dir=d, delete=False, encoding="utf-8", newline="\n") as tmp:
            json.dump(obj, tmp, separators=(",", ":"), ensure_ascii=False)
            tmp.flush()
            os.fsync(tmp.fileno())
            tmp_path = tmp.name
        os.replace(tmp_path, path)
    except Exception:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


def _read_json(path: str):
    """Parsed JSON at path, or None when the file is absent."""
    if not os.path.isfile(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedLocalRecord(path, f"invalid JSON: {e}") from e


class RecordStore:
    def __init__(self, synced_root: str, cache_root: str, client=None):
        self.synced_root = synced_root
        self.cache_root = cache_root
        self.client = client or PokeApiClient()
        self._indexes = {}

    # ---- paths ------------------------------------------------------------ #

    def index_path(self, kind: str) -> str:
        return os.path.join(self.synced_root, config.KIND_DIRS[kind], "index.json")

    def synced_path(self, kind: str, record_id) -> Optional[str]:
        if not record_id:
            return None
        return os.path.join(self.synced_root, config.KIND_DIRS[kind], str(record_id), "index.json")

    def cache_path(self, kind: str, key) -> Optional[str]:
        if key in (None, ""):
            return None
        return os.path.join(self.cache_root, config.KIND_DIRS[kind], f"{key}.json")

    @staticmethod
    def cache_key(kind: str, record_id=None, name=None):
        """Species are cached by numeric id, types by canonical name."""
        if kind == config.TYPE:
            return normalize(name) if name else record_id
        return record_id

    # ---- indexes ---------------------------------------------------------- #

    def has_index(self, kind: str) -> bool:
        return os.path.isfile(self.index_path(kind))

    def read_index(self, kind: str):
        """Entries of the synced index for kind, or None when it was never synced."""
        if kind in self._indexes:
            return self._indexes[kind]
        path = self.index_path(kind)
        data = _read_json(path)
        if data is None:
            return None
        entries = parse_record(ResourceIndex, data, path).results
        self._indexes[kind] = entries
        log_action(f"Loaded {kind} index ({len(entries)} entries)")
        return entries

    # ---- records ---------------------------------------------------------- #

    def read_synced(self, kind: str, record_id):
        """Synced record for id, or None. Never falls through to other tiers."""
        path = self.synced_path(kind, record_id)
        data = _read_json(path) if path else None
        if data is None:
            return None
        return parse_record(MODELS[kind], data, path)

    def load(self, kind: str, record_id=None, name=None) -> Loaded:
        """First hit wins: synced file, cache file, then a remote fetch written to the cache."""
        model = MODELS[kind]
        synced = self.synced_path(kind, record_id)
        cached = self.cache_path(kind, self.cache_key(kind, record_id, name))

        for tier, path in ((SYNCED, synced), (CACHE, cached)):
            data = _read_json(path) if path else None
            if data is not None:
                log_verbose(f"{tier.upper()} HIT: {kind} {path}")
                return Loaded(parse_record(model, data, path), data, tier, path)

        ident = record_id if record_id else name
        # by-name fetches have no per-id paths; report what was actually consulted
        synced = synced or self.index_path(kind)
        cached = cached or os.path.join(self.cache_root, config.KIND_DIRS[kind])
        log_action(f"CACHE MISS: {kind} {ident} - Fetching from API")
        try:
            data = self.client.fetch(kind, ident)
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                raise UnresolvedIdentifier(ident, normalize(ident), kind) from e
            raise SourceUnavailable(kind, ident, synced, cached, e) from e
        except (requests.RequestException, ValueError) as e:
            raise SourceUnavailable(kind, ident, synced, cached, e) from e

        try:
            record = parse_record(model, data, "<remote>")
        except MalformedLocalRecord as e:
            raise SourceUnavailable(kind, ident, synced, cached, e) from e

        if kind == config.SPECIES:
            key = self.cache_key(kind, record_id or record.id)
        else:
            key = self.cache_key(kind, record_id or record.id, name or record.name)
        path = self.cache_path(kind, key)
        if path is None:
            return Loaded(record, data, REMOTE, None)
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            _atomic_write(path, data)
            log_action(f"Cached {kind} {key} -> {path}")
        except OSError as e:
            log_action(f"ERROR writing cache {path}: {e}")
            return Loaded(record, data, REMOTE, None)
        return Loaded(record, data, REMOTE, path)
