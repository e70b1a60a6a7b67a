# typedex/config.py
# Paths, remote endpoint and flags. Every value can be overridden from the environment.

import os
from typing import NamedTuple


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# --------------------------------------------------------------------------- #
# Paths & flags
# --------------------------------------------------------------------------- #

DATA_DIR = os.environ.get("TYPEDEX_DATA_DIR", "data")

# Synced PokeAPI api-data (read-only for the engine) and the lazily filled cache
SYNCED_ROOT = os.environ.get("TYPEDEX_SYNCED_ROOT", os.path.join(DATA_DIR, "pokeapi-data", "v2"))
CACHE_ROOT = os.environ.get("TYPEDEX_CACHE_ROOT", os.path.join(DATA_DIR, "pokeapi-cache", "v2"))

POKEAPI_BASE = os.environ.get("TYPEDEX_POKEAPI_BASE", "https://pokeapi.co/api/v2").rstrip("/")
HTTP_TIMEOUT = float(os.environ.get("TYPEDEX_HTTP_TIMEOUT", "10"))
RETRY_TOTAL = int(os.environ.get("TYPEDEX_RETRY_TOTAL", "3"))
RETRY_BACKOFF = float(os.environ.get("TYPEDEX_RETRY_BACKOFF", "0.3"))

ENABLE_VERBOSE_LOGGING = _env_bool("TYPEDEX_VERBOSE")
LOG_FILE = os.environ.get("TYPEDEX_LOG_FILE", os.path.join(DATA_DIR, "typedex.log"))

# Logical record kinds -> directory / endpoint names used by PokeAPI
SPECIES = "species"
TYPE = "type"
KIND_DIRS = {SPECIES: "pokemon", TYPE: "type"}


class Settings(NamedTuple):
    synced_root: str
    cache_root: str
    pokeapi_base: str = POKEAPI_BASE
    http_timeout: float = HTTP_TIMEOUT


def load_settings(synced_root=None, cache_root=None) -> Settings:
    """Settings from the environment, with optional root overrides."""
    return Settings(
        synced_root=synced_root or SYNCED_ROOT,
        cache_root=cache_root or CACHE_ROOT,
    )
