import os

os.environ.setdefault("TYPEDEX_LOG_FILE", "")

import copy
import json
from pathlib import Path

import pytest
import requests

from typedex.config import Settings
from typedex.engine import Engine
from typedex.type_names import TYPE_IDS, TYPES

API = "https://pokeapi.co/api/v2"

# Defensive chart: type -> (double_damage_from, half_damage_from, no_damage_from)
DEFENSE = {
    "normal": (["fighting"], [], ["ghost"]),
    "fire": (["water", "ground", "rock"], ["fire", "grass", "ice", "bug", "steel", "fairy"], []),
    "water": (["electric", "grass"], ["fire", "water", "ice", "steel"], []),
    "electric": (["ground"], ["electric", "flying", "steel"], []),
    "grass": (["fire", "ice", "poison", "flying", "bug"], ["water", "electric", "grass", "ground"], []),
    "ice": (["fire", "fighting", "rock", "steel"], ["ice"], []),
    "fighting": (["flying", "psychic", "fairy"], ["bug", "rock", "dark"], []),
    "poison": (["ground", "psychic"], ["grass", "fighting", "poison", "bug", "fairy"], []),
    "ground": (["water", "grass", "ice"], ["poison", "rock"], ["electric"]),
    "flying": (["electric", "ice", "rock"], ["grass", "fighting", "bug"], ["ground"]),
    "psychic": (["bug", "ghost", "dark"], ["fighting", "psychic"], []),
    "bug": (["fire", "flying", "rock"], ["grass", "fighting", "ground"], []),
    "rock": (["water", "grass", "fighting", "ground", "steel"], ["normal", "fire", "poison", "flying"], []),
    "ghost": (["ghost", "dark"], ["poison", "bug"], ["normal", "fighting"]),
    "dragon": (["ice", "dragon", "fairy"], ["fire", "water", "electric", "grass"], []),
    "dark": (["fighting", "bug", "fairy"], ["ghost", "dark"], ["psychic"]),
    "steel": (
        ["fire", "fighting", "ground"],
        ["normal", "grass", "ice", "flying", "psychic", "bug", "rock", "dragon", "steel", "fairy"],
        ["poison"],
    ),
    "fairy": (["poison", "steel"], ["fighting", "bug", "dark"], ["dragon"]),
}

# (id, name, types) in index order
SPECIES = [
    (1, "bulbasaur", ["grass", "poison"]),
    (4, "charmander", ["fire"]),
    (6, "charizard", ["fire", "flying"]),
    (7, "squirtle", ["water"]),
    (25, "pikachu", ["electric"]),
    (27, "sandshrew", ["ground"]),
    (50, "diglett", ["ground"]),
    (54, "psyduck", ["water"]),
    (60, "poliwag", ["water"]),
    (74, "geodude", ["rock", "ground"]),
    (95, "onix", ["rock", "ground"]),
    (9999, "glitch", []),
]


def ref(kind_dir, name, id_):
    return {"name": name, "url": f"{API}/{kind_dir}/{id_}/"}


def type_payload(name):
    def refs(names):
        return [ref("type", n, TYPE_IDS[n]) for n in names]

    double_from, half_from, no_from = DEFENSE[name]
    double_to = [t for t in TYPES if name in DEFENSE[t][0]]
    half_to = [t for t in TYPES if name in DEFENSE[t][1]]
    no_to = [t for t in TYPES if name in DEFENSE[t][2]]
    return {
        "id": TYPE_IDS[name],
        "name": name,
        "damage_relations": {
            "double_damage_from": refs(double_from),
            "half_damage_from": refs(half_from),
            "no_damage_from": refs(no_from),
            "double_damage_to": refs(double_to),
            "half_damage_to": refs(half_to),
            "no_damage_to": refs(no_to),
        },
    }


def species_payload(id_, name, types):
    return {
        "id": id_,
        "name": name,
        "height": 7,
        "types": [{"slot": i + 1, "type": ref("type", t, TYPE_IDS[t])} for i, t in enumerate(types)],
    }


def write_json(path: Path, obj):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj), encoding="utf-8")


def not_found():
    resp = requests.Response()
    resp.status_code = 404
    return requests.HTTPError("404 Client Error: Not Found", response=resp)


class FakeClient:
    """Stands in for PokeApiClient; unknown keys answer 404."""

    def __init__(self, payloads=None):
        self.payloads = payloads or {}
        self.calls = []

    def fetch(self, kind, name_or_id):
        key = (kind, str(name_or_id).strip().lower())
        self.calls.append(key)
        if key not in self.payloads:
            raise not_found()
        payload = self.payloads[key]
        if isinstance(payload, Exception):
            raise payload
        return copy.deepcopy(payload)


def all_type_payloads():
    out = {}
    for t in TYPES:
        out[("type", t)] = type_payload(t)
        out[("type", str(TYPE_IDS[t]))] = type_payload(t)
    return out


@pytest.fixture
def synced_root(tmp_path):
    root = tmp_path / "pokeapi-data" / "v2"
    write_json(root / "type" / "index.json", {
        "count": len(TYPES) + 1,
        "results": [ref("type", t, TYPE_IDS[t]) for t in TYPES] + [ref("type", "stellar", 19)],
    })
    for t in TYPES:
        write_json(root / "type" / str(TYPE_IDS[t]) / "index.json", type_payload(t))

    results = [ref("pokemon", name, id_) for id_, name, _ in SPECIES]
    results.insert(3, {"name": "missingno", "url": f"{API}/pokemon/"})
    write_json(root / "pokemon" / "index.json", {"count": len(results), "results": results})
    for id_, name, types in SPECIES:
        write_json(root / "pokemon" / str(id_) / "index.json", species_payload(id_, name, types))
    # present on disk but without a types field
    write_json(root / "pokemon" / "666" / "index.json", {"id": 666, "name": "broken"})
    return root


@pytest.fixture
def cache_root(tmp_path):
    return tmp_path / "pokeapi-cache" / "v2"


@pytest.fixture
def fake_client():
    return FakeClient({
        ("species", "133"): species_payload(133, "eevee", ["normal"]),
        ("species", "eevee"): species_payload(133, "eevee", ["normal"]),
        ("species", "7"): species_payload(7, "squirtle", ["fire"]),
    })


@pytest.fixture
def engine(synced_root, cache_root, fake_client):
    return Engine(Settings(synced_root=str(synced_root), cache_root=str(cache_root)), client=fake_client)


@pytest.fixture
def remote_client():
    payloads = all_type_payloads()
    for id_, name, types in SPECIES:
        payloads[("species", str(id_))] = species_payload(id_, name, types)
        payloads[("species", name)] = species_payload(id_, name, types)
    return FakeClient(payloads)


@pytest.fixture
def bare_engine(tmp_path, cache_root, remote_client):
    """No synced data at all: everything comes from the (fake) remote and the cache."""
    return Engine(
        Settings(synced_root=str(tmp_path / "nothing-synced"), cache_root=str(cache_root)),
        client=remote_client,
    )
