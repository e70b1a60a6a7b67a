# typedex/models.py
# Typed views over the PokeAPI payloads the engine reads. Raw JSON is validated here
# once, so nothing downstream has to guess at shapes.

import re
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from typedex.errors import MalformedLocalRecord
from typedex.type_names import canonical_list, normalize

_TRAILING_ID = re.compile(r"/(\d+)/?$")


def parse_id_from_url(url) -> Optional[int]:
    """Trailing numeric path segment of a PokeAPI url, or None."""
    m = _TRAILING_ID.search(str(url or ""))
    if not m:
        return None
    n = int(m.group(1))
    return n if n > 0 else None


def _names(entries) -> List[str]:
    # entries look like {"name": ..., "url": ...}; plain strings are accepted too
    out = []
    for x in entries or []:
        name = x.get("name") if isinstance(x, dict) else x
        if isinstance(name, str):
            out.append(normalize(name))
    return out


class NamedResource(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    url: str = ""

    @property
    def id(self) -> Optional[int]:
        return parse_id_from_url(self.url)


class ResourceIndex(BaseModel):
    model_config = ConfigDict(extra="ignore")

    results: List[NamedResource] = Field(default_factory=list)


class ResolvedIdentifier(BaseModel):
    id: int = Field(gt=0)
    name: Optional[str] = None


class SpeciesRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    name: str
    types: List[Any]

    @property
    def type_names(self) -> List[str]:
        """Canonical types in slot order, duplicates and unknown names dropped."""
        raw = []
        for t in self.types:
            if isinstance(t, dict):
                inner = t.get("type")
                raw.append(inner.get("name") if isinstance(inner, dict) else t.get("name"))
            elif isinstance(t, str):
                raw.append(t)
        return canonical_list(x for x in raw if isinstance(x, str))


class TypeDamageRelations(BaseModel):
    model_config = ConfigDict(frozen=True)

    double_from: List[str] = Field(default_factory=list)
    half_from: List[str] = Field(default_factory=list)
    no_from: List[str] = Field(default_factory=list)
    double_to: List[str] = Field(default_factory=list)
    half_to: List[str] = Field(default_factory=list)
    no_to: List[str] = Field(default_factory=list)


class _DamageRelationsPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    double_damage_from: List[Any] = Field(default_factory=list)
    half_damage_from: List[Any] = Field(default_factory=list)
    no_damage_from: List[Any] = Field(default_factory=list)
    double_damage_to: List[Any] = Field(default_factory=list)
    half_damage_to: List[Any] = Field(default_factory=list)
    no_damage_to: List[Any] = Field(default_factory=list)


class TypeRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    name: str
    damage_relations: _DamageRelationsPayload

    def relations(self) -> TypeDamageRelations:
        rel = self.damage_relations
        return TypeDamageRelations(
            double_from=canonical_list(_names(rel.double_damage_from)),
            half_from=canonical_list(_names(rel.half_damage_from)),
            no_from=canonical_list(_names(rel.no_damage_from)),
            double_to=canonical_list(_names(rel.double_damage_to)),
            half_to=canonical_list(_names(rel.half_damage_to)),
            no_to=canonical_list(_names(rel.no_damage_to)),
        )


def parse_record(model, data, path):
    """Validate raw JSON into model; any shape problem becomes MalformedLocalRecord."""
    if not isinstance(data, dict):
        raise MalformedLocalRecord(path, f"expected a JSON object, got {type(data).__name__}")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise MalformedLocalRecord(path, f"invalid or missing fields: {fields}") from e
