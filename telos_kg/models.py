"""Graph records and their JSON-lines wire form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .taxonomy import TelosCategory, resolve_category


@dataclass
class Entity:
    """A named node. `telos_category` holds the raw stored value (may be an unknown string)."""

    name: str
    entity_type: str
    observations: list[str] = field(default_factory=list)
    telos_category: Optional[str] = None

    @property
    def category(self) -> TelosCategory:
        return resolve_category(self.telos_category)

    def to_dict(self) -> dict[str, Any]:
        d = {"name": self.name, "entityType": self.entity_type}
        if self.telos_category is not None:
            d["telosCategory"] = str(self.telos_category)
        d["observations"] = list(self.observations)
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Entity":
        return cls(name=d["name"], entity_type=d.get("entityType", ""),
                   observations=list(d.get("observations") or []),
                   telos_category=d.get("telosCategory"))


@dataclass
class Relation:
    """A directed, typed edge. Categories are captured at creation, never re-derived."""

    source: str
    target: str
    relation_type: str
    from_category: Optional[str] = None
    to_category: Optional[str] = None

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.source, self.target, str(self.relation_type))

    def to_dict(self) -> dict[str, Any]:
        d = {"from": self.source, "to": self.target, "relationType": str(self.relation_type)}
        if self.from_category is not None:
            d["fromCategory"] = str(self.from_category)
        if self.to_category is not None:
            d["toCategory"] = str(self.to_category)
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Relation":
        return cls(source=d["from"], target=d["to"], relation_type=d["relationType"],
                   from_category=d.get("fromCategory"), to_category=d.get("toCategory"))


@dataclass
class KnowledgeGraph:
    entities: list[Entity] = field(default_factory=list)
    relations: list[Relation] = field(default_factory=list)

    def entity(self, name: str) -> Optional[Entity]:
        return next((e for e in self.entities if e.name == name), None)

    def names(self) -> set[str]:
        return {e.name for e in self.entities}

    def relation_keys(self) -> set[tuple[str, str, str]]:
        return {r.key for r in self.relations}

    def subgraph(self, entities: list[Entity]) -> "KnowledgeGraph":
        """Given entities plus the relations whose both endpoints are among them."""
        names = {e.name for e in entities}
        return KnowledgeGraph(entities=list(entities),
                              relations=[r for r in self.relations if r.source in names and r.target in names])

    def to_dict(self) -> dict[str, Any]:
        return {"entities": [e.to_dict() for e in self.entities],
                "relations": [r.to_dict() for r in self.relations]}
