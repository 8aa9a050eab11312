"""
Knowledge graph operations.
Every function takes the GraphStore explicitly, loads the full graph, and (for
mutations) writes it back once at the end.
"""

import logging

from .audit import audit_graph
from .errors import EntityNotFoundError
from .models import Entity, KnowledgeGraph, Relation
from .paths import DEFAULT_MAX_DEPTH, find_paths
from .store import GraphStore
from .taxonomy import detect_telos_category, get_suggested_relationships, validate_relationship

logger = logging.getLogger(__name__)


def _unique(items, exclude=()):
    """Items in order, without repeats and without anything in `exclude`."""
    seen, out = set(exclude), []
    for i in items:
        if i not in seen:
            seen.add(i)
            out.append(i)
    return out

# --- Mutations ---

def create_entities(store: GraphStore, entities: list[Entity]) -> list[Entity]:
    """Add entities whose names are new. Existing names are skipped, not updated.
    Missing categories are detected from name + observations."""
    graph = store.load()
    names = graph.names()
    added = []
    for e in entities:
        if e.name in names:
            continue
        names.add(e.name)
        obs = _unique(e.observations)
        category = e.telos_category or detect_telos_category(e.name, obs).value
        added.append(Entity(name=e.name, entity_type=e.entity_type, observations=obs,
                            telos_category=str(category)))
    graph.entities.extend(added)
    store.save(graph)
    return added


def create_relations(store: GraphStore, relations: list[Relation]) -> list[Relation]:
    """Add relations between existing entities.

    Disallowed types are auto-corrected to the category pair's default and still added;
    the rejection is logged as a warning. Existing triples and relations with a missing
    endpoint are skipped.
    """
    graph = store.load()
    keys = graph.relation_keys()
    added, warnings = [], []
    for r in relations:
        if r.key in keys:
            continue
        src, dst = graph.entity(r.source), graph.entity(r.target)
        if src is None or dst is None:
            warnings.append(f"Entities not found for relation: {r.source} -> {r.target}")
            continue
        fc, tc = src.category, dst.category
        result = validate_relationship(fc, tc, r.relation_type)
        rel_type = str(r.relation_type)
        if not result.is_valid:
            rel_type = result.suggested_type.value
            warnings.append(f"{result.error_message}. Auto-corrected to '{rel_type}'")
        new = Relation(source=r.source, target=r.target, relation_type=rel_type,
                       from_category=fc.value, to_category=tc.value)
        if new.key in keys:
            continue
        keys.add(new.key)
        added.append(new)
    graph.relations.extend(added)
    store.save(graph)
    for w in warnings:
        logger.warning("Relationship validation: %s", w)
    return added


def add_observations(store: GraphStore, additions: list[dict]) -> list[dict]:
    """Append new observation strings to existing entities.

    additions: [{entityName, contents:[...]}]. Fail-fast: if any entity is missing
    nothing is applied or written.
    """
    graph = store.load()
    missing = _unique(a["entityName"] for a in additions if graph.entity(a["entityName"]) is None)
    if missing:
        raise EntityNotFoundError(missing)
    results = []
    for a in additions:
        entity = graph.entity(a["entityName"])
        new = _unique(a["contents"], exclude=entity.observations)
        entity.observations.extend(new)
        results.append({"entityName": a["entityName"], "addedObservations": new})
    store.save(graph)
    return results


def delete_entities(store: GraphStore, names: list[str]) -> None:
    """Remove entities and every relation touching them. Unknown names are ignored."""
    graph = store.load()
    doomed = set(names)
    graph.entities = [e for e in graph.entities if e.name not in doomed]
    graph.relations = [r for r in graph.relations if r.source not in doomed and r.target not in doomed]
    store.save(graph)


def delete_observations(store: GraphStore, deletions: list[dict]) -> None:
    """deletions: [{entityName, observations:[...]}]. Unknown entities are ignored."""
    graph = store.load()
    for d in deletions:
        entity = graph.entity(d["entityName"])
        if entity is not None:
            drop = set(d["observations"])
            entity.observations = [o for o in entity.observations if o not in drop]
    store.save(graph)


def delete_relations(store: GraphStore, relations: list[Relation]) -> None:
    graph = store.load()
    doomed = {r.key for r in relations}
    graph.relations = [r for r in graph.relations if r.key not in doomed]
    store.save(graph)

# --- Queries ---

def read_graph(store: GraphStore) -> KnowledgeGraph:
    return store.load()


def search_nodes(store: GraphStore, query: str) -> KnowledgeGraph:
    """Case-insensitive substring match on name, entity type and observations."""
    graph = store.load()
    q = query.lower()
    hits = [e for e in graph.entities
            if q in e.name.lower() or q in e.entity_type.lower()
            or any(q in o.lower() for o in e.observations)]
    return graph.subgraph(hits)


def open_nodes(store: GraphStore, names: list[str]) -> KnowledgeGraph:
    graph = store.load()
    wanted = set(names)
    return graph.subgraph([e for e in graph.entities if e.name in wanted])


def query_relationships_by_type(store: GraphStore, relation_type: str) -> list[Relation]:
    """Raw string equality on relationType."""
    return [r for r in store.load().relations if str(r.relation_type) == str(relation_type)]


def find_relationship_paths(store: GraphStore, from_entity: str, to_entity: str,
                            max_depth: int = DEFAULT_MAX_DEPTH) -> list[dict]:
    return find_paths(store.load().relations, from_entity, to_entity, max_depth)


def get_relationship_suggestions(store: GraphStore, from_entity: str, to_entity: str) -> dict:
    """{suggestions:[types], fromCategory, toCategory} for two existing entities."""
    graph = store.load()
    src, dst = graph.entity(from_entity), graph.entity(to_entity)
    if src is None or dst is None:
        raise EntityNotFoundError(n for n, e in ((from_entity, src), (to_entity, dst)) if e is None)
    fc, tc = src.category, dst.category
    return {"suggestions": [t.value for t in get_suggested_relationships(fc, tc)],
            "fromCategory": fc.value, "toCategory": tc.value}


def validate_taxonomy(store: GraphStore) -> dict:
    return audit_graph(store.load())
