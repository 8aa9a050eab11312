"""Read-only taxonomy audit of a stored graph."""

from collections import Counter

from .models import KnowledgeGraph
from .taxonomy import RelationshipType, TelosCategory, validate_relationship


def _audit_entities(graph):
    issues, dist, invalid = [], Counter(), 0
    for e in graph.entities:
        problems = []
        if not e.name or not e.entity_type:
            problems.append(f"Entity missing required fields: {e.name!r}")
        if e.telos_category is None:
            problems.append(f"Entity '{e.name}' missing TELOS category")
        elif TelosCategory.parse(e.telos_category) is None:
            problems.append(f"Invalid TELOS category '{e.telos_category}' for entity '{e.name}'")
        else:
            dist[TelosCategory.parse(e.telos_category).value] += 1
        invalid += bool(problems)
        issues += problems
    return {"total": len(graph.entities), "valid": len(graph.entities) - invalid, "invalid": invalid,
            "issues": issues, "categoryDistribution": dict(dist.most_common())}


def _audit_relations(graph):
    issues, orphaned, dist, invalid = [], [], Counter(), 0
    for r in graph.relations:
        bad = False
        src, dst = graph.entity(r.source), graph.entity(r.target)
        for name, ent in ((r.source, src), (r.target, dst)):
            if ent is None:
                orphaned.append(f"Relation references non-existent entity: {name}")
                bad = True
        rel = RelationshipType.parse(r.relation_type)
        if rel is None:
            issues.append(f"Invalid relationship type '{r.relation_type}' in relation {r.source} -> {r.target}")
            bad = True
        else:
            dist[rel.value] += 1
            if src is not None and dst is not None:
                result = validate_relationship(src.category, dst.category, rel)
                if not result.is_valid:
                    issues.append(f"{result.error_message} ({r.source} -> {r.target})")
                    bad = True
        invalid += bad
    return {"total": len(graph.relations), "valid": len(graph.relations) - invalid, "invalid": invalid,
            "issues": issues, "orphaned": orphaned, "typeDistribution": dict(dist.most_common())}


def audit_graph(graph: KnowledgeGraph) -> dict:
    """Entity/relation validity against the taxonomy, distributions and coverage gaps."""
    ents, rels = _audit_entities(graph), _audit_relations(graph)
    return {
        "valid": ents["invalid"] == 0 and rels["invalid"] == 0,
        "entities": ents,
        "relations": rels,
        "coverage": {
            "missingCategories": [c.value for c in TelosCategory if c.value not in ents["categoryDistribution"]],
            "missingRelationshipTypes": [t.value for t in RelationshipType if t.value not in rels["typeDistribution"]],
        },
    }
