"""Bounded path search over directed relations."""

from __future__ import annotations

from typing import Iterable

from .models import Relation

DEFAULT_MAX_DEPTH = 3


def find_paths(relations: Iterable[Relation], source: str, target: str,
               max_depth: int = DEFAULT_MAX_DEPTH) -> list[dict]:
    """All simple directed paths source -> target with at most `max_depth` edges.

    Returns [{path:[names], relationshipTypes:[types]}] in DFS order over relation
    insertion order. The zero-edge path is never reported. A node already on the
    current path is not expanded again, but can still close the path as the target,
    so cycles back to `source` are found when source == target.
    """
    outgoing: dict[str, list[Relation]] = {}
    for r in relations:
        outgoing.setdefault(r.source, []).append(r)

    found = []
    # Frames are (node, path, relation types); each frame owns its path.
    stack = [(source, (source,), ())]
    while stack:
        node, path, types = stack.pop()
        if len(path) - 1 > max_depth:
            continue
        if node == target and len(path) > 1:
            found.append({"path": list(path), "relationshipTypes": list(types)})
            continue
        if node in path[:-1]:
            continue
        children = [(r.target, path + (r.target,), types + (str(r.relation_type),))
                    for r in outgoing.get(node, ())]
        stack.extend(reversed(children))
    return found
