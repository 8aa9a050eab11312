"""
JSON-lines persistence for the knowledge graph.
One record per line, tagged "entity" or "relation". The whole file is read on every
operation and rewritten on every mutation.
"""

import json
import logging
import os
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path

from .errors import StorageError
from .models import Entity, KnowledgeGraph, Relation

logger = logging.getLogger(__name__)


def _c(d):
    return json.dumps(d, ensure_ascii=False, separators=(',', ':'))


def _require_str(key, value):
    if not isinstance(value, str):
        raise ValueError(f"{key} is not a string")


def _record(line):
    """Entity/Relation for one stored line, None for unknown record types. Raises ValueError if malformed."""
    item = json.loads(line)
    if not isinstance(item, dict):
        raise ValueError("record is not an object")
    kind = item.get("type")
    try:
        if kind == "entity":
            _require_str("name", item["name"])
            _require_str("entityType", item.get("entityType", ""))
            obs = item.get("observations", [])
            if not isinstance(obs, list) or not all(isinstance(o, str) for o in obs):
                raise ValueError("observations is not a list of strings")
            return Entity.from_dict(item)
        if kind == "relation":
            for key in ("from", "to", "relationType"):
                _require_str(key, item[key])
            return Relation.from_dict(item)
    except KeyError as e:
        raise ValueError(f"missing field {e}") from e
    return None


@dataclass(frozen=True)
class GraphStore:
    """Handle on one memory file. Fixed path for its lifetime."""

    path: Path

    def __post_init__(self):
        object.__setattr__(self, "path", Path(self.path))

    def load(self) -> KnowledgeGraph:
        graph = KnowledgeGraph()
        try:
            data = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return graph
        except OSError as e:
            raise StorageError(self.path, e) from e

        for n, line in enumerate(data.split("\n"), 1):
            if not line.strip():
                continue
            try:
                rec = _record(line)
            except ValueError as e:  # JSONDecodeError is a ValueError
                logger.warning("Skipping malformed record %s:%d: %s", self.path, n, e)
                continue
            if isinstance(rec, Entity):
                graph.entities.append(rec)
            elif isinstance(rec, Relation):
                graph.relations.append(rec)
        logger.debug("Loaded %s: %d entities, %d relations", self.path, len(graph.entities), len(graph.relations))
        return graph

    def save(self, graph: KnowledgeGraph) -> None:
        """Rewrite the file: all entities, then all relations. Temp file + rename."""
        lines = [_c({"type": "entity", **e.to_dict()}) for e in graph.entities]
        lines += [_c({"type": "relation", **r.to_dict()}) for r in graph.relations]
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                f.write("\n".join(lines))
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as e:
            with suppress(OSError):
                tmp.unlink()
            raise StorageError(self.path, e) from e
        logger.debug("Saved %s: %d entities, %d relations", self.path, len(graph.entities), len(graph.relations))
