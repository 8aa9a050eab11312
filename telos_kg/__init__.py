"""TELOS knowledge graph: taxonomy-checked entity/relation memory served over MCP."""

from .errors import EntityNotFoundError, KnowledgeGraphError, StorageError
from .models import Entity, KnowledgeGraph, Relation
from .store import GraphStore
from .taxonomy import RelationshipType, TelosCategory

__all__ = [
    "Entity", "Relation", "KnowledgeGraph", "GraphStore",
    "RelationshipType", "TelosCategory",
    "KnowledgeGraphError", "EntityNotFoundError", "StorageError",
]
