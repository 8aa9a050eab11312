"""Knowledge graph exceptions."""


class KnowledgeGraphError(Exception):
    """Base exception for knowledge graph operations."""


class EntityNotFoundError(KnowledgeGraphError):
    """Raised when an operation needs entities that do not exist."""

    def __init__(self, names):
        self.names = list(names)
        super().__init__(f"Entity not found: {', '.join(self.names)}")


class StorageError(KnowledgeGraphError):
    """Raised when the memory file cannot be read or written."""

    def __init__(self, path, reason):
        self.path = path
        super().__init__(f"Storage failure on {path}: {reason}")
