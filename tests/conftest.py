"""Shared fixtures: a GraphStore on a temp file and the MCP server pointed at it."""

from __future__ import annotations

from pathlib import Path

import pytest

from telos_kg import server
from telos_kg.graph import create_entities
from telos_kg.models import Entity
from telos_kg.store import GraphStore


@pytest.fixture
def store(tmp_path: Path) -> GraphStore:
    return GraphStore(tmp_path / "memory.jsonl")


@pytest.fixture
def seeded(store: GraphStore) -> GraphStore:
    """Store with one entity per category used across the graph tests."""
    create_entities(store, [
        Entity("H", "habit", ["morning run"], "Habits"),
        Entity("P", "project", ["launch site"], "Projects"),
        Entity("M", "memory", ["postmortem notes"], "Memory"),
        Entity("R", "risk", ["burnout"], "Risks"),
        Entity("Alice", "person", ["mentor"], "Relationships"),
        Entity("O", "objective", ["ship v1"], "Objectives"),
    ])
    return store


@pytest.fixture
def server_store(store: GraphStore, monkeypatch: pytest.MonkeyPatch) -> GraphStore:
    monkeypatch.setattr(server, "MEMORY_FILE", store.path)
    return store
