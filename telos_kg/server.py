"""
telos_kg - TELOS Knowledge Graph MCP Server
Entities, observations and typed relations in one JSON-lines file.
Relation types are checked against the TELOS taxonomy (12 categories x 7 types)
and auto-corrected instead of rejected. Entities without a category get one
detected from their name and observations.

Outputs are compact JSON. Known failures come back as {"error": "..."}.
"""

import argparse
import json
import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel, ConfigDict, Field

from . import config, graph
from .errors import KnowledgeGraphError
from .models import Entity, Relation
from .paths import DEFAULT_MAX_DEPTH
from .store import GraphStore
from .taxonomy import TelosCategory, taxonomy_schema

logger = logging.getLogger(__name__)

# --- Store ---

MEMORY_FILE = config.resolve_memory_path()

def get_store():
    return GraphStore(MEMORY_FILE)

# --- Helpers ---

def _c(d):
    return json.dumps(d, ensure_ascii=False, separators=(',',':'))

def _err(name, e):
    logger.warning("KG error in %s: %s", name, e)
    return _c({"error": str(e)})

# --- Tool arguments ---

class EntityIn(BaseModel):
    name: str = Field(description="The name of the entity")
    entityType: str = Field(description="The type of the entity")
    telosCategory: Optional[TelosCategory] = Field(
        default=None, description="TELOS category. Auto-detected from name and observations if omitted.")
    observations: list[str] = Field(default_factory=list, description="Observation contents for the entity")

    def to_entity(self):
        return Entity(name=self.name, entity_type=self.entityType, observations=list(self.observations),
                      telos_category=self.telosCategory.value if self.telosCategory else None)


class RelationIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from", description="The name of the entity where the relation starts")
    to: str = Field(description="The name of the entity where the relation ends")
    relationType: str = Field(description="supports|enables|constrains|mentors|informs|reflects_on|threatens")

    def to_relation(self):
        return Relation(source=self.from_, target=self.to, relation_type=self.relationType)


class ObservationAdd(BaseModel):
    entityName: str = Field(description="The entity to add the observations to")
    contents: list[str] = Field(description="Observation contents to add")


class ObservationDelete(BaseModel):
    entityName: str = Field(description="The entity containing the observations")
    observations: list[str] = Field(description="Observations to delete")

# --- Server ---

mcp = FastMCP("telos_kg", host=config.HOST, port=config.PORT)

# ============================================================
# MUTATIONS
# ============================================================

@mcp.tool(name="create_entities")
async def create_entities(entities: list[EntityIn]) -> str:
    """Create entities. Existing names are skipped. Returns [{name,entityType,telosCategory,observations}] actually added."""
    try:
        added = graph.create_entities(get_store(), [e.to_entity() for e in entities])
        return _c([e.to_dict() for e in added])
    except KnowledgeGraphError as e:
        return _err("create_entities", e)

@mcp.tool(name="create_relations")
async def create_relations(relations: list[RelationIn]) -> str:
    """Create relations in active voice between existing entities. Types invalid for the source category
    are auto-corrected. Returns [{from,to,relationType,fromCategory,toCategory}] actually added."""
    try:
        added = graph.create_relations(get_store(), [r.to_relation() for r in relations])
        return _c([r.to_dict() for r in added])
    except KnowledgeGraphError as e:
        return _err("create_relations", e)

@mcp.tool(name="add_observations")
async def add_observations(observations: list[ObservationAdd]) -> str:
    """Add observations to existing entities. All-or-nothing. Returns [{entityName,addedObservations}]."""
    try:
        res = graph.add_observations(get_store(), [o.model_dump() for o in observations])
        return _c(res)
    except KnowledgeGraphError as e:
        return _err("add_observations", e)

@mcp.tool(name="delete_entities")
async def delete_entities(entityNames: list[str]) -> str:
    """Delete entities and their relations. Destructive."""
    try:
        graph.delete_entities(get_store(), entityNames)
        return "Entities deleted successfully"
    except KnowledgeGraphError as e:
        return _err("delete_entities", e)

@mcp.tool(name="delete_observations")
async def delete_observations(deletions: list[ObservationDelete]) -> str:
    """Delete specific observations from entities."""
    try:
        graph.delete_observations(get_store(), [d.model_dump() for d in deletions])
        return "Observations deleted successfully"
    except KnowledgeGraphError as e:
        return _err("delete_observations", e)

@mcp.tool(name="delete_relations")
async def delete_relations(relations: list[RelationIn]) -> str:
    """Delete relations matching from/to/relationType exactly."""
    try:
        graph.delete_relations(get_store(), [r.to_relation() for r in relations])
        return "Relations deleted successfully"
    except KnowledgeGraphError as e:
        return _err("delete_relations", e)

# ============================================================
# QUERIES
# ============================================================

@mcp.tool(name="read_graph")
async def read_graph() -> str:
    """Whole graph. Returns {entities:[],relations:[]}."""
    try:
        return _c(graph.read_graph(get_store()).to_dict())
    except KnowledgeGraphError as e:
        return _err("read_graph", e)

@mcp.tool(name="search_nodes")
async def search_nodes(query: str) -> str:
    """Case-insensitive search over entity names, types and observations. Returns {entities,relations between them}."""
    try:
        return _c(graph.search_nodes(get_store(), query).to_dict())
    except KnowledgeGraphError as e:
        return _err("search_nodes", e)

@mcp.tool(name="open_nodes")
async def open_nodes(names: list[str]) -> str:
    """Entities by exact name + relations between them."""
    try:
        return _c(graph.open_nodes(get_store(), names).to_dict())
    except KnowledgeGraphError as e:
        return _err("open_nodes", e)

@mcp.tool(name="query_relationships_by_type")
async def query_relationships_by_type(relationshipType: str) -> str:
    """Relations with exactly this relationType (supports, enables, constrains, mentors, informs, reflects_on, threatens)."""
    try:
        return _c([r.to_dict() for r in graph.query_relationships_by_type(get_store(), relationshipType)])
    except KnowledgeGraphError as e:
        return _err("query_relationships_by_type", e)

@mcp.tool(name="find_relationship_paths")
async def find_relationship_paths(fromEntity: str, toEntity: str, maxDepth: int = DEFAULT_MAX_DEPTH) -> str:
    """Directed paths between two entities, up to maxDepth edges. Returns [{path:[],relationshipTypes:[]}]."""
    try:
        return _c(graph.find_relationship_paths(get_store(), fromEntity, toEntity, maxDepth))
    except KnowledgeGraphError as e:
        return _err("find_relationship_paths", e)

@mcp.tool(name="get_relationship_suggestions")
async def get_relationship_suggestions(fromEntity: str, toEntity: str) -> str:
    """Relation types for two entities by their TELOS categories, best first. Returns {suggestions,fromCategory,toCategory}."""
    try:
        return _c(graph.get_relationship_suggestions(get_store(), fromEntity, toEntity))
    except KnowledgeGraphError as e:
        return _err("get_relationship_suggestions", e)

@mcp.tool(name="validate_taxonomy")
async def validate_taxonomy() -> str:
    """Audit stored entities/relations against the taxonomy. Returns {valid,entities,relations,coverage}."""
    try:
        return _c(graph.validate_taxonomy(get_store()))
    except KnowledgeGraphError as e:
        return _err("validate_taxonomy", e)

# --- Resources ---

@mcp.resource("telos://taxonomy")
async def get_taxonomy() -> str:
    """Categories, relation types, matrix and default pairs."""
    return json.dumps(taxonomy_schema(), indent=2)

# --- Entry ---

def main(argv=None):
    global MEMORY_FILE
    parser = argparse.ArgumentParser(prog="telos-kg", description="TELOS Knowledge Graph MCP Server")
    parser.add_argument("--memory-path", help="memory .jsonl file (default: $TELOS_MEMORY_PATH or ./memory.jsonl)")
    args = parser.parse_args(argv)
    config.configure_logging()
    MEMORY_FILE = config.resolve_memory_path(args.memory_path)
    logger.info("Knowledge graph at %s, transport %s", MEMORY_FILE, config.TRANSPORT)
    mcp.run(transport=config.TRANSPORT)

if __name__ == "__main__":
    main()
