"""
TELOS relationship taxonomy.
12 categories x 7 relation types. Static tables + the pure functions that read them:
category detection from free text, relation validation, default/suggested types.
No I/O.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class _Parseable(str, Enum):

    @classmethod
    def parse(cls, value):
        """Enum member for a raw string, None if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None

    def __str__(self):
        return self.value


class RelationshipType(_Parseable):
    SUPPORTS = "supports"
    ENABLES = "enables"
    CONSTRAINS = "constrains"
    MENTORS = "mentors"
    INFORMS = "informs"
    REFLECTS_ON = "reflects_on"
    THREATENS = "threatens"


class TelosCategory(_Parseable):
    IDENTITY = "Identity"
    MEMORY = "Memory"
    RESOURCES = "Resources"
    CONTEXT = "Context"
    CONVENTIONS = "Conventions"
    OBJECTIVES = "Objectives"
    PROJECTS = "Projects"
    HABITS = "Habits"
    RISKS = "Risks"
    DECISION_JOURNAL = "DecisionJournal"
    RELATIONSHIPS = "Relationships"
    RETROS = "Retros"


DEFAULT_CATEGORY = TelosCategory.CONTEXT
FALLBACK_RELATIONSHIP = RelationshipType.SUPPORTS

# --- Tables ---

_R = RelationshipType
_C = TelosCategory

_FULL = (_R.SUPPORTS, _R.ENABLES, _R.CONSTRAINS, _R.MENTORS, _R.INFORMS, _R.REFLECTS_ON)
_BASIC = (_R.SUPPORTS, _R.ENABLES, _R.CONSTRAINS, _R.INFORMS)

RELATIONSHIP_MATRIX: dict[TelosCategory, tuple[RelationshipType, ...]] = {
    _C.IDENTITY: _FULL,
    _C.MEMORY: _BASIC,
    _C.RESOURCES: _BASIC,
    _C.CONTEXT: _BASIC,
    _C.CONVENTIONS: _BASIC,
    _C.OBJECTIVES: _FULL,
    _C.PROJECTS: _FULL,
    _C.HABITS: _FULL,
    _C.RISKS: (_R.MENTORS, _R.INFORMS, _R.REFLECTS_ON, _R.THREATENS),
    _C.DECISION_JOURNAL: _FULL,
    _C.RELATIONSHIPS: _FULL,
    _C.RETROS: _FULL,
}

# Only these source categories may use the type, whatever the matrix says.
EXCLUSIVE_SOURCES: dict[RelationshipType, TelosCategory] = {
    _R.MENTORS: _C.RELATIONSHIPS,
    _R.THREATENS: _C.RISKS,
}

CATEGORY_KEYWORDS: dict[TelosCategory, tuple[str, ...]] = {
    _C.IDENTITY: ("values", "mission", "principles", "identity", "purpose", "vision"),
    _C.MEMORY: ("learned", "experience", "remember", "past", "history", "lesson"),
    _C.RESOURCES: ("tool", "budget", "asset", "infrastructure", "capability", "equipment"),
    _C.CONTEXT: ("environment", "situation", "current", "market", "team", "setting"),
    _C.CONVENTIONS: ("standard", "rule", "process", "methodology", "practice", "protocol"),
    _C.OBJECTIVES: ("goal", "target", "achieve", "outcome", "result", "objective"),
    _C.PROJECTS: ("initiative", "effort", "implementation", "build", "create", "project"),
    _C.HABITS: ("routine", "practice", "daily", "regular", "consistency", "habit"),
    _C.RISKS: ("threat", "danger", "vulnerability", "concern", "issue", "risk"),
    _C.DECISION_JOURNAL: ("decided", "choice", "option", "alternative", "decision", "choose"),
    _C.RELATIONSHIPS: ("person", "team", "stakeholder", "connection", "network", "relationship"),
    _C.RETROS: ("retrospective", "review", "reflection", "lesson", "feedback", "retro"),
}

DEFAULT_RELATIONSHIPS: dict[tuple[TelosCategory, TelosCategory], RelationshipType] = {
    (_C.HABITS, _C.PROJECTS): _R.SUPPORTS,
    (_C.HABITS, _C.OBJECTIVES): _R.SUPPORTS,
    (_C.PROJECTS, _C.OBJECTIVES): _R.SUPPORTS,
    (_C.RESOURCES, _C.PROJECTS): _R.ENABLES,
    (_C.RESOURCES, _C.HABITS): _R.ENABLES,
    (_C.CONTEXT, _C.PROJECTS): _R.CONSTRAINS,
    (_C.CONTEXT, _C.OBJECTIVES): _R.CONSTRAINS,
    (_C.MEMORY, _C.DECISION_JOURNAL): _R.INFORMS,
    (_C.MEMORY, _C.PROJECTS): _R.INFORMS,  # added pair, not a fallback to supports
    (_C.RETROS, _C.PROJECTS): _R.REFLECTS_ON,
    (_C.RETROS, _C.HABITS): _R.REFLECTS_ON,
    (_C.RISKS, _C.PROJECTS): _R.THREATENS,
    (_C.RISKS, _C.OBJECTIVES): _R.THREATENS,
    (_C.CONVENTIONS, _C.HABITS): _R.CONSTRAINS,
    (_C.CONVENTIONS, _C.PROJECTS): _R.CONSTRAINS,
}

RELATIONSHIP_DESCRIPTIONS: dict[RelationshipType, str] = {
    _R.SUPPORTS: "Forward progress toward goals",
    _R.ENABLES: "Provides capability, resources, or tools",
    _R.CONSTRAINS: "Limitations, boundaries, or restrictions",
    _R.MENTORS: "Human relationships and guidance",
    _R.INFORMS: "Knowledge, context, or information sharing",
    _R.REFLECTS_ON: "Retrospective analysis and learning",
    _R.THREATENS: "Risk relationships and potential negative impacts",
}

# --- Type guards ---

def is_valid_relationship_type(value) -> bool:
    return RelationshipType.parse(value) is not None


def is_valid_telos_category(value) -> bool:
    return TelosCategory.parse(value) is not None


def resolve_category(value) -> TelosCategory:
    """Known category for a stored value, Context for missing/unknown."""
    return TelosCategory.parse(value) or DEFAULT_CATEGORY

# --- Lookups ---

def get_valid_relationship_types(category) -> list[RelationshipType]:
    c = TelosCategory.parse(category)
    return list(RELATIONSHIP_MATRIX[c]) if c else []


def is_valid_relationship_for_category(category, relation_type) -> bool:
    """Matrix membership only. Does not apply the mentors/threatens source rules."""
    c, t = TelosCategory.parse(category), RelationshipType.parse(relation_type)
    return c is not None and t in RELATIONSHIP_MATRIX[c]


def get_relationship_description(relation_type) -> str:
    t = RelationshipType.parse(relation_type)
    return RELATIONSHIP_DESCRIPTIONS[t] if t else "Unknown relationship type"


def get_default_relationship(from_category, to_category) -> RelationshipType:
    """Preferred type for an ordered category pair. Never raises; falls back to supports."""
    key = (TelosCategory.parse(from_category), TelosCategory.parse(to_category))
    return DEFAULT_RELATIONSHIPS.get(key, FALLBACK_RELATIONSHIP)


def get_suggested_relationships(from_category, to_category) -> list[RelationshipType]:
    """Default type first, then the rest of the source category's matrix row in table order."""
    default = get_default_relationship(from_category, to_category)
    return [default] + [t for t in get_valid_relationship_types(from_category) if t != default]

# --- Classifier ---

def detect_telos_category(name: str, observations=()) -> TelosCategory:
    """Keyword-presence scoring over name + observations. Highest score wins,
    ties go to the earlier category, no hits -> Context."""
    blob = " ".join([name, *observations]).lower()
    best, best_score = DEFAULT_CATEGORY, 0
    for category, keywords in CATEGORY_KEYWORDS.items():
        score = sum(1 for kw in keywords if kw in blob)
        if score > best_score:
            best, best_score = category, score
    return best

# --- Validator ---

@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    allowed_types: list[RelationshipType] = field(default_factory=list)
    suggested_type: Optional[RelationshipType] = None
    error_message: Optional[str] = None

    def to_dict(self):
        d = {"isValid": self.is_valid, "allowedTypes": [t.value for t in self.allowed_types]}
        if self.suggested_type is not None:
            d["suggestedType"] = self.suggested_type.value
        if self.error_message:
            d["errorMessage"] = self.error_message
        return d


def validate_relationship(from_category, to_category, relation_type) -> ValidationResult:
    """Check a relation type against the source category.

    Gates, first failure wins:
      1. type must be in the source category's matrix row
      2. mentors only from Relationships
      3. threatens only from Risks
    Invalid results always carry the pair's default type as suggestion.
    """
    source = resolve_category(from_category)
    allowed = list(RELATIONSHIP_MATRIX[source])
    rel = RelationshipType.parse(relation_type)

    def invalid(msg):
        return ValidationResult(False, allowed, get_default_relationship(source, to_category), msg)

    if rel is None:
        return invalid(f"Unknown relationship type '{relation_type}'")
    if rel not in allowed:
        return invalid(f"Relationship type '{rel}' is not valid for category '{source}'. "
                       f"Allowed types: {', '.join(t.value for t in allowed)}")
    if rel is _R.MENTORS and source is not EXCLUSIVE_SOURCES[_R.MENTORS]:
        return invalid(f"Relationship type 'mentors' should only be used by people "
                       f"(Relationships category), not '{source}'")
    if rel is _R.THREATENS and source is not EXCLUSIVE_SOURCES[_R.THREATENS]:
        return invalid(f"Relationship type 'threatens' should only be used by Risks category, "
                       f"not '{source}'")
    return ValidationResult(True, allowed, rel)


def taxonomy_schema():
    """Whole taxonomy as plain JSON-able data."""
    return {
        "categories": [c.value for c in TelosCategory],
        "relationTypes": {t.value: RELATIONSHIP_DESCRIPTIONS[t] for t in RelationshipType},
        "matrix": {c.value: [t.value for t in ts] for c, ts in RELATIONSHIP_MATRIX.items()},
        "exclusive": {t.value: c.value for t, c in EXCLUSIVE_SOURCES.items()},
        "defaults": {f"{a.value}-{b.value}": t.value for (a, b), t in DEFAULT_RELATIONSHIPS.items()},
        "fallback": FALLBACK_RELATIONSHIP.value,
        "defaultCategory": DEFAULT_CATEGORY.value,
    }
