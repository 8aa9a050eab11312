"""Taxonomy table, classifier and relationship validator tests."""

from __future__ import annotations

import pytest

from telos_kg.taxonomy import (
    CATEGORY_KEYWORDS,
    RELATIONSHIP_MATRIX,
    RelationshipType,
    TelosCategory,
    detect_telos_category,
    get_default_relationship,
    get_relationship_description,
    get_suggested_relationships,
    get_valid_relationship_types,
    is_valid_relationship_for_category,
    is_valid_relationship_type,
    is_valid_telos_category,
    taxonomy_schema,
    validate_relationship,
)

C = TelosCategory
R = RelationshipType


class TestTables:

    def test_counts(self) -> None:
        assert len(list(RelationshipType)) == 7
        assert len(list(TelosCategory)) == 12
        assert {t.value for t in RelationshipType} == {
            "supports", "enables", "constrains", "mentors", "informs", "reflects_on", "threatens"}

    def test_matrix_covers_every_category(self) -> None:
        assert set(RELATIONSHIP_MATRIX) == set(TelosCategory)
        for category, types in RELATIONSHIP_MATRIX.items():
            assert types, category
            assert set(types) <= set(RelationshipType)

    def test_keywords_for_every_category(self) -> None:
        assert set(CATEGORY_KEYWORDS) == set(TelosCategory)

    def test_risks_row(self) -> None:
        assert RELATIONSHIP_MATRIX[C.RISKS] == (R.MENTORS, R.INFORMS, R.REFLECTS_ON, R.THREATENS)

    def test_schema_is_plain_data(self) -> None:
        schema = taxonomy_schema()
        assert len(schema["categories"]) == 12
        assert schema["matrix"]["Memory"] == ["supports", "enables", "constrains", "informs"]
        assert schema["exclusive"] == {"mentors": "Relationships", "threatens": "Risks"}


class TestDetection:

    def test_habits(self) -> None:
        assert detect_telos_category("daily_standup", ["routine meeting", "daily practice"]) is C.HABITS

    def test_objectives(self) -> None:
        assert detect_telos_category("product_launch_goal", ["target Q4 2024", "achieve 10k users"]) is C.OBJECTIVES

    def test_risks(self) -> None:
        assert detect_telos_category("budget_shortage", ["threat to project", "risk of delays"]) is C.RISKS

    def test_resources(self) -> None:
        assert detect_telos_category("development_tools", ["infrastructure", "capability enhancement"]) is C.RESOURCES

    def test_default_context(self) -> None:
        assert detect_telos_category("x", ["no matching words"]) is C.CONTEXT
        assert detect_telos_category("ambiguous_entity") is C.CONTEXT

    def test_presence_not_frequency(self) -> None:
        # "goal" three times still scores 1; two distinct Habits keywords win
        assert detect_telos_category("goal goal goal", ["routine", "daily"]) is C.HABITS

    def test_tie_keeps_earlier_category(self) -> None:
        # "team" is a keyword of both Context and Relationships
        assert detect_telos_category("team") is C.CONTEXT

    def test_case_insensitive(self) -> None:
        assert detect_telos_category("MISSION Statement") is C.IDENTITY


class TestValidation:

    def test_valid(self) -> None:
        result = validate_relationship(C.HABITS, C.PROJECTS, R.SUPPORTS)
        assert result.is_valid
        assert result.suggested_type is R.SUPPORTS
        assert result.error_message is None

    def test_not_in_matrix(self) -> None:
        result = validate_relationship(C.MEMORY, C.PROJECTS, R.THREATENS)
        assert not result.is_valid
        assert "not valid for category 'Memory'" in result.error_message
        assert "supports, enables, constrains, informs" in result.error_message
        assert result.suggested_type is R.INFORMS
        assert result.allowed_types == list(RELATIONSHIP_MATRIX[C.MEMORY])

    def test_mentors_gate(self) -> None:
        result = validate_relationship(C.PROJECTS, C.OBJECTIVES, R.MENTORS)
        assert not result.is_valid
        assert "should only be used by people" in result.error_message
        assert result.suggested_type is R.SUPPORTS

    def test_threatens_outside_matrix_reports_matrix_error(self) -> None:
        result = validate_relationship(C.PROJECTS, C.OBJECTIVES, R.THREATENS)
        assert not result.is_valid
        assert "not valid for category" in result.error_message

    def test_accepts_raw_strings(self) -> None:
        assert validate_relationship("Risks", "Projects", "threatens").is_valid

    def test_unknown_type(self) -> None:
        result = validate_relationship(C.HABITS, C.PROJECTS, "loves")
        assert not result.is_valid
        assert "Unknown relationship type 'loves'" in result.error_message
        assert result.suggested_type is R.SUPPORTS

    @pytest.mark.parametrize("category", list(TelosCategory))
    def test_threatens_only_from_risks(self, category: TelosCategory) -> None:
        result = validate_relationship(category, C.PROJECTS, R.THREATENS)
        assert result.is_valid == (category is C.RISKS)

    @pytest.mark.parametrize("category", list(TelosCategory))
    def test_mentors_only_from_relationships(self, category: TelosCategory) -> None:
        result = validate_relationship(category, C.PROJECTS, R.MENTORS)
        assert result.is_valid == (category is C.RELATIONSHIPS)

    def test_to_dict(self) -> None:
        d = validate_relationship(C.MEMORY, C.PROJECTS, R.THREATENS).to_dict()
        assert d["isValid"] is False
        assert d["suggestedType"] == "informs"
        assert "errorMessage" in d


class TestDefaults:

    @pytest.mark.parametrize("pair,expected", [
        ((C.HABITS, C.PROJECTS), R.SUPPORTS),
        ((C.RESOURCES, C.PROJECTS), R.ENABLES),
        ((C.CONTEXT, C.PROJECTS), R.CONSTRAINS),
        ((C.RISKS, C.PROJECTS), R.THREATENS),
        ((C.RETROS, C.HABITS), R.REFLECTS_ON),
        ((C.MEMORY, C.DECISION_JOURNAL), R.INFORMS),
        ((C.MEMORY, C.PROJECTS), R.INFORMS),
        ((C.IDENTITY, C.MEMORY), R.SUPPORTS),
    ])
    def test_lookup(self, pair, expected) -> None:
        assert get_default_relationship(*pair) is expected

    def test_total(self) -> None:
        for a in TelosCategory:
            for b in TelosCategory:
                assert get_default_relationship(a, b) in set(RelationshipType)
        assert get_default_relationship("Nope", None) is R.SUPPORTS


class TestSuggestions:

    @pytest.mark.parametrize("category", [c for c in TelosCategory if c is not C.RISKS])
    def test_default_first_no_duplicates(self, category: TelosCategory) -> None:
        for target in TelosCategory:
            suggestions = get_suggested_relationships(category, target)
            assert suggestions[0] is get_default_relationship(category, target)
            assert len(suggestions) == len(set(suggestions)) == len(RELATIONSHIP_MATRIX[category])

    def test_risks_to_projects(self) -> None:
        assert get_suggested_relationships(C.RISKS, C.PROJECTS) == [
            R.THREATENS, R.MENTORS, R.INFORMS, R.REFLECTS_ON]

    def test_memory_excludes_invalid(self) -> None:
        suggestions = get_suggested_relationships(C.MEMORY, C.PROJECTS)
        assert R.THREATENS not in suggestions
        assert R.MENTORS not in suggestions


class TestHelpers:

    def test_type_guards(self) -> None:
        assert is_valid_relationship_type("supports")
        assert not is_valid_relationship_type("invalid")
        assert not is_valid_relationship_type("")
        assert is_valid_telos_category("Identity")
        assert not is_valid_telos_category("identity")
        assert not is_valid_telos_category("")

    def test_valid_types(self) -> None:
        assert get_valid_relationship_types("Context") == [R.SUPPORTS, R.ENABLES, R.CONSTRAINS, R.INFORMS]
        assert get_valid_relationship_types("Unknown") == []

    def test_matrix_membership_ignores_special_gates(self) -> None:
        assert is_valid_relationship_for_category(C.PROJECTS, R.MENTORS)
        assert not is_valid_relationship_for_category(C.MEMORY, R.MENTORS)
        assert not is_valid_relationship_for_category("Unknown", R.SUPPORTS)

    def test_descriptions(self) -> None:
        for t in RelationshipType:
            assert get_relationship_description(t) != "Unknown relationship type"
        assert get_relationship_description("invalid") == "Unknown relationship type"
