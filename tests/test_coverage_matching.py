"""Tests for the coverage match engine: superset eligibility over a population."""

import pytest

from hirescan.errors import ErrorKind, InvalidInputError
from hirescan.models.skill import EmployeeSkillProfile
from hirescan.skills.catalog import SkillCatalog
from hirescan.skills.matching import CoverageMatchEngine

SQL, PYTHON, GO, RUST = 1, 2, 3, 4


@pytest.fixture
def engine() -> CoverageMatchEngine:
    catalog = SkillCatalog({
        "version": "test",
        "skills": [
            {"id": SQL, "name": "SQL", "category": "Data"},
            {"id": PYTHON, "name": "Python", "category": "Programming"},
            {"id": GO, "name": "Go", "category": "Programming"},
            {"id": RUST, "name": "Rust", "category": "Programming"},
        ],
    })
    return CoverageMatchEngine(catalog)


class TestMatch:
    def test_superset_qualifies(self, engine: CoverageMatchEngine) -> None:
        population = [("E1", {SQL, PYTHON, GO}), ("E2", {SQL})]
        assert engine.match({SQL, PYTHON}, population) == ["E1"]

    def test_exact_set_qualifies(self, engine: CoverageMatchEngine) -> None:
        assert engine.match({SQL}, [("E1", {SQL})]) == ["E1"]

    def test_nobody_holds_requirement(self, engine: CoverageMatchEngine) -> None:
        population = [("E1", {SQL, PYTHON}), ("E2", {GO})]
        assert engine.match({RUST}, population) == []

    def test_empty_requirement_matches_nobody(self, engine: CoverageMatchEngine) -> None:
        population = [("E1", {SQL, PYTHON, GO, RUST}), ("E2", set())]
        assert engine.match(set(), population) == []

    def test_empty_population(self, engine: CoverageMatchEngine) -> None:
        assert engine.match({SQL}, []) == []

    def test_ascending_order(self, engine: CoverageMatchEngine) -> None:
        population = [("e-c", {SQL}), ("e-a", {SQL}), ("e-b", {SQL, GO})]
        assert engine.match({SQL}, population) == ["e-a", "e-b", "e-c"]

    def test_duplicate_held_skills_count_once(self, engine: CoverageMatchEngine) -> None:
        assert engine.match({SQL, GO}, [("E1", [SQL, SQL, GO])]) == ["E1"]

    def test_split_entries_for_same_employee_merge(
        self, engine: CoverageMatchEngine,
    ) -> None:
        population = [("E1", {SQL}), ("E2", {SQL}), ("E1", {PYTHON})]
        assert engine.match({SQL, PYTHON}, population) == ["E1"]

    def test_duplicate_required_ids(self, engine: CoverageMatchEngine) -> None:
        assert engine.match([SQL, SQL], [("E1", {SQL})]) == ["E1"]

    def test_repeatable(self, engine: CoverageMatchEngine) -> None:
        population = [("E3", {SQL, GO}), ("E1", {SQL}), ("E2", {GO})]
        first = engine.match({SQL}, population)
        assert engine.match({SQL}, population) == first == ["E1", "E3"]

    def test_accepts_generator_population(self, engine: CoverageMatchEngine) -> None:
        population = ((f"E{i}", {SQL} if i % 2 else {GO}) for i in range(6))
        assert engine.match({SQL}, population) == ["E1", "E3", "E5"]

    def test_unknown_required_skill_raises(self, engine: CoverageMatchEngine) -> None:
        with pytest.raises(InvalidInputError, match="not in catalog: 99") as exc:
            engine.match({SQL, 99}, [("E1", {SQL})])
        assert exc.value.kind == ErrorKind.INVALID_INPUT
        assert not exc.value.retryable

    def test_unknown_skill_raises_even_with_empty_population(
        self, engine: CoverageMatchEngine,
    ) -> None:
        with pytest.raises(InvalidInputError):
            engine.match({77}, [])

    def test_unknown_held_skill_is_ignored(self, engine: CoverageMatchEngine) -> None:
        """Only required ids are checked against the catalog."""
        assert engine.match({SQL}, [("E1", {SQL, 500})]) == ["E1"]


class TestMatchProfiles:
    def test_passes_proficiency_through(self, engine: CoverageMatchEngine) -> None:
        profiles = [
            EmployeeSkillProfile.from_levels("E2", {SQL: 2, PYTHON: 5, GO: 1}),
            EmployeeSkillProfile.from_levels("E1", {SQL: 4, PYTHON: 3}),
            EmployeeSkillProfile.from_levels("E3", {SQL: 5}),
        ]
        matches = engine.match_profiles({SQL, PYTHON}, profiles)
        assert [m.employee_id for m in matches] == ["E1", "E2"]
        assert matches[0].proficiencies == {SQL: 4, PYTHON: 3}
        assert matches[1].proficiencies == {SQL: 2, PYTHON: 5}

    def test_proficiency_does_not_affect_order(self, engine: CoverageMatchEngine) -> None:
        profiles = [
            EmployeeSkillProfile.from_levels("E2", {SQL: 5}),
            EmployeeSkillProfile.from_levels("E1", {SQL: 1}),
        ]
        assert [m.employee_id for m in engine.match_profiles({SQL}, profiles)] == ["E1", "E2"]

    def test_agrees_with_match(self, engine: CoverageMatchEngine) -> None:
        profiles = [
            EmployeeSkillProfile.from_levels("E1", {SQL: 1, GO: 2}),
            EmployeeSkillProfile.from_levels("E2", {GO: 3}),
            EmployeeSkillProfile.from_levels("E3", {SQL: 3, GO: 3, RUST: 3}),
        ]
        population = [(p.employee_id, p.held_skill_ids()) for p in profiles]
        assert [m.employee_id for m in engine.match_profiles({SQL, GO}, profiles)] == \
            engine.match({SQL, GO}, population)

    def test_empty_requirement(self, engine: CoverageMatchEngine) -> None:
        profiles = [EmployeeSkillProfile.from_levels("E1", {SQL: 3})]
        assert engine.match_profiles(set(), profiles) == []
