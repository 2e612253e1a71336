"""Coverage match engine: finds employees who hold every required skill.

Pure computation. No side effects.

An employee qualifies iff required ⊆ held. Eligibility is binary: the
engine does not rank by proficiency or by how many extra skills an
employee holds. Qualifying employees are returned in ascending
employee-id order so repeated scans over the same snapshot agree.

An empty requirement matches nobody. Requisitions without skills are
routed straight to the finance path rather than offered to the whole
workforce.
"""

from __future__ import annotations

from typing import Iterable

from hirescan.errors import InvalidInputError
from hirescan.models.requisition import CandidateMatch
from hirescan.models.skill import EmployeeSkillProfile
from hirescan.persistence.interfaces import SkillCatalogReader


PopulationEntry = tuple[str, Iterable[int]]


class CoverageMatchEngine:
    """Computes the set of employees covering a requisition's required skills.

    Usage:
        engine = CoverageMatchEngine(catalog)
        employee_ids = engine.match({1, 2}, [("e-1", {1, 2, 3}), ("e-2", {1})])
        # ["e-1"]
    """

    def __init__(self, catalog: SkillCatalogReader) -> None:
        self._catalog = catalog

    def match(
        self,
        required_skill_ids: Iterable[int],
        population: Iterable[PopulationEntry],
    ) -> list[str]:
        """Return ids of employees whose held skills cover the requirement.

        Args:
            required_skill_ids: Skill ids the requisition requires. May be
                empty, in which case no employee qualifies.
            population: (employee_id, held_skill_ids) pairs. Several
                entries for the same employee are merged.

        Returns:
            Qualifying employee ids, ascending.

        Raises:
            InvalidInputError: If a required id is not in the catalog.
        """
        required = self._validated(required_skill_ids)
        held_by_employee = self._merge_population(population)
        if not required:
            return []
        return sorted(
            employee_id
            for employee_id, held in held_by_employee.items()
            if required <= held
        )

    def match_profiles(
        self,
        required_skill_ids: Iterable[int],
        profiles: Iterable[EmployeeSkillProfile],
    ) -> list[CandidateMatch]:
        """Like match(), but over full profiles, keeping proficiency detail.

        Each CandidateMatch carries the employee's level for every
        required skill. Order and eligibility are identical to match().
        """
        required = self._validated(required_skill_ids)
        merged: dict[str, dict[int, int]] = {}
        for profile in profiles:
            levels = merged.setdefault(profile.employee_id, {})
            for skill_id, holding in profile.holdings.items():
                levels[skill_id] = holding.proficiency_level

        population = [(eid, levels.keys()) for eid, levels in merged.items()]
        matched = self.match(required, population)
        return [
            CandidateMatch(
                employee_id=eid,
                proficiencies={sid: merged[eid][sid] for sid in sorted(required)},
            )
            for eid in matched
        ]

    def _validated(self, required_skill_ids: Iterable[int]) -> frozenset[int]:
        required = frozenset(required_skill_ids)
        unknown = sorted(
            sid for sid in required if not self._catalog.skill_exists(sid)
        )
        if unknown:
            raise InvalidInputError(
                "Required skills not in catalog: "
                + ", ".join(repr(sid) for sid in unknown)
            )
        return required

    @staticmethod
    def _merge_population(
        population: Iterable[PopulationEntry],
    ) -> dict[str, frozenset[int]]:
        merged: dict[str, set[int]] = {}
        for employee_id, held in population:
            merged.setdefault(employee_id, set()).update(held)
        return {eid: frozenset(held) for eid, held in merged.items()}
