"""Skill data models: catalog entries, held proficiency, and employee profiles.

These models represent the skill dimension of the workforce:
- What skills exist (Skill, an entry in the skill catalog)
- How proficient an employee is in one skill (SkillHolding)
- An employee's complete skill profile (EmployeeSkillProfile)

Proficiency never decides a match. Coverage is binary (held or not held);
the level is carried so reviewers can see depth of expertise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional


MIN_PROFICIENCY = 1
MAX_PROFICIENCY = 5

PROFICIENCY_LABELS: dict[int, str] = {
    1: "Beginner",
    2: "Novice",
    3: "Intermediate",
    4: "Advanced",
    5: "Expert",
}


def proficiency_label(level: int) -> str:
    """Return the display label for a proficiency level ("Unknown" if out of range)."""
    return PROFICIENCY_LABELS.get(level, "Unknown")


@dataclass(frozen=True)
class Skill:
    """A catalog skill.

    Identity is the integer skill_id. Names are unique across the
    catalog; category is a grouping label used for display ordering.
    """
    skill_id: int
    name: str
    category: str

    def __post_init__(self) -> None:
        if isinstance(self.skill_id, bool) or not isinstance(self.skill_id, int):
            raise ValueError(f"skill_id must be an int, got {self.skill_id!r}")
        if not self.name or not self.name.strip():
            raise ValueError(f"Skill {self.skill_id}: name must be non-empty")
        if not self.category or not self.category.strip():
            raise ValueError(f"Skill {self.skill_id}: category must be non-empty")

    def __str__(self) -> str:
        return f"{self.name} ({self.category})"


@dataclass(frozen=True)
class SkillHolding:
    """An employee's proficiency in a single skill (level 1-5)."""
    skill_id: int
    proficiency_level: int

    def __post_init__(self) -> None:
        if not (MIN_PROFICIENCY <= self.proficiency_level <= MAX_PROFICIENCY):
            raise ValueError(
                f"proficiency_level must be in [{MIN_PROFICIENCY}, {MAX_PROFICIENCY}], "
                f"got {self.proficiency_level}"
            )

    @property
    def label(self) -> str:
        return proficiency_label(self.proficiency_level)


@dataclass
class EmployeeSkillProfile:
    """Snapshot of the skills one employee holds.

    Holdings are keyed by skill id, so a skill recorded twice for the
    same employee counts once (the later level wins).
    """
    employee_id: str
    holdings: dict[int, SkillHolding] = field(default_factory=dict)
    updated_utc: Optional[datetime] = None

    @classmethod
    def from_levels(
        cls,
        employee_id: str,
        levels: dict[int, int],
        updated_utc: Optional[datetime] = None,
    ) -> EmployeeSkillProfile:
        """Build a profile from a {skill_id: proficiency_level} mapping."""
        return cls(
            employee_id=employee_id,
            holdings={
                skill_id: SkillHolding(skill_id, level)
                for skill_id, level in levels.items()
            },
            updated_utc=updated_utc,
        )

    def add(self, skill_id: int, proficiency_level: int) -> None:
        self.holdings[skill_id] = SkillHolding(skill_id, proficiency_level)

    def remove(self, skill_id: int) -> bool:
        """Remove a skill. Returns False if it was not held."""
        return self.holdings.pop(skill_id, None) is not None

    def has_skill(self, skill_id: int) -> bool:
        return skill_id in self.holdings

    def proficiency(self, skill_id: int) -> Optional[int]:
        """Look up the proficiency level for a skill, or None if not held."""
        holding = self.holdings.get(skill_id)
        return holding.proficiency_level if holding else None

    def held_skill_ids(self) -> frozenset[int]:
        return frozenset(self.holdings)

    def covers(self, required: Iterable[int]) -> bool:
        """True if every required skill is held."""
        return frozenset(required) <= self.held_skill_ids()
