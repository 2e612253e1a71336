"""Skill catalog: loads, validates, and queries the reference set of skills.

The catalog is a flat list of skills, each with an integer id, a unique
name and a category. The scan core only reads it; skills are added and
retired by administrators outside the core.

Usage:
    catalog = SkillCatalog.from_config_dir(Path("config"))
    assert catalog.skill_exists(1)
    skills = catalog.all_skills()          # ordered by category, then name
    errors = catalog.validate_skill_ids({1, 2, 99})
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Optional

from hirescan.models.skill import Skill


class SkillCatalog:
    """Loads and validates the skill catalog from config.

    Every required-skill reference on a requisition must resolve
    against this catalog.
    """

    CATALOG_FILENAME = "skill_catalog.json"

    def __init__(self, catalog_data: dict[str, Any]) -> None:
        self._data = catalog_data
        self._skills: dict[int, Skill] = {}
        self._validate()

    @classmethod
    def from_config_dir(cls, config_dir: Path) -> SkillCatalog:
        """Load the catalog from the canonical config directory.

        Raises:
            FileNotFoundError: If skill_catalog.json does not exist.
            ValueError: If the catalog is structurally invalid.
        """
        path = config_dir / cls.CATALOG_FILENAME
        if not path.exists():
            raise FileNotFoundError(f"Skill catalog not found: {path}")
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return cls(data)

    @classmethod
    def from_skills(cls, skills: Iterable[Skill], version: str = "runtime") -> SkillCatalog:
        """Build a catalog from Skill objects (e.g. rows read from a database)."""
        return cls({
            "version": version,
            "skills": [
                {"id": s.skill_id, "name": s.name, "category": s.category}
                for s in skills
            ],
        })

    def _validate(self) -> None:
        """Validate catalog structure and populate the id index.

        Raises:
            ValueError: If the catalog is structurally invalid.
        """
        if "version" not in self._data:
            raise ValueError("Skill catalog missing 'version' field")
        if "skills" not in self._data:
            raise ValueError("Skill catalog missing 'skills' field")
        entries = self._data["skills"]
        if not isinstance(entries, list):
            raise ValueError("Skill catalog 'skills' must be a list")

        seen_names: set[str] = set()
        for entry in entries:
            if not isinstance(entry, dict):
                raise ValueError(
                    f"Skill entry must be a dict, got {type(entry).__name__}"
                )
            for key in ("id", "name", "category"):
                if key not in entry:
                    raise ValueError(f"Skill entry missing '{key}': {entry!r}")
            skill = Skill(
                skill_id=entry["id"],
                name=entry["name"],
                category=entry["category"],
            )
            if skill.skill_id in self._skills:
                raise ValueError(f"Duplicate skill id: {skill.skill_id}")
            folded = skill.name.strip().casefold()
            if folded in seen_names:
                raise ValueError(f"Duplicate skill name: '{skill.name}'")
            seen_names.add(folded)
            self._skills[skill.skill_id] = skill

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def skill_exists(self, skill_id: int) -> bool:
        return skill_id in self._skills

    def get(self, skill_id: int) -> Optional[Skill]:
        return self._skills.get(skill_id)

    def find_by_name(self, name: str) -> Optional[Skill]:
        """Case-insensitive lookup by display name."""
        folded = name.strip().casefold()
        for skill in self._skills.values():
            if skill.name.casefold() == folded:
                return skill
        return None

    def all_skills(self) -> list[Skill]:
        """Return all skills ordered by category, then name."""
        return sorted(self._skills.values(), key=lambda s: (s.category, s.name))

    def categories(self) -> list[str]:
        """Return distinct categories, sorted alphabetically."""
        return sorted({s.category for s in self._skills.values()})

    def skills_in_category(self, category: str) -> list[Skill]:
        return sorted(
            (s for s in self._skills.values() if s.category == category),
            key=lambda s: s.name,
        )

    def skill_count(self) -> int:
        return len(self._skills)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_skill_ids(self, skill_ids: Iterable[int]) -> list[str]:
        """Validate skill ids against the catalog.

        Returns:
            Empty list if all known, one error string per unknown id
            (in ascending id order) otherwise.
        """
        unknown = sorted({sid for sid in skill_ids if not self.skill_exists(sid)})
        return [f"Unknown skill id: {sid}" for sid in unknown]

    @property
    def version(self) -> str:
        return str(self._data.get("version", "unknown"))
