"""Skills subsystem: catalog and coverage matching."""

from hirescan.skills.catalog import SkillCatalog
from hirescan.skills.matching import CoverageMatchEngine

__all__ = [
    "CoverageMatchEngine",
    "SkillCatalog",
]
