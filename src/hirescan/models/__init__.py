"""Core data models for HireScan."""

from hirescan.models.requisition import (
    CandidateMatch,
    Requisition,
    RequisitionStatus,
    ScanResult,
)
from hirescan.models.skill import (
    EmployeeSkillProfile,
    Skill,
    SkillHolding,
    proficiency_label,
)

__all__ = [
    "CandidateMatch",
    "EmployeeSkillProfile",
    "Requisition",
    "RequisitionStatus",
    "ScanResult",
    "Skill",
    "SkillHolding",
    "proficiency_label",
]
