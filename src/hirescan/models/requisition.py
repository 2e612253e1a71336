"""Requisition data models: status, requisition record, and scan result.

Requisition lifecycle as seen by the scan core:
    PENDING_SCAN → PENDING_INTERNAL_REVIEW   (internal candidates found)
    PENDING_SCAN → PENDING_FINANCE           (no candidates, or no skills)

APPROVED, REJECTED and CLOSED are reached through human review outside
the core. The core never produces them and never moves a requisition
out of them.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Return value as an aware UTC datetime. Naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class RequisitionStatus(str, enum.Enum):
    """Requisition lifecycle status."""
    PENDING_SCAN = "PENDING_SCAN"
    PENDING_INTERNAL_REVIEW = "PENDING_INTERNAL_REVIEW"
    PENDING_FINANCE = "PENDING_FINANCE"
    # Downstream human workflow
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CLOSED = "CLOSED"


@dataclass
class Requisition:
    """A request to fill a role.

    required_skill_ids is frozen at creation and never edited by the
    core. matched_employee_ids holds the match result recorded by the
    single committed scan (empty until then, and empty for the
    finance path).
    """
    requisition_id: int
    manager_id: str
    role_title: str
    department: str
    required_skill_ids: frozenset[int] = field(default_factory=frozenset)
    status: RequisitionStatus = RequisitionStatus.PENDING_SCAN
    created_utc: Optional[datetime] = None
    matched_employee_ids: list[str] = field(default_factory=list)
    scanned_utc: Optional[datetime] = None

    def __post_init__(self) -> None:
        # Normalise list/set input so requirement checks use set semantics
        if not isinstance(self.required_skill_ids, frozenset):
            self.required_skill_ids = frozenset(self.required_skill_ids)
        self.created_utc = as_utc(self.created_utc)
        self.scanned_utc = as_utc(self.scanned_utc)

    @property
    def is_pending_scan(self) -> bool:
        return self.status == RequisitionStatus.PENDING_SCAN

    def to_dict(self) -> dict[str, Any]:
        return {
            "requisition_id": self.requisition_id,
            "manager_id": self.manager_id,
            "role_title": self.role_title,
            "department": self.department,
            "required_skill_ids": sorted(self.required_skill_ids),
            "status": self.status.value,
            "created_utc": self.created_utc.isoformat() if self.created_utc else None,
            "matched_employee_ids": list(self.matched_employee_ids),
            "scanned_utc": self.scanned_utc.isoformat() if self.scanned_utc else None,
        }


@dataclass(frozen=True)
class CandidateMatch:
    """An employee who covers every required skill.

    proficiencies maps each required skill id to the employee's level,
    for reviewers. It plays no part in the match decision.
    """
    employee_id: str
    proficiencies: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ScanResult:
    """Outcome of one committed requisition scan."""
    requisition_id: int
    new_status: RequisitionStatus
    matched_employee_ids: tuple[str, ...] = ()
    candidates: tuple[CandidateMatch, ...] = ()
    message: str = ""

    @property
    def has_internal_candidates(self) -> bool:
        return bool(self.matched_employee_ids)

    def to_payload(self) -> dict[str, Any]:
        """Render the success payload returned to trigger callers."""
        return {
            "requisition_id": self.requisition_id,
            "status": self.new_status.value,
            "matching_employees": list(self.matched_employee_ids),
            "message": self.message,
        }
