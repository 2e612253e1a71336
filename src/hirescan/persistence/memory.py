"""In-memory implementations of the data-access contracts.

Used by tests and by embedders that keep the workforce in process.
The requisition repository serialises every read-compare-write behind
one lock, so concurrent scans of the same requisition in one process
see exactly one successful status update.
"""

from __future__ import annotations

import copy
import threading
from datetime import datetime
from typing import Iterable, Optional, Sequence

from hirescan.models.requisition import Requisition, RequisitionStatus, as_utc
from hirescan.models.skill import EmployeeSkillProfile


class InMemoryRequisitionRepository:
    """Requisition store backed by a dict.

    Returned requisitions are copies; callers cannot mutate stored rows
    except through update_requisition_status.
    """

    def __init__(self, requisitions: Optional[Iterable[Requisition]] = None) -> None:
        self._lock = threading.Lock()
        self._rows: dict[int, Requisition] = {}
        self._next_id = 1
        for req in requisitions or ():
            self._rows[req.requisition_id] = copy.deepcopy(req)
            self._next_id = max(self._next_id, req.requisition_id + 1)

    def get_requisition(self, requisition_id: int) -> Optional[Requisition]:
        with self._lock:
            row = self._rows.get(requisition_id)
            return copy.deepcopy(row) if row is not None else None

    def create_requisition(
        self,
        manager_id: str,
        role_title: str,
        department: str,
        required_skill_ids: frozenset[int],
        created_utc: datetime,
    ) -> Requisition:
        with self._lock:
            req = Requisition(
                requisition_id=self._next_id,
                manager_id=manager_id,
                role_title=role_title,
                department=department,
                required_skill_ids=frozenset(required_skill_ids),
                status=RequisitionStatus.PENDING_SCAN,
                created_utc=created_utc,
            )
            self._rows[req.requisition_id] = req
            self._next_id += 1
            return copy.deepcopy(req)

    def update_requisition_status(
        self,
        requisition_id: int,
        expected_status: RequisitionStatus,
        new_status: RequisitionStatus,
        matched_employee_ids: Sequence[str],
        scanned_utc: Optional[datetime] = None,
    ) -> bool:
        with self._lock:
            row = self._rows.get(requisition_id)
            if row is None or row.status != expected_status:
                return False
            row.status = new_status
            row.matched_employee_ids = list(matched_employee_ids)
            row.scanned_utc = as_utc(scanned_utc)
            return True

    def list_requisitions(
        self, status: Optional[RequisitionStatus] = None,
    ) -> list[Requisition]:
        with self._lock:
            rows = [
                copy.deepcopy(r) for r in self._rows.values()
                if status is None or r.status == status
            ]
        rows.sort(
            key=lambda r: (r.created_utc is not None, r.created_utc, r.requisition_id),
            reverse=True,
        )
        return rows


class InMemorySkillProfileSource:
    """Workforce skill profiles held in a dict keyed by employee id."""

    def __init__(self, profiles: Optional[Iterable[EmployeeSkillProfile]] = None) -> None:
        self._profiles: dict[str, EmployeeSkillProfile] = {}
        for profile in profiles or ():
            self._profiles[profile.employee_id] = profile

    @classmethod
    def from_levels(cls, levels: dict[str, dict[int, int]]) -> InMemorySkillProfileSource:
        """Build from {employee_id: {skill_id: proficiency_level}}."""
        return cls(
            EmployeeSkillProfile.from_levels(employee_id, skills)
            for employee_id, skills in levels.items()
        )

    def put(self, profile: EmployeeSkillProfile) -> None:
        self._profiles[profile.employee_id] = profile

    def list_employee_skill_profiles(self) -> list[EmployeeSkillProfile]:
        return [copy.deepcopy(p) for p in self._profiles.values()]
