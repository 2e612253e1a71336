"""Data-access contracts consumed by the scan core.

The core never talks to a concrete database. It reads and writes
through these Protocols, which are passed in explicitly. Any backend
(SQLite, a hosted Postgres, an HTTP API) that satisfies them can be
plugged in without touching matching, state machine, or orchestration
logic.

The at-most-one-scan guarantee lives in
RequisitionRepository.update_requisition_status: it must compare the
stored status with expected_status and write the new status and match
list in one atomic step. Returning False (conflict) is how a lost race
reaches the orchestrator.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence, runtime_checkable

from hirescan.models.requisition import Requisition, RequisitionStatus
from hirescan.models.skill import EmployeeSkillProfile


@runtime_checkable
class SkillCatalogReader(Protocol):
    """Read-only view of the known skill ids."""

    def skill_exists(self, skill_id: int) -> bool:
        ...


@runtime_checkable
class SkillProfileSource(Protocol):
    """Read-only view of the workforce's held skills."""

    def list_employee_skill_profiles(self) -> Iterable[EmployeeSkillProfile]:
        """Return a snapshot of every employee's skill profile.

        May be a generator for large populations.
        """
        ...


@runtime_checkable
class RequisitionRepository(Protocol):
    """Requisition storage."""

    def get_requisition(self, requisition_id: int) -> Optional[Requisition]:
        ...

    def create_requisition(
        self,
        manager_id: str,
        role_title: str,
        department: str,
        required_skill_ids: frozenset[int],
        created_utc: datetime,
    ) -> Requisition:
        """Insert a new requisition in PENDING_SCAN and return it with its id."""
        ...

    def update_requisition_status(
        self,
        requisition_id: int,
        expected_status: RequisitionStatus,
        new_status: RequisitionStatus,
        matched_employee_ids: Sequence[str],
        scanned_utc: Optional[datetime] = None,
    ) -> bool:
        """Conditionally write status and match list.

        Returns True if the stored status equalled expected_status and the
        update was applied, False otherwise (nothing is written).
        """
        ...

    def list_requisitions(
        self, status: Optional[RequisitionStatus] = None,
    ) -> list[Requisition]:
        """Return requisitions, optionally filtered by status, newest first."""
        ...
