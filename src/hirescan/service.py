"""HireScan service: unified facade over requisitions and scanning.

This is the primary interface for programmatic access. It wires:
- Requisition creation (validated against the skill catalog), optionally
  followed by an immediate scan (submit)
- The scan trigger (one orchestrator run per requisition)
- Requisition queries (single record, internal mobility board, summary)
- Audit trail (event log)

All operations return a typed ServiceResult. Errors raised by the scan
core are converted to failed results carrying the error kind and
whether the caller may retry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from hirescan.errors import ScanError
from hirescan.models.requisition import Requisition, RequisitionStatus
from hirescan.persistence.event_log import EventKind, EventLog, EventRecord
from hirescan.persistence.interfaces import (
    RequisitionRepository,
    SkillProfileSource,
)
from hirescan.skills.catalog import SkillCatalog
from hirescan.workflow.orchestrator import RequisitionOrchestrator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceResult:
    """Result of a service operation."""
    success: bool
    errors: list[str] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(cls, error: ScanError) -> ServiceResult:
        return cls(
            success=False,
            errors=[error.message],
            data={"error_kind": error.kind.value, "retryable": error.retryable},
        )


class HiringService:
    """Requisition and scan facade.

    Usage:
        catalog = SkillCatalog.from_config_dir(config_dir)
        store = SqliteWorkforceStore(db_path)
        service = HiringService(catalog, store, store, event_log=EventLog(path))

        result = service.create_requisition("m-1", "Data Engineer", "Data", [1, 2])
        result = service.scan_requisition(result.data["requisition_id"])
        result.data["status"]   # PENDING_INTERNAL_REVIEW or PENDING_FINANCE
    """

    def __init__(
        self,
        catalog: SkillCatalog,
        requisitions: RequisitionRepository,
        profiles: SkillProfileSource,
        event_log: Optional[EventLog] = None,
    ) -> None:
        self._catalog = catalog
        self._requisitions = requisitions
        self._event_log = event_log
        self._orchestrator = RequisitionOrchestrator(
            requisitions, profiles, catalog, event_log=event_log,
        )

    # ------------------------------------------------------------------
    # Requisitions
    # ------------------------------------------------------------------

    def create_requisition(
        self,
        manager_id: str,
        role_title: str,
        department: str,
        required_skill_ids: Iterable[int],
        now: Optional[datetime] = None,
    ) -> ServiceResult:
        """Create a requisition in PENDING_SCAN.

        Duplicate skill ids collapse to one. Unknown skill ids are
        rejected before anything is stored.
        """
        required = frozenset(required_skill_ids)
        errors: list[str] = []
        if not manager_id or not manager_id.strip():
            errors.append("manager_id is required")
        if not role_title or not role_title.strip():
            errors.append("Role title is required")
        errors.extend(self._catalog.validate_skill_ids(required))
        if errors:
            return ServiceResult(success=False, errors=errors)

        if now is None:
            now = datetime.now(timezone.utc)
        try:
            req = self._requisitions.create_requisition(
                manager_id=manager_id,
                role_title=role_title.strip(),
                department=department.strip(),
                required_skill_ids=required,
                created_utc=now,
            )
        except ScanError as e:
            return ServiceResult.from_error(e)

        self._record_event(EventKind.REQUISITION_CREATED, manager_id, {
            "requisition_id": req.requisition_id,
            "role_title": req.role_title,
            "required_skill_ids": sorted(req.required_skill_ids),
        })
        return ServiceResult(
            success=True,
            data={
                "requisition_id": req.requisition_id,
                "status": req.status.value,
            },
        )

    def scan_requisition(self, requisition_id: int) -> ServiceResult:
        """Trigger interface: scan a requisition for internal candidates.

        Safe to call more than once; only the first call commits and
        later calls fail with error_kind InvalidTransition.
        """
        try:
            result = self._orchestrator.process_requisition(requisition_id)
        except ScanError as e:
            return ServiceResult.from_error(e)

        data = result.to_payload()
        data["candidates"] = [
            {
                "employee_id": c.employee_id,
                "proficiencies": {str(k): v for k, v in c.proficiencies.items()},
            }
            for c in result.candidates
        ]
        return ServiceResult(success=True, data=data)

    def submit_requisition(
        self,
        manager_id: str,
        role_title: str,
        department: str,
        required_skill_ids: Iterable[int],
        now: Optional[datetime] = None,
    ) -> ServiceResult:
        """Create a requisition and scan it straight away.

        If the scan fails the requisition still exists in PENDING_SCAN.
        The failed result carries its requisition_id so the caller can
        retry with scan_requisition.
        """
        created = self.create_requisition(
            manager_id, role_title, department, required_skill_ids, now=now,
        )
        if not created.success:
            return created

        requisition_id = created.data["requisition_id"]
        scanned = self.scan_requisition(requisition_id)
        if not scanned.success:
            return ServiceResult(
                success=False,
                errors=[
                    f"Requisition {requisition_id} created but failed to start "
                    f"scanning: {'; '.join(scanned.errors)}"
                ],
                data={**scanned.data, "requisition_id": requisition_id},
            )
        return scanned

    def get_requisition(self, requisition_id: int) -> Optional[Requisition]:
        return self._requisitions.get_requisition(requisition_id)

    def list_open_roles(self) -> list[Requisition]:
        """Requisitions open to internal applicants, newest first."""
        return self._requisitions.list_requisitions(
            RequisitionStatus.PENDING_INTERNAL_REVIEW,
        )

    def status(self) -> dict[str, Any]:
        counts: dict[str, int] = {s.value: 0 for s in RequisitionStatus}
        for req in self._requisitions.list_requisitions():
            counts[req.status.value] += 1
        return {
            "catalog_version": self._catalog.version,
            "skills": self._catalog.skill_count(),
            "requisitions": counts,
            "events": self._event_log.count if self._event_log is not None else 0,
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _record_event(
        self, kind: EventKind, actor_id: str, payload: dict[str, Any],
    ) -> None:
        if self._event_log is None:
            return
        try:
            self._event_log.append(EventRecord.create(kind, actor_id, payload))
        except (ValueError, OSError) as e:
            logger.warning("Audit event %s not recorded: %s", kind.value, e)
