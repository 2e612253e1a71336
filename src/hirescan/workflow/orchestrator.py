"""Requisition orchestrator: runs one scan for a newly created requisition.

The orchestrator is a thin coordination layer. It loads the requisition,
asks the coverage match engine which employees hold every required
skill, resolves the next status through the state machine, and commits
status and match list in one conditional update. It holds no state of
its own between calls; all dependencies are passed in.

Guarantees:
- Nothing is persisted before the final conditional update, so a scan
  that fails earlier leaves the requisition in PENDING_SCAN and can be
  retried.
- At most one scan per requisition commits. The repository's
  compare-and-set decides races; the loser raises TransitionError and
  writes nothing.
- No error is swallowed. Every ScanError reaches the caller.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypeVar

from hirescan.engine.state_machine import RequisitionStateMachine
from hirescan.errors import (
    DependencyFailure,
    RequisitionNotFound,
    ScanError,
    TransitionError,
)
from hirescan.models.requisition import (
    Requisition,
    RequisitionStatus,
    ScanResult,
)
from hirescan.models.skill import EmployeeSkillProfile
from hirescan.persistence.event_log import EventKind, EventLog, EventRecord
from hirescan.persistence.interfaces import (
    RequisitionRepository,
    SkillCatalogReader,
    SkillProfileSource,
)
from hirescan.skills.matching import CoverageMatchEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")

MSG_CANDIDATES_FOUND = "Internal candidates found"
MSG_NO_CANDIDATES = "No internal candidates found, moved to PENDING_FINANCE"
MSG_NO_SKILLS = "No skills required, moved to PENDING_FINANCE"

SYSTEM_ACTOR = "system:scanner"


class RequisitionOrchestrator:
    """Coordinates one requisition scan across the data layer and the pure engines.

    Safe to call concurrently, for the same or different requisitions.

    Usage:
        orch = RequisitionOrchestrator(store, store, catalog, event_log=log)
        result = orch.process_requisition(42)
        result.new_status   # PENDING_INTERNAL_REVIEW or PENDING_FINANCE
    """

    def __init__(
        self,
        requisitions: RequisitionRepository,
        profiles: SkillProfileSource,
        catalog: SkillCatalogReader,
        event_log: Optional[EventLog] = None,
    ) -> None:
        self._requisitions = requisitions
        self._profiles = profiles
        self._engine = CoverageMatchEngine(catalog)
        self._event_log = event_log

    def process_requisition(
        self,
        requisition_id: int,
        now: Optional[datetime] = None,
    ) -> ScanResult:
        """Scan a PENDING_SCAN requisition and commit the outcome.

        Raises:
            RequisitionNotFound: No requisition with this id.
            TransitionError: Not in PENDING_SCAN, or a concurrent scan
                committed first.
            InvalidInputError: A required skill is not in the catalog.
            DependencyFailure: The data layer failed; safe to retry.
        """
        if now is None:
            now = datetime.now(timezone.utc)
        try:
            result = self._scan(requisition_id, now)
        except ScanError as e:
            logger.warning(
                "Scan of requisition %s failed (%s): %s",
                requisition_id, e.kind.value, e.message,
            )
            self._record_failure(requisition_id, e)
            raise

        logger.info(
            "Requisition %s scanned: %s (%d candidates)",
            requisition_id, result.new_status.value, len(result.matched_employee_ids),
        )
        self._record_scanned(result)
        return result

    def _scan(self, requisition_id: int, now: datetime) -> ScanResult:
        requisition = self._call_data_layer(
            lambda: self._requisitions.get_requisition(requisition_id),
        )
        if requisition is None:
            raise RequisitionNotFound(f"Requisition not found: {requisition_id}")

        # Idempotency guard: a scanned requisition is never re-processed
        if not requisition.is_pending_scan:
            raise TransitionError(
                f"Requisition {requisition_id} already advanced to "
                f"{requisition.status.value}; refusing to scan again"
            )

        required = requisition.required_skill_ids
        profiles: list[EmployeeSkillProfile] = []
        if required:
            profiles = self._call_data_layer(
                lambda: list(self._profiles.list_employee_skill_profiles()),
            )
        logger.debug(
            "Requisition %s requires %s; population of %d",
            requisition_id, sorted(required), len(profiles),
        )

        candidates = self._engine.match_profiles(required, profiles)
        matched_ids = tuple(c.employee_id for c in candidates)
        new_status = RequisitionStateMachine.next_status(
            requisition.status, len(matched_ids),
        )

        committed = self._call_data_layer(
            lambda: self._requisitions.update_requisition_status(
                requisition_id,
                expected_status=RequisitionStatus.PENDING_SCAN,
                new_status=new_status,
                matched_employee_ids=list(matched_ids),
                scanned_utc=now,
            ),
        )
        if not committed:
            raise TransitionError(
                f"Requisition {requisition_id} left "
                f"{RequisitionStatus.PENDING_SCAN.value} during the scan; "
                f"another scan committed first"
            )

        return ScanResult(
            requisition_id=requisition_id,
            new_status=new_status,
            matched_employee_ids=matched_ids,
            candidates=tuple(candidates),
            message=_outcome_message(requisition, matched_ids),
        )

    @staticmethod
    def _call_data_layer(call: Callable[[], T]) -> T:
        """Run a data-layer call, reporting I/O failures as DependencyFailure."""
        try:
            return call()
        except ScanError:
            raise
        except OSError as e:
            raise DependencyFailure(f"Data layer unavailable: {e}") from e

    # ------------------------------------------------------------------
    # Audit trail
    # ------------------------------------------------------------------

    def _record_scanned(self, result: ScanResult) -> None:
        self._append(EventKind.REQUISITION_SCANNED, {
            "requisition_id": result.requisition_id,
            "status": result.new_status.value,
            "matched_employee_ids": list(result.matched_employee_ids),
        })

    def _record_failure(self, requisition_id: int, error: ScanError) -> None:
        kind = (
            EventKind.SCAN_FAILED if error.retryable else EventKind.SCAN_REJECTED
        )
        self._append(kind, {
            "requisition_id": requisition_id,
            "error": error.kind.value,
            "message": error.message,
        })

    def _append(self, kind: EventKind, payload: dict[str, Any]) -> None:
        """Append an audit event. The scan outcome stands even if this fails."""
        if self._event_log is None:
            return
        try:
            self._event_log.append(EventRecord.create(kind, SYSTEM_ACTOR, payload))
        except (ValueError, OSError) as e:
            logger.warning("Audit event %s not recorded: %s", kind.value, e)


def _outcome_message(requisition: Requisition, matched_ids: tuple[str, ...]) -> str:
    if not requisition.required_skill_ids:
        return MSG_NO_SKILLS
    if matched_ids:
        return MSG_CANDIDATES_FOUND
    return MSG_NO_CANDIDATES
