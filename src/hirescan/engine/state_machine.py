"""Requisition state machine: the scan gateway.

Requisition lifecycle (core-relevant part):
    PENDING_SCAN → PENDING_INTERNAL_REVIEW   (match_count > 0)
    PENDING_SCAN → PENDING_FINANCE           (match_count == 0)

Fail-closed: the gateway is defined only for PENDING_SCAN. A
requisition that has already been scanned, or that sits in a
downstream human-review status, is rejected rather than re-processed.
This is a two-outcome gateway, not a general workflow engine.
"""

from __future__ import annotations

from hirescan.errors import InvalidInputError, TransitionError
from hirescan.models.requisition import RequisitionStatus


# Transitions the core may perform: {from_state: {allowed_to_states}}
_TRANSITIONS: dict[RequisitionStatus, set[RequisitionStatus]] = {
    RequisitionStatus.PENDING_SCAN: {
        RequisitionStatus.PENDING_INTERNAL_REVIEW,
        RequisitionStatus.PENDING_FINANCE,
    },
}

_SCAN_OUTCOMES = frozenset(_TRANSITIONS[RequisitionStatus.PENDING_SCAN])


class RequisitionStateMachine:
    """Resolves the next requisition status from a scan's match count.

    Pure computation: resolves transitions only. Persistence and the
    compare-and-set guard are handled by the orchestrator and the
    repository.
    """

    @staticmethod
    def next_status(
        current: RequisitionStatus, match_count: int,
    ) -> RequisitionStatus:
        """Return the status a scan moves the requisition to.

        Raises:
            TransitionError: If current is not PENDING_SCAN.
            InvalidInputError: If match_count is negative.
        """
        if current != RequisitionStatus.PENDING_SCAN:
            raise TransitionError(
                f"Invalid requisition transition: {current.value} cannot be scanned. "
                f"Only {RequisitionStatus.PENDING_SCAN.value} requisitions are scanned"
            )
        if match_count < 0:
            raise InvalidInputError(f"match_count must be >= 0, got {match_count}")
        if match_count > 0:
            return RequisitionStatus.PENDING_INTERNAL_REVIEW
        return RequisitionStatus.PENDING_FINANCE

    @staticmethod
    def is_scan_outcome(state: RequisitionStatus) -> bool:
        """Check if a state is one the scan can produce."""
        return state in _SCAN_OUTCOMES

    @staticmethod
    def valid_transitions(state: RequisitionStatus) -> set[RequisitionStatus]:
        """Return the set of states the core may move a requisition to from state."""
        return set(_TRANSITIONS.get(state, set()))
