"""Tests for the requisition state machine: scan gateway transitions."""

import pytest

from hirescan.engine.state_machine import RequisitionStateMachine
from hirescan.errors import ErrorKind, InvalidInputError, TransitionError
from hirescan.models.requisition import RequisitionStatus


class TestScanGateway:
    def test_no_matches_goes_to_finance(self) -> None:
        assert RequisitionStateMachine.next_status(
            RequisitionStatus.PENDING_SCAN, 0,
        ) == RequisitionStatus.PENDING_FINANCE

    @pytest.mark.parametrize("count", [1, 2, 500])
    def test_matches_go_to_internal_review(self, count: int) -> None:
        assert RequisitionStateMachine.next_status(
            RequisitionStatus.PENDING_SCAN, count,
        ) == RequisitionStatus.PENDING_INTERNAL_REVIEW

    def test_negative_count_raises(self) -> None:
        with pytest.raises(InvalidInputError, match="match_count must be >= 0"):
            RequisitionStateMachine.next_status(RequisitionStatus.PENDING_SCAN, -1)


class TestInvalidTransitions:
    def test_every_other_status_rejected(self) -> None:
        """Only PENDING_SCAN requisitions can be scanned."""
        for status in RequisitionStatus:
            if status == RequisitionStatus.PENDING_SCAN:
                continue
            for count in (0, 3):
                with pytest.raises(TransitionError) as exc:
                    RequisitionStateMachine.next_status(status, count)
                assert exc.value.kind == ErrorKind.INVALID_TRANSITION
                assert status.value in str(exc.value)

    def test_transition_error_not_retryable(self) -> None:
        with pytest.raises(TransitionError) as exc:
            RequisitionStateMachine.next_status(RequisitionStatus.PENDING_FINANCE, 0)
        assert exc.value.retryable is False


class TestHelpers:
    def test_valid_transitions_from_pending_scan(self) -> None:
        assert RequisitionStateMachine.valid_transitions(
            RequisitionStatus.PENDING_SCAN,
        ) == {
            RequisitionStatus.PENDING_INTERNAL_REVIEW,
            RequisitionStatus.PENDING_FINANCE,
        }

    def test_no_core_transitions_elsewhere(self) -> None:
        for status in RequisitionStatus:
            if status != RequisitionStatus.PENDING_SCAN:
                assert RequisitionStateMachine.valid_transitions(status) == set()

    def test_is_scan_outcome(self) -> None:
        assert RequisitionStateMachine.is_scan_outcome(RequisitionStatus.PENDING_FINANCE)
        assert RequisitionStateMachine.is_scan_outcome(
            RequisitionStatus.PENDING_INTERNAL_REVIEW,
        )
        assert not RequisitionStateMachine.is_scan_outcome(RequisitionStatus.APPROVED)
        assert not RequisitionStateMachine.is_scan_outcome(RequisitionStatus.PENDING_SCAN)
