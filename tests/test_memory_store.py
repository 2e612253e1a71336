"""Tests for the in-memory requisition repository and profile source."""

from datetime import datetime, timedelta, timezone

from hirescan.models.requisition import Requisition, RequisitionStatus
from hirescan.persistence.memory import (
    InMemoryRequisitionRepository,
    InMemorySkillProfileSource,
)

UTC = timezone.utc


class TestTimestamps:
    def test_naive_and_aware_created_times_sort_together(self) -> None:
        repo = InMemoryRequisitionRepository()
        repo.create_requisition("m-1", "Naive", "", frozenset(), datetime(2026, 3, 2, 12, 0))
        repo.create_requisition(
            "m-1", "Aware", "", frozenset(), datetime(2026, 3, 2, 9, 0, tzinfo=UTC),
        )
        repo.create_requisition(
            "m-1", "Offset", "", frozenset(),
            datetime(2026, 3, 2, 12, 0, tzinfo=timezone(timedelta(hours=5))),
        )
        assert [r.role_title for r in repo.list_requisitions()] == ["Naive", "Aware", "Offset"]

    def test_created_time_stored_as_utc(self) -> None:
        repo = InMemoryRequisitionRepository()
        req = repo.create_requisition("m-1", "Role", "", frozenset(), datetime(2026, 3, 2, 9, 0))
        assert req.created_utc == datetime(2026, 3, 2, 9, 0, tzinfo=UTC)
        assert req.created_utc.tzinfo is not None

    def test_seeded_requisitions_normalised(self) -> None:
        repo = InMemoryRequisitionRepository([
            Requisition(1, "m-1", "Old", "", created_utc=datetime(2026, 1, 1)),
        ])
        repo.create_requisition("m-1", "New", "", frozenset(), datetime(2026, 2, 1, tzinfo=UTC))
        assert [r.role_title for r in repo.list_requisitions()] == ["New", "Old"]

    def test_scanned_time_stored_as_utc(self) -> None:
        repo = InMemoryRequisitionRepository()
        req = repo.create_requisition("m-1", "Role", "", frozenset(), datetime(2026, 3, 2, tzinfo=UTC))
        repo.update_requisition_status(
            req.requisition_id,
            RequisitionStatus.PENDING_SCAN,
            RequisitionStatus.PENDING_FINANCE,
            [],
            scanned_utc=datetime(2026, 3, 2, 10, 0),
        )
        loaded = repo.get_requisition(req.requisition_id)
        assert loaded.scanned_utc == datetime(2026, 3, 2, 10, 0, tzinfo=UTC)


class TestIsolation:
    def test_returned_rows_are_copies(self) -> None:
        repo = InMemoryRequisitionRepository()
        req = repo.create_requisition("m-1", "Role", "", frozenset({1}), datetime(2026, 3, 2, tzinfo=UTC))
        req.status = RequisitionStatus.APPROVED
        assert repo.get_requisition(req.requisition_id).status == RequisitionStatus.PENDING_SCAN

    def test_ids_continue_after_seeded_rows(self) -> None:
        repo = InMemoryRequisitionRepository([Requisition(7, "m-1", "Seeded", "")])
        req = repo.create_requisition("m-1", "Next", "", frozenset(), datetime(2026, 3, 2, tzinfo=UTC))
        assert req.requisition_id == 8

    def test_profiles_are_copies(self) -> None:
        source = InMemorySkillProfileSource.from_levels({"E1": {1: 3}})
        source.list_employee_skill_profiles()[0].add(2, 4)
        assert source.list_employee_skill_profiles()[0].held_skill_ids() == frozenset({1})
