"""SQLite workforce store: skills, employee skills, and requisitions.

Implements SkillCatalogReader, SkillProfileSource and
RequisitionRepository over one SQLite database file through SQLAlchemy.

Every call runs in its own session and transaction, so the store can be
shared by threads and by independent processes pointing at the same
file. The scan commit is a single conditional UPDATE (... WHERE id = ?
AND status = ?); SQLite applies it atomically, so when two scans race
only one sees a changed row.

Driver errors are reported as DependencyFailure (retryable). A write
that references an unknown skill is reported as InvalidInputError.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from itertools import groupby
from pathlib import Path
from typing import Iterator, Optional, Sequence

from sqlalchemy import create_engine, delete, event, select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from hirescan.errors import DependencyFailure, InvalidInputError
from hirescan.models.requisition import Requisition, RequisitionStatus, as_utc
from hirescan.models.skill import EmployeeSkillProfile, Skill, SkillHolding
from hirescan.persistence.tables import (
    Base,
    EmployeeSkillRow,
    RequisitionRow,
    SkillRow,
)
from hirescan.skills.catalog import SkillCatalog

logger = logging.getLogger(__name__)


def _format_ts(value: Optional[datetime]) -> Optional[str]:
    value = as_utc(value)
    return value.isoformat() if value is not None else None


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _row_to_requisition(row: RequisitionRow) -> Requisition:
    return Requisition(
        requisition_id=row.id,
        manager_id=row.manager_id,
        role_title=row.role_title,
        department=row.department,
        required_skill_ids=frozenset(row.required_skill_ids or ()),
        status=RequisitionStatus(row.status),
        created_utc=_parse_ts(row.created_utc),
        matched_employee_ids=list(row.matched_employee_ids or ()),
        scanned_utc=_parse_ts(row.scanned_utc),
    )


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


class SqliteWorkforceStore:
    """Durable workforce and requisition storage.

    Usage:
        store = SqliteWorkforceStore(Path("data/hirescan.db"))
        store.seed_catalog(SkillCatalog.from_config_dir(Path("config")))
        store.set_employee_skill("e-1", skill_id=1, proficiency_level=4)
        req = store.create_requisition("m-1", "Data Engineer", "Data", frozenset({1}), now)
    """

    def __init__(self, path: Path, timeout_seconds: float = 5.0) -> None:
        self._path = path
        self._engine = create_engine(
            f"sqlite:///{path}",
            connect_args={"timeout": timeout_seconds},
        )
        event.listen(self._engine, "connect", _enable_foreign_keys)
        self._sessions = sessionmaker(bind=self._engine, expire_on_commit=False)
        with self._translate_errors():
            Base.metadata.create_all(self._engine)

    @property
    def path(self) -> Path:
        return self._path

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def _translate_errors(self) -> Iterator[None]:
        try:
            yield
        except IntegrityError as e:
            raise InvalidInputError(f"Rejected by data layer: {e.orig}") from e
        except (SQLAlchemyError, sqlite3.Error) as e:
            logger.error("SQLite failure on %s: %s", self._path, e)
            raise DependencyFailure(f"Data layer failure: {e}") from e

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """One transaction: commit on success, roll back on error."""
        with self._translate_errors(), self._sessions.begin() as session:
            yield session

    # ------------------------------------------------------------------
    # Skill catalog
    # ------------------------------------------------------------------

    def seed_catalog(self, catalog: SkillCatalog) -> int:
        """Insert catalog skills that are not stored yet. Returns rows inserted."""
        rows = [
            {"id": s.skill_id, "name": s.name, "category": s.category}
            for s in catalog.all_skills()
        ]
        if not rows:
            return 0
        with self._session() as session:
            result = session.execute(
                sqlite_insert(SkillRow.__table__).values(rows).on_conflict_do_nothing(),
            )
            return result.rowcount

    def add_skill(self, skill: Skill) -> None:
        with self._session() as session:
            session.add(SkillRow(id=skill.skill_id, name=skill.name, category=skill.category))

    def skill_exists(self, skill_id: int) -> bool:
        with self._session() as session:
            return session.get(SkillRow, skill_id) is not None

    def list_skills(self) -> list[Skill]:
        """Return all skills ordered by category, then name."""
        with self._session() as session:
            rows = session.scalars(
                select(SkillRow).order_by(SkillRow.category, SkillRow.name),
            ).all()
            return [Skill(r.id, r.name, r.category) for r in rows]

    def load_catalog(self) -> SkillCatalog:
        return SkillCatalog.from_skills(self.list_skills(), version="sqlite")

    # ------------------------------------------------------------------
    # Employee skills
    # ------------------------------------------------------------------

    def set_employee_skill(
        self, employee_id: str, skill_id: int, proficiency_level: int,
    ) -> None:
        """Add or update one held skill."""
        holding = SkillHolding(skill_id, proficiency_level)
        stmt = sqlite_insert(EmployeeSkillRow.__table__).values(
            employee_id=employee_id,
            skill_id=holding.skill_id,
            proficiency_level=holding.proficiency_level,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["employee_id", "skill_id"],
            set_={"proficiency_level": stmt.excluded.proficiency_level},
        )
        with self._session() as session:
            session.execute(stmt)

    def remove_employee_skill(self, employee_id: str, skill_id: int) -> bool:
        """Remove one held skill. Returns False if it was not held."""
        with self._session() as session:
            result = session.execute(
                delete(EmployeeSkillRow)
                .where(
                    EmployeeSkillRow.employee_id == employee_id,
                    EmployeeSkillRow.skill_id == skill_id,
                )
                .execution_options(synchronize_session=False),
            )
            return result.rowcount > 0

    def get_employee_profile(self, employee_id: str) -> EmployeeSkillProfile:
        with self._session() as session:
            rows = session.scalars(
                select(EmployeeSkillRow).where(EmployeeSkillRow.employee_id == employee_id),
            ).all()
            levels = {r.skill_id: r.proficiency_level for r in rows}
        return EmployeeSkillProfile.from_levels(employee_id, levels)

    def list_employee_skill_profiles(self) -> list[EmployeeSkillProfile]:
        """Snapshot of every employee holding at least one skill."""
        with self._session() as session:
            rows = session.execute(
                select(
                    EmployeeSkillRow.employee_id,
                    EmployeeSkillRow.skill_id,
                    EmployeeSkillRow.proficiency_level,
                ).order_by(EmployeeSkillRow.employee_id, EmployeeSkillRow.skill_id),
            ).all()
        return [
            EmployeeSkillProfile.from_levels(
                employee_id,
                {r.skill_id: r.proficiency_level for r in group},
            )
            for employee_id, group in groupby(rows, key=lambda r: r.employee_id)
        ]

    # ------------------------------------------------------------------
    # Requisitions
    # ------------------------------------------------------------------

    def create_requisition(
        self,
        manager_id: str,
        role_title: str,
        department: str,
        required_skill_ids: frozenset[int],
        created_utc: datetime,
    ) -> Requisition:
        with self._session() as session:
            row = RequisitionRow(
                manager_id=manager_id,
                role_title=role_title,
                department=department,
                required_skill_ids=sorted(required_skill_ids),
                status=RequisitionStatus.PENDING_SCAN.value,
                created_utc=_format_ts(created_utc),
                matched_employee_ids=[],
            )
            session.add(row)
            session.flush()
            return _row_to_requisition(row)

    def get_requisition(self, requisition_id: int) -> Optional[Requisition]:
        with self._session() as session:
            row = session.get(RequisitionRow, requisition_id)
            return _row_to_requisition(row) if row is not None else None

    def update_requisition_status(
        self,
        requisition_id: int,
        expected_status: RequisitionStatus,
        new_status: RequisitionStatus,
        matched_employee_ids: Sequence[str],
        scanned_utc: Optional[datetime] = None,
    ) -> bool:
        """Compare-and-set in a single UPDATE. True only if this call moved the row."""
        with self._session() as session:
            result = session.execute(
                update(RequisitionRow)
                .where(
                    RequisitionRow.id == requisition_id,
                    RequisitionRow.status == expected_status.value,
                )
                .values(
                    status=new_status.value,
                    matched_employee_ids=list(matched_employee_ids),
                    scanned_utc=_format_ts(scanned_utc),
                )
                .execution_options(synchronize_session=False),
            )
            return result.rowcount == 1

    def list_requisitions(
        self, status: Optional[RequisitionStatus] = None,
    ) -> list[Requisition]:
        query = select(RequisitionRow)
        if status is not None:
            query = query.where(RequisitionRow.status == status.value)
        query = query.order_by(RequisitionRow.created_utc.desc(), RequisitionRow.id.desc())
        with self._session() as session:
            return [_row_to_requisition(r) for r in session.scalars(query).all()]
