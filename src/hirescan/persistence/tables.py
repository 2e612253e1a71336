"""SQLAlchemy table models for the workforce store."""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class SkillRow(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False, unique=True)
    category = Column(String(255), nullable=False)


class EmployeeSkillRow(Base):
    __tablename__ = "employee_skills"
    __table_args__ = (
        CheckConstraint(
            "proficiency_level BETWEEN 1 AND 5", name="ck_employee_skills_level",
        ),
    )

    employee_id = Column(String(255), primary_key=True)
    skill_id = Column(
        Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True,
    )
    proficiency_level = Column(Integer, nullable=False)


class RequisitionRow(Base):
    __tablename__ = "requisitions"
    __table_args__ = (
        Index("idx_requisitions_status", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    manager_id = Column(String(255), nullable=False)
    role_title = Column(String(255), nullable=False)
    department = Column(String(255), nullable=False, default="")
    required_skill_ids = Column(JSON, nullable=False, default=list)
    status = Column(String(64), nullable=False)
    # ISO-8601 UTC text; SQLite has no timezone-aware datetime type.
    created_utc = Column(String(64), nullable=False)
    matched_employee_ids = Column(JSON, nullable=False, default=list)
    scanned_utc = Column(String(64), nullable=True)
