from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from careerlink.database import Base


ENROLLMENT_STATUSES = ("active", "completed", "withdrawn")
CONTENT_TYPES = ("file", "link", "text", "assignment")


class MentorshipProgram(Base):
    __tablename__ = "mentorship_programs"

    id = Column(Integer, primary_key=True, index=True)
    alumni_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=False)
    topics = Column(JSON, nullable=False, default=list)
    duration_value = Column(Integer, nullable=False)
    duration_unit = Column(String(20), nullable=False, default="weeks")
    cost = Column(Float, nullable=False, default=0.0)
    max_students = Column(Integer, nullable=False, default=1)
    requirements = Column(JSON, nullable=False, default=list)
    learning_outcomes = Column(JSON, nullable=False, default=list)
    schedule = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True, index=True)

    # Optimistic lock: every enrollment bumps this, so two writers that read the same
    # program cannot both commit.
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    alumni = relationship("User", foreign_keys=[alumni_id])
    enrollments = relationship(
        "ProgramEnrollment",
        back_populates="program",
        order_by="ProgramEnrollment.id",
    )

    __table_args__ = (
        CheckConstraint("max_students >= 1", name="ck_mentorship_programs_capacity"),
    )
    __mapper_args__ = {"version_id_col": version}


class ProgramEnrollment(Base):
    __tablename__ = "program_enrollments"

    id = Column(Integer, primary_key=True, index=True)
    program_id = Column(Integer, ForeignKey("mentorship_programs.id"), nullable=False, index=True)
    participant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="active", index=True)

    # Equals participant_id while status == "active", NULL otherwise. The unique
    # constraint makes "one active enrollment per participant" a store-level rule;
    # NULLs never collide so history rows are unconstrained.
    active_participant_id = Column(Integer, nullable=True)

    enrolled_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    status_changed_at = Column(DateTime(timezone=True), nullable=True)

    program = relationship("MentorshipProgram", back_populates="enrollments")
    participant = relationship("User", foreign_keys=[participant_id])

    __table_args__ = (
        UniqueConstraint("active_participant_id", name="uq_program_enrollments_active_participant"),
        Index("ix_program_enrollments_program_status", "program_id", "status"),
    )


class ProgramContent(Base):
    __tablename__ = "program_contents"

    id = Column(Integer, primary_key=True, index=True)
    program_id = Column(Integer, ForeignKey("mentorship_programs.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    content_type = Column(String(20), nullable=False)

    # Opaque reference, e.g. {"file_url": ..., "file_name": ..., "file_size": ...}
    content = Column(JSON, nullable=False, default=dict)
    is_public = Column(Boolean, nullable=False, default=True)
    access_level = Column(String(20), nullable=False, default="all")
    posted_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
