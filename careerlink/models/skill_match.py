from __future__ import annotations

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, JSON, UniqueConstraint
from sqlalchemy.sql import func

from careerlink.database import Base


class SkillMatch(Base):
    __tablename__ = "skill_matches"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)

    # Job's skills that the student has, in job order and job casing.
    matched_skills = Column(JSON, nullable=False, default=list)
    match_percentage = Column(Float, nullable=False, default=0.0, index=True)
    total_job_skills = Column(Integer, nullable=False, default=0)
    student_matching_skills_count = Column(Integer, nullable=False, default=0)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("student_id", "job_id", name="uq_skill_matches_student_job"),
    )
