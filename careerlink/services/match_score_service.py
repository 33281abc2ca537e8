from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from careerlink.models.jobs import Job
from careerlink.models.skill_match import SkillMatch
from careerlink.models.user import User
from careerlink.services.errors import NotFoundError, TransientStoreError, ValidationError
from careerlink.services.skill_matcher import MatchResult, build_skill_set, compute_match


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobMatch:
    job: Job
    result: MatchResult
    persisted: bool = True


@dataclass(frozen=True)
class MatchView:
    student_id: int
    job_id: int
    matched_skills: list[str]
    match_percentage: float
    total_job_skills: int
    student_matching_skills_count: int
    updated_at: datetime | None = None
    calculated: bool = False


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _upsert_statement(db: Session, values: dict):
    dialect = db.get_bind().dialect.name
    update_cols = {k: v for k, v in values.items() if k not in {"student_id", "job_id"}}

    if dialect == "mysql":
        return mysql.insert(SkillMatch).values(**values).on_duplicate_key_update(**update_cols)
    if dialect == "postgresql":
        stmt = postgresql.insert(SkillMatch).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(SkillMatch).values(**values)
    else:
        raise TransientStoreError(f"Atomic upsert is not supported on dialect '{dialect}'")
    return stmt.on_conflict_do_update(index_elements=["student_id", "job_id"], set_=update_cols)


def record_match(db: Session, student_id: int, job_id: int, result: MatchResult, *, commit: bool = True) -> None:
    """Insert or overwrite the stored match for (student_id, job_id).

    The write is a single insert-on-conflict statement against the composite unique key,
    so concurrent recomputations of the same pair never create a second row; the last
    write wins.
    """

    values = {
        "student_id": int(student_id),
        "job_id": int(job_id),
        "matched_skills": list(result.matched_skills),
        "match_percentage": float(result.match_percentage),
        "total_job_skills": int(result.total_target_skills),
        "student_matching_skills_count": int(result.subject_matching_skills_count),
        "updated_at": _utc_now(),
    }
    try:
        db.execute(_upsert_statement(db, values))
        if commit:
            db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise TransientStoreError("Failed to save skill match") from exc


def _get_student(db: Session, student_id: int) -> User:
    student = db.get(User, student_id)
    if student is None:
        raise NotFoundError("Student not found")
    return student


def compute_all_matches_for_subject(db: Session, student_id: int) -> list[JobMatch]:
    student = _get_student(db, student_id)
    student_skills = list(student.skills or [])
    if not build_skill_set(student_skills):
        raise ValidationError("Student has no skills listed in profile")

    jobs = db.query(Job).filter(Job.is_active.is_(True)).order_by(Job.id).all()

    matches: list[JobMatch] = []
    for job in jobs:
        result = compute_match(student_skills, job.skills or [])
        persisted = True
        try:
            record_match(db, student.id, job.id, result)
        except TransientStoreError:
            # Each job's upsert stands alone; a rerun recomputes whatever was skipped.
            logger.warning("skill_match.upsert_failed student_id=%s job_id=%s", student.id, job.id, exc_info=True)
            persisted = False
        matches.append(JobMatch(job=job, result=result, persisted=persisted))

    # sorted() is stable, so equal scores keep job iteration order.
    matches = sorted(matches, key=lambda m: m.result.match_percentage, reverse=True)
    logger.info("skill_match.computed student_id=%s jobs=%s", student.id, len(jobs))
    return matches


def get_student_matches(db: Session, student_id: int, min_match: float = 0.0) -> list[tuple[SkillMatch, Job | None]]:
    rows = (
        db.query(SkillMatch)
        .filter(SkillMatch.student_id == student_id)
        .filter(SkillMatch.match_percentage >= float(min_match))
        .order_by(SkillMatch.match_percentage.desc(), SkillMatch.job_id)
        .all()
    )
    job_ids = {row.job_id for row in rows}
    jobs = {job.id: job for job in db.query(Job).filter(Job.id.in_(job_ids)).all()} if job_ids else {}
    return [(row, jobs.get(row.job_id)) for row in rows]


def get_job_candidates(db: Session, job_id: int, min_match: float = 0.0) -> tuple[Job, list[tuple[SkillMatch, User | None]]]:
    job = db.get(Job, job_id)
    if job is None:
        raise NotFoundError("Job not found")

    rows = (
        db.query(SkillMatch)
        .filter(SkillMatch.job_id == job_id)
        .filter(SkillMatch.match_percentage >= float(min_match))
        .order_by(SkillMatch.match_percentage.desc(), SkillMatch.student_id)
        .all()
    )
    student_ids = {row.student_id for row in rows}
    students = {u.id: u for u in db.query(User).filter(User.id.in_(student_ids)).all()} if student_ids else {}
    return job, [(row, students.get(row.student_id)) for row in rows]


def to_match_view(row: SkillMatch) -> MatchView:
    return MatchView(
        student_id=row.student_id,
        job_id=row.job_id,
        matched_skills=[str(s) for s in (row.matched_skills or [])],
        match_percentage=float(row.match_percentage or 0.0),
        total_job_skills=int(row.total_job_skills or 0),
        student_matching_skills_count=int(row.student_matching_skills_count or 0),
        updated_at=row.updated_at,
    )


def get_single_match(db: Session, student_id: int, job_id: int) -> MatchView:
    row = (
        db.query(SkillMatch)
        .filter(SkillMatch.student_id == student_id)
        .filter(SkillMatch.job_id == job_id)
        .one_or_none()
    )
    if row is not None:
        return to_match_view(row)

    student = db.get(User, student_id)
    job = db.get(Job, job_id)
    if student is None or job is None:
        raise NotFoundError("Student or job not found")

    # Preview only; persisting happens through compute_all_matches_for_subject.
    result = compute_match(student.skills or [], job.skills or [])
    return MatchView(
        student_id=student.id,
        job_id=job.id,
        matched_skills=result.matched_skills,
        match_percentage=result.match_percentage,
        total_job_skills=result.total_target_skills,
        student_matching_skills_count=result.subject_matching_skills_count,
        calculated=True,
    )
