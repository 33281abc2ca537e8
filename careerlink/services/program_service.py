from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from careerlink.config import is_admin_email
from careerlink.models.mentorship import CONTENT_TYPES, MentorshipProgram, ProgramContent, ProgramEnrollment
from careerlink.models.user import User
from careerlink.services.enrollment_service import ACTIVE, active_enrollment_count, is_participant_enrolled
from careerlink.services.errors import AuthorizationError, NotFoundError, TransientStoreError, ValidationError
from careerlink.services.query_filters import ilike_any, json_list_clause


logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = {
    "title",
    "description",
    "topics",
    "duration_value",
    "duration_unit",
    "cost",
    "max_students",
    "requirements",
    "learning_outcomes",
    "schedule",
    "is_active",
}


@dataclass(frozen=True)
class ProgramSummary:
    program: MentorshipProgram
    active_enrollments: int
    is_enrolled: bool = False

    @property
    def available_slots(self) -> int:
        return max(0, int(self.program.max_students) - self.active_enrollments)

    @property
    def is_full(self) -> bool:
        return self.active_enrollments >= int(self.program.max_students)


@dataclass(frozen=True)
class Page:
    items: list[Any]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def _is_admin(user: User) -> bool:
    return user.role == "admin" or is_admin_email(user.email or "")


def _clean_list(values: Iterable[Any] | Any | None) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    return [str(v).strip() for v in values if v is not None and str(v).strip()]


def get_program(db: Session, program_id: int) -> MentorshipProgram:
    program = db.get(MentorshipProgram, program_id)
    if program is None:
        raise NotFoundError("Mentorship program not found")
    return program


def _active_counts(db: Session, program_ids: list[int]) -> dict[int, int]:
    if not program_ids:
        return {}
    rows = (
        db.query(ProgramEnrollment.program_id, func.count(ProgramEnrollment.id))
        .filter(ProgramEnrollment.program_id.in_(program_ids))
        .filter(ProgramEnrollment.status == ACTIVE)
        .group_by(ProgramEnrollment.program_id)
        .all()
    )
    return {int(pid): int(c) for pid, c in rows}


def _summaries(db: Session, programs: list[MentorshipProgram], viewer_id: int | None = None) -> list[ProgramSummary]:
    counts = _active_counts(db, [p.id for p in programs])
    enrolled_in: set[int] = set()
    if viewer_id is not None and programs:
        enrolled_in = {
            int(pid)
            for (pid,) in db.query(ProgramEnrollment.program_id)
            .filter(ProgramEnrollment.participant_id == viewer_id)
            .filter(ProgramEnrollment.status == ACTIVE)
            .all()
        }
    return [
        ProgramSummary(program=p, active_enrollments=counts.get(p.id, 0), is_enrolled=p.id in enrolled_in)
        for p in programs
    ]


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise TransientStoreError(f"Failed to save {what}") from exc


def create_program(db: Session, owner: User, data: dict[str, Any]) -> MentorshipProgram:
    if owner.role != "alumni":
        raise AuthorizationError("Only alumni can create mentorship programs")

    title = (data.get("title") or "").strip()
    description = (data.get("description") or "").strip()
    duration_value = data.get("duration_value")
    if not title or not description or not duration_value:
        raise ValidationError("Title, description, and duration value are required.")

    max_students = int(data.get("max_students") or 1)
    if max_students < 1:
        raise ValidationError("max_students must be a positive integer")

    program = MentorshipProgram(
        alumni_id=owner.id,
        title=title,
        description=description,
        topics=_clean_list(data.get("topics")),
        duration_value=int(duration_value),
        duration_unit=data.get("duration_unit") or "weeks",
        cost=float(data.get("cost") or 0.0),
        max_students=max_students,
        requirements=_clean_list(data.get("requirements")),
        learning_outcomes=_clean_list(data.get("learning_outcomes")),
        schedule=data.get("schedule") or {},
        is_active=True,
    )
    db.add(program)
    _commit(db, "mentorship program")
    db.refresh(program)
    logger.info("program.created program_id=%s alumni_id=%s", program.id, owner.id)
    return program


def list_programs_for_students(
    db: Session,
    viewer: User,
    *,
    search: str | None = None,
    topic: str | None = None,
    max_cost: float | None = None,
    max_duration: int | None = None,
    page: int = 1,
    limit: int = 10,
) -> Page:
    query = db.query(MentorshipProgram).filter(MentorshipProgram.is_active.is_(True))

    if search and search.strip():
        query = query.filter(ilike_any([MentorshipProgram.title, MentorshipProgram.description], search.strip()))
    if max_cost is not None:
        query = query.filter(MentorshipProgram.cost <= float(max_cost))
    if max_duration is not None:
        query = query.filter(MentorshipProgram.duration_value <= int(max_duration))

    query = query.order_by(MentorshipProgram.created_at.desc(), MentorshipProgram.id.desc())

    # Topics are a JSON list; a topic matches when it occurs inside any item.
    needle = (topic or "").strip()
    topic_clause = json_list_clause(MentorshipProgram.topics, needle) if needle else None
    if needle and topic_clause is None:
        # Not expressible against the serialized list: filter the loaded rows.
        programs = [p for p in query.all() if any(needle.lower() in str(t).lower() for t in (p.topics or []))]
        total = len(programs)
        start = (page - 1) * limit
        window = programs[start : start + limit]
    else:
        if topic_clause is not None:
            query = query.filter(topic_clause)
        total = query.count()
        window = query.offset((page - 1) * limit).limit(limit).all()
    return Page(items=_summaries(db, window, viewer_id=viewer.id), total=total, page=page, limit=limit)


def list_owner_programs(db: Session, owner: User, *, status: str | None = None, page: int = 1, limit: int = 10) -> Page:
    query = db.query(MentorshipProgram).filter(MentorshipProgram.alumni_id == owner.id)
    if status == "active":
        query = query.filter(MentorshipProgram.is_active.is_(True))
    elif status == "inactive":
        query = query.filter(MentorshipProgram.is_active.is_(False))

    total = query.count()
    programs = (
        query.order_by(MentorshipProgram.created_at.desc(), MentorshipProgram.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return Page(items=_summaries(db, programs), total=total, page=page, limit=limit)


def list_programs_for_admin(
    db: Session,
    *,
    status: str | None = None,
    search: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> Page:
    query = db.query(MentorshipProgram)
    if status == "active":
        query = query.filter(MentorshipProgram.is_active.is_(True))
    elif status == "inactive":
        query = query.filter(MentorshipProgram.is_active.is_(False))
    if search and search.strip():
        query = query.filter(ilike_any([MentorshipProgram.title, MentorshipProgram.description], search.strip()))

    total = query.count()
    programs = (
        query.order_by(MentorshipProgram.created_at.desc(), MentorshipProgram.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return Page(items=_summaries(db, programs), total=total, page=page, limit=limit)


def get_program_details(db: Session, viewer: User, program_id: int) -> ProgramSummary:
    program = get_program(db, program_id)
    enrolled = is_participant_enrolled(db, program, viewer.id)
    if viewer.id != program.alumni_id and not enrolled and not _is_admin(viewer):
        raise AuthorizationError("Access denied to program details")
    return ProgramSummary(program=program, active_enrollments=active_enrollment_count(db, program), is_enrolled=enrolled)


def update_program(db: Session, owner: User, program_id: int, changes: dict[str, Any]) -> MentorshipProgram:
    program = get_program(db, program_id)
    if program.alumni_id != owner.id:
        raise AuthorizationError("Access denied. Only program owner can update.")

    unknown = set(changes) - _UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    # Every updatable column is NOT NULL; an explicit null is a bad request, not a store failure.
    nulls = sorted(f for f, value in changes.items() if value is None)
    if nulls:
        raise ValidationError(f"Fields cannot be null: {', '.join(nulls)}")
    for f in ("title", "description"):
        if f in changes and not str(changes[f]).strip():
            raise ValidationError(f"{f} cannot be empty")

    if "max_students" in changes:
        new_capacity = int(changes["max_students"])
        if new_capacity < 1:
            raise ValidationError("max_students must be a positive integer")
        if new_capacity < active_enrollment_count(db, program):
            raise ValidationError("max_students cannot be lower than the number of active enrollments")

    for field, value in changes.items():
        if field in {"topics", "requirements", "learning_outcomes"}:
            value = _clean_list(value)
        setattr(program, field, value)

    _commit(db, "mentorship program")
    db.refresh(program)
    return program


def _require_content_access(db: Session, user: User, program: MentorshipProgram, action: str) -> None:
    if user.id == program.alumni_id or is_participant_enrolled(db, program, user.id):
        return
    raise AuthorizationError(f"Access denied to {action} content")


def add_program_content(db: Session, author: User, program_id: int, data: dict[str, Any]) -> ProgramContent:
    title = (data.get("title") or "").strip()
    content_type = data.get("content_type")
    if not title or not content_type:
        raise ValidationError("Title and content type are required")
    if content_type not in CONTENT_TYPES:
        raise ValidationError(f"Invalid content type. Allowed: {', '.join(CONTENT_TYPES)}")

    program = get_program(db, program_id)
    _require_content_access(db, author, program, "add")

    content = ProgramContent(
        program_id=program.id,
        title=title,
        description=data.get("description"),
        content_type=content_type,
        content=data.get("content") or {},
        is_public=True if data.get("is_public") is None else bool(data.get("is_public")),
        access_level=data.get("access_level") or "all",
        posted_by=author.id,
    )
    db.add(content)
    _commit(db, "program content")
    db.refresh(content)
    return content


def list_program_content(
    db: Session,
    viewer: User,
    program_id: int,
    *,
    content_type: str | None = None,
    page: int = 1,
    limit: int = 20,
) -> Page:
    program = get_program(db, program_id)
    _require_content_access(db, viewer, program, "view")

    query = db.query(ProgramContent).filter(ProgramContent.program_id == program.id)
    if content_type:
        query = query.filter(ProgramContent.content_type == content_type)
    total = query.count()
    items = (
        query.order_by(ProgramContent.created_at.desc(), ProgramContent.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return Page(items=items, total=total, page=page, limit=limit)
