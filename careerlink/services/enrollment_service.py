"""Mentorship enrollment bookkeeping.

Two rules hold across concurrent requests:

- a participant has at most one ``active`` enrollment across all programs, enforced by
  the unique ``active_participant_id`` column on ``program_enrollments``;
- a program's active enrollments never exceed ``max_students``, enforced by bumping the
  program's optimistic ``version`` in the same commit as the new enrollment.

When either guard trips at commit time the transaction is rolled back and the whole
check sequence runs again, so the losing request reports the same typed error it would
have seen had it arrived second.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from careerlink.config import is_admin_email, settings
from careerlink.models.mentorship import MentorshipProgram, ProgramEnrollment
from careerlink.models.user import User
from careerlink.services.errors import (
    AlreadyEnrolledElsewhereError,
    AlreadyEnrolledInProgramError,
    AuthorizationError,
    ConflictError,
    InactiveProgramError,
    InvalidTransitionError,
    NotFoundError,
    ProgramFullError,
    TransientStoreError,
    ValidationError,
)


logger = logging.getLogger(__name__)

ACTIVE = "active"
COMPLETED = "completed"
WITHDRAWN = "withdrawn"

_ALLOWED_TRANSITIONS = {
    ACTIVE: {COMPLETED, WITHDRAWN},
}

# sqlite reports the column, MySQL/PostgreSQL the constraint name.
_ACTIVE_PARTICIPANT_MARKERS = ("uq_program_enrollments_active_participant", "active_participant_id")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _is_active_participant_conflict(exc: IntegrityError) -> bool:
    message = str(exc.orig if exc.orig is not None else exc)
    return any(marker in message for marker in _ACTIVE_PARTICIPANT_MARKERS)


def active_enrollment_count(db: Session, program: MentorshipProgram) -> int:
    return int(
        db.query(func.count(ProgramEnrollment.id))
        .filter(ProgramEnrollment.program_id == program.id)
        .filter(ProgramEnrollment.status == ACTIVE)
        .scalar()
        or 0
    )


def is_full(db: Session, program: MentorshipProgram) -> bool:
    return active_enrollment_count(db, program) >= int(program.max_students)


def is_participant_enrolled(db: Session, program: MentorshipProgram, participant_id: int) -> bool:
    return _active_enrollment_in(db, program.id, participant_id) is not None


def _active_enrollment_in(db: Session, program_id: int, participant_id: int) -> ProgramEnrollment | None:
    return (
        db.query(ProgramEnrollment)
        .filter(ProgramEnrollment.program_id == program_id)
        .filter(ProgramEnrollment.participant_id == participant_id)
        .filter(ProgramEnrollment.status == ACTIVE)
        .first()
    )


def find_active_enrollment(db: Session, participant_id: int) -> ProgramEnrollment | None:
    return (
        db.query(ProgramEnrollment)
        .filter(ProgramEnrollment.active_participant_id == participant_id)
        .one_or_none()
    )


def _enroll_once(db: Session, participant_id: int, program_id: int) -> MentorshipProgram:
    program = db.get(MentorshipProgram, program_id)
    if program is None:
        raise NotFoundError("Mentorship program not found")
    if not program.is_active:
        raise InactiveProgramError("This mentorship program is not active")

    current = find_active_enrollment(db, participant_id)
    if current is not None:
        if current.program_id == program.id:
            raise AlreadyEnrolledInProgramError("You are already enrolled in this program")
        raise AlreadyEnrolledElsewhereError("You can only be enrolled in one mentorship program at a time")

    if active_enrollment_count(db, program) >= int(program.max_students):
        raise ProgramFullError("This program is currently full")

    now = _utc_now()
    db.add(
        ProgramEnrollment(
            program_id=program.id,
            participant_id=participant_id,
            status=ACTIVE,
            active_participant_id=participant_id,
            enrolled_at=now,
        )
    )
    # Touching the program issues "UPDATE ... WHERE version = :seen", which is what
    # serializes enrollments per program.
    program.updated_at = now
    db.commit()
    db.refresh(program)
    return program


def enroll(db: Session, participant_id: int, program_id: int, *, max_attempts: int | None = None) -> MentorshipProgram:
    attempts = max_attempts or settings.enroll_max_attempts
    for attempt in range(1, attempts + 1):
        try:
            program = _enroll_once(db, participant_id, program_id)
        except IntegrityError as exc:
            db.rollback()
            if not _is_active_participant_conflict(exc):
                raise ValidationError("Enrollment references an unknown participant or program") from exc
            reason = "active_participant_conflict"
        except StaleDataError:
            db.rollback()
            reason = "stale_program_version"
        except SQLAlchemyError as exc:
            db.rollback()
            raise TransientStoreError("Failed to save enrollment") from exc
        else:
            logger.info("enroll.ok program_id=%s participant_id=%s", program_id, participant_id)
            return program

        logger.info(
            "enroll.retry program_id=%s participant_id=%s attempt=%s reason=%s",
            program_id,
            participant_id,
            attempt,
            reason,
        )

    raise ConflictError("Enrollment could not be completed due to concurrent updates, please retry")


def _can_change_status(actor: User, program: MentorshipProgram, participant_id: int) -> bool:
    if actor.id == program.alumni_id or actor.id == participant_id:
        return True
    return actor.role == "admin" or is_admin_email(actor.email or "")


def set_enrollment_status(
    db: Session,
    actor: User,
    program_id: int,
    participant_id: int,
    new_status: str,
) -> ProgramEnrollment:
    if new_status not in (ACTIVE, COMPLETED, WITHDRAWN):
        raise ValidationError(f"Invalid enrollment status '{new_status}'")

    program = db.get(MentorshipProgram, program_id)
    if program is None:
        raise NotFoundError("Mentorship program not found")
    if not _can_change_status(actor, program, participant_id):
        raise AuthorizationError("Only the program owner or the participant can change this enrollment")

    enrollment = _active_enrollment_in(db, program.id, participant_id)
    if enrollment is None:
        # Nothing active: report the latest history row's status in the error, if any.
        latest = (
            db.query(ProgramEnrollment)
            .filter(ProgramEnrollment.program_id == program.id)
            .filter(ProgramEnrollment.participant_id == participant_id)
            .order_by(ProgramEnrollment.id.desc())
            .first()
        )
        if latest is None:
            raise NotFoundError("Enrollment not found")
        raise InvalidTransitionError(f"Cannot change enrollment status from '{latest.status}' to '{new_status}'")

    if new_status not in _ALLOWED_TRANSITIONS.get(enrollment.status, set()):
        raise InvalidTransitionError(f"Cannot change enrollment status from '{enrollment.status}' to '{new_status}'")

    enrollment.status = new_status
    enrollment.active_participant_id = None
    enrollment.status_changed_at = _utc_now()
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise TransientStoreError("Failed to update enrollment status") from exc
    db.refresh(enrollment)
    logger.info(
        "enrollment.status program_id=%s participant_id=%s status=%s actor_id=%s",
        program.id,
        participant_id,
        new_status,
        actor.id,
    )
    return enrollment


def get_participant_active_program(db: Session, participant_id: int) -> MentorshipProgram:
    enrollment = find_active_enrollment(db, participant_id)
    if enrollment is None:
        raise NotFoundError("No active mentorship program found")
    return enrollment.program
