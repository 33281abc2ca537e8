from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from careerlink.database import get_db
from careerlink.models.mentorship import MentorshipProgram
from careerlink.models.user import User
from careerlink.routers.dependencies import require_roles
from careerlink.routers.errors import to_http_exception
from careerlink.schemas.mentorship import (
    ContentCreate,
    ContentListResponse,
    ContentOut,
    EnrollmentOut,
    EnrollmentResponse,
    EnrollmentStatusUpdate,
    ProgramCreate,
    ProgramDetail,
    ProgramListItem,
    ProgramListResponse,
    ProgramOut,
    ProgramResponse,
    ProgramUpdate,
)
from careerlink.services import enrollment_service, program_service
from careerlink.services.errors import DomainError
from careerlink.services.program_service import Page, ProgramSummary


router = APIRouter(prefix="/mentorship", tags=["mentorship"])


def _list_item(summary: ProgramSummary) -> ProgramListItem:
    return ProgramListItem(
        **ProgramOut.model_validate(summary.program).model_dump(),
        active_enrollments=summary.active_enrollments,
        available_slots=summary.available_slots,
        is_full=summary.is_full,
        is_enrolled=summary.is_enrolled,
    )


def _detail(db: Session, program: MentorshipProgram, *, is_enrolled: bool = False) -> ProgramDetail:
    active = enrollment_service.active_enrollment_count(db, program)
    summary = ProgramSummary(program=program, active_enrollments=active, is_enrolled=is_enrolled)
    return ProgramDetail(
        **_list_item(summary).model_dump(),
        enrollments=[EnrollmentOut.model_validate(e) for e in program.enrollments],
    )


def _list_response(page: Page) -> ProgramListResponse:
    return ProgramListResponse(
        count=len(page.items),
        total=page.total,
        page=page.page,
        pages=page.pages,
        programs=[_list_item(s) for s in page.items],
    )


@router.post("/programs", response_model=ProgramResponse, status_code=status.HTTP_201_CREATED)
def create_program(
    payload: ProgramCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("alumni")),
) -> ProgramResponse:
    try:
        program = program_service.create_program(db, current_user, payload.model_dump())
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return ProgramResponse(message="Mentorship program created successfully", program=_detail(db, program))


@router.get("/programs", response_model=ProgramListResponse)
def list_programs(
    search: str | None = None,
    topic: str | None = None,
    max_cost: float | None = Query(default=None, ge=0),
    duration: int | None = Query(default=None, ge=1),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("student", "alumni", "admin")),
) -> ProgramListResponse:
    result = program_service.list_programs_for_students(
        db,
        current_user,
        search=search,
        topic=topic,
        max_cost=max_cost,
        max_duration=duration,
        page=page,
        limit=limit,
    )
    return _list_response(result)


@router.get("/programs/alumni", response_model=ProgramListResponse)
def list_my_programs(
    status_filter: str | None = Query(default=None, alias="status", pattern="^(active|inactive)$"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("alumni")),
) -> ProgramListResponse:
    result = program_service.list_owner_programs(db, current_user, status=status_filter, page=page, limit=limit)
    return _list_response(result)


@router.get("/admin/programs", response_model=ProgramListResponse)
def list_programs_admin(
    status_filter: str | None = Query(default=None, alias="status", pattern="^(active|inactive)$"),
    search: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    db: Session = Depends(get_db),
    _admin: User = Depends(require_roles("admin")),
) -> ProgramListResponse:
    result = program_service.list_programs_for_admin(db, status=status_filter, search=search, page=page, limit=limit)
    return _list_response(result)


@router.get("/student/my-program", response_model=ProgramResponse)
def get_my_program(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("student")),
) -> ProgramResponse:
    try:
        program = enrollment_service.get_participant_active_program(db, current_user.id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return ProgramResponse(program=_detail(db, program, is_enrolled=True))


@router.get("/programs/{program_id}", response_model=ProgramResponse)
def get_program_details(
    program_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("student", "alumni", "admin")),
) -> ProgramResponse:
    try:
        summary = program_service.get_program_details(db, current_user, program_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return ProgramResponse(program=_detail(db, summary.program, is_enrolled=summary.is_enrolled))


@router.put("/programs/{program_id}", response_model=ProgramResponse)
def update_program(
    program_id: int,
    payload: ProgramUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("alumni")),
) -> ProgramResponse:
    try:
        program = program_service.update_program(db, current_user, program_id, payload.model_dump(exclude_unset=True))
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return ProgramResponse(message="Program updated successfully", program=_detail(db, program))


@router.post("/programs/{program_id}/enroll", response_model=ProgramResponse)
def enroll_in_program(
    program_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("student")),
) -> ProgramResponse:
    try:
        program = enrollment_service.enroll(db, current_user.id, program_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return ProgramResponse(
        message="Successfully enrolled in mentorship program",
        program=_detail(db, program, is_enrolled=True),
    )


@router.put("/programs/{program_id}/enrollments/{participant_id}", response_model=EnrollmentResponse)
def update_enrollment_status(
    program_id: int,
    participant_id: int,
    payload: EnrollmentStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("student", "alumni", "admin")),
) -> EnrollmentResponse:
    try:
        enrollment = enrollment_service.set_enrollment_status(
            db, current_user, program_id, participant_id, payload.status
        )
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return EnrollmentResponse(
        message=f"Enrollment marked as {enrollment.status}",
        enrollment=EnrollmentOut.model_validate(enrollment),
    )


@router.post("/programs/{program_id}/content", response_model=ContentOut, status_code=status.HTTP_201_CREATED)
def add_program_content(
    program_id: int,
    payload: ContentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("student", "alumni")),
) -> ContentOut:
    try:
        content = program_service.add_program_content(db, current_user, program_id, payload.model_dump())
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return ContentOut.model_validate(content)


@router.get("/programs/{program_id}/content", response_model=ContentListResponse)
def list_program_content(
    program_id: int,
    content_type: str | None = Query(default=None, alias="type"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("student", "alumni")),
) -> ContentListResponse:
    try:
        result = program_service.list_program_content(
            db, current_user, program_id, content_type=content_type, page=page, limit=limit
        )
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return ContentListResponse(
        count=len(result.items),
        total=result.total,
        page=result.page,
        pages=result.pages,
        content=[ContentOut.model_validate(c) for c in result.items],
    )
