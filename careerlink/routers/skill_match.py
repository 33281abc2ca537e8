from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from careerlink.database import get_db
from careerlink.models.user import User
from careerlink.routers.dependencies import get_current_user, has_any_role
from careerlink.routers.errors import to_http_exception
from careerlink.schemas.skill_match import (
    CalculatedJobMatch,
    CalculateMatchesResponse,
    JobCandidateItem,
    JobCandidatesResponse,
    JobDetails,
    SingleMatchOut,
    SingleMatchResponse,
    StudentDetails,
    StudentMatchesResponse,
    StudentMatchItem,
)
from careerlink.services import match_score_service
from careerlink.services.errors import DomainError


router = APIRouter(prefix="/skill-match", tags=["skill-match"])


def _require_self_or_staff(current_user: User, student_id: int) -> None:
    # Students only see their own matches; employers and admins can look at anyone's.
    if current_user.id == student_id or has_any_role(current_user, ("employer", "admin")):
        return
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied to these matches")


@router.post("/calculate/{student_id}", response_model=CalculateMatchesResponse)
def calculate_job_matches(
    student_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> CalculateMatchesResponse:
    _require_self_or_staff(current_user, student_id)
    try:
        matches = match_score_service.compute_all_matches_for_subject(db, student_id)
        student = db.get(User, student_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc

    return CalculateMatchesResponse(
        student_id=student_id,
        student_skills=list(student.skills or []),
        total_jobs=len(matches),
        matches=[
            CalculatedJobMatch(
                job_id=m.job.id,
                job_title=m.job.title,
                company=m.job.company,
                location=m.job.location,
                matched_skills=m.result.matched_skills,
                match_percentage=m.result.match_percentage,
                total_job_skills=m.result.total_target_skills,
                student_matching_skills_count=m.result.subject_matching_skills_count,
                persisted=m.persisted,
            )
            for m in matches
        ],
    )


@router.get("/student/{student_id}", response_model=StudentMatchesResponse)
def get_student_matches(
    student_id: int,
    min_match: float = Query(default=0.0, ge=0, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> StudentMatchesResponse:
    _require_self_or_staff(current_user, student_id)
    rows = match_score_service.get_student_matches(db, student_id, min_match=min_match)
    items = [
        StudentMatchItem(
            **match_score_service.to_match_view(row).__dict__,
            job_details=JobDetails.model_validate(job) if job is not None else None,
        )
        for row, job in rows
    ]
    return StudentMatchesResponse(student_id=student_id, total_matches=len(items), matches=items)


@router.get("/job/{job_id}", response_model=JobCandidatesResponse)
def get_job_candidates(
    job_id: int,
    min_match: float = Query(default=0.0, ge=0, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> JobCandidatesResponse:
    if not has_any_role(current_user, ("employer", "admin")):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only employers can view job candidates")
    try:
        job, rows = match_score_service.get_job_candidates(db, job_id, min_match=min_match)
    except DomainError as exc:
        raise to_http_exception(exc) from exc

    items = [
        JobCandidateItem(
            **match_score_service.to_match_view(row).__dict__,
            student_details=StudentDetails.model_validate(student) if student is not None else None,
        )
        for row, student in rows
    ]
    return JobCandidatesResponse(job_id=job.id, job_title=job.title, total_candidates=len(items), matches=items)


@router.get("/match/{student_id}/{job_id}", response_model=SingleMatchResponse)
def get_single_match(
    student_id: int,
    job_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> SingleMatchResponse:
    _require_self_or_staff(current_user, student_id)
    try:
        view = match_score_service.get_single_match(db, student_id, job_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return SingleMatchResponse(match=SingleMatchOut(**view.__dict__))
