from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from careerlink.database import get_db
from careerlink.models.user import User
from careerlink.routers.dependencies import get_current_user
from careerlink.routers.errors import to_http_exception
from careerlink.schemas.company import CompanyOut
from careerlink.schemas.search import CompanySearchResponse, UnifiedSearchResponse, UserSearchResponse
from careerlink.schemas.user import UserRead
from careerlink.services import search_service
from careerlink.services.errors import DomainError


router = APIRouter(prefix="/search", tags=["search"])


@router.get("/unified", response_model=UnifiedSearchResponse)
def unified_search(
    query: str | None = None,
    type: str = "all",
    limit: int | None = Query(default=None, ge=1, le=100),
    _user: User = Depends(get_current_user),
) -> UnifiedSearchResponse:
    try:
        result = search_service.search(query, type, limit)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return UnifiedSearchResponse(
        query=result.query,
        type=result.scope,
        total_results=result.total_results,
        results=result.results,
        failed_categories=result.failed_categories,
    )


@router.get("/users/{role}", response_model=UserSearchResponse)
def search_by_role(
    role: str,
    query: str | None = None,
    location: str | None = None,
    university: str | None = None,
    skills: str | None = Query(default=None, description="Comma-separated; all must match"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> UserSearchResponse:
    skill_list = [s.strip() for s in skills.split(",")] if skills else None
    try:
        result = search_service.search_users_by_role(
            db,
            role,
            query=query,
            location=location,
            university=university,
            skills=skill_list,
            page=page,
            limit=limit,
        )
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return UserSearchResponse(
        role=role,
        count=len(result.items),
        total=result.total,
        page=result.page,
        pages=result.pages,
        users=[UserRead.model_validate(u) for u in result.items],
    )


@router.get("/companies", response_model=CompanySearchResponse)
def search_companies(
    query: str | None = None,
    industry: str | None = None,
    size: str | None = None,
    location: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> CompanySearchResponse:
    result = search_service.search_companies(
        db, query=query, industry=industry, size=size, location=location, page=page, limit=limit
    )
    return CompanySearchResponse(
        count=len(result.items),
        total=result.total,
        page=result.page,
        pages=result.pages,
        companies=[CompanyOut.model_validate(c) for c in result.items],
    )
