from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from careerlink.database import get_db
from careerlink.models.user import User
from careerlink.routers.dependencies import require_roles
from careerlink.routers.errors import to_http_exception
from careerlink.schemas.company import CompanyCreate, CompanyOut, CompanyUpdate
from careerlink.schemas.search import CompanySearchResponse
from careerlink.services import company_service, search_service
from careerlink.services.errors import DomainError


router = APIRouter(prefix="/company-profiles", tags=["company-profiles"])


@router.get("", response_model=CompanySearchResponse)
def list_company_profiles(
    query: str | None = None,
    industry: str | None = None,
    size: str | None = None,
    location: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
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


@router.get("/my/profiles", response_model=list[CompanyOut])
def list_my_company_profiles(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("employer", "admin")),
) -> list[CompanyOut]:
    return [CompanyOut.model_validate(c) for c in company_service.list_my_companies(db, current_user)]


@router.get("/{company_id}", response_model=CompanyOut)
def get_company_profile(company_id: int, db: Session = Depends(get_db)) -> CompanyOut:
    try:
        return CompanyOut.model_validate(company_service.get_company(db, company_id))
    except DomainError as exc:
        raise to_http_exception(exc) from exc


@router.post("", response_model=CompanyOut, status_code=status.HTTP_201_CREATED)
def create_company_profile(
    payload: CompanyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("employer", "admin")),
) -> CompanyOut:
    try:
        company = company_service.create_company(db, current_user, payload.model_dump())
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return CompanyOut.model_validate(company)


@router.put("/{company_id}", response_model=CompanyOut)
def update_company_profile(
    company_id: int,
    payload: CompanyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("employer", "admin")),
) -> CompanyOut:
    try:
        company = company_service.update_company(db, current_user, company_id, payload.model_dump(exclude_unset=True))
    except DomainError as exc:
        raise to_http_exception(exc) from exc
    return CompanyOut.model_validate(company)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_company_profile(
    company_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles("employer", "admin")),
) -> None:
    try:
        company_service.delete_company(db, current_user, company_id)
    except DomainError as exc:
        raise to_http_exception(exc) from exc
