from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from careerlink.config import is_admin_email
from careerlink.models.company import CompanyProfile
from careerlink.models.user import User
from careerlink.services.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    TransientStoreError,
    ValidationError,
)


logger = logging.getLogger(__name__)

_REQUIRED = ("name", "description", "industry", "size", "headquarters")
_LIST_FIELDS = ("technologies", "locations", "benefits", "values")
_UPDATABLE = set(_REQUIRED) | set(_LIST_FIELDS) | {"founded", "website", "logo"}


def _is_admin(user: User) -> bool:
    return user.role == "admin" or is_admin_email(user.email or "")


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("A company with this name already exists") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise TransientStoreError("Failed to save company profile") from exc


def create_company(db: Session, owner: User, data: dict[str, Any]) -> CompanyProfile:
    missing = [f for f in _REQUIRED if not str(data.get(f) or "").strip()]
    if missing:
        raise ValidationError("Name, description, industry, size, and headquarters are required")

    name = str(data["name"]).strip()
    if db.query(CompanyProfile.id).filter(CompanyProfile.name == name).first() is not None:
        raise ConflictError("A company with this name already exists")

    company = CompanyProfile(
        employer_id=owner.id,
        name=name,
        description=data["description"],
        industry=data["industry"],
        size=data["size"],
        founded=data.get("founded"),
        headquarters=data["headquarters"],
        website=data.get("website"),
        logo=data.get("logo"),
        is_active=True,
        **{f: list(data.get(f) or []) for f in _LIST_FIELDS},
    )
    db.add(company)
    _commit(db)
    db.refresh(company)
    logger.info("company.created company_id=%s employer_id=%s", company.id, owner.id)
    return company


def get_company(db: Session, company_id: int) -> CompanyProfile:
    company = db.get(CompanyProfile, company_id)
    if company is None or not company.is_active:
        raise NotFoundError("Company profile not found")
    return company


def list_my_companies(db: Session, owner: User) -> list[CompanyProfile]:
    return (
        db.query(CompanyProfile)
        .filter(CompanyProfile.employer_id == owner.id)
        .order_by(CompanyProfile.created_at.desc(), CompanyProfile.id.desc())
        .all()
    )


def _owned_company(db: Session, actor: User, company_id: int, action: str) -> CompanyProfile:
    company = get_company(db, company_id)
    if company.employer_id != actor.id and not _is_admin(actor):
        raise AuthorizationError(f"You do not have permission to {action} this company profile")
    return company


def update_company(db: Session, actor: User, company_id: int, changes: dict[str, Any]) -> CompanyProfile:
    company = _owned_company(db, actor, company_id, "update")
    unknown = set(changes) - _UPDATABLE
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")
    for f in _REQUIRED:
        if f in changes and not str(changes[f] or "").strip():
            raise ValidationError(f"{f} cannot be empty")

    for f, value in changes.items():
        setattr(company, f, list(value or []) if f in _LIST_FIELDS else value)
    _commit(db)
    db.refresh(company)
    return company


def delete_company(db: Session, actor: User, company_id: int) -> None:
    company = _owned_company(db, actor, company_id, "delete")
    # Soft delete: search and listings only show active profiles.
    company.is_active = False
    _commit(db)
    logger.info("company.deactivated company_id=%s actor_id=%s", company.id, actor.id)
