from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from sqlalchemy.orm import Session, sessionmaker

from careerlink.config import settings
from careerlink.database import SessionLocal
from careerlink.models.company import CompanyProfile
from careerlink.models.mentorship import MentorshipProgram
from careerlink.models.user import User
from careerlink.services.errors import ValidationError
from careerlink.services.program_service import Page
from careerlink.services.query_filters import contains_pattern, ilike_any, json_list_clause
from careerlink.services.skill_matcher import build_skill_set


logger = logging.getLogger(__name__)

# category -> user role
USER_CATEGORIES = {"students": "student", "alumni": "alumni", "employers": "employer"}
CATEGORIES = ("students", "alumni", "employers", "companies", "programs")
SCOPES = CATEGORIES + ("users", "all")
SEARCHABLE_ROLES = ("student", "alumni", "employer")

CategorySearcher = Callable[[str, int], list[dict[str, Any]]]


@dataclass
class SearchResult:
    query: str
    scope: str
    results: dict[str, list[dict[str, Any]]]
    failed_categories: list[str] = field(default_factory=list)

    @property
    def total_results(self) -> int:
        return sum(len(items) for items in self.results.values())


def serialize_user(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": user.role,
        "skills": list(user.skills or []),
        "bio": user.bio,
        "position": user.position,
        "university": user.university,
        "location": user.location,
    }


def serialize_company(company: CompanyProfile) -> dict[str, Any]:
    return {
        "id": company.id,
        "employer_id": company.employer_id,
        "name": company.name,
        "description": company.description,
        "industry": company.industry,
        "size": company.size,
        "headquarters": company.headquarters,
        "website": company.website,
        "logo": company.logo,
        "technologies": list(company.technologies or []),
        "locations": list(company.locations or []),
    }


def serialize_program(program: MentorshipProgram) -> dict[str, Any]:
    return {
        "id": program.id,
        "alumni_id": program.alumni_id,
        "title": program.title,
        "description": program.description,
        "topics": list(program.topics or []),
        "cost": float(program.cost or 0.0),
        "max_students": int(program.max_students),
    }


def search_users(db: Session, role: str, text: str, limit: int) -> list[User]:
    return (
        db.query(User)
        .filter(User.role == role)
        .filter(User.is_active.is_(True))
        .filter(
            ilike_any(
                [User.first_name, User.last_name, User.email, User.bio, User.position, User.university],
                text,
            )
        )
        .order_by(User.id)
        .limit(limit)
        .all()
    )


def search_company_profiles(db: Session, text: str, limit: int) -> list[CompanyProfile]:
    return (
        db.query(CompanyProfile)
        .filter(CompanyProfile.is_active.is_(True))
        .filter(ilike_any([CompanyProfile.name, CompanyProfile.description, CompanyProfile.industry], text))
        .order_by(CompanyProfile.id)
        .limit(limit)
        .all()
    )


def search_programs(db: Session, text: str, limit: int) -> list[MentorshipProgram]:
    return (
        db.query(MentorshipProgram)
        .filter(MentorshipProgram.is_active.is_(True))
        .filter(ilike_any([MentorshipProgram.title, MentorshipProgram.description], text))
        .order_by(MentorshipProgram.id)
        .limit(limit)
        .all()
    )


def default_searchers(session_factory: sessionmaker = SessionLocal) -> dict[str, CategorySearcher]:
    """One searcher per category, each opening its own session so they can run in parallel."""

    def users_of(role: str) -> CategorySearcher:
        def run(text: str, limit: int) -> list[dict[str, Any]]:
            with session_factory() as db:
                return [serialize_user(u) for u in search_users(db, role, text, limit)]

        return run

    def companies(text: str, limit: int) -> list[dict[str, Any]]:
        with session_factory() as db:
            return [serialize_company(c) for c in search_company_profiles(db, text, limit)]

    def programs(text: str, limit: int) -> list[dict[str, Any]]:
        with session_factory() as db:
            return [serialize_program(p) for p in search_programs(db, text, limit)]

    searchers: dict[str, CategorySearcher] = {cat: users_of(role) for cat, role in USER_CATEGORIES.items()}
    searchers["companies"] = companies
    searchers["programs"] = programs
    return searchers


def categories_for_scope(scope: str) -> tuple[str, ...]:
    if scope == "all":
        return CATEGORIES
    if scope == "users":
        return tuple(USER_CATEGORIES)
    return (scope,)


def search(
    query_text: str | None,
    scope: str = "all",
    limit: int | None = None,
    *,
    searchers: Mapping[str, CategorySearcher] | None = None,
) -> SearchResult:
    text = (query_text or "").strip()
    if not text:
        raise ValidationError("Search query is required")
    if scope not in SCOPES:
        raise ValidationError(f"Invalid search type. Must be one of: {', '.join(SCOPES)}")
    limit = settings.search_default_limit if limit is None else int(limit)
    if limit < 1:
        raise ValidationError("limit must be a positive integer")

    selected = categories_for_scope(scope)
    searchers = searchers if searchers is not None else default_searchers()
    results: dict[str, list[dict[str, Any]]] = {cat: [] for cat in CATEGORIES}
    failed: list[str] = []

    workers = max(1, min(len(selected), settings.search_max_workers))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="search") as pool:
        futures = [(cat, pool.submit(searchers[cat], text, limit)) for cat in selected]
        for cat, future in futures:
            try:
                results[cat] = list(future.result() or [])[:limit]
            except Exception:  # noqa: BLE001 - one category failing must not fail the search
                logger.warning("search.category_failed category=%s query=%r", cat, text, exc_info=True)
                failed.append(cat)

    return SearchResult(query=text, scope=scope, results=results, failed_categories=failed)


def search_users_by_role(
    db: Session,
    role: str,
    *,
    query: str | None = None,
    location: str | None = None,
    university: str | None = None,
    skills: list[str] | None = None,
    page: int = 1,
    limit: int = 20,
) -> Page:
    if role not in SEARCHABLE_ROLES:
        raise ValidationError("Invalid role. Must be student, alumni, or employer")

    q = db.query(User).filter(User.role == role).filter(User.is_active.is_(True))
    if query and query.strip():
        q = q.filter(ilike_any([User.first_name, User.last_name, User.bio, User.position], query.strip()))
    if location and location.strip():
        q = q.filter(User.location.ilike(contains_pattern(location.strip()), escape="\\"))
    if university and university.strip():
        q = q.filter(User.university.ilike(contains_pattern(university.strip()), escape="\\"))

    q = q.order_by(User.created_at.desc(), User.id.desc())

    # Skills live in a JSON list; every requested skill must be one of the items
    # (case-insensitive). Stored items are trimmed on write, so the serialized list can
    # be matched in SQL; skills it cannot express fall back to filtering loaded rows.
    wanted = build_skill_set(skills)
    clauses = [json_list_clause(User.skills, skill, whole_item=True) for skill in sorted(wanted)]
    if all(c is not None for c in clauses):
        q = q.filter(*clauses)
        total = q.count()
        items = q.offset((page - 1) * limit).limit(limit).all()
        return Page(items=items, total=total, page=page, limit=limit)

    users = [u for u in q.all() if wanted <= build_skill_set(u.skills)]
    start = (page - 1) * limit
    return Page(items=users[start : start + limit], total=len(users), page=page, limit=limit)


def search_companies(
    db: Session,
    *,
    query: str | None = None,
    industry: str | None = None,
    size: str | None = None,
    location: str | None = None,
    page: int = 1,
    limit: int = 20,
) -> Page:
    q = db.query(CompanyProfile).filter(CompanyProfile.is_active.is_(True))
    if query and query.strip():
        q = q.filter(
            ilike_any([CompanyProfile.name, CompanyProfile.description, CompanyProfile.industry], query.strip())
        )
    if industry and industry.strip():
        q = q.filter(CompanyProfile.industry.ilike(contains_pattern(industry.strip()), escape="\\"))
    if size:
        q = q.filter(CompanyProfile.size == size)
    if location and location.strip():
        q = q.filter(CompanyProfile.headquarters.ilike(contains_pattern(location.strip()), escape="\\"))

    total = q.count()
    items = (
        q.order_by(CompanyProfile.created_at.desc(), CompanyProfile.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return Page(items=items, total=total, page=page, limit=limit)
